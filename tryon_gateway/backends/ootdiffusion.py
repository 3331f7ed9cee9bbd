"""OOTDiffusion Space adapter (``levihsu/OOTDiffusion``)."""

from tryon_gateway.backends.base import BackendAdapter, BackendDescriptor, GradioPayload
from tryon_gateway.core.space_client import ImageBlob
from tryon_gateway.models import GarmentCategory, TryOnRequest

OOTDIFFUSION_DESCRIPTOR = BackendDescriptor(
    id="OOTDiffusion",
    connection_target="levihsu/OOTDiffusion",
    endpoints_by_category={
        GarmentCategory.UPPER_BODY: "/process_hd",
        GarmentCategory.LOWER_BODY: "/process_dc",
        GarmentCategory.DRESS: "/process_dc",
    },
    display_name="OOTDiffusion",
)

# OOTDiffusion's own category vocabulary for the full-body model
OOTD_CATEGORIES = {
    GarmentCategory.UPPER_BODY: "Upper-body",
    GarmentCategory.LOWER_BODY: "Lower-body",
    GarmentCategory.DRESS: "Dress",
}

N_SAMPLES = 1
N_STEPS = 20
IMAGE_SCALE = 2
SEED = -1  # random


class OOTDiffusionAdapter(BackendAdapter):
    """
    Half-body model (``/process_hd``) for tops, full-body model
    (``/process_dc``) for everything else. Only the latter takes a category.
    """

    def build_request(
        self, request: TryOnRequest, person_bytes: bytes, garment_bytes: bytes
    ) -> GradioPayload:
        api_name = self.descriptor.endpoint_for(request.category)
        data = [
            ImageBlob(person_bytes, "vton.png"),
            ImageBlob(garment_bytes, "garment.png"),
        ]
        if api_name == "/process_dc":
            data.append(OOTD_CATEGORIES[request.category])
        data.extend([N_SAMPLES, N_STEPS, IMAGE_SCALE, SEED])
        return GradioPayload(api_name=api_name, data=data)
