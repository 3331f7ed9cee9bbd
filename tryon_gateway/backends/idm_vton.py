"""IDM-VTON Space adapter (``yisol/IDM-VTON``)."""

from tryon_gateway.backends.base import BackendAdapter, BackendDescriptor, GradioPayload
from tryon_gateway.config import DEFAULT_GARMENT_DESCRIPTION
from tryon_gateway.core.space_client import ImageBlob
from tryon_gateway.models import GarmentCategory, TryOnRequest

IDM_VTON_DESCRIPTOR = BackendDescriptor(
    id="IDM-VTON",
    connection_target="yisol/IDM-VTON",
    endpoints_by_category={
        GarmentCategory.UPPER_BODY: "/tryon",
        GarmentCategory.LOWER_BODY: "/tryon",
        GarmentCategory.DRESS: "/tryon",
    },
    display_name="IDM-VTON",
)

AUTO_MASK = True
AUTO_CROP = False
DENOISE_STEPS = 30
SEED = 42


class IDMVTONAdapter(BackendAdapter):
    """
    Description-conditioned backend with a single ``/tryon`` operation.

    Signature: (image editor dict, garment, description, auto-mask, auto-crop,
    denoise steps, seed). The person photo travels as the editor background.
    """

    def build_request(
        self, request: TryOnRequest, person_bytes: bytes, garment_bytes: bytes
    ) -> GradioPayload:
        image_editor = {
            "background": ImageBlob(person_bytes, "person.png"),
            "layers": [],
            "composite": None,
        }
        return GradioPayload(
            api_name=self.descriptor.endpoint_for(request.category),
            data=[
                image_editor,
                ImageBlob(garment_bytes, "garment.png"),
                request.garment_description or DEFAULT_GARMENT_DESCRIPTION,
                AUTO_MASK,
                AUTO_CROP,
                DENOISE_STEPS,
                SEED,
            ],
        )
