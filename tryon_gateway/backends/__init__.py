"""Backend adapters for the remote try-on Spaces."""

from typing import Optional

from tryon_gateway.core.space_client import GradioSpaceClient

from .base import BackendAdapter, BackendDescriptor, GradioPayload
from .idm_vton import IDM_VTON_DESCRIPTOR, IDMVTONAdapter
from .ootdiffusion import OOTDIFFUSION_DESCRIPTOR, OOTDiffusionAdapter
from .registry import BackendRegistry

DEFAULT_BACKEND_ID = IDM_VTON_DESCRIPTOR.id


def build_default_registry(client: Optional[GradioSpaceClient] = None) -> BackendRegistry:
    """Registry with every supported backend; IDM-VTON first, so it is the default."""

    client = client or GradioSpaceClient()
    return BackendRegistry(
        [
            IDMVTONAdapter(IDM_VTON_DESCRIPTOR, client),
            OOTDiffusionAdapter(OOTDIFFUSION_DESCRIPTOR, client),
        ]
    )


__all__ = [
    "BackendAdapter",
    "BackendDescriptor",
    "BackendRegistry",
    "GradioPayload",
    "IDMVTONAdapter",
    "OOTDiffusionAdapter",
    "IDM_VTON_DESCRIPTOR",
    "OOTDIFFUSION_DESCRIPTOR",
    "DEFAULT_BACKEND_ID",
    "build_default_registry",
]
