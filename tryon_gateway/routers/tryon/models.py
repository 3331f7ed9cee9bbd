"""Pydantic models used by the try-on router."""

from typing import Optional

from pydantic import BaseModel, Field, HttpUrl

from tryon_gateway.models import GarmentCategory


class TryOnApiRequest(BaseModel):
    """Request payload for a synchronous try-on."""

    person_image_url: HttpUrl
    garment_image_url: HttpUrl
    garment_description: Optional[str] = Field(
        None, description="Free-text garment description for description-conditioned backends"
    )
    category: GarmentCategory


class TryOnApiResponse(BaseModel):
    """Canonical try-on result."""

    success: bool
    processing_time_ms: int
    backend_id: Optional[str] = None
    image_base64: Optional[str] = Field(
        None, description="Base64-encoded result image, present on success"
    )
    error_kind: Optional[str] = None
    error: Optional[str] = None


class BackendStatusResponse(BaseModel):
    available: bool
    detail: str
    backend_id: Optional[str] = None
