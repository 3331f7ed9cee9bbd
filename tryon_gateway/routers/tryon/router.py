"""FastAPI router for virtual try-on endpoints."""

import base64

from fastapi import APIRouter, Depends, Response

from tryon_gateway.config import logger
from tryon_gateway.core.errors import ErrorKind
from tryon_gateway.models import TryOnRequest
from tryon_gateway.services.tryon_service import TryOnGateway

from .dependencies import get_gateway
from .models import BackendStatusResponse, TryOnApiRequest, TryOnApiResponse

router = APIRouter(prefix="/api/v1", tags=["Virtual Try-On"])

# Backend failures map to 502; bad inputs are the caller's fault
_STATUS_BY_ERROR_KIND = {
    ErrorKind.INPUT_FETCH.value: 400,
    ErrorKind.CANCELLED.value: 499,
    ErrorKind.INTERNAL.value: 500,
}


@router.post("/tryon", response_model=TryOnApiResponse)
async def create_virtual_tryon(
    payload: TryOnApiRequest,
    response: Response,
    gateway: TryOnGateway = Depends(get_gateway),
) -> TryOnApiResponse:
    """Run a try-on on the active backend and return the canonical result."""

    logger.info(
        "Virtual try-on request received",
        extra={"category": payload.category.value},
    )

    result = await gateway.perform_tryon(
        TryOnRequest(
            person_image_url=str(payload.person_image_url),
            garment_image_url=str(payload.garment_image_url),
            garment_description=payload.garment_description,
            category=payload.category,
        )
    )

    if not result.success:
        response.status_code = _STATUS_BY_ERROR_KIND.get(result.error_kind, 502)
        return TryOnApiResponse(
            success=False,
            processing_time_ms=result.processing_time_ms,
            backend_id=result.backend_id,
            error_kind=result.error_kind,
            error=result.error,
        )

    return TryOnApiResponse(
        success=True,
        processing_time_ms=result.processing_time_ms,
        backend_id=result.backend_id,
        image_base64=base64.b64encode(result.image_bytes).decode("ascii"),
    )


@router.get("/tryon/status", response_model=BackendStatusResponse)
async def get_backend_status(
    gateway: TryOnGateway = Depends(get_gateway),
) -> BackendStatusResponse:
    """Report whether the active backend accepts connections."""

    status = await gateway.check_backend_status()
    return BackendStatusResponse(
        available=status.available,
        detail=status.detail,
        backend_id=status.backend_id,
    )


@router.get("/health")
async def health_check() -> dict:
    """Simple health check endpoint."""

    return {
        "status": "healthy",
        "service": "tryon-gateway",
        "version": "1.0.0",
    }
