"""FastAPI router for switching the active try-on backend."""

from fastapi import APIRouter, Depends, HTTPException

from tryon_gateway.backends import BackendRegistry
from tryon_gateway.config import logger
from tryon_gateway.core.config_store import SupabaseConfigStore
from tryon_gateway.core.errors import ConfigUnavailableError
from tryon_gateway.core.verify_secret import require_admin_secret

from ..tryon.dependencies import get_config_store, get_registry
from .models import (
    BackendInfo,
    BackendListResponse,
    SystemConfigResponse,
    SystemConfigUpdate,
)


router = APIRouter(
    prefix="/api/v1/admin",
    tags=["Administration"],
    dependencies=[Depends(require_admin_secret)],
)


@router.get("/backends", response_model=BackendListResponse)
async def list_backends(
    registry: BackendRegistry = Depends(get_registry),
) -> BackendListResponse:
    """List every registered backend and its category routing."""

    return BackendListResponse(
        default_backend_id=registry.default.id,
        backends=[
            BackendInfo(
                id=descriptor.id,
                display_name=descriptor.display_name or descriptor.id,
                connection_target=descriptor.connection_target,
                endpoints_by_category={
                    category.value: api_name
                    for category, api_name in descriptor.endpoints_by_category.items()
                },
            )
            for descriptor in registry.descriptors()
        ],
    )


@router.get("/config", response_model=SystemConfigResponse)
async def get_system_config(
    store: SupabaseConfigStore = Depends(get_config_store),
    registry: BackendRegistry = Depends(get_registry),
) -> SystemConfigResponse:
    """Return the stored backend selection, or the default when none applies."""

    try:
        stored = await store.get_system_config()
    except ConfigUnavailableError as exc:
        logger.error("Error reading system config", extra={"error": exc.message})
        raise HTTPException(status_code=503, detail=exc.message)

    if stored is None or stored.active_backend_id not in registry:
        return SystemConfigResponse(
            active_backend_id=registry.default.id,
            is_default=True,
        )

    return SystemConfigResponse(
        active_backend_id=stored.active_backend_id,
        is_default=False,
        updated_by=stored.updated_by,
        updated_at=stored.updated_at,
    )


@router.put("/config", response_model=SystemConfigResponse)
async def update_system_config(
    payload: SystemConfigUpdate,
    store: SupabaseConfigStore = Depends(get_config_store),
    registry: BackendRegistry = Depends(get_registry),
) -> SystemConfigResponse:
    """Switch the active backend for all subsequent requests."""

    if payload.active_backend_id not in registry:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Unknown backend {payload.active_backend_id!r}. "
                f"Valid values: {', '.join(registry.ids())}"
            ),
        )

    try:
        updated = await store.update_system_config(
            payload.active_backend_id, updated_by=payload.updated_by
        )
    except ConfigUnavailableError as exc:
        logger.error("Error updating system config", extra={"error": exc.message})
        raise HTTPException(status_code=503, detail=exc.message)

    logger.info(
        "Active backend switched",
        extra={"backend": updated.active_backend_id, "updated_by": updated.updated_by},
    )
    return SystemConfigResponse(
        active_backend_id=updated.active_backend_id,
        is_default=False,
        updated_by=updated.updated_by,
        updated_at=updated.updated_at,
    )
