"""FastAPI dependencies shared across gateway endpoints."""

from functools import lru_cache

from tryon_gateway.backends import BackendRegistry, build_default_registry
from tryon_gateway.config import logger
from tryon_gateway.core.config_resolver import ConfigResolver
from tryon_gateway.core.config_store import SupabaseConfigStore
from tryon_gateway.services.tryon_service import TryOnGateway


@lru_cache(maxsize=1)
def get_registry() -> BackendRegistry:
    registry = build_default_registry()
    logger.info(f"Registered backends: {', '.join(registry.ids())}")
    return registry


@lru_cache(maxsize=1)
def get_config_store() -> SupabaseConfigStore:
    return SupabaseConfigStore()


@lru_cache(maxsize=1)
def get_gateway() -> TryOnGateway:
    """Process-wide gateway; it holds no per-request state."""
    resolver = ConfigResolver(get_config_store(), get_registry())
    return TryOnGateway(resolver)
