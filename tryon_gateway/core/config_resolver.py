"""Resolve the active backend from the shared configuration store."""

from typing import Optional, Protocol

from tryon_gateway.backends.base import BackendAdapter, BackendDescriptor
from tryon_gateway.backends.registry import BackendRegistry
from tryon_gateway.config import logger
from tryon_gateway.models import SystemConfig


class ConfigProvider(Protocol):
    async def get_system_config(self) -> Optional[SystemConfig]: ...


class ConfigResolver:
    """
    Reads the configuration on every call; the selection may change between
    requests. A missing, unknown or unreadable selection falls back to the
    registry default instead of failing.
    """

    def __init__(self, provider: ConfigProvider, registry: BackendRegistry) -> None:
        self._provider = provider
        self._registry = registry

    async def resolve_active_adapter(self) -> BackendAdapter:
        default = self._registry.default

        try:
            config = await self._provider.get_system_config()
        except Exception as exc:
            logger.warning(f"Config store unavailable, using {default.id}: {exc}")
            return default

        if config is None:
            logger.debug(f"No system config found, using {default.id}")
            return default

        adapter = self._registry.get(config.active_backend_id)
        if adapter is None:
            logger.warning(
                f"Unknown backend {config.active_backend_id!r} in system config, "
                f"using {default.id}"
            )
            return default

        return adapter

    async def resolve_active_backend(self) -> BackendDescriptor:
        """Return the active ``BackendDescriptor``."""

        adapter = await self.resolve_active_adapter()
        return adapter.descriptor
