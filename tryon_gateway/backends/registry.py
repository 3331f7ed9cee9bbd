"""Registry of known backend adapters, keyed by descriptor id."""

from typing import Dict, List, Optional

from tryon_gateway.backends.base import BackendAdapter, BackendDescriptor


class BackendRegistry:
    """
    Read-only after start-up. The first registered adapter is the default
    used when the configuration store has no usable selection.
    """

    def __init__(self, adapters: Optional[List[BackendAdapter]] = None) -> None:
        self._adapters: Dict[str, BackendAdapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: BackendAdapter) -> None:
        if adapter.id in self._adapters:
            raise ValueError(f"Backend {adapter.id} is already registered")
        self._adapters[adapter.id] = adapter

    def get(self, backend_id: Optional[str]) -> Optional[BackendAdapter]:
        if not backend_id:
            return None
        return self._adapters.get(backend_id)

    @property
    def default(self) -> BackendAdapter:
        if not self._adapters:
            raise LookupError("No backends registered")
        return next(iter(self._adapters.values()))

    def ids(self) -> List[str]:
        return list(self._adapters)

    def descriptors(self) -> List[BackendDescriptor]:
        return [adapter.descriptor for adapter in self._adapters.values()]

    def __contains__(self, backend_id: object) -> bool:
        return backend_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)
