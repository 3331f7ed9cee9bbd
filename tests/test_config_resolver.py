import asyncio

from conftest import FakeConfigStore
from tryon_gateway.backends import build_default_registry
from tryon_gateway.core.config_resolver import ConfigResolver
from tryon_gateway.core.errors import ConfigUnavailableError


def resolve(store, space_client):
    resolver = ConfigResolver(store, build_default_registry(space_client))
    return asyncio.run(resolver.resolve_active_backend())


def test_missing_record_falls_back_to_default(space_client) -> None:
    descriptor = resolve(FakeConfigStore(), space_client)

    assert descriptor.id == "IDM-VTON"


def test_stored_selection_is_used(space_client) -> None:
    descriptor = resolve(FakeConfigStore("OOTDiffusion"), space_client)

    assert descriptor.id == "OOTDiffusion"
    assert descriptor.connection_target == "levihsu/OOTDiffusion"


def test_unknown_selection_falls_back_to_default(space_client) -> None:
    descriptor = resolve(FakeConfigStore("StableVITON"), space_client)

    assert descriptor.id == "IDM-VTON"


def test_unreadable_store_falls_back_to_default(space_client) -> None:
    store = FakeConfigStore(error=ConfigUnavailableError("supabase down"))

    descriptor = resolve(store, space_client)

    assert descriptor.id == "IDM-VTON"
    assert store.reads == 1


def test_reads_store_on_every_call(space_client) -> None:
    store = FakeConfigStore("OOTDiffusion")
    resolver = ConfigResolver(store, build_default_registry(space_client))

    async def scenario():
        first = await resolver.resolve_active_backend()
        store.config = None
        second = await resolver.resolve_active_backend()
        return first, second

    first, second = asyncio.run(scenario())

    assert (first.id, second.id) == ("OOTDiffusion", "IDM-VTON")
    assert store.reads == 2
