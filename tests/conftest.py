import os

# Keep test runs from writing a log file or picking up a developer's .env values
os.environ["LOG_FILE"] = ""
os.environ.pop("HUGGINGFACE_API_KEY", None)

from typing import Callable, Dict, List, Optional, Union  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402

from tryon_gateway.backends import (  # noqa: E402
    IDM_VTON_DESCRIPTOR,
    OOTDIFFUSION_DESCRIPTOR,
    BackendRegistry,
    IDMVTONAdapter,
    OOTDiffusionAdapter,
)
from tryon_gateway.core.space_client import GradioResponse, GradioSpaceClient  # noqa: E402
from tryon_gateway.models import SystemConfig  # noqa: E402

PERSON_PNG = b"\x89PNG\r\n\x1a\nperson-pixels"
GARMENT_PNG = b"\x89PNG\r\n\x1a\ngarment-pixels"
RESULT_PNG = b"\x89PNG\r\n\x1a\nresult-pixels"


class FakeConfigStore:
    """In-memory stand-in for the Supabase config store."""

    def __init__(
        self,
        active_backend_id: Optional[str] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.config = (
            SystemConfig(active_backend_id=active_backend_id) if active_backend_id else None
        )
        self.error = error
        self.reads = 0

    async def get_system_config(self) -> Optional[SystemConfig]:
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.config

    async def update_system_config(
        self, active_backend_id: str, updated_by: Optional[str] = None
    ) -> SystemConfig:
        self.config = SystemConfig(active_backend_id=active_backend_id, updated_by=updated_by)
        return self.config


class FakeClock:
    """Deterministic monotonic clock advancing a fixed step per reading."""

    def __init__(self, step: float = 0.25) -> None:
        self.now = 100.0
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


Outcome = Union[GradioResponse, Exception]


class ScriptedAdapterMixin:
    """Replaces the remote call with a scripted sequence of outcomes."""

    outcomes: List[Outcome]

    def script(self, *outcomes: Outcome) -> None:
        self.outcomes = list(outcomes)
        self.calls: List[tuple] = []

    async def invoke(self, connection_target, payload):
        self.calls.append((connection_target, payload))
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class ScriptedIDMVTONAdapter(ScriptedAdapterMixin, IDMVTONAdapter):
    pass


class ScriptedOOTDiffusionAdapter(ScriptedAdapterMixin, OOTDiffusionAdapter):
    pass


class FakeSpaceConnection:
    """What ``FakeSpace`` hands out in place of a connected ``gradio_client.Client``."""

    def __init__(self, space: "FakeSpace", src: str) -> None:
        self.space = space
        self.src = f"https://{src.replace('/', '-').lower()}.hf.space/"
        self.config = {"version": space.version}

    def predict(self, *args, api_name=None):
        # Staged files only exist during the call, so read them back now
        self.space.predictions.append(
            {"api_name": api_name, "args": args, "files": _read_file_args(args)}
        )
        outcomes = self.space.outcomes
        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome):
            return outcome()
        return outcome


class FakeSpace:
    """Client factory standing in for ``gradio_client.Client``."""

    def __init__(self, *outcomes, version: str = "5.0.0", offline=()) -> None:
        self.outcomes = list(outcomes)
        self.version = version
        self.offline = set(offline)
        self.connections: List[tuple] = []
        self.predictions: List[dict] = []

    def __call__(self, src: str, **kwargs) -> FakeSpaceConnection:
        self.connections.append((src, kwargs))
        if src in self.offline:
            raise ConnectionError(f"Could not fetch config for {src}")
        return FakeSpaceConnection(self, src)


def _read_file_args(value) -> List[bytes]:
    if isinstance(value, dict):
        if value.get("meta", {}).get("_type") == "gradio.FileData":
            with open(value["path"], "rb") as handle:
                return [handle.read()]
        value = list(value.values())
    if isinstance(value, (list, tuple)):
        return [data for item in value for data in _read_file_args(item)]
    return []


def mock_transport(routes: Dict[str, Union[httpx.Response, Callable]]) -> httpx.MockTransport:
    """Serve fixed responses by URL; anything else is a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        route = routes.get(str(request.url))
        if route is None:
            return httpx.Response(404)
        if callable(route):
            return route(request)
        return route

    return httpx.MockTransport(handler)


ALL_SPACES = (IDM_VTON_DESCRIPTOR.connection_target, OOTDIFFUSION_DESCRIPTOR.connection_target)


@pytest.fixture
def space_client() -> GradioSpaceClient:
    """Client whose Spaces are all unreachable; nothing leaves the process."""
    return GradioSpaceClient(hf_token=None, client_factory=FakeSpace(offline=ALL_SPACES))


@pytest.fixture
def scripted_registry(space_client) -> BackendRegistry:
    return BackendRegistry(
        [
            ScriptedIDMVTONAdapter(IDM_VTON_DESCRIPTOR, space_client),
            ScriptedOOTDiffusionAdapter(OOTDIFFUSION_DESCRIPTOR, space_client),
        ]
    )
