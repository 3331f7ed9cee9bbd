"""
Async wrapper around ``gradio_client`` for calling Hugging Face Spaces.

``gradio_client`` is synchronous, so every connect and predict runs in a
worker thread and the event loop keeps serving other requests. Image
arguments travel as ``ImageBlob`` values; they are written to a scratch
directory and handed to the library with ``handle_file`` for upload.
"""

import asyncio
import os
import tempfile
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlsplit

import httpx
from gradio_client import Client, handle_file
from gradio_client.exceptions import AppError

from tryon_gateway.config import HUGGINGFACE_API_KEY, INVOKE_TIMEOUT_SECONDS, logger
from tryon_gateway.core.errors import BackendInvocationError, BackendUnavailableError

ClientFactory = Callable[..., Client]


@dataclass(slots=True)
class ImageBlob:
    """Binary image parameter; uploaded to the Space before the call."""

    data: bytes
    filename: str = "image.png"

    def __repr__(self) -> str:
        return f"ImageBlob(filename={self.filename!r}, size={len(self.data)})"


@dataclass(slots=True)
class SpaceConnection:
    target: str
    src: Optional[str] = None
    version: Optional[str] = None


@dataclass(slots=True)
class GradioResponse:
    """Outputs of a completed Gradio call, one entry per output component."""

    data: List[Any] = field(default_factory=list)
    api_name: str = ""


def is_huggingface_host(url: str) -> bool:
    host = (urlsplit(url).hostname or "").lower()
    return host == "huggingface.co" or host.endswith((".hf.space", ".huggingface.co"))


def _collect_blobs(value: Any, found: List[ImageBlob]) -> None:
    if isinstance(value, ImageBlob):
        found.append(value)
    elif isinstance(value, dict):
        for item in value.values():
            _collect_blobs(item, found)
    elif isinstance(value, (list, tuple)):
        for item in value:
            _collect_blobs(item, found)


def _substitute_blobs(value: Any, staged: Dict[int, Any]) -> Any:
    if isinstance(value, ImageBlob):
        return staged[id(value)]
    if isinstance(value, dict):
        return {key: _substitute_blobs(item, staged) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_substitute_blobs(item, staged) for item in value]
    return value


def stage_blobs(data: List[Any], directory: str) -> List[Any]:
    """Write every ``ImageBlob`` in ``data`` to ``directory`` and wrap it with ``handle_file``."""

    blobs: List[ImageBlob] = []
    _collect_blobs(data, blobs)

    staged: Dict[int, Any] = {}
    for index, blob in enumerate(blobs):
        path = os.path.join(directory, f"{index}-{os.path.basename(blob.filename)}")
        with open(path, "wb") as handle:
            handle.write(blob.data)
        staged[id(blob)] = handle_file(path)
    return _substitute_blobs(list(data), staged)


def _as_output_list(result: Any) -> List[Any]:
    # Multi-output endpoints come back as a tuple
    if isinstance(result, tuple):
        return list(result)
    return [result]


class GradioSpaceClient:
    """Shared by all adapters; opens a fresh ``gradio_client.Client`` per call."""

    def __init__(
        self,
        hf_token: Optional[str] = HUGGINGFACE_API_KEY,
        timeout: float = INVOKE_TIMEOUT_SECONDS,
        client_factory: ClientFactory = Client,
    ) -> None:
        self._hf_token = hf_token
        self._timeout = timeout
        self._client_factory = client_factory

    def auth_headers(self, url: str) -> Dict[str, str]:
        """Bearer header for Hugging Face hosts only; other hosts never see the token."""
        if self._hf_token and is_huggingface_host(url):
            return {"Authorization": f"Bearer {self._hf_token}"}
        return {}

    def _open(self, target: str) -> Client:
        try:
            # download_files=False keeps outputs as FileData dicts carrying a url
            return self._client_factory(
                target,
                hf_token=self._hf_token,
                verbose=False,
                download_files=False,
                httpx_kwargs={"timeout": self._timeout},
            )
        except Exception as exc:
            status_code = (
                exc.response.status_code if isinstance(exc, httpx.HTTPStatusError) else None
            )
            raise BackendUnavailableError(
                f"Could not connect to {target}: {exc}", status_code=status_code
            ) from exc

    def _connect_sync(self, target: str) -> SpaceConnection:
        client = self._open(target)
        config = getattr(client, "config", None) or {}
        return SpaceConnection(
            target=target,
            src=getattr(client, "src", None),
            version=config.get("version"),
        )

    def _predict_sync(self, target: str, api_name: str, data: List[Any]) -> GradioResponse:
        client = self._open(target)
        with tempfile.TemporaryDirectory(prefix="tryon-") as directory:
            args = stage_blobs(data, directory)
            try:
                result = client.predict(*args, api_name=api_name)
            except AppError as exc:
                raise BackendInvocationError(
                    f"{api_name} failed on the remote Space: {exc}"
                ) from exc
            except Exception as exc:
                # Anything raised while talking to the Space is a remote failure,
                # including non-JSON bodies from a building or proxied Space
                raise BackendInvocationError(
                    f"Error calling {target}{api_name}: {exc}"
                ) from exc
        return GradioResponse(data=_as_output_list(result), api_name=api_name)

    async def connect(self, target: str) -> SpaceConnection:
        """Open a bare connection to the Space without running inference."""

        connection = await asyncio.to_thread(self._connect_sync, target)
        logger.info(f"Connected to {target} (gradio {connection.version or 'unknown'})")
        return connection

    async def predict(self, target: str, api_name: str, data: List[Any]) -> GradioResponse:
        """Run ``api_name`` on the Space with positional ``data``."""

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._predict_sync, target, api_name, data),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise BackendInvocationError(
                f"{target}{api_name} timed out after {self._timeout:.0f}s"
            ) from exc


__all__ = [
    "GradioSpaceClient",
    "GradioResponse",
    "ImageBlob",
    "SpaceConnection",
    "is_huggingface_host",
    "stage_blobs",
]
