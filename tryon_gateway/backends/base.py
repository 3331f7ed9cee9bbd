"""Backend adapter interface and output normalization."""

from __future__ import annotations

import abc
import json
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from tryon_gateway.config import logger
from tryon_gateway.core.errors import FetchError, UnexpectedOutputFormatError
from tryon_gateway.core.image_fetcher import decode_data_uri
from tryon_gateway.core.space_client import (
    GradioResponse,
    GradioSpaceClient,
    SpaceConnection,
)
from tryon_gateway.models import GarmentCategory, TryOnRequest


@dataclass(frozen=True, slots=True)
class BackendDescriptor:
    """Static metadata for one remote inference backend."""

    id: str
    connection_target: str
    endpoints_by_category: Mapping[GarmentCategory, str]
    display_name: str = ""

    def endpoint_for(self, category: GarmentCategory) -> str:
        try:
            return self.endpoints_by_category[category]
        except KeyError:
            raise ValueError(
                f"Backend {self.id} has no operation for category {category.value}"
            ) from None


@dataclass(slots=True)
class GradioPayload:
    """Backend-specific request: API name plus positional arguments."""

    api_name: str
    data: List[Any] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class InlineImage:
    data: bytes


@dataclass(frozen=True, slots=True)
class RemoteImage:
    url: str


@dataclass(frozen=True, slots=True)
class GalleryImage:
    items: Tuple[Union[InlineImage, RemoteImage], ...]

    @property
    def first(self) -> Union[InlineImage, RemoteImage]:
        return self.items[0]


OutputRef = Union[InlineImage, RemoteImage, GalleryImage]
OutputMatcher = Callable[[Any], Optional[OutputRef]]


def _url_of(value: Any) -> Optional[str]:
    if isinstance(value, Mapping):
        url = value.get("url")
        if isinstance(url, str) and url:
            return url
    return None


def _inline_of(value: Any) -> Optional[InlineImage]:
    if isinstance(value, (bytes, bytearray)) and value:
        return InlineImage(bytes(value))
    if isinstance(value, str) and value.startswith("data:image"):
        try:
            data = decode_data_uri(value)
        except FetchError:
            return None
        return InlineImage(data) if data else None
    return None


def _gallery_item(entry: Any) -> Optional[Union[InlineImage, RemoteImage]]:
    image = entry.get("image", entry) if isinstance(entry, Mapping) else entry
    url = _url_of(image)
    if url:
        return RemoteImage(url)
    return _inline_of(image)


def match_direct_url(output: Any) -> Optional[OutputRef]:
    """``{"url": ...}`` on the first output."""

    url = _url_of(output)
    return RemoteImage(url) if url else None


def match_gallery(output: Any) -> Optional[OutputRef]:
    """``[{"image": {"url": ...}, "caption": ...}, ...]`` or ``[{"url": ...}, ...]``."""

    if not isinstance(output, (list, tuple)) or not output:
        return None

    first = _gallery_item(output[0])
    if first is None:
        return None

    rest = [item for item in map(_gallery_item, output[1:]) if item is not None]
    return GalleryImage((first, *rest))


def match_inline(output: Any) -> Optional[OutputRef]:
    """Raw bytes or a base64 ``data:image/...`` URI."""

    return _inline_of(output)


DEFAULT_OUTPUT_MATCHERS: Tuple[OutputMatcher, ...] = (
    match_direct_url,
    match_gallery,
    match_inline,
)


class BackendAdapter(abc.ABC):
    """Translate the uniform request into one backend's Gradio protocol."""

    output_matchers: Sequence[OutputMatcher] = DEFAULT_OUTPUT_MATCHERS

    def __init__(self, descriptor: BackendDescriptor, client: GradioSpaceClient) -> None:
        self.descriptor = descriptor
        self._client = client

    @property
    def id(self) -> str:
        return self.descriptor.id

    @abc.abstractmethod
    def build_request(
        self, request: TryOnRequest, person_bytes: bytes, garment_bytes: bytes
    ) -> GradioPayload:
        """Map the uniform request onto the backend's operation signature."""

    async def invoke(self, connection_target: str, payload: GradioPayload) -> GradioResponse:
        return await self._client.predict(connection_target, payload.api_name, payload.data)

    async def probe(self, connection_target: str) -> SpaceConnection:
        return await self._client.connect(connection_target)

    def download_headers(self, url: str) -> Dict[str, str]:
        """Headers needed to download an output file the Space serves."""
        return self._client.auth_headers(url)

    def extract_output_reference(self, response: GradioResponse) -> OutputRef:
        """
        Locate the output image in a completed response.

        Raises:
            UnexpectedOutputFormatError: when no matcher recognises the output
        """
        output = response.data[0] if response.data else None
        if output is not None:
            for matcher in self.output_matchers:
                ref = matcher(output)
                if ref is not None:
                    logger.debug(f"{self.id} output matched by {matcher.__name__}")
                    return ref

        logger.debug(f"Unmatched {self.id} output: {_preview(response.data)}")
        raise UnexpectedOutputFormatError(
            f"Unexpected output format from {self.id} ({response.api_name or 'unknown api'})"
        )


def _preview(data: Any, limit: int = 200) -> str:
    try:
        text = json.dumps(data, default=repr)
    except (TypeError, ValueError):
        text = repr(data)
    return text[:limit]


__all__ = [
    "BackendAdapter",
    "BackendDescriptor",
    "GradioPayload",
    "InlineImage",
    "RemoteImage",
    "GalleryImage",
    "OutputRef",
    "match_direct_url",
    "match_gallery",
    "match_inline",
    "DEFAULT_OUTPUT_MATCHERS",
]
