"""Download image bytes referenced by URL."""

import base64
import binascii
from typing import Dict, Optional

import httpx

from tryon_gateway.config import FETCH_TIMEOUT_SECONDS, logger
from tryon_gateway.core.errors import FetchError


def _is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


def decode_data_uri(reference: str) -> bytes:
    """Return the raw bytes carried by a base64 ``data:`` URI."""

    try:
        header, encoded = reference.split(",", 1)
    except ValueError as exc:
        raise FetchError("Invalid data URI provided for image") from exc

    if ";base64" not in header:
        raise FetchError("Only base64 data URIs are supported")

    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise FetchError("Data URI does not contain valid base64") from exc


class ImageFetcher:
    """Stateless image downloader. Never retries on its own."""

    def __init__(
        self,
        timeout: float = FETCH_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> bytes:
        """
        Fetch the image behind ``url``, sending ``headers`` with the request.

        Raises:
            FetchError: non-2xx response, network failure, timeout or empty body
        """
        if url.startswith("data:"):
            logger.debug("Decoding inline data URI image")
            return decode_data_uri(url)

        if not _is_url(url):
            raise FetchError(f"Unsupported image reference: {url[:80]}", url=url)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                f"Failed to fetch image from {url}: HTTP {exc.response.status_code}",
                url=url,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.TimeoutException as exc:
            raise FetchError(f"Timed out fetching {url}", url=url) from exc
        except httpx.RequestError as exc:
            raise FetchError(f"Network error fetching {url}: {exc}", url=url) from exc

        if not response.content:
            raise FetchError(f"Empty response body from {url}", url=url)

        logger.debug(f"Fetched {len(response.content)} bytes from {url}")
        return response.content
