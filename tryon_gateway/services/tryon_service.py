"""Orchestration of a single try-on request across the remote backends."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from tryon_gateway.backends import BackendAdapter, GradioPayload
from tryon_gateway.backends.base import GalleryImage, InlineImage, OutputRef
from tryon_gateway.config import (
    MAX_CONCURRENT_CALLS_PER_BACKEND,
    TRYON_MAX_RETRIES,
    TRYON_RETRY_DELAY_SECONDS,
    logger,
)
from tryon_gateway.core.config_resolver import ConfigResolver
from tryon_gateway.core.errors import (
    ErrorKind,
    FetchError,
    InputFetchError,
    OutputFetchError,
    TryOnGatewayError,
)
from tryon_gateway.core.image_fetcher import ImageFetcher
from tryon_gateway.core.retry import with_retry
from tryon_gateway.core.space_client import GradioResponse
from tryon_gateway.models import BackendStatus, TryOnRequest, TryOnResult


def _log(level: int, message: str, **context: Any) -> None:
    """Helper to emit structured logs with contextual metadata."""
    logger.log(level, "%s | context=%s", message, context)


@dataclass(slots=True)
class BackendInvocationAttempt:
    """One call to the remote backend inside the retry loop."""

    payload: GradioPayload
    attempt: int
    response: Optional[GradioResponse] = None


class TryOnGateway:
    """
    Entry point of the gateway: resolves the active backend, adapts the
    request, runs it with retries and normalizes the outcome. Failures are
    returned as ``TryOnResult`` values and never raised.
    """

    def __init__(
        self,
        resolver: ConfigResolver,
        fetcher: Optional[ImageFetcher] = None,
        *,
        max_attempts: int = TRYON_MAX_RETRIES,
        retry_delay: float = TRYON_RETRY_DELAY_SECONDS,
        max_concurrent_calls: int = MAX_CONCURRENT_CALLS_PER_BACKEND,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._resolver = resolver
        self._fetcher = fetcher or ImageFetcher()
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay
        self._max_concurrent_calls = max_concurrent_calls
        self._clock = clock
        self._slots: Dict[str, asyncio.Semaphore] = {}

    def _elapsed_ms(self, start: float) -> int:
        return max(0, int((self._clock() - start) * 1000))

    def _slot(self, backend_id: str) -> asyncio.Semaphore:
        slot = self._slots.get(backend_id)
        if slot is None:
            slot = asyncio.Semaphore(self._max_concurrent_calls)
            self._slots[backend_id] = slot
        return slot

    async def perform_tryon(self, request: TryOnRequest) -> TryOnResult:
        start = self._clock()
        adapter: Optional[BackendAdapter] = None
        attempts = 0

        def failure(kind: str, message: str) -> TryOnResult:
            result = TryOnResult.failed(
                error_kind=kind,
                error=message,
                processing_time_ms=self._elapsed_ms(start),
                backend_id=adapter.id if adapter else None,
                attempts=attempts,
            )
            _log(
                logging.WARNING,
                "tryon_failed",
                backend=result.backend_id,
                error_kind=kind,
                error=message,
                attempts=attempts,
                processing_time_ms=result.processing_time_ms,
            )
            return result

        try:
            adapter = await self._resolver.resolve_active_adapter()
            descriptor = adapter.descriptor
            _log(
                logging.INFO,
                "tryon_started",
                backend=descriptor.id,
                category=request.category.value,
            )

            person_bytes, garment_bytes = await self._fetch_inputs(request)
            payload = adapter.build_request(request, person_bytes, garment_bytes)
            _log(
                logging.DEBUG,
                "request_built",
                backend=descriptor.id,
                api_name=payload.api_name,
                description=request.garment_description,
            )

            async def invoke_once(attempt: int) -> BackendInvocationAttempt:
                nonlocal attempts
                attempts = attempt
                record = BackendInvocationAttempt(payload=payload, attempt=attempt)
                _log(
                    logging.INFO,
                    "invocation_attempt_started",
                    backend=descriptor.id,
                    api_name=payload.api_name,
                    attempt=attempt,
                )
                async with self._slot(descriptor.id):
                    record.response = await adapter.invoke(
                        descriptor.connection_target, payload
                    )
                return record

            completed = await with_retry(
                invoke_once,
                max_attempts=self._max_attempts,
                delay=self._retry_delay,
            )

            output_ref = adapter.extract_output_reference(completed.response)
            image_bytes = await self._resolve_output(adapter, output_ref)
            result = TryOnResult.succeeded(
                image_bytes=image_bytes,
                processing_time_ms=self._elapsed_ms(start),
                backend_id=adapter.id,
                attempts=attempts,
            )

        except asyncio.CancelledError:
            return failure(ErrorKind.CANCELLED.value, "Try-on request was cancelled")
        except TryOnGatewayError as exc:
            return failure(exc.kind.value, exc.message)
        except Exception as exc:
            logger.error("Unexpected error during try-on", exc_info=True)
            return failure(ErrorKind.INTERNAL.value, f"Try-on processing failed: {exc}")

        _log(
            logging.INFO,
            "tryon_completed",
            backend=adapter.id,
            attempts=attempts,
            size=len(image_bytes),
            processing_time_ms=result.processing_time_ms,
        )
        return result

    async def _fetch_inputs(self, request: TryOnRequest) -> tuple[bytes, bytes]:
        try:
            person_bytes = await self._fetcher.fetch(request.person_image_url)
            garment_bytes = await self._fetcher.fetch(request.garment_image_url)
        except FetchError as exc:
            raise InputFetchError(exc.message, url=exc.url, status_code=exc.status_code) from exc
        return person_bytes, garment_bytes

    async def _resolve_output(self, adapter: BackendAdapter, ref: OutputRef) -> bytes:
        if isinstance(ref, GalleryImage):
            ref = ref.first
        if isinstance(ref, InlineImage):
            return ref.data

        # Inference already succeeded; a failed download is not retried.
        # Private Spaces serve their output files behind the same token.
        try:
            return await self._fetcher.fetch(ref.url, headers=adapter.download_headers(ref.url))
        except FetchError as exc:
            raise OutputFetchError(exc.message, url=exc.url, status_code=exc.status_code) from exc

    async def check_backend_status(self) -> BackendStatus:
        """Connect to the active backend without invoking it. Never raises."""

        adapter: Optional[BackendAdapter] = None
        try:
            adapter = await self._resolver.resolve_active_adapter()
            await adapter.probe(adapter.descriptor.connection_target)
        except Exception as exc:
            _log(
                logging.WARNING,
                "backend_status_unavailable",
                backend=adapter.id if adapter else None,
                error=str(exc),
            )
            return BackendStatus(
                available=False,
                detail=str(exc),
                backend_id=adapter.id if adapter else None,
            )

        return BackendStatus(
            available=True,
            detail=f"Connected to {adapter.id}",
            backend_id=adapter.id,
        )
