"""
Error taxonomy for the try-on gateway.

Every error carries a ``kind`` string that ends up verbatim in
``TryOnResult.error_kind`` so callers can tell exhausted transient failures
apart from contract violations.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CONFIG_UNAVAILABLE = "ConfigUnavailable"
    INPUT_FETCH = "InputFetchError"
    BACKEND_UNAVAILABLE = "BackendUnavailableError"
    BACKEND_INVOCATION = "BackendInvocationError"
    UNEXPECTED_OUTPUT_FORMAT = "UnexpectedOutputFormatError"
    OUTPUT_FETCH = "OutputFetchError"
    CANCELLED = "Cancelled"
    INTERNAL = "InternalError"


class TryOnGatewayError(Exception):
    """Base class for every failure raised inside the gateway."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigUnavailableError(TryOnGatewayError):
    """The configuration store could not be read. Never fatal."""

    kind = ErrorKind.CONFIG_UNAVAILABLE


class FetchError(TryOnGatewayError):
    """An image could not be downloaded."""

    kind = ErrorKind.INPUT_FETCH

    def __init__(
        self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.url = url


class InputFetchError(FetchError):
    kind = ErrorKind.INPUT_FETCH


class OutputFetchError(FetchError):
    kind = ErrorKind.OUTPUT_FETCH


class BackendUnavailableError(TryOnGatewayError):
    """The remote Space could not be reached."""

    kind = ErrorKind.BACKEND_UNAVAILABLE


class BackendInvocationError(TryOnGatewayError):
    """The remote call was made but failed."""

    kind = ErrorKind.BACKEND_INVOCATION


class UnexpectedOutputFormatError(TryOnGatewayError):
    """The backend answered with a shape none of the output matchers know."""

    kind = ErrorKind.UNEXPECTED_OUTPUT_FORMAT


TRANSIENT_ERRORS = (BackendUnavailableError, BackendInvocationError)


__all__ = [
    "ErrorKind",
    "TryOnGatewayError",
    "ConfigUnavailableError",
    "FetchError",
    "InputFetchError",
    "OutputFetchError",
    "BackendUnavailableError",
    "BackendInvocationError",
    "UnexpectedOutputFormatError",
    "TRANSIENT_ERRORS",
]
