"""Domain types shared by the gateway, its backends and the HTTP layer."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class GarmentCategory(str, Enum):
    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    DRESS = "dress"


@dataclass(frozen=True, slots=True)
class TryOnRequest:
    """Uniform try-on request, independent of the backend serving it."""

    person_image_url: str
    garment_image_url: str
    category: GarmentCategory
    garment_description: Optional[str] = None


@dataclass(slots=True)
class TryOnResult:
    """Canonical result returned for every request, success or failure."""

    success: bool
    processing_time_ms: int
    image_bytes: Optional[bytes] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None
    backend_id: Optional[str] = None
    attempts: int = 0

    @classmethod
    def succeeded(
        cls,
        image_bytes: bytes,
        processing_time_ms: int,
        backend_id: Optional[str] = None,
        attempts: int = 0,
    ) -> "TryOnResult":
        if not image_bytes:
            raise ValueError("A successful try-on result requires image bytes")
        return cls(
            success=True,
            processing_time_ms=processing_time_ms,
            image_bytes=image_bytes,
            backend_id=backend_id,
            attempts=attempts,
        )

    @classmethod
    def failed(
        cls,
        error_kind: str,
        error: str,
        processing_time_ms: int,
        backend_id: Optional[str] = None,
        attempts: int = 0,
    ) -> "TryOnResult":
        return cls(
            success=False,
            processing_time_ms=processing_time_ms,
            error_kind=error_kind,
            error=error,
            backend_id=backend_id,
            attempts=attempts,
        )


@dataclass(slots=True)
class SystemConfig:
    """Singleton configuration row owned by the configuration store."""

    active_backend_id: str
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "active_backend_id": self.active_backend_id,
            "updated_by": self.updated_by,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(slots=True)
class BackendStatus:
    available: bool
    detail: str
    backend_id: Optional[str] = None


__all__ = [
    "GarmentCategory",
    "TryOnRequest",
    "TryOnResult",
    "SystemConfig",
    "BackendStatus",
]
