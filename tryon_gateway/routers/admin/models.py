"""Pydantic models used by the admin router."""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SystemConfigResponse(BaseModel):
    active_backend_id: str
    is_default: bool = Field(
        ..., description="True when no stored selection applies and the default backend is used"
    )
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


class SystemConfigUpdate(BaseModel):
    active_backend_id: str = Field(..., min_length=1)
    updated_by: Optional[str] = None


class BackendInfo(BaseModel):
    id: str
    display_name: str
    connection_target: str
    endpoints_by_category: Dict[str, str]


class BackendListResponse(BaseModel):
    default_backend_id: str
    backends: List[BackendInfo]
