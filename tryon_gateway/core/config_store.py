"""
Configuration store backed by the Supabase system_config table.
Holds the single row that selects the active try-on backend.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from supabase import Client

from tryon_gateway.config import logger
from tryon_gateway.core.errors import ConfigUnavailableError
from tryon_gateway.db import supabase_create_client
from tryon_gateway.models import SystemConfig

SYSTEM_CONFIG_TABLE = "system_config"
MAIN_CONFIG_KEY = "main_config"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Ignoring unparseable updated_at value: {value!r}")
        return None


def _row_to_config(row: Dict[str, Any]) -> Optional[SystemConfig]:
    active = row.get("active_model")
    if not active:
        return None
    updated_by = row.get("updated_by")
    return SystemConfig(
        active_backend_id=str(active),
        updated_by=str(updated_by) if updated_by else None,
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


class SupabaseConfigStore:
    """Read (and, for the admin endpoints, write) the main_config row."""

    def __init__(
        self,
        client: Optional[Client] = None,
        client_factory: Callable[[], Optional[Client]] = supabase_create_client,
    ) -> None:
        self._client = client
        self._client_factory = client_factory

    def _get_client(self) -> Client:
        """
        Get or create the Supabase client instance.

        Raises:
            ConfigUnavailableError: If the client cannot be created
        """
        if self._client is None:
            self._client = self._client_factory()
            if self._client is None:
                raise ConfigUnavailableError("Supabase is not configured")
        return self._client

    def _select_main_config(self) -> Any:
        client = self._get_client()
        return (
            client.table(SYSTEM_CONFIG_TABLE)
            .select("*")
            .eq("key", MAIN_CONFIG_KEY)
            .limit(1)
            .execute()
        )

    def _upsert_main_config(self, record_data: Dict[str, Any]) -> Any:
        client = self._get_client()
        return (
            client.table(SYSTEM_CONFIG_TABLE)
            .upsert(record_data, on_conflict="key")
            .execute()
        )

    async def get_system_config(self) -> Optional[SystemConfig]:
        """
        Retrieve the active configuration row.

        The supabase client is synchronous, so the query runs in a worker
        thread and concurrent requests are not serialized behind it.

        Returns:
            SystemConfig, or None if the row does not exist

        Raises:
            ConfigUnavailableError: If the database cannot be queried
        """
        try:
            response = await asyncio.to_thread(self._select_main_config)
        except ConfigUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Error retrieving system config: {e}")
            raise ConfigUnavailableError(f"Failed to read system config: {e}") from e

        if response.data and len(response.data) > 0:
            return _row_to_config(response.data[0])

        logger.debug("System config row not found")
        return None

    async def update_system_config(
        self, active_backend_id: str, updated_by: Optional[str] = None
    ) -> SystemConfig:
        """
        Create or replace the active configuration row.

        Raises:
            ConfigUnavailableError: If the database operation fails
        """
        record_data = {
            "key": MAIN_CONFIG_KEY,
            "active_model": active_backend_id,
            "updated_by": updated_by,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        logger.info(
            f"Switching active backend to {active_backend_id} "
            f"(by {updated_by or 'unknown'})"
        )
        try:
            response = await asyncio.to_thread(self._upsert_main_config, record_data)
        except ConfigUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Error updating system config: {e}")
            raise ConfigUnavailableError(f"Failed to update system config: {e}") from e

        row = response.data[0] if response.data else record_data
        config = _row_to_config(row)
        if config is None:
            raise ConfigUnavailableError("System config update returned no data")
        return config
