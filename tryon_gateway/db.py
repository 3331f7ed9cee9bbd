from supabase import create_client, Client

from tryon_gateway.config import logger
from tryon_gateway.config import SUPABASE_KEY, SUPABASE_SERVICE_KEY, SUPABASE_URL


def supabase_create_client() -> Client | None:
    """
    Creates and returns a Supabase client using the configured URL and key.
    The service key is preferred because the admin endpoints write the
    system_config row.

    Returns:
        Client: Supabase client instance if successful, None otherwise.
    """
    url = SUPABASE_URL
    key = SUPABASE_SERVICE_KEY or SUPABASE_KEY
    if not url or not key:
        logger.error("SUPABASE_URL or SUPABASE_SERVICE_KEY is not set")
        return None
    try:
        supabase: Client = create_client(url, key)
        logger.info("Supabase client connected successfully!")
        return supabase
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None
