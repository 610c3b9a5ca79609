"""
Hosted backend client factory.

The widget owns no storage: every read, write and subscription goes
through the Supabase client. Data operations take the client as their
first argument so callers (and tests) decide which one is used.
"""

import logging
from typing import Optional

from supabase import AsyncClient, Client, acreate_client, create_client

from booking_widget.config import SupabaseConfig, settings

logger = logging.getLogger(__name__)

_client: Optional[Client] = None


def _require_credentials(config: SupabaseConfig) -> None:
    if not config.configured:
        raise RuntimeError(
            "Supabase credentials not found. Please add SUPABASE_URL and "
            "SUPABASE_ANON_KEY to your .env file."
        )


def get_client(config: Optional[SupabaseConfig] = None) -> Client:
    """Return the process-wide synchronous client, creating it on first use."""
    global _client
    if _client is None:
        config = config or settings.supabase
        _require_credentials(config)
        _client = create_client(config.url, config.anon_key)
        logger.info("Supabase client created for %s", config.url)
    return _client


async def create_async_client(config: Optional[SupabaseConfig] = None) -> AsyncClient:
    """Create an async client; real-time channels are only available on it."""
    config = config or settings.supabase
    _require_credentials(config)
    return await acreate_client(config.url, config.anon_key)


def reset_client() -> None:
    """Drop the cached client. Used by test fixtures for isolation."""
    global _client
    _client = None
