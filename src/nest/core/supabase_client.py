"""
NEST Core - Supabase Client.

Provides the configured backend client: the in-memory mock by default, or a
real Supabase client when mock mode is turned off.
"""

import logging
from functools import lru_cache

from supabase import Client, create_client

from nest.config import get_settings
from nest.core.mock_client import MockClient

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client | MockClient:
    """
    Get configured backend client.

    Cached so every repository shares the same client (and, in mock mode,
    the same tables and session).
    """
    settings = get_settings()
    if settings.supabase.mock_mode:
        logger.info("NEST RUNNING IN MOCK MODE")
        return MockClient(settings=settings)

    return create_client(
        supabase_url=settings.supabase.url,
        supabase_key=settings.supabase.service_role_key,
    )
