"""
Database client factory for Supabase.

Provides the service-role client used for backend operations, which bypasses RLS.
"""

import threading
from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache, guarded by _client_lock
_service_client: Optional[Client] = None
_client_lock = threading.Lock()


def get_supabase_client(
    url: Optional[str] = None,
    service_role_key: Optional[str] = None,
) -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Use this for backend operations that need full database access,
    such as writing sessions on behalf of anonymous users.

    The client is built once per process. Explicit arguments take
    precedence over settings on the first call; later calls return
    the cached client.

    Args:
        url: Supabase project URL (defaults to SUPABASE_URL)
        service_role_key: Service role key (defaults to SUPABASE_SERVICE_ROLE_KEY)

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is not None:
        return _service_client

    with _client_lock:
        if _service_client is None:
            settings = get_settings()
            url = url or settings.supabase_url
            service_role_key = service_role_key or settings.supabase_service_role_key
            if not url or not service_role_key:
                raise RuntimeError(
                    "Supabase configuration missing. "
                    "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
                )
            _service_client = create_client(url, service_role_key)

    return _service_client


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    with _client_lock:
        _service_client = None
