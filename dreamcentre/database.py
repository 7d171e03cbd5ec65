"""Database connection and utilities"""
from supabase import create_client, Client
from functools import lru_cache
from typing import Optional
from dreamcentre.config import get_settings


def create_service_client(supabase_url: str, service_role_key: str) -> Client:
    """
    Create a Supabase client with the service role key

    The service role bypasses RLS - use carefully.

    Args:
        supabase_url: Base address of the Supabase project
        service_role_key: Privileged service role key

    Returns:
        Supabase client
    """
    return create_client(supabase_url, service_role_key)


@lru_cache()
def get_supabase_admin() -> Optional[Client]:
    """Get the cached service role client, or None when Supabase is not configured"""
    settings = get_settings()
    if not settings.supabase_configured:
        return None
    return create_service_client(settings.supabase_url, settings.supabase_service_role_key)
