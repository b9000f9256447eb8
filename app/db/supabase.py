"""
Supabase client construction and error helpers.
"""

from typing import Any

from postgrest.exceptions import APIError
from supabase import create_client, Client

from app.config import Config
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def create_supabase_client(config: Config) -> Client:
    """Build a Supabase client from config. Called once by the service container."""
    logger.info(f"[Supabase] Connecting to {config.supabase.url}")
    return create_client(config.supabase.url, config.supabase.service_role_key)


def is_unique_violation(error: Any) -> bool:
    """True if a PostgREST error was raised by a UNIQUE constraint."""
    return isinstance(error, APIError) and str(getattr(error, "code", "")) == UNIQUE_VIOLATION
