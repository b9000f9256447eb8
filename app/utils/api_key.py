"""
Operator API key guard.

The log and job-mapping endpoints are called by operators and by the
downstream processor, never by the job board. They authenticate with an
`X-API-Key` header whose SHA-256 hash must equal `API_KEY_HASH`; the raw key
is never stored server side (see scripts/generate_keys.py).
"""

import hashlib
import secrets
from typing import Optional

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from app.utils.logger import get_logger

logger = get_logger(__name__)

operator_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def hash_api_key(api_key: str) -> str:
    """SHA-256 hex digest of an operator key, the form kept in API_KEY_HASH."""
    return hashlib.sha256(api_key.encode()).hexdigest()


def generate_api_key() -> str:
    return secrets.token_hex(32)


async def get_api_key(
    request: Request,
    api_key: Optional[str] = Security(operator_key_header),
) -> str:
    """
    Router dependency for operator endpoints.

    Raises:
        HTTPException: 401 without a key, 403 for a wrong key, 500 when the
            deployment has no API_KEY_HASH (operator access stays closed)
    """
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API Key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    expected_hash = request.app.state.config.api_key.key_hash
    if not expected_hash:
        logger.error("[OperatorAuth] API_KEY_HASH is not configured; rejecting operator request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server misconfiguration: No API key hash set",
        )

    if not secrets.compare_digest(hash_api_key(api_key), expected_hash):
        logger.warning(f"[OperatorAuth] Rejected operator key on {request.url.path}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API Key",
        )

    return api_key
