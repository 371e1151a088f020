"""
FastAPI dependencies for authentication.

Provides ``get_current_user_id``, used across all protected routes.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.jwt import verify_token
from connectors.errors import UnauthenticatedError

_bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> str:
    """
    Extract and verify the Bearer token, returning the authenticated
    ``user_id`` (UUID string).
    """
    if credentials is None:
        raise UnauthenticatedError()
    return verify_token(credentials.credentials)


async def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
) -> Optional[str]:
    """Like ``get_current_user_id`` but None for anonymous or invalid credentials."""
    if credentials is None:
        return None
    try:
        return verify_token(credentials.credentials)
    except UnauthenticatedError:
        return None
