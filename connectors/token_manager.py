"""
Token manager — store / read / delete per-user OAuth tokens and report
connection status.

This is the single interface the handshake and the importer use to touch
token rows.  A user has at most one token pair per provider.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from connectors.encryption import TokenCipher, get_cipher
from connectors.errors import TokenExchangeFailedError, UnauthenticatedError
from database.store import DashboardStore

logger = logging.getLogger(__name__)


async def store_tokens(
    store: DashboardStore,
    user_id: str,
    provider: str,
    token_data: Dict[str, str],
    *,
    cipher: Optional[TokenCipher] = None,
) -> None:
    """
    Persist the token pair for ``(user_id, provider)`` with one upsert.

    Both tokens must be present; nothing is written otherwise.
    """
    access_token = token_data.get("access_token")
    refresh_token = token_data.get("refresh_token")
    if not access_token or not refresh_token:
        raise TokenExchangeFailedError("Token response did not include both tokens.")

    cipher = cipher or get_cipher()
    await store.upsert_token(
        user_id,
        provider,
        cipher.encrypt(access_token),
        cipher.encrypt(refresh_token),
    )
    logger.info("Stored %s tokens for user %s", provider, user_id)


async def get_access_token(
    store: DashboardStore,
    user_id: str,
    provider: str,
    *,
    cipher: Optional[TokenCipher] = None,
) -> Optional[str]:
    """Return the decrypted access token, or None if not connected."""
    row = await store.get_token(user_id, provider)
    if row is None:
        return None
    return (cipher or get_cipher()).decrypt(row.access_token)


async def get_connection_status(
    store: DashboardStore,
    user_id: Optional[str],
    providers: List[str],
) -> Dict[str, Dict[str, bool]]:
    """``{provider: {"connected": bool}}`` for every provider in ``providers``."""
    if not user_id:
        raise UnauthenticatedError()
    connected = await store.connected_providers(user_id)
    return {provider: {"connected": provider in connected} for provider in providers}


async def disconnect(store: DashboardStore, user_id: str, provider: str) -> None:
    """
    Delete the token row for ``(user_id, provider)``.

    Idempotent. Import settings and previously imported metric rows are
    left in place.
    """
    deleted = await store.delete_token(user_id, provider)
    if deleted:
        logger.info("Disconnected %s for user %s", provider, user_id)
    else:
        logger.debug("Disconnect %s for user %s: nothing stored", provider, user_id)
