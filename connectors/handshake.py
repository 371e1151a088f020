"""
OAuth handshake — authorization URL and redirect-callback handling.

``handle_callback`` never raises: every outcome is a URL on the dashboard
front end, either the provider's configure page or the connections page
carrying ``error`` / ``error_description`` query parameters.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError

from config.settings import config
from connectors.base import BaseConnector
from connectors.errors import AuthorizationDeniedError, BackendUnavailableError, DashboardError
from connectors.state import create_state, verify_state
from connectors.token_manager import store_tokens
from database.store import DashboardStore

logger = logging.getLogger(__name__)

CONNECTIONS_PATH = "/settings/connections"


def configure_path(provider: str) -> str:
    return f"{CONNECTIONS_PATH}/{provider}/configure"


def error_redirect_url(provider: str, error: DashboardError) -> str:
    query = urlencode(
        {
            "error": f"{provider}_{error.code}",
            "error_description": error.message,
        }
    )
    return f"{config.frontend_url(CONNECTIONS_PATH)}?{query}"


async def _discard(store: DashboardStore, provider: str) -> None:
    """Roll back a half-written callback so the request session ends clean."""
    try:
        await store.rollback()
    except BackendUnavailableError:
        logger.warning("%s OAuth callback rollback failed; session is discarded", provider)


def build_authorization_url(connector: BaseConnector, user_id: str) -> str:
    """
    URL the user is sent to in order to grant access.

    Raises ``ConfigMissingError`` before any I/O when the connector lacks
    its client id or the public application URL.
    """
    return connector.get_auth_url(create_state(user_id))


async def handle_callback(
    store: DashboardStore,
    connector: BaseConnector,
    *,
    code: Optional[str],
    state: Optional[str],
    error: Optional[str] = None,
    error_description: Optional[str] = None,
) -> str:
    """
    Complete the handshake and return the URL to redirect the browser to.

    On success exactly one token upsert has been made; on failure none.
    """
    provider = connector.provider_name
    try:
        if error or not code:
            if error:
                logger.info("%s authorization declined: %s", provider, error)
            raise AuthorizationDeniedError(error_description or None)

        user_id = verify_state(state)
        token_data = await connector.exchange_code(code)
        await store_tokens(store, user_id, provider, token_data)
        await store.commit()
    except (SQLAlchemyError, BackendUnavailableError) as exc:
        logger.error("%s OAuth callback could not save tokens: %s", provider, exc)
        await _discard(store, provider)
        return error_redirect_url(provider, BackendUnavailableError())
    except DashboardError as exc:
        logger.warning("%s OAuth callback failed: %s (%s)", provider, exc.code, exc.message)
        return error_redirect_url(provider, exc)

    logger.info("OAuth connected: user=%s provider=%s", user_id, provider)
    return config.frontend_url(configure_path(provider))
