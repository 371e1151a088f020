"""
Connector API routes — auth URL, OAuth callback, status, disconnect,
import configuration and import runs.

Route prefixes: /api/connections and /api/auth (callback only)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import RedirectResponse

from analytics.configuration import get_configuration, save_configuration, validate_configuration
from analytics.importer import DataImporter
from api.dependencies import get_registry, get_store
from auth.dependencies import get_current_user_id
from connectors.errors import NotConnectedError, UnknownProviderError
from connectors.handshake import build_authorization_url, error_redirect_url, handle_callback
from connectors.registry import ConnectorRegistry
from connectors.token_manager import disconnect, get_access_token, get_connection_status
from database.store import DashboardStore
from utils.schemas import ActionResult, ImportConfigurationRequest, ImportResult, ProviderInfo

logger = logging.getLogger(__name__)

router = APIRouter(tags=["connections"])
callback_router = APIRouter(tags=["connections"])


@router.get("/providers", response_model=List[ProviderInfo])
async def list_providers(registry: ConnectorRegistry = Depends(get_registry)) -> List[ProviderInfo]:
    """Every known provider and whether it is configured. No auth required."""
    return registry.list_providers()


@router.get("")
async def connection_statuses(
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
    registry: ConnectorRegistry = Depends(get_registry),
) -> Dict[str, Dict[str, bool]]:
    return await get_connection_status(store, user_id, registry.providers())


@router.get("/{provider}/auth-url")
async def get_auth_url(
    provider: str,
    user_id: str = Depends(get_current_user_id),
    registry: ConnectorRegistry = Depends(get_registry),
) -> Dict[str, str]:
    """Authorization URL the front end should send the browser to."""
    connector = registry.get(provider)
    return {"auth_url": build_authorization_url(connector, user_id), "provider": provider}


@router.delete("/{provider}", response_model=ActionResult)
async def disconnect_provider(
    provider: str,
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
    registry: ConnectorRegistry = Depends(get_registry),
) -> ActionResult:
    registry.get(provider)
    await disconnect(store, user_id, provider)
    return ActionResult()


@router.get("/{provider}/configuration")
async def read_configuration(
    provider: str,
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
    registry: ConnectorRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    registry.get(provider)
    configuration = await get_configuration(store, user_id, provider)
    if configuration is None:
        return {"configured": False}
    return {"configured": True, **configuration.model_dump(mode="json", by_alias=True)}


@router.put("/{provider}/configuration", response_model=ActionResult)
async def update_configuration(
    provider: str,
    body: ImportConfigurationRequest,
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
    registry: ConnectorRegistry = Depends(get_registry),
) -> ActionResult:
    """Save the import configuration without running an import."""
    registry.get(provider)
    await save_configuration(store, user_id, provider, body.data_types, body.timeframe)
    return ActionResult()


@router.post("/{provider}/configure", response_model=ImportResult)
async def configure_and_import(
    provider: str,
    body: ImportConfigurationRequest,
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
    registry: ConnectorRegistry = Depends(get_registry),
) -> ImportResult:
    """Save the configuration, then replace the user's metric rows with a fresh import."""
    connector = registry.get(provider)
    validate_configuration(body.data_types, body.timeframe)
    if await get_access_token(store, user_id, provider) is None:
        raise NotConnectedError(f"{connector.display_name} connection not found. Please reconnect.")
    await save_configuration(store, user_id, provider, body.data_types, body.timeframe)
    await store.commit()
    return await DataImporter(store, connector).run(user_id)


@router.post("/{provider}/import", response_model=ImportResult)
async def rerun_import(
    provider: str,
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
    registry: ConnectorRegistry = Depends(get_registry),
) -> ImportResult:
    connector = registry.get(provider)
    return await DataImporter(store, connector).run(user_id)


# ── Provider redirect target ───────────────────────────────────────────


@callback_router.get("/{provider}/callback")
async def oauth_callback(
    provider: str,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    error_description: Optional[str] = Query(None),
    store: DashboardStore = Depends(get_store),
    registry: ConnectorRegistry = Depends(get_registry),
) -> RedirectResponse:
    """
    The provider redirects the browser here after consent.

    Always answers with a redirect back to the dashboard; failures carry
    ``error`` and ``error_description`` query parameters.
    """
    try:
        connector = registry.get(provider)
    except UnknownProviderError as exc:
        return RedirectResponse(error_redirect_url(provider, exc), status_code=status.HTTP_303_SEE_OTHER)

    target = await handle_callback(
        store,
        connector,
        code=code,
        state=state,
        error=error,
        error_description=error_description,
    )
    return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
