"""
FastAPI dependencies (shared across routes).
"""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from connectors.registry import ConnectorRegistry
from database.session import get_db_session
from database.store import DashboardStore


async def get_store(session: AsyncSession = Depends(get_db_session)) -> DashboardStore:
    """Request-scoped backend client."""
    return DashboardStore(session)


def get_registry(request: Request) -> ConnectorRegistry:
    return request.app.state.connector_registry
