"""
Analytics API routes — read imported metrics for the dashboard.

Route prefix: /api/analytics
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends

from analytics.query import get_metrics, summarize_metrics
from api.dependencies import get_store
from auth.dependencies import get_optional_user_id
from database.store import DashboardStore
from utils.schemas import MetricRowOut, MetricsSummary

router = APIRouter(tags=["analytics"])


@router.get("/metrics", response_model=Optional[List[MetricRowOut]])
async def list_metrics(
    user_id: Optional[str] = Depends(get_optional_user_id),
    store: DashboardStore = Depends(get_store),
) -> Optional[List[MetricRowOut]]:
    """Stored rows, oldest first; ``null`` when signed out or nothing was imported."""
    rows = await get_metrics(store, user_id)
    if rows is None:
        return None
    return [MetricRowOut.model_validate(row) for row in rows]


@router.get("/summary", response_model=MetricsSummary)
async def metrics_summary(
    user_id: Optional[str] = Depends(get_optional_user_id),
    store: DashboardStore = Depends(get_store),
) -> MetricsSummary:
    return summarize_metrics(await get_metrics(store, user_id))
