"""
Read imported metric rows back out for the dashboard.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Any, Dict, List, Optional

from database.models import MetricRow
from database.store import DashboardStore
from utils.schemas import MetricsSummary


async def get_metrics(store: DashboardStore, user_id: Optional[str]) -> Optional[List[MetricRow]]:
    """All of the user's rows, oldest first; None when signed out or nothing is stored."""
    if not user_id:
        return None
    rows = await store.list_metrics(user_id)
    if not rows:
        return None
    return sorted(rows, key=lambda r: r.date)


def summarize_metrics(rows: Optional[List[MetricRow]]) -> MetricsSummary:
    """
    Per-metric totals and a date-keyed series for charting.

    ``series`` holds one dict per date, e.g.
    ``{"date": "2024-01-01", "site-sessions": 9120.0, "total-sales": 15210.0}``.
    """
    totals: Dict[str, float] = {}
    by_date: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for row in rows or []:
        value = float(row.value)
        totals[row.metric_type] = totals.get(row.metric_type, 0.0) + value
        key = row.date.isoformat()
        by_date.setdefault(key, {"date": key})[row.metric_type] = value
    return MetricsSummary(totals=totals, series=list(by_date.values()))
