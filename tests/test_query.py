"""
Tests for reading metrics back and summarising them.
"""

from datetime import date
from decimal import Decimal

import pytest

from analytics.query import get_metrics, summarize_metrics


class TestGetMetrics:
    @pytest.mark.asyncio
    async def test_sorted_by_date(self, store, user_id):
        await store.insert_metrics(user_id, "bookings", [(date(2024, 3, 1), 3.0), (date(2024, 1, 1), 1.0)])
        await store.insert_metrics(user_id, "total-sales", [(date(2024, 2, 1), 2.0)])

        rows = await get_metrics(store, user_id)

        assert [r.date for r in rows] == [date(2024, 1, 1), date(2024, 2, 1), date(2024, 3, 1)]

    @pytest.mark.asyncio
    async def test_none_when_empty(self, store, user_id):
        assert await get_metrics(store, user_id) is None

    @pytest.mark.asyncio
    async def test_none_when_signed_out(self, store, user_id):
        await store.insert_metrics(user_id, "bookings", [(date(2024, 1, 1), 1.0)])
        assert await get_metrics(store, None) is None


class TestSummarize:
    @pytest.mark.asyncio
    async def test_totals_and_series(self, store, user_id):
        await store.insert_metrics(
            user_id, "total-sales", [(date(2024, 1, 1), Decimal("100.5")), (date(2024, 2, 1), Decimal("200"))]
        )
        await store.insert_metrics(user_id, "bookings", [(date(2024, 1, 1), 7)])

        summary = summarize_metrics(await get_metrics(store, user_id))

        assert summary.totals == {"total-sales": 300.5, "bookings": 7.0}
        assert summary.series == [
            {"date": "2024-01-01", "total-sales": 100.5, "bookings": 7.0},
            {"date": "2024-02-01", "total-sales": 200.0},
        ]

    def test_empty(self):
        summary = summarize_metrics(None)
        assert summary.totals == {}
        assert summary.series == []
