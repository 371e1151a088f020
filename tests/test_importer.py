"""
Tests for the data importer — full replace, partial failure, atomic mode.
"""

import random
from datetime import date
from unittest.mock import AsyncMock

import pytest

from analytics.configuration import save_configuration
from analytics.importer import DataImporter
from connectors.errors import ImportFailedError, NotConfiguredError, NotConnectedError
from connectors.token_manager import store_tokens
from connectors.wix import WixConnector
from utils.schemas import MetricType


async def _connect_and_configure(store, user_id, data_types, timeframe="6 months"):
    await store_tokens(store, user_id, "wix", {"access_token": "at1", "refresh_token": "rt1"})
    await save_configuration(store, user_id, "wix", data_types, timeframe)


def _connector():
    return WixConnector(client_id="id", app_base_url="https://x", rng=random.Random(3))


class TestRunImport:
    @pytest.mark.asyncio
    async def test_six_months_two_metrics(self, store, user_id):
        await _connect_and_configure(store, user_id, ["site-sessions", "total-sales"])

        result = await DataImporter(store, _connector(), atomic=False).run(user_id)

        assert result.rows_inserted == 12
        assert result.per_metric == {"site-sessions": 6, "total-sales": 6}
        assert len(store.metrics) == 12
        assert {m.metric_type for m in store.metrics} == {"site-sessions", "total-sales"}

    @pytest.mark.asyncio
    async def test_fetch_called_with_configured_timeframe(self, store, user_id):
        await _connect_and_configure(store, user_id, ["bookings"], "12 months")
        connector = _connector()
        connector.fetch_metric_series = AsyncMock(return_value=[(date(2024, 1, 1), 1.0)])

        await DataImporter(store, connector, atomic=False).run(user_id)

        connector.fetch_metric_series.assert_awaited_once()
        token, metric, timeframe = connector.fetch_metric_series.await_args.args
        assert token == "at1"
        assert metric is MetricType.BOOKINGS
        assert timeframe.periods == 12

    @pytest.mark.asyncio
    async def test_replaces_previous_rows(self, store, user_id):
        await _connect_and_configure(store, user_id, ["bookings"], "1 month")
        await store.insert_metrics(user_id, "site-sessions", [(date(2020, 1, 1), 1.0)] * 5)
        await store.insert_metrics("other-user", "bookings", [(date(2020, 1, 1), 9.0)])

        await DataImporter(store, _connector(), atomic=False).run(user_id)

        mine = [m for m in store.metrics if m.user_id == user_id]
        assert len(mine) == 1
        assert mine[0].metric_type == "bookings"
        assert len([m for m in store.metrics if m.user_id == "other-user"]) == 1

    @pytest.mark.asyncio
    async def test_partial_failure_keeps_earlier_metrics(self, store, user_id):
        await _connect_and_configure(store, user_id, ["site-sessions", "total-sales"])
        await store.insert_metrics(user_id, "bookings", [(date(2020, 1, 1), 1.0)] * 3)
        connector = _connector()
        real_fetch = connector.fetch_metric_series

        async def flaky(access_token, metric_type, timeframe):
            if metric_type is MetricType.TOTAL_SALES:
                raise RuntimeError("upstream timeout")
            return await real_fetch(access_token, metric_type, timeframe)

        connector.fetch_metric_series = flaky

        with pytest.raises(ImportFailedError) as excinfo:
            await DataImporter(store, connector, atomic=False).run(user_id)

        assert excinfo.value.metric == "total-sales"
        assert "total-sales" in excinfo.value.message
        assert len(store.metrics) == 6
        assert {m.metric_type for m in store.metrics} == {"site-sessions"}

    @pytest.mark.asyncio
    async def test_atomic_failure_keeps_previous_rows(self, store, user_id):
        await _connect_and_configure(store, user_id, ["site-sessions", "total-sales"])
        await store.insert_metrics(user_id, "bookings", [(date(2020, 1, 1), 1.0)] * 3)
        connector = _connector()
        connector.fetch_metric_series = AsyncMock(
            side_effect=[[(date(2024, 1, 1), 1.0)], RuntimeError("boom")]
        )

        with pytest.raises(ImportFailedError):
            await DataImporter(store, connector, atomic=True).run(user_id)

        assert len(store.metrics) == 3
        assert {m.metric_type for m in store.metrics} == {"bookings"}

    @pytest.mark.asyncio
    async def test_atomic_success_commits_once(self, store, user_id):
        await _connect_and_configure(store, user_id, ["site-sessions", "bookings"], "1 month")
        commits_before = store.commits

        result = await DataImporter(store, _connector(), atomic=True).run(user_id)

        assert result.rows_inserted == 2
        assert store.commits == commits_before + 1

    @pytest.mark.asyncio
    async def test_requires_token(self, store, user_id):
        await save_configuration(store, user_id, "wix", ["bookings"], "1 month")
        with pytest.raises(NotConnectedError):
            await DataImporter(store, _connector()).run(user_id)

    @pytest.mark.asyncio
    async def test_requires_configuration(self, store, user_id):
        await store_tokens(store, user_id, "wix", {"access_token": "a", "refresh_token": "r"})
        with pytest.raises(NotConfiguredError):
            await DataImporter(store, _connector()).run(user_id)
