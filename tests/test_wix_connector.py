"""
Tests for the Wix connector — auth URL, token exchange, synthetic series.
"""

import json
import random
from datetime import date
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from connectors.errors import ConfigMissingError, TokenExchangeFailedError
from connectors.wix import WixConnector
from utils.schemas import MetricType, Timeframe


def _transport(status_code=200, body=None, calls=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        if isinstance(body, (dict, list)):
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, text=body or "")

    return httpx.MockTransport(handler)


class TestAuthUrl:
    def test_contains_required_parameters(self, wix):
        url = wix.get_auth_url("signed-state")
        parsed = urlparse(url)
        params = parse_qs(parsed.query)

        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://www.wix.com/oauth/authorize"
        assert params["client_id"] == ["wix-client"]
        assert params["response_type"] == ["code"]
        assert params["redirect_uri"] == ["https://app.example.com/api/auth/wix/callback"]
        assert params["state"] == ["signed-state"]

    def test_trailing_slash_on_base_url(self):
        conn = WixConnector(client_id="id", app_base_url="https://app.example.com/")
        assert conn.redirect_uri() == "https://app.example.com/api/auth/wix/callback"

    @pytest.mark.parametrize("client_id,base_url", [("", "https://app.example.com"), ("id", "")])
    def test_missing_settings_raise_config_missing(self, client_id, base_url):
        conn = WixConnector(client_id=client_id, app_base_url=base_url)
        assert conn.is_configured() is False
        with pytest.raises(ConfigMissingError, match="contact support"):
            conn.get_auth_url("state")


class TestExchangeCode:
    @pytest.mark.asyncio
    async def test_success_returns_token_pair(self):
        calls = []
        conn = WixConnector(
            client_id="wix-client",
            client_secret="",
            app_base_url="https://app.example.com",
            transport=_transport(body={"access_token": "at1", "refresh_token": "rt1"}, calls=calls),
        )

        tokens = await conn.exchange_code("abc123")

        assert tokens == {"access_token": "at1", "refresh_token": "rt1"}
        assert len(calls) == 1
        sent = json.loads(calls[0].content)
        assert calls[0].method == "POST"
        assert str(calls[0].url) == "https://www.wixapis.com/oauth/access"
        assert sent == {"grant_type": "authorization_code", "client_id": "wix-client", "code": "abc123"}

    @pytest.mark.asyncio
    async def test_client_secret_sent_when_configured(self):
        calls = []
        conn = WixConnector(
            client_id="wix-client",
            client_secret="s3cret",
            app_base_url="https://app.example.com",
            transport=_transport(body={"access_token": "a", "refresh_token": "r"}, calls=calls),
        )
        await conn.exchange_code("abc")
        assert json.loads(calls[0].content)["client_secret"] == "s3cret"

    @pytest.mark.asyncio
    async def test_missing_config_fails_before_network(self):
        calls = []
        conn = WixConnector(client_id="", app_base_url="", transport=_transport(calls=calls))
        with pytest.raises(ConfigMissingError):
            await conn.exchange_code("abc")
        assert calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code,body",
        [
            (400, {"error": "invalid_grant"}),
            (500, "upstream down"),
            (200, "not json"),
            (200, {"access_token": "only-access"}),
            (200, ["unexpected"]),
        ],
    )
    async def test_failures_raise_token_exchange_failed(self, status_code, body):
        conn = WixConnector(
            client_id="wix-client",
            app_base_url="https://app.example.com",
            transport=_transport(status_code, body),
        )
        with pytest.raises(TokenExchangeFailedError):
            await conn.exchange_code("abc")

    @pytest.mark.asyncio
    async def test_transport_error_raises_token_exchange_failed(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        conn = WixConnector(
            client_id="wix-client",
            app_base_url="https://app.example.com",
            transport=httpx.MockTransport(handler),
        )
        with pytest.raises(TokenExchangeFailedError):
            await conn.exchange_code("abc")


class TestMetricSeries:
    @pytest.mark.asyncio
    async def test_one_point_per_month_oldest_first(self):
        conn = WixConnector(client_id="id", app_base_url="https://x", rng=random.Random(7))
        series = await conn.fetch_metric_series(
            "token", MetricType.SITE_SESSIONS, Timeframe.SIX_MONTHS, today=date(2024, 3, 20)
        )
        assert [d for d, _ in series] == [
            date(2023, 10, 1),
            date(2023, 11, 1),
            date(2023, 12, 1),
            date(2024, 1, 1),
            date(2024, 2, 1),
            date(2024, 3, 1),
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "metric,low,high",
        [
            (MetricType.SITE_SESSIONS, 5000, 15000),
            (MetricType.TOTAL_SALES, 8000, 25000),
            (MetricType.BOOKINGS, 100, 500),
        ],
    )
    async def test_values_within_metric_range(self, metric, low, high):
        conn = WixConnector(client_id="id", app_base_url="https://x", rng=random.Random(1))
        series = await conn.fetch_metric_series("token", metric, Timeframe.ALL_TIME)
        assert len(series) == 24
        assert all(low <= v <= high for _, v in series)

    @pytest.mark.asyncio
    async def test_accepts_raw_strings(self):
        conn = WixConnector(client_id="id", app_base_url="https://x")
        series = await conn.fetch_metric_series("token", "bookings", "1 month")
        assert len(series) == 1
