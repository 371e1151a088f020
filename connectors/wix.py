"""
WixConnector — OAuth2 for Wix sites.

The handshake is the standard authorization-code grant.  Wix site analytics
are not wired to a live API yet: ``fetch_metric_series`` produces synthetic
monthly values in realistic ranges so the dashboard can be exercised end to
end.
"""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlencode

import httpx

from analytics.periods import month_starts
from config.settings import config
from connectors.base import BaseConnector
from connectors.errors import ConfigMissingError, TokenExchangeFailedError
from utils.schemas import MetricType, Timeframe

logger = logging.getLogger(__name__)

# Wix OAuth2 endpoints
_WIX_AUTH_URL = "https://www.wix.com/oauth/authorize"
_WIX_TOKEN_URL = "https://www.wixapis.com/oauth/access"

# Inclusive (low, high) bounds of the synthetic monthly values.
_SYNTHETIC_RANGES: Dict[MetricType, Tuple[int, int]] = {
    MetricType.SITE_SESSIONS: (5000, 15000),
    MetricType.TOTAL_SALES: (8000, 25000),
    MetricType.BOOKINGS: (100, 500),
}


class WixConnector(BaseConnector):
    """OAuth2 connector for Wix."""

    def __init__(
        self,
        *,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        app_base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._app_base_url = app_base_url
        self._transport = transport
        self._timeout = timeout
        self._rng = rng or random.Random()

    @property
    def provider_name(self) -> str:
        return "wix"

    @property
    def display_name(self) -> str:
        return "Wix"

    # Settings are read at call time so a running process picks up the
    # values the connector was not explicitly constructed with.
    @property
    def client_id(self) -> str:
        return self._client_id if self._client_id is not None else config.wix_client_id

    @property
    def client_secret(self) -> str:
        return self._client_secret if self._client_secret is not None else config.wix_client_secret

    @property
    def app_base_url(self) -> str:
        return self._app_base_url if self._app_base_url is not None else config.app_base_url

    def is_configured(self) -> bool:
        return bool(self.client_id and self.app_base_url)

    def _require_config(self) -> None:
        if not self.is_configured():
            logger.error("Wix settings WIX_CLIENT_ID or APP_BASE_URL are not set")
            raise ConfigMissingError(
                "Wix application details are not configured. Please contact support."
            )

    def redirect_uri(self) -> str:
        return f"{self.app_base_url.rstrip('/')}/api/auth/{self.provider_name}/callback"

    def get_auth_url(self, state: str) -> str:
        self._require_config()
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri(),
            "state": state,
        }
        return f"{_WIX_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> Dict[str, str]:
        """Exchange auth code for an access / refresh token pair."""
        self._require_config()

        payload = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "code": code,
        }
        if self.client_secret:
            payload["client_secret"] = self.client_secret

        timeout = self._timeout if self._timeout is not None else config.http_timeout_seconds
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
                resp = await client.post(_WIX_TOKEN_URL, json=payload)
                resp.raise_for_status()
                token_data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Wix token endpoint returned %s", exc.response.status_code)
            raise TokenExchangeFailedError() from exc
        except httpx.HTTPError as exc:
            logger.warning("Wix token request failed: %s", exc)
            raise TokenExchangeFailedError() from exc
        except ValueError as exc:
            logger.warning("Wix token endpoint returned a non-JSON body")
            raise TokenExchangeFailedError() from exc

        if not isinstance(token_data, dict):
            raise TokenExchangeFailedError()
        access_token = token_data.get("access_token")
        refresh_token = token_data.get("refresh_token")
        if not access_token or not refresh_token:
            logger.warning("Wix token response is missing access_token or refresh_token")
            raise TokenExchangeFailedError()

        return {"access_token": access_token, "refresh_token": refresh_token}

    async def fetch_metric_series(
        self,
        access_token: str,
        metric_type: MetricType,
        timeframe: Timeframe,
        *,
        today: Optional[date] = None,
    ) -> List[Tuple[date, float]]:
        metric_type = MetricType(metric_type)
        timeframe = Timeframe(timeframe)
        low, high = _SYNTHETIC_RANGES[metric_type]
        logger.debug("Fetching %s for %s from Wix", metric_type.value, timeframe.value)
        return [
            (period, float(self._rng.randint(low, high)))
            for period in month_starts(timeframe.periods, today)
        ]
