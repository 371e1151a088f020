"""
BaseConnector — abstract interface for all third-party data-source connectors.

A connector knows how to run the OAuth handshake for its provider and how to
fetch one metric's monthly series with the resulting access token.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Tuple

from utils.schemas import MetricType, Timeframe


class BaseConnector(ABC):
    """Abstract base for all OAuth2 connectors."""

    # ── Identity ────────────────────────────────────────────────────────
    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique slug used in URLs and storage: 'wix'."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        ...

    # ── OAuth flow ──────────────────────────────────────────────────────

    @abstractmethod
    def get_auth_url(self, state: str) -> str:
        """
        Build the provider's OAuth2 authorization URL.

        Parameters
        ----------
        state : str
            Signed state string identifying the user who started the flow.

        Raises
        ------
        ConfigMissingError
            If the client id or public application URL is not set.
        """
        ...

    @abstractmethod
    async def exchange_code(self, code: str) -> Dict[str, str]:
        """
        Exchange the authorization code for tokens.

        Returns
        -------
        dict with keys ``access_token`` and ``refresh_token``.

        Raises
        ------
        ConfigMissingError, TokenExchangeFailedError
        """
        ...

    # ── Data ────────────────────────────────────────────────────────────

    @abstractmethod
    async def fetch_metric_series(
        self,
        access_token: str,
        metric_type: MetricType,
        timeframe: Timeframe,
    ) -> List[Tuple[date, float]]:
        """Return one ``(period_start, value)`` pair per month, oldest first."""
        ...

    # ── Helpers ─────────────────────────────────────────────────────────

    def is_configured(self) -> bool:
        """Return True if this connector has all required settings."""
        return True
