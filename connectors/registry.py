"""
ConnectorRegistry — the set of data-source connectors this deployment knows.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from connectors.base import BaseConnector
from connectors.errors import UnknownProviderError
from connectors.wix import WixConnector
from utils.schemas import ProviderInfo

logger = logging.getLogger(__name__)


def default_connectors() -> List[BaseConnector]:
    """All known connectors — add new ones here."""
    return [WixConnector()]


class ConnectorRegistry:
    """
    Registry of connectors keyed by provider slug.

    Unconfigured connectors stay registered so that their status can be
    reported and their handshake fails with ``ConfigMissingError``.
    """

    def __init__(self, connectors: Optional[List[BaseConnector]] = None):
        self._connectors: Dict[str, BaseConnector] = {}
        for conn in connectors if connectors is not None else default_connectors():
            self.register(conn)

    def register(self, connector: BaseConnector) -> None:
        self._connectors[connector.provider_name] = connector
        if connector.is_configured():
            logger.info("Connector registered: %s (%s)", connector.display_name, connector.provider_name)
        else:
            logger.warning(
                "Connector %s registered but not configured (missing client id or app URL)",
                connector.provider_name,
            )

    def get(self, provider: str) -> BaseConnector:
        """Get a connector by provider name or raise ``UnknownProviderError``."""
        try:
            return self._connectors[provider]
        except KeyError:
            raise UnknownProviderError(provider) from None

    def providers(self) -> List[str]:
        return list(self._connectors.keys())

    def list_providers(self) -> List[ProviderInfo]:
        return [
            ProviderInfo(
                provider=c.provider_name,
                display_name=c.display_name,
                configured=c.is_configured(),
            )
            for c in self._connectors.values()
        ]
