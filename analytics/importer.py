"""
DataImporter — replace a user's stored metric rows with a fresh import.

Default mode keeps the long-standing replace semantics: existing rows are
deleted and committed first, then each selected metric is fetched and
inserted (and committed) in turn.  A failure part-way leaves the metrics
processed so far in place and the rest absent; the deleted rows are not
restored.

With ``atomic=True`` (``IMPORT_ATOMIC``) every series is fetched before the
stored rows are touched, and delete + insert are committed together, so a
failed import leaves the previous data intact.

Overlapping imports for the same user are not serialised.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from analytics.configuration import get_configuration
from config.settings import config
from connectors.base import BaseConnector
from connectors.errors import ImportFailedError, NotConfiguredError, NotConnectedError
from connectors.token_manager import get_access_token
from database.store import DashboardStore
from utils.schemas import ImportConfiguration, ImportResult, MetricType

logger = logging.getLogger(__name__)

Series = List[Tuple[date, float]]


class DataImporter:
    def __init__(
        self,
        store: DashboardStore,
        connector: BaseConnector,
        *,
        atomic: Optional[bool] = None,
    ):
        self.store = store
        self.connector = connector
        self.atomic = config.import_atomic if atomic is None else atomic

    async def run(self, user_id: str) -> ImportResult:
        provider = self.connector.provider_name

        access_token = await get_access_token(self.store, user_id, provider)
        if access_token is None:
            raise NotConnectedError(f"{self.connector.display_name} connection not found. Please reconnect.")

        configuration = await get_configuration(self.store, user_id, provider)
        if configuration is None:
            raise NotConfiguredError()

        logger.info(
            "Starting %s import for user %s (%s, atomic=%s)",
            provider,
            user_id,
            configuration.timeframe.value,
            self.atomic,
        )
        if self.atomic:
            result = await self._run_atomic(user_id, access_token, configuration)
        else:
            result = await self._run_replace(user_id, access_token, configuration)
        logger.info("Imported %d %s rows for user %s", result.rows_inserted, provider, user_id)
        return result

    async def _fetch(self, access_token: str, metric: MetricType, configuration: ImportConfiguration) -> Series:
        return await self.connector.fetch_metric_series(access_token, metric, configuration.timeframe)

    async def _run_replace(
        self,
        user_id: str,
        access_token: str,
        configuration: ImportConfiguration,
    ) -> ImportResult:
        removed = await self.store.delete_metrics(user_id)
        await self.store.commit()
        logger.debug("Cleared %d existing metric rows for user %s", removed, user_id)

        per_metric: Dict[str, int] = {}
        for metric in configuration.data_types:
            try:
                series = await self._fetch(access_token, metric, configuration)
                per_metric[metric.value] = await self.store.insert_metrics(user_id, metric.value, series)
                await self.store.commit()
            except Exception as exc:
                logger.error("Error importing %s for user %s: %s", metric.value, user_id, exc, exc_info=True)
                raise ImportFailedError(metric.value) from exc

        return ImportResult(rows_inserted=sum(per_metric.values()), per_metric=per_metric)

    async def _run_atomic(
        self,
        user_id: str,
        access_token: str,
        configuration: ImportConfiguration,
    ) -> ImportResult:
        staged: Dict[MetricType, Series] = {}
        for metric in configuration.data_types:
            try:
                staged[metric] = await self._fetch(access_token, metric, configuration)
            except Exception as exc:
                logger.error("Error fetching %s for user %s: %s", metric.value, user_id, exc, exc_info=True)
                raise ImportFailedError(metric.value) from exc

        await self.store.delete_metrics(user_id)
        per_metric = {
            metric.value: await self.store.insert_metrics(user_id, metric.value, series)
            for metric, series in staged.items()
        }
        await self.store.commit()
        return ImportResult(rows_inserted=sum(per_metric.values()), per_metric=per_metric)
