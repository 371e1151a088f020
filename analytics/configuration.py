"""
Import configuration — which metrics to import and over which timeframe.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from connectors.errors import ConfigurationValidationError
from database.store import DashboardStore
from utils.schemas import METRIC_ORDER, ImportConfiguration, MetricType, Timeframe

logger = logging.getLogger(__name__)

# metric → boolean column on ImportSettings
_FLAG_COLUMNS = {
    MetricType.SITE_SESSIONS: "import_site_sessions",
    MetricType.TOTAL_SALES: "import_total_sales",
    MetricType.BOOKINGS: "import_bookings",
}


def validate_configuration(data_types: Iterable[str], timeframe: Optional[str]) -> ImportConfiguration:
    """Parse raw form values, raising ``ConfigurationValidationError``."""
    selected = set()
    for raw in data_types or []:
        try:
            selected.add(MetricType(raw))
        except ValueError:
            raise ConfigurationValidationError(f"Unknown data type: {raw!r}.") from None
    if not selected:
        raise ConfigurationValidationError("You have to select at least one data type to import.")

    if not timeframe:
        raise ConfigurationValidationError("Please select a timeframe.")
    try:
        tf = Timeframe(timeframe)
    except ValueError:
        raise ConfigurationValidationError(f"Unknown timeframe: {timeframe!r}.") from None

    return ImportConfiguration(
        data_types=[m for m in METRIC_ORDER if m in selected],
        timeframe=tf,
    )


async def save_configuration(
    store: DashboardStore,
    user_id: str,
    provider: str,
    data_types: Iterable[str],
    timeframe: Optional[str],
) -> ImportConfiguration:
    """Validate and upsert the user's import settings, marking them configured."""
    configuration = validate_configuration(data_types, timeframe)
    flags = {column: metric in configuration.data_types for metric, column in _FLAG_COLUMNS.items()}
    await store.upsert_import_settings(user_id, provider, flags, configuration.timeframe.value)
    logger.info(
        "Saved %s import configuration for user %s: %s over %s",
        provider,
        user_id,
        [m.value for m in configuration.data_types],
        configuration.timeframe.value,
    )
    return configuration


async def get_configuration(
    store: DashboardStore,
    user_id: str,
    provider: str,
) -> Optional[ImportConfiguration]:
    """The stored configuration, or None if the user never configured the import."""
    row = await store.get_import_settings(user_id, provider)
    if row is None or not row.is_configured:
        return None
    return ImportConfiguration(
        data_types=[m for m in METRIC_ORDER if getattr(row, _FLAG_COLUMNS[m])],
        timeframe=Timeframe(row.import_timeframe),
    )
