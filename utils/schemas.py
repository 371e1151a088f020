"""
Pydantic schemas and enumerations shared across the dashboard backend.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Enumerations
# ═══════════════════════════════════════════════════════════════════════════════


class MetricType(str, Enum):
    SITE_SESSIONS = "site-sessions"
    TOTAL_SALES = "total-sales"
    BOOKINGS = "bookings"


# Import order is fixed regardless of how the user listed the metrics.
METRIC_ORDER: List[MetricType] = [
    MetricType.SITE_SESSIONS,
    MetricType.TOTAL_SALES,
    MetricType.BOOKINGS,
]


class Timeframe(str, Enum):
    ONE_MONTH = "1 month"
    SIX_MONTHS = "6 months"
    TWELVE_MONTHS = "12 months"
    ALL_TIME = "All time"

    @property
    def periods(self) -> int:
        """Number of monthly periods imported for this timeframe."""
        return _TIMEFRAME_PERIODS[self]


# "All time" is approximated by a fixed two-year window.
_TIMEFRAME_PERIODS: Dict[Timeframe, int] = {
    Timeframe.ONE_MONTH: 1,
    Timeframe.SIX_MONTHS: 6,
    Timeframe.TWELVE_MONTHS: 12,
    Timeframe.ALL_TIME: 24,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Connections
# ═══════════════════════════════════════════════════════════════════════════════


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str


class ProviderInfo(BaseModel):
    provider: str
    display_name: str
    configured: bool


class ActionResult(BaseModel):
    """``{"success": true}`` result of a state-changing action."""

    success: bool = True


# ═══════════════════════════════════════════════════════════════════════════════
# Import configuration / analytics
# ═══════════════════════════════════════════════════════════════════════════════


class ImportConfiguration(BaseModel):
    """User's choice of metrics and lookback window (``dataTypes`` on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    data_types: List[MetricType] = Field(default_factory=list, alias="dataTypes")
    timeframe: Timeframe


class MetricPoint(BaseModel):
    date: dt.date
    value: float


class MetricRowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    metric_type: str
    date: dt.date
    value: float


class ImportResult(BaseModel):
    success: bool = True
    rows_inserted: int = 0
    per_metric: Dict[str, int] = Field(default_factory=dict)


class MetricsSummary(BaseModel):
    totals: Dict[str, float] = Field(default_factory=dict)
    series: List[Dict[str, Any]] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# Profile
# ═══════════════════════════════════════════════════════════════════════════════


class BusinessProfile(BaseModel):
    business_name: Optional[str] = None
    full_name: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    business_type: Optional[str] = None
    email: Optional[str] = None
    onboarding_step: int = 1


# ═══════════════════════════════════════════════════════════════════════════════
# Insights (LLM flows)
# ═══════════════════════════════════════════════════════════════════════════════


class ForecastRequest(BaseModel):
    historical_data: str = Field("", alias="historicalData")
    market_trends: str = Field("", alias="marketTrends")
    business_description: str = Field("", alias="businessDescription")

    model_config = ConfigDict(populate_by_name=True)


class ForecastOutput(BaseModel):
    prioritized_areas: str = Field(
        ...,
        alias="prioritizedAreas",
        description="Key business areas that need prioritization based on the analysis.",
    )
    forecasts: str = Field(
        ...,
        description="AI-driven forecasts for the business, including potential challenges and opportunities.",
    )

    model_config = ConfigDict(populate_by_name=True)


class PrioritizeRequest(BaseModel):
    business_data: str = Field("", alias="businessData")

    model_config = ConfigDict(populate_by_name=True)


class PrioritizeOutput(BaseModel):
    prioritized_areas: List[str] = Field(
        ...,
        alias="prioritizedAreas",
        description="A ranked list of business areas the client should focus on.",
    )
    summary: str = Field(
        ...,
        description="A concise summary explaining why the listed areas are the most critical.",
    )

    model_config = ConfigDict(populate_by_name=True)


class ImportConfigurationRequest(BaseModel):
    """Raw configuration form; validated by ``analytics.configuration``."""

    data_types: List[str] = Field(default_factory=list, alias="dataTypes")
    timeframe: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)
