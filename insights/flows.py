"""
Insight flows — one prompt, one structured reply each.
"""

from __future__ import annotations

import logging
from typing import Optional

from config.settings import config
from connectors.errors import DashboardError
from insights.prompts import build_forecast_prompt, build_prioritize_prompt
from utils.llm_providers import BaseLLMProvider, get_llm_provider
from utils.schemas import ForecastOutput, ForecastRequest, PrioritizeOutput, PrioritizeRequest

logger = logging.getLogger(__name__)


class InsightInputError(DashboardError):
    code = "invalid_insight_input"
    status_code = 422
    default_message = "All fields are required."


class InsightGenerationError(DashboardError):
    code = "insight_failed"
    status_code = 502
    default_message = "Failed to generate business forecasts. Please try again."


async def generate_business_forecasts(
    request: ForecastRequest,
    llm: Optional[BaseLLMProvider] = None,
) -> ForecastOutput:
    if not (request.historical_data.strip() and request.market_trends.strip() and request.business_description.strip()):
        raise InsightInputError()

    llm = llm or get_llm_provider()
    prompt = build_forecast_prompt(
        request.historical_data,
        request.market_trends,
        request.business_description,
    )
    try:
        return await llm.generate_structured(prompt, ForecastOutput, temperature=config.insights_temperature)
    except Exception as exc:
        logger.error("Error generating forecasts: %s", exc, exc_info=True)
        raise InsightGenerationError() from exc


async def prioritize_business_areas(
    request: PrioritizeRequest,
    llm: Optional[BaseLLMProvider] = None,
) -> PrioritizeOutput:
    if not request.business_data.strip():
        raise InsightInputError("Business data is required.")

    llm = llm or get_llm_provider()
    try:
        return await llm.generate_structured(
            build_prioritize_prompt(request.business_data),
            PrioritizeOutput,
            temperature=config.insights_temperature,
        )
    except Exception as exc:
        logger.error("Error prioritizing business areas: %s", exc, exc_info=True)
        raise InsightGenerationError("Failed to prioritize business areas. Please try again.") from exc
