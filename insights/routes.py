"""
Insights API routes.

Route prefix: /api/insights
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth.dependencies import get_current_user_id
from insights.flows import generate_business_forecasts, prioritize_business_areas
from utils.llm_providers import BaseLLMProvider, get_llm_provider
from utils.schemas import ForecastOutput, ForecastRequest, PrioritizeOutput, PrioritizeRequest

router = APIRouter(tags=["insights"])


def get_llm() -> BaseLLMProvider:
    return get_llm_provider()


@router.post("/forecasts", response_model=ForecastOutput)
async def forecasts(
    request: ForecastRequest,
    _user_id: str = Depends(get_current_user_id),
    llm: BaseLLMProvider = Depends(get_llm),
) -> ForecastOutput:
    return await generate_business_forecasts(request, llm)


@router.post("/priorities", response_model=PrioritizeOutput)
async def priorities(
    request: PrioritizeRequest,
    _user_id: str = Depends(get_current_user_id),
    llm: BaseLLMProvider = Depends(get_llm),
) -> PrioritizeOutput:
    return await prioritize_business_areas(request, llm)
