"""
Profile API routes.

Route prefix: /api/profile
"""

from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends

from api.dependencies import get_store
from auth.dependencies import get_current_user_id
from database.store import DashboardStore
from business.service import (
    BUSINESS_TYPES,
    INDUSTRIES,
    OnboardingUpdate,
    ProfileUpdate,
    complete_onboarding,
    get_business_profile,
    update_business_profile,
)
from utils.schemas import ActionResult, BusinessProfile

router = APIRouter(tags=["profile"])


@router.get("/options")
async def profile_options() -> Dict[str, List[str]]:
    return {"industries": INDUSTRIES, "business_types": BUSINESS_TYPES}


@router.get("", response_model=BusinessProfile)
async def read_profile(
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
) -> BusinessProfile:
    return await get_business_profile(store, user_id)


@router.put("", response_model=ActionResult)
async def write_profile(
    update: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
) -> ActionResult:
    await update_business_profile(store, user_id, update)
    return ActionResult()


@router.post("/onboarding", response_model=ActionResult)
async def onboarding(
    update: OnboardingUpdate,
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
) -> ActionResult:
    await complete_onboarding(store, user_id, update)
    return ActionResult()
