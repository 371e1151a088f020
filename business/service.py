"""
Business profile reads and updates.

The profile spans two tables: business details live on ``client_profiles``
and the contact person's name on ``users``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from connectors.errors import UnauthenticatedError
from database.store import DashboardStore
from utils.schemas import BusinessProfile

logger = logging.getLogger(__name__)

INDUSTRIES: List[str] = sorted(["Technology", "Marketing", "Retail", "Healthcare", "Finance", "E-commerce"])
BUSINESS_TYPES: List[str] = sorted(["SaaS", "Agency", "B2B", "B2C", "Marketplace"])

ONBOARDING_COMPLETE = 2


def _check_website(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    if not value.startswith(("http://", "https://")) or "." not in value.split("://", 1)[1]:
        raise ValueError("Please enter a valid URL (e.g., https://example.com)")
    return value


class OnboardingUpdate(BaseModel):
    business_name: str = Field(..., alias="businessName", min_length=2)
    industry: str = Field(..., min_length=1)
    business_type: str = Field(..., alias="businessType", min_length=1)
    website: Optional[str] = None

    model_config = {"populate_by_name": True}

    @field_validator("website")
    @classmethod
    def check_website(cls, value: Optional[str]) -> Optional[str]:
        return _check_website(value)


class ProfileUpdate(OnboardingUpdate):
    full_name: str = Field(..., alias="fullName", min_length=2)


async def get_business_profile(store: DashboardStore, user_id: str) -> BusinessProfile:
    user = await store.get_user(user_id)
    if user is None:
        raise UnauthenticatedError()
    profile = await store.get_profile(user_id)
    return BusinessProfile(
        business_name=profile.business_name if profile else None,
        website=profile.website if profile else None,
        industry=profile.industry if profile else None,
        business_type=profile.business_type if profile else None,
        onboarding_step=profile.onboarding_step if profile else 1,
        full_name=user.full_name,
        email=user.email,
    )


async def complete_onboarding(store: DashboardStore, user_id: str, update: OnboardingUpdate) -> None:
    await store.upsert_profile(
        user_id,
        business_name=update.business_name,
        industry=update.industry,
        business_type=update.business_type,
        website=update.website,
        onboarding_step=ONBOARDING_COMPLETE,
    )
    logger.info("Onboarding completed for user %s", user_id)


async def update_business_profile(store: DashboardStore, user_id: str, update: ProfileUpdate) -> None:
    await store.upsert_profile(
        user_id,
        business_name=update.business_name,
        industry=update.industry,
        business_type=update.business_type,
        website=update.website,
    )
    await store.update_user_name(user_id, update.full_name)
    logger.info("Updated business profile for user %s", user_id)
