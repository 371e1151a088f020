"""
Auth API routes — register, login, delete account.

Route prefix: /api/auth
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, model_validator

from api.dependencies import get_store
from auth.dependencies import get_current_user_id
from auth.jwt import create_token
from auth.password import hash_password, verify_password
from connectors.errors import UnauthenticatedError
from database.store import DashboardStore
from utils.schemas import ActionResult

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────


class RegisterRequest(BaseModel):
    full_name: str = Field(..., alias="fullName", min_length=2, max_length=128)
    email: str = Field(..., min_length=5, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str = Field(..., alias="confirmPassword")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match.")
        return self


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    user_id: str
    full_name: str
    email: str
    token: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse)
async def register(
    req: RegisterRequest,
    store: DashboardStore = Depends(get_store),
) -> Dict[str, Any]:
    """Register a new user and open their onboarding profile."""
    if await store.get_user_by_email(req.email) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    user = await store.add_user(req.email, req.full_name, hash_password(req.password))
    user_id = str(user.user_id)
    await store.upsert_profile(user_id, onboarding_step=1)

    logger.info("Registered user %s", user_id)
    return {
        "user_id": user_id,
        "full_name": user.full_name,
        "email": user.email,
        "token": create_token(user_id, user.email),
    }


@router.post("/login", response_model=AuthResponse)
async def login(
    req: LoginRequest,
    store: DashboardStore = Depends(get_store),
) -> Dict[str, Any]:
    """Login with email + password."""
    user = await store.get_user_by_email(req.email)
    if user is None or not verify_password(req.password, user.password_hash):
        raise UnauthenticatedError("Invalid email or password")

    user_id = str(user.user_id)
    logger.info("Login: %s", user_id)
    return {
        "user_id": user_id,
        "full_name": user.full_name or "",
        "email": user.email,
        "token": create_token(user_id, user.email),
    }


@router.delete("/account", response_model=ActionResult)
async def delete_account(
    user_id: str = Depends(get_current_user_id),
    store: DashboardStore = Depends(get_store),
) -> ActionResult:
    """Delete the signed-in user; tokens, settings, metrics and profile cascade."""
    if not await store.delete_user(user_id):
        raise UnauthenticatedError("Account not found.")
    logger.info("Deleted account %s", user_id)
    return ActionResult()
