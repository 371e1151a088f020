"""
Shared fixtures: an in-memory stand-in for ``DashboardStore`` and an app
wired to it.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_store
from auth.jwt import create_token
from connectors.registry import ConnectorRegistry
from connectors.wix import WixConnector
from database.models import ClientProfile, ImportSettings, MetricRow, ProviderToken, User


class FakeStore:
    """Dict-backed implementation of the ``DashboardStore`` surface."""

    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.tokens: Dict[Tuple[str, str], ProviderToken] = {}
        self.settings: Dict[Tuple[str, str], ImportSettings] = {}
        self.metrics: List[MetricRow] = []
        self.profiles: Dict[str, ClientProfile] = {}
        self.commits = 0
        self.rollbacks = 0
        self.token_upserts = 0
        self.settings_upserts = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    # users
    async def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(str(user_id))

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    async def add_user(self, email: str, full_name: str, password_hash: str) -> User:
        user = User(user_id=uuid.uuid4(), email=email, full_name=full_name, password_hash=password_hash)
        self.users[str(user.user_id)] = user
        return user

    async def update_user_name(self, user_id: str, full_name: str) -> None:
        if user_id in self.users:
            self.users[user_id].full_name = full_name

    async def delete_user(self, user_id: str) -> bool:
        if self.users.pop(user_id, None) is None:
            return False
        self.tokens = {k: v for k, v in self.tokens.items() if k[0] != user_id}
        self.settings = {k: v for k, v in self.settings.items() if k[0] != user_id}
        self.metrics = [m for m in self.metrics if str(m.user_id) != user_id]
        self.profiles.pop(user_id, None)
        return True

    # tokens
    async def upsert_token(self, user_id: str, provider: str, access_token: str, refresh_token: str) -> None:
        self.token_upserts += 1
        self.tokens[(user_id, provider)] = ProviderToken(
            user_id=user_id,
            provider=provider,
            access_token=access_token,
            refresh_token=refresh_token,
            created_at=datetime.now(timezone.utc),
        )

    async def get_token(self, user_id: str, provider: str) -> Optional[ProviderToken]:
        return self.tokens.get((user_id, provider))

    async def connected_providers(self, user_id: str) -> Set[str]:
        return {p for (u, p) in self.tokens if u == user_id}

    async def delete_token(self, user_id: str, provider: str) -> int:
        return 1 if self.tokens.pop((user_id, provider), None) is not None else 0

    # import settings
    async def upsert_import_settings(self, user_id: str, provider: str, flags: Dict[str, bool], timeframe: str) -> None:
        self.settings_upserts += 1
        self.settings[(user_id, provider)] = ImportSettings(
            user_id=user_id,
            provider=provider,
            import_timeframe=timeframe,
            is_configured=True,
            **flags,
        )

    async def get_import_settings(self, user_id: str, provider: str) -> Optional[ImportSettings]:
        return self.settings.get((user_id, provider))

    # metrics
    async def delete_metrics(self, user_id: str) -> int:
        before = len(self.metrics)
        self.metrics = [m for m in self.metrics if m.user_id != user_id]
        return before - len(self.metrics)

    async def insert_metrics(self, user_id: str, metric_type: str, points: Iterable[Tuple[date, float]]) -> int:
        rows = [MetricRow(user_id=user_id, metric_type=metric_type, date=d, value=v) for d, v in points]
        self.metrics.extend(rows)
        return len(rows)

    async def list_metrics(self, user_id: str) -> List[MetricRow]:
        return [m for m in self.metrics if m.user_id == user_id]

    # profile
    async def get_profile(self, user_id: str) -> Optional[ClientProfile]:
        return self.profiles.get(user_id)

    async def upsert_profile(self, user_id: str, **fields: Any) -> None:
        profile = self.profiles.get(user_id)
        if profile is None:
            profile = ClientProfile(user_id=user_id, onboarding_step=1)
            self.profiles[user_id] = profile
        for key, value in fields.items():
            setattr(profile, key, value)


USER_ID = "0b6c3f7e-3d0e-4f55-9a51-1b7f4f0c2a11"


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def wix() -> WixConnector:
    return WixConnector(client_id="wix-client", client_secret="", app_base_url="https://app.example.com")


@pytest.fixture
def app(store: FakeStore, wix: WixConnector):
    from main import create_app

    application = create_app(registry=ConnectorRegistry([wix]))
    application.dependency_overrides[get_store] = lambda: store
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, follow_redirects=False)


@pytest.fixture
def auth_headers(user_id: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(user_id, 'owner@example.com')}"}
