"""
DashboardStore — the backend client every operation receives explicitly.

Wraps one request-scoped ``AsyncSession``.  All per-user 1:1 records
(tokens, import settings) are written with keyed upserts on
``(user_id, provider)``; connection-level failures surface as
``BackendUnavailableError``.
"""

from __future__ import annotations

import functools
import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set, Tuple, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from connectors.errors import BackendUnavailableError
from database.models import ClientProfile, ImportSettings, MetricRow, ProviderToken, User

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    return uuid.UUID(value) if isinstance(value, str) else value


def _storage_call(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Translate driver / network failures into ``BackendUnavailableError``."""

    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return await fn(*args, **kwargs)
        except (OperationalError, InterfaceError, OSError) as exc:
            logger.error("Storage call %s failed: %s", fn.__name__, exc)
            raise BackendUnavailableError() from exc

    return wrapper


class DashboardStore:
    """Typed access to the dashboard tables over a single session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    @_storage_call
    async def commit(self) -> None:
        await self.session.commit()

    @_storage_call
    async def rollback(self) -> None:
        await self.session.rollback()

    # ── Users ───────────────────────────────────────────────────────────

    @_storage_call
    async def get_user(self, user_id: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.user_id == _to_uuid(user_id)))
        return result.scalar_one_or_none()

    @_storage_call
    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @_storage_call
    async def add_user(self, email: str, full_name: str, password_hash: str) -> User:
        user = User(
            user_id=uuid.uuid4(),
            email=email,
            full_name=full_name,
            password_hash=password_hash,
        )
        self.session.add(user)
        await self.session.flush()
        return user

    @_storage_call
    async def update_user_name(self, user_id: str, full_name: str) -> None:
        user = await self.get_user(user_id)
        if user is not None:
            user.full_name = full_name
            await self.session.flush()

    @_storage_call
    async def delete_user(self, user_id: str) -> bool:
        result = await self.session.execute(delete(User).where(User.user_id == _to_uuid(user_id)))
        return result.rowcount > 0

    # ── Tokens ──────────────────────────────────────────────────────────

    @_storage_call
    async def upsert_token(self, user_id: str, provider: str, access_token: str, refresh_token: str) -> None:
        now = datetime.now(timezone.utc)
        stmt = pg_insert(ProviderToken).values(
            user_id=_to_uuid(user_id),
            provider=provider,
            access_token=access_token,
            refresh_token=refresh_token,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "provider"],
            set_={
                "access_token": stmt.excluded.access_token,
                "refresh_token": stmt.excluded.refresh_token,
                "updated_at": now,
            },
        )
        await self.session.execute(stmt)
        await self.session.flush()

    @_storage_call
    async def get_token(self, user_id: str, provider: str) -> Optional[ProviderToken]:
        result = await self.session.execute(
            select(ProviderToken).where(
                ProviderToken.user_id == _to_uuid(user_id),
                ProviderToken.provider == provider,
            )
        )
        return result.scalar_one_or_none()

    @_storage_call
    async def connected_providers(self, user_id: str) -> Set[str]:
        result = await self.session.execute(
            select(ProviderToken.provider).where(ProviderToken.user_id == _to_uuid(user_id))
        )
        return set(result.scalars().all())

    @_storage_call
    async def delete_token(self, user_id: str, provider: str) -> int:
        result = await self.session.execute(
            delete(ProviderToken).where(
                ProviderToken.user_id == _to_uuid(user_id),
                ProviderToken.provider == provider,
            )
        )
        return result.rowcount

    # ── Import settings ─────────────────────────────────────────────────

    @_storage_call
    async def upsert_import_settings(
        self,
        user_id: str,
        provider: str,
        flags: Dict[str, bool],
        timeframe: str,
    ) -> None:
        """Overwrite the user's settings row wholesale, marking it configured."""
        now = datetime.now(timezone.utc)
        values = {
            "user_id": _to_uuid(user_id),
            "provider": provider,
            "import_timeframe": timeframe,
            "is_configured": True,
            "updated_at": now,
            **flags,
        }
        stmt = pg_insert(ImportSettings).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "provider"],
            set_={k: v for k, v in values.items() if k not in ("user_id", "provider")},
        )
        await self.session.execute(stmt)
        await self.session.flush()

    @_storage_call
    async def get_import_settings(self, user_id: str, provider: str) -> Optional[ImportSettings]:
        result = await self.session.execute(
            select(ImportSettings).where(
                ImportSettings.user_id == _to_uuid(user_id),
                ImportSettings.provider == provider,
            )
        )
        return result.scalar_one_or_none()

    # ── Metric rows ─────────────────────────────────────────────────────

    @_storage_call
    async def delete_metrics(self, user_id: str) -> int:
        result = await self.session.execute(delete(MetricRow).where(MetricRow.user_id == _to_uuid(user_id)))
        return result.rowcount

    @_storage_call
    async def insert_metrics(
        self,
        user_id: str,
        metric_type: str,
        points: Iterable[Tuple[date, float]],
    ) -> int:
        uid = _to_uuid(user_id)
        rows = [MetricRow(user_id=uid, metric_type=metric_type, date=d, value=v) for d, v in points]
        self.session.add_all(rows)
        await self.session.flush()
        return len(rows)

    @_storage_call
    async def list_metrics(self, user_id: str) -> List[MetricRow]:
        result = await self.session.execute(
            select(MetricRow)
            .where(MetricRow.user_id == _to_uuid(user_id))
            .order_by(MetricRow.date.asc(), MetricRow.metric_type.asc())
        )
        return list(result.scalars().all())

    # ── Business profile ────────────────────────────────────────────────

    @_storage_call
    async def get_profile(self, user_id: str) -> Optional[ClientProfile]:
        result = await self.session.execute(
            select(ClientProfile).where(ClientProfile.user_id == _to_uuid(user_id))
        )
        return result.scalar_one_or_none()

    @_storage_call
    async def upsert_profile(self, user_id: str, **fields: Any) -> None:
        values = {"user_id": _to_uuid(user_id), **fields}
        stmt = pg_insert(ClientProfile).values(**values)
        stmt = stmt.on_conflict_do_update(index_elements=["user_id"], set_=fields)
        await self.session.execute(stmt)
        await self.session.flush()
