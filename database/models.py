"""
SQLAlchemy ORM models for users, provider connections and imported analytics.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    user_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False)
    full_name = Column(String(128))
    password_hash = Column(String(255), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    tokens = relationship("ProviderToken", cascade="all, delete-orphan", passive_deletes=True)
    import_settings = relationship("ImportSettings", cascade="all, delete-orphan", passive_deletes=True)
    metrics = relationship("MetricRow", cascade="all, delete-orphan", passive_deletes=True)
    profile = relationship("ClientProfile", cascade="all, delete-orphan", passive_deletes=True, uselist=False)


class ProviderToken(Base):
    """One OAuth token pair per (user, provider)."""

    __tablename__ = "provider_tokens"
    __table_args__ = (UniqueConstraint("user_id", "provider", name="uq_provider_tokens_user_provider"),)

    token_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    provider = Column(String(32), nullable=False)
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)


class ImportSettings(Base):
    __tablename__ = "import_settings"
    __table_args__ = (UniqueConstraint("user_id", "provider", name="uq_import_settings_user_provider"),)

    settings_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    provider = Column(String(32), nullable=False)
    import_site_sessions = Column(Boolean, nullable=False, default=False)
    import_total_sales = Column(Boolean, nullable=False, default=False)
    import_bookings = Column(Boolean, nullable=False, default=False)
    import_timeframe = Column(Text, nullable=False)
    is_configured = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow)


class MetricRow(Base):
    __tablename__ = "analytics_data"
    __table_args__ = (Index("ix_analytics_data_user_date", "user_id", "date"),)

    row_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    metric_type = Column(String(32), nullable=False)
    date = Column(Date, nullable=False)
    value = Column(Numeric, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class ClientProfile(Base):
    __tablename__ = "client_profiles"

    profile_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False)
    business_name = Column(String(255))
    business_type = Column(String(128))
    website = Column(String(512))
    industry = Column(String(128))
    onboarding_step = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
