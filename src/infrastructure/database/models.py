"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from domain.entities.profile import MAX_IDENTITY_LENGTH, utc_now


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """Registered profile, one row per identity."""

    __tablename__ = "registry_profiles"
    __table_args__ = (
        CheckConstraint("view_count >= 0", name="ck_registry_profiles_view_count"),
        CheckConstraint("updated_at >= created_at", name="ck_registry_profiles_timestamps"),
    )

    identity: Mapped[str] = mapped_column(String(MAX_IDENTITY_LENGTH), primary_key=True)
    handle: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)
    content_pointer: Mapped[str] = mapped_column(String(512), nullable=False)
    roster_position: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)


class ProfileEventModel(Base):
    """Append-only log of registry facts."""

    __tablename__ = "registry_events"
    __table_args__ = (
        Index("ix_registry_events_identity_created", "identity", text("created_at DESC")),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    kind: Mapped[str] = mapped_column(
        String(20),
        CheckConstraint("kind IN ('created', 'updated', 'view_recorded')"),
        nullable=False,
    )
    identity: Mapped[str] = mapped_column(String(MAX_IDENTITY_LENGTH), nullable=False)
    actor: Mapped[str | None] = mapped_column(String(MAX_IDENTITY_LENGTH))
    payload: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utc_now)
