from __future__ import annotations

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Timezone-aware current time. Every stored timestamp is UTC."""
    return datetime.now(UTC)


class UUIDBase(SQLModel):
    """Random UUID primary key, generated client-side so ids exist before flush."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, sa_type=sa.Uuid)


class TimestampMixin(SQLModel):
    """Adds ``created_at``. Approval tokens are derived from it, so it is never rewritten."""

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
