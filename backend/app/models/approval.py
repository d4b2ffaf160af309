# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import TimestampMixin, UUIDBase
from app.models.enums import ApprovalStatus


class ApprovalRequest(UUIDBase, TimestampMixin, table=True):
    """A pending decision that an approver resolves out of band.

    ``created_at`` is part of the action-token derivation and must never be
    rewritten after insert.
    """

    __tablename__ = "approval_request"
    __table_args__ = (sa.Index("ix_approval_request_type_status", "type", "status"),)

    type: str = Field(max_length=50)
    requester_id: uuid.UUID | None = Field(default=None, index=True)
    approver_id: uuid.UUID | None = Field(default=None, index=True)
    request_data: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
    status: str = Field(
        default=ApprovalStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    approved_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    rejected_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    updated_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
