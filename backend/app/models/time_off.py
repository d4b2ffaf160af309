# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import TimestampMixin, UUIDBase
from app.models.enums import TimeOffEntryStatus


class TimeOffEntry(UUIDBase, TimestampMixin, table=True):
    """Calendar entry materialized from an approved time-off request.

    At most one entry exists per approval request, which makes
    materialization safe to re-run.
    """

    __tablename__ = "time_off_entry"
    __table_args__ = (sa.UniqueConstraint("approval_request_id", name="uq_time_off_entry_approval"),)

    approval_request_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("approval_request.id", ondelete="CASCADE"), nullable=False),
    )
    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    start_date: date
    end_date: date
    type: str = Field(max_length=50)
    notes: str | None = Field(default=None, max_length=500)
    status: str = Field(default=TimeOffEntryStatus.APPROVED, max_length=50)
