from __future__ import annotations

import uuid
from datetime import date

from app.models import SQLModel
from app.models.approval import ApprovalRequest
from app.models.enums import ApprovalAction, ApprovalStatus, ApprovalType, TimeOffEntryStatus
from app.models.time_off import TimeOffEntry

EXPECTED_TABLES = {
    "approval_request",
    "audit_log",
    "brand",
    "company",
    "employee",
    "profile",
    "store",
    "time_off_entry",
    "user_brand",
}


def test_all_tables_registered() -> None:
    assert EXPECTED_TABLES.issubset(SQLModel.metadata.tables.keys())


def test_approval_request_defaults_to_pending() -> None:
    request = ApprovalRequest(type=ApprovalType.TIME_OFF)
    assert request.status == ApprovalStatus.PENDING
    assert request.request_data == {}
    assert request.approved_at is None
    assert request.rejected_at is None
    assert request.created_at.tzinfo is not None


def test_time_off_entry_defaults_to_approved() -> None:
    entry = TimeOffEntry(
        approval_request_id=uuid.uuid4(),
        employee_id=uuid.uuid4(),
        start_date=date(2026, 3, 2),
        end_date=date(2026, 3, 4),
        type="vacation",
    )
    assert entry.status == TimeOffEntryStatus.APPROVED


def test_time_off_entry_is_unique_per_request() -> None:
    table = SQLModel.metadata.tables["time_off_entry"]
    unique_columns = [
        {c.name for c in constraint.columns}
        for constraint in table.constraints
        if constraint.__class__.__name__ == "UniqueConstraint"
    ]
    assert {"approval_request_id"} in unique_columns


def test_time_off_family() -> None:
    assert ApprovalType.SICK_LEAVE.is_time_off
    assert ApprovalType.ANNUAL_LEAVE.is_time_off
    assert not ApprovalType.PROFILE_CREATION.is_time_off
    assert ApprovalType.SICK_LEAVE.label == "SICK LEAVE"


def test_action_outcomes() -> None:
    assert ApprovalAction.APPROVE.outcome is ApprovalStatus.APPROVED
    assert ApprovalAction.REJECT.outcome is ApprovalStatus.REJECTED
