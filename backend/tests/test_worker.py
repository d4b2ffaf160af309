from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from app.models.approval import ApprovalRequest
from app.models.enums import ApprovalStatus, ApprovalType
from app.models.time_off import TimeOffEntry
from app.worker import report_unmaterialized

if TYPE_CHECKING:
    import pytest
    from conftest import Org
    from sqlalchemy.ext.asyncio import AsyncSession


def _approved(approval_type: ApprovalType) -> ApprovalRequest:
    return ApprovalRequest(
        type=approval_type,
        requester_id=uuid.uuid4(),
        status=ApprovalStatus.APPROVED,
        approved_at=datetime(2026, 2, 1, tzinfo=UTC),
    )


async def test_reports_only_approved_time_off_without_entry(
    db_session: AsyncSession, org: Org, caplog: pytest.LogCaptureFixture
) -> None:
    missing = _approved(ApprovalType.SICK_LEAVE)
    done = _approved(ApprovalType.TIME_OFF)
    signup = _approved(ApprovalType.PROFILE_CREATION)
    pending = ApprovalRequest(type=ApprovalType.TIME_OFF, requester_id=uuid.uuid4())
    db_session.add_all([missing, done, signup, pending])
    await db_session.flush()
    db_session.add(
        TimeOffEntry(
            approval_request_id=done.id,
            employee_id=org.employee.id,
            start_date=date(2026, 2, 2),
            end_date=date(2026, 2, 2),
            type="personal",
        )
    )
    await db_session.commit()

    with caplog.at_level(logging.WARNING, logger="app.worker"):
        count = await report_unmaterialized(db_session)

    assert count == 1
    assert str(missing.id) in caplog.text
    assert str(done.id) not in caplog.text


async def test_nothing_to_report(db_session: AsyncSession) -> None:
    assert await report_unmaterialized(db_session) == 0
