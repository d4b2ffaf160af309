from __future__ import annotations

import uuid
from datetime import UTC, datetime
from urllib.parse import parse_qs, urlsplit

import pytest

from app.exceptions import NotificationFailedError
from app.models.approval import ApprovalRequest
from app.models.enums import ApprovalAction, ApprovalType, UserRole
from app.models.org import Profile
from app.services.email import InMemoryEmailSender
from app.services.notification import action_url, build_payload, render_message, send_approval_notification
from app.services.tokens import verify_token

CREATED_AT = datetime(2026, 4, 1, 8, 0, 0, 123456, tzinfo=UTC)


def _approver() -> Profile:
    return Profile(
        user_id=uuid.uuid4(),
        email="store.manager@example.com",
        full_name="Sam Store",
        role=UserRole.STORE_MANAGER,
    )


def _time_off_request() -> ApprovalRequest:
    return ApprovalRequest(
        type=ApprovalType.SICK_LEAVE,
        requester_id=uuid.uuid4(),
        approver_id=uuid.uuid4(),
        created_at=CREATED_AT,
        request_data={
            "kind": "time_off",
            "employee_id": str(uuid.uuid4()),
            "employee_name": "Jane Doe",
            "store_id": str(uuid.uuid4()),
            "store_name": "Downtown",
            "start_date": "2026-04-06",
            "end_date": "2026-04-07",
            "subtype": "sick",
            "notes": "Flu <b>bad</b>",
        },
    )


def _signup_request() -> ApprovalRequest:
    return ApprovalRequest(
        type=ApprovalType.PROFILE_CREATION,
        created_at=CREATED_AT,
        request_data={
            "kind": "profile_creation",
            "email": "new.hire@example.com",
            "password": "s3cret-pass",
            "full_name": "New Hire",
            "role": "store_manager",
            "company_id": None,
            "brand_ids": [],
            "store_id": None,
        },
    )


def test_action_url_carries_a_valid_token() -> None:
    request = _time_off_request()
    url = action_url(request, ApprovalAction.REJECT)

    parts = urlsplit(url)
    query = parse_qs(parts.query)
    assert parts.path == "/approvals/action"
    assert query["id"] == [str(request.id)]
    assert query["action"] == ["reject"]
    assert verify_token(request.id, CREATED_AT, ApprovalAction.REJECT, query["token"][0])


def test_time_off_email_has_both_links() -> None:
    request = _time_off_request()
    payload = build_payload(request, _approver(), "Riley Requester", "riley@example.com")

    message = render_message(request, payload)

    assert message.to == ["store.manager@example.com"]
    assert message.subject == "SICK LEAVE Request - Jane Doe"
    assert "action=approve" in message.html
    assert "action=reject" in message.html
    assert "Riley Requester" in message.html
    assert "Hello Sam Store" in message.html
    # User-supplied notes are escaped.
    assert "<b>bad</b>" not in message.html
    assert "&lt;b&gt;bad&lt;/b&gt;" in message.html


def test_signup_email_has_no_links_and_no_password() -> None:
    request = _signup_request()
    payload = build_payload(request, _approver(), "New Hire", "new.hire@example.com")

    message = render_message(request, payload)

    assert message.subject == "New Profile Creation Request - New Hire"
    assert "/approvals/action" not in message.html
    assert "s3cret-pass" not in message.html
    assert "password" not in payload.details
    assert "admin panel" in message.html


async def test_send_records_message() -> None:
    sender = InMemoryEmailSender()

    email_id = await send_approval_notification(_time_off_request(), _approver(), "Riley", None, sender=sender)

    assert email_id
    assert len(sender.outbox) == 1


async def test_send_failure_propagates() -> None:
    sender = InMemoryEmailSender(fail_with="provider down")

    with pytest.raises(NotificationFailedError, match="provider down"):
        await send_approval_notification(_time_off_request(), _approver(), "Riley", None, sender=sender)
    assert sender.outbox == []
