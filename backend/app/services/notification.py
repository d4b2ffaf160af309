from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from app.config import get_settings
from app.exceptions import NotificationFailedError
from app.models.enums import ApprovalAction, ApprovalType
from app.schemas.approval import public_request_data
from app.schemas.notification import EmailMessage, NotificationPayload
from app.services.email import get_email_sender
from app.services.tokens import issue_token
from app.templating import render

if TYPE_CHECKING:
    from app.models.approval import ApprovalRequest
    from app.models.org import Profile
    from app.services.email import EmailSender

logger = logging.getLogger(__name__)


def action_url(request: ApprovalRequest, action: ApprovalAction) -> str:
    """Build the emailed link that performs ``action`` on ``request``."""
    settings = get_settings()
    query = urlencode(
        {
            "id": str(request.id),
            "action": action.value,
            "token": issue_token(request.id, request.created_at, action),
        }
    )
    return f"{settings.public_base_url.rstrip('/')}/approvals/action?{query}"


def build_payload(
    request: ApprovalRequest,
    approver: Profile,
    requester_name: str,
    requester_email: str | None,
) -> NotificationPayload:
    return NotificationPayload(
        type=ApprovalType(request.type),
        requester_name=requester_name,
        requester_email=requester_email,
        approver_email=approver.email,
        approver_name=approver.full_name,
        details=public_request_data(request.request_data or {}),
        approval_id=request.id,
    )


def render_message(request: ApprovalRequest, payload: NotificationPayload) -> EmailMessage:
    """Pick the template for the request type and render it.

    Time-off requests carry approve and reject links. Profile creation is an
    informational notice only; those are decided in the admin panel.
    """
    settings = get_settings()
    context = {
        "approver_name": payload.approver_name,
        "requester_name": payload.requester_name,
        "requester_email": payload.requester_email,
        "details": payload.details,
        "type_label": payload.type.label,
    }

    if payload.type.is_time_off:
        subject = f"{payload.type.label} Request - {payload.details.get('employee_name', '')}"
        html = render(
            "email/time_off_request.html",
            heading=f"{payload.type.label} Request",
            approve_url=action_url(request, ApprovalAction.APPROVE),
            reject_url=action_url(request, ApprovalAction.REJECT),
            **context,
        )
    else:
        subject = f"New Profile Creation Request - {payload.requester_name}"
        html = render("email/profile_creation_request.html", heading="New Profile Creation Request", **context)

    return EmailMessage(to=[payload.approver_email], subject=subject, html=html, sender=settings.email_from)


async def send_approval_notification(
    request: ApprovalRequest,
    approver: Profile,
    requester_name: str,
    requester_email: str | None,
    sender: EmailSender | None = None,
) -> str:
    """Email the approver about a pending request and return the email id.

    Raises ``NotificationFailedError``; the caller decides how to surface it.
    The request is already committed and is never rolled back here.
    """
    payload = build_payload(request, approver, requester_name, requester_email)
    message = render_message(request, payload)
    sender = sender or get_email_sender()

    logger.info("Sending %s approval email to %s", payload.type.value, payload.approver_email)
    try:
        email_id = await sender.send(message)
    except NotificationFailedError as exc:
        logger.warning("Approval email for request %s failed: %s", request.id, exc.message)
        raise
    logger.info("Approval email %s sent for request %s", email_id, request.id)
    return email_id
