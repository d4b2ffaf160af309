# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel

from app.models.enums import ApprovalType


class NotificationPayload(BaseModel):
    """Everything the email collaborator needs to notify an approver."""

    type: ApprovalType
    requester_name: str
    requester_email: str | None
    approver_email: str
    approver_name: str
    details: dict[str, Any]
    approval_id: uuid.UUID


class EmailMessage(BaseModel):
    """A rendered email ready for delivery."""

    to: list[str]
    subject: str
    html: str
    sender: str
