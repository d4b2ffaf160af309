"""Stateless action tokens for emailed approve/reject links.

A token is an HMAC over the request id, its creation time and the action,
keyed with a server secret. Nothing is stored: verification recomputes the
token from the request row and compares. A token stops working as soon as
the request leaves PENDING, because the transition guard refuses it.

The token proves that the link was minted for this request and action. It
does not prove who clicked it.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.config import get_settings

if TYPE_CHECKING:
    import uuid

    from app.models.enums import ApprovalAction

TOKEN_LENGTH = 32


def canonical_timestamp(value: datetime) -> str:
    """Render ``created_at`` identically whether or not the driver kept tzinfo."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def issue_token(request_id: uuid.UUID, created_at: datetime, action: ApprovalAction, secret: str | None = None) -> str:
    """Derive the link token for one action on one request."""
    key = (secret or get_settings().approval_token_secret).encode()
    message = f"{request_id}:{canonical_timestamp(created_at)}:{action.value}".encode()
    digest = hmac.new(key, message, hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode().rstrip("=")[:TOKEN_LENGTH]


def verify_token(
    request_id: uuid.UUID,
    created_at: datetime,
    action: ApprovalAction,
    token: str,
    secret: str | None = None,
) -> bool:
    """Constant-time comparison against the recomputed token."""
    expected = issue_token(request_id, created_at, action, secret=secret)
    return hmac.compare_digest(expected.encode(), token.encode())
