from __future__ import annotations

import re
import uuid
from datetime import UTC, datetime

from app.models.enums import ApprovalAction
from app.services.tokens import TOKEN_LENGTH, canonical_timestamp, issue_token, verify_token

REQUEST_ID = uuid.UUID("6f1c1f0e-8d5e-4c53-9a55-3a0f5f2f7c11")
CREATED_AT = datetime(2026, 5, 4, 9, 30, 12, 345678, tzinfo=UTC)
SECRET = "test-secret"


def test_token_is_deterministic_and_urlsafe() -> None:
    first = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret=SECRET)
    second = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret=SECRET)
    assert first == second
    assert len(first) == TOKEN_LENGTH
    assert re.fullmatch(r"[A-Za-z0-9_-]+", first)


def test_token_is_bound_to_action() -> None:
    approve = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret=SECRET)
    reject = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.REJECT, secret=SECRET)
    assert approve != reject
    assert not verify_token(REQUEST_ID, CREATED_AT, ApprovalAction.REJECT, approve, secret=SECRET)


def test_token_is_bound_to_request_and_creation_time() -> None:
    token = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret=SECRET)
    assert not verify_token(uuid.uuid4(), CREATED_AT, ApprovalAction.APPROVE, token, secret=SECRET)
    later = CREATED_AT.replace(microsecond=345679)
    assert not verify_token(REQUEST_ID, later, ApprovalAction.APPROVE, token, secret=SECRET)


def test_token_depends_on_secret() -> None:
    token = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret=SECRET)
    assert token != issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret="other")
    assert verify_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, token, secret=SECRET)


def test_tampered_token_is_rejected() -> None:
    token = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret=SECRET)
    tampered = ("A" if token[0] != "A" else "B") + token[1:]
    assert not verify_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, tampered, secret=SECRET)
    assert not verify_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, "", secret=SECRET)


def test_naive_timestamp_is_treated_as_utc() -> None:
    naive = CREATED_AT.replace(tzinfo=None)
    assert canonical_timestamp(naive) == canonical_timestamp(CREATED_AT)
    token = issue_token(REQUEST_ID, CREATED_AT, ApprovalAction.APPROVE, secret=SECRET)
    assert verify_token(REQUEST_ID, naive, ApprovalAction.APPROVE, token, secret=SECRET)
