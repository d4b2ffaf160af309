"""Tests for the account provider and email sender stubs."""

from __future__ import annotations

import json
import uuid

import httpx
import pytest

from app.config import Settings
from app.exceptions import NotificationFailedError
from app.schemas.notification import EmailMessage
from app.services.accounts import AuthAccount, InMemoryAccountProvider
from app.services.email import (
    InMemoryEmailSender,
    ResendEmailSender,
    build_email_sender,
    get_email_sender,
    set_email_sender,
)


def _message() -> EmailMessage:
    return EmailMessage(to=["a@example.com"], subject="Hi", html="<p>Hi</p>", sender="HR <hr@example.com>")


# ---------------------------------------------------------------------------
# InMemoryAccountProvider
# ---------------------------------------------------------------------------


async def test_account_lookup_not_found() -> None:
    provider = InMemoryAccountProvider()
    assert await provider.get_account_by_email("nobody@example.com") is None


async def test_account_seed_and_lookup_ignores_case() -> None:
    provider = InMemoryAccountProvider()
    account = AuthAccount(user_id=uuid.uuid4(), email="pat@example.com", full_name="Pat")
    provider.seed(account)

    assert await provider.get_account_by_email("PAT@example.com") == account


async def test_create_account_is_idempotent() -> None:
    provider = InMemoryAccountProvider()

    first = await provider.create_account("New@Example.com", "s3cret-pass", "New Hire")
    second = await provider.create_account("new@example.com", "other-pass", "New Hire")

    assert first.user_id == second.user_id
    assert first.email == "new@example.com"


# ---------------------------------------------------------------------------
# Email senders
# ---------------------------------------------------------------------------


async def test_in_memory_sender_captures() -> None:
    sender = InMemoryEmailSender()
    email_id = await sender.send(_message())
    assert email_id
    assert sender.outbox == [_message()]


async def test_in_memory_sender_failure() -> None:
    sender = InMemoryEmailSender(fail_with="boom")
    with pytest.raises(NotificationFailedError) as exc_info:
        await sender.send(_message())
    assert exc_info.value.status_code == 502


def test_build_memory_sender() -> None:
    assert isinstance(build_email_sender(Settings(email_provider="memory")), InMemoryEmailSender)


def test_build_resend_sender_requires_key() -> None:
    with pytest.raises(RuntimeError, match="RESEND_API_KEY"):
        build_email_sender(Settings(email_provider="resend", resend_api_key=None))
    sender = build_email_sender(Settings(email_provider="resend", resend_api_key="re_test"))
    assert isinstance(sender, ResendEmailSender)


def test_set_email_sender_overrides(outbox: InMemoryEmailSender) -> None:
    assert get_email_sender() is outbox
    replacement = InMemoryEmailSender()
    set_email_sender(replacement)
    assert get_email_sender() is replacement


async def test_resend_sender_posts_message() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "email_123"})

    sender = ResendEmailSender("re_test", "https://api.resend.test/emails", transport=httpx.MockTransport(handler))

    assert await sender.send(_message()) == "email_123"
    assert seen[0].headers["Authorization"] == "Bearer re_test"
    assert json.loads(seen[0].content)["subject"] == "Hi"


async def test_resend_sender_wraps_http_errors() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "bad from"}))
    sender = ResendEmailSender("re_test", "https://api.resend.test/emails", transport=transport)

    with pytest.raises(NotificationFailedError):
        await sender.send(_message())


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"}),
        httpx.Response(200, json=["email_123"]),
    ],
)
async def test_resend_sender_unreadable_success_body(response: httpx.Response) -> None:
    sender = ResendEmailSender(
        "re_test", "https://api.resend.test/emails", transport=httpx.MockTransport(lambda request: response)
    )

    with pytest.raises(NotificationFailedError, match="unreadable"):
        await sender.send(_message())
