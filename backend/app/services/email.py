from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import httpx

from app.config import get_settings
from app.exceptions import NotificationFailedError

if TYPE_CHECKING:
    from app.config import Settings
    from app.schemas.notification import EmailMessage

logger = logging.getLogger(__name__)


@runtime_checkable
class EmailSender(Protocol):
    """Interface for the transactional email provider."""

    async def send(self, message: EmailMessage) -> str:
        """Deliver a message and return the provider's email id.

        Raises ``NotificationFailedError`` when delivery fails.
        """
        ...


class InMemoryEmailSender:
    """Stores messages instead of delivering them. Used in development and tests."""

    def __init__(self, fail_with: str | None = None) -> None:
        self.outbox: list[EmailMessage] = []
        self.fail_with = fail_with

    async def send(self, message: EmailMessage) -> str:
        if self.fail_with is not None:
            raise NotificationFailedError(self.fail_with)
        self.outbox.append(message)
        email_id = str(uuid.uuid4())
        logger.info("Captured email %s to %s: %s", email_id, ", ".join(message.to), message.subject)
        return email_id


class ResendEmailSender:
    """Delivers through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        api_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout
        self._transport = transport

    async def send(self, message: EmailMessage) -> str:
        body = {
            "from": message.sender,
            "to": message.to,
            "subject": message.subject,
            "html": message.html,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._api_url,
                    json=body,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                response.raise_for_status()
            email_id = str(response.json().get("id", ""))
        except httpx.HTTPError as exc:
            raise NotificationFailedError(f"Email provider rejected the message: {exc}") from exc
        except (ValueError, AttributeError) as exc:
            # Delivered or not, a 2xx without a JSON object body gives no email id to report.
            raise NotificationFailedError(f"Email provider returned an unreadable response: {exc}") from exc

        return email_id


def build_email_sender(settings: Settings) -> EmailSender:
    """Create the sender selected by ``settings.email_provider``."""
    if settings.email_provider == "resend":
        if not settings.resend_api_key:
            msg = "RESEND_API_KEY must be set when EMAIL_PROVIDER=resend"
            raise RuntimeError(msg)
        return ResendEmailSender(settings.resend_api_key, settings.resend_api_url, settings.email_timeout_seconds)
    return InMemoryEmailSender()


_email_sender: EmailSender | None = None


def get_email_sender() -> EmailSender:
    """Return the configured email sender, building it on first use."""
    global _email_sender
    if _email_sender is None:
        _email_sender = build_email_sender(get_settings())
    return _email_sender


def set_email_sender(sender: EmailSender | None) -> None:
    """Override the sender (for testing or production wiring). ``None`` resets it."""
    global _email_sender
    _email_sender = sender
