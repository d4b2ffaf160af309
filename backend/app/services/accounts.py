# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class AuthAccount(BaseModel):
    """A login account held by the authentication provider."""

    user_id: uuid.UUID
    email: str
    full_name: str


@runtime_checkable
class AccountProvider(Protocol):
    """Interface for the authentication provider's admin API."""

    async def get_account_by_email(self, email: str) -> AuthAccount | None:
        """Fetch an account by email. Returns None if not found.

        Raises ``AccountProviderError`` when the provider cannot be reached.
        """
        ...

    async def create_account(self, email: str, password: str, full_name: str) -> AuthAccount:
        """Create a confirmed account and return it.

        Raises ``AccountProviderError`` when the provider refuses or fails.
        """
        ...


class InMemoryAccountProvider:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._accounts: dict[str, AuthAccount] = {}
        self._passwords: dict[str, str] = {}

    def seed(self, account: AuthAccount) -> None:
        """Seed an account for testing."""
        self._accounts[account.email.lower()] = account

    async def get_account_by_email(self, email: str) -> AuthAccount | None:
        """Fetch an account by email. Returns None if not found."""
        return self._accounts.get(email.lower())

    async def create_account(self, email: str, password: str, full_name: str) -> AuthAccount:
        """Create an account, or return the existing one for this email."""
        existing = self._accounts.get(email.lower())
        if existing is not None:
            return existing
        account = AuthAccount(user_id=uuid.uuid4(), email=email.lower(), full_name=full_name)
        self._accounts[account.email] = account
        self._passwords[account.email] = password
        return account


_account_provider: AccountProvider = InMemoryAccountProvider()


def get_account_provider() -> AccountProvider:
    """Return the configured account provider."""
    return _account_provider


def set_account_provider(provider: AccountProvider) -> None:
    """Override the provider (for testing or production wiring)."""
    global _account_provider
    _account_provider = provider
