from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.db import get_session
from app.main import app
from app.models import SQLModel
from app.models.enums import UserRole
from app.models.org import Brand, Company, Employee, Profile, Store, UserBrand
from app.services.accounts import InMemoryAccountProvider, set_account_provider
from app.services.email import InMemoryEmailSender, set_email_sender

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
    from datetime import datetime
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine

    MakeProfile = Callable[..., Awaitable[Profile]]


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """A fresh SQLite database file per test, with every table created."""
    _engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Session used by tests to seed rows and call services directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncClient]:
    """Async HTTP client whose requests each get their own session, as in production."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def outbox() -> Iterator[InMemoryEmailSender]:
    """Capture outgoing email for every test."""
    sender = InMemoryEmailSender()
    set_email_sender(sender)
    yield sender
    set_email_sender(None)


@pytest.fixture(autouse=True)
def account_provider() -> Iterator[InMemoryAccountProvider]:
    provider = InMemoryAccountProvider()
    set_account_provider(provider)
    yield provider
    set_account_provider(InMemoryAccountProvider())


# ---------------------------------------------------------------------------
# Organization fixtures
# ---------------------------------------------------------------------------


@dataclass
class Org:
    company: Company
    brand: Brand
    store: Store
    employee: Employee


@pytest.fixture
async def org(db_session: AsyncSession) -> Org:
    """One company with a branded store and one employee. No profiles."""
    company = Company(name="Acme Retail")
    db_session.add(company)
    await db_session.flush()

    brand = Brand(company_id=company.id, name="Acme Outdoor")
    db_session.add(brand)
    await db_session.flush()

    store = Store(company_id=company.id, brand_id=brand.id, name="Downtown")
    db_session.add(store)
    await db_session.flush()

    employee = Employee(store_id=store.id, company_id=company.id, name="Jane Doe")
    db_session.add(employee)
    await db_session.commit()
    return Org(company=company, brand=brand, store=store, employee=employee)


@pytest.fixture
def make_profile(db_session: AsyncSession) -> MakeProfile:
    """Factory that inserts and commits a profile."""

    async def _make(
        role: UserRole,
        *,
        full_name: str = "Pat Manager",
        email: str | None = None,
        company_id: uuid.UUID | None = None,
        brand_id: uuid.UUID | None = None,
        store_id: uuid.UUID | None = None,
        assigned_brands: tuple[uuid.UUID, ...] = (),
        created_at: datetime | None = None,
    ) -> Profile:
        user_id = uuid.uuid4()
        profile = Profile(
            user_id=user_id,
            email=email or f"{role.value}-{user_id.hex[:8]}@example.com",
            full_name=full_name,
            role=role.value,
            company_id=company_id,
            brand_id=brand_id,
            store_id=store_id,
        )
        if created_at is not None:
            profile.created_at = created_at
        db_session.add(profile)
        for assigned in assigned_brands:
            db_session.add(UserBrand(user_id=user_id, brand_id=assigned))
        await db_session.commit()
        return profile

    return _make
