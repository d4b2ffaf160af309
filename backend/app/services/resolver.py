"""Approver resolution over the store → brand → company → admin hierarchy.

Each tier is an ``ApproverStrategy``. ``resolve_approver`` walks the
strategies in order and returns the first match, so a new tier is added by
inserting a strategy into the list rather than editing call sites.
"""

# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sqlalchemy import or_, select
from sqlmodel import col

from app.exceptions import AppError, NoApproverFoundError
from app.models.enums import UserRole
from app.models.org import Employee, Profile, Store, UserBrand

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApproverContext:
    """Organizational position of the employee a request is about."""

    employee_id: uuid.UUID | None
    store_id: uuid.UUID | None
    brand_id: uuid.UUID | None
    company_id: uuid.UUID | None
    requester_id: uuid.UUID | None = None


@dataclass(frozen=True)
class Resolution:
    """The approver found for an employee, plus the rows used to find it."""

    approver: Profile
    tier: str
    employee: Employee
    store: Store


@runtime_checkable
class ApproverStrategy(Protocol):
    """One tier of the approval hierarchy."""

    name: str

    async def find(self, session: AsyncSession, context: ApproverContext) -> Profile | None:
        """Return the approver for this tier, or None to fall through."""
        ...


def _profiles_with_role(role: UserRole, requester_id: uuid.UUID | None) -> Select[tuple[Profile]]:
    # Oldest profile wins when a tier has several candidates.
    query = select(Profile).where(col(Profile.role) == role.value)
    if requester_id is not None:
        query = query.where(col(Profile.user_id) != requester_id)
    return query.order_by(col(Profile.created_at), col(Profile.id)).limit(1)


async def _first(session: AsyncSession, query: Select[tuple[Profile]]) -> Profile | None:
    result = await session.execute(query)
    return result.scalars().first()


class StoreManagerStrategy:
    """The store manager assigned to the employee's store."""

    name = "store_manager"

    async def find(self, session: AsyncSession, context: ApproverContext) -> Profile | None:
        if context.store_id is None:
            return None
        query = _profiles_with_role(UserRole.STORE_MANAGER, context.requester_id).where(
            col(Profile.store_id) == context.store_id
        )
        return await _first(session, query)


class BrandManagerStrategy:
    """A brand manager of the store's brand, via ``brand_id`` or a brand assignment."""

    name = "brand_manager"

    async def find(self, session: AsyncSession, context: ApproverContext) -> Profile | None:
        if context.brand_id is None:
            return None
        assigned = select(UserBrand.user_id).where(col(UserBrand.brand_id) == context.brand_id)
        query = _profiles_with_role(UserRole.BRAND_MANAGER, context.requester_id).where(
            or_(
                col(Profile.brand_id) == context.brand_id,
                col(Profile.user_id).in_(assigned),
            )
        )
        return await _first(session, query)


class CompanyManagerStrategy:
    """The company manager of the employee's company."""

    name = "company_manager"

    async def find(self, session: AsyncSession, context: ApproverContext) -> Profile | None:
        if context.company_id is None:
            return None
        query = _profiles_with_role(UserRole.COMPANY_MANAGER, context.requester_id).where(
            col(Profile.company_id) == context.company_id
        )
        return await _first(session, query)


class AdminStrategy:
    """Any admin. Last resort for every request."""

    name = "admin"

    async def find(self, session: AsyncSession, context: ApproverContext) -> Profile | None:
        return await _first(session, _profiles_with_role(UserRole.ADMIN, context.requester_id))


DEFAULT_STRATEGIES: tuple[ApproverStrategy, ...] = (
    StoreManagerStrategy(),
    BrandManagerStrategy(),
    CompanyManagerStrategy(),
    AdminStrategy(),
)


async def _walk(
    session: AsyncSession,
    context: ApproverContext,
    strategies: Sequence[ApproverStrategy],
) -> tuple[Profile, str]:
    for strategy in strategies:
        approver = await strategy.find(session, context)
        if approver is not None:
            return approver, strategy.name
    logger.warning(
        "No approver found for employee=%s store=%s brand=%s company=%s",
        context.employee_id,
        context.store_id,
        context.brand_id,
        context.company_id,
    )
    raise NoApproverFoundError(
        "No manager or administrator is configured to approve this request. "
        "Ask an administrator to assign a manager to the store, brand or company."
    )


async def resolve_approver(
    session: AsyncSession,
    employee_id: uuid.UUID,
    requester_id: uuid.UUID | None = None,
    strategies: Sequence[ApproverStrategy] = DEFAULT_STRATEGIES,
) -> Resolution:
    """Find the single approver for a request about ``employee_id``.

    The requester is never returned as their own approver. Raises
    ``NoApproverFoundError`` when every tier comes up empty.
    """
    employee = await session.get(Employee, employee_id)
    if employee is None:
        raise AppError("Employee not found", status_code=404)
    store = await session.get(Store, employee.store_id)
    if store is None:
        raise AppError("Employee's store not found", status_code=404)

    context = ApproverContext(
        employee_id=employee.id,
        store_id=store.id,
        brand_id=store.brand_id,
        company_id=employee.company_id or store.company_id,
        requester_id=requester_id,
    )
    approver, tier = await _walk(session, context, strategies)
    logger.info("Resolved approver %s (%s) for employee %s", approver.user_id, tier, employee.id)
    return Resolution(approver=approver, tier=tier, employee=employee, store=store)


async def resolve_admin(session: AsyncSession, requester_id: uuid.UUID | None = None) -> Profile:
    """Find the admin who reviews requests that are not tied to an employee."""
    context = ApproverContext(employee_id=None, store_id=None, brand_id=None, company_id=None, requester_id=requester_id)
    approver, _ = await _walk(session, context, (AdminStrategy(),))
    return approver
