"""Side effects of an approved request.

Time-off requests become a calendar entry. Profile-creation requests become
an auth account, a profile row and any brand assignments. Both steps run
after the status transition has been committed and are keyed so that running
them again finds the existing result instead of duplicating it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import col

from app.exceptions import AccountProviderError, AppError, MaterializationFailedError
from app.models.enums import ApprovalStatus, ApprovalType, AuditAction, AuditEntityType, TimeOffEntryStatus
from app.models.org import Profile, UserBrand
from app.models.time_off import TimeOffEntry
from app.schemas.approval import (
    MaterializationResponse,
    ProfileCreationRequestData,
    TimeOffRequestData,
    request_data_adapter,
)
from app.services.accounts import get_account_provider
from app.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from app.models.approval import ApprovalRequest
    from app.services.accounts import AccountProvider

logger = logging.getLogger(__name__)


async def _existing_entry(session: AsyncSession, request_id: uuid.UUID) -> TimeOffEntry | None:
    result = await session.execute(select(TimeOffEntry).where(col(TimeOffEntry.approval_request_id) == request_id))
    return result.scalar_one_or_none()


async def _existing_profile(session: AsyncSession, email: str) -> Profile | None:
    result = await session.execute(select(Profile).where(col(Profile.email) == email))
    return result.scalars().first()


async def materialize_time_off(
    session: AsyncSession,
    request: ApprovalRequest,
    data: TimeOffRequestData,
    actor_id: uuid.UUID | None,
) -> tuple[TimeOffEntry, bool]:
    """Insert the calendar entry for ``request``. Returns ``(entry, created)``."""
    request_id = request.id
    existing = await _existing_entry(session, request_id)
    if existing is not None:
        return existing, False

    entry = TimeOffEntry(
        approval_request_id=request_id,
        employee_id=data.employee_id,
        start_date=data.start_date,
        end_date=data.end_date,
        type=data.subtype.value,
        notes=data.notes,
        status=TimeOffEntryStatus.APPROVED.value,
    )
    session.add(entry)
    try:
        await session.flush()
    except IntegrityError:
        # Lost a race with another materialization of the same request.
        await session.rollback()
        existing = await _existing_entry(session, request_id)
        if existing is None:
            raise
        return existing, False

    await write_audit_log(
        session,
        actor_id=actor_id,
        entity_type=AuditEntityType.TIME_OFF_ENTRY,
        entity_id=entry.id,
        action=AuditAction.MATERIALIZE,
        after_json=model_to_audit_dict(entry),
    )
    await session.commit()
    await session.refresh(entry)
    logger.info("Materialized time-off entry %s for approval request %s", entry.id, request_id)
    return entry, True


async def provision_profile(
    session: AsyncSession,
    request: ApprovalRequest,
    data: ProfileCreationRequestData,
    actor_id: uuid.UUID | None,
    provider: AccountProvider | None = None,
) -> tuple[Profile, bool]:
    """Create the auth account and profile for an approved signup. Returns ``(profile, created)``."""
    existing = await _existing_profile(session, data.email)
    if existing is not None:
        return existing, False

    provider = provider or get_account_provider()
    account = await provider.get_account_by_email(data.email)
    if account is None:
        account = await provider.create_account(data.email, data.password, data.full_name)

    profile = Profile(
        user_id=account.user_id,
        email=data.email,
        full_name=data.full_name,
        role=data.role.value,
        company_id=data.company_id,
        store_id=data.store_id,
    )
    session.add(profile)
    for brand_id in data.brand_ids:
        session.add(UserBrand(user_id=account.user_id, brand_id=brand_id))
    await session.flush()

    await write_audit_log(
        session,
        actor_id=actor_id,
        entity_type=AuditEntityType.PROFILE,
        entity_id=profile.id,
        action=AuditAction.PROVISION,
        after_json=model_to_audit_dict(profile),
    )
    await session.commit()
    await session.refresh(profile)
    logger.info("Provisioned %s profile %s for approval request %s", data.role.value, profile.user_id, request.id)
    return profile, True


async def materialize(
    session: AsyncSession,
    request: ApprovalRequest,
    actor_id: uuid.UUID | None = None,
) -> MaterializationResponse:
    """Run the side effect of an approved request, at most once per request.

    Raises ``MaterializationFailedError`` if the payload is unusable, the
    account provider fails or the write fails; the approval itself stays committed either way.
    """
    if request.status != ApprovalStatus.APPROVED.value:
        raise AppError("Only approved requests can be materialized", status_code=409)

    request_id = request.id
    approval_type = ApprovalType(request.type)
    try:
        data = request_data_adapter.validate_python(request.request_data or {})
        if isinstance(data, TimeOffRequestData):
            entry, created = await materialize_time_off(session, request, data, actor_id)
            return MaterializationResponse(
                approval_id=request_id, type=approval_type, created=created, time_off_entry_id=entry.id
            )
        profile, created = await provision_profile(session, request, data, actor_id)
        return MaterializationResponse(
            approval_id=request_id, type=approval_type, created=created, profile_user_id=profile.user_id
        )
    except (SQLAlchemyError, ValidationError, AccountProviderError) as exc:
        await session.rollback()
        msg = f"Approval request {request_id} was approved but its side effect failed: {exc}"
        raise MaterializationFailedError(msg) from exc
