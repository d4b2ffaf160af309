from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from app.exceptions import AppError, NotificationFailedError
from app.models.approval import ApprovalRequest
from app.models.enums import ApprovalStatus, ApprovalType
from app.models.org import Company, Employee, Profile, Store
from app.schemas.approval import ProfileCreationRequestData, SubmissionResponse, TimeOffRequestData
from app.services import approval_store
from app.services.notification import send_approval_notification
from app.services.resolver import resolve_admin, resolve_approver

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.approval import ProfileSubmission, TimeOffSubmission
    from app.schemas.auth import AuthContext

logger = logging.getLogger(__name__)

NOTIFICATION_WARNING = "Request created but notification failed"


async def _get_profile(session: AsyncSession, user_id: uuid.UUID) -> Profile | None:
    result = await session.execute(select(Profile).where(col(Profile.user_id) == user_id))
    return result.scalar_one_or_none()


async def _notify(
    request: ApprovalRequest,
    approver: Profile,
    requester_name: str,
    requester_email: str | None,
) -> SubmissionResponse:
    """Send the approver email; a failure downgrades the response to a warning."""
    notification_sent = True
    warning = None
    try:
        await send_approval_notification(request, approver, requester_name, requester_email)
    except NotificationFailedError:
        notification_sent = False
        warning = NOTIFICATION_WARNING

    return SubmissionResponse(
        approval_id=request.id,
        status=ApprovalStatus(request.status),
        approver_id=request.approver_id,
        notification_sent=notification_sent,
        warning=warning,
    )


async def _check_company_scope(session: AsyncSession, auth: AuthContext, employee_id: uuid.UUID) -> None:
    """Non-admins carrying a company may only submit for that company's employees."""
    if auth.company_id is None or auth.is_admin:
        return
    employee = await session.get(Employee, employee_id)
    if employee is None:
        return
    store = await session.get(Store, employee.store_id)
    company_id = employee.company_id or (store.company_id if store else None)
    if company_id != auth.company_id:
        logger.warning(
            "User %s of company %s submitted for employee %s of company %s",
            auth.user_id,
            auth.company_id,
            employee_id,
            company_id,
        )
        raise AppError("Employee belongs to another company", status_code=403)


async def submit_time_off(
    session: AsyncSession,
    auth: AuthContext,
    payload: TimeOffSubmission,
) -> SubmissionResponse:
    """Submit a time-off request for approval.

    Flow:
    1. Check the employee is in the caller's company, when the caller has one
    2. Resolve the approver for the employee (fails before anything is written)
    3. Snapshot employee and store names into the request payload
    4. Store the PENDING request and commit
    5. Email the approver with approve/reject links

    The calendar entry is not created here; it appears only once the request
    is approved.
    """
    await _check_company_scope(session, auth, payload.employee_id)
    resolution = await resolve_approver(session, payload.employee_id, requester_id=auth.user_id)
    requester = await _get_profile(session, auth.user_id)

    data = TimeOffRequestData(
        employee_id=resolution.employee.id,
        employee_name=resolution.employee.name,
        store_id=resolution.store.id,
        store_name=resolution.store.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        subtype=payload.resolved_subtype,
        notes=payload.notes,
    )
    request = await approval_store.create_request(
        session,
        approval_type=payload.type,
        request_data=data,
        requester_id=auth.user_id,
        approver_id=resolution.approver.user_id,
    )

    return await _notify(
        request,
        resolution.approver,
        requester.full_name if requester else "Unknown requester",
        requester.email if requester else None,
    )


async def _has_pending_signup(session: AsyncSession, email: str) -> bool:
    result = await session.execute(
        select(ApprovalRequest.id).where(
            col(ApprovalRequest.type) == ApprovalType.PROFILE_CREATION.value,
            col(ApprovalRequest.status) == ApprovalStatus.PENDING.value,
            col(ApprovalRequest.request_data)["email"].as_string() == email,
        )
    )
    return result.first() is not None


async def submit_profile(
    session: AsyncSession,
    payload: ProfileSubmission,
) -> SubmissionResponse:
    """Record a self-signup for admin review.

    No account is created here. An admin approves the request from the
    admin panel, which provisions the account and profile.
    Company and store names are copied in so the admin notice reads by name.
    """
    existing = await session.execute(select(Profile.id).where(col(Profile.email) == payload.email))
    if existing.first() is not None:
        raise AppError("A profile with this email already exists", status_code=409)
    if await _has_pending_signup(session, payload.email):
        raise AppError("A signup request for this email is already pending", status_code=409)

    company_name = None
    if payload.company_id is not None:
        company = await session.get(Company, payload.company_id)
        if company is None:
            raise AppError("Company not found", status_code=404)
        company_name = company.name
    store_name = None
    if payload.store_id is not None:
        store = await session.get(Store, payload.store_id)
        if store is None:
            raise AppError("Store not found", status_code=404)
        store_name = store.name

    admin = await resolve_admin(session)

    data = ProfileCreationRequestData(
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        role=payload.role,
        company_id=payload.company_id,
        company_name=company_name,
        brand_ids=payload.brand_ids,
        store_id=payload.store_id,
        store_name=store_name,
    )
    request = await approval_store.create_request(
        session,
        approval_type=ApprovalType.PROFILE_CREATION,
        request_data=data,
        requester_id=None,
        approver_id=admin.user_id,
    )

    return await _notify(request, admin, payload.full_name, payload.email)
