# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import exists, func, select, update
from sqlmodel import col

from app.exceptions import AlreadyResolvedError, RequestNotFoundError
from app.models.approval import ApprovalRequest
from app.models.base import utc_now
from app.models.enums import (
    TIME_OFF_TYPES,
    ApprovalStatus,
    ApprovalType,
    AuditAction,
    AuditEntityType,
)
from app.models.time_off import TimeOffEntry
from app.schemas.approval import ApprovalListResponse, ApprovalResponse, public_request_data
from app.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.approval import ProfileCreationRequestData, TimeOffRequestData
    from app.schemas.auth import AuthContext

logger = logging.getLogger(__name__)

_DECISION_AUDIT_ACTIONS = {
    ApprovalStatus.APPROVED: AuditAction.APPROVE,
    ApprovalStatus.REJECTED: AuditAction.REJECT,
}


def build_approval_response(request: ApprovalRequest) -> ApprovalResponse:
    """Map an approval request to its response schema, without secrets."""
    return ApprovalResponse(
        id=request.id,
        type=ApprovalType(request.type),
        requester_id=request.requester_id,
        approver_id=request.approver_id,
        request_data=public_request_data(request.request_data or {}),
        status=ApprovalStatus(request.status),
        created_at=request.created_at,
        approved_at=request.approved_at,
        rejected_at=request.rejected_at,
    )


async def create_request(
    session: AsyncSession,
    *,
    approval_type: ApprovalType,
    request_data: TimeOffRequestData | ProfileCreationRequestData,
    requester_id: uuid.UUID | None,
    approver_id: uuid.UUID | None,
) -> ApprovalRequest:
    """Insert a PENDING request and commit it.

    The request is durable before any notification is attempted, so a failed
    email never loses it.
    """
    request = ApprovalRequest(
        type=approval_type.value,
        requester_id=requester_id,
        approver_id=approver_id,
        request_data=request_data.model_dump(mode="json"),
        status=ApprovalStatus.PENDING.value,
    )
    session.add(request)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=requester_id,
        entity_type=AuditEntityType.APPROVAL_REQUEST,
        entity_id=request.id,
        action=AuditAction.SUBMIT,
        after_json=model_to_audit_dict(request),
    )

    await session.commit()
    await session.refresh(request)
    logger.info("Created %s approval request %s (approver=%s)", approval_type.value, request.id, approver_id)
    return request


async def get_request(session: AsyncSession, request_id: uuid.UUID) -> ApprovalRequest | None:
    """Fetch a request by id without any visibility check."""
    result = await session.execute(select(ApprovalRequest).where(col(ApprovalRequest.id) == request_id))
    return result.scalar_one_or_none()


async def get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> ApprovalRequest:
    request = await get_request(session, request_id)
    if request is None:
        raise RequestNotFoundError
    return request


async def transition(
    session: AsyncSession,
    request_id: uuid.UUID,
    outcome: ApprovalStatus,
    actor_id: uuid.UUID | None = None,
) -> ApprovalRequest:
    """Move a PENDING request to ``outcome`` exactly once.

    The UPDATE is conditioned on ``status = 'PENDING'``, so of two racing
    resolutions only one changes a row. The loser, and any later replay,
    gets ``AlreadyResolvedError`` and the stored timestamps are untouched.
    """
    if outcome not in _DECISION_AUDIT_ACTIONS:
        msg = f"{outcome} is not a terminal status"
        raise ValueError(msg)

    request = await get_request_or_404(session, request_id)
    before_dict = model_to_audit_dict(request)

    now = utc_now()
    values: dict[str, object] = {"status": outcome.value, "updated_at": now}
    if outcome == ApprovalStatus.APPROVED:
        values["approved_at"] = now
    else:
        values["rejected_at"] = now

    result = await session.execute(
        update(ApprovalRequest)
        .where(
            col(ApprovalRequest.id) == request_id,
            col(ApprovalRequest.status) == ApprovalStatus.PENDING.value,
        )
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:  # type: ignore[attr-defined]
        await session.rollback()
        logger.info("Approval request %s already resolved; refusing %s", request_id, outcome.value)
        raise AlreadyResolvedError

    await session.refresh(request)

    await write_audit_log(
        session,
        actor_id=actor_id,
        entity_type=AuditEntityType.APPROVAL_REQUEST,
        entity_id=request.id,
        action=_DECISION_AUDIT_ACTIONS[outcome],
        before_json=before_dict,
        after_json=model_to_audit_dict(request),
    )

    await session.commit()
    logger.info("Approval request %s transitioned to %s", request_id, outcome.value)
    return request


async def get_visible_request(session: AsyncSession, auth: AuthContext, request_id: uuid.UUID) -> ApprovalResponse:
    """Return a request if the caller may see it. Others' requests look absent."""
    request = await get_request_or_404(session, request_id)
    if not auth.is_admin and request.requester_id != auth.user_id:
        raise RequestNotFoundError
    return build_approval_response(request)


async def list_requests(
    session: AsyncSession,
    auth: AuthContext,
    status_filter: ApprovalStatus | None = None,
    type_filter: ApprovalType | None = None,
    offset: int = 0,
    limit: int = 50,
) -> ApprovalListResponse:
    """List requests visible to the caller, newest first.

    Admins see every request; everyone else sees only what they submitted.
    """
    base_filters = []
    if not auth.is_admin:
        base_filters.append(col(ApprovalRequest.requester_id) == auth.user_id)
    if status_filter is not None:
        base_filters.append(col(ApprovalRequest.status) == status_filter.value)
    if type_filter is not None:
        base_filters.append(col(ApprovalRequest.type) == type_filter.value)

    count_result = await session.execute(select(func.count()).select_from(ApprovalRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(ApprovalRequest)
        .where(*base_filters)
        .order_by(col(ApprovalRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    return ApprovalListResponse(
        items=[build_approval_response(r) for r in requests],
        total=total,
    )


async def find_unmaterialized(session: AsyncSession) -> list[ApprovalRequest]:
    """Approved time-off requests whose calendar entry was never written."""
    has_entry = exists().where(col(TimeOffEntry.approval_request_id) == col(ApprovalRequest.id))
    result = await session.execute(
        select(ApprovalRequest)
        .where(
            col(ApprovalRequest.status) == ApprovalStatus.APPROVED.value,
            col(ApprovalRequest.type).in_([t.value for t in TIME_OFF_TYPES]),
            ~has_entry,
        )
        .order_by(col(ApprovalRequest.approved_at))
    )
    return list(result.scalars().all())
