# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from app.exceptions import MaterializationFailedError, RequestNotFoundError, UnauthorizedActionError
from app.models.enums import ApprovalAction, ApprovalStatus, ApprovalType
from app.schemas.approval import ApprovalListResponse, public_request_data
from app.services import approval_store
from app.services.materialization import materialize
from app.services.tokens import verify_token

if TYPE_CHECKING:
    from typing import Any

    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.approval import ApprovalResponse, MaterializationResponse
    from app.schemas.auth import AuthContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkResolution:
    """What happened when an emailed action link was followed."""

    request_id: uuid.UUID
    approval_type: ApprovalType
    action: ApprovalAction
    status: ApprovalStatus
    details: dict[str, Any]
    materialized: MaterializationResponse | None = None
    materialization_error: str | None = None


async def resolve_via_link(
    session: AsyncSession,
    request_id: uuid.UUID,
    action: ApprovalAction,
    token: str,
) -> LinkResolution:
    """Apply an approve/reject link followed by the approver's browser.

    1. Load the request (absent → ``RequestNotFoundError``).
    2. Recompute the token from the stored row (mismatch → ``UnauthorizedActionError``).
    3. Compare-and-set the status (already decided → ``AlreadyResolvedError``).
    4. Approve + time-off: write the calendar entry. A failure here is logged
       and reported on the page; the committed decision stands.
    """
    request = await approval_store.get_request(session, request_id)
    if request is None:
        raise RequestNotFoundError("Invalid or expired approval request")

    if not ApprovalType(request.type).is_time_off:
        # Signups are decided in the admin panel; no link is ever minted for them.
        logger.warning("Action link used against %s request %s", request.type, request_id)
        raise UnauthorizedActionError

    if not verify_token(request.id, request.created_at, action, token):
        logger.warning("Rejected action link for request %s: token mismatch", request_id)
        raise UnauthorizedActionError

    approver_id = request.approver_id
    request = await approval_store.transition(session, request_id, action.outcome, actor_id=approver_id)
    resolution = LinkResolution(
        request_id=request.id,
        approval_type=ApprovalType(request.type),
        action=action,
        status=ApprovalStatus(request.status),
        details=public_request_data(request.request_data or {}),
    )

    if action is not ApprovalAction.APPROVE:
        return resolution

    try:
        materialized = await materialize(session, request, actor_id=approver_id)
    except MaterializationFailedError as exc:
        logger.exception("Recoverable inconsistency, manual reconciliation needed: %s", exc.message)
        return replace(resolution, materialization_error=exc.message)
    return replace(resolution, materialized=materialized)


async def decide_in_panel(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    action: ApprovalAction,
) -> ApprovalResponse:
    """Approve or reject from the authenticated admin panel.

    This is the only way a profile-creation request is decided. Approving
    runs the side effect for every request type; if it fails the decision is
    kept and ``MaterializationFailedError`` tells the admin to re-run it.
    """
    request = await approval_store.transition(session, request_id, action.outcome, actor_id=auth.user_id)

    if action is ApprovalAction.APPROVE:
        try:
            await materialize(session, request, actor_id=auth.user_id)
        except MaterializationFailedError:
            logger.exception("Side effect failed for approval request %s decided in panel", request_id)
            raise

    return approval_store.build_approval_response(request)


async def rematerialize(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> MaterializationResponse:
    """Re-run the side effect of an approved request. Safe to repeat."""
    request = await approval_store.get_request_or_404(session, request_id)
    logger.info("Manual materialization of approval request %s by %s", request_id, auth.user_id)
    return await materialize(session, request, actor_id=auth.user_id)


async def list_unmaterialized(session: AsyncSession) -> ApprovalListResponse:
    """Approved time-off requests with no calendar entry, oldest approval first."""
    requests = await approval_store.find_unmaterialized(session)
    return ApprovalListResponse(
        items=[approval_store.build_approval_response(r) for r in requests],
        total=len(requests),
    )
