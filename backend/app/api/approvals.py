# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status
from fastapi.responses import HTMLResponse

from app.api.deps import AdminDep, AuthDep
from app.db import SessionDep
from app.exceptions import AlreadyResolvedError, RequestNotFoundError, UnauthorizedActionError
from app.models.enums import ApprovalAction, ApprovalStatus, ApprovalType
from app.schemas.approval import ApprovalListResponse, ApprovalResponse, MaterializationResponse
from app.services import approval_store
from app.services import resolution as resolution_service
from app.services.resolution import LinkResolution
from app.templating import render

approvals_router = APIRouter(prefix="/approvals", tags=["approvals"])

_INVALID_LINK = ("Link not valid", "This approval link is invalid or has expired.")


def _page(status_code: int, title: str, message: str, tone: str = "error", detail: str | None = None) -> HTMLResponse:
    html = render("pages/resolution.html", title=title, message=message, tone=tone, detail=detail)
    return HTMLResponse(content=html, status_code=status_code)


def _confirmation_page(result: LinkResolution) -> HTMLResponse:
    details = result.details
    subject = f"{details.get('employee_name', 'The employee')}'s {result.approval_type.label.lower()} request"
    period = f"{details.get('start_date')} to {details.get('end_date')}"
    verb = "approved" if result.status == ApprovalStatus.APPROVED else "rejected"

    detail = None
    if result.materialization_error is not None:
        detail = "The decision was saved, but the calendar entry could not be added. An administrator will reconcile it."
    return _page(
        status.HTTP_200_OK,
        f"Request {verb}",
        f"{subject} ({period}) has been {verb}.",
        tone="ok",
        detail=detail,
    )


@approvals_router.get("/action", response_class=HTMLResponse)
async def follow_action_link(
    session: SessionDep,
    request_id: str | None = Query(default=None, alias="id"),
    action: str | None = Query(default=None),
    token: str | None = Query(default=None),
) -> HTMLResponse:
    """Approve or reject a request from an emailed link. Responds with an HTML page."""
    if not request_id or not action or not token:
        return _page(status.HTTP_400_BAD_REQUEST, "Bad request", "Missing required parameters.")
    try:
        parsed_action = ApprovalAction(action)
    except ValueError:
        return _page(status.HTTP_400_BAD_REQUEST, "Bad request", "Unknown action.")
    try:
        parsed_id = uuid.UUID(request_id)
    except ValueError:
        return _page(status.HTTP_404_NOT_FOUND, *_INVALID_LINK)

    try:
        result = await resolution_service.resolve_via_link(session, parsed_id, parsed_action, token)
    except AlreadyResolvedError:
        return _page(
            status.HTTP_409_CONFLICT,
            "Already resolved",
            "This request has already been approved or rejected. No further action is needed.",
            tone="info",
        )
    except UnauthorizedActionError:
        return _page(status.HTTP_401_UNAUTHORIZED, *_INVALID_LINK)
    except RequestNotFoundError:
        return _page(status.HTTP_404_NOT_FOUND, *_INVALID_LINK)

    return _confirmation_page(result)


@approvals_router.get("", response_model=ApprovalListResponse)
async def list_approvals(
    session: SessionDep,
    auth: AuthDep,
    status_filter: ApprovalStatus | None = Query(default=None, alias="status"),
    type_filter: ApprovalType | None = Query(default=None, alias="type"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> ApprovalListResponse:
    """List approval requests. Non-admins only see their own."""
    return await approval_store.list_requests(session, auth, status_filter, type_filter, offset, limit)


@approvals_router.get("/unmaterialized", response_model=ApprovalListResponse)
async def list_unmaterialized(
    session: SessionDep,
    auth: AdminDep,
) -> ApprovalListResponse:
    """Approved time-off requests still missing their calendar entry (admin only)."""
    return await resolution_service.list_unmaterialized(session)


@approvals_router.get("/{request_id}", response_model=ApprovalResponse)
async def get_approval(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ApprovalResponse:
    """Get a single approval request."""
    return await approval_store.get_visible_request(session, auth, request_id)


@approvals_router.post("/{request_id}/approve", response_model=ApprovalResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> ApprovalResponse:
    """Approve a pending request from the admin panel (admin only)."""
    return await resolution_service.decide_in_panel(session, auth, request_id, ApprovalAction.APPROVE)


@approvals_router.post("/{request_id}/reject", response_model=ApprovalResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> ApprovalResponse:
    """Reject a pending request from the admin panel (admin only)."""
    return await resolution_service.decide_in_panel(session, auth, request_id, ApprovalAction.REJECT)


@approvals_router.post("/{request_id}/materialize", response_model=MaterializationResponse)
async def materialize_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> MaterializationResponse:
    """Re-run the side effect of an approved request (admin only). Idempotent."""
    return await resolution_service.rematerialize(session, auth, request_id)
