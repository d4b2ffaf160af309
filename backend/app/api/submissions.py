# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter, status

from app.api.deps import AuthDep
from app.db import SessionDep
from app.schemas.approval import ProfileSubmission, SubmissionResponse, TimeOffSubmission
from app.services import submission as submission_service

submissions_router = APIRouter(prefix="/submissions", tags=["submissions"])


@submissions_router.post("/time-off", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_time_off(
    payload: TimeOffSubmission,
    session: SessionDep,
    auth: AuthDep,
) -> SubmissionResponse:
    """Submit a time-off request. The entry is pending approval, not created."""
    return await submission_service.submit_time_off(session, auth, payload)


@submissions_router.post("/profile", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_profile(
    payload: ProfileSubmission,
    session: SessionDep,
) -> SubmissionResponse:
    """Request a new account (self-signup). An admin must approve it."""
    return await submission_service.submit_profile(session, payload)
