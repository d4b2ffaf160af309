# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Annotated, Any, Literal, Self

from pydantic import BaseModel, Field, TypeAdapter, field_validator, model_validator

from app.models.enums import ApprovalStatus, ApprovalType, TimeOffKind, UserRole

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_NAME_PATTERN = r"^[a-zA-Z\s'-]+$"

# Calendar category used when the submitter does not pick one.
DEFAULT_SUBTYPES: dict[ApprovalType, TimeOffKind] = {
    ApprovalType.TIME_OFF: TimeOffKind.PERSONAL,
    ApprovalType.SICK_LEAVE: TimeOffKind.SICK,
    ApprovalType.ANNUAL_LEAVE: TimeOffKind.VACATION,
}

# ---------------------------------------------------------------------------
# Stored request payloads (discriminated union)
# ---------------------------------------------------------------------------


class TimeOffRequestData(BaseModel):
    """Snapshot of everything needed to email and later materialize a time-off request.

    Names are copied at submission so the email and the audit trail stay
    stable if the employee or store is renamed or deleted.
    """

    kind: Literal["time_off"] = "time_off"
    employee_id: uuid.UUID
    employee_name: str
    store_id: uuid.UUID
    store_name: str
    start_date: date
    end_date: date
    subtype: TimeOffKind
    notes: str | None = None


class ProfileCreationRequestData(BaseModel):
    """Account details for a self-signup awaiting admin approval."""

    kind: Literal["profile_creation"] = "profile_creation"
    email: str
    password: str
    full_name: str
    role: UserRole
    company_id: uuid.UUID | None = None
    company_name: str | None = None
    brand_ids: list[uuid.UUID] = []
    store_id: uuid.UUID | None = None
    store_name: str | None = None


RequestData = Annotated[TimeOffRequestData | ProfileCreationRequestData, Field(discriminator="kind")]

request_data_adapter: TypeAdapter[TimeOffRequestData | ProfileCreationRequestData] = TypeAdapter(RequestData)

# Fields never echoed back through the API.
_REDACTED_FIELDS = frozenset({"password"})


def public_request_data(data: dict[str, Any]) -> dict[str, Any]:
    """Strip secrets from a stored payload before returning it."""
    return {k: v for k, v in data.items() if k not in _REDACTED_FIELDS}


# ---------------------------------------------------------------------------
# Submission payloads
# ---------------------------------------------------------------------------


class TimeOffSubmission(BaseModel):
    """Request body for submitting a time-off request on behalf of an employee."""

    employee_id: uuid.UUID
    start_date: date
    end_date: date
    type: ApprovalType = ApprovalType.TIME_OFF
    subtype: TimeOffKind | None = None
    notes: str | None = Field(default=None, max_length=500)

    @field_validator("type")
    @classmethod
    def _validate_type(cls, value: ApprovalType) -> ApprovalType:
        if not value.is_time_off:
            msg = f"{value.value} is not a time-off request type"
            raise ValueError(msg)
        return value

    @field_validator("notes")
    @classmethod
    def _strip_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must be on or after start_date"
            raise ValueError(msg)
        return self

    @property
    def resolved_subtype(self) -> TimeOffKind:
        return self.subtype or DEFAULT_SUBTYPES[self.type]


class ProfileSubmission(BaseModel):
    """Request body for a self-signup that needs an admin to approve it."""

    email: str = Field(min_length=3, max_length=254, pattern=_EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=128)
    full_name: str = Field(min_length=1, max_length=100, pattern=_NAME_PATTERN)
    role: UserRole = UserRole.STORE_MANAGER
    company_id: uuid.UUID | None = None
    brand_ids: list[uuid.UUID] = []
    store_id: uuid.UUID | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def _validate_role_scope(self) -> Self:
        if self.role == UserRole.ADMIN:
            msg = "admin accounts cannot be requested through signup"
            raise ValueError(msg)
        if self.brand_ids and self.role != UserRole.BRAND_MANAGER:
            msg = "brand_ids can only be set for brand managers"
            raise ValueError(msg)
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ApprovalResponse(BaseModel):
    """Response schema for a single approval request."""

    id: uuid.UUID
    type: ApprovalType
    requester_id: uuid.UUID | None
    approver_id: uuid.UUID | None
    request_data: dict[str, Any]
    status: ApprovalStatus
    created_at: datetime
    approved_at: datetime | None
    rejected_at: datetime | None


class ApprovalListResponse(BaseModel):
    """Paginated list of approval requests."""

    items: list[ApprovalResponse]
    total: int


class SubmissionResponse(BaseModel):
    """Returned once the pending request is stored.

    ``notification_sent`` is false when the approver could not be emailed;
    the request itself is still pending and visible to admins.
    """

    success: bool = True
    approval_id: uuid.UUID
    status: ApprovalStatus
    approver_id: uuid.UUID | None
    notification_sent: bool
    warning: str | None = None


class MaterializationResponse(BaseModel):
    """Outcome of running (or re-running) the post-approval side effect."""

    approval_id: uuid.UUID
    type: ApprovalType
    created: bool
    time_off_entry_id: uuid.UUID | None = None
    profile_user_id: uuid.UUID | None = None
