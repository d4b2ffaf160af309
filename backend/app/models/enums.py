from __future__ import annotations

import enum


class ApprovalType(enum.StrEnum):
    """Kind of decision an approval request asks for."""

    PROFILE_CREATION = "PROFILE_CREATION"
    TIME_OFF = "TIME_OFF"
    SICK_LEAVE = "SICK_LEAVE"
    ANNUAL_LEAVE = "ANNUAL_LEAVE"

    @property
    def is_time_off(self) -> bool:
        return self in TIME_OFF_TYPES

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


TIME_OFF_TYPES = frozenset({ApprovalType.TIME_OFF, ApprovalType.SICK_LEAVE, ApprovalType.ANNUAL_LEAVE})


class ApprovalStatus(enum.StrEnum):
    """State machine for approval requests. APPROVED and REJECTED are terminal."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class ApprovalAction(enum.StrEnum):
    """Action carried by an emailed link or an admin decision."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def outcome(self) -> ApprovalStatus:
        return ApprovalStatus.APPROVED if self is ApprovalAction.APPROVE else ApprovalStatus.REJECTED


class TimeOffKind(enum.StrEnum):
    """Calendar category of a time-off entry."""

    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    OTHER = "other"


class TimeOffEntryStatus(enum.StrEnum):
    """Status of a materialized calendar entry."""

    APPROVED = "approved"


class UserRole(enum.StrEnum):
    """Role carried by a profile, scoping what it manages."""

    ADMIN = "admin"
    COMPANY_MANAGER = "company_manager"
    BRAND_MANAGER = "brand_manager"
    STORE_MANAGER = "store_manager"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    APPROVAL_REQUEST = "APPROVAL_REQUEST"
    TIME_OFF_ENTRY = "TIME_OFF_ENTRY"
    PROFILE = "PROFILE"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    MATERIALIZE = "MATERIALIZE"
    PROVISION = "PROVISION"
