from sqlmodel import SQLModel

from app.models.approval import ApprovalRequest
from app.models.audit import AuditLog
from app.models.base import TimestampMixin, UUIDBase
from app.models.enums import (
    ApprovalAction,
    ApprovalStatus,
    ApprovalType,
    AuditAction,
    AuditEntityType,
    TimeOffEntryStatus,
    TimeOffKind,
    UserRole,
)
from app.models.org import Brand, Company, Employee, Profile, Store, UserBrand
from app.models.time_off import TimeOffEntry

__all__ = [
    "ApprovalAction",
    "ApprovalRequest",
    "ApprovalStatus",
    "ApprovalType",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Brand",
    "Company",
    "Employee",
    "Profile",
    "SQLModel",
    "Store",
    "TimeOffEntry",
    "TimeOffEntryStatus",
    "TimeOffKind",
    "TimestampMixin",
    "UUIDBase",
    "UserBrand",
    "UserRole",
]
