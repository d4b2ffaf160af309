# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from app.models.enums import UserRole


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    user_id: uuid.UUID
    role: str = UserRole.STORE_MANAGER
    company_id: uuid.UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
