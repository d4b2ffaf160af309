# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import TimestampMixin, UUIDBase
from app.models.enums import UserRole


class Company(UUIDBase, TimestampMixin, table=True):
    """Top of the ownership tree. Owns brands and stores."""

    __tablename__ = "company"

    name: str = Field(max_length=100)


class Brand(UUIDBase, TimestampMixin, table=True):
    """A brand owned by a company, grouping some of its stores."""

    __tablename__ = "brand"

    company_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("company.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    name: str = Field(max_length=100)


class Store(UUIDBase, TimestampMixin, table=True):
    """A store owned by a company and optionally part of a brand."""

    __tablename__ = "store"

    company_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("company.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    brand_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("brand.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    name: str = Field(max_length=100)


class Employee(UUIDBase, TimestampMixin, table=True):
    """A staff member scheduled at exactly one store."""

    __tablename__ = "employee"

    store_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("store.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    company_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("company.id", ondelete="SET NULL"), nullable=True),
    )
    name: str = Field(max_length=100)


class Profile(UUIDBase, TimestampMixin, table=True):
    """One per authenticated user. The role decides which scope key applies."""

    __tablename__ = "profile"

    user_id: uuid.UUID = Field(sa_column=sa.Column(sa.Uuid, nullable=False, unique=True))
    email: str = Field(max_length=254, index=True)
    full_name: str = Field(max_length=100)
    role: str = Field(default=UserRole.STORE_MANAGER, max_length=50, index=True)
    company_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("company.id", ondelete="SET NULL"), nullable=True),
    )
    brand_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("brand.id", ondelete="SET NULL"), nullable=True),
    )
    store_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("store.id", ondelete="SET NULL"), nullable=True),
    )


class UserBrand(UUIDBase, TimestampMixin, table=True):
    """Brand assignment for brand managers covering more than one brand."""

    __tablename__ = "user_brand"
    __table_args__ = (sa.UniqueConstraint("user_id", "brand_id", name="uq_user_brand"),)

    user_id: uuid.UUID = Field(index=True)
    brand_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("brand.id", ondelete="CASCADE"), nullable=False, index=True),
    )
