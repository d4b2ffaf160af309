"""approval workflow schema

Revision ID: 0001_approval_workflow
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_approval_workflow"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    op.create_table(
        "company",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    op.create_table(
        "brand",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("company_id", sa.Uuid(), sa.ForeignKey("company.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_brand_company_id", "brand", ["company_id"])
    op.create_table(
        "store",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("company_id", sa.Uuid(), sa.ForeignKey("company.id", ondelete="CASCADE"), nullable=False),
        sa.Column("brand_id", sa.Uuid(), sa.ForeignKey("brand.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_store_company_id", "store", ["company_id"])
    op.create_index("ix_store_brand_id", "store", ["brand_id"])
    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("store_id", sa.Uuid(), sa.ForeignKey("store.id", ondelete="CASCADE"), nullable=False),
        sa.Column("company_id", sa.Uuid(), sa.ForeignKey("company.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
    )
    op.create_index("ix_employee_store_id", "employee", ["store_id"])
    op.create_table(
        "profile",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("user_id", sa.Uuid(), nullable=False, unique=True),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("company_id", sa.Uuid(), sa.ForeignKey("company.id", ondelete="SET NULL"), nullable=True),
        sa.Column("brand_id", sa.Uuid(), sa.ForeignKey("brand.id", ondelete="SET NULL"), nullable=True),
        sa.Column("store_id", sa.Uuid(), sa.ForeignKey("store.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_index("ix_profile_email", "profile", ["email"])
    op.create_index("ix_profile_role", "profile", ["role"])
    op.create_table(
        "user_brand",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("brand_id", sa.Uuid(), sa.ForeignKey("brand.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("user_id", "brand_id", name="uq_user_brand"),
    )
    op.create_index("ix_user_brand_user_id", "user_brand", ["user_id"])
    op.create_index("ix_user_brand_brand_id", "user_brand", ["brand_id"])
    op.create_table(
        "approval_request",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("requester_id", sa.Uuid(), nullable=True),
        sa.Column("approver_id", sa.Uuid(), nullable=True),
        sa.Column("request_data", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=50), server_default="PENDING", nullable=False),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_approval_request_requester_id", "approval_request", ["requester_id"])
    op.create_index("ix_approval_request_approver_id", "approval_request", ["approver_id"])
    op.create_index("ix_approval_request_status", "approval_request", ["status"])
    op.create_index("ix_approval_request_type_status", "approval_request", ["type", "status"])
    op.create_table(
        "time_off_entry",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _created_at(),
        sa.Column(
            "approval_request_id",
            sa.Uuid(),
            sa.ForeignKey("approval_request.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.UniqueConstraint("approval_request_id", name="uq_time_off_entry_approval"),
    )
    op.create_index("ix_time_off_entry_employee_id", "time_off_entry", ["employee_id"])
    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor_id", sa.Uuid(), nullable=True),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("time_off_entry")
    op.drop_table("approval_request")
    op.drop_table("user_brand")
    op.drop_table("profile")
    op.drop_table("employee")
    op.drop_table("store")
    op.drop_table("brand")
    op.drop_table("company")
