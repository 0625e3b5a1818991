"""Create portal tables.

Revision ID: 001_portal_tables
Revises:
Create Date: 2026-10-18

project_managers, profiles, services, service_requests, otp_verifications.
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_portal_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _uuid_pk() -> sa.Column:
    return sa.Column(
        "id",
        sa.UUID(),
        primary_key=True,
        server_default=sa.text("gen_random_uuid()"),
    )


def upgrade() -> None:
    # Provisioned by admins; email is the OTP login identity
    op.create_table(
        "project_managers",
        _uuid_pk(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("specialization", sa.String(255), nullable=True),
        sa.Column(
            "is_available", sa.Boolean(), nullable=False, server_default="true"
        ),
        *_timestamps(),
    )
    op.create_index(
        "idx_project_managers_email", "project_managers", ["email"], unique=True
    )

    op.create_table(
        "profiles",
        _uuid_pk(),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_profiles_user_id", "profiles", ["user_id"], unique=True)

    op.create_table(
        "services",
        _uuid_pk(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("icon", sa.String(50), nullable=False, server_default="Code"),
        sa.Column("features", sa.JSON(), nullable=True),
        sa.Column("price_range", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        *_timestamps(),
    )

    op.create_table(
        "service_requests",
        _uuid_pk(),
        sa.Column("user_id", sa.UUID(), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default="pending"
        ),
        sa.Column(
            "priority", sa.String(20), nullable=False, server_default="medium"
        ),
        sa.Column("service_type", sa.String(100), nullable=True),
        sa.Column("color_theme", sa.String(100), nullable=True),
        sa.Column("budget_range", sa.String(100), nullable=True),
        sa.Column("timeline", sa.String(100), nullable=True),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("contact_phone", sa.String(50), nullable=True),
        sa.Column(
            "assigned_pm_id",
            sa.UUID(),
            sa.ForeignKey("project_managers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("admin_response", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed', 'cancelled')",
            name="ck_service_requests_status",
        ),
    )
    op.create_index(
        "idx_service_requests_assigned_pm",
        "service_requests",
        ["assigned_pm_id"],
    )

    # Append-only; rows are flipped to verified, never deleted
    op.create_table(
        "otp_verifications",
        _uuid_pk(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("otp_code", sa.String(12), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_otp_verifications_email_created",
        "otp_verifications",
        ["email", "created_at"],
    )


def downgrade() -> None:
    op.drop_table("otp_verifications")
    op.drop_table("service_requests")
    op.drop_table("services")
    op.drop_table("profiles")
    op.drop_table("project_managers")
