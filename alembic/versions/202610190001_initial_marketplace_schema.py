"""Initial marketplace schema: profiles, requests, applications, contracts, reviews

Revision ID: 202610190001
Revises:
Create Date: 2026-10-19 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610190001"
down_revision = None
branch_labels = None
depends_on = None

user_type_enum = sa.Enum("company", "instructor", name="user_type")
verification_status_enum = sa.Enum(
    "pending", "approved", "rejected", name="verification_status"
)
request_status_enum = sa.Enum(
    "open", "in_progress", "completed", "cancelled", name="request_status"
)
application_status_enum = sa.Enum(
    "pending", "accepted", "rejected", name="application_status"
)
contract_status_enum = sa.Enum(
    "draft", "signed", "completed", "disputed", name="contract_status"
)
payment_status_enum = sa.Enum(
    "held_in_escrow", "released", "refunded", "disputed", name="payment_status"
)

MONEY = sa.Numeric(10, 2)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=True, unique=True),
        sa.Column("first_name", sa.String(length=128), nullable=True),
        sa.Column("last_name", sa.String(length=128), nullable=True),
        sa.Column("profile_image_url", sa.String(length=512), nullable=True),
        sa.Column("user_type", user_type_enum, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "companies",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("industry", sa.String(length=128), nullable=True),
        sa.Column("company_size", sa.String(length=64), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("website", sa.String(length=512), nullable=True),
        sa.Column("location", sa.String(length=255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "instructors",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("professional_title", sa.String(length=255), nullable=False),
        sa.Column("years_experience", sa.Integer(), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("specializations", sa.JSON(), nullable=True),
        sa.Column("min_hourly_rate", MONEY, nullable=False),
        sa.Column("desired_hourly_rate", MONEY, nullable=False),
        sa.Column(
            "is_verified", sa.Boolean(), server_default=sa.false(), nullable=False, index=True
        ),
        sa.Column(
            "verification_status",
            verification_status_enum,
            server_default="pending",
            nullable=False,
        ),
        sa.Column("verification_documents", sa.JSON(), nullable=True),
        sa.Column("rating", sa.Numeric(3, 2), server_default="0", nullable=False),
        sa.Column("completed_sessions", sa.Integer(), server_default="0", nullable=False),
        sa.Column("total_earnings", MONEY, server_default="0", nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "training_requests",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "company_id",
            sa.String(length=36),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("training_type", sa.String(length=128), nullable=False),
        sa.Column("duration", sa.String(length=128), nullable=False),
        sa.Column("min_budget", MONEY, nullable=False),
        sa.Column("max_budget", MONEY, nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("is_remote", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("preferred_start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", request_status_enum, nullable=False, index=True),
        sa.Column(
            "selected_instructor_id",
            sa.String(length=36),
            sa.ForeignKey("instructors.id", ondelete="SET NULL"),
            nullable=True,
        ),
        *_timestamps(),
    )

    op.create_table(
        "applications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "request_id",
            sa.String(length=36),
            sa.ForeignKey("training_requests.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "instructor_id",
            sa.String(length=36),
            sa.ForeignKey("instructors.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("proposed_rate", MONEY, nullable=False),
        sa.Column("cover_letter", sa.Text(), nullable=True),
        sa.Column("status", application_status_enum, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "contracts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "request_id",
            sa.String(length=36),
            sa.ForeignKey("training_requests.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "company_id",
            sa.String(length=36),
            sa.ForeignKey("companies.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "instructor_id",
            sa.String(length=36),
            sa.ForeignKey("instructors.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("agreed_rate", MONEY, nullable=False),
        sa.Column("total_amount", MONEY, nullable=False),
        sa.Column("terms", sa.Text(), nullable=True),
        sa.Column("status", contract_status_enum, nullable=False),
        sa.Column("signed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "contract_id",
            sa.String(length=36),
            sa.ForeignKey("contracts.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("service_fee", MONEY, nullable=False),
        sa.Column("instructor_amount", MONEY, nullable=False),
        sa.Column("status", payment_status_enum, nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("released_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "reviews",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "contract_id",
            sa.String(length=36),
            sa.ForeignKey("contracts.id"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "reviewer_id", sa.String(length=64), sa.ForeignKey("users.id"), nullable=False
        ),
        sa.Column(
            "reviewee_id",
            sa.String(length=64),
            sa.ForeignKey("users.id"),
            nullable=False,
            index=True,
        ),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("is_public", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
        *_timestamps(),
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(length=64),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("is_read", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("idempotency_key", sa.String(length=128), nullable=True, unique=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            index=True,
        ),
    )


def downgrade() -> None:
    op.drop_table("notifications")
    op.drop_table("reviews")
    op.drop_table("payments")
    op.drop_table("contracts")
    op.drop_table("applications")
    op.drop_table("training_requests")
    op.drop_table("instructors")
    op.drop_table("companies")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        payment_status_enum,
        contract_status_enum,
        application_status_enum,
        request_status_enum,
        verification_status_enum,
        user_type_enum,
    ):
        enum_type.drop(bind, checkfirst=True)
