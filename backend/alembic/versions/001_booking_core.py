# backend/alembic/versions/001_booking_core.py
"""Booking core - bookings, audit trail, payouts and read-only collaborators

Revision ID: 001_booking_core
Revises:
Create Date: 2025-05-01 00:00:00.000000

Creates the booking tables together with the organization/service catalog
and notification tables they read from or write to.

Design principle: the partial unique index uq_bookings_org_slot_active is the
source of truth for slot conflicts. At most one non-cancelled booking can
hold an organization's slot; cancelling a booking frees it for rebooking.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_booking_core"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create booking core tables."""
    print("Creating booking core tables...")

    op.create_table(
        "organizations",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("owner_id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("subscription_tier", sa.String(20), nullable=False, server_default="Free"),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_organizations_owner_id", "organizations", ["owner_id"])

    op.create_table(
        "services",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("organization_id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_services_organization_id", "services", ["organization_id"])

    # Self-contained bookings: service name and price are snapshots
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("organization_id", sa.String(26), nullable=False),
        sa.Column("service_id", sa.String(26), nullable=False),
        sa.Column("parent_id", sa.String(26), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("service_name", sa.String(200), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("vehicle_info", sa.Text(), nullable=True),
        sa.Column("service_address", sa.Text(), nullable=True),
        sa.Column("contact_phone", sa.String(40), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("parent_first_name", sa.String(100), nullable=True),
        sa.Column("parent_last_name", sa.String(100), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="unpaid"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint(
            "payment_status IN ('unpaid', 'paid')",
            name="ck_bookings_payment_status",
        ),
        sa.CheckConstraint("total_price >= 0", name="check_price_non_negative"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_organization_id", "bookings", ["organization_id"])
    op.create_index("ix_bookings_parent_id", "bookings", ["parent_id"])
    op.create_index("ix_bookings_scheduled_at", "bookings", ["scheduled_at"])
    op.create_index("ix_bookings_org_scheduled", "bookings", ["organization_id", "scheduled_at"])

    # One active booking per organization slot
    op.create_index(
        "uq_bookings_org_slot_active",
        "bookings",
        ["organization_id", "scheduled_at"],
        unique=True,
        postgresql_where=sa.text("status <> 'cancelled'"),
        sqlite_where=sa.text("status <> 'cancelled'"),
    )

    # Append-only audit trail
    op.create_table(
        "booking_audit_logs",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("booking_id", sa.String(26), nullable=False),
        sa.Column("action", sa.String(30), nullable=False),
        sa.Column("old_status", sa.String(20), nullable=True),
        sa.Column("new_status", sa.String(20), nullable=True),
        sa.Column("actor_id", sa.String(26), nullable=False),
        sa.Column("actor_role", sa.String(30), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_booking_audit_logs_booking_created",
        "booking_audit_logs",
        ["booking_id", "created_at"],
    )

    op.create_table(
        "payout_requests",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("organization_id", sa.String(26), nullable=False),
        sa.Column("amount_gross", sa.Numeric(10, 2), nullable=False),
        sa.Column("fee_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("amount_net", sa.Numeric(10, 2), nullable=False),
        sa.Column("payout_method", sa.String(30), nullable=False),
        sa.Column("payout_details", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('pending', 'paid', 'rejected')",
            name="ck_payout_requests_status",
        ),
        sa.CheckConstraint("amount_gross > 0", name="check_payout_gross_positive"),
        sa.CheckConstraint("fee_amount >= 0", name="check_payout_fee_non_negative"),
    )
    op.create_index("ix_payout_requests_organization_id", "payout_requests", ["organization_id"])
    op.create_index(
        "ix_payout_requests_org_created",
        "payout_requests",
        ["organization_id", "created_at"],
    )

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(26), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    print("Booking core tables created successfully!")


def downgrade() -> None:
    """Drop booking core tables."""
    print("Dropping booking core tables...")

    op.drop_index("ix_notifications_user_id", table_name="notifications")
    op.drop_table("notifications")

    op.drop_index("ix_payout_requests_org_created", table_name="payout_requests")
    op.drop_index("ix_payout_requests_organization_id", table_name="payout_requests")
    op.drop_table("payout_requests")

    op.drop_index("ix_booking_audit_logs_booking_created", table_name="booking_audit_logs")
    op.drop_table("booking_audit_logs")

    op.drop_index("uq_bookings_org_slot_active", table_name="bookings")
    op.drop_index("ix_bookings_org_scheduled", table_name="bookings")
    op.drop_index("ix_bookings_scheduled_at", table_name="bookings")
    op.drop_index("ix_bookings_parent_id", table_name="bookings")
    op.drop_index("ix_bookings_organization_id", table_name="bookings")
    op.drop_index("ix_bookings_id", table_name="bookings")
    op.drop_table("bookings")

    op.drop_index("ix_services_organization_id", table_name="services")
    op.drop_table("services")

    op.drop_index("ix_organizations_owner_id", table_name="organizations")
    op.drop_table("organizations")

    print("Booking core tables dropped.")
