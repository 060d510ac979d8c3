# backend/safeseat/models/booking.py
"""
Booking model for the SafeSeat platform.

Represents a car-seat service appointment booked by a parent with an
organization. A booking occupies exactly one slot of the organization's daily
slot grid and snapshots the service name and price at creation time.

Architecture: the partial unique index on (organization_id, scheduled_at)
restricted to non-cancelled rows is the source of truth for slot conflicts.
The availability pre-check in the service layer is only a fast path.
"""

from datetime import date, datetime, timezone
from enum import Enum
import logging
from typing import Any

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Numeric, String, Text
from sqlalchemy.sql import func, text
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"  # Created by parent, awaiting organization
    CONFIRMED = "confirmed"  # Accepted by organization
    COMPLETED = "completed"  # Service delivered
    CANCELLED = "cancelled"  # Frees the slot for rebooking


class PaymentStatus(str, Enum):
    """Payment tracking, independent of the lifecycle status."""

    UNPAID = "unpaid"
    PAID = "paid"


TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED})

# Statuses that occupy a slot on the organization's grid
ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.COMPLETED)

ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}

ACTIVE_SLOT_INDEX_NAME = "uq_bookings_org_slot_active"


def can_transition(current: BookingStatus | str, target: BookingStatus | str) -> bool:
    """Return True when current -> target is an edge of the booking state machine."""
    try:
        current_status = BookingStatus(current)
        target_status = BookingStatus(target)
    except ValueError:
        return False
    return target_status in ALLOWED_TRANSITIONS[current_status]


STATUS_TIMESTAMP_COLUMNS = {
    BookingStatus.CONFIRMED: "confirmed_at",
    BookingStatus.COMPLETED: "completed_at",
    BookingStatus.CANCELLED: "cancelled_at",
}


def status_change_values(new_status: BookingStatus, now: datetime | None = None) -> dict[str, Any]:
    """Column values for moving a booking to new_status, lifecycle timestamp included."""
    values: dict[str, Any] = {"status": new_status.value}
    column = STATUS_TIMESTAMP_COLUMNS.get(new_status)
    if column:
        values[column] = now or datetime.now(timezone.utc)
    return values


class Booking(Base):
    """
    Self-contained booking record between a parent and an organization.

    Service details are snapshotted at booking time so later catalog price
    changes never touch existing bookings.
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    # Core relationships (owned by external collaborators)
    organization_id = Column(String(26), nullable=False, index=True)
    service_id = Column(String(26), nullable=False)
    parent_id = Column(String(26), nullable=False, index=True)

    # Date + slot combined into a single UTC timestamp
    scheduled_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # Service snapshot (preserved for history)
    service_name = Column(String(200), nullable=False)
    total_price = Column(Numeric(10, 2), nullable=False)

    # Booking details
    vehicle_info = Column(Text, nullable=True)
    service_address = Column(Text, nullable=True)
    contact_phone = Column(String(40), nullable=True)
    notes = Column(Text, nullable=True)
    parent_first_name = Column(String(100), nullable=True)
    parent_last_name = Column(String(100), nullable=True)

    status = Column(String(20), nullable=False, default=BookingStatus.PENDING.value)
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.UNPAID.value)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "payment_status IN ('unpaid', 'paid')",
            name="ck_bookings_payment_status",
        ),
        CheckConstraint("total_price >= 0", name="check_price_non_negative"),
        Index(
            ACTIVE_SLOT_INDEX_NAME,
            "organization_id",
            "scheduled_at",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
        Index("ix_bookings_org_scheduled", "organization_id", "scheduled_at"),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize new bookings as pending and unpaid."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = BookingStatus.PENDING.value
        if not self.payment_status:
            self.payment_status = PaymentStatus.UNPAID.value
        logger.info(
            f"Creating booking for parent {self.parent_id} with organization {self.organization_id}"
        )

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<Booking {self.id}: parent={self.parent_id}, "
            f"organization={self.organization_id}, scheduled_at={self.scheduled_at}, "
            f"status={self.status}>"
        )

    @property
    def booking_status(self) -> BookingStatus:
        return BookingStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        """Completed and cancelled bookings accept no further changes."""
        return self.booking_status in TERMINAL_STATUSES

    @property
    def scheduled_at_utc(self) -> datetime:
        """scheduled_at as tz-aware UTC (SQLite hands back naive values)."""
        value: datetime = self.scheduled_at
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def booking_date(self) -> date:
        return self.scheduled_at_utc.date()

    @property
    def slot_time(self) -> str:
        """Slot start time as HH:MM."""
        return self.scheduled_at_utc.strftime("%H:%M")
