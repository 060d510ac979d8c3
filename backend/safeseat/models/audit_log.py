# backend/safeseat/models/audit_log.py
"""
Audit logging model capturing every mutation applied to a booking.

Rows are append-only: the application never updates or deletes them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, Index, String
from sqlalchemy.sql import func
import ulid

from safeseat.database import Base


def _now_utc() -> datetime:
    """Return timezone-aware UTC timestamp for defaults."""
    return datetime.now(timezone.utc)


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    STATUS_UPDATE = "status_update"


class BookingAuditLog(Base):
    """Persistence model for booking audit trail entries."""

    __tablename__ = "booking_audit_logs"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    # Reference only; bookings are never deleted so no cascade is needed
    booking_id = Column(String(26), nullable=False)
    action = Column(String(30), nullable=False)
    old_status = Column(String(20), nullable=True)
    new_status = Column(String(20), nullable=True)
    actor_id = Column(String(26), nullable=False)
    actor_role = Column(String(30), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_now_utc,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_booking_audit_logs_booking_created", "booking_id", "created_at"),)

    def __repr__(self) -> str:
        return (
            f"<BookingAuditLog {self.id}: booking={self.booking_id} action={self.action} "
            f"{self.old_status}->{self.new_status}>"
        )
