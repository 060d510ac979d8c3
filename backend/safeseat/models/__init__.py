"""
Database models for the SafeSeat platform.

This module exports all SQLAlchemy models used in the application:
- Bookings and their append-only audit trail
- Payout requests
- Organizations and their service catalog (read-only collaborators)
- In-app notifications (default notification sink)
"""

from .audit_log import AuditAction, BookingAuditLog
from .booking import Booking, BookingStatus, PaymentStatus
from .notification import Notification
from .organization import Organization, Service
from .payout import PayoutMethod, PayoutRequest, PayoutStatus

__all__ = [
    "AuditAction",
    "Booking",
    "BookingAuditLog",
    "BookingStatus",
    "Notification",
    "Organization",
    "PaymentStatus",
    "PayoutMethod",
    "PayoutRequest",
    "PayoutStatus",
    "Service",
]
