# backend/safeseat/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.audit_service import AuditService
from ...services.booking_service import BookingService
from ...services.notification_service import NotificationService
from ...services.payout_service import PayoutService
from ...services.slot_availability import SlotAvailabilityChecker
from .database import get_db


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Get the default in-app notification sink."""
    return NotificationService(db)


def get_audit_service(db: Session = Depends(get_db)) -> AuditService:
    return AuditService(db)


def get_availability_checker(db: Session = Depends(get_db)) -> SlotAvailabilityChecker:
    return SlotAvailabilityChecker(db)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
    audit_service: AuditService = Depends(get_audit_service),
    availability_checker: SlotAvailabilityChecker = Depends(get_availability_checker),
) -> BookingService:
    """
    Get booking service instance with all dependencies.

    Args:
        db: Database session
        notification_service: Sink for booking notifications
        audit_service: Audit trail writer
        availability_checker: Slot occupancy pre-check

    Returns:
        BookingService instance
    """
    return BookingService(
        db,
        notification_sink=notification_service,
        audit_service=audit_service,
        availability_checker=availability_checker,
    )


def get_payout_service(db: Session = Depends(get_db)) -> PayoutService:
    return PayoutService(db)
