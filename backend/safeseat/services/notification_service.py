# backend/safeseat/services/notification_service.py
"""
Notification Service for the SafeSeat platform

Booking events are turned into in-app notifications. Delivery beyond the
notification table (email, push) belongs to an external asynchronous
collaborator that reads the table.

The booking core only depends on the NotificationSink protocol, so any
object with a matching create_notification() can be injected.
"""

import logging
from typing import Optional, Protocol

from sqlalchemy.orm import Session

from ..models.notification import Notification
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

# Titles shown to the parent when the organization moves a booking
STATUS_TITLES = {
    "confirmed": "Booking Confirmed",
    "completed": "Booking Completed",
    "cancelled": "Booking Cancelled",
}


class NotificationSink(Protocol):
    """Fire-and-forget notification interface used by the booking core."""

    def create_notification(
        self, recipient_id: str, title: str, body: str, type_tag: str
    ) -> Optional[Notification]:
        ...


def booking_created_message(service_name: str, scheduled_label: str) -> tuple[str, str]:
    """Title/body sent to the organization owner for a new booking."""
    return (
        "New Booking Received",
        f"You have a new booking request for {service_name} on {scheduled_label}.",
    )


def status_changed_message(
    status: str, service_name: str, scheduled_label: str
) -> tuple[str, str]:
    """Title/body sent to the parent after a status change."""
    title = STATUS_TITLES.get(status, "Booking Updated")
    return title, f"Your booking for {service_name} on {scheduled_label} is now {status}."


class NotificationService(BaseService):
    """Default sink: one row in the notifications table per event."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_notification_repository(db)

    @BaseService.measure_operation("create_notification")
    def create_notification(
        self, recipient_id: str, title: str, body: str, type_tag: str
    ) -> Optional[Notification]:
        with self.transaction():
            notification = self.repository.create(
                user_id=recipient_id,
                title=title,
                message=body,
                type=type_tag,
            )
        self.logger.debug(f"Notification {type_tag} stored for {recipient_id}")
        return notification
