# backend/safeseat/services/slot_availability.py
"""
Slot Availability Checker for the SafeSeat platform.

Organizations accept bookings on a fixed daily grid of one-hour slots, so
conflict detection is a set-membership check rather than interval overlap.
All timestamps are handled in UTC; naive datetimes are treated as UTC.

A failed lookup always raises StorageUnavailableException. An empty result
is never returned in place of an error since that would present every slot
as free.
"""

from datetime import date, datetime, time, timedelta, timezone
import logging
from typing import List, Optional, Set

from sqlalchemy.orm import Session

from ..core.constants import SLOT_TIMES
from ..core.exceptions import InvalidSlotException, RepositoryException, StorageUnavailableException
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

AVAILABILITY_ERROR = "Failed to check availability. Please try again."


def to_utc(value: datetime) -> datetime:
    """Return a tz-aware UTC datetime, assuming UTC for naive input."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """UTC [start, end) covering a calendar date."""
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def slot_datetime(day: date, slot: str) -> datetime:
    """Build the canonical UTC timestamp for a date and an HH:MM slot."""
    if slot not in SLOT_TIMES:
        raise InvalidSlotException(slot, SLOT_TIMES)
    hours, minutes = (int(part) for part in slot.split(":"))
    return datetime.combine(day, time(hours, minutes), tzinfo=timezone.utc)


def validate_slot(scheduled_at: datetime) -> datetime:
    """
    Ensure a timestamp falls exactly on the slot grid.

    Returns:
        The timestamp normalized to UTC

    Raises:
        InvalidSlotException: off-grid hour/minute or non-zero seconds
    """
    normalized = to_utc(scheduled_at)
    slot = normalized.strftime("%H:%M")
    if slot not in SLOT_TIMES or normalized.second or normalized.microsecond:
        raise InvalidSlotException(normalized.strftime("%H:%M:%S"), SLOT_TIMES)
    return normalized


class SlotAvailabilityChecker(BaseService):
    """Read-only view of an organization's daily slot occupancy."""

    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)

    @BaseService.measure_operation("get_booked_slots")
    def get_booked_slots(
        self,
        organization_id: str,
        day: date,
        exclude_booking_id: Optional[str] = None,
    ) -> Set[str]:
        """
        Slot start times (HH:MM) held by pending, confirmed or completed bookings.

        Raises:
            StorageUnavailableException: the occupancy query failed
        """
        start, end = day_bounds(day)
        try:
            bookings = self.repository.get_active_bookings_between(
                organization_id, start, end, exclude_booking_id=exclude_booking_id
            )
        except RepositoryException as e:
            self.logger.error(
                f"Availability lookup failed for organization {organization_id} on {day}: {str(e)}"
            )
            raise StorageUnavailableException(AVAILABILITY_ERROR) from e

        return {to_utc(booking.scheduled_at).strftime("%H:%M") for booking in bookings}

    def get_available_slots(self, organization_id: str, day: date) -> List[str]:
        """Free slots for the day in grid order."""
        booked = self.get_booked_slots(organization_id, day)
        return [slot for slot in SLOT_TIMES if slot not in booked]

    @BaseService.measure_operation("is_slot_available")
    def is_slot_available(
        self,
        organization_id: str,
        scheduled_at: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """Fast pre-check; the partial unique index remains the source of truth."""
        normalized = validate_slot(scheduled_at)
        try:
            taken = self.repository.slot_is_taken(
                organization_id, normalized, exclude_booking_id=exclude_booking_id
            )
        except RepositoryException as e:
            self.logger.error(
                f"Slot check failed for organization {organization_id} at {normalized}: {str(e)}"
            )
            raise StorageUnavailableException(AVAILABILITY_ERROR) from e
        return not taken
