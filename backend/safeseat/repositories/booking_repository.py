# backend/safeseat/repositories/booking_repository.py
"""
Booking Repository for the SafeSeat platform

Implements all data access operations for booking management:
- Slot occupancy queries for the availability checker
- Listing bookings for parents and organizations with filters
- Creation/update with the active-slot unique index mapped to a typed error
"""

from datetime import datetime
import logging
from typing import List, Optional, cast

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException, UniqueSlotViolation
from ..models.booking import (
    ACTIVE_SLOT_INDEX_NAME,
    ACTIVE_STATUSES,
    Booking,
    BookingStatus,
    status_change_values,
)
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

# SQLite reports unique index violations by column list rather than index name
_SQLITE_SLOT_VIOLATION = "unique constraint failed: bookings.organization_id, bookings.scheduled_at"


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        """Initialize with Booking model."""
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def get_by_id(self, id: str, for_update: bool = False) -> Optional[Booking]:
        """Get a booking, optionally locking the row until the transaction ends."""
        try:
            query = self.db.query(Booking).filter(Booking.id == id)
            if for_update:
                query = query.with_for_update()
            return cast(Optional[Booking], query.first())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting booking {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve Booking: {str(e)}")

    def transition_status(
        self, booking_id: str, expected: BookingStatus, target: BookingStatus
    ) -> bool:
        """
        Move a booking from expected to target in a single conditional UPDATE.

        Returns False when the row is no longer in the expected status, i.e.
        a concurrent request changed it first. Does NOT commit.
        """
        statement = (
            update(Booking)
            .where(Booking.id == booking_id, Booking.status == expected.value)
            .values(**status_change_values(target))
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = self.db.execute(statement)
        except IntegrityError as exc:
            self.logger.error(f"Integrity error moving booking {booking_id} to {target.value}: {exc}")
            self.db.rollback()
            raise self._translate_integrity_error(exc) from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error moving booking {booking_id} to {target.value}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to update booking status: {str(e)}")
        return bool(result.rowcount == 1)

    # Slot occupancy

    def get_active_bookings_between(
        self,
        organization_id: str,
        start: datetime,
        end: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Get bookings that occupy a slot in [start, end) for an organization.

        Cancelled bookings never occupy a slot and are excluded.
        """
        try:
            query = self.db.query(Booking).filter(
                Booking.organization_id == organization_id,
                Booking.scheduled_at >= start,
                Booking.scheduled_at < end,
                Booking.status.in_([status.value for status in ACTIVE_STATUSES]),
            )
            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)
            return cast(List[Booking], query.order_by(Booking.scheduled_at).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting active bookings for {organization_id}: {str(e)}")
            raise RepositoryException(f"Failed to get active bookings: {str(e)}")

    def slot_is_taken(
        self,
        organization_id: str,
        scheduled_at: datetime,
        exclude_booking_id: Optional[str] = None,
    ) -> bool:
        """Check whether a non-cancelled booking already holds this exact slot."""
        try:
            query = self.db.query(Booking.id).filter(
                Booking.organization_id == organization_id,
                Booking.scheduled_at == scheduled_at,
                Booking.status != BookingStatus.CANCELLED.value,
            )
            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)
            return query.first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking slot for {organization_id}: {str(e)}")
            raise RepositoryException(f"Failed to check slot: {str(e)}")

    # Listing

    def list_for_parent(
        self,
        parent_id: str,
        *,
        status: Optional[str] = None,
        service_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        search: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings placed by a parent, newest scheduled first."""
        try:
            query = self.db.query(Booking).filter(Booking.parent_id == parent_id)
            query = self._apply_filters(query, status, service_id, start, end, search)
            return cast(List[Booking], query.order_by(Booking.scheduled_at.desc()).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for parent {parent_id}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def list_for_organization(
        self,
        organization_id: str,
        *,
        status: Optional[str] = None,
        service_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        search: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings received by an organization, newest scheduled first."""
        try:
            query = self.db.query(Booking).filter(Booking.organization_id == organization_id)
            query = self._apply_filters(query, status, service_id, start, end, search)
            return cast(List[Booking], query.order_by(Booking.scheduled_at.desc()).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for organization {organization_id}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    @staticmethod
    def _apply_filters(
        query: Query,
        status: Optional[str],
        service_id: Optional[str],
        start: Optional[datetime],
        end: Optional[datetime],
        search: Optional[str],
    ) -> Query:
        if status:
            query = query.filter(Booking.status == status)
        if service_id:
            query = query.filter(Booking.service_id == service_id)
        if start is not None:
            query = query.filter(Booking.scheduled_at >= start)
        if end is not None:
            query = query.filter(Booking.scheduled_at < end)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    Booking.parent_first_name.ilike(pattern),
                    Booking.parent_last_name.ilike(pattern),
                    Booking.service_name.ilike(pattern),
                    Booking.id.ilike(pattern),
                )
            )
        return query

    def _translate_integrity_error(self, exc: IntegrityError) -> RepositoryException:
        if is_active_slot_violation(exc):
            return UniqueSlotViolation("Slot already held by an active booking")
        return super()._translate_integrity_error(exc)


def is_active_slot_violation(exc: IntegrityError) -> bool:
    """Return True when an IntegrityError came from the active-slot unique index."""
    details = BaseRepository._integrity_details(exc)
    if details["constraint"] == ACTIVE_SLOT_INDEX_NAME:
        return True
    text = details["text"].lower()
    return ACTIVE_SLOT_INDEX_NAME in text or _SQLITE_SLOT_VIOLATION in text
