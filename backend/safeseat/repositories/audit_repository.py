# backend/safeseat/repositories/audit_repository.py
"""
Repository helpers for booking audit log persistence and querying.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from safeseat.core.exceptions import RepositoryException
from safeseat.models.audit_log import BookingAuditLog

logger = logging.getLogger(__name__)


class AuditRepository:
    """Persist and query booking audit trail entries."""

    def __init__(self, db: Session):
        self.db = db

    def write(self, audit: BookingAuditLog) -> None:
        """Persist a new audit row inside the active transaction."""
        try:
            self.db.add(audit)
            self.db.flush()
        except SQLAlchemyError as exc:
            logger.error("Failed to write audit entry for booking %s: %s", audit.booking_id, exc)
            self.db.rollback()
            raise RepositoryException(f"Failed to write audit entry: {exc}") from exc

    def list_for_booking(self, booking_id: str) -> list[BookingAuditLog]:
        """Return audit rows for a booking ordered newest first."""
        stmt = (
            select(BookingAuditLog)
            .where(BookingAuditLog.booking_id == booking_id)
            .order_by(BookingAuditLog.created_at.desc(), BookingAuditLog.id.desc())
        )
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            logger.error("Failed to list audit entries for booking %s: %s", booking_id, exc)
            raise RepositoryException(f"Failed to list audit entries: {exc}") from exc
