"""Service for writing and reading the booking audit trail."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from sqlalchemy.orm import Session

from safeseat.core.config import settings
from safeseat.core.exceptions import StorageUnavailableException, ValidationException
from safeseat.models.audit_log import AuditAction, BookingAuditLog
from safeseat.monitoring.prometheus_metrics import prometheus_metrics
from safeseat.repositories.factory import RepositoryFactory

from .base import BaseService

StatusLike = Union[Enum, str, None]


class AuditService(BaseService):
    """Append-only audit entries, one per booking mutation."""

    def __init__(self, db: Session, max_attempts: Optional[int] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_audit_repository(db)
        self.max_attempts = max_attempts or settings.audit_write_attempts

    @BaseService.measure_operation("append_audit")
    def append(
        self,
        booking_id: str,
        action: AuditAction | str,
        actor_id: str,
        actor_role: StatusLike = None,
        old_status: StatusLike = None,
        new_status: StatusLike = None,
    ) -> BookingAuditLog:
        """
        Persist one audit row and commit it.

        Raises:
            ValidationException: booking_id or actor_id missing
            StorageUnavailableException: the row could not be stored
        """
        if not booking_id:
            raise ValidationException("booking_id is required for audit entries")
        if not actor_id:
            raise ValidationException("actor_id is required for audit entries")

        entry = BookingAuditLog(
            booking_id=booking_id,
            action=_value(action),
            actor_id=actor_id,
            actor_role=_value(actor_role),
            old_status=_value(old_status),
            new_status=_value(new_status),
        )
        with self.transaction():
            self.repository.write(entry)
        return entry

    def append_best_effort(
        self,
        booking_id: str,
        action: AuditAction | str,
        actor_id: str,
        actor_role: StatusLike = None,
        old_status: StatusLike = None,
        new_status: StatusLike = None,
    ) -> Optional[BookingAuditLog]:
        """
        Append with bounded retry; never raises a storage failure.

        Used after the booking mutation has committed: a lost audit row is
        logged and counted, the mutation itself stands.
        """
        if not settings.audit_enabled:
            return None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return self.append(
                    booking_id,
                    action,
                    actor_id,
                    actor_role=actor_role,
                    old_status=old_status,
                    new_status=new_status,
                )
            except StorageUnavailableException as e:
                self.logger.warning(
                    f"Audit write for booking {booking_id} failed "
                    f"(attempt {attempt}/{self.max_attempts}): {e.message}"
                )

        self.logger.error(
            f"Audit entry lost for booking {booking_id}: action={_value(action)} "
            f"{_value(old_status)}->{_value(new_status)} by {actor_id}"
        )
        prometheus_metrics.record_audit_write_failure(_value(action) or "unknown")
        return None

    @BaseService.measure_operation("list_audit_entries")
    def list_for_booking(self, booking_id: str) -> List[BookingAuditLog]:
        """All entries for a booking, newest first."""
        with self.storage_guard("Failed to load audit trail"):
            return self.repository.list_for_booking(booking_id)


def _value(item: StatusLike) -> Optional[str]:
    if item is None:
        return None
    if isinstance(item, Enum):
        return str(item.value)
    return str(item)
