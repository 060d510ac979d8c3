# backend/safeseat/services/booking_service.py
"""
Booking Service for the SafeSeat platform

Owns the booking state machine and the side effects that accompany every
mutation:
- Booking creation on a free slot with a price snapshot
- Detail edits with slot re-validation when the time moves
- Organization-side status transitions
- Audit entries (best-effort, bounded retry) and notifications (fire-and-forget)

Every operation receives an explicit Actor; nothing is read from ambient
session state. Authorization always checks the booking's own parent_id and
organization_id, never the role alone.
"""

from datetime import date
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..actor import Actor
from ..core.config import settings
from ..core.enums import RoleName
from ..core.exceptions import (
    AuthorizationDeniedException,
    BusinessRuleException,
    ConflictException,
    InvalidTransitionException,
    NotFoundException,
    SlotConflictException,
    UniqueSlotViolation,
    ValidationException,
)
from ..models.audit_log import AuditAction, BookingAuditLog
from ..models.booking import Booking, BookingStatus, can_transition
from ..models.organization import Organization
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import BookingCreate, BookingUpdate
from .audit_service import AuditService
from .base import BaseService
from .fee_calculator import calculate_booking_display_fee, resolve_display_fee_tier
from .notification_service import (
    NotificationService,
    NotificationSink,
    booking_created_message,
    status_changed_message,
)
from .slot_availability import SlotAvailabilityChecker, day_bounds, slot_datetime, to_utc

logger = logging.getLogger(__name__)

BOOKING_NOT_FOUND = "Booking not found"


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Centralizes booking business logic; the HTTP layer only translates
    requests and domain exceptions.
    """

    def __init__(
        self,
        db: Session,
        notification_sink: Optional[NotificationSink] = None,
        audit_service: Optional[AuditService] = None,
        availability_checker: Optional[SlotAvailabilityChecker] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            notification_sink: Fire-and-forget notification target (defaults to in-app)
            audit_service: Audit trail writer
            availability_checker: Slot occupancy pre-check
        """
        super().__init__(db)
        self.repository = RepositoryFactory.create_booking_repository(db)
        self.service_catalog = RepositoryFactory.create_service_catalog_repository(db)
        self.organization_repository = RepositoryFactory.create_organization_repository(db)
        self.audit_service = audit_service or AuditService(db)
        self.availability = availability_checker or SlotAvailabilityChecker(db)
        self.notifications: NotificationSink = notification_sink or NotificationService(db)

    # Create

    @BaseService.measure_operation("create_booking")
    def create_booking(self, actor: Actor, booking_data: BookingCreate) -> Booking:
        """
        Create a pending booking on a free slot.

        Args:
            actor: Parent placing the booking
            booking_data: Organization, service, date + slot and booking details

        Returns:
            Created booking in status pending, payment unpaid

        Raises:
            AuthorizationDeniedException: actor is not a parent
            InvalidSlotException: slot is not on the daily grid
            NotFoundException: service missing or not offered by the organization
            BusinessRuleException: service is inactive
            SlotConflictException: slot already held by a non-cancelled booking
            StorageUnavailableException: storage failed; safe to retry
        """
        if not actor.is_parent:
            raise AuthorizationDeniedException("Only parents can create bookings")

        self.log_operation(
            "create_booking",
            parent_id=actor.id,
            organization_id=booking_data.organization_id,
            service_id=booking_data.service_id,
        )

        scheduled_at = slot_datetime(booking_data.booking_date, booking_data.slot_time)

        with self.storage_guard():
            service = self.service_catalog.get_by_id(booking_data.service_id)
        if service is None or service.organization_id != booking_data.organization_id:
            raise NotFoundException("Service not found", code="SERVICE_NOT_FOUND")
        if not service.is_active:
            raise BusinessRuleException(
                "This service is not currently accepting bookings", code="SERVICE_INACTIVE"
            )

        conflict_details = {
            "organization_id": booking_data.organization_id,
            "booking_date": booking_data.booking_date.isoformat(),
            "slot_time": booking_data.slot_time,
        }
        # Fast path only; the partial unique index decides
        if not self.availability.is_slot_available(booking_data.organization_id, scheduled_at):
            prometheus_metrics.record_slot_conflict("precheck")
            raise SlotConflictException(details=conflict_details)

        details = booking_data.model_dump(
            exclude={"organization_id", "service_id", "booking_date", "slot_time"}
        )
        with self.transaction():
            try:
                booking = self.repository.create(
                    organization_id=booking_data.organization_id,
                    service_id=service.id,
                    parent_id=actor.id,
                    scheduled_at=scheduled_at,
                    service_name=service.name,
                    total_price=Decimal(str(service.price)),
                    **details,
                )
            except UniqueSlotViolation as exc:
                prometheus_metrics.record_slot_conflict("constraint")
                raise SlotConflictException(details=conflict_details) from exc

        prometheus_metrics.record_booking_created()
        self.logger.info(f"Booking {booking.id} created for slot {scheduled_at.isoformat()}")

        self.audit_service.append_best_effort(
            booking.id,
            AuditAction.CREATE,
            actor.id,
            actor_role=actor.role,
            old_status=None,
            new_status=BookingStatus.PENDING,
        )
        self._notify_organization_owner(booking)
        return booking

    # Update

    @BaseService.measure_operation("update_booking")
    def update_booking(self, booking_id: str, actor: Actor, update_data: BookingUpdate) -> Booking:
        """
        Edit booking details.

        Parents may edit their own bookings while pending; the organization
        side may edit any non-terminal booking of its organization. Moving the
        booking re-validates the slot grid and availability.

        Raises:
            ValidationException: nothing to update
            NotFoundException: booking does not exist
            AuthorizationDeniedException: actor does not own the booking
            ConflictException: booking is no longer editable
            SlotConflictException: new slot already taken
        """
        changes: Dict[str, Any] = update_data.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationException("No changes provided", code="EMPTY_UPDATE")

        booking = self._get_booking(booking_id)
        self._authorize_edit(booking, actor)

        booking_date = changes.pop("booking_date", None)
        slot_time = changes.pop("slot_time", None)
        conflict_details: Dict[str, Any] = {}
        if booking_date is not None and slot_time is not None:
            new_scheduled_at = slot_datetime(booking_date, slot_time)
            if new_scheduled_at != booking.scheduled_at_utc:
                conflict_details = {
                    "organization_id": booking.organization_id,
                    "booking_date": booking_date.isoformat(),
                    "slot_time": slot_time,
                }
                if not self.availability.is_slot_available(
                    booking.organization_id, new_scheduled_at, exclude_booking_id=booking.id
                ):
                    prometheus_metrics.record_slot_conflict("precheck")
                    raise SlotConflictException(details=conflict_details)
                changes["scheduled_at"] = new_scheduled_at

        changes = {key: value for key, value in changes.items() if getattr(booking, key) != value}
        if not changes:
            self.logger.debug(f"Update for booking {booking_id} changed nothing")
            return booking

        with self.transaction():
            try:
                updated = self.repository.update(booking.id, **changes)
            except UniqueSlotViolation as exc:
                prometheus_metrics.record_slot_conflict("constraint")
                raise SlotConflictException(details=conflict_details) from exc
        if updated is None:
            raise NotFoundException(BOOKING_NOT_FOUND, code="BOOKING_NOT_FOUND")

        self.log_operation("update_booking", booking_id=booking_id, fields=sorted(changes))
        self.audit_service.append_best_effort(
            updated.id,
            AuditAction.UPDATE,
            actor.id,
            actor_role=actor.role,
            old_status=None,
            new_status=updated.status,
        )
        return updated

    # Status transitions

    @BaseService.measure_operation("change_status")
    def change_status(
        self, booking_id: str, actor: Actor, target_status: BookingStatus | str
    ) -> Booking:
        """
        Move a booking along the state machine (organization side only).

        The row is locked for the duration of the transaction and the write
        is conditional on the status that was checked, so two concurrent
        requests can never both leave the same status. Illegal edges raise
        InvalidTransitionException and leave no audit entry and no
        notification behind.
        """
        try:
            target = BookingStatus(target_status)
        except ValueError as exc:
            raise ValidationException(
                f"Unknown booking status: {target_status}", code="INVALID_STATUS"
            ) from exc

        with self.transaction():
            booking = self._get_booking(booking_id, for_update=True)
            self._require_organization_access(
                actor, booking.organization_id, "Only the booking's organization can change its status"
            )

            current = booking.booking_status
            if not can_transition(current, target):
                raise InvalidTransitionException(current.value, target.value)

            if not self.repository.transition_status(booking.id, current, target):
                self.db.refresh(booking)
                self.logger.info(
                    f"Booking {booking.id} moved to {booking.status} while {current.value} -> "
                    f"{target.value} was in flight"
                )
                raise InvalidTransitionException(booking.status, target.value)
            self.db.refresh(booking)

        prometheus_metrics.record_status_change(current.value, target.value)
        self.audit_service.append_best_effort(
            booking.id,
            AuditAction.STATUS_UPDATE,
            actor.id,
            actor_role=actor.role,
            old_status=current,
            new_status=target,
        )
        self._notify_parent(booking, target)
        return booking

    # Reads

    @BaseService.measure_operation("get_booking_for_actor")
    def get_booking_for_actor(self, booking_id: str, actor: Actor) -> Booking:
        booking = self._get_booking(booking_id)
        self._authorize_view(booking, actor)
        return booking

    @BaseService.measure_operation("list_bookings_for_parent")
    def list_bookings_for_parent(
        self,
        actor: Actor,
        *,
        status: Optional[BookingStatus] = None,
        service_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        search: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings placed by the acting parent, newest scheduled first."""
        if not actor.is_parent:
            raise AuthorizationDeniedException("Only parents have personal bookings")
        start, end = self._date_range(date_from, date_to)
        with self.storage_guard():
            return self.repository.list_for_parent(
                actor.id,
                status=status.value if status else None,
                service_id=service_id,
                start=start,
                end=end,
                search=search,
            )

    @BaseService.measure_operation("list_bookings_for_organization")
    def list_bookings_for_organization(
        self,
        actor: Actor,
        organization_id: Optional[str] = None,
        *,
        status: Optional[BookingStatus] = None,
        service_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        search: Optional[str] = None,
    ) -> List[Booking]:
        """Bookings received by the actor's organization, newest scheduled first."""
        organization_id = organization_id or actor.organization_id
        self._require_organization_access(
            actor, organization_id, "You are not a member of this organization"
        )
        start, end = self._date_range(date_from, date_to)
        with self.storage_guard():
            return self.repository.list_for_organization(
                organization_id,
                status=status.value if status else None,
                service_id=service_id,
                start=start,
                end=end,
                search=search,
            )

    def list_bookings_for_actor(self, actor: Actor, **filters: Any) -> List[Booking]:
        """Parents see their own bookings, the organization side sees its organization's."""
        if actor.is_parent:
            return self.list_bookings_for_parent(actor, **filters)
        return self.list_bookings_for_organization(actor, **filters)

    @BaseService.measure_operation("get_audit_trail")
    def get_audit_trail(self, booking_id: str, actor: Actor) -> List[BookingAuditLog]:
        booking = self._get_booking(booking_id)
        self._authorize_view(booking, actor)
        return self.audit_service.list_for_booking(booking.id)

    @BaseService.measure_operation("get_fee_preview")
    def get_fee_preview(self, booking_id: str, actor: Actor) -> Dict[str, Any]:
        """
        Informational platform fee for a booking, based on the organization's tier.

        Recomputed on every call and never stored; the parent is always
        charged the full total_price.
        """
        booking = self._get_booking(booking_id)
        organization = self._require_organization_access(
            actor, booking.organization_id, "Only the booking's organization can view fees"
        )

        rates = settings.booking_display_fee_rates
        tier = resolve_display_fee_tier(organization.subscription_tier, rates)
        breakdown = calculate_booking_display_fee(booking.total_price, tier, rates)
        return {
            "booking_id": booking.id,
            "subscription_tier": tier,
            "gross": breakdown.gross,
            "fee": breakdown.fee,
            "net": breakdown.net,
            "rate": breakdown.rate,
        }

    # Helpers

    def _get_booking(self, booking_id: str, for_update: bool = False) -> Booking:
        with self.storage_guard():
            booking = self.repository.get_by_id(booking_id, for_update=for_update)
        if booking is None:
            raise NotFoundException(BOOKING_NOT_FOUND, code="BOOKING_NOT_FOUND")
        return booking

    def _require_organization_access(
        self, actor: Actor, organization_id: Optional[str], message: str
    ) -> Organization:
        """Load the organization and fail closed unless the actor acts for it."""
        if not actor.is_organization_side or not organization_id:
            raise AuthorizationDeniedException(message)
        with self.storage_guard():
            organization = self.organization_repository.get_by_id(organization_id)
        if organization is None or not actor.acts_for(organization):
            raise AuthorizationDeniedException(message)
        return organization

    def _authorize_view(self, booking: Booking, actor: Actor) -> None:
        if actor.is_parent and booking.parent_id == actor.id:
            return
        self._require_organization_access(
            actor, booking.organization_id, "You do not have access to this booking"
        )

    def _authorize_edit(self, booking: Booking, actor: Actor) -> None:
        if actor.role is RoleName.PARENT:
            if booking.parent_id != actor.id:
                raise AuthorizationDeniedException("You can only edit your own bookings")
            if booking.booking_status is not BookingStatus.PENDING:
                raise ConflictException(
                    "Bookings can only be edited while pending",
                    code="BOOKING_NOT_EDITABLE",
                    details={"status": booking.status},
                )
            return

        self._require_organization_access(
            actor, booking.organization_id, "You do not have access to this booking"
        )
        if booking.is_terminal:
            raise ConflictException(
                f"{booking.status.capitalize()} bookings cannot be edited",
                code="BOOKING_NOT_EDITABLE",
                details={"status": booking.status},
            )

    @staticmethod
    def _date_range(date_from: Optional[date], date_to: Optional[date]) -> tuple[Any, Any]:
        if date_from and date_to and date_to < date_from:
            raise ValidationException("date_to must not be before date_from", code="INVALID_RANGE")
        start = day_bounds(date_from)[0] if date_from else None
        end = day_bounds(date_to)[1] if date_to else None
        return start, end

    @staticmethod
    def _scheduled_label(booking: Booking) -> str:
        scheduled = to_utc(booking.scheduled_at)
        return f"{scheduled.date().isoformat()} at {scheduled.strftime('%H:%M')}"

    def _notify_organization_owner(self, booking: Booking) -> None:
        title, body = booking_created_message(booking.service_name, self._scheduled_label(booking))
        try:
            organization = self.organization_repository.get_by_id(booking.organization_id)
            if organization is None:
                self.logger.warning(
                    f"No organization {booking.organization_id} to notify for booking {booking.id}"
                )
                return
            self.notifications.create_notification(
                organization.owner_id, title, body, "booking_created"
            )
        except Exception as e:
            self._record_notification_failure(booking, "booking_created", e)

    def _notify_parent(self, booking: Booking, status: BookingStatus) -> None:
        type_tag = f"booking_{status.value}"
        title, body = status_changed_message(
            status.value, booking.service_name, self._scheduled_label(booking)
        )
        try:
            self.notifications.create_notification(booking.parent_id, title, body, type_tag)
        except Exception as e:
            self._record_notification_failure(booking, type_tag, e)

    def _record_notification_failure(self, booking: Booking, type_tag: str, error: Exception) -> None:
        # Notifications never fail the booking operation
        self.logger.warning(
            f"Notification {type_tag} for booking {booking.id} failed: {type(error).__name__}: {error}"
        )
        prometheus_metrics.record_notification_failure(type_tag)
