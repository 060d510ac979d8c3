from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from safeseat.core.exceptions import RepositoryException, UniqueSlotViolation
from safeseat.models.booking import Booking, BookingStatus
from safeseat.repositories.booking_repository import BookingRepository, is_active_slot_violation
from safeseat.services.slot_availability import day_bounds, slot_datetime


class _FakeDiag:
    def __init__(self, constraint_name: str | None):
        self.constraint_name = constraint_name


class _FakeOrig(Exception):
    def __init__(self, message: str, constraint_name: str | None = None):
        super().__init__(message)
        self.diag = _FakeDiag(constraint_name)


def _integrity_error(message: str, constraint_name: str | None = None) -> IntegrityError:
    return IntegrityError("stmt", params=None, orig=_FakeOrig(message, constraint_name))


def test_detects_postgres_violation_by_constraint_name():
    exc = _integrity_error("duplicate key value", "uq_bookings_org_slot_active")

    assert is_active_slot_violation(exc)


def test_detects_violation_by_message_text():
    assert is_active_slot_violation(
        _integrity_error(
            'duplicate key value violates unique constraint "uq_bookings_org_slot_active"'
        )
    )
    assert is_active_slot_violation(
        _integrity_error(
            "UNIQUE constraint failed: bookings.organization_id, bookings.scheduled_at"
        )
    )


def test_ignores_unrelated_constraints():
    exc = _integrity_error('violates check constraint "check_price_non_negative"', "check_price_non_negative")

    assert not is_active_slot_violation(exc)


@pytest.fixture
def repo(db):
    return BookingRepository(db)


def _create(repo, organization, service, parent, day, slot, **extra):
    fields = dict(
        organization_id=organization.id,
        service_id=service.id,
        parent_id=parent.id,
        scheduled_at=slot_datetime(day, slot),
        service_name=service.name,
        total_price=service.price,
    )
    fields.update(extra)
    return repo.create(**fields)


def test_create_duplicate_active_slot_raises_unique_violation(
    repo, db, organization, service, parent, other_parent, booking_day
):
    _create(repo, organization, service, parent, booking_day, "10:00")
    db.commit()

    with pytest.raises(UniqueSlotViolation):
        _create(repo, organization, service, other_parent, booking_day, "10:00")


def test_cancelled_booking_does_not_block_index(
    repo, db, organization, service, parent, other_parent, booking_day
):
    _create(
        repo, organization, service, parent, booking_day, "10:00",
        status=BookingStatus.CANCELLED.value,
    )
    db.commit()

    booking = _create(repo, organization, service, other_parent, booking_day, "10:00")
    db.commit()

    assert booking.id is not None


def test_other_integrity_errors_stay_generic(repo, organization, service, parent, booking_day):
    with pytest.raises(RepositoryException) as exc_info:
        _create(
            repo, organization, service, parent, booking_day, "10:00",
            status="archived",
        )

    assert not isinstance(exc_info.value, UniqueSlotViolation)


def test_active_bookings_between_excludes_cancelled(
    repo, seed_booking, organization, booking_day
):
    seed_booking(BookingStatus.CANCELLED, "09:00")
    kept = seed_booking(BookingStatus.CONFIRMED, "13:00")
    start, end = day_bounds(booking_day)

    rows = repo.get_active_bookings_between(organization.id, start, end)

    assert [row.id for row in rows] == [kept.id]


def test_list_filters(repo, db, organization, service, parent, booking_day):
    early = _create(
        repo, organization, service, parent, booking_day, "09:00",
        parent_first_name="Maria", parent_last_name="Lopez",
    )
    late = _create(
        repo, organization, service, parent, booking_day + timedelta(days=2), "09:00",
        parent_first_name="Sam", parent_last_name="Chen", status=BookingStatus.CONFIRMED.value,
    )
    db.commit()

    everything = repo.list_for_organization(organization.id)
    assert [b.id for b in everything] == [late.id, early.id]

    assert [b.id for b in repo.list_for_parent(parent.id, status="confirmed")] == [late.id]
    assert [b.id for b in repo.list_for_parent(parent.id, search="lop")] == [early.id]

    start, end = day_bounds(booking_day)
    in_range = repo.list_for_organization(organization.id, start=start, end=end)
    assert [b.id for b in in_range] == [early.id]


def test_update_to_taken_slot_raises_unique_violation(
    repo, db, organization, service, parent, booking_day
):
    _create(repo, organization, service, parent, booking_day, "09:00")
    second = _create(repo, organization, service, parent, booking_day, "10:00")
    db.commit()

    with pytest.raises(UniqueSlotViolation):
        repo.update(second.id, scheduled_at=slot_datetime(booking_day, "09:00"))


def test_transition_status_applies_only_from_expected_status(repo, db, seed_booking):
    booking = seed_booking(BookingStatus.PENDING)

    assert repo.transition_status(booking.id, BookingStatus.PENDING, BookingStatus.CONFIRMED)
    db.commit()
    db.refresh(booking)
    assert booking.status == "confirmed"
    assert booking.confirmed_at is not None

    # Stale expectation: the row is no longer pending
    assert not repo.transition_status(booking.id, BookingStatus.PENDING, BookingStatus.CANCELLED)
    db.commit()
    db.refresh(booking)
    assert booking.status == "confirmed"
    assert booking.cancelled_at is None


def test_get_by_id_for_update_returns_booking(repo, seed_booking):
    booking = seed_booking(BookingStatus.PENDING)

    locked = repo.get_by_id(booking.id, for_update=True)

    assert isinstance(locked, Booking)
    assert locked.id == booking.id
    assert repo.get_by_id("01HZZZZZZZZZZZZZZZZZZZZZZZ", for_update=True) is None
