from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from safeseat.core.config import settings
from safeseat.core.exceptions import RepositoryException, StorageUnavailableException, ValidationException
from safeseat.models.audit_log import AuditAction, BookingAuditLog
from safeseat.models.booking import BookingStatus
from safeseat.services.audit_service import AuditService


@pytest.fixture
def audit_service(db):
    return AuditService(db, max_attempts=2)


def test_append_persists_enum_values_as_strings(audit_service, db):
    entry = audit_service.append(
        "01HBOOKING0000000000000000",
        AuditAction.STATUS_UPDATE,
        "01HACTOR00000000000000000",
        actor_role="organization",
        old_status=BookingStatus.PENDING,
        new_status=BookingStatus.CONFIRMED,
    )

    stored = db.query(BookingAuditLog).filter(BookingAuditLog.id == entry.id).one()
    assert stored.action == "status_update"
    assert stored.old_status == "pending"
    assert stored.new_status == "confirmed"
    assert stored.actor_role == "organization"
    assert stored.created_at is not None


@pytest.mark.parametrize("booking_id, actor_id", [("", "actor"), ("booking", ""), (None, "actor")])
def test_append_requires_booking_and_actor(audit_service, booking_id, actor_id):
    with pytest.raises(ValidationException):
        audit_service.append(booking_id, AuditAction.UPDATE, actor_id)


def test_append_surfaces_storage_failure(audit_service):
    audit_service.repository.write = MagicMock(side_effect=RepositoryException("locked"))

    with pytest.raises(StorageUnavailableException):
        audit_service.append("booking", AuditAction.CREATE, "actor")


def test_list_is_newest_first(audit_service, db):
    base = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)
    for minutes, action in ((0, "create"), (5, "update"), (10, "status_update")):
        db.add(
            BookingAuditLog(
                booking_id="booking",
                action=action,
                actor_id="actor",
                created_at=base + timedelta(minutes=minutes),
            )
        )
    db.add(BookingAuditLog(booking_id="other", action="create", actor_id="actor", created_at=base))
    db.commit()

    entries = audit_service.list_for_booking("booking")

    assert [e.action for e in entries] == ["status_update", "update", "create"]


def test_appended_entries_are_ordered_by_time(audit_service):
    for action in (AuditAction.CREATE, AuditAction.UPDATE, AuditAction.STATUS_UPDATE):
        audit_service.append("booking", action, "actor")

    entries = audit_service.list_for_booking("booking")
    stamps = [e.created_at for e in entries]

    assert len(entries) == 3
    assert stamps == sorted(stamps, reverse=True)


def test_best_effort_retries_then_gives_up(audit_service, metric_value):
    write = MagicMock(side_effect=RepositoryException("locked"))
    audit_service.repository.write = write
    before = metric_value("safeseat_audit_write_failures_total", {"action": "update"})

    result = audit_service.append_best_effort("booking", AuditAction.UPDATE, "actor")

    assert result is None
    assert write.call_count == 2
    assert metric_value("safeseat_audit_write_failures_total", {"action": "update"}) == before + 1


def test_best_effort_recovers_on_retry(audit_service, db):
    real_write = audit_service.repository.write
    write = MagicMock(side_effect=[RepositoryException("blip"), None])

    def flaky(entry):
        write(entry)
        real_write(entry)

    audit_service.repository.write = flaky

    entry = audit_service.append_best_effort("booking", AuditAction.CREATE, "actor")

    assert entry is not None
    assert write.call_count == 2
    assert db.query(BookingAuditLog).count() == 1


def test_best_effort_skipped_when_disabled(audit_service, db, monkeypatch):
    monkeypatch.setattr(settings, "audit_enabled", False)

    assert audit_service.append_best_effort("booking", AuditAction.CREATE, "actor") is None
    assert db.query(BookingAuditLog).count() == 0


def test_validation_errors_are_not_retried(audit_service):
    with pytest.raises(ValidationException):
        audit_service.append_best_effort("", AuditAction.CREATE, "actor")
