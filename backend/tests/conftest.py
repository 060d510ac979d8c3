# backend/tests/conftest.py
"""
Pytest configuration for the SafeSeat backend.

Every test gets its own in-memory SQLite database built from the model
metadata, so the partial unique index on active slots is enforced exactly
as it is in PostgreSQL.
"""

from __future__ import annotations

import os

# Must be set before any safeseat import reads settings
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator, List, Optional, Tuple

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
import ulid

from safeseat.actor import Actor
from safeseat.api.dependencies.database import get_db
from safeseat.core.enums import RoleName, SubscriptionTier
from safeseat.database import Base
import safeseat.models  # noqa: F401 - register all tables on Base.metadata
from safeseat.models import Booking, BookingStatus, Organization, Service
from safeseat.schemas.booking import BookingCreate
from safeseat.services.booking_service import BookingService
from safeseat.services.slot_availability import slot_datetime


def new_id() -> str:
    return str(ulid.ULID())


class RecordingSink:
    """Notification sink that keeps every call in memory."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, str, str]] = []

    def create_notification(self, recipient_id: str, title: str, body: str, type_tag: str) -> None:
        self.calls.append((recipient_id, title, body, type_tag))

    @property
    def type_tags(self) -> List[str]:
        return [call[3] for call in self.calls]


class FailingSink:
    """Notification sink whose transport is down."""

    def __init__(self) -> None:
        self.attempts = 0

    def create_notification(self, recipient_id: str, title: str, body: str, type_tag: str) -> None:
        self.attempts += 1
        raise RuntimeError("notification transport down")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def booking_day() -> date:
    return date.today() + timedelta(days=7)


@pytest.fixture
def organization(db: Session) -> Organization:
    org = Organization(
        id=new_id(),
        owner_id=new_id(),
        name="Safe Rides Co",
        subscription_tier=SubscriptionTier.PROFESSIONAL.value,
        balance=Decimal("500.00"),
    )
    db.add(org)
    db.commit()
    return org


@pytest.fixture
def other_organization(db: Session) -> Organization:
    org = Organization(
        id=new_id(),
        owner_id=new_id(),
        name="Buckle Up Inc",
        subscription_tier=SubscriptionTier.FREE.value,
        balance=Decimal("0.00"),
    )
    db.add(org)
    db.commit()
    return org


@pytest.fixture
def service(db: Session, organization: Organization) -> Service:
    svc = Service(
        id=new_id(),
        organization_id=organization.id,
        name="Car Seat Installation",
        price=Decimal("100.00"),
        is_active=True,
    )
    db.add(svc)
    db.commit()
    return svc


@pytest.fixture
def parent() -> Actor:
    return Actor(id=new_id(), role=RoleName.PARENT)


@pytest.fixture
def other_parent() -> Actor:
    return Actor(id=new_id(), role=RoleName.PARENT)


@pytest.fixture
def org_owner(organization: Organization) -> Actor:
    return Actor(
        id=organization.owner_id,
        role=RoleName.ORGANIZATION,
        organization_id=organization.id,
    )


@pytest.fixture
def team_member(organization: Organization) -> Actor:
    return Actor(id=new_id(), role=RoleName.TEAM_MEMBER, organization_id=organization.id)


@pytest.fixture
def outsider(other_organization: Organization) -> Actor:
    return Actor(
        id=other_organization.owner_id,
        role=RoleName.ORGANIZATION,
        organization_id=other_organization.id,
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def booking_service(db: Session, sink: RecordingSink) -> BookingService:
    return BookingService(db, notification_sink=sink)


def actor_headers(actor: Actor, organization_id: Optional[str] = None) -> dict:
    headers = {"X-Actor-Id": actor.id, "X-Actor-Role": actor.role.value}
    org_id = organization_id or actor.organization_id
    if org_id:
        headers["X-Organization-Id"] = org_id
    return headers


@pytest.fixture
def headers_for():
    return actor_headers


@pytest.fixture
def client(db: Session) -> Iterator[TestClient]:
    from safeseat.main import app

    def _override_get_db() -> Iterator[Session]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def book(booking_service, parent, organization, service, booking_day):
    """Create a booking through the service, defaulting to the 10:00 slot."""

    def _book(slot: str = "10:00", actor: Optional[Actor] = None, day: Optional[date] = None, **details):
        return booking_service.create_booking(
            actor or parent,
            BookingCreate(
                organization_id=organization.id,
                service_id=service.id,
                booking_date=day or booking_day,
                slot_time=slot,
                **details,
            ),
        )

    return _book


@pytest.fixture
def seed_booking(db, parent, organization, service, booking_day):
    """Insert a booking row directly in any status, bypassing the service layer."""

    def _seed(status: BookingStatus = BookingStatus.PENDING, slot: str = "10:00") -> Booking:
        booking = Booking(
            organization_id=organization.id,
            service_id=service.id,
            parent_id=parent.id,
            scheduled_at=slot_datetime(booking_day, slot),
            service_name=service.name,
            total_price=service.price,
            status=status.value,
        )
        db.add(booking)
        db.commit()
        return booking

    return _seed


@pytest.fixture
def metric_value():
    """Read a sample from the SafeSeat registry, treating an unseen series as 0."""
    from safeseat.monitoring.prometheus_metrics import REGISTRY

    def _read(name: str, labels: Optional[dict] = None) -> float:
        return REGISTRY.get_sample_value(name, labels or {}) or 0.0

    return _read
