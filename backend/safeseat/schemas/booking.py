# backend/safeseat/schemas/booking.py
"""
Booking schemas for the SafeSeat platform.

Bookings are requested as a calendar date plus one of the fixed HH:MM slots
and stored as a single UTC timestamp. Price and service name are never
accepted from the client: they are snapshotted from the service catalog.
"""

from datetime import date, datetime
import re
from typing import List, Optional

from pydantic import Field, field_validator, model_validator

from ..core.constants import SLOT_TIMES
from ..models.booking import BookingStatus, PaymentStatus
from .base import Money, StandardizedModel, StrictRequestModel

SLOT_TIME_REGEX = re.compile(r"^(\d{1,2}):(\d{2})$")


def _normalize_slot_time(value: object) -> object:
    """Accept 9:00 as well as 09:00; grid membership is checked by the service."""
    if isinstance(value, str):
        match = SLOT_TIME_REGEX.fullmatch(value.strip())
        if not match:
            raise ValueError(f"Invalid time format: {value}. Expected HH:MM format.")
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    return value


def _strip(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


class BookingDetailsMixin(StrictRequestModel):
    """Free-form booking details a parent fills in."""

    vehicle_info: Optional[str] = Field(None, max_length=500)
    service_address: Optional[str] = Field(None, max_length=500)
    contact_phone: Optional[str] = Field(None, max_length=40)
    notes: Optional[str] = Field(None, max_length=2000)
    parent_first_name: Optional[str] = Field(None, max_length=100)
    parent_last_name: Optional[str] = Field(None, max_length=100)

    @field_validator(
        "vehicle_info",
        "service_address",
        "contact_phone",
        "notes",
        "parent_first_name",
        "parent_last_name",
    )
    @classmethod
    def clean_text(cls, v: Optional[str]) -> Optional[str]:
        return _strip(v)


class BookingCreate(BookingDetailsMixin):
    """Create a booking for one slot of an organization's daily grid."""

    organization_id: str = Field(..., min_length=1, description="Organization to book")
    service_id: str = Field(..., min_length=1, description="Service being booked")
    booking_date: date = Field(..., description="Calendar date of the booking")
    slot_time: str = Field(..., description=f"Slot start time, one of {', '.join(SLOT_TIMES)}")

    @field_validator("slot_time", mode="before")
    @classmethod
    def parse_slot_time(cls, v: object) -> object:
        return _normalize_slot_time(v)


class BookingUpdate(BookingDetailsMixin):
    """
    Partial edit of a booking.

    Moving a booking requires both booking_date and slot_time. Price, status
    and service cannot be edited and are rejected as unknown fields.
    """

    booking_date: Optional[date] = None
    slot_time: Optional[str] = None

    @field_validator("slot_time", mode="before")
    @classmethod
    def parse_slot_time(cls, v: object) -> object:
        return _normalize_slot_time(v)

    @model_validator(mode="after")
    def validate_reschedule_pair(self) -> "BookingUpdate":
        if (self.booking_date is None) != (self.slot_time is None):
            raise ValueError("booking_date and slot_time must be provided together")
        return self


class BookingStatusUpdate(StrictRequestModel):
    """Target status for an organization-side transition."""

    status: BookingStatus


class BookingResponse(StandardizedModel):
    id: str
    organization_id: str
    service_id: str
    parent_id: str
    service_name: str
    scheduled_at: datetime = Field(validation_alias="scheduled_at_utc")
    booking_date: date
    slot_time: str
    total_price: Money
    status: BookingStatus
    payment_status: PaymentStatus
    vehicle_info: Optional[str] = None
    service_address: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: Optional[str] = None
    parent_first_name: Optional[str] = None
    parent_last_name: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class BookingListResponse(StandardizedModel):
    items: List[BookingResponse]
    total: int


class AvailabilityResponse(StandardizedModel):
    """Slot occupancy for one organization and date."""

    organization_id: str
    booking_date: date
    slots: List[str] = Field(default_factory=lambda: list(SLOT_TIMES))
    booked_slots: List[str]
    available_slots: List[str]


class BookingFeePreviewResponse(StandardizedModel):
    """Informational fee shown to the organization; recomputed on every read."""

    booking_id: str
    subscription_tier: str
    gross: Money
    fee: Money
    net: Money
    rate: Money
