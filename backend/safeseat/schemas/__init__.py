# backend/safeseat/schemas/__init__.py
"""
Pydantic schemas for the SafeSeat API.
"""

from .audit import AuditLogEntryResponse, AuditTrailResponse
from .base import Money, StandardizedModel, StrictRequestModel
from .booking import (
    AvailabilityResponse,
    BookingCreate,
    BookingFeePreviewResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
)
from .payout import FeeBreakdownResponse, PayoutCreate, PayoutHistoryResponse, PayoutResponse

__all__ = [
    # Base
    "Money",
    "StandardizedModel",
    "StrictRequestModel",
    # Booking
    "AvailabilityResponse",
    "BookingCreate",
    "BookingFeePreviewResponse",
    "BookingListResponse",
    "BookingResponse",
    "BookingStatusUpdate",
    "BookingUpdate",
    # Audit
    "AuditLogEntryResponse",
    "AuditTrailResponse",
    # Payout
    "FeeBreakdownResponse",
    "PayoutCreate",
    "PayoutHistoryResponse",
    "PayoutResponse",
]
