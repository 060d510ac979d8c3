# backend/safeseat/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService.

Endpoints:
    GET / - List bookings for the actor with filters
    POST / - Create a booking on a free slot
    GET /{booking_id} - Booking details
    PATCH /{booking_id} - Edit booking details / move to another slot
    POST /{booking_id}/status - Organization-side status transition
    GET /{booking_id}/audit-log - Audit trail, newest first
    GET /{booking_id}/fee-preview - Informational platform fee (organization side)
"""

import asyncio
from datetime import date
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from ...actor import Actor
from ...api.dependencies import get_booking_service, get_current_actor
from ...core.exceptions import DomainException, handle_domain_exception
from ...models.booking import BookingStatus
from ...schemas.audit import AuditLogEntryResponse, AuditTrailResponse
from ...schemas.booking import (
    BookingCreate,
    BookingFeePreviewResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    BookingUpdate,
)
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["bookings-v1"])

ULID_PATH_PATTERN = r"^[0-9A-HJKMNP-TV-Z]{26}$"

BookingId = Annotated[
    str,
    Path(
        description="Booking ULID",
        pattern=ULID_PATH_PATTERN,
        examples=["01HF4G12ABCDEF3456789XYZAB"],
    ),
]


# ============================================================================
# SECTION 1: Static routes (no path parameters)
# ============================================================================


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    service_id: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    """Parents get their own bookings; organization members get their organization's."""
    try:
        bookings = await asyncio.to_thread(
            booking_service.list_bookings_for_actor,
            actor,
            status=status_filter,
            service_id=service_id,
            date_from=date_from,
            date_to=date_to,
            search=search,
        )
        items = [BookingResponse.model_validate(booking) for booking in bookings]
        return BookingListResponse(items=items, total=len(items))
    except DomainException as e:
        handle_domain_exception(e)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate = Body(...),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Create a pending booking.

    409 SLOT_CONFLICT when the slot is already held; the caller should offer
    another slot. 503 STORAGE_UNAVAILABLE is safe to retry.
    """
    try:
        booking = await asyncio.to_thread(booking_service.create_booking, actor, booking_data)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


# ============================================================================
# SECTION 2: Dynamic routes (with path parameters)
# ============================================================================


@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    responses={404: {"description": "Booking not found"}},
)
async def get_booking(
    booking_id: BookingId,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    try:
        booking = await asyncio.to_thread(booking_service.get_booking_for_actor, booking_id, actor)
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: BookingId,
    update_data: BookingUpdate = Body(...),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """Edit details; moving to another slot re-checks availability."""
    try:
        booking = await asyncio.to_thread(
            booking_service.update_booking, booking_id, actor, update_data
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{booking_id}/status", response_model=BookingResponse)
async def change_booking_status(
    booking_id: BookingId,
    status_update: BookingStatusUpdate = Body(...),
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """409 INVALID_TRANSITION for edges outside the state machine; refresh and retry."""
    try:
        booking = await asyncio.to_thread(
            booking_service.change_status, booking_id, actor, status_update.status
        )
        return BookingResponse.model_validate(booking)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}/audit-log", response_model=AuditTrailResponse)
async def get_booking_audit_log(
    booking_id: BookingId,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> AuditTrailResponse:
    try:
        entries = await asyncio.to_thread(booking_service.get_audit_trail, booking_id, actor)
        return AuditTrailResponse(
            booking_id=booking_id,
            entries=[AuditLogEntryResponse.model_validate(entry) for entry in entries],
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{booking_id}/fee-preview", response_model=BookingFeePreviewResponse)
async def get_booking_fee_preview(
    booking_id: BookingId,
    actor: Actor = Depends(get_current_actor),
    booking_service: BookingService = Depends(get_booking_service),
) -> BookingFeePreviewResponse:
    try:
        preview = await asyncio.to_thread(booking_service.get_fee_preview, booking_id, actor)
        return BookingFeePreviewResponse(**preview)
    except DomainException as e:
        handle_domain_exception(e)
