# backend/safeseat/routes/v1/organizations.py
"""
Organization-scoped routes - API v1

Endpoints:
    GET /{organization_id}/availability - Booked and free slots for a date
    POST /{organization_id}/payouts - Request a payout (owner only)
    GET /{organization_id}/payouts - Payout history, newest first
"""

import asyncio
from datetime import date
import logging

from fastapi import APIRouter, Body, Depends, Query, status

from ...actor import Actor
from ...api.dependencies import get_availability_checker, get_current_actor, get_payout_service
from ...core.constants import SLOT_TIMES
from ...core.exceptions import DomainException, handle_domain_exception
from ...schemas.booking import AvailabilityResponse
from ...schemas.payout import PayoutCreate, PayoutHistoryResponse, PayoutResponse
from ...services.payout_service import PayoutService
from ...services.slot_availability import SlotAvailabilityChecker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["organizations-v1"])


@router.get("/{organization_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    organization_id: str,
    booking_date: date = Query(..., alias="date", description="Calendar date (YYYY-MM-DD)"),
    actor: Actor = Depends(get_current_actor),
    checker: SlotAvailabilityChecker = Depends(get_availability_checker),
) -> AvailabilityResponse:
    """
    Slot occupancy for one day.

    A failed lookup returns 503 rather than an empty booked list, so clients
    never mistake an outage for a free day.
    """
    try:
        available = await asyncio.to_thread(
            checker.get_available_slots, organization_id, booking_date
        )
        return AvailabilityResponse(
            organization_id=organization_id,
            booking_date=booking_date,
            slots=list(SLOT_TIMES),
            booked_slots=[slot for slot in SLOT_TIMES if slot not in available],
            available_slots=available,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{organization_id}/payouts",
    response_model=PayoutResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_payout(
    organization_id: str,
    payout_data: PayoutCreate = Body(...),
    actor: Actor = Depends(get_current_actor),
    payout_service: PayoutService = Depends(get_payout_service),
) -> PayoutResponse:
    """422 INSUFFICIENT_BALANCE when the gross amount exceeds the available balance."""
    try:
        payout = await asyncio.to_thread(
            payout_service.request_payout, actor, organization_id, payout_data
        )
        return PayoutResponse.model_validate(payout)
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{organization_id}/payouts", response_model=PayoutHistoryResponse)
async def get_payout_history(
    organization_id: str,
    actor: Actor = Depends(get_current_actor),
    payout_service: PayoutService = Depends(get_payout_service),
) -> PayoutHistoryResponse:
    try:
        payouts = await asyncio.to_thread(
            payout_service.get_payout_history, actor, organization_id
        )
        return PayoutHistoryResponse(
            organization_id=organization_id,
            items=[PayoutResponse.model_validate(payout) for payout in payouts],
        )
    except DomainException as e:
        handle_domain_exception(e)
