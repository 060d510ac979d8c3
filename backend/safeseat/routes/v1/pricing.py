# backend/safeseat/routes/v1/pricing.py
"""
Fee calculator routes - API v1

Stateless previews of both platform fees. Nothing is persisted.

Endpoints:
    GET /booking-fee - Tier-dependent display fee for a service price
    GET /payout-fee - Flat payout fee for a gross amount
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Query

from ...core.config import settings
from ...core.enums import SubscriptionTier
from ...core.exceptions import DomainException, handle_domain_exception
from ...schemas.payout import FeeBreakdownResponse
from ...services.fee_calculator import calculate_booking_display_fee, calculate_payout_fee

router = APIRouter(tags=["pricing-v1"])


@router.get("/booking-fee", response_model=FeeBreakdownResponse)
async def get_booking_fee(
    price: Decimal = Query(..., ge=0, description="Service price"),
    tier: Optional[SubscriptionTier] = Query(None, description="Organization subscription tier"),
) -> FeeBreakdownResponse:
    """Informational fee shown to organizations; the parent pays the full price."""
    try:
        tier_value = tier.value if tier else SubscriptionTier.FREE.value
        breakdown = calculate_booking_display_fee(
            price, tier_value, settings.booking_display_fee_rates
        )
        return FeeBreakdownResponse(
            gross=breakdown.gross,
            fee=breakdown.fee,
            net=breakdown.net,
            rate=breakdown.rate,
            tier=tier_value,
        )
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/payout-fee", response_model=FeeBreakdownResponse)
async def get_payout_fee(
    amount: Decimal = Query(..., ge=0, description="Gross payout amount"),
) -> FeeBreakdownResponse:
    try:
        breakdown = calculate_payout_fee(amount, settings.payout_fee_rate)
        return FeeBreakdownResponse(
            gross=breakdown.gross,
            fee=breakdown.fee,
            net=breakdown.net,
            rate=breakdown.rate,
        )
    except DomainException as e:
        handle_domain_exception(e)
