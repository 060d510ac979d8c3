# backend/safeseat/schemas/payout.py
"""
Payout and fee breakdown schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from ..models.payout import PayoutMethod, PayoutStatus
from .base import Money, StandardizedModel, StrictRequestModel


class PayoutCreate(StrictRequestModel):
    """Withdrawal request against the organization's available balance."""

    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Gross amount")
    payout_method: PayoutMethod
    payout_details: Optional[Dict[str, Any]] = Field(
        None, description="Method-specific details (account, email, mailing address)"
    )


class PayoutResponse(StandardizedModel):
    id: str
    organization_id: str
    amount_gross: Money
    fee_amount: Money
    amount_net: Money
    payout_method: PayoutMethod
    payout_details: Optional[Dict[str, Any]] = None
    status: PayoutStatus
    created_at: datetime


class PayoutHistoryResponse(StandardizedModel):
    organization_id: str
    items: List[PayoutResponse]


class FeeBreakdownResponse(StandardizedModel):
    """Gross split into fee and net at a given rate."""

    gross: Money
    fee: Money
    net: Money
    rate: Money
    tier: Optional[str] = None
