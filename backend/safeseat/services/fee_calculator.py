# backend/safeseat/services/fee_calculator.py
"""
Fee arithmetic for payouts and the booking display fee.

Pure functions, no I/O. Two independent rates:

- the payout fee is a flat rate deducted from every payout request;
- the booking display fee depends on the organization's subscription tier
  and is only shown to organizations, never stored.

Product has not confirmed which of the two is canonical, so both stay
separately configurable. All amounts round half-up to cents.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Mapping, Optional, Union

from ..constants.pricing_defaults import BOOKING_DISPLAY_FEE_RATES, DEFAULT_TIER, PAYOUT_FEE_RATE
from ..core.exceptions import ValidationException

CENTS = Decimal("0.01")

AmountLike = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class FeeBreakdown:
    """Gross amount split into platform fee and net."""

    gross: Decimal
    fee: Decimal
    net: Decimal
    rate: Decimal


def round_money(value: AmountLike) -> Decimal:
    """Round to 2 decimal places, half-up."""
    return _to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _to_decimal(value: AmountLike) -> Decimal:
    try:
        # str() first so floats like 0.1 keep their printed value
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationException(f"Invalid amount: {value!r}", code="INVALID_AMOUNT") from exc
    if not amount.is_finite():
        raise ValidationException(f"Invalid amount: {value!r}", code="INVALID_AMOUNT")
    return amount


def _split(gross: AmountLike, rate: Decimal) -> FeeBreakdown:
    amount = round_money(gross)
    if amount < 0:
        raise ValidationException(
            "Amount must not be negative",
            code="INVALID_AMOUNT",
            details={"amount": str(amount)},
        )
    fee = round_money(amount * rate)
    return FeeBreakdown(gross=amount, fee=fee, net=amount - fee, rate=rate)


def calculate_payout_fee(gross: AmountLike, rate: Optional[Decimal] = None) -> FeeBreakdown:
    """
    Flat payout fee: fee = round(gross * rate, 2), net = gross - fee.

    Net is derived by subtraction so fee + net always equals gross to the cent.
    """
    return _split(gross, PAYOUT_FEE_RATE if rate is None else rate)


def resolve_display_fee_tier(
    tier: Optional[str], rates: Optional[Mapping[str, Decimal]] = None
) -> str:
    """The tier whose rate applies: the given tier if it has a rate, else Free."""
    table = BOOKING_DISPLAY_FEE_RATES if rates is None else rates
    if tier and tier in table:
        return tier
    return DEFAULT_TIER


def booking_display_fee_rate(
    tier: Optional[str], rates: Optional[Mapping[str, Decimal]] = None
) -> Decimal:
    """Tier-dependent display fee rate; unknown or missing tiers use the Free rate."""
    table = BOOKING_DISPLAY_FEE_RATES if rates is None else rates
    resolved = resolve_display_fee_tier(tier, table)
    return table.get(resolved, BOOKING_DISPLAY_FEE_RATES[DEFAULT_TIER])


def calculate_booking_display_fee(
    price: AmountLike,
    tier: Optional[str],
    rates: Optional[Mapping[str, Decimal]] = None,
) -> FeeBreakdown:
    """Informational platform fee for a service price; recompute on every display."""
    return _split(price, booking_display_fee_rate(tier, rates))
