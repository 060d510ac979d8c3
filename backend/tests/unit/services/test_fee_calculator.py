from __future__ import annotations

from decimal import Decimal

import pytest

from safeseat.core.exceptions import ValidationException
from safeseat.services.fee_calculator import (
    booking_display_fee_rate,
    calculate_booking_display_fee,
    calculate_payout_fee,
    resolve_display_fee_tier,
    round_money,
)


def test_payout_fee_is_three_percent_of_gross():
    breakdown = calculate_payout_fee(Decimal("200.00"))

    assert breakdown.gross == Decimal("200.00")
    assert breakdown.fee == Decimal("6.00")
    assert breakdown.net == Decimal("194.00")
    assert breakdown.rate == Decimal("0.03")


def test_professional_display_fee_on_hundred():
    breakdown = calculate_booking_display_fee(Decimal("100.00"), "Professional")

    assert breakdown.fee == Decimal("2.50")
    assert breakdown.net == Decimal("97.50")


@pytest.mark.parametrize(
    "tier, expected_fee",
    [("Free", Decimal("3.00")), ("Professional", Decimal("2.50")), ("Teams", Decimal("2.25"))],
)
def test_display_fee_per_tier(tier, expected_fee):
    assert calculate_booking_display_fee(Decimal("100"), tier).fee == expected_fee


@pytest.mark.parametrize("tier", [None, "", "Enterprise"])
def test_unknown_tier_uses_free_rate(tier):
    assert booking_display_fee_rate(tier) == Decimal("0.03")
    assert resolve_display_fee_tier(tier) == "Free"


def test_custom_rate_table_is_respected():
    rates = {"Free": Decimal("0.05"), "Professional": Decimal("0.01")}

    assert booking_display_fee_rate("Professional", rates) == Decimal("0.01")
    assert booking_display_fee_rate("Teams", rates) == Decimal("0.05")
    assert resolve_display_fee_tier("Teams", rates) == "Free"
    assert resolve_display_fee_tier("Professional", rates) == "Professional"


def test_fee_rounds_half_up_to_cents():
    # 0.50 * 0.03 = 0.015 -> 0.02
    breakdown = calculate_payout_fee(Decimal("0.50"))

    assert breakdown.fee == Decimal("0.02")
    assert breakdown.net == Decimal("0.48")


@pytest.mark.parametrize(
    "gross",
    ["0", "0.01", "0.33", "1.99", "17.17", "33.33", "99.99", "123.45", "999.95", "12345.67"],
)
def test_fee_plus_net_equals_gross(gross):
    for breakdown in (
        calculate_payout_fee(gross),
        calculate_booking_display_fee(gross, "Teams"),
    ):
        assert breakdown.fee + breakdown.net == breakdown.gross
        assert breakdown.fee >= 0
        assert breakdown.net >= 0


def test_zero_amount_has_zero_fee():
    breakdown = calculate_payout_fee(0)

    assert breakdown.fee == Decimal("0.00")
    assert breakdown.net == Decimal("0.00")


def test_negative_amount_rejected():
    with pytest.raises(ValidationException) as exc_info:
        calculate_payout_fee(Decimal("-1.00"))

    assert exc_info.value.code == "INVALID_AMOUNT"


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity"])
def test_non_numeric_amount_rejected(value):
    with pytest.raises(ValidationException):
        calculate_booking_display_fee(value, "Free")


def test_float_input_keeps_printed_value():
    assert round_money(0.1) == Decimal("0.10")
    assert round_money(2.675) == Decimal("2.68")
