"""Default fee configuration values."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

# Flat fee deducted from every payout request, regardless of subscription tier.
PAYOUT_FEE_RATE: Decimal = Decimal("0.03")

# Informational platform fee shown to organizations at booking time.
# Not applied to the parent's charge; recomputed whenever displayed.
BOOKING_DISPLAY_FEE_RATES: Dict[str, Decimal] = {
    "Free": Decimal("0.03"),
    "Professional": Decimal("0.025"),
    "Teams": Decimal("0.0225"),
}

DEFAULT_TIER = "Free"
