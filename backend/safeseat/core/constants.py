# backend/safeseat/core/constants.py
"""
Application-wide constants for the SafeSeat booking service.
"""

BRAND_NAME = "SafeSeat"

API_TITLE = f"{BRAND_NAME} Booking API"
API_VERSION = "1.0.0"
API_DESCRIPTION = (
    "Booking lifecycle, slot availability, fee calculation, audit trail and "
    "payout requests for car-seat safety service organizations."
)

# Fixed daily slot grid: one-hour slots, start times in HH:MM
SLOT_TIMES = (
    "09:00",
    "10:00",
    "11:00",
    "12:00",
    "13:00",
    "14:00",
    "15:00",
    "16:00",
    "17:00",
)

# Identity headers supplied by the upstream session layer
ACTOR_ID_HEADER = "X-Actor-Id"
ACTOR_ROLE_HEADER = "X-Actor-Role"
ORGANIZATION_ID_HEADER = "X-Organization-Id"
