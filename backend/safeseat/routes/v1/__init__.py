# backend/safeseat/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
All new endpoints should be added here.
"""

from . import bookings, organizations, pricing

__all__ = [
    "bookings",
    "organizations",
    "pricing",
]
