# backend/safeseat/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_actor
from .database import get_db
from .services import (
    get_audit_service,
    get_availability_checker,
    get_booking_service,
    get_notification_service,
    get_payout_service,
)

__all__ = [
    # Auth
    "get_current_actor",
    # Database
    "get_db",
    # Services
    "get_audit_service",
    "get_availability_checker",
    "get_booking_service",
    "get_notification_service",
    "get_payout_service",
]
