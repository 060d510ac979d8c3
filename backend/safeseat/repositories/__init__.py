"""
Repository Pattern Implementation for the SafeSeat platform

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with generic CRUD operations
- IRepository: Interface defining required methods for all repositories
- RepositoryFactory: Factory for creating repository instances
- BookingRepository: Slot occupancy, listing and booking persistence
- AuditRepository: Append-only booking audit trail
- PayoutRepository: Payout requests and history
- OrganizationRepository / ServiceCatalogRepository: read-only collaborators

Usage:
    from safeseat.repositories import RepositoryFactory

    # In a service:
    repository = RepositoryFactory.create_booking_repository(db)
    bookings = repository.list_for_parent(parent_id)
"""

from .audit_repository import AuditRepository
from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .notification_repository import NotificationRepository
from .organization_repository import OrganizationRepository, ServiceCatalogRepository
from .payout_repository import PayoutRepository

__all__ = [
    "AuditRepository",
    "BaseRepository",
    "BookingRepository",
    "IRepository",
    "NotificationRepository",
    "OrganizationRepository",
    "PayoutRepository",
    "RepositoryFactory",
    "ServiceCatalogRepository",
]
