# backend/safeseat/repositories/factory.py
"""
Repository Factory for the SafeSeat platform

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .audit_repository import AuditRepository
    from .booking_repository import BookingRepository
    from .notification_repository import NotificationRepository
    from .organization_repository import OrganizationRepository, ServiceCatalogRepository
    from .payout_repository import PayoutRepository


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations if needed.
    """

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_audit_repository(db: Session) -> "AuditRepository":
        """Create repository for booking audit entries."""
        from .audit_repository import AuditRepository

        return AuditRepository(db)

    @staticmethod
    def create_payout_repository(db: Session) -> "PayoutRepository":
        """Create repository for payout requests."""
        from .payout_repository import PayoutRepository

        return PayoutRepository(db)

    @staticmethod
    def create_organization_repository(db: Session) -> "OrganizationRepository":
        """Create repository for organization lookups."""
        from .organization_repository import OrganizationRepository

        return OrganizationRepository(db)

    @staticmethod
    def create_service_catalog_repository(db: Session) -> "ServiceCatalogRepository":
        """Create repository for service catalog lookups."""
        from .organization_repository import ServiceCatalogRepository

        return ServiceCatalogRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> "NotificationRepository":
        """Create repository for in-app notifications."""
        from .notification_repository import NotificationRepository

        return NotificationRepository(db)
