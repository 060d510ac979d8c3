# backend/safeseat/repositories/organization_repository.py
"""
Read access to the organization profile and service catalog collaborators.
"""

from sqlalchemy.orm import Session

from ..models.organization import Organization, Service
from .base_repository import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    """Organizations: subscription tier, owner and balance lookups."""

    def __init__(self, db: Session):
        super().__init__(db, Organization)


class ServiceCatalogRepository(BaseRepository[Service]):
    """Service catalog: (service_id) -> name, price, organization_id, is_active."""

    def __init__(self, db: Session):
        super().__init__(db, Service)
