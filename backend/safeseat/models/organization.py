# backend/safeseat/models/organization.py
"""
Organization and service catalog models.

Both tables are owned by external collaborators (organization profiles and
service management). The booking core only reads them: the subscription tier
and balance of an organization, and the current name/price of a service.
"""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..core.enums import SubscriptionTier
from ..database import Base


class Organization(Base):
    """Service provider organization."""

    __tablename__ = "organizations"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    owner_id = Column(String(26), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    subscription_tier = Column(String(20), nullable=False, default=SubscriptionTier.FREE.value)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    services = relationship("Service", back_populates="organization")

    def __repr__(self) -> str:
        return f"<Organization {self.id}: {self.name} tier={self.subscription_tier}>"


class Service(Base):
    """Bookable service offered by an organization."""

    __tablename__ = "services"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    organization_id = Column(String(26), ForeignKey("organizations.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    organization = relationship("Organization", back_populates="services")

    def __repr__(self) -> str:
        return f"<Service {self.id}: {self.name} price={self.price} active={self.is_active}>"
