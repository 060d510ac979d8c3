# backend/safeseat/models/payout.py
"""
Payout request model.

A payout is a withdrawal request by an organization against its accumulated
balance. It is loosely coupled to bookings through the balance only.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Numeric, String
from sqlalchemy.sql import func
from sqlalchemy.types import JSON
import ulid

from ..database import Base


class PayoutStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REJECTED = "rejected"


class PayoutMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    CHECK = "check"


class PayoutRequest(Base):
    """Withdrawal request recorded with its fee breakdown."""

    __tablename__ = "payout_requests"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    organization_id = Column(String(26), nullable=False, index=True)
    amount_gross = Column(Numeric(10, 2), nullable=False)
    fee_amount = Column(Numeric(10, 2), nullable=False)
    amount_net = Column(Numeric(10, 2), nullable=False)
    payout_method = Column(String(30), nullable=False)
    payout_details = Column(JSON, nullable=True)
    status = Column(String(20), nullable=False, default=PayoutStatus.PENDING.value)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'paid', 'rejected')",
            name="ck_payout_requests_status",
        ),
        CheckConstraint("amount_gross > 0", name="check_payout_gross_positive"),
        CheckConstraint("fee_amount >= 0", name="check_payout_fee_non_negative"),
        Index("ix_payout_requests_org_created", "organization_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<PayoutRequest {self.id}: org={self.organization_id} gross={self.amount_gross} "
            f"net={self.amount_net} status={self.status}>"
        )
