# backend/safeseat/services/payout_service.py
"""
Payout Service for the SafeSeat platform

Organizations withdraw from their accumulated balance. Each request is
recorded with the flat payout fee already split out; settlement itself is
carried out by an external payout processor that moves the request to
paid or rejected.
"""

from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..actor import Actor
from ..core.config import settings
from ..core.exceptions import (
    AuthorizationDeniedException,
    InsufficientBalanceException,
    NotFoundException,
    ValidationException,
)
from ..models.organization import Organization
from ..models.payout import PayoutRequest, PayoutStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.payout import PayoutCreate
from .base import BaseService
from .fee_calculator import FeeBreakdown, calculate_payout_fee, round_money

logger = logging.getLogger(__name__)


class PayoutService(BaseService):
    """Payout requests and history for organizations."""

    def __init__(self, db: Session, fee_rate: Optional[Decimal] = None):
        super().__init__(db)
        self.repository = RepositoryFactory.create_payout_repository(db)
        self.organization_repository = RepositoryFactory.create_organization_repository(db)
        self.fee_rate = settings.payout_fee_rate if fee_rate is None else fee_rate

    def preview_payout(self, gross: Decimal) -> FeeBreakdown:
        """Fee and net for a gross amount, without persisting anything."""
        return calculate_payout_fee(gross, self.fee_rate)

    @BaseService.measure_operation("request_payout")
    def request_payout(
        self, actor: Actor, organization_id: str, payout_data: PayoutCreate
    ) -> PayoutRequest:
        """
        Record a payout request against the organization's balance.

        The balance itself is not debited here; the payout processor does that
        when it settles the request.

        Raises:
            NotFoundException: organization does not exist
            AuthorizationDeniedException: actor is not the organization owner
            ValidationException: amount is not positive
            InsufficientBalanceException: amount exceeds the available balance
        """
        organization = self._get_organization(organization_id)
        if not actor.is_owner_of(organization):
            raise AuthorizationDeniedException("Only the organization owner can request payouts")

        breakdown = self.preview_payout(payout_data.amount)
        if breakdown.gross <= 0:
            raise ValidationException("Payout amount must be greater than zero", code="INVALID_AMOUNT")

        available = round_money(organization.balance or 0)
        if breakdown.gross > available:
            prometheus_metrics.record_payout_request("rejected")
            self.logger.info(
                f"Payout of {breakdown.gross} rejected for organization {organization_id}: "
                f"balance {available}"
            )
            raise InsufficientBalanceException(str(breakdown.gross), str(available))

        with self.transaction():
            payout = self.repository.create(
                organization_id=organization.id,
                amount_gross=breakdown.gross,
                fee_amount=breakdown.fee,
                amount_net=breakdown.net,
                payout_method=payout_data.payout_method.value,
                payout_details=payout_data.payout_details,
                status=PayoutStatus.PENDING.value,
            )

        prometheus_metrics.record_payout_request("created")
        self.log_operation(
            "request_payout",
            organization_id=organization_id,
            gross=str(breakdown.gross),
            fee=str(breakdown.fee),
        )
        return payout

    @BaseService.measure_operation("get_payout_history")
    def get_payout_history(self, actor: Actor, organization_id: str) -> List[PayoutRequest]:
        """Payout requests for an organization, newest first."""
        organization = self._get_organization(organization_id)
        if not (actor.is_owner_of(organization) or actor.acts_for(organization)):
            raise AuthorizationDeniedException("You are not a member of this organization")

        with self.storage_guard():
            return self.repository.list_for_organization(organization.id)

    def _get_organization(self, organization_id: str) -> Organization:
        with self.storage_guard():
            organization = self.organization_repository.get_by_id(organization_id)
        if organization is None:
            raise NotFoundException("Organization not found", code="ORGANIZATION_NOT_FOUND")
        return organization
