# backend/safeseat/repositories/payout_repository.py
"""
Payout Repository for the SafeSeat platform.
"""

import logging
from typing import List, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.payout import PayoutRequest
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class PayoutRepository(BaseRepository[PayoutRequest]):
    """Repository for payout request data access."""

    def __init__(self, db: Session):
        super().__init__(db, PayoutRequest)

    def list_for_organization(self, organization_id: str) -> List[PayoutRequest]:
        """Payout history for an organization, newest first."""
        try:
            return cast(
                List[PayoutRequest],
                self.db.query(PayoutRequest)
                .filter(PayoutRequest.organization_id == organization_id)
                .order_by(PayoutRequest.created_at.desc(), PayoutRequest.id.desc())
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing payouts for {organization_id}: {str(e)}")
            raise RepositoryException(f"Failed to list payout requests: {str(e)}")
