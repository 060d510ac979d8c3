"""Audit trail response schemas."""

from datetime import datetime
from typing import List, Optional

from .base import StandardizedModel


class AuditLogEntryResponse(StandardizedModel):
    id: str
    booking_id: str
    action: str
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    actor_id: str
    actor_role: Optional[str] = None
    created_at: datetime


class AuditTrailResponse(StandardizedModel):
    """Entries for a booking, newest first."""

    booking_id: str
    entries: List[AuditLogEntryResponse]
