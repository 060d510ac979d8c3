# backend/safeseat/api/dependencies/auth.py
"""
Actor resolution from identity headers.

Authentication happens upstream. The identity layer forwards the caller's
id, role and (for organization members) organization id as headers, and
the core trusts them as-is. Ownership is still checked against each
booking's own fields in the service layer.
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException

from ...actor import Actor
from ...core.constants import ACTOR_ID_HEADER, ACTOR_ROLE_HEADER, ORGANIZATION_ID_HEADER
from ...core.enums import RoleName
from ...core.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)


def _unauthorized(message: str) -> HTTPException:
    return UnauthorizedException(message, code="UNAUTHENTICATED").to_http_exception()


def get_current_actor(
    actor_id: Optional[str] = Header(None, alias=ACTOR_ID_HEADER),
    actor_role: Optional[str] = Header(None, alias=ACTOR_ROLE_HEADER),
    organization_id_header: Optional[str] = Header(None, alias=ORGANIZATION_ID_HEADER),
) -> Actor:
    """
    Build the Actor for this request.

    Raises:
        HTTPException 401: missing id or role, or unknown role
    """
    if not actor_id or not actor_id.strip():
        raise _unauthorized("Missing actor identity")
    if not actor_role:
        raise _unauthorized("Missing actor role")
    try:
        role = RoleName(actor_role.strip().lower())
    except ValueError:
        logger.warning(f"Rejected request with unknown role {actor_role!r}")
        raise _unauthorized(f"Unknown actor role: {actor_role}")

    org_id = organization_id_header.strip() if organization_id_header else None
    return Actor(
        id=actor_id.strip(),
        role=role,
        # Parents never act on behalf of an organization
        organization_id=None if role is RoleName.PARENT else org_id,
    )
