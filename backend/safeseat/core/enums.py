# backend/safeseat/core/enums.py
"""
Core enums for the SafeSeat platform.

These values are shared by models, schemas and services so that role and
tier strings never drift between layers.
"""

from enum import Enum


class RoleName(str, Enum):
    """
    Roles supplied by the identity provider with every request.

    The core trusts the role claim but still checks the booking's own
    parent/organization fields before allowing a mutation.
    """

    PARENT = "parent"
    ORGANIZATION = "organization"
    TEAM_MEMBER = "team_member"


class SubscriptionTier(str, Enum):
    """Organization subscription levels (gate the booking display fee rate)."""

    FREE = "Free"
    PROFESSIONAL = "Professional"
    TEAMS = "Teams"


ORGANIZATION_ROLES = frozenset({RoleName.ORGANIZATION, RoleName.TEAM_MEMBER})
