"""Actor abstraction for callers authenticated by the upstream identity layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .core.enums import ORGANIZATION_ROLES, RoleName

if TYPE_CHECKING:
    from .models.organization import Organization


@dataclass(frozen=True)
class Actor:
    """The authenticated entity making a request."""

    id: str
    role: RoleName
    organization_id: Optional[str] = None

    @property
    def is_parent(self) -> bool:
        return self.role is RoleName.PARENT

    @property
    def is_organization_side(self) -> bool:
        """Organization owners and their team members."""
        return self.role in ORGANIZATION_ROLES

    def is_owner_of(self, organization: Organization) -> bool:
        return self.role is RoleName.ORGANIZATION and organization.owner_id == self.id

    def acts_for(self, organization: Optional[Organization]) -> bool:
        """
        True when the actor may act on behalf of the organization.

        The organization claim must match, and an `organization` role must
        also be the recorded owner. Team membership is asserted by the
        identity layer and trusted once the claim matches.
        """
        if organization is None or not self.is_organization_side:
            return False
        if self.organization_id != organization.id:
            return False
        if self.role is RoleName.ORGANIZATION:
            return self.is_owner_of(organization)
        return True
