"""
Access Control - admin membership and the owner-or-admin edit check.
These two predicates are the only authorization rules in the catalog.
"""

import logging
from typing import Iterable, Optional

from eczemahub.catalog.identity import Identity
from eczemahub.catalog.models import Resource

logger = logging.getLogger("eczemahub.catalog.access")


class AccessControl:
    """Holds the admin set. Grant order is kept for snapshots."""

    def __init__(self, admins: Optional[Iterable[Identity]] = None):
        self._admins: dict[Identity, None] = dict.fromkeys(admins or [])

    def is_admin(self, identity: Identity) -> bool:
        return identity in self._admins

    def is_owner_or_admin(self, identity: Identity, record: Resource) -> bool:
        return identity == record.created_by or self.is_admin(identity)

    def grant_admin(self, identity: Identity):
        """Reserved for the external administrative action. Idempotent."""
        if identity not in self._admins:
            self._admins[identity] = None
            logger.info(f"Granted admin to {identity}")

    def admins(self) -> list[Identity]:
        return list(self._admins)

    @property
    def count(self) -> int:
        return len(self._admins)
