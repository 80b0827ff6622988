"""
Catalog - the single object that owns all catalog state and exposes the
operation surface. Constructed once per process and held by whatever
dispatches incoming calls (the gateway, the CLI, tests).

Every operation runs under one coarse lock so the store and its category
index are never observed half-updated.
"""

import logging
import threading

from eczemahub.catalog import query
from eczemahub.catalog.access import AccessControl
from eczemahub.catalog.category_index import CategoryIndex
from eczemahub.catalog.errors import InvalidInput, NotFound, Unauthorized
from eczemahub.catalog.identity import Identity, SystemClock
from eczemahub.catalog.models import Category, Resource
from eczemahub.catalog.persistence import CatalogState
from eczemahub.catalog.store import ResourceStore
from eczemahub.catalog.validation import validate

logger = logging.getLogger("eczemahub.catalog")


def _category(value) -> Category:
    try:
        return Category(value)
    except ValueError:
        raise InvalidInput(f"Unknown category: {value}") from None


class Catalog:
    """
    Resource catalog with ownership rules:
    - anyone may create and read
    - the owner or an admin may update
    - only admins may delete or verify
    """

    def __init__(self, clock=None):
        self.clock = clock or SystemClock()
        self.store = ResourceStore()
        self.access = AccessControl()
        self._lock = threading.RLock()

    @classmethod
    def setup(cls, admin: Identity, clock=None) -> "Catalog":
        """First-time setup: the setup identity becomes the sole admin."""
        catalog = cls(clock=clock)
        catalog.access.grant_admin(admin)
        logger.info(f"Catalog initialized with admin {admin}")
        return catalog

    @classmethod
    def from_state(cls, state: CatalogState, clock=None) -> "Catalog":
        catalog = cls(clock=clock)
        catalog.restore(state)
        return catalog

    # ── Writes ────────────────────────────────────────────

    def create_resource(
        self,
        caller: Identity,
        title: str,
        description: str,
        category: Category,
    ) -> Resource:
        validate(title, description)
        category = _category(category)
        with self._lock:
            resource = self.store.create(title, description, category, caller, self.clock.now())
        logger.info(f"Created resource {resource.id} ({resource.category.value}) by {caller}")
        return resource

    def update_resource(
        self,
        caller: Identity,
        resource_id: int,
        title: str,
        description: str,
        category: Category,
    ) -> Resource:
        validate(title, description)
        category = _category(category)
        with self._lock:
            record = self.store.lookup(resource_id)
            if record is None:
                raise NotFound(resource_id)
            if not self.access.is_owner_or_admin(caller, record):
                logger.warning(f"Update of resource {resource_id} refused for {caller}")
                raise Unauthorized("Only the owner or an admin may update this resource")
            resource = self.store.update(resource_id, title, description, category, self.clock.now())
        logger.info(f"Updated resource {resource_id} by {caller}")
        return resource

    def delete_resource(self, caller: Identity, resource_id: int):
        with self._lock:
            self._require_admin(caller, "delete", resource_id)
            self.store.delete(resource_id)
        logger.info(f"Deleted resource {resource_id} by {caller}")

    def verify_resource(self, caller: Identity, resource_id: int) -> Resource:
        with self._lock:
            self._require_admin(caller, "verify", resource_id)
            resource = self.store.verify(resource_id, self.clock.now())
        logger.info(f"Verified resource {resource_id} by {caller}")
        return resource

    # ── Reads ─────────────────────────────────────────────

    def get_resource(self, resource_id: int) -> Resource:
        with self._lock:
            resource = self.store.get(resource_id)
        if resource is None:
            raise NotFound(resource_id)
        return resource

    def list_resources(self, page: int = 0) -> list[Resource]:
        with self._lock:
            return query.list_resources(self.store, page)

    def list_resources_by_category(self, category: Category, page: int = 0) -> list[Resource]:
        with self._lock:
            return query.list_by_category(self.store, _category(category), page)

    def search_resources(self, text: str, page: int = 0) -> list[Resource]:
        with self._lock:
            return query.search(self.store, text, page)

    def stats(self) -> dict:
        with self._lock:
            counts = self.store.index.counts()
            return {
                "resources": self.store.count,
                "verified": sum(1 for r in self.store.records() if r.verified),
                "categories": {c.value: n for c, n in counts.items()},
                "next_id": self.store.next_id,
                "admins": self.access.count,
            }

    # ── Access ────────────────────────────────────────────

    def is_admin(self, identity: Identity) -> bool:
        with self._lock:
            return self.access.is_admin(identity)

    def grant_admin(self, identity: Identity):
        with self._lock:
            self.access.grant_admin(identity)

    # ── Snapshots ─────────────────────────────────────────

    def snapshot(self) -> CatalogState:
        """Capture resources, index, id counter and admins as one value."""
        with self._lock:
            return CatalogState(
                resources=self.store.to_dict(),
                category_index=self.store.index.to_dict(),
                next_id=self.store.next_id,
                admins=self.access.admins(),
            )

    def restore(self, state: CatalogState):
        """Replace all in-memory state with the snapshot. Nothing is merged."""
        store = ResourceStore(
            resources={rid: r.model_copy() for rid, r in state.resources.items()},
            index=CategoryIndex(state.category_index),
            next_id=state.next_id,
        )
        access = AccessControl(state.admins)
        with self._lock:
            self.store = store
            self.access = access
        logger.info(
            f"Restored catalog: {store.count} resources, next id {store.next_id}, "
            f"{access.count} admins"
        )

    def _require_admin(self, caller: Identity, action: str, resource_id: int):
        if not self.access.is_admin(caller):
            logger.warning(f"{action.capitalize()} of resource {resource_id} refused for {caller}")
            raise Unauthorized(f"Only admins may {action} resources")

    @property
    def count(self) -> int:
        return self.store.count
