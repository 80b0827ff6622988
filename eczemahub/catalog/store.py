"""
Resource Store - primary mapping of resource id -> record.
Owns id allocation and the record lifecycle, and keeps the category index
consistent with the records on every change.
Ids are never reused, even after deletion.
"""

import logging
from typing import Iterator, Optional

from eczemahub.catalog.category_index import CategoryIndex
from eczemahub.catalog.errors import NotFound
from eczemahub.catalog.identity import Identity
from eczemahub.catalog.models import Category, Resource

logger = logging.getLogger("eczemahub.catalog.store")


class ResourceStore:
    """
    In-memory records plus their category index.
    Records are enumerated in insertion order. Everything handed out is a copy.
    """

    def __init__(
        self,
        resources: Optional[dict[int, Resource]] = None,
        index: Optional[CategoryIndex] = None,
        next_id: int = 1,
    ):
        self._resources: dict[int, Resource] = dict(resources or {})
        self.index = index or CategoryIndex()
        self.next_id = next_id

    def create(
        self,
        title: str,
        description: str,
        category: Category,
        caller: Identity,
        now: int,
    ) -> Resource:
        """Insert a new record under the next id and file it in the index."""
        rid = self.next_id
        resource = Resource(
            id=rid,
            title=title,
            description=description,
            category=category,
            created_at=now,
            updated_at=now,
            verified=False,
            created_by=caller,
        )
        self._resources[rid] = resource
        self.index.add(category, rid)
        self.next_id = rid + 1
        return resource.model_copy()

    def get(self, resource_id: int) -> Optional[Resource]:
        resource = self._resources.get(resource_id)
        return resource.model_copy() if resource else None

    def update(
        self,
        resource_id: int,
        title: str,
        description: str,
        category: Category,
        now: int,
    ) -> Resource:
        """Overwrite the editable fields; refiles the id if the category changed."""
        resource = self._require(resource_id)
        old_category = resource.category
        resource.title = title
        resource.description = description
        resource.category = category
        resource.updated_at = now
        self.index.move(resource_id, old_category, category)
        return resource.model_copy()

    def delete(self, resource_id: int):
        resource = self._resources.pop(resource_id, None)
        if resource is None:
            raise NotFound(resource_id)
        self.index.remove(resource.category, resource_id)

    def verify(self, resource_id: int, now: int) -> Resource:
        resource = self._require(resource_id)
        resource.verified = True
        resource.updated_at = now
        return resource.model_copy()

    def records(self) -> Iterator[Resource]:
        """Stored records in enumeration order. Not copies; read only."""
        return iter(self._resources.values())

    def ids_in(self, category: Category) -> list[int]:
        return self.index.ids(category)

    def lookup(self, resource_id: int) -> Optional[Resource]:
        """Stored record without copying. Read only."""
        return self._resources.get(resource_id)

    def to_dict(self) -> dict[int, Resource]:
        return {rid: r.model_copy() for rid, r in self._resources.items()}

    def _require(self, resource_id: int) -> Resource:
        resource = self._resources.get(resource_id)
        if resource is None:
            raise NotFound(resource_id)
        return resource

    @property
    def count(self) -> int:
        return len(self._resources)
