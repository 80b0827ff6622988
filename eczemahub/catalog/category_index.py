"""
Category Index - secondary mapping of category -> resource ids.
Ids keep their insertion order within each category. The store keeps this
index in step with its records on every insert, delete and recategorize.
"""

import logging
from typing import Optional

from eczemahub.catalog.models import Category

logger = logging.getLogger("eczemahub.catalog.index")


class CategoryIndex:
    """
    Ordered per-category id lists.
    A category appears once something has been filed under it and stays even
    when its list empties, so snapshots reproduce the index exactly.
    """

    def __init__(self, lists: Optional[dict[Category, list[int]]] = None):
        self._lists: dict[Category, list[int]] = {}
        for category, ids in (lists or {}).items():
            self._lists[Category(category)] = list(ids)

    def add(self, category: Category, resource_id: int):
        self._lists.setdefault(category, []).append(resource_id)

    def remove(self, category: Category, resource_id: int):
        ids = self._lists.get(category)
        if ids is None:
            return
        ids[:] = [i for i in ids if i != resource_id]

    def move(self, resource_id: int, old: Category, new: Category):
        """Refile an id under a new category, appending it to the new list."""
        if old == new:
            return
        self.remove(old, resource_id)
        self.add(new, resource_id)
        logger.debug(f"Moved resource {resource_id}: {old.value} -> {new.value}")

    def ids(self, category: Category) -> list[int]:
        return list(self._lists.get(category, []))

    def counts(self) -> dict[Category, int]:
        """Number of ids per category, for every category in order."""
        return {category: len(self._lists.get(category, [])) for category in Category}

    def to_dict(self) -> dict[Category, list[int]]:
        """Copy of the index, keys in category order."""
        ordered = sorted(self._lists, key=lambda c: c.ordinal)
        return {category: list(self._lists[category]) for category in ordered}
