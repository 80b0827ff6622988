"""
Query Layer - read-only pagination, category listing and substring search.
None of these fail: no results is an empty list.
"""

from typing import Iterable, TypeVar

from eczemahub.catalog.models import Category, Resource
from eczemahub.catalog.store import ResourceStore

PAGE_SIZE = 20

T = TypeVar("T")


def paginate(items: Iterable[T], page: int, page_size: int = PAGE_SIZE) -> list[T]:
    """Items of the given zero-based page. Out-of-range pages are empty."""
    if page < 0:
        return []
    start = page * page_size
    result = []
    for i, item in enumerate(items):
        if i >= start + page_size:
            break
        if i >= start:
            result.append(item)
    return result


def list_resources(store: ResourceStore, page: int) -> list[Resource]:
    return [r.model_copy() for r in paginate(store.records(), page)]


def list_by_category(store: ResourceStore, category: Category, page: int) -> list[Resource]:
    """Page over the category's ids, resolving each; dangling ids are skipped."""
    results = []
    for rid in paginate(store.ids_in(category), page):
        resource = store.get(rid)
        if resource is not None:
            results.append(resource)
    return results


def matches(resource: Resource, query_lower: str) -> bool:
    return query_lower in resource.title.lower() or query_lower in resource.description.lower()


def search(store: ResourceStore, query: str, page: int) -> list[Resource]:
    """Case-insensitive substring match on title or description, then paginated."""
    query_lower = query.lower()
    hits = (r for r in store.records() if matches(r, query_lower))
    return [r.model_copy() for r in paginate(hits, page)]
