"""
EczemaHub Catalog - in-memory resource store with category index,
access rules and snapshot/restore.
"""

from eczemahub.catalog.catalog import Catalog
from eczemahub.catalog.errors import (
    AlreadyExists,
    CatalogError,
    InternalError,
    InvalidInput,
    NotFound,
    SnapshotError,
    Unauthorized,
)
from eczemahub.catalog.identity import ANONYMOUS, FixedClock, Identity, SystemClock, identity_from
from eczemahub.catalog.models import Category, Resource
from eczemahub.catalog.persistence import CatalogState, SnapshotFile
from eczemahub.catalog.query import PAGE_SIZE

__all__ = [
    "Catalog",
    "CatalogError",
    "NotFound",
    "AlreadyExists",
    "InvalidInput",
    "Unauthorized",
    "InternalError",
    "SnapshotError",
    "Identity",
    "ANONYMOUS",
    "identity_from",
    "SystemClock",
    "FixedClock",
    "Category",
    "Resource",
    "CatalogState",
    "SnapshotFile",
    "PAGE_SIZE",
]
