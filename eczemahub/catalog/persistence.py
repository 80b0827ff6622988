"""
Persistence Bridge - the snapshot value and the file it lives in.

A snapshot is exactly {resources, category_index, next_id, admins}. Anything
else, or anything internally inconsistent, is refused: a catalog that cannot
be rebuilt exactly must not be served.
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, ValidationError, model_validator

from eczemahub.catalog.errors import InvalidInput, SnapshotError
from eczemahub.catalog.models import Category, Resource
from eczemahub.catalog.validation import validate

logger = logging.getLogger("eczemahub.catalog.persistence")


class CatalogState(BaseModel):
    """Full reconstructable catalog state."""

    model_config = ConfigDict(extra="forbid")

    resources: dict[int, Resource]
    category_index: dict[Category, list[StrictInt]]
    next_id: StrictInt
    admins: list[StrictStr]

    @model_validator(mode="after")
    def _check_consistency(self):
        if self.next_id < 1:
            raise ValueError("next_id must be at least 1")

        for rid, resource in self.resources.items():
            if rid != resource.id:
                raise ValueError(f"resource key {rid} does not match record id {resource.id}")
            if not 1 <= rid < self.next_id:
                raise ValueError(f"resource id {rid} is outside 1..{self.next_id - 1}")
            if resource.updated_at < resource.created_at:
                raise ValueError(f"resource {rid} was updated before it was created")
            try:
                validate(resource.title, resource.description)
            except InvalidInput as e:
                raise ValueError(f"resource {rid}: {e.message}") from e

        seen = set()
        for category, ids in self.category_index.items():
            for rid in ids:
                if rid in seen:
                    raise ValueError(f"resource {rid} is indexed more than once")
                seen.add(rid)
                resource = self.resources.get(rid)
                if resource is None:
                    raise ValueError(f"indexed resource {rid} is not stored")
                if resource.category != category:
                    raise ValueError(f"resource {rid} is indexed under {category.value}")

        missing = set(self.resources) - seen
        if missing:
            raise ValueError(f"resources missing from the index: {sorted(missing)}")

        if len(set(self.admins)) != len(self.admins):
            raise ValueError("admin list has duplicates")
        return self

    @classmethod
    def from_dict(cls, data) -> "CatalogState":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise SnapshotError(f"Invalid snapshot: {e}") from e

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")


class SnapshotFile:
    """JSON snapshot on disk. Saves replace the file atomically."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> CatalogState:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SnapshotError(f"Cannot read snapshot {self.path}: {e}") from e
        state = CatalogState.from_dict(data)
        logger.info(f"Loaded snapshot {self.path} ({len(state.resources)} resources)")
        return state

    def save(self, state: CatalogState):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(state.to_dict(), f, indent=2, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info(f"Saved snapshot {self.path} ({len(state.resources)} resources)")
