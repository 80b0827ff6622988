"""
Snapshot tests - round trips, the snapshot file, and rejection of bad shapes.
"""

import json

import pytest

from eczemahub.catalog import (
    Catalog,
    CatalogState,
    Category,
    FixedClock,
    Identity,
    SnapshotError,
    SnapshotFile,
)

ADMIN = Identity("admin")
ALICE = Identity("alice")


@pytest.fixture
def populated(catalog):
    catalog.create_resource(ALICE, "Wet wraps", "Overnight wet wrap therapy", Category.TREATMENT)
    catalog.create_resource(ALICE, "Dust mites", "Reducing exposure at home", Category.PREVENTION)
    catalog.create_resource(ALICE, "Trial results", "Dupilumab study summary", Category.RESEARCH)
    catalog.create_resource(ALICE, "Old note", "To be removed", Category.TESTIMONIAL)
    catalog.update_resource(ALICE, 2, "Dust mites", "Covers and washing", Category.TREATMENT)
    catalog.verify_resource(ADMIN, 1)
    catalog.delete_resource(ADMIN, 4)
    catalog.grant_admin(Identity("moderator"))
    return catalog


def test_snapshot_captures_everything(populated):
    state = populated.snapshot()
    assert sorted(state.resources) == [1, 2, 3]
    assert state.category_index[Category.TREATMENT] == [1, 2]
    assert state.category_index[Category.PREVENTION] == []
    assert state.category_index[Category.TESTIMONIAL] == []
    assert state.next_id == 5
    assert state.admins == [ADMIN, Identity("moderator")]


def test_restore_of_snapshot_is_identical(populated):
    state = populated.snapshot()
    restored = Catalog.from_state(state, clock=FixedClock(0))
    assert restored.snapshot() == state
    assert restored.list_resources(0) == populated.list_resources(0)
    assert restored.is_admin(Identity("moderator"))


def test_restore_replaces_interim_state(populated):
    state = populated.snapshot()
    populated.create_resource(ALICE, "Interim", "Lost on restore", Category.DIET_ADVICE)
    populated.grant_admin(ALICE)
    populated.restore(state)
    assert populated.snapshot() == state
    assert not populated.is_admin(ALICE)


def test_restored_catalog_keeps_counting(populated):
    restored = Catalog.from_state(populated.snapshot())
    assert restored.create_resource(ALICE, "Next", "After restart", Category.RESEARCH).id == 5


def test_snapshot_is_detached_from_live_state(populated):
    state = populated.snapshot()
    populated.update_resource(ADMIN, 1, "Changed", "Changed", Category.RESEARCH)
    assert state.resources[1].title == "Wet wraps"
    assert state.category_index[Category.TREATMENT] == [1, 2]


def test_snapshot_file_round_trip(tmp_path, populated):
    snapshots = SnapshotFile(tmp_path / "data" / "catalog.json")
    assert not snapshots.exists()
    state = populated.snapshot()
    snapshots.save(state)
    assert snapshots.exists()
    assert snapshots.load() == state
    assert list(tmp_path.joinpath("data").glob("*.tmp")) == []


def test_snapshot_json_layout(tmp_path, populated):
    snapshots = SnapshotFile(tmp_path / "catalog.json")
    snapshots.save(populated.snapshot())
    data = json.loads(snapshots.path.read_text(encoding="utf-8"))
    assert set(data) == {"resources", "category_index", "next_id", "admins"}
    assert data["resources"]["1"]["verified"] is True
    assert data["category_index"]["Treatment"] == [1, 2]
    assert data["admins"] == ["admin", "moderator"]


def _valid_dict(catalog):
    return json.loads(json.dumps(catalog.snapshot().to_dict()))


def test_from_dict_accepts_json_document(populated):
    assert CatalogState.from_dict(_valid_dict(populated)) == populated.snapshot()


@pytest.mark.parametrize("mutate", [
    lambda d: d.update(extra=1),
    lambda d: d.pop("admins"),
    lambda d: d.update(next_id="many"),
    lambda d: d.update(next_id=2),
    lambda d: d.update(next_id=0),
    lambda d: d["category_index"]["Research"].append(1),
    lambda d: d["category_index"]["Research"].remove(3),
    lambda d: d["category_index"].update(Research=[1]),
    lambda d: d["resources"]["1"].update(id=9),
    lambda d: d["resources"]["1"].update(colour="red"),
    lambda d: d["resources"]["1"].update(category="Astrology"),
    lambda d: d.update(next_id="5"),
    lambda d: d["resources"]["1"].update(verified="yes"),
    lambda d: d["resources"]["1"].update(created_at=1_700_000_000.0),
    lambda d: d["category_index"].update(Research=["3"]),
    lambda d: d["resources"]["3"].update(updated_at=d["resources"]["3"]["created_at"] - 1),
    lambda d: (
        d["resources"].update({"0": {**d["resources"]["3"], "id": 0}}),
        d["category_index"]["Research"].insert(0, 0),
    ),
    lambda d: d["resources"]["1"].update(title=""),
    lambda d: d["resources"]["1"].update(description="x" * 1001),
    lambda d: d["admins"].append("admin"),
], ids=[
    "unknown-key", "missing-key", "bad-next-id", "next-id-too-low", "next-id-zero",
    "double-indexed", "unindexed", "wrong-category", "key-id-mismatch",
    "unknown-field", "unknown-category",
    "str-next-id", "str-verified", "float-timestamp", "str-indexed-id",
    "updated-before-created", "id-zero", "empty-title", "long-description",
    "duplicate-admins",
])
def test_from_dict_rejects_bad_shapes(populated, mutate):
    data = _valid_dict(populated)
    mutate(data)
    with pytest.raises(SnapshotError):
        CatalogState.from_dict(data)


def test_load_rejects_unreadable_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotError):
        SnapshotFile(path).load()


def test_load_rejects_tuple_layout(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps([{}, {}, 1, []]), encoding="utf-8")
    with pytest.raises(SnapshotError):
        SnapshotFile(path).load()


def test_failed_restore_leaves_catalog_untouched(tmp_path, populated):
    before = populated.snapshot()
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"resources": {}}), encoding="utf-8")
    with pytest.raises(SnapshotError):
        populated.restore(SnapshotFile(path).load())
    assert populated.snapshot() == before


def test_load_rejects_duplicate_admins(tmp_path, populated):
    data = _valid_dict(populated)
    data["admins"] = ["admin", "admin"]
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(SnapshotError):
        SnapshotFile(path).load()


def test_loaded_admins_restore_exactly(tmp_path, populated):
    snapshots = SnapshotFile(tmp_path / "catalog.json")
    snapshots.save(populated.snapshot())
    state = snapshots.load()
    restored = Catalog.from_state(state)
    assert restored.snapshot() == state
    assert restored.access.admins() == [ADMIN, Identity("moderator")]
