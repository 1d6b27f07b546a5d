"""
Tests for the snapshot migration pipeline.

Covers:
- Each step on its own (collections, sequences, diaper types)
- Legacy snapshots written before medications existed
- Idempotence: migrate(migrate(x)) == migrate(x)
- Purity: the input snapshot is never mutated
"""
import copy

from app.models import COLLECTIONS, SEQ_KEY, empty_snapshot
from app.services.migrator import (
    MIGRATIONS,
    ensure_collections,
    ensure_sequences,
    migrate,
    normalize_diaper_types,
)

LEGACY = {
    "seq": {"feedings": 3, "diapers": 4, "sleeps": 1, "growth": 1, "baby": 2},
    "feedings": [
        {"id": 1, "datetime": "2025-08-01T08:00:00Z", "method": "breast"},
        {"id": 2, "datetime": "2025-08-01T11:00:00Z", "method": "formula", "amountMl": 60},
    ],
    "diapers": [
        {"id": 1, "datetime": "2025-08-01T09:00:00Z", "type": "poop"},
        {"id": 2, "datetime": "2025-08-01T10:00:00Z", "type": "wet"},
        {"id": 3, "datetime": "2025-08-01T12:00:00Z", "type": "stool", "color": "yellow"},
    ],
    "sleeps": [],
    "growth": [],
    "baby": [{"id": 1, "name": "Selin", "birthIso": "2025-07-28T04:12:00Z"}],
}


class TestEnsureCollections:
    def test_missing_collections_become_empty_lists(self):
        out, changed = ensure_collections({})
        assert changed
        for name in COLLECTIONS:
            assert out[name] == []

    def test_non_list_replaced(self):
        out, changed = ensure_collections({**empty_snapshot(), "sleeps": None})
        assert changed
        assert out["sleeps"] == []

    def test_current_snapshot_unchanged(self):
        snap = empty_snapshot()
        out, changed = ensure_collections(snap)
        assert not changed
        assert out == snap


class TestEnsureSequences:
    def test_missing_table(self):
        snap = {name: [] for name in COLLECTIONS}
        out, changed = ensure_sequences(snap)
        assert changed
        assert out[SEQ_KEY] == {name: 1 for name in COLLECTIONS}

    def test_missing_entry_defaults_to_max_plus_one(self):
        snap = {**empty_snapshot(), "growth": [{"id": 4}, {"id": 7}]}
        del snap[SEQ_KEY]["growth"]
        out, changed = ensure_sequences(snap)
        assert changed
        assert out[SEQ_KEY]["growth"] == 8

    def test_stale_counter_raised(self):
        snap = {**empty_snapshot(), "feedings": [{"id": 9}]}
        snap[SEQ_KEY]["feedings"] = 3
        out, _ = ensure_sequences(snap)
        assert out[SEQ_KEY]["feedings"] == 10

    def test_non_numeric_counter_rebuilt(self):
        snap = {**empty_snapshot(), "feedings": [{"id": 2}]}
        snap[SEQ_KEY]["feedings"] = "abc"
        out, changed = ensure_sequences(snap)
        assert changed
        assert out[SEQ_KEY]["feedings"] == 3

    def test_counter_ahead_of_data_kept(self):
        """Deleted ids stay retired."""
        snap = {**empty_snapshot(), "feedings": [{"id": 5}]}
        snap[SEQ_KEY]["feedings"] = 20
        out, changed = ensure_sequences(snap)
        assert not changed
        assert out[SEQ_KEY]["feedings"] == 20

    def test_malformed_ids_ignored(self):
        snap = {**empty_snapshot(), "sleeps": [{"id": "x"}, {"start": "no id"}]}
        out, _ = ensure_sequences(snap)
        assert out[SEQ_KEY]["sleeps"] == 1


class TestNormalizeDiaperTypes:
    def test_legacy_tokens_become_dirty(self):
        out, changed = normalize_diaper_types(copy.deepcopy(LEGACY))
        assert changed
        assert [d["type"] for d in out["diapers"]] == ["dirty", "wet", "dirty"]

    def test_other_fields_preserved(self):
        out, _ = normalize_diaper_types(copy.deepcopy(LEGACY))
        assert out["diapers"][2]["color"] == "yellow"
        assert out["diapers"][2]["id"] == 3

    def test_nothing_to_do(self):
        snap = {**empty_snapshot(), "diapers": [{"id": 1, "type": "mixed"}]}
        out, changed = normalize_diaper_types(snap)
        assert not changed
        assert out is snap

    def test_malformed_rows_left_in_place(self):
        snap = {**empty_snapshot(), "diapers": ["junk", {"id": 1}, {"id": 2, "type": "poop"}]}
        out, changed = normalize_diaper_types(snap)
        assert changed
        assert out["diapers"][0] == "junk"
        assert out["diapers"][1] == {"id": 1}
        assert out["diapers"][2]["type"] == "dirty"


class TestMigrate:
    def test_pipeline_order(self):
        assert MIGRATIONS == [ensure_collections, ensure_sequences, normalize_diaper_types]

    def test_legacy_snapshot(self):
        out, applied = migrate(LEGACY)
        assert out["medications"] == []
        assert out[SEQ_KEY]["medications"] == 1
        assert out[SEQ_KEY]["feedings"] == 3
        assert all(d["type"] != "poop" and d["type"] != "stool" for d in out["diapers"])
        assert applied == ["ensure_collections", "ensure_sequences", "normalize_diaper_types"]

    def test_empty_object(self):
        out, applied = migrate({})
        assert out == empty_snapshot()
        assert "ensure_collections" in applied

    def test_current_snapshot_reports_nothing(self):
        _, applied = migrate(empty_snapshot())
        assert applied == []

    def test_idempotent(self):
        once, _ = migrate(LEGACY)
        twice, applied = migrate(once)
        assert twice == once
        assert applied == []

    def test_input_not_mutated(self):
        original = copy.deepcopy(LEGACY)
        migrate(LEGACY)
        assert LEGACY == original

    def test_unknown_top_level_keys_kept(self):
        out, _ = migrate({**empty_snapshot(), "notes": "kept"})
        assert out["notes"] == "kept"
