"""
Schema migrator.

There is no schema-version field. Each migration is a pure function
`step(snapshot) -> (snapshot, changed)` that converges an older snapshot
towards the current shape and is a no-op on an already-current one. The
store runs the whole pipeline on every load and persists once if any
step reported a change.

To add a migration: write a new step with the same signature and append
it to MIGRATIONS. Steps must only widen or normalize data, never drop it.
"""
from __future__ import annotations

import copy
from typing import Any, Callable

from app.models import COLLECTIONS, SEQ_KEY, Collection, Snapshot, normalize_diaper_type
from app.services.allocator import max_id, valid_id

MigrationStep = Callable[[Snapshot], tuple[Snapshot, bool]]


def ensure_collections(snapshot: Snapshot) -> tuple[Snapshot, bool]:
    """Materialize every known collection as a list."""
    out = dict(snapshot)
    changed = False
    for name in COLLECTIONS:
        if not isinstance(out.get(name), list):
            out[name] = []
            changed = True
    return out, changed


def ensure_sequences(snapshot: Snapshot) -> tuple[Snapshot, bool]:
    """Give every collection a counter strictly above its highest id.

    Missing, non-numeric and stale counters are all rebuilt from data.
    A counter that is already ahead of the data is kept as-is, so ids
    freed by deletes are never handed out again.
    """
    out = dict(snapshot)
    raw_seq = out.get(SEQ_KEY)
    seq: dict[str, Any] = dict(raw_seq) if isinstance(raw_seq, dict) else {}
    changed = not isinstance(raw_seq, dict)
    for name in COLLECTIONS:
        floor = max_id(out.get(name) or []) + 1
        current = valid_id(seq.get(name))
        if current is None or current < floor:
            seq[name] = floor
            changed = True
    out[SEQ_KEY] = seq
    return out, changed


def normalize_diaper_types(snapshot: Snapshot) -> tuple[Snapshot, bool]:
    """Rewrite legacy diaper types (poop, stool) to dirty."""
    diapers = snapshot.get(Collection.diapers.value)
    if not isinstance(diapers, list):
        return snapshot, False
    changed = False
    rows = []
    for row in diapers:
        if isinstance(row, dict) and "type" in row:
            fixed = normalize_diaper_type(row["type"])
            if fixed != row["type"]:
                row = {**row, "type": fixed}
                changed = True
        rows.append(row)
    if not changed:
        return snapshot, False
    out = dict(snapshot)
    out[Collection.diapers.value] = rows
    return out, True


# Order matters: sequences are computed from the lists step one guarantees.
MIGRATIONS: list[MigrationStep] = [
    ensure_collections,
    ensure_sequences,
    normalize_diaper_types,
]


def migrate(snapshot: Snapshot, steps: list[MigrationStep] | None = None) -> tuple[Snapshot, list[str]]:
    """
    Run every migration step over a deep copy of `snapshot`.

    Returns the migrated snapshot and the names of the steps that changed
    something (empty when the snapshot was already current).
    """
    current: Snapshot = copy.deepcopy(snapshot)
    applied: list[str] = []
    for step in steps if steps is not None else MIGRATIONS:
        current, changed = step(current)
        if changed:
            applied.append(step.__name__)
    return current, applied
