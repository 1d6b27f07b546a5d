"""
On-disk layout of the store.

The whole database is one JSON document:

    {
      "seq": {"feedings": 4, "diapers": 1, ...},
      "feedings": [{"id": 1, ...}, ...],
      ...
    }

`seq` maps each collection to the next id to hand out.
"""
from __future__ import annotations

import enum
from typing import Any

SEQ_KEY = "seq"

Record = dict[str, Any]
Snapshot = dict[str, Any]


class Collection(str, enum.Enum):
    feedings = "feedings"
    diapers = "diapers"
    sleeps = "sleeps"
    growth = "growth"
    medications = "medications"
    baby = "baby"


COLLECTIONS: tuple[str, ...] = tuple(c.value for c in Collection)

# Older clients logged dirty diapers under these names.
LEGACY_DIAPER_TYPES = frozenset({"poop", "stool"})
DIRTY = "dirty"


def empty_snapshot() -> Snapshot:
    snapshot: Snapshot = {SEQ_KEY: {name: 1 for name in COLLECTIONS}}
    for name in COLLECTIONS:
        snapshot[name] = []
    return snapshot


def normalize_diaper_type(value: Any) -> Any:
    if isinstance(value, str) and value in LEGACY_DIAPER_TYPES:
        return DIRTY
    return value
