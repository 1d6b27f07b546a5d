"""
Identifier allocator: per-collection monotonic counters kept in the
snapshot's `seq` table.

Callers hold the store lock; these helpers do no locking of their own.
"""
from __future__ import annotations

from typing import Any, Iterable

from app.models import Record


def valid_id(value: Any) -> int | None:
    """Return `value` if it is a usable record id, else None.

    bool is rejected explicitly since it is an int subclass.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def max_id(records: Iterable[Any]) -> int:
    """Largest valid id in `records`; malformed rows contribute 0."""
    highest = 0
    for record in records:
        if not isinstance(record, dict):
            continue
        rid = valid_id(record.get("id"))
        if rid is not None and rid > highest:
            highest = rid
    return highest


def next_id(seq: dict[str, Any], collection: str) -> int:
    """Hand out the current counter value for `collection` and advance it."""
    current = valid_id(seq.get(collection)) or 1
    seq[collection] = current + 1
    return current


def reseed(seq: dict[str, Any], collection: str, records: list[Record]) -> int:
    """Reset the counter to max(id) + 1 (1 for an empty collection)."""
    seq[collection] = max_id(records) + 1
    return seq[collection]
