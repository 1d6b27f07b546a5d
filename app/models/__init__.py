from .snapshot import (
    COLLECTIONS,
    DIRTY,
    LEGACY_DIAPER_TYPES,
    SEQ_KEY,
    Collection,
    Record,
    Snapshot,
    empty_snapshot,
    normalize_diaper_type,
)

__all__ = [
    "COLLECTIONS",
    "DIRTY",
    "LEGACY_DIAPER_TYPES",
    "SEQ_KEY",
    "Collection",
    "Record",
    "Snapshot",
    "empty_snapshot",
    "normalize_diaper_type",
]
