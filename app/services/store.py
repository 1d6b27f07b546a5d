"""
Record store: the whole database as one JSON snapshot.

The snapshot is read from disk once, migrated, and then held in memory.
Every mutation runs as a single critical section under one lock:

    copy snapshot -> mutate copy -> write copy to disk -> swap it in

The on-disk file is replaced atomically (temp file + os.replace), so a crash
mid-write leaves the previous snapshot intact. If the write fails the swap
never happens and the in-memory state is exactly what it was before.
"""
from __future__ import annotations

import contextlib
import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Iterator, Optional

from app.core.errors import CorruptSnapshotError, RecordNotFoundError, StorageFailureError
from app.models import (
    COLLECTIONS,
    SEQ_KEY,
    Collection,
    Record,
    Snapshot,
    empty_snapshot,
    normalize_diaper_type,
)
from app.services.allocator import next_id, reseed, valid_id
from app.services.migrator import migrate, normalize_diaper_types

logger = logging.getLogger(__name__)

# Key order of GET /api/export.
EXPORT_ORDER: tuple[str, ...] = ("baby", "feedings", "diapers", "sleeps", "growth", "medications")


def _find_index(rows: list[Any], record_id: int) -> Optional[int]:
    for idx, row in enumerate(rows):
        if isinstance(row, dict) and valid_id(row.get("id")) == record_id:
            return idx
    return None


def _without_id(fields: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if k != "id"}


def _first_per_id(collection: str, rows: list[Any]) -> list[Any]:
    """Keep the first row for each id; rows without a valid id pass through."""
    seen: set[int] = set()
    kept: list[Any] = []
    dropped: list[int] = []
    for row in rows:
        rid = valid_id(row.get("id")) if isinstance(row, dict) else None
        if rid is not None:
            if rid in seen:
                dropped.append(rid)
                continue
            seen.add(rid)
        kept.append(row)
    if dropped:
        logger.warning(
            "Import dropped %d duplicate %s row(s) with ids %s",
            len(dropped), collection, sorted(set(dropped)),
        )
    return kept


class RecordStore:
    """Collection-scoped CRUD over a single JSON snapshot file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._snapshot: Optional[Snapshot] = None

    # ------------------------------------------------------------------
    # Loading and persistence
    # ------------------------------------------------------------------

    def _ensure_loaded(self) -> Snapshot:
        # Caller holds self._lock.
        if self._snapshot is None:
            self._snapshot = self._load()
        return self._snapshot

    def _load(self) -> Snapshot:
        if not self.path.exists():
            snapshot = empty_snapshot()
            self._write(snapshot)
            logger.info("Created empty snapshot at %s", self.path)
            return snapshot

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise StorageFailureError(str(self.path), str(exc)) from exc
        except ValueError as exc:
            raise CorruptSnapshotError(str(self.path), str(exc)) from exc
        if not isinstance(raw, dict):
            raise CorruptSnapshotError(str(self.path), "top-level value is not an object")

        snapshot, applied = migrate(raw)
        if applied:
            logger.info("Migrated snapshot %s: %s", self.path, ", ".join(applied))
            self._write(snapshot)
        return snapshot

    def _write(self, snapshot: Snapshot) -> None:
        payload = json.dumps(snapshot, indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            logger.error("Writing snapshot %s failed: %s", self.path, exc)
            raise StorageFailureError(str(self.path), str(exc)) from exc

    @contextlib.contextmanager
    def _mutation(self) -> Iterator[Snapshot]:
        """Yield a private copy of the snapshot; persist and publish it on exit."""
        with self._lock:
            working = copy.deepcopy(self._ensure_loaded())
            yield working
            self._write(working)
            self._snapshot = working

    def reload(self) -> None:
        """Drop the in-memory copy; the next access re-reads and re-migrates the file."""
        with self._lock:
            self._snapshot = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_all(self, collection: Collection) -> list[Record]:
        with self._lock:
            return copy.deepcopy(self._ensure_loaded()[collection.value])

    def get(self, collection: Collection, record_id: int) -> Record:
        with self._lock:
            rows = self._ensure_loaded()[collection.value]
            idx = _find_index(rows, record_id)
            if idx is None:
                raise RecordNotFoundError(collection.value, record_id)
            return copy.deepcopy(rows[idx])

    def sequences(self) -> dict[str, int]:
        with self._lock:
            return dict(self._ensure_loaded()[SEQ_KEY])

    def export_all(self) -> dict[str, list[Record]]:
        with self._lock:
            snapshot = self._ensure_loaded()
            return {name: copy.deepcopy(snapshot[name]) for name in EXPORT_ORDER}

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, collection: Collection, record: Record) -> Record:
        """Append `record` under a freshly allocated id and return the stored row."""
        with self._mutation() as snapshot:
            rid = next_id(snapshot[SEQ_KEY], collection.value)
            row: Record = {"id": rid, **_without_id(record)}
            if collection is Collection.diapers and "type" in row:
                row["type"] = normalize_diaper_type(row["type"])
            snapshot[collection.value].append(row)
        logger.debug("Inserted %s #%d", collection.value, rid)
        return copy.deepcopy(row)

    def update(self, collection: Collection, record_id: int, fields: Record) -> Record:
        """Shallow-merge `fields` over an existing record. `id` never changes."""
        with self._mutation() as snapshot:
            rows = snapshot[collection.value]
            idx = _find_index(rows, record_id)
            if idx is None:
                raise RecordNotFoundError(collection.value, record_id)
            row = {**rows[idx], **_without_id(fields)}
            if collection is Collection.diapers and "type" in row:
                row["type"] = normalize_diaper_type(row["type"])
            rows[idx] = row
        return copy.deepcopy(row)

    def delete(self, collection: Collection, record_id: int) -> bool:
        """
        Remove the record with `record_id`. Returns False (and writes nothing)
        when it was already gone; the sequence counter is never touched.
        """
        with self._lock:
            if _find_index(self._ensure_loaded()[collection.value], record_id) is None:
                return False
            with self._mutation() as snapshot:
                snapshot[collection.value] = [
                    row for row in snapshot[collection.value]
                    if not (isinstance(row, dict) and valid_id(row.get("id")) == record_id)
                ]
        logger.debug("Deleted %s #%d", collection.value, record_id)
        return True

    def import_all(self, document: Any) -> list[str]:
        """
        Replace every collection present (as a list) in `document` wholesale
        and recompute the sequence counters of those collections from the
        imported data. Collections the document does not carry keep both
        their rows and their counters.

        Returns the names of the replaced collections. Anything that is not
        an object, or that carries no collection lists, is a no-op.
        """
        if not isinstance(document, dict):
            return []
        incoming = {
            name: _first_per_id(name, document[name]) for name in COLLECTIONS
            if isinstance(document.get(name), list)
        }
        if not incoming:
            return []

        with self._mutation() as snapshot:
            for name, rows in incoming.items():
                snapshot[name] = copy.deepcopy(rows)
            snapshot.update(normalize_diaper_types(snapshot)[0])
            for name in incoming:
                reseed(snapshot[SEQ_KEY], name, snapshot[name])
        replaced = sorted(incoming)
        logger.info("Imported collections: %s", ", ".join(replaced))
        return replaced
