"""
Process-wide store handle.

One RecordStore per process: the snapshot lock only serializes writers
inside a single process, so the server must run a single worker.
"""
import threading
from typing import Optional

from app.core.config import settings
from app.services.store import RecordStore

_store: Optional[RecordStore] = None
_store_lock = threading.Lock()


def get_store() -> RecordStore:
    """FastAPI dependency returning the shared RecordStore."""
    global _store
    with _store_lock:
        if _store is None:
            _store = RecordStore(settings.DATA_PATH)
        return _store
