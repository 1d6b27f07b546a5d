"""
Backup router.

GET  /api/export   — every collection in one document
POST /api/import   — replace the collections present in the document
"""
from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from app.db.base import get_store
from app.schemas.backup import ExportDocument, ImportResponse
from app.services.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["backup"])


def parse_lenient(raw: bytes) -> dict[str, Any]:
    """
    Decode a request body, treating anything that is not a JSON object as {}.

    Imports are lenient on purpose: a malformed backup becomes a logged
    no-op instead of an error.
    """
    if not raw.strip():
        return {}
    try:
        document = json.loads(raw)
    except ValueError as exc:
        logger.warning("Ignoring unparsable import body: %s", exc)
        return {}
    if not isinstance(document, dict):
        logger.warning("Ignoring import body of type %s", type(document).__name__)
        return {}
    return document


@router.get(
    "/export",
    response_model=ExportDocument,
    summary="Export every collection for backup",
)
def export_all(store: RecordStore = Depends(get_store)):
    """Sequence counters are not exported; import recomputes them."""
    return store.export_all()


@router.post(
    "/import",
    response_model=ImportResponse,
    summary="Restore collections from a backup document",
    responses={200: {"description": "Imported, or silently ignored if the body was malformed."}},
)
async def import_all(request: Request, store: RecordStore = Depends(get_store)):
    """
    Each collection present as a list replaces the stored one wholesale.
    Collections missing from the document are left untouched. Sequence
    counters are rebuilt from the imported ids.
    """
    document = parse_lenient(await request.body())
    imported = await run_in_threadpool(store.import_all, document)
    return ImportResponse(imported=imported)
