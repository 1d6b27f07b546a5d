"""
Collection router, generic over every record kind.

GET     /api/{collection}         — all records, insertion order
GET     /api/{collection}/{id}    — one record
POST    /api/{collection}         — create, id assigned by the store
PUT     /api/{collection}/{id}    — merge supplied fields into a record
DELETE  /api/{collection}/{id}    — remove a record (idempotent)

{collection} is one of: feedings, diapers, sleeps, growth, medications, baby.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from app.core.errors import RecordNotFoundError, UnknownCollectionError
from app.db.base import get_store
from app.models import Collection, Record
from app.schemas.common import ErrorResponse, OkResponse
from app.schemas.records import CREATE_SCHEMAS, PATCH_SCHEMAS
from app.services.store import RecordStore

router = APIRouter(prefix="/api", tags=["collections"])


# ---------------------------------------------------------------------------
# Path / body helpers
# ---------------------------------------------------------------------------

def _collection(name: str) -> Collection:
    try:
        return Collection(name)
    except ValueError:
        raise UnknownCollectionError(name) from None


def _record_id(raw: str) -> Optional[int]:
    """Parse a path id; anything but a positive integer names no record."""
    if not raw.isdigit():
        return None
    value = int(raw)
    return value if value > 0 else None


def _validated(schema: type[BaseModel], payload: dict[str, Any]) -> Record:
    try:
        return schema.model_validate(payload).to_record()
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/{collection}",
    summary="List every record in a collection",
    responses={404: {"model": ErrorResponse, "description": "Unknown collection."}},
)
def list_records(collection: str, store: RecordStore = Depends(get_store)):
    """Records come back in insertion order; sorting is left to the client."""
    return store.list_all(_collection(collection))


@router.get(
    "/{collection}/{record_id}",
    summary="Fetch one record",
    responses={404: {"model": ErrorResponse, "description": "Unknown collection or id."}},
)
def get_record(collection: str, record_id: str, store: RecordStore = Depends(get_store)):
    kind = _collection(collection)
    rid = _record_id(record_id)
    if rid is None:
        raise RecordNotFoundError(kind.value, record_id)
    return store.get(kind, rid)


@router.post(
    "/{collection}",
    status_code=status.HTTP_201_CREATED,
    summary="Create a record",
    responses={
        201: {"description": "Stored record including its new id."},
        404: {"model": ErrorResponse, "description": "Unknown collection."},
        422: {"model": ErrorResponse, "description": "Body failed validation for this collection."},
    },
)
def create_record(
    collection: str,
    payload: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    """
    Validate the body against the collection's schema, allocate the next id
    and append the record. Any `id` in the body is ignored.
    """
    kind = _collection(collection)
    return store.insert(kind, _validated(CREATE_SCHEMAS[kind], payload))


@router.put(
    "/{collection}/{record_id}",
    summary="Merge fields into an existing record",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown collection or id."},
        422: {"model": ErrorResponse, "description": "A supplied field failed validation."},
    },
)
def update_record(
    collection: str,
    record_id: str,
    payload: dict[str, Any] = Body(...),
    store: RecordStore = Depends(get_store),
):
    """Fields missing from the body keep their stored values."""
    kind = _collection(collection)
    rid = _record_id(record_id)
    if rid is None:
        raise RecordNotFoundError(kind.value, record_id)
    return store.update(kind, rid, _validated(PATCH_SCHEMAS[kind], payload))


@router.delete(
    "/{collection}/{record_id}",
    response_model=OkResponse,
    summary="Delete a record",
    responses={200: {"description": "Deleted, or was already absent."}},
)
def delete_record(collection: str, record_id: str, store: RecordStore = Depends(get_store)):
    kind = _collection(collection)
    rid = _record_id(record_id)
    if rid is not None:
        store.delete(kind, rid)
    return OkResponse()
