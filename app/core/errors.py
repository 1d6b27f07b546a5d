"""
Exception hierarchy for the baby log API.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class BabyLogException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class RecordNotFoundError(BabyLogException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, collection: str, record_id: int):
        super().__init__(
            message=f"No record with id {record_id} in {collection}.",
            details={"collection": collection, "id": record_id},
        )


class UnknownCollectionError(BabyLogException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "UNKNOWN_COLLECTION"

    def __init__(self, collection: str):
        super().__init__(
            message=f"Unknown collection '{collection}'.",
            details={"collection": collection},
        )


class StorageFailureError(BabyLogException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_FAILURE"

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Snapshot storage failed: {reason}",
            details={"path": path},
        )


class CorruptSnapshotError(BabyLogException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "SNAPSHOT_CORRUPT"

    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"Snapshot on disk is unreadable: {reason}",
            details={"path": path},
        )


class PathTraversalError(BabyLogException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "PATH_TRAVERSAL"

    def __init__(self, path: str):
        super().__init__(
            message="Requested path escapes the asset root.",
            details={"path": path},
        )


class StaticAssetsMissingError(BabyLogException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ASSETS_NOT_FOUND"

    def __init__(self):
        super().__init__(message="Client build not found. Build the frontend first.")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def babylog_exception_handler(request: Request, exc: BabyLogException) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework-level 404/405 in the same error envelope."""
    code = {
        status.HTTP_404_NOT_FOUND: "NOT_FOUND",
        status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    }.get(exc.status_code, "HTTP_ERROR")
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": code, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def _cors_headers(request: Request) -> dict[str, str]:
    origin = request.headers.get("origin")
    if not origin:
        return {}
    allowed = settings.cors_origins_list
    if "*" in allowed:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in allowed:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort 500.

    This handler runs in ServerErrorMiddleware, outside the CORS middleware,
    so the allow-origin header is added here.
    """
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
        headers=_cors_headers(request),
    )
