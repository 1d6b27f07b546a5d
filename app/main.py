import logging

from fastapi import FastAPI, Response, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.cors import PreflightCORSMiddleware
from app.core.logging import configure_logging
from app.routers import assets as assets_router
from app.routers import backup as backup_router
from app.routers import collections as collections_router
from app.schemas.common import OkResponse
from app.core.errors import (
    BabyLogException,
    babylog_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Baby Log API",
    description=(
        "**Personal baby-activity log**\n\n"
        "Feedings, diapers, sleeps, growth, medications and the baby profile, "
        "stored as one JSON snapshot with per-collection integer ids.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
# The client bundle may be hosted elsewhere; no cookies are ever sent.
app.add_middleware(
    PreflightCORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["content-type"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(BabyLogException, babylog_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


@app.get("/api/health", tags=["health"], summary="Liveness probe", response_model=OkResponse)
def health():
    """
    Returns `{"ok": true}` while the process is up. The client probes this
    before trusting any data operation.
    """
    return OkResponse()


@app.options("/{path:path}", include_in_schema=False)
def options_any(path: str):
    """OPTIONS without CORS request headers never reaches the middleware."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Routers (fixed /api paths before the generic collection routes) ---
app.include_router(backup_router.router)
app.include_router(collections_router.router)
# Catch-all for the single-page client; must stay last.
app.include_router(assets_router.router)

logger.info("Baby log API ready (env=%s, data=%s)", settings.APP_ENV, settings.DATA_PATH)
