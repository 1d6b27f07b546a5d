"""
Static client router.

GET /{path}   — built asset, or index.html for client-side routes
"""
from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from app.core.config import settings
from app.services.assets import resolve_asset

router = APIRouter(tags=["client"])

API_PREFIX = "api"


@router.get("/{path:path}", include_in_schema=False)
def serve_client(path: str):
    # Unmatched API paths stay JSON 404s, never the SPA shell.
    if path == API_PREFIX or path.startswith(API_PREFIX + "/"):
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(resolve_asset(settings.STATIC_DIR, path))
