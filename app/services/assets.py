"""
Static asset resolution for the single-page client.

Any path that does not name an existing file under the asset root is
answered with index.html so the client-side router can take over.
"""
from __future__ import annotations

from pathlib import Path

from app.core.errors import PathTraversalError, StaticAssetsMissingError

INDEX_DOCUMENT = "index.html"


def resolve_asset(root: Path, request_path: str) -> Path:
    """
    Map a URL path to a file under `root`.

    Raises PathTraversalError if the resolved location leaves `root`, and
    StaticAssetsMissingError if neither the file nor index.html exists.
    """
    base = Path(root).resolve()
    relative = request_path.lstrip("/")
    candidate = (base / relative).resolve()
    if candidate != base and base not in candidate.parents:
        raise PathTraversalError(request_path)

    if relative and candidate.is_file():
        return candidate

    index = base / INDEX_DOCUMENT
    if not index.is_file():
        raise StaticAssetsMissingError()
    return index
