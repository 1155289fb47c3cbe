"""
Router serving the static landing page for any unmatched GET path.
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["pages"])


@router.get("/{full_path:path}", include_in_schema=False)
async def landing_page(full_path: str) -> FileResponse:
    """Serve index.html for any other route."""
    return FileResponse(STATIC_DIR / "index.html")
