"""Whole-document endpoints: reload from JSONBin and JSON export."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from vinlylog.api.errors import to_http_exception
from vinlylog.api.state import AppState, get_state
from vinlylog.core.errors import VinlyLogError

router = APIRouter()


@router.post("/refresh")
async def refresh(state: AppState = Depends(get_state)):
    """Re-read the document; returns counts only (pins stay server-side)."""
    try:
        doc = await state.refresh()
    except VinlyLogError as e:
        raise to_http_exception(e) from e
    return {"users": len(doc.users), "updatedAt": doc.updated_at}


@router.get("/export")
async def export(state: AppState = Depends(get_state)):
    """Download the current snapshot as pretty-printed JSON."""
    try:
        body = await state.export_json()
    except VinlyLogError as e:
        raise to_http_exception(e) from e
    filename = f"vinlylog-export-{datetime.now(timezone.utc).date().isoformat()}.json"
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
