"""The signed-in user's links: list/search, add, remove.

Credentials travel in X-VinlyLog-User / X-VinlyLog-Pin headers on every call.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel

from vinlylog.api.errors import to_http_exception
from vinlylog.api.state import AppState, get_state
from vinlylog.core.errors import VinlyLogError
from vinlylog.core.playlist_search import display_title
from vinlylog.models.document import LinkEntry, entry_key
from vinlylog.models.session import Session

router = APIRouter()


class AddLinkBody(BaseModel):
    url: str
    note: Optional[str] = None


def get_session(
    x_vinlylog_user: str = Header(...),
    x_vinlylog_pin: str = Header(...),
) -> Session:
    return Session(username=x_vinlylog_user, pin=x_vinlylog_pin)


def _entry_to_dict(e: LinkEntry) -> dict:
    return {
        **e.to_dict(),
        "key": entry_key(e),
        "displayTitle": display_title(e),
    }


@router.get("")
async def list_links(
    q: str = "",
    session: Session = Depends(get_session),
    state: AppState = Depends(get_state),
):
    """List the user's links newest first, filtered by q over title, note and url."""
    try:
        entries = await state.list_links(session, q)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except VinlyLogError as e:
        raise to_http_exception(e) from e
    return [_entry_to_dict(e) for e in entries]


@router.post("", status_code=201)
async def add_link(
    body: AddLinkBody,
    session: Session = Depends(get_session),
    state: AppState = Depends(get_state),
):
    """Resolve the link's metadata and save it to the user's list."""
    try:
        entry = await state.add_link(session, body.url, body.note or "")
    except VinlyLogError as e:
        raise to_http_exception(e) from e
    return _entry_to_dict(entry)


@router.delete("", status_code=204)
async def remove_link(
    added_at: str,
    url: str,
    session: Session = Depends(get_session),
    state: AppState = Depends(get_state),
):
    """Remove the link identified by (added_at, url)."""
    try:
        await state.remove_link(session, added_at, url)
    except VinlyLogError as e:
        raise to_http_exception(e) from e
