"""Preview a link's resolved metadata without saving it."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from vinlylog.api.errors import to_http_exception
from vinlylog.api.state import AppState, get_state
from vinlylog.core.errors import VinlyLogError

router = APIRouter()


class ResolveBody(BaseModel):
    url: str


@router.post("/resolve")
async def resolve_link(body: ResolveBody, state: AppState = Depends(get_state)):
    try:
        resolved = await state.resolve_link(body.url)
    except VinlyLogError as e:
        raise to_http_exception(e) from e
    return resolved.to_dict()
