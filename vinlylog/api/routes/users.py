"""Sign in, creating the user on first use of a username."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from vinlylog.api.errors import to_http_exception
from vinlylog.api.state import AppState, get_state
from vinlylog.core.errors import VinlyLogError

router = APIRouter()


class SignInBody(BaseModel):
    username: str
    pin: str


@router.post("/signin")
async def sign_in(body: SignInBody, state: AppState = Depends(get_state)):
    """Return 'created' or 'signed_in'; a wrong pin for an existing user is 403."""
    try:
        result, session = await state.sign_in(body.username, body.pin)
    except VinlyLogError as e:
        raise to_http_exception(e) from e
    return {"result": result.value, "username": session.username}
