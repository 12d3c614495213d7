"""Users inside the document: lookup, pin checks, and the mutations that touch playlists."""
import logging
import re
from enum import Enum
from typing import Optional

from vinlylog.core.errors import AuthConflict, ValidationError
from vinlylog.core.merge_engine import Mutator
from vinlylog.models.document import Document, LinkEntry, User
from vinlylog.models.session import Session

logger = logging.getLogger(__name__)

_PIN_RE = re.compile(r"[0-9]{4}")


class AuthResult(str, Enum):
    CREATED = "created"
    SIGNED_IN = "signed_in"
    WRONG_PIN = "wrong_pin"


def valid_pin(pin: object) -> bool:
    """Exactly four ASCII digits."""
    return isinstance(pin, str) and _PIN_RE.fullmatch(pin) is not None


def clean_username(username: str) -> str:
    return username.strip()


def validate_credentials(username: str, pin: str) -> tuple[str, str]:
    """Return cleaned (username, pin) or raise ValidationError. No network involved."""
    username = clean_username(username or "")
    pin = (pin or "").strip()
    if not username:
        raise ValidationError("Enter a username")
    if not valid_pin(pin):
        raise ValidationError("Pin must be 4 digits")
    return username, pin


def find_user(doc: Document, username: str) -> Optional[User]:
    """Return user matching username ignoring case, or None."""
    lowered = username.lower()
    for u in doc.users:
        if u.username.lower() == lowered:
            return u
    return None


def authenticate(doc: Document, username: str, pin: str) -> AuthResult:
    """CREATED means the caller still has to run create_user(); nothing is written here."""
    user = find_user(doc, username)
    if user is None:
        return AuthResult.CREATED
    # Plain equality is enough: the pin is a shared secret kept in cleartext in the document
    if user.pin == pin:
        return AuthResult.SIGNED_IN
    return AuthResult.WRONG_PIN


def _check_pin(user: User, session: Session) -> None:
    if user.pin != session.pin:
        raise AuthConflict("Pin mismatch for this user")


def create_user(username: str, pin: str) -> Mutator:
    """Add a user unless one with that name appeared since the caller last looked."""

    def mutate(doc: Document) -> None:
        if find_user(doc, username) is not None:
            return
        doc.users.append(User(username=username, pin=pin))
        logger.info("Created user %s", username)

    return mutate


def add_entry(session: Session, entry: LinkEntry) -> Mutator:
    """Append entry to the session user's playlist, re-creating the user if it vanished remotely."""

    def mutate(doc: Document) -> None:
        user = find_user(doc, session.username)
        if user is None:
            doc.users.append(User(username=session.username, pin=session.pin, playlists=[entry]))
            return
        _check_pin(user, session)
        user.playlists.append(entry)

    return mutate


def remove_entry(session: Session, added_at: str, url: str) -> Mutator:
    """Remove the entry keyed by (added_at, url). Unknown users or keys are a no-op."""

    def mutate(doc: Document) -> None:
        user = find_user(doc, session.username)
        if user is None:
            return
        _check_pin(user, session)
        for i, p in enumerate(user.playlists):
            if p.added_at == added_at and p.url == url:
                user.playlists.pop(i)
                return

    return mutate
