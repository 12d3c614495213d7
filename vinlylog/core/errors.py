"""Error taxonomy shared by the document store, merge cycle, identity checks and resolvers."""
from typing import Optional


class VinlyLogError(Exception):
    """Base error; str(e) is a message fit to show the user."""


class ConfigMissing(VinlyLogError):
    """JSONBin bin id or master key not configured. Fatal, never retried."""


class RemoteUnavailable(VinlyLogError):
    """Network failure or timeout talking to a remote service."""


class RemoteRejected(VinlyLogError):
    """Remote answered with a non-success HTTP status."""

    def __init__(self, status: int, body: str = "", operation: str = "request") -> None:
        self.status = status
        self.body = body
        self.operation = operation
        super().__init__(f"JSONBin {operation} failed ({status}): {body}")


class ValidationError(VinlyLogError):
    """Bad input (pin format, empty username or URL); raised before any network call."""


class AuthConflict(VinlyLogError):
    """Wrong pin for an existing username."""


class MergeConflict(VinlyLogError):
    """The document kept changing underneath every read-modify-write attempt."""


class MetadataUnavailable(VinlyLogError):
    """A provider metadata call failed. Carried inside FetchResult, never raised to callers."""

    def __init__(self, source: str, reason: str, status: Optional[int] = None) -> None:
        self.source = source
        self.reason = reason
        self.status = status
        detail = f"{reason} ({status})" if status is not None else reason
        super().__init__(f"{source}: {detail}")
