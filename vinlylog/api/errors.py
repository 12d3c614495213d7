"""Map core errors onto HTTP responses."""
from fastapi import HTTPException

from vinlylog.core.errors import (
    AuthConflict,
    ConfigMissing,
    MergeConflict,
    RemoteRejected,
    RemoteUnavailable,
    ValidationError,
    VinlyLogError,
)

_STATUS = (
    (ValidationError, 400),
    (AuthConflict, 403),
    (MergeConflict, 409),
    (RemoteRejected, 502),
    (RemoteUnavailable, 503),
    (ConfigMissing, 500),
)


def to_http_exception(e: VinlyLogError) -> HTTPException:
    for cls, status in _STATUS:
        if isinstance(e, cls):
            return HTTPException(status_code=status, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))
