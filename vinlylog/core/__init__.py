"""Core services: document store, merge cycle, identity, link resolution."""
from vinlylog.core.errors import (
    AuthConflict,
    ConfigMissing,
    MergeConflict,
    MetadataUnavailable,
    RemoteRejected,
    RemoteUnavailable,
    ValidationError,
    VinlyLogError,
)

__all__ = [
    "AuthConflict",
    "ConfigMissing",
    "MergeConflict",
    "MetadataUnavailable",
    "RemoteRejected",
    "RemoteUnavailable",
    "ValidationError",
    "VinlyLogError",
]
