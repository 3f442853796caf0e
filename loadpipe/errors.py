"""
Exceptions for loadpipe.

Only configuration and acquisition problems have dedicated types.
Exceptions raised inside a loader propagate to the requester unchanged.
"""
from __future__ import annotations


class LoadError(Exception):
    """Base class for loadpipe errors."""


class ConfigurationError(LoadError):
    """Raised when loader options cannot be validated."""

    def __init__(self, message: str, details: list[str] | None = None):
        self.details = details or []
        super().__init__(message)


class ContentAcquisitionError(LoadError):
    """
    Raised when a resource's content cannot be read.

    The chain executor catches this and passes the resource identifier
    through instead of failing the build.
    """

    def __init__(self, resource_path: str, cause: Exception | None = None):
        self.resource_path = resource_path
        self.cause = cause
        reason = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot acquire content for '{resource_path}'{reason}")
