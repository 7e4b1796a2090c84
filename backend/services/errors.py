"""
Error types raised by the location search components.

The proxy turns these into HTTP responses; the orchestrator turns them into
empty results.
"""


class LocationSearchError(Exception):
    """Base class for location search failures."""


class BadRequest(LocationSearchError):
    """A required request parameter (the query text) was missing."""


class UpstreamFailure(LocationSearchError):
    """The search provider or the proxy failed to answer with usable data."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedInput(LocationSearchError):
    """The geographic bias parameter could not be parsed."""


class CacheWriteFailure(LocationSearchError):
    """The cache storage rejected a write. Never surfaced to callers."""
