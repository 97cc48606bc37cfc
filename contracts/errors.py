"""Error taxonomy for the vector index adapter.

Every failure of the underlying client is collapsed into one of these
kinds.  Transient and permanent failures are not distinguished.
"""

from __future__ import annotations


class IndexAdapterError(Exception):
    """Base class for all adapter errors."""

    kind = "index_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(IndexAdapterError):
    """Caller input violates a precondition; raised before any index call."""

    kind = "validation"


class IndexReadError(IndexAdapterError):
    """Fetch failed or returned nothing."""

    kind = "read"


class IndexWriteError(IndexAdapterError):
    """Upsert or metadata write failed."""

    kind = "write"


class SearchError(IndexAdapterError):
    """Similarity query failed."""

    kind = "search"


class InsertValidationError(ValidationError, IndexWriteError):
    """Insert rejected before the upsert was attempted."""

    kind = "validation"
