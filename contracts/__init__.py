"""Shared contracts — source of truth for all cardindex interfaces."""

from contracts.audit import AuditEntry, AuditEvent, AuditLogger
from contracts.errors import (
    IndexAdapterError,
    IndexReadError,
    IndexWriteError,
    InsertValidationError,
    SearchError,
    ValidationError,
)
from contracts.manifest import AuditConfig, IndexConfig, Manifest, QdrantConfig
from contracts.vector_index import (
    IndexPoint,
    ScoredHit,
    SearchResult,
    StoredPoint,
    VectorIndexClient,
    Visibility,
)

__all__ = [
    # audit
    "AuditEntry",
    "AuditEvent",
    "AuditLogger",
    # errors
    "IndexAdapterError",
    "IndexReadError",
    "IndexWriteError",
    "InsertValidationError",
    "SearchError",
    "ValidationError",
    # manifest
    "AuditConfig",
    "IndexConfig",
    "Manifest",
    "QdrantConfig",
    # vector index
    "IndexPoint",
    "ScoredHit",
    "SearchResult",
    "StoredPoint",
    "VectorIndexClient",
    "Visibility",
]
