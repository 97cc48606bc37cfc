"""Audit logging contracts.

Append-only JSONL — one record per adapter operation outcome.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AuditEvent(str, Enum):
    POINT_INSERT = "point.insert"
    POINT_VISIBILITY = "point.visibility"
    INDEX_SEARCH = "index.search"
    INDEX_ERROR = "index.error"


class AuditEntry(BaseModel):
    """A single audit log record."""

    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    event: AuditEvent
    collection: str = ""
    point_id: str | None = None
    detail: dict[str, Any] = {}  # visibility, author, result count, error kind, etc.


class AuditLogger(ABC):
    """Interface for the append-only audit logger."""

    @abstractmethod
    def log(self, entry: AuditEntry) -> None:
        """Append an entry to the audit log."""
        ...

    @abstractmethod
    def query_by_point(self, point_id: str) -> list[AuditEntry]:
        """Return all entries for a given point id."""
        ...

    @abstractmethod
    def query_by_event(self, event: AuditEvent, limit: int = 100) -> list[AuditEntry]:
        """Return recent entries of a given event type."""
        ...

    @abstractmethod
    def tail(self, n: int = 20) -> list[AuditEntry]:
        """Return the last N entries."""
        ...
