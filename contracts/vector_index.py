"""Vector index contracts.

Defines the abstract client capability for the external vector-search
engine and the shared data models for points and ranked results.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import BaseModel


# ── Data models ──────────────────────────────────────────────────────


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class IndexPoint(BaseModel):
    """A point to write into a collection."""

    id: uuid.UUID
    vector: list[float]
    metadata: dict[str, Any] = {}


class StoredPoint(BaseModel):
    """A point as returned by the engine on fetch."""

    id: str | int
    vector: list[float] | dict[str, Any] | None = None
    metadata: dict[str, Any] = {}


class ScoredHit(BaseModel):
    """A raw ranked result; the id may belong to a non-UUID point kind."""

    id: str | int
    score: float


class SearchResult(BaseModel):
    """A single result from a visibility-filtered similarity search."""

    point_id: uuid.UUID
    score: float


# ── Abstract client capability ───────────────────────────────────────


class VectorIndexClient(ABC):
    """Minimal capability the adapter needs from a vector-search engine."""

    @abstractmethod
    async def upsert(
        self, collection: str, points: list[IndexPoint], wait: bool = True
    ) -> None:
        """Insert or replace points by id."""
        ...

    @abstractmethod
    async def fetch_by_ids(
        self,
        collection: str,
        ids: list[uuid.UUID],
        with_vectors: bool = True,
        with_metadata: bool = True,
    ) -> list[StoredPoint]:
        """Return the points found for the given ids."""
        ...

    @abstractmethod
    async def set_metadata(
        self,
        collection: str,
        ids: list[uuid.UUID],
        metadata: dict[str, Any],
        wait: bool = True,
    ) -> None:
        """Replace the whole metadata payload of the selected points."""
        ...

    @abstractmethod
    async def similarity_search(
        self,
        collection: str,
        query_vector: list[float],
        limit: int,
        offset: int = 0,
        filter: Any = None,
    ) -> list[ScoredHit]:
        """Rank points by similarity to *query_vector*, engine order."""
        ...

    async def close(self) -> None:
        """Release the underlying connection. No-op unless overridden."""
        return None
