"""Visibility-tagged vector index adapter.

Translates card operations into vector index requests:

* ``insert`` writes a point with its embedding and visibility payload,
* ``set_visibility`` rewrites the payload of a private point,
* ``search`` runs a filtered, paginated similarity query.

The adapter is stateless; the index is the only source of truth.  A
point that is already public is never made private again through
``set_visibility``; privacy can only be granted on insert.
"""

from __future__ import annotations

import uuid
from typing import Any, NoReturn

from contracts.audit import AuditEntry, AuditEvent, AuditLogger
from contracts.errors import (
    IndexAdapterError,
    IndexReadError,
    IndexWriteError,
    InsertValidationError,
    SearchError,
    ValidationError,
)
from contracts.vector_index import IndexPoint, SearchResult, VectorIndexClient, Visibility
from runtime.visibility import build_metadata, is_private, merge_author, read_authors

DEFAULT_COLLECTION = "debate_cards"
PAGE_SIZE = 10


class VisibilityIndex:
    """Insert, re-tag and search points in a single collection."""

    def __init__(
        self,
        client: VectorIndexClient,
        collection: str = DEFAULT_COLLECTION,
        page_size: int = PAGE_SIZE,
        logger: AuditLogger | None = None,
    ) -> None:
        self._client = client
        self._collection = collection
        self._page_size = page_size
        self._logger = logger

    @property
    def collection(self) -> str:
        return self._collection

    async def close(self) -> None:
        await self._client.close()

    # ── insert ────────────────────────────────────────────────────────

    async def insert(
        self,
        point_id: uuid.UUID,
        vector: list[float],
        visibility: Visibility | str,
        author: str | uuid.UUID | None = None,
    ) -> None:
        """Upsert a new point and wait for the write to be acknowledged.

        Upsert is idempotent by id: inserting the same id twice overwrites
        the first point instead of failing.
        """
        visibility = _as_visibility(visibility)
        if visibility == Visibility.PRIVATE:
            author_id = _author_str(author)
            if author_id is None:
                self._fail(
                    InsertValidationError("Private card must have an author"),
                    AuditEvent.POINT_INSERT,
                    point_id,
                )
            metadata = build_metadata(visibility, [author_id])
        else:
            metadata = build_metadata(visibility)

        point = IndexPoint(id=point_id, vector=vector, metadata=metadata)
        try:
            await self._client.upsert(self._collection, [point], wait=True)
        except Exception as exc:
            self._fail(
                IndexWriteError("Failed inserting card to index"),
                AuditEvent.POINT_INSERT,
                point_id,
                cause=exc,
            )

        self._audit(
            AuditEvent.POINT_INSERT,
            point_id,
            {"visibility": visibility.value, "authors": metadata.get("authors", [])},
        )

    # ── set_visibility ────────────────────────────────────────────────

    async def set_visibility(
        self,
        point_id: uuid.UUID,
        visibility: Visibility | str,
        author: str | uuid.UUID | None = None,
    ) -> None:
        """Rewrite the visibility payload of an existing point.

        Only private points are touched: they either gain *author* or
        become public with their author list cleared.  Public points are
        left as they are, whatever visibility is requested.
        """
        visibility = _as_visibility(visibility)
        author_id = _author_str(author)
        if visibility == Visibility.PRIVATE and author_id is None:
            self._fail(
                ValidationError("Private card must have an author"),
                AuditEvent.POINT_VISIBILITY,
                point_id,
            )

        try:
            points = await self._client.fetch_by_ids(
                self._collection, [point_id], with_vectors=True, with_metadata=True
            )
        except Exception as exc:
            self._fail(
                IndexReadError("Failed getting card from index"),
                AuditEvent.POINT_VISIBILITY,
                point_id,
                cause=exc,
            )
        if not points:
            self._fail(
                IndexReadError("Failed getting card from index"),
                AuditEvent.POINT_VISIBILITY,
                point_id,
            )

        current = points[0].metadata
        if not is_private(current):
            self._audit(
                AuditEvent.POINT_VISIBILITY,
                point_id,
                {"requested": visibility.value, "changed": False},
            )
            return

        if visibility == Visibility.PRIVATE:
            authors = merge_author(read_authors(current), author_id)
            metadata = build_metadata(Visibility.PRIVATE, authors)
        else:
            metadata = build_metadata(Visibility.PUBLIC)

        try:
            await self._client.set_metadata(
                self._collection, [point_id], metadata, wait=True
            )
        except Exception as exc:
            self._fail(
                IndexWriteError("Failed updating card payload in index"),
                AuditEvent.POINT_VISIBILITY,
                point_id,
                cause=exc,
            )

        self._audit(
            AuditEvent.POINT_VISIBILITY,
            point_id,
            {
                "requested": visibility.value,
                "changed": True,
                "authors": metadata.get("authors", []),
            },
        )

    # ── search ────────────────────────────────────────────────────────

    async def search(
        self, page: int, filter: Any, vector: list[float]
    ) -> list[SearchResult]:
        """Return one page of results in the engine's ranking order.

        Hits whose id is not a UUID belong to another kind of point and
        are dropped.
        """
        if page < 1:
            self._fail(
                ValidationError(f"Page must be >= 1, got {page}"),
                AuditEvent.INDEX_SEARCH,
            )

        offset = (page - 1) * self._page_size
        try:
            hits = await self._client.similarity_search(
                self._collection,
                vector,
                limit=self._page_size,
                offset=offset,
                filter=filter,
            )
        except Exception as exc:
            self._fail(
                SearchError("Failed to search points on index"),
                AuditEvent.INDEX_SEARCH,
                cause=exc,
            )

        results: list[SearchResult] = []
        for hit in hits:
            point_id = _parse_point_id(hit.id)
            if point_id is None:
                continue
            results.append(SearchResult(point_id=point_id, score=hit.score))

        self._audit(
            AuditEvent.INDEX_SEARCH,
            None,
            {"page": page, "offset": offset, "hits": len(hits), "count": len(results)},
        )
        return results

    # ── internal ──────────────────────────────────────────────────────

    def _audit(
        self, event: AuditEvent, point_id: uuid.UUID | None, detail: dict[str, Any]
    ) -> None:
        if self._logger is None:
            return
        entry = AuditEntry(
            event=event,
            collection=self._collection,
            point_id=str(point_id) if point_id is not None else None,
            detail=detail,
        )
        try:
            self._logger.log(entry)
        except OSError:
            # The index call already completed; its outcome stands.
            pass

    def _fail(
        self,
        error: IndexAdapterError,
        operation: AuditEvent,
        point_id: uuid.UUID | None = None,
        cause: Exception | None = None,
    ) -> NoReturn:
        detail: dict[str, Any] = {
            "operation": operation.value,
            "kind": error.kind,
            "error": error.message,
        }
        if cause is not None:
            detail["cause"] = f"{type(cause).__name__}: {cause}"
        self._audit(AuditEvent.INDEX_ERROR, point_id, detail)
        raise error from cause


def _as_visibility(value: Visibility | str) -> Visibility:
    try:
        return Visibility(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown visibility: {value!r}") from exc


def _author_str(author: str | uuid.UUID | None) -> str | None:
    if author is None:
        return None
    value = str(author)
    return value or None


def _parse_point_id(raw: str | int) -> uuid.UUID | None:
    if not isinstance(raw, str):
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        return None
