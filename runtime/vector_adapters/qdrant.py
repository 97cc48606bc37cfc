"""Qdrant vector index adapter.

Wraps qdrant_client.AsyncQdrantClient.  The client is created on first
use and shared by every call made through the adapter instance.
"""

from __future__ import annotations

import uuid
from typing import Any

from qdrant_client import AsyncQdrantClient, models

from contracts.vector_index import IndexPoint, ScoredHit, StoredPoint, VectorIndexClient


class QdrantVectorIndex(VectorIndexClient):
    """Vector index capability backed by a Qdrant server."""

    def __init__(
        self,
        url: str = "http://localhost:6333",
        api_key: str | None = None,
        timeout: int | None = None,
        prefer_grpc: bool = False,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._timeout = timeout
        self._prefer_grpc = prefer_grpc
        self._client = client

    def _connection(self) -> AsyncQdrantClient:
        if self._client is None:
            self._client = AsyncQdrantClient(
                url=self._url,
                api_key=self._api_key,
                timeout=self._timeout,
                prefer_grpc=self._prefer_grpc,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    # ── upsert ────────────────────────────────────────────────────────

    async def upsert(
        self, collection: str, points: list[IndexPoint], wait: bool = True
    ) -> None:
        structs = [
            models.PointStruct(
                id=str(p.id),
                vector=p.vector,
                payload=p.metadata,
            )
            for p in points
        ]
        await self._connection().upsert(
            collection_name=collection, points=structs, wait=wait
        )

    # ── fetch ─────────────────────────────────────────────────────────

    async def fetch_by_ids(
        self,
        collection: str,
        ids: list[uuid.UUID],
        with_vectors: bool = True,
        with_metadata: bool = True,
    ) -> list[StoredPoint]:
        records = await self._connection().retrieve(
            collection_name=collection,
            ids=[str(i) for i in ids],
            with_payload=with_metadata,
            with_vectors=with_vectors,
        )
        return [
            StoredPoint(
                id=record.id,
                vector=record.vector,
                metadata=record.payload or {},
            )
            for record in records
        ]

    # ── metadata ──────────────────────────────────────────────────────

    async def set_metadata(
        self,
        collection: str,
        ids: list[uuid.UUID],
        metadata: dict[str, Any],
        wait: bool = True,
    ) -> None:
        # overwrite_payload replaces the payload; set_payload would merge keys
        await self._connection().overwrite_payload(
            collection_name=collection,
            payload=metadata,
            points=models.PointIdsList(points=[str(i) for i in ids]),
            wait=wait,
        )

    # ── search ────────────────────────────────────────────────────────

    async def similarity_search(
        self,
        collection: str,
        query_vector: list[float],
        limit: int,
        offset: int = 0,
        filter: Any = None,
    ) -> list[ScoredHit]:
        response = await self._connection().query_points(
            collection_name=collection,
            query=query_vector,
            query_filter=filter,
            limit=limit,
            offset=offset,
            with_payload=False,
        )
        return [ScoredHit(id=point.id, score=point.score) for point in response.points]
