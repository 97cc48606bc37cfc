"""Manifest (cardindex.yaml) schema — Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel, Field


# ── Sections ─────────────────────────────────────────────────────────


class AppInfo(BaseModel):
    name: str
    version: str = "0.0.1"


class QdrantConfig(BaseModel):
    url: str = "http://localhost:6333"
    api_key: str | None = None
    timeout: int | None = None     # seconds; client default when unset
    prefer_grpc: bool = False


class IndexConfig(BaseModel):
    collection: str = "debate_cards"
    page_size: int = Field(default=10, ge=1)


class AuditConfig(BaseModel):
    path: str = "audit.jsonl"
    enabled: bool = True


# ── Root manifest ────────────────────────────────────────────────────


class Manifest(BaseModel):
    app: AppInfo
    qdrant: QdrantConfig = QdrantConfig()
    index: IndexConfig = IndexConfig()
    audit: AuditConfig = AuditConfig()
