"""cardindex runtime wiring — build the index adapter from a manifest."""

from __future__ import annotations

import os

from contracts.manifest import Manifest
from contracts.vector_index import VectorIndexClient

from runtime.audit.logger import JsonlAuditLogger
from runtime.manifest_loader import load_manifest
from runtime.vector_adapters.qdrant import QdrantVectorIndex
from runtime.visibility_index import VisibilityIndex

# ── Module-level state (set on first use) ────────────────────────────

_index: VisibilityIndex | None = None


def create_vector_client(manifest: Manifest) -> VectorIndexClient:
    """Create the Qdrant capability from manifest config."""
    cfg = manifest.qdrant
    return QdrantVectorIndex(
        url=cfg.url,
        api_key=cfg.api_key,
        timeout=cfg.timeout,
        prefer_grpc=cfg.prefer_grpc,
    )


def create_audit_logger(manifest: Manifest) -> JsonlAuditLogger | None:
    """Create the audit logger, or None when auditing is disabled."""
    if not manifest.audit.enabled:
        return None
    return JsonlAuditLogger(manifest.audit.path)


def create_index(
    manifest: Manifest, client: VectorIndexClient | None = None
) -> VisibilityIndex:
    """Wire a VisibilityIndex for the manifest's collection."""
    return VisibilityIndex(
        client=client or create_vector_client(manifest),
        collection=manifest.index.collection,
        page_size=manifest.index.page_size,
        logger=create_audit_logger(manifest),
    )


def get_index() -> VisibilityIndex:
    """Return the process-wide index, building it on the first call.

    The manifest path comes from ``CARDINDEX_MANIFEST``.
    """
    global _index  # noqa: PLW0603

    if _index is None:
        manifest_path = os.environ.get("CARDINDEX_MANIFEST", "./cardindex.yaml")
        _index = create_index(load_manifest(manifest_path))
    return _index


def reset_index() -> None:
    """Forget the process-wide index so the next get_index() rebuilds it.

    The old index is not closed; async callers should use close_index().
    """
    global _index  # noqa: PLW0603

    _index = None


async def close_index() -> None:
    """Close the process-wide index's connection and forget it."""
    global _index  # noqa: PLW0603

    index, _index = _index, None
    if index is not None:
        await index.close()
