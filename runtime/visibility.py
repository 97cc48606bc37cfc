"""Visibility metadata helpers.

A point's payload is either ``{}`` (public) or
``{"private": True, "authors": [...]}`` (private).
"""

from __future__ import annotations

from typing import Any

from contracts.vector_index import Visibility

PRIVATE_KEY = "private"
AUTHORS_KEY = "authors"


def build_metadata(visibility: Visibility, authors: list[str] | None = None) -> dict[str, Any]:
    """Return the engine payload for a point of the given visibility."""
    if visibility == Visibility.PUBLIC:
        return {}
    return {PRIVATE_KEY: True, AUTHORS_KEY: list(authors or [])}


def is_private(metadata: dict[str, Any]) -> bool:
    """Read the private flag; anything but a real boolean counts as public."""
    value = metadata.get(PRIVATE_KEY)
    if isinstance(value, bool):
        return value
    return False


def read_authors(metadata: dict[str, Any]) -> list[str]:
    """Return the stored author ids, skipping non-string and empty entries."""
    raw = metadata.get(AUTHORS_KEY)
    if not isinstance(raw, list):
        return []
    return [a for a in raw if isinstance(a, str) and a]


def merge_author(authors: list[str], author: str) -> list[str]:
    """Add *author* to *authors* unless already present. Order is kept."""
    if author in authors:
        return list(authors)
    return [*authors, author]
