"""Qdrant filter builders for visibility-restricted searches."""

from __future__ import annotations

import uuid

from qdrant_client import models

from runtime.visibility import AUTHORS_KEY, PRIVATE_KEY


def _not_private() -> models.Filter:
    # Public points have an empty payload, so match on "not private"
    # rather than "private == false".
    return models.Filter(
        must_not=[
            models.FieldCondition(key=PRIVATE_KEY, match=models.MatchValue(value=True)),
        ]
    )


def public_only() -> models.Filter:
    """Filter restricting a search to public points."""
    return _not_private()


def visible_to(author: str | uuid.UUID) -> models.Filter:
    """Filter matching public points and private points authored by *author*."""
    return models.Filter(
        should=[
            _not_private(),
            models.FieldCondition(
                key=AUTHORS_KEY, match=models.MatchAny(any=[str(author)])
            ),
        ]
    )
