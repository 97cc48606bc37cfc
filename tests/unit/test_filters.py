"""Unit tests for the Qdrant visibility filter builders."""

from __future__ import annotations

import uuid

from qdrant_client import models

from runtime.filters import public_only, visible_to


class TestPublicOnly:
    def test_excludes_private_points(self) -> None:
        flt = public_only()
        assert flt.must is None
        assert flt.should is None
        assert len(flt.must_not) == 1
        cond = flt.must_not[0]
        assert cond.key == "private"
        assert cond.match == models.MatchValue(value=True)


class TestVisibleTo:
    def test_public_or_authored(self) -> None:
        flt = visible_to("author-1")
        assert len(flt.should) == 2
        public, authored = flt.should
        assert isinstance(public, models.Filter)
        assert public.must_not[0].key == "private"
        assert authored.key == "authors"
        assert authored.match == models.MatchAny(any=["author-1"])

    def test_uuid_author_is_stringified(self) -> None:
        author = uuid.uuid4()
        flt = visible_to(author)
        assert flt.should[1].match.any == [str(author)]
