"""Tests for the archive and document caches."""

from __future__ import annotations

import pytest

from doccsearch.archive.cache import ArchiveCache, LRUCache


class TestLRUCache:
    def test_evicts_least_recently_used(self) -> None:
        cache: LRUCache[int] = LRUCache(maxsize=2)
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.get("a") == 1

        cache.set("c", 3)

        assert "b" not in cache
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert len(cache) == 2

    def test_unbounded(self) -> None:
        cache: LRUCache[int] = LRUCache(maxsize=None)
        for i in range(5000):
            cache.set(i, i)

        assert len(cache) == 5000

    def test_missing_key(self) -> None:
        assert LRUCache().get("nope") is None

    def test_invalid_size(self) -> None:
        with pytest.raises(ValueError):
            LRUCache(maxsize=0)


class TestArchiveCache:
    def test_symbol_and_article_keys_differ(self) -> None:
        assert ArchiveCache.symbol_key("A", "x") != ArchiveCache.article_key("A", "x")

    def test_clear(self) -> None:
        cache = ArchiveCache()
        cache.documents.set(ArchiveCache.symbol_key("A", "x"), object())

        cache.clear()

        assert len(cache.documents) == 0
        assert len(cache.archives) == 0
