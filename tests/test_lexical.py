"""Tests for the TF-IDF text search engine."""

from __future__ import annotations

import math
from pathlib import Path

import pytest

from doccsearch.index.lexical import TextSearchEngine, tokenize
from doccsearch.index.storage import IndexStore
from doccsearch.models import ChunkMetadata, ContentChunk


def _chunk(text: str, title: str, *, archive: str = "SwiftUI", kind: str = "struct", index: int = 0) -> ContentChunk:
    url = f"doc://{archive}/documentation/{title}"
    return ContentChunk(text, ChunkMetadata(archive, title, kind, url, url), index)


@pytest.fixture
def engine(tmp_path: Path) -> TextSearchEngine:
    engine = TextSearchEngine(IndexStore(tmp_path))
    engine.add(
        [
            _chunk("state management with observable objects", "Observable"),
            _chunk("the state of the view", "ViewState"),
            _chunk("network requests and sessions", "URLSession", archive="Foundation", kind="class"),
        ]
    )
    return engine


class TestTokenize:
    def test_drops_stopwords(self) -> None:
        assert tokenize("The State of the View") == ["state", "view"]


class TestTextSearchEngine:
    """Test TextSearchEngine."""

    def test_ranks_by_tfidf(self, engine: TextSearchEngine) -> None:
        results = engine.search("state management")

        assert [result.title for result in results] == ["Observable", "ViewState"]
        assert results[0].score == pytest.approx(1.0 + (1.0 + math.log(3 / 2)))
        assert results[1].score == pytest.approx(1.0)

    def test_state_management_scenario(self, tmp_path: Path) -> None:
        engine = TextSearchEngine(IndexStore(tmp_path))
        engine.add(
            [
                _chunk("state management is important", "First"),
                _chunk("unrelated text about networking", "Second"),
            ]
        )

        results = engine.search("state management")

        assert [result.title for result in results] == ["First"]
        assert results[0].score > 0

    def test_zero_scores_are_excluded(self, engine: TextSearchEngine) -> None:
        assert engine.search("swiftdata") == []
        assert engine.search("the of") == []

    def test_query_is_normalized(self, engine: TextSearchEngine) -> None:
        assert engine.search("  STATE,   Management!") == engine.search("state management")

    def test_deterministic(self, engine: TextSearchEngine) -> None:
        assert engine.search("state") == engine.search("state")

    def test_filters_after_ranking(self, engine: TextSearchEngine) -> None:
        assert [r.title for r in engine.search("state network", archive="Foundation")] == ["URLSession"]
        assert [r.title for r in engine.search("state network", kind="CLASS")] == ["URLSession"]
        assert engine.search("state", limit=0) == []
        assert len(engine.search("state", limit=1)) == 1

    def test_duplicates_are_skipped(self, engine: TextSearchEngine) -> None:
        added = engine.add([_chunk("state management with observable objects", "Observable")])

        assert added == 0
        assert len(engine) == 3

    def test_result_fields(self, engine: TextSearchEngine) -> None:
        (result,) = engine.search("network")

        assert result.excerpt == "network requests and sessions"
        assert result.url == "doc://Foundation/documentation/URLSession"
        assert result.archive == "Foundation"
        assert result.kind == "class"

    def test_empty_engine(self, tmp_path: Path) -> None:
        assert TextSearchEngine(IndexStore(tmp_path)).search("state") == []

    def test_save_and_load(self, engine: TextSearchEngine, tmp_path: Path) -> None:
        assert engine.save() is True

        restored = TextSearchEngine(IndexStore(tmp_path))
        assert restored.load() == 3

        assert restored.search("state management") == engine.search("state management")
        assert restored.records[0].tokens == 5

    def test_stats_and_clear(self, engine: TextSearchEngine) -> None:
        assert engine.stats() == {
            "totalDocuments": 3,
            "archives": ["Foundation", "SwiftUI"],
            "kinds": ["class", "struct"],
        }

        engine.clear()

        assert len(engine) == 0
        assert engine.search("state") == []
