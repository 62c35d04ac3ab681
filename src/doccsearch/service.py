"""Operations exposed to the command line and HTTP adapters."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from doccsearch.archive.cache import ArchiveCache
from doccsearch.archive.locator import ArchiveLocator
from doccsearch.archive.manager import ArchiveManager
from doccsearch.config import AppConfig
from doccsearch.embedding.encoder import EmbeddingConfig, EmbeddingModel
from doccsearch.index.indexer import Indexer, IndexStats
from doccsearch.index.lexical import TextSearchEngine
from doccsearch.index.search import Searcher, SearchMode, SearchResult
from doccsearch.index.semantic import SemanticSearchEngine
from doccsearch.index.storage import IndexStore
from doccsearch.models import ArchiveRecord

LOGGER = logging.getLogger(__name__)


class DocService:
    """Owns the cache, archive manager and search engines for one process.

    Build one instance per process and share it; the engines it holds must
    not be mutated by two callers at once.
    """

    def __init__(self, config: AppConfig, *, embedder: EmbeddingModel | None = None) -> None:
        self.config = config
        self.cache = ArchiveCache(config.cache_size)
        self.locator = ArchiveLocator(config.archive_paths, self.cache)
        self.manager = ArchiveManager(self.locator, self.cache)
        self.store = IndexStore(config.resolve_index_dir(Path.cwd()))
        self.embedder = embedder or EmbeddingModel(EmbeddingConfig(model_name=config.model_name))
        self.text_engine = TextSearchEngine(self.store)
        self.semantic_engine = SemanticSearchEngine(self.embedder, self.store)
        self.searcher = Searcher(self.manager, self.text_engine, self.semantic_engine)
        self._text_loaded = False
        self._semantic_loaded = False

    def load_indices(self, *, semantic: bool = False) -> None:
        """Load persisted indices; a missing or corrupt file means an empty index."""
        if not self._text_loaded:
            self.text_engine.load()
            self._text_loaded = True
        if semantic and not self._semantic_loaded:
            self.embedder.load()
            self.semantic_engine.load()
            self._semantic_loaded = True

    def search(
        self,
        query: str,
        *,
        archive: str | None = None,
        kind: str | None = None,
        mode: SearchMode = "auto",
        limit: int = 10,
    ) -> List[SearchResult]:
        self.load_indices(semantic=mode == "semantic")
        return self.searcher.search(query, archive=archive, kind=kind, mode=mode, limit=limit)

    def get_symbol(
        self,
        symbol_id: str,
        archive: str,
        *,
        include_references: bool = False,
        max_sections: Optional[int] = 10,
        summary_only: bool = False,
    ) -> Dict[str, Any] | None:
        return self.manager.get_symbol(
            symbol_id,
            archive,
            include_references=include_references,
            max_sections=max_sections,
            summary_only=summary_only,
        )

    def get_article(self, article_id: str, archive: str) -> Dict[str, Any] | None:
        return self.manager.get_article(article_id, archive)

    def list_archives(self) -> List[ArchiveRecord]:
        return self.manager.list_archives()

    def browse_archive(self, archive: str, path: str | None = None) -> Dict[str, Any] | None:
        return self.manager.browse_archive(archive, path)

    def build_index(
        self,
        archives: List[str] | None = None,
        *,
        engine: str = "both",
        rebuild: bool = False,
    ) -> IndexStats:
        """Bulk-index archives into the persisted indices."""
        if engine not in {"text", "semantic", "both"}:
            raise ValueError(f"Unknown engine: {engine}")
        indexer = Indexer(
            self.manager,
            text_engine=self.text_engine if engine in {"text", "both"} else None,
            semantic_engine=self.semantic_engine if engine in {"semantic", "both"} else None,
            workers=self.config.workers,
            text_max_tokens=self.config.text_max_tokens,
            text_overlap=self.config.text_overlap,
            semantic_max_tokens=self.config.semantic_max_tokens,
            semantic_overlap=self.config.semantic_overlap,
        )
        stats = indexer.index(archives, rebuild=rebuild)
        self._text_loaded = self._text_loaded or engine in {"text", "both"}
        self._semantic_loaded = self._semantic_loaded or engine in {"semantic", "both"}
        return stats

    def stats(self) -> Dict[str, Any]:
        return {
            "text": self.text_engine.stats(),
            "semantic": self.semantic_engine.stats(),
            "cache": {"archives": len(self.cache.archives), "documents": len(self.cache.documents)},
        }

    def clear_cache(self) -> None:
        LOGGER.debug("Clearing archive and document caches")
        self.cache.clear()
