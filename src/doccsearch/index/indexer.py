"""Bulk indexing pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import closing
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from doccsearch.archive.manager import ArchiveManager
from doccsearch.index.lexical import TextSearchEngine
from doccsearch.index.semantic import SemanticSearchEngine
from doccsearch.ingestion.chunks import semantic_chunks, text_chunks
from doccsearch.models import Document

LOGGER = logging.getLogger(__name__)

PREFETCH_PER_WORKER = 4


@dataclass(slots=True)
class IndexStats:
    processed: int = 0
    chunks: int = 0
    skipped: int = 0
    failed: int = 0
    archives: list[str] = field(default_factory=list)

    def increment(self, status: str, chunks: int = 0) -> None:
        if status == "processed":
            self.processed += 1
            self.chunks += chunks
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1


class Indexer:
    """Feeds archive documents into the search engines.

    Documents are read and parsed on a bounded thread pool; every engine
    mutation happens on the calling thread, so the engines only ever have a
    single writer.
    """

    def __init__(
        self,
        manager: ArchiveManager,
        *,
        text_engine: TextSearchEngine | None = None,
        semantic_engine: SemanticSearchEngine | None = None,
        workers: int = 4,
        save_every: int = 200,
        text_max_tokens: int = 1000,
        text_overlap: int = 100,
        semantic_max_tokens: int = 500,
        semantic_overlap: int = 50,
    ) -> None:
        if text_engine is None and semantic_engine is None:
            raise ValueError("At least one search engine is required")
        self.manager = manager
        self.text_engine = text_engine
        self.semantic_engine = semantic_engine
        self.workers = max(1, workers)
        self.save_every = save_every
        self.text_max_tokens = text_max_tokens
        self.text_overlap = text_overlap
        self.semantic_max_tokens = semantic_max_tokens
        self.semantic_overlap = semantic_overlap

    @property
    def engines(self) -> List[TextSearchEngine | SemanticSearchEngine]:
        return [engine for engine in (self.text_engine, self.semantic_engine) if engine is not None]

    def index(self, archives: Sequence[str] | None = None, *, rebuild: bool = False) -> IndexStats:
        """Index the given archives (all archives when None)."""
        if self.semantic_engine is not None:
            self.semantic_engine.embedder.load()

        for engine in self.engines:
            if rebuild:
                LOGGER.info("Rebuilding %s from scratch", type(engine).__name__)
                engine.clear()
            else:
                engine.load()

        names = list(archives) if archives else self.manager.locator.archive_names()
        LOGGER.info("Found %d archives", len(names))

        stats = IndexStats()
        since_save = 0
        for name in names:
            LOGGER.info("Processing archive: %s", name)
            stats.archives.append(name)
            with closing(self._load_documents(name)) as documents:
                for _doc_id, document in documents:
                    if document is None:
                        stats.increment("failed")
                        continue
                    added = self._index_document(document, name)
                    stats.increment("processed" if added else "skipped", added)
                    since_save += 1
                    if self.save_every and since_save >= self.save_every:
                        LOGGER.info("Saving progress (%d chunks so far)", stats.chunks)
                        self._save()
                        since_save = 0

        self._save()
        LOGGER.info(
            "Indexing complete: %d documents, %d chunks, %d skipped, %d failed",
            stats.processed,
            stats.chunks,
            stats.skipped,
            stats.failed,
        )
        return stats

    def _load_documents(self, archive: str) -> Iterator[Tuple[str, Document | None]]:
        data_dir = self.manager.locator.find_data_dir(archive)
        if data_dir is None:
            LOGGER.warning("Archive %s not found", archive)
            return
        document_ids = self.manager.resolver.iter_document_ids(archive)
        LOGGER.info("Found %d documents in %s", len(document_ids), archive)
        window = self.workers * PREFETCH_PER_WORKER
        executor = ThreadPoolExecutor(max_workers=self.workers)
        try:
            # Reads run at most one window ahead of the writer; map() keeps input order.
            for start in range(0, len(document_ids), window):
                batch = document_ids[start : start + window]
                loaded = executor.map(
                    lambda doc_id: self.manager.read_document(data_dir / f"{doc_id}.json"), batch
                )
                yield from zip(batch, loaded)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _index_document(self, document: Document, archive: str) -> int:
        added = 0
        if self.text_engine is not None:
            added += self.text_engine.add(
                text_chunks(document, archive, max_tokens=self.text_max_tokens, overlap=self.text_overlap)
            )
        if self.semantic_engine is not None:
            added += self.semantic_engine.add(
                semantic_chunks(
                    document, archive, max_tokens=self.semantic_max_tokens, overlap=self.semantic_overlap
                )
            )
        return added

    def _save(self) -> None:
        for engine in self.engines:
            engine.save()
