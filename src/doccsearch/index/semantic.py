"""Embedding-based semantic ranking with cosine similarity."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

import numpy as np

from doccsearch.embedding.encoder import EmbeddingModel
from doccsearch.errors import EmbeddingUnavailableError
from doccsearch.index.search import SearchResult, rank_records
from doccsearch.index.storage import IndexStore
from doccsearch.ingestion.chunks import make_record_id
from doccsearch.models import ContentChunk, IndexRecord
from doccsearch.utils.text import estimate_tokens

LOGGER = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """dot(a, b) / (|a| * |b|); 0.0 when either vector has zero length."""
    va = np.asarray(a, dtype="float64")
    vb = np.asarray(b, dtype="float64")
    denominator = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denominator == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denominator)


class SemanticSearchEngine:
    """Linear-scan vector index. Suited to archive-sized corpora, not web scale."""

    def __init__(self, embedder: EmbeddingModel, store: IndexStore) -> None:
        self.embedder = embedder
        self.store = store
        self._records: List[IndexRecord] = []
        self._ids: set[str] = set()
        self._matrix: np.ndarray | None = None

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> Sequence[IndexRecord]:
        return tuple(self._records)

    def add(self, chunks: Iterable[ContentChunk]) -> int:
        """Embed and store chunks not already in the index."""
        pending: List[IndexRecord] = []
        seen: set[str] = set()
        for chunk in chunks:
            meta = chunk.metadata
            record_id = make_record_id(meta.archive, meta.symbol_id or meta.title, chunk.content, chunk.index)
            if record_id in self._ids or record_id in seen:
                LOGGER.debug("Skipping duplicate chunk %s", record_id)
                continue
            seen.add(record_id)
            pending.append(
                IndexRecord(
                    id=record_id,
                    content=chunk.content,
                    metadata=meta,
                    tokens=estimate_tokens(chunk.content),
                )
            )
        if not pending:
            return 0

        try:
            vectors = self.embedder.embed([record.content for record in pending])
        except EmbeddingUnavailableError:
            raise
        except Exception as exc:
            LOGGER.error("Failed to embed %d chunks for %s: %s", len(pending), pending[0].metadata.title, exc)
            return 0

        for record, vector in zip(pending, vectors):
            record.embedding = [float(value) for value in vector]
            self._records.append(record)
            self._ids.add(record.id)
        self._matrix = None
        LOGGER.debug("Added %d chunks to semantic index", len(pending))
        return len(pending)

    def _embeddings(self) -> np.ndarray:
        if self._matrix is None:
            self._matrix = np.asarray([record.embedding for record in self._records], dtype="float32")
        return self._matrix

    def scores(self, query_vector: np.ndarray) -> np.ndarray:
        matrix = self._embeddings().astype("float64")
        query = np.asarray(query_vector, dtype="float64")
        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        dots = matrix @ query
        safe = np.where(norms == 0.0, 1.0, norms)
        return np.where(norms == 0.0, 0.0, dots / safe)

    def search(
        self,
        query: str,
        *,
        limit: int = 10,
        archive: str | None = None,
        kind: str | None = None,
    ) -> List[SearchResult]:
        if not self.embedder.is_loaded:
            raise EmbeddingUnavailableError()
        if not self._records:
            return []
        scores = self.scores(self.embedder.embed_query(query))
        return rank_records(zip(scores.tolist(), self._records), limit=limit, archive=archive, kind=kind)

    def clear(self) -> None:
        self._records = []
        self._ids = set()
        self._matrix = None

    def save(self) -> bool:
        return self.store.save_embeddings(self._records)

    def load(self) -> int:
        self.clear()
        for record in self.store.load_embeddings():
            if record.embedding is None or record.id in self._ids:
                continue
            self._records.append(record)
            self._ids.add(record.id)
        LOGGER.info("Loaded %d embeddings", len(self._records))
        return len(self._records)

    def stats(self) -> Dict[str, object]:
        return {
            "totalEmbeddings": len(self._records),
            "archives": sorted({record.metadata.archive for record in self._records}),
            "kinds": sorted({record.metadata.kind for record in self._records}),
        }
