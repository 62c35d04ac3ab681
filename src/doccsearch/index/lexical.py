"""TF-IDF ranking over chunk text."""

from __future__ import annotations

import logging
import math
import re
from collections import Counter
from typing import Dict, Iterable, List, Sequence

from doccsearch.index.search import SearchResult, rank_records
from doccsearch.index.storage import IndexStore
from doccsearch.ingestion.chunks import make_record_id
from doccsearch.models import ContentChunk, IndexRecord
from doccsearch.utils.text import normalize_text, split_words

LOGGER = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\w+")

STOPWORDS = frozenset(
    """
    a about above after again all also am an and any are as at be because been before
    being below between both but by can did do does doing down during each few for from
    further had has have having he her here hers herself him himself his how i if in into
    is it its itself just me more most my myself no nor not now of off on once only or
    other our ours ourselves out over own same she should so some such than that the their
    theirs them themselves then there these they this those through to too under until up
    very was we were what when where which while who whom why will with you your yours
    yourself yourselves
    """.split()
)


def tokenize(text: str) -> List[str]:
    return [token for token in _TOKEN_RE.findall(text.lower()) if token not in STOPWORDS]


class TextSearchEngine:
    """Append-only TF-IDF corpus.

    Only the raw records are persisted; term statistics are rebuilt from them
    on load.
    """

    def __init__(self, store: IndexStore) -> None:
        self.store = store
        self._records: List[IndexRecord] = []
        self._ids: set[str] = set()
        self._term_counts: List[Counter[str]] = []
        self._doc_freq: Counter[str] = Counter()

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> Sequence[IndexRecord]:
        return tuple(self._records)

    def add(self, chunks: Iterable[ContentChunk]) -> int:
        """Add chunks verbatim; chunks already present (same id) are skipped."""
        added = 0
        for chunk in chunks:
            meta = chunk.metadata
            record = IndexRecord(
                id=make_record_id(meta.archive, meta.symbol_id or meta.title, chunk.content, chunk.index),
                content=chunk.content,
                metadata=meta,
                tokens=len(split_words(chunk.content)),
            )
            if self._append(record):
                added += 1
            else:
                LOGGER.debug("Skipping duplicate chunk %s", record.id)
        return added

    def _append(self, record: IndexRecord) -> bool:
        if record.id in self._ids:
            return False
        counts = Counter(tokenize(record.content))
        self._records.append(record)
        self._ids.add(record.id)
        self._term_counts.append(counts)
        self._doc_freq.update(counts.keys())
        return True

    def idf(self, term: str) -> float:
        return 1.0 + math.log(len(self._records) / (1.0 + self._doc_freq.get(term, 0)))

    def scores(self, query: str) -> List[float]:
        """TF-IDF measure of the normalized query against every document."""
        terms = tokenize(normalize_text(query))
        if not terms or not self._records:
            return [0.0] * len(self._records)
        weights: Dict[str, float] = {term: self.idf(term) for term in set(terms)}
        return [
            sum(counts.get(term, 0) * weights[term] for term in terms)
            for counts in self._term_counts
        ]

    def search(
        self,
        query: str,
        *,
        limit: int = 10,
        archive: str | None = None,
        kind: str | None = None,
    ) -> List[SearchResult]:
        if not self._records:
            return []
        scored = [
            (score, record)
            for score, record in zip(self.scores(query), self._records)
            if score > 0
        ]
        return rank_records(scored, limit=limit, archive=archive, kind=kind)

    def clear(self) -> None:
        self._records = []
        self._ids = set()
        self._term_counts = []
        self._doc_freq = Counter()

    def save(self) -> bool:
        return self.store.save_text_index(self._records)

    def load(self) -> int:
        self.clear()
        for record in self.store.load_text_index():
            self._append(record)
        LOGGER.info("Loaded text search index: %d documents", len(self._records))
        return len(self._records)

    def stats(self) -> Dict[str, object]:
        return {
            "totalDocuments": len(self._records),
            "archives": sorted({record.metadata.archive for record in self._records}),
            "kinds": sorted({record.metadata.kind for record in self._records}),
        }
