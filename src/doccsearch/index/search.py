"""Search interface shared by the lexical, semantic and keyword backends."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Literal, Tuple

if TYPE_CHECKING:
    from doccsearch.archive.manager import ArchiveManager
    from doccsearch.index.lexical import TextSearchEngine
    from doccsearch.index.semantic import SemanticSearchEngine
    from doccsearch.models import IndexRecord

LOGGER = logging.getLogger(__name__)

SearchMode = Literal["auto", "text", "semantic", "keyword"]


@dataclass(slots=True)
class SearchResult:
    excerpt: str
    title: str
    url: str
    score: float
    archive: str
    kind: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def rank_records(
    scored: Iterable[Tuple[float, "IndexRecord"]],
    *,
    limit: int,
    archive: str | None = None,
    kind: str | None = None,
) -> List[SearchResult]:
    """Sort by score, then filter, then truncate.

    Filters are applied after global ranking in both engines. Python's sort
    is stable, so equal scores keep insertion order.
    """
    if limit <= 0:
        return []
    ranked = sorted(scored, key=lambda item: item[0], reverse=True)
    results: List[SearchResult] = []
    for score, record in ranked:
        meta = record.metadata
        if archive and meta.archive != archive:
            continue
        if kind and kind.lower() not in meta.kind.lower():
            continue
        results.append(
            SearchResult(
                excerpt=record.content,
                title=meta.title,
                url=meta.url,
                score=float(score),
                archive=meta.archive,
                kind=meta.kind,
            )
        )
        if len(results) >= limit:
            break
    return results


class Searcher:
    """High-level API dispatching a query to one of the search backends."""

    def __init__(
        self,
        manager: "ArchiveManager",
        text_engine: "TextSearchEngine",
        semantic_engine: "SemanticSearchEngine | None" = None,
    ) -> None:
        self.manager = manager
        self.text_engine = text_engine
        self.semantic_engine = semantic_engine

    def search(
        self,
        query: str,
        *,
        archive: str | None = None,
        kind: str | None = None,
        mode: SearchMode = "auto",
        limit: int = 10,
    ) -> List[SearchResult]:
        if mode == "auto":
            mode = "text" if len(self.text_engine) else "keyword"
            LOGGER.debug("Resolved search mode: %s", mode)

        if mode == "text":
            return self.text_engine.search(query, limit=limit, archive=archive, kind=kind)
        if mode == "semantic":
            if self.semantic_engine is None:
                raise ValueError("Semantic search is not configured")
            return self.semantic_engine.search(query, limit=limit, archive=archive, kind=kind)
        if mode == "keyword":
            return self.manager.keyword_search(query, archive=archive, kind=kind, limit=limit)
        raise ValueError(f"Unknown search mode: {mode}")
