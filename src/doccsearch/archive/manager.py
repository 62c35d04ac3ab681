"""Lookup, browse and keyword scan over documentation archives."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from doccsearch.archive.cache import ArchiveCache
from doccsearch.archive.locator import ArchiveLocator, strip_suffix
from doccsearch.archive.resolver import SymbolResolver
from doccsearch.errors import ArchiveNotFoundError
from doccsearch.index.search import SearchResult
from doccsearch.ingestion.extract import (
    build_extracted_content,
    extract_abstract,
    extract_article_sections,
    extract_declarations,
    extract_parameters,
    iter_discussion_texts,
)
from doccsearch.models import ArchiveRecord, Document
from doccsearch.utils.files import iter_json_paths, read_json

LOGGER = logging.getLogger(__name__)


class ArchiveManager:
    """Coordinates the locator, resolver and document cache."""

    def __init__(self, locator: ArchiveLocator, cache: ArchiveCache) -> None:
        self.locator = locator
        self.resolver = SymbolResolver(locator)
        self.cache = cache

    def list_archives(self) -> List[ArchiveRecord]:
        return self.locator.list_archives()

    def load_document(self, symbol_id: str, archive: str) -> Document | None:
        key = self.cache.symbol_key(strip_suffix(archive), symbol_id)
        cached = self.cache.documents.get(key)
        if cached is not None:
            return cached

        path = self.resolver.find_symbol_path(symbol_id, archive)
        document = self.read_document(path) if path is not None else None
        if document is not None:
            self.cache.documents.set(key, document)
        return document

    def load_article(self, article_id: str, archive: str) -> Document | None:
        key = self.cache.article_key(strip_suffix(archive), article_id)
        cached = self.cache.documents.get(key)
        if cached is not None:
            return cached

        path = self.resolver.find_article_path(article_id, archive)
        document = self.read_document(path) if path is not None else None
        if document is not None:
            self.cache.documents.set(key, document)
        return document

    def get_symbol(
        self,
        symbol_id: str,
        archive: str,
        *,
        include_references: bool = False,
        max_sections: Optional[int] = 10,
        summary_only: bool = False,
    ) -> Dict[str, Any] | None:
        """Symbol document with extracted plain-text content, or None."""
        document = self.load_document(symbol_id, archive)
        if document is None:
            return None

        if summary_only:
            return {
                "identifier": document.identifier,
                "kind": document.kind,
                "title": document.title,
                "role": document.role,
                "abstract": extract_abstract(document),
                "declaration": extract_declarations(document),
                "parameters": extract_parameters(document),
            }

        payload = document.to_dict()
        if not include_references:
            payload.pop("references", None)
        if max_sections is not None and isinstance(payload.get("primaryContentSections"), list):
            payload["primaryContentSections"] = payload["primaryContentSections"][:max_sections]
        payload["extractedContent"] = build_extracted_content(document)
        return payload

    def get_article(self, article_id: str, archive: str) -> Dict[str, Any] | None:
        document = self.load_article(article_id, archive)
        if document is None:
            return None
        payload = document.to_dict()
        payload.pop("references", None)
        payload["extractedContent"] = {
            "abstract": extract_abstract(document),
            "sections": extract_article_sections(document),
        }
        return payload

    def browse_archive(self, archive: str, path: str | None = None) -> Dict[str, Any] | None:
        """List one directory of an archive's data tree.

        Raises `ArchiveNotFoundError` for an unknown archive; returns None
        when the path does not exist inside it.
        """
        data_dir = self.locator.find_data_dir(archive)
        if data_dir is None:
            raise ArchiveNotFoundError(archive)

        relative = (path or "").strip("/")
        target = (data_dir / relative).resolve() if relative else data_dir
        if data_dir.resolve() not in (target, *target.parents):
            return None
        try:
            children = sorted(target.iterdir(), key=lambda child: child.name)
        except OSError:
            return None

        entries: List[Dict[str, Any]] = []
        for child in children:
            if child.is_dir():
                entries.append(
                    {
                        "name": child.name,
                        "type": "directory",
                        "path": f"{relative}/{child.name}" if relative else child.name,
                    }
                )
            elif child.suffix == ".json":
                document = self.read_document(child)
                if document is None:
                    entries.append({"name": child.name, "type": "file"})
                else:
                    entries.append(
                        {
                            "name": child.name,
                            "type": "symbol",
                            "title": document.title,
                            "kind": document.kind,
                            "role": document.role,
                        }
                    )
        return {"path": relative or "/", "entries": entries}

    def keyword_search(
        self,
        query: str,
        *,
        archive: str | None = None,
        kind: str | None = None,
        limit: int = 50,
        per_archive: int = 200,
    ) -> List[SearchResult]:
        """Linear scan matching documents that contain every query word."""
        words = query.lower().split()
        if not words:
            return []
        archives = [strip_suffix(archive)] if archive else self.locator.archive_names()

        results: List[SearchResult] = []
        for name in archives:
            data_dir = self.locator.find_data_dir(name)
            if data_dir is None:
                continue
            for index, path in enumerate(iter_json_paths(data_dir)):
                if index >= per_archive:
                    break
                result = self._match(path, name, query.lower(), words, kind)
                if result is not None:
                    results.append(result)
        return results[:limit]

    def _match(
        self, path: Path, archive: str, query: str, words: List[str], kind: str | None
    ) -> SearchResult | None:
        document = self.read_document(path)
        if document is None:
            return None

        abstract = extract_abstract(document)
        searchable = " ".join(
            [
                document.title,
                document.kind,
                document.role,
                abstract,
                " ".join(iter_discussion_texts(document)),
                " ".join(param["description"] for param in extract_parameters(document)),
            ]
        ).lower()
        found = sum(1 for word in words if word in searchable)
        if found < len(words) and query not in document.title.lower():
            return None
        if kind and kind.lower() not in document.kind.lower() and kind.lower() not in document.role.lower():
            return None

        return SearchResult(
            excerpt=abstract,
            title=document.title,
            url=document.identifier or path.stem,
            score=found / len(words),
            archive=archive,
            kind=document.kind,
            metadata={"role": document.role, "path": str(path)},
        )

    @staticmethod
    def read_document(path: Path) -> Document | None:
        try:
            payload = read_json(path)
        except (OSError, ValueError) as exc:
            LOGGER.warning("Skipping unreadable document %s: %s", path, exc)
            return None
        if not isinstance(payload, dict):
            LOGGER.warning("Skipping malformed document %s", path)
            return None
        return Document(payload, path)
