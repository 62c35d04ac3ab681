"""Resolve symbol and article ids to document files inside an archive.

Only the first root that holds the requested archive is consulted, even
when the document is missing there. When several files match an id the
winner is chosen deterministically: exact matches beat case-insensitive
ones, then the normalized relative path decides. Bare ids match a file name;
ids containing "/" must match the whole path below `data/`. Ids that
would leave the data directory never resolve.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from doccsearch.archive.locator import ArchiveLocator
from doccsearch.utils.files import iter_json_paths, relative_id

LOGGER = logging.getLogger(__name__)

ARTICLE_PRIORITY_DIRS = ("tutorials", "documentation")


class SymbolResolver:
    def __init__(self, locator: ArchiveLocator) -> None:
        self.locator = locator

    def find_symbol_path(self, symbol_id: str, archive: str) -> Path | None:
        data_dir = self.locator.find_data_dir(archive)
        if data_dir is None or not _is_safe_id(symbol_id):
            return None

        direct = self._direct_path(data_dir, symbol_id)
        if direct is not None:
            return direct
        return self._search(data_dir, [data_dir], symbol_id)

    def find_article_path(self, article_id: str, archive: str) -> Path | None:
        """Like `find_symbol_path`, but tutorials and documentation are searched first."""
        data_dir = self.locator.find_data_dir(archive)
        if data_dir is None or not _is_safe_id(article_id):
            return None

        direct = self._direct_path(data_dir, article_id)
        if direct is not None:
            return direct

        for subtree in self._article_subtrees(data_dir):
            match = self._search(data_dir, subtree, article_id)
            if match is not None:
                return match
        return self._search(data_dir, [data_dir], article_id)

    def iter_document_ids(self, archive: str) -> List[str]:
        """Ids of every document in the archive, in sorted path order."""
        data_dir = self.locator.find_data_dir(archive)
        if data_dir is None:
            return []
        return [relative_id(path, data_dir) for path in iter_json_paths(data_dir)]

    @staticmethod
    def _direct_path(data_dir: Path, document_id: str) -> Path | None:
        if "/" not in document_id:
            return None
        candidate = (data_dir / f"{document_id.strip('/')}.json").resolve()
        if data_dir.resolve() not in candidate.parents:
            return None
        return candidate if candidate.is_file() else None

    @staticmethod
    def _article_subtrees(data_dir: Path) -> List[List[Path]]:
        try:
            children = sorted(child for child in data_dir.iterdir() if child.is_dir())
        except OSError as exc:
            LOGGER.warning("Cannot read %s: %s", data_dir, exc)
            return []
        priority = [[data_dir / name] for name in ARTICLE_PRIORITY_DIRS if (data_dir / name).is_dir()]
        rest = [child for child in children if child.name not in ARTICLE_PRIORITY_DIRS]
        return priority + ([rest] if rest else [])

    @staticmethod
    def _search(data_dir: Path, roots: Sequence[Path], document_id: str) -> Path | None:
        target = document_id.strip("/")
        if target.endswith(".json"):
            target = target[: -len(".json")]
        if not target:
            return None

        by_path = "/" in target
        exact: List[Path] = []
        folded: List[Path] = []
        lowered = target.lower()
        for path in _walk(roots):
            candidate = relative_id(path, data_dir) if by_path else path.stem
            if candidate == target:
                exact.append(path)
            elif candidate.lower() == lowered:
                folded.append(path)

        for candidates in (exact, folded):
            if candidates:
                return min(candidates, key=lambda path: relative_id(path, data_dir).lower())
        return None


def _walk(roots: Iterable[Path]) -> Iterable[Path]:
    for root in roots:
        yield from iter_json_paths(root)


def _is_safe_id(document_id: str) -> bool:
    return ".." not in document_id.replace("\\", "/").split("/")
