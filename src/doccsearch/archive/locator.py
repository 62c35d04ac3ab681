"""Locate documentation archives across the configured search roots."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Sequence

from doccsearch.archive.cache import ArchiveCache
from doccsearch.models import (
    ARCHIVE_SUFFIX,
    DATA_DIRNAME,
    METADATA_FILENAME,
    ArchiveMetadata,
    ArchiveRecord,
)
from doccsearch.utils.files import count_json_files, read_json

LOGGER = logging.getLogger(__name__)


def archive_dirname(name: str) -> str:
    return name if name.endswith(ARCHIVE_SUFFIX) else f"{name}{ARCHIVE_SUFFIX}"


def strip_suffix(name: str) -> str:
    return name[: -len(ARCHIVE_SUFFIX)] if name.endswith(ARCHIVE_SUFFIX) else name


class ArchiveLocator:
    """Resolves archive names to directories; roots are consulted in order."""

    def __init__(self, roots: Sequence[Path | str], cache: ArchiveCache) -> None:
        self.roots: List[Path] = [Path(root).expanduser().resolve() for root in roots]
        self.cache = cache
        LOGGER.debug("Using archive roots: %s", ", ".join(str(root) for root in self.roots))

    def list_archives(self) -> List[ArchiveRecord]:
        """All archives across roots; the first root supplying a name wins."""
        archives: List[ArchiveRecord] = []
        seen: set[str] = set()
        for root in self.roots:
            try:
                entries = sorted(root.iterdir(), key=lambda entry: entry.name)
            except OSError as exc:
                LOGGER.warning("Error listing archives in %s: %s", root, exc)
                continue

            for entry in entries:
                if not entry.name.endswith(ARCHIVE_SUFFIX) or not entry.is_dir():
                    continue
                name = strip_suffix(entry.name)
                if name in seen:
                    LOGGER.debug("Skipping duplicate archive %s in %s", name, root)
                    continue
                record = self.get_archive(name, roots=[root])
                if record is not None:
                    seen.add(name)
                    archives.append(record)
        return archives

    def get_archive(self, name: str, *, roots: Iterable[Path] | None = None) -> ArchiveRecord | None:
        """Load (or fetch from cache) the record for a single archive."""
        name = strip_suffix(name)
        cached = self.cache.archives.get(name)
        if cached is not None:
            return cached

        for root in roots if roots is not None else self.roots:
            archive_path = root / archive_dirname(name)
            metadata_path = archive_path / METADATA_FILENAME
            if not metadata_path.is_file():
                continue
            try:
                metadata = ArchiveMetadata.from_json(read_json(metadata_path))
            except (OSError, ValueError, TypeError) as exc:
                LOGGER.warning("Error loading metadata for %s: %s", name, exc)
                return None

            record = ArchiveRecord(
                name=name,
                display_name=metadata.bundle_display_name,
                bundle_identifier=metadata.bundle_identifier,
                path=archive_path,
                document_count=self.count_documents(archive_path),
            )
            self.cache.archives.set(name, record)
            return record

        LOGGER.debug("Metadata for %s not found in any configured path", name)
        return None

    def find_archive_path(self, name: str) -> Path | None:
        """First root that contains an archive directory with this name."""
        dirname = archive_dirname(name)
        for root in self.roots:
            candidate = root / dirname
            try:
                if candidate.is_dir():
                    return candidate
            except OSError as exc:
                LOGGER.warning("Cannot access %s: %s", candidate, exc)
        return None

    def find_data_dir(self, name: str) -> Path | None:
        archive_path = self.find_archive_path(name)
        return archive_path / DATA_DIRNAME if archive_path is not None else None

    @staticmethod
    def count_documents(archive_path: Path) -> int:
        return count_json_files(archive_path / DATA_DIRNAME)

    def archive_names(self) -> List[str]:
        return [record.name for record in self.list_archives()]

