"""Exceptions raised by DoccSearch."""

from __future__ import annotations


class DoccSearchError(Exception):
    """Base class for DoccSearch errors."""


class EmbeddingUnavailableError(DoccSearchError):
    """Raised when the embedding model is used before `load()`."""

    def __init__(self, message: str = "Embedding model not loaded. Call load() first.") -> None:
        super().__init__(message)


class ArchiveNotFoundError(DoccSearchError, LookupError):
    """Raised when an archive is not present under any configured root."""

    def __init__(self, archive: str) -> None:
        super().__init__(f'Archive "{archive}" not found in any configured path')
        self.archive = archive
