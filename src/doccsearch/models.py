"""Core DoccSearch data models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

ARCHIVE_SUFFIX = ".doccarchive"
METADATA_FILENAME = "metadata.json"
DATA_DIRNAME = "data"


@dataclass(frozen=True, slots=True)
class ArchiveMetadata:
    """Contents of an archive's `metadata.json`."""

    bundle_identifier: str
    bundle_display_name: str
    schema_version: Tuple[int, int, int] = (0, 0, 0)

    @classmethod
    def from_json(cls, payload: Any) -> "ArchiveMetadata":
        """Parse `metadata.json`; raises ValueError when it is not an object."""
        if not isinstance(payload, Mapping):
            raise ValueError("archive metadata must be a JSON object")
        version = payload.get("schemaVersion") or {}
        if not isinstance(version, Mapping):
            raise ValueError("schemaVersion must be a JSON object")
        return cls(
            bundle_identifier=str(payload.get("bundleIdentifier", "")),
            bundle_display_name=str(payload.get("bundleDisplayName", "")),
            schema_version=(
                int(version.get("major", 0)),
                int(version.get("minor", 0)),
                int(version.get("patch", 0)),
            ),
        )


@dataclass(frozen=True, slots=True)
class ArchiveRecord:
    """A documentation archive found under one of the configured roots."""

    name: str
    display_name: str
    bundle_identifier: str
    path: Path
    document_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "bundleIdentifier": self.bundle_identifier,
            "path": str(self.path),
            "symbolCount": self.document_count,
        }


class Document:
    """Read-only view over a loaded symbol or article JSON document."""

    __slots__ = ("raw", "path")

    def __init__(self, raw: Mapping[str, Any], path: Path | None = None) -> None:
        self.raw = raw
        self.path = path

    @property
    def metadata(self) -> Mapping[str, Any]:
        value = self.raw.get("metadata")
        return value if isinstance(value, Mapping) else {}

    @property
    def identifier(self) -> str:
        ident = self.raw.get("identifier")
        if isinstance(ident, Mapping):
            return str(ident.get("url") or "")
        return ""

    @property
    def title(self) -> str:
        return str(self.metadata.get("title") or "")

    @property
    def role(self) -> str:
        return str(self.metadata.get("role") or "")

    @property
    def kind(self) -> str:
        return str(self.metadata.get("symbolKind") or self.raw.get("kind") or "unknown")

    @property
    def abstract(self) -> Any:
        return self.raw.get("abstract")

    @property
    def primary_content_sections(self) -> List[Mapping[str, Any]]:
        return _mapping_list(self.raw.get("primaryContentSections"))

    @property
    def topic_sections(self) -> List[Mapping[str, Any]]:
        return _mapping_list(self.raw.get("topicSections"))

    @property
    def sections(self) -> List[Mapping[str, Any]]:
        return _mapping_list(self.raw.get("sections"))

    @property
    def platforms(self) -> List[Mapping[str, Any]]:
        return _mapping_list(self.metadata.get("platforms"))

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw)


def _mapping_list(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, Mapping)]


@dataclass(frozen=True, slots=True)
class ChunkMetadata:
    """Provenance of an indexed chunk."""

    archive: str
    title: str
    kind: str
    url: str
    symbol_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "archive": self.archive,
            "title": self.title,
            "kind": self.kind,
            "url": self.url,
        }
        if self.symbol_id is not None:
            payload["symbolId"] = self.symbol_id
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ChunkMetadata":
        return cls(
            archive=str(payload.get("archive", "")),
            title=str(payload.get("title", "")),
            kind=str(payload.get("kind", "unknown")),
            url=str(payload.get("url", "")),
            symbol_id=payload.get("symbolId"),
        )


@dataclass(frozen=True, slots=True)
class ContentChunk:
    """Chunk of extracted document text paired with its provenance."""

    content: str
    metadata: ChunkMetadata
    index: int = 0


@dataclass(slots=True)
class IndexRecord:
    """A chunk as stored by one of the search engines."""

    id: str
    content: str
    metadata: ChunkMetadata
    tokens: int
    embedding: Optional[List[float]] = None

    def to_dict(self) -> Dict[str, Any]:
        metadata = self.metadata.to_dict()
        metadata["tokens"] = self.tokens
        payload: Dict[str, Any] = {"id": self.id}
        if self.embedding is not None:
            payload["embedding"] = list(self.embedding)
        payload["content"] = self.content
        payload["metadata"] = metadata
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "IndexRecord":
        metadata = payload.get("metadata") or {}
        embedding = payload.get("embedding")
        return cls(
            id=str(payload["id"]),
            content=str(payload.get("content", "")),
            metadata=ChunkMetadata.from_dict(metadata),
            tokens=int(metadata.get("tokens", 0)),
            embedding=[float(value) for value in embedding] if embedding is not None else None,
        )

