"""Turn loaded documents into indexable chunks."""

from __future__ import annotations

from typing import List

from doccsearch.ingestion.extract import (
    extract_abstract,
    extract_declarations,
    extract_parameters,
    extract_text,
    extract_topic_text,
    iter_discussion_texts,
)
from doccsearch.models import ChunkMetadata, ContentChunk, Document
from doccsearch.utils.files import content_hash
from doccsearch.utils.text import chunk_words, normalize_text

MIN_ABSTRACT_CHARS = 50
MIN_DISCUSSION_CHARS = 50
MIN_PARAMETER_CHARS = 20


def make_record_id(archive: str, document_id: str, content: str, chunk_index: int) -> str:
    """Stable id for a chunk so that reindexing the same content is idempotent."""
    return content_hash(archive, document_id, normalize_text(content), str(chunk_index))[:24]


def _base_metadata(document: Document, archive: str, fallback_title: str) -> ChunkMetadata:
    url = document.identifier
    return ChunkMetadata(
        archive=archive,
        title=document.title or fallback_title,
        kind=document.kind,
        url=url,
        symbol_id=url or None,
    )


def _with(metadata: ChunkMetadata, *, title: str | None = None, kind: str | None = None) -> ChunkMetadata:
    return ChunkMetadata(
        archive=metadata.archive,
        title=title if title is not None else metadata.title,
        kind=kind if kind is not None else metadata.kind,
        url=metadata.url,
        symbol_id=metadata.symbol_id,
    )


def semantic_chunks(
    document: Document, archive: str, *, max_tokens: int = 500, overlap: int = 50
) -> List[ContentChunk]:
    """Abstract, discussion and parameter chunks for the vector engine."""
    base = _base_metadata(document, archive, "Unknown")
    title = base.title
    chunks: List[ContentChunk] = []

    abstract = extract_abstract(document)
    if len(abstract) > MIN_ABSTRACT_CHARS:
        chunks.append(
            ContentChunk(f"{title}: {abstract}", _with(base, kind=f"{base.kind}-abstract"), len(chunks))
        )

    for discussion in iter_discussion_texts(document):
        if len(discussion) <= MIN_DISCUSSION_CHARS:
            continue
        parts = chunk_words(discussion, max_tokens=max_tokens, overlap=overlap)
        for position, part in enumerate(parts, start=1):
            label = f" ({position})" if len(parts) > 1 else ""
            chunks.append(
                ContentChunk(
                    f"{title} - Discussion{label}: {part}",
                    _with(base, kind=f"{base.kind}-discussion"),
                    len(chunks),
                )
            )

    for parameter in extract_parameters(document):
        description = parameter["description"]
        if len(description) > MIN_PARAMETER_CHARS:
            chunks.append(
                ContentChunk(
                    f"{title} - Parameter {parameter['name']}: {description}",
                    _with(base, kind=f"{base.kind}-parameter"),
                    len(chunks),
                )
            )

    return chunks


def text_chunks(
    document: Document, archive: str, *, max_tokens: int = 1000, overlap: int = 100
) -> List[ContentChunk]:
    """Normalized full-text chunks for the lexical engine."""
    base = _base_metadata(document, archive, "Untitled")
    parts = [document.title, extract_abstract(document)]
    for section in document.primary_content_sections:
        if section.get("kind") == "content":
            parts.append(extract_text(section.get("content")))
    parts.append(extract_declarations(document))
    parts.append(extract_topic_text(document))

    text = normalize_text(" ".join(part for part in parts if part))
    if not text:
        return []

    chunks: List[ContentChunk] = []
    for index, part in enumerate(chunk_words(text, max_tokens=max_tokens, overlap=overlap)):
        title = base.title if index == 0 else f"{base.title} (part {index + 1})"
        chunks.append(ContentChunk(part, _with(base, title=title), index))
    return chunks
