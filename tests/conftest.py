"""Shared fixtures: on-disk DocC archives and a deterministic embedder."""

from __future__ import annotations

import json
import re
import zlib
from pathlib import Path
from typing import Any, Callable, Dict, Iterable

import numpy as np
import pytest

from doccsearch.errors import EmbeddingUnavailableError


def symbol_doc(
    title: str,
    *,
    url: str | None = None,
    kind: str = "symbol",
    symbol_kind: str | None = "struct",
    role: str = "symbol",
    abstract: str | None = None,
    discussion: str | None = None,
    parameters: Dict[str, str] | None = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Build a minimal DocC symbol document."""
    metadata: Dict[str, Any] = {"title": title, "role": role}
    if symbol_kind:
        metadata["symbolKind"] = symbol_kind
    doc: Dict[str, Any] = {
        "identifier": {"url": url or f"doc://test/documentation/{title}", "interfaceLanguage": "swift"},
        "kind": kind,
        "metadata": metadata,
    }
    if abstract is not None:
        doc["abstract"] = [{"type": "text", "text": abstract}]
    sections = []
    if discussion is not None:
        sections.append(
            {
                "kind": "content",
                "content": [
                    {"type": "heading", "text": "Overview", "level": 2},
                    {"type": "paragraph", "inlineContent": [{"type": "text", "text": discussion}]},
                ],
            }
        )
    if parameters:
        sections.append(
            {
                "kind": "parameters",
                "parameters": [
                    {"name": name, "content": [{"type": "paragraph", "inlineContent": [{"type": "text", "text": text}]}]}
                    for name, text in parameters.items()
                ],
            }
        )
    if sections:
        doc["primaryContentSections"] = sections
    doc.update(extra)
    return doc


@pytest.fixture
def make_archive() -> Callable[..., Path]:
    """Create `<root>/<name>.doccarchive` with metadata and the given documents."""

    def _make(
        root: Path,
        name: str,
        documents: Dict[str, Any] | None = None,
        *,
        display_name: str | None = None,
        bundle_identifier: str | None = None,
    ) -> Path:
        archive = root / f"{name}.doccarchive"
        data = archive / "data"
        data.mkdir(parents=True, exist_ok=True)
        (archive / "metadata.json").write_text(
            json.dumps(
                {
                    "schemaVersion": {"major": 0, "minor": 1, "patch": 0},
                    "bundleIdentifier": bundle_identifier or f"com.example.{name}",
                    "bundleDisplayName": display_name or name,
                }
            )
        )
        for rel_path, payload in (documents or {}).items():
            path = data / f"{rel_path}.json"
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(payload, str):
                path.write_text(payload)
            else:
                path.write_text(json.dumps(payload))
        return archive

    return _make


class FakeEmbedder:
    """Hashed bag-of-words embedder with the `EmbeddingModel` interface."""

    def __init__(self, dimension: int = 64, loaded: bool = True) -> None:
        self.dimension = dimension
        self.is_loaded = loaded
        self.calls: list[list[str]] = []

    def load(self) -> None:
        self.is_loaded = True

    def embed(self, texts: Iterable[str]) -> np.ndarray:
        if not self.is_loaded:
            raise EmbeddingUnavailableError()
        sentences = list(texts)
        self.calls.append(sentences)
        vectors = np.zeros((len(sentences), self.dimension), dtype="float32")
        for row, text in enumerate(sentences):
            for word in re.findall(r"\w+", text.lower()):
                vectors[row, zlib.crc32(word.encode()) % self.dimension] += 1.0
            norm = np.linalg.norm(vectors[row])
            if norm:
                vectors[row] /= norm
        return vectors

    def embed_query(self, text: str) -> np.ndarray:
        return self.embed([text])[0]


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()
