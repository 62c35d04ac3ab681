"""Tests for data models."""

from __future__ import annotations

from pathlib import Path

from doccsearch.models import ArchiveMetadata, ArchiveRecord, ChunkMetadata, Document, IndexRecord


class TestDocument:
    def test_accessors(self) -> None:
        document = Document(
            {
                "identifier": {"url": "doc://x/documentation/State"},
                "kind": "symbol",
                "metadata": {"title": "State", "role": "symbol", "symbolKind": "struct"},
            }
        )

        assert document.identifier == "doc://x/documentation/State"
        assert document.title == "State"
        assert document.kind == "struct"

    def test_defaults_for_missing_fields(self) -> None:
        document = Document({"metadata": "garbage", "primaryContentSections": {"not": "a list"}})

        assert document.title == ""
        assert document.kind == "unknown"
        assert document.primary_content_sections == []

    def test_kind_falls_back_to_document_kind(self) -> None:
        assert Document({"kind": "article"}).kind == "article"


class TestArchiveModels:
    def test_metadata_from_json(self) -> None:
        meta = ArchiveMetadata.from_json(
            {"bundleIdentifier": "com.x", "bundleDisplayName": "X", "schemaVersion": {"major": 0, "minor": 3}}
        )

        assert meta.bundle_display_name == "X"
        assert meta.schema_version == (0, 3, 0)

    def test_record_to_dict(self) -> None:
        record = ArchiveRecord("SwiftUI", "Swift UI", "com.apple", Path("/a/SwiftUI.doccarchive"), 7)

        assert record.to_dict() == {
            "name": "SwiftUI",
            "displayName": "Swift UI",
            "bundleIdentifier": "com.apple",
            "path": "/a/SwiftUI.doccarchive",
            "symbolCount": 7,
        }


class TestIndexRecord:
    def test_round_trip(self) -> None:
        record = IndexRecord(
            id="abc",
            content="text",
            metadata=ChunkMetadata("A", "T", "struct", "doc://u", "doc://u"),
            tokens=4,
            embedding=[0.5, 0.25],
        )

        payload = record.to_dict()

        assert payload["metadata"]["tokens"] == 4
        assert payload["metadata"]["symbolId"] == "doc://u"
        assert IndexRecord.from_dict(payload) == record

    def test_without_embedding(self) -> None:
        record = IndexRecord("abc", "t", ChunkMetadata("A", "T", "k", "u"), 1)

        assert "embedding" not in record.to_dict()
        assert "symbolId" not in record.to_dict()["metadata"]
