"""Tests for content tree parsing and text extraction."""

from __future__ import annotations

from doccsearch.ingestion.extract import (
    build_extracted_content,
    extract_article_sections,
    extract_declarations,
    extract_discussion,
    extract_parameters,
    extract_return_value,
    extract_text,
    extract_topic_text,
)
from doccsearch.ingestion.nodes import (
    CodeListing,
    Paragraph,
    ParameterBlock,
    Text,
    Unknown,
    Wrapper,
    parse_content,
)
from doccsearch.models import Document

from conftest import symbol_doc


class TestParseContent:
    """Test parse_content function."""

    def test_non_sequence_yields_nothing(self) -> None:
        assert parse_content(None) == []
        assert parse_content({"type": "text", "text": "x"}) == []
        assert parse_content("plain string") == []

    def test_known_nodes(self) -> None:
        nodes = parse_content(
            [
                {"type": "paragraph", "inlineContent": [{"type": "text", "text": "Hi"}]},
                {"type": "codeListing", "code": ["let a = 1", "let b = 2"]},
                {"type": "aside", "content": []},
            ]
        )

        assert nodes[0] == Paragraph((Text("Hi"),))
        assert nodes[1] == CodeListing(("let a = 1", "let b = 2"))
        assert nodes[2] == Wrapper("aside", ())

    def test_unknown_kind_keeps_children(self) -> None:
        (node,) = parse_content([{"type": "futureThing", "content": [{"type": "text", "text": "deep"}]}])

        assert isinstance(node, Unknown)
        assert node.kind == "futureThing"
        assert node.children == (Text("deep"),)

    def test_parameters_block(self) -> None:
        (node,) = parse_content(
            [{"kind": "parameters", "parameters": [{"name": "value", "content": ["text"]}]}]
        )

        assert isinstance(node, ParameterBlock)
        assert node.parameters[0].name == "value"


class TestExtractText:
    """Test extract_text function."""

    def test_non_array_returns_empty(self) -> None:
        assert extract_text(None) == ""
        assert extract_text({"type": "text", "text": "x"}) == ""
        assert extract_text(42) == ""

    def test_joins_fragments_with_single_space(self) -> None:
        content = [
            {
                "type": "paragraph",
                "inlineContent": [
                    {"type": "text", "text": "  Use "},
                    {"type": "codeVoice", "code": "State"},
                    {"type": "text", "text": " for values.  "},
                ],
            },
            {"type": "heading", "text": "Topics"},
        ]

        assert extract_text(content) == "Use State for values. Topics"

    def test_recurses_into_unknown_and_lists(self) -> None:
        content = [
            {"type": "mystery", "inlineContent": [{"type": "text", "text": "hidden"}]},
            {
                "type": "unorderedList",
                "items": [
                    {"content": [{"type": "paragraph", "inlineContent": [{"type": "text", "text": "one"}]}]},
                    {"content": [{"type": "paragraph", "inlineContent": [{"type": "text", "text": "two"}]}]},
                ],
            },
            {"type": "codeListing", "code": ["print(1)"]},
        ]

        assert extract_text(content) == "hidden one two print(1)"

    def test_skips_blank_fragments(self) -> None:
        assert extract_text([{"type": "text", "text": "   "}, {"type": "text", "text": "a"}]) == "a"


class TestDocumentHelpers:
    """Test document-level extraction helpers."""

    def test_discussion_and_parameters(self) -> None:
        document = Document(
            symbol_doc(
                "Binding",
                discussion="A binding connects a property to a source of truth.",
                parameters={"value": "The initial value of the binding."},
            )
        )

        assert extract_discussion(document) == "Overview A binding connects a property to a source of truth."
        assert extract_parameters(document) == [
            {"name": "value", "description": "The initial value of the binding."}
        ]

    def test_return_value_follows_heading(self) -> None:
        document = Document(
            {
                "primaryContentSections": [
                    {
                        "kind": "content",
                        "content": [
                            {"type": "heading", "text": "Return Value"},
                            {"type": "paragraph", "inlineContent": [{"type": "text", "text": "A new view."}]},
                        ],
                    }
                ]
            }
        )

        assert extract_return_value(document) == "A new view."

    def test_return_value_missing(self) -> None:
        assert extract_return_value(Document({})) == ""

    def test_declarations(self) -> None:
        document = Document(
            {
                "primaryContentSections": [
                    {
                        "kind": "declarations",
                        "declarations": [{"tokens": [{"text": "struct"}, {"text": " "}, {"text": "State"}]}],
                    }
                ]
            }
        )

        assert extract_declarations(document) == "struct State"

    def test_topic_text(self) -> None:
        document = Document(
            {"topicSections": [{"title": "Creating", "abstract": [{"type": "text", "text": "Make one."}]}]}
        )

        assert extract_topic_text(document) == "Creating Make one."

    def test_article_sections_include_tasks(self) -> None:
        document = Document(
            {
                "sections": [
                    {
                        "title": "Intro",
                        "content": [{"type": "text", "text": "Welcome."}],
                        "tasks": [{"title": "Step one", "contentSection": [{"type": "text", "text": "Do it."}]}],
                    }
                ]
            }
        )

        assert extract_article_sections(document) == [
            {"title": "Intro", "text": "Welcome."},
            {"title": "Step one", "text": "Do it."},
        ]

    def test_extracted_content_shape(self) -> None:
        document = Document(symbol_doc("State", abstract="A property wrapper."))
        document.raw["metadata"]["platforms"] = [{"name": "iOS", "introducedAt": "13.0"}]

        content = build_extracted_content(document)

        assert content["abstract"] == "A property wrapper."
        assert content["availability"]["platforms"] == [
            {"name": "iOS", "introducedAt": "13.0", "deprecated": False, "deprecatedAt": None}
        ]
        assert set(content) == {"abstract", "discussion", "parameters", "returnValue", "availability"}
