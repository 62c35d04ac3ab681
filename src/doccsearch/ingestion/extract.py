"""Plain-text extraction from DocC documents.

Every consumer of document text (both search engines and the lookup
operations) goes through `extract_text`, so indexed and displayed text never
diverge.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping

from doccsearch.ingestion.nodes import (
    CodeListing,
    CodeVoice,
    Heading,
    Node,
    Paragraph,
    ParameterBlock,
    Text,
    Unknown,
    Wrapper,
    parse_content,
)
from doccsearch.models import Document

ARTICLE_SECTION_FIELDS = ("content", "contentSection", "stepsSection")


def extract_text(content: Any) -> str:
    """Flatten a content array into a single space-joined string."""
    fragments: List[str] = []
    for node in parse_content(content):
        _collect(node, fragments)
    return " ".join(fragments)


def _collect(node: Node, fragments: List[str]) -> None:
    if isinstance(node, Text):
        _append(fragments, node.text)
    elif isinstance(node, CodeVoice):
        _append(fragments, node.code)
    elif isinstance(node, Heading):
        _append(fragments, node.text)
    elif isinstance(node, CodeListing):
        for line in node.lines:
            _append(fragments, line)
    elif isinstance(node, ParameterBlock):
        for parameter in node.parameters:
            _append(fragments, parameter.name)
            for child in parameter.children:
                _collect(child, fragments)
    elif isinstance(node, (Paragraph, Wrapper, Unknown)):
        for child in node.children:
            _collect(child, fragments)
    else:  # pragma: no cover - closed union
        raise TypeError(f"Unhandled content node: {node!r}")


def _append(fragments: List[str], value: str) -> None:
    value = value.strip()
    if value:
        fragments.append(value)


def extract_abstract(document: Document) -> str:
    return extract_text(document.abstract)


def iter_discussion_texts(document: Document) -> Iterator[str]:
    """Yield the text of each `content` section in primary content order."""
    for section in document.primary_content_sections:
        if section.get("kind") == "content" and section.get("content"):
            text = extract_text(section.get("content"))
            if text:
                yield text


def extract_discussion(document: Document) -> str:
    return "\n".join(iter_discussion_texts(document)).strip()


def extract_parameters(document: Document) -> List[Dict[str, str]]:
    parameters: List[Dict[str, str]] = []
    for section in document.primary_content_sections:
        if section.get("kind") != "parameters":
            continue
        for param in section.get("parameters") or []:
            if not isinstance(param, Mapping):
                continue
            parameters.append(
                {
                    "name": str(param.get("name") or ""),
                    "description": extract_text(param.get("content")),
                }
            )
    return parameters


def extract_return_value(document: Document) -> str:
    """Text of the block following the first heading that mentions "return"."""
    for section in document.primary_content_sections:
        if section.get("kind") != "content":
            continue
        items = section.get("content")
        if not isinstance(items, list):
            continue
        for index, item in enumerate(items[:-1]):
            if not isinstance(item, Mapping) or item.get("type") != "heading":
                continue
            if "return" in str(item.get("text") or "").lower():
                return extract_text([items[index + 1]])
    return ""


def extract_declarations(document: Document) -> str:
    declarations: List[str] = []
    for section in document.primary_content_sections:
        if section.get("kind") != "declarations":
            continue
        for declaration in section.get("declarations") or []:
            tokens = declaration.get("tokens") if isinstance(declaration, Mapping) else None
            if isinstance(tokens, list):
                declarations.append(
                    "".join(str(token.get("text", "")) for token in tokens if isinstance(token, Mapping))
                )
    return " ".join(item for item in declarations if item)


def extract_availability(document: Document) -> Dict[str, Any]:
    return {
        "platforms": [
            {
                "name": platform.get("name"),
                "introducedAt": platform.get("introducedAt"),
                "deprecated": bool(platform.get("deprecated", False)),
                "deprecatedAt": platform.get("deprecatedAt"),
            }
            for platform in document.platforms
        ]
    }


def extract_topic_text(document: Document) -> str:
    parts: List[str] = []
    for section in document.topic_sections:
        if section.get("title"):
            parts.append(str(section["title"]))
        abstract = extract_text(section.get("abstract"))
        if abstract:
            parts.append(abstract)
    return " ".join(parts)


def extract_article_sections(document: Document) -> List[Dict[str, str]]:
    """Ordered `{title, text}` pairs for an article or tutorial."""
    sections: List[Dict[str, str]] = []
    for section in document.sections:
        sections.extend(_article_section(section))
    for text in iter_discussion_texts(document):
        sections.append({"title": "", "text": text})
    return sections


def _article_section(section: Mapping[str, Any]) -> List[Dict[str, str]]:
    parts = [extract_text(section.get(field)) for field in ARTICLE_SECTION_FIELDS]
    entries = [{"title": str(section.get("title") or ""), "text": " ".join(part for part in parts if part)}]
    # Tutorial "tasks" sections nest one section per task.
    for task in section.get("tasks") or []:
        if isinstance(task, Mapping):
            entries.extend(_article_section(task))
    return [entry for entry in entries if entry["title"] or entry["text"]]


def build_extracted_content(document: Document) -> Dict[str, Any]:
    return {
        "abstract": extract_abstract(document),
        "discussion": extract_discussion(document),
        "parameters": extract_parameters(document),
        "returnValue": extract_return_value(document),
        "availability": extract_availability(document),
    }
