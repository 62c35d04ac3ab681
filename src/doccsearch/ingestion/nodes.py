"""Typed representation of DocC content trees.

DocC documents nest content as JSON objects tagged with a ``type`` field.
`parse_content` turns raw JSON into a closed set of node classes; anything
unrecognised becomes `Unknown`, which keeps its children so that text inside
new container kinds is still reachable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple, Union

CHILD_FIELDS = ("inlineContent", "content", "items")


@dataclass(frozen=True, slots=True)
class Text:
    text: str


@dataclass(frozen=True, slots=True)
class CodeVoice:
    code: str


@dataclass(frozen=True, slots=True)
class Paragraph:
    children: Tuple["Node", ...]


@dataclass(frozen=True, slots=True)
class Heading:
    text: str


@dataclass(frozen=True, slots=True)
class CodeListing:
    lines: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str
    children: Tuple["Node", ...]


@dataclass(frozen=True, slots=True)
class ParameterBlock:
    parameters: Tuple[Parameter, ...]


@dataclass(frozen=True, slots=True)
class Wrapper:
    """Known container without text of its own (asides, list items, ...)."""

    kind: str
    children: Tuple["Node", ...]


@dataclass(frozen=True, slots=True)
class Unknown:
    kind: str
    children: Tuple["Node", ...] = ()


Node = Union[Text, CodeVoice, Paragraph, Heading, CodeListing, ParameterBlock, Wrapper, Unknown]

WRAPPER_KINDS = frozenset(
    {
        "aside",
        "emphasis",
        "strong",
        "strikethrough",
        "newTerm",
        "orderedList",
        "unorderedList",
        "termList",
        "listItem",
        "link",
    }
)


def parse_content(raw: Any) -> List[Node]:
    """Parse a content array; anything that is not a sequence yields no nodes."""
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        return []
    nodes: List[Node] = []
    for item in raw:
        node = parse_node(item)
        if node is not None:
            nodes.append(node)
    return nodes


def parse_node(raw: Any) -> Node | None:
    if isinstance(raw, str):
        return Text(raw)
    if not isinstance(raw, Mapping):
        return None

    kind = raw.get("type")
    if kind == "text":
        return Text(_as_str(raw.get("text")))
    if kind == "codeVoice":
        return CodeVoice(_as_str(raw.get("code")))
    if kind == "paragraph":
        return Paragraph(tuple(parse_content(raw.get("inlineContent"))))
    if kind == "heading":
        return Heading(_as_str(raw.get("text")))
    if kind == "codeListing":
        return CodeListing(_code_lines(raw.get("code")))
    if kind == "parameters" or raw.get("kind") == "parameters":
        return ParameterBlock(_parse_parameters(raw.get("parameters")))

    children = tuple(_children(raw))
    if kind in WRAPPER_KINDS:
        return Wrapper(kind, children)
    return Unknown(str(kind) if kind is not None else "", children)


def _children(raw: Mapping[str, Any]) -> List[Node]:
    # Items of a list are plain objects holding a `content` array.
    for field in CHILD_FIELDS:
        value = raw.get(field)
        if isinstance(value, list):
            if field == "items":
                return [Wrapper("listItem", tuple(_children(item))) for item in value if isinstance(item, Mapping)]
            return parse_content(value)
    return []


def _parse_parameters(raw: Any) -> Tuple[Parameter, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(
        Parameter(name=_as_str(item.get("name")), children=tuple(parse_content(item.get("content"))))
        for item in raw
        if isinstance(item, Mapping)
    )


def _code_lines(code: Any) -> Tuple[str, ...]:
    if isinstance(code, str):
        return (code,)
    if isinstance(code, list):
        return tuple(line for line in code if isinstance(line, str))
    return ()


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""
