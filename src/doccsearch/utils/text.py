"""Text helpers including word-window chunking."""

from __future__ import annotations

import math
import re
from typing import List

WORDS_PER_TOKEN = 0.75
TOKENS_PER_WORD = 1.33

_WHITESPACE_RE = re.compile(r"\s+")
_STRIP_RE = re.compile(r"[^\w\s.-]")


def split_words(text: str) -> List[str]:
    return [word for word in _WHITESPACE_RE.split(text) if word]


def normalize_text(text: str) -> str:
    """Normalize text for lexical indexing.

    The lexical engine applies this to chunk text at ingest time and to the
    query at search time; both sides must go through this exact function.
    """
    text = _STRIP_RE.sub(" ", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.lower().strip()


def estimate_tokens(text: str) -> int:
    """Rough token estimate for a chunk of text."""
    return math.ceil(len(split_words(text)) * TOKENS_PER_WORD)


def chunk_words(text: str, *, max_tokens: int = 500, overlap: int = 50) -> List[str]:
    """Split text into overlapping word windows.

    Window and overlap are given in tokens and converted to words with
    ``floor(tokens * 0.75)``. Text that fits in one window is returned whole;
    whitespace-only text comes back as a single chunk and only the empty
    string yields none.
    """
    if not text:
        return []
    words = split_words(text)
    if not words:
        return [text]

    window = max(math.floor(max_tokens * WORDS_PER_TOKEN), 1)
    overlap_words = max(math.floor(overlap * WORDS_PER_TOKEN), 0)
    if len(words) <= window:
        return [text.strip()]

    step = window - overlap_words
    chunks: List[str] = []
    start = 0
    while start < len(words):
        chunk = " ".join(words[start : start + window]).strip()
        if chunk:
            chunks.append(chunk)
        if step <= 0 or start + window >= len(words):
            break
        start += step
    return chunks
