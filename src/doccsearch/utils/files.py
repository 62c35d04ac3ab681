"""Utility helpers for working with archive files."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Iterator


def iter_json_paths(root: Path) -> Iterator[Path]:
    """Yield JSON files under `root` in sorted order, descending into directories."""
    try:
        children = sorted(root.iterdir(), key=lambda child: child.name)
    except OSError:
        return
    for child in children:
        if child.is_dir():
            yield from iter_json_paths(child)
        elif child.is_file() and child.suffix == ".json":
            yield child


def count_json_files(root: Path) -> int:
    return sum(1 for _ in iter_json_paths(root))


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def relative_id(path: Path, data_dir: Path) -> str:
    """Document id for a JSON file: its path below `data/` without the suffix."""
    return path.relative_to(data_dir).with_suffix("").as_posix()


def content_hash(*parts: str) -> str:
    sha = hashlib.sha256()
    for part in parts:
        sha.update(part.encode("utf-8"))
        sha.update(b"\0")
    return sha.hexdigest()
