"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from doccsearch.embedding.encoder import DEFAULT_MODEL


def _get_default_index_dir() -> Path:
    """Prefer a local data/index directory when running from a checkout."""
    local_dir = Path("data/index")
    if local_dir.exists():
        return local_dir
    return Path.home() / ".doccsearch" / "index"


@dataclass(slots=True)
class AppConfig:
    archive_paths: List[Path] = field(default_factory=list)
    index_dir: Path | None = None
    model_name: str = DEFAULT_MODEL
    semantic_max_tokens: int = 500
    semantic_overlap: int = 50
    text_max_tokens: int = 1000
    text_overlap: int = 100
    cache_size: Optional[int] = 1024
    workers: int = 4

    def __post_init__(self) -> None:
        self.archive_paths = [Path(path) for path in self.archive_paths]
        if self.index_dir is None:
            self.index_dir = _get_default_index_dir()

    def resolve_index_dir(self, base_dir: Path | None = None) -> Path:
        if self.index_dir is None:
            self.index_dir = _get_default_index_dir()
        if Path(self.index_dir).is_absolute() or base_dir is None:
            return Path(self.index_dir)
        return base_dir / self.index_dir
