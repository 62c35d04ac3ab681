"""JSON files backing the persisted search indices."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List

from doccsearch.models import IndexRecord

LOGGER = logging.getLogger(__name__)

TEXT_INDEX_FILENAME = "text-index.json"
EMBEDDINGS_FILENAME = "embeddings.json"
TEXT_INDEX_VERSION = "1.0.0"


class IndexStore:
    """One file per index under `index_dir`; saves replace the whole file."""

    def __init__(self, index_dir: Path | str) -> None:
        self.index_dir = Path(index_dir)

    @property
    def text_index_path(self) -> Path:
        return self.index_dir / TEXT_INDEX_FILENAME

    @property
    def embeddings_path(self) -> Path:
        return self.index_dir / EMBEDDINGS_FILENAME

    def save_text_index(self, records: List[IndexRecord]) -> bool:
        payload = {
            "documents": [record.to_dict() for record in records],
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": TEXT_INDEX_VERSION,
        }
        return self._write(self.text_index_path, payload)

    def load_text_index(self) -> List[IndexRecord]:
        payload = self._read(self.text_index_path)
        if not isinstance(payload, dict):
            return []
        return self._records(payload.get("documents"), self.text_index_path)

    def save_embeddings(self, records: List[IndexRecord]) -> bool:
        return self._write(self.embeddings_path, [record.to_dict() for record in records])

    def load_embeddings(self) -> List[IndexRecord]:
        return self._records(self._read(self.embeddings_path), self.embeddings_path)

    def _write(self, path: Path, payload: Any) -> bool:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle, ensure_ascii=False)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as exc:
            LOGGER.error("Failed to save index %s: %s", path, exc)
            return False
        LOGGER.info("Saved index to %s", path)
        return True

    @staticmethod
    def _read(path: Path) -> Any:
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except FileNotFoundError:
            LOGGER.info("No existing index at %s, starting fresh", path)
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable index %s: %s", path, exc)
        return None

    @staticmethod
    def _records(payload: Any, path: Path) -> List[IndexRecord]:
        if not isinstance(payload, list):
            return []
        records: List[IndexRecord] = []
        for item in payload:
            try:
                records.append(IndexRecord.from_dict(item))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                LOGGER.warning("Skipping malformed record in %s: %s", path, exc)
        LOGGER.info("Loaded %d records from %s", len(records), path)
        return records
