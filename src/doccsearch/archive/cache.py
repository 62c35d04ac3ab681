"""In-process caches for archive metadata and loaded documents."""

from __future__ import annotations

from collections import OrderedDict
from typing import Generic, Hashable, Optional, Tuple, TypeVar

from doccsearch.models import ArchiveRecord, Document

V = TypeVar("V")


class LRUCache(Generic[V]):
    """Least-recently-used map. `maxsize=None` never evicts."""

    def __init__(self, maxsize: Optional[int] = 1024) -> None:
        if maxsize is not None and maxsize < 1:
            raise ValueError("maxsize must be positive or None")
        self.maxsize = maxsize
        self._store: "OrderedDict[Hashable, V]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[V]:
        try:
            value = self._store.pop(key)
        except KeyError:
            return None
        self._store[key] = value
        return value

    def set(self, key: Hashable, value: V) -> None:
        self._store[key] = value
        self._store.move_to_end(key)
        if self.maxsize is not None:
            while len(self._store) > self.maxsize:
                self._store.popitem(last=False)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        self._store.clear()


class ArchiveCache:
    """Archive records by name and documents by (archive, id).

    Article entries use a separate key shape so a symbol and an article with
    the same id never collide.
    """

    def __init__(self, maxsize: Optional[int] = 1024) -> None:
        self.archives: LRUCache[ArchiveRecord] = LRUCache(maxsize)
        self.documents: LRUCache[Document] = LRUCache(maxsize)

    @staticmethod
    def symbol_key(archive: str, symbol_id: str) -> Tuple[str, str]:
        return (archive, symbol_id)

    @staticmethod
    def article_key(archive: str, article_id: str) -> Tuple[str, str, str]:
        return ("article", archive, article_id)

    def clear(self) -> None:
        self.archives.clear()
        self.documents.clear()
