"""
Read-only access to the content store: a directory of per-book JSON
documents plus an optional book-list manifest.

Documents are re-read on every load unless a DocumentCache is attached;
the cache is keyed by identifier and invalidated by file mtime.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import Settings
from .model import Document
from .paths import DOCUMENT_SUFFIX


class StoreError(RuntimeError):
    """The content directory itself is missing or unreadable."""


class DocumentError(ValueError):
    """A book document exists but is not valid JSON / not the expected shape."""


def document_name(identifier: str) -> str:
    """'Jāņa evaņģēlijs.json' -> 'Jāņa evaņģēlijs'"""
    if identifier.lower().endswith(DOCUMENT_SUFFIX):
        return identifier[: -len(DOCUMENT_SUFFIX)]
    return identifier


class DocumentCache:
    """
    Read-through cache of parsed documents.

    Entries are (mtime_ns, Document); a changed mtime forces a re-read.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[int, Document]] = {}

    def get(self, path: Path, mtime_ns: int) -> Optional[Document]:
        with self._lock:
            entry = self._entries.get(str(path))
        if entry is None or entry[0] != mtime_ns:
            return None
        return entry[1]

    def put(self, path: Path, mtime_ns: int, doc: Document) -> None:
        with self._lock:
            self._entries[str(path)] = (mtime_ns, doc)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ContentStore:
    """
    Handle on a content directory.

    Parameters
    ----------
    bible_dir:
        Directory holding `<Book>.json` documents.
    book_list:
        Optional manifest listing book display names in Bible order.
    cache:
        Optional DocumentCache shared across requests.
    """

    def __init__(
        self,
        bible_dir: Path,
        book_list: Optional[Path] = None,
        cache: Optional[DocumentCache] = None,
    ) -> None:
        self.bible_dir = Path(bible_dir)
        self.book_list = Path(book_list) if book_list is not None else None
        self.cache = cache

    @classmethod
    def from_settings(cls, settings: Settings) -> "ContentStore":
        cache = DocumentCache() if settings.cache_documents else None
        return cls(settings.bible_dir, settings.book_list, cache=cache)

    def list_documents(self) -> List[str]:
        """
        Return document file names (e.g. 'Rutes.json') in sorted order.

        Raises StoreError if the content directory is missing.
        """
        try:
            entries = list(self.bible_dir.iterdir())
        except OSError as e:
            raise StoreError(f"Cannot list content directory {self.bible_dir}: {e}") from e
        return sorted(
            p.name
            for p in entries
            if p.name.lower().endswith(DOCUMENT_SUFFIX) and p.is_file()
        )

    def read_manifest(self) -> str:
        """
        Return the raw manifest text.

        Raises OSError (or UnicodeDecodeError) if it cannot be read.
        """
        if self.book_list is None:
            raise FileNotFoundError("No book list configured")
        return self.book_list.read_text(encoding="utf-8")

    def path_of(self, identifier: str) -> Path:
        return self.bible_dir / identifier

    def load(self, identifier: str) -> Document:
        """
        Load and parse one document.

        Raises FileNotFoundError if it has vanished and DocumentError if
        its content is malformed.
        """
        path = self.path_of(identifier)
        mtime_ns = path.stat().st_mtime_ns
        if self.cache is not None:
            cached = self.cache.get(path, mtime_ns)
            if cached is not None:
                return cached

        raw = path.read_bytes()
        try:
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, dict):
                raise TypeError(f"top-level value is {type(data).__name__}, expected object")
            doc = Document.from_json(data)
        except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError,
                ValueError, AttributeError) as e:
            raise DocumentError(f"Malformed document {identifier!r}: {e}") from e

        if self.cache is not None:
            self.cache.put(path, mtime_ns, doc)
        return doc
