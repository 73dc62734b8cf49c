"""
Reading data for the book / chapter views.

Public API:

- list_books(store)                    -> List[BookEntry]
- get_book(store, book)                -> Optional[Tuple[str, Document]]
- read_chapter(store, book, chapter)   -> Optional[ChapterView]

Books are looked up by canonical key, like search, so a spelling without
diacritics reaches the same document.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .catalog import load_catalog
from .keys import testament_of
from .model import Document, Verse
from .store import ContentStore


@dataclass(frozen=True)
class BookEntry:
    name: str
    testament: str
    available: bool

    def to_json(self) -> Dict[str, Any]:
        return {"name": self.name, "testament": self.testament, "available": self.available}


@dataclass(frozen=True)
class ChapterView:
    """
    One chapter with its neighbours; prev/next are None at the ends.
    """
    book: str
    chapter: str
    verses: List[Verse]
    prev: Optional[str]
    next: Optional[str]

    def to_json(self) -> Dict[str, Any]:
        return {
            "book": self.book,
            "chapter": self.chapter,
            "verses": [v.to_json() for v in self.verses],
            "prev": self.prev,
            "next": self.next,
        }


def list_books(store: ContentStore) -> List[BookEntry]:
    """All books in canonical order, flagged with whether a document exists."""
    catalog = load_catalog(store)
    return [
        BookEntry(name=b, testament=testament_of(b), available=catalog.resolve(b) is not None)
        for b in catalog.order
    ]


def get_book(store: ContentStore, book: str) -> Optional[Tuple[str, Document]]:
    """
    Return (display name, document) or None if no document matches.

    The display name is the book-list spelling when the book is listed,
    else the document's own label.
    """
    catalog = load_catalog(store)
    identifier = catalog.resolve(book)
    if identifier is None:
        return None
    doc = store.load(identifier)
    return catalog.display_name(book) or doc.book or book, doc


def list_chapters(store: ContentStore, book: str) -> Optional[Tuple[str, List[str]]]:
    found = get_book(store, book)
    if found is None:
        return None
    name, doc = found
    return name, doc.chapter_keys()


def read_chapter(store: ContentStore, book: str, chapter: str) -> Optional[ChapterView]:
    """
    Verses of one chapter; an unknown chapter yields an empty verse list.
    """
    found = get_book(store, book)
    if found is None:
        return None
    name, doc = found

    chapter = chapter.strip()
    keys = doc.chapter_keys()
    verses = doc.chapters.get(chapter, [])
    prev = nxt = None
    if chapter in keys:
        idx = keys.index(chapter)
        prev = keys[idx - 1] if idx > 0 else None
        nxt = keys[idx + 1] if idx < len(keys) - 1 else None
    return ChapterView(book=name, chapter=chapter, verses=list(verses), prev=prev, next=nxt)
