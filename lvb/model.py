"""
Data model definitions for the bilingual Bible search.

We define:
- Verse       : one verse row as stored in a book document
- Document    : one book document (book label + chapters)
- SearchResult: one matching verse occurrence returned by a search
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

LANGUAGES = ("en", "lv")

_CHAPTER_NUMBER_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class Verse:
    """
    A verse row inside a chapter.

    verse: 1..N, unique within its chapter
    en/lv: verse text, possibly with inline markup
    """
    verse: int
    en: str
    lv: str

    def text(self, lang: str) -> str:
        """Return the text field for 'en' or 'lv'."""
        return self.lv if lang == "lv" else self.en

    @classmethod
    def from_json(cls, row: Dict[str, Any]) -> "Verse":
        """
        Construct from a `{verse, en, lv}` object.

        Raises KeyError/TypeError/ValueError on malformed rows; callers
        translate these into DocumentError.
        """
        return cls(
            verse=int(row["verse"]),
            en=str(row.get("en") or ""),
            lv=str(row.get("lv") or ""),
        )

    def to_json(self) -> Dict[str, Any]:
        return {"verse": self.verse, "en": self.en, "lv": self.lv}


def chapter_sort_key(chapter: str) -> Tuple[int, int, str]:
    """
    Sort key for chapter keys: plain decimal numbers ascending, anything
    else (including "nan", "1e1", "1_0") last, by string.
    """
    if _CHAPTER_NUMBER_RE.fullmatch(chapter):
        return (0, int(chapter), chapter)
    return (1, 0, chapter)


@dataclass
class Document:
    """
    One book document as stored on disk.

    chapters maps the chapter number (string key) to its verses in
    stored order.
    """
    book: str
    chapters: Dict[str, List[Verse]] = field(default_factory=dict)

    def chapter_keys(self) -> List[str]:
        """Chapter keys in ascending numeric order."""
        return sorted(self.chapters, key=chapter_sort_key)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Document":
        chapters: Dict[str, List[Verse]] = {}
        for chapter, rows in (data.get("chapters") or {}).items():
            chapters[str(chapter)] = [Verse.from_json(r) for r in rows]
        return cls(book=str(data.get("book") or ""), chapters=chapters)

    def to_json(self) -> Dict[str, Any]:
        return {
            "book": self.book,
            "chapters": {
                ch: [v.to_json() for v in self.chapters[ch]]
                for ch in self.chapter_keys()
            },
        }


@dataclass(frozen=True)
class SearchResult:
    """
    One matching verse. `book` is always the display name, never the key.
    """
    book: str
    chapter: str
    verse: int
    snippet: str
    where: str

    def to_json(self) -> Dict[str, Any]:
        return {
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "snippet": self.snippet,
            "where": self.where,
        }
