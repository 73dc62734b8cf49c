"""
Book catalog: canonical Bible order and the key -> document map.

Order comes from the book-list manifest when it can be read; otherwise
every document in the store is listed and sorted with Latvian collation
(degraded mode: alphabetical, not biblical, order).

Documents are located purely by canonical key, so a manifest entry with
diacritics resolves to a filename without them and vice versa.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .keys import canonical_key
from .paths import DOCUMENT_SUFFIX
from .store import ContentStore, document_name
from .util import warn

# Sort position for books absent from the canonical order.
ABSENT_INDEX = 10**9

_SUFFIX_RE = re.compile(re.escape(DOCUMENT_SUFFIX) + r"$", re.IGNORECASE)

LATVIAN_ALPHABET = "aābcčdeēfgģhiījkķlļmnņoprsštuūvzž"
_LV_RANK: Dict[str, int] = {ch: i for i, ch in enumerate(LATVIAN_ALPHABET)}
# Letters outside the Latvian alphabet (q, w, x, y, ...) go after ž.
_FOREIGN_BASE = len(LATVIAN_ALPHABET)


def latvian_sort_key(name: str) -> Tuple[Tuple[Tuple[int, int], ...], str]:
    """
    Collation key following the Latvian alphabet, case-insensitive.

    Whitespace and punctuation sort first, then digits, then letters in
    Latvian order (č after c, ņ after n, ...). The raw string breaks ties.
    """
    parts = []
    for ch in name.lower():
        if ch in _LV_RANK:
            parts.append((2, _LV_RANK[ch]))
        elif ch.isdigit():
            parts.append((1, ord(ch)))
        elif ch.isalpha():
            parts.append((2, _FOREIGN_BASE + ord(ch)))
        else:
            parts.append((0, ord(ch)))
    return tuple(parts), name


def parse_manifest(text: str) -> List[str]:
    """
    One display name per line; blank lines dropped, optional '.json'
    suffix stripped.
    """
    names: List[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        line = _SUFFIX_RE.sub("", line)
        if line:
            names.append(line)
    return names


def read_book_order(store: ContentStore) -> List[str]:
    """
    Return book display names in canonical order.
    """
    try:
        names = parse_manifest(store.read_manifest())
    except (OSError, UnicodeDecodeError) as e:
        warn(f"Book list unavailable ({e}); falling back to directory order.")
        names = []
    else:
        if not names:
            warn(f"Book list {store.book_list} is empty; falling back to directory order.")

    if names:
        return names

    return sorted(
        (document_name(f) for f in store.list_documents()),
        key=latvian_sort_key,
    )


def build_file_map(store: ContentStore) -> Dict[str, str]:
    """
    Map canonical key -> document file name for every document in the store.

    Colliding keys are a data error; the last file in sorted order wins.
    """
    file_map: Dict[str, str] = {}
    for f in store.list_documents():
        file_map[canonical_key(document_name(f))] = f
    return file_map


@dataclass(frozen=True)
class Catalog:
    """
    Canonical order plus document lookup for one request.

    order      : display names in Bible order
    file_map   : canonical key -> document file name
    order_index: canonical key -> position in `order` (first occurrence)
    """
    order: Tuple[str, ...]
    file_map: Dict[str, str] = field(default_factory=dict)
    order_index: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def build(cls, order: List[str], file_map: Dict[str, str]) -> "Catalog":
        index: Dict[str, int] = {}
        for i, name in enumerate(order):
            index.setdefault(canonical_key(name), i)
        return cls(order=tuple(order), file_map=dict(file_map), order_index=index)

    def index_of(self, name: str) -> Optional[int]:
        """Order index of a book name (any spelling), or None if unknown."""
        return self.order_index.get(canonical_key(name))

    def sort_index(self, name: str) -> int:
        """Order index for sorting; unknown books sort last."""
        idx = self.index_of(name)
        return ABSENT_INDEX if idx is None else idx

    def resolve(self, name: str) -> Optional[str]:
        """Document file name for a book name (any spelling), or None."""
        return self.file_map.get(canonical_key(name))

    def display_name(self, name: str) -> Optional[str]:
        """Canonical display spelling of a book name, if it is in the order."""
        idx = self.index_of(name)
        return None if idx is None else self.order[idx]


def load_catalog(store: ContentStore) -> Catalog:
    return Catalog.build(read_book_order(store), build_file_map(store))


def find_key_collisions(store: ContentStore) -> Dict[str, List[str]]:
    """
    Return {canonical key: [file names]} for keys shared by several documents.
    """
    seen: Dict[str, List[str]] = {}
    for f in store.list_documents():
        seen.setdefault(canonical_key(document_name(f)), []).append(f)
    return {k: v for k, v in seen.items() if len(v) > 1}
