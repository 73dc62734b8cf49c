"""
Canonical book keys.

canonical_key() folds any spelling of a book name (with or without
Latvian diacritics, odd whitespace, any case) into one comparison key.
Every lookup and ordering decision goes through it; display strings are
never replaced by their key.
"""

from __future__ import annotations

import re
import unicodedata
from typing import FrozenSet, Tuple

_WS_RE = re.compile(r"\s+")

# Display names as they appear in the book list (with diacritics).
NT_BOOKS: Tuple[str, ...] = (
    "Mateja evaņģēlijs",
    "Marka Evaņģēlijs",
    "Lūkas evaņģēlijs",
    "Jāņa evaņģēlijs",
    "Apustuļu darbi",
    "Romiešiem",
    "1. Korintiešiem",
    "2. Korintiešiem",
    "Galatiešiem",
    "Efeziešiem",
    "Filipiešiem",
    "Kolosiešiem",
    "1. Tesalonikiešiem",
    "2. Tesalonikiešiem",
    "1. Timotejam",
    "2. Timotejam",
    "Titam",
    "Filemonam",
    "Ebrejiem",
    "Jēkaba",
    "1. Pētera",
    "2. Pētera",
    "1. Jāņa",
    "2. Jāņa",
    "3. Jāņa",
    "Jūdas",
    "Atklāsmes",
)


def canonical_key(name: str) -> str:
    """
    Return the internal comparison key for a book name.

    NFC, NBSP -> space, lowercase, strip combining marks (ē -> e, š -> s,
    ķ -> k, ...), recompose, then collapse whitespace and trim.
    """
    s = unicodedata.normalize("NFC", name)
    s = s.replace("\u00a0", " ")
    s = unicodedata.normalize("NFD", s.lower())
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = unicodedata.normalize("NFC", s)
    return _WS_RE.sub(" ", s).strip()


# Built once at import; never mutated.
NT_KEYS: FrozenSet[str] = frozenset(canonical_key(b) for b in NT_BOOKS)


def is_new_testament(name: str) -> bool:
    return canonical_key(name) in NT_KEYS


def testament_of(name: str) -> str:
    """'nt' or 'ot' for a book name."""
    return "nt" if is_new_testament(name) else "ot"
