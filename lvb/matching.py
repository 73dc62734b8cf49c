"""
Verse matching.

Four modes, all pure functions of (verse text, query):

- all   : every query token is a substring of the normalized verse (default)
- allw  : every query token is a whole token of the verse
- any   : at least one query token is a substring of the normalized verse
- exact : the whitespace-collapsed query is a substring of the
          tag-stripped, whitespace-collapsed verse (no other folding)

There is no stemming or fuzzy matching. A blank query never matches.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from .textnorm import collapse_whitespace, normalize, strip_tags, tokenize


class Mode(str, Enum):
    ALL_PARTIAL = "all"
    ALL_WHOLE = "allw"
    ANY = "any"
    EXACT = "exact"


def match_all_whole_words(text: str, query: str) -> bool:
    need = tokenize(query)
    if not need:
        return False
    have = set(tokenize(text))
    return all(t in have for t in need)


def match_all_partial_words(text: str, query: str) -> bool:
    need = tokenize(query)
    if not need:
        return False
    plain = normalize(text)
    return all(t in plain for t in need)


def match_any_word(text: str, query: str) -> bool:
    need = tokenize(query)
    if not need:
        return False
    plain = normalize(text)
    return any(t in plain for t in need)


def match_exact_phrase(text: str, query: str) -> bool:
    needle = collapse_whitespace(query)
    if not needle:
        return False
    return needle in collapse_whitespace(strip_tags(text))


def match_text(text: str, query: str, mode: Mode) -> bool:
    if mode is Mode.ALL_WHOLE:
        return match_all_whole_words(text, query)
    if mode is Mode.ALL_PARTIAL:
        return match_all_partial_words(text, query)
    if mode is Mode.ANY:
        return match_any_word(text, query)
    return match_exact_phrase(text, query)


class Matcher:
    """
    A query prepared once for a whole search.

    Gives the same answers as match_text(text, query, mode) but only the
    verse side is normalized per call.
    """

    def __init__(self, query: str, mode: Mode) -> None:
        self.query = query
        self.mode = mode
        self.tokens: List[str] = tokenize(query)
        self.needle = collapse_whitespace(query)

    @property
    def empty(self) -> bool:
        if self.mode is Mode.EXACT:
            return not self.needle
        return not self.tokens

    def __call__(self, text: str) -> bool:
        if self.empty:
            return False
        if self.mode is Mode.EXACT:
            return self.needle in collapse_whitespace(strip_tags(text))
        if self.mode is Mode.ALL_WHOLE:
            have = set(tokenize(text))
            return all(t in have for t in self.tokens)
        plain = normalize(text)
        if self.mode is Mode.ANY:
            return any(t in plain for t in self.tokens)
        return all(t in plain for t in self.tokens)
