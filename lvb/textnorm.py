"""
Text normalization shared by verse text and queries.

normalize()/tokenize() fold case, apostrophes and punctuation so both
sides of a word-based match live in the same space. Exact-phrase search
uses collapse_whitespace() instead, which folds case and spacing only.
"""

from __future__ import annotations

import re
from typing import List

_TAG_RE = re.compile(r"<[^>]*>")
_APOSTROPHE_RE = re.compile("[\u2019']")
# Runs of anything that is not a letter, a number or an apostrophe.
# \w also matches '_', which is punctuation here.
_NON_WORD_RE = re.compile(r"(?:[^\w']|_)+")
_WS_RE = re.compile(r"\s+")


def strip_tags(text: str) -> str:
    """Remove inline markup such as <i>...</i> (non-recursive)."""
    return _TAG_RE.sub("", text)


def normalize(text: str) -> str:
    text = strip_tags(text).lower()
    text = _APOSTROPHE_RE.sub("'", text)
    return _NON_WORD_RE.sub(" ", text).strip()


def tokenize(text: str) -> List[str]:
    return normalize(text).split()


def collapse_whitespace(text: str) -> str:
    """Lowercase and collapse runs of whitespace; nothing else is folded."""
    return _WS_RE.sub(" ", text.lower()).strip()
