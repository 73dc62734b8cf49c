"""
Scope filtering: decides which books a search visits.

included() runs before a book's document is loaded, so excluded books
cost no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .catalog import Catalog
from .keys import NT_KEYS, canonical_key


class Scope(str, Enum):
    ALL = "all"
    OT = "ot"
    NT = "nt"
    BOOK = "book"
    RANGE = "range"


@dataclass(frozen=True)
class ScopeConfig:
    scope: Scope = Scope.ALL
    book: str = ""
    from_book: str = ""
    to_book: str = ""


def included(book: str, config: ScopeConfig, catalog: Catalog) -> bool:
    """
    True if `book` (a display name) takes part in a search under `config`.

    A range whose ends cannot both be resolved matches nothing; the
    direction of from/to does not matter.
    """
    scope = config.scope
    if scope is Scope.ALL:
        return True

    key = canonical_key(book)
    if scope is Scope.NT:
        return key in NT_KEYS
    if scope is Scope.OT:
        return key not in NT_KEYS
    if scope is Scope.BOOK:
        return key == canonical_key(config.book)

    a = catalog.index_of(config.from_book)
    b = catalog.index_of(config.to_book)
    if a is None or b is None:
        return False
    i = catalog.index_of(book)
    if i is None:
        return False
    return min(a, b) <= i <= max(a, b)
