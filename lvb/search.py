"""
Verse search over the content store.

This module provides:

- SearchRequest.from_params(params)
    Parse raw query parameters (q, scope, mode, lang, book, from, to)

- search_verses(request, store, limit=RESULT_CAP)
    Walk the catalog in canonical order and collect matching verses

- print_search_results(response)
    Pretty-print results to the console
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

from .catalog import Catalog, load_catalog
from .config import RESULT_CAP
from .keys import canonical_key
from .matching import Matcher, Mode
from .model import LANGUAGES, SearchResult, chapter_sort_key
from .scope import Scope, ScopeConfig, included
from .store import ContentStore
from .textnorm import strip_tags
from .util import info, warn

E = TypeVar("E", bound=Enum)


def _param(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if value is None:
        return ""
    # parse_qs-style mappings hold lists
    if isinstance(value, (list, tuple)):
        value = value[0] if value else ""
    return str(value).strip()


def _choice(enum_cls: Type[E], raw: str, default: E, name: str) -> E:
    if not raw:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        warn(f"Unrecognised {name}={raw!r}; using {default.value!r}.")
        return default


@dataclass(frozen=True)
class SearchRequest:
    """
    A parsed search request.

    Unknown scope/mode/lang values fall back to the defaults
    (all / all / en) instead of being rejected.
    """
    q: str
    scope: ScopeConfig = field(default_factory=ScopeConfig)
    mode: Mode = Mode.ALL_PARTIAL
    lang: str = "en"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "SearchRequest":
        lang = _param(params, "lang")
        if lang and lang not in LANGUAGES:
            warn(f"Unrecognised lang={lang!r}; using 'en'.")
            lang = ""
        return cls(
            q=_param(params, "q"),
            scope=ScopeConfig(
                scope=_choice(Scope, _param(params, "scope"), Scope.ALL, "scope"),
                book=_param(params, "book"),
                from_book=_param(params, "from"),
                to_book=_param(params, "to"),
            ),
            mode=_choice(Mode, _param(params, "mode"), Mode.ALL_PARTIAL, "mode"),
            lang=lang or "en",
        )


@dataclass
class SearchResponse:
    """
    Results in canonical order. `truncated` is None for a blank query.
    """
    results: List[SearchResult] = field(default_factory=list)
    truncated: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"results": [r.to_json() for r in self.results]}
        if self.truncated is not None:
            out["truncated"] = self.truncated
        return out


def sort_results(results: List[SearchResult], catalog: Catalog) -> None:
    """Sort in place by (canonical book order, numeric chapter, verse)."""
    results.sort(
        key=lambda r: (catalog.sort_index(r.book), chapter_sort_key(r.chapter), r.verse)
    )


def search_verses(
    request: SearchRequest,
    store: ContentStore,
    limit: int = RESULT_CAP,
) -> SearchResponse:
    """
    Run one search.

    Parameters
    ----------
    request:
        Parsed request (see SearchRequest.from_params).
    store:
        Content store to read documents from.
    limit:
        Result cap. Hitting it with further matches pending sets
        `truncated` and stops the scan.

    Returns
    -------
    SearchResponse

    Raises
    ------
    StoreError if the content directory is missing, DocumentError if a
    visited document is malformed.
    """
    if not request.q.strip():
        return SearchResponse()

    info(
        f"=== SEARCH === q={request.q!r}, scope={request.scope.scope.value}, "
        f"mode={request.mode.value}, lang={request.lang}"
    )

    catalog = load_catalog(store)
    matcher = Matcher(request.q, request.mode)
    lang = request.lang

    results: List[SearchResult] = []
    truncated = False

    visited = set()
    for book in catalog.order:
        if truncated:
            break
        key = canonical_key(book)
        if key in visited:
            continue
        visited.add(key)
        if not included(book, request.scope, catalog):
            continue

        identifier = catalog.resolve(book)
        if identifier is None:
            continue
        try:
            doc = store.load(identifier)
        except FileNotFoundError:
            warn(f"Document for {book!r} vanished; skipping.")
            continue

        for chapter in doc.chapter_keys():
            if truncated:
                break
            for v in doc.chapters[chapter]:
                text = v.text(lang)
                if not matcher(text):
                    continue
                if len(results) >= limit:
                    truncated = True
                    break
                results.append(
                    SearchResult(
                        book=book,
                        chapter=chapter,
                        verse=v.verse,
                        snippet=strip_tags(text),
                        where=lang,
                    )
                )

    sort_results(results, catalog)
    info(f"Search returned {len(results)} result(s){' (truncated)' if truncated else ''}.")
    return SearchResponse(results=results, truncated=truncated)


def print_search_results(response: SearchResponse) -> None:
    """
    Pretty-print search results to the console.
    """
    if not response.results:
        info("No results.")
        return

    for r in response.results:
        print(f"[{r.where}] {r.book} {r.chapter}:{r.verse}")
        print(f"    {r.snippet}")
        print()

    if response.truncated:
        warn(f"Results truncated at {len(response.results)}; narrow the scope or query.")
