"""
lvb - bilingual (English/Latvian) Bible search core package

This package contains:
- config: Project configuration and versioning
- paths: Default content locations
- util: Console output helpers
- keys: Canonical book keys and the New-Testament set
- store: Read-only content store (per-book JSON documents)
- catalog: Canonical book order and document lookup
- textnorm / matching / scope / search: the verse search
- reader: Book and chapter reading data
- status: Content-store health report
- server / client: HTTP JSON endpoints and a client for them
- excel_import: Build documents from a bilingual spreadsheet
"""

from . import config
from .keys import canonical_key
from .matching import Mode, match_text
from .scope import Scope, ScopeConfig
from .search import SearchRequest, SearchResponse, search_verses, print_search_results
from .store import ContentStore, DocumentError, StoreError
from .util import info, warn, ok

__version__ = config.__version__
__all__ = [
    "config",
    "canonical_key",
    "Mode",
    "match_text",
    "Scope",
    "ScopeConfig",
    "SearchRequest",
    "SearchResponse",
    "search_verses",
    "print_search_results",
    "ContentStore",
    "DocumentError",
    "StoreError",
    "info",
    "warn",
    "ok",
]
