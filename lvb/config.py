"""
Project configuration and versioning.

Settings come from the environment (LVB_* variables) and can be
overridden by CLI flags; see load_settings().
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from .paths import BIBLE_DIR, BOOK_LIST_PATH
from .util import warn

APP_NAME = "Latvian/English Bible Search"
__version__ = "0.3.0"

# Hard cap on results per search request.
RESULT_CAP = 500

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8765

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    bible_dir: Path = BIBLE_DIR
    book_list: Path = BOOK_LIST_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cache_documents: bool = False
    quiet: bool = False

    def with_overrides(
        self,
        bible_dir: Optional[str] = None,
        book_list: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> "Settings":
        """Return a copy with any non-None CLI values applied."""
        changes = {}
        if bible_dir:
            changes["bible_dir"] = Path(bible_dir)
        if book_list:
            changes["book_list"] = Path(book_list)
        if host:
            changes["host"] = host
        if port is not None:
            changes["port"] = port
        return replace(self, **changes)


def _flag(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in _TRUTHY


def _port(value: Optional[str]) -> int:
    if not value:
        return DEFAULT_PORT
    try:
        port = int(value)
    except ValueError:
        warn(f"LVB_PORT={value!r} is not an integer; using {DEFAULT_PORT}.")
        return DEFAULT_PORT
    if not 0 <= port <= 65535:
        warn(f"LVB_PORT={port} is out of range; using {DEFAULT_PORT}.")
        return DEFAULT_PORT
    return port


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from environment variables.

    Recognised variables
    --------------------
    LVB_BIBLE_DIR, LVB_BOOK_LIST, LVB_HOST, LVB_PORT,
    LVB_CACHE_DOCUMENTS, LVB_QUIET
    """
    env = os.environ if environ is None else environ
    return Settings(
        bible_dir=Path(env["LVB_BIBLE_DIR"]) if env.get("LVB_BIBLE_DIR") else BIBLE_DIR,
        book_list=Path(env["LVB_BOOK_LIST"]) if env.get("LVB_BOOK_LIST") else BOOK_LIST_PATH,
        host=env.get("LVB_HOST") or DEFAULT_HOST,
        port=_port(env.get("LVB_PORT")),
        cache_documents=_flag(env.get("LVB_CACHE_DOCUMENTS")),
        quiet=_flag(env.get("LVB_QUIET")),
    )
