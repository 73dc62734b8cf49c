"""
Client for a running search server.

    search_remote(base_url, q, scope="all", mode="all", lang="en", ...)

returns the decoded JSON body. Connection failures, non-2xx and non-JSON
replies raise RemoteSearchError (with the first part of the body where there
is one).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import requests

USER_AGENT = "lvb-client"


class RemoteSearchError(RuntimeError):
    pass


def _get(url: str, params: Optional[Dict[str, Any]] = None, timeout: float = 30) -> Any:
    try:
        r = requests.get(url, params=params, headers={"User-Agent": USER_AGENT}, timeout=timeout)
    except requests.RequestException as e:
        raise RemoteSearchError(f"GET {url} failed: {e}") from e
    if r.status_code >= 400:
        raise RemoteSearchError(f"GET {url} failed {r.status_code}: {r.text[:500]}")
    try:
        return r.json()
    except ValueError as e:
        raise RemoteSearchError(f"GET {url} returned non-JSON: {r.text[:500]}") from e


def search_remote(
    base_url: str,
    q: str,
    scope: str = "all",
    mode: str = "all",
    lang: str = "en",
    book: Optional[str] = None,
    from_book: Optional[str] = None,
    to_book: Optional[str] = None,
    timeout: float = 30,
) -> Dict[str, Any]:
    params: Dict[str, Any] = {"q": q, "scope": scope, "mode": mode, "lang": lang}
    if book:
        params["book"] = book
    if from_book:
        params["from"] = from_book
    if to_book:
        params["to"] = to_book
    return _get(f"{base_url.rstrip('/')}/api/search", params=params, timeout=timeout)

