"""
HTTP JSON endpoints.

    GET /api/search?q=&scope=&mode=&lang=&book=&from=&to=
    GET /api/books
    GET /api/books/<book>
    GET /api/read/<book>/<chapter>

Every handler is read-only; requests share nothing but the store handle
(and its optional document cache).
"""

from __future__ import annotations

import json
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Dict, Type
from urllib.parse import parse_qs, unquote, urlsplit

from .reader import list_books, list_chapters, read_chapter
from .search import SearchRequest, search_verses
from .store import ContentStore, DocumentError, StoreError
from .util import error, info


class SearchHandler(BaseHTTPRequestHandler):

    store: ContentStore  # set by make_handler()

    def log_message(self, format, *args):
        info(f"{self.address_string()} {format % args}")

    def _send_json(self, status: int, payload: Dict[str, Any]) -> None:
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-store")
        self.end_headers()
        self.wfile.write(body)

    def _not_found(self, what: str = "not found") -> None:
        self._send_json(404, {"error": what})

    def do_GET(self):
        url = urlsplit(self.path)
        parts = [unquote(p) for p in url.path.split("/") if p]

        try:
            if parts == ["api", "search"]:
                request = SearchRequest.from_params(parse_qs(url.query))
                self._send_json(200, search_verses(request, self.store).to_dict())
            elif parts == ["api", "books"]:
                self._send_json(200, {"books": [b.to_json() for b in list_books(self.store)]})
            elif len(parts) == 3 and parts[:2] == ["api", "books"]:
                found = list_chapters(self.store, parts[2])
                if found is None:
                    self._not_found(f"book not found: {parts[2]}")
                    return
                name, chapters = found
                self._send_json(200, {"book": name, "chapters": chapters})
            elif len(parts) == 4 and parts[:2] == ["api", "read"]:
                view = read_chapter(self.store, parts[2], parts[3])
                if view is None:
                    self._not_found(f"book not found: {parts[2]}")
                    return
                self._send_json(200, view.to_json())
            else:
                self._not_found()
        except (DocumentError, StoreError, OSError) as e:
            error(str(e))
            self._send_json(500, {"error": str(e)})


def make_handler(store: ContentStore) -> Type[SearchHandler]:
    """Bind a handler class to one content store."""
    return type("BoundSearchHandler", (SearchHandler,), {"store": store})


def make_server(store: ContentStore, host: str, port: int) -> ThreadingHTTPServer:
    return ThreadingHTTPServer((host, port), make_handler(store))


def serve(store: ContentStore, host: str, port: int) -> None:
    """Run until interrupted."""
    httpd = make_server(store, host, port)
    info(f"Serving {store.bible_dir} on http://{host}:{httpd.server_address[1]}")
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        info("Shutting down.")
    finally:
        httpd.server_close()
