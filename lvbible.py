#!/usr/bin/env python
"""
lvbible.py – unified CLI for the Latvian/English Bible search

Commands:

  python lvbible.py search "mīlestība" --lang lv --scope nt
      Search verse text (modes: all, allw, any, exact)

  python lvbible.py books
      List books in canonical order with testament and availability

  python lvbible.py chapters "Jāņa evaņģēlijs"
  python lvbible.py read "Jana evangelijs" 3
      Reading data for one book / chapter

  python lvbible.py status
      Compare the book list against the documents on disk

  python lvbible.py serve --port 8765
      Run the HTTP JSON endpoints

  python lvbible.py remote-search http://127.0.0.1:8765 "love" --mode any
      Search against a running server

  python lvbible.py import-excel bible.xlsx --dry-run
      Build per-book JSON documents from a bilingual spreadsheet
"""

import argparse
import json
import sys
from pathlib import Path

from lvb import config
from lvb.client import RemoteSearchError, search_remote
from lvb.excel_import import import_documents
from lvb.matching import Mode
from lvb.reader import list_books, list_chapters, read_chapter
from lvb.scope import Scope
from lvb.search import SearchRequest, print_search_results, search_verses
from lvb.server import serve
from lvb.status import print_status
from lvb.store import ContentStore, DocumentError, StoreError
from lvb.textnorm import strip_tags
from lvb.util import error, info, set_quiet, warn


# ---------- Helpers ----------


def _settings(args: argparse.Namespace) -> config.Settings:
    return config.load_settings().with_overrides(
        bible_dir=args.bible_dir,
        book_list=args.book_list,
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
    )


def _store(args: argparse.Namespace) -> ContentStore:
    return ContentStore.from_settings(_settings(args))


def _search_params(args: argparse.Namespace) -> dict:
    return {
        "q": args.query,
        "scope": args.scope,
        "mode": args.mode,
        "lang": args.lang,
        "book": args.book,
        "from": args.from_book,
        "to": args.to_book,
    }


# ---------- Command handlers ----------


def cmd_search(args: argparse.Namespace) -> None:
    """
    Wire through to lvb.search.search_verses, then print results.
    """
    request = SearchRequest.from_params(_search_params(args))
    response = search_verses(request, _store(args), limit=args.limit)
    if args.json:
        print(json.dumps(response.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_search_results(response)


def cmd_books(args: argparse.Namespace) -> None:
    for entry in list_books(_store(args)):
        flag = "" if entry.available else "  (no document)"
        print(f"  [{entry.testament}] {entry.name}{flag}")


def cmd_chapters(args: argparse.Namespace) -> None:
    found = list_chapters(_store(args), args.book)
    if found is None:
        warn(f"Book not found: {args.book}")
        raise SystemExit(1)
    name, chapters = found
    info(f"{name}: {len(chapters)} chapter(s)")
    print("  " + " ".join(chapters))


def cmd_read(args: argparse.Namespace) -> None:
    view = read_chapter(_store(args), args.book, args.chapter)
    if view is None:
        warn(f"Book not found: {args.book}")
        raise SystemExit(1)
    if not view.verses:
        warn(f"{view.book} has no chapter {view.chapter!r}.")
        raise SystemExit(1)

    lang = args.lang
    print(f"{view.book} {view.chapter}")
    print("=" * (len(view.book) + len(view.chapter) + 1))
    for v in view.verses:
        print(f"{v.verse:>3}  {strip_tags(v.text(lang))}")
    nav = []
    if view.prev:
        nav.append(f"prev: {view.prev}")
    if view.next:
        nav.append(f"next: {view.next}")
    if nav:
        info(", ".join(nav))


def cmd_status(args: argparse.Namespace) -> None:
    print_status(_store(args))


def cmd_serve(args: argparse.Namespace) -> None:
    settings = _settings(args)
    serve(ContentStore.from_settings(settings), settings.host, settings.port)


def cmd_remote_search(args: argparse.Namespace) -> None:
    try:
        data = search_remote(
            args.url,
            args.query,
            scope=args.scope,
            mode=args.mode,
            lang=args.lang,
            book=args.book,
            from_book=args.from_book,
            to_book=args.to_book,
        )
    except RemoteSearchError as e:
        error(str(e))
        raise SystemExit(1)
    print(json.dumps(data, ensure_ascii=False, indent=2))


def cmd_import_excel(args: argparse.Namespace) -> None:
    """
    Wire through to lvb.excel_import.import_documents.
    """
    settings = _settings(args)
    import_documents(
        Path(args.file),
        settings.bible_dir,
        sheet_name=args.sheet,
        overwrite=args.overwrite,
        dry_run=args.dry_run,
        max_rows=args.max_rows,
    )


# ---------- Parser setup ----------


def _add_search_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("query", type=str, help="Search text")
    p.add_argument(
        "--scope",
        choices=[s.value for s in Scope],
        default=Scope.ALL.value,
        help="Books to search (default: all)",
    )
    p.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default=Mode.ALL_PARTIAL.value,
        help="all = every word as substring, allw = every whole word, "
             "any = any word, exact = phrase (default: all)",
    )
    p.add_argument(
        "--lang",
        choices=["en", "lv"],
        default="en",
        help="Language to search (default: en)",
    )
    p.add_argument("--book", type=str, default=None, help="Book for --scope book")
    p.add_argument("--from", dest="from_book", type=str, default=None, help="First book for --scope range")
    p.add_argument("--to", dest="to_book", type=str, default=None, help="Last book for --scope range")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lvbible",
        description=f"{config.APP_NAME} CLI (v{config.__version__})",
    )
    parser.add_argument(
        "--bible-dir",
        type=str,
        default=None,
        help="Directory of per-book JSON documents (default: $LVB_BIBLE_DIR or public/bible)",
    )
    parser.add_argument(
        "--book-list",
        type=str,
        default=None,
        help="Book order file (default: $LVB_BOOK_LIST or 'bible book list.txt')",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress [info] output")
    sub = parser.add_subparsers(dest="command", required=True)

    # search
    p_search = sub.add_parser("search", help="Search verse text")
    _add_search_options(p_search)
    p_search.add_argument(
        "--limit",
        type=int,
        default=config.RESULT_CAP,
        help=f"Maximum number of verses to return (default: {config.RESULT_CAP})",
    )
    p_search.add_argument("--json", action="store_true", help="Print the JSON response")
    p_search.set_defaults(func=cmd_search)

    # books
    p_books = sub.add_parser("books", help="List books in canonical order")
    p_books.set_defaults(func=cmd_books)

    # chapters
    p_ch = sub.add_parser("chapters", help="List the chapters of a book")
    p_ch.add_argument("book", type=str, help="Book name (diacritics optional)")
    p_ch.set_defaults(func=cmd_chapters)

    # read
    p_read = sub.add_parser("read", help="Print one chapter")
    p_read.add_argument("book", type=str, help="Book name (diacritics optional)")
    p_read.add_argument("chapter", type=str, help="Chapter number")
    p_read.add_argument("--lang", choices=["en", "lv"], default="lv", help="Language (default: lv)")
    p_read.set_defaults(func=cmd_read)

    # status
    p_status = sub.add_parser("status", help="Check the book list against the documents")
    p_status.set_defaults(func=cmd_status)

    # serve
    p_serve = sub.add_parser("serve", help="Run the HTTP JSON endpoints")
    p_serve.add_argument("--host", type=str, default=None, help=f"Bind address (default: {config.DEFAULT_HOST})")
    p_serve.add_argument("--port", type=int, default=None, help=f"Port (default: {config.DEFAULT_PORT})")
    p_serve.set_defaults(func=cmd_serve)

    # remote-search
    p_remote = sub.add_parser("remote-search", help="Search against a running server")
    p_remote.add_argument("url", type=str, help="Server base URL, e.g. http://127.0.0.1:8765")
    _add_search_options(p_remote)
    p_remote.set_defaults(func=cmd_remote_search)

    # import-excel
    p_import = sub.add_parser(
        "import-excel",
        help="Build per-book JSON documents from a bilingual .xlsx/.csv file",
    )
    p_import.add_argument("file", type=str, help="Path to the Excel or CSV file")
    p_import.add_argument("--sheet", type=str, default=None, help="Worksheet name (default: active sheet)")
    p_import.add_argument("--overwrite", action="store_true", help="Replace existing documents")
    p_import.add_argument("--dry-run", action="store_true", help="Parse and report; write nothing")
    p_import.add_argument(
        "--max-rows",
        type=int,
        default=None,
        help="Maximum number of data rows to import (for testing)",
    )
    p_import.set_defaults(func=cmd_import_excel)

    return parser


# ---------- Main ----------


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_quiet(args.quiet or config.load_settings().quiet)
    try:
        args.func(args)
    except (StoreError, DocumentError, OSError, ValueError) as e:
        error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
