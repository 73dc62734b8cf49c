"""Helpers for building throwaway content stores."""

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lvb.store import ContentStore  # noqa: E402
from lvb.util import set_quiet  # noqa: E402

set_quiet(True)


def verse(n, en, lv=""):
    return {"verse": n, "en": en, "lv": lv}


def write_book(bible_dir, file_stem, chapters, label=None):
    """chapters: {"1": [verse(...), ...]}"""
    path = Path(bible_dir) / f"{file_stem}.json"
    path.write_text(
        json.dumps({"book": label or file_stem, "chapters": chapters}, ensure_ascii=False),
        encoding="utf-8",
    )
    return path


def make_store(root, books, manifest=None):
    """
    books   : {file_stem: chapters}
    manifest: list of lines for 'bible book list.txt', or None for no file
    """
    root = Path(root)
    bible_dir = root / "bible"
    bible_dir.mkdir(parents=True, exist_ok=True)
    for stem, chapters in books.items():
        write_book(bible_dir, stem, chapters)
    book_list = root / "bible book list.txt"
    if manifest is not None:
        book_list.write_text("\n".join(manifest) + "\n", encoding="utf-8")
    return ContentStore(bible_dir, book_list)
