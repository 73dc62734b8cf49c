"""
Excel and CSV import for the content store.

This module:
- Opens .xlsx files via openpyxl or .csv files via the csv module.
- Detects the header row and column mapping (book, chapter, verse, en, lv).
- Groups rows into per-book documents and writes `<Book>.json` files.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from openpyxl import load_workbook

from .keys import canonical_key
from .model import Document, Verse
from .paths import DOCUMENT_SUFFIX
from .util import info, ok, warn


@dataclass
class BilingualRow:
    book: str
    chapter: int
    verse: int
    en: str
    lv: str
    raw_row_index: int  # for diagnostics


HEADER_CANDIDATES: Dict[str, List[str]] = {
    "book": ["book", "bookname", "book_name", "bk", "gramata"],
    "chapter": ["chapter", "chap", "ch", "nodala"],
    "verse": ["verse", "verse_num", "vs", "v", "pants"],
    "en": ["en", "english", "text_en", "kjv"],
    "lv": ["lv", "latvian", "text_lv", "latviski"],
}


def _normalize_header(value: object) -> str:
    if value is None:
        return ""
    s = canonical_key(str(value))
    return s.replace(" ", "").replace("-", "").replace("_", "")


def _detect_column_mapping(headers: List[object]) -> Optional[Dict[str, int]]:
    """
    Find which column index holds book/chapter/verse/en/lv.
    Returns None if any column is missing.
    """
    norm_headers = [_normalize_header(h) for h in headers]
    mapping: Dict[str, int] = {}

    for logical_name, candidates in HEADER_CANDIDATES.items():
        wanted = {c.replace("_", "") for c in candidates}
        idx_found = next((i for i, h in enumerate(norm_headers) if h in wanted), None)
        if idx_found is None:
            warn(f"Could not detect column for '{logical_name}'. Headers were: {headers}")
            return None
        mapping[logical_name] = idx_found

    return mapping


_UNSAFE_NAME_CHARS = ("/", "\\", "\x00")


def _is_safe_book_name(name: str) -> bool:
    """Book names become `<name>.json` inside the content directory."""
    if name in (".", ".."):
        return False
    return not any(c in name for c in _UNSAFE_NAME_CHARS)


def _rows_to_verses(
    rows: Iterable[List[object]],
    mapping: Dict[str, int],
    max_rows: Optional[int],
) -> Iterator[BilingualRow]:
    count = 0
    for row_idx, row in enumerate(rows, start=2):  # 1-based, +1 for header
        if max_rows is not None and count >= max_rows:
            info(f"Stopping after max_rows={max_rows} rows.")
            break

        try:
            book_raw = row[mapping["book"]]
            chapter_raw = row[mapping["chapter"]]
            verse_raw = row[mapping["verse"]]
            en_raw = row[mapping["en"]]
            lv_raw = row[mapping["lv"]]
        except IndexError:
            warn(f"Row {row_idx}: not enough columns; skipping.")
            continue

        if book_raw in (None, "") or chapter_raw in (None, "") or verse_raw in (None, ""):
            warn(f"Row {row_idx}: missing book/chapter/verse; skipping.")
            continue

        try:
            chapter_int = int(chapter_raw)
            verse_int = int(verse_raw)
        except (TypeError, ValueError):
            warn(f"Row {row_idx}: non-integer chapter/verse; skipping. "
                 f"chapter={chapter_raw!r}, verse={verse_raw!r}")
            continue

        book_str = str(book_raw).strip()
        if not book_str:
            warn(f"Row {row_idx}: empty book value; skipping.")
            continue
        if not _is_safe_book_name(book_str):
            warn(f"Row {row_idx}: book value {book_str!r} is not a usable file name; skipping.")
            continue

        en = "" if en_raw is None else str(en_raw).strip()
        lv = "" if lv_raw is None else str(lv_raw).strip()
        if not en and not lv:
            warn(f"Row {row_idx}: no text in either language; skipping.")
            continue

        yield BilingualRow(
            book=book_str,
            chapter=chapter_int,
            verse=verse_int,
            en=en,
            lv=lv,
            raw_row_index=row_idx,
        )
        count += 1


def _iter_rows_from_csv(csv_path: Path, max_rows: Optional[int]) -> Iterator[BilingualRow]:
    info(f"Opening CSV file: {csv_path}")
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.reader(f)
        try:
            headers = next(reader)
        except StopIteration:
            warn("CSV file is empty.")
            return

        info(f"Detected header row: {headers}")
        mapping = _detect_column_mapping(list(headers))
        if mapping is None:
            warn("Failed to detect required columns; aborting CSV import.")
            return
        yield from _rows_to_verses(reader, mapping, max_rows)


def _iter_rows_from_xlsx(
    excel_path: Path,
    sheet_name: Optional[str],
    max_rows: Optional[int],
) -> Iterator[BilingualRow]:
    info(f"Opening Excel file: {excel_path}")
    wb = load_workbook(filename=str(excel_path), read_only=True, data_only=True)
    try:
        if sheet_name is None:
            ws = wb.active
            info(f"Using active sheet: {ws.title!r}")
        else:
            if sheet_name not in wb.sheetnames:
                raise ValueError(
                    f"Sheet {sheet_name!r} not found. Available: {wb.sheetnames}"
                )
            ws = wb[sheet_name]
            info(f"Using sheet: {ws.title!r}")

        rows = ws.iter_rows(values_only=True)
        try:
            headers = list(next(rows))
        except StopIteration:
            warn("Excel sheet is empty.")
            return

        info(f"Detected header row: {headers}")
        mapping = _detect_column_mapping(headers)
        if mapping is None:
            warn("Failed to detect required columns; aborting Excel import.")
            return
        yield from _rows_to_verses((list(r) for r in rows), mapping, max_rows)
    finally:
        wb.close()


def iter_rows(
    path: Path,
    sheet_name: Optional[str] = None,
    max_rows: Optional[int] = None,
) -> Iterator[BilingualRow]:
    """
    Yield BilingualRow objects from an Excel (.xlsx/.xlsm) or CSV file.

    Raises FileNotFoundError for a missing file and ValueError for an
    unknown sheet or unsupported extension.
    """
    path = path.resolve()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        yield from _iter_rows_from_csv(path, max_rows)
    elif suffix in (".xlsx", ".xlsm"):
        yield from _iter_rows_from_xlsx(path, sheet_name, max_rows)
    else:
        raise ValueError(f"Unsupported file format: {suffix}. Expected .csv, .xlsx or .xlsm")


def group_documents(rows: Iterable[BilingualRow]) -> Dict[str, Document]:
    """
    Group rows into documents keyed by book display name.

    Books are grouped by canonical key (first spelling seen wins); within
    a chapter verses are sorted and a repeated verse number keeps the
    last row.
    """
    names: Dict[str, str] = {}
    verses: Dict[str, Dict[int, Dict[int, Verse]]] = {}
    for r in rows:
        key = canonical_key(r.book)
        names.setdefault(key, r.book)
        chapter = verses.setdefault(key, {}).setdefault(r.chapter, {})
        if r.verse in chapter:
            warn(f"Row {r.raw_row_index}: duplicate {r.book} {r.chapter}:{r.verse}; keeping the later row.")
        chapter[r.verse] = Verse(verse=r.verse, en=r.en, lv=r.lv)

    docs: Dict[str, Document] = {}
    for key, chapters in verses.items():
        name = names[key]
        docs[name] = Document(
            book=name,
            chapters={
                str(ch): [chapters[ch][v] for v in sorted(chapters[ch])]
                for ch in sorted(chapters)
            },
        )
    return docs


def import_documents(
    path: Path,
    bible_dir: Path,
    sheet_name: Optional[str] = None,
    overwrite: bool = False,
    dry_run: bool = False,
    max_rows: Optional[int] = None,
) -> List[Path]:
    """
    Import a bilingual spreadsheet into `<bible_dir>/<Book>.json` documents.

    Parameters
    ----------
    path:
        Excel or CSV file with book/chapter/verse/en/lv columns.
    bible_dir:
        Content directory to write into.
    overwrite:
        Replace existing documents. Without it existing books are skipped.
    dry_run:
        Parse and report only.

    Returns
    -------
    Paths written (empty on a dry run).
    """
    info("=== IMPORT DOCUMENTS ===")
    info(f"Source file      : {path}")
    info(f"Content directory: {bible_dir}")
    info(f"Overwrite        : {overwrite}")
    info(f"Dry run          : {dry_run}")

    docs = group_documents(iter_rows(path, sheet_name=sheet_name, max_rows=max_rows))
    if not docs:
        warn("No usable verse rows found.")
        return []

    for name, doc in docs.items():
        n_verses = sum(len(v) for v in doc.chapters.values())
        info(f"  {name}: {len(doc.chapters)} chapter(s), {n_verses} verse(s)")

    if dry_run:
        info("Dry run enabled - no documents will be written.")
        return []

    bible_dir.mkdir(parents=True, exist_ok=True)
    existing = {
        canonical_key(p.name[: -len(DOCUMENT_SUFFIX)]): p
        for p in bible_dir.iterdir()
        if p.name.lower().endswith(DOCUMENT_SUFFIX)
    }

    written: List[Path] = []
    for name, doc in docs.items():
        target = existing.get(canonical_key(name), bible_dir / f"{name}{DOCUMENT_SUFFIX}")
        if target.exists() and not overwrite:
            warn(f"{target.name} already exists; skipping (use --overwrite).")
            continue
        target.write_text(
            json.dumps(doc.to_json(), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        written.append(target)

    ok(f"Wrote {len(written)} document(s) to {bible_dir}.")
    return written
