"""
Status and health-report helpers for the content store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .catalog import find_key_collisions, parse_manifest
from .keys import canonical_key, is_new_testament
from .store import ContentStore, document_name
from .util import info, ok, warn


@dataclass
class StoreReport:
    documents: List[str] = field(default_factory=list)
    manifest: Optional[List[str]] = None
    missing_documents: List[str] = field(default_factory=list)
    unlisted_documents: List[str] = field(default_factory=list)
    collisions: Dict[str, List[str]] = field(default_factory=dict)
    nt_count: int = 0
    ot_count: int = 0

    @property
    def healthy(self) -> bool:
        return bool(self.manifest) and not (
            self.missing_documents or self.unlisted_documents or self.collisions
        )


def get_store_report(store: ContentStore) -> StoreReport:
    """
    Compare the book list against the documents on disk.

    manifest is None when the book list cannot be read.
    """
    report = StoreReport(documents=store.list_documents())

    try:
        report.manifest = parse_manifest(store.read_manifest())
    except (OSError, UnicodeDecodeError):
        report.manifest = None

    doc_keys = {canonical_key(document_name(f)): f for f in report.documents}
    names = report.manifest or [document_name(f) for f in report.documents]
    listed = {canonical_key(n) for n in names}

    report.missing_documents = [n for n in names if canonical_key(n) not in doc_keys]
    report.unlisted_documents = [f for k, f in doc_keys.items() if k not in listed]
    report.collisions = find_key_collisions(store)
    report.nt_count = sum(1 for n in names if is_new_testament(n))
    report.ot_count = len(names) - report.nt_count
    return report


def print_status(store: ContentStore) -> StoreReport:
    """
    Print a human-readable status report:

    - content directory and document count
    - book list state (entries, OT/NT split)
    - listed books without documents, documents not listed
    - canonical-key collisions between documents
    """
    info(f"Content directory: {store.bible_dir}")
    report = get_store_report(store)
    info(f"Documents: {len(report.documents)}")

    if report.manifest is None:
        warn(f"Book list not readable: {store.book_list} (search falls back to directory order)")
    elif not report.manifest:
        warn(f"Book list is empty: {store.book_list} (search falls back to directory order)")
    else:
        info(f"Book list: {len(report.manifest)} entries ({report.ot_count} OT, {report.nt_count} NT)")

    if report.missing_documents:
        warn("Listed books without a document (skipped by search):")
        for name in report.missing_documents:
            print(f"  - {name}")

    if report.unlisted_documents:
        warn("Documents not in the book list (never searched):")
        for name in report.unlisted_documents:
            print(f"  - {name}")

    if report.collisions:
        warn("Documents sharing a canonical key (last one wins):")
        for key, files in sorted(report.collisions.items()):
            print(f"  - {key}: {', '.join(files)}")

    if report.healthy:
        ok("Content store is consistent.")
    return report
