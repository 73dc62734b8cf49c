#!/usr/bin/env python3
import json
import os
import tempfile
import unittest
from pathlib import Path

from support import make_store, verse

from lvb.config import Settings, load_settings
from lvb.model import Document, chapter_sort_key
from lvb.reader import get_book, list_books, list_chapters, read_chapter
from lvb.status import get_store_report
from lvb.store import ContentStore, DocumentCache, DocumentError, document_name

CHAPTERS = {
    "1": [verse(1, "In the beginning", "Iesākumā")],
    "2": [verse(1, "Thus the heavens", "Tā tika pabeigtas")],
    "10": [verse(1, "These are the generations", "Šie ir")],
}


class StoreTests(unittest.TestCase):
    def test_document_name(self):
        self.assertEqual(document_name("Jāņa evaņģēlijs.json"), "Jāņa evaņģēlijs")
        self.assertEqual(document_name("Rutes.JSON"), "Rutes")

    def test_load_parses_document(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = make_store(tmp, {"Iesākums": CHAPTERS})
            doc = store.load("Iesākums.json")
            self.assertEqual(doc.book, "Iesākums")
            self.assertEqual(doc.chapter_keys(), ["1", "2", "10"])
            self.assertEqual(doc.chapters["1"][0].text("lv"), "Iesākumā")

    def test_malformed_shapes(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = make_store(tmp, {})
            bad = {
                "list.json": "[]",
                "noverse.json": json.dumps({"book": "x", "chapters": {"1": [{"en": "a"}]}}),
                "badnum.json": json.dumps({"book": "x", "chapters": {"1": [{"verse": "one"}]}}),
            }
            for name, body in bad.items():
                (store.bible_dir / name).write_text(body, encoding="utf-8")
                with self.assertRaises(DocumentError, msg=name):
                    store.load(name)

    def test_cache_reuses_and_invalidates_on_mtime(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = make_store(tmp, {"Rutes": {"1": [verse(1, "old")]}})
            store.cache = DocumentCache()
            first = store.load("Rutes.json")
            self.assertIs(store.load("Rutes.json"), first)
            self.assertEqual(len(store.cache), 1)

            path = store.bible_dir / "Rutes.json"
            path.write_text(json.dumps({"book": "Rutes", "chapters": {"1": [verse(1, "new")]}}), encoding="utf-8")
            st = path.stat()
            os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 5_000_000_000))
            self.assertEqual(store.load("Rutes.json").chapters["1"][0].en, "new")

    def test_from_settings(self):
        settings = load_settings({"LVB_BIBLE_DIR": "/data/bible", "LVB_CACHE_DOCUMENTS": "yes"})
        store = ContentStore.from_settings(settings)
        self.assertEqual(store.bible_dir, Path("/data/bible"))
        self.assertIsNotNone(store.cache)
        self.assertIsNone(ContentStore.from_settings(Settings()).cache)


class ChapterOrderTests(unittest.TestCase):
    def test_only_plain_numbers_sort_numerically(self):
        doc = Document(book="Psalmi", chapters={k: [] for k in ["2", "nan", "1", "10", "inf", "1e1", "1_0"]})
        self.assertEqual(doc.chapter_keys(), ["1", "2", "10", "1_0", "1e1", "inf", "nan"])

    def test_sort_key_shape(self):
        self.assertEqual(chapter_sort_key("07"), (0, 7, "07"))
        self.assertEqual(chapter_sort_key("nan"), (1, 0, "nan"))
        self.assertEqual(chapter_sort_key(" 3"), (1, 0, " 3"))


class ReaderTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.store = make_store(
            self._tmp.name,
            {"Iesakums": CHAPTERS},
            manifest=["Iesākums", "Jāņa evaņģēlijs"],
        )

    def test_list_books(self):
        books = [b.to_json() for b in list_books(self.store)]
        self.assertEqual(
            books,
            [
                {"name": "Iesākums", "testament": "ot", "available": True},
                {"name": "Jāņa evaņģēlijs", "testament": "nt", "available": False},
            ],
        )

    def test_get_book_uses_display_name(self):
        name, doc = get_book(self.store, "iesakums")
        self.assertEqual(name, "Iesākums")
        self.assertIsNone(get_book(self.store, "Jāņa evaņģēlijs"))

    def test_list_chapters_numeric_order(self):
        self.assertEqual(list_chapters(self.store, "Iesākums"), ("Iesākums", ["1", "2", "10"]))

    def test_read_chapter_neighbours(self):
        view = read_chapter(self.store, "Iesākums", "2")
        self.assertEqual((view.prev, view.next), ("1", "10"))
        self.assertEqual(view.verses[0].en, "Thus the heavens")

        first = read_chapter(self.store, "Iesākums", "1")
        last = read_chapter(self.store, "Iesākums", "10")
        self.assertIsNone(first.prev)
        self.assertIsNone(last.next)

    def test_read_unknown_chapter(self):
        view = read_chapter(self.store, "Iesākums", "99")
        self.assertEqual(view.to_json(), {"book": "Iesākums", "chapter": "99", "verses": [], "prev": None, "next": None})


class StatusTests(unittest.TestCase):
    def test_report(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = make_store(
                tmp,
                {"Iesakums": CHAPTERS, "Tobijas": CHAPTERS},
                manifest=["Iesākums", "Atklāsmes"],
            )
            report = get_store_report(store)
            self.assertEqual(report.manifest, ["Iesākums", "Atklāsmes"])
            self.assertEqual(report.missing_documents, ["Atklāsmes"])
            self.assertEqual(report.unlisted_documents, ["Tobijas.json"])
            self.assertEqual((report.ot_count, report.nt_count), (1, 1))
            self.assertFalse(report.healthy)

    def test_healthy_store(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = make_store(tmp, {"Rutes": CHAPTERS}, manifest=["Rutes"])
            self.assertTrue(get_store_report(store).healthy)


class SettingsTests(unittest.TestCase):
    def test_defaults_and_bad_port(self):
        settings = load_settings({"LVB_PORT": "abc"})
        self.assertEqual(settings.port, 8765)
        self.assertFalse(settings.cache_documents)
        self.assertEqual(load_settings({"LVB_PORT": "9000"}).port, 9000)

    def test_overrides(self):
        settings = Settings().with_overrides(bible_dir="/x", port=1234)
        self.assertEqual(settings.bible_dir, Path("/x"))
        self.assertEqual(settings.port, 1234)


if __name__ == "__main__":
    unittest.main()
