#!/usr/bin/env python3
import tempfile
import unittest
from pathlib import Path

from support import make_store, verse, write_book

from lvb.matching import Mode
from lvb.scope import Scope
from lvb.search import SearchRequest, search_verses
from lvb.store import ContentStore, DocumentError, StoreError


def run(store, **params):
    return search_verses(SearchRequest.from_params(params), store)


class SearchRequestTests(unittest.TestCase):
    def test_defaults(self):
        req = SearchRequest.from_params({"q": "  love "})
        self.assertEqual(req.q, "love")
        self.assertIs(req.scope.scope, Scope.ALL)
        self.assertIs(req.mode, Mode.ALL_PARTIAL)
        self.assertEqual(req.lang, "en")

    def test_invalid_values_fall_back_to_defaults(self):
        req = SearchRequest.from_params({"q": "x", "scope": "galaxy", "mode": "fuzzy", "lang": "de"})
        self.assertIs(req.scope.scope, Scope.ALL)
        self.assertIs(req.mode, Mode.ALL_PARTIAL)
        self.assertEqual(req.lang, "en")

    def test_parse_qs_style_lists(self):
        req = SearchRequest.from_params(
            {"q": ["grace"], "scope": ["range"], "from": ["Rutes "], "to": ["Psalmi"], "mode": ["allw"], "lang": ["lv"]}
        )
        self.assertEqual(req.q, "grace")
        self.assertIs(req.scope.scope, Scope.RANGE)
        self.assertEqual(req.scope.from_book, "Rutes")
        self.assertEqual(req.scope.to_book, "Psalmi")
        self.assertIs(req.mode, Mode.ALL_WHOLE)
        self.assertEqual(req.lang, "lv")


class SearchScenarioTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)

    def test_love_finds_loved_with_stripped_snippet(self):
        store = make_store(
            self.root,
            {"Jana evangelijs": {"3": [verse(16, "For God so <i>loved</i> the world", "Jo Dievs tik ļoti mīlēja pasauli")]}},
            manifest=["Jāņa evaņģēlijs"],
        )
        out = run(store, q="love", scope="all", mode="any", lang="en").to_dict()
        self.assertEqual(
            out,
            {
                "results": [
                    {
                        "book": "Jāņa evaņģēlijs",
                        "chapter": "3",
                        "verse": 16,
                        "snippet": "For God so loved the world",
                        "where": "en",
                    }
                ],
                "truncated": False,
            },
        )

    def test_book_scope_without_diacritics(self):
        store = make_store(
            self.root,
            {
                "Jāņa": {"1": [verse(1, "John", "Jāņa vēstule")]},
                "Rutes": {"1": [verse(1, "Ruth", "Jāņa nav")]},
            },
            manifest=["Rutes", "Jāņa"],
        )
        results = run(store, q="Jāņa", scope="book", book="Jana", lang="lv").results
        self.assertEqual([(r.book, r.where) for r in results], [("Jāņa", "lv")])

    def test_blank_query(self):
        store = make_store(self.root, {"Rutes": {"1": [verse(1, "x")]}}, manifest=["Rutes"])
        for q in ("", "   "):
            self.assertEqual(run(store, q=q, scope="nt", mode="exact").to_dict(), {"results": []})

    def test_language_selects_one_field(self):
        store = make_store(self.root, {"Rutes": {"1": [verse(1, "grace", "žēlastība")]}}, manifest=["Rutes"])
        self.assertEqual(len(run(store, q="grace", lang="en").results), 1)
        self.assertEqual(len(run(store, q="grace", lang="lv").results), 0)
        self.assertEqual(run(store, q="žēlastība", lang="lv").results[0].snippet, "žēlastība")

    def test_results_sorted_by_order_chapter_verse(self):
        store = make_store(
            self.root,
            {
                "Iesākums": {
                    "10": [verse(1, "light")],
                    "2": [verse(5, "light"), verse(3, "light")],
                },
                "Psalmi": {"1": [verse(1, "light")]},
            },
            manifest=["Iesākums", "Psalmi"],
        )
        results = run(store, q="light").results
        self.assertEqual(
            [(r.book, r.chapter, r.verse) for r in results],
            [("Iesākums", "2", 3), ("Iesākums", "2", 5), ("Iesākums", "10", 1), ("Psalmi", "1", 1)],
        )

    def test_canonical_order_not_alphabetical(self):
        store = make_store(
            self.root,
            {"Atklāsmes": {"1": [verse(1, "amen")]}, "Iesākums": {"1": [verse(1, "amen")]}},
            manifest=["Iesākums", "Atklāsmes"],
        )
        self.assertEqual([r.book for r in run(store, q="amen").results], ["Iesākums", "Atklāsmes"])

    def test_testament_scopes(self):
        store = make_store(
            self.root,
            {"Iesākums": {"1": [verse(1, "word")]}, "Jana evangelijs": {"1": [verse(1, "word")]}},
            manifest=["Iesākums", "Jāņa evaņģēlijs"],
        )
        self.assertEqual([r.book for r in run(store, q="word", scope="nt").results], ["Jāņa evaņģēlijs"])
        self.assertEqual([r.book for r in run(store, q="word", scope="ot").results], ["Iesākums"])

    def test_range_scope_symmetric(self):
        books = {name: {"1": [verse(1, "peace")]} for name in ("A", "B", "C", "D")}
        store = make_store(self.root, books, manifest=["A", "B", "C", "D"])
        fwd = run(store, q="peace", scope="range", **{"from": "B", "to": "C"}).results
        rev = run(store, q="peace", scope="range", **{"from": "C", "to": "B"}).results
        self.assertEqual([r.book for r in fwd], ["B", "C"])
        self.assertEqual(fwd, rev)
        self.assertEqual(run(store, q="peace", scope="range", **{"from": "B", "to": "Z"}).results, [])

    def test_missing_document_is_skipped(self):
        store = make_store(self.root, {"Rutes": {"1": [verse(1, "kin")]}}, manifest=["Esteres", "Rutes"])
        self.assertEqual([r.book for r in run(store, q="kin").results], ["Rutes"])

    def test_unlisted_document_is_not_searched(self):
        store = make_store(
            self.root,
            {"Rutes": {"1": [verse(1, "kin")]}, "Tobijas": {"1": [verse(1, "kin")]}},
            manifest=["Rutes"],
        )
        self.assertEqual([r.book for r in run(store, q="kin").results], ["Rutes"])

    def test_no_manifest_searches_every_document(self):
        store = make_store(
            self.root,
            {"Rutes": {"1": [verse(1, "kin")]}, "Esteres": {"1": [verse(1, "kin")]}},
            manifest=None,
        )
        self.assertEqual([r.book for r in run(store, q="kin").results], ["Esteres", "Rutes"])

    def test_malformed_document_aborts(self):
        store = make_store(self.root, {"Rutes": {"1": [verse(1, "kin")]}}, manifest=["Esteres", "Rutes"])
        (store.bible_dir / "Esteres.json").write_text("{not json", encoding="utf-8")
        with self.assertRaises(DocumentError):
            run(store, q="kin")

    def test_excluded_books_are_never_loaded(self):
        store = make_store(
            self.root,
            {"Rutes": {"1": [verse(1, "kin")]}, "Marka evangelijs": {"1": [verse(1, "kin")]}},
            manifest=["Esteres", "Rutes", "Marka evaņģēlijs"],
        )
        (store.bible_dir / "Esteres.json").write_text("{not json", encoding="utf-8")

        nt = run(store, q="kin", scope="nt")
        self.assertEqual([r.book for r in nt.results], ["Marka evaņģēlijs"])
        one = run(store, q="kin", scope="book", book="Rūtes")
        self.assertEqual([r.book for r in one.results], ["Rutes"])
        span = run(store, q="kin", scope="range", **{"from": "Rutes", "to": "Marka evangelijs"})
        self.assertEqual([r.book for r in span.results], ["Rutes", "Marka evaņģēlijs"])

    def test_missing_content_directory(self):
        store = ContentStore(self.root / "nowhere", self.root / "nolist.txt")
        with self.assertRaises(StoreError):
            run(store, q="kin")


class TruncationTests(unittest.TestCase):
    def _store(self, root, n_matches, extra_book=False):
        chapters = {}
        for i in range(n_matches):
            chapters.setdefault(str(i // 100 + 1), []).append(verse(i % 100 + 1, "hope"))
        books = {"Psalmi": chapters}
        manifest = ["Psalmi"]
        if extra_book:
            books["Sakāmvārdi"] = {"1": [verse(1, "no match here")]}
            manifest.append("Sakāmvārdi")
        return make_store(root, books, manifest=manifest)

    def test_501_matches_returns_500_truncated(self):
        with tempfile.TemporaryDirectory() as tmp:
            response = run(self._store(tmp, 501), q="hope")
            self.assertEqual(len(response.results), 500)
            self.assertIs(response.truncated, True)
            last = response.results[-1]
            self.assertEqual((last.chapter, last.verse), ("5", 100))

    def test_exactly_500_matches_is_not_truncated(self):
        with tempfile.TemporaryDirectory() as tmp:
            response = run(self._store(tmp, 500, extra_book=True), q="hope")
            self.assertEqual(len(response.results), 500)
            self.assertIs(response.truncated, False)

    def test_cap_spans_books(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = self._store(tmp, 500)
            write_book(store.bible_dir, "Sakāmvārdi", {"1": [verse(1, "hope")]})
            store.book_list.write_text("Psalmi\nSakāmvārdi\n", encoding="utf-8")
            response = run(store, q="hope")
            self.assertEqual(len(response.results), 500)
            self.assertTrue(response.truncated)
            self.assertNotIn("Sakāmvārdi", {r.book for r in response.results})

    def test_books_after_the_cap_are_never_loaded(self):
        with tempfile.TemporaryDirectory() as tmp:
            store = self._store(tmp, 501)
            (store.bible_dir / "Sakāmvārdi.json").write_text("{not json", encoding="utf-8")
            store.book_list.write_text("Psalmi\nSakāmvārdi\n", encoding="utf-8")
            response = run(store, q="hope")
            self.assertEqual(len(response.results), 500)
            self.assertIs(response.truncated, True)

    def test_custom_limit(self):
        with tempfile.TemporaryDirectory() as tmp:
            response = search_verses(SearchRequest.from_params({"q": "hope"}), self._store(tmp, 5), limit=3)
            self.assertEqual(len(response.results), 3)
            self.assertTrue(response.truncated)


if __name__ == "__main__":
    unittest.main()
