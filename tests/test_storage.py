from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from anky.storage import WritingStore, WritingStoreError, trim_text


class WritingStoreTests(unittest.TestCase):
    def test_empty_directory_yields_first_filename(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = WritingStore(Path(tmp_dir))
            self.assertEqual(store.next_filename(), "1.txt")

    def test_next_filename_follows_highest_number(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            for name in ("1.txt", "2.txt", "10.txt", "notes.txt", "draft.md"):
                (root / name).write_text("x", encoding="utf-8")
            store = WritingStore(root)
            self.assertEqual(store.next_filename(), "11.txt")

    def test_missing_directory_falls_back_to_first_filename(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = WritingStore(Path(tmp_dir) / "missing")
            with self.assertLogs("anky.storage", level="ERROR"):
                self.assertEqual(store.next_filename(), "1.txt")

    def test_save_writes_utf8_text_in_sequence(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = WritingStore(Path(tmp_dir))
            first = store.save("morning pages")
            second = store.save("café ☕")

            self.assertEqual(first.number, 1)
            self.assertEqual(first.path.name, "1.txt")
            self.assertEqual(second.path.name, "2.txt")
            self.assertEqual(second.path.read_bytes(), "café ☕".encode("utf-8"))

    def test_save_failure_is_logged_and_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = WritingStore(Path(tmp_dir) / "missing")
            with self.assertLogs("anky.storage", level="ERROR"):
                self.assertIsNone(store.save("lost"))

    def test_list_writings_orders_by_number(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            root = Path(tmp_dir)
            (root / "10.txt").write_text("ten", encoding="utf-8")
            (root / "2.txt").write_text("two", encoding="utf-8")
            (root / "1.txt").write_text("one", encoding="utf-8")
            (root / "readme.txt").write_text("ignored", encoding="utf-8")

            writings = WritingStore(root).list_writings()
            self.assertEqual([w.number for w in writings], [1, 2, 10])
            self.assertEqual([w.text for w in writings], ["one", "two", "ten"])

    def test_load_reads_single_writing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            store = WritingStore(Path(tmp_dir))
            saved = store.save("hello")
            loaded = store.load(saved.path)
            self.assertEqual(loaded, saved)

    def test_ensure_directory_creates_missing_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            target = Path(tmp_dir) / "writings"
            WritingStore(target).ensure_directory()
            self.assertTrue(target.is_dir())

    def test_ensure_directory_failure_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            blocker = Path(tmp_dir) / "occupied"
            blocker.write_text("not a directory", encoding="utf-8")
            with self.assertRaises(WritingStoreError):
                WritingStore(blocker / "writings").ensure_directory()


class TrimTextTests(unittest.TestCase):
    def test_short_text_is_unchanged(self) -> None:
        self.assertEqual(trim_text("short"), "short")

    def test_long_text_is_cut_with_ellipsis(self) -> None:
        text = "a" * 31
        self.assertEqual(trim_text(text), "a" * 30 + "...")
        self.assertEqual(trim_text("abcdef", 3), "abc...")


if __name__ == "__main__":
    unittest.main()
