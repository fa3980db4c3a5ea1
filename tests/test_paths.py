from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from anky.paths import asset_path, settings_path, writings_directory


class PathsTests(unittest.TestCase):
    def setUp(self) -> None:
        self._old_cwd = os.getcwd()
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        os.chdir(self.root)

    def tearDown(self) -> None:
        os.chdir(self._old_cwd)
        self._tmp.cleanup()

    def test_asset_resolves_in_working_directory(self) -> None:
        (self.root / "librarian.jpeg").write_bytes(b"jpeg")
        path = asset_path("librarian.jpeg")
        self.assertEqual(path.resolve(), self.root / "librarian.jpeg")
        self.assertTrue(path.exists())

    def test_missing_asset_stays_in_working_directory(self) -> None:
        path = asset_path("librarian.jpeg")
        self.assertEqual(path.parent.resolve(), self.root)
        self.assertFalse(path.exists())

    def test_absolute_paths_are_kept(self) -> None:
        target = self.root / "elsewhere" / "writings"
        self.assertEqual(writings_directory(target), target)
        self.assertEqual(asset_path(target / "bg.png"), target / "bg.png")

    def test_relative_writings_and_settings_live_in_working_directory(self) -> None:
        self.assertEqual(writings_directory("writings").resolve(), self.root / "writings")
        self.assertEqual(settings_path().resolve(), self.root / "anky.json")


if __name__ == "__main__":
    unittest.main()
