import shutil
import tempfile
import unittest
from pathlib import Path

from pgnvault.vault_fs import LocalVaultFilesystem, join_vault_path, normalize_vault_path


class NormalizeVaultPathTests(unittest.TestCase):
    def test_collapses_and_trims_separators(self) -> None:
        self.assertEqual(normalize_vault_path("//chess\\pgn//2024-06.pgn/"), "chess/pgn/2024-06.pgn")
        self.assertEqual(normalize_vault_path("chess/"), "chess")

    def test_root_normalizes_to_slash(self) -> None:
        self.assertEqual(normalize_vault_path(""), "/")
        self.assertEqual(normalize_vault_path("///"), "/")

    def test_non_breaking_spaces_and_unicode(self) -> None:
        self.assertEqual(normalize_vault_path("a\u00a0b"), "a b")
        self.assertEqual(normalize_vault_path("cafe\u0301"), "caf\u00e9")

    def test_join_skips_empty_parts(self) -> None:
        self.assertEqual(join_vault_path("chess", "", "pgn", "x.pgn"), "chess/pgn/x.pgn")
        self.assertEqual(join_vault_path("", "a.md"), "a.md")


class LocalVaultFilesystemTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.fs = LocalVaultFilesystem(self.tmp_dir)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def test_mkdir_is_idempotent(self) -> None:
        self.fs.mkdir("chess/pgn")
        self.fs.mkdir("chess/pgn")

        self.assertTrue(self.fs.exists("chess/pgn"))
        self.assertTrue((self.tmp_dir / "chess" / "pgn").is_dir())

    def test_write_truncates_and_append_extends(self) -> None:
        self.fs.mkdir("chess")
        self.fs.write("chess/a.md", "first")
        self.fs.write("chess/a.md", "one")
        self.fs.append("chess/a.md", "-two")

        self.assertEqual((self.tmp_dir / "chess" / "a.md").read_text(encoding="utf-8"), "one-two")

    def test_write_without_parent_raises_os_error(self) -> None:
        with self.assertRaises(OSError):
            self.fs.write("missing/a.md", "x")

    def test_paths_cannot_escape_the_vault(self) -> None:
        with self.assertRaises(OSError):
            self.fs.write("../outside.md", "x")

    def test_root_exists(self) -> None:
        self.assertTrue(self.fs.exists(""))


if __name__ == "__main__":
    unittest.main()
