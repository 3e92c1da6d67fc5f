import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from rich.console import Console

from project_catalog.__main__ import main


class TestCli(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.home = self.root / "home"
        self.output = io.StringIO()
        # Route all rich output into a buffer
        self._patch = patch("project_catalog.utils.console", Console(file=self.output, width=200))
        self._patch.start()
        self._patch_main = patch("project_catalog.__main__.console", Console(file=self.output, width=200))
        self._patch_main.start()

    def tearDown(self):
        self._patch_main.stop()
        self._patch.stop()
        self._tmp.cleanup()

    def run_cli(self, *argv) -> int:
        return main(["--home", str(self.home), *argv])

    def stored(self):
        return json.loads((self.home / "project-manager.json").read_text(encoding="utf-8"))

    def test_add_list_move_and_drop(self):
        self.assertEqual(self.run_cli("add", "Alpha", str(self.root / "alpha"), "--folder", "Web"), 0)
        self.assertEqual(self.run_cli("add", "Beta", str(self.root / "beta")), 0)

        beta = self.stored()[1]["id"]
        self.assertEqual(self.run_cli("drop", beta[:6], "--onto-folder", "Web"), 0)
        self.assertEqual([p.get("folder") for p in self.stored()], ["Web", "Web"])

        self.assertEqual(self.run_cli("move", str(self.root / "beta")), 0)
        self.assertNotIn("folder", self.stored()[1])

        self.assertEqual(self.run_cli("list"), 0)
        self.assertEqual(self.run_cli("list", "--flat"), 0)
        text = self.output.getvalue()
        self.assertIn("Alpha", text)
        self.assertIn("Web", text)

    def test_folder_commands(self):
        self.run_cli("add", "Alpha", str(self.root / "alpha"), "--folder", "Web")

        self.assertEqual(self.run_cli("folder", "rename", "Web", "Sites"), 0)
        self.assertEqual(self.stored()[0]["folder"], "Sites")

        self.assertEqual(self.run_cli("folder", "delete", "Sites"), 0)
        self.assertNotIn("folder", self.stored()[0])

    def test_bad_icon_fails_with_exit_code(self):
        bad = self.root / "icon.txt"
        bad.write_text("x")

        code = self.run_cli("add", "Alpha", str(self.root / "alpha"), "--icon", str(bad))

        self.assertEqual(code, 1)
        self.assertIn("Unsupported icon format", self.output.getvalue())

    def test_duplicate_path_fails(self):
        self.run_cli("add", "Alpha", str(self.root / "alpha"))
        self.assertEqual(self.run_cli("add", "Again", str(self.root / "alpha")), 1)

    def test_icons_listing(self):
        icon = self.root / "logo.svg"
        icon.write_text("<svg/>")
        self.run_cli("add", "Alpha", str(self.root / "alpha"), "--icon", str(icon))

        self.assertEqual(self.run_cli("icons"), 0)
        self.assertIn("logo.svg", self.output.getvalue())

    def test_edit_config_creates_file(self):
        self.assertEqual(self.run_cli("edit-config"), 0)
        self.assertEqual(self.stored(), [])

    def test_unknown_project_is_a_warning_not_a_failure(self):
        self.assertEqual(self.run_cli("rename", "nope", "X"), 0)
        self.assertIn("No project matches", self.output.getvalue())

    def test_system_collation_is_enabled(self):
        with patch("project_catalog.__main__.use_system_collation") as collation:
            self.assertEqual(self.run_cli("list"), 0)
        collation.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
