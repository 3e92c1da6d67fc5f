import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from project_catalog.catalog import Catalog
from project_catalog.errors import DuplicateProjectError, IconFormatError
from project_catalog.models import FolderTarget, ProjectRecord, ProjectTarget
from project_catalog.store import save_projects


class CatalogTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.config = self.root / "home" / "project-manager.json"
        self.catalog = Catalog(self.config)
        self.refresh = MagicMock()
        self.catalog.subscribe(self.refresh)

        self.icon = self.root / "logo.svg"
        self.icon.write_text("<svg/>", encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def seed(self, records):
        save_projects(records, self.config)

    def stored(self):
        return json.loads(self.config.read_text(encoding="utf-8"))


class TestProjects(CatalogTestCase):
    def test_add_project(self):
        record = self.catalog.add_project("  My App ", self.root / "app", folder="Web", icon_source=self.icon)

        self.assertEqual(record.name, "My App")
        self.assertEqual(record.folder, "Web")
        self.assertEqual(record.icon, "logo.svg")
        self.assertTrue(Path(record.path).is_absolute())
        self.assertEqual(self.catalog.projects(), [record])
        self.assertEqual(self.catalog.icon_path_for(record), self.config.parent / "logo.svg")
        self.refresh.assert_called_once()

    def test_ids_are_unique(self):
        a = self.catalog.add_project("A", self.root / "a")
        b = self.catalog.add_project("B", self.root / "b")
        self.assertNotEqual(a.id, b.id)

    def test_add_rejects_duplicate_path_and_blank_name(self):
        self.catalog.add_project("A", self.root / "a")

        with self.assertRaises(DuplicateProjectError):
            self.catalog.add_project("Again", str(self.root / "a") + "/")
        with self.assertRaises(ValueError):
            self.catalog.add_project("   ", self.root / "b")
        self.assertEqual(len(self.catalog.projects()), 1)

    def test_add_with_bad_icon_saves_nothing(self):
        bad = self.root / "logo.txt"
        bad.write_text("x")
        with self.assertRaises(IconFormatError):
            self.catalog.add_project("A", self.root / "a", icon_source=bad)
        self.assertFalse(self.config.exists())
        self.refresh.assert_not_called()

    def test_save_current_folder_defaults_to_basename(self):
        record = self.catalog.save_current_folder(self.root / "my-project")
        self.assertEqual(record.name, "my-project")
        self.assertEqual(self.catalog.find_by_path(self.root / "my-project" / "."), record)

    def test_rename_and_delete(self):
        record = self.catalog.add_project("A", self.root / "a")

        self.assertTrue(self.catalog.rename_project(record.id, " B "))
        self.assertEqual(self.catalog.get_project(record.id).name, "B")
        self.assertFalse(self.catalog.rename_project(record.id, "B"))
        self.assertFalse(self.catalog.rename_project(record.id, "  "))

        self.assertTrue(self.catalog.delete_project(record.id))
        self.assertEqual(self.catalog.projects(), [])

    def test_change_and_remove_icon(self):
        record = self.catalog.add_project("A", self.root / "a")

        self.assertEqual(self.catalog.change_icon(record.id, self.icon), "logo.svg")
        self.assertEqual(self.catalog.change_icon(record.id, self.icon), "logo_1.svg")
        self.assertTrue(self.catalog.remove_icon(record.id))
        self.assertNotIn("icon", self.stored()[0])
        self.assertFalse(self.catalog.remove_icon(record.id))

    def test_missing_targets_are_silent_noops(self):
        self.seed([ProjectRecord(id="1", name="A", path="/a")])
        before = self.config.read_text(encoding="utf-8")

        self.assertFalse(self.catalog.rename_project("x", "New"))
        self.assertFalse(self.catalog.delete_project("x"))
        self.assertIsNone(self.catalog.change_icon("x", self.icon))
        self.assertFalse(self.catalog.remove_icon("x"))
        self.assertFalse(self.catalog.move_to_folder("x", "Web"))
        self.assertFalse(self.catalog.drop("x", None))
        self.assertFalse(self.catalog.rename_folder("Nope", "Other"))
        self.assertFalse(self.catalog.delete_folder("Nope"))
        self.assertIsNone(self.catalog.set_folder_icon("Nope", self.icon))
        self.assertFalse(self.catalog.remove_folder_icon("Nope"))

        self.assertEqual(self.config.read_text(encoding="utf-8"), before)
        self.refresh.assert_not_called()

    def test_write_failure_propagates_without_refresh(self):
        self.seed([ProjectRecord(id="1", name="A", path="/a")])
        with patch("project_catalog.catalog.save_document", side_effect=OSError("read-only")):
            with self.assertRaises(OSError):
                self.catalog.rename_project("1", "B")
        self.refresh.assert_not_called()
        self.assertEqual(self.catalog.get_project("1").name, "A")

    def test_unsubscribe(self):
        unsubscribe = self.catalog.subscribe(self.refresh)
        unsubscribe()
        self.catalog.add_project("A", self.root / "a")
        self.refresh.assert_called_once()


class TestOrdering(CatalogTestCase):
    def setUp(self):
        super().setUp()
        self.seed([
            ProjectRecord(id="1", name="A", path="/a"),
            ProjectRecord(id="2", name="B", path="/b", folder="Web"),
            ProjectRecord(id="3", name="C", path="/c"),
        ])

    def test_drop_onto_folder(self):
        self.assertTrue(self.catalog.drop("1", FolderTarget("Web")))
        self.assertEqual([(p["id"], p.get("folder")) for p in self.stored()],
                         [("2", "Web"), ("1", "Web"), ("3", None)])
        self.refresh.assert_called_once()

    def test_drop_onto_self_saves_nothing(self):
        self.assertFalse(self.catalog.drop("2", ProjectTarget("2")))
        self.refresh.assert_not_called()

    def test_move_to_folder_then_root(self):
        self.assertTrue(self.catalog.move_to_folder("3", "Web"))
        self.assertEqual([p["id"] for p in self.stored()], ["1", "2", "3"])
        self.assertEqual(self.catalog.get_project("3").folder, "Web")

        self.assertTrue(self.catalog.move_to_folder("2", None))
        self.assertEqual([p["id"] for p in self.stored()], ["1", "2", "3"])
        self.assertIsNone(self.catalog.get_project("2").folder)

    def test_tree(self):
        tree = self.catalog.tree()
        self.assertEqual(tree[0].kind, "folder")
        self.assertEqual([n.record.id for n in tree[1:]], ["1", "3"])


class TestFolders(CatalogTestCase):
    def setUp(self):
        super().setUp()
        self.seed([
            ProjectRecord(id="1", name="A", path="/a", folder="Web"),
            ProjectRecord(id="2", name="B", path="/b"),
            ProjectRecord(id="3", name="C", path="/c", folder="Web"),
        ])

    def test_delete_folder_moves_projects_to_root_in_order(self):
        self.assertTrue(self.catalog.delete_folder("Web"))

        stored = self.stored()
        self.assertEqual([p["id"] for p in stored], ["1", "2", "3"])
        self.assertTrue(all("folder" not in p for p in stored))
        self.assertEqual(self.catalog.folders(), [])

    def test_rename_folder_cascades(self):
        self.catalog.set_folder_icon("Web", self.icon)

        self.assertTrue(self.catalog.rename_folder("Web", " Frontend "))

        self.assertEqual([p.folder for p in self.catalog.projects()], ["Frontend", None, "Frontend"])
        self.assertEqual(self.stored()["folders"], [{"name": "Frontend", "icon": "logo.svg"}])
        self.assertIsNotNone(self.catalog.folder_icon_path("Frontend"))

    def test_folder_icon_lifecycle(self):
        self.assertEqual(self.catalog.set_folder_icon("Web", self.icon), "logo.svg")
        self.assertEqual(self.catalog.tree()[0].icon, "logo.svg")

        self.assertTrue(self.catalog.delete_folder("Web"))
        self.assertIsInstance(self.stored(), list)

    def test_folder_icon_does_not_outlive_its_last_project(self):
        self.catalog.set_folder_icon("Web", self.icon)
        self.catalog.delete_project("1")
        self.catalog.delete_project("3")
        self.assertIsInstance(self.stored(), list)

        self.assertTrue(self.catalog.move_to_folder("2", "Web"))

        self.assertIsNone(self.catalog.tree()[0].icon)
        self.assertIsNone(self.catalog.folder_icon_path("Web"))

    def test_folder_icon_dropped_when_folder_is_emptied_by_moves(self):
        self.catalog.set_folder_icon("Web", self.icon)
        self.catalog.drop("1", None)
        self.catalog.move_to_folder("3", None)

        self.assertIsInstance(self.stored(), list)
        self.catalog.drop("2", FolderTarget("Web"))
        self.assertIsNone(self.catalog.tree()[0].icon)

    def test_remove_folder_icon(self):
        self.catalog.set_folder_icon("Web", self.icon)
        self.assertTrue(self.catalog.remove_folder_icon("Web"))
        self.assertIsNone(self.catalog.folder_icon_path("Web"))

    def test_prune_icons(self):
        self.catalog.set_folder_icon("Web", self.icon)
        self.catalog.change_icon("2", self.icon)
        self.catalog.icons.store_icon(self.icon)

        removed = self.catalog.prune_icons()

        self.assertEqual(removed, ["logo_2.svg"])
        self.assertEqual(self.catalog.icons.list_icons(), ["logo.svg", "logo_1.svg"])


class TestMalformedState(CatalogTestCase):
    def test_corrupt_document_reads_as_empty(self):
        self.config.parent.mkdir(parents=True)
        self.config.write_text("{not json", encoding="utf-8")
        warn = MagicMock()
        catalog = Catalog(self.config, warn=warn)

        self.assertEqual(catalog.projects(), [])
        warn.assert_called_once()


if __name__ == "__main__":
    unittest.main()
