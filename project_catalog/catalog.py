"""
Catalog service for the Project Catalog.

Each public method is one transaction against the config document:
load, mutate in memory, save, then notify subscribers so views can refresh.
Actions that reference a project or folder that no longer exists do nothing
and return False (or None); they do not save and do not notify.
"""

import os
import uuid
from pathlib import Path
from typing import Callable

from .errors import DuplicateProjectError
from .icons import IconStore, is_icon_referenced
from .models import CatalogDocument, DropTarget, FolderMeta, ProjectRecord, TreeNode
from .reorder import find_record, move_to_folder as move_record, reorder
from .store import load_document, save_document
from .tree import build_tree, folder_names
from .utils import LogFn, null_log


def new_project_id() -> str:
    return uuid.uuid4().hex


def normalize_path(path: str | Path) -> str:
    return os.path.normcase(os.path.normpath(str(path)))


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class Catalog:
    """
    Project catalog backed by a single JSON document.

    Args:
        config_file: Path to the config document.
        icon_store: Icon store; defaults to one rooted beside the config file.
        log: Optional logger for diagnostic lines.
        warn: Optional logger for a config that had to be ignored.
    """

    def __init__(
        self,
        config_file: Path,
        icon_store: IconStore | None = None,
        log: LogFn | None = None,
        warn: LogFn | None = None,
    ):
        self.config_file = Path(config_file)
        self.log = log or null_log
        self.warn = warn or self.log
        self.icons = icon_store or IconStore(self.config_file.parent, self.log)
        self._subscribers: list[Callable[[], None]] = []

    # -------------------------------------------------------------------------
    # Plumbing
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register a refresh callback fired after every successful mutation.

        Returns:
            A function that removes the callback again.
        """
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._subscribers):
            callback()

    def _load(self) -> CatalogDocument:
        return load_document(self.config_file, self.log, self.warn)

    def _commit(self, document: CatalogDocument):
        # A folder dies with its last project; its metadata goes with it
        in_use = set(folder_names(document.projects))
        document.folders = [meta for meta in document.folders if meta.name in in_use]

        # Write failures propagate; subscribers are only told about saved state
        save_document(document, self.config_file, self.log)
        self._notify()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def projects(self) -> list[ProjectRecord]:
        return self._load().projects

    def tree(self) -> list[TreeNode]:
        document = self._load()
        return build_tree(document.projects, document.folders)

    def folders(self) -> list[str]:
        """Folder names currently in use, in stored order."""
        return folder_names(self._load().projects)

    def get_project(self, project_id: str) -> ProjectRecord | None:
        return find_record(self._load().projects, project_id)

    def find_by_path(self, path: str | Path) -> ProjectRecord | None:
        """Find a project by folder path, comparing normalized paths."""
        target = normalize_path(path)
        for record in self._load().projects:
            if normalize_path(record.path) == target:
                return record
        return None

    def icon_path_for(self, record: ProjectRecord) -> Path | None:
        """Path of the record's custom icon, or None to use the default."""
        return self.icons.resolve_icon_path(record.icon)

    def folder_icon_path(self, name: str) -> Path | None:
        meta = self._load().folder_meta(name)
        return self.icons.resolve_icon_path(meta.icon) if meta else None

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------

    def add_project(
        self,
        name: str,
        path: str | Path,
        folder: str | None = None,
        icon_source: Path | None = None,
    ) -> ProjectRecord:
        """
        Catalogue a new project folder.

        Args:
            name: Display name.
            path: Project folder; stored as an absolute path.
            folder: Optional folder group to add it to.
            icon_source: Optional icon file to copy into the icon store.

        Returns:
            The created record.

        Raises:
            ValueError: If the name is blank.
            DuplicateProjectError: If the path is already catalogued.
            IconFormatError: If the icon is not an accepted format.
            OSError: If the icon copy or the save fails.
        """
        name = _clean(name)
        if not name:
            raise ValueError("Project name must not be empty")

        path = os.path.abspath(os.path.expanduser(str(path)))
        document = self._load()
        if any(normalize_path(r.path) == normalize_path(path) for r in document.projects):
            raise DuplicateProjectError(path)

        icon = self.icons.store_icon(icon_source) if icon_source else None
        record = ProjectRecord(
            id=new_project_id(),
            name=name,
            path=path,
            icon=icon,
            folder=_clean(folder),
        )
        document.projects.append(record)
        self._commit(document)
        return record

    def save_current_folder(
        self,
        path: str | Path,
        name: str | None = None,
        folder: str | None = None,
        icon_source: Path | None = None,
    ) -> ProjectRecord:
        """Add the currently open folder, named after its basename by default."""
        path = os.path.abspath(os.path.expanduser(str(path)))
        return self.add_project(name or os.path.basename(path.rstrip(os.sep)), path, folder, icon_source)

    def rename_project(self, project_id: str, new_name: str) -> bool:
        new_name = _clean(new_name)
        document = self._load()
        record = find_record(document.projects, project_id)
        if record is None or not new_name or new_name == record.name:
            return False

        record.name = new_name
        self._commit(document)
        return True

    def delete_project(self, project_id: str) -> bool:
        document = self._load()
        remaining = [r for r in document.projects if r.id != project_id]
        if len(remaining) == len(document.projects):
            return False

        document.projects = remaining
        self._commit(document)
        return True

    def change_icon(self, project_id: str, icon_source: Path) -> str | None:
        """
        Copy a new icon into the store and assign it to a project.

        Returns:
            The stored icon name, or None if the project does not exist.
        """
        document = self._load()
        record = find_record(document.projects, project_id)
        if record is None:
            return None

        record.icon = self.icons.store_icon(icon_source)
        self._commit(document)
        return record.icon

    def remove_icon(self, project_id: str) -> bool:
        """Reset a project to the default icon. The icon file is kept."""
        document = self._load()
        record = find_record(document.projects, project_id)
        if record is None or record.icon is None:
            return False

        record.icon = None
        self._commit(document)
        return True

    def move_to_folder(self, project_id: str, folder: str | None) -> bool:
        """Move a project to the end of ``folder``, or of the root with None."""
        document = self._load()
        if find_record(document.projects, project_id) is None:
            return False

        updated = move_record(document.projects, project_id, _clean(folder))
        if updated == document.projects:
            return False

        document.projects = updated
        self._commit(document)
        return True

    def drop(self, project_id: str, target: DropTarget) -> bool:
        """Apply a drag-and-drop. Returns False if nothing changed."""
        document = self._load()
        updated = reorder(document.projects, project_id, target)
        if updated == document.projects:
            return False

        document.projects = updated
        self._commit(document)
        return True

    # -------------------------------------------------------------------------
    # Folders
    # -------------------------------------------------------------------------

    def rename_folder(self, old_name: str, new_name: str) -> bool:
        """Rename a folder on every project in it, and on its metadata."""
        new_name = _clean(new_name)
        if not new_name or new_name == old_name:
            return False

        document = self._load()
        changed = False
        for record in document.projects:
            if record.folder == old_name:
                record.folder = new_name
                changed = True

        meta = document.folder_meta(old_name)
        if meta is not None:
            if document.folder_meta(new_name) is None:
                meta.name = new_name
            else:
                # Merging into an existing folder keeps that folder's metadata
                document.folders.remove(meta)
            changed = True

        if not changed:
            return False
        self._commit(document)
        return True

    def delete_folder(self, name: str) -> bool:
        """
        Dissolve a folder. Its projects move to the root, keeping their
        relative order; the folder's metadata entry is removed.
        """
        document = self._load()
        changed = False
        for record in document.projects:
            if record.folder == name:
                record.folder = None
                changed = True

        meta = document.folder_meta(name)
        if meta is not None:
            document.folders.remove(meta)
            changed = True

        if not changed:
            return False
        self._commit(document)
        return True

    def set_folder_icon(self, name: str, icon_source: Path) -> str | None:
        """
        Assign a custom icon to a folder in use.

        Returns:
            The stored icon name, or None if no project is in that folder.
        """
        document = self._load()
        if name not in folder_names(document.projects):
            return None

        icon = self.icons.store_icon(icon_source)
        meta = document.folder_meta(name)
        if meta is None:
            document.folders.append(FolderMeta(name=name, icon=icon))
        else:
            meta.icon = icon
        self._commit(document)
        return icon

    def remove_folder_icon(self, name: str) -> bool:
        document = self._load()
        meta = document.folder_meta(name)
        if meta is None:
            return False

        document.folders.remove(meta)
        self._commit(document)
        return True

    # -------------------------------------------------------------------------
    # Icons
    # -------------------------------------------------------------------------

    def prune_icons(self) -> list[str]:
        """Delete stored icons that no project or folder references."""
        document = self._load()
        removed = []
        for name in self.icons.list_icons():
            if is_icon_referenced(name, document.projects, document.folders):
                continue
            if self.icons.delete_icon(name):
                removed.append(name)
        return removed
