"""
Project Catalog
===============

Catalog project folders, group them into named folders, attach custom icons,
and reorder them by drag-and-drop. Everything persists to one JSON document.
"""

__version__ = "1.0.0"

from .catalog import Catalog
from .config import Settings
from .errors import CatalogError, DuplicateProjectError, IconFormatError
from .icons import IconStore, ICON_EXTENSIONS, is_allowed_icon
from .models import (
    ProjectRecord,
    FolderMeta,
    CatalogDocument,
    FolderNode,
    ProjectNode,
    FolderTarget,
    ProjectTarget,
)
from .reorder import reorder, move_to_folder, effective_group, insertion_index
from .store import load_projects, save_projects, load_document, save_document
from .tree import build_tree, folder_names
from .watcher import ConfigWatcher

__all__ = [
    "Catalog",
    "Settings",
    "CatalogError",
    "DuplicateProjectError",
    "IconFormatError",
    "IconStore",
    "ICON_EXTENSIONS",
    "is_allowed_icon",
    "ProjectRecord",
    "FolderMeta",
    "CatalogDocument",
    "FolderNode",
    "ProjectNode",
    "FolderTarget",
    "ProjectTarget",
    "reorder",
    "move_to_folder",
    "effective_group",
    "insertion_index",
    "load_projects",
    "save_projects",
    "load_document",
    "save_document",
    "build_tree",
    "folder_names",
    "ConfigWatcher",
]
