"""
Config store for the Project Catalog.

Reads and writes the project list (and optional folder metadata) as a JSON
document. Two shapes are accepted on load:

    [ {project}, ... ]                                  # plain list
    {"projects": [ {project}, ... ], "folders": [...]}  # with folder metadata

A document that fails validation anywhere is treated as empty; nothing is
ever partially loaded.
"""

import json
from pathlib import Path

from .models import CatalogDocument, FolderMeta, ProjectRecord
from .utils import LogFn, load_json, null_log, save_json


def _parse_document(data) -> CatalogDocument:
    """
    Validate decoded JSON and convert it into a CatalogDocument.

    Raises:
        ValueError: If the shape is not a valid catalog document.
    """
    if isinstance(data, list):
        raw_projects, raw_folders = data, []
    elif isinstance(data, dict):
        if "projects" not in data:
            raise ValueError("Missing 'projects' key")
        raw_projects = data["projects"]
        raw_folders = data.get("folders", [])
        if not isinstance(raw_projects, list) or not isinstance(raw_folders, list):
            raise ValueError("'projects' and 'folders' must be lists")
    else:
        raise ValueError(f"Unexpected top-level JSON type: {type(data).__name__}")

    projects = [ProjectRecord.from_dict(item) for item in raw_projects]
    folders = [FolderMeta.from_dict(item) for item in raw_folders]

    seen: set[str] = set()
    for record in projects:
        if record.id in seen:
            raise ValueError(f"Duplicate project id: {record.id!r}")
        seen.add(record.id)

    return CatalogDocument(projects=projects, folders=folders)


def load_document(
    path: Path,
    log: LogFn | None = None,
    warn: LogFn | None = None,
) -> CatalogDocument:
    """
    Load the full catalog document.

    Args:
        path: Path to the config document.
        log: Optional logger for diagnostic lines.
        warn: Optional logger for recoverable problems; defaults to ``log``.

    Returns:
        The parsed document. Empty if the file is missing, is not valid
        JSON, or any entry fails validation.
    """
    log = log or null_log
    warn = warn or log
    path = Path(path)

    if not path.exists():
        log(f"No config at {path}, starting empty")
        return CatalogDocument()

    try:
        document = _parse_document(load_json(path))
    except json.JSONDecodeError as e:
        warn(f"Ignoring malformed config {path}: {e}")
        return CatalogDocument()
    except ValueError as e:
        warn(f"Ignoring invalid config {path}: {e}")
        return CatalogDocument()
    except (OSError, UnicodeDecodeError) as e:
        warn(f"Could not read config {path}: {e}")
        return CatalogDocument()

    log(f"Loaded {len(document.projects)} projects, {len(document.folders)} folder entries from {path}")
    return document


def save_document(document: CatalogDocument, path: Path, log: LogFn | None = None) -> None:
    """
    Persist the catalog document.

    Writes a plain list when there is no folder metadata, so that simple
    configs stay simple to edit by hand.

    Raises:
        OSError: If the write fails. No partial file is left behind.
    """
    log = log or null_log
    projects = [record.to_dict() for record in document.projects]

    if document.folders:
        data = {
            "projects": projects,
            "folders": [meta.to_dict() for meta in document.folders],
        }
    else:
        data = projects

    save_json(data, path)
    log(f"Saved {len(projects)} projects to {path}")


def load_projects(
    path: Path,
    log: LogFn | None = None,
    warn: LogFn | None = None,
) -> list[ProjectRecord]:
    """Load only the project list. See load_document()."""
    return load_document(path, log, warn).projects


def save_projects(
    records: list[ProjectRecord],
    path: Path,
    folders: list[FolderMeta] | None = None,
    log: LogFn | None = None,
) -> None:
    """Save the project list, with optional folder metadata. See save_document()."""
    save_document(CatalogDocument(projects=list(records), folders=list(folders or [])), path, log)


def ensure_config_file(path: Path) -> Path:
    """Create an empty config document if none exists yet."""
    path = Path(path)
    if not path.exists():
        save_json([], path)
    return path
