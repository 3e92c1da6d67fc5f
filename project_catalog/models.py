"""
Data model for the Project Catalog.

Records are stored as a flat, ordered list. Folders are derived from the
``folder`` tag on each record; the only folder state stored on its own is
optional metadata (an icon).
"""

from dataclasses import dataclass, field
from typing import Any, Literal

# Key order used when writing records, kept stable for hand-editing
RECORD_KEYS = ("id", "name", "path", "icon", "folder")
REQUIRED_KEYS = ("id", "name", "path")
OPTIONAL_KEYS = ("icon", "folder")


@dataclass
class ProjectRecord:
    """
    A single catalogued project folder.

    ``id`` is assigned once at creation and never reused. ``icon`` is a
    logical name resolved by the icon store; ``folder`` names the owning
    group, ``None`` meaning root.
    """
    id: str
    name: str
    path: str
    icon: str | None = None
    folder: str | None = None

    def to_dict(self) -> dict:
        """Serialize with stable key order, omitting absent optional fields."""
        data = {}
        for key in RECORD_KEYS:
            value = getattr(self, key)
            if value is None and key in OPTIONAL_KEYS:
                continue
            data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "ProjectRecord":
        """
        Build a record from a decoded JSON object.

        Raises:
            ValueError: If required fields are missing or any field is mistyped.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Project entry is not an object: {data!r}")

        for key in REQUIRED_KEYS:
            if not isinstance(data.get(key), str):
                raise ValueError(f"Project entry has missing or invalid '{key}': {data!r}")

        for key in OPTIONAL_KEYS:
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Project entry has invalid '{key}': {data!r}")

        return cls(
            id=data["id"],
            name=data["name"],
            path=data["path"],
            # Empty strings behave like absent fields
            icon=data.get("icon") or None,
            folder=data.get("folder") or None,
        )


@dataclass
class FolderMeta:
    """Stored metadata for a folder group."""
    name: str
    icon: str | None = None

    def to_dict(self) -> dict:
        data = {"name": self.name}
        if self.icon is not None:
            data["icon"] = self.icon
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "FolderMeta":
        if not isinstance(data, dict) or not isinstance(data.get("name"), str):
            raise ValueError(f"Folder entry has missing or invalid 'name': {data!r}")
        icon = data.get("icon")
        if icon is not None and not isinstance(icon, str):
            raise ValueError(f"Folder entry has invalid 'icon': {data!r}")
        return cls(name=data["name"], icon=icon or None)


@dataclass
class CatalogDocument:
    """Everything persisted in the config document."""
    projects: list[ProjectRecord] = field(default_factory=list)
    folders: list[FolderMeta] = field(default_factory=list)

    def folder_meta(self, name: str) -> FolderMeta | None:
        for meta in self.folders:
            if meta.name == name:
                return meta
        return None


# -----------------------------------------------------------------------------
# Tree nodes
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectNode:
    """Tree leaf wrapping a project record."""
    record: ProjectRecord
    kind: Literal["project"] = "project"


@dataclass(frozen=True)
class FolderNode:
    """Tree branch holding the projects of one group, name-sorted."""
    name: str
    projects: tuple[ProjectNode, ...] = ()
    icon: str | None = None
    kind: Literal["folder"] = "folder"


TreeNode = FolderNode | ProjectNode


# -----------------------------------------------------------------------------
# Drop targets
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class FolderTarget:
    """Drop onto a folder: the record joins that folder."""
    name: str
    kind: Literal["folder"] = "folder"


@dataclass(frozen=True)
class ProjectTarget:
    """Drop onto a project: the record joins that project's folder."""
    id: str
    kind: Literal["project"] = "project"


# None stands for the root background
DropTarget = FolderTarget | ProjectTarget | None
