"""
Icon store for the Project Catalog.

Icons live flat in the managed directory, next to the config document, and
are referenced by bare filename.
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from PIL import Image, UnidentifiedImageError

from .errors import IconFormatError
from .models import FolderMeta, ProjectRecord
from .utils import LogFn, null_log

ICON_EXTENSIONS = (".svg", ".png", ".jpg", ".jpeg", ".gif", ".ico", ".webp", ".bmp")
VECTOR_EXTENSIONS = {".svg"}


def is_allowed_icon(filename: str) -> bool:
    """Check the file extension against the icon allow-list."""
    return Path(filename).suffix.lower() in ICON_EXTENSIONS


def is_icon_referenced(
    name: str,
    records: list[ProjectRecord],
    folders: list[FolderMeta] | None = None,
) -> bool:
    """True if any project or folder still uses the given icon."""
    if any(record.icon == name for record in records):
        return True
    return any(meta.icon == name for meta in folders or [])


@dataclass
class IconInfo:
    """Details about a stored icon."""
    name: str
    size_bytes: int
    format: str
    width: int | None = None
    height: int | None = None


class IconStore:
    """
    Copies icon files into a managed directory and resolves them back.

    Not safe under concurrent callers: the free-name check and the copy are
    two separate steps.
    """

    def __init__(self, directory: Path, log: LogFn | None = None):
        self.directory = Path(directory)
        self.log = log or null_log

    def _unique_name(self, filename: str) -> str:
        # icon.svg -> icon_1.svg -> icon_2.svg ...
        candidate = Path(filename)
        if not (self.directory / candidate.name).exists():
            return candidate.name

        stem, suffix = candidate.stem, candidate.suffix
        counter = 1
        while (self.directory / f"{stem}_{counter}{suffix}").exists():
            counter += 1
        return f"{stem}_{counter}{suffix}"

    def store_icon(self, source: Path) -> str:
        """
        Copy an icon file into the managed directory.

        Args:
            source: Path to the user-selected icon file.

        Returns:
            The logical name (filename) of the stored copy. It never
            collides with a file that existed at call time.

        Raises:
            IconFormatError: If the extension is not an accepted icon format.
            FileNotFoundError: If the source file does not exist.
            OSError: If the copy fails.
        """
        source = Path(source)
        if not is_allowed_icon(source.name):
            raise IconFormatError(str(source), ICON_EXTENSIONS)
        if not source.is_file():
            raise FileNotFoundError(f"Icon file not found: {source}")

        self.directory.mkdir(parents=True, exist_ok=True)
        name = self._unique_name(source.name)
        shutil.copy2(source, self.directory / name)

        self.log(f"Stored icon {source} as {name}")
        return name

    def resolve_icon_path(self, name: str | None) -> Path | None:
        """
        Resolve a logical icon name to a file path.

        Returns:
            The path if the file still exists, else None so the caller can
            fall back to a default icon.
        """
        if not name or Path(name).name != name:
            return None
        path = self.directory / name
        return path if path.is_file() else None

    def delete_icon(self, name: str | None) -> bool:
        """
        Remove a stored icon.

        Returns:
            True if a file was deleted, False if there was nothing to delete.
        """
        path = self.resolve_icon_path(name)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        self.log(f"Deleted icon {name}")
        return True

    def list_icons(self) -> list[str]:
        """List stored icon filenames, sorted."""
        if not self.directory.is_dir():
            return []
        return sorted(
            p.name for p in self.directory.iterdir()
            if p.is_file() and is_allowed_icon(p.name)
        )

    def describe_icon(self, name: str) -> IconInfo | None:
        """
        Get size, format and (for raster icons) pixel dimensions.

        Returns:
            None if the icon does not exist.
        """
        path = self.resolve_icon_path(name)
        if path is None:
            return None

        suffix = path.suffix.lower()
        info = IconInfo(name=name, size_bytes=path.stat().st_size, format=suffix.lstrip(".").upper())
        if suffix in VECTOR_EXTENSIONS:
            return info

        try:
            with Image.open(path) as img:
                info.format = img.format or info.format
                info.width, info.height = img.size
        except (UnidentifiedImageError, OSError):
            # Extension says raster but content is not readable; keep file-level info
            pass
        return info
