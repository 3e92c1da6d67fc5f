"""
Exception types for the Project Catalog.
"""


class CatalogError(Exception):
    """Base class for catalog failures surfaced to the caller."""


class DuplicateProjectError(CatalogError):
    """A project with the same path is already catalogued."""

    def __init__(self, path: str):
        super().__init__(f"Project already catalogued: {path}")
        self.path = path


class IconFormatError(CatalogError, ValueError):
    """The icon file extension is not on the allow-list."""

    def __init__(self, source: str, allowed: tuple[str, ...]):
        super().__init__(
            f"Unsupported icon format: {source} (allowed: {', '.join(allowed)})"
        )
        self.source = source
