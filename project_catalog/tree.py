"""
Tree building for the Project Catalog.

Projects are stored as a flat list tagged with an optional folder name; the
tree is a projection of that list, rebuilt on demand and never stored.
"""

import locale

from .models import FolderMeta, FolderNode, ProjectNode, ProjectRecord, TreeNode


def use_system_collation() -> bool:
    """
    Sort names by the user's locale instead of the C locale.

    Returns:
        False if the environment names a locale that is not installed.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        return False
    return True


def name_sort_key(name: str) -> tuple:
    """Locale-aware, case-insensitive ordering with the raw name as tiebreaker."""
    # strxfrm rejects embedded NUL characters
    return (locale.strxfrm(name.casefold().replace("\0", "")), name)


def folder_names(records: list[ProjectRecord]) -> list[str]:
    """Distinct folder names in first-seen order."""
    seen: dict[str, None] = {}
    for record in records:
        if record.folder:
            seen.setdefault(record.folder, None)
    return list(seen)


def build_tree(
    records: list[ProjectRecord],
    folders: list[FolderMeta] | None = None,
) -> list[TreeNode]:
    """
    Group records into folders and root-level projects.

    Folders come first, then root projects. Folders, and the projects
    inside each folder, are sorted by name. Sorting is stable, so records
    with equal names keep their stored order.

    Args:
        records: The stored, ordered project list.
        folders: Optional folder metadata supplying folder icons.

    Returns:
        A list of FolderNode and ProjectNode values.
    """
    buckets: dict[str, list[ProjectRecord]] = {}
    root: list[ProjectRecord] = []

    for record in records:
        if record.folder:
            buckets.setdefault(record.folder, []).append(record)
        else:
            root.append(record)

    icons = {meta.name: meta.icon for meta in folders or []}

    folder_nodes = [
        FolderNode(
            name=name,
            projects=tuple(
                ProjectNode(record)
                for record in sorted(members, key=lambda r: name_sort_key(r.name))
            ),
            icon=icons.get(name),
        )
        for name, members in buckets.items()
    ]
    folder_nodes.sort(key=lambda node: name_sort_key(node.name))

    root_nodes = [
        ProjectNode(record)
        for record in sorted(root, key=lambda r: name_sort_key(r.name))
    ]

    return [*folder_nodes, *root_nodes]
