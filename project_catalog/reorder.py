"""
Reorder engine for the Project Catalog.

Computes where a record lands in the flat, ordered project list after a
drag-and-drop or an explicit "move to folder".

Insertion policy: the moved record is always appended to the end of the run
of records sharing its new folder (or to the end of the root records). Drops
do not carry a before/after position; dropping onto a project means "join
that project's folder".
"""

from dataclasses import replace

from .models import DropTarget, FolderTarget, ProjectRecord, ProjectTarget


class _Unresolved:
    pass


# Returned by effective_group() when a project target no longer exists
UNRESOLVED = _Unresolved()


def find_record(records: list[ProjectRecord], record_id: str) -> ProjectRecord | None:
    for record in records:
        if record.id == record_id:
            return record
    return None


def effective_group(records: list[ProjectRecord], target: DropTarget) -> str | None | _Unresolved:
    """
    Resolve the folder a record joins when dropped on a target.

    Args:
        records: Current ordered list.
        target: FolderTarget, ProjectTarget, or None for the root background.

    Returns:
        The folder name, None for root, or UNRESOLVED if the target project
        does not exist.
    """
    if target is None:
        return None
    if isinstance(target, FolderTarget):
        return target.name or None
    if isinstance(target, ProjectTarget):
        target_record = find_record(records, target.id)
        if target_record is None:
            return UNRESOLVED
        return target_record.folder
    raise TypeError(f"Unsupported drop target: {target!r}")


def insertion_index(records: list[ProjectRecord], group: str | None) -> int:
    """
    Index just after the last record in ``group``.

    Falls back to the end of the list when the group has no members, which
    is how a move into a new folder creates it.
    """
    index = len(records)
    for i, record in enumerate(records):
        if record.folder == group:
            index = i + 1
    return index


def move_to_folder(
    records: list[ProjectRecord],
    moved_id: str,
    folder: str | None,
) -> list[ProjectRecord]:
    """
    Move a record into ``folder`` (None for root), appending it to that group.

    Returns:
        A new list. The input list and its records are not modified. If
        ``moved_id`` is unknown, an unchanged copy is returned.
    """
    index = next((i for i, record in enumerate(records) if record.id == moved_id), None)
    if index is None:
        return list(records)

    remaining = list(records)
    moved = remaining.pop(index)
    updated = replace(moved, folder=folder or None)
    remaining.insert(insertion_index(remaining, updated.folder), updated)
    return remaining


def reorder(
    records: list[ProjectRecord],
    moved_id: str,
    target: DropTarget,
) -> list[ProjectRecord]:
    """
    Apply a drag-and-drop of one record onto a target.

    Args:
        records: Current ordered list.
        moved_id: Id of the dragged record.
        target: Folder, project, or None (root background).

    Returns:
        The updated list. Dropping a record onto itself, or referencing a
        record that does not exist, leaves the order unchanged.
    """
    if isinstance(target, ProjectTarget) and target.id == moved_id:
        return list(records)

    group = effective_group(records, target)
    if group is UNRESOLVED:
        return list(records)

    return move_to_folder(records, moved_id, group)

