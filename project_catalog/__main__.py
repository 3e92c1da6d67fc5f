#!/usr/bin/env python3
"""
Project Catalog - CLI Entry Point
=================================

Usage:
    python -m project_catalog list
    python -m project_catalog add "My App" ~/code/my-app --folder Web --icon logo.svg
    python -m project_catalog move 3f2a Web
    python -m project_catalog drop 3f2a --onto-project 9c01
    python -m project_catalog folder rename Web Frontend
"""

import argparse
import os
import sys
from pathlib import Path
from rich.table import Table

from .catalog import Catalog
from .config import Settings
from .errors import CatalogError
from .icons import IconStore
from .models import FolderTarget, ProjectRecord, ProjectTarget
from .store import ensure_config_file
from .tree import use_system_collation
from .utils import (
    console,
    log_info,
    log_warning,
    null_log,
    print_catalog_tree,
    print_error,
    print_header,
    print_project_table,
    print_success,
    print_warning,
)


def build_catalog(args) -> tuple[Catalog, Settings]:
    settings = Settings.from_env(home=args.home)
    log = null_log if args.quiet else log_info
    icons = IconStore(settings.icon_dir, log)
    return Catalog(settings.config_file, icons, log, warn=log_warning), settings


def resolve_project(catalog: Catalog, ref: str) -> ProjectRecord | None:
    """
    Find a project by id, folder path, or unique id prefix.
    """
    projects = catalog.projects()
    for record in projects:
        if record.id == ref:
            return record

    by_path = catalog.find_by_path(os.path.abspath(os.path.expanduser(ref)))
    if by_path:
        return by_path

    matches = [r for r in projects if r.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        print_warning(f"'{ref}' matches {len(matches)} projects; use a longer id")
    return None


def _require_project(catalog: Catalog, ref: str) -> ProjectRecord | None:
    record = resolve_project(catalog, ref)
    if record is None:
        print_warning(f"No project matches '{ref}'")
    return record


# =============================================================================
# Commands
# =============================================================================

def cmd_list(args) -> int:
    """Show the catalog as a tree, or in stored order."""
    catalog, settings = build_catalog(args)

    if args.flat:
        print_project_table(catalog.projects())
        return 0

    print_catalog_tree(
        catalog.tree(),
        title=str(settings.config_file),
        show_path=settings.show_project_path,
        resolve_icon=catalog.icons.resolve_icon_path,
        show_default_icon=settings.show_default_icon,
    )
    return 0


def cmd_add(args) -> int:
    """Catalogue a project folder."""
    catalog, _ = build_catalog(args)

    path = Path(args.path).expanduser()
    if not path.is_dir():
        print_warning(f"Folder does not exist (yet): {path}")

    record = catalog.add_project(args.name, path, args.folder, args.icon)
    print_success(f"Added '{record.name}' ({record.id[:8]})")
    return 0


def cmd_save_current(args) -> int:
    """Catalogue the current working directory."""
    catalog, _ = build_catalog(args)
    record = catalog.save_current_folder(args.path or os.getcwd(), args.name, args.folder, args.icon)
    print_success(f"Saved '{record.name}' ({record.path})")
    return 0


def cmd_rename(args) -> int:
    catalog, _ = build_catalog(args)
    record = _require_project(catalog, args.project)
    if record and catalog.rename_project(record.id, args.name):
        print_success(f"Renamed '{record.name}' to '{args.name.strip()}'")
    return 0


def cmd_remove(args) -> int:
    catalog, _ = build_catalog(args)
    record = _require_project(catalog, args.project)
    if record and catalog.delete_project(record.id):
        print_success(f"Removed '{record.name}'")
    return 0


def cmd_move(args) -> int:
    """Move a project into a folder, or back to the root."""
    catalog, _ = build_catalog(args)
    record = _require_project(catalog, args.project)
    if record is None:
        return 0

    if catalog.move_to_folder(record.id, args.folder):
        where = f"folder '{args.folder}'" if args.folder else "root"
        print_success(f"Moved '{record.name}' to {where}")
    else:
        console.print("[dim]Nothing to move[/dim]")
    return 0


def cmd_drop(args) -> int:
    """Simulate dropping a project onto a folder, a project, or the root."""
    catalog, _ = build_catalog(args)
    record = _require_project(catalog, args.project)
    if record is None:
        return 0

    if args.onto_folder:
        target = FolderTarget(args.onto_folder)
    elif args.onto_project:
        target_record = _require_project(catalog, args.onto_project)
        if target_record is None:
            return 0
        target = ProjectTarget(target_record.id)
    else:
        target = None

    if catalog.drop(record.id, target):
        print_success(f"Dropped '{record.name}'")
    else:
        console.print("[dim]No change[/dim]")
    return 0


def cmd_icon(args) -> int:
    catalog, _ = build_catalog(args)
    record = _require_project(catalog, args.project)
    if record is None:
        return 0

    if args.icon_command == "set":
        name = catalog.change_icon(record.id, args.file)
        print_success(f"Icon for '{record.name}' set to {name}")
    elif catalog.remove_icon(record.id):
        print_success(f"Icon for '{record.name}' reset")
    return 0


def cmd_folder(args) -> int:
    catalog, _ = build_catalog(args)

    if args.folder_command == "rename":
        changed = catalog.rename_folder(args.name, args.new_name)
        message = f"Renamed folder '{args.name}' to '{args.new_name.strip()}'"
    elif args.folder_command == "delete":
        changed = catalog.delete_folder(args.name)
        message = f"Deleted folder '{args.name}'; its projects moved to the root"
    elif args.folder_command == "icon":
        icon = catalog.set_folder_icon(args.name, args.file)
        changed = icon is not None
        message = f"Icon for folder '{args.name}' set to {icon}"
    else:
        changed = catalog.remove_folder_icon(args.name)
        message = f"Icon for folder '{args.name}' reset"

    if changed:
        print_success(message)
    else:
        print_warning(f"No folder named '{args.name}'")
    return 0


def cmd_icons(args) -> int:
    """List stored icons, optionally deleting unreferenced ones."""
    catalog, settings = build_catalog(args)

    if args.prune:
        removed = catalog.prune_icons()
        print_success(f"Removed {len(removed)} unused icons")

    table = Table(title=f"Icons in {settings.icon_dir}")
    table.add_column("Name", style="cyan")
    table.add_column("Format", style="magenta")
    table.add_column("Size")
    table.add_column("Bytes", justify="right")

    for name in catalog.icons.list_icons():
        info = catalog.icons.describe_icon(name)
        if info is None:
            continue
        size = f"{info.width}x{info.height}" if info.width else "-"
        table.add_row(info.name, info.format, size, str(info.size_bytes))

    console.print(table)
    return 0


def cmd_edit_config(args) -> int:
    """Make sure the config document exists and print where it is."""
    settings = Settings.from_env(home=args.home)
    path = ensure_config_file(settings.config_file)
    console.print(str(path), markup=False, highlight=False)
    return 0


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Project Catalog - organize project folders into groups",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--home", type=Path, default=None,
                        help="Managed directory for config and icons (default: $PROJECT_CATALOG_HOME or ~/.project-catalog)")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Suppress [INFO] lines")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- LIST command ---
    list_parser = subparsers.add_parser("list", help="Show the project tree")
    list_parser.add_argument("--flat", action="store_true",
                             help="Show projects in stored order instead of the tree")
    list_parser.set_defaults(func=cmd_list)

    # --- ADD command ---
    add_parser = subparsers.add_parser("add", help="Add a project folder")
    add_parser.add_argument("name", type=str, help="Display name")
    add_parser.add_argument("path", type=str, help="Project folder")
    add_parser.add_argument("--folder", type=str, help="Folder group to add it to")
    add_parser.add_argument("--icon", type=Path, help="Icon file to copy into the catalog")
    add_parser.set_defaults(func=cmd_add)

    # --- SAVE-CURRENT command ---
    save_parser = subparsers.add_parser("save-current", help="Add the current directory as a project")
    save_parser.add_argument("path", type=str, nargs="?", help="Folder (default: current directory)")
    save_parser.add_argument("--name", type=str, help="Display name (default: folder name)")
    save_parser.add_argument("--folder", type=str, help="Folder group to add it to")
    save_parser.add_argument("--icon", type=Path, help="Icon file to copy into the catalog")
    save_parser.set_defaults(func=cmd_save_current)

    # --- RENAME / REMOVE commands ---
    rename_parser = subparsers.add_parser("rename", help="Rename a project")
    rename_parser.add_argument("project", help="Project id, id prefix, or path")
    rename_parser.add_argument("name", help="New name")
    rename_parser.set_defaults(func=cmd_rename)

    remove_parser = subparsers.add_parser("remove", help="Remove a project from the catalog")
    remove_parser.add_argument("project", help="Project id, id prefix, or path")
    remove_parser.set_defaults(func=cmd_remove)

    # --- MOVE command ---
    move_parser = subparsers.add_parser("move", help="Move a project to a folder")
    move_parser.add_argument("project", help="Project id, id prefix, or path")
    move_parser.add_argument("folder", nargs="?", default=None,
                             help="Target folder; omit to move to the root")
    move_parser.set_defaults(func=cmd_move)

    # --- DROP command ---
    drop_parser = subparsers.add_parser("drop", help="Drag-and-drop a project onto a target")
    drop_parser.add_argument("project", help="Project id, id prefix, or path")
    onto = drop_parser.add_mutually_exclusive_group()
    onto.add_argument("--onto-folder", type=str, help="Drop onto a folder")
    onto.add_argument("--onto-project", type=str, help="Drop onto another project")
    drop_parser.set_defaults(func=cmd_drop)

    # --- ICON command ---
    icon_parser = subparsers.add_parser("icon", help="Set or clear a project icon")
    icon_sub = icon_parser.add_subparsers(dest="icon_command", required=True)
    icon_set = icon_sub.add_parser("set", help="Set a custom icon")
    icon_set.add_argument("project", help="Project id, id prefix, or path")
    icon_set.add_argument("file", type=Path, help="Icon file")
    icon_clear = icon_sub.add_parser("clear", help="Reset to the default icon")
    icon_clear.add_argument("project", help="Project id, id prefix, or path")
    icon_parser.set_defaults(func=cmd_icon)

    # --- FOLDER command ---
    folder_parser = subparsers.add_parser("folder", help="Manage folder groups")
    folder_sub = folder_parser.add_subparsers(dest="folder_command", required=True)
    folder_rename = folder_sub.add_parser("rename", help="Rename a folder")
    folder_rename.add_argument("name")
    folder_rename.add_argument("new_name")
    folder_delete = folder_sub.add_parser("delete", help="Delete a folder, keeping its projects")
    folder_delete.add_argument("name")
    folder_icon = folder_sub.add_parser("icon", help="Set a folder icon")
    folder_icon.add_argument("name")
    folder_icon.add_argument("file", type=Path)
    folder_clear = folder_sub.add_parser("clear-icon", help="Reset a folder icon")
    folder_clear.add_argument("name")
    folder_parser.set_defaults(func=cmd_folder)

    # --- ICONS command ---
    icons_parser = subparsers.add_parser("icons", help="List stored icons")
    icons_parser.add_argument("--prune", action="store_true",
                              help="Delete icons no project or folder uses")
    icons_parser.set_defaults(func=cmd_icons)

    # --- EDIT-CONFIG command ---
    edit_parser = subparsers.add_parser("edit-config", help="Create the config file if needed and print its path")
    edit_parser.set_defaults(func=cmd_edit_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    use_system_collation()

    if args.command is None:
        print_header("Project Catalog", "Organize project folders into groups")
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130
    except (CatalogError, ValueError, OSError) as e:
        print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
