"""
Utility functions for the Project Catalog.

Includes:
- JSON save/load helpers
- Injectable log callables
- UI helpers
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from .models import FolderNode, ProjectRecord, TreeNode

# Global console instance
console = Console()

LogFn = Callable[[str], None]


def print_header(title: str, subtitle: str = ""):
    """Print a styled header."""
    console.print(Panel(f"[bold blue]{title}[/bold blue]\n[italic]{subtitle}[/italic]", expand=False))

def print_error(msg: str):
    console.print(f"[bold red]ERROR:[/bold red] {msg}")

def print_warning(msg: str):
    console.print(f"[bold yellow]WARNING:[/bold yellow] {msg}")

def print_success(msg: str):
    console.print(f"[bold green]SUCCESS:[/bold green] {msg}")


def print_catalog_tree(
    nodes: list[TreeNode],
    title: str = "Projects",
    show_path: bool = True,
    resolve_icon: Callable[[str | None], Path | None] | None = None,
    show_default_icon: bool = True,
):
    """
    Print the project tree.

    Args:
        nodes: Output of build_tree().
        title: Label for the tree root.
        show_path: Show each project's path after its name.
        resolve_icon: Maps a logical icon name to a file path, or None if stale.
        show_default_icon: Mark projects without a custom icon.
    """
    def icon_label(icon: str | None) -> str:
        if not icon:
            return "[dim](default icon)[/dim] " if show_default_icon else ""
        if resolve_icon and resolve_icon(icon) is None:
            return f"[red]({escape(icon)} missing)[/red] "
        return f"[magenta]({escape(icon)})[/magenta] "

    def project_label(record) -> str:
        label = f"{icon_label(record.icon)}[green]{escape(record.name)}[/green]"
        if show_path:
            label += f"  [dim]{escape(record.path)}[/dim]"
        return label

    tree = Tree(f"[bold]{title}[/bold]")
    if not nodes:
        tree.add("[italic]No projects yet[/italic]")

    for node in nodes:
        if node.kind == "folder":
            branch = tree.add(f"{_folder_icon_label(node)}[bold cyan]{escape(node.name)}[/bold cyan]")
            for child in node.projects:
                branch.add(project_label(child.record))
        else:
            tree.add(project_label(node.record))

    console.print(tree)


def print_project_table(records: list[ProjectRecord]):
    """Print projects in stored order, the order drag-and-drop works on."""
    table = Table(title="Stored Order")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Id", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Folder", style="magenta")
    table.add_column("Path")

    for i, record in enumerate(records, 1):
        table.add_row(str(i), record.id[:8], record.name, record.folder or "-", record.path)

    console.print(table)


def _folder_icon_label(node: FolderNode) -> str:
    return f"[magenta]({escape(node.icon)})[/magenta] " if node.icon else ""


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------

def null_log(msg: str) -> None:
    """Default logger: discards everything."""


def log_info(msg: str) -> None:
    console.print(f"[INFO] {msg}", markup=False, highlight=False)


def log_warning(msg: str) -> None:
    console.print(f"[WARN] {msg}", markup=False, highlight=False)


# -----------------------------------------------------------------------------
# JSON
# -----------------------------------------------------------------------------

def save_json(data: Any, path: Path) -> None:
    """
    Save data to a JSON file with pretty formatting.

    The file is written to a temporary sibling first and then swapped into
    place, so a failed write never leaves a truncated document behind.

    Args:
        data: The data to serialize.
        path: The output file path.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write('\n')
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def load_json(path: Path) -> Any:
    """
    Load data from a JSON file.

    Args:
        path: The input file path.

    Returns:
        The deserialized data.
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)
