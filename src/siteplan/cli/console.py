"""
Rich console output helpers for the siteplan CLI.
"""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from siteplan.core.tree import SiteItemType, SiteNode

# Global console instance
console = Console()

ITEM_STYLES = {
    SiteItemType.FOLDER: "bold blue",
    SiteItemType.PAGE: "white",
    SiteItemType.IMAGE: "magenta",
    SiteItemType.FLOW: "cyan",
    SiteItemType.PPT: "yellow",
}


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]![/yellow] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message in blue."""
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def print_table(
    title: str,
    columns: list,
    rows: list,
    show_header: bool = True,
) -> None:
    """
    Print a formatted table.

    Args:
        title: Table title
        columns: List of column names
        rows: List of row data (each row is a list of values)
        show_header: Whether to show column headers
    """
    table = Table(title=title, show_header=show_header)

    for col in columns:
        table.add_column(col, overflow="fold")

    for row in rows:
        table.add_row(*[escape(str(v)) for v in row])

    console.print(table)


def _node_label(node: SiteNode, show_ids: bool) -> str:
    style = ITEM_STYLES.get(node.type, "white")
    label = f"[{style}]{escape(node.name)}[/{style}] [dim]({node.type.value})[/dim]"
    if node.is_folder and not node.is_open:
        label += " [dim]+[/dim]"
    if node.url:
        label += f" [dim]{escape(node.url)}[/dim]"
    if show_ids:
        label += f" [dim]{node.id}[/dim]"
    return label


def build_site_tree(
    title: str,
    roots: List[SiteNode],
    include_collapsed: bool = False,
    show_ids: bool = True,
) -> Tree:
    """
    Build a rich Tree for a site item tree.

    Closed folders are shown with a ``+`` marker and their children are
    hidden unless ``include_collapsed`` is set.
    """
    tree = Tree(f"[bold]{escape(title)}[/bold]")

    def add(branch: Tree, nodes: List[SiteNode]) -> None:
        for node in nodes:
            child = branch.add(_node_label(node, show_ids))
            if node.children and (include_collapsed or node.is_open):
                add(child, node.children)

    add(tree, roots)
    return tree


def print_site_tree(title: str, roots: List[SiteNode], include_collapsed: bool = False) -> Optional[Tree]:
    if not roots:
        print_info("No site items")
        return None
    tree = build_site_tree(title, roots, include_collapsed=include_collapsed)
    console.print(tree)
    return tree
