"""Rich terminal reporter — the grouped tree with severity pills."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from scanview.diagnostics.projector import DiagnosticMap
from scanview.results.severity import Severity
from scanview.tree.grouping import count_leaves
from scanview.tree.models import GroupNode

_SEVERITY_STYLE = {
    Severity.HIGH: "bold white on red",
    Severity.MEDIUM: "bold black on yellow",
    Severity.LOW: "bold black on bright_cyan",
    Severity.INFO: "bold black on white",
    Severity.EMPTY: "dim",
}


def _severity_pill(severity: Severity) -> Text:
    return Text(f" {severity.value or 'NONE'} ", style=_SEVERITY_STYLE[severity])


def _node_text(node: GroupNode) -> Text:
    if node.result is not None:
        text = _severity_pill(node.result.severity)
        text.append(" ")
        text.append(node.label)
        location = node.result.first_location
        if location is not None and location.file_name:
            text.append(f"  {location.file_name}:{location.line}", style="magenta")
        return text
    text = Text(node.label, style="bold cyan")
    if node.description:
        text.append(f"  {node.description}", style="dim")
    return text


def _add_children(branch: Tree, node: GroupNode) -> None:
    for child in node.children or ():
        sub = branch.add(_node_text(child))
        _add_children(sub, child)


def build_rich_tree(root: GroupNode) -> Tree:
    tree = Tree(Text(root.label or "Scan results", style="bold"), guide_style="dim")
    _add_children(tree, root)
    return tree


def render(
    root: GroupNode,
    diagnostics: DiagnosticMap,
    *,
    total_results: int,
    console: Optional[Console] = None,
    show_summary: bool = True,
) -> None:
    """Print the grouped results tree to the terminal."""
    console = console or Console()

    if not root.children:
        console.print("[dim]No results to show for the active filters.[/dim]")
    else:
        console.print(build_rich_tree(root))

    if show_summary:
        console.print()
        console.print(f"[dim]Results:[/dim]      {total_results}")
        console.print(f"[dim]Shown:[/dim]        {count_leaves(root)}")
        console.print(f"[dim]Diagnostics:[/dim]  {diagnostics.total()} in {len(diagnostics)} file(s)")
