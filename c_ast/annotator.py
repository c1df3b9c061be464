"""Annotates source lines with the node kind that owns them."""

from __future__ import annotations

from typing import Optional, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .models import NodeType
from .tree import SyntaxTree

STYLES = {
    NodeType.COMMENT: "green",
    NodeType.CODE: "cyan",
    NodeType.DEFINITION: "magenta",
    NodeType.MEMBER: "yellow",
    NodeType.CHAR: "white",
    NodeType.NA: "dim",
}


def parse_range(value: Optional[str], total: int) -> Tuple[int, int]:
    """Parse ``START:END`` (either side optional) into a half-open line range."""
    if not value:
        return 0, total

    start_text, sep, end_text = value.partition(":")
    try:
        start = int(start_text) if start_text.strip() else 0
        end = int(end_text) if sep and end_text.strip() else (total if sep else start + 1)
    except ValueError:
        raise ValueError(f"Invalid range '{value}', expected START:END") from None

    if start < 0 or end < start:
        raise ValueError(f"Invalid range '{value}'")
    return start, min(end, total)


def annotate_line(tree: SyntaxTree, lno: int) -> Text:
    entry = tree.index.get(lno)
    kind = entry.type if entry else NodeType.NA
    owner = "" if entry is None or kind is NodeType.NA else str(entry.node_id)

    text = Text()
    text.append(f"{lno:>5} ", style="dim")
    text.append(f"{kind.value:<8}", style=f"bold {STYLES[kind]}")
    text.append(f"{owner:>6} ", style="dim")
    text.append(tree.source[lno], style=STYLES[kind])
    return text


def annotate(
    tree: SyntaxTree,
    console: Console,
    line_range: Optional[str] = None,
) -> int:
    """Print every line in *line_range* with its kind. Returns lines printed."""
    start, end = parse_range(line_range, len(tree.source))
    for lno in range(start, end):
        console.print(annotate_line(tree, lno), highlight=False, soft_wrap=True)
    return max(end - start, 0)


def stats_table(tree: SyntaxTree, title: str = "") -> Table:
    table = Table(title=title or None)
    table.add_column("Container")
    table.add_column("Nodes", justify="right")
    table.add_column("Associated", justify="right")

    for kind, nodes in tree.containers.items():
        associated = sum(1 for node in nodes.values() if node.assocs)
        table.add_row(
            Text(kind.value, style=STYLES[kind]),
            str(len(nodes)),
            str(associated),
        )

    members = sum(len(node.inner) for node in tree.nodes(NodeType.DEFINITION))
    table.add_row(Text(NodeType.MEMBER.value, style=STYLES[NodeType.MEMBER]), str(members), "-")
    return table
