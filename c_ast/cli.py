"""Typer-based CLI for c-ast."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from . import __version__, config
from .annotator import annotate, stats_table
from .config_manager import DEFAULT_CONFIG, save_config
from .models import InvariantViolation
from .processor import ast_from_file
from .tree import SyntaxTree

console = Console()

app = typer.Typer(
    help="🌳 c-ast — line-by-line AST extraction for C-like sources.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"c-ast v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Log every classified line."),
):
    """c-ast: classify C source lines into comments, code, definitions and members."""
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _load(input_path: Path) -> SyntaxTree:
    try:
        return ast_from_file(input_path)
    except FileNotFoundError:
        console.print(f"[red]✗[/red] Invalid input file: {input_path}")
        raise typer.Exit(1)
    except InvariantViolation as exc:
        console.print(f"[red]✗[/red] Failed to process {input_path}: {exc}")
        raise typer.Exit(2)


@app.command("transform")
def transform_command(
    input_path: Path = typer.Argument(..., help="File you wish to extract nodes from."),
    skip_index: bool = typer.Option(
        config.SKIP_INDEX, "--skip-index/--with-index", help="Leave the line index out of the output."
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout."),
    indent: int = typer.Option(config.JSON_INDENT, min=0, max=8, help="JSON indentation."),
):
    """Transform INPUT into an AST json."""
    tree = _load(input_path)
    payload = tree.to_json(skip_index=skip_index, indent=indent)

    if output is None:
        typer.echo(payload)
        return

    output.write_text(payload + "\n", encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote {len(tree.source)} lines of AST to {output}")


@app.command("annotate")
def annotate_command(
    input_path: Path = typer.Argument(..., help="File you wish to annotate."),
    line_range: Optional[str] = typer.Option(
        None, "--range", "-r", help="Zero-based line range START:END (END exclusive)."
    ),
):
    """Annotate INPUT with node metadata, one line at a time."""
    tree = _load(input_path)
    try:
        annotate(tree, console, line_range)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--range")


@app.command("stats")
def stats_command(
    input_path: Path = typer.Argument(..., help="File to summarise."),
):
    """Show node counts per container."""
    tree = _load(input_path)
    console.print(stats_table(tree, title=f"{input_path.name} ({len(tree.source)} lines)"))


@app.command("show-config")
def show_config():
    """Print the effective configuration."""
    typer.echo(json.dumps(config.settings(), indent=2))


@app.command("set-config")
def set_config(
    key: str = typer.Argument(..., help=f"One of: {', '.join(DEFAULT_CONFIG)}."),
    value: str = typer.Argument(..., help="New value; lists are comma separated."),
):
    """Persist one setting to the config file."""
    if key not in DEFAULT_CONFIG:
        raise typer.BadParameter(f"Unknown key '{key}'.", param_hint="KEY")

    default = DEFAULT_CONFIG[key]
    if isinstance(default, bool):
        parsed = value.lower() in {"1", "true", "yes", "on"}
    elif isinstance(default, int):
        try:
            parsed = int(value)
        except ValueError:
            raise typer.BadParameter(f"'{value}' is not an integer.", param_hint="VALUE")
    elif isinstance(default, list):
        parsed = [item.strip() for item in value.split(",") if item.strip()]
    else:
        parsed = value

    if not save_config({key: parsed}, config.CONFIG_FILE):
        console.print(f"[red]✗[/red] Could not write {config.CONFIG_FILE}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] {key} = {parsed!r} saved to {config.CONFIG_FILE}")


if __name__ == "__main__":
    app()
