#!/usr/bin/env python3
"""
tidyconf CLI - inspect configuration files and drop keys nobody uses.
"""

import json
import os
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, Tuple

import click
import yaml
from rich.console import Console
from rich.table import Table

from tidyconf import __version__
from tidyconf.config import BaseConfig
from tidyconf.core.exceptions import TidyconfError, from_exception
from tidyconf.core.logging import enable_logging, logging_requested
from tidyconf.document.tree import MISSING

console = Console()
err_console = Console(stderr=True)


def read_keep_file(path: Path) -> List[str]:
    """One dotted path per line. Blank lines and '#' comments are ignored."""
    paths = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.split("#", 1)[0].strip()
        if line:
            paths.append(line)
    return paths


def fail(error: TidyconfError, as_json: bool) -> NoReturn:
    """Report a library error and exit with status 1."""
    if as_json:
        click.echo(from_exception(error).model_dump_json(exclude_none=True))
    else:
        err_console.print(f"[bold red]✗ {error.message}[/bold red]")
        for suggestion in error.suggestions:
            err_console.print(f"  [dim]• {suggestion}[/dim]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="tidyconf")
def cli():
    """
    tidyconf - declared configuration keys and redundant key cleanup.
    """
    if logging_requested():
        enable_logging()


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Machine-readable output")
def keys(file: Path, as_json: bool):
    """List every leaf key of FILE."""
    try:
        config = BaseConfig(file)
    except TidyconfError as e:
        fail(e, as_json)

    leaf_paths = [str(p) for p in config.document.iter_leaf_paths()]
    if as_json:
        click.echo(json.dumps(leaf_paths))
        return

    table = Table(title=str(file))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for dotted in leaf_paths:
        table.add_row(dotted, repr(config.get(dotted)))
    console.print(table)


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("key")
@click.option("--json", "as_json", is_flag=True, help="Machine-readable output")
def get(file: Path, key: str, as_json: bool):
    """Print the value stored at KEY in FILE."""
    try:
        config = BaseConfig(file)
        value = config.document.get(key)
    except TidyconfError as e:
        fail(e, as_json)

    if value is MISSING:
        err_console.print(f"[yellow]Key not found: {key}[/yellow]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, (dict, list)):
        click.echo(yaml.safe_dump(value, default_flow_style=False, sort_keys=False), nl=False)
    else:
        click.echo(value)


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--keep", "-k", multiple=True, help="Declared key to keep (repeatable)")
@click.option(
    "--keep-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File listing declared keys, one per line",
)
@click.option("--dry-run", is_flag=True, help="Only report what would be removed")
@click.option("--json", "as_json", is_flag=True, help="Machine-readable output")
def prune(
    file: Path,
    keep: Tuple[str, ...],
    keep_file: Optional[Path],
    dry_run: bool,
    as_json: bool,
):
    """Remove every key of FILE that is not kept."""
    declared = list(keep)
    if keep_file:
        declared.extend(read_keep_file(keep_file))
    if not declared:
        raise click.UsageError("Nothing to keep: pass --keep or --keep-file")

    try:
        config = BaseConfig(file)
        for dotted in dict.fromkeys(declared):
            config.declare(dotted, None)

        if dry_run:
            removed = config.redundant_paths()
        else:
            removed = config.prune_redundant()
            if removed:
                config.save()
    except TidyconfError as e:
        fail(e, as_json)

    if as_json:
        click.echo(json.dumps({"removed": removed, "saved": bool(removed) and not dry_run}))
        return

    if not removed:
        console.print("[bold green]✓ Nothing to remove[/bold green]")
        return

    verb = "Would remove" if dry_run else "Removed"
    console.print(f"[bold cyan]{verb} {len(removed)} key(s) from {file}:[/bold cyan]")
    for dotted in removed:
        console.print(f"  [red]-[/red] {dotted}")


def main():
    """Main entry point"""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.")
        sys.exit(0)
    except Exception as e:
        click.echo(click.style(f"Error: {e}", fg="red"))
        if os.environ.get("TIDYCONF_DEBUG"):
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
