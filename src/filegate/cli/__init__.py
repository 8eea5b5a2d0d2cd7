"""
CLI for filegate.

Provides command-line access to the guarded file readers.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from filegate.core.batch_loader import load_directory
from filegate.core.config import (
    DirectoryReadOptions,
    FilegateConfig,
    configure_logging,
    load_config,
)
from filegate.core.errors import ReadError, SecurityError
from filegate.core.file_loader import load_file
from filegate.core.file_scanner import BatchResult, DirectoryScanner
from filegate.core.path_validator import format_bytes, validate_path
from filegate.core.patterns import DEFAULT_EXCLUDE_PATTERNS

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="filegate",
    help="filegate - secure read-only file access",
    add_completion=False,
)

# Loaded once per invocation by the app callback
_state: dict[str, FilegateConfig] = {}


def _get_config() -> FilegateConfig:
    if "config" not in _state:
        _state["config"] = load_config()
    return _state["config"]


def _fail(message: str) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    raise typer.Exit(1)


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
):
    """Read files through the filegate security checks."""
    try:
        cfg = load_config(config)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    _state["config"] = cfg
    configure_logging(cfg.logging)


@app.command()
def read(
    path: str = typer.Argument(..., help="File to read, relative to the working directory"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Read a single file."""
    cfg = _get_config()
    try:
        file_content = load_file(path, cfg.security)
    except (SecurityError, ReadError) as e:
        _fail(f"{e} ({e.code.value})")

    if as_json:
        typer.echo(json.dumps(file_content.to_dict(), indent=2))
        return

    language = file_content.language or "unknown"
    console.print(
        f"[bold blue]{escape(file_content.path)}[/bold blue] "
        f"[dim]({language}, {format_bytes(file_content.size)})[/dim]",
        highlight=False,
    )
    lexer = Syntax.guess_lexer(file_content.path, file_content.content)
    console.print(Syntax(file_content.content, lexer, line_numbers=True))


def _print_directory_summary(directory: str, result: BatchResult) -> None:
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()
    summary.add_row("Total Files:", str(len(result.files)))
    summary.add_row("Total Size:", format_bytes(sum(f.size for f in result.files)))
    if result.diagnostics:
        summary.add_row("Skipped Files:", f"[red]{len(result.diagnostics)}[/red]")

    console.print(
        Panel(
            summary,
            title=f"[bold green]{escape(directory)}[/bold green]",
            border_style="green",
            expand=False,
        )
    )

    table = Table(title="Files", border_style="blue")
    table.add_column("Path", style="cyan")
    table.add_column("Language", style="magenta")
    table.add_column("Size", justify="right")
    for f in result.files:
        table.add_row(escape(f.path), f.language or "-", format_bytes(f.size))
    console.print(table)

    if result.diagnostics:
        console.print("\n[bold red]Skipped Files:[/bold red]")
        for d in result.diagnostics[:5]:
            console.print(f"  - {d.path}: {d.message}", markup=False, highlight=False)
        if len(result.diagnostics) > 5:
            console.print(f"  ... and {len(result.diagnostics) - 5} more")


@app.command("read-dir")
def read_dir(
    directory: str = typer.Argument(..., help="Directory to read"),
    include: Optional[list[str]] = typer.Option(
        None, "--include", "-i", help="Glob files must match. Can be specified multiple times."
    ),
    exclude: Optional[list[str]] = typer.Option(
        None, "--exclude", "-e", help="Extra glob to exclude. Can be specified multiple times."
    ),
    max_files: Optional[int] = typer.Option(
        None, "--max-files", "-n", min=1, help="Maximum number of files"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Recursively read the text files in a directory."""
    cfg = _get_config()
    options = DirectoryReadOptions(
        include=include or list(cfg.reader.default_include),
        exclude=exclude,
        max_files=max_files,
        security_config=cfg.security,
    )
    scanner = DirectoryScanner(
        default_excludes=[*DEFAULT_EXCLUDE_PATTERNS, *cfg.reader.default_exclude]
    )
    try:
        result = asyncio.run(
            load_directory(
                directory, options, max_workers=cfg.reader.max_workers, scanner=scanner
            )
        )
    except (SecurityError, ReadError) as e:
        _fail(f"{e} ({e.code.value})")

    if as_json:
        payload = {
            "directory": directory,
            "files": [f.to_dict() for f in result.files],
            "diagnostics": [d.to_dict() for d in result.diagnostics],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    _print_directory_summary(directory, result)


@app.command()
def check(
    paths: list[str] = typer.Argument(..., help="Paths to validate"),
):
    """Validate paths against the security policy without reading them."""
    cfg = _get_config()
    rejected = 0
    for path in paths:
        outcome = validate_path(path, cfg.security)
        if outcome.ok:
            console.print(f"  [green]✓[/green] {escape(path)}", highlight=False)
        else:
            rejected += 1
            console.print(
                f"  [red]✗[/red] {escape(path)} [dim]({outcome.code.value})[/dim]", highlight=False
            )

    if rejected:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
