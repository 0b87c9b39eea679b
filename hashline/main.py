"""Main CLI entry point for hashline."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console

from hashline import __version__
from hashline.config.loader import configure_logging, find_config_file, load_config
from hashline.config.models import HashlineConfig
from hashline.engine.errors import HashlineError
from hashline.engine.fingerprint import fingerprint
from hashline.tools.base import ToolResult
from hashline.tools.registry import ToolRegistry

app = typer.Typer(
    name="hashline",
    help="Edit files through <line>:<hash> references",
    add_completion=False,
)

console = Console(stderr=True)
out = Console(highlight=False, soft_wrap=True, emoji=False)


def version_callback(value: bool):
    if value:
        console.print(f"hashline v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
):
    """Hashline - line addressing by content hash."""
    pass


def _load(config_file: Optional[Path], workdir: Optional[Path], verbose: bool) -> HashlineConfig:
    overrides = {}
    if workdir:
        overrides["paths.cwd"] = str(workdir)
    try:
        config = load_config(config_file or find_config_file(), overrides)
    except Exception as e:
        console.print(f"Error loading configuration: {e}", style="red", markup=False)
        raise typer.Exit(1)
    configure_logging(config, verbose=verbose)
    return config


def _content(value: str) -> str:
    return sys.stdin.read() if value == "-" else value


def _report(result: ToolResult) -> None:
    if result.success:
        out.print(result.output, markup=False)
        return
    console.print(result.to_message(), style="red", markup=False)
    raise typer.Exit(1)


ConfigOption = typer.Option(None, "--config", "-c", help="Path to config file")
WorkdirOption = typer.Option(None, "--workdir", "-w", help="Project directory")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Debug logging")


@app.command("hash")
def hash_command(
    lines: List[str] = typer.Argument(..., help="Line contents to fingerprint"),
):
    """Print the fingerprint of each argument."""
    for line in lines:
        out.print(f"{fingerprint(line)}  {line}", markup=False)


@app.command("read")
def read_command(
    file_path: str = typer.Argument(..., help="File to read"),
    offset: int = typer.Option(1, "--offset", help="1-based line to start from"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum number of lines"),
    config_file: Optional[Path] = ConfigOption,
    workdir: Optional[Path] = WorkdirOption,
    verbose: bool = VerboseOption,
):
    """Show a file with <line>:<hash> tags."""
    registry = ToolRegistry.from_config(_load(config_file, workdir, verbose))
    args: dict[str, Any] = {"file_path": file_path, "offset": offset}
    if limit:
        args["limit"] = limit
    _report(registry.execute("read", args))


@app.command("edit")
def edit_command(
    file_path: str = typer.Argument(..., help="File to edit"),
    start: Optional[str] = typer.Option(None, "--start", help="First line to replace (e.g. 3:cc7)"),
    end: Optional[str] = typer.Option(None, "--end", help="Last line to replace"),
    after: Optional[str] = typer.Option(None, "--after", help="Line to insert after"),
    content: str = typer.Option(..., "--content", help="New content ('-' reads stdin)"),
    use_edit_tool: bool = typer.Option(
        False, "--exact", help="Resolve to an exact string replacement instead of a patch"
    ),
    config_file: Optional[Path] = ConfigOption,
    workdir: Optional[Path] = WorkdirOption,
    verbose: bool = VerboseOption,
):
    """Replace a line or range, or insert after a line."""
    registry = ToolRegistry.from_config(_load(config_file, workdir, verbose))
    args = {
        "file_path": file_path,
        "start_hash": start,
        "end_hash": end,
        "after_hash": after,
        "content": _content(content),
    }
    args = {k: v for k, v in args.items() if v is not None}
    _report(registry.execute("edit" if use_edit_tool else "apply_patch", args))


@app.command("patch")
def patch_command(
    edits_file: str = typer.Argument(..., help="JSON array of edits ('-' reads stdin)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the generated patch only"),
    config_file: Optional[Path] = ConfigOption,
    workdir: Optional[Path] = WorkdirOption,
    verbose: bool = VerboseOption,
):
    """Apply a batch of hashline edits across files."""
    registry = ToolRegistry.from_config(_load(config_file, workdir, verbose))
    raw = sys.stdin.read() if edits_file == "-" else Path(edits_file).read_text(encoding="utf-8")
    try:
        edits = json.loads(raw)
    except json.JSONDecodeError as e:
        console.print(f"Invalid JSON in {edits_file}: {e}", style="red", markup=False)
        raise typer.Exit(1)

    if dry_run:
        try:
            args = registry.plugin.before_tool("apply_patch", {"edits": edits})
        except HashlineError as e:
            console.print(f"Error: {e}", style="red", markup=False)
            raise typer.Exit(1)
        out.print(args["patch_text"], markup=False)
        return

    _report(registry.execute("apply_patch", {"edits": edits}))


@app.command("config")
def show_config(
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
):
    """Show current configuration."""
    path = config_file or find_config_file()
    if path:
        console.print(f"Loading config from: {path}")
        config = load_config(path)
    else:
        console.print("No config file found, using defaults")
        config = load_config()

    out.print(config.model_dump_json(indent=2), markup=False)


if __name__ == "__main__":
    app()
