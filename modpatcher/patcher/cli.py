from __future__ import annotations
import subprocess
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..utils.config import CONFIG_FILE, PatcherConfig, load_config
from ..utils.errors import ConfigurationError, StatusSaveError
from ..utils.log import setup_logging
from ..utils.store import StatusStore
from .applier import FAILED, RunSummary
from .archive import ARCHIVE_ERRORS, list_entries
from .hook import announce_restart, startup_hook

app = typer.Typer(add_completion=False, help="Merge patch folders into mod jars.")
console = Console()


@app.callback()
def root(
    ctx: typer.Context,
    config: Path = typer.Option(CONFIG_FILE, "--config", "-c", help="YAML config file"),
    patches: Optional[Path] = typer.Option(None, "--patches", help="Patches root"),
    mods: Optional[Path] = typer.Option(None, "--mods", help="Archives root"),
    status: Optional[Path] = typer.Option(None, "--status", help="Status file"),
    suffix: Optional[str] = typer.Option(None, "--suffix", help="Patch file suffix"),
    ext: Optional[str] = typer.Option(None, "--ext", help="Archive extension"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    setup_logging(verbose)
    try:
        cfg = load_config(config).with_overrides(
            patches_dir=patches, archives_dir=mods, status_file=status,
            patch_suffix=suffix, archive_ext=ext,
        )
    except ConfigurationError as e:
        console.print(f"[red]Config error:[/] {escape(str(e))}")
        raise typer.Exit(2)
    ctx.obj = cfg


def print_summary(summary: RunSummary) -> None:
    if not summary.outcomes:
        return
    table = Table("folder", "status", "files", "detail")
    for o in summary.outcomes:
        style = "red" if o.status == FAILED else ("green" if o.files_added else "dim")
        detail = str(o.error.cause) if o.error else (str(o.archive) if o.archive else "")
        table.add_row(escape(o.name), f"[{style}]{o.status}[/]", str(o.files_added), escape(detail))
    console.print(table)


def _run(cfg: PatcherConfig) -> RunSummary:
    summary = startup_hook(cfg)
    if summary.error is not None:
        console.print(f"[red]✗ {escape(str(summary.error))}[/]")
        raise typer.Exit(2)
    print_summary(summary)
    return summary


@app.command("apply")
def apply(ctx: typer.Context):
    """Apply every unprocessed patch folder once."""
    summary = _run(ctx.obj)
    if summary.restart_required:
        announce_restart(console)
    else:
        console.print("[dim]No new patch files.[/]")


@app.command("launch")
def launch(ctx: typer.Context, command: List[str] = typer.Argument(..., help="Host command, after --")):
    """Patch, then start the host unless a restart is required."""
    summary = _run(ctx.obj)
    if summary.restart_required:
        announce_restart(console)
        raise typer.Exit(0)
    console.print(f"[bold]→[/] {escape(' '.join(command))}")
    try:
        r = subprocess.run(command)
    except OSError as e:
        console.print(f"[red]Cannot start host:[/] {escape(str(e))}")
        raise typer.Exit(127)
    raise typer.Exit(r.returncode)


@app.command("status")
def status(ctx: typer.Context):
    """Show which patch folders have been applied."""
    cfg: PatcherConfig = ctx.obj
    record = StatusStore(cfg.status_path).load()
    if not record:
        console.print(f"[dim]No status recorded in {escape(str(cfg.status_path))}[/]")
        return
    table = Table("folder", "applied", "jar entries")
    for name in sorted(record):
        jar = cfg.archive_path(name)
        try:
            count = str(len(list_entries(jar))) if jar.is_file() else "-"
        except ARCHIVE_ERRORS:
            count = "[red]unreadable[/]"
        table.add_row(escape(name), "[green]yes[/]" if record[name] else "[yellow]no[/]", count)
    console.print(table)


@app.command("reset")
def reset(
    ctx: typer.Context,
    names: Optional[List[str]] = typer.Argument(None, help="Patch folders to re-apply"),
    all_: bool = typer.Option(False, "--all", help="Reset every recorded folder"),
):
    """Mark patch folders as not applied so the next run merges them again."""
    cfg: PatcherConfig = ctx.obj
    store = StatusStore(cfg.status_path)
    targets = list(store.load()) if all_ else list(names or [])
    if not targets:
        console.print("[red]Nothing to reset: pass folder names or --all[/]")
        raise typer.Exit(2)
    try:
        store.reset(targets)
    except StatusSaveError as e:
        console.print(f"[red]✗ {escape(str(e))}[/]")
        raise typer.Exit(1)
    for name in targets:
        console.print(f"[green]reset[/] {escape(name)}")


if __name__ == "__main__":
    app()
