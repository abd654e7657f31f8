#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
modeltree CLI

Scaffold the checkpoint / LoRA folder hierarchy under <root>/models.

Usage
-----
Interactive menu (no selection flags):
    modeltree --root /opt/ComfyUI

Flag driven, preview only:
    modeltree --root /opt/ComfyUI --models a,c --categories all

Flag driven, create after confirmation:
    modeltree --models "flux, wan" --categories all --live

Selections accept letters (a = first option), full names (any case),
or the exact token 'all'. Exit code 1 on missing roots, malformed
selections, empty selections or configuration errors.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .catalog import PRESETS
from .config import describe, load_settings
from .errors import ConfigError, MissingRootError
from .frontend import FlagFrontend, InteractiveFrontend
from .logging_utils import JsonlLogger, init_logger
from .materialize import RunMode
from .plan import ModelRoots, check_roots
from .session import EXIT_ERROR, SessionState, run_session

app = typer.Typer(
    name="modeltree",
    help="Create the checkpoint / LoRA directory hierarchy for model files.",
    add_completion=False,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"modeltree {__version__}")
        raise typer.Exit()


def _summary_table(rows) -> None:
    table = Table(title="modeltree", show_header=False)
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for k, v in rows:
        table.add_row(str(k), str(v))
    console.print(table)


def _create_roots(roots: ModelRoots) -> None:
    for p in roots:
        if not p.is_dir():
            p.mkdir(parents=True, exist_ok=True)
            console.print(f"[green]Created root[/] {escape(str(p))}")


@app.command()
def main(
    root: Optional[Path] = typer.Option(
        None, "--root", help="Installation directory holding models/ (default: $MODELTREE_ROOT or CWD)"
    ),
    models: Optional[str] = typer.Option(
        None, "--models", help="Model types: letters, names (comma separated) or 'all'"
    ),
    categories: Optional[str] = typer.Option(
        None, "--categories", help="LoRA categories: letters, names (comma separated) or 'all'"
    ),
    custom_categories: Optional[str] = typer.Option(
        None, "--custom-categories", help="Replace the LoRA category list (comma separated names)"
    ),
    live: Optional[bool] = typer.Option(
        None,
        "--live/--dry-run",
        "--execute/--preview",
        help="Create directories after confirmation (flag mode defaults to dry run)",
    ),
    ruleset: Optional[str] = typer.Option(
        None, "--ruleset", help=f"Layout preset: {', '.join(PRESETS)}"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML settings file (default: $MODELTREE_CONFIG)"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    create_roots: bool = typer.Option(
        False, "--create-roots", help="Create models/checkpoints and models/loras if missing"
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Append a plain-text log here"),
    events: Optional[Path] = typer.Option(None, "--events", help="Append created directories as JSONL events"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR, CRITICAL"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
    ),
) -> None:
    """Preview and create the model directory tree."""
    try:
        settings = load_settings(config).merged(
            root=root, ruleset=ruleset, log_file=log_file, log_level=log_level
        )
        rules = settings.build_ruleset()
        roots = settings.roots()
    except ConfigError as e:
        console.print(f"[red]Config error[/]: {escape(str(e))}")
        raise typer.Exit(code=EXIT_ERROR)

    logger = init_logger(settings.log_file, level=settings.log_level)
    logger.info("checkpoint root: %s", roots.checkpoints)
    logger.info("lora root: %s", roots.loras)

    if create_roots:
        _create_roots(roots)
    try:
        check_roots(roots)
    except MissingRootError as e:
        console.print(f"[red]Error[/]: {escape(str(e))}")
        console.print("[dim]Point --root at your installation or pass --create-roots.[/]")
        raise typer.Exit(code=EXIT_ERROR)

    interactive = models is None and categories is None and custom_categories is None
    if live is None:
        mode = RunMode.LIVE if interactive else RunMode.DRY_RUN
    else:
        mode = RunMode.LIVE if live else RunMode.DRY_RUN

    _summary_table(describe(settings) + [("mode", mode.value)])

    if interactive:
        frontend = InteractiveFrontend(console)
    else:
        frontend = FlagFrontend(
            models,
            categories,
            custom_categories=custom_categories,
            assume_yes=yes,
            console=console,
        )

    state = SessionState(ruleset=rules, mode=mode)
    try:
        code = run_session(
            frontend,
            state,
            roots,
            console=console,
            events=JsonlLogger(events) if events else None,
        )
    except OSError as e:
        logger.error("filesystem error: %s", e)
        console.print(f"[red]Error[/]: {escape(str(e))}")
        code = EXIT_ERROR
    raise typer.Exit(code=code)


def _entry() -> None:
    app()


if __name__ == "__main__":
    _entry()
