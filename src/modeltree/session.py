"""
Front-end agnostic control loop.

A front end supplies actions (``read_action``) and answers the confirmation
question; this module resolves selections, builds and previews the plan, and
materializes it. Flag-driven and interactive runs share every step below;
the only difference is that a non-interactive front end turns recoverable
input problems into a non-zero exit instead of a re-prompt.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from rich.console import Console
from rich.markup import escape

from .catalog import Ruleset
from .errors import EmptySelectionError, MissingRootError, SelectionFormatError
from .logging_utils import JsonlLogger, get_logger
from .materialize import MaterializeReport, RunMode, materialize
from .plan import DirectoryPlan, ModelRoots, build_plan, check_roots
from .selection import parse_custom_categories, resolve_selection
from .tree import preview

log = get_logger("session")

EXIT_OK = 0
EXIT_ERROR = 1


class ActionKind(str, enum.Enum):
    SELECT_MODELS = "models"
    SELECT_CATEGORIES = "categories"
    CUSTOM_CATEGORIES = "custom-categories"
    TOGGLE_MODE = "toggle-mode"
    PREVIEW = "preview"
    EXECUTE = "execute"
    QUIT = "quit"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    value: str = ""


@dataclass
class SessionState:
    ruleset: Ruleset
    mode: RunMode
    models: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)


class Frontend(Protocol):
    interactive: bool

    def render(self, state: SessionState) -> None: ...

    def read_action(self) -> Action: ...

    def confirm(self, question: str) -> bool: ...


# -----------------------------------------------------------------------------
# Steps
# -----------------------------------------------------------------------------
def _apply_selection(state: SessionState, action: Action, console: Console) -> None:
    if action.kind is ActionKind.SELECT_MODELS:
        catalog, what = state.ruleset.base_models, "model types"
    else:
        catalog, what = state.ruleset.lora_categories, "LoRA categories"

    result = resolve_selection(action.value, catalog)
    result.raise_for_format(action.value)
    warnings = result.warnings()
    if warnings:
        console.print(f"[yellow]Warning[/]: {escape('; '.join(warnings))}")
    log.info("selected %s: %s", what, ", ".join(result.selected) or "(none)")

    if action.kind is ActionKind.SELECT_MODELS:
        state.models = result.selected
    else:
        state.categories = result.selected


def _apply_custom_categories(state: SessionState, raw: str) -> None:
    names = parse_custom_categories(raw)
    state.ruleset = state.ruleset.with_categories(names)
    # drop selections that are no longer in the catalog
    state.categories = [c for c in state.categories if c in names]
    log.info("custom LoRA categories: %s", ", ".join(names))


def plan_for(state: SessionState, roots: ModelRoots) -> DirectoryPlan:
    """Validate the state and roots, then build the plan."""
    if not state.models:
        raise EmptySelectionError("model types")
    if not state.categories:
        raise EmptySelectionError("LoRA categories")
    check_roots(roots)
    plan = build_plan(roots, state.models, state.categories, state.ruleset)
    log.info("plan: %d directories (%s ruleset)", len(plan), state.ruleset.name)
    return plan


def print_report(report: MaterializeReport, console: Console) -> None:
    if report.mode.is_live:
        for p in report.created:
            console.print(f"  [green]created[/]  {escape(str(p))}")
        for p in report.existing:
            console.print(f"  [dim]already exists[/]  {escape(str(p))}")
        console.print(f"[bold green]Done[/]: {report.summary()}")
    else:
        console.print(f"[yellow]Dry run[/]: {report.summary()}. Use --live (or 'd' in the menu) to create them.")


# -----------------------------------------------------------------------------
# Loop
# -----------------------------------------------------------------------------
def run_session(
    frontend: Frontend,
    state: SessionState,
    roots: ModelRoots,
    *,
    console: Console,
    events: Optional[JsonlLogger] = None,
) -> int:
    """Drive *frontend* until it quits or a plan is executed; return the exit code."""
    while True:
        frontend.render(state)
        action = frontend.read_action()
        kind = action.kind

        if kind is ActionKind.QUIT:
            return EXIT_OK

        if kind in (ActionKind.SELECT_MODELS, ActionKind.SELECT_CATEGORIES):
            try:
                _apply_selection(state, action, console)
            except SelectionFormatError as e:
                console.print(f"[red]Error[/]: {escape(str(e))}")
                if not frontend.interactive:
                    return EXIT_ERROR
            continue

        if kind is ActionKind.CUSTOM_CATEGORIES:
            try:
                _apply_custom_categories(state, action.value)
            except ValueError as e:
                console.print(f"[red]Error[/]: {escape(str(e))}")
                if not frontend.interactive:
                    return EXIT_ERROR
            continue

        if kind is ActionKind.TOGGLE_MODE:
            state.mode = state.mode.toggled()
            continue

        try:
            plan = plan_for(state, roots)
        except EmptySelectionError as e:
            console.print(f"[red]Error[/]: {escape(str(e))}; select at least one.")
            if not frontend.interactive:
                return EXIT_ERROR
            continue
        except MissingRootError as e:
            console.print(f"[red]Error[/]: {escape(str(e))}")
            return EXIT_ERROR

        console.rule("[bold blue]Preview")
        preview(plan.paths, console)
        console.print(f"[cyan]{len(plan)}[/] directories planned ([bold]{state.mode.value}[/])")
        if kind is ActionKind.PREVIEW:
            continue

        if not frontend.confirm("Create these directories?"):
            console.print("[dim]Aborted, nothing was created.[/]")
            return EXIT_OK
        report = materialize(plan.paths, state.mode, events=events)
        print_report(report, console)
        return EXIT_OK
