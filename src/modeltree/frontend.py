"""
Front ends for the session loop.

FlagFrontend replays the command-line options as a fixed script of actions.
InteractiveFrontend draws a lettered menu of both catalogs and reads one
command key at a time.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Optional, Sequence, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .session import Action, ActionKind, SessionState


def _ask_yes_no(console: Console, question: str) -> bool:
    try:
        return Confirm.ask(question, console=console, default=False)
    except EOFError:
        return False


class FlagFrontend:
    interactive = False

    def __init__(
        self,
        models: Optional[str],
        categories: Optional[str],
        *,
        custom_categories: Optional[str] = None,
        assume_yes: bool = False,
        console: Optional[Console] = None,
    ):
        self.assume_yes = assume_yes
        self.console = console or Console()
        self._queue: Deque[Action] = deque()
        if custom_categories is not None:
            self._queue.append(Action(ActionKind.CUSTOM_CATEGORIES, custom_categories))
        self._queue.append(Action(ActionKind.SELECT_MODELS, models or ""))
        self._queue.append(Action(ActionKind.SELECT_CATEGORIES, categories or ""))
        self._queue.append(Action(ActionKind.EXECUTE))

    def render(self, state: SessionState) -> None:
        return None

    def read_action(self) -> Action:
        return self._queue.popleft() if self._queue else Action(ActionKind.QUIT)

    def confirm(self, question: str) -> bool:
        if self.assume_yes:
            return True
        return _ask_yes_no(self.console, question)


# -----------------------------------------------------------------------------
# Interactive menu
# -----------------------------------------------------------------------------
COMMANDS: Dict[str, Tuple[ActionKind, str]] = {
    "m": (ActionKind.SELECT_MODELS, "choose model types"),
    "c": (ActionKind.SELECT_CATEGORIES, "choose LoRA categories"),
    "u": (ActionKind.CUSTOM_CATEGORIES, "use custom LoRA categories"),
    "d": (ActionKind.TOGGLE_MODE, "toggle dry-run / live"),
    "p": (ActionKind.PREVIEW, "preview plan"),
    "x": (ActionKind.EXECUTE, "execute"),
    "q": (ActionKind.QUIT, "quit"),
}

_VALUE_PROMPTS = {
    ActionKind.SELECT_MODELS: "Model types (letters or names, comma separated, or 'all')",
    ActionKind.SELECT_CATEGORIES: "LoRA categories (letters or names, comma separated, or 'all')",
    ActionKind.CUSTOM_CATEGORIES: "Custom LoRA categories (comma separated names)",
}


def _options_table(title: str, catalog: Sequence[str], selected: Sequence[str], video: frozenset = frozenset()) -> Table:
    table = Table(title=title, show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="bold cyan", no_wrap=True)
    table.add_column("Sel", no_wrap=True)
    table.add_column("Name")
    for i, name in enumerate(catalog):
        key = chr(ord("a") + i) if i < 26 else " "
        mark = "[green]✔[/]" if name in selected else " "
        label = f"{name} [dim](video)[/]" if name in video else name
        table.add_row(key, mark, label)
    return table


class InteractiveFrontend:
    interactive = True

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, state: SessionState) -> None:
        rs = state.ruleset
        self.console.print()
        self.console.print(_options_table("Model types", rs.base_models, state.models, rs.video_models))
        self.console.print(_options_table("LoRA categories", rs.lora_categories, state.categories))
        legend = "  ".join(f"[bold]{k}[/] {label}" for k, (_, label) in COMMANDS.items())
        mode = "[green]live[/]" if state.mode.is_live else "[yellow]dry-run[/]"
        self.console.print(Panel(legend, title=f"ruleset: {rs.name} | mode: {mode}", expand=False))

    def read_action(self) -> Action:
        try:
            key = Prompt.ask("Action", choices=list(COMMANDS), console=self.console)
        except EOFError:
            return Action(ActionKind.QUIT)
        kind = COMMANDS[key][0]
        if kind in _VALUE_PROMPTS:
            try:
                value = Prompt.ask(_VALUE_PROMPTS[kind], console=self.console, default="", show_default=False)
            except EOFError:
                return Action(ActionKind.QUIT)
            return Action(kind, value)
        return Action(kind)

    def confirm(self, question: str) -> bool:
        return _ask_yes_no(self.console, question)
