"""Exception types raised by the modeltree core."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Tuple


class ModelTreeError(Exception):
    """Base class for every error modeltree raises on purpose."""


class SelectionFormatError(ModelTreeError, ValueError):
    """Raw selection text uses characters outside letters, commas and whitespace."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(
            f"invalid selection {raw!r}: use letters, full names separated by commas, or 'all'"
        )


class EmptySelectionError(ModelTreeError, ValueError):
    """At least one entry must be selected before a plan can be built."""

    def __init__(self, what: str):
        self.what = what
        super().__init__(f"no {what} selected")


class MissingRootError(ModelTreeError):
    """One or both model roots are missing; nothing may be planned or created."""

    def __init__(self, missing: Iterable[Path]):
        self.missing: Tuple[Path, ...] = tuple(missing)
        joined = ", ".join(str(p) for p in self.missing)
        super().__init__(f"root director{'y' if len(self.missing) == 1 else 'ies'} not found: {joined}")


class ConfigError(ModelTreeError, ValueError):
    """Configuration file or override could not be applied."""
