"""
Turn a directory plan into directories on disk.

The run mode is passed in explicitly: ``RunMode.DRY_RUN`` reports what would
be created without touching the filesystem, ``RunMode.LIVE`` creates missing
directories (parents included). Existing directories are never modified, so
a second live run over the same plan performs no mutations.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .logging_utils import JsonlLogger, get_logger

log = get_logger("materialize")


class RunMode(str, enum.Enum):
    DRY_RUN = "dry-run"
    LIVE = "live"

    @property
    def is_live(self) -> bool:
        return self is RunMode.LIVE

    def toggled(self) -> "RunMode":
        return RunMode.DRY_RUN if self.is_live else RunMode.LIVE


class Outcome(str, enum.Enum):
    CREATED = "created"
    EXISTS = "exists"
    WOULD_CREATE = "would-create"


@dataclass
class MaterializeReport:
    mode: RunMode
    entries: List[Tuple[Path, Outcome]] = field(default_factory=list)

    def _with(self, outcome: Outcome) -> List[Path]:
        return [p for p, o in self.entries if o is outcome]

    @property
    def created(self) -> List[Path]:
        return self._with(Outcome.CREATED)

    @property
    def existing(self) -> List[Path]:
        return self._with(Outcome.EXISTS)

    @property
    def pending(self) -> List[Path]:
        return self._with(Outcome.WOULD_CREATE)

    def summary(self) -> str:
        if self.mode.is_live:
            return f"{len(self.created)} created, {len(self.existing)} already existed"
        return f"{len(self.pending)} would be created, {len(self.existing)} already exist"


def materialize(
    paths: Iterable[Path],
    mode: RunMode,
    *,
    events: Optional[JsonlLogger] = None,
) -> MaterializeReport:
    report = MaterializeReport(mode=mode)
    for path in paths:
        if path.is_dir():
            log.info("already exists: %s", path)
            report.entries.append((path, Outcome.EXISTS))
            continue
        if not mode.is_live:
            log.info("would create: %s", path)
            report.entries.append((path, Outcome.WOULD_CREATE))
            continue
        path.mkdir(parents=True, exist_ok=True)
        log.info("created: %s", path)
        report.entries.append((path, Outcome.CREATED))
        if events is not None:
            events.log({"event": "mkdir", "path": str(path)})
    return report
