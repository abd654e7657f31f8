#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
logging_utils.py — console + file logging for the modeltree CLI

• One-liner initialization:
    logger = init_logger("logs/modeltree.log", level="INFO", rich=True)
• Rich (color) console handler on a TTY, plain StreamHandler otherwise.
• Optional plain-format file handler (machine-parseable).
• JsonlLogger: append-only event stream (one JSON object per line), used to
  record every directory the tool creates.

Repeated init_logger() calls for the same name reuse the cached logger instead
of stacking handlers.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_CACHE: Dict[str, logging.Logger] = {}

ROOT_LOGGER = "modeltree"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# attribute set on handlers that init_logger installs
_OWNED = "_modeltree_owned"


def _ensure_parent(path: Union[str, Path]) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def _is_tty(stream: Any) -> bool:
    try:
        return bool(stream.isatty())
    except Exception:
        return False


def _fmt_plain() -> logging.Formatter:
    # timestamp | level | name | message
    return logging.Formatter(fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s", datefmt="%H:%M:%S")


def _level(level: str) -> int:
    name = str(level).upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"unknown log level {level!r}")
    return getattr(logging, name)


def _own(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _OWNED, True)
    return handler


def owned_handlers(logger: logging.Logger) -> List[logging.Handler]:
    """Handlers that init_logger attached to *logger*."""
    return [h for h in logger.handlers if getattr(h, _OWNED, False)]


def init_logger(
    file_path: Optional[Union[str, Path]] = None,
    *,
    level: str = "WARNING",
    rich: bool = True,
    name: str = ROOT_LOGGER,
    console: Optional[Console] = None,
) -> logging.Logger:
    """
    Initialize the package logger with a console handler and, if *file_path*
    is given, a plain file handler. The console handler writes to stderr so
    it never interleaves with the preview tree on stdout.
    """
    if name in _LOGGER_CACHE:
        return _LOGGER_CACHE[name]

    logger = logging.getLogger(name)
    logger.setLevel(_level(level))
    logger.propagate = False

    # replace what an earlier init installed; foreign handlers stay
    for h in owned_handlers(logger):
        logger.removeHandler(h)
        h.close()

    if rich and _is_tty(sys.stderr):
        ch: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_level=True,
            show_path=False,
        )
    else:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(_fmt_plain())
    ch.setLevel(_level(level))
    logger.addHandler(_own(ch))

    if file_path:
        _ensure_parent(file_path)
        fh = logging.FileHandler(str(file_path), mode="a", encoding="utf-8")
        # the file always records the full INFO trail
        fh.setLevel(min(_level(level), logging.INFO))
        fh.setFormatter(_fmt_plain())
        logger.addHandler(_own(fh))
        logger.setLevel(min(_level(level), logging.INFO))

    _LOGGER_CACHE[name] = logger
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the package logger; inherits its handlers through propagation."""
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def reset_loggers() -> None:
    """Drop cached loggers and close their handlers (used between CLI runs in tests)."""
    for name in set(_LOGGER_CACHE) | {ROOT_LOGGER}:
        lg = logging.getLogger(name)
        for h in owned_handlers(lg):
            lg.removeHandler(h)
            h.close()
    _LOGGER_CACHE.clear()


class JsonlLogger:
    """
    Minimal JSONL event logger. Always appends; creates parent dirs.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        _ensure_parent(self.path)

    def log(self, event: Mapping[str, Any]) -> None:
        payload = dict(event)
        payload.setdefault("ts", time.time())
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")
