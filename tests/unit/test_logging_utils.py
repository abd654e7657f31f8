# tests/unit/test_logging_utils.py
# -----------------------------------------------------------------------------
# Logging helpers: handler setup, file output, handler de-duplication, JSONL.
# -----------------------------------------------------------------------------

from __future__ import annotations

import json
import logging

import pytest

from modeltree.logging_utils import (
    ROOT_LOGGER,
    JsonlLogger,
    get_logger,
    init_logger,
    owned_handlers,
    reset_loggers,
)


def test_file_handler_records_info(tmp_path):
    log_path = tmp_path / "logs" / "modeltree.log"
    logger = init_logger(log_path, level="WARNING", rich=False)
    get_logger("materialize").info("created: %s", "/x/y")
    for h in logger.handlers:
        h.flush()
    text = log_path.read_text(encoding="utf-8")
    assert "created: /x/y" in text
    assert "| INFO |" in text
    assert "modeltree.materialize" in text


def test_repeated_init_does_not_stack_handlers(tmp_path):
    a = init_logger(tmp_path / "a.log", rich=False)
    n = len(owned_handlers(a))
    b = init_logger(tmp_path / "a.log", rich=False)
    assert a is b
    assert len(owned_handlers(b)) == n == 2


def test_console_only_logger_respects_level():
    logger = init_logger(level="ERROR", rich=False)
    assert logger.level == logging.ERROR
    assert len(owned_handlers(logger)) == 1


def test_get_logger_namespaces_children():
    assert get_logger("session").name == "modeltree.session"
    assert get_logger("modeltree.plan").name == "modeltree.plan"


def test_jsonl_logger_appends(tmp_path):
    j = JsonlLogger(tmp_path / "deep" / "events.jsonl")
    j.log({"event": "a"})
    j.log({"event": "b", "ts": 1.0})
    rows = [json.loads(x) for x in j.path.read_text(encoding="utf-8").splitlines()]
    assert [r["event"] for r in rows] == ["a", "b"]
    assert rows[1]["ts"] == 1.0
    assert isinstance(rows[0]["ts"], float)


def test_foreign_handler_does_not_block_file_handler(tmp_path):
    # capture tooling may attach its own handler before the CLI configures logging
    foreign = logging.NullHandler()
    logging.getLogger(ROOT_LOGGER).addHandler(foreign)
    try:
        log_path = tmp_path / "run.log"
        logger = init_logger(log_path, rich=False)
        get_logger("session").info("plan: %d directories", 3)
        for h in logger.handlers:
            h.flush()
        assert foreign in logger.handlers
        assert len(owned_handlers(logger)) == 2
        assert "plan: 3 directories" in log_path.read_text(encoding="utf-8")
    finally:
        logging.getLogger(ROOT_LOGGER).removeHandler(foreign)


def test_reset_keeps_foreign_handlers_and_allows_reinit(tmp_path):
    foreign = logging.NullHandler()
    logger = init_logger(rich=False)
    logger.addHandler(foreign)
    try:
        reset_loggers()
        assert owned_handlers(logger) == []
        assert foreign in logger.handlers
        again = init_logger(tmp_path / "b.log", rich=False)
        assert len(owned_handlers(again)) == 2
    finally:
        logger.removeHandler(foreign)


def test_unknown_level_rejected():
    with pytest.raises(ValueError, match="unknown log level"):
        init_logger(level="LOUD", rich=False)
