# tests/conftest.py
"""
Shared pytest fixtures for modeltree.

- Hermetic runs: MODELTREE_* environment variables are cleared per test.
- Temp installation roots with models/checkpoints and models/loras.
- A small three-model ruleset matching the documented examples.
- Typer CliRunner for the CLI app.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from modeltree.catalog import Ruleset
from modeltree.logging_utils import reset_loggers
from modeltree.plan import ModelRoots

# -----------------------------------------------------------------------------
# Marks
# -----------------------------------------------------------------------------

def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: exercises the CLI end to end")

# -----------------------------------------------------------------------------
# Environment isolation
# -----------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("MODELTREE_ROOT", "MODELTREE_CONFIG", "MODELTREE_LOG_LEVEL", "FORCE_COLOR"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture(autouse=True)
def _reset_logging():
    reset_loggers()
    yield
    reset_loggers()

# -----------------------------------------------------------------------------
# Layout fixtures
# -----------------------------------------------------------------------------

@pytest.fixture()
def install_root(tmp_path: Path) -> Path:
    """Installation directory with both model roots present."""
    for sub in ("checkpoints", "loras"):
        (tmp_path / "models" / sub).mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture()
def roots(install_root: Path) -> ModelRoots:
    return ModelRoots.under(install_root)


@pytest.fixture()
def small_ruleset() -> Ruleset:
    return Ruleset(
        name="small",
        base_models=("Flux", "Hunyuan", "Illustrious"),
        lora_categories=("Characters", "Styles"),
        video_models=frozenset({"Hunyuan"}),
    )

# -----------------------------------------------------------------------------
# CLI
# -----------------------------------------------------------------------------

@pytest.fixture()
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()


@pytest.fixture(scope="session")
def cli_app():
    from modeltree.cli import app

    return app

# -----------------------------------------------------------------------------
# Optional: Hypothesis profile for fast & stable property tests
# -----------------------------------------------------------------------------

try:
    from hypothesis import HealthCheck, settings

    settings.register_profile(
        "modeltree_fast",
        deadline=None,
        max_examples=100,
        suppress_health_check=(HealthCheck.too_slow, HealthCheck.function_scoped_fixture),
    )
    settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "modeltree_fast"))
except ImportError:
    pass
