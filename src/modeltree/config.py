"""
Runtime settings: built-in defaults < YAML file < environment < CLI flags.

Example ``modeltree.yaml``::

    root: /opt/ComfyUI
    ruleset: combination
    base_models: [Flux, Hunyuan, Illustrious, Wan]
    video_models: [Hunyuan, Wan]
    lora_categories: [Characters, Styles]
    log_file: logs/modeltree.log
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .catalog import Ruleset, check_segment, get_ruleset
from .errors import ConfigError
from .logging_utils import LOG_LEVELS
from .plan import DEFAULT_CHECKPOINTS_DIR, DEFAULT_LORAS_DIR, DEFAULT_MODELS_DIR, ModelRoots

ENV_CONFIG = "MODELTREE_CONFIG"
ENV_ROOT = "MODELTREE_ROOT"
ENV_LOG_LEVEL = "MODELTREE_LOG_LEVEL"

_LIST_KEYS = ("base_models", "lora_categories", "video_models", "video_variants")


@dataclass(frozen=True)
class Settings:
    root: Optional[Path] = None
    ruleset: str = "standard"
    models_dir: str = DEFAULT_MODELS_DIR
    checkpoints_dir: str = DEFAULT_CHECKPOINTS_DIR
    loras_dir: str = DEFAULT_LORAS_DIR
    base_models: Optional[Tuple[str, ...]] = None
    lora_categories: Optional[Tuple[str, ...]] = None
    video_models: Optional[Tuple[str, ...]] = None
    video_variants: Optional[Tuple[str, ...]] = None
    nest_lora_in_variants: Optional[bool] = None
    log_file: Optional[Path] = None
    log_level: str = "WARNING"

    # ------------------------------------------------------------------
    def __post_init__(self) -> None:
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level: unknown level {self.log_level!r} (choose from: {', '.join(LOG_LEVELS)})"
            )
        for key in ("models_dir", "checkpoints_dir", "loras_dir"):
            try:
                check_segment(getattr(self, key), key)
            except ValueError as e:
                raise ConfigError(str(e)) from e

    def install_root(self) -> Path:
        return (self.root or Path.cwd()).expanduser()

    def roots(self) -> ModelRoots:
        try:
            return ModelRoots.under(
                self.install_root(),
                models_dir=self.models_dir,
                checkpoints_dir=self.checkpoints_dir,
                loras_dir=self.loras_dir,
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def build_ruleset(self) -> Ruleset:
        """Preset named by ``ruleset`` with any table overrides applied."""
        try:
            base = get_ruleset(self.ruleset)
            overrides: Dict[str, Any] = {}
            if self.base_models is not None:
                overrides["base_models"] = self.base_models
                if self.video_models is None:
                    overrides["video_models"] = frozenset(base.video_models & set(self.base_models))
            if self.lora_categories is not None:
                overrides["lora_categories"] = self.lora_categories
            if self.video_models is not None:
                overrides["video_models"] = frozenset(self.video_models)
            if self.video_variants is not None:
                overrides["video_variants"] = self.video_variants
            if self.nest_lora_in_variants is not None:
                overrides["nest_lora_in_variants"] = self.nest_lora_in_variants
            return replace(base, **overrides) if overrides else base
        except ValueError as e:
            raise ConfigError(str(e)) from e

    def merged(self, **overrides: Any) -> "Settings":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _as_str_tuple(key: str, value: Any) -> Tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ConfigError(f"{key}: expected a list of non-empty strings")
    try:
        return tuple(check_segment(v.strip(), key) for v in value)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def settings_from_mapping(raw: Mapping[str, Any]) -> Settings:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if key in _LIST_KEYS:
            values[key] = _as_str_tuple(key, value)
        elif key in ("root", "log_file"):
            if not isinstance(value, str):
                raise ConfigError(f"{key}: expected a path string")
            values[key] = Path(value).expanduser()
        elif key == "nest_lora_in_variants":
            if not isinstance(value, bool):
                raise ConfigError(f"{key}: expected true or false")
            values[key] = value
        else:
            if not isinstance(value, str):
                raise ConfigError(f"{key}: expected a string")
            values[key] = value
    return Settings(**values)


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def load_settings(
    config_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Defaults, then the YAML file (explicit path or $MODELTREE_CONFIG), then environment."""
    env = os.environ if env is None else env
    path = config_path or (Path(env[ENV_CONFIG]) if env.get(ENV_CONFIG) else None)
    settings = settings_from_mapping(load_yaml(path)) if path else Settings()

    env_overrides: Dict[str, Any] = {}
    if env.get(ENV_ROOT):
        env_overrides["root"] = Path(env[ENV_ROOT]).expanduser()
    if env.get(ENV_LOG_LEVEL):
        env_overrides["log_level"] = env[ENV_LOG_LEVEL]
    return settings.merged(**env_overrides)


def describe(settings: Settings) -> List[Tuple[str, str]]:
    """Key/value rows for the startup summary table."""
    rs = settings.build_ruleset()
    return [
        ("root", str(settings.install_root())),
        ("ruleset", rs.name),
        ("video variants", ", ".join(rs.video_variants)),
        ("LoRA nesting", "per variant" if rs.nest_lora_in_variants else "per type"),
    ]
