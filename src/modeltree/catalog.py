#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
catalog.py — static category tables and structural rulesets

A *ruleset* bundles everything that decides the shape of the directory tree:

• the base model catalog (checkpoint families, menu order)
• the LoRA subcategory catalog
• which base models are video-capable, and which variant subfolders they get
• whether LoRA subcategories of video models nest under the variant folders

Three presets cover the layouts in use:

    standard     → <type>/I2V, <type>/T2V ; LoRAs at <type>/<category>
    combination  → adds <type>/Combination
    nested       → LoRAs at <type>/<variant>/<category> for video models
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import PurePosixPath, PureWindowsPath
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

# -----------------------------------------------------------------------------
# Default tables
# -----------------------------------------------------------------------------
BASE_MODELS: Tuple[str, ...] = (
    "Flux",
    "HiDream",
    "Hunyuan",
    "Illustrious",
    "LTXV",
    "Pony",
    "SD1.5",
    "SD3.5",
    "SDXL",
    "Wan",
)

VIDEO_MODELS: FrozenSet[str] = frozenset({"Hunyuan", "LTXV", "Wan"})

LORA_CATEGORIES: Tuple[str, ...] = (
    "Characters",
    "Clothing",
    "Concepts",
    "Effects",
    "Poses",
    "Styles",
    "Tools",
)

VIDEO_VARIANTS: Tuple[str, ...] = ("I2V", "T2V")
COMBINATION_VARIANTS: Tuple[str, ...] = ("I2V", "T2V", "Combination")

UNSORTED = "Unsorted"
ALL_TOKEN = "all"


def check_segment(name: str, what: str = "name") -> str:
    """Return *name* if it is a single plain directory name, else raise ValueError."""
    if (
        not name
        or name in (".", "..")
        or "/" in name
        or "\\" in name
        or "\0" in name
        or PurePosixPath(name).is_absolute()
        or PureWindowsPath(name).drive
    ):
        raise ValueError(f"{what} {name!r} must be a single directory name")
    return name


@dataclass(frozen=True)
class Ruleset:
    name: str
    base_models: Tuple[str, ...] = BASE_MODELS
    lora_categories: Tuple[str, ...] = LORA_CATEGORIES
    video_models: FrozenSet[str] = field(default=VIDEO_MODELS)
    video_variants: Tuple[str, ...] = VIDEO_VARIANTS
    nest_lora_in_variants: bool = False

    def __post_init__(self) -> None:
        if not self.base_models:
            raise ValueError("base model catalog must not be empty")
        if not self.lora_categories:
            raise ValueError("LoRA category catalog must not be empty")
        for what, names in (
            ("base model", self.base_models),
            ("LoRA category", self.lora_categories),
            ("video variant", self.video_variants),
        ):
            for n in names:
                check_segment(n, what)
        unknown = sorted(set(self.video_models) - set(self.base_models))
        if unknown:
            raise ValueError(f"video models not in base model catalog: {', '.join(unknown)}")

    def is_video(self, model_type: str) -> bool:
        return model_type in self.video_models

    def with_categories(self, categories: Iterable[str]) -> "Ruleset":
        """Return a copy whose LoRA catalog is replaced wholesale."""
        return replace(self, lora_categories=tuple(categories))


PRESETS: Dict[str, Ruleset] = {
    "standard": Ruleset(name="standard"),
    "combination": Ruleset(name="combination", video_variants=COMBINATION_VARIANTS),
    "nested": Ruleset(name="nested", nest_lora_in_variants=True),
}

DEFAULT_RULESET = "standard"


def get_ruleset(name: Optional[str] = None) -> Ruleset:
    key = (name or DEFAULT_RULESET).strip().lower()
    try:
        return PRESETS[key]
    except KeyError:
        raise ValueError(
            f"unknown ruleset {name!r} (choose from: {', '.join(sorted(PRESETS))})"
        ) from None
