"""
modeltree — Model Directory Scaffolding

This package builds the on-disk folder hierarchy used to organize
checkpoint and LoRA weight files (per base model family, per LoRA
subcategory, with image/text-to-video variant folders where relevant).

Exposes:
    __version__ : str
        Package version identifier.
    __all__ : list[str]
        Publicly accessible submodules for clean imports.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "catalog",
    "selection",
    "plan",
    "tree",
    "materialize",
    "session",
    "frontend",
    "config",
    "errors",
    "logging_utils",
]
