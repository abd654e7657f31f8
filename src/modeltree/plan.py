"""
Directory plan construction.

The plan is a pure function of (roots, selected model types, selected LoRA
categories, ruleset). Nothing here touches the filesystem except
``check_roots``, which callers run before planning.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from .catalog import UNSORTED, Ruleset, check_segment
from .errors import MissingRootError

PathLike = Union[str, Path]

DEFAULT_MODELS_DIR = "models"
DEFAULT_CHECKPOINTS_DIR = "checkpoints"
DEFAULT_LORAS_DIR = "loras"


@dataclass(frozen=True)
class ModelRoots:
    checkpoints: Path
    loras: Path

    def __post_init__(self) -> None:
        ck, lo = Path(self.checkpoints), Path(self.loras)
        if ck == lo or ck in lo.parents or lo in ck.parents:
            raise ValueError(f"model roots overlap: {ck} and {lo}")

    @classmethod
    def under(
        cls,
        install_root: PathLike,
        *,
        models_dir: str = DEFAULT_MODELS_DIR,
        checkpoints_dir: str = DEFAULT_CHECKPOINTS_DIR,
        loras_dir: str = DEFAULT_LORAS_DIR,
    ) -> "ModelRoots":
        for what, name in (
            ("models_dir", models_dir),
            ("checkpoints_dir", checkpoints_dir),
            ("loras_dir", loras_dir),
        ):
            check_segment(name, what)
        base = Path(install_root) / models_dir
        return cls(checkpoints=base / checkpoints_dir, loras=base / loras_dir)

    def __iter__(self) -> Iterator[Path]:
        yield self.checkpoints
        yield self.loras


@dataclass(frozen=True)
class DirectoryPlan:
    roots: ModelRoots
    paths: Tuple[Path, ...]

    def __len__(self) -> int:
        return len(self.paths)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def under(self, root: Path) -> List[Path]:
        return [p for p in self.paths if p == root or root in p.parents]


def check_roots(roots: ModelRoots) -> None:
    """Raise MissingRootError listing every configured root that is not a directory."""
    missing = [p for p in roots if not p.is_dir()]
    if missing:
        raise MissingRootError(missing)


def dedupe_paths(paths: Iterable[Path]) -> Tuple[Path, ...]:
    seen = set()
    out: List[Path] = []
    for p in paths:
        if p not in seen:
            seen.add(p)
            out.append(p)
    return tuple(out)


def _checkpoint_paths(root: Path, models: Sequence[str], ruleset: Ruleset) -> List[Path]:
    out: List[Path] = []
    for model in models:
        out.append(root / model)
        if ruleset.is_video(model):
            out.extend(root / model / variant for variant in ruleset.video_variants)
    out.append(root / UNSORTED)
    return out


def _lora_paths(
    root: Path, models: Sequence[str], categories: Sequence[str], ruleset: Ruleset
) -> List[Path]:
    out: List[Path] = []
    for model in models:
        out.append(root / model)
        if ruleset.nest_lora_in_variants and ruleset.is_video(model):
            for variant in ruleset.video_variants:
                out.append(root / model / variant)
                out.extend(root / model / variant / cat for cat in categories)
        else:
            out.extend(root / model / cat for cat in categories)
    out.append(root / UNSORTED)
    return out


def build_plan(
    roots: ModelRoots,
    models: Sequence[str],
    categories: Sequence[str],
    ruleset: Ruleset,
) -> DirectoryPlan:
    """
    Expand the selections into the ordered list of directories to ensure.

    Checkpoint entries come first (per type, then its video variants, then
    Unsorted), followed by LoRA entries (per type, then type × category,
    then Unsorted).

    Raises ValueError if a name is not a single directory name.
    """
    for m in models:
        check_segment(m, "model type")
    for c in categories:
        check_segment(c, "LoRA category")
    paths = _checkpoint_paths(roots.checkpoints, models, ruleset)
    paths += _lora_paths(roots.loras, models, categories, ruleset)
    paths = dedupe_paths(paths)
    for p in paths:
        owners = [r for r in roots if p != r and p.is_relative_to(r)]
        if len(owners) != 1:
            raise ValueError(f"planned path {p} is not inside exactly one model root")
    return DirectoryPlan(roots=roots, paths=paths)
