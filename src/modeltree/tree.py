"""
Preview tree for a directory plan.

Flat paths are folded into a tree of segment nodes and rendered with
``rich.tree`` branch connectors. Rendering order is alphabetical
(case-insensitive), independent of insertion order. Display only: nothing
here mutates the plan or the filesystem.
"""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

DEFAULT_ANCHOR = "models"


@dataclass
class TreeNode:
    name: str
    children: Dict[str, "TreeNode"] = field(default_factory=dict)

    def child(self, name: str) -> "TreeNode":
        node = self.children.get(name)
        if node is None:
            node = self.children[name] = TreeNode(name)
        return node

    def insert(self, segments: Iterable[str]) -> None:
        node = self
        for seg in segments:
            node = node.child(seg)

    def sorted_children(self) -> List["TreeNode"]:
        return sorted(self.children.values(), key=lambda n: (n.name.lower(), n.name))

    def count(self) -> int:
        """Number of descendants (the root itself excluded)."""
        return sum(1 + c.count() for c in self.children.values())


def _common_prefix(parts: Sequence[Tuple[str, ...]]) -> Tuple[str, ...]:
    # leave at least one segment below the root for every path
    limit = min(len(p) for p in parts) - 1
    prefix: List[str] = []
    for i in range(max(limit, 0)):
        seg = parts[0][i]
        if any(p[i] != seg for p in parts[1:]):
            break
        prefix.append(seg)
    return tuple(prefix)


def _root_parts(parts: Sequence[Tuple[str, ...]], anchor: Optional[str]) -> Tuple[str, ...]:
    prefix = _common_prefix(parts)
    if anchor and anchor in prefix:
        last = len(prefix) - 1 - prefix[::-1].index(anchor)
        return prefix[: last + 1]
    return prefix


def build_tree(paths: Iterable[PurePath], anchor: Optional[str] = DEFAULT_ANCHOR) -> TreeNode:
    """
    Fold *paths* into a tree rooted at their longest common ancestor, cut back
    to the last ``anchor`` segment when the ancestor contains one.
    """
    parts = [PurePath(p).parts for p in paths]
    if not parts:
        return TreeNode(anchor or "")
    root_parts = _root_parts(parts, anchor)
    root = TreeNode(str(PurePath(*root_parts)) if root_parts else "")
    for p in parts:
        root.insert(p[len(root_parts):])
    return root


def render_tree(node: TreeNode, *, guide_style: str = "dim", label_style: str = "bold cyan") -> Tree:
    tree = Tree(Text(node.name, style=label_style), guide_style=guide_style)

    def _add(branch: Tree, current: TreeNode) -> None:
        for child in current.sorted_children():
            _add(branch.add(Text(child.name)), child)

    _add(tree, node)
    return tree


def format_tree(node: TreeNode) -> str:
    """Plain-text rendering (no colors), e.g. for logs and tests."""
    buf = io.StringIO()
    Console(file=buf, width=200, color_system=None, force_terminal=False).print(render_tree(node))
    return buf.getvalue()


def preview(paths: Iterable[Path], console: Console, *, anchor: Optional[str] = DEFAULT_ANCHOR) -> TreeNode:
    root = build_tree(paths, anchor=anchor)
    console.print(render_tree(root))
    return root
