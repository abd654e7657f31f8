# tests/unit/test_tree.py
"""Preview tree construction and rendering."""

from __future__ import annotations

from pathlib import Path, PurePath

from modeltree.tree import TreeNode, build_tree, format_tree

PATHS = [
    PurePath("models/loras/Flux"),
    PurePath("models/checkpoints/Unsorted"),
    PurePath("models/checkpoints/Flux"),
    PurePath("models/loras/Unsorted"),
]


def test_tree_rooted_at_models_segment():
    root = build_tree([Path("/opt/app/models/checkpoints/Flux"), Path("/opt/app/models/checkpoints/SDXL")])
    # common ancestor is .../checkpoints but the root is cut back to models
    assert root.name == str(PurePath("/opt/app/models"))
    assert list(root.children) == ["checkpoints"]
    assert set(root.children["checkpoints"].children) == {"Flux", "SDXL"}


def test_tree_without_anchor_uses_common_ancestor():
    root = build_tree([PurePath("a/b/c"), PurePath("a/b/d")], anchor="models")
    assert root.name == str(PurePath("a/b"))
    assert set(root.children) == {"c", "d"}


def test_single_path_keeps_leaf_below_root():
    root = build_tree([PurePath("x/models/checkpoints")])
    assert root.name == str(PurePath("x/models"))
    assert list(root.children) == ["checkpoints"]


def test_empty_plan_gives_bare_root():
    root = build_tree([])
    assert root.children == {}


def test_node_count():
    root = build_tree(PATHS)
    # checkpoints, loras + two leaves under each
    assert root.count() == 6


def test_render_is_alphabetical_regardless_of_insertion_order():
    text = format_tree(build_tree(PATHS))
    lines = [ln.rstrip() for ln in text.splitlines()]
    assert lines == [
        "models",
        "├── checkpoints",
        "│   ├── Flux",
        "│   └── Unsorted",
        "└── loras",
        "    ├── Flux",
        "    └── Unsorted",
    ]


def test_sorting_is_case_insensitive():
    node = TreeNode("r")
    for name in ("beta", "Alpha", "gamma"):
        node.insert([name])
    assert [c.name for c in node.sorted_children()] == ["Alpha", "beta", "gamma"]


def test_rendering_does_not_mutate_input():
    paths = list(PATHS)
    format_tree(build_tree(paths))
    assert paths == PATHS
