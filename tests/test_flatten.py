#!/usr/bin/env python3
"""Unit tests for tree flattening.

Tests:
- Id construction and parent/child linkage
- Initial placement (root at origin, jitter near parent)
- Node cap cutoff in depth-first order
- Rejection of cycles and duplicate ids
"""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np
import pytest

from pycity.errors import LayoutError, ValidationError
from pycity.layout.config import LayoutConfig
from pycity.layout.flatten import TreeFlattener
from pycity.model.node import NodeType, TreeNode


def make_tree() -> TreeNode:
    """Create a small repository tree."""
    return TreeNode.from_dict({
        "name": "repo",
        "type": "folder",
        "children": [
            {
                "name": "src",
                "type": "folder",
                "children": [
                    {"name": "index.ts", "type": "file", "loc": 100},
                    {"name": "app.ts", "type": "file", "loc": 1},
                ],
            },
            {"name": "README.md", "type": "file", "loc": 1000},
        ],
    })


def test_ids_and_links():
    """Test ids, parent ids and children ids."""
    records = TreeFlattener().flatten(make_tree())

    assert [r.id for r in records] == [
        "repo",
        "repo/src",
        "repo/src/index.ts",
        "repo/src/app.ts",
        "repo/README.md",
    ]
    by_id = {r.id: r for r in records}

    assert by_id["repo"].parent_id is None
    assert by_id["repo"].children_ids == ["repo/src", "repo/README.md"]
    assert by_id["repo/src"].children_ids == ["repo/src/index.ts", "repo/src/app.ts"]
    assert by_id["repo/src/app.ts"].parent_id == "repo/src"
    assert by_id["repo/README.md"].children_ids == []

    print("✓ Ids and links test passed")


def test_radius_and_height():
    """Test the size constants of files and folders."""
    by_id = {r.id: r for r in TreeFlattener().flatten(make_tree())}

    assert by_id["repo"].radius == 10
    assert by_id["repo"].target_height == 1
    assert by_id["repo/src/index.ts"].radius == 5
    assert by_id["repo/src/index.ts"].target_height == 50
    assert by_id["repo/src/app.ts"].target_height == 2  # clamped up from 0.5
    assert by_id["repo/README.md"].target_height == 100  # clamped down from 500

    print("✓ Radius and height test passed")


def test_initial_placement():
    """Test root at origin and children jittered near their parent."""
    records = TreeFlattener(rng=np.random.default_rng(7)).flatten(make_tree())
    by_id = {r.id: r for r in records}

    assert np.array_equal(by_id["repo"].position, np.zeros(3))
    for record in records:
        assert record.position[1] == 0.0
        assert np.array_equal(record.velocity, np.zeros(3))
        if record.parent_id is not None:
            offset = record.position - by_id[record.parent_id].position
            assert np.all(np.abs(offset) <= 50.0)

    print("✓ Initial placement test passed")


def test_same_seed_same_placement():
    """Test that placement is reproducible for a fixed seed."""
    first = TreeFlattener(rng=np.random.default_rng(3)).flatten(make_tree())
    second = TreeFlattener(rng=np.random.default_rng(3)).flatten(make_tree())

    for a, b in zip(first, second):
        assert np.array_equal(a.position, b.position)

    print("✓ Seeded placement test passed")


def test_node_cap_cutoff():
    """Test that the cap keeps the first records in depth-first order."""
    flattener = TreeFlattener(LayoutConfig(node_cap=3))
    records = flattener.flatten(make_tree())

    assert [r.id for r in records] == ["repo", "repo/src", "repo/src/index.ts"]
    assert flattener.visited == 3
    assert flattener.truncated
    assert flattener.flatten(TreeNode("solo", NodeType.FILE)) and not flattener.truncated

    print("✓ Node cap test passed")


def test_exact_cap_not_truncated():
    """Test that a tree of exactly cap nodes is not reported as truncated."""
    flattener = TreeFlattener(LayoutConfig(node_cap=5))
    records = flattener.flatten(make_tree())

    assert len(records) == 5
    assert not flattener.truncated

    print("✓ Exact cap test passed")


def test_empty_input():
    """Test that empty inputs produce no records."""
    flattener = TreeFlattener()

    assert flattener.flatten(None) == []
    assert flattener.flatten({}) == []
    assert flattener.visited == 0

    print("✓ Empty input test passed")


def test_dict_input():
    """Test that the dict form is accepted directly."""
    records = TreeFlattener().flatten({"name": "repo", "type": "folder"})

    assert len(records) == 1
    assert records[0].id == "repo"

    print("✓ Dict input test passed")


def test_cycle_rejected():
    """Test that a folder containing itself is rejected."""
    root = TreeNode("repo", NodeType.FOLDER)
    sub = TreeNode("sub", NodeType.FOLDER)
    root.children.append(sub)
    sub.children.append(root)

    with pytest.raises(LayoutError):
        TreeFlattener().flatten(root)

    print("✓ Cycle test passed")


def test_duplicate_names_rejected():
    """Test that siblings with the same name are rejected."""
    root = TreeNode.from_dict({
        "name": "repo",
        "type": "folder",
        "children": [
            {"name": "a.ts", "type": "file"},
            {"name": "a.ts", "type": "file"},
        ],
    })

    with pytest.raises(ValidationError):
        TreeFlattener().flatten(root)

    print("✓ Duplicate names test passed")


def test_shared_subtree_allowed():
    """Test that the same node object under two parents is laid out twice."""
    shared = TreeNode("lib.ts", NodeType.FILE, loc=10)
    root = TreeNode("repo", NodeType.FOLDER, children=[
        TreeNode("a", NodeType.FOLDER, children=[shared]),
        TreeNode("b", NodeType.FOLDER, children=[shared]),
    ])

    ids = [r.id for r in TreeFlattener().flatten(root)]

    assert "repo/a/lib.ts" in ids
    assert "repo/b/lib.ts" in ids

    print("✓ Shared subtree test passed")


def run_all_tests():
    """Run all flattening tests."""
    print("=== Running Flatten Tests ===\n")

    test_ids_and_links()
    test_radius_and_height()
    test_initial_placement()
    test_same_seed_same_placement()
    test_node_cap_cutoff()
    test_exact_cap_not_truncated()
    test_empty_input()
    test_dict_input()
    test_cycle_rejected()
    test_duplicate_names_rejected()
    test_shared_subtree_allowed()

    print("\n=== All Flatten Tests Passed! ===")


if __name__ == "__main__":
    run_all_tests()
