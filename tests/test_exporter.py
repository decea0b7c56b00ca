#!/usr/bin/env python3
"""Unit tests for exporting simulation records.

Tests:
- Position and size formulas
- Extension detection
- Placeholder modification times
- JSON shape of exported nodes
"""

import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import numpy as np

from pycity.layout.exporter import DAY_MS, LayoutExporter, file_extension
from pycity.model.node import NodeType
from pycity.model.records import SimulationNode

NOW = 1_700_000_000.0


def make_exporter(seed: int = 0) -> LayoutExporter:
    """Create an exporter with a fixed clock."""
    return LayoutExporter(rng=np.random.default_rng(seed), clock=lambda: NOW)


def test_file_export():
    """Test position, size and passthrough fields of a file."""
    record = SimulationNode(
        id="repo/src/a.ts",
        type=NodeType.FILE,
        position=np.array([12.5, 0.0, -4.0]),
        radius=5.0,
        target_height=50.0,
        parent_id="repo/src",
        code_snippet="export const a = 1;",
        loc=100,
        url="https://example.invalid/a",
    )

    node = make_exporter().export([record])[0]

    assert node.id == "repo/src/a.ts"
    assert node.position == (12.5, 25.0, -4.0)
    assert node.size == (7.5, 50.0, 7.5)
    assert node.type == NodeType.FILE
    assert node.parent_id == "repo/src"
    assert node.loc == 100
    assert node.extension == "ts"
    assert node.code_snippet == "export const a = 1;"
    assert node.url == "https://example.invalid/a"

    print("✓ File export test passed")


def test_folder_export():
    """Test a folder root."""
    record = SimulationNode(
        id="repo",
        type=NodeType.FOLDER,
        position=np.zeros(3),
        radius=10.0,
        target_height=1.0,
    )

    node = make_exporter().export([record])[0]

    assert node.position == (0.0, 0.5, 0.0)
    assert node.size == (15.0, 1.0, 15.0)
    assert node.extension == "folder"
    assert node.parent_id is None

    print("✓ Folder export test passed")


def test_file_extension():
    """Test extension detection from ids."""
    assert file_extension("repo/src/main.py") == "py"
    assert file_extension("repo/archive.tar.gz") == "gz"
    assert file_extension("repo/.gitignore") == "gitignore"
    assert file_extension("repo/Makefile") == "txt"
    assert file_extension("repo/v1.2/Makefile") == "txt"
    assert file_extension("repo.v1/Makefile") == "txt"
    assert file_extension("repo.v1/src/lib.rs") == "rs"
    assert file_extension("repo/trailing.") == "txt"
    assert file_extension("main.rs") == "rs"

    print("✓ File extension test passed")


def test_last_modified_within_window():
    """Test that placeholder timestamps fall within the last 30 days."""
    records = [
        SimulationNode(id=f"repo/f{i}.py", type=NodeType.FILE, position=np.zeros(3), radius=5.0, target_height=2.0)
        for i in range(50)
    ]

    nodes = make_exporter().export(records)
    now_ms = NOW * 1000.0

    for node in nodes:
        assert now_ms - 30 * DAY_MS <= node.last_modified <= now_ms
    assert len({node.last_modified for node in nodes}) > 1

    print("✓ Last modified test passed")


def test_to_dict():
    """Test the JSON shape consumed by the renderer."""
    records = [
        SimulationNode(id="repo", type=NodeType.FOLDER, position=np.zeros(3), radius=10.0, target_height=1.0),
        SimulationNode(
            id="repo/a.ts",
            type=NodeType.FILE,
            position=np.array([1.0, 0.0, 2.0]),
            radius=5.0,
            target_height=2.0,
            parent_id="repo",
        ),
    ]

    root, leaf = (node.to_dict() for node in make_exporter().export(records))

    assert root["type"] == "folder"
    assert "parentId" not in root
    assert "codeSnippet" not in root
    assert leaf["parentId"] == "repo"
    assert leaf["position"] == [1.0, 1.0, 2.0]
    assert leaf["size"] == [7.5, 2.0, 7.5]
    assert leaf["extension"] == "ts"
    assert set(leaf) == {"id", "position", "size", "type", "loc", "lastModified", "extension", "parentId"}

    print("✓ To dict test passed")


def run_all_tests():
    """Run all exporter tests."""
    print("=== Running Exporter Tests ===\n")

    test_file_export()
    test_folder_export()
    test_file_extension()
    test_last_modified_within_window()
    test_to_dict()

    print("\n=== All Exporter Tests Passed! ===")


if __name__ == "__main__":
    run_all_tests()
