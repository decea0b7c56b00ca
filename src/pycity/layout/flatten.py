"""Flattening of an input tree into simulation records."""

import logging
from collections.abc import Mapping
from typing import Any

import numpy as np

from pycity.errors import LayoutError, ValidationError
from pycity.layout.config import LayoutConfig
from pycity.model.node import TreeNode
from pycity.model.records import SimulationNode

logger = logging.getLogger(__name__)


class TreeFlattener:
    """Walks a tree depth-first into an ordered, capped list of records.

    The traversal uses an explicit work stack so the point where the node
    cap cuts the tree off is visible through ``visited`` and ``truncated``
    after ``flatten`` returns.
    """

    def __init__(self, config: LayoutConfig | None = None, rng: np.random.Generator | None = None) -> None:
        """Initialize the flattener.

        Args:
            config: Layout configuration (uses defaults if None)
            rng: Random generator for the initial jitter
        """
        self.config = config or LayoutConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.visited = 0
        self.truncated = False

    def flatten(self, root: TreeNode | Mapping[str, Any] | None) -> list[SimulationNode]:
        """Flatten a tree into simulation records.

        Args:
            root: Root of the input tree, its dict form, or None

        Returns:
            Records in depth-first pre-order, at most ``node_cap`` of them

        Raises:
            ValidationError: If the tree is malformed or contains duplicate ids
            LayoutError: If the tree contains a cycle
        """
        self.visited = 0
        self.truncated = False

        if root is None or (isinstance(root, Mapping) and not root):
            return []
        if isinstance(root, Mapping):
            root = TreeNode.from_dict(root)

        cap = self.config.node_cap
        records: list[SimulationNode] = []
        by_id: dict[str, SimulationNode] = {}

        # (node, parent record, ids of the node objects on the path to it)
        stack: list[tuple[TreeNode, SimulationNode | None, frozenset[int]]] = [(root, None, frozenset())]

        while stack:
            if self.visited >= cap:
                self.truncated = True
                break

            node, parent, ancestry = stack.pop()
            if id(node) in ancestry:
                raise LayoutError(f"cycle detected at '{node.name}' under '{parent.id}'")

            record = self._create_record(node, parent)
            if record.id in by_id:
                raise ValidationError("id", record.id, "unique sibling names")

            records.append(record)
            by_id[record.id] = record
            self.visited += 1

            child_ancestry = ancestry | {id(node)}
            for child in reversed(node.children):
                stack.append((child, record, child_ancestry))

        self._link_children(records, by_id)

        if self.truncated:
            logger.warning(f"Node cap of {cap} reached, remaining nodes of '{root.name}' were skipped")
        logger.debug(f"Flattened {len(records)} records from '{root.name}'")
        return records

    def _create_record(self, node: TreeNode, parent: SimulationNode | None) -> SimulationNode:
        """Create the record for a node, placed near its parent.

        Args:
            node: Source tree node
            parent: Record of the parent (None for the root)

        Returns:
            New simulation record
        """
        config = self.config
        loc = node.loc or 0

        if node.is_file:
            radius = config.file_radius
            height = config.file_height(loc)
        else:
            radius = config.folder_radius
            height = config.folder_height

        if parent is None:
            node_id = node.name
            position = np.zeros(3)
        else:
            node_id = f"{parent.id}/{node.name}"
            half = config.jitter / 2
            dx, dz = self.rng.uniform(-half, half, size=2)
            position = parent.position + np.array([dx, 0.0, dz])

        return SimulationNode(
            id=node_id,
            type=node.type,
            position=position,
            radius=radius,
            target_height=height,
            parent_id=parent.id if parent is not None else None,
            code_snippet=node.content,
            loc=loc,
            url=node.url,
        )

    @staticmethod
    def _link_children(records: list[SimulationNode], by_id: dict[str, SimulationNode]) -> None:
        """Fill children_ids once every record exists."""
        for record in records:
            if record.parent_id is not None:
                by_id[record.parent_id].children_ids.append(record.id)
