"""Layout engine turning a repository tree into a 3D code city."""

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from pycity.layout.box import BoundingBox, average_overlap
from pycity.layout.collision import CollisionResolver
from pycity.layout.config import LayoutConfig
from pycity.layout.exporter import LayoutExporter
from pycity.layout.flatten import TreeFlattener
from pycity.layout.forces import ForceSimulator
from pycity.model.node import TreeNode
from pycity.model.records import CityNode

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """Result of a layout operation.

    Attributes:
        nodes: Exported nodes in depth-first pre-order
        truncated: Whether the node cap cut part of the tree off
        bounds: Overall bounding box of the layout (None when empty)
        initial_overlap: Mean pairwise overlap before the simulation
        final_overlap: Mean pairwise overlap after the simulation
        elapsed: Wall-clock seconds spent in the calculation
    """

    nodes: list[CityNode] = field(default_factory=list)
    truncated: bool = False
    bounds: BoundingBox | None = None
    initial_overlap: float = 0.0
    final_overlap: float = 0.0
    elapsed: float = 0.0

    @property
    def node_count(self) -> int:
        """Number of exported nodes."""
        return len(self.nodes)

    def to_dicts(self) -> list[dict[str, Any]]:
        """Convert every node to its JSON shape."""
        return [node.to_dict() for node in self.nodes]


class LayoutEngine:
    """Engine running flatten, simulate and export for one tree at a time.

    The solver is synchronous and CPU bound (quadratic in the node count per
    step); hosts with a UI should run it through ``LayoutRunner.run_async``.
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        rng: np.random.Generator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the layout engine.

        Args:
            config: Layout configuration (uses defaults if None)
            rng: Random generator shared by every phase of one calculation
                (a new one seeded from config.seed per calculation if None)
            clock: Current time in seconds, used for placeholder timestamps
        """
        self.config = config or LayoutConfig()
        self._rng = rng
        self._clock = clock

    def calculate_layout(self, root: TreeNode | Mapping[str, Any] | None) -> LayoutResult:
        """Calculate the city layout for a tree.

        Args:
            root: Root of the tree, its dict form, or None for an empty tree

        Returns:
            LayoutResult with one node per flattened record

        Raises:
            ValidationError: If the tree is malformed
            LayoutError: If the tree contains a cycle
        """
        started = time.perf_counter()
        rng = self._rng if self._rng is not None else np.random.default_rng(self.config.seed)

        flattener = TreeFlattener(self.config, rng)
        records = flattener.flatten(root)
        if not records:
            logger.debug("Empty tree, nothing to lay out")
            return LayoutResult()

        simulator = ForceSimulator(
            self.config,
            rng,
            CollisionResolver(self.config.collision_passes, rng),
        )
        simulator.scale_for(len(records))
        initial_overlap = average_overlap(records, simulator.padding)

        simulator.run(records)
        final_overlap = average_overlap(records, simulator.padding)

        nodes = LayoutExporter(self.config, rng, self._clock).export(records)
        elapsed = time.perf_counter() - started

        logger.info(
            f"Laid out {len(nodes)} nodes in {elapsed * 1000:.1f} ms "
            f"(overlap {initial_overlap:.2f} -> {final_overlap:.2f})"
        )

        return LayoutResult(
            nodes=nodes,
            truncated=flattener.truncated,
            bounds=BoundingBox.enclosing(nodes),
            initial_overlap=initial_overlap,
            final_overlap=final_overlap,
            elapsed=elapsed,
        )


def generate_city_layout(
    root: TreeNode | Mapping[str, Any] | None,
    iterations: int = 50,
    config: LayoutConfig | None = None,
    rng: np.random.Generator | None = None,
) -> list[CityNode]:
    """Convert a file tree into a 3D city layout using a force-directed algorithm.

    Args:
        root: Root of the tree, its dict form, or None for an empty tree
        iterations: Number of simulation steps
        config: Layout configuration for everything except iterations
        rng: Random generator (seeded from config.seed if None)

    Returns:
        Exported nodes in depth-first pre-order
    """
    config = replace(config or LayoutConfig(), iterations=iterations)
    return LayoutEngine(config, rng).calculate_layout(root).nodes
