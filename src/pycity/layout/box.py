"""Footprint bounding boxes and overlap measurement."""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from pycity.model.records import CityNode, SimulationNode


@dataclass
class BoundingBox:
    """Axis-aligned bounding box around one or more city boxes.

    Attributes:
        min_x: Minimum X coordinate
        max_x: Maximum X coordinate
        min_y: Minimum Y coordinate
        max_y: Maximum Y coordinate
        min_z: Minimum Z coordinate
        max_z: Maximum Z coordinate
    """

    min_x: float
    max_x: float
    min_y: float
    max_y: float
    min_z: float
    max_z: float

    @property
    def width(self) -> float:
        """Size along the X axis."""
        return self.max_x - self.min_x

    @property
    def depth(self) -> float:
        """Size along the Z axis."""
        return self.max_z - self.min_z

    def intersects(self, other: "BoundingBox") -> bool:
        """Check if this bounding box intersects with another.

        Args:
            other: Other bounding box to check intersection with

        Returns:
            True if the boxes intersect, False otherwise
        """
        return (
            self.min_x < other.max_x
            and self.max_x > other.min_x
            and self.min_y < other.max_y
            and self.max_y > other.min_y
            and self.min_z < other.max_z
            and self.max_z > other.min_z
        )

    def contains_point(self, x: float, y: float, z: float) -> bool:
        """Check if a point is inside this bounding box."""
        return (
            self.min_x <= x <= self.max_x
            and self.min_y <= y <= self.max_y
            and self.min_z <= z <= self.max_z
        )

    @classmethod
    def from_city_node(cls, node: CityNode) -> "BoundingBox":
        """Create the bounding box of a single exported node.

        Args:
            node: Exported node

        Returns:
            A new BoundingBox instance
        """
        x, y, z = node.position
        width, height, depth = node.size
        return cls(
            min_x=x - width / 2,
            max_x=x + width / 2,
            min_y=y - height / 2,
            max_y=y + height / 2,
            min_z=z - depth / 2,
            max_z=z + depth / 2,
        )

    @classmethod
    def enclosing(cls, nodes: Sequence[CityNode]) -> "BoundingBox | None":
        """Create the bounding box enclosing every node, or None for no nodes."""
        if not nodes:
            return None

        boxes = [cls.from_city_node(node) for node in nodes]
        return cls(
            min_x=min(b.min_x for b in boxes),
            max_x=max(b.max_x for b in boxes),
            min_y=min(b.min_y for b in boxes),
            max_y=max(b.max_y for b in boxes),
            min_z=min(b.min_z for b in boxes),
            max_z=max(b.max_z for b in boxes),
        )


def average_overlap(records: Sequence[SimulationNode], padding: float) -> float:
    """Calculate the mean pairwise horizontal overlap of a set of records.

    The overlap of a pair is how far it is inside its required clearance,
    ``radius_i + radius_j + padding``, and 0 for pairs that keep it.

    Args:
        records: Simulation records
        padding: Extra clearance required between footprints

    Returns:
        Mean overlap over all unordered pairs (0.0 for fewer than two records)
    """
    count = len(records)
    if count < 2:
        return 0.0

    positions = np.array([record.position[[0, 2]] for record in records], dtype=float)
    radii = np.array([record.radius for record in records], dtype=float)

    first, second = np.triu_indices(count, k=1)
    diff = positions[first] - positions[second]
    dist = np.hypot(diff[:, 0], diff[:, 1])
    overlap = np.maximum(radii[first] + radii[second] + padding - dist, 0.0)
    return float(overlap.mean())
