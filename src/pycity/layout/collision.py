"""Positional collision correction between footprints."""

import numpy as np


def random_directions(rng: np.random.Generator, count: int) -> np.ndarray:
    """Draw count random unit vectors in the horizontal plane.

    Args:
        rng: Random generator
        count: Number of directions

    Returns:
        Array of shape (count, 2) with unit-length rows
    """
    angles = rng.uniform(0.0, 2.0 * np.pi, size=count)
    return np.column_stack((np.cos(angles), np.sin(angles)))


class CollisionResolver:
    """Pushes overlapping footprints apart by direct position correction.

    Each pass looks at every unordered pair closer than the sum of their
    radii plus padding and moves both members half the overlap apart along
    the line between them. The corrections of one pass are computed from the
    same snapshot of positions and applied together. A few passes reduce
    overlap but do not guarantee that none remains.
    """

    def __init__(self, passes: int = 2, rng: np.random.Generator | None = None) -> None:
        """Initialize the resolver.

        Args:
            passes: Number of correction passes per call
            rng: Random generator used to separate coincident pairs
        """
        self.passes = passes
        self.rng = rng if rng is not None else np.random.default_rng()

    def resolve(self, positions: np.ndarray, radii: np.ndarray, padding: float) -> int:
        """Correct overlaps in place.

        Args:
            positions: Array of shape (n, 2) with horizontal (x, z) positions
            radii: Array of shape (n,) with footprint radii
            padding: Extra clearance required between footprints

        Returns:
            Number of pair corrections applied over all passes
        """
        count = len(positions)
        if count < 2:
            return 0

        first, second = np.triu_indices(count, k=1)
        min_dist = radii[first] + radii[second] + padding
        corrections = 0

        for _ in range(self.passes):
            diff = positions[first] - positions[second]
            dist = np.hypot(diff[:, 0], diff[:, 1])
            overlapping = dist < min_dist
            if not overlapping.any():
                break

            diff = diff[overlapping]
            dist = dist[overlapping]
            direction = np.empty_like(diff)

            coincident = dist == 0.0
            separated = ~coincident
            direction[separated] = diff[separated] / dist[separated, None]
            direction[coincident] = random_directions(self.rng, int(coincident.sum()))

            shift = direction * ((min_dist[overlapping] - dist) * 0.5)[:, None]
            delta = np.zeros_like(positions)
            np.add.at(delta, first[overlapping], shift)
            np.subtract.at(delta, second[overlapping], shift)
            positions += delta
            corrections += len(shift)

        return corrections
