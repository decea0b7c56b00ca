"""Force-directed simulation over flattened records."""

import logging

import numpy as np

from pycity.layout.collision import CollisionResolver, random_directions
from pycity.layout.config import LayoutConfig
from pycity.model.records import SimulationNode

logger = logging.getLogger(__name__)


class ForceSimulator:
    """Moves records apart while keeping children near their parents.

    Every step accumulates three forces in the horizontal plane:
    - Repulsion between every pair closer than twice their clearance
    - Attraction of each child toward its parent
    - Attraction of the root toward the origin

    then integrates them with damping and runs the collision resolver.
    The step count is fixed; there is no convergence test.
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        rng: np.random.Generator | None = None,
        resolver: CollisionResolver | None = None,
    ) -> None:
        """Initialize the simulator.

        Args:
            config: Layout configuration (uses defaults if None)
            rng: Random generator for coincident pairs
            resolver: Collision resolver run after every step
        """
        self.config = config or LayoutConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.resolver = resolver or CollisionResolver(self.config.collision_passes, self.rng)

        self.spacing = 1.0
        self.repulsion_strength = self.config.repulsion_base
        self.attraction_strength = self.config.attraction_base
        self.padding = self.config.padding_base

    def scale_for(self, node_count: int) -> None:
        """Derive force strengths and padding from the record count."""
        config = self.config
        self.spacing = config.spacing_multiplier(node_count)
        self.repulsion_strength = config.repulsion_base * self.spacing
        self.attraction_strength = config.attraction_base / self.spacing
        self.padding = config.padding_base * self.spacing

    def run(self, records: list[SimulationNode], iterations: int | None = None) -> None:
        """Run the simulation, updating record positions and velocities in place.

        Args:
            records: Records from the flattener
            iterations: Number of steps (uses config.iterations if None)
        """
        if iterations is None:
            iterations = self.config.iterations

        count = len(records)
        if count == 0:
            return

        self.scale_for(count)
        logger.debug(
            f"Simulating {count} records for {iterations} steps "
            f"(spacing={self.spacing:.3f}, padding={self.padding:.2f})"
        )

        positions = np.array([record.position[[0, 2]] for record in records], dtype=float)
        velocities = np.array([record.velocity[[0, 2]] for record in records], dtype=float)
        radii = np.array([record.radius for record in records], dtype=float)

        index = {record.id: i for i, record in enumerate(records)}
        parents = np.array(
            [index[record.parent_id] if record.parent_id is not None else -1 for record in records],
            dtype=int,
        )

        first, second = np.triu_indices(count, k=1)
        min_dist = radii[first] + radii[second] + self.padding
        repel_range_sq = 4.0 * min_dist * min_dist

        dt = self.config.time_step
        damping = self.config.damping

        for _ in range(iterations):
            forces = self._repulsion(positions, first, second, repel_range_sq)
            forces += self._attraction(positions, parents)

            velocities += forces * dt
            velocities *= damping
            positions += velocities * dt

            self.resolver.resolve(positions, radii, self.padding)

        for i, record in enumerate(records):
            record.position = np.array([positions[i, 0], 0.0, positions[i, 1]])
            record.velocity = np.array([velocities[i, 0], 0.0, velocities[i, 1]])

    def _repulsion(
        self,
        positions: np.ndarray,
        first: np.ndarray,
        second: np.ndarray,
        repel_range_sq: np.ndarray,
    ) -> np.ndarray:
        """Calculate pairwise repulsion forces.

        Args:
            positions: Array of shape (n, 2) with horizontal positions
            first: First index of every unordered pair
            second: Second index of every unordered pair
            repel_range_sq: Squared distance below which each pair repels

        Returns:
            Array of shape (n, 2) with the summed repulsion on each record
        """
        forces = np.zeros_like(positions)
        if len(first) == 0:
            return forces

        diff = positions[first] - positions[second]
        dist_sq = np.einsum("ij,ij->i", diff, diff)

        in_range = dist_sq < repel_range_sq
        if not in_range.any():
            return forces

        diff = diff[in_range]
        dist_sq = dist_sq[in_range]

        direction = np.empty_like(diff)
        degenerate = dist_sq < self.config.degenerate_epsilon
        regular = ~degenerate
        direction[regular] = diff[regular] / np.sqrt(dist_sq[regular])[:, None]
        direction[degenerate] = random_directions(self.rng, int(degenerate.sum()))

        push = direction * (self.repulsion_strength / (dist_sq + 0.1))[:, None]
        np.add.at(forces, first[in_range], push)
        np.subtract.at(forces, second[in_range], push)
        return forces

    def _attraction(self, positions: np.ndarray, parents: np.ndarray) -> np.ndarray:
        """Calculate attraction toward each record's parent, or the origin for the root."""
        targets = np.zeros_like(positions)
        has_parent = parents >= 0
        targets[has_parent] = positions[parents[has_parent]]
        return (targets - positions) * self.attraction_strength
