"""Configuration for the force-directed layout."""

import math
from dataclasses import dataclass

from pycity.errors import ValidationError, validate_range


@dataclass
class LayoutConfig:
    """Configuration for the layout engine.

    The defaults are the constants of the city model; changing them
    changes the shape of every layout.

    Attributes:
        iterations: Number of simulation steps
        node_cap: Maximum number of records a single layout produces
        file_radius: Footprint half-extent of files
        folder_radius: Footprint half-extent of folders
        loc_height_scale: Height per line of code for files
        min_height: Minimum file height
        max_height: Maximum file height
        folder_height: Height of folders
        jitter: Width of the square around the parent a child starts in
        repulsion_base: Repulsion strength before spacing scaling
        attraction_base: Attraction strength before spacing scaling
        padding_base: Clearance between footprints before spacing scaling
        spacing_log_scale: Factor applied to ln(node count) for spacing
        damping: Velocity multiplier applied each step
        time_step: Integration time step
        collision_passes: Collision correction passes per step
        degenerate_epsilon: Squared distance below which a pair is coincident
        footprint_scale: Exported box width relative to the radius
        max_age_days: Upper bound of the placeholder modification age
        seed: Seed of the random generator (None for an unseeded run)
    """

    iterations: int = 50
    node_cap: int = 400
    file_radius: float = 5.0
    folder_radius: float = 10.0
    loc_height_scale: float = 0.5
    min_height: float = 2.0
    max_height: float = 100.0
    folder_height: float = 1.0
    jitter: float = 100.0
    repulsion_base: float = 2000.0
    attraction_base: float = 0.01
    padding_base: float = 15.0
    spacing_log_scale: float = 0.5
    damping: float = 0.9
    time_step: float = 0.1
    collision_passes: int = 2
    degenerate_epsilon: float = 0.1
    footprint_scale: float = 1.5
    max_age_days: float = 30.0
    seed: int | None = 0

    def __post_init__(self) -> None:
        for name in ("iterations", "node_cap", "collision_passes"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(name, value, "integer")
        validate_range(self.iterations, 0, 100_000, "iterations")
        validate_range(self.node_cap, 0, 100_000, "node_cap")
        validate_range(self.collision_passes, 0, 100, "collision_passes")
        validate_range(self.damping, 0.0, 1.0, "damping")
        validate_range(self.min_height, 0.0, self.max_height, "min_height")
        for name in ("file_radius", "folder_radius", "time_step", "jitter", "max_age_days"):
            validate_range(getattr(self, name), 0.0, math.inf, name)

    def spacing_multiplier(self, node_count: int) -> float:
        """Calculate the spacing multiplier for a layout of node_count records.

        Grows with ln(node_count) so larger trees spread out sub-linearly.
        """
        if node_count <= 1:
            return 1.0
        return max(1.0, math.log(node_count) * self.spacing_log_scale)

    def file_height(self, loc: int) -> float:
        """Calculate the height of a file from its lines of code."""
        return min(max(loc * self.loc_height_scale, self.min_height), self.max_height)
