"""Conversion of simulation records into exported city nodes."""

import time
from collections.abc import Callable, Sequence

import numpy as np

from pycity.layout.config import LayoutConfig
from pycity.model.records import CityNode, SimulationNode

DAY_MS = 1000.0 * 60 * 60 * 24


def file_extension(node_id: str) -> str:
    """Get the extension of a file from its id.

    Only the last path segment is considered, so dots in folder names
    do not leak into the extension: "repo.v1/Makefile" gives "txt" rather
    than "v1/Makefile". Extensionless files and names ending in a dot also
    get "txt".

    Args:
        node_id: Parent-path-qualified id

    Returns:
        Text after the last "." of the file name, or "txt" if there is none
    """
    name = node_id.rsplit("/", 1)[-1]
    _, dot, extension = name.rpartition(".")
    if not dot or not extension:
        return "txt"
    return extension


class LayoutExporter:
    """Maps final simulation records to the records handed to the renderer.

    The modification time is a placeholder: the tree carries no history, so
    each node gets "now" minus a random age of up to ``max_age_days``.
    """

    def __init__(
        self,
        config: LayoutConfig | None = None,
        rng: np.random.Generator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the exporter.

        Args:
            config: Layout configuration (uses defaults if None)
            rng: Random generator for the placeholder modification times
            clock: Returns the current time in seconds since the epoch
        """
        self.config = config or LayoutConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.clock = clock

    def export(self, records: Sequence[SimulationNode]) -> list[CityNode]:
        """Export every record in order.

        Args:
            records: Simulation records after the simulation has run

        Returns:
            One CityNode per record
        """
        now_ms = self.clock() * 1000.0
        max_age_ms = self.config.max_age_days * DAY_MS
        return [self._export_node(record, now_ms - self.rng.uniform(0.0, max_age_ms)) for record in records]

    def _export_node(self, record: SimulationNode, last_modified: float) -> CityNode:
        x, _, z = record.position
        height = record.target_height
        width = record.radius * self.config.footprint_scale

        return CityNode(
            id=record.id,
            position=(float(x), height / 2, float(z)),
            size=(width, height, width),
            type=record.type,
            loc=record.loc,
            last_modified=last_modified,
            extension=file_extension(record.id) if record.is_file else "folder",
            parent_id=record.parent_id,
            code_snippet=record.code_snippet,
            url=record.url,
        )
