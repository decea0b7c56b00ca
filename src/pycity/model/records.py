"""Working and output records produced by the layout engine."""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from pycity.model.node import NodeType


@dataclass
class SimulationNode:
    """Per-node simulation state owned by a single layout invocation.

    Attributes:
        id: Parent-path-qualified id ("repo/src/main.py")
        type: NodeType of the source node
        position: Position vector (x, y, z); y stays 0 during simulation
        velocity: Velocity vector, only meaningful during simulation
        radius: Footprint half-extent
        target_height: Height of the exported box
        parent_id: Id of the parent record (None for the root)
        children_ids: Ids of child records, filled after flattening
        code_snippet: Passthrough of the source node content
        loc: Lines of code (0 when unknown)
        url: Passthrough of the source node url
    """

    id: str
    type: NodeType
    position: np.ndarray
    radius: float
    target_height: float
    parent_id: str | None = None
    children_ids: list[str] = field(default_factory=list)
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    code_snippet: str | None = None
    loc: int = 0
    url: str | None = None

    @property
    def is_file(self) -> bool:
        """Check if this record is a file."""
        return self.type == NodeType.FILE

    def __repr__(self) -> str:
        x, _, z = self.position
        return f"SimulationNode({self.type.value}, {self.id}, x={x:.2f}, z={z:.2f})"


@dataclass
class CityNode:
    """Final placement and footprint for one input node.

    Attributes:
        id: Parent-path-qualified id
        position: Box center (x, height / 2, z)
        size: Box extents (width, height, depth)
        type: NodeType of the source node
        loc: Lines of code
        last_modified: Placeholder modification time in epoch milliseconds
        extension: File extension, or "folder"
        parent_id: Id of the parent node (None for the root)
        code_snippet: Passthrough of the source node content
        url: Passthrough of the source node url
    """

    id: str
    position: tuple[float, float, float]
    size: tuple[float, float, float]
    type: NodeType
    loc: int
    last_modified: float
    extension: str
    parent_id: str | None = None
    code_snippet: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape consumed by the renderer."""
        result: dict[str, Any] = {
            "id": self.id,
            "position": list(self.position),
            "size": list(self.size),
            "type": self.type.value,
            "loc": self.loc,
            "lastModified": self.last_modified,
            "extension": self.extension,
        }
        if self.parent_id is not None:
            result["parentId"] = self.parent_id
        if self.code_snippet is not None:
            result["codeSnippet"] = self.code_snippet
        if self.url is not None:
            result["url"] = self.url
        return result
