"""Model layer for pycity.

This module contains the input tree description and the records
the layout engine works on and produces.
"""

from pycity.model.node import NodeType, TreeNode
from pycity.model.records import CityNode, SimulationNode

__all__ = ["NodeType", "TreeNode", "CityNode", "SimulationNode"]
