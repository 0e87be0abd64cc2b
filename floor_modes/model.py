# floor_modes/model.py
"""
FLOOR MODEL DEFINITIONS: Node, LineElement and FloorDataset
===========================================================

PURPOSE:
--------
This module defines the canonical in-memory form of a floor vibration
dataset, the thing the normalizer builds and everything downstream reads:
- Node: a point of the floor with x, y, z coordinates
- LineElement: a member connecting two nodes (drawn as a line)
- FloorDataset: nodes + lines + natural frequencies + mode shapes

ENGINEERING CONTEXT:
--------------------
A floor vibration mode m is described by:
- its natural frequency f_m (Hz)
- its mode shape: the vertical modal amplitude uz of every node

The frequencies and shapes come from an external FE analysis; here we only
carry them and animate them. Mode shapes are dimensionless (only the ratio
uz / max|uz| matters for display).

TYPE ALIASES:
-------------
    FrequencyTable = {mode_number: freq_hz}
    ModeShapes     = {mode_number: {node_id: uz}}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]

FrequencyTable = Dict[Number, float]
ModeShapes = Dict[Number, Dict[Number, float]]


@dataclass(frozen=True)
class Node:
    """
    A node (joint) of the floor.

    Parameters:
    -----------
    id : int
        Unique identifier for this node (used as key in mode shapes)

    x, y : float
        Planar coordinates (the floor spans the x-y plane)

    z : float
        Elevation; the undisplaced vertical position

    Notes:
    ------
    - frozen=True makes nodes immutable (can't accidentally modify coordinates)
    - The vertical displacement of a mode is added to z, never stored on the node
    """
    id: Number
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class LineElement:
    """
    A line element (beam/girder) connecting node_i to node_j.

    Only topology is carried: no section or material properties are needed
    to display a mode shape.
    """
    id: Number
    node_i: Number  # Start node ID
    node_j: Number  # End node ID


@dataclass(frozen=True)
class FloorDataset:
    """
    Canonical floor dataset produced by parser.normalize().

    Attributes:
    -----------
    meta : dict
        Free-form metadata from the input document (title, units, ...)
    nodes : dict[id, Node] or None
        Node table. Last occurrence wins for duplicated ids.
        None when the input had no "nodes" array.
    node_id_counts : dict[id, int]
        How many times each node id occurred in the input. This is the only
        evidence of duplicates left once the node table is built.
    lines : list[LineElement] or None
    freq_hz : FrequencyTable or None
    modes : ModeShapes or None
        Every node id of `nodes` has an amplitude in every mode.

    Notes:
    ------
    frozen=True prevents rebinding the tables; the validator and the
    displacement engine only read them.
    """
    meta: Dict[str, Any] = field(default_factory=dict)
    nodes: Optional[Dict[Number, Node]] = None
    node_id_counts: Dict[Number, int] = field(default_factory=dict)
    lines: Optional[List[LineElement]] = None
    freq_hz: Optional[FrequencyTable] = None
    modes: Optional[ModeShapes] = None

    @property
    def title(self) -> str:
        """Dataset title from meta, 'untitled' if not given."""
        title = self.meta.get("title") if isinstance(self.meta, dict) else None
        return str(title) if title else "untitled"

    def mode_numbers(self) -> List[Number]:
        """Mode numbers defined by the mode shapes, ascending."""
        if not self.modes:
            return []
        return sorted(self.modes.keys())
