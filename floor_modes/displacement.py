# floor_modes/displacement.py
"""
DISPLACEMENT ENGINE: Animated Vertical Displacement of a Mode Shape
===================================================================

PURPOSE:
--------
Given a validated FloorDataset, compute the displaced elevation of any node
for a mode m at time t:

    u_i(t)  = S * A_ref * (uz_i,m / Umax_m) * sin(2π f_m t)
    z_i'(t) = z_i + u_i(t)

where
    L_floor = max(maxX - minX, maxY - minY)   (1 if the floor has zero span)
    A_ref   = L_floor / 10                    (peak display amplitude at S = 1)
    Umax_m  = max_i |uz_i,m|                  (1 if every uz is zero)

WHY NORMALIZE BY Umax?
----------------------
Mode shapes from an eigen solver have arbitrary scaling (mass-normalized,
unit-max, ...). Dividing by Umax_m makes the largest displacement of every
mode exactly S * A_ref, so every mode is shown at a size proportional to
the floor, whatever the solver's convention.

The engine caches L_floor, A_ref and Umax_m on construction and holds no
other state: displaced_elevation() is a pure function of its arguments.
"""

import logging
import math
from typing import Dict, List, Optional

import numpy as np

from .config import CONFIG
from .model import FloorDataset, Number

logger = logging.getLogger(__name__)

TWO_PI = 2.0 * math.pi


class InvalidDatasetError(RuntimeError):
    """Raised when the engine is given a dataset lacking nodes, modes or frequencies."""
    pass


def floor_length(xs: np.ndarray, ys: np.ndarray) -> float:
    """
    Characteristic floor length L_floor = max(span_x, span_y).

    Returns 1.0 when the span is exactly zero (single node or co-located
    nodes) so that A_ref never collapses to zero.
    """
    if xs.size == 0:
        return 1.0
    length = float(max(np.ptp(xs), np.ptp(ys)))
    return length if length != 0.0 else 1.0


def max_amplitude(uz: np.ndarray) -> float:
    """Umax = max |uz|, or 1.0 for an all-zero (or empty) mode shape."""
    if uz.size == 0:
        return 1.0
    umax = float(np.max(np.abs(uz)))
    return umax if umax != 0.0 else 1.0


class DisplacementEngine:
    """
    Displaced elevations for a validated dataset.

    Parameters:
    -----------
    dataset : FloorDataset
        Must have passed validate() without errors. The engine does not
        re-validate; it only refuses datasets missing a whole structure.

    Attributes:
    -----------
    node_ids : list
        Node ids in dataset order (row order of the vectorized results)
    l_floor, a_ref : float
    u_max : dict[mode, float]
    """

    def __init__(self, dataset: FloorDataset):
        if dataset.nodes is None or dataset.modes is None or dataset.freq_hz is None:
            raise InvalidDatasetError(
                "Dataset is missing nodes, modes or freq_hz; validate() it first"
            )

        self.dataset = dataset
        self._nodes = dataset.nodes
        self._freq_hz = dataset.freq_hz
        self._modes = dataset.modes

        self.node_ids: List[Number] = list(self._nodes.keys())
        self._row = {node_id: i for i, node_id in enumerate(self.node_ids)}

        coords = np.array(
            [(n.x, n.y, n.z) for n in self._nodes.values()], dtype=float
        ).reshape(-1, 3)
        self._z = coords[:, 2]

        self.l_floor = floor_length(coords[:, 0], coords[:, 1])
        self.a_ref = self.l_floor / CONFIG.a_ref_divisor

        # uz per mode as an array aligned with node_ids, plus Umax
        self._shape_arrays: Dict[Number, np.ndarray] = {}
        self.u_max: Dict[Number, float] = {}
        for mode, shape in self._modes.items():
            uz = np.array([shape.get(node_id, 0.0) for node_id in self.node_ids], dtype=float)
            self._shape_arrays[mode] = uz
            self.u_max[mode] = max_amplitude(
                np.array(list(shape.values()), dtype=float)
            )

        logger.debug(
            "DisplacementEngine: %d nodes, %d modes, L_floor=%.4g, A_ref=%.4g",
            len(self.node_ids), len(self._modes), self.l_floor, self.a_ref,
        )

    @property
    def mode_numbers(self) -> List[Number]:
        """Mode numbers with a mode shape, ascending."""
        return sorted(self._modes.keys())

    def frequency(self, mode: Optional[Number]) -> float:
        """Frequency of mode in Hz, 0.0 if the mode has none."""
        if mode is None:
            return 0.0
        return self._freq_hz.get(mode, 0.0) or 0.0

    def undisplaced_elevation(self, node_id: Number) -> float:
        """z of the node, 0.0 for an unknown node."""
        node = self._nodes.get(node_id)
        return float(node.z) if node is not None else 0.0

    def displaced_elevation(
        self, node_id: Number, mode: Number, time: float, scale: float
    ) -> float:
        """
        z_i'(t) for one node.

        Args:
            node_id: Node id (unknown ids return 0.0)
            mode: Mode number (no mode shape -> undisplaced z)
            time: Elapsed animation time in seconds
            scale: Display magnification S

        Returns:
            Displaced elevation z + u
        """
        node = self._nodes.get(node_id)
        if node is None:
            return 0.0

        shape = self._modes.get(mode)
        if shape is None:
            return float(node.z)

        uz = shape.get(node_id, 0.0)
        umax = self.u_max.get(mode, 1.0)
        freq = self.frequency(mode)

        u = scale * self.a_ref * (uz / umax) * math.sin(TWO_PI * freq * time)
        return float(node.z) + u

    def displaced_elevations(self, mode: Number, time: float, scale: float) -> np.ndarray:
        """
        Vectorized z' for every node, in node_ids order.

        Returns:
            np.ndarray of shape (n_nodes,)
        """
        uz = self._shape_arrays.get(mode)
        if uz is None:
            return self._z.copy()

        phase = np.sin(TWO_PI * self.frequency(mode) * time)
        return self._z + scale * self.a_ref * (uz / self.u_max[mode]) * phase

    def row(self, node_id: Number) -> Optional[int]:
        """Row of node_id in the vectorized results (None if unknown)."""
        return self._row.get(node_id)
