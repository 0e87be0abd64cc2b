# floor_modes/post.py
"""
Per-frame post-processing: deformed line geometry, time histories and
playback read-outs for a renderer or a report.

None of these functions advance or modify playback state.
"""

from typing import Dict, Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from .displacement import DisplacementEngine
from .model import Number
from .playback import PlaybackController


def deformed_segments(controller: PlaybackController) -> np.ndarray:
    """
    Displaced endpoint coordinates of every line element.

    Lines referencing an unknown node are skipped (cannot happen on a
    validated dataset).

    Returns:
        np.ndarray of shape (n_lines, 2, 3): [[xi, yi, zi'], [xj, yj, zj']]
    """
    engine = controller.engine
    nodes = engine.dataset.nodes
    state = controller.state

    if state.current_mode is None:
        z = np.array([engine.undisplaced_elevation(i) for i in engine.node_ids])
    else:
        z = engine.displaced_elevations(state.current_mode, state.time, state.scale)

    segments = []
    for line in engine.dataset.lines or []:
        ni, nj = nodes.get(line.node_i), nodes.get(line.node_j)
        if ni is None or nj is None:
            continue
        segments.append([
            [ni.x, ni.y, z[engine.row(line.node_i)]],
            [nj.x, nj.y, z[engine.row(line.node_j)]],
        ])
    return np.array(segments, dtype=float).reshape(-1, 2, 3)


def time_history(
    engine: DisplacementEngine,
    mode: Number,
    times: Iterable[float],
    scale: float = 1.0,
    node_ids: Optional[Sequence[Number]] = None,
) -> pd.DataFrame:
    """
    Displaced elevation of nodes over time for one mode.

    Args:
        engine: DisplacementEngine of a validated dataset
        mode: Mode number
        times: Sample times in seconds
        scale: Display magnification S
        node_ids: Nodes to include (default: all, in dataset order)

    Returns:
        DataFrame indexed by time ("t"), one column per node id
    """
    times = np.asarray(list(times), dtype=float)
    if node_ids is None:
        node_ids = engine.node_ids
    rows = [engine.row(i) for i in node_ids]
    missing = [i for i, r in zip(node_ids, rows) if r is None]
    if missing:
        raise ValueError(f"Unknown node ids: {missing}")

    data = np.array(
        [engine.displaced_elevations(mode, t, scale)[rows] for t in times]
    ).reshape(len(times), len(rows))
    return pd.DataFrame(data, index=pd.Index(times, name="t"), columns=list(node_ids))


def playback_summary(controller: PlaybackController) -> Dict[str, object]:
    """Status read-out: mode, frequency, period, time, scale, speed, playing."""
    state = controller.state
    freq = controller.get_freq_hz()
    return {
        "mode": state.current_mode,
        "freq_hz": freq,
        "period_s": 1.0 / freq if freq > 0 else float("inf"),
        "time_s": state.time,
        "scale": state.scale,
        "speed": state.speed,
        "playing": state.playing,
    }
