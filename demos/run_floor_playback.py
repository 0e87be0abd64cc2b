#!/usr/bin/env python3
"""
RUN_FLOOR_PLAYBACK: Load, Validate and Animate a Floor Mode
===========================================================

This demo plays the role of the host application:
1. Read a floor JSON document from disk
2. Normalize + validate it (print every error / warning)
3. Step playback with fixed frame deltas, printing node elevations
4. Optionally plot the time history of the selected mode

Run with:
    python demos/run_floor_playback.py
    python demos/run_floor_playback.py path/to/floor.json --mode 2 --plot
"""

import argparse
import logging
import sys
from pathlib import Path

import numpy as np

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from floor_modes import load_floor_data
from floor_modes.post import deformed_segments, playback_summary, time_history

SAMPLE = Path(__file__).parent / "data" / "sample_case.json"


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def main() -> int:
    parser = argparse.ArgumentParser(
        description='Validate a floor vibration dataset and step its playback',
    )
    parser.add_argument('path', nargs='?', default=str(SAMPLE),
                        help='Floor JSON file (default: bundled sample)')
    parser.add_argument('--mode', type=int, default=None,
                        help='Mode number to play (default: first mode)')
    parser.add_argument('--scale', type=float, default=1.0,
                        help='Display magnification, clamped to [0.5, 3.0]')
    parser.add_argument('--fps', type=float, default=60.0,
                        help='Simulated frame rate (default: 60)')
    parser.add_argument('--frames', type=int, default=30,
                        help='Number of frames to step (default: 30)')
    parser.add_argument('--plot', action='store_true',
                        help='Plot one period of the time history (matplotlib)')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    # =========================================================================
    # STEP 1: LOAD + VALIDATE
    # =========================================================================
    print_header("STEP 1: Load and Validate")
    text = Path(args.path).read_text(encoding="utf-8")
    session = load_floor_data(text)

    for issue in session.report.warnings:
        print(f"  [warning] {issue.message}")
    for issue in session.report.errors:
        print(f"  [error]   {issue.message}")

    if not session.ok:
        print(f"\n  Dataset rejected ({len(session.report.errors)} errors).")
        return 1

    engine = session.engine
    ctrl = session.controller
    print(f"  Title:   {session.dataset.title}")
    print(f"  Nodes:   {len(engine.node_ids)}, lines: {len(session.dataset.lines)}")
    print(f"  Modes:   {ctrl.mode_list}")
    print(f"  L_floor: {engine.l_floor:.3f} m, A_ref: {engine.a_ref:.3f} m")

    # =========================================================================
    # STEP 2: PLAYBACK
    # =========================================================================
    print_header("STEP 2: Playback")
    if args.mode is not None:
        ctrl.set_mode(args.mode)
    ctrl.set_scale(args.scale)
    ctrl.play()

    dt = 1.0 / args.fps
    for _ in range(args.frames):
        ctrl.update(dt)

    summary = playback_summary(ctrl)
    print(f"  Mode {summary['mode']}: f = {summary['freq_hz']:.2f} Hz, "
          f"T = {summary['period_s']:.3f} s, t = {summary['time_s']:.3f} s")
    for node_id in engine.node_ids:
        print(f"    node {node_id}: z' = {ctrl.get_displaced_z(node_id):+.4f}")

    segments = deformed_segments(ctrl)
    print(f"  Deformed segments: {segments.shape[0]}, "
          f"max |z'| = {np.max(np.abs(segments[:, :, 2])):.4f}")

    # =========================================================================
    # STEP 3: TIME HISTORY (optional plot)
    # =========================================================================
    if args.plot and summary['freq_hz'] > 0:
        import matplotlib.pyplot as plt

        period = summary['period_s']
        times = np.linspace(0.0, period, 101)
        history = time_history(engine, ctrl.current_mode, times, scale=ctrl.scale)

        fig, ax = plt.subplots(figsize=(10, 5))
        for node_id in history.columns:
            ax.plot(history.index, history[node_id], label=f"node {node_id}")
        ax.set_xlabel("t [s]")
        ax.set_ylabel("z' [m]")
        ax.set_title(f"{session.dataset.title}: mode {ctrl.current_mode} "
                     f"({summary['freq_hz']:.2f} Hz)")
        ax.grid(True, alpha=0.3)
        ax.legend(loc="upper right", fontsize=8)
        plt.tight_layout()
        plt.show()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
