# floor_modes - Floor Vibration Mode Playback
"""
FLOOR_MODES: Floor Vibration Mode Dataset Pipeline
===================================================

This package provides:
- Normalization of a loosely-typed floor JSON document
- Structural / numeric validation with stable error and warning codes
- Displacement engine: animated vertical displacement of a mode shape
- Playback state machine driven by the host's frame deltas

ARCHITECTURE:
-------------
    model.py         Node, LineElement, FloorDataset
    config.py        Tolerances, caps, playback ranges (CONFIG)
    parser.py        JSON text -> FloorDataset (ParseError)
    validator.py     FloorDataset -> ValidationReport
    displacement.py  DisplacementEngine (L_floor, A_ref, Umax)
    playback.py      PlaybackController / PlaybackState
    session.py       One-call load flow for hosts
    post.py          Deformed segments, time histories, read-outs
"""

from .model import Node, LineElement, FloorDataset
from .parser import normalize, ParseError
from .validator import validate, ValidationReport, ValidationIssue
from .displacement import DisplacementEngine, InvalidDatasetError
from .playback import PlaybackController, PlaybackState
from .session import load_floor_data, FloorSession

__version__ = "0.1.0"

__all__ = [
    'Node', 'LineElement', 'FloorDataset',
    'normalize', 'ParseError',
    'validate', 'ValidationReport', 'ValidationIssue',
    'DisplacementEngine', 'InvalidDatasetError',
    'PlaybackController', 'PlaybackState',
    'load_floor_data', 'FloorSession',
]
