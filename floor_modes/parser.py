# floor_modes/parser.py
"""JSON loading, key canonicalization, numeric coercion and defaulting."""

import json
import logging
import math
import re
from typing import Any, Dict, List

from .model import FloorDataset, LineElement, Node, Number

logger = logging.getLogger(__name__)

_NAN = float("nan")
_MISSING = object()

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[-\s]+")

# Numeric string forms accepted by a JSON/JS number literal, plus "Infinity"
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INFINITY = re.compile(r"[+-]?Infinity")
_HEX = re.compile(r"0[xX][0-9a-fA-F]+")


class ParseError(ValueError):
    """Raised when the input text is not well-formed JSON."""
    code = "E_JSON_PARSE"


def to_snake_case(key: str) -> str:
    """
    Canonicalize a key: "nodeI", "node-i", "node_i" -> "node_i".

    >>> to_snake_case("freqHz")
    'freq_hz'
    """
    key = _CAMEL_BOUNDARY.sub(r"_\1", key)
    return _SEPARATORS.sub("_", key).lower()


def canonicalize_keys(value: Any) -> Any:
    """Recursively rewrite every mapping key with to_snake_case()."""
    if isinstance(value, list):
        return [canonicalize_keys(v) for v in value]
    if isinstance(value, dict):
        return {to_snake_case(str(k)): canonicalize_keys(v) for k, v in value.items()}
    return value


def to_number(value: Any = _MISSING) -> Number:
    """
    Coerce a loosely-typed JSON value to a number.

    Rules:
    ------
    - missing            -> nan
    - None / ""          -> 0
    - bool               -> 0 / 1
    - int / float        -> unchanged
    - numeric string     -> parsed (decimal/exponent, hex "0x..", "Infinity")
    - anything else      -> nan ("inf", "nan", "1_0" included)

    Integral finite results are returned as int so that ids and mode
    numbers parsed from keys ("3") compare equal to ids parsed from
    values (3) and print without a trailing ".0".
    """
    if value is _MISSING:
        return _NAN
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        number = _parse_numeric_text(text)
    else:
        return _NAN

    if isinstance(number, float) and math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def _parse_numeric_text(text: str) -> float:
    # float() alone would also take "inf", "nan" and "1_0"
    if _DECIMAL.fullmatch(text) or _INFINITY.fullmatch(text):
        return float(text)
    if _HEX.fullmatch(text):
        return float(int(text, 16))
    return _NAN


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON value")


def _coordinate(entry: Dict[str, Any], key: str) -> float:
    # missing and null coordinates both default to 0
    return float(to_number(entry.get(key)))


def _build_nodes(raw_nodes: List[Any]):
    nodes: Dict[Number, Node] = {}
    counts: Dict[Number, int] = {}
    for entry in raw_nodes:
        if not isinstance(entry, dict):
            entry = {}
        node_id = to_number(entry.get("id", _MISSING))
        counts[node_id] = counts.get(node_id, 0) + 1
        # last write wins; counts keep the evidence of the duplicate
        nodes[node_id] = Node(
            id=node_id,
            x=_coordinate(entry, "x"),
            y=_coordinate(entry, "y"),
            z=_coordinate(entry, "z"),
        )
    return nodes, counts


def _build_lines(raw_lines: List[Any]) -> List[LineElement]:
    lines = []
    for entry in raw_lines:
        if not isinstance(entry, dict):
            entry = {}
        lines.append(LineElement(
            id=to_number(entry.get("id", _MISSING)),
            node_i=to_number(entry.get("node_i", _MISSING)),
            node_j=to_number(entry.get("node_j", _MISSING)),
        ))
    return lines


def _build_modes(raw_modes: Dict[str, Any], node_ids) -> Dict[Number, Dict[Number, float]]:
    modes = {}
    for mode_key, amplitudes in raw_modes.items():
        # every node starts at uz = 0.0, explicit amplitudes overwrite
        shape: Dict[Number, float] = {node_id: 0.0 for node_id in node_ids}
        if isinstance(amplitudes, dict):
            for node_key, uz in amplitudes.items():
                shape[to_number(node_key)] = float(to_number(uz))
        modes[to_number(mode_key)] = shape
    return modes


def normalize(raw_text: str) -> FloorDataset:
    """
    Parse raw JSON text into a canonical FloorDataset.

    Only syntax is checked here. Ranges, duplicates and references are the
    validator's job; structures absent from the document are left as None
    so that validate() can report them.

    Args:
        raw_text: JSON document with "meta", "nodes", "lines", "freq_hz"
            and "modes" (field layout as in model.FloorDataset)

    Returns:
        FloorDataset built fresh for this call

    Raises:
        ParseError: If raw_text is not well-formed JSON (NaN / Infinity
            literals included) or is nested too deeply to process
    """
    try:
        raw = json.loads(raw_text, parse_constant=_reject_constant)
        data = canonicalize_keys(raw)
    except (ValueError, TypeError) as e:
        # JSONDecodeError is a ValueError
        raise ParseError(f"JSON parse error: {e}") from e
    except RecursionError as e:
        raise ParseError(f"JSON parse error: document nested too deeply ({e})") from e

    if not isinstance(data, dict):
        logger.warning("Top-level JSON value is %s, not an object", type(data).__name__)
        data = {}

    meta = data.get("meta")
    if not isinstance(meta, dict):
        meta = {}

    nodes, counts = None, {}
    if isinstance(data.get("nodes"), list):
        nodes, counts = _build_nodes(data["nodes"])

    lines = None
    if isinstance(data.get("lines"), list):
        lines = _build_lines(data["lines"])

    freq_hz = None
    if isinstance(data.get("freq_hz"), dict):
        freq_hz = {
            to_number(mode_key): float(to_number(freq))
            for mode_key, freq in data["freq_hz"].items()
        }

    modes = None
    if isinstance(data.get("modes"), dict):
        modes = _build_modes(data["modes"], (nodes or {}).keys())

    logger.debug(
        "Normalized dataset: %d nodes, %d lines, %d frequencies, %d modes",
        len(nodes or {}), len(lines or []), len(freq_hz or {}), len(modes or {}),
    )

    return FloorDataset(
        meta=meta,
        nodes=nodes,
        node_id_counts=counts,
        lines=lines,
        freq_hz=freq_hz,
        modes=modes,
    )
