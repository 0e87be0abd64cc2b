# floor_modes/validator.py
"""
VALIDATOR: Structural and Numeric Consistency Checks
====================================================

PURPOSE:
--------
Consume a FloorDataset from parser.normalize() and report every problem
that makes it unfit (errors) or questionable (warnings) for display.
Nothing is raised and nothing is mutated: problems become entries of a
ValidationReport so that a caller can show the full list in one pass.

CHECK ORDER:
------------
Checks run in dependency order. Each check returns True to stop the run:

    1. required structures present   (E_MISSING_KEY)       -> stop if any
    2. nodes / lines non-empty       (E_NODES_EMPTY, ...)  -> stop if any
    3. node ids unique               (E_NODE_DUPLICATE)
    4-6. lines: unique, endpoints defined, no self-loop
    7. frequencies finite and > 0    (+ W_FREQ_HIGH)
    8. same mode numbers in freq_hz and modes
    9-11. mode shapes: known nodes, finite uz (+ W_MODE_ALL_ZERO)
    12. planar floor                 (W_NODE_Z_MIXED)

Error collection is capped (CONFIG.max_errors). Once the cap is reached
the report is returned as it stands.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from .config import CONFIG
from .model import FloorDataset

logger = logging.getLogger(__name__)

# Error codes (fatal)
E_MISSING_KEY = "E_MISSING_KEY"
E_NODES_EMPTY = "E_NODES_EMPTY"
E_NODE_DUPLICATE = "E_NODE_DUPLICATE"
E_LINES_EMPTY = "E_LINES_EMPTY"
E_LINE_DUPLICATE = "E_LINE_DUPLICATE"
E_LINE_NODE_UNDEF = "E_LINE_NODE_UNDEF"
E_LINE_SELF_LOOP = "E_LINE_SELF_LOOP"
E_FREQ_NAN = "E_FREQ_NAN"
E_FREQ_INFINITY = "E_FREQ_INFINITY"
E_FREQ_NON_POSITIVE = "E_FREQ_NON_POSITIVE"
E_MODE_FREQ_MISMATCH = "E_MODE_FREQ_MISMATCH"
E_MODE_NODE_UNDEF = "E_MODE_NODE_UNDEF"
E_UZ_NAN = "E_UZ_NAN"
E_UZ_INFINITY = "E_UZ_INFINITY"

# Warning codes (display proceeds)
W_FREQ_HIGH = "W_FREQ_HIGH"
W_MODE_ALL_ZERO = "W_MODE_ALL_ZERO"
W_NODE_Z_MIXED = "W_NODE_Z_MIXED"

# Source document names of the required structures
REQUIRED_KEYS = ("nodes", "lines", "freq_hz", "modes")


@dataclass(frozen=True)
class ValidationIssue:
    """One report entry. `code` is stable, `message` embeds ids/indices."""
    code: str
    message: str


@dataclass
class ValidationReport:
    """
    Accumulator threaded through the checks.

    add_error() returns True once the error cap is reached; callers stop
    as soon as they see it.
    """
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    max_errors: int = CONFIG.max_errors

    @property
    def ok(self) -> bool:
        """True when there is no fatal error."""
        return not self.errors

    @property
    def limit_reached(self) -> bool:
        return len(self.errors) >= self.max_errors

    def add_error(self, code: str, message: str) -> bool:
        if self.limit_reached:
            return True
        self.errors.append(ValidationIssue(code, f"{code}: {message}"))
        return self.limit_reached

    def add_warning(self, code: str, message: str) -> None:
        self.warnings.append(ValidationIssue(code, f"{code}: {message}"))

    def codes(self) -> List[str]:
        """Codes of all errors then all warnings, in report order."""
        return [i.code for i in self.errors] + [i.code for i in self.warnings]


# =============================================================================
# Individual checks: (dataset, report) -> stop?
# =============================================================================

def _check_required(data: FloorDataset, report: ValidationReport) -> bool:
    present = {
        "nodes": data.nodes,
        "lines": data.lines,
        "freq_hz": data.freq_hz,
        "modes": data.modes,
    }
    missing = False
    for key in REQUIRED_KEYS:
        if present[key] is None:
            missing = True
            if report.add_error(E_MISSING_KEY, f'required key "{key}" is missing'):
                return True
    # nothing below is meaningful without all four structures
    return missing


def _check_non_empty(data: FloorDataset, report: ValidationReport) -> bool:
    empty = False
    if not data.nodes:
        empty = True
        if report.add_error(E_NODES_EMPTY, "nodes is empty"):
            return True
    if not data.lines:
        empty = True
        if report.add_error(E_LINES_EMPTY, "lines is empty"):
            return True
    return empty


def _check_node_ids(data: FloorDataset, report: ValidationReport) -> bool:
    for node_id, count in data.node_id_counts.items():
        for occurrence in range(2, count + 1):
            if report.add_error(
                E_NODE_DUPLICATE,
                f"nodes id={node_id} is duplicated (occurrence {occurrence} of {count})",
            ):
                return True
    return False


def _check_lines(data: FloorDataset, report: ValidationReport) -> bool:
    nodes = data.nodes
    seen = set()
    for i, line in enumerate(data.lines):
        if line.id in seen:
            if report.add_error(E_LINE_DUPLICATE, f"lines[{i}].id={line.id} is duplicated"):
                return True
        seen.add(line.id)

        for end in ("node_i", "node_j"):
            node_id = getattr(line, end)
            if node_id not in nodes:
                if report.add_error(
                    E_LINE_NODE_UNDEF,
                    f"lines[{i}].{end}={node_id} is not defined in nodes",
                ):
                    return True

        if line.node_i == line.node_j:
            if report.add_error(
                E_LINE_SELF_LOOP,
                f"lines[{i}].id={line.id} has self-loop (node_i == node_j == {line.node_i})",
            ):
                return True
    return False


def _check_frequencies(data: FloorDataset, report: ValidationReport) -> bool:
    for mode, freq in data.freq_hz.items():
        if math.isnan(freq):
            stop = report.add_error(E_FREQ_NAN, f"freq_hz[{mode}]={freq} is NaN")
        elif math.isinf(freq):
            stop = report.add_error(E_FREQ_INFINITY, f"freq_hz[{mode}]={freq} is Infinity")
        elif freq <= 0:
            stop = report.add_error(E_FREQ_NON_POSITIVE, f"freq_hz[{mode}]={freq} must be > 0")
        else:
            stop = False
        if stop:
            return True

        if math.isfinite(freq) and freq > CONFIG.high_freq_hz:
            report.add_warning(
                W_FREQ_HIGH,
                f"freq_hz[{mode}]={freq} > {CONFIG.high_freq_hz:g} Hz may reduce visual clarity",
            )
    return False


def _check_mode_parity(data: FloorDataset, report: ValidationReport) -> bool:
    for mode in data.modes:
        if mode not in data.freq_hz:
            if report.add_error(E_MODE_FREQ_MISMATCH, f"modes has mode {mode} but freq_hz does not"):
                return True
    for mode in data.freq_hz:
        if mode not in data.modes:
            if report.add_error(E_MODE_FREQ_MISMATCH, f"freq_hz has mode {mode} but modes does not"):
                return True
    return False


def _check_mode_shapes(data: FloorDataset, report: ValidationReport) -> bool:
    for mode, shape in data.modes.items():
        all_zero = True
        for node_id, uz in shape.items():
            if node_id not in data.nodes:
                if report.add_error(
                    E_MODE_NODE_UNDEF, f"modes[{mode}] references undefined node {node_id}"
                ):
                    return True

            if math.isnan(uz):
                stop = report.add_error(E_UZ_NAN, f"modes[{mode}][{node_id}] uz is NaN")
            elif math.isinf(uz):
                stop = report.add_error(E_UZ_INFINITY, f"modes[{mode}][{node_id}] uz is Infinity")
            else:
                stop = False
                if abs(uz) > CONFIG.eps:
                    all_zero = False
            if stop:
                return True

        if all_zero and shape:
            report.add_warning(
                W_MODE_ALL_ZERO,
                f"modes[{mode}] all uz values are zero (|uz| <= {CONFIG.eps:g})",
            )
    return False


def _check_planarity(data: FloorDataset, report: ValidationReport) -> bool:
    z_values = [node.z for node in data.nodes.values()]
    first_z = z_values[0]
    if any(abs(z - first_z) > CONFIG.eps for z in z_values):
        report.add_warning(
            W_NODE_Z_MIXED,
            "node z-coordinates are not uniform; floor may not be planar",
        )
    return False


_CHECKS = (
    _check_required,
    _check_non_empty,
    _check_node_ids,
    _check_lines,
    _check_frequencies,
    _check_mode_parity,
    _check_mode_shapes,
    _check_planarity,
)


def validate(dataset: FloorDataset, max_errors: Optional[int] = None) -> ValidationReport:
    """
    Validate a normalized dataset.

    Args:
        dataset: FloorDataset from parser.normalize()
        max_errors: Error cap (default CONFIG.max_errors)

    Returns:
        ValidationReport with errors (fatal) and warnings (informational).
        A dataset with any error must not be handed to DisplacementEngine.
    """
    report = ValidationReport(
        max_errors=CONFIG.max_errors if max_errors is None else max_errors
    )

    for check in _CHECKS:
        if check(dataset, report) or report.limit_reached:
            break

    logger.debug(
        "Validation finished: %d errors, %d warnings%s",
        len(report.errors), len(report.warnings),
        " (error limit reached)" if report.limit_reached else "",
    )
    return report
