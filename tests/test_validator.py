# File: tests/test_validator.py
"""
Test the validator.py module (FloorDataset -> ValidationReport).

TEST PHILOSOPHY:
---------------
- Start from a dataset that is known to be valid
- Break exactly one thing per test
- Assert on the stable codes, never on the exact message wording
  (only that the message carries the offending id/index)
"""

import json
from collections import Counter

from floor_modes.model import FloorDataset
from floor_modes.parser import normalize
from floor_modes.validator import (
    E_FREQ_INFINITY,
    E_FREQ_NAN,
    E_FREQ_NON_POSITIVE,
    E_LINE_DUPLICATE,
    E_LINE_NODE_UNDEF,
    E_LINE_SELF_LOOP,
    E_LINES_EMPTY,
    E_MISSING_KEY,
    E_MODE_FREQ_MISMATCH,
    E_MODE_NODE_UNDEF,
    E_NODE_DUPLICATE,
    E_NODES_EMPTY,
    E_UZ_INFINITY,
    E_UZ_NAN,
    W_FREQ_HIGH,
    W_MODE_ALL_ZERO,
    W_NODE_Z_MIXED,
    ValidationReport,
    validate,
)


def make_floor_dict():
    return {
        "nodes": [
            {"id": 1, "x": 0, "y": 0, "z": 0},
            {"id": 2, "x": 6, "y": 0, "z": 0},
            {"id": 3, "x": 6, "y": 4, "z": 0},
            {"id": 4, "x": 0, "y": 4, "z": 0},
        ],
        "lines": [
            {"id": 1, "node_i": 1, "node_j": 2},
            {"id": 2, "node_i": 2, "node_j": 3},
            {"id": 3, "node_i": 3, "node_j": 4},
            {"id": 4, "node_i": 4, "node_j": 1},
        ],
        "freq_hz": {"1": 5.2},
        "modes": {"1": {"1": 0.0, "2": 0.4, "3": 1.0, "4": 0.5}},
    }


def check(doc, **kwargs):
    """Normalize + validate a document given as a dict."""
    return validate(normalize(json.dumps(doc)), **kwargs)


def error_codes(report):
    return Counter(issue.code for issue in report.errors)


def warning_codes(report):
    return Counter(issue.code for issue in report.warnings)


def test_valid_dataset_has_no_errors():
    report = check(make_floor_dict())

    assert report.errors == []
    assert report.warnings == []
    assert report.ok


def test_missing_key_stops_validation():
    """
    A missing required structure is fatal and nothing else is checked
    (the duplicate node below must NOT be reported).
    """
    doc = make_floor_dict()
    del doc["lines"]
    doc["nodes"].append({"id": 1, "x": 0, "y": 0, "z": 0})

    report = check(doc)

    assert error_codes(report) == Counter({E_MISSING_KEY: 1})
    assert '"lines"' in report.errors[0].message
    assert not report.ok


def test_all_keys_missing_reported_each():
    report = validate(FloorDataset())

    assert error_codes(report) == Counter({E_MISSING_KEY: 4})
    assert report.warnings == []


def test_empty_nodes_and_lines():
    doc = make_floor_dict()
    doc["nodes"] = []
    doc["lines"] = []

    report = check(doc)

    # Mode 1 still references nodes 1-4, but emptiness gates everything else
    assert error_codes(report) == Counter({E_NODES_EMPTY: 1, E_LINES_EMPTY: 1})


def test_duplicate_node_reported_once():
    """
    Two nodes sharing id 2: exactly one E_NODE_DUPLICATE, and the node
    table holds the last-seen values.
    """
    doc = make_floor_dict()
    doc["nodes"].append({"id": 2, "x": 6, "y": 0, "z": 0.5})

    dataset = normalize(json.dumps(doc))
    report = validate(dataset)

    assert error_codes(report) == Counter({E_NODE_DUPLICATE: 1})
    assert "id=2" in report.errors[0].message
    assert dataset.nodes[2].z == 0.5
    # The later node also made the floor non-planar
    assert warning_codes(report) == Counter({W_NODE_Z_MIXED: 1})


def test_triplicate_node_reported_per_extra_occurrence():
    doc = make_floor_dict()
    doc["nodes"] += [{"id": 3, "x": 6, "y": 4}, {"id": 3, "x": 6, "y": 4}]

    report = check(doc)

    assert error_codes(report) == Counter({E_NODE_DUPLICATE: 2})


def test_line_checks():
    """Duplicate line id, dangling endpoint and self-loop each reported."""
    doc = make_floor_dict()
    doc["lines"] = [
        {"id": 1, "node_i": 1, "node_j": 2},
        {"id": 1, "node_i": 2, "node_j": 3},
        {"id": 3, "node_i": 3, "node_j": 99},
        {"id": 4, "node_i": 4, "node_j": 4},
    ]

    report = check(doc)

    assert error_codes(report) == Counter({
        E_LINE_DUPLICATE: 1,
        E_LINE_NODE_UNDEF: 1,
        E_LINE_SELF_LOOP: 1,
    })
    messages = " ".join(issue.message for issue in report.errors)
    assert "lines[1].id=1" in messages
    assert "lines[2].node_j=99" in messages
    assert "lines[3].id=4" in messages


def test_frequency_sanity():
    doc = make_floor_dict()
    # Non-finite values arrive as strings; bare NaN / Infinity literals are not JSON
    doc["freq_hz"] = {"1": "NaN", "2": "Infinity", "3": -1.0, "4": 45.0, "5": 0.0}
    doc["modes"] = {str(m): {"3": 1.0} for m in range(1, 6)}

    report = check(doc)

    assert error_codes(report) == Counter({
        E_FREQ_NAN: 1,
        E_FREQ_INFINITY: 1,
        E_FREQ_NON_POSITIVE: 2,
    })
    assert warning_codes(report) == Counter({W_FREQ_HIGH: 1})
    assert "freq_hz[4]" in report.warnings[0].message


def test_non_numeric_frequency_is_nan():
    doc = make_floor_dict()
    doc["freq_hz"] = {"1": "fast"}

    report = check(doc)

    assert error_codes(report) == Counter({E_FREQ_NAN: 1})


def test_mode_frequency_parity_both_directions():
    """freq_hz has mode 1 only, modes has mode 2 only: one error per direction."""
    doc = make_floor_dict()
    doc["freq_hz"] = {"1": 5.0}
    doc["modes"] = {"2": {"3": 1.0}}

    report = check(doc)

    assert error_codes(report) == Counter({E_MODE_FREQ_MISMATCH: 2})
    messages = [issue.message for issue in report.errors]
    assert any("mode 2" in m for m in messages)
    assert any("mode 1" in m for m in messages)


def test_mode_references_undefined_node():
    doc = make_floor_dict()
    doc["modes"]["1"]["99"] = 0.2

    report = check(doc)

    assert error_codes(report) == Counter({E_MODE_NODE_UNDEF: 1})
    assert "node 99" in report.errors[0].message


def test_amplitude_sanity():
    doc = make_floor_dict()
    doc["modes"]["1"] = {"2": "NaN", "3": "-Infinity", "4": 1.0}

    report = check(doc)

    assert error_codes(report) == Counter({E_UZ_NAN: 1, E_UZ_INFINITY: 1})


def test_all_zero_mode_is_warning():
    doc = make_floor_dict()
    doc["freq_hz"]["2"] = 8.0
    doc["modes"]["2"] = {"1": 0.0, "2": 1e-12}

    report = check(doc)

    assert report.ok
    assert warning_codes(report) == Counter({W_MODE_ALL_ZERO: 1})
    assert "modes[2]" in report.warnings[0].message


def test_non_planar_floor_single_warning():
    doc = make_floor_dict()
    doc["nodes"][0]["z"] = 0.3
    doc["nodes"][1]["z"] = -0.1

    report = check(doc)

    assert report.ok
    assert warning_codes(report) == Counter({W_NODE_Z_MIXED: 1})


def test_error_cap():
    """150 self-loops are capped at 100 errors; validation stops there."""
    doc = make_floor_dict()
    doc["lines"] = [{"id": i, "node_i": 1, "node_j": 1} for i in range(150)]
    doc["freq_hz"] = {"1": -5.0}

    report = check(doc)

    assert len(report.errors) == 100
    assert report.limit_reached
    # Stopped before reaching the frequency checks
    assert E_FREQ_NON_POSITIVE not in error_codes(report)


def test_custom_error_cap():
    doc = make_floor_dict()
    doc["lines"] = [{"id": i, "node_i": 1, "node_j": 1} for i in range(20)]

    report = check(doc, max_errors=5)

    assert len(report.errors) == 5


def test_report_accumulator():
    report = ValidationReport(max_errors=2)

    assert report.add_error("E_X", "first") is False
    assert report.add_error("E_X", "second") is True
    assert report.add_error("E_X", "third") is True
    report.add_warning("W_Y", "note")

    assert len(report.errors) == 2
    assert report.errors[0].message == "E_X: first"
    assert report.codes() == ["E_X", "E_X", "W_Y"]
