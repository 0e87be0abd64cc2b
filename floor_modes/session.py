# floor_modes/session.py
"""
Load flow: raw text -> normalize -> validate -> engine + controller.

Every call builds a brand-new FloorSession. A host that loads another
document drops the old session as a whole, so derived metrics of a
previous dataset can never leak into the new one.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .displacement import DisplacementEngine
from .model import FloorDataset
from .parser import ParseError, normalize
from .playback import PlaybackController
from .validator import ValidationReport, validate

logger = logging.getLogger(__name__)


@dataclass
class FloorSession:
    """Result of load_floor_data(). engine/controller are None unless ok."""
    report: ValidationReport
    dataset: Optional[FloorDataset] = None
    engine: Optional[DisplacementEngine] = None
    controller: Optional[PlaybackController] = None

    @property
    def ok(self) -> bool:
        return self.controller is not None


def load_floor_data(raw_text: str) -> FloorSession:
    """
    Parse, validate and (if there are no errors) prepare playback.

    A parse failure is reported as a single E_JSON_PARSE error instead of
    being raised, so the host can present every outcome the same way.
    """
    try:
        dataset = normalize(raw_text)
    except ParseError as e:
        logger.warning("Floor data rejected: %s", e)
        report = ValidationReport()
        report.add_error(ParseError.code, str(e))
        return FloorSession(report=report)

    report = validate(dataset)
    if not report.ok:
        logger.warning(
            "Floor data '%s' rejected with %d errors", dataset.title, len(report.errors)
        )
        return FloorSession(report=report, dataset=dataset)

    for warning in report.warnings:
        logger.info(warning.message)

    engine = DisplacementEngine(dataset)
    return FloorSession(
        report=report,
        dataset=dataset,
        engine=engine,
        controller=PlaybackController(engine),
    )
