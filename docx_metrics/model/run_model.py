"""Run-level inputs and outputs of the width estimator."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class RunDescriptor:
    """Resolved formatting and content of a single run, ready for measurement.

    ``font_size`` is expressed in half-points as WordprocessingML stores it;
    ``tab_width`` is already in twips.
    """

    font_name: Optional[str]
    font_size: Optional[Decimal] = None
    bold: bool = False
    bold_cs: bool = False
    italic: bool = False
    italic_cs: bool = False
    text: str = ""
    tab_width: float = 0.0
    language_type: Optional[str] = None


@dataclass(slots=True)
class RunMeasurement:
    """Estimated width of one run inside the document body."""

    paragraph_index: int
    run_index: int
    text: str
    font_name: Optional[str]
    font_size: Optional[Decimal]
    width_twips: int


@dataclass(slots=True)
class MeasurementReport:
    """Ordered run measurements for a whole document."""

    source: str
    runs: List[RunMeasurement]

    @property
    def total_width_twips(self) -> int:
        return sum(run.width_twips for run in self.runs)

    @property
    def unmeasured_runs(self) -> int:
        """Runs that contributed no width (no font, unknown font, or empty)."""
        return sum(1 for run in self.runs if run.width_twips == 0)
