"""Persist measurement reports for inspection."""
from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any

from docx_metrics.model.run_model import MeasurementReport


class ReportWriter:
    """Serializes a measurement report to JSON."""

    def __init__(self, destination: Path) -> None:
        self.destination = destination

    def write(self, report: MeasurementReport) -> None:
        self.destination.parent.mkdir(parents=True, exist_ok=True)
        self.destination.write_text(dumps_report(report))


def dumps_report(report: MeasurementReport) -> str:
    payload = _serialize(report)
    payload["total_width_twips"] = report.total_width_twips
    payload["unmeasured_runs"] = report.unmeasured_runs
    return json.dumps(payload, indent=2, ensure_ascii=False)


def _serialize(value: Any) -> Any:
    if is_dataclass(value):
        return {k: _serialize(v) for k, v in asdict(value).items()}
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    if isinstance(value, Decimal):
        return str(value)
    return value
