"""Entry-point measuring every run of a DOCX document."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence
from xml.etree import ElementTree as ET

from docx_metrics.metrics.backend import FontBackend
from docx_metrics.metrics.pillow_backend import PillowFontBackend
from docx_metrics.metrics.run_width import RunWidthEstimator
from docx_metrics.model.run_model import MeasurementReport, RunMeasurement
from docx_metrics.parser.docx_loader import DocxPackage
from docx_metrics.parser.run_annotator import RunFormattingAnnotator, iter_paragraph_runs
from docx_metrics.parser.run_properties import describe_run
from docx_metrics.parser.styles_parser import StylesParser
from docx_metrics.utils.debug import ReportWriter, dumps_report
from docx_metrics.utils.logger import get_logger, set_verbosity
from docx_metrics.utils.xml_utils import qualify

LOGGER = get_logger(__name__)


def measure_package(package: DocxPackage, estimator: RunWidthEstimator, source: str = "") -> MeasurementReport:
    """Annotate the package's body and estimate the width of each run."""
    styles = StylesParser(package.get_styles_xml()).parse()
    document_xml = package.require_document_xml()
    RunFormattingAnnotator(styles).annotate(document_xml)
    return MeasurementReport(source=source, runs=measure_tree(document_xml, estimator))


def measure_tree(document_xml: ET.ElementTree, estimator: RunWidthEstimator) -> List[RunMeasurement]:
    measurements: List[RunMeasurement] = []
    for paragraph_index, paragraph in enumerate(document_xml.getroot().iter(qualify("w:p"))):
        for run_index, run in enumerate(iter_paragraph_runs(paragraph)):
            descriptor = describe_run(run, paragraph)
            measurements.append(
                RunMeasurement(
                    paragraph_index=paragraph_index,
                    run_index=run_index,
                    text=descriptor.text,
                    font_name=descriptor.font_name,
                    font_size=descriptor.font_size,
                    width_twips=estimator.estimate_width_twips(descriptor),
                )
            )
    return measurements


def measure_document(docx_path: Path, backend: Optional[FontBackend] = None) -> MeasurementReport:
    """Load a DOCX file and measure its runs with ``backend`` (Pillow by default)."""
    package = DocxPackage.load(docx_path)
    estimator = RunWidthEstimator(backend or PillowFontBackend())
    report = measure_package(package, estimator, source=docx_path.name)
    unknown = estimator.cache.unknown_families
    if unknown:
        LOGGER.warning("Fonts listed but unusable: %s", ", ".join(sorted(unknown)))
    return report


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Estimate rendered run widths (twips) of a DOCX file")
    parser.add_argument("docx_file", help="Path to the input .docx file")
    parser.add_argument("--font-dir", action="append", default=None, help="Font directory to index (repeatable)")
    parser.add_argument("--output", help="Write the JSON report to this file instead of stdout")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    set_verbosity(args.verbose)
    docx_path = Path(args.docx_file).resolve()
    if not docx_path.exists():
        raise FileNotFoundError(f"DOCX file not found: {docx_path}")

    font_dirs = [Path(path) for path in args.font_dir] if args.font_dir else None
    LOGGER.info("Measuring runs of %s", docx_path.name)
    report = measure_document(docx_path, PillowFontBackend(font_dirs))
    LOGGER.info("Measured %d runs, %d without width", len(report.runs), report.unmeasured_runs)

    if args.output:
        ReportWriter(Path(args.output).resolve()).write(report)
    else:
        print(dumps_report(report))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
