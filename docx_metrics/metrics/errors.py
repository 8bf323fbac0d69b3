"""Exceptions raised by the metrics layer."""
from __future__ import annotations


class FontMetricsError(Exception):
    """Base class for run measurement failures."""


class MissingRunPropertiesError(FontMetricsError):
    """A run reached measurement without a ``w:rPr`` context.

    Formatting annotation guarantees every run carries run properties, so this
    indicates an integration defect rather than bad document data.
    """
