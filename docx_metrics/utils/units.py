"""Unit conversion helpers for WordprocessingML measurements."""
from __future__ import annotations

TWIPS_PER_POINT = 20
POINTS_PER_INCH = 72
TWIPS_PER_INCH = TWIPS_PER_POINT * POINTS_PER_INCH


def inches_to_twips(value: float) -> float:
    """Convert inches to twips without rounding."""
    return value * TWIPS_PER_INCH


def pixels_to_twips(value: float, dpi: float) -> float:
    """Convert a pixel length rendered at ``dpi`` into twips."""
    return value / dpi * TWIPS_PER_INCH


def pixels_to_points(value: float, dpi: float) -> float:
    """Convert a pixel length rendered at ``dpi`` into points."""
    return value / dpi * POINTS_PER_INCH


def points_to_pixels(value: float, dpi: float) -> float:
    return value * dpi / POINTS_PER_INCH
