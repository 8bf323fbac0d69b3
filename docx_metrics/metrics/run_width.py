"""Estimate the rendered width of WordprocessingML runs in twips."""
from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence, Tuple

from docx_metrics.metrics.backend import (
    GENERIC_TYPOGRAPHIC,
    FontBackend,
    FontStyle,
    InstantiationFailure,
)
from docx_metrics.metrics.font_cache import FontAvailabilityCache
from docx_metrics.model.run_model import RunDescriptor
from docx_metrics.utils.logger import get_logger
from docx_metrics.utils.units import pixels_to_points, pixels_to_twips

LOGGER = get_logger(__name__)

DEFAULT_FONT_SIZE_HALF_POINTS = Decimal(22)

# (max text length, replication multiplier); longer text is measured once.
REPLICATION_TABLE: Sequence[Tuple[int, int]] = (
    (2, 100),
    (4, 50),
    (8, 25),
    (16, 12),
    (32, 6),
)


def replication_multiplier(length: int) -> int:
    """Return how many times a string of ``length`` chars is repeated before measuring.

    Backends quantize fractional pixel widths, which distorts very short
    strings the most; measuring a longer repetition and dividing averages the
    rounding error out.
    """
    for limit, multiplier in REPLICATION_TABLE:
        if length <= limit:
            return multiplier
    return 1


def resolve_style(run: RunDescriptor) -> FontStyle:
    """Combine direct and complex-script bold/italic flags."""
    style = FontStyle.REGULAR
    if run.bold or run.bold_cs:
        style |= FontStyle.BOLD
    if run.italic or run.italic_cs:
        style |= FontStyle.ITALIC
    return style


class RunWidthEstimator:
    """Measures runs through a font backend, degrading to zero when it cannot."""

    def __init__(
        self,
        backend: FontBackend,
        cache: Optional[FontAvailabilityCache] = None,
        *,
        dpi: Optional[float] = None,
    ) -> None:
        self._backend = backend
        self._cache = cache if cache is not None else FontAvailabilityCache(backend)
        self._dpi = dpi if dpi is not None else backend.dpi

    @property
    def cache(self) -> FontAvailabilityCache:
        return self._cache

    def estimate_width_twips(self, run: RunDescriptor) -> int:
        """Return the estimated width of ``run`` in twips.

        Zero means the run could not be measured (no font, unavailable font,
        nothing to measure) and must be treated as "no contribution".
        """
        font_name = run.font_name
        if font_name is None:
            return 0
        if self._cache.is_unknown(font_name):
            return 0

        size = run.font_size if run.font_size is not None else DEFAULT_FONT_SIZE_HALF_POINTS
        if not size.is_finite() or size <= 0:
            LOGGER.debug("Run in %r has unusable font size %s, left unmeasured", font_name, size)
            return 0

        if not self._cache.is_known(font_name):
            LOGGER.debug("Font %r is not installed, run left unmeasured", font_name)
            return 0

        result = self._backend.instantiate(font_name, float(size) / 2.0, resolve_style(run))
        if isinstance(result, InstantiationFailure):
            LOGGER.warning("Font %r is listed but cannot be instantiated: %s", font_name, result.reason)
            self._cache.mark_unknown(font_name)
            return 0

        with result as handle:
            if not run.text:
                return int(run.tab_width)

            multiplier = replication_multiplier(len(run.text))
            # Trailing blank accounts for the non-breaking space later appended
            # to layout-critical runs such as list item numbers.
            # TODO: revisit once list numbering emits its own separator run.
            measured_text = (run.text + " ") * multiplier
            measurement = self._backend.measure(handle, measured_text, GENERIC_TYPOGRAPHIC)

        twips = pixels_to_twips(measurement.width, self._dpi) / multiplier + run.tab_width
        return int(twips)

    def measure_text_run_in_points(self, size_points: float, family: str, style: FontStyle, text: str) -> float:
        """Measure ``text`` at ``size_points`` and return its width in points.

        Raises ``LookupError`` when the family cannot be instantiated.
        """
        result = self._backend.instantiate(family, size_points, style)
        if isinstance(result, InstantiationFailure):
            raise LookupError(f"Font family {family!r} unavailable: {result.reason}")
        with result as handle:
            measurement = self._backend.measure(handle, text, GENERIC_TYPOGRAPHIC)
        return pixels_to_points(measurement.width, self._dpi)

    def measure_text_run_in_pixels(
        self, size_half_points: Decimal, family: str, style: FontStyle, text: str
    ) -> Optional[int]:
        """Measure ``text`` at a half-point size and return truncated pixels, or ``None``."""
        result = self._backend.instantiate(family, float(size_half_points) / 2.0, style)
        if isinstance(result, InstantiationFailure):
            return None
        with result as handle:
            measurement = self._backend.measure(handle, text, GENERIC_TYPOGRAPHIC)
        return int(measurement.width)
