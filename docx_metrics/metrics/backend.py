"""Font backend contract used by the run width estimator."""
from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Set, Union

GENERIC_TYPOGRAPHIC = "generic-typographic"
NOMINAL_DPI = 96.0


class FontStyle(enum.Flag):
    """Style flags requested when instantiating a font."""

    REGULAR = 0
    BOLD = enum.auto()
    ITALIC = enum.auto()


@dataclass(frozen=True, slots=True)
class TextMeasurement:
    """Result of measuring a string: width in backend pixels plus counts."""

    width: float
    char_count: int
    line_count: int


@dataclass(frozen=True, slots=True)
class InstantiationFailure:
    """Typed failure returned when a family cannot be turned into a font."""

    family: str
    reason: str


class FontHandle:
    """Scoped font resource handed out by a backend.

    Handles must be released after use; they act as context managers so the
    release happens on every exit path.
    """

    def __init__(self, family: str, size_points: float, style: FontStyle, native: Any = None) -> None:
        self.family = family
        self.size_points = size_points
        self.style = style
        self._native = native
        self._closed = False

    @property
    def native(self) -> Any:
        if self._closed:
            raise ValueError(f"Font handle for {self.family!r} has been released")
        return self._native

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._native = None
        self._closed = True

    def __enter__(self) -> "FontHandle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"FontHandle({self.family!r}, {self.size_points}pt, {self.style}, {state})"


InstantiationResult = Union[FontHandle, InstantiationFailure]


class FontBackend(ABC):
    """Font inventory and measurement capability.

    Pixel widths reported by ``measure`` are expressed at ``dpi``.
    """

    dpi: float = NOMINAL_DPI

    @abstractmethod
    def enumerate_families(self) -> Set[str]:
        """Return the names of every family the backend can instantiate."""

    @abstractmethod
    def instantiate(self, family: str, size_points: float, style: FontStyle) -> InstantiationResult:
        """Create a font handle or describe why the family is unusable."""

    @abstractmethod
    def measure(self, handle: FontHandle, text: str, spacing: str = GENERIC_TYPOGRAPHIC) -> TextMeasurement:
        """Measure ``text`` set in ``handle``."""

