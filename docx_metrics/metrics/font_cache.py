"""Memoized knowledge about which font families can be measured."""
from __future__ import annotations

import threading
from typing import FrozenSet, Iterable, Optional, Set

from docx_metrics.metrics.backend import FontBackend
from docx_metrics.utils.logger import get_logger

LOGGER = get_logger(__name__)


class FontAvailabilityCache:
    """Known and unknown font family names for one conversion session.

    Known families are enumerated from the backend on first lookup and never
    refreshed. Unknown families only ever grow.
    """

    def __init__(self, backend: FontBackend, known_families: Optional[Iterable[str]] = None) -> None:
        self._backend = backend
        self._lock = threading.Lock()
        self._known: Optional[FrozenSet[str]] = frozenset(known_families) if known_families is not None else None
        self._unknown: Set[str] = set()

    def is_known(self, name: str) -> bool:
        """Return whether the backend lists ``name`` (case-sensitive)."""
        return name in self._known_families()

    def is_unknown(self, name: str) -> bool:
        with self._lock:
            return name in self._unknown

    def mark_unknown(self, name: str) -> None:
        with self._lock:
            if name in self._unknown:
                return
            self._unknown.add(name)
        LOGGER.debug("Font family %r marked as unknown", name)

    @property
    def unknown_families(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._unknown)

    def _known_families(self) -> FrozenSet[str]:
        known = self._known
        if known is not None:
            return known
        with self._lock:
            if self._known is None:
                families = frozenset(self._backend.enumerate_families())
                LOGGER.debug("Enumerated %d font families", len(families))
                self._known = families
            return self._known
