"""Helper functions to work with XML namespaces and parsing."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from xml.etree import ElementTree as ET


@dataclass(frozen=True)
class Namespaces:
    """Common OpenXML namespace prefixes used across parsers."""

    WORD: Dict[str, str] = None  # type: ignore[assignment]
    POWERTOOLS: Dict[str, str] = None  # type: ignore[assignment]

    def __post_init__(self) -> None:  # pragma: no cover
        raise RuntimeError("Namespaces should not be instantiated")


Namespaces.WORD = {  # type: ignore[attr-defined]
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
}
# Annotation namespace carrying resolved formatting (font name, language type, tab widths).
Namespaces.POWERTOOLS = {  # type: ignore[attr-defined]
    "pt": "http://powertools.codeplex.com/2011",
}

ET.register_namespace("w", Namespaces.WORD["w"])
ET.register_namespace("pt", Namespaces.POWERTOOLS["pt"])


def qualify(name: str) -> str:
    """Expand a ``prefix:local`` name into Clark notation."""
    prefix, local = name.split(":", 1)
    namespace = {**Namespaces.WORD, **Namespaces.POWERTOOLS}[prefix]
    return f"{{{namespace}}}{local}"


def parse_xml(data: bytes) -> ET.ElementTree:
    """Parse XML from raw bytes with sane defaults."""
    return ET.ElementTree(ET.fromstring(data))


def get_attr(element: Optional[ET.Element], name: str) -> Optional[str]:
    """Return a namespaced attribute (``w:val``, ``pt:FontName``) from ``element``."""
    if element is None:
        return None
    return element.attrib.get(qualify(name))
