"""Style model captures Word style definitions in a normalized form."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Optional
from xml.etree import ElementTree as ET


@dataclass(slots=True)
class StyleDefinition:
    """Style information after resolving ``basedOn`` inheritance.

    ``run_properties`` and ``paragraph_properties`` hold the property elements
    (children of ``w:rPr`` / ``w:pPr``) with the nearest definition first.
    """

    style_id: str
    style_type: str
    name: Optional[str]
    run_properties: List[ET.Element] = field(default_factory=list)
    paragraph_properties: List[ET.Element] = field(default_factory=list)
    based_on: Optional[str] = None
    is_default: bool = False


class StylesCatalog:
    """Collection of resolved styles keyed by identifier."""

    def __init__(
        self,
        styles: Mapping[str, StyleDefinition],
        default_run_properties: Optional[List[ET.Element]] = None,
    ):
        self._styles = dict(styles)
        self._default_run_properties = list(default_run_properties or [])

    def get(self, style_id: Optional[str]) -> Optional[StyleDefinition]:
        """Return the resolved style definition given its identifier."""
        if style_id is None:
            return None
        return self._styles.get(style_id)

    def default_for(self, style_type: str) -> Optional[StyleDefinition]:
        """Return the default style for the given style type if defined."""
        for style in self._styles.values():
            if style.style_type == style_type and style.is_default:
                return style
        return None

    @property
    def default_run_properties(self) -> List[ET.Element]:
        """Run properties from ``w:docDefaults/w:rPrDefault``."""
        return list(self._default_run_properties)
