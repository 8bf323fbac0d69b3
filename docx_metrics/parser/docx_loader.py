"""DOCX package loader responsible for unpacking the XML parts we measure."""
from __future__ import annotations

import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional
from xml.etree import ElementTree as ET

from docx_metrics.utils.logger import get_logger
from docx_metrics.utils.xml_utils import parse_xml

LOGGER = get_logger(__name__)

DOCUMENT_XML_PATH = "word/document.xml"
STYLES_XML_PATH = "word/styles.xml"


@dataclass(slots=True)
class DocxPackage:
    """Container for the XML parts extracted from a DOCX archive."""

    raw_parts: Mapping[str, bytes]
    xml_cache: Dict[str, ET.ElementTree] = field(default_factory=dict)

    document_xml: Optional[ET.ElementTree] = None
    styles_xml: Optional[ET.ElementTree] = None

    @classmethod
    def load(cls, docx_path: Path) -> "DocxPackage":
        """Open a DOCX archive and parse its document and styles parts."""
        with zipfile.ZipFile(docx_path) as docx_zip:
            parts = {name: docx_zip.read(name) for name in docx_zip.namelist()}

        LOGGER.debug("Loaded %d parts from %s", len(parts), docx_path.name)
        return cls.from_parts(parts)

    @classmethod
    def from_parts(cls, parts: Mapping[str, bytes]) -> "DocxPackage":
        package = cls(raw_parts=parts)
        package._initialize_caches()
        return package

    # ------------------------------------------------------------------
    # Public helpers
    def require_document_xml(self) -> ET.ElementTree:
        if self.document_xml is None:
            raise ValueError("Primary document part missing from package")
        return self.document_xml

    def get_styles_xml(self) -> Optional[ET.ElementTree]:
        return self.styles_xml

    # ------------------------------------------------------------------
    # Internal bootstrap
    def _initialize_caches(self) -> None:
        self.document_xml = self._parse_required(DOCUMENT_XML_PATH)
        self.styles_xml = self._parse_optional(STYLES_XML_PATH)

    def _parse_required(self, name: str) -> ET.ElementTree:
        tree = self._parse_optional(name)
        if tree is None:
            raise KeyError(f"Required DOCX part missing: {name}")
        return tree

    def _parse_optional(self, name: str) -> Optional[ET.ElementTree]:
        if name in self.xml_cache:
            return self.xml_cache[name]
        data = self.raw_parts.get(name)
        if data is None:
            return None
        tree = parse_xml(data)
        self.xml_cache[name] = tree
        return tree
