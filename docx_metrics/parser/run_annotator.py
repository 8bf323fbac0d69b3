"""Flatten style-inherited run formatting onto runs before measurement."""
from __future__ import annotations

from copy import deepcopy
from typing import Iterator, List, Optional
from xml.etree import ElementTree as ET

from docx_metrics.model.style_model import StyleDefinition, StylesCatalog
from docx_metrics.parser.run_properties import BIDI, get_bool_prop
from docx_metrics.utils.logger import get_logger
from docx_metrics.utils.xml_utils import Namespaces, get_attr, qualify

LOGGER = get_logger(__name__)

WESTERN = "western"

P_TAG = qualify("w:p")
R_TAG = qualify("w:r")
RPR_TAG = qualify("w:rPr")
RSTYLE_TAG = qualify("w:rStyle")
FONT_NAME_ATTR = qualify("pt:FontName")
LANGUAGE_TYPE_ATTR = qualify("pt:LanguageType")


class RunFormattingAnnotator:
    """Give every run a complete ``w:rPr`` and a resolved ``pt:FontName``.

    Run properties absent from a run are copied from its character style, the
    paragraph style and the document defaults, in that order of precedence.
    Theme font references (``w:asciiTheme`` ...) are not resolved.
    """

    def __init__(self, styles: StylesCatalog) -> None:
        self._styles = styles

    def annotate(self, document_xml: ET.ElementTree) -> int:
        """Annotate paragraphs and runs in place and return the number of runs seen."""
        count = 0
        for paragraph in document_xml.getroot().iter(P_TAG):
            style = self._paragraph_style(paragraph)
            paragraph_sources = self._paragraph_sources(style)
            self._annotate_paragraph(paragraph, style, paragraph_sources)
            for run in iter_paragraph_runs(paragraph):
                self._annotate_run(run, paragraph_sources)
                count += 1
        LOGGER.debug("Annotated %d runs", count)
        return count

    def _paragraph_style(self, paragraph: ET.Element) -> Optional[StyleDefinition]:
        style_id = get_attr(paragraph.find("w:pPr/w:pStyle", Namespaces.WORD), "w:val")
        return self._styles.get(style_id) if style_id else self._styles.default_for("paragraph")

    def _paragraph_sources(self, style: Optional[StyleDefinition]) -> List[ET.Element]:
        sources: List[ET.Element] = []
        if style is not None:
            sources.extend(style.run_properties)
        sources.extend(self._styles.default_run_properties)
        return sources

    def _annotate_paragraph(
        self, paragraph: ET.Element, style: Optional[StyleDefinition], paragraph_sources: List[ET.Element]
    ) -> None:
        mark_props = paragraph.find("w:pPr/w:rPr", Namespaces.WORD)
        merged = merge_run_properties(list(mark_props) if mark_props is not None else [], paragraph_sources)
        language_type = BIDI if paragraph_is_bidi(paragraph, style) else WESTERN
        paragraph.set(LANGUAGE_TYPE_ATTR, language_type)
        font_name = font_from_properties(merged, language_type)
        if font_name:
            paragraph.set(FONT_NAME_ATTR, font_name)

    def _annotate_run(self, run: ET.Element, paragraph_sources: List[ET.Element]) -> None:
        run_props = run.find("w:rPr", Namespaces.WORD)
        if run_props is None:
            run_props = ET.Element(RPR_TAG)
            run.insert(0, run_props)

        sources: List[ET.Element] = []
        char_style = self._styles.get(get_attr(run_props.find("w:rStyle", Namespaces.WORD), "w:val"))
        if char_style is not None:
            sources.extend(char_style.run_properties)
        sources.extend(paragraph_sources)

        present = {child.tag for child in run_props}
        for element in merge_run_properties([], sources):
            if element.tag not in present and element.tag != RSTYLE_TAG:
                run_props.append(deepcopy(element))

        bidi = get_bool_prop(run_props, "w:rtl") or get_bool_prop(run_props, "w:cs")
        language_type = BIDI if bidi else WESTERN
        run.set(LANGUAGE_TYPE_ATTR, language_type)
        font_name = font_from_properties(list(run_props), language_type)
        if font_name:
            run.set(FONT_NAME_ATTR, font_name)


def paragraph_is_bidi(paragraph: ET.Element, style: Optional[StyleDefinition]) -> bool:
    """Return whether ``w:bidi`` is on, set directly or through the paragraph style."""
    direct = paragraph.find("w:pPr", Namespaces.WORD)
    if direct is not None and direct.find("w:bidi", Namespaces.WORD) is not None:
        return get_bool_prop(direct, "w:bidi")
    if style is None:
        return False
    style_props = ET.Element(qualify("w:pPr"))
    style_props.extend(style.paragraph_properties)
    return get_bool_prop(style_props, "w:bidi")


def merge_run_properties(primary: List[ET.Element], fallbacks: List[ET.Element]) -> List[ET.Element]:
    """Combine property elements; the first occurrence of each tag wins."""
    merged: List[ET.Element] = []
    seen = set()
    for element in primary + fallbacks:
        if element.tag in seen:
            continue
        seen.add(element.tag)
        merged.append(element)
    return merged


def font_from_properties(properties: List[ET.Element], language_type: str) -> Optional[str]:
    """Resolve the family name from ``w:rFonts`` among ``properties``."""
    rfonts_tag = qualify("w:rFonts")
    for element in properties:
        if element.tag != rfonts_tag:
            continue
        names = ("w:cs", "w:ascii", "w:hAnsi") if language_type == BIDI else ("w:ascii", "w:hAnsi")
        for name in names:
            value = get_attr(element, name)
            if value:
                return value
        return None
    return None


def iter_paragraph_runs(paragraph: ET.Element) -> Iterator[ET.Element]:
    """Yield runs owned by ``paragraph`` (including hyperlinks and insertions), not nested paragraphs."""
    for child in paragraph:
        if child.tag == R_TAG:
            yield child
        elif child.tag != P_TAG:
            yield from iter_paragraph_runs(child)
