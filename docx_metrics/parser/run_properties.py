"""Read measurement inputs (font, size, flags, text, tabs) from annotated runs."""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Iterator, Optional
from xml.etree import ElementTree as ET

from docx_metrics.metrics.errors import MissingRunPropertiesError
from docx_metrics.model.run_model import RunDescriptor
from docx_metrics.utils.logger import get_logger
from docx_metrics.utils.units import inches_to_twips
from docx_metrics.utils.xml_utils import Namespaces, get_attr, qualify

LOGGER = get_logger(__name__)

BIDI = "bidi"

_TRUE_VALUES = {"1", "true", "on"}
_FALSE_VALUES = {"0", "false", "off"}


def get_bool_prop(run_props: Optional[ET.Element], name: str) -> bool:
    """Evaluate an on/off property such as ``w:b`` inside ``run_props``.

    A bare element means "on"; unrecognised values count as "off".
    """
    if run_props is None:
        return False
    prop = run_props.find(name, Namespaces.WORD)
    if prop is None:
        return False
    value = get_attr(prop, "w:val")
    if value is None:
        return True
    lowered = value.lower()
    if lowered in _FALSE_VALUES:
        return False
    if lowered in _TRUE_VALUES:
        return True
    return False


def get_font_size(element: ET.Element) -> Optional[Decimal]:
    """Return the half-point size declared on a paragraph or run, if any."""
    language_type = get_attr(element, "pt:LanguageType")
    if element.tag == qualify("w:p"):
        return get_font_size_from_properties(language_type, element.find("w:pPr/w:rPr", Namespaces.WORD))
    if element.tag == qualify("w:r"):
        return get_font_size_from_properties(language_type, element.find("w:rPr", Namespaces.WORD))
    return None


def get_font_size_from_properties(language_type: Optional[str], run_props: Optional[ET.Element]) -> Optional[Decimal]:
    """Pick ``w:szCs`` for bidi text and ``w:sz`` otherwise."""
    if run_props is None:
        return None
    tag = "w:szCs" if language_type == BIDI else "w:sz"
    for size_el in run_props.findall(tag, Namespaces.WORD):
        value = get_attr(size_el, "w:val")
        if value is None:
            continue
        try:
            return Decimal(value)
        except InvalidOperation:
            LOGGER.debug("Ignoring malformed font size %r", value)
            return None
    return None


def iter_run_content(element: ET.Element) -> Iterator[ET.Element]:
    """Yield descendants of ``element`` in document order, skipping text box content."""
    txbx = qualify("w:txbxContent")
    for child in element:
        if child.tag == txbx:
            continue
        yield child
        yield from iter_run_content(child)


def run_text(run: ET.Element) -> str:
    text_tag = qualify("w:t")
    return "".join(node.text or "" for node in iter_run_content(run) if node.tag == text_tag)


def run_tab_width(run: ET.Element) -> float:
    """Sum the annotated tab widths of ``run`` (inches) and return twips."""
    tab_tag = qualify("w:tab")
    total = 0.0
    for node in iter_run_content(run):
        if node.tag != tab_tag:
            continue
        value = get_attr(node, "pt:TabWidth")
        if value is None:
            continue
        try:
            total += float(value)
        except ValueError:
            LOGGER.debug("Ignoring malformed tab width %r", value)
    return inches_to_twips(total)


def resolve_font_name(run: ET.Element, paragraph: Optional[ET.Element]) -> Optional[str]:
    """Run-level font annotation, falling back to the paragraph's."""
    font_name = get_attr(run, "pt:FontName")
    if font_name is None and paragraph is not None:
        font_name = get_attr(paragraph, "pt:FontName")
    return font_name


def describe_run(run: ET.Element, paragraph: Optional[ET.Element]) -> RunDescriptor:
    """Build the measurement input for ``run`` inside ``paragraph``.

    A run outside any paragraph, or whose font cannot be resolved, yields a
    descriptor without a font name. Raises ``MissingRunPropertiesError`` when a
    run with a resolved font carries no ``w:rPr``.
    """
    if paragraph is None:
        return RunDescriptor(font_name=None, text=run_text(run))

    font_name = resolve_font_name(run, paragraph)
    if font_name is None:
        return RunDescriptor(font_name=None, text=run_text(run))

    run_props = run.find("w:rPr", Namespaces.WORD)
    if run_props is None:
        raise MissingRunPropertiesError(f"Run using font {font_name!r} has no run properties")

    return RunDescriptor(
        font_name=font_name,
        font_size=get_font_size(run),
        bold=get_bool_prop(run_props, "w:b"),
        bold_cs=get_bool_prop(run_props, "w:bCs"),
        italic=get_bool_prop(run_props, "w:i"),
        italic_cs=get_bool_prop(run_props, "w:iCs"),
        text=run_text(run),
        tab_width=run_tab_width(run),
        language_type=get_attr(run, "pt:LanguageType"),
    )
