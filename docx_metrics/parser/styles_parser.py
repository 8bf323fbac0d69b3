"""Extract style definitions from styles.xml and produce a catalog."""
from __future__ import annotations

from typing import Dict, List, Optional
from xml.etree import ElementTree as ET

from docx_metrics.model.style_model import StyleDefinition, StylesCatalog
from docx_metrics.utils.logger import get_logger
from docx_metrics.utils.xml_utils import Namespaces, get_attr

LOGGER = get_logger(__name__)


class StylesParser:
    """Parse Word styles and resolve inheritance."""

    def __init__(self, styles_xml: Optional[ET.ElementTree]) -> None:
        self._styles_xml = styles_xml

    def parse(self) -> StylesCatalog:
        """Parse the XML tree and return a resolved catalog."""
        if self._styles_xml is None:
            return StylesCatalog({})
        root = self._styles_xml.getroot()
        raw_styles = self._collect_styles(root)
        resolved = self._resolve_inheritance(raw_styles)
        return StylesCatalog(resolved, self._collect_doc_defaults(root))

    def _collect_styles(self, root: ET.Element) -> Dict[str, StyleDefinition]:
        styles: Dict[str, StyleDefinition] = {}
        for style_el in root.findall("w:style", Namespaces.WORD):
            style_id = get_attr(style_el, "w:styleId")
            if not style_id:
                continue
            styles[style_id] = StyleDefinition(
                style_id=style_id,
                style_type=get_attr(style_el, "w:type") or "paragraph",
                name=get_attr(style_el.find("w:name", Namespaces.WORD), "w:val"),
                run_properties=self._property_children(style_el, "w:rPr"),
                paragraph_properties=self._property_children(style_el, "w:pPr"),
                based_on=get_attr(style_el.find("w:basedOn", Namespaces.WORD), "w:val"),
                is_default=get_attr(style_el, "w:default") in {"1", "true"},
            )
        return styles

    def _collect_doc_defaults(self, root: ET.Element) -> List[ET.Element]:
        rpr = root.find("w:docDefaults/w:rPrDefault/w:rPr", Namespaces.WORD)
        if rpr is None:
            return []
        return list(rpr)

    def _property_children(self, element: ET.Element, block: str) -> List[ET.Element]:
        child = element.find(block, Namespaces.WORD)
        if child is None:
            return []
        return list(child)

    def _resolve_inheritance(self, raw_styles: Dict[str, StyleDefinition]) -> Dict[str, StyleDefinition]:
        resolved: Dict[str, StyleDefinition] = {}

        def resolve(style_id: str, stack: Optional[list[str]] = None) -> StyleDefinition:
            if style_id in resolved:
                return resolved[style_id]
            if stack is None:
                stack = []
            if style_id in stack:
                LOGGER.debug("Style inheritance cycle through %s", " -> ".join(stack + [style_id]))
                return raw_styles[style_id]
            stack.append(style_id)
            style = raw_styles[style_id]
            run_props = list(style.run_properties)
            para_props = list(style.paragraph_properties)
            if style.based_on and style.based_on in raw_styles:
                parent = resolve(style.based_on, stack)
                run_props = self._merge_properties(run_props, parent.run_properties)
                para_props = self._merge_properties(para_props, parent.paragraph_properties)
            resolved_style = StyleDefinition(
                style_id=style.style_id,
                style_type=style.style_type,
                name=style.name,
                run_properties=run_props,
                paragraph_properties=para_props,
                based_on=style.based_on,
                is_default=style.is_default,
            )
            resolved[style_id] = resolved_style
            stack.pop()
            return resolved_style

        for style_id in raw_styles:
            resolve(style_id)
        return resolved

    def _merge_properties(self, child: List[ET.Element], parent: List[ET.Element]) -> List[ET.Element]:
        """Keep the child's elements and add parent elements whose tag the child lacks."""
        present = {element.tag for element in child}
        return child + [element for element in parent if element.tag not in present]
