"""Unit tests for style parsing edge cases."""
import unittest
from xml.etree import ElementTree as ET

from docx_metrics.parser.styles_parser import StylesParser


def local_tags(elements) -> list:
    return [entry.tag.split("}")[-1] for entry in elements]


class StylesParserTest(unittest.TestCase):
    """Ensure style inheritance merges expected properties."""

    def test_style_inheritance_merges_properties(self) -> None:
        xml = """
        <w:styles xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
          <w:style w:type="paragraph" w:styleId="Base">
            <w:rPr><w:b/><w:sz w:val="20"/></w:rPr>
          </w:style>
          <w:style w:type="paragraph" w:styleId="Derived">
            <w:basedOn w:val="Base"/>
            <w:rPr><w:i/><w:sz w:val="32"/></w:rPr>
          </w:style>
        </w:styles>
        """
        catalog = StylesParser(ET.ElementTree(ET.fromstring(xml))).parse()
        derived = catalog.get("Derived")
        assert derived
        tags = local_tags(derived.run_properties)
        self.assertEqual(sorted(tags), ["b", "i", "sz"])
        size = [el for el in derived.run_properties if el.tag.endswith("}sz")][0]
        self.assertEqual(size.attrib["{http://schemas.openxmlformats.org/wordprocessingml/2006/main}val"], "32")

    def test_defaults_and_doc_defaults(self) -> None:
        xml = """
        <w:styles xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
          <w:docDefaults>
            <w:rPrDefault><w:rPr><w:rFonts w:ascii="Calibri"/><w:sz w:val="22"/></w:rPr></w:rPrDefault>
          </w:docDefaults>
          <w:style w:type="paragraph" w:styleId="Normal" w:default="1">
            <w:name w:val="Normal"/>
          </w:style>
        </w:styles>
        """
        catalog = StylesParser(ET.ElementTree(ET.fromstring(xml))).parse()
        normal = catalog.default_for("paragraph")
        assert normal
        self.assertEqual(normal.style_id, "Normal")
        self.assertEqual(normal.name, "Normal")
        self.assertEqual(local_tags(catalog.default_run_properties), ["rFonts", "sz"])

    def test_inheritance_cycle_terminates(self) -> None:
        xml = """
        <w:styles xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
          <w:style w:type="character" w:styleId="A"><w:basedOn w:val="B"/><w:rPr><w:b/></w:rPr></w:style>
          <w:style w:type="character" w:styleId="B"><w:basedOn w:val="A"/><w:rPr><w:i/></w:rPr></w:style>
        </w:styles>
        """
        catalog = StylesParser(ET.ElementTree(ET.fromstring(xml))).parse()
        self.assertIsNotNone(catalog.get("A"))
        self.assertIsNotNone(catalog.get("B"))

    def test_missing_styles_part(self) -> None:
        catalog = StylesParser(None).parse()
        self.assertIsNone(catalog.default_for("paragraph"))
        self.assertEqual(catalog.default_run_properties, [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
