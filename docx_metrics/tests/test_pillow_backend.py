"""Tests for the Pillow/fontTools backend against generated fonts."""
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path

from docx_metrics.metrics.backend import FontHandle, FontStyle, InstantiationFailure
from docx_metrics.metrics.pillow_backend import PillowFontBackend, style_from_subfamily
from docx_metrics.metrics.run_width import RunWidthEstimator
from docx_metrics.model.run_model import RunDescriptor
from docx_metrics.tests.fakes import build_test_font


class StyleFromSubfamilyTest(unittest.TestCase):
    def test_mapping(self) -> None:
        self.assertEqual(style_from_subfamily("Regular"), FontStyle.REGULAR)
        self.assertEqual(style_from_subfamily("Bold"), FontStyle.BOLD)
        self.assertEqual(style_from_subfamily("Oblique"), FontStyle.ITALIC)
        self.assertEqual(style_from_subfamily("Bold Italic"), FontStyle.BOLD | FontStyle.ITALIC)
        self.assertEqual(style_from_subfamily(None), FontStyle.REGULAR)


class PillowFontBackendTest(unittest.TestCase):
    """Enumeration, face selection and measurement."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.font_dir = Path(self._tmp.name)
        build_test_font(self.font_dir / "TestSans-Regular.ttf", "Test Sans", "Regular")
        build_test_font(self.font_dir / "TestSans-Bold.ttf", "Test Sans", "Bold")
        nested = self.font_dir / "nested"
        nested.mkdir()
        build_test_font(nested / "Other.ttf", "Other Serif", "Italic")
        (self.font_dir / "broken.ttf").write_bytes(b"not a font")
        (self.font_dir / "readme.txt").write_text("ignored")
        self.backend = PillowFontBackend([self.font_dir])

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_enumerates_families_recursively(self) -> None:
        self.assertEqual(self.backend.enumerate_families(), {"Test Sans", "Other Serif"})

    def test_missing_directory_is_ignored(self) -> None:
        backend = PillowFontBackend([self.font_dir / "absent"])
        self.assertEqual(backend.enumerate_families(), set())

    def test_instantiate_unknown_family_fails(self) -> None:
        result = self.backend.instantiate("Nope", 11.0, FontStyle.REGULAR)
        self.assertIsInstance(result, InstantiationFailure)
        assert isinstance(result, InstantiationFailure)
        self.assertEqual(result.family, "Nope")

    def test_missing_style_falls_back_to_available_face(self) -> None:
        result = self.backend.instantiate("Test Sans", 11.0, FontStyle.BOLD | FontStyle.ITALIC)
        self.assertIsInstance(result, FontHandle)
        assert isinstance(result, FontHandle)
        with result as handle:
            self.assertGreater(self.backend.measure(handle, "x").width, 0)
        self.assertTrue(result.closed)

    def test_measure_scales_with_text_and_size(self) -> None:
        small = self.backend.instantiate("Test Sans", 12.0, FontStyle.REGULAR)
        large = self.backend.instantiate("Test Sans", 24.0, FontStyle.REGULAR)
        assert isinstance(small, FontHandle) and isinstance(large, FontHandle)
        with small, large:
            one = self.backend.measure(small, "x")
            four = self.backend.measure(small, "xxxx")
            doubled = self.backend.measure(large, "x")
            two_lines = self.backend.measure(small, "xx\nxxxx")

        # 500/1000 em at 16px
        self.assertAlmostEqual(one.width, 8.0, delta=1.0)
        self.assertAlmostEqual(four.width, 4 * one.width, delta=2.0)
        self.assertAlmostEqual(doubled.width, 2 * one.width, delta=1.0)
        self.assertEqual(four.char_count, 4)
        self.assertEqual(two_lines.line_count, 2)
        self.assertAlmostEqual(two_lines.width, four.width, delta=0.01)

    def test_released_handle_cannot_measure(self) -> None:
        handle = self.backend.instantiate("Test Sans", 11.0, FontStyle.REGULAR)
        assert isinstance(handle, FontHandle)
        handle.close()
        with self.assertRaises(ValueError):
            self.backend.measure(handle, "x")

    def test_estimator_end_to_end(self) -> None:
        estimator = RunWidthEstimator(self.backend)
        widths = [
            estimator.estimate_width_twips(RunDescriptor(font_name="Test Sans", font_size=Decimal(24), text="x" * n))
            for n in range(1, 20)
        ]
        self.assertTrue(all(width > 0 for width in widths))
        for shorter, longer in zip(widths, widths[1:]):
            self.assertLessEqual(shorter, longer)
        # "x " at 12pt: 750/1000 em * 12pt = 9pt = 180 twips
        self.assertAlmostEqual(widths[0], 180, delta=20)
        self.assertEqual(estimator.estimate_width_twips(RunDescriptor(font_name="Missing", text="x")), 0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
