"""Font backend measuring text with Pillow and indexing families with fontTools."""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set

from fontTools.ttLib import TTCollection, TTFont, TTLibError
from PIL import ImageFont

from docx_metrics.metrics.backend import (
    GENERIC_TYPOGRAPHIC,
    NOMINAL_DPI,
    FontBackend,
    FontHandle,
    FontStyle,
    InstantiationFailure,
    InstantiationResult,
    TextMeasurement,
)
from docx_metrics.utils.logger import get_logger
from docx_metrics.utils.units import points_to_pixels

LOGGER = get_logger(__name__)

FONT_EXTENSIONS = {".ttf", ".otf", ".ttc", ".otc"}
COLLECTION_EXTENSIONS = {".ttc", ".otc"}

NAME_ID_FAMILY = 1
NAME_ID_SUBFAMILY = 2


@dataclass(frozen=True, slots=True)
class FontFace:
    """One face inside a font file."""

    path: Path
    index: int
    family: str
    style: FontStyle


def default_font_dirs() -> List[Path]:
    """Return the platform font directories that exist on this machine."""
    home = Path.home()
    if sys.platform.startswith("win"):
        candidates = []
        windir = os.environ.get("WINDIR") or os.environ.get("SystemRoot")
        if windir:
            candidates.append(Path(windir) / "Fonts")
        local = os.environ.get("LOCALAPPDATA")
        if local:
            candidates.append(Path(local) / "Microsoft" / "Windows" / "Fonts")
        candidates.append(Path("C:/Windows/Fonts"))
    elif sys.platform == "darwin":
        candidates = [Path("/System/Library/Fonts"), Path("/Library/Fonts"), home / "Library" / "Fonts"]
    else:
        candidates = [
            Path("/usr/share/fonts"),
            Path("/usr/local/share/fonts"),
            home / ".local" / "share" / "fonts",
            home / ".fonts",
        ]
    return [path for path in candidates if path.is_dir()]


def style_from_subfamily(subfamily: Optional[str]) -> FontStyle:
    """Map a ``name`` table subfamily ("Bold Italic", "Oblique", ...) to style flags."""
    style = FontStyle.REGULAR
    if not subfamily:
        return style
    lowered = subfamily.lower()
    if "bold" in lowered:
        style |= FontStyle.BOLD
    if "italic" in lowered or "oblique" in lowered:
        style |= FontStyle.ITALIC
    return style


class PillowFontBackend(FontBackend):
    """Concrete backend over installed TrueType/OpenType files."""

    def __init__(self, font_dirs: Optional[Sequence[Path]] = None, dpi: float = NOMINAL_DPI) -> None:
        self._font_dirs = [Path(path) for path in font_dirs] if font_dirs is not None else default_font_dirs()
        self.dpi = dpi
        self._faces: Optional[Dict[str, List[FontFace]]] = None

    # ------------------------------------------------------------------
    # FontBackend API
    def enumerate_families(self) -> Set[str]:
        return set(self._index())

    def instantiate(self, family: str, size_points: float, style: FontStyle) -> InstantiationResult:
        faces = self._index().get(family)
        if not faces:
            return InstantiationFailure(family=family, reason="family not found in font directories")

        face = self._select_face(faces, style)
        try:
            font = ImageFont.truetype(
                str(face.path),
                size=points_to_pixels(size_points, self.dpi),
                index=face.index,
                layout_engine=ImageFont.Layout.BASIC,
            )
        except OSError as exc:
            return InstantiationFailure(family=family, reason=f"{face.path.name}: {exc}")
        return FontHandle(family, size_points, style, native=font)

    def measure(self, handle: FontHandle, text: str, spacing: str = GENERIC_TYPOGRAPHIC) -> TextMeasurement:
        if spacing != GENERIC_TYPOGRAPHIC:
            raise ValueError(f"Unsupported spacing mode: {spacing}")
        font = handle.native
        lines = text.split("\n")
        width = max(font.getlength(line) for line in lines)
        return TextMeasurement(width=float(width), char_count=len(text), line_count=len(lines))

    # ------------------------------------------------------------------
    # Face discovery
    def _index(self) -> Dict[str, List[FontFace]]:
        if self._faces is None:
            faces: Dict[str, List[FontFace]] = {}
            for path in self._iter_font_files():
                for face in self._read_faces(path):
                    faces.setdefault(face.family, []).append(face)
            LOGGER.debug(
                "Indexed %d faces in %d families from %d directories",
                sum(len(entries) for entries in faces.values()),
                len(faces),
                len(self._font_dirs),
            )
            self._faces = faces
        return self._faces

    def _iter_font_files(self) -> Iterable[Path]:
        seen: Set[Path] = set()
        for directory in self._font_dirs:
            if not directory.is_dir():
                LOGGER.debug("Skipping missing font directory %s", directory)
                continue
            for path in sorted(directory.rglob("*")):
                if path.suffix.lower() not in FONT_EXTENSIONS or not path.is_file():
                    continue
                resolved = path.resolve()
                if resolved not in seen:
                    seen.add(resolved)
                    yield resolved

    def _read_faces(self, path: Path) -> List[FontFace]:
        container = None
        faces: List[FontFace] = []
        try:
            if path.suffix.lower() in COLLECTION_EXTENSIONS:
                container = TTCollection(str(path), lazy=True)
                fonts = list(container.fonts)
            else:
                container = TTFont(str(path), lazy=True)
                fonts = [container]
            for index, font in enumerate(fonts):
                if "name" not in font:
                    continue
                name_table = font["name"]
                family = name_table.getDebugName(NAME_ID_FAMILY)
                if not family:
                    continue
                style = style_from_subfamily(name_table.getDebugName(NAME_ID_SUBFAMILY))
                faces.append(FontFace(path=path, index=index, family=family, style=style))
        except (TTLibError, OSError, ValueError, AssertionError) as exc:
            LOGGER.debug("Unreadable font file %s: %s", path, exc)
            return []
        finally:
            if container is not None:
                container.close()
        return faces

    @staticmethod
    def _select_face(faces: Sequence[FontFace], style: FontStyle) -> FontFace:
        for face in faces:
            if face.style == style:
                return face
        for face in faces:
            if face.style == FontStyle.REGULAR:
                return face
        return faces[0]
