"""Per-character ink measurement.

A character is drawn alone on a scratch surface large enough for its nominal
glyph box plus a fixed padding, and the surface is scanned for the tightest
rectangle containing ink. Offsets are reported relative to the glyph origin,
which is the pen position at the top-left of the line (Pillow anchor ``"la"``),
so the layout can place the box by adding the cursor position.
"""

from typing import NamedTuple

from tessinput.generator.utils import (
    INK_LEVEL,
    INK_THRESHOLD,
    drawing,
    ink_bbox,
    scratch_canvas,
)

SCRATCH_PADDING = 4
"""Extra pixels on every side of the scratch surface, for overshoot."""


class GlyphMetrics(NamedTuple):
    """Ink box of one character relative to its origin, plus its advance."""

    ink_offset_x: int
    ink_offset_y: int
    ink_width: int
    ink_height: int
    advance_width: int

    @property
    def has_ink(self):
        return self.ink_height > 0


def degenerate_metrics(advance_width):
    """Metrics for a character without ink: flat box spanning the advance."""
    return GlyphMetrics(0, 0, advance_width, 0, advance_width)


class GlyphMetricsExtractor:
    """Measures characters by rendering them one at a time.

    Measurements are cached per font and character, so one extractor should
    not be shared between threads.

    Attributes:
        padding (int): Padding around the nominal glyph box on scratch surfaces.
        threshold (int): Greyscale values below this count as ink.
    """

    def __init__(self, padding=SCRATCH_PADDING, threshold=INK_THRESHOLD):
        self.padding = padding
        self.threshold = threshold
        self._cache = {}

    def advance_width(self, font, character):
        """The cursor advance after `character`.

        Measured as the length of the character repeated twice minus its
        length once, so spacing the backend inserts between consecutive
        glyphs is included.
        """
        advance = font.length(character * 2) - font.length(character)
        return max(0, int(round(advance)))

    def measure(self, font, character):
        """Measures a single character.

        Args:
            font (FontHandle): The font to render with.
            character (str): A single character.

        Returns:
            GlyphMetrics: The ink box relative to the glyph origin and the
            advance width. Characters without ink get `degenerate_metrics`.
        """
        key = (font.key, character)
        metrics = self._cache.get(key)
        if metrics is None:
            metrics = self._measure(font, character)
            self._cache[key] = metrics
        return metrics

    def _measure(self, font, character):
        advance = self.advance_width(font, character)
        x0, y0, x1, y1 = font.bbox(character)

        # Shift the origin so ink left of or above it still lands on the surface
        origin_x = self.padding - min(0, x0)
        origin_y = self.padding - min(0, y0)
        width = origin_x + max(x1, advance, 1) + self.padding
        height = origin_y + max(y1, font.line_height, 1) + self.padding

        with scratch_canvas(width, height) as scratch:
            with drawing(scratch) as draw:
                draw.text((origin_x, origin_y), character, fill=INK_LEVEL, font=font.font, anchor="la")
            bbox = ink_bbox(scratch, self.threshold)

        if bbox is None:
            return degenerate_metrics(advance)

        left, top, right, bottom = bbox
        return GlyphMetrics(
            ink_offset_x=left - origin_x,
            ink_offset_y=top - origin_y,
            ink_width=right - left,
            ink_height=bottom - top,
            advance_width=advance,
        )
