"""Glyph localization, layout and composition of Tesseract training samples.

The pipeline takes a `RenderConfig`, lays out its text with a
`LayoutEngine` (measuring each character with a `GlyphMetricsExtractor`),
draws it with a `Composer`, and returns a `TrainingSample` whose labels are
converted to the Tesseract box convention when written.
"""

from tessinput.generator.composer import Composer
from tessinput.generator.glyph_metrics import GlyphMetrics, GlyphMetricsExtractor
from tessinput.generator.labels import GlyphLabel, Rect, from_label_format, to_label_format
from tessinput.generator.layout import Layout, LayoutEngine, PlacedGlyph
from tessinput.generator.sample import TrainingSample

__all__ = [
    "Composer",
    "GlyphLabel",
    "GlyphMetrics",
    "GlyphMetricsExtractor",
    "Layout",
    "LayoutEngine",
    "PlacedGlyph",
    "Rect",
    "TrainingSample",
    "from_label_format",
    "to_label_format",
]
