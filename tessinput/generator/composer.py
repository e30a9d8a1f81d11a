"""Composition of a training image from a `RenderConfig`.

This module defines the `Composer` class, which paints the background, lays
out and draws the text, and paints the overlay, in that order, on a freshly
allocated canvas. The text is drawn glyph by glyph at the origins the layout
computed, with the same font object the glyphs were measured with.
"""

from PIL import Image

from tessinput.generator.fonts import load_font
from tessinput.generator.layout import LayoutEngine
from tessinput.generator.sample import TrainingSample
from tessinput.generator.utils import drawing, paste_at_origin

CANVAS_MODE = "RGB"
BACKGROUND_COLOR = "white"
TEXT_COLOR = "black"


class Composer:
    """Builds `TrainingSample` objects from render configurations.

    A composer caches glyph measurements through its layout engine, so each
    worker thread should use its own instance.

    Attributes:
        layout_engine (LayoutEngine): Places the glyphs.
        font_loader (Callable[[FontSpec], FontHandle]): Resolves font specs.
    """

    def __init__(self, layout_engine=None, font_loader=load_font):
        self.layout_engine = layout_engine or LayoutEngine()
        self.font_loader = font_loader

    def __call__(self, config, sample_id, font=None):
        return self.compose(config, sample_id, font=font)

    def compose(self, config, sample_id, font=None):
        """Renders `config.text` and returns the image with its labels.

        Args:
            config (RenderConfig): The generation request. It is not modified,
                and neither are its background or overlay images.
            sample_id (str or int): Identifier for naming the output files.
            font (FontHandle, optional): An already loaded font for
                `config.font`. Loaded with `font_loader` if omitted.

        Returns:
            TrainingSample: The composed image and one label per character.
        """
        if font is None:
            font = self.font_loader(config.font)

        canvas = Image.new(CANVAS_MODE, (config.width, config.height), BACKGROUND_COLOR)
        if config.background is not None:
            paste_at_origin(canvas, config.background)

        layout = self.layout_engine.layout(config, font)
        self.draw_text(canvas, layout)

        if config.overlay is not None:
            paste_at_origin(canvas, config.overlay)

        return TrainingSample(canvas, layout.labels, sample_id, font_size=layout.font.size)

    @staticmethod
    def draw_text(canvas, layout):
        """Draws every glyph of `layout` at its origin."""
        if not layout.glyphs:
            return
        with drawing(canvas) as draw:
            for glyph in layout.glyphs:
                if glyph.is_drawable:
                    draw.text(glyph.origin, glyph.symbol, fill=TEXT_COLOR, font=layout.font.font, anchor="la")
