"""Cursor-advance layout of a text string on a canvas.

The layout decides the effective font size, splits the text into lines and
walks every character with a horizontal cursor, placing each glyph's ink box
at the cursor and advancing by the glyph's advance width. The result keeps,
for every character of the input, both the rectangle it occupies and the pen
origin it must be drawn at, so drawing and measuring can never disagree.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from tessinput.generator.glyph_metrics import GlyphMetricsExtractor
from tessinput.generator.labels import LINE_BREAK, GlyphLabel, Rect

WRAP_SYMBOL = " "


@dataclass(frozen=True)
class PlacedGlyph:
    """A character with its drawing origin and its raster-space box."""

    symbol: str
    origin: tuple
    rect: Rect

    @property
    def label(self):
        return GlyphLabel(self.symbol, self.rect)

    @property
    def is_drawable(self):
        return self.symbol != LINE_BREAK


@dataclass(frozen=True)
class Layout:
    """The glyphs of one text, in input order, and the font they were placed with."""

    glyphs: tuple
    font: object

    @property
    def labels(self):
        return [glyph.label for glyph in self.glyphs]


@dataclass
class Line:
    """Indices of the characters on one line and of the character that ended it."""

    indices: list
    terminator: Optional[int] = None


class LayoutEngine:
    """Places every character of a `RenderConfig` text on the canvas.

    Attributes:
        extractor (GlyphMetricsExtractor): Source of per-character metrics.
    """

    def __init__(self, extractor=None):
        self.extractor = extractor or GlyphMetricsExtractor()

    def advance(self, font, character):
        return self.extractor.measure(font, character).advance_width

    def split_lines(self, text, font, max_width=None):
        """Splits `text` into lines.

        Line breaks always end a line. When `max_width` is given, a line is
        also ended at its last space once the next character would push it
        past `max_width`; a word without a preceding space on the line is
        never broken.

        Returns:
            list[Line]: At least one line, possibly empty.
        """
        lines = []
        current = []
        width = 0
        last_space = None

        for index, ch in enumerate(text):
            if ch == LINE_BREAK:
                lines.append(Line(current, terminator=index))
                current, width, last_space = [], 0, None
                continue

            advance = self.advance(font, ch)
            if (
                max_width is not None
                and ch != WRAP_SYMBOL
                and width + advance > max_width
                and last_space is not None
            ):
                # Break at the last space; it becomes the line terminator
                lines.append(Line(current[:last_space], terminator=current[last_space]))
                current = current[last_space + 1:]
                width = sum(self.advance(font, text[i]) for i in current)
                last_space = None

            if ch == WRAP_SYMBOL:
                last_space = len(current)
            current.append(index)
            width += advance

        lines.append(Line(current))
        return lines

    def block_size(self, text, font, lines):
        """Width and height of the text block formed by `lines`."""
        width = max(sum(self.advance(font, text[i]) for i in line.indices) for line in lines)
        return width, len(lines) * font.line_height

    def fit_font(self, config, font):
        """Shrinks the font until the text block fits the area inside the margins.

        Returns:
            tuple[FontHandle, list[Line]]: The effective font and the lines
            split with it. A block that already fits keeps the input font.
        """
        max_width = config.available_width if config.text_wrap else None
        lines = self.split_lines(config.text, font, max_width)
        width, height = self.block_size(config.text, font, lines)

        ratio = max(width / config.available_width, height / config.available_height)
        if ratio > 1:
            size = max(1, int(font.size / ratio))
            logger.debug(
                f"Text block {width}x{height} exceeds {config.available_width}x{config.available_height}, "
                f"shrinking font from {font.size} to {size}"
            )
            if size != font.size:
                font = font.resized(size)
                lines = self.split_lines(config.text, font, max_width)
        return font, lines

    def layout(self, config, font):
        """Lays out `config.text` with `font`.

        Args:
            config (RenderConfig): The generation request.
            font (FontHandle): The font at the requested size.

        Returns:
            Layout: One placed glyph per input character and the effective
            (possibly shrunk) font.
        """
        text = config.text
        if not text:
            return Layout(glyphs=(), font=font)

        font, lines = self.fit_font(config, font)
        block_width, block_height = self.block_size(text, font, lines)
        line_height = font.line_height

        start_x = config.margin
        if config.horizontal_centering:
            start_x = (config.width - block_width) // 2
        y = config.margin
        if config.vertical_centering:
            y = (config.height - block_height) // 2

        glyphs = [None] * len(text)
        for line in lines:
            x = start_x
            for index in line.indices:
                metrics = self.extractor.measure(font, text[index])
                glyphs[index] = self.place(text[index], x, y, metrics, line_height, config.tight_boxes)
                x += metrics.advance_width
            if line.terminator is not None:
                symbol = text[line.terminator]
                advance = 0 if symbol == LINE_BREAK else self.advance(font, symbol)
                glyphs[line.terminator] = PlacedGlyph(symbol, (x, y), Rect(x, y, x + advance, y))
            y += line_height

        return Layout(glyphs=tuple(glyphs), font=font)

    @staticmethod
    def place(symbol, x, y, metrics, line_height, tight_boxes=True):
        """Places a measured glyph with its origin at (`x`, `y`)."""
        left = x + metrics.ink_offset_x
        top = y + metrics.ink_offset_y
        rect = Rect(left, top, left + metrics.ink_width, top + metrics.ink_height)
        if metrics.has_ink and not tight_boxes:
            rect = Rect(rect.left, min(y, rect.top), rect.right, max(y + line_height, rect.bottom))
        return PlacedGlyph(symbol, (x, y), rect)
