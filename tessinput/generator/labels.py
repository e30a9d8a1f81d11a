"""Glyph labels and their conversion to the Tesseract box convention.

Layout produces rectangles in raster coordinates (origin at the top-left
corner, y growing downwards). Tesseract box files use the opposite vertical
convention (origin at the bottom-left corner, y growing upwards), so every
rectangle is flipped against the image height when it is written out.

A box line has the form::

    <symbol> <left> <bottom> <right> <top> <page>

where the page is always ``0``.
"""

from dataclasses import dataclass

LINE_BREAK = "\n"
"""The symbol that marks a line break in the input text."""

LABEL_LINE_BREAK = "\t"
"""The symbol written in place of a line break, since box files are line based."""

PAGE_INDEX = 0


@dataclass(frozen=True)
class Rect:
    """An integer rectangle with exclusive right and bottom edges."""

    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self):
        return self.right - self.left

    @property
    def height(self):
        return self.bottom - self.top

    @property
    def is_empty(self):
        """True for zero-area rectangles, such as the boxes given to whitespace."""
        return self.width == 0 or self.height == 0

    def translate(self, dx, dy):
        return Rect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def as_tuple(self):
        return (self.left, self.top, self.right, self.bottom)


@dataclass(frozen=True)
class GlyphLabel:
    """A single character of the input text and where it was drawn.

    Attributes:
        symbol (str): The character, exactly as it appears in the input text.
        rect (Rect): The bounding box in raster coordinates.
    """

    symbol: str
    rect: Rect


def to_label_format(labels, image_height):
    """Converts raster-space glyph labels into Tesseract box lines.

    Args:
        labels (Iterable[GlyphLabel]): The labels in input string order.
        image_height (int): The height of the image the labels refer to.

    Returns:
        list[str]: One box line per label, without trailing newlines.
    """
    lines = []
    for label in labels:
        symbol = LABEL_LINE_BREAK if label.symbol == LINE_BREAK else label.symbol
        rect = label.rect
        lines.append(
            f"{symbol} {rect.left} {image_height - rect.bottom} "
            f"{rect.right} {image_height - rect.top} {PAGE_INDEX}"
        )
    return lines


def parse_label_line(line, image_height):
    """Parses one box line back into a raster-space `GlyphLabel`.

    The symbol is always the first character of the line, which keeps a
    literal space symbol intact.

    Raises:
        ValueError: If the line does not hold a symbol followed by five
            integer fields.
    """
    line = line.rstrip("\r\n")
    if len(line) < 2 or line[1] != " ":
        raise ValueError(f"Malformed box line: {line!r}")
    symbol = LINE_BREAK if line[0] == LABEL_LINE_BREAK else line[0]
    fields = line[2:].split(" ")
    if len(fields) != 5:
        raise ValueError(f"Expected 5 numeric fields in box line: {line!r}")
    left, bottom, right, top, _page = (int(v) for v in fields)
    rect = Rect(left, image_height - top, right, image_height - bottom)
    return GlyphLabel(symbol, rect)


def from_label_format(lines, image_height):
    """Inverse of `to_label_format`: box lines back to raster-space labels."""
    return [parse_label_line(line, image_height) for line in lines]
