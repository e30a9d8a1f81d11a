"""Raster helpers shared by glyph measurement, composition and verification.

Every drawing context is acquired through `drawing()` so that it lives only
for one paint step and is released even when the paint call raises.
"""

from contextlib import contextmanager

import numpy as np
from PIL import Image, ImageDraw

BACKGROUND_LEVEL = 255
"""Fill value of greyscale scratch surfaces."""

INK_LEVEL = 0
"""Value glyphs are drawn with on greyscale scratch surfaces."""

INK_THRESHOLD = 247
"""Pixels strictly darker than this count as ink (8 levels below the fill)."""


@contextmanager
def drawing(image):
    """Yields an `ImageDraw.Draw` bound to `image` for a single paint step."""
    draw = ImageDraw.Draw(image)
    try:
        yield draw
    finally:
        del draw


@contextmanager
def scratch_canvas(width, height, fill=BACKGROUND_LEVEL):
    """Yields a temporary greyscale image that is closed on exit."""
    image = Image.new("L", (max(1, width), max(1, height)), fill)
    try:
        yield image
    finally:
        image.close()


def ink_bbox(image, threshold=INK_THRESHOLD):
    """Finds the tightest box around all ink pixels of a greyscale image.

    Columns and rows are scanned for any pixel darker than `threshold`; the
    first and last such column and row give the box.

    Args:
        image (Image.Image or np.ndarray): A single-channel image.
        threshold (int): Pixels with a value below this are ink.

    Returns:
        tuple[int, int, int, int] or None: ``(left, top, right, bottom)`` with
        exclusive right and bottom edges, or None if there is no ink at all.
    """
    mask = np.asarray(image) < threshold
    cols = np.flatnonzero(mask.any(axis=0))
    if cols.size == 0:
        return None
    rows = np.flatnonzero(mask.any(axis=1))
    return int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1


def paste_at_origin(canvas, image):
    """Paints `image` onto `canvas` at (0, 0), honouring its transparency.

    The source image is not modified and is not rescaled; anything outside the
    canvas is clipped.
    """
    has_alpha = image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info)
    if has_alpha:
        rgba = image.convert("RGBA")
        canvas.paste(rgba.convert(canvas.mode), (0, 0), rgba)
    else:
        canvas.paste(image, (0, 0))
