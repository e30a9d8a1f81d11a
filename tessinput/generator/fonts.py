"""Font loading and installed-font discovery.

Fonts are referenced by a `FontSpec`: a font file, an installed family and
style, or neither, which selects Pillow's bundled default font. Installed
families are found by scanning font directories and reading each file's name
table with fontTools.
"""

from functools import lru_cache
from pathlib import Path

import pandas as pd
from fontTools.ttLib import TTFont
from loguru import logger
from PIL import ImageFont

from tessinput.config.schemas import FontSpec, FontStyle
from tessinput.env import FONTS_ROOT, SYSTEM_FONT_DIRS
from tessinput.generator.exceptions import FontNotFound

FONT_SUFFIXES = {".ttf", ".otf", ".ttc"}

_SUBFAMILY_TO_STYLE = {
    "regular": FontStyle.REGULAR,
    "normal": FontStyle.REGULAR,
    "roman": FontStyle.REGULAR,
    "book": FontStyle.REGULAR,
    "bold": FontStyle.BOLD,
    "italic": FontStyle.ITALIC,
    "oblique": FontStyle.ITALIC,
    "bold italic": FontStyle.BOLD_ITALIC,
    "bold oblique": FontStyle.BOLD_ITALIC,
    "bolditalic": FontStyle.BOLD_ITALIC,
}


class FontHandle:
    """A loaded font together with the `FontSpec` it was loaded from.

    Attributes:
        spec (FontSpec): The reference the font was resolved from.
        font (ImageFont.FreeTypeFont): The Pillow font object.
    """

    def __init__(self, spec, font):
        self.spec = spec
        self.font = font

    def __repr__(self):
        return f"FontHandle({self.spec!r})"

    @property
    def size(self):
        return self.spec.size

    @property
    def key(self):
        """A hashable identity, used to cache per-font measurements."""
        return (self.spec.path, self.spec.family, self.spec.style, self.spec.size)

    @property
    def line_height(self):
        ascent, descent = self.font.getmetrics()
        return ascent + descent

    def length(self, text):
        """The advance width of `text` in pixels."""
        if not text:
            return 0.0
        return self.font.getlength(text)

    def bbox(self, text):
        """The nominal bounding box of `text` drawn at the origin, anchor ``"la"``."""
        return self.font.getbbox(text, anchor="la")

    def resized(self, size):
        """Loads the same font at another size."""
        return load_font(self.spec.with_size(size))


def _normalize_style(subfamily):
    if not subfamily:
        return None
    return _SUBFAMILY_TO_STYLE.get(" ".join(subfamily.lower().split()))


def read_font_names(font_path):
    """Reads the family and style of a font file.

    Returns:
        tuple[str, FontStyle] or None: None if the file cannot be parsed or
        its subfamily is not one of the supported styles.
    """
    try:
        with TTFont(str(font_path), lazy=True, fontNumber=0) as ttfont:
            name_table = ttfont["name"]
            family = name_table.getBestFamilyName()
            subfamily = name_table.getBestSubFamilyName()
    except Exception as e:
        logger.debug(f"Skipping unreadable font {font_path}: {e}")
        return None
    style = _normalize_style(subfamily)
    if not family or style is None:
        return None
    return family, style


def find_installed_fonts(font_dirs=None):
    """Scans font directories and lists every usable font file.

    Args:
        font_dirs (Iterable[Path], optional): Directories to scan recursively.
            Defaults to the project font directory followed by the usual
            system font directories.

    Returns:
        pd.DataFrame: Columns ``font_path``, ``family`` and ``style``, in scan
        order.
    """
    if font_dirs is None:
        font_dirs = [FONTS_ROOT, *SYSTEM_FONT_DIRS]

    records = []
    for font_dir in font_dirs:
        font_dir = Path(font_dir)
        if not font_dir.is_dir():
            continue
        for path in sorted(font_dir.glob("**/*")):
            if path.suffix.lower() not in FONT_SUFFIXES or not path.is_file():
                continue
            names = read_font_names(path)
            if names is None:
                continue
            family, style = names
            records.append({"font_path": str(path), "family": family, "style": style.value})

    return pd.DataFrame(records, columns=["font_path", "family", "style"])


@lru_cache(maxsize=1)
def _default_font_index():
    return find_installed_fonts()


def find_font_file(family, style=FontStyle.REGULAR, fonts_df=None):
    """Finds the file of an installed font family in the given style.

    Family names are compared case-insensitively.

    Returns:
        Path or None: The first matching file, or None if there is none.
    """
    if fonts_df is None:
        fonts_df = _default_font_index()
    if fonts_df.empty:
        return None
    style = FontStyle(style)
    mask = (fonts_df.family.str.lower() == family.lower()) & (fonts_df["style"] == style.value)
    matches = fonts_df[mask]
    if matches.empty:
        return None
    return Path(matches.iloc[0].font_path)


def is_font_installed(family, style=FontStyle.REGULAR, fonts_df=None):
    """Checks if a font family is installed with the given style."""
    return find_font_file(family, style, fonts_df=fonts_df) is not None


def load_font(spec, fonts_df=None):
    """Resolves a `FontSpec` into a `FontHandle`.

    Args:
        spec (FontSpec): The font reference.
        fonts_df (pd.DataFrame, optional): An installed-font table to resolve
            families against instead of scanning the default directories.

    Returns:
        FontHandle: The loaded font.

    Raises:
        FontNotFound: If the font file does not exist or cannot be opened, or
            the family is not installed in the requested style.
    """
    if spec.path is not None:
        font_path = Path(spec.path)
        if not font_path.is_file():
            raise FontNotFound(f"Custom font file not found: {font_path}")
    elif spec.family:
        font_path = find_font_file(spec.family, spec.style, fonts_df=fonts_df)
        if font_path is None:
            raise FontNotFound(
                f"Specified font or font style is not installed: {spec.family} ({spec.style.value})"
            )
    else:
        return FontHandle(spec, ImageFont.load_default(size=spec.size))

    try:
        font = ImageFont.truetype(str(font_path), spec.size)
    except OSError as e:
        raise FontNotFound(f"Invalid font file {font_path}: {e}") from e
    return FontHandle(spec, font)


def default_font(size=50):
    """Pillow's bundled default font at `size`."""
    return load_font(FontSpec(size=size))
