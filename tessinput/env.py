"""Default locations used by the generator.

All paths are constructed relative to the project's root directory and can be
overridden through the generator settings.
"""

import os
from pathlib import Path


ROOT_DIR = Path(__file__).parent.parent
"""The root directory of the project."""

FONTS_ROOT = ROOT_DIR / "fonts"
"""The path to a directory of project-local font files, searched first."""

OUTPUT_ROOT = ROOT_DIR / "out"
"""The default directory where generated samples are written."""

SYSTEM_FONT_DIRS = [
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
    Path.home() / ".local" / "share" / "fonts",
    Path("/Library/Fonts"),
    Path.home() / "Library" / "Fonts",
    Path(os.environ.get("WINDIR", "C:/Windows")) / "Fonts",
]
"""Directories scanned when a font is referenced by family name."""
