"""The tessinput package generates labeled training inputs for Tesseract.

Each input is an image of a rendered string and a box file giving the
bounding box of every character in the string. The main entry point for
library use is the `Composer` class; the `tessinput` command runs whole
batches.

Example:
    >>> from tessinput import Composer, RenderConfig
    >>> sample = Composer().compose(RenderConfig(width=400, height=100, text="Hello"), sample_id=0)
    >>> len(sample)
    5
"""

from ._version import __version__ as __version__
from tessinput.config import FontSpec as FontSpec, RenderConfig as RenderConfig
from tessinput.generator import Composer as Composer, TrainingSample as TrainingSample
