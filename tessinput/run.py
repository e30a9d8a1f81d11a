"""Batch generation of Tesseract training samples.

Each sample is produced from its own seed: the seed selects the random text
and names the output files, so a sample can be regenerated later. Samples are
independent of each other and are generated in a thread pool, each worker
thread owning its own `Composer`.
"""

import sys
import threading
from functools import partial
from pathlib import Path

import pandas as pd
from loguru import logger
from PIL import Image, UnidentifiedImageError
from tqdm.contrib.concurrent import thread_map

from tessinput.config import FontSpec, load_config, parse_length_spec
from tessinput.generator.composer import Composer
from tessinput.generator.fonts import find_installed_fonts, load_font
from tessinput.generator.text import text_for_seed

META_FILENAME = "meta.csv"

_local = threading.local()


def configure_logging(debug=False):
    """Routes loguru output to stderr at INFO, or DEBUG when `debug` is set."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if debug else "INFO")


def load_image(path, kind, size=None):
    """Opens an optional background or overlay image.

    Missing or unreadable images are reported and ignored, matching how the
    generator treats them as optional decoration.

    Args:
        path (str or Path, optional): The image path, or None.
        kind (str): ``"background"`` or ``"overlay"``, for messages.
        size (tuple[int, int], optional): The canvas size, to warn about
            images that will not cover it exactly.

    Returns:
        Image.Image or None: The fully loaded image, or None.
    """
    if path is None:
        return None
    path = Path(path)
    if not path.is_file():
        logger.warning(f"The supplied {kind} image could not be found. Ignoring. ({path})")
        return None
    try:
        img = Image.open(path)
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"The supplied {kind} image could not be opened. Ignoring. ({e})")
        return None
    if size is not None and img.size != tuple(size):
        logger.warning(f"The {kind} image is {img.size[0]}x{img.size[1]}, not {size[0]}x{size[1]}; it is not rescaled")
    return img


def get_composer():
    """The `Composer` of the current thread."""
    composer = getattr(_local, "composer", None)
    if composer is None:
        composer = Composer()
        _local.composer = composer
    return composer


def get_font(spec):
    """The font for `spec`, loaded once per thread."""
    fonts = getattr(_local, "fonts", None)
    if fonts is None:
        fonts = _local.fonts = {}
    if spec not in fonts:
        fonts[spec] = load_font(spec)
    return fonts[spec]


def worker_fn(seed, settings, background=None, overlay=None):
    """Generates and saves the sample for one seed.

    Args:
        seed (int): The sample seed, also used as its identifier.
        settings (GeneratorSettings): The batch settings.
        background (Image.Image, optional): The background image.
        overlay (Image.Image, optional): The overlay image.

    Returns:
        tuple: ``(id, text, font_size, n_labels)`` for the metadata table.
    """
    try:
        text = text_for_seed(seed, settings.min_length, settings.max_length)
        logger.debug(f"Processing sample {seed}: '{text}'")
        config = settings.render_config(text, background=background, overlay=overlay)
        font = get_font(settings.font)
        with get_composer().compose(config, sample_id=seed, font=font) as sample:
            sample.save_to_directory(settings.output_dir, create_verifier=settings.create_verifier)
            return seed, text, sample.font_size, len(sample)
    except Exception:
        logger.exception(f"Failed to generate sample {seed}")
        raise


def build_settings(config=None, length=None, font_path=None, font_family=None, font_style=None, font_size=None, **overrides):
    """Combines a config file, the environment and explicit options into settings."""
    if length is not None:
        overrides["min_length"], overrides["max_length"] = parse_length_spec(length)
    settings = load_config(config, **overrides)

    font_updates = {
        "path": font_path,
        "family": font_family,
        "style": font_style,
        "size": font_size,
    }
    font_updates = {k: v for k, v in font_updates.items() if v is not None}
    if font_updates:
        # A file and a family are alternatives; naming one drops the other
        if "path" in font_updates:
            font_updates.setdefault("family", None)
        elif "family" in font_updates:
            font_updates["path"] = None
        font = FontSpec(**{**settings.font.model_dump(), **font_updates})
        settings = settings.model_copy(update={"font": font})
    return settings


def run(
    output_dir=None,
    num_inputs=None,
    length=None,
    width=None,
    height=None,
    margin=None,
    font_path=None,
    font_family=None,
    font_style=None,
    font_size=None,
    background_path=None,
    overlay_path=None,
    vertical_centering=None,
    horizontal_centering=None,
    text_wrap=None,
    tight_boxes=None,
    create_verifier=None,
    seed_offset=None,
    max_workers=None,
    debug=None,
    config=None,
):
    """Generates a batch of samples and their metadata.

    Every option left as None falls back to the YAML config (if given), the
    ``TESSINPUT_*`` environment variables, and finally the defaults of
    `GeneratorSettings`.

    Args:
        output_dir (str, optional): Existing directory for the output files.
        num_inputs (int, optional): How many samples to generate.
        length (str or int, optional): Text length, ``"n"`` or ``"min,max"``.
        width (int, optional): Canvas width in pixels.
        height (int, optional): Canvas height in pixels.
        margin (int, optional): Padding reserved on every side.
        font_path (str, optional): A font file to render with.
        font_family (str, optional): An installed font family.
        font_style (str, optional): Regular, Bold, Italic or BoldItalic.
        font_size (int, optional): Font size before auto-shrink.
        background_path (str, optional): Background image, sized to the canvas.
        overlay_path (str, optional): Overlay image with transparency.
        vertical_centering (bool, optional): Center text vertically.
        horizontal_centering (bool, optional): Center text horizontally.
        text_wrap (bool, optional): Wrap text at spaces.
        tight_boxes (bool, optional): Ink-tight boxes instead of line-high ones.
        create_verifier (bool, optional): Also write outlined PNGs.
        seed_offset (int, optional): Seed of the first sample.
        max_workers (int, optional): Worker threads.
        debug (bool, optional): Verbose logging.
        config (str, optional): A YAML settings file.

    Returns:
        pd.DataFrame or None: The metadata table, also written to
        ``meta.csv`` in the output directory, or None if nothing was generated.

    Raises:
        FileNotFoundError: If the output directory does not exist.
        FontNotFound: If the font cannot be resolved.
        ValueError: If the options are invalid.
    """
    settings = build_settings(
        config=config,
        length=length,
        font_path=font_path,
        font_family=font_family,
        font_style=font_style,
        font_size=font_size,
        output_dir=output_dir,
        num_inputs=num_inputs,
        width=width,
        height=height,
        margin=margin,
        background_path=background_path,
        overlay_path=overlay_path,
        vertical_centering=vertical_centering,
        horizontal_centering=horizontal_centering,
        text_wrap=text_wrap,
        tight_boxes=tight_boxes,
        create_verifier=create_verifier,
        seed_offset=seed_offset,
        max_workers=max_workers,
        debug=debug,
    )
    configure_logging(settings.debug)

    output_dir = Path(settings.output_dir)
    if not output_dir.is_dir():
        raise FileNotFoundError(f"Output directory does not exist: {output_dir}")

    # Resolve the font up front so a bad reference fails before any work starts
    load_font(settings.font)
    canvas_size = (settings.width, settings.height)
    background = load_image(settings.background_path, "background", canvas_size)
    overlay = load_image(settings.overlay_path, "overlay", canvas_size)

    seeds = list(range(settings.seed_offset, settings.seed_offset + settings.num_inputs))
    logger.info(f"Generating {len(seeds)} samples into {output_dir}")

    f_with_settings = partial(worker_fn, settings=settings, background=background, overlay=overlay)
    results = thread_map(f_with_settings, seeds, max_workers=settings.max_workers, desc="Generating samples")

    data = [res for res in results if res is not None]
    if not data:
        logger.info("No data generated.")
        return None

    data = pd.DataFrame(data, columns=["id", "text", "font_size", "n_labels"])
    meta_path = output_dir / META_FILENAME
    data.to_csv(meta_path, index=False)
    logger.info(f"Wrote {len(data)} samples and metadata to {meta_path}")
    return data


def list_fonts(font_dir=None):
    """Lists the installed fonts that can be referenced by family and style.

    Args:
        font_dir (str, optional): Scan only this directory instead of the
            default font directories.

    Returns:
        pd.DataFrame: Columns ``font_path``, ``family`` and ``style``.
    """
    font_dirs = [Path(font_dir)] if font_dir is not None else None
    fonts_df = find_installed_fonts(font_dirs)
    logger.info(f"Found {len(fonts_df)} usable font files")
    return fonts_df
