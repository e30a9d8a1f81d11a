"""The generated training sample and its on-disk artifacts.

A sample is written as ``<id>.tiff`` (the image) and ``<id>.box`` (one box
line per input character), plus an optional ``<id>.verify.png`` with every
box outlined so a human can check the labels.
"""

from pathlib import Path

from loguru import logger

from tessinput.generator.labels import to_label_format
from tessinput.generator.utils import drawing

VERIFY_OUTLINE_COLOR = "red"
VERIFY_OUTLINE_WIDTH = 3


class TrainingSample:
    """An image, its per-character labels and the identifier used for naming.

    The sample owns its image until `close()` is called; it can also be used
    as a context manager. The labels are in input string order, one per
    character.

    Attributes:
        image (Image.Image): The composed raster, or None once released.
        labels (tuple[GlyphLabel, ...]): Raster-space labels.
        sample_id (str or int): Used only to name the output files.
        font_size (int, optional): The effective font size after auto-shrink.
    """

    def __init__(self, image, labels, sample_id, font_size=None):
        self.image = image
        self.labels = tuple(labels)
        self.sample_id = sample_id
        self.font_size = font_size

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __len__(self):
        return len(self.labels)

    @property
    def text(self):
        return "".join(label.symbol for label in self.labels)

    def _require_image(self):
        if self.image is None:
            raise ValueError(f"The image of sample {self.sample_id} has already been released")
        return self.image

    def close(self):
        """Releases the image. Further saving is not possible."""
        if self.image is not None:
            self.image.close()
            self.image = None

    def box_lines(self):
        """The labels as Tesseract box lines, flipped against the image height."""
        return to_label_format(self.labels, self._require_image().height)

    def verification_image(self):
        """A copy of the image with every label rectangle outlined."""
        clone = self._require_image().convert("RGB")
        with drawing(clone) as draw:
            for label in self.labels:
                draw.rectangle(label.rect.as_tuple(), outline=VERIFY_OUTLINE_COLOR, width=VERIFY_OUTLINE_WIDTH)
        return clone

    def save_tiff(self, file_path):
        self._require_image().save(file_path, format="TIFF")

    def save_box(self, file_path):
        lines = self.box_lines()
        with open(file_path, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(line + "\n")

    def save_verify(self, file_path):
        clone = self.verification_image()
        try:
            clone.save(file_path, format="PNG")
        finally:
            clone.close()

    def save_to_directory(self, directory, create_verifier=False, close=False):
        """Writes the sample's artifacts into `directory`.

        Args:
            directory (str or Path): An existing directory.
            create_verifier (bool): Also write ``<id>.verify.png``.
            close (bool): Release the image after writing.

        Returns:
            dict[str, Path]: The written files keyed by ``"tiff"``, ``"box"``
            and, if requested, ``"verify"``.
        """
        directory = Path(directory)
        paths = {
            "tiff": directory / f"{self.sample_id}.tiff",
            "box": directory / f"{self.sample_id}.box",
        }
        self.save_tiff(paths["tiff"])
        self.save_box(paths["box"])
        if create_verifier:
            paths["verify"] = directory / f"{self.sample_id}.verify.png"
            self.save_verify(paths["verify"])
        logger.debug(f"Saved sample {self.sample_id} to {directory}")
        if close:
            self.close()
        return paths
