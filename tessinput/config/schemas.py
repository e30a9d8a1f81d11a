"""Pydantic schemas for type-safe generation configuration.

`RenderConfig` is the complete, immutable description of one sample: it is
built once per call and handed to the composer, so no generation setting ever
lives in module or class state. `GeneratorSettings` describes a whole batch
and can be populated from keyword arguments, a YAML file and environment
variables prefixed with ``TESSINPUT_``.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Type, Union

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from tessinput.env import OUTPUT_ROOT


class FontStyle(str, Enum):
    """Font styles that can be resolved from installed font files."""

    REGULAR = "Regular"
    BOLD = "Bold"
    ITALIC = "Italic"
    BOLD_ITALIC = "BoldItalic"


class FontSpec(BaseModel):
    """A reference to a font: a file, an installed family, or the default font."""

    model_config = ConfigDict(frozen=True)

    path: Optional[Path] = Field(None, description="Path to a TrueType/OpenType font file. Takes precedence over `family`.")
    family: Optional[str] = Field(None, description="Installed font family name, resolved together with `style`.")
    style: FontStyle = Field(FontStyle.REGULAR, description="The style to select within `family`.")
    size: int = Field(50, gt=0, description="The font size in pixels before any auto-shrink.")

    def with_size(self, size):
        """Returns a copy of this spec at a different size."""
        return self.model_copy(update={"size": size})


class RenderConfig(BaseModel):
    """Parameters of a single generation request."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    width: int = Field(..., gt=0, description="Canvas width in pixels.")
    height: int = Field(..., gt=0, description="Canvas height in pixels.")
    margin: int = Field(0, ge=0, description="Padding reserved on every side before auto-shrink.")
    font: FontSpec = Field(default_factory=FontSpec, description="The font to render with.")
    background: Optional[Image.Image] = Field(None, description="Image painted at the origin before the text. Not rescaled.")
    overlay: Optional[Image.Image] = Field(None, description="Image painted at the origin after the text, using its own alpha.")
    horizontal_centering: bool = Field(False, description="Center the text block horizontally instead of starting at the margin.")
    vertical_centering: bool = Field(False, description="Center the text block vertically instead of starting at the margin.")
    text_wrap: bool = Field(False, description="Allow breaking lines at spaces when a line would overflow.")
    tight_boxes: bool = Field(True, description="Use ink-tight boxes; when False, boxes span the full line height.")
    text: str = Field("", description="The text to render.")

    @property
    def available_width(self):
        return max(1, self.width - 2 * self.margin)

    @property
    def available_height(self):
        return max(1, self.height - 2 * self.margin)


class GeneratorSettings(BaseSettings):
    """Settings for a batch of generated samples.

    Values can come from keyword arguments, a YAML file passed as
    ``yaml_file=...``, environment variables such as ``TESSINPUT_WIDTH``, or
    a ``.env`` file, in that order of precedence. Nested font fields use a
    double underscore, e.g. ``TESSINPUT_FONT__SIZE=32``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TESSINPUT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    output_dir: Path = Field(OUTPUT_ROOT, description="Directory the samples are written to. Must exist.")
    num_inputs: int = Field(100, ge=1, description="How many samples to generate.")
    min_length: int = Field(15, ge=1, description="Minimum length of the random text.")
    max_length: int = Field(30, ge=1, description="Maximum length of the random text.")
    width: int = Field(500, gt=0, description="Canvas width in pixels.")
    height: int = Field(500, gt=0, description="Canvas height in pixels.")
    margin: int = Field(0, ge=0, description="Padding reserved on every side before auto-shrink.")
    font: FontSpec = Field(default_factory=FontSpec, description="The font to render with.")
    background_path: Optional[Path] = Field(None, description="Optional background image, pre-sized to the canvas.")
    overlay_path: Optional[Path] = Field(None, description="Optional overlay image with its own transparency.")
    horizontal_centering: bool = Field(False, description="Center text horizontally.")
    vertical_centering: bool = Field(False, description="Center text vertically.")
    text_wrap: bool = Field(False, description="Wrap text at spaces.")
    tight_boxes: bool = Field(True, description="Use ink-tight boxes.")
    create_verifier: bool = Field(False, description="Also write a PNG with every box outlined.")
    seed_offset: int = Field(0, ge=0, description="The first seed; sample `i` uses seed `seed_offset + i`.")
    max_workers: int = Field(4, ge=1, description="Number of worker threads.")
    debug: bool = Field(False, description="Enable debug logging.")

    @model_validator(mode="after")
    def check_lengths(self):
        if self.min_length > self.max_length:
            raise ValueError("min_length must not be greater than max_length")
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Places the YAML file between explicit arguments and the environment."""
        yaml_file = init_settings.init_kwargs.get("yaml_file")
        return (
            init_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
            env_settings,
            dotenv_settings,
            file_secret_settings,
        )

    def render_config(self, text, background=None, overlay=None):
        """Builds the per-sample `RenderConfig` for `text`."""
        return RenderConfig(
            width=self.width,
            height=self.height,
            margin=self.margin,
            font=self.font,
            background=background,
            overlay=overlay,
            horizontal_centering=self.horizontal_centering,
            vertical_centering=self.vertical_centering,
            text_wrap=self.text_wrap,
            tight_boxes=self.tight_boxes,
            text=text,
        )


def parse_length_spec(spec: Union[str, int, tuple]) -> tuple[int, int]:
    """Parses a text length given as ``"n"`` or ``"min,max"``.

    Raises:
        ValueError: If more than two values are given or any value is not a
            positive integer.
    """
    if isinstance(spec, int):
        values = [spec]
    elif isinstance(spec, (tuple, list)):
        values = list(spec)
    else:
        values = [v.strip() for v in str(spec).split(",")]
    if len(values) > 2:
        raise ValueError("String length must be one or two numbers separated by a comma.")
    try:
        values = [int(v) for v in values]
    except ValueError:
        raise ValueError("String length values must be integers greater than 0.") from None
    if any(v < 1 for v in values):
        raise ValueError("String length values must be integers greater than 0.")
    return values[0], values[-1]
