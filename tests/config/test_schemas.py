"""Tests for the configuration schemas and the settings loader.

These tests check that `RenderConfig` and `GeneratorSettings` validate their
input, that `parse_length_spec` accepts the command line length formats, and
that `load_config` layers the YAML file, environment variables and explicit
overrides in the documented order.
"""

import os
import unittest

import pytest
import yaml
from PIL import Image
from pydantic import ValidationError

from tessinput.config import (
    CONFIG_PATH,
    FontSpec,
    FontStyle,
    GeneratorSettings,
    RenderConfig,
    load_config,
    parse_length_spec,
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Runs every test without ``TESSINPUT_*`` variables or a stray ``.env`` file."""
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TESSINPUT_"):
            monkeypatch.delenv(key)


class TestRenderConfig(unittest.TestCase):
    def test_defaults(self):
        config = RenderConfig(width=100, height=50)
        self.assertEqual(config.margin, 0)
        self.assertEqual(config.font, FontSpec())
        self.assertEqual(config.text, "")
        self.assertTrue(config.tight_boxes)
        self.assertFalse(config.text_wrap)
        self.assertIsNone(config.background)

    def test_available_area(self):
        config = RenderConfig(width=100, height=50, margin=10)
        self.assertEqual((config.available_width, config.available_height), (80, 30))
        tiny = RenderConfig(width=10, height=10, margin=20)
        self.assertEqual((tiny.available_width, tiny.available_height), (1, 1))

    def test_invalid_dimensions_raise_error(self):
        for kwargs in ({"width": 0, "height": 10}, {"width": 10, "height": -1}, {"width": 10, "height": 10, "margin": -1}):
            with self.assertRaises(ValidationError):
                RenderConfig(**kwargs)

    def test_is_frozen(self):
        config = RenderConfig(width=10, height=10, text="a")
        with self.assertRaises(ValidationError):
            config.text = "b"

    def test_accepts_images(self):
        img = Image.new("RGB", (10, 10))
        config = RenderConfig(width=10, height=10, background=img, overlay=img)
        self.assertIs(config.background, img)
        with self.assertRaises(ValidationError):
            RenderConfig(width=10, height=10, background="background.png")


class TestFontSpec(unittest.TestCase):
    def test_style_from_string(self):
        self.assertEqual(FontSpec(style="BoldItalic").style, FontStyle.BOLD_ITALIC)
        with self.assertRaises(ValidationError):
            FontSpec(style="Underline")

    def test_size_must_be_positive(self):
        with self.assertRaises(ValidationError):
            FontSpec(size=0)

    def test_with_size(self):
        spec = FontSpec(family="Arial", size=40)
        self.assertEqual(spec.with_size(20), FontSpec(family="Arial", size=20))
        self.assertEqual(spec.size, 40)


def test_generator_settings_defaults():
    settings = GeneratorSettings()
    assert settings.num_inputs == 100
    assert (settings.min_length, settings.max_length) == (15, 30)
    assert (settings.width, settings.height) == (500, 500)
    assert settings.font == FontSpec()
    assert settings.max_workers == 4


def test_generator_settings_rejects_inverted_lengths():
    with pytest.raises(ValidationError, match="min_length"):
        GeneratorSettings(min_length=10, max_length=5)


def test_render_config_carries_settings():
    settings = GeneratorSettings(width=320, height=64, margin=4, text_wrap=True, tight_boxes=False)
    config = settings.render_config("Hello")
    assert (config.width, config.height, config.margin) == (320, 64, 4)
    assert config.text == "Hello"
    assert config.text_wrap and not config.tight_boxes
    assert config.font == settings.font


@pytest.mark.parametrize(
    "spec, expected",
    [("5", (5, 5)), ("3,8", (3, 8)), (" 3 , 8 ", (3, 8)), (7, (7, 7)), ((2, 4), (2, 4))],
)
def test_parse_length_spec(spec, expected):
    assert parse_length_spec(spec) == expected


@pytest.mark.parametrize("spec", ["1,2,3", "a", "0", "-1,4", "3,"])
def test_parse_length_spec_rejects_invalid(spec):
    with pytest.raises(ValueError):
        parse_length_spec(spec)


def test_load_config_from_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({"width": 300, "font": {"size": 24, "style": "Bold"}}))
    settings = load_config(config_file)
    assert settings.width == 300
    assert settings.font == FontSpec(size=24, style=FontStyle.BOLD)
    assert settings.height == 500


def test_load_config_explicit_overrides_win(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({"width": 300, "height": 40}))
    monkeypatch.setenv("TESSINPUT_WIDTH", "400")
    monkeypatch.setenv("TESSINPUT_MARGIN", "3")
    settings = load_config(config_file, height=80, margin=None)
    assert settings.width == 300
    assert settings.height == 80
    assert settings.margin == 3


def test_load_config_from_environment(monkeypatch):
    monkeypatch.setenv("TESSINPUT_WIDTH", "640")
    monkeypatch.setenv("TESSINPUT_FONT__SIZE", "32")
    monkeypatch.setenv("TESSINPUT_TEXT_WRAP", "true")
    settings = load_config()
    assert settings.width == 640
    assert settings.font.size == 32
    assert settings.text_wrap


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


def test_invalid_value_in_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({"num_inputs": 0}))
    with pytest.raises(ValidationError):
        load_config(config_file)


def test_shipped_example_config_is_valid():
    settings = load_config(CONFIG_PATH)
    assert settings.margin == 10
    assert settings.vertical_centering
    assert settings.create_verifier
