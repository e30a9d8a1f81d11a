"""Tests for the batch runner.

These tests run small batches end to end into a temporary directory and check
the individual helpers of `tessinput.run` with their collaborators mocked.
"""

import os
from unittest.mock import MagicMock, patch

import pandas as pd
import pytest
from PIL import Image

from tessinput.config import FontSpec, GeneratorSettings
from tessinput.generator.exceptions import FontNotFound
from tessinput.run import (
    META_FILENAME,
    build_settings,
    get_composer,
    list_fonts,
    load_image,
    run,
    worker_fn,
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("TESSINPUT_"):
            monkeypatch.delenv(key)


def test_run_writes_samples_and_metadata(tmp_path):
    out = tmp_path / "out"
    out.mkdir()

    data = run(
        output_dir=str(out),
        num_inputs=2,
        length="3,5",
        width=200,
        height=60,
        font_size=30,
        max_workers=1,
        create_verifier=True,
    )

    assert list(data.columns) == ["id", "text", "font_size", "n_labels"]
    assert list(data.id) == [0, 1]
    for row in data.itertuples():
        assert 3 <= len(row.text) <= 5
        assert row.n_labels == len(row.text)
        assert 1 <= row.font_size <= 30
        with Image.open(out / f"{row.id}.tiff") as img:
            assert img.size == (200, 60)
        box_lines = (out / f"{row.id}.box").read_text(encoding="utf-8").splitlines()
        assert [line[0] for line in box_lines] == list(row.text)
        assert (out / f"{row.id}.verify.png").exists()

    meta = pd.read_csv(out / META_FILENAME, keep_default_na=False)
    assert list(meta.id) == [0, 1]
    assert list(meta.text) == list(data.text)


def test_run_is_reproducible_from_seed(tmp_path):
    first, second = tmp_path / "first", tmp_path / "second"
    first.mkdir()
    second.mkdir()
    run(output_dir=str(first), num_inputs=1, length=4, width=120, height=40, seed_offset=5, max_workers=1)
    run(output_dir=str(second), num_inputs=1, length=4, width=120, height=40, seed_offset=5, max_workers=1)
    assert (first / "5.box").read_text() == (second / "5.box").read_text()
    assert not (first / "5.verify.png").exists()


def test_run_missing_output_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        run(output_dir=str(tmp_path / "missing"), num_inputs=1, max_workers=1)


@patch("tessinput.run.thread_map")
def test_run_with_missing_font_fails_before_generating(mock_thread_map, tmp_path):
    with pytest.raises(FontNotFound):
        run(output_dir=str(tmp_path), num_inputs=1, font_path=str(tmp_path / "missing.ttf"))
    mock_thread_map.assert_not_called()


@patch("tessinput.run.thread_map", return_value=[])
def test_run_without_results(mock_thread_map, tmp_path):
    assert run(output_dir=str(tmp_path), num_inputs=1, max_workers=1) is None
    assert not (tmp_path / META_FILENAME).exists()


@patch("tessinput.run.logger")
def test_load_image_missing(mock_logger, tmp_path):
    assert load_image(None, "background") is None
    assert load_image(tmp_path / "missing.png", "background") is None
    mock_logger.warning.assert_called_once()


@patch("tessinput.run.logger")
def test_load_image_unreadable(mock_logger, tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    assert load_image(path, "overlay") is None
    mock_logger.warning.assert_called_once()


@patch("tessinput.run.logger")
def test_load_image_with_other_size(mock_logger, tmp_path):
    path = tmp_path / "bg.png"
    Image.new("RGB", (20, 10), "blue").save(path)
    img = load_image(path, "background", size=(20, 10))
    assert img.size == (20, 10)
    mock_logger.warning.assert_not_called()
    img = load_image(path, "background", size=(40, 10))
    assert img.size == (20, 10)
    mock_logger.warning.assert_called_once()


@patch("tessinput.run.logger")
@patch("tessinput.run.get_composer")
def test_worker_fn_exception_handling(mock_get_composer, mock_logger, tmp_path):
    """Tests that worker errors are logged with their traceback and re-raised."""
    mock_get_composer.return_value.compose.side_effect = Exception("Test exception")
    settings = GeneratorSettings(output_dir=tmp_path, min_length=2, max_length=2)
    with pytest.raises(Exception, match="Test exception"):
        worker_fn(3, settings)
    mock_logger.exception.assert_called_once()


@patch("tessinput.run.get_font")
@patch("tessinput.run.get_composer")
def test_worker_fn(mock_get_composer, mock_get_font, tmp_path):
    sample = MagicMock()
    sample.__enter__.return_value = sample
    sample.font_size = 20
    sample.__len__.return_value = 4
    mock_get_composer.return_value.compose.return_value = sample
    settings = GeneratorSettings(output_dir=tmp_path, min_length=4, max_length=4, create_verifier=True)

    seed, text, font_size, n_labels = worker_fn(8, settings)

    assert (seed, font_size, n_labels) == (8, 20, 4)
    assert len(text) == 4
    config = mock_get_composer.return_value.compose.call_args.args[0]
    assert config.text == text
    sample.save_to_directory.assert_called_once_with(tmp_path, create_verifier=True)
    sample.__exit__.assert_called_once()


def test_get_composer_is_reused_within_a_thread():
    assert get_composer() is get_composer()


def test_build_settings_font_options():
    settings = build_settings(font_family="Test Serif", font_style="Bold", font_size=20)
    assert settings.font == FontSpec(family="Test Serif", style="Bold", size=20)

    settings = build_settings(font_path="/fonts/a.ttf")
    assert settings.font.family is None
    assert str(settings.font.path) == os.path.join(os.sep, "fonts", "a.ttf")


def test_build_settings_length():
    settings = build_settings(length="4,9", width=None)
    assert (settings.min_length, settings.max_length) == (4, 9)
    assert settings.width == 500
    with pytest.raises(ValueError):
        build_settings(length="1,2,3")


@patch("tessinput.run.find_installed_fonts")
def test_list_fonts(mock_find_installed_fonts, tmp_path):
    mock_find_installed_fonts.return_value = pd.DataFrame(columns=["font_path", "family", "style"])
    assert list_fonts(str(tmp_path)).empty
    mock_find_installed_fonts.assert_called_once_with([tmp_path])
