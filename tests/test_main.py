"""Tests for the main command-line entry point.

These tests make sure that executing the `__main__` module hands the
``generate`` and ``fonts`` commands to `fire`.
"""

import runpy
from unittest.mock import patch

from tessinput.__main__ import main
from tessinput.run import list_fonts, run


@patch("fire.Fire")
def test_main(mock_fire):
    """Tests that the main function registers both commands with `fire.Fire`."""
    main()
    mock_fire.assert_called_once_with({"generate": run, "fonts": list_fonts})


@patch("fire.Fire")
def test_main_entry_point(mock_fire):
    """Tests that running the package as a script invokes the entry point."""
    runpy.run_module("tessinput.__main__", run_name="__main__")
    mock_fire.assert_called_with({"generate": run, "fonts": list_fonts})
