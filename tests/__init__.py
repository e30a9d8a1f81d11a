"""The tests package for tessinput.

This package contains the unit and integration tests for glyph measurement,
layout, composition, box file output, configuration and the batch runner. The
tests are written using the `pytest` framework.
"""
