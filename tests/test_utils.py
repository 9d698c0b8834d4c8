"""Tests for lenient number parsing."""

import pytest

from globetrotter.utils import int_or_default, safe_float, safe_int


@pytest.mark.parametrize(
    "raw, expected",
    [("12", 12), (12, 12), ("12.7", 12), ("abc", None), ("", None), (None, None), (True, None)],
)
def test_safe_int(raw, expected):
    assert safe_int(raw) == expected


@pytest.mark.parametrize("raw, expected", [("2.5", 2.5), (3, 3.0), ("x", None), (False, None)])
def test_safe_float(raw, expected):
    assert safe_float(raw) == expected


def test_int_or_default():
    assert int_or_default("75", 50) == 75
    assert int_or_default("n/a", 50) == 50
    assert int_or_default(0, 50) == 50
