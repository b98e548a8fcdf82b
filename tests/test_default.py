import pytest

from eternum.default import DefaultNotation
from eternum.magnitude import tetrate, to_magnitude


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (5, "5"),
        (1234.5678, "1,235"),
        (0.5, "0.5"),
        (1e15, "1e15"),
        (123456789012345, "1.235e14"),
        (1e-7, "1e-7"),
        (1e100, "1e100"),
        ("1e1e15", "e1e15"),
    ],
)
def test_default_ladder(value, expected):
    assert DefaultNotation().format(value) == expected


def test_tetration_form():
    assert DefaultNotation().format(tetrate(10, 1e13)).startswith("F")


def test_custom_characters_and_places():
    n = DefaultNotation(places_above_1=2, commas_min=1000, decimal_char=",", comma_char=".")
    assert n.format(1234.5678) == "1.234,57"
    assert n.format(999.5) == "999,5"


def test_lower_maxnum():
    n = DefaultNotation(maxnum=1000)
    assert n.format(999) == "999"
    assert n.format(12346) == "1.235e4"


def test_negative_values():
    assert DefaultNotation().format(to_magnitude(-1e15)) == "-1e15"
