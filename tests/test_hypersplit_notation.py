import pytest

from eternum.hypersplit_notation import HypersplitNotation
from eternum.magnitude import NAN


@pytest.mark.parametrize(
    "value, expected",
    [
        (5, "5"),
        (1234, "1.234*10^3"),
        (-1234, "-1.234*10^3"),
        (1e100, "((10^)^1) 1*10^2"),
    ],
)
def test_hypersplit_notation(value, expected):
    assert HypersplitNotation().format(value) == expected


def test_hypersplit_nan():
    assert HypersplitNotation().format(NAN) == "???"


def test_show_zeroes():
    n = HypersplitNotation(show_zeroes=(1, 1, -1, -1))
    assert n.format(5) == "5*10^0"


def test_delimiter_permutation():
    # Every coordinate goes in front of the mantissa.
    n = HypersplitNotation(delimiter_permutation=0)
    assert n.format(1234) == "*10^31.234"


def test_convergent_base_rejected():
    with pytest.raises(ValueError):
        HypersplitNotation(base=1.2)
