import pytest

from eternum.text import add_commas, commas_and_decimals, delimiter_order


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (1234567, "1,234,567"),
        (3.14159, "3.142"),
        (0.001234, "0.001234"),
        (-2.5, "-2.5"),
        (9.99999, "10"),
        (1e25, "1e+25"),
        (float("nan"), "NaN"),
        (float("inf"), "Infinity"),
        (float("-inf"), "-Infinity"),
    ],
)
def test_commas_and_decimals_defaults(value, expected):
    assert commas_and_decimals(value) == expected


def test_fixed_places_and_custom_characters():
    assert commas_and_decimals(1234.5, 1, 1, 0, ",", ".") == "1.234,5"


def test_commas_disabled():
    assert commas_and_decimals(1234567, commas=-1) == "1234567"


def test_commas_threshold():
    assert commas_and_decimals(12345, commas=1e5) == "12345"
    assert commas_and_decimals(123456, commas=1e5) == "123,456"


def test_add_commas_cycles_from_the_right():
    assert add_commas("1234567") == "1,234,567"
    assert add_commas("1234567", ("'", ",")) == "1,234'567"
    assert add_commas("123") == "123"
    assert add_commas("123456", (" ",), 2) == "12 34 56"


def test_delimiter_order():
    assert delimiter_order([1], 1, (2, 3)) == [3, 1, 2]
    assert delimiter_order([1], 0, (2, 3)) == [3, 2, 1]
    assert sorted(delimiter_order([0], 17, (1, 2, 3))) == [0, 1, 2, 3]
