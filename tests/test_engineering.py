import pytest

from eternum.engineering import (
    current_engineering_value,
    next_engineering_value,
    normalize_engineerings,
    previous_engineering_value,
    round_to,
    upper_current_engineering_value,
)
from eternum.magnitude import to_magnitude


def _floats(values):
    return [v.to_float() for v in values]


def test_normalize_sorts_descending():
    assert _floats(normalize_engineerings([2, 5])) == [5, 2]
    assert _floats(normalize_engineerings(3)) == [3]
    assert _floats(normalize_engineerings([])) == [1]


@pytest.mark.parametrize("bad", [0, -1, float("inf")])
def test_normalize_rejects_invalid_steps(bad):
    with pytest.raises(ValueError):
        normalize_engineerings(bad)


# -----------------------------------------------------------------------------
# Single step sizes behave like multiples
# -----------------------------------------------------------------------------


def test_multiples_of_three():
    steps = normalize_engineerings(3)
    assert current_engineering_value(7, steps).to_float() == 6
    assert upper_current_engineering_value(7, steps).to_float() == 9
    assert next_engineering_value(6, steps).to_float() == 9
    assert previous_engineering_value(6, steps).to_float() == 3


def test_negative_values_mirror():
    steps = normalize_engineerings(3)
    assert current_engineering_value(-7, steps).to_float() == -9
    assert next_engineering_value(-6, steps).to_float() == -3
    assert previous_engineering_value(0, steps).to_float() == -3


# -----------------------------------------------------------------------------
# Mixed step sizes
# -----------------------------------------------------------------------------


def test_five_and_two_sequence():
    steps = normalize_engineerings([5, 2])
    walked = []
    value = to_magnitude(0)
    for _ in range(8):
        value = next_engineering_value(value, steps)
        walked.append(value.to_float())
    assert walked == [2, 4, 5, 7, 9, 10, 12, 14]


def test_five_and_two_previous():
    steps = normalize_engineerings([5, 2])
    assert previous_engineering_value(10, steps).to_float() == 9
    assert previous_engineering_value(5, steps).to_float() == 4


def test_round_to():
    assert round_to(1.26, 0.1).to_float() == pytest.approx(1.3)
    assert round_to(1.26, 0).to_float() == 1.26
    assert round_to(17, lambda v: 5).to_float() == 15
