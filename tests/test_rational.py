import math

import pytest
from hypothesis import given, strategies as st

from eternum.magnitude import INF, NAN
from eternum.rational import (
    FractionForm,
    approximate,
    fraction_approximation,
    prime_factorize,
    prime_factorize_fraction,
    primes_array,
)


def _floats(values):
    return [v.to_float() for v in values]


# -----------------------------------------------------------------------------
# Continued fractions
# -----------------------------------------------------------------------------


def test_three_quarters():
    result = approximate(0.75, 1e-9)
    assert result.numerator.to_float() == 3
    assert result.denominator.to_float() == 4


def test_pi_with_denominator_cap():
    # The first convergent past the cap is kept.
    assert _floats(fraction_approximation(math.pi, 1e-12, FractionForm.FRACTION, max_denominator=10)) == [333, 106]


def test_strict_denominator_cap_rolls_back():
    result = approximate(math.pi, 1e-12, max_denominator=10, strict_max_denominator=True)
    assert result.denominator.to_float() == 7


def test_iteration_cap():
    result = approximate(math.pi, 0, max_iterations=2)
    assert len(result.terms) == 2
    assert result.numerator.to_float() == 22


def test_relative_precision():
    result = approximate(math.pi, -100)
    assert abs(result.value.to_float() - math.pi) <= math.pi / 100


@given(st.floats(min_value=-1e6, max_value=1e6, allow_nan=False))
def test_precision_is_met(x: float):
    result = approximate(x, 1e-6)
    assert abs(result.value.to_float() - x) <= 1e-6 * (1 + abs(x) * 1e-9)
    assert result.denominator > 0


@pytest.mark.parametrize("value", [NAN, INF])
def test_non_finite_rejected(value):
    with pytest.raises(ValueError):
        approximate(value, 1e-6)


# -----------------------------------------------------------------------------
# Fraction forms
# -----------------------------------------------------------------------------


def test_mixed_number_keeps_fraction_positive():
    assert _floats(fraction_approximation(-1.75, 1e-9, FractionForm.MIXED_NUMBER)) == [-1, 3, 4]
    assert _floats(fraction_approximation(-0.75, 1e-9, FractionForm.MIXED_NUMBER)) == [0, -3, 4]


def test_mixed_uses_floor():
    assert _floats(fraction_approximation(-1.75, 1e-9, FractionForm.MIXED)) == [-2, 1, 4]


def test_continued_fraction_terms():
    assert _floats(fraction_approximation(0.75, 1e-9, FractionForm.CONTINUED_FRACTION)) == [0, 1, 3]


# -----------------------------------------------------------------------------
# Primes
# -----------------------------------------------------------------------------


def test_primes_array():
    assert primes_array(20) == [2, 3, 5, 7, 11, 13, 17, 19]
    assert primes_array(1) == []


@pytest.mark.parametrize(
    "value, expected",
    [
        (60, [(2, 2), (3, 1), (5, 1)]),
        (1, []),
        (0, [(0, 1)]),
        (-12, [(-1, 1), (2, 2), (3, 1)]),
        (97, [(97, 1)]),
    ],
)
def test_prime_factorize(value, expected):
    assert prime_factorize(value) == expected


def test_prime_factorize_with_leftover():
    assert prime_factorize(2 * 3 * 49, [2, 3]) == [(2, 1), (3, 1), (49, 1)]


def test_prime_factorize_fraction():
    assert prime_factorize_fraction(40 / 63, None, 1e-12) == [(2, 3), (3, -2), (5, 1), (7, -1)]
