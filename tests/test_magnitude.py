import math

import pytest
from hypothesis import given, strategies as st

from eternum.magnitude import (
    INF,
    NAN,
    NEG_INF,
    ONE,
    ZERO,
    Magnitude,
    iteratedlog,
    slog,
    tetrate,
    to_magnitude,
)

finite_floats = st.floats(min_value=-1e300, max_value=1e300, allow_nan=False, allow_infinity=False)
# Values that stay on layer 0, where arithmetic is plain float arithmetic.
plain_floats = st.floats(min_value=-1e15, max_value=1e15, allow_nan=False).filter(lambda x: x == 0 or abs(x) >= 1e-10)

# -----------------------------------------------------------------------------
# Construction & conversion
# -----------------------------------------------------------------------------


@given(finite_floats)
def test_float_round_trip(x: float):
    assert to_magnitude(x).to_float() == pytest.approx(x, rel=1e-12, abs=1e-300)


def test_huge_int_moves_to_layer_one():
    m = to_magnitude(10 ** 400)
    assert m.layer == 1
    assert m.mag == pytest.approx(400)


def test_components_are_normalised():
    hundred = Magnitude.from_components(1, 1, 2.0)
    assert hundred.layer == 0 and hundred == 100
    tower = Magnitude.from_components(-1, 2, 400.0)
    assert (tower.sign, tower.layer, tower.mag) == (-1, 2, 400.0)


def test_parse_strings():
    assert to_magnitude("123.5").to_float() == 123.5
    assert to_magnitude("1e500") > to_magnitude("1e499")
    assert to_magnitude("ee5") == tetrate(10, 2, 5)
    assert to_magnitude("-inf") == NEG_INF
    assert to_magnitude("nan").is_nan()


def test_empty_string_rejected():
    with pytest.raises(ValueError):
        to_magnitude("")


def test_unsupported_type_rejected():
    with pytest.raises(TypeError):
        to_magnitude([1, 2])


# -----------------------------------------------------------------------------
# Ordering & arithmetic
# -----------------------------------------------------------------------------


@given(plain_floats, plain_floats)
def test_ordering_matches_floats(a: float, b: float):
    ma, mb = to_magnitude(a), to_magnitude(b)
    assert (ma < mb) == (a < b)
    assert (ma == mb) == (a == b)


def test_nan_is_unordered():
    assert not NAN < ONE
    assert not NAN >= ONE
    assert NAN != NAN


@given(plain_floats, plain_floats)
def test_add_and_mul_match_floats(a: float, b: float):
    assert (to_magnitude(a) + b).to_float() == pytest.approx(a + b)
    assert (to_magnitude(a) * b).to_float() == pytest.approx(a * b, rel=1e-9, abs=1e-300)


def test_pow10_beyond_float_range():
    big = to_magnitude(1000).pow10()
    assert big.is_finite()
    assert big.log10().to_float() == pytest.approx(1000)


def test_zero_division():
    assert ONE.div(ZERO) == INF
    assert ZERO.recip() == INF


# -----------------------------------------------------------------------------
# Hyper-operators
# -----------------------------------------------------------------------------


def test_tetrate_integer_heights():
    assert tetrate(2, 3).to_float() == pytest.approx(16)
    assert tetrate(10, 1, 3).to_float() == pytest.approx(1000)


@given(st.floats(min_value=0.0, max_value=6.0))
def test_slog_inverts_tetrate(height: float):
    assert slog(tetrate(10, height), 10).to_float() == pytest.approx(height, abs=1e-6)


def test_iteratedlog_undoes_tetrate():
    tower = tetrate(10, 3, 2)
    assert iteratedlog(tower, 10, 3).to_float() == pytest.approx(2, rel=1e-9)


def test_str_forms():
    assert str(NAN) == "NaN"
    assert str(INF) == "Infinity"
    assert str(to_magnitude(2.5)) == "2.5"
    assert math.isinf(INF.to_float())
