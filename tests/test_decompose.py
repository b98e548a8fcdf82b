import logging
import math

import pytest
from hypothesis import given, strategies as st

import eternum
from eternum.decompose import (
    hyperscientific_split,
    hypersplit,
    pentascientific_split,
    scientific_split,
    weak_hyperscientific_split,
    weak_tetrate,
)
from eternum.magnitude import INF, NAN, pentate, slog, tetrate, to_magnitude


def _floats(values):
    return [v.to_float() for v in values]


# -----------------------------------------------------------------------------
# scientific_split
# -----------------------------------------------------------------------------


def test_scientific_basic():
    m, e = scientific_split(1234)
    assert m.to_float() == pytest.approx(1.234)
    assert e.to_float() == 3


def test_scientific_negative_keeps_sign_on_mantissa():
    m, e = scientific_split(-1234)
    assert m.to_float() == pytest.approx(-1.234)
    assert e.to_float() == 3


def test_scientific_special_values():
    assert _floats(scientific_split(0)) == [0, -math.inf]
    assert all(x.is_nan() for x in scientific_split(NAN))
    m, e = scientific_split(INF)
    assert m == INF and e == INF


def test_scientific_rounding_carries():
    assert _floats(scientific_split(9.999, 10, 0.01)) == pytest.approx([1, 1])


def test_scientific_engineering():
    m, e = scientific_split(123456, 10, 0, 0, 3)
    assert m.to_float() == pytest.approx(123.456)
    assert e.to_float() == 3


def test_scientific_mantissa_power():
    m, e = scientific_split(123456, 10, 0, 1)
    assert m.to_float() == pytest.approx(12.3456)
    assert e.to_float() == 4


def test_scientific_minnum_band():
    assert _floats(scientific_split(0.5, minnum=0.1)) == [0.5, 0]
    assert _floats(scientific_split(0.5)) == pytest.approx([5, -1])


def test_scientific_exp_multiplier():
    assert _floats(scientific_split(1234, exp_multiplier=2))[1] == 6


def test_scientific_invalid_base_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="eternum.decompose"):
        m, e = scientific_split(100, 1)
    assert m.to_float() == 1 and e.is_nan()
    assert "Invalid base" in caplog.text


@given(st.floats(min_value=1e-250, max_value=1e250))
def test_scientific_reconstructs(value: float):
    m, e = scientific_split(value)
    assert 1 <= m.to_float() < 10
    assert (m * to_magnitude(10).pow(e)).to_float() == pytest.approx(value, rel=1e-9)


def test_scientific_far_beyond_floats():
    m, e = scientific_split(to_magnitude("1e1e100"))
    assert m.to_float() == pytest.approx(1)
    assert e.log10().to_float() == pytest.approx(100)


# -----------------------------------------------------------------------------
# Tetration & pentation
# -----------------------------------------------------------------------------


def test_hyperscientific_small_towers():
    assert _floats(hyperscientific_split(100)) == pytest.approx([2, 1])
    assert _floats(hyperscientific_split(1e10)) == pytest.approx([1, 2])


def test_hyperscientific_reconstructs():
    value = tetrate(10, 4, 3)
    m, e = hyperscientific_split(value)
    assert e.to_float() == 4
    assert m.to_float() == pytest.approx(3, rel=1e-6)


def test_hyperscientific_infinities():
    assert _floats(hyperscientific_split(INF)) == [math.inf, math.inf]
    assert hyperscientific_split(NAN)[0].is_nan()


def test_weak_hyperscientific():
    m, e = weak_hyperscientific_split(1e100)
    assert m.to_float() == pytest.approx(1)
    assert e.to_float() == 3
    assert weak_tetrate(10, 3).pow(m).log10().to_float() == pytest.approx(100)


def test_weak_hyperscientific_rejects_non_positive():
    assert all(x.is_nan() for x in weak_hyperscientific_split(0))
    assert all(x.is_nan() for x in weak_hyperscientific_split(-5))


def test_pentascientific():
    assert _floats(pentascientific_split(5)) == [5, 0]
    assert _floats(pentascientific_split(1e10)) == pytest.approx([2, 1])


def test_pentascientific_invalid_base():
    m, e = pentascientific_split(100, 1.2)
    assert m.to_float() == pytest.approx(1.2)
    assert e.is_nan()


@pytest.mark.parametrize("value", [5, 1e10, tetrate(10, 7, 12), tetrate(10, 20, 5)])
def test_pentascientific_recomposes(value):
    m, e = pentascientific_split(value)
    assert 1 <= m.to_float() < 10
    assert slog(pentate(10, e.to_float(), m)).to_float() == pytest.approx(slog(value).to_float(), rel=1e-9)


# -----------------------------------------------------------------------------
# hypersplit
# -----------------------------------------------------------------------------


def test_hypersplit_small_values_unsplit():
    assert _floats(hypersplit(5)) == [5, 0, 0, 0]
    assert _floats(hypersplit(0)) == [0, 0, 0, 0]


def test_hypersplit_exponent():
    m, e, t, p = hypersplit(1234)
    assert m.to_float() == pytest.approx(1.234)
    assert _floats((e, t, p)) == [3, 0, 0]


def test_hypersplit_tetration():
    # 10^(1 * 10^2) with one exponentiation in front.
    assert _floats(hypersplit(1e100)) == pytest.approx([1, 2, 1, 0])


def test_hypersplit_non_finite():
    m, *rest = hypersplit(NAN)
    assert m.is_nan()
    assert _floats(rest) == [0, 0, 0]


def test_hypersplit_convergent_base(caplog):
    with caplog.at_level(logging.WARNING, logger="eternum.decompose"):
        result = hypersplit(5, 1.2)
    assert all(x.is_nan() for x in result)
    assert "convergent" in caplog.text


def test_hypersplit_from_package_root():
    m, e, t, p = eternum.hypersplit(1234)
    assert m.to_float() == pytest.approx(1.234)
    assert _floats((e, t, p)) == [3, 0, 0]


def _recompose(m, e, t, p):
    """Rebuild ``b^^…(b^…(m * b^e))`` from a hypersplit result."""
    x = m * to_magnitude(10).pow(e)
    x = tetrate(10, t.to_float(), x)
    return pentate(10, p.to_float(), x)


def test_hypersplit_engineering_exponent():
    m, e, t, p = hypersplit(123456, maximums=(1000, 10, 10), engineerings=3)
    assert m.to_float() == pytest.approx(123.456)
    assert _floats((e, t, p)) == [3, 0, 0]


def test_hypersplit_hyperengineering_tetration():
    m, e, t, p = hypersplit(1e100, hyperengineerings=2)
    assert m.to_float() == pytest.approx(2)
    assert _floats((e, t, p)) == [0, 2, 0]


def test_hypersplit_pentation():
    tower = tetrate(10, 20, 5)
    m, e, t, p = hypersplit(tower)
    assert m.to_float() == pytest.approx(2.0699, rel=1e-4)
    assert _floats((e, t, p)) == [1, 0, 1]
    assert slog(_recompose(m, e, t, p)).to_float() == pytest.approx(slog(tower).to_float(), rel=1e-9)


def test_hypersplit_pentaengineering():
    tower = tetrate(10, 20, 5)
    m, e, t, p = hypersplit(tower, pentaengineerings=2)
    assert 1 <= m.to_float() < 10
    assert _floats((e, t, p)) == [0, 0, 2]
    assert slog(_recompose(m, e, t, p)).to_float() == pytest.approx(slog(tower).to_float(), rel=1e-9)


def test_hypersplit_original_maximums():
    assert _floats(hypersplit(50, original_maximums=100)) == [50, 0, 0, 0]
    assert _floats(hypersplit(500, original_maximums=100)) == pytest.approx([5, 2, 0, 0])
    # The exponent may reach the original maximum while nothing is tetrated.
    assert _floats(hypersplit(1e50, original_maximums=100)) == pytest.approx([1, 50, 0, 0])
    assert _floats(hypersplit(1e50)) == pytest.approx([5, 1, 1, 0])


def test_hypersplit_without_exponent():
    assert _floats(hypersplit(5, maximums=(10, 1, 10))) == [5, 0, 0, 0]
    m, e, t, p = hypersplit(1234, maximums=(10, 1, 10))
    assert m.to_float() == pytest.approx(math.log10(1234))
    assert _floats((e, t, p)) == [0, 1, 0]
    assert _floats(hypersplit(1e100, maximums=(10, 1, 10))) == pytest.approx([2, 0, 2, 0])


def test_hypersplit_without_mantissa():
    m, e, t, p = hypersplit(1234, maximums=(0, 10, 10))
    assert m.to_float() == 0
    assert e.to_float() == pytest.approx(math.log10(1234))
    assert _floats((t, p)) == [0, 0]


@given(st.floats(min_value=1.0, max_value=1e300))
def test_hypersplit_recomposes(value: float):
    m, e, t, p = hypersplit(value)
    assert 1 <= m.to_float() < 10
    assert _recompose(m, e, t, p).to_float() == pytest.approx(value, rel=1e-9)
