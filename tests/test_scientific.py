import pytest

from eternum.default import DefaultNotation
from eternum.magnitude import to_magnitude
from eternum.scientific import (
    HyperscientificNotation,
    PentaScientificNotation,
    ScientificNotation,
    WeakHyperscientificNotation,
    resolve_exp_chars,
)

# -----------------------------------------------------------------------------
# ScientificNotation
# -----------------------------------------------------------------------------


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0"),
        (123456, "1.235e5"),
        (-123456, "-1.235e5"),
        (1e-5, "1e-5"),
        ("1e1e15", "e1e15"),
    ],
)
def test_scientific(value, expected):
    assert ScientificNotation().format(value) == expected


def test_scientific_engineering():
    assert ScientificNotation(engineerings=3).format(123456) == "123.5e3"


def test_scientific_iteration_zero():
    n = ScientificNotation(iteration_zero=True)
    assert n.format(5) == "5"
    assert n.format(5e12) == "5e12"


def test_scientific_negative_exponent_characters():
    n = ScientificNotation(neg_exp_chars=((" x 10^-", ""), ("1 / ", "")))
    assert n.format(0.001) == "1 x 10^-3"
    recip = ScientificNotation(neg_exp_chars=(True, ("1 / ", "")))
    assert recip.format(0.001) == "1 / 1e3"


def test_scientific_compact_prefix():
    n = ScientificNotation(max_es_in_a_row=1)
    text = n.format(to_magnitude("1e1e1e15"))
    assert text == "(e^2)1e15"


def test_scientific_rejects_bad_settings():
    with pytest.raises(ValueError):
        ScientificNotation(maxnum=0)
    with pytest.raises(ValueError):
        ScientificNotation(base=1.2)
    with pytest.raises(ValueError):
        ScientificNotation(exp_mult=0)


def test_resolve_exp_chars_shorthands():
    chars = resolve_exp_chars((("e", ""), (False, True), ("(e^", ")")), "1")
    assert chars == [("e", ""), ("1e", "1"), ("(e^", ")")]


# -----------------------------------------------------------------------------
# Higher rungs
# -----------------------------------------------------------------------------


def test_hyperscientific():
    n = HyperscientificNotation()
    assert n.format(1e10) == "1F2"
    assert n.format(100) == "2F1"


def test_pentascientific():
    assert PentaScientificNotation().format(1e10) == "2G1"


def test_pentascientific_rejects_convergent_base():
    with pytest.raises(ValueError):
        PentaScientificNotation(base=1.2)


def test_weak_hyperscientific():
    n = WeakHyperscientificNotation()
    assert n.format(1e100) == "1f3"
    assert n.format(0.01) == "1 / 2f1"
    assert n.format(1) == "1"


def test_weak_hyperscientific_without_reciprocals():
    n = WeakHyperscientificNotation(recip_string=None)
    assert n.format(0.5) == "0.5"


def test_inner_notations_are_used():
    n = ScientificNotation(mantissa_inner_notation=DefaultNotation(places_above_1=1))
    assert n.format(123456) == "1.2e5"
