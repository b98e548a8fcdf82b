import pytest

from eternum.baseline import (
    AppliedFunctionNotation,
    ConditionalNotation,
    FractionNotation,
    PredeterminedNotation,
)
from eternum.default import DefaultNotation
from eternum.magnitude import INF, NAN

# -----------------------------------------------------------------------------
# FractionNotation
# -----------------------------------------------------------------------------


def test_plain_fraction():
    n = FractionNotation(1e-9)
    assert n.format(0.75) == "3/4"
    assert n.format(-0.75) == "-3/4"
    assert n.format(0) == "0"


def test_whole_numbers_hide_unit_denominator():
    assert FractionNotation(1e-9).format(2) == "2"
    assert FractionNotation(1e-9, show_unit_denominator=True).format(2) == "2/1"


def test_mixed_number():
    n = FractionNotation(1e-9, mixed_number=True)
    assert n.format(1.75) == "1 3/4"
    assert n.format(2) == "2"


def test_denominator_cap():
    assert FractionNotation(1e-12, max_denominator=10, strict_max_denominator=True).format(3.14159265) == "22/7"


def test_custom_delimiters():
    n = FractionNotation(1e-9, delimiters=(("", ""), (" over ", ""), ("", " ")))
    assert n.format(0.75) == "3 over 4"


# -----------------------------------------------------------------------------
# ConditionalNotation
# -----------------------------------------------------------------------------


def _small_or_default(special_included=False):
    return ConditionalNotation(
        special_included,
        (PredeterminedNotation("small"), lambda v: v < 10),
        (DefaultNotation(), lambda v: True),
    )


def test_conditional_picks_first_match():
    n = _small_or_default()
    assert n.format(5) == "small"
    assert n.format(50) == "50"


def test_conditional_shared_behaviour():
    n = _small_or_default()
    assert n.format(-5) == "-small"
    assert n.format(NAN) == "???"


def test_conditional_special_included():
    n = _small_or_default(special_included=True)
    # Negative values and NaN go straight to the conditions.
    assert n.format(-50) == "small"
    assert n.format(NAN) == "???"
    assert n.format(INF) == "Infinite"


def test_conditional_falls_back_to_last_option():
    n = ConditionalNotation(False, (PredeterminedNotation("never"), lambda v: False))
    assert n.format(5) == "never"


def test_conditional_needs_options():
    with pytest.raises(ValueError):
        ConditionalNotation(False)


# -----------------------------------------------------------------------------
# Wrappers
# -----------------------------------------------------------------------------


def test_applied_function():
    n = AppliedFunctionNotation(lambda v: v * 2, DefaultNotation(), lambda s: s + "!")
    assert n.format(5) == "10!"
    assert n.format(-5) == "-10!"
    assert n.format(INF) == "Infinite"


def test_applied_function_non_finite():
    n = AppliedFunctionNotation(string_func=lambda s: "[" + s + "]", non_finite_applied=True)
    assert n.format(INF) == "[Infinite]"


def test_predetermined_ignores_value():
    n = PredeterminedNotation("hi")
    assert n.format(NAN) == "hi"
    assert n.format(-3) == "hi"


def test_applied_function_forwards_nan_to_inner_notation():
    inner = DefaultNotation()
    inner.nan_string = "not a number"
    n = AppliedFunctionNotation(inner_notation=inner)
    n.nan_string = "unused"
    assert n.format(NAN) == "not a number"
