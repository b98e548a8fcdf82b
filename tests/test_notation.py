import logging

import pytest

from eternum import config
from eternum.default import DefaultNotation
from eternum.magnitude import INF, NAN, NEG_INF
from eternum.notation import CustomNotation, Notation, nesting_depth

# -----------------------------------------------------------------------------
# Shared dispatch
# -----------------------------------------------------------------------------


def test_special_values():
    n = DefaultNotation()
    assert n.format(NAN) == "???"
    assert n.format(INF) == "Infinite"
    assert n.format(NEG_INF) == "-Infinite"
    assert n.format(-5) == "-5"


def test_notation_globals_are_chainable():
    n = DefaultNotation().set_notation_globals(
        negative_string=("(", ")"),
        infinity_string="forever",
        nan_string="?",
    )
    assert n.format(-5) == "(5)"
    assert n.format(NEG_INF) == "(forever)"
    assert n.format(NAN) == "?"
    n.set_notation_globals(negative_infinity_string="-inf")
    assert n.format(NEG_INF) == "-inf"


def test_custom_infinity_predicate():
    n = DefaultNotation().set_notation_globals(is_infinite=lambda v: v.abs() > 1e6)
    assert n.format(1e7) == "Infinite"
    # The reciprocal of an "infinite" value renders as zero.
    assert n.format(1e-7) == "0"


def test_abstract_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Notation()


def test_repr_and_name():
    n = DefaultNotation().set_name("plain")
    assert repr(n) == "<DefaultNotation 'plain'>"


# -----------------------------------------------------------------------------
# CustomNotation
# -----------------------------------------------------------------------------


def test_custom_sees_negatives_and_infinities():
    n = CustomNotation(lambda v: f"<{v}>")
    assert n.format(-5) == "<-5>"
    assert n.format(INF) == "<Infinity>"
    assert n.format(NEG_INF) == "<-Infinity>"


def test_custom_can_use_shared_strings():
    n = CustomNotation(lambda v: f"<{v}>", negative_string_used=True, infinity_string_used=True)
    assert n.format(-5) == "-<5>"
    assert n.format(INF) == "Infinite"


# -----------------------------------------------------------------------------
# Nesting guard
# -----------------------------------------------------------------------------


def test_self_nesting_is_bounded(caplog):
    n = CustomNotation(lambda v: "x" + n.format(v))
    with caplog.at_level(logging.WARNING, logger="eternum.notation"):
        result = n.format(5)
    assert result == "x" * config.MAX_NESTING_DEPTH + "5"
    assert "nested" in caplog.text
    assert nesting_depth() == 0


def test_nesting_depth_setting():
    previous = config.MAX_NESTING_DEPTH
    config.set_max_nesting_depth(3)
    try:
        n = CustomNotation(lambda v: "x" + n.format(v))
        assert n.format(5) == "xxx5"
    finally:
        config.set_max_nesting_depth(previous)


def test_nesting_depth_must_be_positive():
    with pytest.raises(ValueError):
        config.set_max_nesting_depth(0)


def test_depth_resets_after_errors():
    def boom(value):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        CustomNotation(boom).format(1)
    assert nesting_depth() == 0
