"""Mantissa/exponent notations for each rung of the hyperoperator ladder.

All four notations share one layout: below ``maxnum`` (measured in the
notation's own exponent) the value is split into mantissa and exponent and
rendered as ``mantissa + chars + exponent``.  Above it, leading symbols are
stripped off one level at a time and prepended; more than ``max_*_in_a_row``
of them collapse into a single ``(e^n)`` style prefix.

``exp_chars`` always has three (prefix, suffix) pairs:

0. around the exponent in ``m e x``;
1. the symbol repeated for each stripped level; ``False``/``True`` in this
   slot stands for "the first pair with the rendering of one before/after it";
2. around the count in the compact ``(e^n)`` form.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple, Union

from .decompose import (
    hyperscientific_split,
    pentascientific_split,
    scientific_split,
    weak_hyperscientific_split,
    weak_slog,
    weak_tetrate,
)
from .default import DefaultNotation
from .engineering import Rounding, normalize_engineerings
from .magnitude import (
    CONVERGENCE_LIMIT,
    ONE,
    Magnitude,
    MagnitudeLike,
    iteratedexp_mult,
    iteratedlog,
    iteratedlog_mult,
    pentate,
    penta_log,
    slog,
    slog_mult,
    to_magnitude,
)
from .notation import Notation, Wrapper

__all__ = [
    "ScientificNotation",
    "HyperscientificNotation",
    "PentaScientificNotation",
    "WeakHyperscientificNotation",
    "resolve_exp_chars",
]

ExpChars = Sequence[Tuple[Union[str, bool], Union[str, bool]]]
NegExpChars = Optional[Tuple[Union[Wrapper, bool], Wrapper]]


def resolve_exp_chars(exp_chars: ExpChars, one: str) -> list[Wrapper]:
    """Replace the boolean shorthands in ``exp_chars[1]`` by real strings."""
    first = (str(exp_chars[0][0]), str(exp_chars[0][1]))
    repeated = []
    for i, item in enumerate(exp_chars[1]):
        if item is False:
            repeated.append(one + first[i])
        elif item is True:
            repeated.append(first[i] + one)
        else:
            repeated.append(item)
    return [first, (repeated[0], repeated[1]), (str(exp_chars[2][0]), str(exp_chars[2][1]))]


def _join(mantissa: str, exponent: str, chars: Wrapper, exp_before: bool) -> str:
    if exp_before:
        return chars[0] + exponent + chars[1] + mantissa
    return mantissa + chars[0] + exponent + chars[1]


def _stack(result: str, count: int, chars: Sequence[Wrapper], max_in_a_row: int, counter: Notation, after: bool) -> str:
    """Put *count* stripped levels back in front of *result*."""
    if count <= max_in_a_row:
        for _ in range(count):
            result = chars[1][0] + result + chars[1][1]
        return result
    prefix = chars[2][0] + counter.format(count) + chars[2][1]
    return result + prefix if after else prefix + result


def _check_maxnum(maxnum: MagnitudeLike, name: str) -> Magnitude:
    value = to_magnitude(maxnum)
    if not value > 0:
        raise ValueError(f"Nonpositive maxnum in {name}")
    return value


class ScientificNotation(Notation):
    """``1.23e456``, then ``e1.23e456``, then ``(e^7)1.23e456``.

    Parameters
    ----------
    maxnum:
        Largest exponent shown before leading ``e``'s are stripped off.
    max_es_in_a_row:
        Leading ``e``'s written out before the ``(e^n)`` form is used.
    rounding, engineerings, mantissa_power:
        Passed to :func:`~eternum.decompose.scientific_split`.
    iteration_zero:
        Values between ``1 / maxnum`` and ``maxnum`` skip the exponent.
    neg_exp_chars:
        ``(first, recip)``.  *first* replaces ``exp_chars[0]`` for negative
        exponents (the exponent is then shown positive); ``True`` instead
        renders ``recip[0] + format(1 / value) + recip[1]``.
    exp_before, superexp_after:
        Put the exponent before the mantissa, the ``(e^n)`` form after it.
    exp_mult:
        Each exponent step is worth ``base ** (1 / exp_mult)``.
    """

    name = "Scientific Notation"

    def __init__(
        self,
        maxnum: MagnitudeLike = 1e12,
        max_es_in_a_row: int = 5,
        rounding: Rounding = 0,
        engineerings=1,
        mantissa_power: MagnitudeLike = 0,
        iteration_zero: bool = False,
        base: MagnitudeLike = 10,
        exp_chars: ExpChars = (("e", ""), ("e", ""), ("(e^", ")")),
        neg_exp_chars: NegExpChars = None,
        exp_before: bool = False,
        superexp_after: bool = False,
        exp_mult: MagnitudeLike = 1,
        mantissa_inner_notation: Optional[Notation] = None,
        exponent_inner_notation: Optional[Notation] = None,
        superexponent_inner_notation: Optional[Notation] = None,
    ):
        super().__init__()
        self.maxnum = _check_maxnum(maxnum, self.name)
        self.max_es_in_a_row = max_es_in_a_row
        self.rounding = rounding
        self.engineerings = normalize_engineerings(engineerings)
        self.mantissa_power = to_magnitude(mantissa_power)
        self.iteration_zero = iteration_zero
        self.exp_mult = to_magnitude(exp_mult)
        if self.exp_mult == 0:
            raise ValueError("exp_mult must not be zero")
        self.base = to_magnitude(base)
        if not self.base.pow(self.exp_mult.recip()).to_float() > CONVERGENCE_LIMIT:
            raise ValueError("Bases with convergent tetration don't work for Scientific Notation")
        self.neg_exp_chars = neg_exp_chars
        self.exp_before = exp_before
        self.superexp_after = superexp_after
        self.mantissa_inner_notation = mantissa_inner_notation or DefaultNotation()
        self.exponent_inner_notation = exponent_inner_notation or self.mantissa_inner_notation
        self.superexponent_inner_notation = superexponent_inner_notation or self.exponent_inner_notation
        self.exp_chars = resolve_exp_chars(exp_chars, self.mantissa_inner_notation.format(1))

    def _split(self, value: Magnitude) -> Tuple[Magnitude, Magnitude]:
        return scientific_split(value, self.base, self.rounding, self.mantissa_power, self.engineerings, self.exp_mult)

    def format_decimal(self, value: Magnitude) -> str:
        if value == 0:
            return self.mantissa_inner_notation.format(0)
        if self.iteration_zero and self.maxnum.recip() < value < self.maxnum:
            return self.mantissa_inner_notation.format(value)
        top = self.base.pow(self.maxnum)
        if value.max(value.recip()) < top:
            mantissa, exponent = self._split(value)
            chars = self.exp_chars[0]
            if exponent < 0 and self.neg_exp_chars is not None and self.neg_exp_chars[0] is not False:
                if self.neg_exp_chars[0] is True:
                    recip = self.neg_exp_chars[1]
                    return recip[0] + self.format(value.recip()) + recip[1]
                chars = self.neg_exp_chars[0]
                exponent = exponent.neg()
            return _join(
                self.mantissa_inner_notation.format(mantissa),
                self.exponent_inner_notation.format(exponent),
                chars,
                self.exp_before,
            )

        neg_exp = False
        if value < 1:
            if self.neg_exp_chars is not None:
                recip = self.neg_exp_chars[1]
                return recip[0] + self.format(value.recip()) + recip[1]
            neg_exp = True
            m, e = self._split(value)
            value = self.base.pow(e.neg()).mul(m)
        added = slog_mult(value, self.base, self.exp_mult).sub(slog_mult(self.maxnum, self.base, self.exp_mult)).floor().to_float()
        value = self.maxnum if added > 9e15 else iteratedlog_mult(value, self.base, added, self.exp_mult)
        while value >= top:
            added += 1
            value = iteratedlog_mult(value, self.base, 1, self.exp_mult)
        if neg_exp:
            value = value.neg()
        return _stack(
            self.format(value),
            int(added),
            self.exp_chars,
            self.max_es_in_a_row,
            self.superexponent_inner_notation,
            self.superexp_after,
        )


class HyperscientificNotation(Notation):
    """Tetrational scientific notation: ``1.23F4``, then ``F1.23F4``.

    Takes the same settings as :class:`ScientificNotation`, with ``maxnum``
    now measured in tetrations and ``hyperexp_mult`` scaling the returned
    tetration count.
    """

    name = "Hyperscientific Notation"

    def __init__(
        self,
        maxnum: MagnitudeLike = 1e10,
        max_fs_in_a_row: int = 5,
        rounding: Rounding = 0,
        engineerings=1,
        mantissa_power: MagnitudeLike = 0,
        iteration_zero: bool = False,
        base: MagnitudeLike = 10,
        exp_chars: ExpChars = (("F", ""), ("F", ""), ("(F^", ")")),
        neg_exp_chars: NegExpChars = None,
        exp_before: bool = False,
        superexp_after: bool = False,
        exp_mult: MagnitudeLike = 1,
        hyperexp_mult: MagnitudeLike = 1,
        mantissa_inner_notation: Optional[Notation] = None,
        exponent_inner_notation: Optional[Notation] = None,
        superexponent_inner_notation: Optional[Notation] = None,
    ):
        super().__init__()
        self.maxnum = _check_maxnum(maxnum, self.name)
        self.max_fs_in_a_row = max_fs_in_a_row
        self.rounding = rounding
        self.engineerings = normalize_engineerings(engineerings)
        self.mantissa_power = to_magnitude(mantissa_power)
        self.iteration_zero = iteration_zero
        self.exp_mult = to_magnitude(exp_mult)
        self.hyperexp_mult = to_magnitude(hyperexp_mult)
        if self.exp_mult == 0 or self.hyperexp_mult == 0:
            raise ValueError("exp_mult and hyperexp_mult must not be zero")
        self.base = to_magnitude(base)
        if not self.base.pow(self.exp_mult.recip()).to_float() > CONVERGENCE_LIMIT:
            raise ValueError("Bases with convergent tetration don't work for Hyperscientific Notation")
        self.neg_exp_chars = neg_exp_chars
        self.exp_before = exp_before
        self.superexp_after = superexp_after
        self.mantissa_inner_notation = mantissa_inner_notation or DefaultNotation()
        self.exponent_inner_notation = exponent_inner_notation or self.mantissa_inner_notation
        self.superexponent_inner_notation = superexponent_inner_notation or self.exponent_inner_notation
        self.exp_chars = resolve_exp_chars(exp_chars, self.mantissa_inner_notation.format(1))

    def format_decimal(self, value: Magnitude) -> str:
        if self.iteration_zero and self.maxnum.recip() < value < self.maxnum:
            return self.mantissa_inner_notation.format(value)
        top = iteratedexp_mult(self.base, ONE, self.maxnum.to_float(), self.exp_mult)
        if value < top:
            mantissa, exponent = hyperscientific_split(
                value, self.base, self.rounding, self.mantissa_power, self.engineerings, self.exp_mult, self.hyperexp_mult
            )
            chars = self.exp_chars[0]
            if exponent < 0 and self.neg_exp_chars is not None and self.neg_exp_chars[0] is not False:
                if self.neg_exp_chars[0] is True:
                    recip = self.neg_exp_chars[1]
                    return recip[0] + self.format(value.recip()) + recip[1]
                chars = self.neg_exp_chars[0]
                exponent = exponent.neg()
            return _join(
                self.mantissa_inner_notation.format(mantissa),
                self.exponent_inner_notation.format(exponent),
                chars,
                self.exp_before,
            )

        added = 0
        while value >= top:
            added += 1
            value = slog_mult(value, self.base, self.exp_mult).mul(self.hyperexp_mult)
        return _stack(
            self.format(value),
            added,
            self.exp_chars,
            self.max_fs_in_a_row,
            self.superexponent_inner_notation,
            self.superexp_after,
        )


class PentaScientificNotation(Notation):
    """Pentational scientific notation: ``1.23G4``."""

    name = "Penta-Scientific Notation"

    def __init__(
        self,
        maxnum: MagnitudeLike = 1e10,
        max_gs_in_a_row: int = 5,
        rounding: Rounding = 0,
        engineerings=1,
        mantissa_power: MagnitudeLike = 0,
        iteration_zero: bool = False,
        base: MagnitudeLike = 10,
        exp_chars: ExpChars = (("G", ""), ("G", ""), ("(G^", ")")),
        neg_exp_chars: NegExpChars = None,
        exp_before: bool = False,
        superexp_after: bool = False,
        mantissa_inner_notation: Optional[Notation] = None,
        exponent_inner_notation: Optional[Notation] = None,
        superexponent_inner_notation: Optional[Notation] = None,
    ):
        super().__init__()
        self.maxnum = _check_maxnum(maxnum, self.name)
        self.max_gs_in_a_row = max_gs_in_a_row
        self.rounding = rounding
        self.engineerings = normalize_engineerings(engineerings)
        self.mantissa_power = to_magnitude(mantissa_power)
        self.iteration_zero = iteration_zero
        self.base = to_magnitude(base)
        if not self.base.to_float() > CONVERGENCE_LIMIT:
            raise ValueError("Bases with convergent tetration don't work for Penta-Scientific Notation")
        self.neg_exp_chars = neg_exp_chars
        self.exp_before = exp_before
        self.superexp_after = superexp_after
        self.mantissa_inner_notation = mantissa_inner_notation or DefaultNotation()
        self.exponent_inner_notation = exponent_inner_notation or self.mantissa_inner_notation
        self.superexponent_inner_notation = superexponent_inner_notation or self.exponent_inner_notation
        self.exp_chars = resolve_exp_chars(exp_chars, self.mantissa_inner_notation.format(1))

    def format_decimal(self, value: Magnitude) -> str:
        if self.iteration_zero and self.maxnum.recip() < value < self.maxnum:
            return self.mantissa_inner_notation.format(value)
        top = pentate(self.base, self.maxnum.to_float())
        if value < top:
            mantissa, exponent = pentascientific_split(
                value, self.base, self.rounding, self.mantissa_power, self.engineerings
            )
            chars = self.exp_chars[0]
            if exponent < 0 and self.neg_exp_chars is not None and self.neg_exp_chars[0] is not False:
                if self.neg_exp_chars[0] is True:
                    recip = self.neg_exp_chars[1]
                    return recip[0] + self.format(value.recip()) + recip[1]
                chars = self.neg_exp_chars[0]
                exponent = exponent.neg()
            return _join(
                self.mantissa_inner_notation.format(mantissa),
                self.exponent_inner_notation.format(exponent),
                chars,
                self.exp_before,
            )

        added = 0
        while value >= top:
            added += 1
            value = penta_log(value, self.base)
        return _stack(
            self.format(value),
            added,
            self.exp_chars,
            self.max_gs_in_a_row,
            self.superexponent_inner_notation,
            self.superexp_after,
        )


class WeakHyperscientificNotation(Notation):
    """Bottom-up tetration: ``m f e`` means ``weak_tetrate(base, e) ** m``.

    Values below one are written as ``recip_string``-wrapped reciprocals
    (or handed to the mantissa notation when *recip_string* is ``None``).
    *neg_exp_chars*, when given, is a full ``exp_chars`` triple used for
    negative exponents.
    """

    name = "Weak Hyperscientific Notation"

    def __init__(
        self,
        maxnum: MagnitudeLike = 1e12,
        max_fs_in_a_row: int = 5,
        rounding: Rounding = 0,
        engineerings=1,
        mantissa_power: MagnitudeLike = 0,
        iteration_zero: bool = False,
        base: MagnitudeLike = 10,
        exp_chars: ExpChars = (("f", ""), ("f", ""), ("(f^", ")")),
        neg_exp_chars: Optional[ExpChars] = None,
        recip_string: Optional[Wrapper] = ("1 / ", ""),
        exp_before: bool = False,
        superexp_after: bool = False,
        mantissa_inner_notation: Optional[Notation] = None,
        exponent_inner_notation: Optional[Notation] = None,
        superexponent_inner_notation: Optional[Notation] = None,
    ):
        super().__init__()
        self.maxnum = _check_maxnum(maxnum, self.name)
        self.max_fs_in_a_row = max_fs_in_a_row
        self.rounding = rounding
        self.engineerings = normalize_engineerings(engineerings)
        self.mantissa_power = to_magnitude(mantissa_power)
        self.iteration_zero = iteration_zero
        self.base = to_magnitude(base)
        if not self.base > 1:
            raise ValueError("Weak Hyperscientific Notation needs a base above 1")
        self.recip_string = recip_string
        self.exp_before = exp_before
        self.superexp_after = superexp_after
        self.mantissa_inner_notation = mantissa_inner_notation or DefaultNotation()
        self.exponent_inner_notation = exponent_inner_notation or self.mantissa_inner_notation
        self.superexponent_inner_notation = superexponent_inner_notation or self.exponent_inner_notation
        one = self.mantissa_inner_notation.format(1)
        self.exp_chars = resolve_exp_chars(exp_chars, one)
        self.neg_exp_chars = None if neg_exp_chars is None else resolve_exp_chars(neg_exp_chars, one)

    def format_decimal(self, value: Magnitude) -> str:
        if value == 0 or value == 1:
            return self.mantissa_inner_notation.format(value)
        if value < 1:
            if self.recip_string is None:
                return self.mantissa_inner_notation.format(value)
            return self.recip_string[0] + self.format(value.recip()) + self.recip_string[1]
        if self.iteration_zero and self.maxnum.recip() < value < self.maxnum:
            return self.mantissa_inner_notation.format(value)

        top = weak_tetrate(self.base, self.maxnum)
        if value < top:
            mantissa, exponent = weak_hyperscientific_split(
                value, self.base, self.rounding, self.mantissa_power, self.engineerings
            )
            chars = self.exp_chars[0]
            if exponent < 0 and self.neg_exp_chars is not None:
                chars = self.neg_exp_chars[0]
                exponent = exponent.neg()
            return _join(
                self.mantissa_inner_notation.format(mantissa),
                self.exponent_inner_notation.format(exponent),
                chars,
                self.exp_before,
            )

        # Each weak level is two ordinary logarithms.
        added = math.floor(slog(value, self.base).sub(slog(self.maxnum, self.base).add(3)).to_float() / 2)
        added = max(added, 0)
        value = self.maxnum if added > 9e15 else iteratedlog(value, self.base, added * 2)
        while value >= top:
            added += 1
            value = weak_slog(value, self.base)
        return _stack(
            self.format(value),
            added,
            self.exp_chars,
            self.max_fs_in_a_row,
            self.superexponent_inner_notation,
            self.superexp_after,
        )
