"""Four-coordinate notation built on :func:`eternum.decompose.hypersplit`."""

from __future__ import annotations

from typing import List, Sequence, Union

from .decompose import hypersplit
from .default import DefaultNotation
from .engineering import Rounding, normalize_engineerings
from .magnitude import CONVERGENCE_LIMIT, ONE, Magnitude, MagnitudeLike, to_magnitude
from .notation import Notation, Wrapper
from .text import delimiter_order

__all__ = ["HypersplitNotation"]


def _fill(values: list, length: int) -> list:
    while len(values) < length:
        values.append(values[-1])
    return values


def _as_list(value) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class HypersplitNotation(Notation):
    """Mixed hyperoperator arrays such as ``((10^^)^1 ((10^)^2) 1.5*10^3``.

    Parameters
    ----------
    delimiters:
        (prefix, suffix) pairs around the mantissa, exponent, tetration and
        pentation, padded with empty pairs.
    base:
        Base of every hyperoperator.
    maximums, original_maximums:
        Roll-over points for the lower three coordinates, see
        :func:`~eternum.decompose.hypersplit`.
    show_zeroes:
        Per coordinate: positive always shows it, zero shows it when a higher
        coordinate is non-zero, negative only when it is non-zero itself.  A
        scalar applies to all but the mantissa, which is then always shown.
    delimiter_permutation:
        Picks the order the four coordinates are written in; ``1`` writes
        pentation, tetration, mantissa, exponent from left to right.
    minnum, mantissa_rounding:
        Passed to :func:`~eternum.decompose.hypersplit`.
    inner_notations:
        One notation per coordinate, padded with the last one.
    engineerings:
        One engineering constraint per level above the mantissa, or a single
        constraint for all three.
    exp_multipliers:
        Multipliers for the exponent, tetration and pentation.

    Raises
    ------
    ValueError
        If ``base ** (1 / exp_multipliers[0])`` has a convergent tetration.
    """

    name = "Hypersplit Notation"

    def __init__(
        self,
        delimiters: Sequence[Wrapper] = (("", ""), ("*10^", ""), ("((10^)^", ") "), ("((10^^)^", " ")),
        base: MagnitudeLike = 10,
        maximums: Union[MagnitudeLike, Sequence[MagnitudeLike], None] = None,
        show_zeroes: Union[int, Sequence[int]] = (1, -1, -1, -1),
        delimiter_permutation: int = 1,
        original_maximums: Union[MagnitudeLike, Sequence[MagnitudeLike], None] = None,
        minnum: MagnitudeLike = 1,
        mantissa_rounding: Rounding = 0,
        inner_notations: Union[Notation, Sequence[Notation], None] = None,
        engineerings=1,
        exp_multipliers: Union[MagnitudeLike, Sequence[MagnitudeLike]] = 1,
    ):
        super().__init__()
        self.delimiters: List[Wrapper] = [tuple(d) for d in delimiters] + [("", "")] * (4 - len(delimiters))
        self.base = to_magnitude(base)
        self.maximums = _fill([to_magnitude(m) for m in _as_list(self.base if maximums is None else maximums)], 3)
        if isinstance(show_zeroes, int):
            show_zeroes = [1, show_zeroes]
        self.show_zeroes = _fill(list(show_zeroes), 4)
        self.delimiter_permutation = delimiter_permutation
        self.original_maximums = (
            list(self.maximums)
            if original_maximums is None
            else _fill([to_magnitude(m) for m in _as_list(original_maximums)], 3)
        )
        self.minnum = to_magnitude(minnum)
        self.mantissa_rounding = mantissa_rounding
        self.inner_notations: List[Notation] = _fill(_as_list(inner_notations or DefaultNotation()), 4)
        if isinstance(engineerings, (list, tuple)):
            levels = list(engineerings) + [1] * (3 - len(engineerings))
        else:
            levels = [engineerings] * 3
        self.engineerings = [normalize_engineerings(level) for level in levels[:3]]
        multipliers = [to_magnitude(m) for m in _as_list(exp_multipliers)]
        self.exp_multipliers: List[Magnitude] = multipliers + [ONE] * (3 - len(multipliers))
        if not self.base.pow(self.exp_multipliers[0].recip()).to_float() > CONVERGENCE_LIMIT:
            raise ValueError("Bases with convergent tetration don't work for Hypersplit Notation")

    def format_value(self, value: Magnitude) -> str:
        # A negative mantissa carries the sign unless the mantissa is removed.
        if not value.is_nan() and not self.is_infinite(value) and value.sgn() < 0 and self.maximums[0] != 0:
            if self.is_infinite(value.recip()):
                return self.format(0)
            return self.format_decimal(value)
        return super().format_value(value)

    def _shown(self, index: int, parts: Sequence[Magnitude]) -> bool:
        if parts[index] != 0:
            return True
        setting = self.show_zeroes[index]
        if setting > 0:
            return True
        return setting == 0 and any(p != 0 for p in parts[index + 1 :])

    def format_decimal(self, value: Magnitude) -> str:
        parts = hypersplit(
            value,
            self.base,
            self.maximums,
            self.original_maximums,
            self.minnum,
            self.mantissa_rounding,
            self.engineerings[0],
            self.engineerings[1],
            self.engineerings[2],
            *self.exp_multipliers,
        )
        result = ""
        for index in delimiter_order([0], self.delimiter_permutation, (1, 2, 3)):
            if self._shown(index, parts):
                prefix, suffix = self.delimiters[index]
                result += prefix + self.inner_notations[index].format(parts[index]) + suffix
        return result
