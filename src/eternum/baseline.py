"""Notations that wrap or combine other notations."""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Sequence, Tuple

from .default import DefaultNotation
from .magnitude import INF, ZERO, Magnitude, MagnitudeLike, to_magnitude
from .notation import Notation, Wrapper
from .rational import FractionForm, fraction_approximation
from .text import delimiter_order

logger = logging.getLogger(__name__)

__all__ = [
    "FractionNotation",
    "ConditionalNotation",
    "AppliedFunctionNotation",
    "PredeterminedNotation",
]


class FractionNotation(Notation):
    """Write values as fractions (``3/4``) or mixed numbers (``1 3/4``).

    *delimiters* holds the (prefix, suffix) pairs for the numerator, the
    denominator and the whole part.  *delimiter_permutation* picks the order
    they are written in; the default ``1`` gives whole, numerator, denominator.
    """

    name = "Fraction Notation"

    def __init__(
        self,
        precision: MagnitudeLike,
        mixed_number: bool = False,
        max_iterations: float = math.inf,
        max_denominator: MagnitudeLike = INF,
        strict_max_denominator: bool = False,
        max_numerator: MagnitudeLike = INF,
        strict_max_numerator: bool = False,
        delimiters: Sequence[Wrapper] = (("", ""), ("/", ""), ("", " ")),
        delimiter_permutation: int = 1,
        numerator_inner_notation: Optional[Notation] = None,
        whole_inner_notation: Optional[Notation] = None,
        denominator_inner_notation: Optional[Notation] = None,
        show_unit_denominator: bool = False,
    ):
        super().__init__()
        self.precision = to_magnitude(precision)
        self.mixed_number = mixed_number
        self.max_iterations = max_iterations
        self.max_denominator = to_magnitude(max_denominator)
        self.strict_max_denominator = strict_max_denominator
        self.max_numerator = to_magnitude(max_numerator)
        self.strict_max_numerator = strict_max_numerator
        self.delimiters = [tuple(d) for d in delimiters]
        self.delimiter_permutation = delimiter_permutation
        self.numerator_inner_notation = numerator_inner_notation or DefaultNotation()
        self.whole_inner_notation = whole_inner_notation or self.numerator_inner_notation
        self.denominator_inner_notation = denominator_inner_notation or self.numerator_inner_notation
        self.show_unit_denominator = show_unit_denominator

    def format_decimal(self, value: Magnitude) -> str:
        fraction = fraction_approximation(
            value,
            self.precision,
            FractionForm.MIXED_NUMBER if self.mixed_number else FractionForm.FRACTION,
            self.max_iterations,
            self.max_denominator,
            self.strict_max_denominator,
            self.max_numerator,
            self.strict_max_numerator,
        )
        if len(fraction) == 2:
            fraction.insert(0, ZERO)
        whole, numerator, denominator = fraction
        if whole == 0 and numerator == 0:
            return self.whole_inner_notation.format(ZERO)
        if self.mixed_number and not self.show_unit_denominator and numerator == 0 and denominator == 1:
            return self.whole_inner_notation.format(whole)

        has_fraction = numerator != 0 or not self.mixed_number
        result = ""
        for part in delimiter_order([1], self.delimiter_permutation, (2, 3)):
            if part == 1 and has_fraction:
                result += self.delimiters[0][0] + self.numerator_inner_notation.format(numerator) + self.delimiters[0][1]
            elif part == 2 and has_fraction and (self.show_unit_denominator or denominator != 1):
                result += self.delimiters[1][0] + self.denominator_inner_notation.format(denominator) + self.delimiters[1][1]
            elif part == 3 and whole != 0:
                result += self.delimiters[2][0] + self.whole_inner_notation.format(whole) + self.delimiters[2][1]
        return result


Condition = Callable[[Magnitude], bool]


class ConditionalNotation(Notation):
    """Pick the first notation whose condition holds for the value.

    With *special_included* the conditions also see NaN, infinities and
    negative values, and this notation's own shared settings are ignored.
    If no condition matches, the last option's notation is used.

    Raises
    ------
    ValueError
        If no options are given.
    """

    name = "Conditional Notation"

    def __init__(self, special_included: bool, *options: Tuple[Notation, Condition]):
        super().__init__()
        if not options:
            raise ValueError("ConditionalNotation needs at least one option.")
        self.special_included = special_included
        self.options = list(options)

    def _choose(self, value: Magnitude) -> Notation:
        for notation, condition in self.options:
            if condition(value):
                return notation
        logger.debug("No condition matched %s, using the last option", value)
        return self.options[-1][0]

    def format_value(self, value: Magnitude) -> str:
        if self.special_included:
            return self._choose(value).format(value)
        return super().format_value(value)

    def format_decimal(self, value: Magnitude) -> str:
        return self._choose(value).format(value)


class AppliedFunctionNotation(Notation):
    """Transform the value, render it with *inner_notation*, then transform the text.

    Non-finite values skip both transformations unless *non_finite_applied*
    is set.
    """

    name = "Applied Function Notation"

    def __init__(
        self,
        decimal_func: Callable[[Magnitude], MagnitudeLike] = lambda value: value,
        inner_notation: Optional[Notation] = None,
        string_func: Callable[[str], str] = lambda text: text,
        non_finite_applied: bool = False,
    ):
        super().__init__()
        self.decimal_func = decimal_func
        self.inner_notation = inner_notation or DefaultNotation()
        self.string_func = string_func
        self.non_finite_applied = non_finite_applied

    def format_value(self, value: Magnitude) -> str:
        if not value.is_finite() and not self.non_finite_applied:
            return self.inner_notation.format(value)
        return self.string_func(self.inner_notation.format(self.decimal_func(value)))

    def format_negative_decimal(self, value: Magnitude) -> str:
        return self.string_func(self.inner_notation.format_negative_decimal(to_magnitude(self.decimal_func(value))))

    def format_decimal(self, value: Magnitude) -> str:
        return self.string_func(self.inner_notation.format_decimal(to_magnitude(self.decimal_func(value))))


class PredeterminedNotation(Notation):
    """Ignore the value and always return the same string."""

    name = "Predetermined Notation"

    def __init__(self, text: str):
        super().__init__()
        self.text = text

    def format_value(self, value: Magnitude) -> str:
        return self.text

    def format_negative_decimal(self, value: Magnitude) -> str:
        return self.text

    def format_decimal(self, value: Magnitude) -> str:
        return self.text
