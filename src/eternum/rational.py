"""Continued-fraction approximation and prime factorisation.

The expansion runs entirely in :class:`~eternum.magnitude.Magnitude`
arithmetic.  Values within ordinary float range therefore behave exactly like
a float continued fraction (terms are extracted with ``floor`` on a double),
while values beyond it collapse to a single integral term, since every such
value is already a whole number at double precision.
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
import math
from typing import List, Optional, Sequence, Tuple, Union

from .magnitude import INF, ONE, ZERO, Magnitude, MagnitudeLike, to_magnitude

__all__ = [
    "FractionForm",
    "RationalApproximation",
    "approximate",
    "fraction_approximation",
    "primes_array",
    "prime_factorize",
    "prime_factorize_fraction",
]


class FractionForm(enum.IntEnum):
    """Shape of the list returned by :func:`fraction_approximation`."""

    CONTINUED_FRACTION = 0
    FRACTION = 1  # [numerator, denominator]
    MIXED = 2  # [whole, numerator, denominator], whole = floor(value)
    MIXED_NUMBER = 3  # as MIXED but negatives are written -(whole + num/den)


@dataclass(frozen=True, slots=True)
class RationalApproximation:
    """Result of a continued-fraction expansion.

    ``numerator / denominator`` is the last accepted convergent of ``terms``;
    the denominator is always positive.
    """

    terms: Tuple[Magnitude, ...]
    numerator: Magnitude
    denominator: Magnitude

    @property
    def value(self) -> Magnitude:
        return self.numerator.div(self.denominator)

    def mixed(self) -> Tuple[Magnitude, Magnitude, Magnitude]:
        """Return ``(whole, numerator, denominator)`` with ``0 <= numerator < denominator``."""
        whole = self.numerator.div(self.denominator).floor()
        remainder = self.numerator.sub(whole.mul(self.denominator))
        if remainder >= self.denominator:
            # Float division can land just below an integer.
            whole = whole.add(ONE)
            remainder = remainder.sub(self.denominator)
        elif remainder < 0:
            whole = whole.sub(ONE)
            remainder = remainder.add(self.denominator)
        return whole, remainder, self.denominator


def _tolerance(value: Magnitude, precision: Magnitude) -> Magnitude:
    if precision > 0:
        tolerance = precision
    elif precision < 0:
        tolerance = value.abs().div(precision.abs())
    else:
        tolerance = ZERO
    return tolerance.min(ONE)


def approximate(
    value: MagnitudeLike,
    precision: MagnitudeLike,
    max_iterations: float = math.inf,
    max_denominator: MagnitudeLike = INF,
    strict_max_denominator: bool = False,
    max_numerator: MagnitudeLike = INF,
    strict_max_numerator: bool = False,
) -> RationalApproximation:
    """Approximate *value* by the first good-enough continued-fraction convergent.

    Parameters
    ----------
    value:
        Finite number to approximate.
    precision:
        Positive – absolute error bound.  Negative – the error may be up to
        ``|value| / |precision|``.  Zero – expand until the representation
        is exhausted.  Bounds above one are clamped to one.
    max_iterations:
        Maximum number of continued-fraction terms.
    max_denominator, max_numerator:
        The expansion stops at the first convergent whose denominator
        (numerator, in absolute value) exceeds the cap.
    strict_max_denominator, strict_max_numerator:
        Roll back to the previous convergent instead of keeping the one that
        broke the cap.  The numerator rule never rolls back a single-term
        (whole number) approximation.

    Raises
    ------
    ValueError
        If *value* is NaN or infinite.
    """
    v = to_magnitude(value)
    if not v.is_finite():
        raise ValueError(f"Cannot approximate the non-finite value {v} as a fraction.")
    p = to_magnitude(precision)
    max_den = to_magnitude(max_denominator)
    max_num = to_magnitude(max_numerator)

    if v == 0:
        return RationalApproximation((ZERO,), ZERO, ONE)
    if v.abs() < 1 and v.layer > 1 and p < 0:
        # Relative precision cannot be met by division at this depth.
        denominator = v.abs().recip().round()
        return RationalApproximation((ZERO, v.recip().round()), Magnitude.from_float(float(v.sign)), denominator)

    tolerance = _tolerance(v, p)
    terms: List[Magnitude] = []
    # Convergent recurrence h_n = a_n h_{n-1} + h_{n-2} (same for k).
    num, den = ONE, ZERO
    prev_num, prev_den = ZERO, ONE
    approximation = ZERO
    current = v
    while (
        v.sub(approximation).abs() > tolerance
        and (not terms or (den <= max_den and num.abs() <= max_num))
        and len(terms) < max_iterations
    ):
        term = current.floor()
        terms.append(term)
        num, prev_num = term.mul(num).add(prev_num), num
        den, prev_den = term.mul(den).add(prev_den), den
        approximation = num.div(den)
        remainder = current.sub(term)
        if remainder == 0:
            break
        current = remainder.recip()

    if not terms:
        return RationalApproximation((ZERO,), ZERO, ONE)
    if (den > max_den and strict_max_denominator) or (
        num.abs() > max_num and strict_max_numerator and len(terms) > 1
    ):
        terms.pop()
        num, den = prev_num, prev_den
    return RationalApproximation(tuple(terms), num, den)


def fraction_approximation(
    value: MagnitudeLike,
    precision: MagnitudeLike,
    form: Union[FractionForm, int] = FractionForm.FRACTION,
    max_iterations: float = math.inf,
    max_denominator: MagnitudeLike = INF,
    strict_max_denominator: bool = False,
    max_numerator: MagnitudeLike = INF,
    strict_max_numerator: bool = False,
) -> List[Magnitude]:
    """List-shaped wrapper around :func:`approximate`, see :class:`FractionForm`."""
    try:
        form = FractionForm(form)
    except ValueError:
        form = FractionForm.CONTINUED_FRACTION
    v = to_magnitude(value)
    caps = (max_iterations, max_denominator, strict_max_denominator, max_numerator, strict_max_numerator)

    if form is FractionForm.MIXED_NUMBER:
        whole, numerator, denominator = approximate(v.abs(), precision, *caps).mixed()
        if v < 0:
            if whole == 0:
                numerator = numerator.neg()
            else:
                whole = whole.neg()
        return [whole, numerator, denominator]

    result = approximate(v, precision, *caps)
    if form is FractionForm.CONTINUED_FRACTION:
        return list(result.terms)
    if form is FractionForm.FRACTION:
        return [result.numerator, result.denominator]
    return list(result.mixed())


# -----------------------------------------------------------------------------
# Primes
# -----------------------------------------------------------------------------


def primes_array(maximum: int) -> List[int]:
    """All primes ``<= maximum`` (sieve of Eratosthenes)."""
    if maximum < 2:
        return []
    sieve = bytearray([1]) * (maximum + 1)
    sieve[0] = sieve[1] = 0
    for p in range(2, math.isqrt(maximum) + 1):
        if sieve[p]:
            sieve[p * p :: p] = bytearray(len(range(p * p, maximum + 1, p)))
    return [i for i, flag in enumerate(sieve) if flag]


def _trial_primes(value: int) -> List[int]:
    return primes_array(math.isqrt(value))


def prime_factorize(value: int, primes: Optional[Union[int, Sequence[int]]] = None) -> List[Tuple[int, int]]:
    """Prime factorisation as ``(prime, exponent)`` pairs.

    ``1`` gives ``[]``, ``0`` gives ``[(0, 1)]`` and negatives start with
    ``(-1, 1)``.  When *primes* restricts the candidate factors, whatever is
    left over is appended as a final ``(leftover, 1)`` pair even if it is
    composite.
    """
    if value == 0:
        return [(0, 1)]
    result: List[Tuple[int, int]] = []
    if value < 0:
        result.append((-1, 1))
        value = -value
    if primes is None:
        candidates = _trial_primes(value)
    elif isinstance(primes, int):
        candidates = primes_array(primes)
    else:
        candidates = list(primes)

    current = value
    for p in candidates:
        exponent = 0
        while current % p == 0:
            current //= p
            exponent += 1
        if exponent > 0:
            result.append((p, exponent))
    if current > 1:
        result.append((current, 1))
    return result


def prime_factorize_fraction(
    value: float,
    primes: Optional[Union[int, Sequence[int]]],
    precision: float,
    max_iterations: float = math.inf,
    max_denominator: MagnitudeLike = INF,
    strict_max_denominator: bool = False,
    max_numerator: MagnitudeLike = INF,
    strict_max_numerator: bool = False,
) -> List[Tuple[int, int]]:
    """Factorise a fraction approximation; denominator primes get negative exponents.

    ``40/63`` gives ``[(2, 3), (3, -2), (5, 1), (7, -1)]``.
    """
    if value == 0:
        return [(0, 1)]
    result: List[Tuple[int, int]] = []
    if value < 0:
        result.append((-1, 1))
        value = -value
    approximation = approximate(
        value, precision, max_iterations, max_denominator, strict_max_denominator, max_numerator, strict_max_numerator
    )
    numerator_primes = prime_factorize(int(approximation.numerator.to_float()), primes)
    denominator_primes = prime_factorize(int(approximation.denominator.to_float()), primes)

    # Leftover factors may still share a divisor.
    if numerator_primes and denominator_primes:
        shared = math.gcd(numerator_primes[-1][0], denominator_primes[-1][0])
        if shared > 1:
            numerator_primes[-1] = (numerator_primes[-1][0] // shared, numerator_primes[-1][1])
            denominator_primes[-1] = (denominator_primes[-1][0] // shared, denominator_primes[-1][1])
            if numerator_primes[-1][0] == 1:
                numerator_primes.pop()
            if denominator_primes[-1][0] == 1:
                denominator_primes.pop()

    merged: dict[int, int] = {}
    for prime, exponent in numerator_primes:
        merged[prime] = merged.get(prime, 0) + exponent
    for prime, exponent in denominator_primes:
        merged[prime] = merged.get(prime, 0) - exponent
    result.extend((prime, exponent) for prime, exponent in sorted(merged.items()) if exponent != 0)
    return result
