"""Engineering constraints and rounding helpers.

An *engineering constraint* is an ordered list of step sizes.  The allowed
values are the non-negative combinations reachable by greedily taking the
largest step first, then the next one below it, and so on.  ``[3]`` gives the
classic engineering exponents 0, 3, 6, …; ``[5, 2]`` gives 2, 4, 5, 7, 9, 10,
12, 14, … (multiples of 5 plus a multiple of 2 that stays below 5).  Negative
values mirror the positive ones.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence, TypeAlias, Union

from .magnitude import INF, NEG_INF, ONE, ZERO, Magnitude, MagnitudeLike, to_magnitude

__all__ = [
    "Engineerings",
    "Rounding",
    "normalize_engineerings",
    "current_engineering",
    "engineering_value",
    "current_engineering_value",
    "upper_current_engineering_value",
    "next_engineering",
    "next_engineering_value",
    "previous_engineering",
    "previous_engineering_value",
    "round_to",
]

# -- Type aliases -----------------------------------------------------------------
Engineerings: TypeAlias = Sequence[Magnitude]  # always sorted largest first
Rounding: TypeAlias = Union[MagnitudeLike, Callable[[Magnitude], MagnitudeLike]]


def normalize_engineerings(engineerings: Union[MagnitudeLike, Iterable[MagnitudeLike]]) -> tuple[Magnitude, ...]:
    """Coerce a scalar or a list of step sizes into a descending tuple.

    Raises
    ------
    ValueError
        If any step is not a positive finite number.
    """
    if isinstance(engineerings, (Magnitude, int, float, str)):
        steps = [to_magnitude(engineerings)]
    else:
        steps = [to_magnitude(e) for e in engineerings]
    if not steps:
        return (ONE,)
    for step in steps:
        if not step.is_finite() or step <= 0:
            raise ValueError(f"Engineering steps must be positive and finite, got {step}.")
    steps.sort(reverse=True)
    return tuple(steps)


def current_engineering(value: Magnitude, engineerings: Engineerings) -> List[Magnitude]:
    """Greedy coefficients of the largest allowed value not above *value*."""
    if value < 0:
        raise ValueError("current_engineering does not support negative values")
    if value == 0:
        return [ZERO] * len(engineerings)
    coefficients: List[Magnitude] = []
    remaining = value
    for step in engineerings:
        portion = remaining.div(step).floor().max(ZERO)
        remaining = remaining.sub(portion.mul(step))
        coefficients.append(portion)
    return coefficients


def engineering_value(coefficients: Sequence[Magnitude], engineerings: Engineerings) -> Magnitude:
    result = ZERO
    for coefficient, step in zip(coefficients, engineerings):
        result = result.add(coefficient.mul(step))
    return result


def current_engineering_value(value: MagnitudeLike, engineerings: Engineerings) -> Magnitude:
    """Largest allowed value that is ``<= value``."""
    v = to_magnitude(value)
    if v == 0:
        return ZERO
    if v < 0:
        return upper_current_engineering_value(v.neg(), engineerings).neg()
    return engineering_value(current_engineering(v, engineerings), engineerings)


def upper_current_engineering_value(value: MagnitudeLike, engineerings: Engineerings) -> Magnitude:
    """Smallest allowed value that is ``>= value``."""
    v = to_magnitude(value)
    current = current_engineering_value(v, engineerings)
    if v == current:
        return current
    return next_engineering_value(v, engineerings)


def next_engineering(value: Magnitude, engineerings: Engineerings) -> List[Magnitude]:
    best = INF
    old = current_engineering(value, engineerings)
    final = list(old)
    for s in range(len(engineerings) - 1, -1, -1):
        candidate = list(old)
        candidate[s] = candidate[s].add(ONE)
        for t in range(s + 1, len(engineerings)):
            candidate[t] = ZERO
        candidate_value = engineering_value(candidate, engineerings)
        if candidate_value > value and candidate_value < best:
            best = candidate_value
            final = candidate
    return final


def next_engineering_value(value: MagnitudeLike, engineerings: Engineerings) -> Magnitude:
    """Smallest allowed value strictly above *value*."""
    v = to_magnitude(value)
    if v == 0:
        return engineerings[-1]
    if v < 0:
        return previous_engineering_value(v.neg(), engineerings).neg()
    return engineering_value(next_engineering(v, engineerings), engineerings)


def previous_engineering(value: Magnitude, engineerings: Engineerings) -> List[Magnitude]:
    best = NEG_INF
    old = current_engineering(value, engineerings)
    final = list(old)
    for s in range(len(engineerings) - 1, -1, -1):
        if not old[s] > 0:
            continue
        candidate = list(old[: s + 1])
        candidate[s] = candidate[s].sub(ONE)
        candidate_value = engineering_value(candidate, engineerings)
        # Refill the freed step with the largest combination of lesser steps.
        difference = engineerings[s]
        for t in range(s + 1, len(engineerings)):
            coefficient = difference.div(engineerings[t]).floor().max(ZERO)
            portion = coefficient.mul(engineerings[t])
            if portion == difference:
                coefficient = coefficient.sub(ONE)
                portion = portion.sub(engineerings[t])
            difference = difference.sub(portion)
            candidate_value = candidate_value.add(portion)
            candidate.append(coefficient)
        if candidate_value < value and candidate_value > best:
            best = candidate_value
            final = candidate
    return final


def previous_engineering_value(value: MagnitudeLike, engineerings: Engineerings) -> Magnitude:
    """Largest allowed value strictly below an allowed *value*."""
    v = to_magnitude(value)
    if v == 0:
        return engineerings[-1].neg()
    if v < 0:
        return next_engineering_value(v.neg(), engineerings).neg()
    return engineering_value(previous_engineering(v, engineerings), engineerings)


def round_to(value: MagnitudeLike, rounding: Rounding) -> Magnitude:
    """Round *value* to the nearest multiple of *rounding*.

    *rounding* may also be a function of the value returning the multiple to
    use.  A multiple of zero leaves the value untouched.
    """
    v = to_magnitude(value)
    step = rounding(v) if callable(rounding) else rounding
    step_m = to_magnitude(step)
    if step_m == 0:
        return v
    return v.div(step_m).round().mul(step_m)
