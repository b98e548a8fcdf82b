"""Inverting strictly increasing functions of one or many arguments.

:func:`increasing_inverse` is a bisection that works for arguments anywhere
between ``-inf`` and ``+inf``.  It bisects in *super-logarithmic* coordinates

    phi(x) = sign(x) * (slog10(|x|) + 1)

which is continuous, strictly increasing, equal to ``x`` on ``[-1, 1]`` and
maps every finite Magnitude to a modest float.  Once the bracket has shrunk
to ordinary float range a second bisection over plain doubles finishes the
job, so small arguments come out to full double precision.

:func:`increasing_function_split` builds on it to write a value as
``f(a0, a1, …, an)`` where the *last* argument is the most significant
"digit" and the first one is solved as a residual – a mixed-radix
generalisation of ``mantissa * 10**exponent``.
"""

from __future__ import annotations

from dataclasses import dataclass
import inspect
import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple, TypeAlias, Union

from . import config
from .engineering import (
    Rounding,
    current_engineering_value,
    next_engineering_value,
    normalize_engineerings,
    previous_engineering_value,
    round_to,
    upper_current_engineering_value,
)
from .magnitude import INF, NAN, NEG_INF, TEN, ZERO, Magnitude, MagnitudeLike, slog, tetrate, to_magnitude

logger = logging.getLogger(__name__)

__all__ = [
    "ArgumentSpec",
    "RevertPolicy",
    "increasing_inverse",
    "increasing_function_split",
    "validate_increasing",
    "function_arity",
]

# -- Type aliases -----------------------------------------------------------------
RevertPolicy: TypeAlias = Union[bool, MagnitudeLike]
IncreasingFunction: TypeAlias = Callable[..., Magnitude]
EngineeringsSpec: TypeAlias = Union[MagnitudeLike, Sequence[Union[MagnitudeLike, Sequence[MagnitudeLike]]]]


@dataclass(frozen=True, slots=True)
class ArgumentSpec:
    """Bound on one non-leading argument of an increasing function.

    Attributes
    ----------
    limit:
        Minimum (``is_maximum=False``) or exclusive maximum of the argument.
    is_maximum:
        Whether *limit* is an upper rather than a lower bound.
    original_limit:
        Bound that replaces *limit* while the next more significant argument
        is exactly zero, e.g. letting a mantissa reach 100 before the first
        exponent step but only 10 afterwards.
    """

    limit: Magnitude
    is_maximum: bool = False
    original_limit: Optional[Magnitude] = None

    def bound(self, next_argument: Optional[Magnitude]) -> Magnitude:
        if self.original_limit is not None and next_argument is not None and next_argument == 0:
            return self.original_limit
        return self.limit


# -----------------------------------------------------------------------------
# Single-argument inverse
# -----------------------------------------------------------------------------


def _phi(x: Magnitude) -> float:
    if x.is_nan():
        return math.nan
    if x.is_infinite():
        return x.sign * math.inf
    if x.sign == 0:
        return 0.0
    return x.sign * (slog(x.abs(), TEN).to_float() + 1)


def _psi(y: float) -> Magnitude:
    if y == 0:
        return ZERO
    m = tetrate(TEN, abs(y) - 1)
    return m if y > 0 else m.neg()


def _clamp_phi(y: float) -> float:
    limit = config.SOLVER_SLOG_LIMIT
    return max(-limit, min(limit, y))


def increasing_inverse(
    func: Callable[[Magnitude], Magnitude],
    target: MagnitudeLike,
    lower: MagnitudeLike = NEG_INF,
    upper: MagnitudeLike = INF,
) -> Magnitude:
    """Find ``x`` in ``[lower, upper]`` with ``func(x)`` as close to *target* as possible.

    *func* must be strictly increasing on the interval.  NaN outputs are
    treated as "too large".  If *target* lies outside the image of the
    interval the nearer endpoint is returned.
    """
    t = to_magnitude(target)
    if t.is_nan():
        return NAN
    lo_y = _clamp_phi(_phi(to_magnitude(lower)))
    hi_y = _clamp_phi(_phi(to_magnitude(upper)))

    def above(x: Magnitude) -> bool:
        r = to_magnitude(func(x))
        return r.is_nan() or r > t

    if above(_psi(lo_y)):
        return _psi(lo_y)
    if not above(_psi(hi_y)):
        return _psi(hi_y)

    for _ in range(config.SOLVER_MAX_ITERATIONS):
        mid = (lo_y + hi_y) / 2
        if mid == lo_y or mid == hi_y:
            break
        if above(_psi(mid)):
            hi_y = mid
        else:
            lo_y = mid
    else:
        logger.debug("Bisection for %s stopped after %d halvings", t, config.SOLVER_MAX_ITERATIONS)

    lo, hi = _psi(lo_y), _psi(hi_y)
    lf, hf = lo.to_float(), hi.to_float()
    if math.isfinite(lf) and math.isfinite(hf):
        for _ in range(config.SOLVER_MAX_ITERATIONS):
            mid = (lf + hf) / 2
            if mid == lf or mid == hf:
                break
            if above(Magnitude.from_float(mid)):
                hf = mid
            else:
                lf = mid
        lo, hi = Magnitude.from_float(lf), Magnitude.from_float(hf)

    r_hi = to_magnitude(func(hi))
    if r_hi.is_finite() and r_hi.sub(t).abs() < t.sub(to_magnitude(func(lo))).abs():
        return hi
    return lo


# -----------------------------------------------------------------------------
# Multi-argument split
# -----------------------------------------------------------------------------


def function_arity(func: Callable[..., object]) -> int:
    """Number of positional parameters *func* takes."""
    params = inspect.signature(func).parameters.values()
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        raise ValueError("Functions with *args need an explicit arity.")
    return sum(
        1
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    )


def _pad(values: Sequence, length: int) -> list:
    out = list(values)
    while len(out) < length:
        out.append(out[-1])
    return out[:length]


def _engineerings_per_argument(engineerings: EngineeringsSpec, count: int) -> List[Tuple[Magnitude, ...]]:
    if isinstance(engineerings, (Magnitude, int, float, str)):
        return [normalize_engineerings(engineerings)] * count
    entries = [normalize_engineerings(e) for e in engineerings]
    if not entries:
        entries = [normalize_engineerings(1)]
    return _pad(entries, count)


def _range_pairs(range_limits: Sequence[Tuple[MagnitudeLike, MagnitudeLike]], count: int) -> List[Tuple[Magnitude, Magnitude]]:
    pairs = [(to_magnitude(lo), to_magnitude(hi)) for lo, hi in range_limits] or [(NEG_INF, INF)]
    for lo, hi in pairs:
        if not lo < hi:
            raise ValueError(f"Range minimum {lo} must be below its maximum {hi}.")
    return _pad(pairs, count)


def _revert(value: Magnitude, policy: RevertPolicy, limit: Magnitude) -> Magnitude:
    if value.is_finite() or policy is False:
        return value
    if policy is True:
        return limit
    return to_magnitude(policy)


def increasing_function_split(
    value: MagnitudeLike,
    func: IncreasingFunction,
    limits: Sequence[MagnitudeLike],
    limits_are_maximums: bool = False,
    engineerings: EngineeringsSpec = 1,
    rounding: Rounding = 0,
    range_limits: Sequence[Tuple[MagnitudeLike, MagnitudeLike]] = ((NEG_INF, INF),),
    revert_values: Sequence[RevertPolicy] = (False,),
    *,
    original_limits: Optional[Sequence[MagnitudeLike]] = None,
    arity: Optional[int] = None,
) -> Tuple[Magnitude, ...]:
    """Write *value* as ``func(a0, …, an)``, least significant argument first.

    Parameters
    ----------
    value:
        Target value.
    func:
        Strictly increasing in every argument.
    limits:
        ``limits[i]`` bounds argument *i*; the last argument is unbounded.
        Shorter lists are padded with their last entry.
    limits_are_maximums:
        Treat the limits as exclusive maximums instead of minimums.
    engineerings:
        Allowed values of arguments ``1..n``; a scalar applies everywhere,
        otherwise ``engineerings[i]`` belongs to argument ``i + 1``.
    rounding:
        Rounding of the residual first argument.  It is applied after every
        carry is settled and is not re-checked against the first limit.
    range_limits:
        ``(minimum, maximum)`` domain of each argument.
    revert_values:
        What a non-finite argument becomes: ``True`` – its limit, a number –
        that number, ``False`` – left as is.
    original_limits:
        Limits used while the next more significant argument is zero.
    arity:
        Number of arguments; inferred from the signature when omitted.
    """
    target = to_magnitude(value)
    n = arity if arity is not None else function_arity(func)
    if n < 1:
        raise ValueError("The function needs at least one argument.")
    ranges = _range_pairs(range_limits, n)
    reverts = _pad(list(revert_values) or [False], n)
    raw = func

    def func(*args: Magnitude) -> Magnitude:
        return to_magnitude(raw(*args))

    if n == 1:
        only = _tidy(func, target, increasing_inverse(func, target, *ranges[0]), *ranges[0])
        only = _revert(only, reverts[0], ranges[0][0])
        return (round_to(only, rounding),)

    if not limits:
        raise ValueError("At least one argument limit is required.")
    limit_values = _pad([to_magnitude(x) for x in limits], n - 1)
    originals = _pad([to_magnitude(x) for x in original_limits], n - 1) if original_limits else [None] * (n - 1)
    specs = [ArgumentSpec(lim, limits_are_maximums, orig) for lim, orig in zip(limit_values, originals)]
    steps = [()] + _engineerings_per_argument(engineerings, n - 1)

    def held(i: int, next_argument: Magnitude) -> Magnitude:
        bound = specs[i].bound(next_argument)
        # An exclusive maximum is out of reach for a quantised argument.
        if limits_are_maximums and i > 0:
            return previous_engineering_value(bound, steps[i])
        return bound

    def arguments(j: int, candidate: Magnitude, fixed: List[Magnitude]) -> List[Magnitude]:
        args: List[Magnitude] = [ZERO] * j + [candidate] + fixed
        for i in range(j - 1, -1, -1):
            args[i] = held(i, args[i + 1])
        return args

    fixed: List[Magnitude] = []
    for j in range(n - 1, 0, -1):
        lo, hi = ranges[j]

        def level(a: Magnitude, j=j, fixed=fixed) -> Magnitude:
            return func(*arguments(j, a, fixed))

        estimate = increasing_inverse(level, target, lo, hi)
        if not estimate.is_finite():
            fallback = specs[j].limit if j < n - 1 else lo
            fixed = [_revert(estimate, reverts[j], fallback)] + fixed
            continue
        a = _settle(level, target, estimate, steps[j], lo, hi, limits_are_maximums)
        fixed = [a] + fixed

    def residual(x: Magnitude) -> Magnitude:
        return func(x, *fixed)

    first = _tidy(residual, target, increasing_inverse(residual, target, *ranges[0]), *ranges[0])
    first = _revert(first, reverts[0], specs[0].limit)
    return (round_to(first, rounding), *fixed)


def _tidy(
    func: Callable[[Magnitude], Magnitude],
    target: Magnitude,
    x: Magnitude,
    lo: Magnitude,
    hi: Magnitude,
) -> Magnitude:
    """Replace a bisected *x* by a shorter number that fits *target* as well.

    Bisection stops within half an ulp of the exact residual, so ``3660``
    would otherwise split with a first argument of ``2.3e-13`` instead of 0.
    Zero is tried first, then *x* rounded to 1, 2, … 17 significant digits.
    """
    xf = x.to_float()
    if not math.isfinite(xf):
        return x

    def error(c: Magnitude) -> Magnitude:
        r = func(c)
        return r.sub(target).abs() if r.is_finite() else INF

    best = error(x)
    if not best.is_finite():
        return x
    candidates = [ZERO] + [Magnitude.from_float(float(f"{xf:.{k}g}")) for k in range(1, 18)]
    for c in candidates:
        if lo <= c <= hi and not error(c) > best:
            return c
    return x


def _settle(
    level: Callable[[Magnitude], Magnitude],
    target: Magnitude,
    estimate: Magnitude,
    steps: Tuple[Magnitude, ...],
    lo: Magnitude,
    hi: Magnitude,
    maximums: bool,
) -> Magnitude:
    """Quantise *estimate* and carry/borrow until the level brackets *target*.

    With minimums the answer is the largest allowed ``a`` whose level value
    does not exceed *target*; with maximums, the smallest allowed ``a`` whose
    level value exceeds it.
    """
    if maximums:
        a = upper_current_engineering_value(estimate, steps)
    else:
        a = current_engineering_value(estimate, steps)
    a = a.max(lo).min(hi)

    for _ in range(config.CARRY_LOOP_LIMIT):
        nxt = next_engineering_value(a, steps)
        prv = previous_engineering_value(a, steps)
        if maximums:
            if prv >= lo and level(prv) > target:
                a = prv
            elif not level(a) > target and nxt <= hi:
                a = nxt
            else:
                return a
        else:
            if nxt <= hi and level(nxt) <= target:
                a = nxt
            elif level(a) > target and prv >= lo:
                a = prv
            else:
                return a
    logger.debug("Carry loop for %s did not settle; keeping %s", target, a)
    return a


def validate_increasing(
    func: IncreasingFunction,
    arity: int,
    limits: Sequence[MagnitudeLike] = (1,),
    range_limits: Sequence[Tuple[MagnitudeLike, MagnitudeLike]] = ((NEG_INF, INF),),
):
    """Spot-check that *func* increases in each argument.

    Raises
    ------
    ValueError
        If some argument, with the others held at their limits, produces a
        non-increasing pair of outputs.
    """
    ranges = _range_pairs(range_limits, arity)
    held = _pad([to_magnitude(x) for x in limits] or [to_magnitude(1)], arity)
    samples = [to_magnitude(x) for x in (0.5, 1, 2, 3, 5)]
    for k in range(arity):
        lo, hi = ranges[k]
        points = [s for s in samples if lo <= s <= hi]
        base_args = [h.max(ranges[i][0]).min(ranges[i][1]) for i, h in enumerate(held)]
        outputs = []
        for p in points:
            args = list(base_args)
            args[k] = p
            r = to_magnitude(func(*args))
            if r.is_finite():
                outputs.append(r)
        for a, b in zip(outputs, outputs[1:]):
            if not b > a:
                raise ValueError(f"The function must be strictly increasing in argument {k}.")
