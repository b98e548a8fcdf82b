"""Hyperoperator decompositions.

Each function here writes a value as a small tuple of coordinates, least
significant first, under one rung of the hyperoperator ladder:

* :func:`scientific_split` – ``(m, e)`` with ``value == m * base**e``;
* :func:`hyperscientific_split` – ``(m, e)`` with ``value == tetrate(base, e, m)``;
* :func:`pentascientific_split` – ``(m, e)`` with ``value == pentate(base, e, m)``;
* :func:`weak_hyperscientific_split` – ``(m, e)`` with
  ``value == weak_tetrate(base, e) ** m``;
* :func:`hypersplit` – ``(m, e, t, p)`` mixing all four levels at once.

They are closed-form instances of :func:`eternum.solver.increasing_function_split`:
a logarithm (or super-logarithm) gives the first guess for the exponent, then
the shared carry loop in :func:`_rebalance` moves the exponent one
engineering step at a time until the mantissa is inside its bounds.

None of these functions raise.  Invalid bases produce ``(base, NaN)`` and a
warning, and decompositions that cannot converge fall back to the identity
tuple ``(value, 0, …)``.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from . import config
from .engineering import (
    Engineerings,
    Rounding,
    current_engineering_value,
    next_engineering_value,
    normalize_engineerings,
    previous_engineering_value,
    round_to,
)
from .magnitude import (
    CONVERGENCE_LIMIT,
    INF,
    NAN,
    NEG_INF,
    ONE,
    ZERO,
    Magnitude,
    MagnitudeLike,
    iteratedexp_mult,
    iteratedlog_mult,
    pentate,
    penta_log,
    slog_mult,
    tetrate,
    to_magnitude,
)

logger = logging.getLogger(__name__)

__all__ = [
    "scientific_split",
    "hyperscientific_split",
    "pentascientific_split",
    "weak_hyperscientific_split",
    "weak_tetrate",
    "weak_slog",
    "hypersplit",
]

Split = Tuple[Magnitude, Magnitude]
EngineeringsLike = Union[MagnitudeLike, Iterable[MagnitudeLike]]

# Exponents beyond this cannot be stepped one engineering value at a time.
_MAX_SAFE_INTEGER = 2 ** 53 - 1


def _rebalance(
    unrounded: Magnitude,
    exponent: Magnitude,
    steps: Engineerings,
    rounding: Rounding,
    upper_limit: Callable[[Magnitude], Magnitude],
    lower_limit: Callable[[Magnitude], Magnitude],
    shift_up: Callable[[Magnitude, Magnitude, Magnitude], Magnitude],
    shift_down: Callable[[Magnitude, Magnitude, Magnitude], Magnitude],
) -> Split:
    """Carry/borrow between mantissa and exponent until the mantissa fits.

    ``shift_up(m, e, e_next)`` rewrites the mantissa for a larger exponent,
    ``shift_down(m, e, e_prev)`` for a smaller one.  If the loop has to go
    both ways the mantissa is sitting on a boundary; it is pinned to the
    lower limit and the loop stops.
    """
    mantissa = round_to(unrounded, rounding)
    went_down = False
    for _ in range(config.CARRY_LOOP_LIMIT):
        previous = unrounded
        lower = lower_limit(exponent)
        if mantissa >= upper_limit(exponent):
            nxt = next_engineering_value(exponent, steps)
            unrounded = shift_up(unrounded, exponent, nxt)
            exponent = nxt
            mantissa = round_to(lower if went_down else unrounded, rounding)
            if went_down:
                break
        elif mantissa < lower:
            prv = previous_engineering_value(exponent, steps)
            unrounded = shift_down(unrounded, exponent, prv)
            exponent = prv
            mantissa = round_to(unrounded, rounding)
            went_down = True
        else:
            break
        if previous == unrounded:
            break
    return mantissa, exponent


def _in_identity_band(v: Magnitude, minnum: Optional[MagnitudeLike], upper: Magnitude) -> bool:
    if minnum is None:
        return False
    low = to_magnitude(minnum)
    return low >= 0 and low <= v.abs() < upper


# -----------------------------------------------------------------------------
# Exponentiation
# -----------------------------------------------------------------------------


def scientific_split(
    value: MagnitudeLike,
    base: MagnitudeLike = 10,
    rounding: Rounding = 0,
    mantissa_power: MagnitudeLike = 0,
    engineerings: EngineeringsLike = 1,
    exp_multiplier: MagnitudeLike = 1,
    minnum: Optional[MagnitudeLike] = None,
) -> Split:
    """Return ``(m, e)`` with ``m * base**e == value``.

    Parameters
    ----------
    value:
        Number to split.
    base:
        Base of the power, must be above one.
    rounding:
        Multiple (or function returning the multiple) the mantissa is rounded
        to; a rounded mantissa that reaches the next power carries into the
        exponent.
    mantissa_power:
        The mantissa lies in ``[base**p, base**(p+1))``.
    engineerings:
        Allowed exponent steps, see :mod:`eternum.engineering`.  With steps
        larger than one the mantissa's upper bound grows to match.
    exp_multiplier:
        The returned exponent is multiplied by this.
    minnum:
        Values with ``minnum <= |value| < base**(p+1)`` are returned as
        ``(value, 0)``.  ``None`` disables the band.
    """
    v = to_magnitude(value)
    b = to_magnitude(base)
    power = to_magnitude(mantissa_power)
    steps = normalize_engineerings(engineerings)
    mult = to_magnitude(exp_multiplier)

    if v == 0:
        return ZERO, NEG_INF
    if v.is_nan():
        return NAN, NAN
    if v.is_infinite():
        return v, INF
    if not b > ONE:
        logger.warning("Invalid base %s in scientific_split", b)
        return b, NAN
    if _in_identity_band(v, minnum, b.pow(power.add(ONE))):
        return v, ZERO
    if v < 0:
        m, e = scientific_split(v.neg(), b, rounding, power, steps, mult)
        return m.neg(), e

    log = v.log(b)
    exponent = current_engineering_value(log.sub(power), steps)
    unrounded = v.div(b.pow(exponent))
    if exponent.abs() > _MAX_SAFE_INTEGER:
        return b.pow(power), exponent.mul(mult)

    mantissa, exponent = _rebalance(
        unrounded,
        exponent,
        steps,
        rounding,
        upper_limit=lambda e: b.pow(next_engineering_value(e, steps).sub(e).add(power)),
        lower_limit=lambda e: b.pow(power),
        shift_up=lambda m, e, nxt: m.div(b.pow(nxt.sub(e))),
        shift_down=lambda m, e, prv: m.mul(b.pow(e.sub(prv))),
    )
    return mantissa, exponent.mul(mult)


# -----------------------------------------------------------------------------
# Tetration
# -----------------------------------------------------------------------------


def hyperscientific_split(
    value: MagnitudeLike,
    base: MagnitudeLike = 10,
    rounding: Rounding = 0,
    hypermantissa_power: MagnitudeLike = 0,
    engineerings: EngineeringsLike = 1,
    exp_multiplier: MagnitudeLike = 1,
    hyperexp_multiplier: MagnitudeLike = 1,
    minnum: Optional[MagnitudeLike] = None,
) -> Split:
    """Return ``(m, e)`` with ``iteratedexp(base, e, m) == value``.

    Each exponentiation in the tower is ``base**(x / exp_multiplier)``; the
    returned hyperexponent is multiplied by *hyperexp_multiplier*.  The
    mantissa lies in ``[base^^p, base^^(p+1))``.
    """
    v = to_magnitude(value)
    b = to_magnitude(base)
    power = to_magnitude(hypermantissa_power)
    steps = normalize_engineerings(engineerings)
    mult = to_magnitude(exp_multiplier)
    hypermult = to_magnitude(hyperexp_multiplier)
    effective = b.pow(mult.recip())

    if not effective > ONE:
        logger.warning("Invalid base %s in hyperscientific_split", b)
        return b, NAN
    if v.is_nan():
        return NAN, NAN
    if v == INF:
        return INF, INF
    if v == NEG_INF:
        return NEG_INF, Magnitude.from_float(-2.0)
    tower = tetrate(effective, float("inf"))
    if v >= tower:
        return v.div(tower), INF

    height = power.to_float()
    if _in_identity_band(v, minnum, iteratedexp_mult(b, ONE, height + 1, mult)):
        return v, ZERO

    smallest = steps[-1].to_float()
    if iteratedexp_mult(b, ONE, -10 * smallest, mult) < v < iteratedexp_mult(b, ONE, 10 * smallest, mult):
        # slog on small values is the slow path; let the carry loop walk instead.
        exponent, unrounded = ZERO, v
    else:
        exponent = current_engineering_value(slog_mult(v, b, mult).sub(power), steps)
        unrounded = iteratedlog_mult(v, b, exponent.to_float(), mult)
    if exponent.abs() > _MAX_SAFE_INTEGER:
        return tetrate(b, height), exponent.mul(hypermult)

    mantissa, exponent = _rebalance(
        unrounded,
        exponent,
        steps,
        rounding,
        upper_limit=lambda e: iteratedexp_mult(
            b, ONE, next_engineering_value(e, steps).sub(e).add(power).to_float(), mult
        ),
        lower_limit=lambda e: iteratedexp_mult(b, ONE, height, mult),
        shift_up=lambda m, e, nxt: iteratedlog_mult(m, b, nxt.sub(e).to_float(), mult),
        shift_down=lambda m, e, prv: iteratedexp_mult(b, m, e.sub(prv).to_float(), mult),
    )
    if not mantissa.is_finite():
        logger.debug("hyperscientific_split(%s) did not converge", v)
        return v, ZERO
    return mantissa, exponent.mul(hypermult)


def weak_tetrate(base: MagnitudeLike, height: MagnitudeLike) -> Magnitude:
    """Bottom-up tower: ``base ** (base ** (height - 1))``."""
    b = to_magnitude(base)
    return b.pow(b.pow(to_magnitude(height).sub(ONE)))


def weak_slog(value: MagnitudeLike, base: MagnitudeLike = 10) -> Magnitude:
    """Inverse of :func:`weak_tetrate` in its height."""
    b = to_magnitude(base)
    return to_magnitude(value).log(b).log(b).add(ONE)


def weak_hyperscientific_split(
    value: MagnitudeLike,
    base: MagnitudeLike = 10,
    rounding: Rounding = 0,
    mantissa_power: MagnitudeLike = 0,
    engineerings: EngineeringsLike = 1,
) -> Split:
    """Return ``(m, e)`` with ``weak_tetrate(base, e) ** m == value``.

    Since ``weak_tetrate(b, e) ** m == b ** (m * b ** (e - 1))`` this is
    scientific notation applied to ``base * log_base(value)``; the mantissa
    therefore obeys the same ``[base**p, base**(p+1))`` bounds.  Values below
    one give a negative mantissa, non-positive values give ``(NaN, NaN)``.
    """
    v = to_magnitude(value)
    b = to_magnitude(base)
    if not b > ONE:
        logger.warning("Invalid base %s in weak_hyperscientific_split", b)
        return b, NAN
    if v.is_nan() or v <= 0:
        return NAN, NAN
    if v.is_infinite():
        return INF, INF
    return scientific_split(v.log(b).mul(b), b, rounding, mantissa_power, engineerings)


# -----------------------------------------------------------------------------
# Pentation
# -----------------------------------------------------------------------------


def pentascientific_split(
    value: MagnitudeLike,
    base: MagnitudeLike = 10,
    rounding: Rounding = 0,
    pentamantissa_power: MagnitudeLike = 0,
    engineerings: EngineeringsLike = 1,
    minnum: Optional[MagnitudeLike] = None,
) -> Split:
    """Return ``(m, e)`` with ``pentate(base, e, m) == value``."""
    v = to_magnitude(value)
    b = to_magnitude(base)
    power = to_magnitude(pentamantissa_power)
    steps = normalize_engineerings(engineerings)

    if not b.to_float() > CONVERGENCE_LIMIT:
        logger.warning("Invalid base %s in pentascientific_split", b)
        return b, NAN
    if v.is_nan():
        return NAN, NAN
    if v.is_infinite():
        return v, INF
    height = power.to_float()
    if _in_identity_band(v, minnum, pentate(b, height + 1)):
        return v, ZERO

    if v > pentate(b, 2 * steps[-1].to_float()):
        exponent = current_engineering_value(penta_log(v, b).sub(power), steps)
        unrounded = pentate(b, -exponent.to_float(), v)
    else:
        exponent, unrounded = ZERO, v

    mantissa, exponent = _rebalance(
        unrounded,
        exponent,
        steps,
        rounding,
        upper_limit=lambda e: pentate(b, next_engineering_value(e, steps).sub(e).add(power).to_float()),
        lower_limit=lambda e: pentate(b, height),
        shift_up=lambda m, e, nxt: pentate(b, -nxt.sub(e).to_float(), m),
        shift_down=lambda m, e, prv: pentate(b, e.sub(prv).to_float(), m),
    )
    if not mantissa.is_finite():
        logger.debug("pentascientific_split(%s) did not converge", v)
        return v, ZERO
    return mantissa, exponent


# -----------------------------------------------------------------------------
# Combined four-level split
# -----------------------------------------------------------------------------


def _pad3(values: Sequence[Magnitude]) -> List[Magnitude]:
    out = list(values)
    while len(out) < 3:
        out.append(out[-1])
    return out[:3]


def _as_list(values: Union[MagnitudeLike, Sequence[MagnitudeLike], None]) -> List[Magnitude]:
    if values is None:
        return []
    if isinstance(values, (Magnitude, int, float, str)):
        return [to_magnitude(values)]
    return [to_magnitude(x) for x in values]


def hypersplit(
    value: MagnitudeLike,
    base: MagnitudeLike = 10,
    maximums: Union[MagnitudeLike, Sequence[MagnitudeLike], None] = None,
    original_maximums: Union[MagnitudeLike, Sequence[MagnitudeLike], None] = None,
    minnum: MagnitudeLike = 1,
    mantissa_rounding: Rounding = 0,
    engineerings: EngineeringsLike = 1,
    hyperengineerings: EngineeringsLike = 1,
    pentaengineerings: EngineeringsLike = 1,
    exp_mult: MagnitudeLike = 1,
    hyperexp_mult: MagnitudeLike = 1,
    pentaexp_mult: MagnitudeLike = 1,
) -> Tuple[Magnitude, Magnitude, Magnitude, Magnitude]:
    """Split *value* into ``(M, E, T, P)``.

    The value is ``b^^b^^…(b^b^…(M * b^E))`` with ``T`` exponentiations and
    ``P`` tetrations, i.e. a hyperoperator array with an exponent slot
    between the mantissa and the tetration count.

    Parameters
    ----------
    maximums:
        Roll-over points for the mantissa, exponent and tetration.  Defaults
        to the base for all three.  A mantissa maximum of 0 removes the
        mantissa; an exponent maximum ``<= exp_mult`` removes the exponent
        (and likewise the tetration for ``<= hyperexp_mult``).
    original_maximums:
        Maximums that apply while the next level is still zero.
    minnum:
        Values in ``[minnum, original_maximums[0])`` are returned unsplit.
        A negative minnum disables this.
    engineerings, hyperengineerings, pentaengineerings:
        Allowed values for the exponent, tetration and pentation.
    exp_mult, hyperexp_mult, pentaexp_mult:
        Multipliers applied to each exponentiation, tetration and to the
        final pentation count.
    """
    v = to_magnitude(value)
    b = to_magnitude(base)
    maxs = _pad3(_as_list(maximums) or [b])
    origs = _pad3(_as_list(original_maximums) or list(maxs))
    low = to_magnitude(minnum)
    eng = normalize_engineerings(engineerings)
    heng = normalize_engineerings(hyperengineerings)
    peng = normalize_engineerings(pentaengineerings)
    em = to_magnitude(exp_mult)
    hm = to_magnitude(hyperexp_mult)
    pm = to_magnitude(pentaexp_mult)

    if not b.pow(em.recip()).to_float() > CONVERGENCE_LIMIT:
        logger.warning("hypersplit does not support convergent tetrations (base %s)", b)
        return NAN, NAN, NAN, NAN
    if not v.is_finite():
        return v, ZERO, ZERO, ZERO

    mantissa_removed = maxs[0] == 0
    removed = 0
    if maxs[1] <= em:
        removed = 1
        maxs[1] = ONE
        if maxs[2] <= hm:
            removed = 2
            maxs[2] = ONE

    def level_limits(tops: List[Magnitude], second: Optional[Magnitude]) -> List[Magnitude]:
        limits = [tops[0]]
        if mantissa_removed:
            limits.append(iteratedexp_mult(b, tops[1], 1, em))
        else:
            limits.append(
                iteratedexp_mult(b, previous_engineering_value(tops[1], eng), 1, em).mul(maxs[0]).max(limits[0])
            )
        top = previous_engineering_value(tops[2].div(hm), heng).to_float()
        limits.append(iteratedexp_mult(b, second if second is not None else limits[1], top, em).max(limits[1]))
        return limits

    limits = level_limits(maxs, None)
    original_limits = level_limits(origs, limits[1])

    if v == 0 and removed == 0:
        return ZERO, ZERO, ZERO, ZERO
    if not mantissa_removed and low >= 0 and low <= v.abs() < origs[0]:
        return v, ZERO, ZERO, ZERO

    def collapse(x: Magnitude) -> Magnitude:
        return slog_mult(x, b, em).mul(hm)

    if v < 1 and removed == 1:
        if mantissa_removed:
            return ZERO, ZERO, round_to(collapse(v), mantissa_rounding), ZERO
        tetration = previous_engineering_value(ZERO, heng)
        while v < 0 and tetration > -2:
            tetration = previous_engineering_value(tetration, heng)
        mantissa = iteratedlog_mult(v, b, tetration.to_float(), em)
        return mantissa, ZERO, tetration.mul(hm), ZERO
    if v < 1 and removed == 2:
        if mantissa_removed:
            return ZERO, ZERO, ZERO, round_to(collapse(v), mantissa_rounding)
        pentation = next_engineering_value(ZERO, peng)
        for _ in range(int(pentation.to_float())):
            v = collapse(v)
        return v, ZERO, ZERO, pentation.mul(pm)

    negative = v < 0
    v = v.abs()
    neg_exp = False
    if v < 1 and v.recip() >= original_limits[1] and removed < 1:
        neg_exp = True
        v = v.recip()

    def bump_pentation(count: Magnitude) -> Tuple[Magnitude, Magnitude, Magnitude, Magnitude]:
        # The tetration overflowed: take one more pentation step from the top.
        increase = next_engineering_value(count, peng).sub(count)
        w = to_magnitude(value).abs()
        for _ in range(int(increase.to_float())):
            w = collapse(w)
        m, e, t, p = hypersplit(
            w, b, maximums, original_maximums, minnum,
            mantissa_rounding, eng, heng, peng, em, hm,
        )
        if negative:
            m = m.neg()
        return m, e, t, p.add(increase).mul(pm)

    count = ZERO
    if mantissa_removed and removed > 1:
        for _ in range(config.CARRY_LOOP_LIMIT):
            if not v >= b:
                break
            v = collapse(v)
            count = count.add(ONE)
        pentation = round_to(count.add(v.log(b)).mul(hm), mantissa_rounding)
        return ZERO, ZERO, ZERO, pentation

    if v >= original_limits[2]:
        for _ in range(config.CARRY_LOOP_LIMIT):
            if not v >= limits[2]:
                break
            increase = next_engineering_value(count, peng).sub(count)
            for _ in range(int(increase.to_float())):
                v = collapse(v)
            count = count.add(increase)
    pentation = count.mul(pm)

    hypermantissa, tetration = v, ZERO
    if mantissa_removed and removed > 0:
        tetration = round_to(collapse(v), mantissa_rounding)
        if tetration >= maxs[2]:
            return bump_pentation(count)
        return ZERO, ZERO, tetration, pentation

    if removed > 1:
        hypermantissa = round_to(hypermantissa, mantissa_rounding)
    elif (count == 0 and v >= original_limits[1]) or (count > 0 and v >= limits[1]):
        power = slog_mult(limits[1], b, em)
        hypermantissa, tetration = hyperscientific_split(v, b, 0, power, heng, em)
        for _ in range(config.CARRY_LOOP_LIMIT):
            before = hypermantissa
            if hypermantissa >= limits[1]:
                nxt = next_engineering_value(tetration, heng)
                hypermantissa = iteratedlog_mult(hypermantissa, b, nxt.sub(tetration).to_float(), em)
                tetration = nxt
            else:
                prv = previous_engineering_value(tetration, heng)
                lowered = iteratedexp_mult(b, hypermantissa, tetration.sub(prv).to_float(), em)
                if not lowered < limits[1]:
                    break
                hypermantissa, tetration = lowered, prv
            if before == hypermantissa:
                break

    mantissa, exponent = hypermantissa, ZERO
    for _ in range(config.CARRY_LOOP_LIMIT):
        mantissa, exponent = hypermantissa, ZERO
        if mantissa_removed:
            mantissa, exponent = ZERO, round_to(hypermantissa.log(b), mantissa_rounding)
        elif removed < 1 and mantissa >= origs[0]:
            power = limits[0].log(b).sub(eng[-1])
            mantissa, exponent = scientific_split(hypermantissa, b, 0, power, eng)
        if removed < 1 and not mantissa_removed:
            mantissa, exponent = _rebalance(
                mantissa,
                exponent,
                eng,
                mantissa_rounding,
                upper_limit=lambda e: original_limits[0] if e == 0 else limits[0],
                lower_limit=lambda e: (original_limits[0] if e == 0 else limits[0]).div(
                    b.pow(e.sub(previous_engineering_value(e, eng)))
                ),
                shift_up=lambda m, e, nxt: m.div(b.pow(nxt.sub(e))),
                shift_down=lambda m, e, prv: m.mul(b.pow(e.sub(prv))),
            )
        else:
            mantissa = round_to(mantissa, mantissa_rounding)
        # Rounding may push the exponent over its own maximum.
        if exponent >= (origs[1] if tetration == 0 else maxs[1]):
            nxt = next_engineering_value(tetration, heng)
            hypermantissa = iteratedlog_mult(hypermantissa, b, nxt.sub(tetration).to_float(), em)
            tetration = nxt
        else:
            break

    tetration = tetration.mul(hm)
    if tetration >= (origs[2] if count == 0 else maxs[2]):
        return bump_pentation(count)
    exponent = exponent.mul(em)
    if neg_exp:
        exponent = exponent.neg()
    if negative:
        mantissa = mantissa.neg()
    if removed > 0:
        exponent = ZERO
    if removed > 1:
        tetration = ZERO
    return mantissa, exponent, tetration, pentation
