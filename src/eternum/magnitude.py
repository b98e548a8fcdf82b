from __future__ import annotations

"""
Arbitrary-magnitude real numbers.

A :class:`Magnitude` stores a value as ``(sign, layer, mag)``:

* ``layer == 0`` – the value is ``sign * mag``;
* ``layer == 1`` – the value is ``sign * 10**mag``;
* ``layer == 2`` – the value is ``sign * 10**10**mag``; and so on.

A negative ``mag`` on a layer above zero encodes a *tiny* number, e.g.
``layer=1, mag=-400`` is ``1e-400`` and ``layer=2, mag=-3`` is
``10**-(10**3)``.  Every constructor normalises its components so that the
cheapest layer able to hold the value is used, which gives us a total order
by simply comparing ``(layer, mag)`` pairs.

Hyper-operators (``tetrate``, ``slog``, ``pentate`` …) use the *linear*
approximation for fractional heights: ``slog(x) = x - 1`` on ``(0, 1]``.  This
is exact at integer heights and continuous everywhere, which is all the
formatting code needs.

All operations are pure – every method returns a new instance.
"""

from dataclasses import dataclass
import math
import numbers
import re
from typing import Optional, TypeAlias, Union

# -- Type aliases -----------------------------------------------------------------
MagnitudeLike: TypeAlias = Union[int, float, str, "Magnitude"]

__all__ = [
    "Magnitude",
    "MagnitudeLike",
    "to_magnitude",
    "tetrate",
    "iteratedexp",
    "iteratedlog",
    "slog",
    "layeradd",
    "pentate",
    "penta_log",
    "iteratedexp_mult",
    "iteratedlog_mult",
    "slog_mult",
    "ZERO",
    "ONE",
    "TEN",
    "NAN",
    "INF",
    "NEG_INF",
]

# -----------------------------------------------------------------------------
# Layer thresholds
# -----------------------------------------------------------------------------

EXP_LIMIT = 9e15
LAYER_DOWN = math.log10(EXP_LIMIT)
FIRST_NEG_LAYER = 1 / EXP_LIMIT
MAX_SIGNIFICANT_DIGITS = 17
# Above this base ``base^^inf`` diverges (e^(1/e)).
CONVERGENCE_LIMIT = 1.44466786100976613366

_MAX_TOWER_STEPS = 10000


def _normalize(sign: int, layer: int, mag: float) -> tuple[int, int, float]:
    """Bring raw components into canonical form."""
    mag = float(mag)
    if math.isnan(mag):
        return 0, 0, math.nan
    if sign == 0 or (mag == 0 and layer == 0):
        return 0, 0, 0.0
    sign = 1 if sign > 0 else -1
    if math.isinf(mag):
        if mag > 0:
            return sign, 0, math.inf
        if layer == 0:
            return -sign, 0, math.inf
        return 0, 0, 0.0
    if layer == 0 and mag < 0:
        sign, mag = -sign, -mag
    if layer == 0 and mag < FIRST_NEG_LAYER:
        return sign, 1, math.log10(mag)

    absmag = abs(mag)
    signmag = 1.0 if mag >= 0 else -1.0
    if absmag >= EXP_LIMIT:
        layer += 1
        mag = signmag * math.log10(absmag)
    else:
        while absmag < LAYER_DOWN and layer > 0:
            layer -= 1
            if layer == 0:
                mag = 10.0 ** mag
            else:
                mag = signmag * 10.0 ** absmag
                absmag = abs(mag)
                signmag = 1.0 if mag >= 0 else -1.0

    if layer == 0:
        if mag < 0:
            sign, mag = -sign, -mag
        elif mag == 0:
            return 0, 0, 0.0
    return sign, layer, mag


# -----------------------------------------------------------------------------
# Main data class
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False, kw_only=True)
class Magnitude:
    """Real number of (practically) unbounded range.

    Construct instances through :func:`to_magnitude` or the ``from_*``
    classmethods; the raw components are keyword-only so that
    ``Magnitude(5)`` cannot be mistaken for the number five.
    """

    sign: int = 0
    layer: int = 0
    mag: float = 0.0

    # the dataclass is frozen – we must use __setattr__ in __post_init__
    def __post_init__(self):
        sign, layer, mag = _normalize(self.sign, self.layer, self.mag)
        object.__setattr__(self, "sign", sign)
        object.__setattr__(self, "layer", layer)
        object.__setattr__(self, "mag", mag)

    # ------------------------------------------------------------------
    # Smart constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_components(cls, sign: int, layer: int, mag: float) -> "Magnitude":
        return cls(sign=sign, layer=layer, mag=mag)

    @classmethod
    def from_float(cls, x: float) -> "Magnitude":
        if math.isnan(x):
            return cls(sign=0, layer=0, mag=math.nan)
        return cls(sign=1 if x >= 0 else -1, layer=0, mag=abs(x))

    @classmethod
    def from_int(cls, n: int) -> "Magnitude":
        try:
            return cls.from_float(float(n))
        except OverflowError:
            return cls(sign=1 if n > 0 else -1, layer=1, mag=math.log10(abs(n)))

    @classmethod
    def from_string(cls, text: str) -> "Magnitude":
        """Parse ``"123.4"``, ``"1e500"``, ``"1e1e10"``, ``"eee5"`` or ``"(e^7)12"``."""
        s = text.strip().lower()
        if not s:
            raise ValueError("Cannot build a Magnitude from an empty string.")
        if s == "nan":
            return NAN
        if s in ("inf", "infinity", "+inf", "+infinity"):
            return INF
        if s in ("-inf", "-infinity"):
            return NEG_INF
        if s[0] == "-":
            return -cls.from_string(s[1:])
        if s[0] == "+":
            return cls.from_string(s[1:])

        tower = _TOWER_RE.match(s)
        if tower is not None:
            return tetrate(TEN, int(tower.group(1)), cls.from_string(tower.group(2)))
        if s[0] == "e":
            rest = s.lstrip("e")
            return tetrate(TEN, len(s) - len(rest), cls.from_string(rest))
        if "e" in s:
            mantissa, _, exponent = s.partition("e")
            exp_m = cls.from_string(exponent)
            if exp_m.layer == 0 and exp_m.mag < 300:
                return cls.from_float(float(s))
            return cls.from_float(float(mantissa)) * exp_m.pow10()
        if s.isdigit():
            return cls.from_int(int(s))
        return cls.from_float(float(s))

    @classmethod
    def from_value(cls, value: MagnitudeLike) -> "Magnitude":
        return to_magnitude(value)

    # ------------------------------------------------------------------
    # Predicates & conversion
    # ------------------------------------------------------------------

    def is_nan(self) -> bool:
        return math.isnan(self.mag)

    def is_infinite(self) -> bool:
        return math.isinf(self.mag)

    def is_finite(self) -> bool:
        return math.isfinite(self.mag)

    def is_integer(self) -> bool:
        if not self.is_finite():
            return False
        if self.layer == 0:
            return float(self.mag).is_integer()
        return self.mag > 0

    def sgn(self) -> int:
        return self.sign

    def to_float(self) -> float:
        if self.is_nan():
            return math.nan
        if self.layer == 0:
            return self.sign * self.mag
        if self.layer == 1:
            try:
                return self.sign * 10.0 ** self.mag
            except OverflowError:
                return self.sign * math.inf
        return self.sign * (math.inf if self.mag > 0 else 0.0)

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        return int(self.to_float())

    def __bool__(self) -> bool:
        return self.sign != 0 or self.is_nan()

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _abs_key(self) -> tuple[float, float]:
        if self.is_infinite():
            return (math.inf, 0.0)
        if self.sign == 0:
            return (-math.inf, 0.0)
        return (self.layer if self.mag > 0 else -self.layer, self.mag)

    def cmpabs(self, other: MagnitudeLike) -> int:
        o = to_magnitude(other)
        a, b = self._abs_key(), o._abs_key()
        return (a > b) - (a < b)

    def cmp(self, other: MagnitudeLike) -> Optional[int]:
        """Three-way comparison; ``None`` when either side is NaN."""
        o = to_magnitude(other)
        if self.is_nan() or o.is_nan():
            return None
        if self.sign != o.sign:
            return (self.sign > o.sign) - (self.sign < o.sign)
        if self.sign == 0:
            return 0
        return self.cmpabs(o) * self.sign

    def _cmp_or_none(self, other: object) -> Optional[int]:
        o = _coerce(other)
        if o is None:
            return None
        return self.cmp(o)

    def __eq__(self, other: object) -> bool:
        if _coerce(other) is None:
            return NotImplemented
        return self._cmp_or_none(other) == 0

    def __ne__(self, other: object) -> bool:
        if _coerce(other) is None:
            return NotImplemented
        return self._cmp_or_none(other) != 0

    def __lt__(self, other: MagnitudeLike) -> bool:
        c = self._cmp_or_none(other)
        return c is not None and c < 0

    def __le__(self, other: MagnitudeLike) -> bool:
        c = self._cmp_or_none(other)
        return c is not None and c <= 0

    def __gt__(self, other: MagnitudeLike) -> bool:
        c = self._cmp_or_none(other)
        return c is not None and c > 0

    def __ge__(self, other: MagnitudeLike) -> bool:
        c = self._cmp_or_none(other)
        return c is not None and c >= 0

    def __hash__(self) -> int:
        if self.layer == 0 and self.is_finite():
            return hash(self.sign * self.mag)
        return hash((self.sign, self.layer, self.mag))

    def max(self, other: MagnitudeLike) -> "Magnitude":
        o = to_magnitude(other)
        return o if o > self else self

    def min(self, other: MagnitudeLike) -> "Magnitude":
        o = to_magnitude(other)
        return o if o < self else self

    def eq_tolerance(self, other: MagnitudeLike, tolerance: float = 1e-7) -> bool:
        """Relative equality, usable across layers."""
        o = to_magnitude(other)
        if self.is_nan() or o.is_nan():
            return False
        if self.sign != o.sign:
            return False
        if self.is_infinite() or o.is_infinite():
            return self.is_infinite() and o.is_infinite()
        if self.layer == o.layer:
            if self.layer == 0:
                return math.isclose(self.mag, o.mag, rel_tol=tolerance, abs_tol=0.0)
            return math.isclose(self.mag, o.mag, rel_tol=tolerance, abs_tol=tolerance)
        # Neighbouring layers: compare through one logarithm.
        return self.abs().log10().eq_tolerance(o.abs().log10(), tolerance)

    # ------------------------------------------------------------------
    # Unary operations
    # ------------------------------------------------------------------

    def neg(self) -> "Magnitude":
        return _mk(-self.sign, self.layer, self.mag)

    def abs(self) -> "Magnitude":
        if self.sign < 0:
            return self.neg()
        return self

    def recip(self) -> "Magnitude":
        if self.is_nan():
            return NAN
        if self.sign == 0:
            return INF
        if self.is_infinite():
            return ZERO
        if self.layer == 0:
            return Magnitude.from_float(self.sign / self.mag)
        return _mk(self.sign, self.layer, -self.mag)

    def __neg__(self) -> "Magnitude":
        return self.neg()

    def __pos__(self) -> "Magnitude":
        return self

    def __abs__(self) -> "Magnitude":
        return self.abs()

    def floor(self) -> "Magnitude":
        if not self.is_finite():
            return self
        if self.layer == 0:
            return Magnitude.from_float(float(math.floor(self.sign * self.mag)))
        if self.mag > 0:
            return self
        return ZERO if self.sign > 0 else Magnitude.from_float(-1.0)

    def ceil(self) -> "Magnitude":
        if not self.is_finite():
            return self
        if self.layer == 0:
            return Magnitude.from_float(float(math.ceil(self.sign * self.mag)))
        if self.mag > 0:
            return self
        return ONE if self.sign > 0 else ZERO

    def round(self) -> "Magnitude":
        """Round half up, the same way as ``Math.round`` in a browser."""
        if not self.is_finite():
            return self
        if self.layer == 0:
            return Magnitude.from_float(float(math.floor(self.sign * self.mag + 0.5)))
        if self.mag > 0:
            return self
        return ZERO

    def trunc(self) -> "Magnitude":
        if not self.is_finite():
            return self
        if self.layer == 0:
            return Magnitude.from_float(float(math.trunc(self.sign * self.mag)))
        if self.mag > 0:
            return self
        return ZERO

    # ------------------------------------------------------------------
    # Field operations
    # ------------------------------------------------------------------

    def add(self, other: MagnitudeLike) -> "Magnitude":
        o = to_magnitude(other)
        if self.is_nan() or o.is_nan():
            return NAN
        if self.is_infinite():
            if o.is_infinite() and o.sign != self.sign:
                return NAN
            return self
        if o.is_infinite():
            return o
        if self.sign == 0:
            return o
        if o.sign == 0:
            return self
        if self.sign == -o.sign and self.layer == o.layer and self.mag == o.mag:
            return ZERO
        if self.layer == 0 and o.layer == 0:
            return Magnitude.from_float(self.sign * self.mag + o.sign * o.mag)

        big, small = (self, o) if self.cmpabs(o) >= 0 else (o, self)
        la, lb = big._abs_log10_float(), small._abs_log10_float()
        if la == math.inf or lb == -math.inf:
            return big
        diff = la - lb
        if diff > MAX_SIGNIFICANT_DIGITS:
            return big
        factor = 1 + big.sign * small.sign * 10.0 ** (-diff)
        if factor <= 0:
            return ZERO
        return _mk(big.sign, 1, la + math.log10(factor))

    def sub(self, other: MagnitudeLike) -> "Magnitude":
        return self.add(to_magnitude(other).neg())

    def mul(self, other: MagnitudeLike) -> "Magnitude":
        o = to_magnitude(other)
        if self.is_nan() or o.is_nan():
            return NAN
        if self.sign == 0 or o.sign == 0:
            if self.is_infinite() or o.is_infinite():
                return NAN
            return ZERO
        sign = self.sign * o.sign
        if self.is_infinite() or o.is_infinite():
            return INF if sign > 0 else NEG_INF
        if self.layer == 0 and o.layer == 0:
            return Magnitude.from_float(sign * self.mag * o.mag)
        product = self.abs_log10().add(o.abs_log10()).pow10()
        return product if sign > 0 else product.neg()

    def div(self, other: MagnitudeLike) -> "Magnitude":
        o = to_magnitude(other)
        if self.layer == 0 and o.layer == 0 and o.sign != 0 and self.is_finite() and o.is_finite():
            return Magnitude.from_float((self.sign * self.mag) / (o.sign * o.mag))
        return self.mul(o.recip())

    def mod(self, other: MagnitudeLike) -> "Magnitude":
        """Floored modulo – the result takes the sign of *other*."""
        o = to_magnitude(other)
        a, b = self.to_float(), o.to_float()
        if b == 0 or math.isnan(a) or math.isnan(b):
            return NAN
        if math.isinf(a):
            return ZERO if self.is_finite() else NAN
        if math.isinf(b):
            return self
        return Magnitude.from_float(a % b)

    def __add__(self, other):
        return _binary(self, other, Magnitude.add)

    def __radd__(self, other):
        return _binary(self, other, Magnitude.add)

    def __sub__(self, other):
        return _binary(self, other, Magnitude.sub)

    def __rsub__(self, other):
        return _rbinary(self, other, Magnitude.sub)

    def __mul__(self, other):
        return _binary(self, other, Magnitude.mul)

    def __rmul__(self, other):
        return _binary(self, other, Magnitude.mul)

    def __truediv__(self, other):
        return _binary(self, other, Magnitude.div)

    def __rtruediv__(self, other):
        return _rbinary(self, other, Magnitude.div)

    def __mod__(self, other):
        return _binary(self, other, Magnitude.mod)

    def __pow__(self, other):
        return _binary(self, other, Magnitude.pow)

    def __rpow__(self, other):
        return _rbinary(self, other, Magnitude.pow)

    # ------------------------------------------------------------------
    # Exponentials & logarithms
    # ------------------------------------------------------------------

    def _abs_log10_float(self) -> float:
        if self.sign == 0:
            return -math.inf
        if self.layer == 0:
            return math.log10(self.mag)
        if self.layer == 1:
            return self.mag
        return math.inf if self.mag > 0 else -math.inf

    def abs_log10(self) -> "Magnitude":
        if self.is_nan():
            return NAN
        if self.sign == 0:
            return NEG_INF
        if self.is_infinite():
            return INF
        if self.layer == 0:
            return Magnitude.from_float(math.log10(self.mag))
        return _mk(1 if self.mag >= 0 else -1, self.layer - 1, abs(self.mag))

    def log10(self) -> "Magnitude":
        if self.sign < 0:
            return NAN
        return self.abs_log10()

    def log(self, base: MagnitudeLike = 10) -> "Magnitude":
        b = to_magnitude(base)
        if self.sign < 0 or b.sign <= 0 or b == ONE:
            return NAN
        if b == TEN:
            return self.log10()
        if self.layer == 0 and b.layer == 0 and self.is_finite() and self.sign > 0:
            return Magnitude.from_float(math.log(self.mag) / math.log(b.mag))
        return self.abs_log10().div(b.abs_log10())

    def ln(self) -> "Magnitude":
        return self.log(math.e)

    def pow10(self) -> "Magnitude":
        """Return ``10 ** self``."""
        if self.is_nan():
            return NAN
        if self.is_infinite():
            return INF if self.sign > 0 else ZERO
        if self.layer == 0:
            exponent = self.sign * self.mag
            if -300 < exponent < 300:
                return Magnitude.from_float(10.0 ** exponent)
            return _mk(1, 1, exponent)
        if self.mag < 0:
            return Magnitude.from_float(10.0 ** self.to_float())
        return _mk(1, self.layer + 1, self.sign * self.mag)

    def pow(self, other: MagnitudeLike) -> "Magnitude":
        o = to_magnitude(other)
        if self.is_nan() or o.is_nan():
            return NAN
        if o.sign == 0:
            return ONE
        if self.sign == 0:
            return ZERO if o.sign > 0 else INF
        if self == ONE:
            return ONE
        if self.sign < 0:
            if not o.is_integer():
                return NAN
            result = self.neg().pow(o)
            odd = o.layer == 0 and int(o.mag) % 2 == 1
            return result.neg() if odd else result
        if self.layer == 0 and o.layer == 0 and self.is_finite() and o.is_finite():
            try:
                value = math.pow(self.mag, o.sign * o.mag)
            except OverflowError:
                value = math.inf
            if value != 0 and math.isfinite(value):
                return Magnitude.from_float(value)
        if self == TEN:
            return o.pow10()
        return self.abs_log10().mul(o).pow10()

    def sqrt(self) -> "Magnitude":
        return self.pow(0.5)

    def root(self, n: MagnitudeLike) -> "Magnitude":
        return self.pow(to_magnitude(n).recip())

    # ------------------------------------------------------------------
    # Hyper-operators (method form, ``self`` is the base unless noted)
    # ------------------------------------------------------------------

    def tetrate(self, height: float = 2.0, payload: MagnitudeLike = 1) -> "Magnitude":
        return tetrate(self, height, payload)

    def iteratedexp(self, height: float = 2.0, payload: MagnitudeLike = 1) -> "Magnitude":
        return tetrate(self, height, payload)

    def iteratedlog(self, base: MagnitudeLike = 10, times: float = 1.0) -> "Magnitude":
        """Apply ``log(base)`` *times* times to ``self``."""
        return iteratedlog(self, base, times)

    def slog(self, base: MagnitudeLike = 10) -> "Magnitude":
        return slog(self, base)

    def layeradd(self, diff: float, base: MagnitudeLike = 10) -> "Magnitude":
        return layeradd(self, diff, base)

    def pentate(self, height: float = 2.0, payload: MagnitudeLike = 1) -> "Magnitude":
        return pentate(self, height, payload)

    def penta_log(self, base: MagnitudeLike = 10) -> "Magnitude":
        return penta_log(self, base)

    # ------------------------------------------------------------------
    # Pretty printing
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        if self.is_nan():
            return "NaN"
        if self.is_infinite():
            return "Infinity" if self.sign > 0 else "-Infinity"
        prefix = "-" if self.sign < 0 else ""
        if self.layer == 0:
            return prefix + f"{self.mag:.15g}"
        if self.mag < 0:
            return prefix + "1 / " + str(self.abs().recip())
        if self.layer == 1:
            exponent = math.floor(self.mag)
            mantissa = 10.0 ** (self.mag - exponent)
            return prefix + f"{mantissa:.12g}e{exponent}"
        inner = str(_mk(1, 1, self.mag))
        if self.layer <= 5:
            return prefix + "e" * (self.layer - 1) + inner
        return prefix + f"(e^{self.layer - 1}){inner}"


# -----------------------------------------------------------------------------
# Helper utilities
# -----------------------------------------------------------------------------

_TOWER_RE = re.compile(r"^\(e\^(\d+)\)(.+)$")


def _mk(sign: int, layer: int, mag: float) -> Magnitude:
    return Magnitude(sign=sign, layer=layer, mag=mag)


def _coerce(value: object) -> Optional[Magnitude]:
    if isinstance(value, Magnitude):
        return value
    if isinstance(value, (numbers.Real, str)):
        return to_magnitude(value)  # type: ignore[arg-type]
    return None


def _binary(self: Magnitude, other: object, op) -> Magnitude:
    o = _coerce(other)
    if o is None:
        return NotImplemented
    return op(self, o)


def _rbinary(self: Magnitude, other: object, op) -> Magnitude:
    o = _coerce(other)
    if o is None:
        return NotImplemented
    return op(o, self)


def to_magnitude(value: MagnitudeLike) -> Magnitude:
    """Coerce ints, floats, numeric strings and Magnitudes into a Magnitude."""
    if isinstance(value, Magnitude):
        return value
    if isinstance(value, bool):
        return Magnitude.from_float(float(value))
    if isinstance(value, int):
        return Magnitude.from_int(value)
    if isinstance(value, float):
        return Magnitude.from_float(value)
    if isinstance(value, str):
        return Magnitude.from_string(value)
    if isinstance(value, numbers.Real):
        return Magnitude.from_float(float(value))
    raise TypeError(f"Cannot convert {type(value).__name__} to Magnitude")


# -----------------------------------------------------------------------------
# Hyper-operators
# -----------------------------------------------------------------------------


def _infinite_tower(base: Magnitude) -> Magnitude:
    if base.sign <= 0:
        return NAN
    if base.to_float() > CONVERGENCE_LIMIT:
        return INF
    x = ONE
    for _ in range(_MAX_TOWER_STEPS):
        nxt = base.pow(x)
        if nxt.eq_tolerance(x, 1e-15):
            return nxt
        x = nxt
    return x


def tetrate(base: MagnitudeLike, height: float = 2.0, payload: MagnitudeLike = 1) -> Magnitude:
    """``base`` exponentiated onto ``payload`` *height* times.

    Fractional heights use the linear approximation; negative heights
    delegate to :func:`iteratedlog`.
    """
    b = to_magnitude(base)
    p = to_magnitude(payload)
    h = float(height)
    if math.isnan(h) or b.is_nan() or p.is_nan():
        return NAN
    if h == math.inf:
        return _infinite_tower(b)
    if h == -math.inf:
        return NAN
    if h < 0:
        return iteratedlog(p, b, -h)
    if h == 0:
        return p
    if b == ONE:
        return ONE

    whole = int(h)
    frac = h - whole
    if frac != 0:
        if p == ONE:
            whole += 1
            p = Magnitude.from_float(frac)
        else:
            p = layeradd(p, frac, b)

    for i in range(whole):
        p = b.pow(p)
        if not p.is_finite():
            return p
        if p.layer - b.layer > 3:
            return _mk(p.sign, p.layer + (whole - i - 1), p.mag)
        if i > _MAX_TOWER_STEPS:
            return p
    return p


iteratedexp = tetrate


def iteratedlog(value: MagnitudeLike, base: MagnitudeLike = 10, times: float = 1.0) -> Magnitude:
    """Apply ``log(base)`` to *value* *times* times (fractional times allowed)."""
    x = to_magnitude(value)
    b = to_magnitude(base)
    t = float(times)
    if math.isnan(t):
        return NAN
    if t < 0:
        return tetrate(b, -t, x)
    whole = int(t) if math.isfinite(t) else 0
    frac = t - whole if math.isfinite(t) else 0.0

    if whole > 0 and x.sign > 0 and x.mag > 0 and x.layer - b.layer > 3:
        loss = min(whole, x.layer - b.layer - 3)
        whole -= loss
        x = _mk(x.sign, x.layer - loss, x.mag)

    for _ in range(whole):
        x = x.log(b)
        if not x.is_finite():
            return x
    if frac > 0:
        x = layeradd(x, -frac, b)
    return x


def slog(value: MagnitudeLike, base: MagnitudeLike = 10) -> Magnitude:
    """Super-logarithm: the height *h* for which ``tetrate(base, h) == value``."""
    x = to_magnitude(value)
    b = to_magnitude(base)
    if x.is_nan() or b.is_nan() or b <= ONE:
        return NAN
    if x.is_infinite():
        return INF if x.sign > 0 else NAN

    result = 0.0
    if x.sign > 0 and x.mag > 0 and x.layer - b.layer > 3:
        loss = x.layer - b.layer - 3
        result += loss
        x = _mk(x.sign, x.layer - loss, x.mag)

    for _ in range(100):
        if x < ZERO:
            x = b.pow(x)
            result -= 1
        elif x <= ONE:
            return Magnitude.from_float(result + x.to_float() - 1)
        else:
            result += 1
            x = x.log(b)
    return Magnitude.from_float(result)


def layeradd(value: MagnitudeLike, diff: float, base: MagnitudeLike = 10) -> Magnitude:
    """Add *diff* to the super-logarithm of *value* and map back."""
    b = to_magnitude(base)
    dest = slog(value, b).to_float() + diff
    if math.isnan(dest):
        return NAN
    if dest >= 0:
        return tetrate(b, dest)
    if not math.isfinite(dest):
        return NAN
    if dest >= -1:
        return tetrate(b, dest + 1).log(b)
    return tetrate(b, dest + 2).log(b).log(b)


def pentate(base: MagnitudeLike, height: float = 2.0, payload: MagnitudeLike = 1) -> Magnitude:
    """Iterated tetration, linear between integer heights."""
    b = to_magnitude(base)
    p = to_magnitude(payload)
    h = float(height)
    if math.isnan(h) or b.is_nan() or p.is_nan():
        return NAN
    if h == math.inf:
        return INF if b.to_float() > CONVERGENCE_LIMIT else NAN
    if h < 0:
        return _penta_iteratedlog(p, b, -h)

    whole = int(h)
    frac = h - whole
    if frac != 0:
        if p == ONE:
            whole += 1
            p = Magnitude.from_float(frac)
        else:
            p = _penta_layeradd(p, frac, b)

    for _ in range(whole):
        p = tetrate(b, p.to_float())
        if not p.is_finite():
            return p
    return p


def penta_log(value: MagnitudeLike, base: MagnitudeLike = 10) -> Magnitude:
    """Inverse of :func:`pentate` with payload one."""
    x = to_magnitude(value)
    b = to_magnitude(base)
    if x.is_nan() or b.is_nan() or b <= ONE:
        return NAN
    result = 0.0
    for _ in range(100):
        if x.is_infinite():
            return INF if x.sign > 0 else NAN
        if x > ONE:
            x = slog(x, b)
            result += 1
        else:
            return Magnitude.from_float(result + x.to_float() - 1)
    return Magnitude.from_float(result)


def _penta_layeradd(value: Magnitude, diff: float, base: Magnitude) -> Magnitude:
    dest = penta_log(value, base).to_float() + diff
    if not math.isfinite(dest):
        return NAN
    if dest >= 0:
        return pentate(base, dest)
    if dest >= -1:
        return slog(pentate(base, dest + 1), base)
    return NAN


def _penta_iteratedlog(value: Magnitude, base: Magnitude, times: float) -> Magnitude:
    whole = int(times)
    frac = times - whole
    for _ in range(whole):
        value = slog(value, base)
        if not value.is_finite():
            return value
    if frac > 0:
        value = _penta_layeradd(value, -frac, base)
    return value


# -- exponent-multiplier variants ----------------------------------------------
# Each exponentiation is ``base^(x / mult)``, i.e. plain iteration with the
# effective base ``base^(1/mult)``.


def _effective_base(base: MagnitudeLike, mult: MagnitudeLike) -> Magnitude:
    return to_magnitude(base).pow(to_magnitude(mult).recip())


def iteratedexp_mult(base: MagnitudeLike, payload: MagnitudeLike, height: float, mult: MagnitudeLike = 1) -> Magnitude:
    return tetrate(_effective_base(base, mult), height, payload)


def iteratedlog_mult(value: MagnitudeLike, base: MagnitudeLike, times: float, mult: MagnitudeLike = 1) -> Magnitude:
    return iteratedlog(value, _effective_base(base, mult), times)


def slog_mult(value: MagnitudeLike, base: MagnitudeLike, mult: MagnitudeLike = 1) -> Magnitude:
    return slog(value, _effective_base(base, mult))


# -----------------------------------------------------------------------------
# Sentinels
# -----------------------------------------------------------------------------

ZERO = Magnitude()
ONE = Magnitude(sign=1, layer=0, mag=1.0)
TEN = Magnitude(sign=1, layer=0, mag=10.0)
NAN = Magnitude(sign=0, layer=0, mag=math.nan)
INF = Magnitude(sign=1, layer=0, mag=math.inf)
NEG_INF = Magnitude(sign=-1, layer=0, mag=math.inf)
