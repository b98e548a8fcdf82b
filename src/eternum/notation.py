"""The notation contract.

A :class:`Notation` turns a :class:`~eternum.magnitude.Magnitude` into text.
Concrete notations implement a single method, :meth:`Notation.format_decimal`,
which only ever sees finite, non-negative values.  :meth:`Notation.format`
layers the shared behaviour on top:

* NaN renders as ``nan_string``;
* values matching the ``is_infinite`` predicate render as
  ``infinity_string`` (or the negative variant);
* non-zero values whose reciprocal is "infinite" render like zero;
* negative values go through :meth:`Notation.format_negative_decimal`,
  which by default wraps the positive rendering in ``negative_string``.

Notations delegate coordinates to *inner* notations, and nothing prevents a
notation from (transitively) being its own inner notation.  Every
:meth:`~Notation.format` call therefore counts how deeply it is nested on the
current thread; past :data:`eternum.config.MAX_NESTING_DEPTH` the value is
rendered with plain :class:`str` instead.
"""

from __future__ import annotations

import abc
import logging
import threading
from typing import Callable, Optional, Tuple, TypeAlias

from . import config
from .magnitude import INF, NEG_INF, ZERO, Magnitude, MagnitudeLike, to_magnitude

logger = logging.getLogger(__name__)

__all__ = [
    "Notation",
    "CustomNotation",
    "InfinitePredicate",
    "Wrapper",
    "default_is_infinite",
    "nesting_depth",
]

# -- Type aliases -----------------------------------------------------------------
InfinitePredicate: TypeAlias = Callable[[Magnitude], bool]
Wrapper: TypeAlias = Tuple[str, str]  # (prefix, suffix)

_state = threading.local()


def default_is_infinite(value: Magnitude) -> bool:
    return value.is_infinite()


def nesting_depth() -> int:
    """Number of :meth:`Notation.format` calls active on this thread."""
    return getattr(_state, "depth", 0)


class Notation(abc.ABC):
    """Abstract base of every notation.

    The shared settings can be passed to :meth:`set_notation_globals` after
    construction, builder style::

        DefaultNotation().set_notation_globals(negative_string=("(", ")"))
    """

    name: str = ""

    def __init__(self):
        self.negative_string: Wrapper = ("-", "")
        self.infinity_string: str = "Infinite"
        self.negative_infinity_string: Optional[str] = None
        self.nan_string: str = "???"
        self.is_infinite: InfinitePredicate = default_is_infinite

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def format(self, value: MagnitudeLike) -> str:
        """Render *value*; never raises for NaN, infinities or finite input."""
        decimal = to_magnitude(value)
        depth = nesting_depth()
        if depth >= config.MAX_NESTING_DEPTH:
            logger.warning("%s nested %d levels deep, rendering %s as plain text", self.name or type(self).__name__, depth, decimal)
            return str(decimal)
        _state.depth = depth + 1
        try:
            return self.format_value(decimal)
        finally:
            _state.depth = depth

    def format_value(self, value: Magnitude) -> str:
        """Dispatch on the kind of *value*; :meth:`format` minus the nesting guard."""
        if value.is_nan():
            return self.nan_string
        if self.is_infinite(value):
            return self.negative_infinite if value.sgn() < 0 else self.infinite
        if value != 0 and self.is_infinite(value.recip()):
            return self.format(ZERO)
        if value.sgn() < 0:
            return self.format_negative_decimal(value.abs())
        return self.format_decimal(value)

    def format_negative_decimal(self, value: Magnitude) -> str:
        """Render ``-value`` for a positive *value*."""
        return self.negative_string[0] + self.format_decimal(value) + self.negative_string[1]

    @abc.abstractmethod
    def format_decimal(self, value: Magnitude) -> str:
        """Render a finite, non-negative *value*."""

    # ------------------------------------------------------------------
    # Shared settings
    # ------------------------------------------------------------------

    @property
    def infinite(self) -> str:
        return self.infinity_string

    @property
    def negative_infinite(self) -> str:
        if self.negative_infinity_string is None:
            return self.negative_string[0] + self.infinity_string + self.negative_string[1]
        return self.negative_infinity_string

    _UNSET = object()

    def set_notation_globals(
        self,
        negative_string: Optional[Wrapper] = None,
        infinity_string: Optional[str] = None,
        negative_infinity_string=_UNSET,
        nan_string: Optional[str] = None,
        is_infinite: Optional[InfinitePredicate] = None,
    ):
        """Update the settings every notation shares and return ``self``.

        ``None`` leaves a setting untouched, except for
        *negative_infinity_string* where ``None`` means "derive it from the
        negative and infinity strings".
        """
        if negative_string is not None:
            self.negative_string = tuple(negative_string)
        if infinity_string is not None:
            self.infinity_string = infinity_string
        if negative_infinity_string is not Notation._UNSET:
            self.negative_infinity_string = negative_infinity_string
        if nan_string is not None:
            self.nan_string = nan_string
        if is_infinite is not None:
            self.is_infinite = is_infinite
        return self

    def set_name(self, name: str):
        self.name = name
        return self

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


class CustomNotation(Notation):
    """Notation backed by an arbitrary ``Magnitude -> str`` function.

    Unless *negative_string_used* is set the function also receives negative
    values, and unless *infinity_string_used* is set it receives the
    infinities too.
    """

    name = "Custom Notation"

    def __init__(
        self,
        func: Callable[[Magnitude], str],
        negative_string_used: bool = False,
        infinity_string_used: bool = False,
    ):
        super().__init__()
        self.func = func
        self.negative_string_used = negative_string_used
        self.infinity_string_used = infinity_string_used

    def format_value(self, value: Magnitude) -> str:
        if value.is_nan():
            return self.nan_string
        if self.is_infinite(value):
            if self.infinity_string_used:
                return self.negative_infinite if value.sgn() < 0 else self.infinite
            if value.sgn() < 0:
                if self.negative_string_used:
                    return self.format_negative_decimal(INF)
                return self.format_decimal(NEG_INF)
            return self.format_decimal(INF)
        if value != 0 and self.is_infinite(value.recip()):
            return self.format(ZERO)
        if value.sgn() < 0 and self.negative_string_used:
            return self.format_negative_decimal(value.abs())
        return self.format_decimal(value)

    def format_decimal(self, value: Magnitude) -> str:
        return self.func(value)
