"""The fallback notation every other notation uses for its coordinates."""

from __future__ import annotations

from .decompose import hyperscientific_split, scientific_split
from .magnitude import Magnitude, MagnitudeLike, slog, tetrate, to_magnitude
from .notation import Notation
from .text import commas_and_decimals

__all__ = ["DefaultNotation"]


class DefaultNotation(Notation):
    """Plain numbers, then ``1.23e456``, then ``ee1.23e456``, then ``1.23F7``.

    Parameters
    ----------
    places_above_1, places_below_1:
        Decimal places (negative: significant figures) shown for values at
        least one and below one.
    commas_min:
        Smallest value that gets grouping separators; negative disables them.
    maxnum:
        Values from here on use scientific form; also the largest exponent
        shown before switching to leading ``e``'s.
    minnum:
        Positive values below this use scientific form with a negative
        exponent.
    max_es_in_a_row:
        Most leading ``e``'s before switching to ``F`` (tetration) form.
    """

    name = "Default Notation"

    def __init__(
        self,
        places_above_1: int = -4,
        places_below_1: int = -4,
        commas_min: MagnitudeLike = 0,
        maxnum: MagnitudeLike = 1e12,
        minnum: MagnitudeLike = 1e-6,
        max_es_in_a_row: int = 5,
        decimal_char: str = ".",
        comma_char: str = ",",
    ):
        super().__init__()
        self.places_above_1 = places_above_1
        self.places_below_1 = places_below_1
        self.commas_min = to_magnitude(commas_min)
        self.maxnum = to_magnitude(maxnum)
        self.minnum = to_magnitude(minnum)
        self.max_es_in_a_row = max_es_in_a_row
        self.decimal_char = decimal_char
        self.comma_char = comma_char

    def _plain(self, x: float) -> str:
        return commas_and_decimals(
            x, self.places_above_1, self.places_below_1, self.commas_min.to_float(), self.decimal_char, self.comma_char
        )

    def format_decimal(self, value: Magnitude) -> str:
        if value == 0:
            return "0"
        if self.minnum <= value < self.maxnum:
            return self._plain(value.to_float())

        places = self.places_above_1 if value >= 1 else self.places_below_1
        if places < 0:
            # Mantissas sit in [1, 10), so n significant figures are n - 1 places.
            places = -places - 1
        rounding = 10.0 ** -places
        neg_exp = False
        if value < 1:
            neg_exp = True
            m, e = scientific_split(value, 10, rounding)
            value = e.neg().pow10().mul(m)

        if value < self.maxnum.pow10():
            m, e = scientific_split(value, 10, rounding)
            exponent = e.neg() if neg_exp else e
            return self._plain(m.to_float()) + "e" + self._plain(exponent.to_float())
        if value < tetrate(10, self.max_es_in_a_row + 1, self.maxnum):
            result = ""
            while value >= self.maxnum.pow10():
                result += "e"
                value = value.log10()
            if neg_exp:
                value = value.neg()
            return result + self.format(value)
        if value < tetrate(10, self.maxnum.to_float()):
            m, e = hyperscientific_split(value, 10, rounding)
            exponent = e.neg() if neg_exp else e
            return self._plain(m.to_float()) + "F" + self._plain(exponent.to_float())
        height = slog(value, 10)
        if neg_exp:
            height = height.neg()
        return "F" + self.format(height)
