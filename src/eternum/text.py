"""Plain-number text helpers shared by the notations."""

from __future__ import annotations

import math
from typing import Sequence

__all__ = ["commas_and_decimals", "add_commas", "delimiter_order"]


def _half_up(x: float) -> int:
    return math.floor(x + 0.5)


def _split10(value: float) -> tuple[float, int]:
    exponent = math.floor(math.log10(value))
    mantissa = value / 10.0 ** exponent
    if mantissa >= 10:
        mantissa /= 10
        exponent += 1
    elif mantissa < 1:
        mantissa *= 10
        exponent -= 1
    return mantissa, exponent


def delimiter_order(start: Sequence[int], permutation: int, inserts: Sequence[int]) -> list[int]:
    """Build a rendering order by inserting each of *inserts* into *start*.

    Each item goes to position ``(permutation // radix) % (len(order) + 1)``
    where *radix* is the product of the earlier slot counts, so every
    permutation number below ``(len(start) + len(inserts))! / len(start)!``
    picks a different order.
    """
    order = list(start)
    radix = 1
    for item in inserts:
        slots = len(order) + 1
        order.insert((permutation // radix) % slots, item)
        radix *= slots
    return order


def add_commas(text: str, comma_chars: Sequence[str] = (",",), spacing: int = 3) -> str:
    """Insert separators every *spacing* characters, counting from the right.

    Separators cycle through *comma_chars*, so ``("'", ",")`` alternates.
    """
    groups = []
    while len(text) > spacing:
        groups.append(text[-spacing:])
        text = text[:-spacing]
    result = text
    for i, group in enumerate(reversed(groups)):
        result += comma_chars[(len(groups) - 1 - i) % len(comma_chars)] + group
    return result


def commas_and_decimals(
    value: float,
    places_above_1: int = -4,
    places_below_1: int = -4,
    commas: float = 0,
    decimal_char: str = ".",
    comma_char: str = ",",
) -> str:
    """Render an ordinary float with grouping and a fixed number of places.

    Parameters
    ----------
    value:
        Number to render.
    places_above_1, places_below_1:
        Decimal places shown for values ``>= 1`` and ``< 1``.  A negative count
        means that many significant figures instead, although digits before
        the decimal point are never dropped.
    commas:
        Smallest value that gets grouping separators; negative disables them.
    decimal_char, comma_char:
        Literal decimal point and grouping separator.
    """
    if value == 0:
        return "0"
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    places = places_below_1 if abs(value) < 1 else places_above_1
    places = min(places, 16)
    negative = value < 0
    value = abs(value)
    mantissa, exponent = _split10(value)
    sig_figs = places < 0
    if sig_figs:
        places = max(-places - exponent - 1, 0)

    def again(x: float) -> str:
        return commas_and_decimals(x, places_above_1, places_below_1, commas, decimal_char, comma_char)

    if value >= 1e21:
        mantissa = _half_up(mantissa * 10 ** places) / 10 ** places
        if mantissa >= 10:
            mantissa /= 10
            exponent += 1
            if sig_figs and places > 0:
                places -= 1
                mantissa = _half_up(mantissa * 10 ** places) / 10 ** places
        result = again(mantissa) + "e" + ("+" if exponent >= 0 else "") + str(exponent)
    elif value < 1:
        ending = _half_up(value * 10 ** places)
        if ending >= 10 ** (places + exponent + 1):
            exponent += 1
        if ending == 0:
            return "0"
        if exponent >= 0:
            result = again(ending / 10 ** places)
        else:
            digits = str(ending).zfill(places + exponent + 1).rstrip("0")
            result = "0" + decimal_char + "0" * (-exponent - 1) + digits
    else:
        whole = math.trunc(value)
        leftover = _half_up((value - whole) * 10 ** places)
        if leftover >= 10 ** places:
            leftover -= 10 ** places
            whole += 1
        result = str(whole)
        if commas >= 0 and value >= commas:
            result = add_commas(result, [comma_char])
        if leftover != 0:
            result += decimal_char + str(leftover).zfill(places).rstrip("0")
    if negative:
        result = "-" + result
    return result
