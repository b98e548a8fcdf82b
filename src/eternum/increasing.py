"""Scientific-style notation for an arbitrary increasing function.

:class:`IncreasingFunctionScientificNotation` writes a value as the argument
tuple of a user supplied function, e.g. ``lambda m, e: m * 10 ** e`` gives
plain scientific notation and ``lambda a, b, c: a + b * 60 + c * 3600`` gives
a clock.  Values too large for the function are first reduced by an
*iteration* function (``log10`` by default) and then by a *layer* function
(``slog10`` by default), and the number of reductions is written in front of
the result just like the leading ``e``'s of :class:`~eternum.scientific.ScientificNotation`.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from . import config
from .default import DefaultNotation
from .engineering import (
    Rounding,
    current_engineering_value,
    next_engineering_value,
    normalize_engineerings,
)
from .magnitude import INF, NEG_INF, ZERO, Magnitude, MagnitudeLike, slog, tetrate, to_magnitude
from .notation import Notation, Wrapper
from .solver import (
    EngineeringsSpec,
    IncreasingFunction,
    RevertPolicy,
    function_arity,
    increasing_function_split,
    increasing_inverse,
    validate_increasing,
)

logger = logging.getLogger(__name__)

__all__ = ["IncreasingFunctionScientificNotation", "ArgumentShown"]

ArgumentShown = Callable[[Magnitude, int, Tuple[Magnitude, ...]], bool]
# (outer prefix, outer suffix, argument prefix, argument suffix, final prefix, final suffix)
ArgumentChars = Tuple[str, str, str, str, str, str]


def _always_shown(value: Magnitude, index: int, arguments: Tuple[Magnitude, ...]) -> bool:
    return True


def _log10(value: Magnitude) -> Magnitude:
    return value.log10()


def _slog10(value: Magnitude) -> Magnitude:
    return slog(value, 10)


def _tetrate10(height: Magnitude) -> Magnitude:
    return tetrate(10, height.to_float())


def _inverse_of(func: Callable[[Magnitude], MagnitudeLike]) -> Callable[[Magnitude], Magnitude]:
    def inverse(value: Magnitude) -> Magnitude:
        return increasing_inverse(func, value)

    return inverse


def _integer_engineerings(engineerings, name: str) -> Tuple[Magnitude, ...]:
    steps = normalize_engineerings(engineerings)
    if not all(step.is_integer() and step > 0 for step in steps):
        raise ValueError(f"{name} must be positive integers")
    return steps


class IncreasingFunctionScientificNotation(Notation):
    """Write values as the arguments of a strictly increasing function.

    Parameters
    ----------
    func:
        Strictly increasing in each of its positional arguments; its last
        argument is the most significant.
    limits, limits_are_maximums, engineerings, rounding, range_limits, revert_values:
        Passed to :func:`~eternum.solver.increasing_function_split`.
    argument_order:
        Order the arguments are written in.  Missing indices are appended;
        the default writes the least significant argument first.
    argument_chars:
        Six strings per argument, see ``ArgumentChars``.  By default each
        argument is followed by ``", "`` except the last one written.
    argument_to_left:
        Write each argument in front of those already written.
    argument_shown:
        ``(value, index, arguments) -> bool``; hidden arguments are skipped.
    inner_notations:
        One notation per argument, ``None`` meaning this notation itself.
        Padded with :class:`~eternum.default.DefaultNotation`.
    iteration_maxnum, iteration_function, iteration_inverse_already:
        Values from *iteration_maxnum* on are passed through the inverse of
        *iteration_function* first (``10 ** x`` by default).  Set
        *iteration_inverse_already* if the function given is that inverse.
    layer_maxnum, layer_function, layer_inverse_already:
        Same for the coarser layer reduction (``tetrate(10, x)`` by default),
        tried before the iterations.
    iteration_chars, layer_chars:
        (prefix, suffix) pairs: around the result for the first reduction,
        for each further one, and around the count in the compact form.
    max_iterations_in_a_row, max_layers_in_a_row:
        Most reductions written out before the compact form is used.
    superexp_after:
        Put the compact iteration and layer counts after the result.
    iteration_engineerings, layer_engineerings:
        Allowed reduction counts; must be positive integers.
    min_value:
        Values below this are rendered by the first inner notation, or
        through *recip_string* if their reciprocal is at least *min_value*.
        Negative values at least *min_value* go to the function too.

    Raises
    ------
    ValueError
        For an empty *limits*, empty or inverted range limits, non-integer
        reduction engineerings or a function that is not increasing.
    """

    name = "Increasing Function Scientific Notation"

    def __init__(
        self,
        func: IncreasingFunction,
        limits: Sequence[MagnitudeLike] = (1,),
        limits_are_maximums: bool = False,
        engineerings: EngineeringsSpec = 1,
        rounding: Rounding = 0,
        range_limits: Sequence[Tuple[MagnitudeLike, MagnitudeLike]] = ((NEG_INF, INF),),
        revert_values: Sequence[RevertPolicy] = (False,),
        argument_order: Optional[Sequence[int]] = None,
        argument_chars: Optional[Sequence[ArgumentChars]] = None,
        argument_to_left: bool = False,
        argument_shown: ArgumentShown = _always_shown,
        inner_notations: Optional[Sequence[Optional[Notation]]] = None,
        iteration_maxnum: MagnitudeLike = "(e^5)12",
        iteration_function: Optional[Callable[[Magnitude], MagnitudeLike]] = None,
        iteration_inverse_already: bool = False,
        layer_maxnum: MagnitudeLike = "(e^5)12",
        layer_function: Optional[Callable[[Magnitude], MagnitudeLike]] = None,
        layer_inverse_already: bool = False,
        iteration_chars: Sequence[Wrapper] = (("f(", ")"), ("f(", ")"), ("(f^", ")")),
        layer_chars: Sequence[Wrapper] = (("e", ""), ("e", ""), ("(e^", ")")),
        max_iterations_in_a_row: int = 5,
        max_layers_in_a_row: int = 3,
        superexp_after: Tuple[bool, bool] = (False, False),
        iteration_engineerings=1,
        layer_engineerings=1,
        iteration_inner_notation: Optional[Notation] = None,
        layer_inner_notation: Optional[Notation] = None,
        min_value: MagnitudeLike = 0,
        recip_string: Wrapper = ("1 / ", ""),
    ):
        super().__init__()
        self.arity = function_arity(func)
        if self.arity > 1 and not limits:
            raise ValueError("At least one argument limit is required.")
        validate_increasing(func, self.arity, limits or (1,), range_limits)
        self.func = func
        self.limits = [to_magnitude(x) for x in limits]
        self.limits_are_maximums = limits_are_maximums
        self.engineerings = engineerings
        self.rounding = rounding
        self.range_limits = [(to_magnitude(lo), to_magnitude(hi)) for lo, hi in range_limits]
        self.revert_values = list(revert_values)

        order = [i for i in (argument_order or ()) if 0 <= i < self.arity]
        self.argument_order: List[int] = order + [i for i in range(self.arity) if i not in order]
        if argument_chars is None:
            chars = {i: ("", "", "", ", ", "", "") for i in self.argument_order}
            chars[self.argument_order[-1]] = ("",) * 6
            argument_chars = [chars[i] for i in range(self.arity)]
        self.argument_chars = [tuple(c) for c in argument_chars]
        while len(self.argument_chars) < self.arity:
            self.argument_chars.append(("",) * 6)
        self.argument_to_left = argument_to_left
        self.argument_shown = argument_shown

        notations = list(inner_notations or ())
        notations += [DefaultNotation()] * (self.arity - len(notations))
        self.inner_notations: List[Notation] = [self if n is None else n for n in notations]

        self.iteration_maxnum = to_magnitude(iteration_maxnum)
        if iteration_function is None:
            self._iteration_step = _log10
        elif iteration_inverse_already:
            self._iteration_step = lambda x: to_magnitude(iteration_function(x))
        else:
            self._iteration_step = _inverse_of(iteration_function)

        self.layer_maxnum = to_magnitude(layer_maxnum)
        if layer_function is None:
            self._layer_height, self._layer_tower = _slog10, _tetrate10
        elif layer_inverse_already:
            self._layer_height = lambda x: to_magnitude(layer_function(x))
            self._layer_tower = _inverse_of(layer_function)
        else:
            self._layer_height = _inverse_of(layer_function)
            self._layer_tower = lambda x: to_magnitude(layer_function(x))

        self.iteration_chars = [tuple(c) for c in iteration_chars]
        self.layer_chars = [tuple(c) for c in layer_chars]
        self.max_iterations_in_a_row = max_iterations_in_a_row
        self.max_layers_in_a_row = max_layers_in_a_row
        self.superexp_after = tuple(superexp_after)
        self.iteration_engineerings = _integer_engineerings(iteration_engineerings, "iteration_engineerings")
        self.layer_engineerings = _integer_engineerings(layer_engineerings, "layer_engineerings")
        self.iteration_inner_notation = iteration_inner_notation or DefaultNotation()
        self.layer_inner_notation = layer_inner_notation or self.iteration_inner_notation
        self.min_value = to_magnitude(min_value)
        self.recip_string = tuple(recip_string)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def format_value(self, value: Magnitude) -> str:
        if value.sgn() < 0 and not value.is_nan() and not self.is_infinite(value):
            if value != 0 and self.is_infinite(value.recip()):
                return self.format(ZERO)
            if value < self.min_value:
                return self.format_negative_decimal(value.abs())
            return self.format_decimal(value)
        return super().format_value(value)

    def split(self, value: MagnitudeLike) -> Tuple[Magnitude, ...]:
        """The argument tuple for *value*, without any reductions."""
        return increasing_function_split(
            value,
            self.func,
            self.limits,
            self.limits_are_maximums,
            self.engineerings,
            self.rounding,
            self.range_limits,
            self.revert_values,
            arity=self.arity,
        )

    def _strip_layers(self, value: Magnitude) -> Tuple[Magnitude, Magnitude]:
        if not value >= self.layer_maxnum:
            return value, ZERO
        height = self._layer_height(value)
        steps = self.layer_engineerings
        layers = current_engineering_value(height.sub(self._layer_height(self.layer_maxnum)), steps).max(ZERO)
        reduced = self._layer_tower(height.sub(layers))
        for _ in range(config.CARRY_LOOP_LIMIT):
            if not reduced >= self.layer_maxnum:
                break
            layers = next_engineering_value(layers, steps)
            reduced = self._layer_tower(height.sub(layers))
        else:
            logger.debug("Layer reduction of %s stopped at %s layers", value, layers)
        return reduced, layers

    def _strip_iterations(self, value: Magnitude) -> Tuple[Magnitude, Magnitude]:
        iterations = ZERO
        for _ in range(config.CARRY_LOOP_LIMIT):
            if not value >= self.iteration_maxnum:
                break
            target = next_engineering_value(iterations, self.iteration_engineerings)
            reduced = value
            for _ in range(int(target.sub(iterations).to_float())):
                reduced = self._iteration_step(reduced)
            if not reduced.is_finite():
                break
            value, iterations = reduced, target
        else:
            logger.debug("Iteration reduction stopped at %s iterations", iterations)
        return value, iterations

    def _arguments(self, value: Magnitude) -> str:
        if value < self.min_value:
            return self.inner_notations[0].format(value)
        arguments = self.split(value)
        result = ""
        for index in self.argument_order:
            if not self.argument_shown(arguments[index], index, arguments):
                continue
            chars = self.argument_chars[index]
            result = chars[0] + result + chars[1]
            text = chars[2] + self.inner_notations[index].format(arguments[index]) + chars[3]
            result = text + result if self.argument_to_left else result + text
            result = chars[4] + result + chars[5]
        return result

    @staticmethod
    def _wrap(
        result: str,
        count: Magnitude,
        chars: Sequence[Wrapper],
        max_in_a_row: int,
        counter: Notation,
        after: bool,
    ) -> str:
        if count == 0:
            return result
        if count <= max_in_a_row:
            result = chars[0][0] + result + chars[0][1]
            for _ in range(int(count.to_float()) - 1):
                result = chars[1][0] + result + chars[1][1]
            return result
        prefix = chars[2][0] + counter.format(count) + chars[2][1]
        return result + prefix if after else prefix + result

    def format_decimal(self, value: Magnitude) -> str:
        if value != 0 and value < 1 and value < self.min_value and value.recip() >= self.min_value:
            return self.recip_string[0] + self.format(value.recip()) + self.recip_string[1]
        value, layers = self._strip_layers(value)
        value, iterations = self._strip_iterations(value)
        result = self._arguments(value)
        result = self._wrap(
            result,
            iterations,
            self.iteration_chars,
            self.max_iterations_in_a_row,
            self.iteration_inner_notation,
            self.superexp_after[0],
        )
        return self._wrap(
            result,
            layers,
            self.layer_chars,
            self.max_layers_in_a_row,
            self.layer_inner_notation,
            self.superexp_after[1],
        )
