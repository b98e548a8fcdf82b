# SPDX-License-Identifier: MIT
"""eternum – Text notations for numbers far beyond floating point.

Values are :class:`Magnitude` objects (sign, layer, mantissa), able to hold
towers like ``10^^1e300`` as well as ordinary doubles.  On top of them the
package provides

* decompositions of a value into hyperoperator coordinates
  (:func:`scientific_split`, :func:`hypersplit`, the generic
  :func:`increasing_function_split`, …),
* continued-fraction approximation (:func:`approximate`), and
* a family of :class:`Notation` objects that render values as text and
  delegate each coordinate to an inner notation.

>>> from eternum import ScientificNotation
>>> ScientificNotation().format(123456)
'1.235e5'
"""

from __future__ import annotations

import logging

from .magnitude import (
    CONVERGENCE_LIMIT,
    INF,
    NAN,
    NEG_INF,
    ONE,
    TEN,
    ZERO,
    Magnitude,
    MagnitudeLike,
    iteratedlog,
    layeradd,
    penta_log,
    pentate,
    slog,
    tetrate,
    to_magnitude,
)
from .engineering import (
    current_engineering_value,
    next_engineering_value,
    normalize_engineerings,
    previous_engineering_value,
    round_to,
    upper_current_engineering_value,
)
from .rational import (
    FractionForm,
    RationalApproximation,
    approximate,
    fraction_approximation,
    prime_factorize,
    prime_factorize_fraction,
    primes_array,
)
from .solver import ArgumentSpec, increasing_function_split, increasing_inverse, validate_increasing
from .decompose import (
    hyperscientific_split,
    hypersplit,
    pentascientific_split,
    scientific_split,
    weak_hyperscientific_split,
)
from .text import add_commas, commas_and_decimals
from .notation import CustomNotation, Notation
from .default import DefaultNotation
from .baseline import AppliedFunctionNotation, ConditionalNotation, FractionNotation, PredeterminedNotation
from .scientific import (
    HyperscientificNotation,
    PentaScientificNotation,
    ScientificNotation,
    WeakHyperscientificNotation,
)
from .hypersplit_notation import HypersplitNotation
from .increasing import IncreasingFunctionScientificNotation

# Library code only logs; applications decide where records go.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # numbers
    "Magnitude",
    "MagnitudeLike",
    "to_magnitude",
    "tetrate",
    "iteratedlog",
    "slog",
    "layeradd",
    "pentate",
    "penta_log",
    "ZERO",
    "ONE",
    "TEN",
    "NAN",
    "INF",
    "NEG_INF",
    "CONVERGENCE_LIMIT",
    # engineering steps
    "normalize_engineerings",
    "current_engineering_value",
    "upper_current_engineering_value",
    "next_engineering_value",
    "previous_engineering_value",
    "round_to",
    # rational approximation
    "FractionForm",
    "RationalApproximation",
    "approximate",
    "fraction_approximation",
    "primes_array",
    "prime_factorize",
    "prime_factorize_fraction",
    # solving & decomposition
    "ArgumentSpec",
    "increasing_inverse",
    "increasing_function_split",
    "validate_increasing",
    "scientific_split",
    "hyperscientific_split",
    "weak_hyperscientific_split",
    "pentascientific_split",
    "hypersplit",
    # text
    "commas_and_decimals",
    "add_commas",
    # notations
    "Notation",
    "CustomNotation",
    "DefaultNotation",
    "FractionNotation",
    "ConditionalNotation",
    "AppliedFunctionNotation",
    "PredeterminedNotation",
    "ScientificNotation",
    "HyperscientificNotation",
    "PentaScientificNotation",
    "WeakHyperscientificNotation",
    "HypersplitNotation",
    "IncreasingFunctionScientificNotation",
]
