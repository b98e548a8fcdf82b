"""Global configuration for *eternum*.

This module centralises the runtime knobs that bound the otherwise unbounded
parts of the library so they can be tweaked from a single location.

Why bound anything?
-------------------
Notations hold references to *inner* notations, and nothing stops a caller
from wiring a notation into its own inner slot, directly or through a longer
chain.  Instead of rejecting such graphs (a notation legitimately recurses into
itself while stripping leading ``e``'s) every ``format`` call counts how deep
it is nested on the current thread.  Once the depth exceeds
`MAX_NESTING_DEPTH` the offending call renders the plain :class:`str` form of
the value instead of recursing further.

The inverse solver is bounded in the same spirit: bisection stops after
`SOLVER_MAX_ITERATIONS` halvings and the carry/borrow loops after
`CARRY_LOOP_LIMIT` adjustments, returning the best value found so far.
"""

from __future__ import annotations

__all__ = [
    "MAX_NESTING_DEPTH",
    "SOLVER_MAX_ITERATIONS",
    "SOLVER_SLOG_LIMIT",
    "CARRY_LOOP_LIMIT",
    "set_max_nesting_depth",
    "set_solver_max_iterations",
    "set_solver_slog_limit",
]

# -----------------------------------------------------------------------------
# Public constants
# -----------------------------------------------------------------------------

MAX_NESTING_DEPTH: int = 64  # nested format() calls per thread before falling back
SOLVER_MAX_ITERATIONS: int = 200  # bisection halvings per solved argument
SOLVER_SLOG_LIMIT: float = 1e6  # search window for unbounded domains, in slog units
CARRY_LOOP_LIMIT: int = 100  # carry/borrow adjustments per decomposition level

# -----------------------------------------------------------------------------
# Setters
# -----------------------------------------------------------------------------


def set_max_nesting_depth(depth: int):
    """Change the nesting guard used by :meth:`eternum.Notation.format`."""
    global MAX_NESTING_DEPTH
    if depth < 1:
        raise ValueError("Nesting depth must be at least 1.")
    MAX_NESTING_DEPTH = depth


def set_solver_max_iterations(iterations: int):
    global SOLVER_MAX_ITERATIONS
    if iterations < 1:
        raise ValueError("The solver needs at least one iteration.")
    SOLVER_MAX_ITERATIONS = iterations


def set_solver_slog_limit(limit: float):
    """Widen or narrow the window searched when a domain limit is infinite."""
    global SOLVER_SLOG_LIMIT
    if not limit > 0:
        raise ValueError("The slog search limit must be positive.")
    SOLVER_SLOG_LIMIT = limit
