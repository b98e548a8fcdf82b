from __future__ import annotations

"""Micro-benchmarks for the hot decomposition and formatting paths.

These tests rely on the ``pytest-benchmark`` plugin and are **extremely** light
so they do not slow down the regular CI pipeline.  Run with

```
pytest tests/test_benchmark_micro.py --benchmark-only
```

which prints a summarised table.  The numbers are **not** asserted; they are
purely informative.
"""

import pytest
pytest.importorskip("pytest_benchmark")

from eternum import DefaultNotation, HypersplitNotation, hypersplit, increasing_function_split, scientific_split
from eternum.magnitude import to_magnitude

VALUES = [to_magnitude(x) for x in (1.5, 1234, 1e100, "1e1e100", "(e^7)12")]


def test_scientific_split(benchmark):
    benchmark(lambda: [scientific_split(v) for v in VALUES])


def test_hypersplit(benchmark):
    benchmark(lambda: [hypersplit(v) for v in VALUES])


def test_increasing_function_split(benchmark):
    """The generic solver on a two-argument function – bisection dominates."""
    benchmark(lambda: increasing_function_split(123456, lambda m, e: m * 10 ** e, (1,)))


def test_default_notation(benchmark):
    notation = DefaultNotation()
    benchmark(lambda: [notation.format(v) for v in VALUES])


def test_hypersplit_notation(benchmark):
    notation = HypersplitNotation()
    benchmark(lambda: [notation.format(v) for v in VALUES])
