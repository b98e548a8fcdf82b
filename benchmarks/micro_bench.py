from __future__ import annotations

"""Micro benchmarks for individual decomposition and notation kernels.

This harness relies on *torch.utils.benchmark.Timer* which gives
 statistically sound timings (median, inter-quartile range) for plain Python
 statements as well.

Run standalone:

    $ python benchmarks/micro_bench.py --repeats 200

Run inside pytest (records to history & compares):

    $ pytest -q tests/test_benchmark_micro.py
"""

from dataclasses import dataclass
from typing import List

import torch
import tyro  # type: ignore
from torch.utils.benchmark import Timer

import eternum
from eternum.magnitude import to_magnitude


# -----------------------------------------------------------------------------
# Benchmark entries ------------------------------------------------------------
# -----------------------------------------------------------------------------

@dataclass
class Entry:
    name: str
    stmt: str


def _setup(value: str) -> dict[str, object]:
    """Return a dict to be injected into Timer globals."""
    return dict(
        eternum=eternum,
        x=to_magnitude(value),
        default=eternum.DefaultNotation(),
        scientific=eternum.ScientificNotation(),
        hyper=eternum.HypersplitNotation(),
        clock=eternum.IncreasingFunctionScientificNotation(
            lambda s, m, h: s + m * 60 + h * 3600, limits=(60,), limits_are_maximums=True
        ),
    )


BENCHES: List[Entry] = [
    Entry("scientific_split", "eternum.scientific_split(x)"),
    Entry("hyperscientific_split", "eternum.hyperscientific_split(x)"),
    Entry("hypersplit", "eternum.hypersplit(x)"),
    Entry("approximate", "eternum.approximate(3.14159265358979, 1e-12)"),
    Entry("DefaultNotation", "default.format(x)"),
    Entry("ScientificNotation", "scientific.format(x)"),
    Entry("HypersplitNotation", "hyper.format(x)"),
    Entry("clock (solver)", "clock.format(3725)"),
]


@dataclass
class Config(tyro.conf.FlagConversionOff):  # type: ignore[misc]
    value: str = "1e1e100"  # anything `to_magnitude` parses
    repeats: int = 50


def main(cfg: Config) -> None:  # noqa: D401 – CLI entry
    print(f"[micro] value={cfg.value}  repeats={cfg.repeats}\n")

    setup_globals = _setup(cfg.value)

    rows: List[tuple[str, float]] = []

    for entry in BENCHES:
        t = Timer(stmt=entry.stmt, globals=setup_globals, num_threads=torch.get_num_threads())
        median = t.timeit(cfg.repeats).median
        rows.append((entry.name, median))

    # Pretty print ------------------------------------------------------------
    name_w = max(len(r[0]) for r in rows)
    print("Operation".ljust(name_w), "|  median time (s)")
    print("-" * (name_w + 20))
    for name, med in rows:
        print(name.ljust(name_w), f"|  {med:9.6f}")


if __name__ == "__main__":
    tyro.cli(main)
