#!/usr/bin/env python3
"""
Benchmark for Universe.tick().

Runs ticks on a default universe under cProfile, then prints a ranked
breakdown of where time is spent.

Usage:
  python3 gol_bench.py                  # 1000 ticks, summary
  python3 gol_bench.py -n 5000          # 5000 ticks
  python3 gol_bench.py --line-timing    # per-tick timing percentiles
  python3 gol_bench.py --dump prof.out  # dump cProfile binary for snakeviz etc.
"""

from __future__ import annotations

import argparse
import cProfile
import pstats
import time
from io import StringIO

import numpy as np

from gol import Universe


def time_ticks(universe: Universe, n_ticks: int) -> list[float]:
    """Tick ``universe`` n_ticks times. Returns each tick's duration in seconds."""
    times: list[float] = []
    for _ in range(n_ticks):
        t0 = time.perf_counter()
        universe.tick()
        times.append(time.perf_counter() - t0)
    return times


def stats_line(name: str, data: list[float]) -> str:
    arr = np.array(data) * 1000  # to ms
    return (f"{name:<12} {arr.mean():8.3f} {np.median(arr):8.3f} "
            f"{np.percentile(arr, 95):8.3f} {np.percentile(arr, 99):8.3f} "
            f"{arr.max():8.3f}")


def run_benchmark(
    n_ticks: int,
    line_timing: bool = False,
    dump_path: str | None = None,
) -> None:
    """Run the benchmark for n_ticks and report results."""

    universe = Universe()

    print(f"Universe: {universe.height}x{universe.width}  Ticks: {n_ticks}")
    print()

    # ── Per-tick timing ────────────────────────────────────────────
    if line_timing:
        times = time_ticks(universe, n_ticks)
        print("=== Per-Tick Timing (ms) ===")
        print(f"{'':<12} {'Mean':>8} {'P50':>8} {'P95':>8} {'P99':>8} {'Max':>8}")
        print("-" * 60)
        print(stats_line("tick()", times))
        print(f"\nFinal population: {universe.population():,}")
        return

    # ── cProfile run ───────────────────────────────────────────────
    def profiled_run() -> None:
        for _ in range(n_ticks):
            universe.tick()

    profiler = cProfile.Profile()
    wall_t0 = time.perf_counter()
    profiler.enable()
    profiled_run()
    profiler.disable()
    wall_dt = time.perf_counter() - wall_t0

    print(f"Wall time: {wall_dt:.2f}s  "
          f"({wall_dt / n_ticks * 1000:.3f}ms/tick, {n_ticks / wall_dt:.1f} ticks/s)")

    if dump_path:
        profiler.dump_stats(dump_path)
        print(f"Profile written to {dump_path}")

    # tick() is a handful of numpy/scipy calls, so self-time is the useful view
    out = StringIO()
    pstats.Stats(profiler, stream=out).sort_stats("tottime").print_stats(15)
    print("\n=== Hottest functions (tottime) ===")
    print(out.getvalue())


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Profile Universe.tick()")
    parser.add_argument("-n", "--ticks", type=int, default=1000,
                        help="Number of ticks to run (default: 1000)")
    parser.add_argument("--line-timing", action="store_true",
                        help="Per-tick timing percentiles instead of cProfile")
    parser.add_argument("--dump", type=str, default=None,
                        help="Dump cProfile binary to this path")
    args = parser.parse_args(argv)
    if args.ticks <= 0:
        parser.error("--ticks must be positive")

    run_benchmark(
        n_ticks=args.ticks,
        line_timing=args.line_timing,
        dump_path=args.dump,
    )


if __name__ == "__main__":
    main()
