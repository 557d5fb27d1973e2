"""Timing of the concurrent allocator against plain allocation under many threads."""

from __future__ import annotations

import argparse
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from .allocator import concurrent_alloc, concurrent_free

SEPARATOR = "=" * 58
OBJECT_SIZE = 16


@dataclass(frozen=True)
class BenchmarkResult:
    """Accumulated times of one benchmark run, in milliseconds."""

    ntimes: int
    nworks: int
    rounds: int
    alloc_ms: float
    free_ms: float

    @property
    def total_ms(self) -> float:
        return self.alloc_ms + self.free_ms

    @property
    def total_ops(self) -> int:
        """Number of allocate/free pairs performed across all threads."""
        return self.nworks * self.rounds * self.ntimes


def _check_counts(ntimes: int, nworks: int, rounds: int) -> None:
    for name, value in (("ntimes", ntimes), ("nworks", nworks), ("rounds", rounds)):
        if value < 0:
            raise ValueError(f"{name} must not be negative, got {value}")


def _worker(
    ntimes: int,
    rounds: int,
    alloc: Callable[[int], Any],
    free: Callable[[Any], None],
) -> tuple[float, float]:
    alloc_ms = 0.0
    free_ms = 0.0
    for _ in range(rounds):
        started = time.perf_counter()
        blocks = [alloc(OBJECT_SIZE) for _ in range(ntimes)]
        alloc_ms += (time.perf_counter() - started) * 1000.0

        started = time.perf_counter()
        for block in blocks:
            free(block)
        free_ms += (time.perf_counter() - started) * 1000.0
    return alloc_ms, free_ms


def _run(
    ntimes: int,
    nworks: int,
    rounds: int,
    alloc: Callable[[int], Any],
    free: Callable[[Any], None],
) -> BenchmarkResult:
    _check_counts(ntimes, nworks, rounds)
    alloc_ms = 0.0
    free_ms = 0.0
    if nworks:
        with ThreadPoolExecutor(max_workers=nworks) as pool:
            futures = [
                pool.submit(_worker, ntimes, rounds, alloc, free) for _ in range(nworks)
            ]
            for future in futures:
                worker_alloc, worker_free = future.result()
                alloc_ms += worker_alloc
                free_ms += worker_free
    return BenchmarkResult(ntimes, nworks, rounds, alloc_ms, free_ms)


def _report(result: BenchmarkResult, alloc_label: str, free_label: str, pair_label: str) -> None:
    print(
        f"{result.nworks} threads ran {result.rounds} rounds concurrently, "
        f"{alloc_label} {result.ntimes} times per round: cost {result.alloc_ms:.3f} ms"
    )
    print(
        f"{result.nworks} threads ran {result.rounds} rounds concurrently, "
        f"{free_label} {result.ntimes} times per round: cost {result.free_ms:.3f} ms"
    )
    print(
        f"{result.nworks} threads ran {pair_label} {result.total_ops} times concurrently, "
        f"total cost: {result.total_ms:.3f} ms"
    )


def _plain_alloc(size: int) -> bytearray:
    return bytearray(size)


def _plain_free(block: bytearray) -> None:
    del block


def benchmark_malloc(ntimes: int, nworks: int, rounds: int) -> BenchmarkResult:
    """Time plain allocation of 16-byte blocks in ``nworks`` threads and print a report."""
    result = _run(ntimes, nworks, rounds, _plain_alloc, _plain_free)
    _report(result, "malloc", "free", "malloc&free")
    return result


def benchmark_concurrent_malloc(ntimes: int, nworks: int, rounds: int) -> BenchmarkResult:
    """Time the concurrent allocator on 16-byte blocks in ``nworks`` threads and print a report."""
    result = _run(ntimes, nworks, rounds, concurrent_alloc, concurrent_free)
    _report(result, "concurrent alloc", "concurrent dealloc", "concurrent alloc&dealloc")
    return result


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {text}")
    return value


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run both benchmarks and print their reports."""
    parser = argparse.ArgumentParser(
        prog="spanalloc-benchmark",
        description="Compare the concurrent allocator with plain allocation.",
    )
    parser.add_argument("-n", "--ntimes", type=_non_negative, default=1000,
                        help="allocations per thread per round (default 1000)")
    parser.add_argument("-w", "--workers", type=_non_negative, default=4,
                        help="number of threads (default 4)")
    parser.add_argument("-r", "--rounds", type=_non_negative, default=10,
                        help="number of rounds (default 10)")
    args = parser.parse_args(argv)

    print(SEPARATOR)
    benchmark_concurrent_malloc(args.ntimes, args.workers, args.rounds)
    print()
    print()
    benchmark_malloc(args.ntimes, args.workers, args.rounds)
    print(SEPARATOR)
    return 0