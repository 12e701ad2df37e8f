#!/usr/bin/env python3
"""
Streamlet vs RxPY Performance Comparison

Benchmarks cover the operations both libraries share:
1. Emitting a finite sequence (from_ / from_iterable)
2. Subscribe/unsubscribe churn
3. Custom producers (Observable(...) / reactivex.create)

Each benchmark grows its workload by SCALE_FACTOR until a single run takes
longer than the time limit, then reports the largest N and its throughput.
"""

import argparse
import gc
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

import reactivex
from rich.console import Console
from rich.table import Table

from streamlet import Observable

LOG_LEVEL = logging.WARNING

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================


@dataclass
class BenchmarkConfig:
    """Benchmark configuration parameters."""

    time_limit: float = 1.0
    starting_n: int = 10
    scale_factor: float = 1.5
    num_iterations: int = 1


CONFIG = BenchmarkConfig()


# ============================================================================
# Registry
# ============================================================================

# name -> {library: fn(n)}
REGISTRY: Dict[str, Dict[str, Callable[[int], int]]] = {}


def benchmark(name: str, library: str = "streamlet"):
    """Register ``fn(n) -> operations`` under ``name`` for ``library``."""

    def decorator(func):
        REGISTRY.setdefault(name, {})[library] = func
        return func

    return decorator


# ============================================================================
# Finite Sequences
# ============================================================================


@benchmark("Emit Sequence")
def bench_emit_streamlet(n):
    received = []
    Observable.from_(range(n)).subscribe(received.append)
    return len(received)


@benchmark("Emit Sequence", library="rxpy")
def bench_emit_rxpy(n):
    received = []
    reactivex.from_iterable(range(n)).subscribe(received.append)
    return len(received)


# ============================================================================
# Subscription Churn
# ============================================================================


@benchmark("Subscribe/Unsubscribe")
def bench_churn_streamlet(n):
    source = Observable.of(1)
    for _ in range(n):
        source.subscribe(lambda value: None).unsubscribe()
    return n


@benchmark("Subscribe/Unsubscribe", library="rxpy")
def bench_churn_rxpy(n):
    source = reactivex.of(1)
    for _ in range(n):
        source.subscribe(lambda value: None).dispose()
    return n


# ============================================================================
# Custom Producers
# ============================================================================


@benchmark("Custom Producer")
def bench_producer_streamlet(n):
    def produce(observer):
        for i in range(n):
            observer.next(i)
        observer.complete()

    count = 0

    def on_next(value):
        nonlocal count
        count += 1

    Observable(produce).subscribe(on_next)
    return count


@benchmark("Custom Producer", library="rxpy")
def bench_producer_rxpy(n):
    def produce(observer, scheduler):
        for i in range(n):
            observer.on_next(i)
        observer.on_completed()

    count = 0

    def on_next(value):
        nonlocal count
        count += 1

    reactivex.create(produce).subscribe(on_next)
    return count


# ============================================================================
# Runner
# ============================================================================


def run_adaptive(func: Callable[[int], int], config: BenchmarkConfig) -> Tuple[int, float]:
    """Scale N until one run exceeds the time limit; return (N, ops/sec)."""
    n = config.starting_n
    best_n, best_rate = 0, 0.0

    while True:
        elapsed = 0.0
        operations = 0
        for _ in range(config.num_iterations):
            gc.collect()
            start = time.perf_counter()
            operations += func(n)
            elapsed += time.perf_counter() - start

        if elapsed > 0:
            best_n, best_rate = n, operations / elapsed

        if elapsed / config.num_iterations > config.time_limit:
            return best_n, best_rate

        n = max(n + 1, int(n * config.scale_factor))


def run(names: List[str], config: BenchmarkConfig, console: Console) -> None:
    table = Table(title="Streamlet vs RxPY")
    table.add_column("Benchmark", style="bold")
    table.add_column("Library", style="cyan")
    table.add_column("Max N", justify="right")
    table.add_column("Ops/sec", justify="right")

    for name in names:
        for library, func in sorted(REGISTRY[name].items()):
            logger.info("Running %s [%s]", name, library)
            max_n, rate = run_adaptive(func, config)
            table.add_row(name, library, f"{max_n:,}", f"{rate:,.0f}")

    console.print(table)


# ============================================================================
# CLI
# ============================================================================


def main():
    parser = argparse.ArgumentParser(description="Streamlet vs RxPY Performance Comparison")
    parser.add_argument("--list", action="store_true", help="List available benchmarks")
    parser.add_argument("--benchmarks", nargs="+", help="Run specific benchmarks")
    parser.add_argument("--time-limit", type=float, help="Time limit per benchmark")
    parser.add_argument("--iterations", type=int, help="Number of iterations")

    args = parser.parse_args()
    logging.basicConfig(level=LOG_LEVEL)
    console = Console()

    if args.list:
        console.print("\n[bold]Available Benchmarks:[/bold]")
        for name in sorted(REGISTRY):
            console.print(f"  - {name}")
        return

    if args.time_limit:
        CONFIG.time_limit = args.time_limit
    if args.iterations:
        CONFIG.num_iterations = args.iterations

    names = args.benchmarks or sorted(REGISTRY)
    unknown = [name for name in names if name not in REGISTRY]
    if unknown:
        parser.error(f"Unknown benchmarks: {', '.join(unknown)}")

    run(names, CONFIG, console)


if __name__ == "__main__":
    main()
