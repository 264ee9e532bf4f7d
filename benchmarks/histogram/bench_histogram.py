"""Benchmarks for histogram functions.

This module benchmarks the search and linear binning algorithms of
torchhistogram and compares them against numpy baselines.
"""

from __future__ import annotations

import time
from typing import Any, Callable

import numpy as np
import torch

import torchhistogram


def benchmark(
    func: Callable,
    *args: Any,
    warmup: int = 3,
    iterations: int = 10,
    **kwargs: Any,
) -> dict[str, float]:
    """Run a simple benchmark on a function.

    Parameters
    ----------
    func : callable
        Function to benchmark.
    *args : Any
        Positional arguments to pass to func.
    warmup : int, optional
        Number of warmup iterations. Default is 3.
    iterations : int, optional
        Number of timed iterations. Default is 10.
    **kwargs : Any
        Keyword arguments to pass to func.

    Returns
    -------
    dict
        Dictionary with timing statistics:
        - 'mean': Mean time in seconds
        - 'std': Standard deviation in seconds
        - 'min': Minimum time in seconds
        - 'max': Maximum time in seconds
    """
    for _ in range(warmup):
        func(*args, **kwargs)

    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        func(*args, **kwargs)
        if torch.cuda.is_available():
            torch.cuda.synchronize()
        times.append(time.perf_counter() - start)

    return {
        "mean": np.mean(times),
        "std": np.std(times),
        "min": np.min(times),
        "max": np.max(times),
    }


def format_time(seconds: float) -> str:
    """Format time in appropriate units."""
    if seconds < 1e-6:
        return f"{seconds * 1e9:.3f}ns"
    elif seconds < 1e-3:
        return f"{seconds * 1e6:.3f}us"
    elif seconds < 1:
        return f"{seconds * 1e3:.3f}ms"
    else:
        return f"{seconds:.3f}s"


def print_timings(name: str, timings: dict[str, dict[str, float]]) -> None:
    """Print one line per timed variant, fastest first."""
    print(f"\n{name}")
    print("-" * len(name))
    for label, timing in sorted(
        timings.items(), key=lambda item: item[1]["mean"]
    ):
        print(
            f"  {label:<8} {format_time(timing['mean'])} "
            f"+/- {format_time(timing['std'])}"
        )


class BenchHistogram:
    """Benchmarks for histogram functions."""

    def __init__(
        self, warmup: int = 3, iterations: int = 10, device: str = "cpu"
    ):
        self.warmup = warmup
        self.iterations = iterations
        self.device = device

    def _bench(
        self, func: Callable, *args: Any, **kwargs: Any
    ) -> dict[str, float]:
        return benchmark(
            func,
            *args,
            warmup=self.warmup,
            iterations=self.iterations,
            **kwargs,
        )

    def bench_histogramdd(self, m: int = 100_000, n: int = 3, bins: int = 32):
        """Benchmark histogramdd in count mode vs numpy.histogramdd.

        Parameters
        ----------
        m : int, optional
            Number of samples. Default is 100000.
        n : int, optional
            Number of dimensions. Default is 3.
        bins : int, optional
            Number of bins per dimension. Default is 32.
        """
        x = torch.randn(m, n, dtype=torch.float64, device=self.device)

        timings = {
            algorithm: self._bench(
                torchhistogram.histogramdd, x, bins, algorithm=algorithm
            )
            for algorithm in ("search", "linear")
        }

        if self.device == "cpu":
            timings["numpy"] = self._bench(np.histogramdd, x.numpy(), bins)

        print_timings(f"histogramdd (m={m}, n={n}, bins={bins})", timings)

    def bench_histogramdd_edges(self, m: int = 100_000, bins: int = 64):
        """Benchmark histogramdd with explicit non-uniform edges.

        Parameters
        ----------
        m : int, optional
            Number of samples. Default is 100000.
        bins : int, optional
            Number of bins per dimension. Default is 64.
        """
        x = torch.randn(m, 2, dtype=torch.float64, device=self.device)
        edges = torch.linspace(
            -4.0, 4.0, bins + 1, dtype=torch.float64, device=self.device
        ).pow(3)
        edges = [edges, edges.clone()]

        timings = {
            "search": self._bench(torchhistogram.histogramdd, x, edges),
        }

        if self.device == "cpu":
            timings["numpy"] = self._bench(
                np.histogramdd, x.numpy(), [e.numpy() for e in edges]
            )

        print_timings(f"histogramdd edges (m={m}, bins={bins})", timings)

    def bench_histc(self, m: int = 1_000_000, bins: int = 100):
        """Benchmark histc vs torch.histc.

        Parameters
        ----------
        m : int, optional
            Number of samples. Default is 1000000.
        bins : int, optional
            Number of bins. Default is 100.
        """
        x = torch.randn(m, dtype=torch.float32, device=self.device)

        timings = {
            "histc": self._bench(
                torchhistogram.histc, x, bins=bins, min=-3, max=3
            ),
            "torch": self._bench(torch.histc, x, bins=bins, min=-3, max=3),
        }

        print_timings(f"histc (m={m}, bins={bins})", timings)

    def run_all(self) -> None:
        """Run all benchmarks."""
        print("=" * 60)
        print("HISTOGRAM BENCHMARKS")
        print("=" * 60)

        self.bench_histogramdd()
        self.bench_histogramdd_edges()
        self.bench_histc()

    def run_scaling(self) -> None:
        """Run scaling benchmarks with varying parameters."""
        print("=" * 60)
        print("SCALING BENCHMARKS")
        print("=" * 60)

        print("\n--- Sample Count Scaling ---")
        for m in [1_000, 10_000, 100_000, 1_000_000]:
            self.bench_histogramdd(m=m)

        print("\n--- Dimension Scaling ---")
        for n in [1, 2, 3, 4]:
            self.bench_histogramdd(n=n, bins=16)


def run_cpu_benchmarks() -> None:
    """Run CPU benchmarks."""
    bench = BenchHistogram(warmup=5, iterations=20, device="cpu")
    bench.run_all()
    print("\n")
    bench.run_scaling()


def run_cuda_benchmarks() -> None:
    """Run CUDA benchmarks if available."""
    if not torch.cuda.is_available():
        print("CUDA not available, skipping GPU benchmarks")
        return

    bench = BenchHistogram(warmup=5, iterations=20, device="cuda")
    bench.run_all()
    print("\n")
    bench.run_scaling()


if __name__ == "__main__":
    print("Running CPU benchmarks...\n")
    run_cpu_benchmarks()

    if torch.cuda.is_available():
        print("\n" + "=" * 60)
        print("Running CUDA benchmarks...\n")
        run_cuda_benchmarks()
