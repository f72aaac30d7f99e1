# benchmark/run_benchmark.py
"""
Benchmark FPR thực tế của Bloom filter phân lát so với fpp mục tiêu.

- Filter hữu hạn: nạp đúng `capacity` số nguyên phân biệt, truy vấn một tập
  số nguyên rời rạc chưa từng thêm.
- Filter tăng trưởng: nạp gấp nhiều lần capacity ban đầu, đo FPR tổng trên
  toàn chuỗi shard.
- Multiple runs với avg ± std cho FPR, throughput, memory (psutil RSS)
- In bảng kết quả (tabulate), lưu CSV (pandas) và biểu đồ (matplotlib)
"""

import argparse
import os
import time
from typing import Dict, List

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import psutil

from bloomchain.bloom.bloom_filter import BloomFilter
from bloomchain.bloom.finite_filter import FiniteBloomFilter
from bloomchain.bloom.growing_filter import GrowingBloomFilter

FPPS = [0.5, 0.1, 0.01, 0.0001]


def sample_disjoint(count: int, low: int, rng: np.random.Generator) -> List[int]:
    """Sinh `count` số nguyên phân biệt >= low (không trùng tập đã thêm)."""
    # tolist() trả về int Python; np.int64 không có hàm băm đăng ký
    return rng.choice(np.arange(low, low + count * 20), size=count, replace=False).tolist()


def measure(bloom: BloomFilter, inserted: List[int], probes: List[int]) -> Dict[str, float]:
    process = psutil.Process()
    rss_before = process.memory_info().rss

    start_insert = time.perf_counter()
    for value in inserted:
        bloom.insert(value)
    insert_duration = time.perf_counter() - start_insert

    missing = sum(1 for value in inserted if not bloom.might_contain(value))
    if missing:
        raise AssertionError(f"{missing} false negatives in {type(bloom).__name__}")

    start_query = time.perf_counter()
    false_positives = sum(1 for value in probes if bloom.might_contain(value))
    query_duration = time.perf_counter() - start_query

    return {
        "fpr": false_positives / len(probes),
        "insert_qps": len(inserted) / insert_duration,
        "query_qps": len(probes) / query_duration,
        "memory_kb": (process.memory_info().rss - rss_before) / 1024,
        "insertions": bloom.insertions,
    }


def benchmark_finite(capacity: int, fpp: float, probes: int, rng: np.random.Generator) -> Dict[str, float]:
    bloom = FiniteBloomFilter(capacity, fpp)
    inserted = list(range(capacity))
    result = measure(bloom, inserted, sample_disjoint(probes, capacity, rng))
    result["bits"] = bloom.total_bits
    return result


def benchmark_growing(capacity: int, fpp: float, probes: int, rng: np.random.Generator,
                      growth_rate: float = 0.5, load_factor: int = 8) -> Dict[str, float]:
    bloom = GrowingBloomFilter(capacity, fpp, growth_rate)
    inserted = list(range(capacity * load_factor))
    result = measure(bloom, inserted, sample_disjoint(probes, len(inserted), rng))
    result["bits"] = bloom.total_bits
    result["shards"] = bloom.shard_count
    return result


def run_full_benchmark(capacity: int = 10_000, probes: int = 100_000, num_runs: int = 3,
                       seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    rows = []
    for run in range(1, num_runs + 1):
        print(f"\n{'=' * 20} RUN {run}/{num_runs} {'=' * 20}")
        for fpp in FPPS:
            for kind, bench in (("finite", benchmark_finite), ("growing", benchmark_growing)):
                res = bench(capacity, fpp, probes, rng)
                res.update({"run": run, "kind": kind, "target_fpp": fpp})
                rows.append(res)
                print(f"  {kind:<8} fpp={fpp:<8g} fpr={res['fpr']:.5f} bits={res['bits']:,}")

    df = pd.DataFrame(rows)
    summary = (
        df.groupby(["kind", "target_fpp"])
        .agg(
            fpr_mean=("fpr", "mean"),
            fpr_std=("fpr", "std"),
            query_qps_mean=("query_qps", "mean"),
            query_qps_std=("query_qps", "std"),
            memory_mean=("memory_kb", "mean"),
            bits=("bits", "max"),
        )
        .reset_index()
    )
    print_results(summary, num_runs)
    plot_results(summary)

    os.makedirs("plots", exist_ok=True)
    df.to_csv("plots/benchmark_runs.csv", index=False)
    return summary


def print_results(summary: pd.DataFrame, num_runs: int) -> None:
    from tabulate import tabulate

    table = []
    for row in summary.itertuples(index=False):
        table.append([
            row.kind,
            f"{row.target_fpp:g}",
            f"{row.fpr_mean:.4%} ± {row.fpr_std:.4%}",
            f"{row.query_qps_mean:,.0f} ± {row.query_qps_std:,.0f} qps",
            f"{row.bits:,}",
            f"{row.memory_mean:,.0f} KB",
        ])

    print(f"\n=== BENCHMARK (Avg ± Std over {num_runs} runs) ===")
    print(tabulate(table, headers=["Filter", "Target fpp", "Empirical FPR", "Query throughput", "Bits", "ΔRSS"],
                   tablefmt="github"))


def plot_results(summary: pd.DataFrame) -> None:
    """FPR thực tế so với mục tiêu (log-log), với error bars."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

    for kind, group in summary.groupby("kind"):
        ax1.errorbar(group["target_fpp"], group["fpr_mean"].clip(lower=1e-7), yerr=group["fpr_std"],
                     marker="o", capsize=5, label=kind)
        ax2.bar([f"{kind}\n{f:g}" for f in group["target_fpp"]], group["query_qps_mean"] / 1000,
                yerr=group["query_qps_std"] / 1000, capsize=5, alpha=0.8)

    targets = sorted(summary["target_fpp"].unique())
    ax1.plot(targets, targets, linestyle="--", color="gray", label="target")
    ax1.set_xscale("log")
    ax1.set_yscale("log")
    ax1.set_xlabel("Target fpp")
    ax1.set_ylabel("Empirical FPR")
    ax1.set_title("False Positive Rate")
    ax1.legend()

    ax2.set_ylabel("Throughput (K queries/s)")
    ax2.set_title("Query throughput")

    plt.tight_layout()
    os.makedirs("plots", exist_ok=True)
    plot_path = "plots/benchmark_fpr.png"
    plt.savefig(plot_path, dpi=200)
    plt.close(fig)
    print(f"\nPlot saved to: {plot_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--capacity", type=int, default=10_000)
    parser.add_argument("--probes", type=int, default=100_000)
    parser.add_argument("--runs", type=int, default=3)
    args = parser.parse_args()
    run_full_benchmark(capacity=args.capacity, probes=args.probes, num_runs=args.runs)
