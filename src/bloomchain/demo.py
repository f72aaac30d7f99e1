"""CLI demo: nạp phần tử vào Bloom filter, đo FPR thực tế, ghi/đọc blob.

Ví dụ:
    bloomchain-demo --capacity 1000 --fpp 0.01 --generate 1000 --probe 20000
    bloomchain-demo --capacity -1 --words /usr/share/dict/words --limit 100000
    bloomchain-demo --capacity 500 --generate 500 --out filter.bin
    bloomchain-demo --load filter.bin --probe 10000
"""
from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from bloomchain import config
from bloomchain.bloom import factory
from bloomchain.bloom.bloom_filter import BloomFilter
from bloomchain.bloom.finite_filter import FiniteBloomFilter
from bloomchain.bloom.growing_filter import GrowingBloomFilter
from bloomchain.errors import BloomFilterError
from bloomchain.metrics.metrics import FilterMetrics, InstrumentedFilter

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 50_000


def load_words(path: str, limit: Optional[int] = None) -> List[str]:
    """Đọc từ (mỗi dòng một từ), khử trùng lặp, giữ thứ tự."""
    words: list[str] = []
    seen: set[str] = set()
    with open(path, encoding="utf-8") as f:
        for line in f:
            word = line.strip()
            if not word or word in seen:
                continue
            seen.add(word)
            words.append(word)
            if limit is not None and len(words) >= limit:
                break
    return words


def fill_filter(bloom: InstrumentedFilter, elements: Iterable[object]) -> float:
    """Thêm lần lượt các phần tử, trả về thời gian chạy (giây)."""
    start = time.time()
    for idx, element in enumerate(elements, start=1):
        bloom.insert(element)
        if idx % PROGRESS_EVERY == 0:
            logger.info("inserted %d elements (%d accepted)", idx, bloom.metrics.inserts_accepted)
    return time.time() - start


def probe_filter(bloom: InstrumentedFilter, probes: Iterable[object]) -> Dict[str, float]:
    """Truy vấn các phần tử chưa từng thêm; mọi kết quả dương là dương tính giả."""
    before = bloom.metrics.query_hits, bloom.metrics.queries
    start = time.time()
    for element in probes:
        bloom.might_contain(element)
    duration = time.time() - start
    hits = bloom.metrics.query_hits - before[0]
    total = bloom.metrics.queries - before[1]
    return {
        "probes": total,
        "false_positives": hits,
        "empirical_fpr": hits / total if total else 0.0,
        "duration_sec": duration,
    }


def describe(bloom: BloomFilter) -> List[str]:
    lines = [repr(bloom)]
    if isinstance(bloom, FiniteBloomFilter):
        lines.append(
            f"- Slices (k) x bits/slice (m): {bloom.slice_count} x {bloom.bits_per_slice} "
            f"= {bloom.total_bits:,} bits (~{bloom.total_bits / 8 / 1024:.1f} KB)"
        )
        lines.append(f"- Fill ratio     : {bloom.fill_ratio():.2%}")
        lines.append(f"- Estimated FPR  : {bloom.estimate_fpr():.4%}")
    elif isinstance(bloom, GrowingBloomFilter):
        lines.append(f"- Shards         : {bloom.shard_count}")
        lines.append(f"- Total bits     : {bloom.total_bits:,}")
    return lines


def print_stats(bloom: BloomFilter, metrics: FilterMetrics, probe: Optional[Dict[str, float]]) -> None:
    print("=" * 60)
    print("BLOOM FILTER SUMMARY")
    for line in describe(bloom):
        print(line)
    print(f"- Insertions     : {bloom.insertions:,}")
    print(
        f"- Insert calls   : {metrics.inserts:,} "
        f"(accepted={metrics.inserts_accepted:,} duplicate={metrics.inserts_duplicate:,} "
        f"rejected={metrics.inserts_rejected:,})"
    )
    if probe is not None:
        print(
            f"- Empirical FPR  : {probe['false_positives']:,.0f}/{probe['probes']:,.0f} "
            f"≈ {probe['empirical_fpr']:.4%} (target {bloom.fpp:.4%})"
        )
        if probe["duration_sec"] > 0:
            print(f"- Query throughput: {probe['probes'] / probe['duration_sec']:,.0f} q/s")
    print("=" * 60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bloomchain-demo", description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--capacity", type=int, default=config.DEFAULT_CAPACITY,
                        help="capacity of the filter, -1 for a growing filter")
    parser.add_argument("--fpp", type=float, default=config.DEFAULT_FPP)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--words", help="file with one element per line")
    source.add_argument("--generate", type=int, metavar="N", help="insert integers 0..N-1")
    source.add_argument("--load", help="read a serialized filter instead of building one")
    parser.add_argument("--limit", type=int, help="max number of words read from --words")
    parser.add_argument("--probe", type=int, default=0, metavar="N",
                        help="query N integers never inserted and report the false positive rate")
    parser.add_argument("--out", help="write the serialized filter to this file")
    parser.add_argument("--log-level", default="WARNING")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        if args.load:
            bloom = factory.deserialize(Path(args.load).read_bytes())
        else:
            bloom = factory.create(args.capacity, args.fpp)
    except BloomFilterError as exc:
        print(f"error: {exc}")
        return 2

    instrumented = InstrumentedFilter(bloom)
    if args.words:
        words = load_words(args.words, args.limit)
        duration = fill_filter(instrumented, words)
        print(f"Inserted {len(words):,} words in {duration:.2f}s")
    elif args.generate:
        duration = fill_filter(instrumented, range(args.generate))
        print(f"Inserted {args.generate:,} integers in {duration:.2f}s")

    probe = None
    if args.probe:
        # số nguyên âm không bao giờ được --generate thêm vào
        probe = probe_filter(instrumented, range(-args.probe, 0))

    print_stats(bloom, instrumented.metrics, probe)

    if args.out:
        try:
            Path(args.out).write_bytes(bloom.serialize())
        except BloomFilterError as exc:
            print(f"error: {exc}")
            return 2
        print(f"Serialized filter written to {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
