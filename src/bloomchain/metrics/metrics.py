"""Bộ đếm metrics gọn cho quan sát filter."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

from bloomchain.bloom.bloom_filter import BloomFilter, InsertOutcome


@dataclass
class FilterMetrics:
    inserts_accepted: int = 0
    inserts_duplicate: int = 0
    inserts_rejected: int = 0
    queries: int = 0
    query_hits: int = 0
    query_latency_total_us: int = 0

    def record_insert(self, outcome: InsertOutcome) -> None:
        if outcome is InsertOutcome.ACCEPTED:
            self.inserts_accepted += 1
        elif outcome is InsertOutcome.ALREADY_PRESENT:
            self.inserts_duplicate += 1
        else:
            self.inserts_rejected += 1

    def record_query(self, hit: bool, micros: int = 0) -> None:
        self.queries += 1
        if hit:
            self.query_hits += 1
        self.query_latency_total_us += micros

    @property
    def inserts(self) -> int:
        return self.inserts_accepted + self.inserts_duplicate + self.inserts_rejected

    def positive_rate(self) -> float:
        if self.queries == 0:
            return 0.0
        return self.query_hits / float(self.queries)

    def average_query_latency_us(self) -> float:
        if self.queries == 0:
            return 0.0
        return self.query_latency_total_us / float(self.queries)


class InstrumentedFilter:
    """Bọc một BloomFilter và ghi nhận kết quả insert/query vào FilterMetrics."""

    def __init__(self, bloom: BloomFilter, metrics: Optional[FilterMetrics] = None) -> None:
        self.bloom = bloom
        self.metrics = metrics or FilterMetrics()

    def insert(self, element: Any) -> InsertOutcome:
        outcome = self.bloom.insert(element)
        self.metrics.record_insert(outcome)
        return outcome

    def might_contain(self, element: Any) -> bool:
        start = time.perf_counter_ns()
        hit = self.bloom.might_contain(element)
        self.metrics.record_query(hit, int((time.perf_counter_ns() - start) / 1000))
        return hit

    def __contains__(self, element: Any) -> bool:
        return self.might_contain(element)
