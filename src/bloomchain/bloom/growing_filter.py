"""Bloom filter không giới hạn capacity, ghép chuỗi các FiniteBloomFilter.

Shard thứ i (tính từ shard cũ nhất) có capacity = n0 * (1/r)^i và
fpp = P0 * r^i: shard sau lớn hơn và chặt hơn, nên FPR tổng không trôi lên khi
số phần tử tăng. Chỉ shard đầu (mới nhất) nhận phần tử mới; các shard không bao
giờ bị gộp hay xóa, nên truy vấn quét tuyến tính theo số shard.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, List

from bloomchain.bloom.bloom_filter import BloomFilter, InsertOutcome
from bloomchain.bloom.bloom_params import validate_capacity, validate_fpp
from bloomchain.bloom.finite_filter import FiniteBloomFilter
from bloomchain.config import UNBOUNDED
from bloomchain.errors import InvalidArgument, UnsupportedOperation

logger = logging.getLogger(__name__)


class GrowingBloomFilter(BloomFilter):
    def __init__(self, initial_capacity: int, fpp: float, growth_rate: float) -> None:
        self.initial_capacity = validate_capacity(initial_capacity)
        self.base_fpp = validate_fpp(fpp)
        if not (0 < growth_rate < 1):
            raise InvalidArgument("growth_rate must be on the interval (0,1)")
        self.growth_rate = float(growth_rate)
        # mới nhất ở đầu
        self._shards: Deque[FiniteBloomFilter] = deque()
        self._shards.appendleft(self._next_shard())

    @property
    def capacity(self) -> int:
        return UNBOUNDED

    @property
    def fpp(self) -> float:
        return self.base_fpp

    @property
    def insertions(self) -> int:
        return sum(shard.insertions for shard in self._shards)

    @property
    def shard_count(self) -> int:
        return len(self._shards)

    @property
    def total_bits(self) -> int:
        return sum(shard.total_bits for shard in self._shards)

    def shards_snapshot(self) -> List[FiniteBloomFilter]:
        """Danh sách shard (mới nhất trước); danh sách là bản sao."""
        return list(self._shards)

    def insert(self, element: Any) -> InsertOutcome:
        """Thêm phần tử vào shard đầu, cấp shard mới khi shard đầu đã đầy.

        Không bao giờ trả về REJECTED_AT_CAPACITY.
        """
        if any(shard.might_contain(element) for shard in self._shards):
            return InsertOutcome.ALREADY_PRESENT
        head = self._shards[0]
        if head.insertions >= head.capacity:
            head = self._next_shard()
            self._shards.appendleft(head)
        return head.insert(element)

    def might_contain(self, element: Any) -> bool:
        return any(shard.might_contain(element) for shard in self._shards)

    def serialize(self) -> bytes:
        raise UnsupportedOperation(
            "GrowingBloomFilter cannot be serialized; serialize each shard instead"
        )

    def _next_shard(self) -> FiniteBloomFilter:
        i = len(self._shards)
        capacity = max(1, int(self.initial_capacity * (1 / self.growth_rate) ** i))
        fpp = self.base_fpp * self.growth_rate**i
        shard = FiniteBloomFilter(capacity, fpp)
        logger.debug(
            "GrowingBloomFilter shard #%d: capacity=%d fpp=%g bits=%d",
            i,
            capacity,
            fpp,
            shard.total_bits,
        )
        return shard

    def __repr__(self) -> str:
        return (
            f"GrowingBloomFilter(insertions={self.insertions}/inf, fpp={self.base_fpp:g}) "
            f"[filters={self.shard_count} bits={self.total_bits}]"
        )
