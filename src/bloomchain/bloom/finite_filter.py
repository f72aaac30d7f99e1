"""Bloom filter dung lượng cố định, bảo đảm fpp cho tới khi đạt capacity.

Bit vector M = k * m bit được chia thành k lát; mỗi phần tử bật một bit trong
mỗi lát, vị trí lấy từ double hashing trên hai giá trị băm (x, y = hash(e, x)).
Xem ``bloom_params`` cho công thức k và m.
"""
from __future__ import annotations

import logging
from typing import Any, List, Tuple

from bloomchain.bloom import codec
from bloomchain.bloom.bit_vector import BitVector
from bloomchain.bloom.bloom_filter import BloomFilter, InsertOutcome
from bloomchain.bloom.bloom_params import SliceParams
from bloomchain.errors import InvalidArgument, MalformedData
from bloomchain.types.hashable import hash_pair

logger = logging.getLogger(__name__)


class FiniteBloomFilter(BloomFilter):
    def __init__(self, capacity: int, fpp: float) -> None:
        self._params = SliceParams.for_capacity(capacity, fpp)
        self._bits = BitVector(self._params.total_bits)
        self._count = 0
        logger.debug(
            "FiniteBloomFilter init: capacity=%d fpp=%g k=%d m=%d M=%d",
            capacity,
            fpp,
            self._params.slice_count,
            self._params.bits_per_slice,
            self._params.total_bits,
        )

    @property
    def capacity(self) -> int:
        return self._params.capacity

    @property
    def fpp(self) -> float:
        return self._params.fpp

    @property
    def insertions(self) -> int:
        return self._count

    @property
    def slice_count(self) -> int:
        return self._params.slice_count

    @property
    def bits_per_slice(self) -> int:
        return self._params.bits_per_slice

    @property
    def total_bits(self) -> int:
        return self._params.total_bits

    def insert(self, element: Any) -> InsertOutcome:
        """Thêm phần tử nếu chưa có và filter chưa đầy.

        Phần tử đã có (mọi bit của nó đã bật) không tiêu tốn capacity.
        """
        positions = self.bit_positions(element)
        if self._bits.contains_all(positions):
            return InsertOutcome.ALREADY_PRESENT
        if self._count >= self.capacity:
            logger.debug("insert rejected: filter at capacity (%d)", self.capacity)
            return InsertOutcome.REJECTED_AT_CAPACITY
        for pos in positions:
            self._bits.set(pos)
        self._count += 1
        return InsertOutcome.ACCEPTED

    def might_contain(self, element: Any) -> bool:
        return self._bits.contains_all(self.bit_positions(element))

    def bit_positions(self, element: Any) -> List[int]:
        """k vị trí bit (một trong mỗi lát) của phần tử."""
        x, y = hash_pair(element)
        return self._params.bit_positions(x, y)

    def slice_bounds(self) -> List[Tuple[int, int]]:
        return self._params.slice_bounds()

    def bits_snapshot(self) -> BitVector:
        """Bản sao bit vector cho chẩn đoán; sửa bản sao không ảnh hưởng filter."""
        return self._bits.copy()

    def fill_ratio(self) -> float:
        return self._bits.cardinality() / float(self.total_bits)

    def estimate_fpr(self) -> float:
        """Ước lượng FPR thực tế từ tỉ lệ bit bật trong từng lát."""
        ratio = 1.0
        for start, stop in self.slice_bounds():
            ratio *= self._bits.count_range(start, stop) / float(stop - start)
        return ratio

    def union(self, other: "FiniteBloomFilter") -> "FiniteBloomFilter":
        """Hợp hai filter cùng capacity và fpp thành filter mới (OR bit vector)."""
        if (self.capacity, self.fpp) != (other.capacity, other.fpp):
            raise InvalidArgument("Bloom filters must share capacity and fpp to union")
        count = self._count + other._count
        if count > self.capacity:
            raise InvalidArgument(f"union would hold {count} insertions, capacity is {self.capacity}")
        merged = FiniteBloomFilter(self.capacity, self.fpp)
        merged._bits.union(self._bits)
        merged._bits.union(other._bits)
        merged._count = count
        return merged

    def serialize(self) -> bytes:
        return codec.encode(self.capacity, self.fpp, self._count, self._bits)

    @classmethod
    def deserialize(cls, data: bytes) -> "FiniteBloomFilter":
        """Dựng lại filter từ blob của ``serialize``; ném MalformedData nếu blob hỏng."""
        record = codec.decode(data)
        try:
            restored = cls(record.capacity, record.fpp)
        except InvalidArgument as exc:
            raise MalformedData(f"invalid filter header: {exc}") from exc
        if not (0 <= record.insertions <= record.capacity):
            raise MalformedData(
                f"insertion count {record.insertions} outside [0, {record.capacity}]"
            )
        restored._bits = codec.restore_bits(record, restored.total_bits)
        restored._count = record.insertions
        restored._check_slices()
        return restored

    def _check_slices(self) -> None:
        """Mỗi phần tử được nhận bật một bit trong mỗi lát: lát có từ 1 tới count bit bật."""
        low = 1 if self._count else 0
        for i, (start, stop) in enumerate(self.slice_bounds()):
            filled = self._bits.count_range(start, stop)
            if not (low <= filled <= self._count):
                raise MalformedData(
                    f"slice {i} has {filled} bits set, inconsistent with {self._count} insertions"
                )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FiniteBloomFilter):
            return NotImplemented
        return (
            self._params == other._params
            and self._count == other._count
            and self._bits == other._bits
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"FiniteBloomFilter(cap={self.capacity}, fpp={self.fpp:g}, "
            f"insertions={self._count}) [{self.slice_count} x {self.bits_per_slice}]"
        )
