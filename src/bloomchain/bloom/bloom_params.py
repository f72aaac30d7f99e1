"""Tiện ích tham số Bloom filter phân lát (partitioned).

Tổng M bit được chia thành k lát rời nhau, mỗi lát m bit; mỗi phần tử bật đúng
một bit trong mỗi lát. Một filter dùng tối ưu khi mỗi lát đầy khoảng một nửa
(p = 1/2) lúc đạt capacity:

    k = ceil(log2(1 / P))
    m = ceil((1 / p) * n * |ln P| / (k * (ln 2)^2))

Xem "Scalable Bloom Filters" (Almeida et al.) cho cách chia lát.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from bloomchain.errors import InvalidArgument

# Số bit tối đa của bit vector (giới hạn int32 của định dạng serialize)
MAX_TOTAL_BITS = 2**31 - 1

# Tỉ lệ lấp đầy mục tiêu của mỗi lát khi đạt capacity
FILL_RATIO = 0.5

_INT32_MASK = 0xFFFFFFFF


def validate_fpp(fpp: float) -> float:
    """Kiểm tra fpp nằm trong khoảng mở (0, 1)."""
    if isinstance(fpp, bool) or not isinstance(fpp, (int, float)):
        raise InvalidArgument("fpp must be a real number")
    if not (0 < fpp < 1):
        raise InvalidArgument("fpp must be on the interval (0,1)")
    return float(fpp)


def validate_capacity(capacity: int) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise InvalidArgument("capacity must be an integer")
    if capacity <= 0:
        raise InvalidArgument("capacity must be a positive value")
    return capacity


def _to_int32(value: int) -> int:
    value &= _INT32_MASK
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass(frozen=True)
class SliceParams:
    capacity: int
    fpp: float
    slice_count: int
    bits_per_slice: int

    @property
    def total_bits(self) -> int:
        return self.slice_count * self.bits_per_slice

    @staticmethod
    def for_capacity(capacity: int, fpp: float) -> "SliceParams":
        """Tính k (số lát) và m (bit mỗi lát) cho capacity và fpp mong muốn."""
        capacity = validate_capacity(capacity)
        fpp = validate_fpp(fpp)

        # -log2(fpp) vẫn hữu hạn với fpp dưới chuẩn (subnormal), 1/fpp thì không
        k = max(1, int(math.ceil(-math.log2(fpp))))
        try:
            m = int(math.ceil(((1 / FILL_RATIO) * capacity * abs(math.log(fpp))) / (k * math.log(2) ** 2)))
        except OverflowError as exc:
            raise InvalidArgument("Total number of bits exceeds maximum") from exc
        if k * m > MAX_TOTAL_BITS:
            raise InvalidArgument("Total number of bits exceeds maximum")
        return SliceParams(capacity=capacity, fpp=fpp, slice_count=k, bits_per_slice=m)

    def bit_positions(self, x: int, y: int) -> List[int]:
        """Sinh k vị trí bit bằng double hashing: lát i nhận abs(x + i*y) mod m.

        Phép cộng được cắt về 32-bit có dấu giống số học int của hàm băm.
        """
        m = self.bits_per_slice
        return [abs(_to_int32(x + i * y)) % m + i * m for i in range(self.slice_count)]

    def slice_bounds(self) -> List[Tuple[int, int]]:
        """Biên [start, stop) của từng lát trong bit vector phẳng."""
        m = self.bits_per_slice
        return [(i * m, (i + 1) * m) for i in range(self.slice_count)]
