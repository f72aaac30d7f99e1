"""Bit vector độ dài cố định, lưu bằng bitarray."""
from __future__ import annotations

from typing import Iterable, List

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

from bloomchain.errors import InvalidArgument


class BitVector:
    __slots__ = ("_bits",)

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise InvalidArgument("size must be positive")
        self._bits = bitarray(size)
        self._bits.setall(0)

    @classmethod
    def from_positions(cls, size: int, positions: Iterable[int]) -> "BitVector":
        vector = cls(size)
        for pos in positions:
            vector.set(pos)
        return vector

    def __len__(self) -> int:
        return len(self._bits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitVector):
            return NotImplemented
        return self._bits == other._bits

    def set(self, pos: int) -> None:
        self._bits[pos] = 1

    def test(self, pos: int) -> bool:
        return bool(self._bits[pos])

    def contains_all(self, positions: Iterable[int]) -> bool:
        """True nếu mọi vị trí trong ``positions`` đều đã bật."""
        bits = self._bits
        return all(bits[pos] for pos in positions)

    def union(self, other: "BitVector") -> None:
        """OR ``other`` vào vector này (tại chỗ)."""
        if len(other) != len(self):
            raise InvalidArgument("bit vectors must have the same length to union")
        self._bits |= other._bits

    def cardinality(self) -> int:
        return self._bits.count(1)

    def count_range(self, start: int, stop: int) -> int:
        """Số bit bật trong [start, stop)."""
        return self._bits.count(1, start, stop)

    def any(self) -> bool:
        return self._bits.any()

    def set_positions(self) -> List[int]:
        """Danh sách vị trí đang bật (tăng dần)."""
        return list(self._bits.search(1))

    def highest_set_bit(self) -> int:
        """Chỉ số bit bật cao nhất, hoặc -1 nếu vector rỗng."""
        return self._bits.find(1, right=True)

    def copy(self) -> "BitVector":
        clone = BitVector.__new__(BitVector)
        clone._bits = self._bits.copy()
        return clone

    def to_int(self, length: int) -> int:
        """Giá trị nguyên của ``length`` bit đầu; bit 0 là chữ số có trọng số cao nhất."""
        if length == 0:
            return 0
        return ba2int(self._bits[:length])

    def load_int(self, value: int, length: int) -> None:
        """Nạp ``value`` (biểu diễn ``length`` bit) vào đầu vector, ngược với ``to_int``.

        Ném OverflowError nếu ``value`` cần nhiều hơn ``length`` bit.
        """
        if length == 0:
            if value:
                raise OverflowError("value does not fit in 0 bits")
            return
        self._bits[:length] = int2ba(value, length=length)
