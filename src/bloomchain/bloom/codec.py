"""Định dạng nhị phân của FiniteBloomFilter (big-endian).

    offset  size  field
    0       4     capacity (int32)
    4       8     fpp (float64)
    12      4     insertion count (int32)
    16      4     L = chỉ số bit bật cao nhất + 1, hoặc 0 nếu rỗng
    20      *     chữ số hex ASCII (chữ thường) của L bit đầu, bit 0 là chữ số
                  nhị phân có trọng số cao nhất; rỗng khi L = 0

Phần đuôi là text hex chứ không phải byte đóng gói (gần gấp đôi kích thước tối
thiểu); giữ nguyên để tương thích với dữ liệu đã ghi.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass

from bloomchain.bloom.bit_vector import BitVector
from bloomchain.config import UNBOUNDED
from bloomchain.errors import MalformedData, UnsupportedOperation

HEADER = struct.Struct(">idii")
HEADER_SIZE = HEADER.size  # 20 bytes

_HEX_DIGITS = frozenset(b"0123456789abcdef")


@dataclass(frozen=True)
class FilterRecord:
    capacity: int
    fpp: float
    insertions: int
    bit_length: int
    trailer: int


def encode(capacity: int, fpp: float, insertions: int, bits: BitVector) -> bytes:
    length = bits.highest_set_bit() + 1
    trailer = format(bits.to_int(length), "x").encode("ascii") if length else b""
    return HEADER.pack(capacity, fpp, insertions, length) + trailer


def decode(data: bytes) -> FilterRecord:
    """Đọc header và phần đuôi hex; chưa dựng lại bit vector."""
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        raise MalformedData(f"truncated header: {len(data)} < {HEADER_SIZE} bytes")

    capacity, fpp, insertions, length = HEADER.unpack_from(data, 0)
    if capacity == UNBOUNDED:
        raise UnsupportedOperation("growing filters have no serialized form")
    if length < 0:
        raise MalformedData(f"negative bit length: {length}")

    raw = data[HEADER_SIZE:]
    if length == 0:
        if raw:
            raise MalformedData("trailer present for an empty bit vector")
        return FilterRecord(capacity, fpp, insertions, 0, 0)

    if not raw:
        raise MalformedData(f"missing trailer for {length} bits")
    if not _HEX_DIGITS.issuperset(raw):
        raise MalformedData("trailer is not lowercase hexadecimal text")
    if len(raw) > (length + 3) // 4:
        raise MalformedData(f"trailer has {len(raw)} digits, more than {length} bits allow")
    if raw[:1] == b"0":
        raise MalformedData("trailer has a leading zero digit")

    trailer = int(raw.decode("ascii"), 16)
    # bit L-1 là bit bật cao nhất, tức chữ số nhị phân cuối của phần đuôi
    if not trailer & 1:
        raise MalformedData(f"bit {length - 1} is not set; trailer truncated or length inconsistent")
    return FilterRecord(capacity, fpp, insertions, length, trailer)


def restore_bits(record: FilterRecord, total_bits: int) -> BitVector:
    """Dựng bit vector ``total_bits`` bit từ bản ghi đã đọc."""
    if record.bit_length > total_bits:
        raise MalformedData(
            f"declared bit length {record.bit_length} exceeds filter size {total_bits}"
        )
    bits = BitVector(total_bits)
    try:
        bits.load_int(record.trailer, record.bit_length)
    except OverflowError as exc:
        raise MalformedData(f"trailer does not fit in {record.bit_length} bits") from exc
    return bits
