"""Hash provider cho các kiểu phần tử được hỗ trợ.

Mỗi kiểu đăng ký một hàm ``hash_value(value, seed) -> int32`` và một seed mặc
định qua ``functools.singledispatch``, nên thêm kiểu mới không cần sửa filter.
Băm dùng MurmurHash3 32-bit (mmh3); seed theo quy ước của MurmurHash3
(string / array / product seed).
"""
from __future__ import annotations

import dataclasses
import struct
from functools import singledispatch
from typing import Any

import mmh3

from bloomchain.errors import UnsupportedElementType

STRING_SEED = 0xF7CA7FD2
ARRAY_SEED = 0x3C074A61
RECORD_SEED = 0xCAFEBABE

_SEED_MASK = 0xFFFFFFFF


def _murmur(data: bytes, seed: int) -> int:
    """MurmurHash3 32-bit có dấu; seed được ép về unsigned 32-bit."""
    return mmh3.hash(data, seed & _SEED_MASK, signed=True)


def _int_bytes(value: int) -> bytes:
    try:
        return value.to_bytes(8, byteorder="big", signed=True)
    except OverflowError:
        # số lớn hơn 64-bit: dùng biểu diễn bù hai ngắn nhất
        length = (value.bit_length() + 8) // 8
        return value.to_bytes(length, byteorder="big", signed=True)


@singledispatch
def hash_value(value: Any, seed: int) -> int:
    """Băm ``value`` với ``seed`` thành số nguyên 32-bit có dấu."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _hash_fields(type(value).__name__, _record_fields(value), seed)
    raise UnsupportedElementType(f"no hash implementation for {type(value).__name__}")


@hash_value.register
def _(value: str, seed: int) -> int:
    return _murmur(value.encode("utf-8"), seed)


@hash_value.register
def _(value: int, seed: int) -> int:
    return _murmur(_int_bytes(value), seed)


@hash_value.register
def _(value: float, seed: int) -> int:
    return _murmur(struct.pack(">d", value), seed)


@hash_value.register(bytes)
@hash_value.register(bytearray)
@hash_value.register(memoryview)
def _(value, seed: int) -> int:
    return _murmur(bytes(value), seed)


@hash_value.register
def _(value: tuple, seed: int) -> int:
    return _hash_fields("", value, seed)


def _record_fields(value: Any) -> tuple:
    return tuple(getattr(value, f.name) for f in dataclasses.fields(value))


def _hash_fields(prefix: str, fields: tuple, seed: int) -> int:
    """Kết hợp hash từng trường: hash của trường trước làm seed cho trường sau."""
    h = _murmur(f"{prefix}#{len(fields)}".encode("utf-8"), seed)
    for item in fields:
        h = hash_value(item, h)
    return h


@singledispatch
def default_seed(value: Any) -> int:
    """Seed mặc định của kiểu phần tử."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return RECORD_SEED
    raise UnsupportedElementType(f"no hash implementation for {type(value).__name__}")


@default_seed.register
def _(value: str) -> int:
    return STRING_SEED


@default_seed.register(int)
@default_seed.register(float)
@default_seed.register(bytes)
@default_seed.register(bytearray)
@default_seed.register(memoryview)
def _(value) -> int:
    return ARRAY_SEED


@default_seed.register
def _(value: tuple) -> int:
    return RECORD_SEED


def hash_pair(value: Any) -> tuple[int, int]:
    """Trả về cặp (x, y): x = hash(value, seed mặc định), y = hash(value, x)."""
    x = hash_value(value, default_seed(value))
    y = hash_value(value, x)
    return x, y
