# -*- coding: utf-8 -*-
"""
Kiểm thử hash provider theo kiểu phần tử.
"""

from dataclasses import dataclass
from typing import NamedTuple

import pytest

from bloomchain.bloom.finite_filter import FiniteBloomFilter
from bloomchain.errors import UnsupportedElementType
from bloomchain.types.hashable import (
    ARRAY_SEED,
    RECORD_SEED,
    STRING_SEED,
    default_seed,
    hash_pair,
    hash_value,
)


@dataclass(frozen=True)
class Point:
    x: int
    y: int


class Pair(NamedTuple):
    left: str
    right: float


SAMPLES = ["text", 42, -(2**63), 2**80, 3.14, b"\x00\x01", bytearray(b"raw"), ("a", 1), Point(1, 2), Pair("l", 0.5)]


@pytest.mark.parametrize("value", SAMPLES)
def test_hash_is_int32_and_deterministic(value):
    h = hash_value(value, default_seed(value))
    assert -(2**31) <= h < 2**31
    assert h == hash_value(value, default_seed(value))


def test_seed_changes_hash():
    assert hash_value("text", 1) != hash_value("text", 2)


def test_second_hash_is_seeded_by_first():
    x, y = hash_pair("text")
    assert x == hash_value("text", STRING_SEED)
    assert y == hash_value("text", x)


def test_negative_seed_is_accepted():
    assert hash_value(b"abc", -1) == hash_value(b"abc", 0xFFFFFFFF)


def test_default_seeds():
    assert default_seed("s") == STRING_SEED
    assert default_seed(1) == default_seed(1.0) == default_seed(b"") == ARRAY_SEED
    assert default_seed((1,)) == default_seed(Point(0, 0)) == RECORD_SEED


def test_bytes_like_values_hash_alike():
    assert hash_value(b"raw", 7) == hash_value(bytearray(b"raw"), 7) == hash_value(memoryview(b"raw"), 7)


def test_records_depend_on_field_order():
    assert hash_value(("a", "b"), RECORD_SEED) != hash_value(("b", "a"), RECORD_SEED)
    assert hash_value(Point(1, 2), RECORD_SEED) != hash_value(Point(2, 1), RECORD_SEED)


def test_unsupported_type():
    with pytest.raises(UnsupportedElementType):
        hash_value(object(), 0)
    with pytest.raises(TypeError):
        default_seed({"a": 1})


def test_filter_accepts_every_supported_type():
    bf = FiniteBloomFilter(100, 0.001)
    for value in SAMPLES:
        bf.insert(value)
    for value in SAMPLES:
        assert bf.might_contain(value)
    assert not bf.might_contain(Point(9, 9))
    assert not bf.might_contain(("b", 1))
