"""Factory chọn filter hữu hạn hay tăng trưởng theo capacity."""
from __future__ import annotations

from bloomchain import config
from bloomchain.bloom.bloom_filter import BloomFilter
from bloomchain.bloom.bloom_params import validate_fpp
from bloomchain.bloom.finite_filter import FiniteBloomFilter
from bloomchain.bloom.growing_filter import GrowingBloomFilter
from bloomchain.errors import InvalidArgument


def create(capacity: int = config.DEFAULT_CAPACITY, fpp: float = config.DEFAULT_FPP) -> BloomFilter:
    """``capacity == UNBOUNDED`` (-1) cho GrowingBloomFilter, ``capacity > 0`` cho FiniteBloomFilter."""
    fpp = validate_fpp(fpp)
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise InvalidArgument("capacity must be an integer")
    if capacity == config.UNBOUNDED:
        return GrowingBloomFilter(config.DEFAULT_CAPACITY, fpp, config.DEFAULT_GROWTH_RATE)
    if capacity > 0:
        return FiniteBloomFilter(capacity, fpp)
    raise InvalidArgument("capacity must be -1 or a positive value")


def deserialize(data: bytes) -> FiniteBloomFilter:
    """Ném UnsupportedOperation nếu blob mang capacity -1, MalformedData nếu blob hỏng."""
    return FiniteBloomFilter.deserialize(data)
