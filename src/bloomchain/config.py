"""Giá trị mặc định cho factory, có thể ghi đè qua biến môi trường.

Giá trị môi trường không đọc được hoặc nằm ngoài miền hợp lệ bị bỏ qua (có log
cảnh báo) và giá trị mặc định được dùng thay thế.
"""
from __future__ import annotations

import logging
import os
from typing import Callable, Mapping, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Giá trị capacity đặc biệt: filter không giới hạn (GrowingBloomFilter)
UNBOUNDED = -1


def read_setting(
    environ: Mapping[str, str],
    name: str,
    default: T,
    parse: Callable[[str], T],
    valid: Callable[[T], bool],
) -> T:
    """Đọc biến ``name`` từ ``environ``; trả ``default`` nếu thiếu hoặc không hợp lệ."""
    raw = environ.get(name)
    if raw is None:
        return default
    try:
        value = parse(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not a valid %s", name, raw, parse.__name__)
        return default
    if not valid(value):
        logger.warning("ignoring %s=%r: out of range", name, raw)
        return default
    return value


def _in_unit_interval(value: float) -> bool:
    return 0 < value < 1


DEFAULT_CAPACITY = read_setting(os.environ, "BLOOMCHAIN_DEFAULT_CAPACITY", 10000, int, lambda v: v > 0)
DEFAULT_FPP = read_setting(os.environ, "BLOOMCHAIN_DEFAULT_FPP", 0.01, float, _in_unit_interval)
DEFAULT_GROWTH_RATE = read_setting(os.environ, "BLOOMCHAIN_GROWTH_RATE", 0.5, float, _in_unit_interval)
