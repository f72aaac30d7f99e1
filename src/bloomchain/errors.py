"""Các lỗi dùng chung cho Bloom filter.

Hết dung lượng không phải là lỗi: ``insert`` trả về
``InsertOutcome.REJECTED_AT_CAPACITY`` thay vì ném ngoại lệ.
"""
from __future__ import annotations


class BloomFilterError(Exception):
    """Gốc của mọi lỗi trong bloomchain."""


class InvalidArgument(BloomFilterError, ValueError):
    """Tham số khởi tạo không hợp lệ (capacity, fpp, kích thước bit)."""


class UnsupportedOperation(BloomFilterError, NotImplementedError):
    """Thao tác không hỗ trợ, vd: serialize một GrowingBloomFilter."""


class MalformedData(BloomFilterError, ValueError):
    """Blob nhị phân bị cắt cụt hoặc không nhất quán khi deserialize."""


class UnsupportedElementType(BloomFilterError, TypeError):
    """Kiểu phần tử chưa đăng ký hàm băm."""
