"""Hợp đồng chung cho mọi Bloom filter (hữu hạn và tăng trưởng)."""
from __future__ import annotations

import abc
from enum import Enum, auto
from typing import Any, Iterable, List

from bloomchain.config import UNBOUNDED


class InsertOutcome(Enum):
    ACCEPTED = auto()
    ALREADY_PRESENT = auto()
    REJECTED_AT_CAPACITY = auto()

    def __bool__(self) -> bool:
        # phần tử được biểu diễn trong filter sau lời gọi insert
        return self is not InsertOutcome.REJECTED_AT_CAPACITY


class BloomFilter(abc.ABC):
    """Tập hợp xác suất: không có âm tính giả, dương tính giả bị chặn bởi fpp.

    Cấu trúc một-người-ghi: không có lock nội bộ. Nhiều luồng chỉ đọc
    ``might_contain`` đồng thời là an toàn, nhưng ``insert`` đồng thời cần
    đồng bộ hóa từ bên ngoài.
    """

    @property
    @abc.abstractmethod
    def capacity(self) -> int:
        """Số phần tử phân biệt tối đa; ``UNBOUNDED`` (-1) nếu không giới hạn."""

    @property
    @abc.abstractmethod
    def fpp(self) -> float:
        """Xác suất dương tính giả mục tiêu."""

    @property
    @abc.abstractmethod
    def insertions(self) -> int:
        """Số phần tử phân biệt đã được chấp nhận."""

    @abc.abstractmethod
    def insert(self, element: Any) -> InsertOutcome:
        """Thêm phần tử; trả về kết quả thay vì ném lỗi khi đầy."""

    @abc.abstractmethod
    def might_contain(self, element: Any) -> bool:
        """False chắc chắn chưa thêm, True có thể đã thêm (có FPR)."""

    @abc.abstractmethod
    def serialize(self) -> bytes:
        """Mã hóa filter thành blob nhị phân."""

    @property
    def false_positive_probability(self) -> float:
        return self.fpp

    @property
    def is_bounded(self) -> bool:
        return self.capacity != UNBOUNDED

    @property
    def is_full(self) -> bool:
        return self.is_bounded and self.insertions >= self.capacity

    def insert_many(self, elements: Iterable[Any]) -> List[InsertOutcome]:
        """Thêm nhiều phần tử tuần tự, trả về kết quả theo thứ tự."""
        return [self.insert(element) for element in elements]

    def __contains__(self, element: Any) -> bool:
        return self.might_contain(element)

    def __len__(self) -> int:
        return self.insertions

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(cap={self.capacity}, fpp={self.fpp:g}, "
            f"insertions={self.insertions})"
        )
