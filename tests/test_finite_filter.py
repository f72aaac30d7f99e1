# -*- coding: utf-8 -*-
"""
Kiểm thử FiniteBloomFilter: chèn, truy vấn, capacity, khử trùng lặp, FPR.
"""

import logging

import pytest

from bloomchain.bloom.bloom_filter import InsertOutcome
from bloomchain.bloom.bloom_params import SliceParams
from bloomchain.bloom.finite_filter import FiniteBloomFilter
from bloomchain.errors import InvalidArgument

FPPS = [0.5, 0.1, 0.01, 0.0001]


@pytest.mark.parametrize("fpp", [0.1, 0.01, 0.001])
def test_contains_strings(fpp):
    bf = FiniteBloomFilter(1000, fpp)
    for word in ("apple", "banana", "coriander"):
        assert bf.insert(word) is InsertOutcome.ACCEPTED
        assert bf.might_contain(word)
    assert not bf.might_contain("dill")


@pytest.mark.parametrize("fpp", [0.1, 0.01, 0.001])
def test_contains_floats(fpp):
    bf = FiniteBloomFilter(1000, fpp)
    for value in (11.0, 3.14, 42.0):
        bf.insert(value)
    assert 11.0 in bf
    assert 3.14 in bf
    assert 42.0 in bf
    assert 137.0 not in bf


def test_no_false_negatives():
    bf = FiniteBloomFilter(500, 0.05)
    outcomes = {value: bf.insert(value) for value in range(500)}
    for value, outcome in outcomes.items():
        assert outcome
        assert bf.might_contain(value)


def test_duplicate_insert_counts_once():
    bf = FiniteBloomFilter(10, 0.01)
    assert bf.insert("x") is InsertOutcome.ACCEPTED
    assert bf.insert("x") is InsertOutcome.ALREADY_PRESENT
    assert bf.insertions == 1
    assert len(bf) == 1


def test_capacity_ceiling():
    capacity = 100
    bf = FiniteBloomFilter(capacity, 0.000001)
    for value in range(capacity):
        assert bf.insert(value) is InsertOutcome.ACCEPTED
    assert bf.insertions == capacity
    assert bf.is_full

    snapshot = bf.bits_snapshot()
    outcome = bf.insert("a brand new element")
    assert outcome is InsertOutcome.REJECTED_AT_CAPACITY
    assert not outcome
    assert bf.insertions == capacity
    assert bf.bits_snapshot() == snapshot
    assert not bf.might_contain("a brand new element")


def test_duplicate_of_saturated_filter_is_already_present():
    bf = FiniteBloomFilter(2, 0.001)
    bf.insert("a")
    bf.insert("b")
    assert bf.insert("a") is InsertOutcome.ALREADY_PRESENT
    assert bf.insertions == 2


@pytest.mark.parametrize("fpp", FPPS)
def test_false_positive_rate_within_bound(fpp):
    capacity = 1000
    bf = FiniteBloomFilter(capacity, fpp)
    for value in range(capacity):
        bf.insert(value)

    probes = range(capacity, capacity + 20_000)
    false_positives = sum(1 for value in probes if bf.might_contain(value))
    empirical_fpr = false_positives / len(probes)

    # dung sai lấy mẫu: ~3 độ lệch chuẩn của nhị thức
    tolerance = 3 * (fpp * (1 - fpp) / len(probes)) ** 0.5
    assert empirical_fpr <= fpp + tolerance


def test_derived_parameters():
    bf = FiniteBloomFilter(10, 0.01)
    params = SliceParams.for_capacity(10, 0.01)
    assert bf.slice_count == params.slice_count == 7
    assert bf.bits_per_slice == params.bits_per_slice == 28
    assert bf.total_bits == 7 * 28
    assert bf.slice_bounds()[0] == (0, 28)
    assert bf.slice_bounds()[-1] == (6 * 28, 7 * 28)


def test_one_bit_per_slice():
    bf = FiniteBloomFilter(100, 0.01)
    positions = bf.bit_positions("element")
    assert len(positions) == bf.slice_count
    for pos, (start, stop) in zip(positions, bf.slice_bounds()):
        assert start <= pos < stop


def test_bits_snapshot_is_a_copy():
    bf = FiniteBloomFilter(100, 0.01)
    snapshot = bf.bits_snapshot()
    snapshot.set(0)
    snapshot.set(1)
    assert bf.fill_ratio() == 0.0
    assert bf.estimate_fpr() == 0.0


def test_fill_ratio_near_half_at_capacity():
    bf = FiniteBloomFilter(2000, 0.01)
    for value in range(2000):
        bf.insert(value)
    # mỗi lát ~ 1 - e^{-n/m}; với hệ số 1/p = 2 là khoảng 30%
    assert 0.2 < bf.fill_ratio() < 0.5
    assert bf.estimate_fpr() < 0.01


def test_union():
    left = FiniteBloomFilter(100, 0.01)
    right = FiniteBloomFilter(100, 0.01)
    left.insert("a")
    right.insert("b")
    merged = left.union(right)
    assert merged.insertions == 2
    assert "a" in merged and "b" in merged
    assert "b" not in left


def test_union_rejects_mismatched_filters():
    with pytest.raises(InvalidArgument):
        FiniteBloomFilter(100, 0.01).union(FiniteBloomFilter(100, 0.02))


@pytest.mark.parametrize(
    "capacity, fpp",
    [(0, 0.01), (-5, 0.01), (10, 0.0), (10, 1.0), (10, -0.1), (10, 1.5), (2**31, 0.5)],
)
def test_invalid_construction(capacity, fpp):
    with pytest.raises(InvalidArgument):
        FiniteBloomFilter(capacity, fpp)


def test_repr():
    bf = FiniteBloomFilter(10, 0.01)
    assert repr(bf) == "FiniteBloomFilter(cap=10, fpp=0.01, insertions=0) [7 x 28]"


def test_subnormal_fpp():
    bf = FiniteBloomFilter(10, 5e-324)
    assert bf.slice_count == 1074
    assert bf.insert("x") is InsertOutcome.ACCEPTED
    assert bf.might_contain("x")


def test_huge_capacity_is_invalid_argument():
    with pytest.raises(InvalidArgument):
        FiniteBloomFilter(10**400, 0.01)


def test_rejected_insert_does_not_warn(caplog):
    bf = FiniteBloomFilter(2, 0.0001)
    bf.insert("a")
    bf.insert("b")
    with caplog.at_level(logging.DEBUG, logger="bloomchain"):
        for i in range(50):
            assert bf.insert(f"extra-{i}") is InsertOutcome.REJECTED_AT_CAPACITY
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert any("at capacity" in r.getMessage() for r in caplog.records)
