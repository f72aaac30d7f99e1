# -*- coding: utf-8 -*-
"""
Kiểm thử factory create().
"""

import pytest

from bloomchain import config
from bloomchain.bloom.factory import create
from bloomchain.bloom.finite_filter import FiniteBloomFilter
from bloomchain.bloom.growing_filter import GrowingBloomFilter
from bloomchain.errors import InvalidArgument


def test_positive_capacity_gives_finite_filter():
    bf = create(100, 0.02)
    assert isinstance(bf, FiniteBloomFilter)
    assert bf.capacity == 100
    assert bf.false_positive_probability == 0.02


def test_unbounded_gives_growing_filter():
    bf = create(config.UNBOUNDED, 0.02)
    assert isinstance(bf, GrowingBloomFilter)
    assert bf.capacity == -1
    assert bf.initial_capacity == config.DEFAULT_CAPACITY
    assert bf.growth_rate == config.DEFAULT_GROWTH_RATE


def test_defaults():
    bf = create()
    assert bf.capacity == config.DEFAULT_CAPACITY
    assert bf.fpp == config.DEFAULT_FPP


@pytest.mark.parametrize("capacity", [0, -2, -100, 1.5, "10", True])
def test_invalid_capacity(capacity):
    with pytest.raises(InvalidArgument):
        create(capacity, 0.01)


@pytest.mark.parametrize("capacity", [-1, 10])
@pytest.mark.parametrize("fpp", [0, 1, -0.5, 2.0, float("nan")])
def test_invalid_fpp_in_both_branches(capacity, fpp):
    with pytest.raises(InvalidArgument):
        create(capacity, fpp)


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        create(0, 0.01)


def test_subnormal_fpp():
    bf = create(10, 5e-324)
    assert isinstance(bf, FiniteBloomFilter)
    assert bf.fpp == 5e-324
