# tests/test_partitions.py
"""
Initial partition policies.
"""

from __future__ import annotations

import pytest
import torch

from lloyd.initialization import (
    RandomPartition,
    RoundRobinPartition,
    KMeansPlusPlusPartition,
    FromPreviousPartition,
)

from data_gen import make_blobs
from utils import same_partition


def test_random_partition_range_and_dtype():
    X = torch.randn(100, 3)
    labels = RandomPartition(random_state=0).partition(X, 4)
    assert labels.shape == (100,)
    assert labels.dtype == torch.long
    assert int(labels.min()) >= 0 and int(labels.max()) < 4


def test_random_partition_int_seed_is_reproducible():
    X = torch.randn(50, 2)
    policy = RandomPartition(random_state=7)
    assert torch.equal(policy.partition(X, 3), policy.partition(X, 3))
    assert torch.equal(policy.partition(X, 3), RandomPartition(random_state=7).partition(X, 3))


def test_random_partition_generator_advances():
    X = torch.randn(200, 2)
    g = torch.Generator().manual_seed(0)
    policy = RandomPartition(random_state=g)
    first = policy.partition(X, 5)
    second = policy.partition(X, 5)
    assert not torch.equal(first, second)


def test_random_partition_rejects_bad_seed():
    with pytest.raises(TypeError):
        RandomPartition(random_state="zero")


def test_round_robin():
    X = torch.zeros(7, 2)
    labels = RoundRobinPartition().partition(X, 3)
    assert labels.tolist() == [0, 1, 2, 0, 1, 2, 0]


def test_kmeans_plusplus_seeds_are_distinct_points():
    X_np, _ = make_blobs(n_per=30, seed=1)
    X = torch.from_numpy(X_np)
    seeds = KMeansPlusPlusPartition(random_state=0).seeds(X, 3)
    assert seeds.shape == (3,)
    assert len(set(seeds.tolist())) == 3


def test_kmeans_plusplus_partition_recovers_separated_blobs():
    X_np, y = make_blobs(n_per=40, noise=0.3, seed=2)
    X = torch.from_numpy(X_np)
    labels = KMeansPlusPlusPartition(random_state=0).partition(X, 3)
    assert same_partition(labels, y)


def test_kmeans_plusplus_handles_duplicate_points():
    X = torch.ones(5, 2)
    labels = KMeansPlusPlusPartition(random_state=0).partition(X, 3)
    # Every seed coincides with every point; ties go to the lowest seed.
    assert labels.tolist() == [0] * 5


def test_kmeans_plusplus_too_many_seeds():
    with pytest.raises(ValueError):
        KMeansPlusPlusPartition(random_state=0).seeds(torch.zeros(2, 2), 3)


def test_from_previous_partition():
    X = torch.zeros(4, 1)
    policy = FromPreviousPartition([1, 0, 1, 0])
    assert policy.partition(X, 2).tolist() == [1, 0, 1, 0]

    with pytest.raises(ValueError):
        policy.partition(torch.zeros(3, 1), 2)
    with pytest.raises(ValueError):
        FromPreviousPartition([]).partition(torch.zeros(0, 1), 1)


def test_from_previous_partition_keeps_its_own_copy():
    given = torch.tensor([0, 1, 0])
    policy = FromPreviousPartition(given)
    given[0] = 1
    assert policy.partition(torch.zeros(3, 1), 2).tolist() == [0, 1, 0]
