# tests/test_merge.py
"""
Merging an overclustered working partition down to the requested count.
"""

from __future__ import annotations

import math

import pytest
import torch

from lloyd.algorithms import merge_partition, centroid_distances
from lloyd.base import WorkingPartition
from lloyd.distances import SquaredEuclideanDistance


@pytest.fixture
def line_working() -> tuple:
    """{0, 1, 2, 10, 11, 12} split into four working clusters."""
    X = torch.tensor([[0.0], [1.0], [2.0], [10.0], [11.0], [12.0]])
    working = WorkingPartition(
        assignments=torch.tensor([0, 0, 1, 2, 3, 3]),
        centroids=torch.tensor([[0.5], [2.0], [10.0], [11.5]]),
        counts=torch.tensor([2, 1, 1, 2]),
        n_clusters=4,
    )
    return X, working


def test_centroid_distances_upper_triangular():
    centroids = torch.tensor([[0.0], [1.0], [3.0]])
    d = centroid_distances(centroids, SquaredEuclideanDistance())
    assert d[0, 1].item() == 1.0
    assert d[0, 2].item() == 9.0
    assert d[1, 2].item() == 4.0
    for i in range(3):
        for j in range(i + 1):
            assert math.isinf(d[i, j].item())


def test_centroid_distances_masks_inactive():
    centroids = torch.tensor([[0.0], [1.0], [3.0]])
    d = centroid_distances(centroids, SquaredEuclideanDistance(),
                           active=torch.tensor([True, False, True]))
    assert math.isinf(d[0, 1].item())
    assert d[0, 2].item() == 9.0


def test_merge_down_to_two(line_working):
    _, working = line_working
    final = merge_partition(working, 2, SquaredEuclideanDistance())

    # (0, 1) and (2, 3) tie at distance 2.25; the lower pair goes first.
    assert final.n_clusters == 2
    assert final.assignments.tolist() == [0, 0, 0, 1, 1, 1]
    assert final.centroids.squeeze(1).tolist() == pytest.approx([1.0, 11.0])
    assert final.counts.tolist() == [3, 3]


def test_merge_leaves_working_partition_untouched(line_working):
    _, working = line_working
    merge_partition(working, 2, SquaredEuclideanDistance())
    assert working.assignments.tolist() == [0, 0, 1, 2, 3, 3]
    assert working.counts.tolist() == [2, 1, 1, 2]


def test_merged_centroid_is_weighted_mean(line_working):
    X, working = line_working
    final = merge_partition(working, 3, SquaredEuclideanDistance())

    assert final.assignments.tolist() == [0, 0, 0, 1, 2, 2]
    for k in range(final.n_clusters):
        members = X[final.assignments == k]
        assert final.centroids[k].item() == pytest.approx(members.mean().item())


def test_merge_skips_empty_working_clusters():
    working = WorkingPartition(
        assignments=torch.tensor([0, 0, 2, 2]),
        centroids=torch.tensor([[0.0], [0.5], [5.0]]),
        counts=torch.tensor([2, 0, 2]),
        n_clusters=3,
    )
    final = merge_partition(working, 2, SquaredEuclideanDistance())

    # Only two clusters own points, so nothing is merged.
    assert final.n_clusters == 2
    assert final.assignments.tolist() == [0, 0, 1, 1]
    assert final.centroids.squeeze(1).tolist() == [0.0, 5.0]


def test_merge_to_single_cluster(line_working):
    X, working = line_working
    final = merge_partition(working, 1, SquaredEuclideanDistance())
    assert final.assignments.tolist() == [0] * 6
    assert final.centroids[0].item() == pytest.approx(X.mean().item())
