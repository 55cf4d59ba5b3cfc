# tests/test_assignment.py
"""
Nearest-centroid assignment and the cluster statistics helpers.
"""

from __future__ import annotations

import pytest
import torch

from lloyd.assignments import NearestCentroidAssignment
from lloyd.distances import SquaredEuclideanDistance, ManhattanDistance
from lloyd.utils import centroids_from_assignments, inertia


def test_assigns_to_nearest_centroid():
    X = torch.tensor([[0.0], [4.0], [6.0], [11.0]])
    centroids = torch.tensor([[1.0], [10.0]])
    labels, dists = NearestCentroidAssignment().compute_assignments(
        X, centroids, SquaredEuclideanDistance()
    )
    assert labels.tolist() == [0, 0, 1, 1]
    assert dists.tolist() == pytest.approx([1.0, 9.0, 16.0, 1.0])


def test_ties_go_to_lowest_index():
    X = torch.tensor([[5.0]])
    centroids = torch.tensor([[0.0], [10.0], [0.0]])
    labels, _ = NearestCentroidAssignment().compute_assignments(
        X, centroids, ManhattanDistance()
    )
    assert labels.tolist() == [0]


def test_inactive_centroids_receive_no_points():
    X = torch.tensor([[0.0], [1.0], [9.0]])
    centroids = torch.tensor([[0.0], [10.0]])
    active = torch.tensor([False, True])
    labels, dists = NearestCentroidAssignment().compute_assignments(
        X, centroids, SquaredEuclideanDistance(), active=active
    )
    assert labels.tolist() == [1, 1, 1]
    assert torch.isfinite(dists).all()


@pytest.mark.parametrize("batch_size", [1, 3, 7, 1000])
def test_chunking_does_not_change_result(batch_size):
    g = torch.Generator().manual_seed(0)
    X = torch.randn(50, 3, generator=g)
    centroids = torch.randn(4, 3, generator=g)
    metric = SquaredEuclideanDistance()

    expected, expected_d = NearestCentroidAssignment().compute_assignments(X, centroids, metric)
    labels, dists = NearestCentroidAssignment(batch_size).compute_assignments(X, centroids, metric)

    assert torch.equal(labels, expected)
    assert torch.allclose(dists, expected_d)


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        NearestCentroidAssignment(0)


def test_centroids_from_assignments_keeps_previous_for_empty():
    X = torch.tensor([[0.0, 0.0], [2.0, 2.0], [10.0, 10.0]])
    labels = torch.tensor([0, 0, 2])
    previous = torch.tensor([[9.0, 9.0], [5.0, 5.0], [9.0, 9.0]])

    centroids = centroids_from_assignments(X, labels, 3, previous=previous)
    assert centroids.tolist() == [[1.0, 1.0], [5.0, 5.0], [10.0, 10.0]]

    fresh = centroids_from_assignments(X, labels, 3)
    assert fresh[1].tolist() == [0.0, 0.0]


def test_inertia():
    X = torch.tensor([[0.0], [2.0], [10.0]])
    centroids = torch.tensor([[1.0], [10.0]])
    labels = torch.tensor([0, 0, 1])
    assert inertia(X, centroids, labels, SquaredEuclideanDistance()) == pytest.approx(2.0)
