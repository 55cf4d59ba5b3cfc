"""
Cluster statistics shared by the engine and the policies.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric


def centroids_from_assignments(data: Tensor, assignments: Tensor, n_clusters: int,
                               counts: Optional[Tensor] = None,
                               previous: Optional[Tensor] = None) -> Tensor:
    """Compute the mean of the points assigned to each cluster.

    The sums are reduced with a single ``index_add_`` over all points, so
    every point contributes independently and no per-cluster loop is needed.

    Args:
        data: (n, d) data points
        assignments: (n,) cluster ids
        n_clusters: Number of clusters K
        counts: Optional (K,) point counts, recomputed when omitted
        previous: Optional (K, d) centroids; empty clusters keep their row

    Returns:
        (K, d) centroids. Empty clusters get their previous centroid, or
        zeros when there is none.
    """
    if counts is None:
        counts = torch.bincount(assignments, minlength=n_clusters)

    sums = torch.zeros(n_clusters, data.shape[1], dtype=data.dtype, device=data.device)
    sums.index_add_(0, assignments, data)

    nonempty = counts > 0
    centroids = torch.zeros_like(sums) if previous is None else previous.clone()
    centroids[nonempty] = sums[nonempty] / counts[nonempty].unsqueeze(1).to(data.dtype)

    return centroids


def inertia(data: Tensor, centroids: Tensor, assignments: Tensor,
            metric: DistanceMetric) -> float:
    """Sum of distances from each point to the centroid of its cluster."""
    total = 0.0

    for k in torch.unique(assignments).tolist():
        cluster_points = data[assignments == k]
        total += metric.compute(cluster_points, centroids[k]).sum().item()

    return total
