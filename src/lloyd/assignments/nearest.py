"""
Hard assignment of points to their nearest centroid.
"""

from typing import Optional, Tuple
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric


class NearestCentroidAssignment:
    """Assign each point to the centroid closest under a distance metric.

    Rows are processed in independent chunks of ``batch_size`` points. Each
    chunk only reads the data and the centroids and writes its own slice of
    the output, so chunks never share mutable state. Smaller chunks bound
    the (batch_size, K) distance block held in memory.

    Ties go to the lowest centroid index.
    """

    def __init__(self, batch_size: Optional[int] = None):
        """
        Args:
            batch_size: Points per chunk, None for a single chunk
        """
        if batch_size is not None and batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.batch_size = batch_size

    def distances(self, points: Tensor, centroids: Tensor, metric: DistanceMetric,
                  active: Optional[Tensor] = None) -> Tensor:
        """Distance from every point to every centroid.

        Args:
            points: (n, d) data points
            centroids: (K, d) centroids
            metric: Distance metric
            active: Optional (K,) boolean mask; inactive centroids get +inf

        Returns:
            (n, K) distance matrix
        """
        n_clusters = centroids.shape[0]
        distances = torch.full((points.shape[0], n_clusters), float('inf'),
                               dtype=points.dtype, device=points.device)

        for k in range(n_clusters):
            if active is not None and not active[k]:
                continue
            distances[:, k] = metric.compute(points, centroids[k])

        return distances

    def compute_assignments(self, points: Tensor, centroids: Tensor,
                            metric: DistanceMetric,
                            active: Optional[Tensor] = None) -> Tuple[Tensor, Tensor]:
        """Assign each point to its nearest centroid.

        Args:
            points: (n, d) data points
            centroids: (K, d) centroids
            metric: Distance metric
            active: Optional (K,) mask of centroids that may receive points

        Returns:
            assignments: (n,) cluster indices
            min_distances: (n,) distance to the assigned centroid
        """
        n_points = points.shape[0]
        batch_size = self.batch_size or max(n_points, 1)

        assignments = torch.empty(n_points, dtype=torch.long, device=points.device)
        min_distances = torch.empty(n_points, dtype=points.dtype, device=points.device)

        for start in range(0, n_points, batch_size):
            end = min(start + batch_size, n_points)
            block = self.distances(points[start:end], centroids, metric, active)
            nearest = torch.argmin(block, dim=1)
            assignments[start:end] = nearest
            min_distances[start:end] = torch.gather(block, 1, nearest.unsqueeze(1)).squeeze(1)

        return assignments, min_distances

    def __repr__(self) -> str:
        return f"NearestCentroidAssignment(batch_size={self.batch_size!r})"
