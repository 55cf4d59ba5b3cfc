"""
Empty cluster repair by splitting off the worst-fitting point.

When a cluster loses all of its points, the cluster with the largest
spread gives up the point that fits it worst, and that point seeds the
empty cluster.
"""

import torch
from torch import Tensor

from ..base.interfaces import EmptyClusterPolicy


class MaxVarianceNewCluster(EmptyClusterPolicy):
    """Move the farthest point of the highest-variance cluster.

    Selection rule:
    - The donor cluster is the one with the largest within-cluster sum of
      squared Euclidean distances to its centroid. Only clusters holding at
      least two points are considered, so the donor never becomes empty
      itself; when no such cluster exists every non-empty cluster competes.
    - The donor point is the member of that cluster farthest (squared
      Euclidean) from the centroid.
    - Ties go to the lowest cluster index and the lowest point index.

    The chosen point is reassigned to the empty cluster, the empty
    cluster's centroid is moved onto it, and the donor's centroid is
    recomputed from its remaining points.
    """

    def empty_cluster(self, data: Tensor, empty_cluster: int,
                      centroids: Tensor, counts: Tensor,
                      assignments: Tensor) -> int:
        """Fill ``empty_cluster`` with one point taken from the widest cluster.

        Args:
            data: (n, d) data points
            empty_cluster: Index of the cluster with no points
            centroids: (K, d) centroids, updated in place
            counts: (K,) point counts, updated in place
            assignments: (n,) assignments, updated in place

        Returns:
            Number of points moved (1, or 0 if no cluster can donate)
        """
        n_clusters = centroids.shape[0]

        # Squared distance of each point to its own centroid.
        diff = data - centroids[assignments]
        point_spread = torch.sum(diff * diff, dim=1)

        variances = torch.zeros(n_clusters, dtype=point_spread.dtype,
                                device=point_spread.device)
        variances.index_add_(0, assignments, point_spread)

        candidates = counts > 1
        if not candidates.any():
            candidates = counts > 0
        if not candidates.any():
            return 0

        variances = torch.where(candidates, variances,
                                torch.full_like(variances, -float('inf')))
        donor_cluster = int(torch.argmax(variances).item())

        members = torch.nonzero(assignments == donor_cluster, as_tuple=True)[0]
        farthest = members[int(torch.argmax(point_spread[members]).item())]

        assignments[farthest] = empty_cluster
        counts[donor_cluster] -= 1
        counts[empty_cluster] += 1

        centroids[empty_cluster] = data[farthest]
        if counts[donor_cluster] > 0:
            centroids[donor_cluster] = data[assignments == donor_cluster].mean(dim=0)

        return 1

    def __repr__(self) -> str:
        return "MaxVarianceNewCluster()"
