"""
Cluster merging for overclustering.

After Lloyd iterations have converged on the inflated working partition,
the two closest centroids are merged repeatedly until the requested number
of clusters is left. A merged centroid is the population-weighted mean of
the two it replaces, i.e. the mean of the union of their points.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric
from ..base.data_structures import WorkingPartition, FinalPartition


def centroid_distances(centroids: Tensor, metric: DistanceMetric,
                       active: Optional[Tensor] = None) -> Tensor:
    """Upper-triangular matrix of distances between centroids.

    Entry (i, j) holds the distance between centroids i and j for i < j
    when both are active. Every other entry is +inf, so the row-major
    ``argmin`` of the matrix is the closest pair with the lowest indices.

    Args:
        centroids: (K, d) centroids
        metric: Distance metric
        active: Optional (K,) mask of centroids taking part

    Returns:
        (K, K) distance matrix
    """
    n_clusters = centroids.shape[0]
    distances = torch.full((n_clusters, n_clusters), float('inf'),
                           dtype=centroids.dtype, device=centroids.device)

    for first in range(n_clusters - 1):
        distances[first, first + 1:] = metric.compute(centroids[first + 1:], centroids[first])

    if active is not None:
        distances[~active, :] = float('inf')
        distances[:, ~active] = float('inf')

    return distances


def merge_partition(working: WorkingPartition, n_clusters: int,
                    metric: DistanceMetric, verbose: int = 0) -> FinalPartition:
    """Merge the closest clusters of a working partition down to n_clusters.

    Empty working clusters take no part in merging. Points of the second
    cluster of each merged pair are relabelled to the first, and the
    survivors are relabelled densely at the end, lowest working id first.

    Args:
        working: Converged working partition, left unmodified
        n_clusters: Number of clusters wanted
        metric: Distance metric used between centroids
        verbose: Print every merge when >= 2

    Returns:
        FinalPartition with at most n_clusters clusters
    """
    partition = working.clone()
    centroids = partition.centroids
    counts = partition.counts
    assignments = partition.assignments

    active = partition.active.clone()
    distances = centroid_distances(centroids, metric, active)
    n_working = distances.shape[0]
    clusters_left = int(active.sum().item())

    while clusters_left > n_clusters:
        pair = int(torch.argmin(distances).item())
        first, second = divmod(pair, n_working)

        # Merge the centroids, weighted by population.
        first_count = counts[first].to(centroids.dtype)
        second_count = counts[second].to(centroids.dtype)
        centroids[first] = ((first_count * centroids[first] + second_count * centroids[second])
                            / (first_count + second_count))

        assignments[assignments == second] = first
        counts[first] += counts[second]
        counts[second] = 0
        active[second] = False

        if verbose >= 2:
            print(f"Merged cluster {second} into cluster {first} "
                  f"(distance {distances[first, second].item():.6f})")

        # Refresh the distances to the merged centroid and retire the second.
        refreshed = metric.compute(centroids, centroids[first])
        distances[first, first + 1:] = refreshed[first + 1:]
        distances[:first, first] = refreshed[:first]
        distances[~active, :] = float('inf')
        distances[:, ~active] = float('inf')

        clusters_left -= 1

    return FinalPartition.from_working(partition)
