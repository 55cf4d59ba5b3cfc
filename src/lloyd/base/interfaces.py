"""
Core interfaces for the K-Means engine.

This module defines the abstract base classes that every pluggable policy
must implement. The engine only talks to these contracts, so any metric,
initial partitioner or empty-cluster action can be swapped at construction
time.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any
from torch import Tensor


class DistanceMetric(ABC):
    """Abstract base class for distance computations.

    Implementations must be non-negative and return zero for identical
    points. They need not be true metrics (squared Euclidean is the default).
    """

    @abstractmethod
    def compute(self, points: Tensor, center: Tensor, **kwargs) -> Tensor:
        """Compute distances from points to a single center.

        Args:
            points: (n, d) tensor of points
            center: (d,) tensor
            **kwargs: Metric-specific parameters

        Returns:
            (n,) tensor of distances
        """
        pass

    def evaluate(self, a: Tensor, b: Tensor) -> float:
        """Distance between two individual points."""
        return self.compute(a.unsqueeze(0), b).item()


class InitialPartitionPolicy(ABC):
    """Abstract base class for initial partitioning strategies."""

    @abstractmethod
    def partition(self, data: Tensor, n_clusters: int, **kwargs) -> Tensor:
        """Produce an initial cluster assignment for every point.

        The returned ids lie in [0, n_clusters) but are not required to
        cover every id; clusters that receive nothing are handed to the
        empty cluster policy by the engine.

        Args:
            data: (n, d) data points
            n_clusters: Number of cluster ids to distribute
            **kwargs: Strategy-specific parameters

        Returns:
            (n,) long tensor of cluster ids
        """
        pass


class EmptyClusterPolicy(ABC):
    """Abstract base class for handling clusters that lost all their points."""

    @abstractmethod
    def empty_cluster(self, data: Tensor, empty_cluster: int,
                      centroids: Tensor, counts: Tensor,
                      assignments: Tensor) -> int:
        """Deal with an empty cluster.

        Implementations mutate ``centroids``, ``counts`` and ``assignments``
        in place.

        Args:
            data: (n, d) data points
            empty_cluster: Index of the cluster with no points
            centroids: (K, d) current centroids
            counts: (K,) number of points per cluster
            assignments: (n,) current assignments

        Returns:
            Number of points whose assignment was changed
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the algorithm has converged.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []
