"""
Lloyd: K-means clustering with pluggable policies.

The engine runs Lloyd iterations with three interchangeable policies:
- a distance metric (squared Euclidean by default)
- an initial partition policy (uniform random by default)
- an empty cluster policy (move the worst-fitting point of the widest
  cluster by default)

It also supports overclustering: find more clusters than requested, then
merge the closest ones until the requested number is left.

Example usage:
    >>> import torch
    >>> from lloyd import KMeans, ManhattanDistance
    >>>
    >>> X = torch.randn(1000, 10)
    >>>
    >>> # Default options, 3 clusters
    >>> labels = KMeans().cluster(X, 3)
    >>>
    >>> # Manhattan distance, 100 iterations at most, overclustering factor 4
    >>> kmeans = KMeans(max_iterations=100, overclustering_factor=4.0,
    ...                 metric=ManhattanDistance())
    >>> labels = kmeans.cluster(X, 6)
"""

__version__ = '0.1.0'

from .algorithms.kmeans import KMeans
from .algorithms.builder import KMeansBuilder, create_kmeans

from .distances import (
    LMetric,
    ManhattanDistance,
    ChebyshevDistance,
    SquaredEuclideanDistance,
    EuclideanDistance,
    WeightedEuclideanDistance
)

from .initialization import (
    RandomPartition,
    RoundRobinPartition,
    KMeansPlusPlusPartition,
    FromPreviousPartition
)

from .empty_cluster import (
    MaxVarianceNewCluster,
    AllowEmptyClusters
)

from .base import (
    DistanceMetric,
    InitialPartitionPolicy,
    EmptyClusterPolicy,
    WorkingPartition,
    FinalPartition,
    AlgorithmState
)

__all__ = [
    # Engine
    'KMeans',
    'KMeansBuilder',
    'create_kmeans',

    # Metrics
    'LMetric',
    'ManhattanDistance',
    'ChebyshevDistance',
    'SquaredEuclideanDistance',
    'EuclideanDistance',
    'WeightedEuclideanDistance',

    # Initial partitions
    'RandomPartition',
    'RoundRobinPartition',
    'KMeansPlusPlusPartition',
    'FromPreviousPartition',

    # Empty cluster policies
    'MaxVarianceNewCluster',
    'AllowEmptyClusters',

    # Interfaces and data structures
    'DistanceMetric',
    'InitialPartitionPolicy',
    'EmptyClusterPolicy',
    'WorkingPartition',
    'FinalPartition',
    'AlgorithmState',

    # Version
    '__version__'
]
