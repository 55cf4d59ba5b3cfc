"""Base classes and interfaces for the K-Means engine."""

from .interfaces import (
    DistanceMetric,
    InitialPartitionPolicy,
    EmptyClusterPolicy,
    ConvergenceCriterion
)

from .data_structures import (
    WorkingPartition,
    FinalPartition,
    AlgorithmState,
    count_per_cluster
)

__all__ = [
    # Interfaces
    'DistanceMetric',
    'InitialPartitionPolicy',
    'EmptyClusterPolicy',
    'ConvergenceCriterion',

    # Data structures
    'WorkingPartition',
    'FinalPartition',
    'AlgorithmState',
    'count_per_cluster'
]
