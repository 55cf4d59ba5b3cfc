"""Initial partition policies for the K-Means engine."""

from .random_partition import RandomPartition, RoundRobinPartition
from .kmeans_plusplus import KMeansPlusPlusPartition
from .from_previous import FromPreviousPartition

__all__ = [
    'RandomPartition',
    'RoundRobinPartition',
    'KMeansPlusPlusPartition',
    'FromPreviousPartition'
]
