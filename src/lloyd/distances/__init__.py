"""Distance metrics for the K-Means engine."""

from .lmetric import LMetric, ManhattanDistance, ChebyshevDistance
from .euclidean import (
    SquaredEuclideanDistance,
    EuclideanDistance,
    WeightedEuclideanDistance
)

__all__ = [
    # L_p family
    'LMetric',
    'ManhattanDistance',
    'ChebyshevDistance',

    # Euclidean distances
    'SquaredEuclideanDistance',
    'EuclideanDistance',
    'WeightedEuclideanDistance'
]
