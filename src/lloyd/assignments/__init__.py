"""Assignment strategies for the K-Means engine."""

from .nearest import NearestCentroidAssignment

__all__ = [
    'NearestCentroidAssignment'
]
