"""K-Means engine and its configuration helpers."""

from .kmeans import KMeans
from .merge import merge_partition, centroid_distances
from .builder import KMeansBuilder, create_kmeans

__all__ = [
    'KMeans',
    'merge_partition',
    'centroid_distances',
    'KMeansBuilder',
    'create_kmeans'
]
