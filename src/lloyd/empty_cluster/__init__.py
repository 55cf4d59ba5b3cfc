"""Empty cluster policies for the K-Means engine."""

from .max_variance import MaxVarianceNewCluster
from .allow_empty import AllowEmptyClusters

__all__ = [
    'MaxVarianceNewCluster',
    'AllowEmptyClusters'
]
