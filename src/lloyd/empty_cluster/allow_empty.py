"""
Policy that leaves empty clusters alone.
"""

from torch import Tensor

from ..base.interfaces import EmptyClusterPolicy


class AllowEmptyClusters(EmptyClusterPolicy):
    """Do nothing when a cluster becomes empty.

    The engine stops assigning points to clusters that have no centroid, so
    an empty cluster stays empty and the final labelling can hold fewer ids
    than were requested.
    """

    def empty_cluster(self, data: Tensor, empty_cluster: int,
                      centroids: Tensor, counts: Tensor,
                      assignments: Tensor) -> int:
        return 0

    def __repr__(self) -> str:
        return "AllowEmptyClusters()"
