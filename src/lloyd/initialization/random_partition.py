"""
Random and round-robin initial partitions.

Both hand out cluster ids without looking at the data. Neither guarantees
that every id is used (round-robin does whenever n >= K); the engine repairs
any id that ends up without points.
"""

from typing import Optional, Union
import torch
from torch import Tensor

from ..base.interfaces import InitialPartitionPolicy
from ..utils.validation import check_random_state


class RandomPartition(InitialPartitionPolicy):
    """Assign every point to a uniformly random cluster id.

    Parameters
    ----------
    random_state : int or torch.Generator, optional
        An integer seed reseeds a fresh generator on every call, so every
        call on the same data yields the same partition. A Generator is
        used as-is and advances between calls. Without either the global
        torch RNG is used and the partition is not reproducible.
    """

    def __init__(self, random_state: Optional[Union[int, torch.Generator]] = None):
        check_random_state(random_state)
        self.random_state = random_state

    def partition(self, data: Tensor, n_clusters: int, **kwargs) -> Tensor:
        """Draw one id in [0, n_clusters) per point.

        Args:
            data: (n, d) data points
            n_clusters: Number of cluster ids

        Returns:
            (n,) long tensor of cluster ids
        """
        n_points = data.shape[0]

        # Sample on the generator's device (CPU) and move afterwards so the
        # draw is identical on every device.
        generator = check_random_state(self.random_state)
        assignments = torch.randint(n_clusters, (n_points,), generator=generator)

        return assignments.to(data.device)

    def __repr__(self) -> str:
        return f"RandomPartition(random_state={self.random_state!r})"


class RoundRobinPartition(InitialPartitionPolicy):
    """Deterministic partition: point i goes to cluster i mod K."""

    def partition(self, data: Tensor, n_clusters: int, **kwargs) -> Tensor:
        return torch.arange(data.shape[0], device=data.device) % n_clusters

    def __repr__(self) -> str:
        return "RoundRobinPartition()"
