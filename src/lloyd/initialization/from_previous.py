"""
Initial partition from a previous solution.

Useful for warm starts when the assignment vector handed to the engine is
not the place to carry the guess, e.g. when the same start is reused for
several datasets of equal size.
"""

from typing import Union
import numpy as np
import torch
from torch import Tensor

from ..base.interfaces import InitialPartitionPolicy
from ..utils.validation import validate_assignments


class FromPreviousPartition(InitialPartitionPolicy):
    """Return a fixed, previously computed assignment vector."""

    def __init__(self, assignments: Union[Tensor, np.ndarray, list]):
        """
        Args:
            assignments: (n,) cluster ids of a previous run
        """
        if isinstance(assignments, Tensor):
            self.assignments = assignments.detach().clone().long()
        else:
            self.assignments = torch.as_tensor(np.asarray(assignments), dtype=torch.long)

    def partition(self, data: Tensor, n_clusters: int, **kwargs) -> Tensor:
        """Return the stored assignments after checking they fit the data.

        Raises:
            ValueError: If the stored vector does not match ``data`` or uses
                        ids outside [0, n_clusters)
        """
        labels = validate_assignments(self.assignments, data.shape[0], n_clusters,
                                      device=data.device)
        if labels is None:
            raise ValueError("FromPreviousPartition holds no assignments")
        return labels
