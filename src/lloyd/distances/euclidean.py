"""
Euclidean distance metrics.

The most common distance metric, used by K-means and by the default empty
cluster policy.
"""

import torch
from torch import Tensor

from .lmetric import LMetric


class SquaredEuclideanDistance(LMetric):
    """Squared Euclidean distance ||x - mu||^2.

    The default metric of the engine: the mean of a cluster minimizes it.
    """

    def __init__(self):
        super().__init__(power=2, take_root=False)


class EuclideanDistance(LMetric):
    """Euclidean distance.

    Computes ||x - mu|| or, with ``squared=True``, ||x - mu||^2.
    """

    def __init__(self, squared: bool = False):
        """
        Args:
            squared: If True, return squared distances.
                    If False, return actual Euclidean distances (default).
        """
        super().__init__(power=2, take_root=not squared)
        self.squared = squared


class WeightedEuclideanDistance(LMetric):
    """Weighted Euclidean distance with feature weights.

    Computes sqrt(sum_i w_i * (x_i - mu_i)^2) where w_i are feature weights.
    """

    def __init__(self, weights: Tensor, squared: bool = True):
        """
        Args:
            weights: (d,) tensor of non-negative feature weights
            squared: Whether to return squared distances
        """
        super().__init__(power=2, take_root=not squared)
        weights = torch.as_tensor(weights, dtype=torch.float32)
        if (weights < 0).any():
            raise ValueError("Feature weights must be non-negative")
        self.weights = weights
        self.squared = squared

    def compute(self, points: Tensor, center: Tensor, **kwargs) -> Tensor:
        """Compute weighted Euclidean distances.

        Args:
            points: (n, d) tensor of points
            center: (d,) tensor

        Returns:
            (n,) tensor of distances
        """
        # Ensure weights are on same device
        weights = self.weights.to(device=points.device, dtype=points.dtype)
        if weights.shape != (points.shape[1],):
            raise ValueError(f"Expected {points.shape[1]} feature weights, "
                             f"got {tuple(weights.shape)}")

        diff = points - center.unsqueeze(0)
        squared_distances = torch.sum(weights.unsqueeze(0) * diff * diff, dim=1)

        if self.squared:
            return squared_distances
        else:
            return torch.sqrt(squared_distances)
