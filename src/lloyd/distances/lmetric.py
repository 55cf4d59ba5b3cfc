"""
The L_p family of distance metrics.

LMetric(power, take_root) computes (sum_i |x_i - y_i|^p)^(1/p), optionally
skipping the root. Skipping the root keeps the nearest-centroid ordering
unchanged while avoiding a pow per comparison, which is why the squared
Euclidean distance is the engine default.
"""

import math
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric


class LMetric(DistanceMetric):
    """Generalized L_p distance.

    Parameters
    ----------
    power : float
        The p in L_p. Must be >= 1; ``math.inf`` gives the Chebyshev distance.
    take_root : bool, default=True
        Whether to take the p-th root of the summed powers.
    """

    def __init__(self, power: float, take_root: bool = True):
        if power < 1:
            raise ValueError(f"power must be >= 1, got {power}")
        self.power = power
        self.take_root = take_root

    def compute(self, points: Tensor, center: Tensor, **kwargs) -> Tensor:
        """Compute L_p distances from points to center.

        Args:
            points: (n, d) tensor of points
            center: (d,) tensor

        Returns:
            (n,) tensor of distances
        """
        diff = torch.abs(points - center.unsqueeze(0))

        if math.isinf(self.power):
            return diff.max(dim=1).values

        if self.power == 1:
            return diff.sum(dim=1)

        if self.power == 2:
            powered = torch.sum(diff * diff, dim=1)
        else:
            powered = torch.sum(diff ** self.power, dim=1)

        if not self.take_root:
            return powered
        if self.power == 2:
            return torch.sqrt(powered)
        return powered ** (1.0 / self.power)

    def __repr__(self) -> str:
        return f"LMetric(power={self.power}, take_root={self.take_root})"


class ManhattanDistance(LMetric):
    """L1 distance: sum_i |x_i - y_i|."""

    def __init__(self):
        super().__init__(power=1, take_root=False)


class ChebyshevDistance(LMetric):
    """L-infinity distance: max_i |x_i - y_i|."""

    def __init__(self):
        super().__init__(power=math.inf, take_root=False)
