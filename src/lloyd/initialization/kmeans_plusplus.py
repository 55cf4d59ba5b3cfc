"""
K-means++ initial partition.

Chooses K seed points that are far apart using the K-means++ sampling
scheme, then partitions the data by assigning every point to its nearest
seed.
"""

from typing import Optional, Union
import math
import torch
from torch import Tensor

from ..base.interfaces import InitialPartitionPolicy
from ..utils.validation import check_random_state


class KMeansPlusPlusPartition(InitialPartitionPolicy):
    """K-means++ seeding turned into a partition.

    Algorithm:
    1. Choose first seed uniformly at random
    2. For each remaining seed:
       - Compute squared distance from each point to its nearest seed
       - Sample candidates with probability proportional to that distance
       - Keep the candidate that lowers the total distance the most
    3. Assign every point to its nearest seed (lowest seed index on ties)
    """

    def __init__(self, n_local_trials: Optional[int] = None,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        """
        Args:
            n_local_trials: Number of candidates to try for each seed.
                           If None, uses 2 + log(k) as in sklearn
            random_state: Seed or generator, see RandomPartition
        """
        check_random_state(random_state)
        self.n_local_trials = n_local_trials
        self.random_state = random_state

    def seeds(self, data: Tensor, n_clusters: int) -> Tensor:
        """Pick the row indices of the K seed points.

        Args:
            data: (n, d) data points
            n_clusters: Number of seeds

        Returns:
            (K,) long tensor of row indices into ``data``
        """
        n_points = data.shape[0]

        if n_clusters > n_points:
            raise ValueError(f"Cannot pick {n_clusters} seeds from {n_points} points")

        generator = check_random_state(self.random_state)

        # Number of candidates to try per seed
        if self.n_local_trials is None:
            n_local_trials = 2 + int(math.log(n_clusters))
        else:
            n_local_trials = self.n_local_trials

        first_idx = torch.randint(n_points, (1,), generator=generator).item()
        seed_indices = [first_idx]

        distances = torch.sum((data - data[first_idx].unsqueeze(0)) ** 2, dim=1)

        for _ in range(1, n_clusters):
            total = distances.sum()
            if total > 0:
                probabilities = (distances / total).cpu()
            else:
                # Every point coincides with a seed already.
                probabilities = torch.ones(n_points)

            candidates = torch.multinomial(probabilities, n_local_trials,
                                           replacement=True, generator=generator)

            # Keep the candidate with the lowest potential (sum of min distances)
            best_potential = float('inf')
            best_candidate = None
            best_distances = None

            for idx in candidates.tolist():
                candidate_distances = torch.sum((data - data[idx].unsqueeze(0)) ** 2, dim=1)
                new_distances = torch.minimum(distances, candidate_distances)
                potential = new_distances.sum().item()

                if potential < best_potential:
                    best_potential = potential
                    best_candidate = idx
                    best_distances = new_distances

            seed_indices.append(best_candidate)
            distances = best_distances

        return torch.tensor(seed_indices, dtype=torch.long, device=data.device)

    def partition(self, data: Tensor, n_clusters: int, **kwargs) -> Tensor:
        """Partition the data around K-means++ seeds.

        Args:
            data: (n, d) data points
            n_clusters: Number of clusters

        Returns:
            (n,) long tensor of cluster ids
        """
        centers = data[self.seeds(data, n_clusters)]

        distances = torch.zeros(data.shape[0], n_clusters, dtype=data.dtype,
                                device=data.device)
        for k in range(n_clusters):
            diff = data - centers[k].unsqueeze(0)
            distances[:, k] = torch.sum(diff * diff, dim=1)

        return torch.argmin(distances, dim=1)

    def __repr__(self) -> str:
        return (f"KMeansPlusPlusPartition(n_local_trials={self.n_local_trials!r}, "
                f"random_state={self.random_state!r})")
