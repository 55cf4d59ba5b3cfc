"""
Core data structures for the K-Means engine.

The overclustering mode runs in two phases with different invariants, so
the state of each phase gets its own type: a WorkingPartition holds the
(possibly inflated) set of clusters Lloyd iterations run on, and a
FinalPartition holds the requested number of clusters with dense ids.
"""

from typing import Dict, Any
import torch
from torch import Tensor
from dataclasses import dataclass, field


def count_per_cluster(assignments: Tensor, n_clusters: int) -> Tensor:
    """Count points per cluster id as a (K,) long tensor."""
    return torch.bincount(assignments, minlength=n_clusters)


@dataclass
class WorkingPartition:
    """Clusters as seen by the Lloyd iterations.

    When overclustering is active n_clusters is the inflated working count,
    otherwise it equals the requested count.
    """

    assignments: Tensor  # (n,) ids in [0, n_clusters)
    centroids: Tensor    # (K, d)
    counts: Tensor       # (K,)
    n_clusters: int

    def __post_init__(self):
        """Validate dimensions."""
        assert self.centroids.shape[0] == self.n_clusters
        assert self.counts.shape == (self.n_clusters,)

    @property
    def n_points(self) -> int:
        return self.assignments.shape[0]

    @property
    def active(self) -> Tensor:
        """(K,) boolean mask of clusters that own at least one point."""
        return self.counts > 0

    @property
    def n_active(self) -> int:
        return int(self.active.sum().item())

    def clone(self) -> 'WorkingPartition':
        return WorkingPartition(
            assignments=self.assignments.clone(),
            centroids=self.centroids.clone(),
            counts=self.counts.clone(),
            n_clusters=self.n_clusters
        )


@dataclass
class FinalPartition:
    """Clusters handed back to the caller, ids dense in [0, n_clusters)."""

    assignments: Tensor
    centroids: Tensor
    counts: Tensor
    n_clusters: int

    def __post_init__(self):
        assert self.centroids.shape[0] == self.n_clusters
        assert self.counts.shape == (self.n_clusters,)
        if self.assignments.numel() > 0:
            assert self.assignments.min() >= 0
            assert self.assignments.max() < self.n_clusters

    @classmethod
    def from_working(cls, working: WorkingPartition) -> 'FinalPartition':
        """Drop empty clusters and relabel the survivors densely.

        Surviving ids keep their relative order, so the lowest surviving
        working id becomes 0.
        """
        keep = torch.nonzero(working.active, as_tuple=True)[0]
        mapping = torch.full((working.n_clusters,), -1, dtype=torch.long,
                             device=working.assignments.device)
        mapping[keep] = torch.arange(len(keep), device=mapping.device)

        return cls(
            assignments=mapping[working.assignments],
            centroids=working.centroids[keep].clone(),
            counts=working.counts[keep].clone(),
            n_clusters=len(keep)
        )


@dataclass
class AlgorithmState:
    """State of the engine after one Lloyd iteration.

    Kept in the engine's ``history_`` for debugging and convergence checks.
    """
    iteration: int
    n_changed: int
    n_repaired: int
    objective_value: float
    converged: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
