"""
K-means clustering with pluggable policies and overclustering.

The classic Lloyd iteration, with the distance metric, the initial
partition and the handling of empty clusters each supplied as a policy
object at construction time.
"""

from typing import Optional, Union, Dict, Any, List
import math
import time
import warnings
import numpy as np
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric, InitialPartitionPolicy, EmptyClusterPolicy
from ..base.data_structures import (
    WorkingPartition, FinalPartition, AlgorithmState, count_per_cluster
)
from ..distances.euclidean import SquaredEuclideanDistance
from ..initialization.random_partition import RandomPartition
from ..empty_cluster.max_variance import MaxVarianceNewCluster
from ..assignments.nearest import NearestCentroidAssignment
from ..utils.convergence import ChangeInAssignments
from ..utils.metrics import centroids_from_assignments, inertia
from ..utils.ordering import tree_order
from ..utils.validation import (
    validate_data, validate_assignments, check_n_clusters,
    check_overclustering_factor, check_max_iterations, check_device,
    check_random_state
)
from .merge import merge_partition


ArrayLike = Union[Tensor, np.ndarray, list]


class KMeans:
    """K-means clustering.

    Partitions data into K clusters by alternating between computing the
    centroid of every cluster and moving every point to its nearest
    centroid, until no point moves or the iteration cap is hit.

    With an overclustering factor f > 1, round(f * K) working clusters are
    found first and the closest pairs are then merged until K are left.
    For instance, with f = 4 and K = 3 the engine finds 12 clusters and
    merges them down to 3.

    Parameters
    ----------
    max_iterations : int, default=1000
        Maximum number of Lloyd iterations. 0 removes the cap and the loop
        runs until no assignment changes.
    overclustering_factor : float, default=1.0
        Multiplier for the number of working clusters; 1.0 disables
        overclustering.
    metric : DistanceMetric, optional
        Distance used for assignment and merging. Defaults to
        SquaredEuclideanDistance.
    partitioner : InitialPartitionPolicy, optional
        Produces the initial assignment when none is given. Defaults to
        RandomPartition seeded with ``random_state``.
    empty_cluster_action : EmptyClusterPolicy, optional
        Called for every cluster left without points. Defaults to
        MaxVarianceNewCluster.
    batch_size : int, optional
        Points per chunk in the assignment step.
    verbose : int, default=0
        Verbosity level (0=silent, 1=progress, 2=detailed)
    random_state : int or torch.Generator, optional
        Seed of the default partitioner. Ignored when ``partitioner`` is given.
    device : str or torch.device, optional
        Device for computation. None computes wherever the data lives.

    Attributes
    ----------
    labels_ : Tensor of shape (n_samples,)
        Final cluster ids, dense in [0, n_clusters)
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Final centroids
    counts_ : Tensor of shape (n_clusters,)
        Points per final cluster
    inertia_ : float
        Sum of distances from each point to its final centroid
    n_iter_ : int
        Number of Lloyd iterations run
    converged_ : bool
        False when the iteration cap stopped the loop
    n_repairs_ : int
        Points moved by the empty cluster policy over the whole run
    n_merges_ : int
        Number of cluster merges performed
    history_ : list of AlgorithmState
        One record per iteration
    working_partition_ : WorkingPartition
        State at the end of the Lloyd iterations, before merging
    old_from_new_ : Tensor or None
        Row permutation applied by the last ``fast_cluster`` call
    """

    def __init__(self,
                 max_iterations: int = 1000,
                 overclustering_factor: float = 1.0,
                 metric: Optional[DistanceMetric] = None,
                 partitioner: Optional[InitialPartitionPolicy] = None,
                 empty_cluster_action: Optional[EmptyClusterPolicy] = None,
                 batch_size: Optional[int] = None,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None,
                 device: Optional[Union[str, torch.device]] = None):
        self.max_iterations = max_iterations
        self.overclustering_factor = overclustering_factor
        self.random_state = random_state
        self.metric = metric if metric is not None else SquaredEuclideanDistance()
        if partitioner is None:
            self.partitioner = RandomPartition(random_state=random_state)
            self._default_partitioner = True
        else:
            self.partitioner = partitioner
        self.empty_cluster_action = (empty_cluster_action if empty_cluster_action is not None
                                     else MaxVarianceNewCluster())
        self.assignment_strategy = NearestCentroidAssignment(batch_size)
        self.verbose = verbose
        self.device = check_device(device)

        # Results of the last run
        self.fitted_ = False
        self.labels_ = None
        self.cluster_centers_ = None
        self.counts_ = None
        self.inertia_ = None
        self.n_iter_ = 0
        self.converged_ = False
        self.n_repairs_ = 0
        self.n_merges_ = 0
        self.history_: List[AlgorithmState] = []
        self.working_partition_ = None
        self.old_from_new_ = None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def max_iterations(self) -> int:
        """Maximum number of iterations (0 means no cap)."""
        return self._max_iterations

    @max_iterations.setter
    def max_iterations(self, value: int):
        self._max_iterations = check_max_iterations(value)

    @property
    def overclustering_factor(self) -> float:
        """Factor controlling how many working clusters are found."""
        return self._overclustering_factor

    @overclustering_factor.setter
    def overclustering_factor(self, value: float):
        self._overclustering_factor = check_overclustering_factor(value)

    @property
    def metric(self) -> DistanceMetric:
        return self._metric

    @metric.setter
    def metric(self, value: DistanceMetric):
        if not isinstance(value, DistanceMetric):
            raise TypeError(f"metric must be a DistanceMetric, got {type(value)}")
        self._metric = value

    @property
    def partitioner(self) -> InitialPartitionPolicy:
        return self._partitioner

    @partitioner.setter
    def partitioner(self, value: InitialPartitionPolicy):
        if not isinstance(value, InitialPartitionPolicy):
            raise TypeError(f"partitioner must be an InitialPartitionPolicy, got {type(value)}")
        self._partitioner = value
        self._default_partitioner = False

    @property
    def empty_cluster_action(self) -> EmptyClusterPolicy:
        return self._empty_cluster_action

    @empty_cluster_action.setter
    def empty_cluster_action(self, value: EmptyClusterPolicy):
        if not isinstance(value, EmptyClusterPolicy):
            raise TypeError(f"empty_cluster_action must be an EmptyClusterPolicy, "
                            f"got {type(value)}")
        self._empty_cluster_action = value

    @property
    def random_state(self) -> Optional[Union[int, torch.Generator]]:
        """Seed of the default partitioner."""
        return self._random_state

    @random_state.setter
    def random_state(self, value: Optional[Union[int, torch.Generator]]):
        check_random_state(value)
        self._random_state = value
        # A partitioner supplied by the caller keeps its own seed.
        if getattr(self, '_default_partitioner', False):
            self._partitioner = RandomPartition(random_state=value)

    @property
    def batch_size(self) -> Optional[int]:
        return self.assignment_strategy.batch_size

    @batch_size.setter
    def batch_size(self, value: Optional[int]):
        self.assignment_strategy = NearestCentroidAssignment(value)

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'max_iterations': self.max_iterations,
            'overclustering_factor': self.overclustering_factor,
            'metric': self.metric,
            'partitioner': self.partitioner,
            'empty_cluster_action': self.empty_cluster_action,
            'batch_size': self.batch_size,
            'verbose': self.verbose,
            'random_state': self.random_state,
            'device': self.device
        }

    def set_params(self, **params) -> 'KMeans':
        """Set parameters (sklearn compatibility)."""
        valid = self.get_params()
        for key, value in params.items():
            if key not in valid:
                raise ValueError(f"Invalid parameter {key!r} for KMeans")
            if key == 'device':
                value = check_device(value)
            setattr(self, key, value)
        return self

    # ------------------------------------------------------------------
    # Clustering
    # ------------------------------------------------------------------
    def cluster(self, data: ArrayLike, n_clusters: int,
                assignments: Optional[ArrayLike] = None) -> Tensor:
        """Cluster ``data`` into ``n_clusters`` groups.

        Parameters
        ----------
        data : Tensor or array-like of shape (n_samples, n_features)
            Dataset to cluster; not modified.
        n_clusters : int
            Number of clusters, between 1 and n_samples.
        assignments : Tensor or array-like of shape (n_samples,), optional
            Initial guess of the cluster assignments. None or an empty
            vector lets the partitioner choose. A tensor or numpy array of
            the right length is overwritten with the final labels, and an
            empty tensor is resized to hold them.

        Returns
        -------
        labels : Tensor of shape (n_samples,)
            Cluster ids in [0, n_clusters)

        Raises
        ------
        ValueError
            If ``n_clusters`` is out of range or ``assignments`` is malformed
        """
        X = validate_data(data, device=self.device)
        n_points = X.shape[0]
        check_n_clusters(n_clusters, n_points)
        n_clusters = int(n_clusters)

        working_clusters = self._working_clusters(n_clusters, n_points)
        initial = validate_assignments(assignments, n_points, working_clusters,
                                       device=X.device)

        self.old_from_new_ = None
        labels = self._cluster(X, n_clusters, working_clusters, initial)
        self._write_back(assignments, labels)
        return labels

    def fast_cluster(self, data: Tensor, n_clusters: int,
                     assignments: Optional[ArrayLike] = None,
                     leaf_size: int = 20) -> Tensor:
        """Cluster ``data``, reordering its rows in place for locality.

        Same contract as :meth:`cluster`, except that the rows of ``data``
        are permuted in place into the leaf order of a binary space tree
        before clustering. The returned labels (and a seeded
        ``assignments`` vector, which is permuted along with the data)
        refer to the reordered rows. ``old_from_new_`` holds the
        permutation: row i now is original row ``old_from_new_[i]``, so
        ``labels[argsort(old_from_new_)]`` gives labels in the original
        order.

        Raises
        ------
        TypeError
            If ``data`` is not a floating point torch tensor
        ValueError
            If ``data`` is not contiguous in memory (e.g. an expanded view)
        """
        if not isinstance(data, Tensor) or not data.is_floating_point():
            raise TypeError("fast_cluster reorders data in place and needs a "
                            f"floating point torch.Tensor, got {type(data)}")
        if not data.is_contiguous():
            raise ValueError("fast_cluster reorders data in place and needs a "
                             "contiguous tensor; pass data.contiguous() instead")

        # Validation happens before anything is moved.
        X = validate_data(data)
        n_points = X.shape[0]
        check_n_clusters(n_clusters, n_points)
        n_clusters = int(n_clusters)

        working_clusters = self._working_clusters(n_clusters, n_points)
        initial = validate_assignments(assignments, n_points, working_clusters,
                                       device=X.device)

        old_from_new = tree_order(X, leaf_size=leaf_size)
        data.copy_(data[old_from_new])
        if initial is not None:
            initial = initial[old_from_new]

        if self.device is not None:
            X = X.to(self.device)
            old_from_new = old_from_new.to(self.device)
            if initial is not None:
                initial = initial.to(self.device)

        labels = self._cluster(X, n_clusters, working_clusters, initial)
        self.old_from_new_ = old_from_new
        self._write_back(assignments, labels)
        return labels

    def predict(self, X: ArrayLike) -> Tensor:
        """Assign new points to the nearest final centroid.

        Parameters
        ----------
        X : Tensor or array-like of shape (n_samples, n_features)
            New data

        Returns
        -------
        labels : Tensor of shape (n_samples,)
        """
        if not self.fitted_:
            raise RuntimeError("KMeans must be run with cluster() before calling predict")

        centers = self.cluster_centers_
        X = validate_data(X, dtype=centers.dtype, device=centers.device)
        if X.shape[1] != centers.shape[1]:
            raise ValueError(f"Expected {centers.shape[1]} features, got {X.shape[1]}")

        labels, _ = self.assignment_strategy.compute_assignments(X, centers, self.metric)
        return labels

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _working_clusters(self, n_clusters: int, n_points: int) -> int:
        """Number of clusters the Lloyd iterations run on."""
        working = max(int(math.floor(n_clusters * self.overclustering_factor + 0.5)),
                      n_clusters)

        if working > n_points:
            warnings.warn(f"Overclustering factor {self.overclustering_factor} asks for "
                          f"{working} clusters but only {n_points} points were given; "
                          f"overclustering is disabled for this run")
            working = n_clusters

        return working

    def _initial_assignments(self, X: Tensor, n_clusters: int, working_clusters: int,
                             initial: Optional[Tensor]) -> Tensor:
        """Decide on the starting partition."""
        if initial is not None and working_clusters != n_clusters:
            n_used = torch.unique(initial).numel()
            if n_used != working_clusters:
                if self.verbose:
                    print(f"Initial assignments use {n_used} of {working_clusters} "
                          f"working clusters; repartitioning")
                initial = None

        if initial is not None:
            return initial

        if self.verbose:
            print(f"Partitioning {X.shape[0]} points into {working_clusters} clusters...")

        partition = self.partitioner.partition(X, working_clusters)
        partition = validate_assignments(partition, X.shape[0], working_clusters,
                                         device=X.device)
        if partition is None:
            raise ValueError(f"{self.partitioner!r} returned an empty partition")
        return partition

    def _cluster(self, X: Tensor, n_clusters: int, working_clusters: int,
                 initial: Optional[Tensor]) -> Tensor:
        """Run the Lloyd iterations, then merge down to n_clusters."""
        start_time = time.time()
        assignments = self._initial_assignments(X, n_clusters, working_clusters, initial)
        counts = count_per_cluster(assignments, working_clusters)
        centroids = None

        criterion = ChangeInAssignments()
        self.history_ = []
        self.n_repairs_ = 0
        converged = False
        iteration = 0

        while self.max_iterations == 0 or iteration < self.max_iterations:
            iter_start_time = time.time()
            previous = assignments.clone()

            # Update step
            centroids = centroids_from_assignments(X, assignments, working_clusters,
                                                   counts, previous=centroids)

            # Empty cluster repair
            n_repaired = 0
            for k in range(working_clusters):
                if counts[k] == 0:
                    moved = self.empty_cluster_action.empty_cluster(
                        X, k, centroids, counts, assignments
                    )
                    n_repaired += moved
                    if self.verbose >= 2 and moved:
                        print(f"Cluster {k} was empty; {moved} point(s) moved into it")
            self.n_repairs_ += n_repaired

            # Assignment step
            assignments, min_distances = self.assignment_strategy.compute_assignments(
                X, centroids, self.metric, active=counts > 0
            )
            counts = count_per_cluster(assignments, working_clusters)

            n_changed = (assignments != previous).sum().item()
            objective_value = min_distances.sum().item()
            converged = criterion.check({'iteration': iteration, 'n_changed': n_changed})

            self.history_.append(AlgorithmState(
                iteration=iteration,
                n_changed=n_changed,
                n_repaired=n_repaired,
                objective_value=objective_value,
                converged=converged
            ))

            # Logging
            iter_time = time.time() - iter_start_time
            if self.verbose >= 2 or (self.verbose >= 1 and iteration % 10 == 0):
                print(f"Iteration {iteration:3d}: objective = {objective_value:.6f}, "
                      f"{n_changed} changed ({iter_time:.3f}s)")

            iteration += 1

            if converged:
                if self.verbose:
                    print(f"Converged at iteration {iteration - 1}")
                break

        self.n_iter_ = iteration
        self.converged_ = converged

        if not converged and self.verbose:
            warnings.warn(f"Failed to converge after {self.max_iterations} iterations")

        # Centroids consistent with the final assignments.
        centroids = centroids_from_assignments(X, assignments, working_clusters,
                                               counts, previous=centroids)

        # The capped last iteration may leave clusters empty.
        if not converged:
            for k in range(working_clusters):
                if counts[k] == 0:
                    self.n_repairs_ += self.empty_cluster_action.empty_cluster(
                        X, k, centroids, counts, assignments
                    )

        working = WorkingPartition(
            assignments=assignments,
            centroids=centroids,
            counts=counts,
            n_clusters=working_clusters
        )
        self.working_partition_ = working

        if working_clusters > n_clusters:
            final = merge_partition(working, n_clusters, self.metric, verbose=self.verbose)
        else:
            final = FinalPartition.from_working(working)
        self.n_merges_ = working.n_active - final.n_clusters

        if final.n_clusters < n_clusters:
            warnings.warn(f"Only {final.n_clusters} of {n_clusters} clusters are non-empty")

        self.labels_ = final.assignments
        self.cluster_centers_ = final.centroids
        self.counts_ = final.counts
        self.inertia_ = inertia(X, final.centroids, final.assignments, self.metric)
        self.fitted_ = True

        if self.verbose:
            print(f"Total clustering time: {time.time() - start_time:.3f}s")

        return self.labels_

    @staticmethod
    def _write_back(assignments: Optional[ArrayLike], labels: Tensor) -> None:
        """Copy the final labels into a caller-owned assignment vector."""
        if isinstance(assignments, Tensor):
            if assignments.numel() == 0:
                assignments.resize_(labels.shape)
            if assignments.shape == labels.shape:
                assignments.copy_(labels)
        elif isinstance(assignments, np.ndarray):
            if assignments.shape == tuple(labels.shape):
                assignments[...] = labels.cpu().numpy()

    def __repr__(self) -> str:
        return (f"KMeans(max_iterations={self.max_iterations}, "
                f"overclustering_factor={self.overclustering_factor}, "
                f"metric={self.metric!r}, partitioner={self.partitioner!r}, "
                f"empty_cluster_action={self.empty_cluster_action!r})")
