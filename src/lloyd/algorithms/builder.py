"""
Builder pattern for configuring the K-Means engine.

Provides a fluent interface for choosing policies and parameters, and a
``create_kmeans`` factory that resolves policies from plain string names,
e.g. when they come from a configuration file.
"""

from typing import Optional, Union, Callable, Dict
import torch
from torch import Tensor

from ..base.interfaces import DistanceMetric, InitialPartitionPolicy, EmptyClusterPolicy
from ..distances import (
    LMetric, ManhattanDistance, ChebyshevDistance,
    SquaredEuclideanDistance, EuclideanDistance
)
from ..initialization import (
    RandomPartition, RoundRobinPartition, KMeansPlusPlusPartition, FromPreviousPartition
)
from ..empty_cluster import MaxVarianceNewCluster, AllowEmptyClusters
from .kmeans import KMeans


METRICS: Dict[str, Callable[[], DistanceMetric]] = {
    'squared_euclidean': SquaredEuclideanDistance,
    'euclidean': EuclideanDistance,
    'manhattan': ManhattanDistance,
    'chebyshev': ChebyshevDistance,
}

PARTITIONERS: Dict[str, Callable[..., InitialPartitionPolicy]] = {
    'random': RandomPartition,
    'round_robin': RoundRobinPartition,
    'k-means++': KMeansPlusPlusPartition,
}

EMPTY_CLUSTER_POLICIES: Dict[str, Callable[[], EmptyClusterPolicy]] = {
    'max_variance': MaxVarianceNewCluster,
    'allow_empty': AllowEmptyClusters,
}


class KMeansBuilder:
    """Fluent builder for the K-Means engine.

    Examples
    --------
    >>> kmeans = (KMeansBuilder()
    ...     .with_manhattan_metric()
    ...     .with_kmeans_plusplus_partition(random_state=0)
    ...     .with_max_iterations(100)
    ...     .with_overclustering(4.0)
    ...     .build())
    >>> labels = kmeans.cluster(X, 6)
    """

    def __init__(self):
        """Initialize builder with defaults."""
        self._metric: Optional[DistanceMetric] = None
        self._partitioner: Optional[InitialPartitionPolicy] = None
        self._empty_cluster_action: Optional[EmptyClusterPolicy] = None

        # Engine parameters
        self._max_iterations = 1000
        self._overclustering_factor = 1.0
        self._batch_size = None
        self._verbose = 0
        self._random_state = None
        self._device = None

    def with_metric(self, metric: DistanceMetric) -> 'KMeansBuilder':
        """Set the distance metric."""
        self._metric = metric
        return self

    def with_squared_euclidean_metric(self) -> 'KMeansBuilder':
        return self.with_metric(SquaredEuclideanDistance())

    def with_euclidean_metric(self) -> 'KMeansBuilder':
        return self.with_metric(EuclideanDistance())

    def with_manhattan_metric(self) -> 'KMeansBuilder':
        return self.with_metric(ManhattanDistance())

    def with_lp_metric(self, power: float, take_root: bool = True) -> 'KMeansBuilder':
        """Use a generic L_p metric."""
        return self.with_metric(LMetric(power, take_root))

    def with_partitioner(self, partitioner: InitialPartitionPolicy) -> 'KMeansBuilder':
        """Set the initial partition policy."""
        self._partitioner = partitioner
        return self

    def with_random_partition(self, random_state: Optional[int] = None) -> 'KMeansBuilder':
        return self.with_partitioner(RandomPartition(random_state=random_state))

    def with_round_robin_partition(self) -> 'KMeansBuilder':
        return self.with_partitioner(RoundRobinPartition())

    def with_kmeans_plusplus_partition(self, n_local_trials: Optional[int] = None,
                                       random_state: Optional[int] = None) -> 'KMeansBuilder':
        return self.with_partitioner(
            KMeansPlusPlusPartition(n_local_trials=n_local_trials, random_state=random_state)
        )

    def with_initial_assignments(self, assignments: Tensor) -> 'KMeansBuilder':
        """Warm start from a previous assignment vector."""
        return self.with_partitioner(FromPreviousPartition(assignments))

    def with_empty_cluster_action(self, action: EmptyClusterPolicy) -> 'KMeansBuilder':
        """Set the empty cluster policy."""
        self._empty_cluster_action = action
        return self

    def with_max_variance_repair(self) -> 'KMeansBuilder':
        return self.with_empty_cluster_action(MaxVarianceNewCluster())

    def with_empty_clusters_allowed(self) -> 'KMeansBuilder':
        return self.with_empty_cluster_action(AllowEmptyClusters())

    def with_max_iterations(self, max_iterations: int) -> 'KMeansBuilder':
        """Set maximum iterations (0 for no cap)."""
        self._max_iterations = max_iterations
        return self

    def with_overclustering(self, factor: float) -> 'KMeansBuilder':
        """Set the overclustering factor."""
        self._overclustering_factor = factor
        return self

    def with_batch_size(self, batch_size: Optional[int]) -> 'KMeansBuilder':
        self._batch_size = batch_size
        return self

    def with_verbose(self, verbose: int) -> 'KMeansBuilder':
        """Set verbosity level."""
        self._verbose = verbose
        return self

    def with_random_state(self, random_state: int) -> 'KMeansBuilder':
        """Set the seed of the default partitioner."""
        self._random_state = random_state
        return self

    def with_device(self, device: Union[str, torch.device]) -> 'KMeansBuilder':
        """Set computation device."""
        self._device = device
        return self

    def build(self) -> KMeans:
        """Build the configured engine.

        Returns
        -------
        kmeans : KMeans
            Engine with the chosen policies; unset policies get the
            engine defaults.
        """
        return KMeans(
            max_iterations=self._max_iterations,
            overclustering_factor=self._overclustering_factor,
            metric=self._metric,
            partitioner=self._partitioner,
            empty_cluster_action=self._empty_cluster_action,
            batch_size=self._batch_size,
            verbose=self._verbose,
            random_state=self._random_state,
            device=self._device
        )


def _lookup(registry: Dict[str, Callable], name: str, kind: str) -> Callable:
    try:
        return registry[name]
    except KeyError:
        raise ValueError(f"Unknown {kind} {name!r}; expected one of "
                         f"{sorted(registry)}") from None


def create_kmeans(metric: str = 'squared_euclidean',
                  partition: str = 'random',
                  empty_cluster: str = 'max_variance',
                  **kwargs) -> KMeans:
    """Create a K-means engine from policy names.

    Parameters
    ----------
    metric : str, default='squared_euclidean'
        One of 'squared_euclidean', 'euclidean', 'manhattan', 'chebyshev'
    partition : str, default='random'
        One of 'random', 'round_robin', 'k-means++'
    empty_cluster : str, default='max_variance'
        One of 'max_variance', 'allow_empty'
    **kwargs : dict
        Builder settings by name, e.g. ``max_iterations=100`` calls
        ``with_max_iterations(100)``

    Returns
    -------
    kmeans : KMeans

    Raises
    ------
    ValueError
        On an unknown policy name or setting
    """
    builder = KMeansBuilder()
    builder.with_metric(_lookup(METRICS, metric, 'metric')())
    builder.with_empty_cluster_action(
        _lookup(EMPTY_CLUSTER_POLICIES, empty_cluster, 'empty cluster policy')()
    )

    partitioner_class = _lookup(PARTITIONERS, partition, 'partition')
    random_state = kwargs.pop('random_state', None)
    if partitioner_class is RoundRobinPartition:
        builder.with_partitioner(partitioner_class())
    else:
        builder.with_partitioner(partitioner_class(random_state=random_state))
    builder.with_random_state(random_state)

    # Apply any custom parameters
    for key, value in kwargs.items():
        method = getattr(builder, f'with_{key}', None)
        if method is None:
            raise ValueError(f"Unknown KMeans setting {key!r}")
        method(value)

    return builder.build()
