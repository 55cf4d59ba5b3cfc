"""Utility functions for the K-Means engine."""

from .convergence import ChangeInAssignments

from .metrics import (
    centroids_from_assignments,
    inertia
)

from .ordering import tree_order

from .validation import (
    validate_data,
    validate_assignments,
    check_n_clusters,
    check_overclustering_factor,
    check_max_iterations,
    check_random_state,
    check_device
)

__all__ = [
    # Convergence criteria
    'ChangeInAssignments',

    # Cluster statistics
    'centroids_from_assignments',
    'inertia',

    # Ordering
    'tree_order',

    # Validation
    'validate_data',
    'validate_assignments',
    'check_n_clusters',
    'check_overclustering_factor',
    'check_max_iterations',
    'check_random_state',
    'check_device'
]
