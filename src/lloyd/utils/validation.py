"""
Input validation utilities.

Every malformed input to the engine is rejected here, before any
computation starts.
"""

from typing import Optional, Union
import math
import warnings
import torch
from torch import Tensor
import numpy as np


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: Optional[torch.dtype] = None,
                  device: Optional[torch.device] = None,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1) -> Tensor:
    """Validate and convert input data to a 2D floating tensor.

    Args:
        X: Input data (tensor, numpy array, or list). 1D input is read as
           n one-dimensional points.
        dtype: Target data type. None keeps a floating input dtype and
               converts anything else to float32.
        device: Target device
        ensure_finite: Whether to check for inf/nan
        ensure_min_samples: Minimum number of samples required

    Returns:
        Validated tensor. A tensor that already has the requested dtype and
        device is returned as-is, not copied.

    Raises:
        ValueError: If validation fails
        TypeError: If X cannot be converted
    """
    # Convert to tensor
    if isinstance(X, Tensor):
        pass
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(X)
    elif isinstance(X, (list, tuple)):
        X = torch.tensor(X)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if dtype is None:
        dtype = X.dtype if X.is_floating_point() else torch.float32
    if X.dtype != dtype or (device is not None and X.device != device):
        X = X.to(dtype=dtype, device=device)

    # Ensure 2D
    if X.dim() == 1:
        X = X.unsqueeze(1)
    elif X.dim() != 2:
        raise ValueError(f"Expected 2D array, got {X.dim()}D")

    n_samples, n_features = X.shape

    if n_samples < ensure_min_samples:
        raise ValueError(f"Found {n_samples} samples, but need at least "
                         f"{ensure_min_samples}")

    if n_features < 1:
        raise ValueError("Data must have at least one feature")

    # Check for finite values
    if ensure_finite:
        if torch.isnan(X).any():
            raise ValueError("Input contains NaN values")
        if torch.isinf(X).any():
            raise ValueError("Input contains infinite values")

    return X


def check_n_clusters(n_clusters: int, n_samples: int) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples

    Raises:
        ValueError: If invalid
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters <= 0:
        raise ValueError(f"n_clusters must be positive, got {n_clusters}")

    if n_clusters > n_samples:
        raise ValueError(f"n_clusters ({n_clusters}) cannot be larger than "
                         f"n_samples ({n_samples})")


def check_overclustering_factor(factor: float) -> float:
    """Validate the overclustering factor and return it as a float."""
    try:
        factor = float(factor)
    except (TypeError, ValueError):
        raise TypeError(f"overclustering_factor must be a real number, "
                        f"got {type(factor)}") from None

    if not math.isfinite(factor) or factor < 1.0:
        raise ValueError(f"overclustering_factor must be a finite number >= 1.0, "
                         f"got {factor}")
    return factor


def check_max_iterations(max_iterations: int) -> int:
    """Validate the iteration cap (0 means no cap)."""
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
        raise TypeError(f"max_iterations must be int, got {type(max_iterations)}")
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
    return int(max_iterations)


def validate_assignments(assignments: Optional[Union[Tensor, np.ndarray, list]],
                         n_samples: int,
                         n_clusters: int,
                         device: Optional[torch.device] = None) -> Optional[Tensor]:
    """Validate an initial guess of cluster assignments.

    Args:
        assignments: None, an empty vector, or one id per sample
        n_samples: Number of samples
        n_clusters: Ids must lie in [0, n_clusters)
        device: Target device

    Returns:
        (n,) long tensor, or None when no guess was supplied

    Raises:
        ValueError: If the vector has the wrong length or out-of-range ids
    """
    if assignments is None:
        return None

    # Convert to tensor
    if isinstance(assignments, Tensor):
        labels = assignments
    elif isinstance(assignments, np.ndarray):
        labels = torch.from_numpy(assignments)
    elif isinstance(assignments, (list, tuple)):
        labels = torch.tensor(assignments, dtype=torch.long)
    else:
        raise TypeError(f"Cannot convert {type(assignments)} to label tensor")

    if labels.numel() == 0:
        return None

    if labels.is_floating_point() or labels.dtype == torch.bool:
        raise ValueError(f"Assignments must be integers, got {labels.dtype}")

    # Check dimension
    if labels.dim() != 1:
        raise ValueError(f"Assignments must be 1D, got {labels.dim()}D")

    # Check length
    if len(labels) != n_samples:
        raise ValueError(f"Expected {n_samples} assignments, got {len(labels)}")

    # Check values
    if (labels < 0).any():
        raise ValueError("Assignments must be non-negative")
    if (labels >= n_clusters).any():
        raise ValueError(f"Assignments must be smaller than {n_clusters}, "
                         f"got {int(labels.max())}")

    return labels.to(dtype=torch.long, device=device).clone()


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> Optional[torch.Generator]:
    """Create generator from random state.

    Args:
        random_state: Seed or generator

    Returns:
        Generator or None
    """
    if random_state is None:
        return None
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")


def check_device(device: Optional[Union[str, torch.device]]) -> Optional[torch.device]:
    """Resolve a device specification.

    None keeps computation wherever the data already lives. 'auto' picks
    CUDA, then MPS, then CPU. Unavailable accelerators fall back to CPU
    with a warning.
    """
    if device is None or isinstance(device, torch.device):
        return device

    if not isinstance(device, str):
        raise TypeError(f"Device must be str or torch.device, got {type(device)}")

    mps_available = hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()

    if device == 'auto':
        if torch.cuda.is_available():
            return torch.device('cuda')
        return torch.device('mps') if mps_available else torch.device('cpu')
    elif device == 'cpu':
        return torch.device('cpu')
    elif device.startswith('cuda'):
        if not torch.cuda.is_available():
            warnings.warn("CUDA not available, falling back to CPU")
            return torch.device('cpu')
        return torch.device(device)
    elif device == 'mps':
        if not mps_available:
            warnings.warn("MPS not available, falling back to CPU")
            return torch.device('cpu')
        return torch.device('mps')
    else:
        raise ValueError(f"Unknown device: {device}")
