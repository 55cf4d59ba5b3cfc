"""
Locality-preserving point ordering.

``tree_order`` returns the leaf order of a binary space partitioning tree:
the point set is split recursively at the median of its widest dimension
until each node holds at most ``leaf_size`` points. Points that are close in
space end up close in memory, which is what ``KMeans.fast_cluster`` uses to
rearrange its input.
"""

import torch
from torch import Tensor


def tree_order(data: Tensor, leaf_size: int = 20) -> Tensor:
    """Compute a spatially coherent permutation of the rows of ``data``.

    Args:
        data: (n, d) data points
        leaf_size: Largest node that is not split further

    Returns:
        (n,) long tensor ``old_from_new``: row i of the reordered data is row
        ``old_from_new[i]`` of the original.
    """
    if leaf_size < 1:
        raise ValueError(f"leaf_size must be at least 1, got {leaf_size}")

    n_points = data.shape[0]
    order = torch.arange(n_points, device=data.device)

    # Explicit stack of [start, end) ranges instead of recursion.
    stack = [(0, n_points)]
    while stack:
        start, end = stack.pop()
        if end - start <= leaf_size:
            continue

        node = data[order[start:end]]
        spread = node.max(dim=0).values - node.min(dim=0).values
        split_dim = int(torch.argmax(spread).item())
        if spread[split_dim] <= 0:
            # All points identical; nothing to separate.
            continue

        _, local = torch.sort(node[:, split_dim], stable=True)
        order[start:end] = order[start:end][local]

        middle = start + (end - start) // 2
        stack.append((middle, end))
        stack.append((start, middle))

    return order
