# tests/utils.py
"""
Small, reusable helpers used across the lloyd test suite.

Functions:
- to_numpy(x): labels or points as a numpy array.
- same_partition(y1, y2): True if two labelings describe the same grouping.
- groups(y): the partition as a set of frozensets of point indices.
- time_block(label, meta=None): context manager that prints wall-clock time.
"""

from __future__ import annotations

import json
import time
from contextlib import contextmanager
from typing import Any, Dict, FrozenSet, Optional, Set

import numpy as np
import torch


def to_numpy(x: Any) -> np.ndarray:
    """Convert a tensor (any device) or array-like to a numpy array."""
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def groups(y: Any) -> Set[FrozenSet[int]]:
    """
    Partition described by a label vector, independent of the label values.

    >>> groups([1, 1, 0]) == {frozenset({0, 1}), frozenset({2})}
    True
    """
    y_np = to_numpy(y)
    return {frozenset(np.flatnonzero(y_np == label).tolist()) for label in np.unique(y_np)}


def same_partition(y1: Any, y2: Any) -> bool:
    """True if y2 is a relabeling of y1."""
    return groups(y1) == groups(y2)


@contextmanager
def time_block(label: str, meta: Optional[Dict[str, Any]] = None):
    """
    Time a block and print a single line:

    [timing] cluster {"n":400,"K":3} 0.123s
    """
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = time.perf_counter() - t0
        meta_str = " " + json.dumps(meta, separators=(",", ":")) if meta else ""
        print(f"[timing] {label}{meta_str} {dt:.3f}s")
