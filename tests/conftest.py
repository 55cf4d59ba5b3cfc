"""
Global pytest fixtures for the lloyd test suite.

- Provides deterministic seeding across Python, NumPy, and PyTorch.
- Forces single-threaded torch to stabilize timings and reduce flakiness.
- Standardizes on CPU for all tests.
"""

from __future__ import annotations

import os
import random
import sys
from typing import Generator
from pathlib import Path

import numpy as np
import pytest
import torch

# Add the project's src directory to the Python path so tests can import the code
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Helper modules (utils.py, data_gen.py) live next to this file
TESTS = Path(__file__).resolve().parent
if str(TESTS) not in sys.path:
    sys.path.insert(0, str(TESTS))


def _get_seed() -> int:
    """Resolve the test seed from env or default."""
    env = os.getenv("TEST_RANDOM_SEED", "1337")
    try:
        return int(env)
    except ValueError:
        return 1337


@pytest.fixture(scope="session", autouse=True)
def seed_all() -> int:
    """
    Seed Python, NumPy, and PyTorch RNGs once per session.

    Seed value comes from TEST_RANDOM_SEED (default 1337) and is returned
    so tests can reuse it.
    """
    seed = _get_seed()

    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)

    return seed


@pytest.fixture(scope="session", autouse=True)
def set_torch_threads() -> None:
    """
    Reduce PyTorch to a single thread for stability and consistent timing.
    """
    torch.set_num_threads(1)


@pytest.fixture(scope="function")
def rng(seed_all: int) -> Generator[np.random.Generator, None, None]:
    """
    Per-test NumPy Generator seeded from the session seed.
    """
    yield np.random.default_rng(seed_all)


@pytest.fixture(scope="session")
def torch_device() -> torch.device:
    """
    Standard device for tests. Pinned to CPU to avoid device drift.
    """
    return torch.device("cpu")
