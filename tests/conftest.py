"""Pytest configuration and shared fixtures for gabframe tests.

This module provides:
- Deterministic RNG fixtures for numpy and torch
- A fixture restoring the library configuration after each test
"""

import os

import numpy as np
import pytest
import torch

from gabframe import config as gabframe_config


def _seed() -> int:
    return int(os.environ.get("TEST_RNG_SEED", "0"))


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).

    Returns:
        A seeded numpy.random.Generator instance.
    """
    return np.random.default_rng(_seed())


@pytest.fixture(scope="function")
def torch_rng() -> torch.Generator:
    """Provide a deterministic CPU torch RNG for tests."""
    generator = torch.Generator(device="cpu")
    generator.manual_seed(_seed())
    return generator


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set global random seeds for reproducibility."""
    np.random.seed(_seed())
    torch.manual_seed(_seed())


@pytest.fixture(scope="function", autouse=True)
def restore_config():
    """Undo any set_config() made by a test."""
    saved = gabframe_config.get_config()
    yield
    gabframe_config._config = saved


@pytest.fixture(scope="function")
def random_window(rng: np.random.Generator):
    """Factory of unit-norm random windows of shape (L,) or (L, R)."""

    def make(L: int, R: int = 1, complex_: bool = False) -> np.ndarray:
        shape = (L,) if R == 1 else (L, R)
        g = rng.standard_normal(shape)
        if complex_:
            g = g + 1j * rng.standard_normal(shape)
        return g / np.linalg.norm(g, axis=0)

    return make
