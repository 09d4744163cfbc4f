"""Pytest configuration and shared fixtures for torchlabels tests.

This module provides the device parametrization, a brute-force reference for
label neighbor discovery, and small hand-built label volumes.
"""

import itertools

import numpy as np
import pytest
import torch


### Pytest Hooks ###


def pytest_collection_modifyitems(config, items):
    """Skip tests marked with 'cuda' if CUDA is not available."""
    if torch.cuda.is_available():
        return  # CUDA available, run all tests

    skip_cuda = pytest.mark.skip(reason="CUDA not available")
    for item in items:
        if "cuda" in item.keywords:
            item.add_marker(skip_cuda)


### Reference Implementation ###


def brute_force_label_neighbors(
    labels: np.ndarray, connectivity: int = 26
) -> dict[int, list[int]]:
    """Per-label, per-voxel neighbor search with plain Python loops.

    Args:
        labels: Label grid indexed [x, y, z]
        connectivity: 6, 18, or 26

    Returns:
        {label: sorted neighbor labels} for every nonzero label, labels ascending
    """
    max_jumps = {6: 1, 18: 2, 26: 3}[connectivity]
    offsets = [
        d
        for d in itertools.product((-1, 0, 1), repeat=3)
        if 0 < sum(map(abs, d)) <= max_jumps
    ]
    size = labels.shape

    result = {}
    for k in sorted(int(v) for v in np.unique(labels) if v != 0):
        found = set()
        for x, y, z in zip(*np.nonzero(labels == k)):
            for dx, dy, dz in offsets:
                nx, ny, nz = x + dx, y + dy, z + dz
                if 0 <= nx < size[0] and 0 <= ny < size[1] and 0 <= nz < size[2]:
                    found.add(int(labels[nx, ny, nz]))
        found.discard(0)
        found.discard(k)
        result[k] = sorted(found)
    return result


### Pytest Fixtures ###


@pytest.fixture(
    params=[
        "cpu",
        pytest.param("cuda", marks=pytest.mark.cuda),
    ]
)
def device(request):
    """Parametrize tests over all available devices (CPU, CUDA).

    CUDA tests are automatically skipped if CUDA is not available via
    the pytest_collection_modifyitems hook.
    """
    return request.param


@pytest.fixture
def reference_neighbors():
    """Brute-force ground truth for label neighbors."""
    return brute_force_label_neighbors


@pytest.fixture
def diagonal_grid():
    """2x2x2 grid with label 1 at (0, 0, 0) and label 2 at (1, 1, 1)."""
    labels = torch.zeros(2, 2, 2, dtype=torch.int32)
    labels[0, 0, 0] = 1
    labels[1, 1, 1] = 2
    return labels


@pytest.fixture
def separated_grid():
    """3x1x1 grid with values [1, 0, 2] along x."""
    return torch.tensor([1, 0, 2], dtype=torch.int32).reshape(3, 1, 1)
