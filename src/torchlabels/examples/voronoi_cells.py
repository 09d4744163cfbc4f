"""Seeded Voronoi partition of a grid, with background holes.

Gives irregular regions with face, edge and corner contacts, useful for
checking adjacency against a brute-force reference.
"""

import torch

from torchlabels.volume import LabelVolume


def load(
    shape: tuple[int, int, int] = (16, 16, 16),
    n_seeds: int = 12,
    background_fraction: float = 0.2,
    seed: int = 0,
    device: str = "cpu",
) -> LabelVolume:
    """Create a Voronoi-partitioned label volume.

    Each voxel gets the label (1..n_seeds) of its nearest seed point. A random
    ``background_fraction`` of voxels is then reset to background (0). Seed
    labels whose region vanishes are simply absent.

    Args:
        shape: Grid shape (size_x, size_y, size_z)
        n_seeds: Number of Voronoi seeds
        background_fraction: Fraction of voxels reset to background, in [0, 1]
        seed: Random seed; the same seed always gives the same volume
        device: Compute device ('cpu' or 'cuda')

    Returns:
        LabelVolume with labels in [0, n_seeds]
    """
    generator = torch.Generator().manual_seed(seed)

    ### Seed positions in continuous grid coordinates
    # Shape: (n_seeds, 3)
    extent = torch.tensor(shape, dtype=torch.float32)
    seeds = torch.rand(n_seeds, 3, generator=generator) * extent

    ### Nearest seed for every voxel center
    # Shape: (size_x, size_y, size_z, 3)
    axes = [torch.arange(n, dtype=torch.float32) + 0.5 for n in shape]
    centers = torch.stack(torch.meshgrid(*axes, indexing="ij"), dim=-1)
    distances = torch.cdist(centers.reshape(-1, 3), seeds)
    labels = distances.argmin(dim=1).reshape(shape).to(torch.int32) + 1

    ### Punch background holes
    holes = torch.rand(shape, generator=generator) < background_fraction
    labels[holes] = 0

    return LabelVolume(labels=labels.to(device))
