"""Linear indexing conventions for 3D voxel grids.

A grid of shape (size_x, size_y, size_z) is addressed as a flat buffer with x
varying fastest:

    index = size_x * size_y * z + size_x * y + x

Label volumes are held as tensors indexed ``[x, y, z]``, so the flat buffer is
the (z, y, x)-ordered view of that tensor. The helpers here convert between the
two representations and enumerate the neighbor offsets used for adjacency.
"""

from typing import Literal

import torch


def sub2ind(
    x: torch.Tensor | int,
    y: torch.Tensor | int,
    z: torch.Tensor | int,
    shape: tuple[int, int, int],
) -> torch.Tensor | int:
    """Convert (x, y, z) coordinates to linear indices.

    Args:
        x: x-coordinates, any shape (or a Python int).
        y: y-coordinates, same shape as ``x``.
        z: z-coordinates, same shape as ``x``.
        shape: Grid shape (size_x, size_y, size_z).

    Returns:
        Linear indices with the same shape as the inputs.

    Example:
        >>> sub2ind(1, 2, 3, (4, 5, 6))
        69
    """
    size_x, size_y, _ = shape
    return size_x * size_y * z + size_x * y + x


def ind2sub(index: torch.Tensor, shape: tuple[int, int, int]) -> torch.Tensor:
    """Convert linear indices to (x, y, z) coordinates.

    Args:
        index: Linear indices, shape (n,), integer dtype.
        shape: Grid shape (size_x, size_y, size_z).

    Returns:
        Coordinates, shape (n, 3), same dtype as ``index``.

    Example:
        >>> ind2sub(torch.tensor([69]), (4, 5, 6))
        tensor([[1, 2, 3]])
    """
    size_x, size_y, _ = shape
    x = index % size_x
    y = (index // size_x) % size_y
    z = index // (size_x * size_y)
    return torch.stack([x, y, z], dim=-1)


def flatten_grid(grid: torch.Tensor) -> torch.Tensor:
    """Flatten a ``[x, y, z]``-indexed grid into its linear buffer (x fastest).

    Trailing dimensions beyond the first three are not supported; use
    ``grid.permute(2, 1, 0, ...)`` directly for multi-channel data.
    """
    return grid.permute(2, 1, 0).reshape(-1)


def unflatten_grid(flat: torch.Tensor, shape: tuple[int, int, int]) -> torch.Tensor:
    """Inverse of :func:`flatten_grid`. Returns a ``[x, y, z]``-indexed view."""
    size_x, size_y, size_z = shape
    return flat.reshape(size_z, size_y, size_x).permute(2, 1, 0)


def get_neighbor_offsets(
    connectivity: Literal[6, 18, 26] = 26,
    device: torch.device | str = "cpu",
) -> torch.Tensor:
    """Enumerate the neighbor offsets of a voxel for a given connectivity.

    Offsets are ordered by the number of axes they move along: the 6 face
    neighbors first, then the 12 edge neighbors, then the 8 corner neighbors.
    Within each group the order is lexicographic in (dx, dy, dz).

    Args:
        connectivity: 6 (face), 18 (face + edge), or 26 (face + edge + corner).
        device: Device of the returned tensor.

    Returns:
        Offsets (dx, dy, dz), shape (connectivity, 3), dtype int64.

    Raises:
        ValueError: If ``connectivity`` is not one of 6, 18, 26.
    """
    max_jumps = {6: 1, 18: 2, 26: 3}.get(connectivity)
    if max_jumps is None:
        raise ValueError(
            f"`connectivity` must be one of 6, 18, or 26, but got {connectivity=}."
        )

    ### All offsets in {-1, 0, 1}^3, lexicographic order
    steps = torch.tensor([-1, 0, 1], dtype=torch.int64, device=device)
    offsets = torch.cartesian_prod(steps, steps, steps)  # shape: (27, 3)

    ### Group by number of nonzero components (drops the center at 0 jumps)
    n_jumps = (offsets != 0).sum(dim=1)
    groups = [offsets[n_jumps == jumps] for jumps in range(1, max_jumps + 1)]
    return torch.cat(groups, dim=0)
