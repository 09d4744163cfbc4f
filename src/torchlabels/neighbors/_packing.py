"""Packing of the ragged adjacency table into a dense multi-channel grid."""

from typing import TYPE_CHECKING

import torch

from torchlabels.indexing import flatten_grid

if TYPE_CHECKING:
    from torchlabels.neighbors._label_neighbors import LabelNeighbors
    from torchlabels.volume import LabelVolume


def pack_label_neighbors(
    volume: "LabelVolume",
    neighbors: "LabelNeighbors",
) -> torch.Tensor:
    """Write each voxel's label and its label's neighbors into a 4D grid.

    For every voxel of interest with row index c:
    - channel 0 holds the voxel's label,
    - channels 1..len(row c) hold row c of the adjacency table, in order,
    - remaining channels hold 0.
    All channels of background voxels are 0. The number of channels is
    ``max_neighbors + 1``, so it is 1 when no label has a neighbor.

    Args:
        volume: The label volume ``neighbors`` was computed from.
        neighbors: Output of :func:`find_label_neighbors` on ``volume``.

    Returns:
        Newly allocated tensor of shape (size_x, size_y, size_z, max_neighbors + 1),
        dtype int32.

    Example:
        >>> volume = LabelVolume(labels=torch.tensor([[[1]], [[0]], [[2]]]))
        >>> packed = pack_label_neighbors(volume, find_label_neighbors(volume))
        >>> packed.shape
        torch.Size([3, 1, 1, 1])
        >>> packed[..., 0].flatten()
        tensor([1, 0, 2], dtype=torch.int32)
    """
    size_x, size_y, size_z = volume.grid_shape
    n_channels = neighbors.max_neighbors + 1
    voxels_of_interest = neighbors.voxels_of_interest

    ### Channel-major flat buffer: output[m, i] is channel m at linear index i
    output = torch.zeros(
        (n_channels, volume.n_voxels),
        dtype=torch.int32,
        device=volume.labels.device,
    )

    ### Channel 0: the input labels
    output[0, voxels_of_interest] = volume.flat_labels[voxels_of_interest]

    ### Channels 1..: each voxel's label row, zero-padded
    if n_channels > 1:
        # Shape: (n_labels, max_neighbors)
        padded_rows = neighbors.adjacency.to_padded(fill_value=0).to(torch.int32)
        voi_rows = flatten_grid(neighbors.label_index)[voxels_of_interest].to(torch.int64)
        # Shape: (max_neighbors, n_voi)
        output[1:, voxels_of_interest] = padded_rows[voi_rows].T

    ### (n_channels, z, y, x) -> (x, y, z, n_channels)
    return output.reshape(n_channels, size_z, size_y, size_x).permute(3, 2, 1, 0)
