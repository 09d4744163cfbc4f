"""Label set extraction: the ordered set of labels present in a volume."""

from typing import TYPE_CHECKING

import torch

if TYPE_CHECKING:
    from torchlabels.volume import LabelVolume


def get_unique_labels(
    volume: "LabelVolume",
    voxels_of_interest: torch.Tensor,
) -> torch.Tensor:
    """Collect the distinct labels found at the voxels of interest.

    The position of a label in the result is its row index in every table
    derived from it (adjacency rows, label-index grid).

    Args:
        volume: Input label volume.
        voxels_of_interest: Linear indices of the nonzero voxels, shape (n_voi,).

    Returns:
        Distinct labels in ascending order, shape (n_labels,), dtype int32.
        Background (0) never appears.
    """
    values = volume.flat_labels[voxels_of_interest]
    return torch.unique(values, sorted=True)
