"""Voxel-of-interest subsetting.

Later passes only touch occupied voxels, so their cost scales with the
number of labeled voxels rather than the full volume.
"""

from typing import TYPE_CHECKING

import torch

if TYPE_CHECKING:
    from torchlabels.volume import LabelVolume


def get_voxels_of_interest(volume: "LabelVolume") -> torch.Tensor:
    """Find the linear indices of all nonzero voxels.

    Args:
        volume: Input label volume.

    Returns:
        Ascending linear indices (x fastest), shape (n_voi,), dtype int64.
        Empty when the volume is all background.

    Example:
        >>> volume = LabelVolume(labels=torch.tensor([[[1]], [[0]], [[2]]]))
        >>> get_voxels_of_interest(volume)
        tensor([0, 2])
    """
    # nonzero on a 1D tensor returns ascending positions
    return torch.nonzero(volume.flat_labels, as_tuple=True)[0]
