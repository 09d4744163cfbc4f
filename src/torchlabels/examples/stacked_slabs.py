"""Labels stacked as slabs along z, each touching only the slab above and below."""

import torch

from torchlabels.volume import LabelVolume


def load(
    shape: tuple[int, int, int] = (4, 4, 12),
    n_slabs: int = 3,
    first_label: int = 1,
    device: str = "cpu",
) -> LabelVolume:
    """Create a volume of ``n_slabs`` labeled slabs stacked along z.

    Slab i (counting from z=0) carries label ``first_label + i``. The z extent
    is split as evenly as possible; ``shape[2]`` must be at least ``n_slabs``.

    Args:
        shape: Grid shape (size_x, size_y, size_z)
        n_slabs: Number of slabs
        first_label: Label of the bottom slab
        device: Compute device ('cpu' or 'cuda')

    Returns:
        LabelVolume where label k neighbors exactly k - 1 and k + 1 (when present)
    """
    size_x, size_y, size_z = shape
    if not 1 <= n_slabs <= size_z:
        raise ValueError(f"`n_slabs` must be in [1, {size_z}], but got {n_slabs=}.")

    slab_of_z = torch.arange(size_z, device=device) * n_slabs // size_z
    labels = (slab_of_z + first_label).to(torch.int32)
    labels = labels.expand(size_x, size_y, size_z).clone()

    return LabelVolume(labels=labels)
