"""Neighbor discovery between labels of a 3D label volume.

For every label, collects the distinct labels found in the neighborhood
(26-connected by default) of any of its voxels. Work is restricted to the
voxels of interest and vectorized over them: each neighbor offset is applied
to all occupied voxels at once, and the resulting (row, neighbor label)
pairs are deduplicated and sorted in a single pass.
"""

import logging
from typing import TYPE_CHECKING, Literal

import torch
from tensordict import tensorclass

from torchlabels.indexing import get_neighbor_offsets, ind2sub, sub2ind, unflatten_grid
from torchlabels.neighbors._adjacency import Adjacency
from torchlabels.neighbors._label_set import get_unique_labels
from torchlabels.neighbors._voxels_of_interest import get_voxels_of_interest

if TYPE_CHECKING:
    from torchlabels.volume import LabelVolume

logger = logging.getLogger(__name__)

# Pairs are packed into one int64 key: row in the high 32 bits, the label
# shifted to be non-negative in the low 32 bits. Ascending key order is then
# ascending row order, and ascending label order within a row.
_LABEL_SHIFT = 2**31
_LABEL_MASK = 2**32 - 1


@tensorclass
class LabelNeighbors:
    """Result of neighbor discovery on a label volume.

    Attributes:
        labels: Distinct nonzero labels, ascending. Shape (n_labels,), dtype int32.
            The position of a label here is its row index.
        adjacency: One row per label (in ``labels`` order) holding its neighbor
            labels, ascending and without duplicates. Neither 0 nor the row's
            own label ever appears.
        label_index: Row index of the label at each voxel of interest, 0 elsewhere.
            Shape (size_x, size_y, size_z), dtype int32.
        voxels_of_interest: Linear indices of the nonzero voxels, ascending.
            Shape (n_voi,), dtype int64.
    """

    labels: torch.Tensor  # shape: (n_labels,), dtype: int32
    adjacency: Adjacency
    label_index: torch.Tensor  # shape: (size_x, size_y, size_z), dtype: int32
    voxels_of_interest: torch.Tensor  # shape: (n_voi,), dtype: int64

    @property
    def n_labels(self) -> int:
        return len(self.labels)

    @property
    def max_neighbors(self) -> int:
        """Largest number of neighbors of any single label (0 if there are no labels)."""
        return self.adjacency.max_row_length

    def to_label_dict(self) -> dict[int, list[int]]:
        """Map each label to its sorted list of neighbor labels.

        Example:
            >>> neighbors = find_label_neighbors(volume)
            >>> neighbors.to_label_dict()
            {1: [2], 2: [1, 3], 3: [2]}
        """
        return dict(zip(self.labels.tolist(), self.adjacency.to_list()))


def find_label_neighbors(
    volume: "LabelVolume",
    connectivity: Literal[6, 18, 26] = 26,
    voxels_of_interest: torch.Tensor | None = None,
    labels: torch.Tensor | None = None,
) -> LabelNeighbors:
    """Find, for each label, the set of labels it touches.

    A label k' is a neighbor of label k if some voxel of k' lies at an offset
    in {-1, 0, 1}^3 (restricted by ``connectivity``) from some voxel of k.
    Offsets that leave the grid are skipped; there is no wraparound.

    Args:
        volume: Input label volume. Read only.
        connectivity: 26 (default; face, edge and corner neighbors), 18 (face
            and edge), or 6 (face only).
        voxels_of_interest: Precomputed output of
            :func:`get_voxels_of_interest`. Computed if not given.
        labels: Precomputed output of :func:`get_unique_labels`. Computed if
            not given.

    Returns:
        LabelNeighbors. A label without neighbors has an empty row; a volume
        without any labels gives zero rows.

    Example:
        >>> # Pure corner contact in a 2x2x2 grid
        >>> grid = torch.zeros(2, 2, 2, dtype=torch.int32)
        >>> grid[0, 0, 0] = 1
        >>> grid[1, 1, 1] = 2
        >>> find_label_neighbors(LabelVolume(labels=grid)).to_label_dict()
        {1: [2], 2: [1]}
    """
    offsets = get_neighbor_offsets(connectivity, device=volume.labels.device)

    if voxels_of_interest is None:
        voxels_of_interest = get_voxels_of_interest(volume)
    if labels is None:
        labels = get_unique_labels(volume, voxels_of_interest)

    flat_labels = volume.flat_labels
    device = flat_labels.device
    n_labels = len(labels)
    logger.info(
        "Found %d unique labels in %d voxels of interest",
        n_labels,
        len(voxels_of_interest),
    )

    ### Separately owned label-index buffer, 0 outside the voxels of interest
    flat_label_index = torch.zeros(volume.n_voxels, dtype=torch.int32, device=device)

    if n_labels == 0:
        return LabelNeighbors(
            labels=labels,
            adjacency=Adjacency.with_empty_rows(0, device=device),
            label_index=unflatten_grid(flat_label_index, volume.grid_shape),
            voxels_of_interest=voxels_of_interest,
        )

    ### Row index of every voxel of interest
    # Shape: (n_voi,)
    voi_labels = flat_labels[voxels_of_interest]
    voi_rows = torch.searchsorted(labels, voi_labels).to(torch.int64)
    flat_label_index[voxels_of_interest] = voi_rows.to(torch.int32)

    ### Visit every neighbor offset of every voxel of interest
    # Shape: (n_voi, 3)
    voi_coords = ind2sub(voxels_of_interest, volume.grid_shape)
    grid_size = torch.tensor(volume.grid_shape, dtype=torch.int64, device=device)

    pair_keys = []
    for offset in offsets:
        neighbor_coords = voi_coords + offset
        in_bounds = ((neighbor_coords >= 0) & (neighbor_coords < grid_size)).all(dim=1)

        neighbor_coords = neighbor_coords[in_bounds]
        rows = voi_rows[in_bounds]
        neighbor_index = sub2ind(
            neighbor_coords[:, 0],
            neighbor_coords[:, 1],
            neighbor_coords[:, 2],
            volume.grid_shape,
        )
        neighbor_labels = flat_labels[neighbor_index].to(torch.int64)

        ### Drop background and self contacts
        keep = (neighbor_labels != 0) & (neighbor_labels != labels[rows].to(torch.int64))
        keys = (rows[keep] << 32) | (neighbor_labels[keep] + _LABEL_SHIFT)
        pair_keys.append(torch.unique(keys))

    ### Deduplicate and sort (row, neighbor label) pairs
    # torch.unique returns keys ascending: grouped by row, labels ascending within
    unique_keys = torch.unique(torch.cat(pair_keys))
    pair_rows = unique_keys >> 32
    pair_labels = (unique_keys & _LABEL_MASK) - _LABEL_SHIFT

    ### Compute offsets for each row
    row_offsets = torch.zeros(n_labels + 1, dtype=torch.int64, device=device)
    row_offsets[1:] = torch.cumsum(torch.bincount(pair_rows, minlength=n_labels), dim=0)

    result = LabelNeighbors(
        labels=labels,
        adjacency=Adjacency(offsets=row_offsets, indices=pair_labels),
        label_index=unflatten_grid(flat_label_index, volume.grid_shape),
        voxels_of_interest=voxels_of_interest,
    )

    logger.info("Maximum number of neighbors: %d", result.max_neighbors)
    if logger.isEnabledFor(logging.DEBUG):
        for label, row in result.to_label_dict().items():
            logger.debug("Label %d neighbors: %s", label, row)

    return result
