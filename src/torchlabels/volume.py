from typing import Literal

import torch
from tensordict import tensorclass

from torchlabels.indexing import flatten_grid, ind2sub, sub2ind


@tensorclass
class LabelVolume:
    """A 3D labeled volume: one signed 32-bit label per voxel, 0 is background.

    Attributes:
        labels: Label grid indexed ``[x, y, z]``. Shape (size_x, size_y, size_z), dtype int32.
        spacing: Voxel size along each axis, carried through unchanged. Shape (3,).
        origin: World position of voxel (0, 0, 0), carried through unchanged. Shape (3,).
    """

    labels: torch.Tensor  # shape: (size_x, size_y, size_z), dtype: int32
    spacing: torch.Tensor = None  # accepts None, defaults to ones  # ty: ignore
    origin: torch.Tensor = None  # accepts None, defaults to zeros  # ty: ignore

    def __post_init__(self):
        ### Validate shapes
        if self.labels.ndim != 3:
            raise ValueError(
                f"`labels` must have shape (size_x, size_y, size_z), but got {self.labels.shape=}."
            )

        ### Validate dtypes
        if torch.is_floating_point(self.labels) or self.labels.dtype == torch.bool:
            raise TypeError(
                f"`labels` must have an int-like dtype, but got {self.labels.dtype=}."
            )
        if self.labels.dtype != torch.int32:
            self.labels = self.labels.to(torch.int32)

        ### Initialize spatial metadata
        if self.spacing is None:
            self.spacing = torch.ones(3, device=self.labels.device)
        if self.origin is None:
            self.origin = torch.zeros(3, device=self.labels.device)

        for name in ("spacing", "origin"):
            value = torch.as_tensor(getattr(self, name), device=self.labels.device)
            if value.shape != (3,):
                raise ValueError(
                    f"`{name}` must have shape (3,), but got {value.shape=}."
                )
            setattr(self, name, value)

    @property
    def grid_shape(self) -> tuple[int, int, int]:
        """Grid shape (size_x, size_y, size_z)."""
        return tuple(self.labels.shape)

    @property
    def size_x(self) -> int:
        return self.labels.shape[0]

    @property
    def size_y(self) -> int:
        return self.labels.shape[1]

    @property
    def size_z(self) -> int:
        return self.labels.shape[2]

    @property
    def n_voxels(self) -> int:
        return self.labels.numel()

    @property
    def flat_labels(self) -> torch.Tensor:
        """Labels as a flat buffer in linear-index order (x fastest). Shape (n_voxels,)."""
        return flatten_grid(self.labels)

    def linear_index(self, x, y, z):
        """Linear index of voxel (x, y, z). Accepts ints or integer tensors."""
        return sub2ind(x, y, z, self.grid_shape)

    def coordinates(self, index: torch.Tensor) -> torch.Tensor:
        """Coordinates (x, y, z) of linear indices. Returns shape (n, 3)."""
        return ind2sub(torch.as_tensor(index, device=self.labels.device), self.grid_shape)

    def get_voxels_of_interest(self) -> torch.Tensor:
        """Linear indices of all nonzero voxels, ascending.

        Returns:
            Tensor of shape (n_voi,), dtype int64.
        """
        from torchlabels.neighbors import get_voxels_of_interest

        return get_voxels_of_interest(self)

    def get_unique_labels(self) -> torch.Tensor:
        """Distinct nonzero labels present in the volume, ascending.

        Returns:
            Tensor of shape (n_labels,), dtype int32.
        """
        from torchlabels.neighbors import get_unique_labels, get_voxels_of_interest

        return get_unique_labels(self, get_voxels_of_interest(self))

    def get_label_neighbors(self, connectivity: Literal[6, 18, 26] = 26):
        """Find the neighboring labels of every label in the volume.

        Two labels are neighbors if any voxel of one lies in the neighborhood of
        any voxel of the other. Neighborhoods are clipped at the grid boundary.

        Args:
            connectivity: Voxel neighborhood, 26 (default), 18, or 6.

        Returns:
            LabelNeighbors holding the ascending label set, the ragged
            adjacency table (one sorted row per label), and the label-index grid.

        Example:
            >>> volume = LabelVolume(labels=torch.tensor([[[1]], [[0]], [[2]]]))
            >>> volume.get_label_neighbors().to_label_dict()
            {1: [], 2: []}
        """
        from torchlabels.neighbors import find_label_neighbors

        return find_label_neighbors(self, connectivity=connectivity)

    def get_packed_neighbors(
        self, connectivity: Literal[6, 18, 26] = 26
    ) -> torch.Tensor:
        """Compute label neighbors and pack them into a dense multi-channel grid.

        Channel 0 holds the label of each voxel; channels 1.. hold that label's
        sorted neighbors, zero-padded to the largest neighbor count.

        Args:
            connectivity: Voxel neighborhood, 26 (default), 18, or 6.

        Returns:
            Tensor of shape (size_x, size_y, size_z, max_neighbors + 1), dtype int32.
        """
        from torchlabels.neighbors import find_label_neighbors, pack_label_neighbors

        neighbors = find_label_neighbors(self, connectivity=connectivity)
        return pack_label_neighbors(self, neighbors)
