"""Ragged adjacency table stored with offset-indices encoding.

Each label owns one row of neighbor labels, and rows differ in length. The
rows are packed into two flat tensors so the table stays on the label
volume's device.
"""

import torch
from tensordict import tensorclass


@tensorclass
class Adjacency:
    """Ragged table of per-label neighbor lists, offset-indices encoded.

    Attributes:
        offsets: Start of each row in ``indices``. Shape (n_sources + 1,), dtype int64.
            Row i is ``indices[offsets[i]:offsets[i+1]]``.
        indices: Concatenated rows. Shape (total_neighbors,), dtype int64.

    Example:
        >>> # Rows [[2, 3], [], [1]]
        >>> adj = Adjacency(
        ...     offsets=torch.tensor([0, 2, 2, 3]),
        ...     indices=torch.tensor([2, 3, 1]),
        ... )
        >>> adj.to_list()
        [[2, 3], [], [1]]
        >>> adj.max_row_length
        2
    """

    offsets: torch.Tensor  # shape: (n_sources + 1,), dtype: int64
    indices: torch.Tensor  # shape: (total_neighbors,), dtype: int64

    def __post_init__(self):
        if not torch.compiler.is_compiling():
            ### Offsets hold n_sources + 1 entries, so even an empty table has one
            if len(self.offsets) < 1:
                raise ValueError(
                    f"Offsets array must have length >= 1 (n_sources + 1), but got {len(self.offsets)=}. "
                    f"Even for 0 sources, offsets should be [0]."
                )

            if self.offsets[0].item() != 0:
                raise ValueError(
                    f"First offset must be 0, but got {self.offsets[0].item()=}. "
                    f"The offset-indices encoding requires offsets[0] == 0."
                )

            last_offset = self.offsets[-1].item()
            indices_length = len(self.indices)
            if last_offset != indices_length:
                raise ValueError(
                    f"Last offset must equal length of indices, but got "
                    f"{last_offset=} != {indices_length=}. "
                    f"The offset-indices encoding requires offsets[-1] == len(indices)."
                )

    @classmethod
    def with_empty_rows(cls, n_sources: int = 0, device: torch.device | str = "cpu") -> "Adjacency":
        """Table with ``n_sources`` rows, all of them empty."""
        return cls(
            offsets=torch.zeros(n_sources + 1, dtype=torch.int64, device=device),
            indices=torch.zeros(0, dtype=torch.int64, device=device),
        )

    def to_list(self) -> list[list[int]]:
        """Convert the table to a ragged list-of-lists, preserving row order.

        Returns:
            Ragged list where result[i] is row i. Empty rows are empty lists.
        """
        offsets_np = self.offsets.cpu().numpy()
        indices_np = self.indices.cpu().numpy()

        result = []
        for i in range(len(offsets_np) - 1):
            result.append(indices_np[offsets_np[i] : offsets_np[i + 1]].tolist())

        return result

    def to_padded(self, fill_value: int = 0) -> torch.Tensor:
        """Convert the table to a dense (n_sources, max_row_length) tensor.

        Row i holds its entries in order, followed by ``fill_value`` up to the
        longest row's length.

        Args:
            fill_value: Value written past the end of each row.

        Returns:
            Tensor of shape (n_sources, max_row_length), same dtype as ``indices``.

        Example:
            >>> adj = Adjacency(
            ...     offsets=torch.tensor([0, 2, 2, 3]),
            ...     indices=torch.tensor([2, 3, 1]),
            ... )
            >>> adj.to_padded()
            tensor([[2, 3],
                    [0, 0],
                    [1, 0]])
        """
        row_lengths = self.row_lengths
        padded = torch.full(
            (self.n_sources, self.max_row_length),
            fill_value,
            dtype=self.indices.dtype,
            device=self.indices.device,
        )
        if self.n_total_neighbors == 0:
            return padded

        ### Row and column of every entry in indices
        # Shape: (total_neighbors,)
        row_ids = torch.repeat_interleave(
            torch.arange(self.n_sources, device=self.indices.device), row_lengths
        )
        column_ids = (
            torch.arange(self.n_total_neighbors, device=self.indices.device)
            - self.offsets[row_ids]
        )

        padded[row_ids, column_ids] = self.indices
        return padded

    @property
    def n_sources(self) -> int:
        """Number of rows in the table."""
        return len(self.offsets) - 1

    @property
    def n_total_neighbors(self) -> int:
        """Total number of entries across all rows."""
        return len(self.indices)

    @property
    def row_lengths(self) -> torch.Tensor:
        """Length of each row. Shape (n_sources,), dtype int64."""
        return self.offsets[1:] - self.offsets[:-1]

    @property
    def max_row_length(self) -> int:
        """Length of the longest row; 0 when there are no rows."""
        if self.n_sources == 0:
            return 0
        return int(self.row_lengths.max().item())
