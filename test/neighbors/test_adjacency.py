"""Tests for the Adjacency ragged table."""

import pytest
import torch

from torchlabels.neighbors import Adjacency


class TestAdjacencyValidation:
    """Offset-indices encoding is validated on construction."""

    def test_empty_offsets_rejected(self):
        with pytest.raises(ValueError, match="length >= 1"):
            Adjacency(
                offsets=torch.zeros(0, dtype=torch.int64),
                indices=torch.zeros(0, dtype=torch.int64),
            )

    def test_nonzero_first_offset_rejected(self):
        with pytest.raises(ValueError, match="First offset must be 0"):
            Adjacency(
                offsets=torch.tensor([1, 2]),
                indices=torch.tensor([5, 6]),
            )

    def test_last_offset_mismatch_rejected(self):
        with pytest.raises(ValueError, match="Last offset"):
            Adjacency(
                offsets=torch.tensor([0, 2, 4]),
                indices=torch.tensor([5, 6, 7]),
            )


class TestAdjacencyAccess:
    """Ragged and dense views of the table."""

    @pytest.fixture
    def ragged(self):
        """Rows [[2, 3], [], [1], [4, 5, 6]]."""
        return Adjacency(
            offsets=torch.tensor([0, 2, 2, 3, 6]),
            indices=torch.tensor([2, 3, 1, 4, 5, 6]),
        )

    def test_to_list(self, ragged):
        assert ragged.to_list() == [[2, 3], [], [1], [4, 5, 6]]

    def test_counts(self, ragged):
        assert ragged.n_sources == 4
        assert ragged.n_total_neighbors == 6
        assert ragged.row_lengths.tolist() == [2, 0, 1, 3]
        assert ragged.max_row_length == 3

    def test_to_padded(self, ragged):
        padded = ragged.to_padded()
        assert padded.tolist() == [
            [2, 3, 0],
            [0, 0, 0],
            [1, 0, 0],
            [4, 5, 6],
        ]

    def test_to_padded_fill_value(self, ragged):
        padded = ragged.to_padded(fill_value=-1)
        assert padded[1].tolist() == [-1, -1, -1]
        assert padded[2].tolist() == [1, -1, -1]

    def test_with_empty_rows(self):
        adj = Adjacency.with_empty_rows(3)
        assert adj.to_list() == [[], [], []]
        assert adj.max_row_length == 0
        assert adj.to_padded().shape == (3, 0)

    def test_no_rows(self):
        adj = Adjacency.with_empty_rows(0)
        assert adj.n_sources == 0
        assert adj.to_list() == []
        assert adj.max_row_length == 0
        assert adj.to_padded().shape == (0, 0)

    def test_device(self, device):
        adj = Adjacency(
            offsets=torch.tensor([0, 1, 3], device=device),
            indices=torch.tensor([7, 8, 9], device=device),
        )
        assert adj.to_padded().device.type == device
        assert adj.to_list() == [[7], [8, 9]]
