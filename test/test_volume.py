"""Tests for the LabelVolume container."""

import pytest
import torch

from torchlabels import LabelVolume


class TestLabelVolumeConstruction:
    """Validation and normalization on construction."""

    def test_basic_properties(self):
        volume = LabelVolume(labels=torch.zeros(3, 4, 5, dtype=torch.int32))

        assert volume.grid_shape == (3, 4, 5)
        assert (volume.size_x, volume.size_y, volume.size_z) == (3, 4, 5)
        assert volume.n_voxels == 60
        assert torch.equal(volume.spacing, torch.ones(3))
        assert torch.equal(volume.origin, torch.zeros(3))

    def test_integer_dtypes_cast_to_int32(self):
        volume = LabelVolume(labels=torch.ones(2, 2, 2, dtype=torch.int64))
        assert volume.labels.dtype == torch.int32

        volume = LabelVolume(labels=torch.ones(2, 2, 2, dtype=torch.uint8))
        assert volume.labels.dtype == torch.int32

    @pytest.mark.parametrize("dtype", [torch.float32, torch.float64, torch.bool])
    def test_rejects_non_integer_labels(self, dtype):
        with pytest.raises(TypeError, match="int-like"):
            LabelVolume(labels=torch.zeros(2, 2, 2, dtype=dtype))

    @pytest.mark.parametrize("shape", [(4,), (4, 4), (2, 2, 2, 2)])
    def test_rejects_non_3d_labels(self, shape):
        with pytest.raises(ValueError, match="size_x, size_y, size_z"):
            LabelVolume(labels=torch.zeros(shape, dtype=torch.int32))

    def test_metadata_passthrough(self):
        volume = LabelVolume(
            labels=torch.zeros(2, 2, 2, dtype=torch.int32),
            spacing=torch.tensor([0.5, 0.5, 2.0]),
            origin=torch.tensor([10.0, -3.0, 1.0]),
        )
        assert volume.spacing.tolist() == [0.5, 0.5, 2.0]
        assert volume.origin.tolist() == [10.0, -3.0, 1.0]

    def test_rejects_bad_metadata_shape(self):
        with pytest.raises(ValueError, match="spacing"):
            LabelVolume(
                labels=torch.zeros(2, 2, 2, dtype=torch.int32),
                spacing=torch.ones(2),
            )


class TestLabelVolumeIndexing:
    """Bound linear-index helpers."""

    def test_linear_index_and_coordinates(self):
        volume = LabelVolume(labels=torch.zeros(4, 5, 6, dtype=torch.int32))

        assert volume.linear_index(1, 2, 3) == 4 * 5 * 3 + 4 * 2 + 1
        coords = volume.coordinates(torch.tensor([volume.linear_index(1, 2, 3)]))
        assert coords.tolist() == [[1, 2, 3]]

    def test_flat_labels_match_linear_index(self):
        labels = torch.randint(0, 5, (3, 4, 2), dtype=torch.int32)
        volume = LabelVolume(labels=labels)
        flat = volume.flat_labels

        assert flat.shape == (24,)
        for x, y, z in [(0, 0, 0), (2, 0, 0), (0, 3, 0), (1, 2, 1), (2, 3, 1)]:
            assert flat[volume.linear_index(x, y, z)] == labels[x, y, z]


class TestLabelVolumePipeline:
    """Delegating methods wire the full neighbor pipeline."""

    def test_get_label_neighbors(self):
        labels = torch.zeros(3, 3, 3, dtype=torch.int32)
        labels[0] = 4
        labels[1] = 7
        labels[2] = 9
        volume = LabelVolume(labels=labels)

        assert volume.get_unique_labels().tolist() == [4, 7, 9]
        assert volume.get_label_neighbors().to_label_dict() == {
            4: [7],
            7: [4, 9],
            9: [7],
        }

    def test_get_packed_neighbors(self, separated_grid):
        packed = LabelVolume(labels=separated_grid).get_packed_neighbors()

        assert packed.shape == (3, 1, 1, 1)
        assert packed[:, 0, 0, 0].tolist() == [1, 0, 2]
