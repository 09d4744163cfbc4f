"""Neighbor discovery between labels of 3D label volumes.

The pipeline runs as a sequence of passes, each consuming only what the
previous one produced:

    LabelVolume -> voxels of interest -> label set
                -> LabelNeighbors (adjacency table + label-index grid)
                -> packed (size_x, size_y, size_z, max_neighbors + 1) grid

Adjacency tables are returned as Adjacency tensorclass objects using
offset-indices encoding for efficient representation of ragged rows.
"""

from torchlabels.neighbors._adjacency import Adjacency
from torchlabels.neighbors._label_neighbors import LabelNeighbors, find_label_neighbors
from torchlabels.neighbors._label_set import get_unique_labels
from torchlabels.neighbors._packing import pack_label_neighbors
from torchlabels.neighbors._voxels_of_interest import get_voxels_of_interest

__all__ = [
    "Adjacency",
    "LabelNeighbors",
    "find_label_neighbors",
    "get_unique_labels",
    "get_voxels_of_interest",
    "pack_label_neighbors",
]
