from torchlabels.volume import LabelVolume
from torchlabels.neighbors import (
    Adjacency,
    LabelNeighbors,
    find_label_neighbors,
    pack_label_neighbors,
)
