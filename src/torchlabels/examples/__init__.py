"""Synthetic label volumes for demos and tests.

Each module exposes a ``load()`` function returning a LabelVolume.
"""

from torchlabels.examples import stacked_slabs, voronoi_cells

__all__ = [
    "stacked_slabs",
    "voronoi_cells",
]
