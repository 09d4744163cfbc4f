"""Conversion between pyvista image grids and LabelVolume.

pyvista.ImageData stores point arrays with x varying fastest, which is the
same linear-index order LabelVolume uses for its flat buffer.
"""

import logging

import numpy as np
import pyvista as pv
import torch

from torchlabels.volume import LabelVolume

logger = logging.getLogger(__name__)


def _as_int32_labels(values: np.ndarray) -> np.ndarray:
    """Cast any numeric array to int32 labels.

    Floats are truncated toward zero; NaN and infinities become 0 (background).
    """
    if np.issubdtype(values.dtype, np.floating):
        values = np.nan_to_num(values, nan=0.0, posinf=0.0, neginf=0.0)
        values = np.trunc(values)
    return values.astype(np.int32)


def from_pyvista(
    image: pv.ImageData,
    scalars: str | None = None,
    device: torch.device | str = "cpu",
) -> LabelVolume:
    """Convert a pyvista.ImageData label image to a LabelVolume.

    Point arrays map onto a grid of ``image.dimensions``; cell arrays map onto
    a grid one smaller along each axis with more than one point.

    Args:
        image: Input image grid.
        scalars: Name of the point or cell array holding the labels. Defaults
            to the active scalars.
        device: Device of the returned volume.

    Returns:
        LabelVolume with int32 labels and the image's spacing and origin.

    Raises:
        TypeError: If ``image`` is not a pyvista.ImageData.
        KeyError: If the array is not found.
        ValueError: If the array has more than one component.
    """
    if not isinstance(image, pv.ImageData):
        raise TypeError(
            f"`image` must be a pyvista.ImageData, but got {type(image)=}."
        )

    if scalars is None:
        scalars = image.active_scalars_name
        if scalars is None:
            raise KeyError("`image` has no active scalars; pass `scalars` explicitly.")

    ### Locate the array and the grid it lives on
    if scalars in image.point_data:
        values = np.asarray(image.point_data[scalars])
        grid_shape = tuple(image.dimensions)
    elif scalars in image.cell_data:
        values = np.asarray(image.cell_data[scalars])
        grid_shape = tuple(max(n - 1, 1) for n in image.dimensions)
    else:
        raise KeyError(
            f"No point or cell array named {scalars!r}. "
            f"Available: {list(image.point_data.keys()) + list(image.cell_data.keys())}"
        )

    if values.ndim != 1:
        raise ValueError(
            f"Label array must have a single component, but got {values.shape=}."
        )

    logger.info(
        "Image details: %d X | %d Y | %d Z, voxel size %s, datatype %s",
        *grid_shape,
        " x ".join(f"{s:g}" for s in image.spacing),
        values.dtype,
    )

    ### Flat buffer (x fastest) -> [x, y, z] grid
    labels = _as_int32_labels(values).reshape(grid_shape, order="F")

    return LabelVolume(
        labels=torch.from_numpy(np.ascontiguousarray(labels)).to(device),
        spacing=torch.tensor(image.spacing, dtype=torch.float64, device=device),
        origin=torch.tensor(image.origin, dtype=torch.float64, device=device),
    )


def to_pyvista(
    volume: LabelVolume,
    channels: torch.Tensor | None = None,
    name: str = "neighbors",
) -> pv.ImageData:
    """Convert a LabelVolume (and optionally packed neighbor channels) to pyvista.

    Args:
        volume: Label volume. Its labels become point array ``"labels"``.
        channels: Optional packed grid from :func:`pack_label_neighbors`, shape
            (size_x, size_y, size_z, n_channels). Stored as a point array with
            one component per channel.
        name: Name of the point array holding ``channels``.

    Returns:
        pyvista.ImageData with the volume's dimensions, spacing and origin.

    Raises:
        ValueError: If ``channels`` does not match the volume's grid shape.
    """
    image = pv.ImageData(
        dimensions=volume.grid_shape,
        spacing=tuple(volume.spacing.tolist()),
        origin=tuple(volume.origin.tolist()),
    )
    image.point_data["labels"] = volume.flat_labels.cpu().numpy()

    if channels is not None:
        if channels.ndim != 4 or tuple(channels.shape[:3]) != volume.grid_shape:
            raise ValueError(
                f"`channels` must have shape (size_x, size_y, size_z, n_channels) "
                f"matching {volume.grid_shape=}, but got {channels.shape=}."
            )
        n_channels = channels.shape[-1]
        # (x, y, z, c) -> (z, y, x, c) so rows are in x-fastest order
        flat_channels = channels.permute(2, 1, 0, 3).reshape(-1, n_channels)
        image.point_data[name] = flat_channels.cpu().numpy()

    return image
