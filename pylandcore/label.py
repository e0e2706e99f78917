"""Connected-component labeling of patches."""

import numpy as np
from scipy import ndimage

from . import settings
from .errors import InvalidConnectivity

__all__ = [
    "NEIGHBORHOOD_KERNEL_DICT",
    "validate_connectivity",
    "label_mask",
    "label_patches",
    "compute_patch_class_arr",
]

NEIGHBORHOOD_KERNEL_DICT = {
    "8": ndimage.generate_binary_structure(2, 2),  # Moore/queen
    "4": ndimage.generate_binary_structure(2, 1),  # Von Neumann/rook
}

LABEL_DTYPE = np.int64


def validate_connectivity(connectivity):
    """Validate a neighborhood rule.

    Parameters
    ----------
    connectivity : {'8', '4', 8, 4}, optional
        Neighborhood rule, i.e., '8' (queen's case/Moore neighborhood) or '4' (rook's
        case/Von Neumann neighborhood). If no value is provided, the default value set
        in `settings.DEFAULT_NEIGHBORHOOD_RULE` will be taken.

    Returns
    -------
    connectivity : str
        The neighborhood rule as a key of `NEIGHBORHOOD_KERNEL_DICT`.
    """
    if connectivity is None:
        connectivity = settings.DEFAULT_NEIGHBORHOOD_RULE
    elif isinstance(connectivity, (int, np.integer)) and not isinstance(
        connectivity, bool
    ):
        connectivity = str(int(connectivity))
    if not (
        isinstance(connectivity, str) and connectivity in NEIGHBORHOOD_KERNEL_DICT
    ):
        raise InvalidConnectivity(
            f"The neighborhood rule {connectivity!r} is not among ('8', '4')"
        )

    return connectivity


def label_mask(mask, connectivity):
    """Label the connected components of a boolean mask.

    Components are labeled from 1 onwards in the order in which their first cell is
    found in a row-major scan.

    Parameters
    ----------
    mask : numpy.ndarray
        Boolean array.
    connectivity : {'8', '4'}
        Neighborhood rule.

    Returns
    -------
    label_arr, num_labels : numpy.ndarray, int
    """
    return ndimage.label(
        mask,
        NEIGHBORHOOD_KERNEL_DICT[validate_connectivity(connectivity)],
        output=LABEL_DTYPE,
    )


def _relabel_row_major(label_arr, num_patches):
    # `np.unique` returns the sorted labels and the flat index of their first
    # occurrence, so sorting the labels by such index gives the row-major discovery
    # order
    labels, first_idx = np.unique(label_arr.ravel(), return_index=True)
    cond = labels != 0
    labels = labels[cond]
    first_idx = first_idx[cond]

    lut = np.zeros(num_patches + 1, dtype=LABEL_DTYPE)
    lut[labels[np.argsort(first_idx, kind="stable")]] = np.arange(
        1, num_patches + 1, dtype=LABEL_DTYPE
    )

    return lut[label_arr]


def label_patches(grid, connectivity=None):
    """Label the patches of a grid.

    Two cells share a patch label if and only if they have the same class and are
    connected by a path of cells of such class under the neighborhood rule. Missing
    cells are labeled as 0.

    Parameters
    ----------
    grid : Grid
        The categorical raster.
    connectivity : {'8', '4', 8, 4}, optional
        Neighborhood rule. If no value is provided, the default value set in
        `settings.DEFAULT_NEIGHBORHOOD_RULE` will be taken.

    Returns
    -------
    label_arr : numpy.ndarray
        An integer raster where each patch has a unique label from 1 to
        `num_patches`. Labels follow the row-major order in which the first cell of
        each patch is found, which is deterministic but does not match the patch
        numbering of FRAGSTATS.
    num_patches : int
        Number of patches.
    """
    connectivity = validate_connectivity(connectivity)

    label_arr = np.zeros(grid.shape, dtype=LABEL_DTYPE)
    num_patches = 0
    # each class is labeled on its own boolean mask, so the passes do not share any
    # mutable state besides the output array
    for class_val in grid.classes:
        class_label_arr, num_class_patches = label_mask(
            grid.arr == class_val, connectivity
        )
        class_cond = class_label_arr != 0
        label_arr[class_cond] = class_label_arr[class_cond] + num_patches
        num_patches += num_class_patches

    return _relabel_row_major(label_arr, num_patches), int(num_patches)


def compute_patch_class_arr(grid, label_arr, num_patches):
    """Get the class of each patch.

    Parameters
    ----------
    grid : Grid
        The categorical raster.
    label_arr : numpy.ndarray
        An integer raster where each patch has a unique label.
    num_patches : int
        Number of patches.

    Returns
    -------
    patch_class_arr : numpy.ndarray
        One-dimensional array where the i-th element is the class of patch `i + 1`.
    """
    flat_label_arr = label_arr.ravel()
    cond = flat_label_arr != 0
    patch_class_arr = np.empty(num_patches, dtype=grid.arr.dtype)
    patch_class_arr[flat_label_arr[cond] - 1] = grid.arr.ravel()[cond]

    return patch_class_arr
