"""Core-area analysis."""

import numpy as np
import pandas as pd
from scipy import ndimage

from . import settings
from .errors import InvalidConfiguration, InvalidGrid
from .label import (
    NEIGHBORHOOD_KERNEL_DICT,
    compute_patch_class_arr,
    label_mask,
    validate_connectivity,
)

__all__ = ["validate_edge_depth", "compute_core_mask", "compute_core"]


def validate_edge_depth(edge_depth):
    """Validate the number of cells considered as edge.

    Parameters
    ----------
    edge_depth : int, optional
        Number of cells considered as edge. If no value is provided, the default value
        set in `settings.DEFAULT_EDGE_DEPTH` will be taken.

    Returns
    -------
    edge_depth : int
    """
    if edge_depth is None:
        edge_depth = settings.DEFAULT_EDGE_DEPTH
    # ACHTUNG: `ndimage.binary_erosion` erodes until the result does not change when
    # `iterations < 1`, so non-positive depths must never reach it
    if (
        isinstance(edge_depth, bool)
        or not isinstance(edge_depth, (int, np.integer))
        or edge_depth < 1
    ):
        raise InvalidConfiguration(
            f"`edge_depth` must be a positive integer, got {edge_depth!r}"
        )

    return int(edge_depth)


def compute_core_mask(grid, *, consider_boundary=None, edge_depth=None):
    """Compute the core cell mask of a grid.

    A cell is core if every cell within a (rook) distance of `edge_depth` cells has its
    same class. Cells with no data never match.

    Parameters
    ----------
    grid : Grid
        The categorical raster.
    consider_boundary : bool, optional
        Whether cells that only neighbour the landscape boundary should be considered as
        core. If no value is provided, the default value set in
        `settings.DEFAULT_CONSIDER_BOUNDARY` will be taken.
    edge_depth : int, optional
        Number of cells considered as edge. If no value is provided, the default value
        set in `settings.DEFAULT_EDGE_DEPTH` will be taken.

    Returns
    -------
    core_mask : numpy.ndarray
        Boolean array of the grid's shape that is True for core cells.
    """
    if consider_boundary is None:
        consider_boundary = settings.DEFAULT_CONSIDER_BOUNDARY
    edge_depth = validate_edge_depth(edge_depth)

    core_mask = np.zeros(grid.shape, dtype=bool)
    for class_val in grid.classes:
        # ACHTUNG: we use the 4-neighborhood kernel to compute the core areas regardless
        # of the neighborhood rule (this is how it is done in FRAGSTATS). Iterating the
        # erosion `edge_depth` times discards the cells within such Manhattan distance
        # of a cell of another class. The `border_value` sets whether the cells outside
        # the landscape match the class.
        core_mask |= ndimage.binary_erosion(
            grid.arr == class_val,
            structure=NEIGHBORHOOD_KERNEL_DICT["4"],
            iterations=edge_depth,
            border_value=int(bool(consider_boundary)),
        )

    return core_mask


def compute_core(
    grid,
    label_arr,
    patch_df=None,
    *,
    connectivity=None,
    consider_boundary=None,
    edge_depth=None,
):
    """Compute the core cells and the disjunct core areas of each patch.

    Parameters
    ----------
    grid : Grid
        The categorical raster.
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch, as returned by
        `label_patches`.
    patch_df : pandas.DataFrame, optional
        Patch table as returned by `compute_patch_table`. If not provided, the classes
        of the patches are taken from `label_arr`.
    connectivity : {'4', '8', 4, 8}, optional
        Neighborhood rule used to group the core cells into disjunct core areas. If no
        value is provided, the default value set in
        `settings.DEFAULT_CORE_NEIGHBORHOOD_RULE` will be taken.
    consider_boundary : bool, optional
        Whether cells that only neighbour the landscape boundary should be considered as
        core. If no value is provided, the default value set in
        `settings.DEFAULT_CONSIDER_BOUNDARY` will be taken.
    edge_depth : int, optional
        Number of cells considered as edge. If no value is provided, the default value
        set in `settings.DEFAULT_EDGE_DEPTH` will be taken.

    Returns
    -------
    core_df : pandas.DataFrame
        Data frame indexed by the patch label ("patch_id"), with the class, number of
        core cells, core area [m^2] and number of disjunct core areas of each patch.
    disjunct_core_df : pandas.DataFrame
        Data frame indexed by the disjunct core area label ("core_id"), in row-major
        discovery order, with the patch label, class, cell count and area [m^2] of
        each disjunct core area.
    """
    if connectivity is None:
        connectivity = settings.DEFAULT_CORE_NEIGHBORHOOD_RULE
    connectivity = validate_connectivity(connectivity)
    if label_arr.shape != grid.shape:
        raise InvalidGrid(
            f"The label array shape {label_arr.shape} does not match the grid shape "
            f"{grid.shape}"
        )
    num_patches = int(label_arr.max(initial=0))
    if patch_df is None:
        patch_class_arr = compute_patch_class_arr(grid, label_arr, num_patches)
    else:
        if len(patch_df) != num_patches:
            raise InvalidConfiguration(
                f"The patch table has {len(patch_df)} patches but the label array has "
                f"{num_patches}"
            )
        patch_class_arr = patch_df["class_val"].values

    core_mask = compute_core_mask(
        grid, consider_boundary=consider_boundary, edge_depth=edge_depth
    )
    core_label_arr, num_core_areas = label_mask(core_mask, connectivity)

    # a core cell only has neighbors of its class (and thus of its patch) within the
    # edge depth, so all the cells of a disjunct core area belong to the same patch
    core_patch_ids = np.zeros(num_core_areas, dtype=label_arr.dtype)
    core_patch_ids[core_label_arr[core_mask] - 1] = label_arr[core_mask]
    core_cell_counts = np.bincount(
        core_label_arr.ravel(), minlength=num_core_areas + 1
    )[1:]

    core_cells = np.bincount(label_arr[core_mask], minlength=num_patches + 1)[1:]
    core_df = pd.DataFrame(
        {
            "class_val": patch_class_arr,
            "core_cells": core_cells,
            "core_area": core_cells * grid.cell_area,
            "number_of_core_areas": np.bincount(
                core_patch_ids, minlength=num_patches + 1
            )[1:],
        },
        index=pd.RangeIndex(1, num_patches + 1, name="patch_id"),
    )
    disjunct_core_df = pd.DataFrame(
        {
            "patch_id": core_patch_ids,
            "class_val": patch_class_arr[core_patch_ids - 1],
            "cell_count": core_cell_counts,
            "core_area": core_cell_counts * grid.cell_area,
        },
        index=pd.RangeIndex(1, num_core_areas + 1, name="core_id"),
    )

    return core_df, disjunct_core_df
