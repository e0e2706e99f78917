"""Patch-level geometric primitives."""

import numpy as np
import pandas as pd
from scipy import ndimage, spatial

from .errors import EmptyPatch
from .label import NEIGHBORHOOD_KERNEL_DICT, compute_patch_class_arr

__all__ = [
    "compute_patch_cell_counts",
    "compute_patch_areas",
    "compute_patch_edge_counts",
    "compute_patch_perimeters",
    "compute_patch_centroids",
    "compute_patch_radius_of_gyration",
    "compute_patch_related_circumscribing_circle",
    "compute_patch_euclidean_nearest_neighbor",
    "compute_patch_table",
]

# label of the cells outside the landscape when the label arrays are padded. Patch
# labels are positive and missing cells are 0, so any negative value will do.
BOUNDARY_LABEL_VAL = -1


def _num_patches(label_arr, num_patches):
    if num_patches is None:
        return int(label_arr.max(initial=0))
    return num_patches


def compute_patch_cell_counts(label_arr, num_patches=None):
    """Compute the number of cells of each patch in a labeled patch array.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch (0 for missing cells).
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.

    Returns
    -------
    cell_counts : numpy.ndarray
        One-dimensional array where the i-th element is the cell count of patch
        `i + 1`.
    """
    num_patches = _num_patches(label_arr, num_patches)
    # we could use `ndimage.find_objects`, but since we do not need to preserve the
    # feature shapes, `np.bincount` is much faster
    cell_counts = np.bincount(label_arr.ravel(), minlength=num_patches + 1)[1:]
    empty_patches = np.flatnonzero(cell_counts == 0)
    if len(empty_patches) > 0:
        raise EmptyPatch(
            f"Patches {list(empty_patches + 1)} do not have any cell, the label array"
            " is inconsistent with the number of patches"
        )

    return cell_counts


def compute_patch_areas(label_arr, cell_area, num_patches=None):
    """Compute the area of each patch in a labeled patch array.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch.
    cell_area : numeric
        Area of a cell.
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.

    Returns
    -------
    patch_areas : numpy.ndarray
        One-dimensional array with the area of each patch.
    """
    return compute_patch_cell_counts(label_arr, num_patches) * cell_area


def compute_patch_edge_counts(label_arr, num_patches=None, *, count_boundary=False):
    """Count the cell edges on the perimeter of each patch.

    An edge is on the perimeter of a patch when it separates one of its cells from a
    cell of another label, i.e., of another class or of no data.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch.
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.
    count_boundary : bool, default False
        Whether the edges on the landscape boundary should be counted.

    Returns
    -------
    vertical_edge_counts, horizontal_edge_counts : numpy.ndarray
        One-dimensional arrays with the number of vertical edges (shared with
        horizontal neighbors) and horizontal edges (shared with vertical neighbors) of
        each patch.
    """
    num_patches = _num_patches(label_arr, num_patches)
    padded_arr = np.pad(
        label_arr, pad_width=1, mode="constant", constant_values=BOUNDARY_LABEL_VAL
    )

    edge_counts = []
    for first_arr, second_arr in [
        # horizontal neighbors (left, right)
        (padded_arr[1:-1, :-1], padded_arr[1:-1, 1:]),
        # vertical neighbors (above, below)
        (padded_arr[:-1, 1:-1], padded_arr[1:, 1:-1]),
    ]:
        edge_cond = first_arr != second_arr
        direction_counts = np.zeros(num_patches + 1, dtype=np.int64)
        for side_arr, other_arr in [(first_arr, second_arr), (second_arr, first_arr)]:
            side_cond = edge_cond & (side_arr > 0)
            if not count_boundary:
                side_cond &= other_arr != BOUNDARY_LABEL_VAL
            direction_counts += np.bincount(
                side_arr[side_cond], minlength=num_patches + 1
            )
        edge_counts.append(direction_counts[1:])

    return tuple(edge_counts)


def compute_patch_perimeters(
    label_arr, cell_width, cell_height, num_patches=None, *, count_boundary=False
):
    """Compute the perimeter of each patch in a labeled patch array.

    Vertical edges contribute `cell_height` and horizontal edges `cell_width`. Patches
    of a single cell always have a perimeter of `2 * (cell_width + cell_height)`, even
    if they lie on the landscape boundary and `count_boundary` is False.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch.
    cell_width, cell_height : numeric
        Cell resolution.
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.
    count_boundary : bool, default False
        Whether the edges on the landscape boundary should be included in the
        perimeter.

    Returns
    -------
    patch_perimeters : numpy.ndarray
        One-dimensional array with the perimeter of each patch.
    """
    num_patches = _num_patches(label_arr, num_patches)
    vertical_edge_counts, horizontal_edge_counts = compute_patch_edge_counts(
        label_arr, num_patches, count_boundary=count_boundary
    )
    patch_perimeters = (
        vertical_edge_counts * cell_height + horizontal_edge_counts * cell_width
    )

    cell_counts = compute_patch_cell_counts(label_arr, num_patches)
    return np.where(
        cell_counts == 1, 2 * (cell_width + cell_height), patch_perimeters
    ).astype(float)


def _cell_center_coords(label_arr, cell_width, cell_height):
    # row-major coordinates of the labeled cells
    rows, cols = np.nonzero(label_arr)
    return label_arr[rows, cols], (cols + 0.5) * cell_width, (rows + 0.5) * cell_height


def compute_patch_centroids(label_arr, res, num_patches=None, *, transform=None):
    """Compute the centroid of each patch in a labeled patch array.

    The centroid is the mean of the cell-center coordinates. Without a transform, the
    origin is the top-left corner of the grid and y grows downwards.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch.
    res : tuple
        The (x, y) resolution.
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.
    transform : affine.Affine, optional
        Transformation from pixel coordinates to coordinate reference system.

    Returns
    -------
    centroid_x, centroid_y : numpy.ndarray
        One-dimensional arrays with the x and y coordinates of each centroid.
    """
    num_patches = _num_patches(label_arr, num_patches)
    cell_counts = compute_patch_cell_counts(label_arr, num_patches)
    labels, xs, ys = _cell_center_coords(label_arr, 1, 1)
    # without patches, `np.bincount` returns an empty int array, so do not divide in
    # place
    mean_cols = (
        np.bincount(labels, weights=xs, minlength=num_patches + 1)[1:] / cell_counts
    )
    mean_rows = (
        np.bincount(labels, weights=ys, minlength=num_patches + 1)[1:] / cell_counts
    )

    if transform is None:
        cell_width, cell_height = res
        return mean_cols * cell_width, mean_rows * cell_height
    # the transform is affine, so mapping the mean pixel coordinates is the same as
    # averaging the mapped cell centers
    return transform * (mean_cols, mean_rows)


def compute_patch_radius_of_gyration(label_arr, res, num_patches=None):
    """Compute the radius of gyration of each patch in a labeled patch array.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch.
    res : tuple
        The (x, y) resolution.
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.

    Returns
    -------
    gyrate : numpy.ndarray
        One-dimensional array with the mean distance between the cells of each patch
        and its centroid.
    """
    num_patches = _num_patches(label_arr, num_patches)
    centroid_x, centroid_y = compute_patch_centroids(label_arr, res, num_patches)
    labels, xs, ys = _cell_center_coords(label_arr, *res)
    dists = np.hypot(xs - centroid_x[labels - 1], ys - centroid_y[labels - 1])

    return (
        np.bincount(labels, weights=dists, minlength=num_patches + 1)[1:]
        / compute_patch_cell_counts(label_arr, num_patches)
    )


def compute_patch_related_circumscribing_circle(label_arr, res, num_patches=None):
    """Compute the related circumscribing circle of each patch.

    The metric is one minus the ratio between the patch area and the area of the
    smallest circle that circumscribes the patch, whose diameter is approximated by the
    distance between the two farthest cell corners of the patch.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch.
    res : tuple
        The (x, y) resolution.
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.

    Returns
    -------
    circle : numpy.ndarray
        One-dimensional array with the related circumscribing circle of each patch.
    """
    cell_width, cell_height = res
    num_patches = _num_patches(label_arr, num_patches)
    patch_areas = compute_patch_areas(label_arr, cell_width * cell_height, num_patches)

    corner_offsets = np.array([[0, 0], [0, 1], [1, 0], [1, 1]])
    diameters = np.empty(num_patches)
    # `ndimage.find_objects` only finds the (rectangular) bounds; there might be parts
    # of other patches within such bounds, so we need to check which cells correspond
    # to the patch of interest
    for i, patch_slice in enumerate(ndimage.find_objects(label_arr), start=1):
        rows, cols = np.nonzero(label_arr[patch_slice] == i)
        rows = rows + patch_slice[0].start
        cols = cols + patch_slice[1].start
        corners = (
            np.column_stack((cols, rows))[:, np.newaxis, :] + corner_offsets
        ).reshape(-1, 2) * np.array([cell_width, cell_height])
        # the cell corners always span a two-dimensional region, so the convex hull is
        # well defined even for single-cell or linear patches
        hull_points = corners[spatial.ConvexHull(corners).vertices]
        diameters[i - 1] = spatial.distance.pdist(hull_points).max()

    return 1 - patch_areas / (np.pi * (diameters / 2) ** 2)


def compute_patch_euclidean_nearest_neighbor(
    label_arr, patch_class_arr, res, connectivity
):
    """Compute the ENN distance of each patch in a labeled patch array.

    Based on the shortest edge-to-edge (cell center) Euclidean distance to a patch of
    the same class.

    Parameters
    ----------
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch.
    patch_class_arr : numpy.ndarray
        One-dimensional array where the i-th element is the class of patch `i + 1`.
    res : tuple
        The (x, y) resolution.
    connectivity : {'8', '4'}
        Neighborhood rule used to find the edge cells of each patch.

    Returns
    -------
    enn : numpy.ndarray
        One-dimensional array with the ENN distance of each patch, NaN for the patches
        of classes with less than two patches.
    """
    cell_width, cell_height = res
    num_patches = len(patch_class_arr)
    enn = np.full(num_patches, np.nan)
    # we will first get only the edges of the patches, since the shortest edge-to-edge
    # distance between patches is certainly going to be between cells at their
    # corresponding patch edge
    label_mask = label_arr != 0
    class_arr = np.concatenate([[-1], patch_class_arr])[label_arr]
    # a cell is an edge cell when any of its neighbors has another label (cells outside
    # the landscape count as missing)
    edges_mask = np.zeros_like(label_mask)
    padded_arr = np.pad(label_arr, 1, mode="constant", constant_values=0)
    height, width = label_arr.shape
    for di, dj in zip(*np.nonzero(NEIGHBORHOOD_KERNEL_DICT[connectivity])):
        edges_mask |= padded_arr[di : di + height, dj : dj + width] != label_arr
    edges_mask &= label_mask

    nonzero_i_idx, nonzero_j_idx = np.nonzero(edges_mask)
    labels = label_arr[nonzero_i_idx, nonzero_j_idx]
    classes = class_arr[nonzero_i_idx, nonzero_j_idx]
    coords = np.column_stack((nonzero_j_idx * cell_width, nonzero_i_idx * cell_height))

    for class_val in np.unique(patch_class_arr):
        class_cond = classes == class_val
        class_labels = labels[class_cond]
        class_coords = coords[class_cond]
        unique_labels = np.unique(class_labels)
        if len(unique_labels) < 2:
            continue
        for unique_label in unique_labels:
            # we build a KDTree with all the coords of the class that are not part of
            # the current patch, and for each coord of the current patch we query the
            # closest coord of the tree
            tree = spatial.cKDTree(
                class_coords[class_labels != unique_label],
                balanced_tree=False,
                compact_nodes=False,
            )
            mindist, _ = tree.query(class_coords[class_labels == unique_label])
            enn[unique_label - 1] = np.min(mindist)

    return enn


def compute_patch_table(grid, label_arr, num_patches=None, *, count_boundary=False):
    """Compute the table of geometric primitives of each patch.

    Parameters
    ----------
    grid : Grid
        The categorical raster.
    label_arr : numpy.ndarray
        Array with unique integer labels for each patch, as returned by
        `label_patches`.
    num_patches : int, optional
        Number of patches. If not provided, the maximum label is taken.
    count_boundary : bool, default False
        Whether the edges on the landscape boundary should be included in the
        perimeter.

    Returns
    -------
    patch_df : pandas.DataFrame
        Data frame indexed by the patch label ("patch_id") with the class, cell count,
        area [m^2], perimeter [m] and centroid coordinates of each patch.
    """
    num_patches = _num_patches(label_arr, num_patches)
    cell_counts = compute_patch_cell_counts(label_arr, num_patches)
    centroid_x, centroid_y = compute_patch_centroids(
        label_arr, grid.res, num_patches, transform=grid.transform
    )

    return pd.DataFrame(
        {
            "class_val": compute_patch_class_arr(grid, label_arr, num_patches),
            "cell_count": cell_counts,
            "area": cell_counts * grid.cell_area,
            "perimeter": compute_patch_perimeters(
                label_arr,
                grid.cell_width,
                grid.cell_height,
                num_patches,
                count_boundary=count_boundary,
            ),
            "centroid_x": centroid_x,
            "centroid_y": centroid_y,
        },
        index=pd.RangeIndex(1, num_patches + 1, name="patch_id"),
    )
