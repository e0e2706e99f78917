"""Cell adjacency (co-occurrence) matrices."""

import numpy as np
import pandas as pd
import transonic

from . import settings
from .label import validate_connectivity

transonic.set_backend_for_this_module(settings.TRANSONIC_BACKEND)

__all__ = [
    "compute_adjacency_arr",
    "compute_adjacency_df",
    "build_adjacency_matrix",
]

# type definitions
ADJ_ARR_DTYPE = np.uint32
# define type annotations outside signature to avoid ForwardAnnotationSyntaxError
# see https://github.com/PyCQA/pyflakes/issues/542
AdjacencyArray = transonic.Array[ADJ_ARR_DTYPE, "2d"]

# directions of the forward neighbors, in the order of the first axis of the arrays
# returned by `compute_adjacency_arr`
DIRECTIONS = ["horizontal", "vertical", "diagonal", "antidiagonal"]


@transonic.boost
def compute_adjacency_arr(
    padded_arr: AdjacencyArray, num_classes: "int", diagonal: "bool"
):
    # `padded_arr` holds the class codes from 0 to `num_classes - 1`, `num_classes` for
    # the cells with no data and `num_classes + 1` for the padding cells, i.e., outside
    # the landscape. Only the forward neighbors of each cell (right, below and, when
    # `diagonal` is true, below-right and below-left) are paired, so each pair of
    # adjacent cells is counted once, from the first cell in row-major order to the
    # second. Pairs of two padding cells are skipped.
    num_codes = num_classes + 2
    boundary_code = num_classes + 1
    # (first cells, second cells) of each direction
    pair_arrs = [
        (padded_arr[:, :-1], padded_arr[:, 1:]),
        (padded_arr[:-1, :], padded_arr[1:, :]),
    ]
    if diagonal:
        pair_arrs.append((padded_arr[:-1, :-1], padded_arr[1:, 1:]))
        pair_arrs.append((padded_arr[:-1, 1:], padded_arr[1:, :-1]))

    adjacency_arr = np.zeros(
        (len(pair_arrs), num_codes, num_codes), dtype=ADJ_ARR_DTYPE
    )
    for k in range(len(pair_arrs)):
        first_codes = pair_arrs[k][0].ravel().astype(np.int64)
        second_codes = pair_arrs[k][1].ravel().astype(np.int64)
        cond = (first_codes != boundary_code) | (second_codes != boundary_code)
        # count the pairs at once by encoding each of them as a single integer
        adjacency_arr[k] = np.bincount(
            first_codes[cond] * num_codes + second_codes[cond],
            minlength=num_codes * num_codes,
        ).reshape(num_codes, num_codes)

    return adjacency_arr


def compute_adjacency_df(grid, neighborhood_rule="4"):
    """Compute the directional adjacency data frame of a grid.

    Parameters
    ----------
    grid : Grid
        The categorical raster.
    neighborhood_rule : {'4', '8', 4, 8}, default '4'
        Whether only horizontal and vertical neighbors ('4') or also diagonal neighbors
        ('8') are adjacent.

    Returns
    -------
    adjacency_df : pandas.DataFrame
        Data frame multi-indexed by the direction and the class of the first cell of
        each pair (in row-major order), with the class of the second cell as columns.
        Besides the classes, rows and columns include the nodata value and the
        `settings.BOUNDARY_LABEL` pseudo-class for the cells outside the landscape.
    """
    neighborhood_rule = validate_connectivity(neighborhood_rule)
    classes = grid.classes
    num_classes = len(classes)
    # first create a reclassified array with the landscape's shape where each class
    # value will be an int from 0 to `num_classes - 1` and the nodata value will be an
    # int of value `num_classes`
    reclassified_arr = np.full(grid.shape, num_classes, dtype=ADJ_ARR_DTYPE)
    data_mask = grid.data_mask
    reclassified_arr[data_mask] = np.searchsorted(classes, grid.arr[data_mask])
    # pad with the boundary code (i.e., `num_classes + 1`). Set dtype to `np.uint32` to
    # match the signature of `compute_adjacency_arr`
    padded_arr = np.pad(
        reclassified_arr,
        pad_width=1,
        mode="constant",
        constant_values=num_classes + 1,
    ).astype(ADJ_ARR_DTYPE)

    adjacency_arr = compute_adjacency_arr(
        padded_arr, num_classes, neighborhood_rule == "8"
    )

    # put the adjacency array in the form of a pandas DataFrame
    adjacency_cols = classes.tolist() + [grid.nodata, settings.BOUNDARY_LABEL]
    directions = DIRECTIONS[: len(adjacency_arr)]
    return pd.DataFrame(
        adjacency_arr.reshape(-1, len(adjacency_cols)),
        index=pd.MultiIndex.from_product(
            [directions, adjacency_cols], names=["direction", "class_val"]
        ),
        columns=pd.Index(adjacency_cols, dtype=object),
    )


def build_adjacency_matrix(
    grid, neighbourhood="4", *, ordered=False, count_boundary=False
):
    """Build the class adjacency matrix of a grid.

    Parameters
    ----------
    grid : Grid
        The categorical raster.
    neighbourhood : {'4', '8', 4, 8}, default '4'
        Whether only horizontal and vertical neighbors ('4') or also diagonal neighbors
        ('8') are adjacent.
    ordered : bool, default False
        If True, the pair (a, b) is counted separately from (b, a), where `a` is the
        class of the first cell of the pair in row-major order. If False, both are
        summed together, so that the matrix is symmetric and adjacencies between cells
        of the same class are counted twice (as in FRAGSTATS' double-count method).
    count_boundary : bool, default False
        Whether the adjacencies with the cells outside the landscape should be included
        (as the `settings.BOUNDARY_LABEL` row and column).

    Returns
    -------
    adjacency_matrix : pandas.DataFrame
        Square data frame with the adjacency counts between classes, including the
        nodata value.
    """
    adjacency_matrix = (
        compute_adjacency_df(grid, neighbourhood)
        .groupby(level="class_val", sort=False)
        .sum()
    )
    if not count_boundary:
        adjacency_matrix = adjacency_matrix.drop(
            index=settings.BOUNDARY_LABEL, columns=settings.BOUNDARY_LABEL
        )
    if not ordered:
        adjacency_matrix = adjacency_matrix + adjacency_matrix.T

    return adjacency_matrix
