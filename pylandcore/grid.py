"""Categorical raster grid."""

import numpy as np
import rasterio as rio

from . import settings
from .errors import InvalidConfiguration, InvalidGrid

__all__ = ["Grid", "build_grid", "build_grids"]

# dtype of the label arrays, i.e., the flat row-major buffers upon which the patches
# are delineated
GRID_DTYPE = np.int64


def _check_res(x_res, y_res):
    for name, length in [("x_res", x_res), ("y_res", y_res)]:
        if length is None:
            raise InvalidConfiguration(
                "If the landscape is an array, `x_res` and `y_res` must be provided"
            )
        try:
            length = float(length)
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration(f"`{name}` must be numeric") from e
        if not np.isfinite(length) or length <= 0:
            raise InvalidConfiguration(
                f"`{name}` must be a positive number, got {length}"
            )

    return float(x_res), float(y_res)


def _check_nodata(nodata):
    if nodata is None or np.isnan(float(nodata)):
        # a NaN nodata (as in some float GeoTIFFs) is already covered by the NaN mask,
        # so we still need an integer value to fill the missing cells
        return settings.DEFAULT_LANDSCAPE_NODATA
    if float(nodata) != np.floor(float(nodata)):
        raise InvalidConfiguration(f"`nodata` must be an integer, got {nodata}")

    return int(nodata)


def _to_label_arr(raw_arr, nodata):
    """Convert a 2-D array-like into an integer array where missing cells are `nodata`.

    Missing cells are cells equal to `nodata`, NaN cells of float arrays and masked
    cells of masked arrays.
    """
    if isinstance(raw_arr, np.ma.MaskedArray):
        mask = np.ma.getmaskarray(raw_arr).copy()
        arr = np.ma.getdata(raw_arr)
    else:
        try:
            arr = np.asarray(raw_arr)
        except ValueError as e:
            # ragged nested sequences raise a `ValueError` in recent numpy versions
            raise InvalidGrid(
                "All the rows of the landscape must have the same length"
            ) from e
        mask = None

    if arr.dtype == object:
        raise InvalidGrid("All the rows of the landscape must have the same length")
    if arr.ndim != 2:
        raise InvalidGrid(
            f"The landscape must be a two-dimensional array, got {arr.ndim} dimensions"
        )
    if arr.size == 0:
        raise InvalidGrid("The landscape is empty")

    if arr.dtype.kind == "b":
        arr = arr.astype(np.uint8)
    elif arr.dtype.kind == "f":
        nan_mask = np.isnan(arr)
        mask = nan_mask if mask is None else mask | nan_mask
    elif arr.dtype.kind not in "iu":
        raise InvalidGrid(f"Unsupported landscape dtype {arr.dtype}")

    if mask is None:
        mask = np.zeros(arr.shape, dtype=bool)
    with np.errstate(invalid="ignore"):
        mask |= arr == nodata

    values = arr[~mask]
    if np.any(values < 0):
        raise InvalidGrid("Class values must be non-negative integers")
    if arr.dtype.kind == "f" and np.any(values != np.floor(values)):
        raise InvalidGrid("Class values must be non-negative integers")

    # `np.where` returns a new (C-contiguous) array so we never alias the input
    return np.where(mask, nodata, arr).astype(GRID_DTYPE)


class Grid:
    """Immutable categorical raster with its cell resolution."""

    def __init__(self, arr, res, *, nodata=None, transform=None):
        """Initialize the grid.

        Parameters
        ----------
        arr : numpy.ndarray
            Two-dimensional array with the class of each cell. Missing cells must be
            equal to `nodata` (or be NaN/masked, in which case they are converted).
        res : tuple
            The (x, y) resolution of the grid, i.e., cell width and cell height.
        nodata : int, optional
            Value of the cells with no data. If no value is provided, the default value
            set in `settings.DEFAULT_LANDSCAPE_NODATA` will be taken.
        transform : affine.Affine, optional
            Transformation from pixel coordinates to coordinate reference system.
        """
        try:
            x_res, y_res = res
        except (TypeError, ValueError) as e:
            raise InvalidConfiguration("`res` must be a (x, y) tuple") from e
        self.cell_width, self.cell_height = _check_res(x_res, y_res)
        self.nodata = _check_nodata(nodata)

        arr = _to_label_arr(arr, self.nodata)
        arr.flags.writeable = False
        self.arr = arr
        self.transform = transform

    def __repr__(self):  # noqa: D105
        return (
            f"Grid(shape={self.shape}, res={self.res}, nodata={self.nodata}, "
            f"classes={list(self.classes)})"
        )

    @property
    def res(self):
        """(x, y) resolution of the grid."""
        return self.cell_width, self.cell_height

    @property
    def cell_area(self):
        """Area of a cell."""
        return self.cell_width * self.cell_height

    @property
    def shape(self):
        """(height, width) of the grid, in cells."""
        return self.arr.shape

    @property
    def height(self):  # noqa: D102
        return self.arr.shape[0]

    @property
    def width(self):  # noqa: D102
        return self.arr.shape[1]

    @property
    def data_mask(self):
        """Boolean array that is True where the cell has a class value."""
        try:
            return self._data_mask
        except AttributeError:
            data_mask = self.arr != self.nodata
            data_mask.flags.writeable = False
            self._data_mask = data_mask
            return self._data_mask

    @property
    def classes(self):
        """Sorted class values present in the grid."""
        try:
            return self._classes
        except AttributeError:
            self._classes = np.unique(self.arr[self.data_mask])
            return self._classes

    @property
    def num_cells(self):
        """Number of cells with a class value."""
        return int(np.count_nonzero(self.data_mask))


def build_grid(
    raw_raster, x_res=None, y_res=None, *, nodata=None, transform=None, **kwargs
):
    """Build a grid from an array-like or a raster dataset.

    Parameters
    ----------
    raw_raster : numpy.ndarray, list-like, Grid or str, file-like or pathlib.Path
        A two-dimensional array (or nested list of rows) with the class of each cell,
        or a filename or URL, a file-like object opened in binary ('rb') mode, or a
        Path object, in which case `raw_raster` is passed to `rasterio.open` and its
        first band is read.
    x_res, y_res : numeric, optional
        Cell width and height. Required if `raw_raster` is an array-like, otherwise
        taken from the raster's metadata unless provided.
    nodata : int, optional
        Value of the cells with no data. If no value is provided, it is taken from the
        raster's metadata or else from `settings.DEFAULT_LANDSCAPE_NODATA`.
    transform : affine.Affine, optional
        Transformation from pixel coordinates to coordinate reference system. Ignored
        if `raw_raster` is a raster dataset.
    **kwargs : optional
        Keyword arguments to be passed to `rasterio.open`. Ignored if `raw_raster` is
        an array-like.

    Returns
    -------
    grid : Grid
    """
    if isinstance(raw_raster, Grid):
        return raw_raster

    if isinstance(raw_raster, (np.ndarray, list, tuple)):
        arr = raw_raster
    else:
        with rio.open(raw_raster, nodata=nodata, **kwargs) as src:
            arr = src.read(1)
            if x_res is None:
                x_res = src.res[0]
            if y_res is None:
                y_res = src.res[1]
            if nodata is None:
                nodata = src.nodata
            transform = src.transform

    return Grid(arr, (x_res, y_res), nodata=nodata, transform=transform)


def build_grids(
    raw_raster, x_res=None, y_res=None, *, nodata=None, transform=None, **kwargs
):
    """Build one grid per layer of a multi-layer array or raster dataset.

    Parameters
    ----------
    raw_raster : numpy.ndarray or str, file-like or pathlib.Path
        A three-dimensional array of shape (layers, rows, columns) or anything that
        `rasterio.open` accepts, in which case each band becomes a grid.
    x_res, y_res, nodata, transform, **kwargs
        See `build_grid`.

    Returns
    -------
    grids : list of Grid
    """
    if isinstance(raw_raster, (np.ndarray, list, tuple)):
        arr = np.asarray(raw_raster)
        if arr.ndim == 2:
            arr = arr[np.newaxis]
        if arr.ndim != 3:
            raise InvalidGrid(
                "A layer stack must be a three-dimensional array, got "
                f"{arr.ndim} dimensions"
            )
        layers = list(arr)
    else:
        with rio.open(raw_raster, nodata=nodata, **kwargs) as src:
            layers = list(src.read())
            if x_res is None:
                x_res = src.res[0]
            if y_res is None:
                y_res = src.res[1]
            if nodata is None:
                nodata = src.nodata
            transform = src.transform

    return [
        Grid(layer_arr, (x_res, y_res), nodata=nodata, transform=transform)
        for layer_arr in layers
    ]
