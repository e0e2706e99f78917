"""Landscape analysis."""

import functools
import warnings

import numpy as np
import pandas as pd
from scipy import stats

from . import settings
from .adjacency import build_adjacency_matrix, compute_adjacency_df
from .core import compute_core, validate_edge_depth
from .grid import Grid, build_grid
from .label import label_patches, validate_connectivity
from .patch import (
    compute_patch_euclidean_nearest_neighbor,
    compute_patch_perimeters,
    compute_patch_radius_of_gyration,
    compute_patch_related_circumscribing_circle,
    compute_patch_table,
)

__all__ = ["Landscape"]

# sometimes pixel resolutions in GeoTIFF files are floats therefore comparisons (e.g.,
# `cell_width == cell_height`) should allow for some tolerance, i.e., using `np.isclose`
CELLLENGTH_RTOL = 0.001


def compute_entropy(counts, base=None):
    """Compute the entropy of the proportions of a set of counts.

    Parameters
    ----------
    counts : list-like
        Count of each category. Zero counts do not contribute.
    base : numeric, optional
        Base of the logarithm, e.g., 2 for bits. If not provided, the entropy is in
        nats.

    Returns
    -------
    entropy : numeric
    """
    counts = np.asarray(counts, dtype=float)
    pcounts = (counts / counts.sum())[counts > 0]
    entropy = -np.sum(pcounts * np.log(pcounts))
    if base:
        entropy /= np.log(base)
    return entropy


def compute_shape_index(patch_area_cells, patch_perimeter_cells):
    """Compute the shape index from areas and perimeters in cell units.

    The perimeter is divided by the minimum perimeter of a raster patch of the same
    number of cells.
    """
    n = np.floor(np.sqrt(patch_area_cells))
    m = patch_area_cells - n**2
    min_p = np.ones(len(patch_area_cells))
    min_p = np.where(np.isclose(m, 0), 4 * n, min_p)
    min_p = np.where(
        (n**2 < patch_area_cells) & (patch_area_cells <= n * (n + 1)),
        4 * n + 2,
        min_p,
    )
    min_p = np.where(patch_area_cells > n * (n + 1), 4 * n + 4, min_p)

    return patch_perimeter_cells / min_p


class Landscape:
    """Raster landscape upon which landscape metrics are computed."""

    def __init__(
        self,
        landscape,
        *,
        res=None,
        nodata=None,
        transform=None,
        neighborhood_rule=None,
        **kwargs,
    ):
        """Initialize the landscape instance.

        Parameters
        ----------
        landscape : Grid, numpy.ndarray or str, file-like object or pathlib.Path object
            The categorical raster. Anything other than a `Grid` is passed to
            `build_grid`, i.e., a two-dimensional array or a raster dataset to be read
            with `rasterio`.
        res : tuple, optional
            Cell (width, height). Required for arrays.
        nodata : int, optional
            Value of the cells with no data. Defaults to the nodata value of the raster
            dataset, or to `settings.DEFAULT_LANDSCAPE_NODATA`.
        transform : affine.Affine, optional
            Pixel to map coordinates transformation. Read from the raster dataset
            when there is one.
        neighborhood_rule : {'8', '4'}, optional
            Connectivity used to label the patches. Defaults to
            `settings.DEFAULT_NEIGHBORHOOD_RULE`.
        **kwargs : optional
            Keyword arguments passed to `rasterio.open`.
        """
        if isinstance(landscape, Grid):
            grid = landscape
        else:
            if res is None:
                res = (None, None)
            grid = build_grid(
                landscape, *res, nodata=nodata, transform=transform, **kwargs
            )

        self.grid = grid
        self.landscape_arr = grid.arr
        self.cell_width, self.cell_height = grid.res
        self.cell_area = grid.cell_area
        self.nodata = grid.nodata
        self.transform = grid.transform
        self.classes = grid.classes

        # set the neighbor adjacency rule
        self.neighborhood_rule = validate_connectivity(neighborhood_rule)

        # caches of the tables that depend on metric arguments
        self._cached_patch_perimeter_sers = {}
        self._cached_core_dfs = {}

    ###########################################################################
    # common utilities

    # constants

    PATCH_METRICS = [
        "area",
        "perimeter",
        "perimeter_area_ratio",
        "shape_index",
        "fractal_dimension",
        "radius_of_gyration",
        "related_circumscribing_circle",
        "core_area",
        "number_of_core_areas",
        "core_area_index",
        "euclidean_nearest_neighbor",
    ]

    # iterate all patch metrics except "number_of_core_areas", and add
    # "disjunct_core_area"
    _PATCH_METRICS = PATCH_METRICS.copy()
    _PATCH_METRICS.remove("number_of_core_areas")
    _PATCH_METRICS.append("disjunct_core_area")
    DISTR_METRICS = [
        f"{patch_metric}_{suffix}"
        for patch_metric in _PATCH_METRICS
        for suffix in settings.DISTR_SUFFIXES
    ]

    CLASS_METRICS = [
        "total_area",
        "proportion_of_landscape",
        "number_of_patches",
        "patch_density",
        "largest_patch_index",
        "total_edge",
        "edge_density",
        "total_core_area",
        "core_area_proportion_of_landscape",
        "number_of_disjunct_core_areas",
        "disjunct_core_area_density",
        "landscape_shape_index",
        "effective_mesh_size",
        "splitting_index",
    ] + DISTR_METRICS

    ENTROPY_METRICS = [
        "entropy",
        "shannon_diversity_index",
        "joint_entropy",
        "conditional_entropy",
        "mutual_information",
        "relative_mutual_information",
        "contagion",
    ]
    LANDSCAPE_METRICS = (
        [
            "total_area",
            "number_of_patches",
            "patch_density",
            "largest_patch_index",
            "total_edge",
            "edge_density",
            "total_core_area",
            "number_of_disjunct_core_areas",
            "disjunct_core_area_density",
            "landscape_shape_index",
            "effective_mesh_size",
            "splitting_index",
        ]
        + ENTROPY_METRICS
        + DISTR_METRICS
    )

    # compute methods

    def class_label(self, class_val):
        """Generate an array with labeled patches of the class.

        Parameters
        ----------
        class_val : int
            Class for which the patches should be labeled.

        Returns
        -------
        label_arr : numpy.ndarray
            An integer raster where each patch of the class keeps its landscape-wide
            label and every other cell is 0.
        num_patches : int
            Number of patches of the class.
        """
        label_arr = self._label_arr
        class_patch_ids = self._patch_class_ser.index[
            self._patch_class_ser == class_val
        ]
        return (
            np.where(np.isin(label_arr, class_patch_ids), label_arr, 0),
            len(class_patch_ids),
        )

    # properties

    @property
    def _label_arr(self):
        try:
            return self._cached_label_arr
        except AttributeError:
            self._cached_label_arr, self._cached_num_patches = label_patches(
                self.grid, self.neighborhood_rule
            )
            return self._cached_label_arr

    @property
    def _num_patches(self):
        try:
            return self._cached_num_patches
        except AttributeError:
            _ = self._label_arr
            return self._cached_num_patches

    @property
    def _patch_df(self):
        try:
            return self._cached_patch_df
        except AttributeError:
            self._cached_patch_df = compute_patch_table(
                self.grid, self._label_arr, self._num_patches, count_boundary=True
            )
            return self._cached_patch_df

    @property
    def _num_patches_dict(self):
        try:
            return self._cached_num_patches_dict
        except AttributeError:
            value_counts = self._patch_class_ser.value_counts()
            self._cached_num_patches_dict = {
                class_val: int(value_counts.get(class_val, 0))
                for class_val in self.classes
            }
            return self._cached_num_patches_dict

    @property
    def landscape_area(self):
        """Landscape area."""
        try:
            return self._landscape_area
        except AttributeError:
            self._landscape_area = self.grid.num_cells * self.cell_area
            return self._landscape_area

    @property
    def _patch_class_ser(self):
        return self._patch_df["class_val"]

    @property
    def _patch_area_ser(self):
        return self._patch_df["area"]

    @property
    def _patch_euclidean_nearest_neighbor_ser(self):
        try:
            return self._cached_patch_euclidean_nearest_neighbor_ser
        except AttributeError:
            self._cached_patch_euclidean_nearest_neighbor_ser = pd.Series(
                compute_patch_euclidean_nearest_neighbor(
                    self._label_arr,
                    self._patch_class_ser.values,
                    self.grid.res,
                    self.neighborhood_rule,
                ),
                index=self._patch_df.index,
                name="euclidean_nearest_neighbor",
            )
            return self._cached_patch_euclidean_nearest_neighbor_ser

    @property
    def _adjacency_df(self):
        try:
            return self._cached_adjacency_df
        except AttributeError:
            # ACHTUNG: edges are shared by horizontal and vertical neighbors only, so
            # the adjacency data frame is always computed with the 4-neighborhood
            self._cached_adjacency_df = compute_adjacency_df(self.grid, "4")
            return self._cached_adjacency_df

    def compute_total_adjacency_df(self):
        """Compute the total adjacency (vertical and horizontal) data frame.

        Returns
        -------
        adjacency_df: pandas.DataFrame
            Adjacency data frame with total adjacencies (vertical and horizontal),
            counting each pair of adjacent cells in both directions.
        """
        classes = self.classes.tolist()
        return build_adjacency_matrix(self.grid, "4", ordered=False).loc[
            classes, classes
        ]

    def _get_core_dfs(self, consider_boundary, edge_depth):
        if consider_boundary is None:
            consider_boundary = settings.DEFAULT_CONSIDER_BOUNDARY
        edge_depth = validate_edge_depth(edge_depth)
        key = (bool(consider_boundary), edge_depth)
        try:
            return self._cached_core_dfs[key]
        except KeyError:
            self._cached_core_dfs[key] = compute_core(
                self.grid,
                self._label_arr,
                self._patch_df,
                consider_boundary=consider_boundary,
                edge_depth=edge_depth,
            )
            return self._cached_core_dfs[key]

    # small utilities to get patch series for a particular class only

    def _get_patch_area_ser(self, *, class_val=None):
        if class_val is None:
            return self._patch_area_ser
        else:
            return self._patch_area_ser[self._patch_class_ser == class_val]

    def _get_patch_perimeter_ser(self, *, class_val=None, count_boundary=True):
        try:
            patch_perimeter_ser = self._cached_patch_perimeter_sers[count_boundary]
        except KeyError:
            patch_perimeter_ser = pd.Series(
                compute_patch_perimeters(
                    self._label_arr,
                    self.cell_width,
                    self.cell_height,
                    self._num_patches,
                    count_boundary=count_boundary,
                ),
                index=self._patch_df.index,
                name="perimeter",
            )
            self._cached_patch_perimeter_sers[count_boundary] = patch_perimeter_ser

        if class_val is None:
            return patch_perimeter_ser
        else:
            return patch_perimeter_ser[self._patch_class_ser == class_val]

    def _get_patch_metric_ser(self, metric_ser, *, class_val=None):
        if class_val is None:
            return metric_ser
        else:
            return metric_ser[self._patch_class_ser == class_val]

    def _patch_metric_result(self, metric_ser, name, class_val):
        metric_ser = metric_ser.rename(name)
        if class_val is None:
            return pd.DataFrame({"class_val": self._patch_class_ser, name: metric_ser})
        else:
            return metric_ser

    # metric distribution statistics

    def _metric_reduce(
        self,
        class_val,
        patch_metric_method,
        patch_metric_method_kwargs,
        reduce_method,
    ):
        if patch_metric_method_kwargs is None:
            patch_metrics = patch_metric_method(class_val=class_val)
        else:
            patch_metrics = patch_metric_method(
                class_val=class_val, **patch_metric_method_kwargs
            )
        if class_val is None:
            # ACHTUNG: dropping columns from a `pd.DataFrame` until leaving it with only
            # one column will still return a `pd.DataFrame`, so we must convert to
            # `pd.Series` manually (e.g., with `iloc`)
            patch_metrics = patch_metrics.drop("class_val", axis=1).iloc[:, 0]

        return reduce_method(patch_metrics)

    def _metric_mn(
        self, class_val, patch_metric_method, *, patch_metric_method_kwargs=None
    ):
        return self._metric_reduce(
            class_val, patch_metric_method, patch_metric_method_kwargs, np.mean
        )

    def _metric_am(
        self, class_val, patch_metric_method, *, patch_metric_method_kwargs=None
    ):
        if patch_metric_method == self.disjunct_core_area:
            # this is a bit different because we need to weight the average using the
            # disjunct core area rather than the patch area
            def reduce_method(metric_ser):
                try:
                    return np.average(metric_ser, weights=metric_ser)
                except ZeroDivisionError:
                    return np.nan

        else:
            # `area` can be `pd.Series` or `pd.DataFrame`
            area = self.area(class_val=class_val)
            if class_val is None:
                area = area["area"]
            reduce_method = functools.partial(np.average, weights=area)

        return self._metric_reduce(
            class_val,
            patch_metric_method,
            patch_metric_method_kwargs,
            reduce_method,
        )

    def _metric_md(
        self, class_val, patch_metric_method, *, patch_metric_method_kwargs=None
    ):
        return self._metric_reduce(
            class_val, patch_metric_method, patch_metric_method_kwargs, np.median
        )

    def _metric_ra(
        self, class_val, patch_metric_method, *, patch_metric_method_kwargs=None
    ):
        return self._metric_reduce(
            class_val,
            patch_metric_method,
            patch_metric_method_kwargs,
            lambda metric_ser: metric_ser.max() - metric_ser.min(),
        )

    def _metric_sd(
        self, class_val, patch_metric_method, *, patch_metric_method_kwargs=None
    ):
        return self._metric_reduce(
            class_val, patch_metric_method, patch_metric_method_kwargs, np.std
        )

    def _metric_cv(
        self,
        class_val,
        patch_metric_method,
        *,
        patch_metric_method_kwargs=None,
        percent=True,
    ):
        metric_cv = self._metric_reduce(
            class_val,
            patch_metric_method,
            patch_metric_method_kwargs,
            stats.variation,
        )
        if percent:
            metric_cv *= 100

        return metric_cv

    ###########################################################################
    # patch-level metrics

    # area and edge metrics

    def area(self, *, class_val=None, hectares=True):
        r"""Area of each patch of the landscape.

        .. math::
           AREA = a_{i,j} \quad [hec] \; or \; [m^2]

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.

        Returns
        -------
        AREA : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            AREA > 0, without limit.
        """
        area_ser = self._get_patch_area_ser(class_val=class_val)

        if hectares:
            # do not use "/=" so that we never modify the cached patch table
            area_ser = area_ser / settings.HECTARE_M2

        return self._patch_metric_result(area_ser, "area", class_val)

    def perimeter(self, *, class_val=None, count_boundary=True):
        r"""Perimeter of each patch of the landscape.

        .. math::
           PERIM = p_{i,j} \quad [m]

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.
        count_boundary : bool, default True
            Whether the edges on the landscape boundary should be included in the
            perimeter (as in FRAGSTATS).

        Returns
        -------
        PERIM : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            PERIM > 0, without limit.
        """
        perimeter_ser = self._get_patch_perimeter_ser(
            class_val=class_val, count_boundary=count_boundary
        )

        return self._patch_metric_result(perimeter_ser, "perimeter", class_val)

    # shape

    def perimeter_area_ratio(self, *, class_val=None, hectares=True):
        r"""Perimeter-area ratio of each patch of the landscape.

        .. math::
           PARA = \frac{p_{i,j}}{a_{i,j}} \quad [m/hec] \; or \; [m/m^2]

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.

        Returns
        -------
        PARA : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            PARA > 0, without limit.
        """
        area_ser = self._get_patch_area_ser(class_val=class_val)
        perimeter_ser = self._get_patch_perimeter_ser(class_val=class_val)

        if hectares:
            area_ser = area_ser / settings.HECTARE_M2

        return self._patch_metric_result(
            perimeter_ser / area_ser, "perimeter_area_ratio", class_val
        )

    def shape_index(self, *, class_val=None):
        r"""Perimeter relative to the minimum perimeter of a patch of equal area.

        Unlike PARA, it does not depend on the patch size.

        .. math::
           SHAPE = \frac{.25 \; p_{i,j}}{\sqrt{a_{i,j}}}

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.

        Returns
        -------
        SHAPE : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            SHAPE >= 1, without limit ; 1 for maximally compact patches (and for
            single-cell patches).
        """
        area_ser = self._get_patch_area_ser(class_val=class_val)
        perimeter_ser = self._get_patch_perimeter_ser(class_val=class_val)

        if np.isclose(self.cell_width, self.cell_height, rtol=CELLLENGTH_RTOL):
            shape_index_ser = compute_shape_index(
                area_ser / self.cell_area, perimeter_ser / self.cell_width
            )
        else:
            # non-square cells: fall back to the raw formula, without the raster
            # minimum-perimeter correction
            shape_index_ser = 0.25 * perimeter_ser / np.sqrt(area_ser)

        return self._patch_metric_result(shape_index_ser, "shape_index", class_val)

    def fractal_dimension(self, *, class_val=None):
        r"""Fractal dimension of each patch, from the log ratio of perimeter and area.

        .. math::
           FRAC = \frac{2 \; ln (.25 \; p_{i,j})}{ln (a_{i,j})}

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.

        Returns
        -------
        FRAC : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            1 <= FRAC <= 2 ; close to 1 for compact patches and to 2 for convoluted
            ones. Single-cell patches have a FRAC of 1, since the log of a unit area is
            zero.
        """
        area_ser = self._get_patch_area_ser(class_val=class_val)
        perimeter_ser = self._get_patch_perimeter_ser(class_val=class_val)
        cell_count_ser = self._get_patch_metric_ser(
            self._patch_df["cell_count"], class_val=class_val
        )

        with np.errstate(divide="ignore", invalid="ignore"):
            fractal_dimension_ser = 2 * np.log(0.25 * perimeter_ser) / np.log(area_ser)
        fractal_dimension_ser = fractal_dimension_ser.where(
            (cell_count_ser > 1) & np.isfinite(fractal_dimension_ser), 1
        )

        return self._patch_metric_result(
            fractal_dimension_ser, "fractal_dimension", class_val
        )

    def radius_of_gyration(self, *, class_val=None):
        r"""Mean distance between each cell of the patch and the patch centroid.

        .. math::
           GYRATE = \sum_{r=1}^{z} \frac{h_{i,j,r}}{z} \quad [m]

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.

        Returns
        -------
        GYRATE : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            GYRATE >= 0, without limit ; GYRATE equals 0 for single-cell patches and
            increases as the patch extent grows.
        """
        try:
            gyrate_ser = self._cached_patch_radius_of_gyration_ser
        except AttributeError:
            gyrate_ser = pd.Series(
                compute_patch_radius_of_gyration(
                    self._label_arr, self.grid.res, self._num_patches
                ),
                index=self._patch_df.index,
            )
            self._cached_patch_radius_of_gyration_ser = gyrate_ser

        return self._patch_metric_result(
            self._get_patch_metric_ser(gyrate_ser, class_val=class_val),
            "radius_of_gyration",
            class_val,
        )

    def related_circumscribing_circle(self, *, class_val=None):
        r"""Ratio between the patch area and the smallest circumscribing circle area.

        .. math::
           CIRCLE = 1 - \frac{a_{i,j}}{a_{i,j}^{s}}

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.

        Returns
        -------
        CIRCLE : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            0 <= CIRCLE < 1 ; CIRCLE approaches 0 for circular patches and approaches 1
            for elongated, linear patches.
        """
        try:
            circle_ser = self._cached_patch_related_circumscribing_circle_ser
        except AttributeError:
            circle_ser = pd.Series(
                compute_patch_related_circumscribing_circle(
                    self._label_arr, self.grid.res, self._num_patches
                ),
                index=self._patch_df.index,
            )
            self._cached_patch_related_circumscribing_circle_ser = circle_ser

        return self._patch_metric_result(
            self._get_patch_metric_ser(circle_ser, class_val=class_val),
            "related_circumscribing_circle",
            class_val,
        )

    # core area metrics

    def core_area(
        self, *, class_val=None, hectares=True, consider_boundary=None, edge_depth=None
    ):
        r"""Core area of each patch of the landscape.

        .. math::
           CORE = a_{i,j}^{core} \quad [hec] \; or \; [m^2]

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.

        Returns
        -------
        CORE : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            CORE >= 0 ; core area equals zero when every cell of the patch is within the
            specified depth distance from its edge, and approaches the value of AREA as
            patch shapes are simplified.
        """
        core_df, _ = self._get_core_dfs(consider_boundary, edge_depth)
        core_area_ser = self._get_patch_metric_ser(
            core_df["core_area"], class_val=class_val
        )
        if hectares:
            core_area_ser = core_area_ser / settings.HECTARE_M2

        return self._patch_metric_result(core_area_ser, "core_area", class_val)

    def number_of_core_areas(
        self, *, class_val=None, consider_boundary=None, edge_depth=None
    ):
        r"""Number of disjunct core areas of each patch of the landscape.

        .. math::
           NCORE = n_{i,j}^{core}

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.

        Returns
        -------
        NCORE : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            NCORE >= 0 ; NCORE equals zero when every cell of the patch is within the
            specified depth distance from its edge, and increases as the patch contains
            more disjunct core areas.
        """
        core_df, _ = self._get_core_dfs(consider_boundary, edge_depth)

        return self._patch_metric_result(
            self._get_patch_metric_ser(
                core_df["number_of_core_areas"], class_val=class_val
            ),
            "number_of_core_areas",
            class_val,
        )

    def core_area_index(
        self, *, class_val=None, consider_boundary=None, edge_depth=None, percent=True
    ):
        r"""Ratio between the core area and patch area of each patch of the landscape.

        .. math::
           CAI = \frac{a_{i,j}^{core}}{a_{i,j}}

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.
        percent : bool, default True
            Whether the index is expressed as a percentage rather than a fraction.

        Returns
        -------
        CAI : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            0 <= CAI <= 100 ; core area index equals zero when every cell of the patch
            is within the specified depth distance from its edge, and approaches 100
            when patches are mostly composed of core area.
        """
        core_df, _ = self._get_core_dfs(consider_boundary, edge_depth)
        # ACHTUNG: both series are in square meters, so the ratio is unit-free
        core_area_index_ser = self._get_patch_metric_ser(
            core_df["core_area"] / self._patch_area_ser, class_val=class_val
        )
        if percent:
            core_area_index_ser = core_area_index_ser * 100

        return self._patch_metric_result(
            core_area_index_ser, "core_area_index", class_val
        )

    def disjunct_core_area(
        self, *, class_val=None, hectares=True, consider_boundary=None, edge_depth=None
    ):
        r"""Area of each disjunct core area of the landscape.

        .. math::
           DCORE = a_{i,j,k}^{core} \quad [hec] \; or \; [m^2]

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.

        Returns
        -------
        DCORE : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            Indexed by the disjunct core area label ("core_id") rather than by patch.
        """
        _, disjunct_core_df = self._get_core_dfs(consider_boundary, edge_depth)
        if class_val is not None:
            disjunct_core_df = disjunct_core_df[
                disjunct_core_df["class_val"] == class_val
            ]
        core_area_ser = disjunct_core_df["core_area"]
        if hectares:
            core_area_ser = core_area_ser / settings.HECTARE_M2

        if class_val is None:
            return pd.DataFrame(
                {"class_val": disjunct_core_df["class_val"], "core_area": core_area_ser}
            )
        else:
            return core_area_ser

    # aggregation metrics (formerly isolation, proximity)

    def euclidean_nearest_neighbor(self, *, class_val=None):
        r"""Distance to the nearest neighboring patch of the same class.

        The distance is measured between the centers of the closest edge cells.

        .. math::
           ENN = h_{i,j} \quad [m]

        Parameters
        ----------
        class_val : int, optional
            Class whose patches are returned. If not provided, the patches of every
            class are returned.

        Returns
        -------
        ENN : pandas.Series if `class_val` is provided, pandas.DataFrame otherwise
            ENN > 0, without limit ; NaN for the patches of classes with a single
            patch.
        """
        if class_val is None:
            classes = self.classes
        else:
            classes = [class_val]
        for _class_val in classes:
            if self._num_patches_dict.get(_class_val, 0) < 2:
                warnings.warn(
                    "Class {} has less than 2 patches. ".format(_class_val)
                    + "Euclidean-nearest-neighbor might contain nan values",
                    RuntimeWarning,
                )

        return self._patch_metric_result(
            self._get_patch_metric_ser(
                self._patch_euclidean_nearest_neighbor_ser, class_val=class_val
            ),
            "euclidean_nearest_neighbor",
            class_val,
        )

    ###########################################################################
    # class-level and landscape-level metrics

    # area, density, edge

    def total_area(self, *, class_val=None, hectares=True):
        r"""Total area.

        At the class level:

        .. math::
           TA_i = \sum_{j=1}^{n_i} a_{i,j} \quad [hec] \; or \; [m^2] \quad (class \; i)

        At the landscape level:

        .. math::
           TA = A \quad [hec] \; or \; [m^2] \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.

        Returns
        -------
        TA : numeric
        """
        if class_val is None:
            total_area = self.landscape_area
        else:
            total_area = np.sum(self._get_patch_area_ser(class_val=class_val))

        if hectares:
            total_area /= settings.HECTARE_M2

        return total_area

    def proportion_of_landscape(self, class_val, *, percent=True):
        r"""Share of the landscape area covered by a class.

        Only defined at the class level:

        .. math::
           PLAND_i = P_i = \frac{1}{A} \sum_j^{n_i} a_{i,j} \quad (class \; i)

        Parameters
        ----------
        class_val : int
            Class for which the metric should be computed.
        percent : bool, default True
            Whether the proportion is expressed as a percentage (FRAGSTATS' PLAND)
            rather than a fraction.

        Returns
        -------
        PLAND : numeric
            0 < PLAND <= 100 ; 100 when every cell with data belongs to the class.
        """
        numerator = np.sum(self._get_patch_area_ser(class_val=class_val))

        if percent:
            numerator *= 100

        return numerator / self.landscape_area

    def number_of_patches(self, *, class_val=None):
        r"""Number of patches.

        At the class level:

        .. math::
           NP_i = n_i \quad (class \; i)

        At the landscape level:

        .. math::
           NP = N \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.

        Returns
        -------
        NP : int
            NP >= 1, without limit.
        """
        if class_val is None:
            return self._num_patches
        else:
            return self._num_patches_dict.get(class_val, 0)

    def patch_density(self, *, class_val=None, percent=True, hectares=True):
        r"""Density of class patches.

        Number of patches per area unit, so that landscapes of different extents can be
        compared. At the class level:

        .. math::
           PD_i = \frac{n_i}{A} \quad [1/hec] \; or \; [1/m^2] \quad (class \; i)

        At the landscape level:

        .. math::
           PD = \frac{N}{A} \quad [1/hec] \; or \; [1/m^2] \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        percent : bool, default True
            Whether the index is expressed as a percentage rather than a fraction.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.

        Returns
        -------
        PD : numeric
            PD > 0 ; bounded above by the density reached when each cell is a patch.
        """
        numerator = self.number_of_patches(class_val=class_val)

        if percent:
            numerator *= 100
        if hectares:
            numerator *= settings.HECTARE_M2

        return numerator / self.landscape_area

    def largest_patch_index(self, *, class_val=None, percent=True):
        r"""Share of the landscape area covered by the largest patch.

        At the class level:

        .. math::
           LPI_i = \frac{1}{A} \max_{j=1}^{n_i} a_{i,j} \quad (class \; i)

        At the landscape level:

        .. math::
           LPI = \frac{1}{A} \max a_{i,j} \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        percent : bool, default True
            Whether the index is expressed as a percentage rather than a fraction.

        Returns
        -------
        LPI : numeric
            0 < LPI <= 100 (or 1 when `percent` is False) ; the maximum is reached when
            a single patch covers every cell with data.
        """
        numerator = np.max(self._get_patch_area_ser(class_val=class_val))

        if percent:
            numerator *= 100

        return numerator / self.landscape_area

    def total_edge(self, *, class_val=None, count_boundary=False):
        r"""Total edge length.

        At the class level:

        .. math::
           TE_i = \sum_{k=1}^{m} e_{i,k} \quad [m] \quad (class \; i)

        At the landscape level:

        .. math::
           TE = E \quad [m] \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        count_boundary : bool, default False
            Whether the edges with cells with no data and with the landscape boundary
            should be included in the total edge length.

        Returns
        -------
        TE : numeric
            TE >= 0 ; 0 when no edge of the class (or landscape) is counted.
        """
        classes = self.classes.tolist()
        others = [self.nodata, settings.BOUNDARY_LABEL]

        total_edge = 0
        # horizontal neighbors share a vertical edge (of length `cell_height`) and
        # vertical neighbors share an horizontal edge (of length `cell_width`)
        for direction, length in [
            ("horizontal", self.cell_height),
            ("vertical", self.cell_width),
        ]:
            direction_df = self._adjacency_df.loc[direction]
            # the adjacency data frame counts each pair once (from the first cell in
            # row-major order), so we add its transpose to get symmetric counts
            direction_df = direction_df + direction_df.T
            if class_val is None:
                class_arr = direction_df.loc[classes, classes].values
                # keep each pair of different classes once
                class_arr = np.triu(class_arr, k=1)
                num_edges = np.sum(class_arr)
                if count_boundary:
                    num_edges += np.sum(direction_df.loc[classes, others].values)
            else:
                neighbors = [
                    _class_val for _class_val in classes if _class_val != class_val
                ]
                if count_boundary:
                    neighbors += others
                num_edges = np.sum(direction_df.loc[class_val, neighbors].values)
            total_edge += num_edges * length

        return total_edge

    def edge_density(self, *, class_val=None, count_boundary=False, hectares=True):
        r"""Edge length per area unit.

        At the class level:

        .. math::
           ED_i = \frac{1}{A} \sum_{k=1}^{m} e_{i,k} \quad [m/hec] \; or \; [m/m^2]
           \quad (class \; i)

        At the landscape level:

        .. math::
           ED = \frac{E}{A} \quad [m/hec] \; or \; [m/m^2] \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        count_boundary : bool, default False
            Whether the edges with cells with no data and with the landscape boundary
            are counted.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.

        Returns
        -------
        ED : numeric
            ED >= 0, without limit.
        """
        numerator = self.total_edge(class_val=class_val, count_boundary=count_boundary)

        if hectares:
            numerator *= settings.HECTARE_M2

        return numerator / self.landscape_area

    # core area

    def total_core_area(
        self, *, class_val=None, hectares=True, consider_boundary=None, edge_depth=None
    ):
        r"""Total core area.

        At the class level:

        .. math::
           TCA_i = \sum_{j=1}^{n_i} a_{i,j}^{core} \quad [hec] \; or \; [m^2] \quad
           (class \; i)

        At the landscape level:

        .. math::
           TCA = \sum_{i=1}^{m} \sum_{j=1}^{n_i} a_{i,j}^{core} \quad [hec] \; or \;
           [m^2] \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.

        Returns
        -------
        TCA : numeric
            0 <= TCA <= TA ; 0 when no cell of the class (or landscape) is core.
        """
        core_area = self.core_area(
            class_val=class_val,
            hectares=hectares,
            consider_boundary=consider_boundary,
            edge_depth=edge_depth,
        )
        if class_val is None:
            return core_area["core_area"].sum()
        else:
            return core_area.sum()

    def core_area_proportion_of_landscape(
        self, class_val, *, consider_boundary=None, edge_depth=None, percent=True
    ):
        r"""Share of the landscape area covered by the core of a class.

        Only defined at the class level:

        .. math::
           CPLAND_i = \frac{1}{A} \sum_j^{n_i} a_{i,j}^{core} \quad (class \; i)

        Parameters
        ----------
        class_val : int
            Class for which the metric should be computed.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.
        percent : bool, default True
            Whether the proportion is expressed as a percentage (FRAGSTATS' CPLAND)
            rather than a fraction.

        Returns
        -------
        CPLAND : numeric
            0 <= CPLAND <= PLAND.
        """
        # ACHTUNG: use square meters in both terms so that we get a proportion
        numerator = self.total_core_area(
            class_val=class_val,
            hectares=False,
            consider_boundary=consider_boundary,
            edge_depth=edge_depth,
        )
        if percent:
            numerator *= 100

        return numerator / self.landscape_area

    def number_of_disjunct_core_areas(
        self, *, class_val=None, consider_boundary=None, edge_depth=None
    ):
        r"""Number of disjunct core areas.

        At the class level:

        .. math::
           NDCA_i = \sum_j^{n_i} n_{i,j}^{core} \quad (class \; i)

        At the landscape level:

        .. math::
           NDCA = \sum_{i=1}^{m} \sum_{j=1}^{n_i} n_{i,j}^{core} \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.

        Returns
        -------
        NDCA : int
            NDCA >= 0, without limit ; a single patch can hold several core areas when
            narrow parts of it are all edge.
        """
        num_core_areas = self.number_of_core_areas(
            class_val=class_val,
            consider_boundary=consider_boundary,
            edge_depth=edge_depth,
        )
        if class_val is None:
            return int(num_core_areas["number_of_core_areas"].sum())
        else:
            return int(num_core_areas.sum())

    def disjunct_core_area_density(
        self,
        *,
        class_val=None,
        consider_boundary=None,
        edge_depth=None,
        percent=True,
        hectares=True,
    ):
        r"""Density of disjunct core areas.

        At the class level:

        .. math::
           DCAD_i = \frac{1}{A} \sum_j^{n_i} n_{i,j}^{core} [1/hec] \; or \; [1/m^2]
           \quad (class \; i)

        At the landscape level:

        .. math::
           DCAD = \frac{1}{A} \sum_{i=1}^{m} \sum_{j=1}^{n_i} n_{i,j}^{core} \quad
           [1/hec] \; or \; [1/m^2] \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        consider_boundary : bool, optional
            Whether the cells outside the landscape count as matching neighbors when
            finding core cells. Defaults to `settings.DEFAULT_CONSIDER_BOUNDARY`.
        edge_depth : int, optional
            Depth of the edge in cells. Defaults to `settings.DEFAULT_EDGE_DEPTH`.
        percent : bool, default True
            Whether the index is expressed as a percentage rather than a fraction.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.

        Returns
        -------
        DCAD : numeric
            DCAD >= 0, without limit.
        """
        numerator = self.number_of_disjunct_core_areas(
            class_val=class_val,
            consider_boundary=consider_boundary,
            edge_depth=edge_depth,
        )

        if percent:
            numerator *= 100
        if hectares:
            numerator *= settings.HECTARE_M2

        return numerator / self.landscape_area

    # aggregation

    def landscape_shape_index(self, *, class_val=None):
        r"""Total edge relative to the edge of a maximally compact patch of equal area.

        Edges with no data and with the landscape boundary are counted. At the class
        level:

        .. math::
           LSI_i = \frac{.25 \sum \limits_{k=1}^{m} e_{i,k}}{\sqrt{A}} \quad
           (class \; i)

        At the landscape level:

        .. math::

           LSI = \frac{.25 E}{\sqrt{A}} \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.

        Returns
        -------
        LSI : numeric
            LSI >= 1 ; 1 for a single square-like patch, larger as the class breaks up.
        """
        if class_val is None:
            area = self.landscape_area
        else:
            area = np.sum(self._get_patch_area_ser(class_val=class_val))

        perimeter = self.total_edge(class_val=class_val, count_boundary=True)

        if np.isclose(self.cell_width, self.cell_height, rtol=CELLLENGTH_RTOL):
            # `compute_shape_index` is vectorized
            return compute_shape_index(
                np.array([area / self.cell_area]),
                np.array([perimeter / self.cell_width]),
            )[0]
        else:
            return 0.25 * perimeter / np.sqrt(area)

    def effective_mesh_size(self, *, class_val=None, hectares=True):
        r"""Area-weighted mean patch size relative to the landscape area.

        At the class level:

        .. math::
           MESH_i = \frac{1}{A} \sum_{j=1}^{n_i} a_{i,j}^2 \quad [hec] \; or \; [m^2]
           \quad (class \; i)

        At the landscape level:

        .. math::
           MESH = \frac{1}{A} \sum_{i=1}^{m} \sum_{j=1}^{n_i} a_{i,j}^2 \quad [hec] \;
           or \; [m^2] \quad (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.
        hectares : bool, default True
            Whether areas are expressed in hectares rather than square meters.

        Returns
        -------
        MESH : numeric
            cell_area / A <= MESH <= A ; A when a single patch covers the landscape.
        """
        mesh = (
            np.sum(self._get_patch_area_ser(class_val=class_val) ** 2)
            / self.landscape_area
        )

        if hectares:
            mesh /= settings.HECTARE_M2

        return mesh

    def splitting_index(self, *, class_val=None):
        r"""Number of equally sized patches that would yield the same MESH.

        At the class level:

        .. math::
           SPLIT_i = \frac{A^2}{\sum_{j=1}^{n_i} a_{i,j}^2} \quad (class \; i)

        At the landscape level:

        .. math::
           SPLIT = \frac{A^2}{\sum_{i=1}^{m} \sum_{j=1}^{n_i} a_{i,j}^2} \quad
           (landscape)

        Parameters
        ----------
        class_val : int, optional
            Class at whose level the metric is computed. If not provided, the metric is
            computed at the landscape level.

        Returns
        -------
        SPLIT : numeric
            SPLIT >= 1 ; 1 when a single patch covers the landscape. Equivalent to
            A / MESH when both are in the same units.
        """
        return self.landscape_area**2 / np.sum(
            self._get_patch_area_ser(class_val=class_val) ** 2
        )

    ###########################################################################
    # landscape-level metrics

    # landscape complexity (information theory)
    # see https://doi.org/10.1007/s10980-019-00830-x

    def _check_entropy_classes(self):
        if len(self.classes) < 2:
            warnings.warn(
                "Entropy-based metrics can only be computed in landscapes with at least"
                " two classes of patches. Returning nan",
                RuntimeWarning,
            )
            return False
        return True

    # diversity (categorical)

    def entropy(self, *, base=2):
        r"""Entropy of the class distribution of the landscape.

        The proportion of each class is taken from the class totals of the unordered
        adjacency matrix, as in:

        .. math::
           ENT = - \sum \limits_{i=1}^{m} \Big( P_i \; log_b P_i \Big)

        where `b` is the base logarithm.

        Parameters
        ----------
        base : numeric, default 2
            The base of the logarithm.

        Returns
        -------
        ENT : numeric
            0 <= ENT <= log_b(m) ; log_b(m) when the m classes are equally abundant.
        """
        if not self._check_entropy_classes():
            return np.nan

        # column totals are the adjacency counts of each class
        counts = self.compute_total_adjacency_df().sum()

        return compute_entropy(counts, base=base)

    def shannon_diversity_index(self):
        """Shannon's diversity index, i.e., the entropy in nats."""
        return self.entropy(base=np.e)

    # contagion, interspersion (spatial complexity)

    def joint_entropy(self, *, base=2):
        r"""Entropy of the distribution of pairs of adjacent cells among class pairs.

        Computed over the cells of the unordered adjacency matrix, as in:

        .. math::
           JOINENT = - \sum \limits_{i=1}^{m} \sum \limits_{k=1}^{m} \Bigg[
             P_i \frac{g_{i,k}}{\sum \limits_{k=1}^{m} g_{i,k}} \Bigg] \Bigg[
             log_b \Bigg( P_i \frac{g_{i,k}}{\sum \limits_{k=1}^{m} g_{i,k}} \Bigg)
             \Bigg]

        where `b` is the base logarithm.

        Parameters
        ----------
        base : numeric, default 2
            The base of the logarithm.

        Returns
        -------
        JOINENT : numeric
            0 < JOINENT <= 2 log_b(m) ; the maximum is reached when every pair of
            classes is equally frequent among adjacent cells.
        """
        if not self._check_entropy_classes():
            return np.nan

        adjacencies = self.compute_total_adjacency_df().values.flatten()

        return compute_entropy(adjacencies, base=base)

    def conditional_entropy(self, *, base=2):
        r"""Entropy of the class of a cell given the class of its neighbor.

        .. math::
           CONDENT = JOINENT - ENT

        Parameters
        ----------
        base : numeric, default 2
            The base of the logarithm.

        Returns
        -------
        CONDENT : numeric
            0 <= CONDENT <= log_b(m)
        """
        return self.joint_entropy(base=base) - self.entropy(base=base)

    def mutual_information(self, *, base=2):
        """Information shared between the classes of adjacent cells.

        .. math::
           MUTINF = ENT - CONDENT

        Parameters
        ----------
        base : numeric, default 2
            The base of the logarithm.

        Returns
        -------
        MUTINF : numeric
            0 <= MUTINF <= log_b(m)
        """
        return self.entropy(base=base) - self.conditional_entropy(base=base)

    def relative_mutual_information(self):
        """Mutual information normalized by the entropy.

        .. math::
           RELMUTINF = MUTINF / ENT

        Returns
        -------
        RELMUTINF : numeric
            0 <= RELMUTINF <= 1
        """
        # independent of the base
        _base = 2
        return self.mutual_information(base=_base) / self.entropy(base=_base)

    def contagion(self, *, percent=True):
        r"""Contagion index, i.e., one minus the normalized joint entropy.

        .. math::
           CONTAG = 1 + \frac{
             \sum \limits_{i=1}^{m} \sum \limits_{k=1}^{m} \Bigg[
               P_i \frac{g_{i,k}}{\sum \limits_{k=1}^{m} g_{i,k}}
             \Bigg] \Bigg[ ln \Bigg(
               P_i \frac{g_{i,k}}{\sum \limits_{k=1}^{m} g_{i,k}}
             \Bigg) \Bigg]}{2 ln(m)}

        Parameters
        ----------
        percent : bool, default True
            Whether the index is expressed as a percentage rather than a fraction.

        Returns
        -------
        CONTAG : numeric
            0 <= CONTAG <= 100 (or 1 when `percent` is False) ; 0 when the joint
            entropy is maximal.
        """
        contag = 1 - self.joint_entropy(base=np.e) / (2 * np.log(len(self.classes)))

        if percent:
            contag *= 100

        return contag

    ###########################################################################
    # compute metrics data frames

    def _get_metric_method(self, metric, level, level_metrics):
        try:
            metric_method = getattr(self, metric)
        except AttributeError as getattr_e:
            raise ValueError(f"{metric} is not among {level_metrics}") from getattr_e

        def _metric_method(**metric_kwargs):
            try:
                return metric_method(**metric_kwargs)
            except TypeError as metric_args_e:
                # e.g., class-only metrics called without `class_val` or landscape-only
                # metrics called with it
                raise ValueError(
                    f"{metric} cannot be computed at the {level} level"
                ) from metric_args_e

        return _metric_method

    def compute_patch_metrics_df(self, *, metrics=None, metrics_kwargs=None):
        """Compute the data frame of patch-level metrics.

        Parameters
        ----------
        metrics : list-like, optional
            Names of the metrics to compute, among `Landscape.PATCH_METRICS`. All of
            them by default.
        metrics_kwargs : dict, optional
            Keyword arguments of each metric method, keyed by the metric name, e.g.,
            `{'area': {'hectares': False}}`. Metrics without an entry use their
            defaults.

        Returns
        -------
        df : pandas.DataFrame
            Data frame indexed by patch id ("patch_id"), with the class of each patch
            in the "class_val" column followed by one column per metric.
        """
        if metrics is None:
            metrics = Landscape.PATCH_METRICS
        if metrics_kwargs is None:
            metrics_kwargs = {}

        metrics_dfs = [self._patch_class_ser]
        for metric in metrics:
            metric_val = self._get_metric_method(
                metric, "patch", Landscape.PATCH_METRICS
            )(**metrics_kwargs.get(metric, {}))
            # `disjunct_core_area` also returns a data frame, but it is not indexed by
            # patch
            if metric not in Landscape.PATCH_METRICS or not isinstance(
                metric_val, pd.DataFrame
            ):
                raise ValueError(f"{metric} cannot be computed at the patch level")
            metrics_dfs.append(metric_val.drop("class_val", axis=1))

        df = pd.concat(metrics_dfs, axis=1)
        df.index.name = "patch_id"

        return df

    def compute_class_metrics_df(
        self, *, metrics=None, classes=None, metrics_kwargs=None
    ):
        """Compute the data frame of class-level metrics.

        Parameters
        ----------
        metrics : list-like, optional
            Names of the metrics to compute, among `Landscape.CLASS_METRICS`. All of
            them by default.
        classes : list-like, optional
            Classes to compute the metrics for. All the classes of the landscape by
            default.
        metrics_kwargs : dict, optional
            Keyword arguments of each metric method, keyed by the metric name, e.g.,
            `{'total_edge': {'count_boundary': True}}`.

        Returns
        -------
        df : pandas.DataFrame
            Data frame indexed by class ("class_val") with one column per metric.
        """
        if metrics is None:
            metrics = Landscape.CLASS_METRICS
        else:
            # patch-level metrics also take `class_val`, so calling them does not raise
            # and they must be rejected by name
            for metric in metrics:
                if metric in Landscape.PATCH_METRICS or metric == "disjunct_core_area":
                    raise ValueError(f"{metric} cannot be computed at the class level")
        if classes is None:
            classes = self.classes
        if metrics_kwargs is None:
            metrics_kwargs = {}

        metrics_sers = []
        for metric in metrics:
            metric_method = self._get_metric_method(
                metric, "class", Landscape.CLASS_METRICS
            )
            metric_kwargs = metrics_kwargs.get(metric, {})
            metrics_sers.append(
                pd.Series(
                    {
                        class_val: metric_method(class_val=class_val, **metric_kwargs)
                        for class_val in classes
                    },
                    name=metric,
                    dtype=float,
                )
            )

        df = pd.concat(metrics_sers, axis=1)
        df.index.name = "class_val"

        return df

    def compute_landscape_metrics_df(self, *, metrics=None, metrics_kwargs=None):
        """Compute the data frame of landscape-level metrics.

        Parameters
        ----------
        metrics : list-like, optional
            Names of the metrics to compute, among `Landscape.LANDSCAPE_METRICS`. All
            of them by default.
        metrics_kwargs : dict, optional
            Keyword arguments of each metric method, keyed by the metric name.

        Returns
        -------
        df : pandas.DataFrame
            Single-row data frame with one column per metric.
        """
        if metrics is None:
            metrics = Landscape.LANDSCAPE_METRICS
        if metrics_kwargs is None:
            metrics_kwargs = {}

        metrics_dict = {}
        for metric in metrics:
            metric_val = self._get_metric_method(
                metric, "landscape", Landscape.LANDSCAPE_METRICS
            )(**metrics_kwargs.get(metric, {}))
            # patch-level metrics return series or data frames
            if isinstance(metric_val, (pd.DataFrame, pd.Series)):
                raise ValueError(f"{metric} cannot be computed at the landscape level")
            metrics_dict[metric] = metric_val

        return pd.DataFrame(metrics_dict, index=[0])


# distribution statistics of the patch-level metrics (and of the disjunct core areas)

_DISTR_STAT_DESCR_DICT = {
    "mn": "Mean",
    "am": "Area-weighted mean",
    "md": "Median",
    "ra": "Range",
    "sd": "Standard deviation",
    "cv": "Coefficient of variation",
}

_distr_metric_doc = """{stat_descr} of the {metric} distribution.

See also the documentation of `Landscape.{metric}`.

Parameters
----------
class_val : int, optional
    Class whose patches make up the distribution. If not provided, the patches of
    every class do.
**metric_kwargs : optional
    Keyword arguments to be passed to `Landscape.{metric}`.{percent_descr}

Returns
-------
{abbrev} : numeric
"""

_percent_descr = """
percent : bool, default True
    Whether the coefficient of variation is expressed as a percentage."""


def _make_distr_metric_method(patch_metric, suffix):
    if suffix == "cv":

        def distr_metric_method(self, *, class_val=None, percent=True, **metric_kwargs):
            return self._metric_cv(
                class_val,
                getattr(self, patch_metric),
                patch_metric_method_kwargs=metric_kwargs,
                percent=percent,
            )

    else:

        def distr_metric_method(self, *, class_val=None, **metric_kwargs):
            return getattr(self, f"_metric_{suffix}")(
                class_val,
                getattr(self, patch_metric),
                patch_metric_method_kwargs=metric_kwargs,
            )

    metric = f"{patch_metric}_{suffix}"
    distr_metric_method.__name__ = metric
    distr_metric_method.__qualname__ = f"Landscape.{metric}"
    distr_metric_method.__doc__ = _distr_metric_doc.format(
        stat_descr=_DISTR_STAT_DESCR_DICT[suffix],
        metric=patch_metric,
        percent_descr=_percent_descr if suffix == "cv" else "",
        abbrev=settings.fragstats_abbrev_dict.get(metric, metric.upper()),
    )
    return distr_metric_method


for _patch_metric in Landscape._PATCH_METRICS:
    for _suffix in settings.DISTR_SUFFIXES:
        setattr(
            Landscape,
            f"{_patch_metric}_{_suffix}",
            _make_distr_metric_method(_patch_metric, _suffix),
        )
