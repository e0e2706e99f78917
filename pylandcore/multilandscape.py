"""Multi-landscape analysis."""

import abc
import functools

import dask
import numpy as np
import pandas as pd
from dask import diagnostics

from . import settings
from .grid import build_grids
from .landscape import Landscape

__all__ = ["LayerAnalysis"]

_compute_class_metrics_df_doc = """
Compute the data frame of class-level metrics, which is {index_descr}.

Parameters
----------
metrics : list-like, optional
    A list-like of strings with the names of the metrics that should be computed in the
    context of this analysis case.
classes : list-like, optional
    A list-like of ints with the class values that should be considered in the context
    of this analysis case.
metrics_kwargs : dict, optional
    Dictionary mapping the keyword arguments (values) that should be passed to each
    metric method (key), e.g., to include the boundary in the computation of
    `total_edge`, metric_kwargs should map the string 'total_edge' (method name) to
    {{'count_boundary': True}}. The default empty dictionary will compute each metric
    according to FRAGSTATS defaults.
fillna : bool, optional
    Whether `NaN` values representing landscapes with no occurrences of patches of the
    provided class should be replaced by zero when appropriate, e.g., area and edge
    metrics (no occurrences mean zero area/edge). If the provided value is `None`
    (default), the value will be taken from `settings.CLASS_METRICS_DF_FILLNA`.

Returns
-------
df : pandas.DataFrame
    Dataframe with the values computed for each {index_return} and metric (columns).
"""

_compute_landscape_metrics_df_doc = """
Computes the data frame of landscape-level metrics, which is {index_descr}.

Parameters
----------
metrics : list-like, optional
    A list-like of strings with the names of the metrics that should be computed. If
    `None`, all the implemented landscape-level metrics will be computed.
metrics_kwargs : dict, optional
    Dictionary mapping the keyword arguments (values) that should be passed to each
    metric method (key), e.g., to include the boundary in the computation of
    `total_edge`, metric_kwargs should map the string 'total_edge' (method name) to
    {{'count_boundary': True}}. The default empty dictionary will compute each metric
    according to FRAGSTATS defaults.

Returns
-------
df : pandas.DataFrame
    Dataframe with the values computed at the landscape level for each {index_return}
    and metric (columns).
"""


class MultiLandscape(abc.ABC):
    """Multi-landscape base abstract class."""

    @abc.abstractmethod
    def __init__(
        self, landscapes, attribute_name, attribute_values, **landscape_kwargs
    ):
        """Initialize the multi-landscape instance.

        Parameters
        ----------
        landscapes : list-like
            A list-like of `Landscape` instances or of grids/arrays/strings/file-like/
            pathlib.Path objects so that each is passed as the `landscape` argument of
            `Landscape.__init__`.
        attribute_name : str
            Name of the attribute that will distinguish each landscape.
        attribute_values : list-like
            Values of the attribute that are characteristic to each landscape.
        landscape_kwargs : dict, optional
            Keyword arguments to be passed to the instantiation of
            `pylandcore.Landscape` for each element of `landscapes`. Ignored for the
            elements of `landscapes` that are already instances of
            `pylandcore.Landscape`.
        """
        if len(landscapes) == 0:
            raise ValueError("`landscapes` must contain at least one landscape")
        landscapes = [
            (
                landscape
                if isinstance(landscape, Landscape)
                else Landscape(landscape, **landscape_kwargs)
            )
            for landscape in landscapes
        ]
        if len(landscapes) != len(attribute_values):
            raise ValueError(
                "The lengths of `landscapes` and `{}` must coincide".format(
                    attribute_name
                )
            )

        # at this point, landscapes is a list of pylandcore.Landscape instances
        self.landscape_ser = pd.Series(landscapes, index=attribute_values).rename_axis(
            attribute_name
        )

        # get the all classes present in the provided landscapes
        self.present_classes = functools.reduce(
            np.union1d,
            tuple(landscape.classes for landscape in self.landscape_ser),
        )

    # fillna for metrics in class metrics dataframes. Since some classes might not
    # appear in some of the landscapes (e.g., layers without any pixel of a particular
    # class type), they will appear as `NaN` in the data frame. We can, however, infer
    # the meaning of this situation for certain metrics, e.g, non-occurence of a given
    # class in a landscape means a number of patches, total area, proportion of
    # landscape, total edge... of the class of 0
    METRIC_FILLNA_DICT = {
        metric: 0
        for metric in [
            patch_metric + "_" + suffix
            for patch_metric in [
                "area",
                "perimeter",
                "core_area",
                "disjunct_core_area",
            ]
            for suffix in ["mn", "am", "md", "ra", "sd"]
        ]
        + [
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
        ]
    }

    def __len__(self):  # noqa: D105
        return len(self.landscape_ser)

    def _concat_metrics_dfs(self, dfs):
        names = self.landscape_ser.index.names
        # get the landscape series index and if not a multi-index, reshape it so that
        # the list comprehension below works for both one-dimensional and multi index
        landscape_index = self.landscape_ser.index.values
        if len(names) == 1:
            landscape_index = landscape_index.reshape(-1, 1)
        return pd.concat(
            [
                df.assign(**{name: val for name, val in zip(names, i)})
                for i, df in zip(landscape_index, dfs)
                if not df.empty
            ]
        )

    def compute_class_metrics_df(  # noqa: D102
        self, *, metrics=None, classes=None, metrics_kwargs=None, fillna=None
    ):
        # if the classes kwarg is not provided, get the classes present in the
        # landscapes
        if classes is None:
            classes = self.present_classes
        # to avoid issues with mutable defaults
        if metrics_kwargs is None:
            metrics_kwargs = {}
        # to avoid setting the same default keyword argument in multiple methods, use
        # the settings module
        if fillna is None:
            fillna = settings.CLASS_METRICS_DF_FILLNA

        tasks = [
            dask.delayed(landscape.compute_class_metrics_df)(
                metrics=metrics,
                classes=np.intersect1d(classes, landscape.classes),
                metrics_kwargs=metrics_kwargs,
            )
            for landscape in self.landscape_ser
        ]
        with diagnostics.ProgressBar():
            dfs = dask.compute(*tasks)

        names = self.landscape_ser.index.names
        class_metrics_df = (
            self._concat_metrics_dfs(dfs)
            .set_index(names, append=True)
            # only sort the first level, i.e., class val
            .sort_index(level="class_val")
        )
        # then reindex to sort the other indices as they were originally sorted
        for name in names:
            class_metrics_df = class_metrics_df.reindex(
                self.landscape_ser.index.get_level_values(name).unique(), level=name
            )

        # ensure numeric types and fillna
        class_metrics_df = class_metrics_df.apply(pd.to_numeric)
        if fillna:
            class_metrics_df = class_metrics_df.fillna(
                MultiLandscape.METRIC_FILLNA_DICT
            )
        return class_metrics_df

    compute_class_metrics_df.__doc__ = _compute_class_metrics_df_doc.format(
        index_descr="multi-indexed by the class and attribute value",
        index_return="class, attribute value (multi-index)",
    )

    def compute_landscape_metrics_df(  # noqa: D102
        self, *, metrics=None, metrics_kwargs=None
    ):
        # to avoid issues with mutable defaults
        if metrics_kwargs is None:
            metrics_kwargs = {}

        tasks = [
            dask.delayed(landscape.compute_landscape_metrics_df)(
                metrics=metrics, metrics_kwargs=metrics_kwargs
            )
            for landscape in self.landscape_ser
        ]
        with diagnostics.ProgressBar():
            dfs = dask.compute(*tasks)

        landscape_metrics_df = self._concat_metrics_dfs(dfs).set_index(
            self.landscape_ser.index.names
        )

        return landscape_metrics_df.apply(pd.to_numeric)

    compute_landscape_metrics_df.__doc__ = _compute_landscape_metrics_df_doc.format(
        index_descr="indexed by the attribute value",
        index_return="attribute value (index)",
    )


class LayerAnalysis(MultiLandscape):
    """Analysis of the layers (bands) of a raster stack."""

    def __init__(
        self,
        landscapes,
        *,
        layers=None,
        res=None,
        nodata=None,
        transform=None,
        neighborhood_rule=None,
        **landscape_kwargs,
    ):
        """Initialize the layer analysis.

        Parameters
        ----------
        landscapes : list-like, numpy.ndarray or str, file-like or pathlib.Path object
            Either a list-like of `Landscape` instances or of grids/arrays/strings/
            file-like/pathlib.Path objects so that each is passed as the `landscape`
            argument of `Landscape.__init__`, or a three-dimensional array of shape
            (layers, rows, columns), or a multi-band raster dataset (one landscape per
            band).
        layers : list-like, optional
            A list-like of ints or strings that label each layer (for DataFrame
            indices). If no value is provided, layers are numbered from 1 onwards (as
            raster bands are).
        res : tuple, optional
            The (x, y) resolution of the dataset. Required if `landscapes` is a
            three-dimensional array.
        nodata : int, optional
            Value to be assigned to pixels with no data. If no value is provided, the
            default value set in `settings.DEFAULT_LANDSCAPE_NODATA` will be taken.
        transform : affine.Affine, optional
            Transformation from pixel coordinates to coordinate reference system.
        neighborhood_rule : {'8', '4'}, optional
            Neighborhood rule to determine patch adjacencies, i.e: '8' (queen's
            case/Moore neighborhood) or '4' (rook's case/Von Neumann neighborhood).
            Ignored if the passed-in landscapes are `Landscape` instances. If no value
            is provided, the default value set in `settings.DEFAULT_NEIGHBORHOOD_RULE`
            will be taken.
        landscape_kwargs : dict, optional
            Other keyword arguments to be passed to `rasterio.open` (for a multi-band
            raster) or to the instantiation of `pylandcore.Landscape` for each element
            of `landscapes`.
        """
        if isinstance(landscapes, np.ndarray) or not isinstance(
            landscapes, (list, tuple, pd.Series)
        ):
            # a single layer stack, i.e., a 3-D array or a multi-band raster
            if res is None:
                res = (None, None)
            landscapes = [
                Landscape(grid, neighborhood_rule=neighborhood_rule)
                for grid in build_grids(
                    landscapes,
                    *res,
                    nodata=nodata,
                    transform=transform,
                    **landscape_kwargs,
                )
            ]
        else:
            landscape_kwargs.update(
                res=res,
                nodata=nodata,
                transform=transform,
                neighborhood_rule=neighborhood_rule,
            )

        if layers is None:
            layers = list(range(1, len(landscapes) + 1))

        # call the parent's init
        super().__init__(landscapes, "layer", layers, **landscape_kwargs)

    # override docs
    def compute_class_metrics_df(  # noqa: D102
        self, *, metrics=None, classes=None, metrics_kwargs=None, fillna=None
    ):
        return super().compute_class_metrics_df(
            metrics=metrics,
            classes=classes,
            metrics_kwargs=metrics_kwargs,
            fillna=fillna,
        )

    compute_class_metrics_df.__doc__ = _compute_class_metrics_df_doc.format(
        index_descr="multi-indexed by the class and layer",
        index_return="class, layer (multi-index)",
    )

    def compute_landscape_metrics_df(  # noqa: D102
        self, *, metrics=None, metrics_kwargs=None
    ):
        return super().compute_landscape_metrics_df(
            metrics=metrics, metrics_kwargs=metrics_kwargs
        )

    compute_landscape_metrics_df.__doc__ = _compute_landscape_metrics_df_doc.format(
        index_descr="indexed by the layer", index_return="layer (index)"
    )
