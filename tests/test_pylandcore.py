"""pylandcore tests."""

import shutil
import tempfile
import unittest
import warnings
from os import path

import numpy as np
import pandas as pd
import rasterio as rio
from rasterio import transform as rio_transform

import pylandcore as plc

# 5x5 landscape with an "L" of class 2 over a background of class 1, plus a class 2
# cell on the right boundary that only touches the "L" diagonally
L_ARR = np.array(
    [
        [1, 1, 1, 1, 1],
        [1, 2, 1, 1, 1],
        [1, 2, 1, 1, 2],
        [1, 2, 2, 2, 1],
        [1, 1, 1, 1, 1],
    ]
)
CHECKERBOARD_ARR = np.array([[1, 2, 1], [2, 1, 2], [1, 2, 1]])


def _random_landscape_arr(shape=(20, 20), num_classes=3, seed=0):
    rng = np.random.default_rng(seed)
    arr = rng.integers(1, num_classes + 1, size=shape)
    # smooth it a bit so that there are larger patches
    arr[: shape[0] // 2, : shape[1] // 2] = 1
    # some cells with no data
    arr[-1, :3] = 0
    return arr


class TestImports(unittest.TestCase):
    def test_base_imports(self):
        pass


class TestGrid(unittest.TestCase):
    def test_build_grid(self):
        grid = plc.build_grid(L_ARR, 10, 20)
        self.assertEqual(grid.shape, (5, 5))
        self.assertEqual(grid.res, (10, 20))
        self.assertEqual(grid.cell_area, 200)
        self.assertEqual(grid.nodata, 0)
        self.assertEqual(grid.num_cells, 25)
        self.assertTrue(np.array_equal(grid.classes, [1, 2]))
        self.assertIsNone(grid.transform)
        # nested lists of rows are also accepted
        self.assertTrue(
            np.array_equal(plc.build_grid(L_ARR.tolist(), 1, 1).arr, L_ARR)
        )
        # grids are passed through
        self.assertIs(plc.build_grid(grid), grid)

    def test_grid_is_read_only(self):
        arr = L_ARR.copy()
        grid = plc.build_grid(arr, 1, 1)
        with self.assertRaises(ValueError):
            grid.arr[0, 0] = 2
        # the grid does not alias the input array
        arr[0, 0] = 2
        self.assertEqual(grid.arr[0, 0], 1)

    def test_missing_cells(self):
        # cells equal to nodata
        grid = plc.build_grid(np.array([[1, 255], [2, 2]]), 1, 1, nodata=255)
        self.assertEqual(grid.num_cells, 3)
        self.assertTrue(np.array_equal(grid.classes, [1, 2]))
        self.assertTrue(
            np.array_equal(grid.data_mask, [[True, False], [True, True]])
        )
        # NaN cells
        grid = plc.build_grid(np.array([[1.0, np.nan], [2.0, 2.0]]), 1, 1)
        self.assertEqual(grid.num_cells, 3)
        self.assertEqual(grid.arr[0, 1], grid.nodata)
        self.assertTrue(np.issubdtype(grid.arr.dtype, np.integer))
        # masked cells
        grid = plc.build_grid(
            np.ma.masked_array([[1, 2], [3, 4]], mask=[[0, 1], [0, 0]]), 1, 1
        )
        self.assertEqual(grid.num_cells, 3)
        self.assertTrue(np.array_equal(grid.classes, [1, 3, 4]))

    def test_invalid_grids(self):
        for raw_arr in [
            [[1, 2], [1]],  # ragged
            np.empty((0, 3)),  # empty
            np.array([1, 2, 3]),  # not 2-D
            np.ones((2, 2, 2)),  # not 2-D
            np.array([[1, -2], [1, 1]]),  # negative labels
            np.array([[1.5, 2], [1, 1]]),  # non-integral labels
            np.array([["a", "b"], ["a", "a"]]),  # unsupported dtype
        ]:
            with self.assertRaises(plc.InvalidGrid):
                plc.build_grid(raw_arr, 1, 1)
        # invalid grids are also value errors
        with self.assertRaises(ValueError):
            plc.build_grid(np.empty((0, 0)), 1, 1)

    def test_invalid_configuration(self):
        # if we provide an array, we also need to provide the resolution
        with self.assertRaises(plc.InvalidConfiguration) as cm:
            plc.build_grid(L_ARR)
        self.assertIn("must be provided", str(cm.exception))
        for res in [(0, 1), (1, -1), (np.inf, 1)]:
            with self.assertRaises(plc.InvalidConfiguration):
                plc.build_grid(L_ARR, *res)
        with self.assertRaises(plc.InvalidConfiguration):
            plc.build_grid(L_ARR, 1, 1, nodata=0.5)

    def test_io(self):
        tmp_dir = tempfile.mkdtemp()
        try:
            fp = path.join(tmp_dir, "landscape.tif")
            transform = rio_transform.from_origin(100, 200, 10, 10)
            arr = _random_landscape_arr()
            with rio.open(
                fp,
                "w",
                driver="GTiff",
                height=arr.shape[0],
                width=arr.shape[1],
                count=2,
                dtype="int32",
                nodata=0,
                transform=transform,
            ) as dst:
                dst.write(arr.astype("int32"), 1)
                dst.write(L_ARR.repeat(4, axis=0).repeat(4, axis=1).astype("int32"), 2)

            grid = plc.build_grid(fp)
            self.assertEqual(grid.res, (10, 10))
            self.assertEqual(grid.transform, transform)
            self.assertTrue(np.array_equal(grid.arr, arr))
            self.assertEqual(grid.num_cells, np.count_nonzero(arr))

            grids = plc.build_grids(fp)
            self.assertEqual(len(grids), 2)
            self.assertTrue(np.array_equal(np.unique(grids[1].arr), [1, 2]))

            # the landscape takes the transform from the raster dataset
            ls = plc.Landscape(fp)
            self.assertEqual(ls.transform, transform)
            self.assertAlmostEqual(ls.cell_area, 100)
            la = plc.LayerAnalysis(fp)
            self.assertEqual(len(la), 2)
        finally:
            shutil.rmtree(tmp_dir)

    def test_build_grids(self):
        grids = plc.build_grids(np.stack([L_ARR, L_ARR.T]), 1, 1)
        self.assertEqual(len(grids), 2)
        with self.assertRaises(plc.InvalidGrid):
            plc.build_grids(np.ones((2, 2, 2, 2)), 1, 1)


class TestLabel(unittest.TestCase):
    def test_connectivity(self):
        grid = plc.build_grid(CHECKERBOARD_ARR, 1, 1)
        # test that providing a value different than 8 or 4 raises a `ValueError`
        for connectivity in ["2", 6, "queen", True]:
            with self.assertRaises(plc.InvalidConnectivity) as cm:
                plc.label_patches(grid, connectivity)
            self.assertIn("is not among", str(cm.exception))
        # test that we can provide the argument as int as long as it is 8 or 4
        for connectivity in (8, 4):
            self.assertEqual(
                plc.validate_connectivity(connectivity), str(connectivity)
            )

        label_arr, num_patches = plc.label_patches(grid, "4")
        self.assertEqual(num_patches, 9)
        self.assertTrue(np.array_equal(label_arr, np.arange(1, 10).reshape(3, 3)))
        label_arr, num_patches = plc.label_patches(grid, "8")
        self.assertEqual(num_patches, 2)
        self.assertTrue(np.array_equal(label_arr, CHECKERBOARD_ARR))

    def test_row_major_ids(self):
        grid = plc.build_grid(L_ARR, 1, 1)
        label_arr, num_patches = plc.label_patches(grid, "4")
        self.assertEqual(num_patches, 3)
        # the background is found first, then the "L" and finally the isolated cell
        self.assertEqual(label_arr[0, 0], 1)
        self.assertEqual(label_arr[1, 1], 2)
        self.assertEqual(label_arr[3, 3], 2)
        self.assertEqual(label_arr[2, 4], 3)
        # labeling is deterministic
        self.assertTrue(np.array_equal(label_arr, plc.label_patches(grid, "4")[0]))

        label_arr, num_patches = plc.label_patches(grid, "8")
        self.assertEqual(num_patches, 2)
        self.assertEqual(label_arr[2, 4], label_arr[1, 1])

    def test_labeling_invariants(self):
        grid = plc.build_grid(_random_landscape_arr(), 1, 1)
        num_patches_dict = {}
        for connectivity in ["8", "4"]:
            label_arr, num_patches = plc.label_patches(grid, connectivity)
            num_patches_dict[connectivity] = num_patches
            # missing cells get no label, every other cell gets one
            self.assertTrue(np.array_equal(label_arr != 0, grid.data_mask))
            self.assertTrue(
                np.array_equal(
                    np.unique(label_arr[label_arr != 0]), np.arange(1, num_patches + 1)
                )
            )
            # each patch has a single class
            patch_class_arr = plc.compute_patch_class_arr(grid, label_arr, num_patches)
            self.assertTrue(
                np.array_equal(
                    patch_class_arr[label_arr[grid.data_mask] - 1],
                    grid.arr[grid.data_mask],
                )
            )
            # patch ids follow the row-major order of their first cell
            _, first_idx = np.unique(label_arr.ravel(), return_index=True)
            self.assertTrue(np.all(np.diff(first_idx[1:]) > 0))
        # test that there is at least the same number of patches with the Moore
        # neighborhood than with Von Neumann's
        self.assertLessEqual(num_patches_dict["8"], num_patches_dict["4"])

    def test_uniform_grid(self):
        grid = plc.build_grid(np.full((4, 6), 3), 1, 1)
        for connectivity in ["8", "4"]:
            label_arr, num_patches = plc.label_patches(grid, connectivity)
            self.assertEqual(num_patches, 1)
            self.assertTrue(np.all(label_arr == 1))


class TestPatch(unittest.TestCase):
    def test_patch_table(self):
        grid = plc.build_grid(_random_landscape_arr(), 10, 10)
        label_arr, num_patches = plc.label_patches(grid, "8")
        patch_df = plc.compute_patch_table(grid, label_arr, num_patches)
        self.assertEqual(patch_df.index.name, "patch_id")
        self.assertEqual(patch_df.index[0], 1)
        self.assertEqual(len(patch_df), num_patches)
        for column in [
            "class_val",
            "cell_count",
            "area",
            "perimeter",
            "centroid_x",
            "centroid_y",
        ]:
            self.assertIn(column, patch_df.columns)
        # the area of the patches adds up to the area of the cells with data
        self.assertEqual(patch_df["area"].sum(), grid.num_cells * grid.cell_area)
        self.assertEqual(patch_df["cell_count"].sum(), grid.num_cells)
        self.assertTrue((patch_df["perimeter"] > 0).all())

    def test_l_shape_perimeter(self):
        grid = plc.build_grid(L_ARR, 1, 1)
        label_arr, num_patches = plc.label_patches(grid, "8")
        patch_df = plc.compute_patch_table(grid, label_arr, num_patches)
        self.assertTrue(np.array_equal(patch_df["class_val"], [1, 2]))
        self.assertTrue(np.array_equal(patch_df["cell_count"], [19, 6]))
        # edges shared between both classes
        self.assertEqual(patch_df.loc[1, "perimeter"], 15)
        self.assertEqual(patch_df.loc[2, "perimeter"], 15)
        patch_df = plc.compute_patch_table(
            grid, label_arr, num_patches, count_boundary=True
        )
        self.assertEqual(patch_df.loc[1, "perimeter"], 15 + 19)
        self.assertEqual(patch_df.loc[2, "perimeter"], 15 + 1)

        # with the 4-neighborhood, the isolated cell is a single-cell patch
        label_arr, num_patches = plc.label_patches(grid, "4")
        patch_perimeters = plc.compute_patch_perimeters(label_arr, 1, 1, num_patches)
        self.assertTrue(np.array_equal(patch_perimeters, [15, 12, 4]))

    def test_perimeter_resolution(self):
        # vertical edges contribute the cell height, horizontal edges the cell width
        label_arr = np.array([[1, 2], [2, 2]])
        patch_perimeters = plc.compute_patch_perimeters(label_arr, 2, 3)
        # single-cell patches always have the full perimeter
        self.assertEqual(patch_perimeters[0], 10)
        self.assertEqual(patch_perimeters[1], 5)
        patch_perimeters = plc.compute_patch_perimeters(
            label_arr, 2, 3, count_boundary=True
        )
        self.assertEqual(patch_perimeters[1], 20)

    def test_empty_patch(self):
        with self.assertRaises(plc.EmptyPatch):
            plc.compute_patch_cell_counts(np.array([[1, 3]]), 3)
        self.assertTrue(
            np.array_equal(plc.compute_patch_areas(np.array([[1, 2, 2]]), 4), [4, 8])
        )

    def test_centroids(self):
        label_arr = np.array([[1, 1], [2, 2]])
        centroid_x, centroid_y = plc.compute_patch_centroids(label_arr, (10, 10))
        self.assertTrue(np.allclose(centroid_x, [10, 10]))
        self.assertTrue(np.allclose(centroid_y, [5, 15]))
        centroid_x, centroid_y = plc.compute_patch_centroids(
            label_arr,
            (10, 10),
            transform=rio_transform.from_origin(100, 200, 10, 10),
        )
        self.assertTrue(np.allclose(centroid_x, [110, 110]))
        self.assertTrue(np.allclose(centroid_y, [195, 185]))

    def test_shape_primitives(self):
        label_arr = np.array([[1, 0, 2, 2], [0, 0, 2, 2], [3, 3, 0, 0]])
        gyrate = plc.compute_patch_radius_of_gyration(label_arr, (10, 10))
        self.assertAlmostEqual(gyrate[0], 0)
        self.assertAlmostEqual(gyrate[1], np.hypot(5, 5))
        self.assertAlmostEqual(gyrate[2], 5)
        circle = plc.compute_patch_related_circumscribing_circle(label_arr, (10, 10))
        self.assertAlmostEqual(circle[0], 1 - 2 / np.pi)
        self.assertAlmostEqual(circle[1], 1 - 2 / np.pi)
        # a 1x2 patch has a diameter of sqrt(5) cells
        self.assertAlmostEqual(circle[2], 1 - 2 / (np.pi * 5 / 4))

    def test_euclidean_nearest_neighbor(self):
        label_arr = np.array([[1, 2, 3]])
        enn = plc.compute_patch_euclidean_nearest_neighbor(
            label_arr, np.array([1, 2, 1]), (10, 10), "8"
        )
        self.assertAlmostEqual(enn[0], 20)
        self.assertTrue(np.isnan(enn[1]))
        self.assertAlmostEqual(enn[2], 20)

    def test_grid_without_data(self):
        grid = plc.build_grid(np.zeros((3, 3), dtype=int), 1, 1)
        label_arr, num_patches = plc.label_patches(grid)
        self.assertEqual(num_patches, 0)
        patch_df = plc.compute_patch_table(grid, label_arr, num_patches)
        self.assertTrue(patch_df.empty)
        self.assertEqual(patch_df.index.name, "patch_id")
        centroid_x, centroid_y = plc.compute_patch_centroids(
            label_arr,
            (1, 1),
            num_patches,
            transform=rio_transform.from_origin(0, 3, 1, 1),
        )
        self.assertEqual(len(centroid_x), 0)
        self.assertEqual(len(centroid_y), 0)
        gyrate = plc.compute_patch_radius_of_gyration(label_arr, (1, 1), num_patches)
        self.assertEqual(len(gyrate), 0)


class TestCore(unittest.TestCase):
    def test_uniform_grid(self):
        grid = plc.build_grid(np.ones((3, 3)), 10, 10)
        label_arr, _ = plc.label_patches(grid, "4")
        # cells on the landscape boundary are edge cells unless `consider_boundary`
        core_df, disjunct_core_df = plc.compute_core(
            grid, label_arr, consider_boundary=False, edge_depth=1
        )
        self.assertEqual(core_df.loc[1, "core_cells"], 1)
        self.assertEqual(core_df.loc[1, "core_area"], 100)
        self.assertEqual(core_df.loc[1, "number_of_core_areas"], 1)
        self.assertEqual(len(disjunct_core_df), 1)
        core_mask = plc.compute_core_mask(grid, consider_boundary=False)
        self.assertTrue(core_mask[1, 1])
        self.assertEqual(np.count_nonzero(core_mask), 1)

        core_df, disjunct_core_df = plc.compute_core(
            grid, label_arr, consider_boundary=True, edge_depth=1
        )
        self.assertEqual(core_df.loc[1, "core_cells"], 9)
        self.assertEqual(disjunct_core_df.loc[1, "cell_count"], 9)

        # the boundary is never a class mismatch, so with `consider_boundary` the core
        # does not depend on the edge depth
        core_df, _ = plc.compute_core(
            grid, label_arr, consider_boundary=True, edge_depth=3
        )
        self.assertEqual(core_df.loc[1, "core_cells"], 9)
        core_df, _ = plc.compute_core(
            grid, label_arr, consider_boundary=False, edge_depth=2
        )
        self.assertEqual(core_df.loc[1, "core_cells"], 0)
        self.assertEqual(core_df.loc[1, "number_of_core_areas"], 0)

    def test_single_cell_patch(self):
        # a lone cell is core only when the outside of the landscape matches
        grid = plc.build_grid(np.ones((1, 1), dtype=int), 1, 1)
        label_arr, _ = plc.label_patches(grid, "4")
        for consider_boundary, num_core_cells in [(False, 0), (True, 1)]:
            core_df, disjunct_core_df = plc.compute_core(
                grid, label_arr, consider_boundary=consider_boundary
            )
            self.assertEqual(core_df.loc[1, "core_cells"], num_core_cells)
            self.assertEqual(len(disjunct_core_df), num_core_cells)

        # a single-cell patch that touches another class is never core
        grid = plc.build_grid(L_ARR, 1, 1)
        label_arr, _ = plc.label_patches(grid, "4")
        self.assertEqual(label_arr[2, 4], 3)
        for consider_boundary in [False, True]:
            core_df, _ = plc.compute_core(
                grid, label_arr, consider_boundary=consider_boundary
            )
            self.assertEqual(core_df.loc[3, "core_cells"], 0)
            self.assertEqual(core_df.loc[3, "number_of_core_areas"], 0)

    def test_disjunct_core_areas(self):
        arr = np.ones((5, 7), dtype=int)
        arr[2, 3] = 2
        grid = plc.build_grid(arr, 1, 1)
        label_arr, num_patches = plc.label_patches(grid, "8")
        patch_df = plc.compute_patch_table(grid, label_arr, num_patches)
        core_df, disjunct_core_df = plc.compute_core(grid, label_arr, patch_df)
        self.assertEqual(core_df.index.name, "patch_id")
        self.assertTrue(np.array_equal(core_df["core_cells"], [10, 0]))
        self.assertTrue(np.array_equal(core_df["number_of_core_areas"], [2, 0]))
        # the core areas are split by the cells next to the class 2 cell
        self.assertEqual(disjunct_core_df.index.name, "core_id")
        self.assertTrue(np.array_equal(disjunct_core_df.index, [1, 2]))
        self.assertTrue(np.array_equal(disjunct_core_df["patch_id"], [1, 1]))
        self.assertTrue(np.array_equal(disjunct_core_df["class_val"], [1, 1]))
        self.assertTrue(np.array_equal(disjunct_core_df["cell_count"], [5, 5]))
        # grouping the core cells with the 8-neighborhood does not join them either
        _, disjunct_core_df = plc.compute_core(grid, label_arr, connectivity="8")
        self.assertEqual(len(disjunct_core_df), 2)

        # deeper edges
        core_df, _ = plc.compute_core(grid, label_arr, edge_depth=2)
        self.assertEqual(core_df.loc[1, "core_cells"], 0)
        core_df, disjunct_core_df = plc.compute_core(
            grid, label_arr, edge_depth=2, consider_boundary=True
        )
        # every cell beyond a Manhattan distance of 2 from the class 2 cell, which
        # splits the core in a left and a right part
        self.assertEqual(core_df.loc[1, "core_cells"], 35 - 13)
        self.assertEqual(core_df.loc[1, "number_of_core_areas"], 2)

    def test_missing_cells_are_mismatches(self):
        arr = np.ones((5, 5), dtype=int)
        arr[2, 2] = 0
        grid = plc.build_grid(arr, 1, 1)
        core_mask = plc.compute_core_mask(grid, consider_boundary=True)
        self.assertEqual(np.count_nonzero(core_mask), 24 - 4)
        self.assertFalse(core_mask[2, 2])

    def test_core_errors(self):
        grid = plc.build_grid(L_ARR, 1, 1)
        label_arr, num_patches = plc.label_patches(grid)
        for edge_depth in [0, -1, 1.5, True]:
            with self.assertRaises(plc.InvalidConfiguration):
                plc.compute_core(grid, label_arr, edge_depth=edge_depth)
        with self.assertRaises(plc.InvalidConnectivity):
            plc.compute_core(grid, label_arr, connectivity=6)
        with self.assertRaises(plc.InvalidGrid):
            plc.compute_core(grid, label_arr[:-1])
        patch_df = plc.compute_patch_table(grid, label_arr, num_patches)
        with self.assertRaises(plc.InvalidConfiguration):
            plc.compute_core(grid, label_arr, patch_df.iloc[:-1])


class TestAdjacency(unittest.TestCase):
    def setUp(self):
        self.grid = plc.build_grid(np.array([[1, 1, 2], [1, 2, 2]]), 1, 1)

    def test_ordered(self):
        adjacency_matrix = plc.build_adjacency_matrix(self.grid, ordered=True)
        # the nodata value is included
        self.assertEqual(list(adjacency_matrix.index), [1, 2, 0])
        self.assertEqual(list(adjacency_matrix.columns), [1, 2, 0])
        self.assertEqual(adjacency_matrix.loc[1, 1], 2)
        self.assertEqual(adjacency_matrix.loc[1, 2], 3)
        self.assertEqual(adjacency_matrix.loc[2, 1], 0)
        self.assertEqual(adjacency_matrix.loc[2, 2], 2)
        self.assertEqual(adjacency_matrix.loc[0].sum(), 0)

    def test_unordered(self):
        adjacency_matrix = plc.build_adjacency_matrix(self.grid)
        self.assertTrue(
            np.array_equal(adjacency_matrix.loc[[1, 2], [1, 2]], [[4, 3], [3, 4]])
        )
        self.assertTrue(np.array_equal(adjacency_matrix, adjacency_matrix.T))

    def test_boundary(self):
        adjacency_matrix = plc.build_adjacency_matrix(
            self.grid, ordered=True, count_boundary=True
        )
        boundary = plc.settings.BOUNDARY_LABEL
        self.assertIn(boundary, adjacency_matrix.index)
        self.assertEqual(adjacency_matrix.loc[boundary, boundary], 0)
        # every edge on the landscape boundary is counted once
        self.assertEqual(
            adjacency_matrix.loc[boundary].sum() + adjacency_matrix[boundary].sum(),
            10,
        )

    def test_neighbourhood(self):
        adjacency_df = plc.compute_adjacency_df(self.grid, "8")
        self.assertEqual(
            list(adjacency_df.index.get_level_values("direction").unique()),
            ["horizontal", "vertical", "diagonal", "antidiagonal"],
        )
        # the (0, 0) and (0, 1) cells have their diagonal neighbor of class 2
        self.assertEqual(adjacency_df.loc[("diagonal", 1), 2], 2)
        # the (0, 2) cell has its antidiagonal neighbor of class 2
        self.assertEqual(adjacency_df.loc[("antidiagonal", 2), 2], 1)
        adjacency_matrix = plc.build_adjacency_matrix(self.grid, 8, ordered=True)
        self.assertEqual(adjacency_matrix.loc[[1, 2], [1, 2]].values.sum(), 7 + 2 + 2)
        with self.assertRaises(plc.InvalidConnectivity):
            plc.build_adjacency_matrix(self.grid, "6")

    def test_pair_counts(self):
        arr = _random_landscape_arr((8, 9))
        grid = plc.build_grid(arr, 1, 1)
        adjacency_df = plc.compute_adjacency_df(grid, "8")
        # the classes and then the nodata value
        codes = grid.classes.tolist() + [grid.nodata]
        code_index = {code: k for k, code in enumerate(codes)}
        num_rows, num_cols = arr.shape
        for direction, (di, dj) in zip(
            plc.adjacency.DIRECTIONS, [(0, 1), (1, 0), (1, 1), (1, -1)]
        ):
            expected = np.zeros((len(codes), len(codes)), dtype=int)
            for i in range(num_rows):
                for j in range(num_cols):
                    if 0 <= i + di < num_rows and 0 <= j + dj < num_cols:
                        expected[
                            code_index[arr[i, j]], code_index[arr[i + di, j + dj]]
                        ] += 1
            self.assertTrue(
                np.array_equal(
                    adjacency_df.loc[direction].loc[codes, codes].values, expected
                )
            )


class TestLandscape(unittest.TestCase):
    def setUp(self):
        self.ls_arr = _random_landscape_arr()
        self.ls = plc.Landscape(self.ls_arr, res=(10, 10))

    def test_init(self):
        # test that if we provide a ndarray, we also need to provide the resolution
        with self.assertRaises(ValueError) as cm:
            plc.Landscape(self.ls_arr)
        self.assertIn("must be provided", str(cm.exception))

        # test that the transform is None if we instantiate a landscape from an ndarray
        self.assertIsNone(self.ls.transform)
        # landscapes can also be instantiated from grids
        grid = plc.build_grid(self.ls_arr, 10, 10)
        ls = plc.Landscape(grid, neighborhood_rule=4)
        self.assertIs(ls.grid, grid)
        self.assertEqual(ls.neighborhood_rule, "4")
        with self.assertRaises(ValueError) as cm:
            plc.Landscape(grid, neighborhood_rule="2")
        self.assertIn("is not among", str(cm.exception))

    def test_metrics_parameters(self):
        ls = self.ls

        for patch_metric in plc.Landscape.PATCH_METRICS:
            method = getattr(ls, patch_metric)
            self.assertIsInstance(method(), pd.DataFrame)
            self.assertIsInstance(method(class_val=ls.classes[0]), pd.Series)

        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            for class_metric in plc.Landscape.CLASS_METRICS:
                self.assertTrue(
                    np.isreal(getattr(ls, class_metric)(class_val=ls.classes[0]))
                )

            for landscape_metric in plc.Landscape.LANDSCAPE_METRICS:
                self.assertTrue(np.isreal(getattr(ls, landscape_metric)()))

    def test_metrics_warnings(self):
        # euclidean nearest neighbor will return nan (and raise an informative warning)
        # if there is not at least two patches of each class. Let us test this by
        # creating a landscape with a background of class 1 and a single patch of class
        # 2
        arr = np.ones((4, 4))
        arr[1:-1, 1:-1] = 2
        ls = plc.Landscape(arr, res=(1, 1))

        for class_val in [1, 2, None]:
            with warnings.catch_warnings(record=True) as w:
                warnings.simplefilter("always")
                ls.euclidean_nearest_neighbor(class_val=class_val)
                self.assertGreater(len(w), 0)

        # some landscape-level metrics require at least two classes.
        ls = plc.Landscape(np.ones((4, 4)), res=(1, 1))
        for method in plc.Landscape.ENTROPY_METRICS:
            with warnings.catch_warnings(record=True) as w:
                warnings.simplefilter("always")
                self.assertTrue(np.isnan(getattr(ls, method)()))
                self.assertGreater(len(w), 0)

    def test_metric_dataframes(self):
        ls = self.ls
        patch_metrics = set(plc.Landscape.PATCH_METRICS)
        class_metrics = set(plc.Landscape.CLASS_METRICS)
        landscape_metrics = set(plc.Landscape.LANDSCAPE_METRICS)

        with warnings.catch_warnings():
            warnings.simplefilter("ignore")

            patch_df = ls.compute_patch_metrics_df()
            self.assertTrue(
                np.all(
                    patch_df.columns.drop("class_val") == plc.Landscape.PATCH_METRICS
                )
            )
            self.assertEqual(patch_df.index.name, "patch_id")
            # try that raised ValueErrors have different error messages depending on
            # the context
            with self.assertRaises(ValueError) as cm:
                ls.compute_patch_metrics_df(metrics=["foo"])
            self.assertIn("is not among", str(cm.exception))
            for metric in class_metrics.union(landscape_metrics):
                with self.assertRaises(ValueError) as cm:
                    ls.compute_patch_metrics_df(metrics=[metric])
                self.assertIn("cannot be computed", str(cm.exception))

            class_df = ls.compute_class_metrics_df()
            self.assertEqual(
                len(class_df.columns.difference(plc.Landscape.CLASS_METRICS)), 0
            )
            self.assertEqual(class_df.index.name, "class_val")
            with self.assertRaises(ValueError) as cm:
                ls.compute_class_metrics_df(metrics=["foo"])
            self.assertIn("is not among", str(cm.exception))
            for metric in patch_metrics.union(
                landscape_metrics.difference(class_metrics)
            ):
                with self.assertRaises(ValueError) as cm:
                    ls.compute_class_metrics_df(metrics=[metric])
                self.assertIn("cannot be computed", str(cm.exception))

            landscape_df = ls.compute_landscape_metrics_df()
            self.assertEqual(
                len(landscape_df.columns.difference(plc.Landscape.LANDSCAPE_METRICS)),
                0,
            )
            self.assertEqual(len(landscape_df.index), 1)
            with self.assertRaises(ValueError) as cm:
                ls.compute_landscape_metrics_df(metrics=["foo"])
            self.assertIn("is not among", str(cm.exception))
            for metric in patch_metrics.union(
                class_metrics.difference(landscape_metrics)
            ):
                with self.assertRaises(ValueError) as cm:
                    ls.compute_landscape_metrics_df(metrics=[metric])
                self.assertIn("cannot be computed", str(cm.exception))

        # metrics kwargs
        area_df = ls.compute_patch_metrics_df(
            metrics=["area"], metrics_kwargs={"area": {"hectares": False}}
        )
        self.assertTrue(
            np.allclose(area_df["area"], ls.area()["area"] * plc.settings.HECTARE_M2)
        )

    def test_metrics_value_ranges(self):
        ls = self.ls

        # basic tests of the `Landscape` class' attributes
        self.assertNotIn(ls.nodata, ls.classes)
        self.assertGreater(ls.landscape_area, 0)
        self.assertEqual(ls.landscape_area, np.count_nonzero(self.ls_arr) * 100)

        class_val = ls.classes[0]

        # patch-level metrics
        self.assertTrue((ls.area()["area"] > 0).all())
        self.assertTrue((ls.perimeter()["perimeter"] > 0).all())
        self.assertTrue((ls.perimeter_area_ratio()["perimeter_area_ratio"] > 0).all())
        self.assertTrue((ls.shape_index()["shape_index"] >= 1).all())
        _fractal_dimension_ser = ls.fractal_dimension()["fractal_dimension"]
        self.assertTrue((_fractal_dimension_ser <= 2).all())
        self.assertTrue((_fractal_dimension_ser >= 1 - 1e-3).all())
        self.assertTrue((ls.radius_of_gyration()["radius_of_gyration"] >= 0).all())
        _circle_ser = ls.related_circumscribing_circle()[
            "related_circumscribing_circle"
        ]
        self.assertTrue(((_circle_ser >= 0) & (_circle_ser < 1)).all())
        self.assertTrue((ls.core_area()["core_area"] >= 0).all())
        self.assertTrue((ls.number_of_core_areas()["number_of_core_areas"] >= 0).all())
        _core_area_index_ser = ls.core_area_index()["core_area_index"]
        self.assertTrue((_core_area_index_ser >= 0).all())
        self.assertTrue((_core_area_index_ser <= 100).all())
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            _enn_ser = ls.euclidean_nearest_neighbor()["euclidean_nearest_neighbor"]
        self.assertTrue((_enn_ser.dropna() > 0).all())

        # class-level metrics
        self.assertGreater(ls.total_area(class_val=class_val), 0)
        self.assertAlmostEqual(
            sum(ls.proportion_of_landscape(_class_val) for _class_val in ls.classes),
            100,
        )
        self.assertAlmostEqual(
            sum(ls.total_area(class_val=_class_val) for _class_val in ls.classes),
            ls.total_area(),
        )
        self.assertEqual(
            sum(
                ls.number_of_patches(class_val=_class_val) for _class_val in ls.classes
            ),
            ls.number_of_patches(),
        )
        self.assertTrue(0 < ls.largest_patch_index(class_val=class_val) <= 100)
        self.assertGreaterEqual(ls.total_edge(class_val=class_val), 0)
        self.assertGreaterEqual(ls.edge_density(class_val=class_val), 0)
        self.assertGreaterEqual(ls.landscape_shape_index(class_val=class_val), 1)
        self.assertGreaterEqual(ls.splitting_index(class_val=class_val), 1)
        self.assertGreater(ls.effective_mesh_size(class_val=class_val), 0)
        self.assertGreaterEqual(ls.total_core_area(class_val=class_val), 0)
        self.assertTrue(0 <= ls.core_area_proportion_of_landscape(class_val) < 100)
        self.assertGreaterEqual(ls.number_of_disjunct_core_areas(), 0)
        self.assertGreaterEqual(ls.disjunct_core_area_density(), 0)

        # landscape-level metrics
        self.assertGreater(ls.patch_density(), 0)
        self.assertGreaterEqual(ls.landscape_shape_index(), 1)
        self.assertGreater(ls.entropy(), 0)
        self.assertAlmostEqual(ls.shannon_diversity_index(), ls.entropy(base=np.e))
        self.assertGreater(ls.joint_entropy(), 0)
        self.assertGreaterEqual(ls.conditional_entropy(), 0)
        self.assertGreaterEqual(ls.mutual_information(), 0)
        self.assertTrue(0 <= ls.relative_mutual_information() <= 1)
        self.assertTrue(0 < ls.contagion() <= 100)

    def test_l_shape_metrics(self):
        ls = plc.Landscape(L_ARR, res=(1, 1), neighborhood_rule="8")
        self.assertEqual(ls.number_of_patches(), 2)
        self.assertEqual(ls.number_of_patches(class_val=2), 1)
        # shape metrics count the landscape boundary
        self.assertEqual(ls.perimeter(class_val=2).iloc[0], 16)
        self.assertTrue(
            np.array_equal(ls.perimeter(count_boundary=False)["perimeter"], [15, 15])
        )
        # edges are only counted between different classes unless `count_boundary`
        self.assertEqual(ls.total_edge(), 15)
        self.assertEqual(ls.total_edge(count_boundary=True), 35)
        self.assertEqual(ls.total_edge(class_val=2), 15)
        self.assertEqual(ls.total_edge(class_val=2, count_boundary=True), 16)
        self.assertEqual(ls.total_edge(class_val=1, count_boundary=True), 34)
        self.assertAlmostEqual(ls.edge_density(hectares=False), 15 / 25)

        ls = plc.Landscape(L_ARR, res=(1, 1), neighborhood_rule="4")
        self.assertEqual(ls.number_of_patches(), 3)
        self.assertEqual(ls.number_of_patches(class_val=2), 2)
        # a single-cell patch is maximally compact
        self.assertEqual(ls.shape_index(class_val=2).loc[3], 1)
        self.assertEqual(ls.fractal_dimension(class_val=2).loc[3], 1)
        self.assertEqual(ls.radius_of_gyration(class_val=2).loc[3], 0)
        # the edge-to-edge distance between both patches of class 2 is a diagonal
        enn_ser = ls.euclidean_nearest_neighbor(class_val=2)
        self.assertTrue(np.allclose(enn_ser, np.sqrt(2)))

    def test_total_edge_resolution(self):
        # horizontal neighbors share an edge of the cell height
        ls = plc.Landscape(np.array([[1, 2]]), res=(2, 3))
        self.assertEqual(ls.total_edge(), 3)
        ls = plc.Landscape(np.array([[1], [2]]), res=(2, 3))
        self.assertEqual(ls.total_edge(), 2)

    def test_area_metrics(self):
        arr = np.array([[1, 1, 2, 2]] * 4)
        ls = plc.Landscape(arr, res=(1, 1))
        self.assertAlmostEqual(ls.total_area(hectares=False), 16)
        self.assertAlmostEqual(ls.total_area(), 16 / plc.settings.HECTARE_M2)
        self.assertAlmostEqual(ls.proportion_of_landscape(1), 50)
        self.assertAlmostEqual(ls.proportion_of_landscape(1, percent=False), 0.5)
        self.assertAlmostEqual(ls.largest_patch_index(), 50)
        self.assertAlmostEqual(ls.splitting_index(), 16**2 / (8**2 + 8**2))
        self.assertAlmostEqual(ls.splitting_index(class_val=1), 16**2 / 8**2)
        self.assertAlmostEqual(ls.effective_mesh_size(hectares=False), 128 / 16)
        self.assertAlmostEqual(ls.patch_density(percent=False, hectares=False), 2 / 16)
        self.assertAlmostEqual(ls.area_mn(hectares=False), 8)
        self.assertAlmostEqual(ls.area_am(class_val=1, hectares=False), 8)
        self.assertAlmostEqual(ls.area_ra(hectares=False), 0)
        self.assertAlmostEqual(ls.area_cv(), 0)
        # 8 cells of each class, split in halves
        self.assertAlmostEqual(ls.entropy(), 1)
        self.assertAlmostEqual(
            ls.conditional_entropy(), ls.joint_entropy() - ls.entropy()
        )

        # a square landscape of a single class has the minimum landscape shape index
        ls = plc.Landscape(np.ones((4, 4)), res=(1, 1))
        self.assertAlmostEqual(ls.landscape_shape_index(), 1)
        self.assertAlmostEqual(ls.splitting_index(), 1)

    def test_core_metrics(self):
        arr = np.ones((5, 7), dtype=int)
        arr[2, 3] = 2
        ls = plc.Landscape(arr, res=(1, 1))
        core_area_df = ls.core_area(hectares=False)
        self.assertTrue(np.array_equal(core_area_df["core_area"], [10, 0]))
        self.assertTrue(
            np.array_equal(ls.number_of_core_areas()["number_of_core_areas"], [2, 0])
        )
        self.assertAlmostEqual(ls.core_area_index(class_val=1).iloc[0], 100 * 10 / 34)
        self.assertEqual(ls.total_core_area(hectares=False), 10)
        self.assertEqual(ls.number_of_disjunct_core_areas(), 2)
        self.assertEqual(ls.number_of_disjunct_core_areas(class_val=2), 0)
        self.assertAlmostEqual(ls.core_area_proportion_of_landscape(1), 100 * 10 / 35)
        self.assertAlmostEqual(
            ls.disjunct_core_area_density(percent=False, hectares=False), 2 / 35
        )
        disjunct_core_area_df = ls.disjunct_core_area(hectares=False)
        self.assertEqual(disjunct_core_area_df.index.name, "core_id")
        self.assertTrue(np.array_equal(disjunct_core_area_df["core_area"], [5, 5]))
        self.assertAlmostEqual(ls.disjunct_core_area_mn(hectares=False), 5)
        self.assertAlmostEqual(ls.disjunct_core_area_am(hectares=False), 5)
        # no core areas for class 2
        self.assertTrue(np.isnan(ls.disjunct_core_area_am(class_val=2)))

        # core parameters
        self.assertEqual(
            ls.total_core_area(hectares=False, consider_boundary=True, edge_depth=2),
            22,
        )
        self.assertEqual(ls.total_core_area(hectares=False, edge_depth=2), 0)

    def test_class_label(self):
        ls = plc.Landscape(L_ARR, res=(1, 1), neighborhood_rule="4")
        label_arr, num_patches = ls.class_label(2)
        self.assertEqual(num_patches, 2)
        self.assertTrue(np.array_equal(np.unique(label_arr), [0, 2, 3]))
        self.assertTrue(np.array_equal(label_arr != 0, L_ARR == 2))


class TestLayerAnalysis(unittest.TestCase):
    def setUp(self):
        self.ls_arrs = [
            _random_landscape_arr(seed=0),
            _random_landscape_arr(seed=1),
            _random_landscape_arr(num_classes=2, seed=2),
        ]
        self.res = (10, 10)

    def test_init(self):
        la = plc.LayerAnalysis(np.stack(self.ls_arrs), res=self.res)
        self.assertEqual(len(la), 3)
        self.assertEqual(list(la.landscape_ser.index), [1, 2, 3])
        self.assertEqual(la.landscape_ser.index.name, "layer")
        self.assertTrue(np.array_equal(la.present_classes, [1, 2, 3]))

        la = plc.LayerAnalysis(self.ls_arrs, layers=["a", "b", "c"], res=self.res)
        self.assertEqual(list(la.landscape_ser.index), ["a", "b", "c"])

        landscapes = [plc.Landscape(arr, res=self.res) for arr in self.ls_arrs]
        la = plc.LayerAnalysis(landscapes)
        for landscape, _landscape in zip(la.landscape_ser, landscapes):
            self.assertIs(landscape, _landscape)

        # the number of layers must match the number of landscapes
        with self.assertRaises(ValueError):
            plc.LayerAnalysis(landscapes, layers=[1, 2])
        # arrays need a resolution
        with self.assertRaises(ValueError):
            plc.LayerAnalysis(np.stack(self.ls_arrs))

    def test_metric_dataframes(self):
        la = plc.LayerAnalysis(np.stack(self.ls_arrs), res=self.res)

        metrics = ["proportion_of_landscape", "number_of_patches", "area_mn"]
        class_metrics_df = la.compute_class_metrics_df(metrics=metrics)
        self.assertEqual(list(class_metrics_df.index.names), ["class_val", "layer"])
        self.assertEqual(list(class_metrics_df.columns), metrics)
        # class 3 does not appear in the third layer
        self.assertEqual(len(class_metrics_df), 3 + 3 + 2)
        self.assertEqual(
            class_metrics_df.loc[(1, 1), "number_of_patches"],
            la.landscape_ser[1].number_of_patches(class_val=1),
        )

        metrics = ["number_of_patches", "entropy"]
        landscape_metrics_df = la.compute_landscape_metrics_df(metrics=metrics)
        self.assertEqual(landscape_metrics_df.index.name, "layer")
        self.assertEqual(list(landscape_metrics_df.index), [1, 2, 3])
        self.assertEqual(list(landscape_metrics_df.columns), metrics)
        for layer, landscape in la.landscape_ser.items():
            self.assertEqual(
                landscape_metrics_df.loc[layer, "number_of_patches"],
                landscape.number_of_patches(),
            )
