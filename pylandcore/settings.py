"""pylandcore settings."""

from os import environ

try:
    import dotenv

    # load environment variables from a '.env' file of a parent directory
    dotenv.load_dotenv(dotenv.find_dotenv())
except ImportError:
    pass

# BASIC DEFINITIONS
fragstats_abbrev_dict = {
    # patch-level metrics
    "area": "AREA",
    "perimeter": "PERIM",
    "perimeter_area_ratio": "PARA",
    "shape_index": "SHAPE",
    "fractal_dimension": "FRAC",
    "radius_of_gyration": "GYRATE",
    "related_circumscribing_circle": "CIRCLE",
    "core_area": "CORE",
    "number_of_core_areas": "NCORE",
    "core_area_index": "CAI",
    "euclidean_nearest_neighbor": "ENN",
    # class-level metrics (can also be landscape-level except for PLAND and CPLAND)
    # ACHTUNG: 'total_area' is 'CA' or 'TA' in FRAGSTATS depending on the level. To
    # keep a single abbreviation per method, we use 'TA' in all cases.
    "total_area": "TA",
    "proportion_of_landscape": "PLAND",
    "number_of_patches": "NP",
    "patch_density": "PD",
    "largest_patch_index": "LPI",
    "total_edge": "TE",
    "edge_density": "ED",
    "total_core_area": "TCA",
    "core_area_proportion_of_landscape": "CPLAND",
    "number_of_disjunct_core_areas": "NDCA",
    "disjunct_core_area_density": "DCAD",
    "landscape_shape_index": "LSI",
    "effective_mesh_size": "MESH",
    "splitting_index": "SPLIT",
    # landscape-level metrics
    "contagion": "CONTAG",
    "shannon_diversity_index": "SHDI",
}
# add the class/landscape distribution statistics metrics to the fragstats abbreviation
# dictionary
DISTR_SUFFIXES = ["mn", "am", "md", "ra", "sd", "cv"]
for metric in [
    "area",
    "perimeter",
    "perimeter_area_ratio",
    "shape_index",
    "fractal_dimension",
    "radius_of_gyration",
    "related_circumscribing_circle",
    "core_area",
    "core_area_index",
    "euclidean_nearest_neighbor",
]:
    for suffix in DISTR_SUFFIXES:
        fragstats_abbrev_dict[f"{metric}_{suffix}"] = (
            f"{fragstats_abbrev_dict[metric]}_{suffix.upper()}"
        )
for suffix in DISTR_SUFFIXES:
    fragstats_abbrev_dict[f"disjunct_core_area_{suffix}"] = f"DCORE_{suffix.upper()}"

# SETTINGS
DEFAULT_LANDSCAPE_NODATA = int(environ.get("PYLANDCORE_NODATA", 0))
DEFAULT_NEIGHBORHOOD_RULE = environ.get("PYLANDCORE_NEIGHBORHOOD_RULE", "8")
# core cells are always detected with the 4-neighborhood, this rule only concerns how
# core cells are grouped into disjunct core areas
DEFAULT_CORE_NEIGHBORHOOD_RULE = environ.get("PYLANDCORE_CORE_NEIGHBORHOOD_RULE", "4")
DEFAULT_EDGE_DEPTH = int(environ.get("PYLANDCORE_EDGE_DEPTH", 1))
DEFAULT_CONSIDER_BOUNDARY = environ.get(
    "PYLANDCORE_CONSIDER_BOUNDARY", "false"
).lower() in ("1", "true", "yes")

# OTHER
HECTARE_M2 = 10000
# label of the pseudo-class that stands for the cells outside the landscape in the
# adjacency data frames
BOUNDARY_LABEL = "boundary"
CLASS_METRICS_DF_FILLNA = True
# the "pythran" and "numba" backends require the adjacency module to be compiled with
# transonic ahead of time, otherwise the boosted functions run in pure Python
TRANSONIC_BACKEND = environ.get("PYLANDCORE_TRANSONIC_BACKEND", "python")
