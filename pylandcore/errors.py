"""pylandcore errors."""

__all__ = [
    "PylandcoreError",
    "InvalidGrid",
    "InvalidConnectivity",
    "InvalidConfiguration",
    "EmptyPatch",
]


class PylandcoreError(Exception):
    """Base class of the errors raised by pylandcore."""


class InvalidGrid(PylandcoreError, ValueError):
    """The raster is empty, ragged, not two-dimensional or has invalid labels."""


class InvalidConnectivity(PylandcoreError, ValueError):
    """The neighborhood rule is not among ('8', '4')."""


class InvalidConfiguration(PylandcoreError, ValueError):
    """A parameter such as the resolution or the edge depth is out of range."""


class EmptyPatch(PylandcoreError, RuntimeError):
    """A patch label has no cells.

    This should never surface to the caller, since it means that the label array is
    inconsistent with the number of patches.
    """
