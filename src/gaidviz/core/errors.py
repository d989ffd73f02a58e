"""Exception types raised by the gaidviz core."""

from __future__ import annotations


class GaidVizError(Exception):
    """Base class for gaidviz errors."""


class InvalidArgument(GaidVizError, ValueError):
    """Raised when a caller passes a field, color or scale outside the contract.

    Signals a programming error in the presentation layer. The core never
    catches it.
    """


class DataLoadError(GaidVizError):
    """Raised when the survey dataset cannot be fetched or parsed."""
