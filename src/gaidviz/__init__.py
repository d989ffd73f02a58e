"""
gaidviz: interactive dashboard for the Global AI Dialogues (GAID) survey.

This package provides:
- aggregate(): two-way grouping of survey records into grid and marginal statistics
- color_at() / sample_gradient(): piecewise-linear, user-editable color scales
- DashboardController: NiceGUI dashboard (bubble grid + marginal bar charts)
- Logging utilities for library and application use

For logging configuration in scripts/notebooks:
    ```python
    from gaidviz.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from gaidviz.utils.logging import configure_logging, get_logger

from gaidviz.core.aggregator import AggregateCell, AggregateResult, MarginalBar, aggregate
from gaidviz.core.colormap import ColorPoint, color_at, sample_gradient
from gaidviz.core.errors import DataLoadError, InvalidArgument
from gaidviz.core.view_state import DashboardState, ViewModel, derive_view

# NullHandler so logs don't reach root when no application configured logging.
_logger = logging.getLogger("gaidviz")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "AggregateCell",
    "AggregateResult",
    "ColorPoint",
    "DashboardState",
    "DataLoadError",
    "InvalidArgument",
    "MarginalBar",
    "ViewModel",
    "aggregate",
    "color_at",
    "configure_logging",
    "derive_view",
    "get_logger",
    "sample_gradient",
]

__version__ = "0.1.0"
