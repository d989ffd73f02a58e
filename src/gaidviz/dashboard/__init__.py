"""NiceGUI dashboard widgets and Plotly figures."""

from gaidviz.dashboard.color_scale_editor import ColorScaleEditor
from gaidviz.dashboard.control_panel import DashboardControlPanel
from gaidviz.dashboard.controller import DashboardController

__all__ = [
    "ColorScaleEditor",
    "DashboardControlPanel",
    "DashboardController",
]
