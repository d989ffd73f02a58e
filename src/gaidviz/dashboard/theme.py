"""Light/dark theme settings shared by the dashboard figures."""

from __future__ import annotations

from enum import Enum
from typing import Union


class ThemeMode(str, Enum):
    """UI theme mode."""

    DARK = "dark"
    LIGHT = "light"


def resolve_theme(theme: Union[str, ThemeMode, None]) -> ThemeMode:
    """Convert str to ThemeMode. Default to LIGHT."""
    if isinstance(theme, ThemeMode):
        return theme
    if theme is not None and str(theme).lower() in ("dark", "plotly_dark"):
        return ThemeMode.DARK
    return ThemeMode.LIGHT


def get_theme_colors(theme: ThemeMode) -> tuple[str, str]:
    """Background and foreground colors for a theme."""
    if theme is ThemeMode.DARK:
        return "#000000", "#ffffff"
    return "#ffffff", "#000000"


def get_grid_color(theme: ThemeMode) -> str:
    return "rgba(255,255,255,0.2)" if theme is ThemeMode.DARK else "#cccccc"


def get_theme_template(theme: ThemeMode) -> str:
    """Plotly template name for a theme."""
    if theme is ThemeMode.DARK:
        return "plotly_dark"
    return "plotly_white"
