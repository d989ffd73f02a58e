"""Plotly figures for the survey dashboard.

Every builder takes a ViewModel and returns a Plotly figure dict (never
go.Figure) ready for ui.plotly / update_figure:

- grid_figure: category x category bubble grid, bubble area by respondent
  count, fill by the mapped color
- x_marginal_figure / y_marginal_figure: bars per category of one dimension
- gradient_figure: legend strip of the sampled color scale
"""

from __future__ import annotations

import math
from typing import Optional, Union

import plotly.graph_objects as go

from gaidviz.core.aggregator import AggregateCell, MarginalBar
from gaidviz.core.view_state import ViewModel
from gaidviz.dashboard.theme import (
    ThemeMode,
    get_grid_color,
    get_theme_colors,
    get_theme_template,
    resolve_theme,
)
from gaidviz.utils.logging import get_logger

logger = get_logger(__name__)

# Bubble area range in px^2, mapped linearly from the smallest to largest count.
BUBBLE_AREA_RANGE: tuple[float, float] = (100.0, 2000.0)

Theme = Union[str, ThemeMode, None]


def format_value(value: float, is_proportion: bool) -> str:
    """Tooltip text for an aggregated value: '66.7%' or '3.25/5'."""
    if is_proportion:
        return f"{value:.1f}%"
    return f"{value:.2f}/5"


def _value_line(value: float, is_proportion: bool) -> str:
    name = "Percentage" if is_proportion else "Average Score"
    return f"{name}: {format_value(value, is_proportion)}"


def cell_hover_text(cell: AggregateCell) -> str:
    return (
        f"<b>Demographic Group:</b><br>{cell.x} × {cell.y}<br>"
        f"{_value_line(cell.value, cell.is_proportion)}<br>"
        f"Number of Respondents: {cell.count}"
    )


def bar_hover_text(bar: MarginalBar) -> str:
    return (
        f"<b>{bar.category}</b><br>"
        f"{_value_line(bar.value, bar.is_proportion)}<br>"
        f"Number of Respondents: {bar.count}"
    )


def bubble_sizes(counts: list[int], area_range: tuple[float, float] = BUBBLE_AREA_RANGE) -> list[float]:
    """Marker diameters (px) whose areas scale linearly with counts over area_range."""
    if not counts:
        return []
    lo, hi = min(counts), max(counts)
    a_min, a_max = area_range
    sizes = []
    for c in counts:
        area = a_max if hi == lo else a_min + (c - lo) / (hi - lo) * (a_max - a_min)
        sizes.append(math.sqrt(area))
    return sizes


def _base_layout(theme_mode: ThemeMode) -> dict:
    bg_color, fg_color = get_theme_colors(theme_mode)
    return dict(
        template=get_theme_template(theme_mode),
        paper_bgcolor=bg_color,
        plot_bgcolor=bg_color,
        font=dict(color=fg_color),
        showlegend=False,
    )


def grid_figure(view: ViewModel, theme: Theme = None) -> dict:
    """Bubble grid of all cells with at least one respondent."""
    theme_mode = resolve_theme(theme)
    grid_color = get_grid_color(theme_mode)
    agg = view.aggregate

    drawn = [(c, color) for c, color in zip(agg.grid, view.cell_colors) if c.count > 0]
    cells = [c for c, _ in drawn]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=[c.x for c in cells],
            y=[c.y for c in cells],
            mode="markers",
            marker=dict(
                size=bubble_sizes([c.count for c in cells]),
                color=[color for _, color in drawn],
                line=dict(color="#333333", width=1),
                opacity=0.9,
            ),
            text=[cell_hover_text(c) for c in cells],
            hoverinfo="text",
            name="Survey Results",
        )
    )
    fig.update_layout(
        **_base_layout(theme_mode),
        xaxis=dict(
            title=view.x_label,
            type="category",
            categoryorder="array",
            categoryarray=list(agg.x_categories),
            gridcolor=grid_color,
        ),
        yaxis=dict(
            title=view.y_label,
            type="category",
            categoryorder="array",
            categoryarray=list(agg.y_categories),
            gridcolor=grid_color,
        ),
        margin=dict(l=60, r=30, t=10, b=40),
    )
    logger.debug(f"grid_figure: {len(cells)} of {len(agg.grid)} cells drawn")
    return fig.to_dict()


def _value_axis(view: ViewModel, grid_color: str) -> dict:
    return dict(
        title=view.value_axis_title,
        range=list(view.domain),
        tickvals=list(view.ticks),
        gridcolor=grid_color,
    )


def x_marginal_figure(view: ViewModel, theme: Theme = None) -> dict:
    """Vertical bars per x category (the top marginal plot)."""
    theme_mode = resolve_theme(theme)
    grid_color = get_grid_color(theme_mode)
    bars = view.aggregate.x_marginal

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=[b.category for b in bars],
            y=[b.value for b in bars],
            marker_color=list(view.x_bar_colors),
            text=[bar_hover_text(b) for b in bars],
            hoverinfo="text",
            textposition="none",
        )
    )
    fig.update_layout(
        **_base_layout(theme_mode),
        xaxis=dict(
            type="category",
            categoryorder="array",
            categoryarray=list(view.aggregate.x_categories),
            showticklabels=False,
        ),
        yaxis=_value_axis(view, grid_color),
        margin=dict(l=60, r=30, t=10, b=0),
    )
    return fig.to_dict()


def y_marginal_figure(view: ViewModel, theme: Theme = None) -> dict:
    """Horizontal bars per y category (the side marginal plot)."""
    theme_mode = resolve_theme(theme)
    grid_color = get_grid_color(theme_mode)
    bars = view.aggregate.y_marginal

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=[b.value for b in bars],
            y=[b.category for b in bars],
            orientation="h",
            marker_color=list(view.y_bar_colors),
            text=[bar_hover_text(b) for b in bars],
            hoverinfo="text",
            textposition="none",
        )
    )
    fig.update_layout(
        **_base_layout(theme_mode),
        xaxis=_value_axis(view, grid_color),
        yaxis=dict(
            type="category",
            categoryorder="array",
            categoryarray=list(view.aggregate.y_categories),
            showticklabels=False,
        ),
        margin=dict(l=0, r=10, t=10, b=40),
    )
    return fig.to_dict()


def gradient_figure(
    colors: list[str],
    domain: tuple[float, float],
    ticks: Optional[list[float]] = None,
    theme: Theme = None,
) -> dict:
    """One-row strip showing colors evenly spaced across domain."""
    theme_mode = resolve_theme(theme)
    n = len(colors)
    lo, hi = domain
    fig = go.Figure()
    if n >= 2:
        fig.add_trace(
            go.Heatmap(
                z=[list(range(n))],
                x=[lo + i / (n - 1) * (hi - lo) for i in range(n)],
                colorscale=[[i / (n - 1), c] for i, c in enumerate(colors)],
                showscale=False,
                hoverinfo="skip",
            )
        )
    fig.update_layout(
        **_base_layout(theme_mode),
        xaxis=dict(tickvals=list(ticks) if ticks else None, showgrid=False),
        yaxis=dict(visible=False),
        margin=dict(l=10, r=10, t=0, b=20),
        height=60,
    )
    return fig.to_dict()


def view_gradient_figure(view: ViewModel, theme: Theme = None) -> dict:
    """Legend strip for the active scale of view."""
    return gradient_figure(view.gradient, view.domain, view.ticks, theme=theme)
