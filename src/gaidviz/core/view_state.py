"""Dashboard state and view derivation.

DashboardState holds every user selection: measure, x/y demographic fields,
the two editable color scales and whether the color editor is shown.
Transitions return a new state; derive_view() turns (records, state) into a
ViewModel with aggregates, fill colors and legend gradient. The controller
calls derive_view() after each transition.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable

import pandas as pd

from gaidviz.core import catalog
from gaidviz.core.aggregator import AggregateResult, aggregate
from gaidviz.core.colormap import (
    DEFAULT_PROPORTION_SCALE,
    DEFAULT_SCORE_SCALE,
    GRADIENT_STEPS,
    ColorPoint,
    color_at,
    default_scale,
    sample_gradient,
)
from gaidviz.core.errors import InvalidArgument

AggregateFn = Callable[[pd.DataFrame, str, str, str], AggregateResult]


class ScaleKind(Enum):
    """Which of the two color scales a point edit targets."""
    SCORE = "score"
    PROPORTION = "proportion"

    @classmethod
    def for_measure(cls, measure: str) -> "ScaleKind":
        return cls.PROPORTION if catalog.is_proportion(measure) else cls.SCORE


@dataclass(frozen=True)
class DashboardState:
    """All user selections driving the dashboard."""

    measure: str = catalog.DEFAULT_MEASURE
    x_field: str = catalog.DEFAULT_X_FIELD
    y_field: str = catalog.DEFAULT_Y_FIELD
    score_points: tuple[ColorPoint, ...] = DEFAULT_SCORE_SCALE
    proportion_points: tuple[ColorPoint, ...] = DEFAULT_PROPORTION_SCALE
    show_color_settings: bool = False

    def __post_init__(self) -> None:
        catalog.validate_measure(self.measure)
        catalog.validate_demographic(self.x_field)
        catalog.validate_demographic(self.y_field)
        for name in ("score_points", "proportion_points"):
            points = tuple(getattr(self, name))
            if len(points) < 2:
                raise InvalidArgument(f"{name} needs at least 2 points, got {len(points)}")
            object.__setattr__(self, name, points)

    # -----------------------------
    # Transitions
    # -----------------------------
    def with_measure(self, measure: str) -> "DashboardState":
        return replace(self, measure=measure)

    def with_x_field(self, x_field: str) -> "DashboardState":
        return replace(self, x_field=x_field)

    def with_y_field(self, y_field: str) -> "DashboardState":
        return replace(self, y_field=y_field)

    def with_color_settings_shown(self, shown: bool) -> "DashboardState":
        return replace(self, show_color_settings=bool(shown))

    def points(self, kind: ScaleKind) -> tuple[ColorPoint, ...]:
        return self.proportion_points if kind is ScaleKind.PROPORTION else self.score_points

    def _with_points(self, kind: ScaleKind, points: tuple[ColorPoint, ...]) -> "DashboardState":
        if kind is ScaleKind.PROPORTION:
            return replace(self, proportion_points=points)
        return replace(self, score_points=points)

    def _edit_point(self, kind: ScaleKind, index: int, **changes: Any) -> "DashboardState":
        points = list(self.points(kind))
        if not 0 <= index < len(points):
            raise InvalidArgument(f"Color point index {index} out of range for {kind.value} scale")
        points[index] = replace(points[index], **changes)
        return self._with_points(kind, tuple(points))

    def with_point_value(self, kind: ScaleKind, index: int, value: float) -> "DashboardState":
        """Change the value of one control point (points keep their index, not their rank)."""
        return self._edit_point(kind, index, value=value)

    def with_point_color(self, kind: ScaleKind, index: int, color: str) -> "DashboardState":
        return self._edit_point(kind, index, color=color)

    def reset_scale(self, kind: ScaleKind) -> "DashboardState":
        """Restore the default 4-point score or 5-point proportion scale."""
        return self._with_points(kind, default_scale(kind is ScaleKind.PROPORTION))

    # -----------------------------
    # Serialization
    # -----------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "measure": self.measure,
            "x_field": self.x_field,
            "y_field": self.y_field,
            "score_points": [p.to_dict() for p in self.score_points],
            "proportion_points": [p.to_dict() for p in self.proportion_points],
            "show_color_settings": self.show_color_settings,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DashboardState":
        """Build a state from a dict; missing keys take their defaults.

        Raises:
            InvalidArgument: If a field or color point is outside the contract.
        """
        def _points(key: str, default: tuple[ColorPoint, ...]) -> tuple[ColorPoint, ...]:
            raw = data.get(key)
            if raw is None:
                return default
            if not isinstance(raw, list):
                raise InvalidArgument(f"{key} must be a list of points")
            return tuple(ColorPoint.from_dict(p) for p in raw)

        return cls(
            measure=str(data.get("measure", catalog.DEFAULT_MEASURE)),
            x_field=str(data.get("x_field", catalog.DEFAULT_X_FIELD)),
            y_field=str(data.get("y_field", catalog.DEFAULT_Y_FIELD)),
            score_points=_points("score_points", DEFAULT_SCORE_SCALE),
            proportion_points=_points("proportion_points", DEFAULT_PROPORTION_SCALE),
            show_color_settings=bool(data.get("show_color_settings", False)),
        )


def active_scale_kind(state: DashboardState) -> ScaleKind:
    return ScaleKind.for_measure(state.measure)


def active_scale(state: DashboardState) -> tuple[ColorPoint, ...]:
    """Scale used to color the current measure."""
    return state.points(active_scale_kind(state))


@dataclass(frozen=True)
class ViewModel:
    """Everything the figures need for one render."""

    state: DashboardState
    aggregate: AggregateResult
    cell_colors: list[str] = field(default_factory=list)
    x_bar_colors: list[str] = field(default_factory=list)
    y_bar_colors: list[str] = field(default_factory=list)
    gradient: list[str] = field(default_factory=list)
    domain: tuple[float, float] = catalog.SCORE_DOMAIN
    ticks: list[float] = field(default_factory=list)
    measure_label: str = ""
    x_label: str = ""
    y_label: str = ""
    value_axis_title: str = ""

    @property
    def is_proportion(self) -> bool:
        return catalog.is_proportion(self.state.measure)


def derive_view(
    records: pd.DataFrame,
    state: DashboardState,
    *,
    aggregate_fn: AggregateFn = aggregate,
    gradient_steps: int = GRADIENT_STEPS,
) -> ViewModel:
    """Aggregate records for state and color every cell, bar and legend step.

    Pure: records and state are not modified. Pass an AggregateCache as
    aggregate_fn to memoize on (measure, x_field, y_field).
    """
    result = aggregate_fn(records, state.measure, state.x_field, state.y_field)
    scale = active_scale(state)
    domain = catalog.measure_domain(state.measure)
    return ViewModel(
        state=state,
        aggregate=result,
        cell_colors=[color_at(scale, c.value) for c in result.grid],
        x_bar_colors=[color_at(scale, b.value) for b in result.x_marginal],
        y_bar_colors=[color_at(scale, b.value) for b in result.y_marginal],
        gradient=sample_gradient(scale, domain, gradient_steps),
        domain=domain,
        ticks=catalog.axis_ticks(state.measure),
        measure_label=catalog.measure_label(state.measure),
        x_label=catalog.demographic_label(state.x_field),
        y_label=catalog.demographic_label(state.y_field),
        value_axis_title=catalog.value_axis_title(state.measure),
    )
