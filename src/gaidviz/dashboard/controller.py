"""Dashboard controller.

Provides DashboardController, the entry point for building the survey
dashboard UI with NiceGUI: control panel, color scale editor, marginal bar
charts and the bubble grid. It owns the record table and the current
DashboardState; every transition re-derives the view and pushes new figure
dicts to the plots.
"""

from __future__ import annotations

from typing import Optional

import pandas as pd
from nicegui import ui

from gaidviz.core.aggregator import AggregateCache
from gaidviz.core.view_state import (
    DashboardState,
    ViewModel,
    active_scale,
    active_scale_kind,
    derive_view,
)
from gaidviz.dashboard import figures
from gaidviz.dashboard.color_scale_editor import ColorScaleEditor
from gaidviz.dashboard.control_panel import DashboardControlPanel
from gaidviz.dashboard.theme import ThemeMode, resolve_theme
from gaidviz.utils.logging import get_logger

logger = get_logger(__name__)


class DashboardController:
    """Interactive dashboard over one immutable survey record table.

    **Public API:**

    - **__init__(records, ...)**: records table and optional initial state/theme.
    - **build(container=None)**: build the full UI. Call once to render.
    - **state** / **view**: current selections and the last derived view.
    """

    def __init__(
        self,
        records: pd.DataFrame,
        *,
        state: Optional[DashboardState] = None,
        theme: ThemeMode | str = ThemeMode.LIGHT,
    ) -> None:
        self.records = records
        self.state: DashboardState = state if state is not None else DashboardState()
        self.theme = resolve_theme(theme)
        self._aggregate = AggregateCache(records)
        self.view: ViewModel = derive_view(self.records, self.state, aggregate_fn=self._aggregate)

        self._control_panel: Optional[DashboardControlPanel] = None
        self._color_editor: Optional[ColorScaleEditor] = None
        self._color_settings_container: Optional[ui.column] = None
        self._x_plot: Optional[ui.plotly] = None
        self._y_plot: Optional[ui.plotly] = None
        self._grid_plot: Optional[ui.plotly] = None
        self._legend_plot: Optional[ui.plotly] = None
        self._legend_label: Optional[ui.label] = None

    # ----------------------------
    # UI
    # ----------------------------

    def build(self, *, container: Optional[ui.element] = None) -> None:
        """Build the dashboard UI.

        Args:
            container: Optional NiceGUI container to build into. If None, widgets
                are created at the current top level.
        """
        def _build_content():
            self._control_panel = DashboardControlPanel(
                initial_state=self.state,
                on_measure_change=self._on_measure_change,
                on_x_field_change=self._on_x_field_change,
                on_y_field_change=self._on_y_field_change,
                on_toggle_color_settings=self._on_toggle_color_settings,
            )
            self._control_panel.build()

            self._color_settings_container = ui.column().classes("w-full")
            with self._color_settings_container:
                self._color_editor = ColorScaleEditor(
                    on_value_change=self._on_point_value_change,
                    on_color_change=self._on_point_color_change,
                    on_reset=self._on_reset_scale,
                )
                self._color_editor.render()

            with ui.row().classes("w-full items-center gap-2"):
                self._legend_label = ui.label(self.view.measure_label).classes("text-sm font-semibold")
                self._legend_plot = ui.plotly(
                    figures.view_gradient_figure(self.view, theme=self.theme)
                ).classes("flex-1 h-16")

            # marginal bars above the grid, y marginal on its right
            with ui.grid(columns="4fr 1fr").classes("w-full gap-0"):
                self._x_plot = ui.plotly(figures.x_marginal_figure(self.view, theme=self.theme)).classes("w-full h-60")
                ui.element("div")
                self._grid_plot = ui.plotly(figures.grid_figure(self.view, theme=self.theme)).classes("w-full h-[450px]")
                self._y_plot = ui.plotly(figures.y_marginal_figure(self.view, theme=self.theme)).classes("w-full h-[450px]")

            self._sync_widgets()

        if container is not None:
            with container:
                _build_content()
        else:
            _build_content()

    # ----------------------------
    # Transitions
    # ----------------------------

    def set_state(self, state: DashboardState) -> None:
        """Replace the state, re-derive the view and refresh all widgets."""
        self.state = state
        self.view = derive_view(self.records, self.state, aggregate_fn=self._aggregate)
        logger.info(
            f"state changed: measure={state.measure}, x={state.x_field}, y={state.y_field}, "
            f"cells={len(self.view.aggregate.grid)}"
        )
        self._sync_widgets()
        self._replot()

    def _on_measure_change(self, measure: str) -> None:
        self.set_state(self.state.with_measure(measure))

    def _on_x_field_change(self, x_field: str) -> None:
        self.set_state(self.state.with_x_field(x_field))

    def _on_y_field_change(self, y_field: str) -> None:
        self.set_state(self.state.with_y_field(y_field))

    def _on_toggle_color_settings(self) -> None:
        self.set_state(self.state.with_color_settings_shown(not self.state.show_color_settings))

    def _on_point_value_change(self, index: int, value: float) -> None:
        self.set_state(self.state.with_point_value(active_scale_kind(self.state), index, value))

    def _on_point_color_change(self, index: int, color: str) -> None:
        self.set_state(self.state.with_point_color(active_scale_kind(self.state), index, color))

    def _on_reset_scale(self) -> None:
        self.set_state(self.state.reset_scale(active_scale_kind(self.state)))

    # ----------------------------
    # Rendering
    # ----------------------------

    def _sync_widgets(self) -> None:
        if self._control_panel is not None:
            self._control_panel.bind_state(self.state)
        if self._color_settings_container is not None:
            self._color_settings_container.set_visibility(self.state.show_color_settings)
        if self._color_editor is not None:
            self._color_editor.set_scale(active_scale_kind(self.state), active_scale(self.state), self.view.gradient)
        if self._legend_label is not None:
            self._legend_label.text = self.view.measure_label

    def _replot(self) -> None:
        view = self.view
        updates = (
            (self._x_plot, figures.x_marginal_figure),
            (self._y_plot, figures.y_marginal_figure),
            (self._grid_plot, figures.grid_figure),
            (self._legend_plot, figures.view_gradient_figure),
        )
        for plot, make_figure in updates:
            if plot is None:
                continue
            plot.update_figure(make_figure(view, theme=self.theme))
