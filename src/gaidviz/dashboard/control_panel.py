"""Control panel for the survey dashboard.

Builds and owns the selection widgets (measure, x/y demographic) and the
color settings toggle. Provides state->widget sync (bind_state); widget
changes are reported through callbacks.
"""

from __future__ import annotations

from typing import Callable, Optional

from nicegui import ui

from gaidviz.core import catalog
from gaidviz.core.view_state import DashboardState
from gaidviz.utils.logging import get_logger

logger = get_logger(__name__)

SHOW_COLOR_SETTINGS_TEXT = "Customize Color Scale"
HIDE_COLOR_SETTINGS_TEXT = "Hide Color Settings"


def measure_select_options() -> dict[str, str]:
    """{field: label} for every measure, in menu order, labels prefixed by group."""
    return {
        field: f"{group}: {label}"
        for group, fields in catalog.measure_options().items()
        for field, label in fields.items()
    }


def demographic_select_options() -> dict[str, str]:
    return dict(catalog.DEMOGRAPHIC_LABELS)


def toggle_text(shown: bool) -> str:
    return HIDE_COLOR_SETTINGS_TEXT if shown else SHOW_COLOR_SETTINGS_TEXT


class DashboardControlPanel:
    """Measure / demographic selectors and the color settings toggle."""

    def __init__(
        self,
        *,
        initial_state: DashboardState,
        on_measure_change: Callable[[str], None],
        on_x_field_change: Callable[[str], None],
        on_y_field_change: Callable[[str], None],
        on_toggle_color_settings: Callable[[], None],
    ) -> None:
        self._initial_state = initial_state
        self._on_measure_change = on_measure_change
        self._on_x_field_change = on_x_field_change
        self._on_y_field_change = on_y_field_change
        self._on_toggle_color_settings = on_toggle_color_settings
        self._updating_programmatically = False

        # Widget refs (set in build())
        self._measure_select: Optional[ui.select] = None
        self._x_select: Optional[ui.select] = None
        self._y_select: Optional[ui.select] = None
        self._toggle_button: Optional[ui.button] = None

    def build(self) -> None:
        """Build the controls inside the current UI container. Call once."""
        state = self._initial_state
        with ui.row().classes("w-full gap-4 justify-center flex-wrap"):
            self._measure_select = ui.select(
                options=measure_select_options(),
                value=state.measure,
                label="Select Variable to Visualize",
                on_change=lambda e: self._emit(self._on_measure_change, e.value),
            ).classes("w-full max-w-xs")
            self._x_select = ui.select(
                options=demographic_select_options(),
                value=state.x_field,
                label="X-Axis Demographic",
                on_change=lambda e: self._emit(self._on_x_field_change, e.value),
            ).classes("w-full max-w-xs")
            self._y_select = ui.select(
                options=demographic_select_options(),
                value=state.y_field,
                label="Y-Axis Demographic",
                on_change=lambda e: self._emit(self._on_y_field_change, e.value),
            ).classes("w-full max-w-xs")
        with ui.row().classes("w-full justify-center"):
            self._toggle_button = ui.button(
                toggle_text(state.show_color_settings),
                on_click=self._on_toggle_color_settings,
            )

    def bind_state(self, state: DashboardState) -> None:
        """Populate widgets from state without re-emitting change callbacks."""
        self._updating_programmatically = True
        try:
            if self._measure_select is not None:
                self._measure_select.value = state.measure
            if self._x_select is not None:
                self._x_select.value = state.x_field
            if self._y_select is not None:
                self._y_select.value = state.y_field
            if self._toggle_button is not None:
                self._toggle_button.text = toggle_text(state.show_color_settings)
        finally:
            self._updating_programmatically = False

    def _emit(self, callback: Callable[[str], None], value: Optional[str]) -> None:
        if self._updating_programmatically or value is None:
            return
        logger.debug(f"control change: {value!r}")
        callback(str(value))
