"""Tests for DashboardControlPanel (mocked UI)."""

from __future__ import annotations

from unittest.mock import MagicMock

from gaidviz.core.view_state import DashboardState
from gaidviz.dashboard.control_panel import (
    DashboardControlPanel,
    demographic_select_options,
    measure_select_options,
    toggle_text,
)


def _panel(received: list) -> DashboardControlPanel:
    return DashboardControlPanel(
        initial_state=DashboardState(),
        on_measure_change=lambda v: received.append(("measure", v)),
        on_x_field_change=lambda v: received.append(("x", v)),
        on_y_field_change=lambda v: received.append(("y", v)),
        on_toggle_color_settings=lambda: received.append(("toggle",)),
    )


def test_measure_select_options() -> None:
    options = measure_select_options()
    assert len(options) == 20
    assert options["AIAS_mean_pre"] == "AI Attitudes: AI Attitude Score (overall average)"
    assert options["feeling_pre_Idontknow"] == "Feelings about AI: Unsure about feelings"
    assert list(options)[0] == "AIAS_mean_pre"


def test_demographic_select_options() -> None:
    assert demographic_select_options() == {
        "country": "Country",
        "AI_tech": "AI Technology",
        "gender": "Gender",
        "age": "Age Group",
        "education": "Education Level",
    }


def test_toggle_text() -> None:
    assert toggle_text(False) == "Customize Color Scale"
    assert toggle_text(True) == "Hide Color Settings"


def test_emit_forwards_selection() -> None:
    received: list = []
    panel = _panel(received)
    panel._emit(panel._on_x_field_change, "age")
    assert received == [("x", "age")]


def test_emit_ignores_none_and_programmatic() -> None:
    received: list = []
    panel = _panel(received)

    panel._emit(panel._on_measure_change, None)
    panel._updating_programmatically = True
    panel._emit(panel._on_measure_change, "AI_interest_mean")

    assert received == []


def test_bind_state_sets_widgets() -> None:
    received: list = []
    panel = _panel(received)
    panel._measure_select = MagicMock()
    panel._x_select = MagicMock()
    panel._y_select = MagicMock()
    panel._toggle_button = MagicMock()

    state = DashboardState(measure="feeling_pre_angry", x_field="age", y_field="gender", show_color_settings=True)
    panel.bind_state(state)

    assert panel._measure_select.value == "feeling_pre_angry"
    assert panel._x_select.value == "age"
    assert panel._y_select.value == "gender"
    assert panel._toggle_button.text == "Hide Color Settings"
    assert panel._updating_programmatically is False
    assert received == []


def test_bind_state_before_build() -> None:
    panel = _panel([])
    panel.bind_state(DashboardState())
