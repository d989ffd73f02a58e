"""Tests for ColorScaleEditor (mocked UI)."""

from __future__ import annotations

from unittest.mock import MagicMock

from gaidviz.core.colormap import DEFAULT_PROPORTION_SCALE, DEFAULT_SCORE_SCALE, ColorPoint
from gaidviz.core.view_state import ScaleKind
from gaidviz.dashboard.color_scale_editor import ColorScaleEditor, input_bounds


def _editor(received: list) -> ColorScaleEditor:
    return ColorScaleEditor(
        on_value_change=lambda i, v: received.append(("value", i, v)),
        on_color_change=lambda i, c: received.append(("color", i, c)),
        on_reset=lambda: received.append(("reset",)),
    )


def test_input_bounds() -> None:
    assert input_bounds(ScaleKind.SCORE) == (1.0, 5.0, 0.1)
    assert input_bounds(ScaleKind.PROPORTION) == (0.0, 100.0, 5.0)


def test_value_input_emits_index_and_float() -> None:
    received: list = []
    editor = _editor(received)

    editor._on_value_input(2, 3.5)

    assert received == [("value", 2, 3.5)]
    assert isinstance(received[0][2], float)


def test_cleared_value_input_is_ignored() -> None:
    received: list = []
    editor = _editor(received)
    editor._on_value_input(0, None)
    assert received == []


def test_color_input_forwards_complete_hex_only() -> None:
    received: list = []
    editor = _editor(received)

    editor._on_color_input(1, "#12")
    editor._on_color_input(1, "")
    editor._on_color_input(1, "rgb(1,2,3)")
    editor._on_color_input(1, "#A0B1C2")

    assert received == [("color", 1, "#A0B1C2")]


def test_programmatic_updates_do_not_emit() -> None:
    received: list = []
    editor = _editor(received)
    editor._updating_programmatically = True

    editor._on_value_input(0, 2.0)
    editor._on_color_input(0, "#000000")

    assert received == []


def test_reset_click_calls_back() -> None:
    received: list = []
    editor = _editor(received)
    editor._on_reset_click()
    assert received == [("reset",)]


def test_set_scale_switches_kind() -> None:
    editor = _editor([])
    editor._description_label = MagicMock()

    editor._set_scale_impl(ScaleKind.PROPORTION, DEFAULT_PROPORTION_SCALE, ["#edf8fb", "#006d2c"])

    assert editor.kind is ScaleKind.PROPORTION
    assert editor._points == DEFAULT_PROPORTION_SCALE
    assert editor._gradient == ["#edf8fb", "#006d2c"]
    assert "0-100%" in editor._description_label.text


def test_set_scale_same_shape_syncs_existing_inputs() -> None:
    """Same kind and point count: inputs are updated in place, without emitting."""
    received: list = []
    editor = _editor(received)
    editor._kind = ScaleKind.SCORE
    editor._points = DEFAULT_SCORE_SCALE
    editor._value_inputs = [MagicMock() for _ in DEFAULT_SCORE_SCALE]
    editor._color_inputs = [MagicMock() for _ in DEFAULT_SCORE_SCALE]

    points = list(DEFAULT_SCORE_SCALE)
    points[1] = ColorPoint(2.5, "#000000")
    editor._set_scale_impl(ScaleKind.SCORE, points, [])

    assert editor._value_inputs[1].value == 2.5
    assert editor._color_inputs[1].value == "#000000"
    assert editor._value_inputs[3].value == 5.0
    assert editor._updating_programmatically is False
    assert received == []
