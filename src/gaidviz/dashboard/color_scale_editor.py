"""Color scale editor widget.

One row per control point (value input + color picker), a gradient preview
strip and a reset button. Edits are forwarded through callbacks; the widget
never changes the scale itself. The controller calls set_scale() with the
updated points after every transition.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from nicegui import ui

from gaidviz.core import catalog
from gaidviz.core.colormap import ColorPoint, parse_hex
from gaidviz.core.errors import InvalidArgument
from gaidviz.core.view_state import ScaleKind
from gaidviz.utils.logging import get_logger

logger = get_logger(__name__)

OnValueChange = Callable[[int, float], None]
OnColorChange = Callable[[int, str], None]
OnReset = Callable[[], None]

_DESCRIPTIONS = {
    ScaleKind.SCORE: "Set points on the scale (1-5) to customize the visualization.",
    ScaleKind.PROPORTION: "Set points on the percentage scale (0-100%) to customize the feeling visualization.",
}


def _safe_call(func: Callable, *args, **kwargs) -> None:
    """Call func, ignoring only 'client deleted' RuntimeErrors."""
    try:
        func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise


def input_bounds(kind: ScaleKind) -> tuple[float, float, float]:
    """(min, max, step) for the value inputs of a scale."""
    if kind is ScaleKind.PROPORTION:
        lo, hi = catalog.PROPORTION_DOMAIN
        return lo, hi, 5.0
    lo, hi = catalog.SCORE_DOMAIN
    return lo, hi, 0.1


class ColorScaleEditor:
    """Editable list of color control points with a live gradient preview."""

    def __init__(
        self,
        *,
        on_value_change: OnValueChange,
        on_color_change: OnColorChange,
        on_reset: OnReset,
    ) -> None:
        self._on_value_change = on_value_change
        self._on_color_change = on_color_change
        self._on_reset = on_reset

        self._kind: ScaleKind = ScaleKind.SCORE
        self._points: tuple[ColorPoint, ...] = ()
        self._gradient: list[str] = []
        self._updating_programmatically = False

        self._description_label: Optional[ui.label] = None
        self._rows_container: Optional[ui.column] = None
        self._preview_row: Optional[ui.row] = None
        self._value_inputs: list[ui.number] = []
        self._color_inputs: list[ui.color_input] = []

    @property
    def kind(self) -> ScaleKind:
        return self._kind

    def render(self) -> None:
        """Create the editor inside the current container."""
        self._value_inputs = []
        self._color_inputs = []
        with ui.card().classes("w-full bg-gray-100"):
            ui.label("Color Scale Customization").classes("text-lg font-medium")
            self._description_label = ui.label(_DESCRIPTIONS[self._kind]).classes("text-sm text-gray-600")
            self._rows_container = ui.column().classes("w-full gap-2")
            with ui.row().classes("w-full items-center justify-between"):
                with ui.row().classes("items-center gap-2"):
                    self._preview_row = ui.row().classes("w-48 h-6 gap-0 rounded-md overflow-hidden")
                    ui.label("Preview").classes("text-sm")
                ui.button("Reset to Default", on_click=self._on_reset_click).props("color=grey")
        self._rebuild_rows()
        self._update_preview()

    def set_scale(self, kind: ScaleKind, points: Sequence[ColorPoint], gradient: Sequence[str]) -> None:
        """Show points of the given scale and its sampled gradient."""
        _safe_call(self._set_scale_impl, kind, points, gradient)

    def _set_scale_impl(self, kind: ScaleKind, points: Sequence[ColorPoint], gradient: Sequence[str]) -> None:
        points = tuple(points)
        structure_changed = kind is not self._kind or len(points) != len(self._points)
        self._kind = kind
        self._points = points
        self._gradient = list(gradient)
        if self._description_label is not None:
            self._description_label.text = _DESCRIPTIONS[kind]
        if structure_changed:
            self._rebuild_rows()
        else:
            self._sync_inputs()
        self._update_preview()

    def _rebuild_rows(self) -> None:
        if self._rows_container is None:
            return
        lo, hi, step = input_bounds(self._kind)
        self._rows_container.clear()
        self._value_inputs = []
        self._color_inputs = []
        with self._rows_container:
            for i, point in enumerate(self._points):
                with ui.row().classes("w-full items-center gap-4"):
                    value_input = ui.number(
                        label=f"Point {i + 1} Value:",
                        value=point.value,
                        min=lo,
                        max=hi,
                        step=step,
                        on_change=lambda e, i=i: self._on_value_input(i, e.value),
                    ).classes("flex-1")
                    color_input = ui.color_input(
                        label="Color:",
                        value=point.color,
                        on_change=lambda e, i=i: self._on_color_input(i, e.value),
                    ).classes("flex-1")
                self._value_inputs.append(value_input)
                self._color_inputs.append(color_input)

    def _sync_inputs(self) -> None:
        """Push current point values into existing inputs without re-emitting."""
        self._updating_programmatically = True
        try:
            for point, value_input, color_input in zip(self._points, self._value_inputs, self._color_inputs):
                if value_input.value != point.value:
                    value_input.value = point.value
                if color_input.value != point.color:
                    color_input.value = point.color
        finally:
            self._updating_programmatically = False

    def _update_preview(self) -> None:
        if self._preview_row is None:
            return
        self._preview_row.clear()
        with self._preview_row:
            for color in self._gradient:
                ui.element("div").classes("flex-1 h-full").style(f"background-color: {color}")

    def _on_value_input(self, index: int, value: Optional[float]) -> None:
        if self._updating_programmatically:
            return
        if value is None:
            # cleared input; keep the previous value
            return
        self._on_value_change(index, float(value))

    def _on_color_input(self, index: int, color: Optional[str]) -> None:
        if self._updating_programmatically or not color:
            return
        try:
            parse_hex(color)
        except InvalidArgument:
            logger.debug(f"Ignoring incomplete color {color!r} for point {index}")
            return
        self._on_color_change(index, color)

    def _on_reset_click(self) -> None:
        logger.info(f"Resetting {self._kind.value} color scale to default")
        self._on_reset()
