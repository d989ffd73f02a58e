"""Default classes and props for the NiceGUI elements used by the dashboard."""

from __future__ import annotations

from nicegui import ui

from gaidviz.utils.logging import get_logger

logger = get_logger(__name__)

# tailwind text size -> quasar size
_QUASAR_SIZES = {
    "text-xs": "xs",
    "text-sm": "sm",
    "text-base": "md",
    "text-lg": "lg",
}


def setUpGuiDefaults(text_size: str = "text-base") -> None:
    """Set up default classes and props for labels, buttons, selects and inputs.

    Args:
        text_size: Tailwind CSS text size class ('text-xs', 'text-sm',
                   'text-base' or 'text-lg').
    """
    text_size_quasar = _QUASAR_SIZES[text_size]
    logger.debug(f'using classes text_size:"{text_size}" text_size_quasar:{text_size_quasar}')

    ui.label.default_classes(f"{text_size} select-text")
    ui.button.default_classes(text_size)
    ui.button.default_props("dense no-caps")
    ui.select.default_classes(text_size)
    ui.select.default_props("dense outlined")
    ui.number.default_classes(text_size)
    ui.number.default_props("dense outlined")
    ui.color_input.default_classes(text_size)
    ui.color_input.default_props("dense outlined")
