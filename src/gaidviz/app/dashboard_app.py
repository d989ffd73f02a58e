"""GAID survey dashboard: standalone NiceGUI application.

Runs in web (default) or native mode via env vars. Uses @ui.page("/") pattern.

Run:
    python -m gaidviz.app.dashboard_app

Env vars:
    GAIDVIZ_DATA: path or http(s) URL of the dataset JSON
        (default <project root>/data/gaid_data.json)
    GAIDVIZ_GUI_NATIVE: 1/0 (default 0)
    GAIDVIZ_GUI_RELOAD: 1/0 (default 0)
    GAIDVIZ_LOG_LEVEL: logging level (default INFO)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default find_open_port native, 8080 web)
"""

from __future__ import annotations

import os
import multiprocessing as mp
from multiprocessing import freeze_support
from pathlib import Path

import pandas as pd
from nicegui import ui

from gaidviz.core.data_loader import load_records_async
from gaidviz.core.errors import DataLoadError
from gaidviz.dashboard.controller import DashboardController
from gaidviz.utils.gui_defaults import setUpGuiDefaults
from gaidviz.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

TITLE = "Global AI Dialogues (GAID) Survey Dashboard"
INTRO = (
    "Explore survey results from workshops on generative AI (genAI) and Facial Processing "
    "Technology (FPT) across six countries: Germany, Japan, India, Nigeria, Mexico, and Bolivia"
)


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


_records_cache: dict[str, pd.DataFrame] = {}


async def get_records(source: str) -> pd.DataFrame:
    """Load source once per process; later page visits reuse the same table."""
    records = _records_cache.get(source)
    if records is None:
        records = await load_records_async(source)
        _records_cache[source] = records
    return records


def default_data_source() -> str:
    """GAIDVIZ_DATA, else data/gaid_data.json under the project root."""
    env = os.getenv("GAIDVIZ_DATA")
    if env:
        return env
    # dashboard_app.py -> app -> gaidviz -> src -> project root
    project_root = Path(__file__).resolve().parent.parent.parent.parent
    return str(project_root / "data" / "gaid_data.json")


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
async def home() -> None:
    """Home page: load the dataset once, then build the dashboard or an error message."""
    setUpGuiDefaults("text-sm")
    ui.page_title("GAID Survey Dashboard")

    with ui.column().classes("w-full max-w-6xl mx-auto p-4 gap-4"):
        with ui.row().classes("w-full justify-center items-center gap-2") as loading_row:
            ui.spinner(size="lg")
            ui.label("Loading GAID survey data...")

        await ui.context.client.connected()
        source = default_data_source()
        try:
            records = await get_records(source)
        except DataLoadError as e:
            logger.error("Failed to load %s: %s", source, e)
            loading_row.delete()
            with ui.card().classes("w-full bg-red-100 text-red-700"):
                ui.label("Error!").classes("font-bold")
                ui.label(f"Error loading data: {e}")
            return

        loading_row.delete()
        with ui.card().classes("w-full"):
            ui.label(TITLE).classes("text-2xl font-bold w-full text-center")
            ui.label(INTRO).classes("text-gray-600 w-full text-center")
            main_container = ui.column().classes("w-full gap-4")
        ctrl = DashboardController(records)
        ctrl.build(container=main_container)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the dashboard application.

    Env vars (used when arg is None):
      - GAIDVIZ_GUI_NATIVE: 1/0
      - GAIDVIZ_GUI_RELOAD: 1/0
      - HOST: bind host
      - PORT: bind port
    """
    configure_logging()

    native_bool = _env_bool("GAIDVIZ_GUI_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("GAIDVIZ_GUI_RELOAD", False) if reload is None else reload

    from nicegui import native as native_module
    if native_bool:
        port = _env_int("PORT", native_module.find_open_port())
    else:
        port = _env_int("PORT", 8080)

    default_host = "127.0.0.1" if native_bool else "0.0.0.0"
    host = os.getenv("HOST", default_host)

    logger.info(
        "Starting GAID dashboard: port=%s reload=%s native=%s data=%s",
        port,
        reload,
        native_bool,
        default_data_source(),
    )

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "title": "GAID Survey Dashboard",
    }
    if native_bool:
        run_kwargs["window_size"] = (1200, 900)
    ui.run(**run_kwargs)


if __name__ == "__main__":
    freeze_support()
    current_process = mp.current_process()
    is_main_process = current_process.name == "MainProcess"

    if is_main_process:
        main()
    else:
        logger.debug("Skipping GUI startup in worker process: %s", current_process.name)
