"""Survey dataset loading and shape validation.

The dataset is a JSON array of flat objects keyed by catalog field name, read
once at startup from a local file or an http(s) URL. Anything that is not a
readable JSON array is a DataLoadError; there is no retry and no partial
fallback.

Records are validated at this boundary so that the aggregator only ever sees
catalog columns:
- non-object entries are quarantined (dropped, logged)
- unknown keys are dropped
- missing catalog fields become missing values
- demographic values are strings
- a record with a non-numeric or non-finite measure value is quarantined
- a record with a score outside [1, 5] or a feeling indicator other than
  0/1 is quarantined
"""

from __future__ import annotations

import json
import math
import os
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

import pandas as pd
import requests
from nicegui import run

from gaidviz.core import catalog
from gaidviz.core.errors import DataLoadError
from gaidviz.utils.logging import get_logger

logger = get_logger(__name__)

Source = Union[str, "os.PathLike[str]"]

DEFAULT_TIMEOUT_SECONDS = 30


def _is_url(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _fetch_url(url: str, timeout_seconds: float) -> Any:
    try:
        resp = requests.get(url, timeout=timeout_seconds)
    except requests.RequestException as exc:
        raise DataLoadError(f"HTTP error while fetching {url}: {exc}") from exc

    if not resp.ok:
        raise DataLoadError(f"HTTP error! status: {resp.status_code}")

    try:
        return resp.json()
    except ValueError as exc:
        preview = (resp.text or "")[:200]
        raise DataLoadError(f"Non-JSON response from {url}. Preview: {preview}") from exc


def _read_file(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataLoadError(f"Cannot read {path}: {exc}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"{path} is not valid JSON: {exc}") from exc


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _clean_measure(value: Any) -> Optional[float]:
    """Return value as a finite float, None if missing; raise ValueError otherwise."""
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        number = float(value)
    else:
        raise ValueError(f"not a number: {value!r}")
    if not math.isfinite(number):
        raise ValueError(f"not finite: {value!r}")
    return number


def _check_domain(field: str, value: Optional[float]) -> None:
    """Raise ValueError if value lies outside the per-record domain of field."""
    if value is None:
        return
    if catalog.is_proportion(field):
        if value not in (0.0, 1.0):
            raise ValueError(f"indicator must be 0 or 1, got {value!r}")
        return
    lo, hi = catalog.SCORE_DOMAIN
    if not lo <= value <= hi:
        raise ValueError(f"score {value!r} outside [{lo:g}, {hi:g}]")


def _clean_record(row: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for field in catalog.DEMOGRAPHIC_FIELDS:
        v = row.get(field)
        out[field] = None if _is_missing(v) else str(v)
    for field in catalog.MEASURE_FIELDS:
        try:
            value = _clean_measure(row.get(field))
            _check_domain(field, value)
        except ValueError as exc:
            raise ValueError(f"measure {field!r}: {exc}") from exc
        out[field] = value
    return out


def records_from_dicts(rows: Iterable[Any]) -> pd.DataFrame:
    """Validate raw rows and return the respondent table.

    Returns:
        DataFrame with exactly the catalog columns (demographics as object,
        measures as float), one row per accepted record.
    """
    clean: list[dict[str, Any]] = []
    n_quarantined = 0
    unknown_keys: set[str] = set()
    for i, row in enumerate(rows):
        if not isinstance(row, Mapping):
            logger.warning(f"Record {i} is {type(row).__name__}, not an object; skipping")
            n_quarantined += 1
            continue
        unknown_keys.update(k for k in row.keys() if k not in catalog.ALL_FIELDS)
        try:
            clean.append(_clean_record(row))
        except ValueError as exc:
            logger.warning(f"Record {i} quarantined: {exc}")
            n_quarantined += 1

    if unknown_keys:
        logger.debug(f"Ignoring unknown record keys: {sorted(unknown_keys)}")
    if n_quarantined:
        logger.warning(f"Quarantined {n_quarantined} malformed record(s)")

    df = pd.DataFrame(clean, columns=list(catalog.ALL_FIELDS))
    for field in catalog.DEMOGRAPHIC_FIELDS:
        df[field] = df[field].astype(object)
    for field in catalog.MEASURE_FIELDS:
        df[field] = pd.to_numeric(df[field], errors="coerce").astype(float)
    return df


def load_records(source: Source, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> pd.DataFrame:
    """Load the survey dataset from a local JSON file or an http(s) URL.

    Args:
        source: Path or URL of a JSON array of record objects.
        timeout_seconds: HTTP timeout (URLs only).

    Returns:
        Validated respondent DataFrame (see records_from_dicts()).

    Raises:
        DataLoadError: On transport failure, non-success HTTP status, unreadable
            file, invalid JSON, or a top-level value that is not an array.
    """
    if _is_url(source):
        parsed = _fetch_url(str(source), timeout_seconds)
    else:
        parsed = _read_file(Path(source).expanduser())

    if not isinstance(parsed, list):
        raise DataLoadError(f"Expected a JSON array of records, got {type(parsed).__name__}")

    df = records_from_dicts(parsed)
    logger.info(f"Loaded {len(df)} record(s) from {source}")
    return df


async def load_records_async(source: Source, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> pd.DataFrame:
    """Run load_records() off the event loop (NiceGUI io_bound)."""
    return await run.io_bound(load_records, source, timeout_seconds=timeout_seconds)
