"""Unit tests for dataset loading and record validation."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pandas as pd
import pytest
import requests

from gaidviz.core import data_loader
from gaidviz.core.aggregator import aggregate
from gaidviz.core.catalog import ALL_FIELDS
from gaidviz.core.data_loader import load_records, records_from_dicts
from gaidviz.core.errors import DataLoadError
from gaidviz.core.view_state import DashboardState, derive_view


def _write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_records_from_file(tmp_path: Path) -> None:
    path = _write_json(tmp_path / "gaid.json", [
        {"country": "Japan", "gender": "Female", "AIAS_mean_pre": 4},
        {"country": "Japan", "gender": "Male", "AIAS_mean_pre": 2.5},
    ])
    df = load_records(path)

    assert list(df.columns) == list(ALL_FIELDS)
    assert len(df) == 2
    assert list(df["AIAS_mean_pre"]) == [4.0, 2.5]
    assert df["AI_tech"].isna().all()
    assert df["feeling_pre_hopeful"].isna().all()


def test_load_records_accepts_str_path(tmp_path: Path) -> None:
    path = _write_json(tmp_path / "gaid.json", [{"country": "India"}])
    df = load_records(str(path))
    assert list(df["country"]) == ["India"]


def test_load_records_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DataLoadError):
        load_records(tmp_path / "missing.json")


def test_load_records_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("[{not json", encoding="utf-8")
    with pytest.raises(DataLoadError) as exc_info:
        load_records(path)
    assert "not valid JSON" in str(exc_info.value)


def test_load_records_requires_array(tmp_path: Path) -> None:
    path = _write_json(tmp_path / "object.json", {"records": []})
    with pytest.raises(DataLoadError) as exc_info:
        load_records(path)
    assert "array" in str(exc_info.value)


def test_records_from_dicts_drops_unknown_keys() -> None:
    df = records_from_dicts([{"country": "Mexico", "respondent_id": 17, "AIAS_life_pre": 3}])
    assert "respondent_id" not in df.columns
    assert df.loc[0, "AIAS_life_pre"] == 3.0


def test_records_from_dicts_quarantines_malformed_rows() -> None:
    rows = [
        {"country": "Mexico", "AIAS_life_pre": 3},
        "not a record",
        ["also", "not"],
        {"country": "Bolivia", "AIAS_life_pre": "very high"},
        {"country": "Nigeria", "AIAS_life_pre": {"nested": 1}},
        {"country": "Germany", "AIAS_life_pre": "4.5"},
    ]
    df = records_from_dicts(rows)

    assert list(df["country"]) == ["Mexico", "Germany"]
    assert list(df["AIAS_life_pre"]) == [3.0, 4.5]


def test_records_from_dicts_normalizes_values() -> None:
    df = records_from_dicts([
        {"country": 5, "gender": None, "feeling_pre_hopeful": True, "AIAS_mean_pre": ""},
    ])
    assert df.loc[0, "country"] == "5"
    assert df.loc[0, "gender"] is None
    assert df.loc[0, "feeling_pre_hopeful"] == 1.0
    assert pd.isna(df.loc[0, "AIAS_mean_pre"])


def test_records_from_dicts_empty() -> None:
    df = records_from_dicts([])
    assert df.empty
    assert list(df.columns) == list(ALL_FIELDS)


def test_records_from_dicts_column_dtypes() -> None:
    df = records_from_dicts([{"country": "Japan", "AIAS_mean_pre": 3}])
    assert df["country"].dtype == object
    assert df["AIAS_mean_pre"].dtype == float
    assert df["AI_interest_read"].dtype == float


# --- URL sources ---


def _fake_response(*, ok: bool = True, status_code: int = 200, payload=None, text: str = "") -> MagicMock:
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status_code
    resp.text = text
    if isinstance(payload, Exception):
        resp.json.side_effect = payload
    else:
        resp.json.return_value = payload
    return resp


def test_load_records_from_url(monkeypatch: pytest.MonkeyPatch) -> None:
    get = MagicMock(return_value=_fake_response(payload=[{"country": "Japan", "AIAS_mean_pre": 4}]))
    monkeypatch.setattr(data_loader.requests, "get", get)

    df = load_records("https://example.org/gaid_data.json", timeout_seconds=5)

    assert len(df) == 1
    get.assert_called_once_with("https://example.org/gaid_data.json", timeout=5)


def test_load_records_http_error_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        data_loader.requests, "get", MagicMock(return_value=_fake_response(ok=False, status_code=404))
    )
    with pytest.raises(DataLoadError) as exc_info:
        load_records("http://example.org/missing.json")
    assert str(exc_info.value) == "HTTP error! status: 404"


def test_load_records_transport_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        data_loader.requests, "get", MagicMock(side_effect=requests.ConnectionError("refused"))
    )
    with pytest.raises(DataLoadError):
        load_records("http://example.org/gaid_data.json")


def test_load_records_non_json_response(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        data_loader.requests,
        "get",
        MagicMock(return_value=_fake_response(payload=ValueError("bad json"), text="<html>")),
    )
    with pytest.raises(DataLoadError) as exc_info:
        load_records("http://example.org/gaid_data.json")
    assert "<html>" in str(exc_info.value)


def test_bundled_sample_dataset_loads() -> None:
    sample = Path(__file__).resolve().parents[2] / "data" / "gaid_data.json"
    df = load_records(sample)
    assert len(df) == 12
    assert set(df["country"]) == {"Germany", "Japan", "India", "Nigeria", "Mexico", "Bolivia"}


# --- non-finite and out-of-domain measures ---


@pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "1e400"])
def test_load_records_quarantines_non_finite_measures(tmp_path: Path, literal: str) -> None:
    """Overflowing or infinite JSON numbers never reach the aggregator."""
    path = tmp_path / "gaid.json"
    path.write_text(
        "["
        f'{{"country": "Japan", "AI_tech": "genAI", "AIAS_mean_pre": {literal}}},'
        '{"country": "Japan", "AI_tech": "FPT", "AIAS_mean_pre": 3}'
        "]",
        encoding="utf-8",
    )
    df = load_records(path)

    assert list(df["AI_tech"]) == ["FPT"]
    view = derive_view(df, DashboardState())
    assert [c.value for c in view.aggregate.grid] == [3.0]


def test_records_from_dicts_quarantines_non_finite_strings() -> None:
    df = records_from_dicts([
        {"country": "Japan", "AIAS_mean_pre": "inf"},
        {"country": "India", "AIAS_mean_pre": "nan"},
        {"country": "Mexico", "AIAS_mean_pre": "2"},
    ])
    assert list(df["country"]) == ["Mexico"]


def test_records_from_dicts_nan_float_is_missing() -> None:
    df = records_from_dicts([{"country": "Japan", "AIAS_mean_pre": float("nan")}])
    assert len(df) == 1
    assert pd.isna(df.loc[0, "AIAS_mean_pre"])


@pytest.mark.parametrize("value", [0, 0.5, 5.01, 42, -1])
def test_records_from_dicts_quarantines_scores_outside_domain(value) -> None:
    df = records_from_dicts([
        {"country": "Japan", "AI_interest_read": value},
        {"country": "India", "AI_interest_read": 5},
    ])
    assert list(df["country"]) == ["India"]


@pytest.mark.parametrize("value", [7, 0.5, -1, 2])
def test_records_from_dicts_quarantines_non_indicator_feelings(value) -> None:
    df = records_from_dicts([
        {"country": "Japan", "feeling_pre_hopeful": value},
        {"country": "India", "feeling_pre_hopeful": 0},
        {"country": "Mexico", "feeling_pre_hopeful": "1"},
    ])
    assert list(df["country"]) == ["India", "Mexico"]


def test_loaded_aggregates_stay_in_domain(tmp_path: Path) -> None:
    path = _write_json(tmp_path / "gaid.json", [
        {"country": "Japan", "AI_tech": "genAI", "feeling_pre_hopeful": 7, "AIAS_mean_pre": 42},
        {"country": "Japan", "AI_tech": "genAI", "feeling_pre_hopeful": 1, "AIAS_mean_pre": 4},
        {"country": "India", "AI_tech": "FPT", "feeling_pre_hopeful": 0, "AIAS_mean_pre": 1},
    ])
    df = load_records(path)
    assert len(df) == 2

    feelings = aggregate(df, "feeling_pre_hopeful", "country", "AI_tech")
    scores = aggregate(df, "AIAS_mean_pre", "country", "AI_tech")
    for c in feelings.grid:
        assert 0.0 <= c.value <= 100.0
    for c in scores.grid:
        if c.count:
            assert 1.0 <= c.value <= 5.0
