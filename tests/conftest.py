# tests/conftest.py
"""Shared fixtures for gaidviz tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import pytest


def pytest_configure() -> None:
    # Ensure gaidviz package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def japan_records() -> list[dict]:
    """Two Japanese respondents with different genders and attitude scores."""
    return [
        {"country": "Japan", "gender": "Female", "AIAS_mean_pre": 4},
        {"country": "Japan", "gender": "Male", "AIAS_mean_pre": 2},
    ]


@pytest.fixture
def survey_df() -> pd.DataFrame:
    """Small respondent table covering both measure families and missing values."""
    return pd.DataFrame({
        "country": ["Germany", "Germany", "Japan", "Japan", "India", "India"],
        "AI_tech": ["genAI", "FPT", "genAI", "FPT", "genAI", "FPT"],
        "gender": ["Female", "Male", "Female", "Male", "Male", "Female"],
        "age": ["25-34", ">55", "<25", "35-44", "25-34", "<25"],
        "education": ["Bachelor", "Master and above", "No university degree",
                      "Bachelor", "Master and above", "Bachelor"],
        "AIAS_mean_pre": [3.6, 2.4, 4.0, 2.0, 4.4, None],
        "feeling_pre_hopeful": [1, 0, 1, None, 1, 0],
    })
