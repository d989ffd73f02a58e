"""
Two-way grouping of survey records.

aggregate() turns the respondent table into everything the dashboard plots:

  1. Ordered category lists for the x and y demographic fields.
  2. A grid with one cell per (x category, y category) pair, x outer / y inner.
  3. One marginal bar per x category and per y category.

Every cell and bar carries the mean of the present measure values and how many
values contributed. Proportion (feeling) measures are 0/1 indicators, so their
mean is rescaled to percent. Groups without any present value report
value=0, count=0 and are never dropped, so the grid always has
len(x_categories) * len(y_categories) cells in category-list order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Union

import numpy as np
import pandas as pd

from gaidviz.core import catalog
from gaidviz.utils.logging import get_logger

logger = get_logger(__name__)

Records = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]
UnitConverter = Callable[[pd.Series], pd.Series]


@dataclass(frozen=True)
class AggregateCell:
    """Statistic for one (x category, y category) combination."""

    x: str
    y: str
    value: float
    count: int
    is_proportion: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "value": self.value,
            "count": self.count,
            "is_proportion": self.is_proportion,
        }


@dataclass(frozen=True)
class MarginalBar:
    """Statistic for one category of a single demographic field."""

    category: str
    value: float
    count: int
    is_proportion: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "value": self.value,
            "count": self.count,
            "is_proportion": self.is_proportion,
        }


@dataclass(frozen=True)
class AggregateResult:
    """Output of aggregate(); grid order matches the category lists."""

    measure: str
    x_field: str
    y_field: str
    x_categories: list[str] = field(default_factory=list)
    y_categories: list[str] = field(default_factory=list)
    grid: list[AggregateCell] = field(default_factory=list)
    x_marginal: list[MarginalBar] = field(default_factory=list)
    y_marginal: list[MarginalBar] = field(default_factory=list)

    @property
    def is_proportion(self) -> bool:
        return catalog.is_proportion(self.measure)

    def grid_frame(self) -> pd.DataFrame:
        """Grid as a DataFrame with columns x, y, value, count."""
        return pd.DataFrame(
            [(c.x, c.y, c.value, c.count) for c in self.grid],
            columns=["x", "y", "value", "count"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "measure": self.measure,
            "x_field": self.x_field,
            "y_field": self.y_field,
            "x_categories": list(self.x_categories),
            "y_categories": list(self.y_categories),
            "grid": [c.to_dict() for c in self.grid],
            "x_marginal": [b.to_dict() for b in self.x_marginal],
            "y_marginal": [b.to_dict() for b in self.y_marginal],
        }


# -----------------------------------------------------------------------------
# Unit conversion
# -----------------------------------------------------------------------------


def _identity(means: pd.Series) -> pd.Series:
    return means


def _to_percent(means: pd.Series) -> pd.Series:
    return means * 100.0


def unit_converter(measure: str) -> UnitConverter:
    """Conversion applied to group means: x100 for proportion measures, identity otherwise."""
    return _to_percent if catalog.is_proportion(measure) else _identity


# -----------------------------------------------------------------------------
# Categories
# -----------------------------------------------------------------------------


def _as_frame(records: Records) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        return records
    return pd.DataFrame(list(records))


def _category_series(df: pd.DataFrame, field_name: str) -> pd.Series:
    """Grouping column as strings, missing values kept as NaN."""
    if field_name not in df.columns:
        return pd.Series(np.nan, index=df.index, dtype=object)
    s = df[field_name]
    return s.where(s.isna(), s.astype(str))


def _measure_series(df: pd.DataFrame, measure: str) -> pd.Series:
    """Measure column as float; non-numeric and missing values become NaN."""
    if measure not in df.columns:
        return pd.Series(np.nan, index=df.index, dtype=float)
    return pd.to_numeric(df[measure], errors="coerce")


def order_categories(field_name: str, values: Iterable[str]) -> list[str]:
    """Order distinct category values for field_name.

    Values in the field's canonical order come first, in that order; anything
    else follows lexicographically. Fields without a canonical order are
    sorted lexicographically.
    """
    distinct = set(values)
    canonical = catalog.CATEGORY_ORDERS.get(field_name, ())
    head = [v for v in canonical if v in distinct]
    tail = sorted(v for v in distinct if v not in canonical)
    return head + tail


def ordered_categories(records: Records, field_name: str) -> list[str]:
    """Distinct non-missing values of field_name present in records, in display order."""
    catalog.validate_demographic(field_name)
    df = _as_frame(records)
    return order_categories(field_name, _category_series(df, field_name).dropna().unique())


# -----------------------------------------------------------------------------
# Grouped statistics
# -----------------------------------------------------------------------------


def _group_stats(tmp: pd.DataFrame, keys: list[str], index: pd.Index, convert: UnitConverter) -> pd.DataFrame:
    """Mean/count of present tmp["v"] values per keys, laid out on index and zero-filled."""
    stats = pd.DataFrame({"mean": 0.0, "count": 0}, index=index)
    present = tmp.dropna(subset=keys + ["v"])
    if len(index) == 0 or present.empty:
        return stats
    grp = present.groupby(keys, sort=False)["v"]
    counts = grp.count().reindex(index).fillna(0).astype(int)
    means = convert(grp.mean()).reindex(index)
    stats["count"] = counts
    stats["mean"] = means.where(counts > 0, 0.0)
    return stats


def _marginal(
    tmp: pd.DataFrame,
    key: str,
    categories: list[str],
    convert: UnitConverter,
    proportion: bool,
) -> list[MarginalBar]:
    stats = _group_stats(tmp, [key], pd.Index(categories, name=key), convert)
    return [
        MarginalBar(category=cat, value=float(mean), count=int(count), is_proportion=proportion)
        for cat, mean, count in zip(categories, stats["mean"], stats["count"])
    ]


def aggregate(
    records: Records,
    measure_field: str,
    x_field: str,
    y_field: str,
) -> AggregateResult:
    """Group records by x_field and y_field and compute the measure statistic.

    Args:
        records: Respondent table (DataFrame, or iterable of flat dicts).
        measure_field: Catalog measure to average.
        x_field: Catalog demographic field for the x axis.
        y_field: Catalog demographic field for the y axis; may equal x_field.

    Returns:
        AggregateResult with category lists, grid and both marginals.

    Raises:
        InvalidArgument: If any field is not in the catalog.
    """
    catalog.validate_measure(measure_field)
    catalog.validate_demographic(x_field)
    catalog.validate_demographic(y_field)

    df = _as_frame(records)
    proportion = catalog.is_proportion(measure_field)
    convert = unit_converter(measure_field)

    if df.empty:
        return AggregateResult(measure=measure_field, x_field=x_field, y_field=y_field)

    # one row per record: [x, y, v]; x and y are separate columns even when x_field == y_field
    tmp = pd.DataFrame({
        "x": _category_series(df, x_field),
        "y": _category_series(df, y_field),
        "v": _measure_series(df, measure_field),
    })

    x_categories = order_categories(x_field, tmp["x"].dropna().unique())
    y_categories = order_categories(y_field, tmp["y"].dropna().unique())

    grid_index = pd.MultiIndex.from_product([x_categories, y_categories], names=["x", "y"])
    grid_stats = _group_stats(tmp, ["x", "y"], grid_index, convert)
    grid = [
        AggregateCell(
            x=xc,
            y=yc,
            value=float(mean),
            count=int(count),
            is_proportion=proportion,
        )
        for (xc, yc), mean, count in zip(grid_index, grid_stats["mean"], grid_stats["count"])
    ]

    result = AggregateResult(
        measure=measure_field,
        x_field=x_field,
        y_field=y_field,
        x_categories=x_categories,
        y_categories=y_categories,
        grid=grid,
        x_marginal=_marginal(tmp, "x", x_categories, convert, proportion),
        y_marginal=_marginal(tmp, "y", y_categories, convert, proportion),
    )
    logger.debug(
        "aggregate: measure=%s x=%s y=%s records=%d cells=%d",
        measure_field, x_field, y_field, len(df), len(grid),
    )
    return result


class AggregateCache:
    """Memoizes aggregate() results for one immutable record table.

    Keyed on (measure, x_field, y_field). Build a new cache when the records change.
    """

    def __init__(self, records: Records) -> None:
        self.records = _as_frame(records)
        self._results: dict[tuple[str, str, str], AggregateResult] = {}

    def __call__(self, records: Records, measure_field: str, x_field: str, y_field: str) -> AggregateResult:
        """Same signature as aggregate(); records must be the cached table."""
        if records is not self.records:
            return aggregate(records, measure_field, x_field, y_field)
        key = (measure_field, x_field, y_field)
        result = self._results.get(key)
        if result is None:
            result = aggregate(self.records, measure_field, x_field, y_field)
            self._results[key] = result
        return result

    def clear(self) -> None:
        self._results.clear()
