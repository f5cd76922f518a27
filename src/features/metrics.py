"""Reusable metric helpers for analytics tables."""
from __future__ import annotations

import numpy as np
import pandas as pd

TIME_BUCKETS = ["Morning", "Afternoon", "Evening"]
# [0, 12) Morning, [12, 17) Afternoon, [17, 24) Evening
_BUCKET_EDGES = [0, 12, 17, 24]


def _replace_nonfinite(value, fill_value=None):
    if isinstance(value, (pd.DataFrame, pd.Series)):
        value = value.replace([np.inf, -np.inf], np.nan)
        if fill_value is None:
            return value.astype("Float64")
        return value.fillna(fill_value)
    if value is pd.NA or value is None or (np.isscalar(value) and not np.isfinite(value)):
        return pd.NA if fill_value is None else fill_value
    return value


def _as_float(value):
    # Masked (Int64/Float64) arrays keep NaN apart from NA; work on plain floats.
    if isinstance(value, pd.Series):
        return pd.Series(
            value.to_numpy(dtype="float64", na_value=np.nan), index=value.index, name=value.name
        )
    return value


def safe_div(numerator, denominator, fill_value: float | None = None):
    """Divide and mark non-finite results as undefined.

    Zero or missing denominators yield ``<NA>`` (nullable ``Float64``) unless
    ``fill_value`` is given.
    """
    if not isinstance(numerator, (pd.Series, pd.DataFrame)) and not isinstance(
        denominator, (pd.Series, pd.DataFrame)
    ):
        if pd.isna(numerator) or pd.isna(denominator) or denominator == 0:
            return pd.NA if fill_value is None else fill_value
        return numerator / denominator
    numerator = _as_float(numerator)
    denominator = _as_float(denominator)
    with np.errstate(divide="ignore", invalid="ignore"):
        result = numerator / denominator
    return _replace_nonfinite(result, fill_value=fill_value)


def pct(numerator, denominator):
    """Percentage ``numerator / denominator * 100``; undefined when the base is 0."""
    ratio = safe_div(numerator, denominator)
    if ratio is pd.NA:
        return pd.NA
    return ratio * 100


def ensure_period(df: pd.DataFrame, yearmonth_col: str = "year_month", period_col: str = "period") -> pd.DataFrame:
    """Ensure a DATE column (first day of month) derived from year-month string."""
    out = df.copy()
    if yearmonth_col not in out.columns:
        raise KeyError(f"Column '{yearmonth_col}' not found in DataFrame")
    ym = out[yearmonth_col].astype(str).str.slice(0, 7)
    out[period_col] = pd.to_datetime(ym + "-01", errors="coerce")
    return out


def year_month(dates: pd.Series) -> pd.Series:
    """Calendar-month truncation as ``YYYY-MM`` strings."""
    return pd.to_datetime(dates).dt.to_period("M").astype(str)


def growth_pct(
    df: pd.DataFrame,
    *,
    value_col: str,
    order_col: str,
    partition_col: str | None = None,
) -> pd.Series:
    """Percent change against the previous row in ``order_col`` order.

    The first row of each partition has no predecessor and is undefined, as is
    any row whose predecessor is zero.
    """
    ordered = df.sort_values(
        [partition_col, order_col] if partition_col else [order_col], kind="mergesort"
    )
    if partition_col:
        previous = ordered.groupby(partition_col, sort=False)[value_col].shift(1)
    else:
        previous = ordered[value_col].shift(1)
    growth = pct(ordered[value_col] - previous, previous)
    return growth.reindex(df.index)


def sale_hour(times: pd.Series) -> pd.Series:
    """Hour of day from ``HH:MM[:SS]`` values; unparseable entries become ``<NA>``."""
    parts = times.astype(str).str.extract(r"(?:^|[\sT])(\d{1,2}):(\d{2})")
    hour = pd.to_numeric(parts[0], errors="coerce")
    minute = pd.to_numeric(parts[1], errors="coerce")
    valid = hour.between(0, 23) & minute.between(0, 59)
    return hour.where(valid).astype("Int64")


def time_bucket(times: pd.Series) -> pd.Series:
    """Morning before 12:00, Afternoon until 16:59, Evening from 17:00."""
    hour = sale_hour(times).astype("float64")
    return pd.cut(hour, bins=_BUCKET_EDGES, labels=TIME_BUCKETS, right=False)


def ntile(values: pd.Series, n: int = 5, *, tiebreak: pd.Series | None = None) -> pd.Series:
    """Split rows into ``n`` ordered buckets numbered 1..n (SQL ``NTILE``).

    Rows are ordered ascending by ``values`` and then ``tiebreak`` (input order
    when omitted). The first ``len(values) % n`` buckets receive one extra row.
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    if tiebreak is None:
        tiebreak = pd.Series(np.arange(len(values)), index=values.index)
    frame = pd.DataFrame(
        {"value": values.to_numpy(), "tiebreak": tiebreak.to_numpy()},
        index=values.index,
    )
    ordered = frame.sort_values(["value", "tiebreak"], kind="mergesort").index
    base, remainder = divmod(len(ordered), n)
    sizes = [base + 1 if bucket < remainder else base for bucket in range(n)]
    buckets = np.repeat(np.arange(1, n + 1), sizes)
    return pd.Series(buckets, index=ordered, dtype="int64").reindex(values.index)


__all__ = [
    "TIME_BUCKETS",
    "safe_div",
    "pct",
    "ensure_period",
    "year_month",
    "growth_pct",
    "sale_hour",
    "time_bucket",
    "ntile",
]
