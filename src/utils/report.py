"""Presentation helpers: rounding, text rendering and structured export of reports."""
from __future__ import annotations

from pathlib import Path
from typing import Mapping

import pandas as pd

from utils.io import ensure_dir, get_paths, logger, write_csv, write_parquet

PATHS = get_paths()
REPORT_BOOK_PATH = PATHS.reports / "retail_sales_report.txt"

REPORT_ORDER = [
    "executive_summary",
    "category_performance",
    "category_gender",
    "monthly_trend",
    "best_selling_months",
    "time_of_day",
    "rfm_segments",
    "top_customers",
    "customer_rfm",
    "high_value_transactions",
]


def present(df: pd.DataFrame, decimals: int = 2) -> pd.DataFrame:
    """Round float columns for display. Row order and undefined values are kept."""
    out = df.copy()
    float_cols = [c for c in out.columns if pd.api.types.is_float_dtype(out[c])]
    if float_cols:
        out[float_cols] = out[float_cols].round(decimals)
    return out


def format_report(name: str, df: pd.DataFrame, max_rows: int | None = None) -> str:
    header = f"== {name} ({len(df)} rows) =="
    if df.empty:
        return f"{header}\n(no rows)"
    body = present(df).to_string(index=False, max_rows=max_rows)
    return f"{header}\n{body}"


def write_report(df: pd.DataFrame, path: str | Path) -> Path:
    """Write a presented report; the format follows the file suffix."""
    path_obj = Path(path)
    shown = present(df)
    if path_obj.suffix == ".parquet":
        return write_parquet(shown, path_obj)
    if path_obj.suffix == ".csv":
        return write_csv(shown, path_obj)
    raise ValueError(f"Unsupported report format '{path_obj.suffix}' for {path_obj}")


def render_report_book(reports: Mapping[str, pd.DataFrame], max_rows: int | None = 50) -> str:
    names = [n for n in REPORT_ORDER if n in reports] + sorted(set(reports) - set(REPORT_ORDER))
    return "\n\n".join(format_report(name, reports[name], max_rows=max_rows) for name in names) + "\n"


def main() -> Path:
    gold_dir = PATHS.gold
    reports = {parquet.stem: pd.read_parquet(parquet) for parquet in sorted(gold_dir.glob("*.parquet"))}
    if not reports:
        raise FileNotFoundError(f"No parquet outputs found in {gold_dir}")
    ensure_dir(REPORT_BOOK_PATH)
    REPORT_BOOK_PATH.write_text(render_report_book(reports), encoding="utf-8")
    logger.info("report book -> %s (%s reports)", REPORT_BOOK_PATH, len(reports))
    return REPORT_BOOK_PATH


__all__ = ["present", "format_report", "write_report", "render_report_book", "REPORT_ORDER"]
