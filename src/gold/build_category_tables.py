"""Build GOLD category-level KPI tables (performance + gender breakdown)."""
from __future__ import annotations

import pandas as pd

from features.metrics import pct, safe_div
from utils.data import load_transactions
from utils.io import get_paths, logger
from utils.report import write_report
from utils.schemas import category_performance_schema

PATHS = get_paths()
CATEGORY_PERFORMANCE_PATH = PATHS.gold / "category_performance.parquet"
CATEGORY_GENDER_PATH = PATHS.gold / "category_gender.parquet"

PERFORMANCE_COLS = [
    "category", "transactions", "customers", "units", "avg_units",
    "revenue", "avg_transaction_value", "profit", "profit_margin_pct",
    "revenue_share_pct", "avg_age",
]
GENDER_COLS = ["category", "gender", "transactions", "revenue"]


def build_category_performance(tx: pd.DataFrame) -> pd.DataFrame:
    """Per-category counts, revenue and margin, sorted by revenue (descending).

    Only categories present in ``tx`` are emitted. Nothing is rounded here.
    """
    if tx.empty:
        return category_performance_schema.validate(pd.DataFrame(columns=PERFORMANCE_COLS), lazy=True)

    perf = tx.groupby("category", sort=False).agg(
        transactions=("total_sales", "size"),
        customers=("customer_id", "nunique"),
        units=("quantity", "sum"),
        revenue=("total_sales", "sum"),
        profit=("profit", "sum"),
        avg_age=("age", "mean"),
    ).reset_index()

    perf["avg_units"] = safe_div(perf["units"], perf["transactions"])
    perf["avg_transaction_value"] = safe_div(perf["revenue"], perf["transactions"])
    perf["profit_margin_pct"] = pct(perf["profit"], perf["revenue"])
    # Participación sobre el total (sin clip: el total puede ser 0 -> <NA>)
    perf["revenue_share_pct"] = pct(perf["revenue"], perf["revenue"].sum())

    perf = perf.sort_values("revenue", ascending=False, kind="mergesort").reset_index(drop=True)
    perf = perf[PERFORMANCE_COLS]
    return category_performance_schema.validate(perf, lazy=True)


def build_category_gender(tx: pd.DataFrame) -> pd.DataFrame:
    """Transactions and revenue per (category, gender); unknown gender kept as its own row."""
    if tx.empty:
        return pd.DataFrame(columns=GENDER_COLS)
    out = tx.groupby(["category", "gender"], dropna=False).agg(
        transactions=("total_sales", "size"),
        revenue=("total_sales", "sum"),
    ).reset_index()
    out["transactions"] = out["transactions"].astype("int64")
    return out.sort_values(["category", "gender"], kind="mergesort").reset_index(drop=True)[GENDER_COLS]


def build_category_tables(tx: pd.DataFrame | None = None) -> dict[str, pd.DataFrame]:
    tx = load_transactions() if tx is None else tx
    return {
        "category_performance": build_category_performance(tx),
        "category_gender": build_category_gender(tx),
    }


def main() -> dict[str, pd.DataFrame]:
    out = build_category_tables()
    write_report(out["category_performance"], CATEGORY_PERFORMANCE_PATH)
    write_report(out["category_gender"], CATEGORY_GENDER_PATH)
    logger.info(
        "category_performance rows=%s | category_gender rows=%s",
        len(out["category_performance"]), len(out["category_gender"]),
    )
    return out


if __name__ == "__main__":
    main()
