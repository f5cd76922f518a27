"""Build GOLD monthly sales trend and best-selling month per year."""
from __future__ import annotations

import pandas as pd

from features.metrics import ensure_period, growth_pct, safe_div
from utils.data import load_transactions
from utils.io import get_paths, logger
from utils.report import write_report
from utils.schemas import monthly_trend_schema

PATHS = get_paths()
MONTHLY_TREND_PATH = PATHS.gold / "monthly_trend.parquet"
BEST_MONTHS_PATH = PATHS.gold / "best_selling_months.parquet"

TREND_COLS = [
    "period", "year_month", "year", "month",
    "transactions", "customers", "units",
    "total_sales", "avg_sale", "mom_growth_pct",
]
BEST_COLS = ["year", "year_month", "month", "avg_sale", "total_sales", "transactions"]


def build_monthly_trend(tx: pd.DataFrame) -> pd.DataFrame:
    """Calendar-month totals with month-over-month growth of ``total_sales``.

    Growth compares each month with the preceding month of the same year, so
    January (or the first month present in a year) has no growth value.
    """
    if tx.empty:
        return monthly_trend_schema.validate(pd.DataFrame(columns=TREND_COLS), lazy=True)

    monthly = tx.groupby("year_month").agg(
        transactions=("total_sales", "size"),
        customers=("customer_id", "nunique"),
        units=("quantity", "sum"),
        total_sales=("total_sales", "sum"),
    ).reset_index()

    monthly = ensure_period(monthly, "year_month", "period")
    monthly["year"] = monthly["period"].dt.year
    monthly["month"] = monthly["period"].dt.month
    monthly["avg_sale"] = safe_div(monthly["total_sales"], monthly["transactions"])

    # MoM dentro de cada año (LAG particionado por año)
    monthly = monthly.sort_values("period").reset_index(drop=True)
    monthly["mom_growth_pct"] = growth_pct(
        monthly, value_col="total_sales", order_col="period", partition_col="year"
    )

    monthly = monthly[TREND_COLS]
    return monthly_trend_schema.validate(monthly, lazy=True)


def best_selling_months(monthly: pd.DataFrame) -> pd.DataFrame:
    """Month with the highest average sale in each year; ties go to the earlier month."""
    if monthly.empty:
        return pd.DataFrame(columns=BEST_COLS)
    ranked = monthly.sort_values(
        ["year", "avg_sale", "period"], ascending=[True, False, True], kind="mergesort"
    )
    best = ranked.groupby("year", sort=True).head(1)
    return best[BEST_COLS].reset_index(drop=True)


def build_monthly_tables(tx: pd.DataFrame | None = None) -> dict[str, pd.DataFrame]:
    tx = load_transactions() if tx is None else tx
    trend = build_monthly_trend(tx)
    return {"monthly_trend": trend, "best_selling_months": best_selling_months(trend)}


def main() -> dict[str, pd.DataFrame]:
    out = build_monthly_tables()
    write_report(out["monthly_trend"], MONTHLY_TREND_PATH)
    write_report(out["best_selling_months"], BEST_MONTHS_PATH)
    logger.info(
        "monthly_trend rows=%s | best_selling_months rows=%s",
        len(out["monthly_trend"]), len(out["best_selling_months"]),
    )
    return out


if __name__ == "__main__":
    main()
