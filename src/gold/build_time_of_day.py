"""Build GOLD time-of-day (shift) distribution."""
from __future__ import annotations

import pandas as pd

from features.metrics import TIME_BUCKETS, pct, safe_div, time_bucket
from utils.data import load_transactions
from utils.io import get_paths, logger
from utils.report import write_report
from utils.schemas import time_of_day_schema

PATHS = get_paths()
OUTPUT_PATH = PATHS.gold / "time_of_day.parquet"

COLS = ["shift", "transactions", "revenue", "avg_transaction_value", "profit", "profit_margin_pct"]


def build_time_of_day(tx: pd.DataFrame) -> pd.DataFrame:
    """Morning / Afternoon / Evening totals, most transactions first.

    Rows whose ``sale_time`` cannot be read are left out of this report only.
    """
    if tx.empty:
        return time_of_day_schema.validate(pd.DataFrame(columns=COLS), lazy=True)

    shift = time_bucket(tx["sale_time"])
    known = shift.notna().to_numpy()
    if not known.all():
        logger.warning("time_of_day: %s rows without a readable sale_time skipped", int((~known).sum()))

    t = tx.loc[known].copy()
    t["shift"] = shift[known].astype(str).to_numpy()
    if t.empty:
        return time_of_day_schema.validate(pd.DataFrame(columns=COLS), lazy=True)

    out = t.groupby("shift").agg(
        transactions=("total_sales", "size"),
        revenue=("total_sales", "sum"),
        profit=("profit", "sum"),
    ).reset_index()
    out["avg_transaction_value"] = safe_div(out["revenue"], out["transactions"])
    out["profit_margin_pct"] = pct(out["profit"], out["revenue"])

    # Empates: orden natural del día
    out["_order"] = out["shift"].map({name: i for i, name in enumerate(TIME_BUCKETS)})
    out = out.sort_values("_order").sort_values("transactions", ascending=False, kind="mergesort")
    out = out[COLS].reset_index(drop=True)
    return time_of_day_schema.validate(out, lazy=True)


def main() -> pd.DataFrame:
    out = build_time_of_day(load_transactions())
    write_report(out, OUTPUT_PATH)
    logger.info("time_of_day rows=%s", len(out))
    return out


if __name__ == "__main__":
    main()
