"""Generate executive summary snapshot and the high-value transaction list."""
from __future__ import annotations

import pandas as pd

from features.metrics import pct
from utils.config import load_settings
from utils.data import load_transactions
from utils.io import get_paths, logger
from utils.report import write_report

PATHS = get_paths()
OUTPUT_PATH = PATHS.gold / "executive_summary.parquet"
HIGH_VALUE_PATH = PATHS.gold / "high_value_transactions.parquet"

SUMMARY_COLS = [
    "first_sale_date", "last_sale_date", "months", "transactions", "customers",
    "units", "revenue", "cogs", "profit", "profit_margin_pct",
]
HIGH_VALUE_COLS = [
    "transaction_id", "sale_date", "customer_id", "category",
    "quantity", "price_per_unit", "total_sales", "profit",
]


def build_executive_summary(tx: pd.DataFrame) -> pd.DataFrame:
    if tx.empty:
        logger.warning("executive_summary: no valid transactions")
        return pd.DataFrame(columns=SUMMARY_COLS)
    summary = pd.DataFrame(
        {
            "first_sale_date": [tx["sale_date"].min()],
            "last_sale_date": [tx["sale_date"].max()],
            "months": [tx["year_month"].nunique()],
            "transactions": [len(tx)],
            "customers": [tx["customer_id"].nunique()],
            "units": [int(tx["quantity"].sum())],
            "revenue": [float(tx["total_sales"].sum())],
            "cogs": [float(tx["cogs"].sum())],
            "profit": [float(tx["profit"].sum())],
        }
    )
    summary["profit_margin_pct"] = pct(summary["profit"], summary["revenue"])
    return summary[SUMMARY_COLS]


def high_value_transactions(tx: pd.DataFrame, threshold: float = 1000.0) -> pd.DataFrame:
    """Transactions with total_sales strictly above ``threshold``, largest first."""
    hv = tx[tx["total_sales"] > threshold]
    hv = hv.sort_values(["total_sales", "transaction_id"], ascending=[False, True], kind="mergesort")
    return hv[HIGH_VALUE_COLS].reset_index(drop=True)


def main() -> dict[str, pd.DataFrame]:
    settings = load_settings()
    tx = load_transactions()
    out = {
        "executive_summary": build_executive_summary(tx),
        "high_value_transactions": high_value_transactions(tx, settings.high_value_threshold),
    }
    write_report(out["executive_summary"], OUTPUT_PATH)
    write_report(out["high_value_transactions"], HIGH_VALUE_PATH)
    logger.info(
        "executive_summary rows=%s | high_value_transactions rows=%s",
        len(out["executive_summary"]), len(out["high_value_transactions"]),
    )
    return out


if __name__ == "__main__":
    main()
