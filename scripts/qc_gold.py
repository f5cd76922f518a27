"""Quick QC checks for GOLD parquet outputs."""
from __future__ import annotations

import sys
from typing import Dict, Iterable

import numpy as np
import pandas as pd

sys.path.insert(0, "src")

from utils.io import get_paths, logger  # noqa: E402
from utils.report import REPORT_ORDER  # noqa: E402

PATHS = get_paths()
RATIO_COLUMNS = [
    "avg_units",
    "avg_transaction_value",
    "profit_margin_pct",
    "revenue_share_pct",
    "mom_growth_pct",
    "avg_sale",
]


def _read_parquet_map() -> Dict[str, pd.DataFrame]:
    data = {}
    for parquet in PATHS.gold.glob("*.parquet"):
        data[parquet.stem] = pd.read_parquet(parquet)
    return data


def _check_inf(name: str, df: pd.DataFrame, columns: Iterable[str]) -> int:
    # <NA> es válido (ratio indefinido); inf nunca
    problems = 0
    for col in columns:
        if col not in df.columns:
            continue
        series = pd.to_numeric(df[col], errors="coerce").astype("float64")
        n_inf = int(np.isinf(series).sum())
        n_na = int(series.isna().sum())
        if n_inf:
            logger.error("[%s] Column '%s' has Inf=%s", name, col, n_inf)
            problems += 1
        elif n_na:
            logger.info("[%s] Column '%s' has %s undefined values", name, col, n_na)
    return problems


def check_category_vs_summary(data: Dict[str, pd.DataFrame]) -> int:
    """Category transaction counts must add up to the overall transaction count."""
    if "category_performance" not in data or "executive_summary" not in data:
        return 0
    summary = data["executive_summary"]
    if summary.empty:
        return 0
    by_category = int(data["category_performance"]["transactions"].sum())
    total = int(summary["transactions"].iat[0])
    if by_category != total:
        logger.error("Category transactions (%s) != total transactions (%s)", by_category, total)
        return 1
    logger.info("Category vs total transactions aligned (%s)", total)
    return 0


def check_rfm_buckets(data: Dict[str, pd.DataFrame]) -> int:
    """Every score column splits customers into buckets of floor(N/5) or ceil(N/5)."""
    rfm = data.get("customer_rfm")
    if rfm is None or rfm.empty:
        return 0
    n = len(rfm)
    low, high = n // 5, -(-n // 5)
    problems = 0
    for col in ["recency_score", "frequency_score", "monetary_score"]:
        sizes = rfm[col].value_counts().reindex(range(1, 6), fill_value=0)
        if n >= 5 and not sizes.between(low, high).all():
            logger.error("customer_rfm %s bucket sizes out of range: %s", col, sizes.to_dict())
            problems += 1
    return problems


def main() -> None:
    data = _read_parquet_map()
    if not data:
        raise FileNotFoundError(f"No parquet outputs found in {PATHS.gold}")

    problems = 0
    for name in sorted(data, key=lambda n: (REPORT_ORDER.index(n) if n in REPORT_ORDER else len(REPORT_ORDER), n)):
        df = data[name]
        logger.info("[QC] %s rows=%s cols=%s", name, len(df), len(df.columns))
        problems += _check_inf(name, df, RATIO_COLUMNS)

    problems += check_category_vs_summary(data)
    problems += check_rfm_buckets(data)
    if problems:
        raise SystemExit(f"GOLD QC failed with {problems} problem(s)")
    logger.info("GOLD QC passed")


if __name__ == "__main__":
    main()
