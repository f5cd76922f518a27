"""Build GOLD customer tables: RFM scores, segment summary and top customers."""
from __future__ import annotations

import pandas as pd

from features.metrics import ntile, pct, safe_div
from utils.config import load_settings
from utils.data import load_transactions
from utils.io import get_paths, logger
from utils.report import write_report
from utils.schemas import SEGMENTS, customer_rfm_schema

PATHS = get_paths()
GOLD_DIR = PATHS.gold

METRIC_COLS = ["customer_id", "first_purchase_date", "last_purchase_date", "recency_days", "frequency", "monetary"]
RFM_COLS = METRIC_COLS + ["recency_score", "frequency_score", "monetary_score", "rfm_score", "segment"]
SEGMENT_COLS = ["segment", "customers", "customers_pct", "monetary", "avg_monetary"]
TOP_COLS = ["rank", "customer_id", "transactions", "total_sales"]


# ---------- GOLD: métricas por cliente (RFM) ----------


def build_customer_metrics(tx: pd.DataFrame) -> pd.DataFrame:
    """Last purchase, transaction count and spend per known customer."""
    known = tx[tx["customer_id"].notna()]
    if known.empty:
        return pd.DataFrame(columns=METRIC_COLS)

    g = known.groupby("customer_id")
    metrics = g.agg(
        first_purchase_date=("sale_date", "min"),
        last_purchase_date=("sale_date", "max"),
        frequency=("total_sales", "size"),
        monetary=("total_sales", "sum"),
    ).reset_index()

    snapshot = known["sale_date"].max()
    metrics["recency_days"] = (snapshot - metrics["last_purchase_date"]).dt.days
    return metrics[METRIC_COLS]


def segment_row(r: int, f: int, m: int) -> str:
    if r >= 4 and f >= 4 and m >= 4:
        return "Champion"
    if r >= 3 and f >= 3 and m >= 3:
        return "Loyal Customer"
    if r <= 2 and f <= 2 and m <= 2:
        return "At Risk"
    return "Average"


def rfm_scores(metrics: pd.DataFrame) -> pd.DataFrame:
    """Quintile scores R, F, M (1..5) and segment; 5 is the best on every axis.

    Quintiles follow SQL ``NTILE(5)``: ties are ordered by customer_id and the
    first ``N % 5`` buckets hold one extra customer.
    """
    if metrics.empty:
        return customer_rfm_schema.validate(pd.DataFrame(columns=RFM_COLS), lazy=True)

    out = metrics.copy()
    ids = out["customer_id"].astype(str)
    # R: compra más reciente al final del orden -> score 5
    out["recency_score"] = ntile(out["last_purchase_date"], 5, tiebreak=ids)
    out["frequency_score"] = ntile(out["frequency"], 5, tiebreak=ids)
    out["monetary_score"] = ntile(out["monetary"], 5, tiebreak=ids)

    out["rfm_score"] = out["recency_score"] * 100 + out["frequency_score"] * 10 + out["monetary_score"]
    out["segment"] = [
        segment_row(r, f, m)
        for r, f, m in zip(out["recency_score"], out["frequency_score"], out["monetary_score"])
    ]
    out = out.sort_values(["rfm_score", "customer_id"], ascending=[False, True], kind="mergesort")
    return customer_rfm_schema.validate(out[RFM_COLS].reset_index(drop=True), lazy=True)


def segment_summary(scores: pd.DataFrame) -> pd.DataFrame:
    """Customers and spend per segment; segments without customers are omitted."""
    if scores.empty:
        return pd.DataFrame(columns=SEGMENT_COLS)
    summary = scores.groupby("segment").agg(
        customers=("customer_id", "size"),
        monetary=("monetary", "sum"),
    ).reset_index()
    summary["customers_pct"] = pct(summary["customers"], len(scores))
    summary["avg_monetary"] = safe_div(summary["monetary"], summary["customers"])
    summary["segment"] = pd.Categorical(summary["segment"], categories=SEGMENTS, ordered=True)
    summary = summary.sort_values("segment").reset_index(drop=True)
    summary["segment"] = summary["segment"].astype(str)
    return summary[SEGMENT_COLS]


def top_customers(tx: pd.DataFrame, n: int = 5) -> pd.DataFrame:
    """The ``n`` customers with the highest total_sales; ties by customer_id."""
    known = tx[tx["customer_id"].notna()]
    if known.empty:
        return pd.DataFrame(columns=TOP_COLS)
    totals = known.groupby("customer_id").agg(
        transactions=("total_sales", "size"),
        total_sales=("total_sales", "sum"),
    ).reset_index()
    totals = totals.sort_values(
        ["total_sales", "customer_id"], ascending=[False, True], kind="mergesort"
    ).head(n).reset_index(drop=True)
    totals["rank"] = range(1, len(totals) + 1)
    return totals[TOP_COLS]


def build_customer_tables(tx: pd.DataFrame | None = None, *, top_n: int = 5) -> dict[str, pd.DataFrame]:
    tx = load_transactions() if tx is None else tx
    scores = rfm_scores(build_customer_metrics(tx))
    return {
        "customer_rfm": scores,
        "rfm_segments": segment_summary(scores),
        "top_customers": top_customers(tx, top_n),
    }


def main() -> dict[str, pd.DataFrame]:
    settings = load_settings()
    outputs = build_customer_tables(top_n=settings.top_n_customers)
    for name, df in outputs.items():
        write_report(df, GOLD_DIR / f"{name}.parquet")
    logger.info(
        "customer_rfm rows=%s | rfm_segments rows=%s | top_customers rows=%s",
        len(outputs["customer_rfm"]), len(outputs["rfm_segments"]), len(outputs["top_customers"]),
    )
    return outputs


if __name__ == "__main__":
    main()
