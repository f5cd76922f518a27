"""Build the SILVER transaction base: keep valid sales, count the rejected ones."""
from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import pandas as pd

from bronze.enrich_bronze import enrich_raw
from features.metrics import year_month
from utils.config import load_settings
from utils.io import get_paths, logger, read_csv, write_csv
from utils.schemas import transactions_base_schema

PATHS = get_paths()
SRC = PATHS.bronze / "retail_sales_enriched.csv"
OUT = PATHS.silver / "transactions_base.csv"
REJECTED_OUT = PATHS.silver / "transactions_rejected.csv"
SUMMARY_OUT = PATHS.silver / "rejection_summary.csv"

# Orden de evaluación: una fila se cuenta sólo bajo el primer motivo que falla
REJECTION_REASONS = [
    "Missing date",
    "Future date",
    "Invalid age",
    "Invalid quantity",
    "Invalid price",
    "Invalid COGS",
]


@dataclass(frozen=True)
class FilterResult:
    valid: pd.DataFrame
    rejected: pd.DataFrame
    rejection_counts: pd.DataFrame

    @property
    def total_rejected(self) -> int:
        return len(self.rejected)


def _numeric(s: pd.Series) -> np.ndarray:
    return s.to_numpy(dtype="float64", na_value=np.nan)


def rejection_reasons(
    df: pd.DataFrame,
    *,
    as_of: pd.Timestamp,
    age_min: int = 18,
    age_max: int = 100,
) -> pd.Series:
    """First failing rule per row of a typed frame; empty string when the row is valid."""
    sale_date = df["sale_date"]
    age = _numeric(df["age"])
    quantity = _numeric(df["quantity"])
    price = _numeric(df["price_per_unit"])
    cogs = _numeric(df["cogs"])

    missing_date = sale_date.isna().to_numpy()
    future_date = (sale_date > as_of).fillna(False).to_numpy(dtype=bool)
    # NaN compara False, así que valores faltantes/no parseables caen como inválidos
    with np.errstate(invalid="ignore"):
        conditions = [
            missing_date,
            future_date,
            ~((age >= age_min) & (age <= age_max)),
            ~(quantity > 0),
            ~(price > 0),
            ~(cogs > 0),
        ]
    reasons = np.select(conditions, REJECTION_REASONS, default="")
    return pd.Series(reasons, index=df.index, dtype=object)


def filter_transactions(
    df: pd.DataFrame,
    *,
    as_of: pd.Timestamp | str | None = None,
    age_min: int = 18,
    age_max: int = 100,
) -> FilterResult:
    """Split raw transactions into a valid subset and the rejected remainder.

    ``df`` is not modified. ``total_sales`` and ``profit`` are recomputed from
    quantity, price and COGS. Running the filter on its own ``valid`` output
    returns the same rows and no rejections.
    """
    reference = (
        pd.Timestamp.today().normalize() if as_of is None else pd.Timestamp(as_of).normalize()
    )
    typed = enrich_raw(df)
    reasons = rejection_reasons(typed, as_of=reference, age_min=age_min, age_max=age_max)
    is_rejected = (reasons != "").to_numpy(dtype=bool)

    valid = typed.loc[~is_rejected].reset_index(drop=True)
    valid["year_month"] = year_month(valid["sale_date"])
    valid = transactions_base_schema.validate(valid, lazy=True)

    rejected = typed.loc[is_rejected].copy()
    rejected["rejection_reason"] = reasons.to_numpy()[is_rejected]
    rejected = rejected.reset_index(drop=True)

    counts = (
        rejected["rejection_reason"]
        .value_counts()
        .reindex(REJECTION_REASONS, fill_value=0)
        .rename_axis("rejection_reason")
        .reset_index(name="rows")
    )
    counts["rows"] = counts["rows"].astype("int64")

    logger.info(
        "filter: rows=%s valid=%s rejected=%s (as_of=%s)",
        len(typed), len(valid), len(rejected), reference.date(),
    )
    for reason, rows in zip(counts["rejection_reason"], counts["rows"]):
        if rows:
            logger.info("  rejected %-16s %s", reason, rows)
    return FilterResult(valid=valid, rejected=rejected, rejection_counts=counts)


def main() -> FilterResult:
    settings = load_settings()
    raw = read_csv(SRC, dtype=str)
    result = filter_transactions(
        raw,
        as_of=settings.reference_date(),
        age_min=settings.age_min,
        age_max=settings.age_max,
    )
    write_csv(result.valid, OUT)
    write_csv(result.rejected, REJECTED_OUT)
    write_csv(result.rejection_counts, SUMMARY_OUT)
    logger.info(
        "transactions_base rows=%s | rejected rows=%s", len(result.valid), result.total_rejected
    )
    return result


if __name__ == "__main__":
    main()
