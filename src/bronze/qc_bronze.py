# src/bronze/qc_bronze.py
# Perfil de calidad del extracto crudo (antes del filtro silver).
from __future__ import annotations

import pandas as pd

from bronze.enrich_bronze import enrich_raw
from utils.config import load_settings
from utils.io import get_paths, logger, read_csv, write_csv

PATHS = get_paths()
BRONZE = PATHS.bronze / "retail_sales_enriched.csv"
OUTCSV = PATHS.reports / "bronze_qc" / "bronze_profile.csv"


def profile_raw(df: pd.DataFrame, *, as_of: pd.Timestamp, age_min: int = 18, age_max: int = 100) -> pd.DataFrame:
    """One-row profile: nulls per field and rows breaking each rule (rules may overlap)."""
    t = enrich_raw(df)
    qc = {
        "rows_total": [len(t)],
        "duplicate_transaction_ids": [int(t["transaction_id"].dropna().duplicated().sum())],
    }
    for col in ["sale_date", "sale_time", "customer_id", "gender", "age",
                "quantity", "price_per_unit", "cogs"]:
        qc[f"nulls_{col}"] = [int(t[col].isna().sum())]

    qc["future_dates"] = [int((t["sale_date"] > as_of).sum())]
    qc["age_out_of_range"] = [int((~t["age"].between(age_min, age_max)).fillna(False).sum())]
    qc["quantity_le_0"] = [int((t["quantity"] <= 0).fillna(False).sum())]
    qc["price_le_0"] = [int((t["price_per_unit"] <= 0).sum())]
    qc["cogs_le_0"] = [int((t["cogs"] <= 0).sum())]
    qc["min_date"] = [t["sale_date"].min()]
    qc["max_date"] = [t["sale_date"].max()]
    return pd.DataFrame(qc)


def main() -> pd.DataFrame:
    settings = load_settings()
    df = read_csv(BRONZE, dtype=str)
    qc = profile_raw(
        df,
        as_of=settings.reference_date(),
        age_min=settings.age_min,
        age_max=settings.age_max,
    )
    write_csv(qc, OUTCSV)
    logger.info("QC exportado -> %s", OUTCSV)
    logger.info("Resumen rápido:\n%s", qc.T.to_string(header=False))
    return qc


if __name__ == "__main__":
    main()
