"""Data loading helpers."""
from __future__ import annotations

import pandas as pd

from bronze.enrich_bronze import enrich_raw
from features.metrics import year_month
from utils.io import get_paths, read_csv
from utils.schemas import transactions_base_schema


def load_transactions() -> pd.DataFrame:
    """Load and validate the canonical SILVER transaction base."""
    paths = get_paths()
    path = paths.silver / "transactions_base.csv"
    df = enrich_raw(read_csv(path, dtype=str))
    df["year_month"] = year_month(df["sale_date"])
    df = transactions_base_schema.validate(df, lazy=True)
    return df


__all__ = ["load_transactions"]
