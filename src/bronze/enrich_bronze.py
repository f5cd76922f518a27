# src/bronze/enrich_bronze.py
# Tipos seguros + derivados contables (total_sales, profit) sobre el extracto crudo.
"""Coerce the raw sales extract into typed columns and recompute derived amounts."""
from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np
import pandas as pd

from utils.config import load_settings
from utils.io import get_paths, logger, read_csv, write_csv
from utils.schemas import GENDERS

PATHS = get_paths()
DEF_OUT = PATHS.bronze / "retail_sales_enriched.csv"

RAW_COLUMNS = [
    "transaction_id", "sale_date", "sale_time", "customer_id", "gender",
    "age", "category", "quantity", "price_per_unit", "cogs",
]
# Nombres del export SQL original
COLUMN_ALIASES = {
    "transactions_id": "transaction_id",
    "quantiy": "quantity",
    "total_sale": "total_sales",
}
GENDER_ALIASES = {"M": "Male", "F": "Female", "O": "Other"}


def _to_int(s: pd.Series) -> pd.Series:
    # No enteros (2.5, "abc") -> NA; el filtro silver los rechaza
    num = pd.to_numeric(s, errors="coerce")
    num = pd.Series(num.to_numpy(dtype="float64", na_value=np.nan), index=s.index)
    return num.where(num == num.round()).astype("Int64")


def _to_float(s: pd.Series) -> pd.Series:
    num = pd.to_numeric(s, errors="coerce")
    return pd.Series(num.to_numpy(dtype="float64", na_value=np.nan), index=s.index)


def _normalize_gender(s: pd.Series) -> pd.Series:
    g = s.astype("string").str.strip().str.title()
    g = g.replace(GENDER_ALIASES)
    return g.where(g.isin(GENDERS))


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out.columns = [str(c).strip().lower() for c in out.columns]
    out = out.rename(columns=COLUMN_ALIASES)
    missing = [c for c in RAW_COLUMNS if c not in out.columns]
    if missing:
        raise KeyError(f"Missing columns: {missing}")
    return out


def enrich_raw(df: pd.DataFrame) -> pd.DataFrame:
    """Return a typed copy of ``df`` with ``total_sales`` and ``profit`` recomputed.

    Unparseable values become missing instead of raising; deciding whether a
    row is usable is left to the silver filter. Any ``total_sales`` or
    ``profit`` present in the input is discarded.
    """
    out = normalize_columns(df)

    out["transaction_id"] = _to_int(out["transaction_id"])
    out["sale_date"] = pd.to_datetime(out["sale_date"], errors="coerce").dt.normalize()
    out["sale_time"] = out["sale_time"].astype("string").str.strip()
    out["customer_id"] = out["customer_id"].astype("string").str.strip().replace("", pd.NA)
    out["gender"] = _normalize_gender(out["gender"])
    out["age"] = _to_int(out["age"])
    out["category"] = (
        out["category"].astype("string").str.strip().replace("", pd.NA).fillna("Unspecified")
    )
    out["quantity"] = _to_int(out["quantity"])
    out["price_per_unit"] = _to_float(out["price_per_unit"])
    out["cogs"] = _to_float(out["cogs"])

    # Derivados (nunca se confía en el valor del extracto)
    qty = out["quantity"].to_numpy(dtype="float64", na_value=np.nan)
    out["total_sales"] = qty * out["price_per_unit"]
    out["profit"] = out["total_sales"] - out["cogs"]

    return out[RAW_COLUMNS + ["total_sales", "profit"]]


def main(inp: Path | None = None, outp: Path = DEF_OUT) -> pd.DataFrame:
    if inp is None:
        inp = PATHS.bronze / load_settings().raw_file
    raw = read_csv(inp, dtype=str)
    enriched = enrich_raw(raw)
    write_csv(enriched, outp)
    logger.info("bronze enriched rows=%s -> %s", len(enriched), outp)
    return enriched


if __name__ == "__main__":
    ap = argparse.ArgumentParser(
        description="Tipar el extracto crudo y recalcular total_sales/profit.")
    ap.add_argument("--in", dest="inp", default=None,
                    help="CSV de entrada (bronze). Default: raw_file de configs/analysis.yml")
    ap.add_argument("--out", dest="outp", default=str(DEF_OUT),
                    help="CSV de salida.")
    args = ap.parse_args()
    main(Path(args.inp) if args.inp else None, Path(args.outp))
