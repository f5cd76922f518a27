"""DataFrame contracts for retail sales artifacts."""
from __future__ import annotations

from pandera.pandas import Check, Column, DataFrameSchema

GENDERS = ["Male", "Female", "Other"]
SEGMENTS = ["Champion", "Loyal Customer", "At Risk", "Average"]

# ---------------------------------------------------------------------------
# SILVER
# ---------------------------------------------------------------------------

transactions_base_schema = DataFrameSchema(
    {
        "transaction_id": Column("Int64", required=True, nullable=True),
        "sale_date": Column("datetime64[ns]", required=True),
        "sale_time": Column("string", required=True, nullable=True),
        "customer_id": Column("string", required=True, nullable=True),
        "gender": Column("string", Check.isin(GENDERS), required=True, nullable=True),
        "age": Column("Int64", Check.ge(0), required=True),
        "category": Column("string", required=True),
        "quantity": Column("Int64", Check.gt(0), required=True),
        "price_per_unit": Column(float, Check.gt(0), required=True),
        "cogs": Column(float, Check.gt(0), required=True),
        "total_sales": Column(float, required=True),
        "profit": Column(float, required=True),
        "year_month": Column(str, required=True),
    },
    coerce=True,
    strict=False,
)

# ---------------------------------------------------------------------------
# GOLD REPORTS
# ---------------------------------------------------------------------------

category_performance_schema = DataFrameSchema(
    {
        "category": Column("string", required=True),
        "transactions": Column("Int64", Check.gt(0), required=True),
        "customers": Column("Int64", Check.ge(0), required=True),
        "units": Column("Int64", Check.ge(0), required=True),
        "avg_units": Column("Float64", required=True, nullable=True),
        "revenue": Column(float, required=True),
        "avg_transaction_value": Column("Float64", required=True, nullable=True),
        "profit": Column(float, required=True),
        "profit_margin_pct": Column("Float64", required=True, nullable=True),
        "revenue_share_pct": Column("Float64", required=True, nullable=True),
        "avg_age": Column("Float64", required=True, nullable=True),
    },
    coerce=True,
    strict=False,
)

monthly_trend_schema = DataFrameSchema(
    {
        "period": Column("datetime64[ns]", required=True),
        "year_month": Column(str, required=True),
        "year": Column("Int64", required=True),
        "month": Column("Int64", Check.in_range(1, 12), required=True),
        "transactions": Column("Int64", Check.gt(0), required=True),
        "customers": Column("Int64", Check.ge(0), required=True),
        "units": Column("Int64", Check.ge(0), required=True),
        "total_sales": Column(float, required=True),
        "avg_sale": Column("Float64", required=True, nullable=True),
        "mom_growth_pct": Column("Float64", required=True, nullable=True),
    },
    coerce=True,
    strict=False,
)

time_of_day_schema = DataFrameSchema(
    {
        "shift": Column(str, Check.isin(["Morning", "Afternoon", "Evening"]), required=True),
        "transactions": Column("Int64", Check.gt(0), required=True),
        "revenue": Column(float, required=True),
        "avg_transaction_value": Column("Float64", required=True, nullable=True),
        "profit": Column(float, required=True),
        "profit_margin_pct": Column("Float64", required=True, nullable=True),
    },
    coerce=True,
    strict=False,
)

customer_rfm_schema = DataFrameSchema(
    {
        "customer_id": Column("string", required=True, unique=True),
        "last_purchase_date": Column("datetime64[ns]", required=True),
        "frequency": Column("Int64", Check.gt(0), required=True),
        "monetary": Column(float, required=True),
        "recency_score": Column("Int64", Check.in_range(1, 5), required=True),
        "frequency_score": Column("Int64", Check.in_range(1, 5), required=True),
        "monetary_score": Column("Int64", Check.in_range(1, 5), required=True),
        "segment": Column(str, Check.isin(SEGMENTS), required=True),
    },
    coerce=True,
    strict=False,
)


__all__ = [
    "GENDERS",
    "SEGMENTS",
    "transactions_base_schema",
    "category_performance_schema",
    "monthly_trend_schema",
    "time_of_day_schema",
    "customer_rfm_schema",
]
