"""Shared in-memory fixtures for the test-suite."""
from __future__ import annotations

import pandas as pd

AS_OF = "2024-06-30"

COLUMNS = [
    "transaction_id", "sale_date", "sale_time", "customer_id", "gender",
    "age", "category", "quantity", "price_per_unit", "cogs",
]


def raw_transactions() -> pd.DataFrame:
    """Five valid sales followed by seven rows that break one or more rules."""
    rows = [
        # valid
        (1, "2022-01-05", "09:15:00", 1, "Male", 30, "Beauty", 2, 50.0, 40.0),
        (2, "2022-02-10", "12:00:00", 1, "Male", 30, "Clothing", 1, 50.0, 20.0),
        (3, "2022-03-01", "17:00:00", 2, "Female", 45, "Electronics", 1, 500.0, 300.0),
        (4, "2022-03-15", "16:59:00", 3, "Female", 22, "Beauty", 4, 25.0, 30.0),
        (5, "2023-01-20", "11:59:00", 2, "Female", 45, "Electronics", 2, 300.0, 400.0),
        # invalid
        (6, None, "10:00:00", 4, "Male", 40, "Beauty", 1, 10.0, 5.0),
        (7, "2030-01-01", "10:00:00", 4, "Male", 40, "Beauty", 1, 10.0, 5.0),
        (8, "2022-05-01", "10:00:00", 5, "Female", 17, "Clothing", 1, 10.0, 5.0),
        (9, "2022-05-02", "10:00:00", 5, "Female", 30, "Clothing", 0, 10.0, 5.0),
        (10, "2022-05-03", "10:00:00", 6, "Male", 30, "Clothing", 1, "abc", 5.0),
        (11, "2022-05-04", "10:00:00", 6, "Male", 30, "Clothing", 1, 10.0, -5.0),
        (12, "2022-05-05", "10:00:00", 7, "Male", 150, "Clothing", -1, 10.0, 5.0),
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def three_sales() -> pd.DataFrame:
    """Three sales for two customers across three months."""
    rows = [
        (1, "2022-01-05", "10:00:00", 1, "Male", 30, "Beauty", 1, 100.0, 60.0),
        (2, "2022-02-10", "10:00:00", 1, "Male", 30, "Beauty", 1, 50.0, 30.0),
        (3, "2022-03-01", "10:00:00", 2, "Female", 40, "Clothing", 5, 100.0, 200.0),
    ]
    return pd.DataFrame(rows, columns=COLUMNS)
