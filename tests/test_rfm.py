from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
sys.path.insert(0, str(Path(__file__).resolve().parent))

import numpy as np
import pandas as pd

from features.metrics import ntile
from gold.build_customer_tables import (
    build_customer_metrics,
    build_customer_tables,
    rfm_scores,
    segment_row,
    segment_summary,
    top_customers,
)
from sample_data import AS_OF, raw_transactions
from silver.filter_transactions import filter_transactions


def _metrics(n: int) -> pd.DataFrame:
    rng = np.random.default_rng(n)
    return pd.DataFrame(
        {
            "customer_id": [f"C{i:03d}" for i in range(n)],
            "first_purchase_date": pd.Timestamp("2021-01-01"),
            "last_purchase_date": pd.Timestamp("2022-01-01")
            + pd.to_timedelta(rng.integers(0, 365, size=n), unit="D"),
            "recency_days": 0,
            "frequency": rng.integers(1, 10, size=n),
            "monetary": rng.uniform(10, 1000, size=n),
        }
    )


class NtileTest(unittest.TestCase):
    def test_remainder_goes_to_first_buckets(self):
        buckets = ntile(pd.Series(range(7)))
        self.assertEqual(list(buckets), [1, 1, 2, 2, 3, 4, 5])
        sizes = ntile(pd.Series(range(12))).value_counts().sort_index()
        self.assertEqual(list(sizes), [3, 3, 2, 2, 2])

    def test_single_row_lands_in_first_bucket(self):
        self.assertEqual(list(ntile(pd.Series([42.0]))), [1])

    def test_fewer_rows_than_buckets(self):
        self.assertEqual(list(ntile(pd.Series([30, 10, 20]))), [3, 1, 2])

    def test_bucket_sizes_for_any_population(self):
        for n in range(0, 26):
            values = pd.Series(np.random.default_rng(n).integers(0, 4, size=n))
            buckets = ntile(values)
            self.assertEqual(len(buckets), n)
            sizes = buckets.value_counts().reindex(range(1, 6), fill_value=0)
            if n >= 5:
                self.assertTrue(sizes.between(n // 5, -(-n // 5)).all(), msg=f"n={n}: {sizes.to_dict()}")
            self.assertEqual(int(sizes.sum()), n)

    def test_ties_follow_tiebreak(self):
        values = pd.Series([5, 5, 5, 5, 5])
        tiebreak = pd.Series(["e", "d", "c", "b", "a"])
        self.assertEqual(list(ntile(values, tiebreak=tiebreak)), [5, 4, 3, 2, 1])

    def test_keeps_input_index(self):
        values = pd.Series([3, 1, 2], index=[10, 20, 30])
        self.assertEqual(ntile(values).to_dict(), {10: 3, 20: 1, 30: 2})


class SegmentTest(unittest.TestCase):
    def test_precedence(self):
        self.assertEqual(segment_row(5, 5, 5), "Champion")
        self.assertEqual(segment_row(4, 4, 4), "Champion")
        self.assertEqual(segment_row(3, 3, 3), "Loyal Customer")
        self.assertEqual(segment_row(5, 5, 3), "Loyal Customer")
        self.assertEqual(segment_row(1, 1, 1), "At Risk")
        self.assertEqual(segment_row(2, 2, 2), "At Risk")
        self.assertEqual(segment_row(5, 1, 1), "Average")
        self.assertEqual(segment_row(2, 3, 2), "Average")


class RfmScoresTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tx = filter_transactions(raw_transactions(), as_of=AS_OF).valid

    def test_customer_metrics(self):
        metrics = build_customer_metrics(self.tx).set_index("customer_id")
        self.assertEqual(metrics.loc["2", "frequency"], 2)
        self.assertAlmostEqual(metrics.loc["2", "monetary"], 1100.0)
        self.assertEqual(metrics.loc["1", "last_purchase_date"], pd.Timestamp("2022-02-10"))
        self.assertEqual(metrics.loc["2", "recency_days"], 0)

    def test_scores_and_segments(self):
        scores = rfm_scores(build_customer_metrics(self.tx)).set_index("customer_id")
        self.assertEqual(
            scores.loc[["1", "2", "3"], ["recency_score", "frequency_score", "monetary_score"]].values.tolist(),
            [[1, 2, 2], [3, 3, 3], [2, 1, 1]],
        )
        self.assertEqual(scores.loc["2", "segment"], "Loyal Customer")
        self.assertEqual(scores.loc["1", "segment"], "At Risk")
        self.assertEqual(scores.loc["3", "segment"], "At Risk")

    def test_single_transaction_customer(self):
        one = self.tx[self.tx["transaction_id"] == 1]
        scores = rfm_scores(build_customer_metrics(one))
        self.assertEqual(len(scores), 1)
        row = scores.iloc[0]
        self.assertEqual((row["frequency"], row["monetary"]), (1, 100.0))
        self.assertEqual((row["recency_score"], row["frequency_score"], row["monetary_score"]), (1, 1, 1))
        self.assertEqual(row["segment"], "At Risk")

    def test_every_customer_scored_once(self):
        metrics = _metrics(23)
        scores = rfm_scores(metrics)
        self.assertEqual(sorted(scores["customer_id"]), sorted(metrics["customer_id"]))
        for col in ["recency_score", "frequency_score", "monetary_score"]:
            sizes = scores[col].value_counts().reindex(range(1, 6), fill_value=0)
            self.assertEqual(list(sizes), [5, 5, 5, 4, 4])

    def test_most_recent_customer_scores_five(self):
        metrics = _metrics(10)
        scores = rfm_scores(metrics).set_index("customer_id")
        latest = metrics.sort_values(["last_purchase_date", "customer_id"]).iloc[-1]["customer_id"]
        richest = metrics.loc[metrics["monetary"].idxmax(), "customer_id"]
        self.assertEqual(scores.loc[latest, "recency_score"], 5)
        self.assertEqual(scores.loc[richest, "monetary_score"], 5)

    def test_null_customers_excluded(self):
        tx = self.tx.copy()
        tx.loc[tx["transaction_id"] == 4, "customer_id"] = pd.NA
        self.assertNotIn("3", set(build_customer_metrics(tx)["customer_id"]))

    def test_empty(self):
        self.assertTrue(rfm_scores(build_customer_metrics(self.tx.iloc[0:0])).empty)


class CustomerReportsTest(unittest.TestCase):
    def setUp(self) -> None:
        self.tx = filter_transactions(raw_transactions(), as_of=AS_OF).valid

    def test_top_customers(self):
        top = top_customers(self.tx, n=2)
        self.assertEqual(list(top["customer_id"]), ["2", "1"])
        self.assertEqual(list(top["rank"]), [1, 2])
        self.assertAlmostEqual(top["total_sales"].iat[0], 1100.0)

    def test_segment_summary(self):
        summary = segment_summary(rfm_scores(build_customer_metrics(self.tx)))
        self.assertEqual(list(summary["segment"]), ["Loyal Customer", "At Risk"])
        self.assertEqual(list(summary["customers"]), [1, 2])
        self.assertAlmostEqual(float(summary["customers_pct"].sum()), 100.0)

    def test_build_customer_tables(self):
        out = build_customer_tables(self.tx, top_n=1)
        self.assertEqual(set(out), {"customer_rfm", "rfm_segments", "top_customers"})
        self.assertEqual(len(out["top_customers"]), 1)


if __name__ == "__main__":
    unittest.main()
