from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

import pandas as pd

from utils.report import format_report, present, render_report_book, write_report


def _report() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "category": ["Beauty", "Gifts"],
            "revenue": [200.004, 0.0],
            "profit_margin_pct": pd.array([36.363636, pd.NA], dtype="Float64"),
        }
    )


class PresentTest(unittest.TestCase):
    def test_rounds_floats_and_keeps_undefined(self):
        shown = present(_report())
        self.assertEqual(shown["revenue"].iat[0], 200.0)
        self.assertAlmostEqual(shown["profit_margin_pct"].iat[0], 36.36)
        self.assertIs(shown["profit_margin_pct"].iat[1], pd.NA)
        self.assertEqual(list(shown["category"]), ["Beauty", "Gifts"])

    def test_input_untouched(self):
        df = _report()
        present(df)
        self.assertEqual(df["revenue"].iat[0], 200.004)


class FormatReportTest(unittest.TestCase):
    def test_text_table(self):
        text = format_report("category_performance", _report())
        self.assertTrue(text.startswith("== category_performance (2 rows) =="))
        self.assertIn("36.36", text)
        self.assertIn("<NA>", text)

    def test_empty_report(self):
        text = format_report("time_of_day", pd.DataFrame(columns=["shift"]))
        self.assertIn("(no rows)", text)

    def test_report_book_order(self):
        book = render_report_book({"zeta": _report(), "monthly_trend": _report(), "executive_summary": _report()})
        self.assertLess(book.index("executive_summary"), book.index("monthly_trend"))
        self.assertLess(book.index("monthly_trend"), book.index("zeta"))


class WriteReportTest(unittest.TestCase):
    def test_csv_output(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = write_report(_report(), Path(tmp) / "out" / "category.csv")
            back = pd.read_csv(path)
        self.assertEqual(list(back["category"]), ["Beauty", "Gifts"])
        self.assertAlmostEqual(back["profit_margin_pct"].iat[0], 36.36)
        self.assertTrue(pd.isna(back["profit_margin_pct"].iat[1]))

    def test_unsupported_format(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValueError):
                write_report(_report(), Path(tmp) / "category.xlsx")


if __name__ == "__main__":
    unittest.main()
