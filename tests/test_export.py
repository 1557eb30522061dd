"""
CSV export of the parsed series.
"""

import os
import tempfile
import unittest

import pandas as pd

from network_rank.export import series_frame, write_series_csv
from network_rank.series import build_series


class TestExport(unittest.TestCase):

    def setUp(self):
        self.series, _span = build_series(
            ["Mon, 05 Jan 2009 12:00:00", "10 out of 200", "Tue, 06 Jan 2010", "5 out of 200"]
        )

    def test_frame_columns_and_keys(self):
        df = series_frame(self.series, "%Y-%m-%d")
        self.assertEqual(list(df.columns), ["date", "percentile", "total"])
        self.assertEqual(list(df["date"]), ["2009-01-05", "2010-01-06"])

    def test_written_csv_reads_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = write_series_csv(self.series, os.path.join(tmp, "out", "rank.csv"), "%Y-%m-%d")
            df = pd.read_csv(path)
        self.assertEqual(len(df), 2)
        self.assertAlmostEqual(df["percentile"][0], 95.0)
        self.assertEqual(list(df["total"]), [200.0, 200.0])


if __name__ == "__main__":
    unittest.main()
