"""
Unit Tests - Window Helpers
"""
import pytest
import polars as pl

from sales_analytics.reports.window import (
    continuous_percentile,
    dense_rank,
    lag,
    ntile,
    percent_rank,
    running_sum,
    safe_divide,
    standard_rank,
)


class TestRanking:
    """Tests for rank, dense rank and percent rank"""

    def test_standard_rank_skips_after_tie(self):
        df = pl.DataFrame({"revenue": [300.0, 200.0, 200.0, 100.0]})

        result = df.select(standard_rank("revenue").alias("rank"))

        assert result["rank"].to_list() == [1, 2, 2, 4]

    def test_dense_rank_has_no_gaps(self):
        df = pl.DataFrame({"revenue": [300.0, 200.0, 200.0, 100.0]})

        result = df.select(dense_rank("revenue").alias("rank"))

        assert result["rank"].to_list() == [1, 2, 2, 3]

    def test_rank_is_partitioned(self):
        df = pl.DataFrame({
            "region": ["NA", "NA", "EU", "EU"],
            "revenue": [10.0, 20.0, 5.0, 1.0],
        })

        result = df.select(standard_rank("revenue", "region").alias("rank"))

        assert result["rank"].to_list() == [2, 1, 1, 2]

    def test_percent_rank(self):
        df = pl.DataFrame({"revenue": [100.0, 200.0, 200.0, 300.0]})

        result = df.select(percent_rank("revenue").alias("pct"))["pct"].to_list()

        assert result[0] == 0.0
        assert result[1] == pytest.approx(1 / 3)
        assert result[2] == pytest.approx(1 / 3)
        assert result[3] == 1.0

    def test_percent_rank_single_row_partition_is_zero(self):
        df = pl.DataFrame({"region": ["NA", "EU", "EU"], "revenue": [10.0, 5.0, 7.0]})

        result = df.select(percent_rank("revenue", "region").alias("pct"))

        assert result["pct"].to_list() == [0.0, 0.0, 1.0]


class TestNtile:
    """Tests for equal-frequency bucketing"""

    def test_remainder_goes_to_earlier_buckets(self):
        assert ntile(10, 4) == [1, 1, 1, 2, 2, 2, 3, 3, 4, 4]

    def test_even_split(self):
        assert ntile(8, 4) == [1, 1, 2, 2, 3, 3, 4, 4]

    def test_fewer_rows_than_buckets(self):
        assert ntile(3, 4) == [1, 2, 3]

    def test_no_rows(self):
        assert ntile(0, 4) == []

    def test_invalid_bucket_count(self):
        with pytest.raises(ValueError):
            ntile(10, 0)


class TestSequenceHelpers:
    """Tests for lag, running sum and division"""

    def test_lag_within_partition(self):
        df = pl.DataFrame({
            "region": ["EU", "EU", "NA", "NA"],
            "revenue": [1.0, 2.0, 3.0, 4.0],
        })

        result = df.select(lag("revenue", "region").alias("prev"))

        assert result["prev"].to_list() == [None, 1.0, None, 3.0]

    def test_running_sum_within_partition(self):
        df = pl.DataFrame({
            "region": ["EU", "EU", "NA", "NA"],
            "revenue": [1.0, 2.0, 3.0, 4.0],
        })

        result = df.select(running_sum("revenue", "region").alias("total"))

        assert result["total"].to_list() == [1.0, 3.0, 3.0, 7.0]

    def test_safe_divide_guards_zero_and_null(self):
        df = pl.DataFrame({
            "num": [10.0, 10.0, 10.0],
            "den": [4.0, 0.0, None],
        })

        result = df.select(safe_divide(pl.col("num"), pl.col("den")).alias("ratio"))

        assert result["ratio"].to_list() == [2.5, None, None]


class TestContinuousPercentile:
    """Tests for interpolated percentiles"""

    def test_interpolates_between_values(self):
        series = pl.Series([float(v) for v in range(1, 101)])

        assert continuous_percentile(series, 0.9) == pytest.approx(90.1)
        assert continuous_percentile(series, 0.75) == pytest.approx(75.25)
        assert continuous_percentile(series, 0.5) == pytest.approx(50.5)

    def test_empty_series(self):
        assert continuous_percentile(pl.Series([], dtype=pl.Float64), 0.5) is None
