"""
Seasonal Pattern Report

Orders, revenue, profit and average order value by year, quarter, month and
day of week.
"""

from typing import Optional

import polars as pl

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders

REQUIRED_COLUMNS = (C.ORDER_DATE,)

# 0 = Sunday
DAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


def seasonal_pattern_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Aggregate completed orders per (year, month, day of week), then roll up to
    (year, quarter, month, day name) averaging the average order value across
    the day-of-week buckets. Ordered by year, month, day of week.
    """
    orders = completed_orders(df, REQUIRED_COLUMNS, config)
    order_date = pl.col(C.ORDER_DATE)

    daily = (
        orders
        .with_columns([
            order_date.dt.year().cast(pl.Int64).alias("year"),
            order_date.dt.month().cast(pl.Int64).alias("month"),
            # ISO weekday is 1 = Monday .. 7 = Sunday
            (order_date.dt.weekday().cast(pl.Int64) % 7).alias("day_of_week"),
            pl.format("Q{}", order_date.dt.quarter()).alias("quarter"),
        ])
        .group_by(["year", "month", "day_of_week", "quarter"])
        .agg([
            pl.len().cast(pl.Int64).alias("order_count"),
            pl.col(C.REVENUE).sum().alias("revenue"),
            pl.col(C.PROFIT).sum().alias("profit"),
            pl.col(C.ORDER_TOTAL).mean().alias("avg_order_value"),
        ])
    )

    return (
        daily
        .with_columns(
            pl.col("day_of_week").replace_strict(DAY_NAMES, return_dtype=pl.Utf8).alias("day_name")
        )
        .group_by(["year", "quarter", "month", "day_of_week", "day_name"])
        .agg([
            pl.col("order_count").sum().alias("total_orders"),
            pl.col("revenue").sum().round(2).alias("total_revenue"),
            pl.col("profit").sum().round(2).alias("total_profit"),
            pl.col("avg_order_value").mean().round(2).alias("avg_order_value"),
        ])
        .sort(["year", "month", "day_of_week"])
    )
