"""
Regional Growth Report

Monthly revenue per region with month-over-month growth, the region's average
growth and a running revenue total.
"""

from typing import Optional

import polars as pl

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders
from .window import lag, running_sum, safe_divide

REQUIRED_COLUMNS = (C.REGION, C.ORDER_DATE)


def regional_growth_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Month-over-month revenue growth by region.

    Growth is null for a region's first month and wherever the previous
    month's revenue is zero. Ordered by region, then month.
    """
    orders = completed_orders(df, REQUIRED_COLUMNS, config)

    monthly = (
        orders
        .with_columns(pl.col(C.ORDER_DATE).dt.truncate("1mo").alias("order_month"))
        .group_by([C.REGION, "order_month"])
        .agg([
            pl.col(C.REVENUE).sum().alias("total_revenue"),
            pl.col(C.ORDER_ID).drop_nulls().n_unique().cast(pl.Int64).alias("order_count"),
            pl.col(C.PROFIT).sum().alias("total_profit"),
        ])
        .sort([C.REGION, "order_month"])
    )

    growth = monthly.with_columns(
        lag("total_revenue", C.REGION).alias("prev_month_revenue")
    ).with_columns(
        (
            safe_divide(
                pl.col("total_revenue") - pl.col("prev_month_revenue"),
                pl.col("prev_month_revenue"),
            ) * 100
        ).round(2).alias("mom_growth_pct")
    )

    return growth.with_columns([
        pl.col("mom_growth_pct").mean().over(C.REGION).alias("avg_regional_growth"),
        running_sum("total_revenue", C.REGION).alias("cumulative_revenue"),
    ])
