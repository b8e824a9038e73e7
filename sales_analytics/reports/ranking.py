"""
Category / Brand Ranking Report

Top brands per region by revenue, with profit rank, dense brand rank within
category and the revenue percentile inside the region.
"""

from typing import Optional

import polars as pl

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders, report_settings
from .window import dense_rank, percent_rank, standard_rank

REQUIRED_COLUMNS = (C.REGION, C.CATEGORY, C.BRAND)


def category_ranking_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Rank (region, category, brand) groups.

    Keeps the groups whose revenue rank within their region is at most
    `top_n_per_region`; ordered by region, then revenue rank.
    """
    config = report_settings(config)
    orders = completed_orders(df, REQUIRED_COLUMNS, config)

    performance = orders.group_by([C.REGION, C.CATEGORY, C.BRAND]).agg([
        pl.len().cast(pl.Int64).alias("orders"),
        pl.col(C.UNITS_SOLD).sum().alias("units_sold"),
        pl.col(C.REVENUE).sum().alias("revenue"),
        pl.col(C.PROFIT).sum().alias("profit"),
        (pl.col(C.DISCOUNT_RATE).mean() * 100).alias("avg_discount_pct"),
        pl.col(C.UNIT_PRICE).mean().alias("avg_unit_price"),
    ])

    ranked = performance.with_columns([
        standard_rank("revenue", C.REGION).alias("revenue_rank_in_region"),
        standard_rank("profit", C.REGION).alias("profit_rank_in_region"),
        dense_rank("revenue", C.CATEGORY).alias("brand_rank_in_category"),
        percent_rank("revenue", C.REGION).alias("revenue_percentile"),
    ])

    return (
        ranked
        .filter(pl.col("revenue_rank_in_region") <= config.top_n_per_region)
        .sort([C.REGION, "revenue_rank_in_region", C.CATEGORY, C.BRAND])
        .with_columns([
            pl.col("revenue").round(2),
            pl.col("profit").round(2),
            pl.col("avg_discount_pct").round(2),
            pl.col("avg_unit_price").round(2),
            pl.col("revenue_percentile").round(4),
        ])
    )
