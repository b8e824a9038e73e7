"""
Discount Impact Report

Order volume, revenue and margin per discount band and category.
"""

from typing import Optional

import polars as pl

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders
from .window import safe_divide

REQUIRED_COLUMNS = (C.CATEGORY, C.DISCOUNT_RATE)

NO_DISCOUNT = "No Discount"
DISCOUNT_BANDS = [NO_DISCOUNT, "0-5%", "5-10%", "10-20%", "20%+"]
BAND_ORDER = {band: position for position, band in enumerate(DISCOUNT_BANDS)}


def discount_band(column: str = C.DISCOUNT_RATE) -> pl.Expr:
    """Band a discount rate; every band includes its upper edge"""
    rate = pl.col(column)
    return (
        pl.when(rate == 0).then(pl.lit(NO_DISCOUNT))
        .when(rate <= 0.05).then(pl.lit("0-5%"))
        .when(rate <= 0.10).then(pl.lit("5-10%"))
        .when(rate <= 0.20).then(pl.lit("10-20%"))
        .otherwise(pl.lit("20%+"))
    )


def discount_impact_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Discount band x category performance.

    Ordered by band (No Discount, 0-5%, 5-10%, 10-20%, 20%+), then total
    revenue descending.
    """
    orders = completed_orders(df, REQUIRED_COLUMNS, config)

    banded = orders.with_columns(discount_band().alias("discount_band"))

    impact = banded.group_by(["discount_band", C.CATEGORY]).agg([
        pl.len().cast(pl.Int64).alias("order_count"),
        pl.col(C.UNITS_SOLD).mean().alias("avg_units_per_order"),
        pl.col(C.REVENUE).sum().alias("total_revenue"),
        pl.col(C.PROFIT).sum().alias("total_profit"),
        (safe_divide(pl.col(C.PROFIT), pl.col(C.REVENUE)).mean() * 100).alias("avg_profit_margin_pct"),
        pl.col(C.DISCOUNT_AMOUNT).sum().alias("total_discount_given"),
    ])

    return (
        impact
        .with_columns(
            pl.col("discount_band").replace_strict(BAND_ORDER, return_dtype=pl.Int64).alias("_band_order")
        )
        .sort(["_band_order", "total_revenue", C.CATEGORY], descending=[False, True, False])
        .drop("_band_order")
        .with_columns([
            pl.col("avg_units_per_order").round(2),
            pl.col("total_revenue").round(2),
            pl.col("total_profit").round(2),
            pl.col("avg_profit_margin_pct").round(2),
            pl.col("total_discount_given").round(2),
        ])
    )
