"""
Customer Segmentation Report

Customer lifetime value, value segments from continuous percentiles and
equal-frequency value quartiles, summarised per segment.
"""

from typing import Optional

import polars as pl
import structlog

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders
from .window import continuous_percentile, ntile

logger = structlog.get_logger(__name__)

REQUIRED_COLUMNS = (C.BUYER_EMAIL, C.BUYER_NAME, C.REGION)
CUSTOMER_KEY = [C.BUYER_EMAIL, C.BUYER_NAME, C.REGION]

VIP = "VIP"
HIGH_VALUE = "High Value"
MEDIUM_VALUE = "Medium Value"
LOW_VALUE = "Low Value"
SEGMENTS = [VIP, HIGH_VALUE, MEDIUM_VALUE, LOW_VALUE]


def customer_segments(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    One row per customer (email, name, region) with lifetime metrics,
    `customer_segment` and `value_quartile` (1 = lowest lifetime value).

    Segments: VIP >= p90, High Value >= p75, Medium Value >= p50, else
    Low Value, with interpolated percentiles over all customers.
    """
    orders = completed_orders(df, REQUIRED_COLUMNS, config)

    customers = orders.group_by(CUSTOMER_KEY).agg([
        pl.len().cast(pl.Int64).alias("total_orders"),
        pl.col(C.REVENUE).sum().alias("lifetime_value"),
        pl.col(C.PROFIT).sum().alias("total_profit"),
        pl.col(C.ORDER_TOTAL).mean().alias("avg_order_value"),
        pl.col(C.ORDER_DATE).min().alias("first_order_date"),
        pl.col(C.ORDER_DATE).max().alias("last_order_date"),
        (pl.col(C.PRIME_MEMBER) == 1).sum().cast(pl.Int64).alias("prime_orders"),
    ])

    if customers.is_empty():
        return customers.with_columns([
            pl.lit(None, dtype=pl.Int64).alias("value_quartile"),
            pl.lit(None, dtype=pl.Utf8).alias("customer_segment"),
        ])

    lifetime = customers["lifetime_value"]
    p90 = continuous_percentile(lifetime, 0.90)
    p75 = continuous_percentile(lifetime, 0.75)
    p50 = continuous_percentile(lifetime, 0.50)

    logger.debug("Lifetime value thresholds", p90=p90, p75=p75, p50=p50, customers=len(customers))

    value = pl.col("lifetime_value")
    customers = customers.sort(["lifetime_value"] + CUSTOMER_KEY)

    return customers.with_columns([
        pl.Series("value_quartile", ntile(len(customers), 4), dtype=pl.Int64),
        pl.when(value >= p90).then(pl.lit(VIP))
        .when(value >= p75).then(pl.lit(HIGH_VALUE))
        .when(value >= p50).then(pl.lit(MEDIUM_VALUE))
        .otherwise(pl.lit(LOW_VALUE))
        .alias("customer_segment"),
    ])


def customer_segmentation_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """Per-segment summary, ordered by average lifetime value descending"""
    customers = customer_segments(df, config)

    return (
        customers
        .group_by("customer_segment")
        .agg([
            pl.len().cast(pl.Int64).alias("customer_count"),
            pl.col("lifetime_value").mean().alias("avg_lifetime_value"),
            pl.col("total_orders").mean().alias("avg_orders_per_customer"),
            pl.col("avg_order_value").mean().alias("avg_order_value"),
            pl.col("total_profit").sum().alias("segment_total_profit"),
        ])
        .sort(["avg_lifetime_value", "customer_segment"], descending=[True, False])
        .with_columns([
            pl.col("avg_lifetime_value").round(2),
            pl.col("avg_orders_per_customer").round(1),
            pl.col("avg_order_value").round(2),
            pl.col("segment_total_profit").round(2),
        ])
    )
