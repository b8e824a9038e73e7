"""
Fulfillment Comparison Report

Delivery reliability, shipping cost and margin per fulfillment type
(platform vs seller fulfilled) and shipping method.
"""

from typing import Optional

import polars as pl

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders, report_settings
from .window import safe_divide

REQUIRED_COLUMNS = (C.FULFILLMENT, C.SHIPPING_METHOD)


def fulfillment_comparison_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Compare fulfillment types per shipping method.

    Delivered and late counts come from two independent columns
    (delivery status and late flag). The average profit margin is the mean of
    per-order margins, skipping zero-revenue orders. Ordered by fulfillment
    type, then total profit descending.
    """
    config = report_settings(config)
    orders = completed_orders(df, REQUIRED_COLUMNS, config)

    metrics = orders.group_by([C.FULFILLMENT, C.SHIPPING_METHOD]).agg([
        pl.len().cast(pl.Int64).alias("total_orders"),
        (pl.col(C.DELIVERY_STATUS) == config.delivered_status).sum().cast(pl.Int64).alias("delivered_orders"),
        (pl.col(C.LATE_DELIVERY) == config.late_flag).sum().cast(pl.Int64).alias("late_orders"),
        pl.col(C.DELIVERY_DAYS).mean().alias("avg_delivery_days"),
        pl.col(C.REVENUE).sum().alias("total_revenue"),
        pl.col(C.PROFIT).sum().alias("total_profit"),
        (safe_divide(pl.col(C.PROFIT), pl.col(C.REVENUE)) * 100).mean().alias("avg_profit_margin"),
        pl.col(C.SHIPPING_COST).sum().alias("total_shipping_cost"),
        pl.col(C.SHIPPING_COST).mean().alias("avg_shipping_cost"),
    ])

    return (
        metrics
        .sort([C.FULFILLMENT, "total_profit", C.SHIPPING_METHOD], descending=[False, True, False])
        .select([
            C.FULFILLMENT,
            C.SHIPPING_METHOD,
            "total_orders",
            "delivered_orders",
            (safe_divide(pl.col("delivered_orders") * 100.0, pl.col("total_orders"))).round(2).alias("delivery_rate_pct"),
            "late_orders",
            (safe_divide(pl.col("late_orders") * 100.0, pl.col("total_orders"))).round(2).alias("late_delivery_pct"),
            pl.col("avg_delivery_days").round(1),
            pl.col("total_revenue").round(2),
            pl.col("total_profit").round(2),
            pl.col("avg_profit_margin").round(2).alias("avg_profit_margin_pct"),
            pl.col("total_shipping_cost").round(2),
            pl.col("avg_shipping_cost").round(2),
            safe_divide(pl.col("total_profit"), pl.col("total_orders")).round(2).alias("profit_per_order"),
        ])
    )
