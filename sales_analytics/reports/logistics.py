"""
Logistics Report

Courier and shipping-method service levels per region.
"""

from typing import Optional

import polars as pl

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders, report_settings
from .window import safe_divide

REQUIRED_COLUMNS = (C.COURIER, C.SHIPPING_METHOD, C.REGION)


def logistics_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Delivery time, lateness and cost per (courier, shipping method, region).

    Groups with fewer than `min_shipments` shipments are dropped. Ordered by
    late percentage, then average delivery days, both ascending.
    """
    config = report_settings(config)
    orders = completed_orders(df, REQUIRED_COLUMNS, config)

    is_late = (pl.col(C.LATE_DELIVERY) == config.late_flag).sum().cast(pl.Int64)
    is_delivered = (pl.col(C.DELIVERY_STATUS) == config.delivered_status).sum().cast(pl.Int64)

    shipments = orders.group_by([C.COURIER, C.SHIPPING_METHOD, C.REGION]).agg([
        pl.len().cast(pl.Int64).alias("total_shipments"),
        pl.col(C.DELIVERY_DAYS).mean().round(1).alias("avg_delivery_days"),
        is_late.alias("late_shipments"),
        pl.col(C.SHIPPING_COST).mean().round(2).alias("avg_shipping_cost"),
        pl.col(C.SHIPPING_COST).sum().round(2).alias("total_shipping_cost"),
        is_delivered.alias("delivered_shipments"),
    ])

    return (
        shipments
        .filter(pl.col("total_shipments") >= config.min_shipments)
        .with_columns([
            safe_divide(pl.col("late_shipments") * 100.0, pl.col("total_shipments")).round(2).alias("late_pct"),
            safe_divide(pl.col("delivered_shipments") * 100.0, pl.col("total_shipments")).round(2).alias("delivery_success_rate"),
        ])
        .sort(["late_pct", "avg_delivery_days", C.COURIER, C.SHIPPING_METHOD, C.REGION], nulls_last=True)
        .select([
            C.COURIER,
            C.SHIPPING_METHOD,
            C.REGION,
            "total_shipments",
            "avg_delivery_days",
            "late_shipments",
            "late_pct",
            "avg_shipping_cost",
            "total_shipping_cost",
            "delivery_success_rate",
        ])
    )
