"""
Payment Method Report

Transaction volume, fees and net margin per payment method and region.
"""

from typing import Optional

import polars as pl

from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C
from .base import completed_orders
from .window import safe_divide

REQUIRED_COLUMNS = (C.PAYMENT_METHOD, C.REGION)


def payment_method_report(
    df: pl.DataFrame,
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """
    Payment method economics per region.

    `net_profit_margin_pct` is (profit - fees) / order value * 100, null when
    the order value is zero. Ordered by total transaction value descending.
    """
    orders = completed_orders(df, REQUIRED_COLUMNS, config)

    payments = orders.group_by([C.PAYMENT_METHOD, C.REGION]).agg([
        pl.len().cast(pl.Int64).alias("transaction_count"),
        pl.col(C.ORDER_TOTAL).sum().alias("total_transaction_value"),
        pl.col(C.ORDER_TOTAL).mean().alias("avg_transaction_value"),
        pl.col(C.PAYMENT_FEES).sum().alias("total_payment_fees"),
        (pl.col(C.PAYMENT_FEE_RATE).mean() * 100).alias("avg_fee_rate_pct"),
        pl.col(C.PROFIT).sum().alias("total_profit"),
    ])

    return (
        payments
        .with_columns(
            (
                safe_divide(
                    pl.col("total_profit") - pl.col("total_payment_fees"),
                    pl.col("total_transaction_value"),
                ) * 100
            ).round(2).alias("net_profit_margin_pct")
        )
        .with_columns([
            pl.col("total_transaction_value").round(2),
            pl.col("avg_transaction_value").round(2),
            pl.col("total_payment_fees").round(2),
            pl.col("avg_fee_rate_pct").round(3),
            pl.col("total_profit").round(2),
        ])
        .sort(
            ["total_transaction_value", C.PAYMENT_METHOD, C.REGION],
            descending=[True, False, False],
        )
    )
