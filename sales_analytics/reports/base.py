"""
Shared report plumbing: completed-order filtering and report settings lookup.
"""

from typing import Optional, Sequence

import polars as pl

from sales_analytics.config import get_settings
from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C


def report_settings(config: Optional[ReportSettings] = None) -> ReportSettings:
    return config or get_settings().reports


def completed_orders(
    df: pl.DataFrame,
    required_columns: Sequence[str],
    config: Optional[ReportSettings] = None,
) -> pl.DataFrame:
    """Completed orders with every required column present"""
    config = report_settings(config)
    completed = df.filter(pl.col(C.ORDER_STATUS) == config.completed_status)
    if required_columns:
        completed = completed.drop_nulls(subset=list(required_columns))
    return completed
