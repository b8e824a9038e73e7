"""
Test Suite Configuration
"""
from datetime import date
from typing import Any, Callable, Dict, List

import polars as pl
import pytest

from sales_analytics.config.settings import ReportSettings, Settings
from sales_analytics.data.generators import OrderRecordGenerator
from sales_analytics.data.schema import ORDER_SCHEMA


DEFAULT_ORDER: Dict[str, Any] = {
    "buyer_email": "alice@example.com",
    "buyer_name": "Alice Doe",
    "region": "North America",
    "category": "Electronics",
    "brand": "Anker",
    "fulfillment": "FBA",
    "shipping_method": "Standard",
    "courier": "UPS",
    "payment_method": "Credit Card",
    "order_status": "Completed",
    "delivery_status": "Delivered",
    "late_delivery": "On Time",
    "prime_member": 0,
    "revenue": 100.0,
    "profit": 20.0,
    "units_sold": 1,
    "unit_price": 100.0,
    "discount_rate": 0.0,
    "discount_amount": 0.0,
    "shipping_cost": 5.0,
    "payment_fees": 3.0,
    "payment_fee_rate": 0.03,
    "order_total": 105.0,
    "order_date": date(2024, 1, 15),
    "delivery_days": 3,
}


def build_orders(rows: List[Dict[str, Any]]) -> pl.DataFrame:
    """Order table from partial rows; unspecified fields take DEFAULT_ORDER values"""
    records = [
        {**DEFAULT_ORDER, "order_id": f"ord-{i}", **row}
        for i, row in enumerate(rows)
    ]
    return pl.DataFrame(records, schema=ORDER_SCHEMA)


@pytest.fixture
def order_factory() -> Callable[[List[Dict[str, Any]]], pl.DataFrame]:
    """Build order tables from partial rows"""
    return build_orders


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(APP_ENV="testing", DEBUG=True)


@pytest.fixture
def report_config() -> ReportSettings:
    """Report settings with the production defaults"""
    return ReportSettings()


@pytest.fixture(scope="session")
def generated_orders() -> pl.DataFrame:
    """Reproducible synthetic order table"""
    return OrderRecordGenerator(seed=7, n_customers=120).generate(3000)


@pytest.fixture
def sample_orders_df() -> pl.DataFrame:
    """Small mixed order table for testing"""
    return build_orders([
        {"region": "North America", "order_date": date(2024, 1, 5), "revenue": 100.0},
        {"region": "North America", "order_date": date(2024, 2, 9), "revenue": 150.0},
        {"region": "Europe", "order_date": date(2024, 1, 20), "revenue": 80.0, "fulfillment": "FBM"},
        {"region": "Europe", "order_date": date(2024, 2, 2), "revenue": 60.0, "order_status": "Cancelled"},
        {"region": None, "order_date": date(2024, 2, 3), "revenue": 40.0},
    ])
