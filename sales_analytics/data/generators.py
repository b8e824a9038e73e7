"""
Synthetic Order Generator

Generates reproducible marketplace order tables in the canonical order
schema for demos and tests.
"""

import random
import uuid
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import polars as pl
from faker import Faker

from sales_analytics.data.schema import ORDER_SCHEMA, SOURCE_COLUMN_MAP


# =============================================================================
# CONFIGURATION
# =============================================================================

REGIONS = ["North America", "Europe", "Asia", "Middle East", "South America"]

CATEGORIES = {
    "Electronics": ["Anker", "Samsung", "Sony", "Logitech"],
    "Home & Kitchen": ["Instant Pot", "Ninja", "OXO", "Dyson"],
    "Books": ["Penguin", "HarperCollins", "Hachette"],
    "Beauty": ["CeraVe", "Olay", "Neutrogena"],
    "Sports": ["Nike", "Adidas", "Coleman"],
}

PRICE_RANGES = {
    "Electronics": (20.0, 900.0),
    "Home & Kitchen": (15.0, 450.0),
    "Books": (8.0, 40.0),
    "Beauty": (6.0, 80.0),
    "Sports": (12.0, 250.0),
}

FULFILLMENT_TYPES = [("FBA", 0.6), ("FBM", 0.4)]
SHIPPING_METHODS = [("Standard", 0.55), ("Expedited", 0.30), ("Priority", 0.15)]
COURIERS = ["UPS", "FedEx", "DHL", "USPS", "Amazon Logistics"]
PAYMENT_METHODS = [
    ("Credit Card", 0.45, 0.029),
    ("Debit Card", 0.20, 0.015),
    ("Amazon Pay", 0.15, 0.020),
    ("PayPal", 0.12, 0.034),
    ("Gift Card", 0.08, 0.0),
]
ORDER_STATUSES = [("Completed", 0.85), ("Cancelled", 0.06), ("Returned", 0.05), ("Pending", 0.04)]
DISCOUNT_RATES = [0.0, 0.0, 0.0, 0.03, 0.05, 0.08, 0.10, 0.15, 0.20, 0.25]
SHIPPING_DAYS = {"Standard": (3, 9), "Expedited": (2, 5), "Priority": (1, 3)}


# =============================================================================
# GENERATOR
# =============================================================================

class OrderRecordGenerator:
    """
    Generate realistic marketplace order records.

    Every draw comes from generators seeded at construction, so the same seed
    always yields the same table.

    Example:
        generator = OrderRecordGenerator(seed=7)
        orders = generator.generate(5000)
    """

    def __init__(self, seed: int = 42, n_customers: int = 500):
        self.seed = seed
        self.random = random.Random(seed)
        self.rng = np.random.default_rng(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)
        self.customers = self._generate_customers(n_customers)

    def _generate_customers(self, n: int) -> List[Tuple[str, str, str, bool]]:
        """Buyer email, name, home region and prime membership"""
        customers = []
        for _ in range(n):
            name = self.fake.name()
            email = f"{name.lower().replace(' ', '.')}.{self.random.randint(1, 9999)}@example.com"
            customers.append((
                email,
                name,
                self.random.choice(REGIONS),
                self.random.random() < 0.4,
            ))
        return customers

    def _choose(self, weighted: List[tuple]) -> tuple:
        return self.random.choices(weighted, weights=[w[1] for w in weighted])[0]

    def generate(
        self,
        n: int = 10000,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> pl.DataFrame:
        """Generate n order records between start_date and end_date"""
        start_date = start_date or date(2023, 1, 1)
        end_date = end_date or date(2024, 12, 31)
        span_days = max((end_date - start_date).days, 0)

        orders = []
        for _ in range(n):
            email, name, region, is_prime = self.random.choice(self.customers)
            category = self.random.choice(list(CATEGORIES))
            brand = self.random.choice(CATEGORIES[category])
            fulfillment = self._choose(FULFILLMENT_TYPES)[0]
            shipping_method = self._choose(SHIPPING_METHODS)[0]
            payment_method, _, fee_rate = self._choose(PAYMENT_METHODS)
            status = self._choose(ORDER_STATUSES)[0]

            low, high = PRICE_RANGES[category]
            unit_price = round(float(self.rng.uniform(low, high)), 2)
            units_sold = int(self.rng.choice([1, 2, 3, 4, 5], p=[0.55, 0.25, 0.10, 0.06, 0.04]))
            discount_rate = self.random.choice(DISCOUNT_RATES)

            gross = unit_price * units_sold
            discount_amount = round(gross * discount_rate, 2)
            revenue = round(gross - discount_amount, 2)
            margin = float(self.rng.normal(0.22, 0.08)) - discount_rate / 2
            profit = round(revenue * margin, 2)

            shipping_cost = 0.0 if fulfillment == "FBA" and is_prime else round(float(self.rng.uniform(3, 15)), 2)
            order_total = round(revenue + shipping_cost, 2)
            payment_fees = round(order_total * fee_rate, 2)

            fastest, slowest = SHIPPING_DAYS[shipping_method]
            days = self.random.randint(fastest, slowest + 4)
            late = days > slowest

            orders.append({
                "order_id": str(uuid.UUID(int=self.random.getrandbits(128))),
                "buyer_email": email,
                "buyer_name": name,
                "region": region,
                "category": category,
                "brand": brand,
                "fulfillment": fulfillment,
                "shipping_method": shipping_method,
                "courier": self.random.choice(COURIERS),
                "payment_method": payment_method,
                "order_status": status,
                "delivery_status": "Delivered" if status == "Completed" and self.random.random() < 0.96 else "In Transit",
                "late_delivery": "Late" if late else "On Time",
                "prime_member": int(is_prime),
                "revenue": revenue,
                "profit": profit,
                "units_sold": units_sold,
                "unit_price": unit_price,
                "discount_rate": discount_rate,
                "discount_amount": discount_amount,
                "shipping_cost": shipping_cost,
                "payment_fees": payment_fees,
                "payment_fee_rate": fee_rate,
                "order_total": order_total,
                "order_date": start_date + timedelta(days=self.random.randint(0, span_days)),
                "delivery_days": days,
            })

        return pl.DataFrame(orders, schema=ORDER_SCHEMA)


def to_source_headers(df: pl.DataFrame) -> pl.DataFrame:
    """Rename canonical columns back to the original spreadsheet headers"""
    reverse: Dict[str, str] = {dst: src for src, dst in SOURCE_COLUMN_MAP.items()}
    return df.rename({c: reverse[c] for c in df.columns if c in reverse})


def write_orders(df: pl.DataFrame, path: Union[str, Path], source_headers: bool = True) -> Path:
    """Write an order table to CSV or Parquet by file suffix"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if source_headers:
        df = to_source_headers(df)

    if path.suffix == ".parquet":
        df.write_parquet(path)
    else:
        df.write_csv(path)
    return path
