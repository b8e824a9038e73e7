"""
Order Record Schema

Canonical column names and types of the flat order table every report reads,
plus the mapping from the original spreadsheet headers.
"""

from typing import Dict, List

import polars as pl


class OrderColumns:
    """Canonical order table column names"""
    ORDER_ID = "order_id"
    BUYER_EMAIL = "buyer_email"
    BUYER_NAME = "buyer_name"
    REGION = "region"
    CATEGORY = "category"
    BRAND = "brand"
    FULFILLMENT = "fulfillment"
    SHIPPING_METHOD = "shipping_method"
    COURIER = "courier"
    PAYMENT_METHOD = "payment_method"
    ORDER_STATUS = "order_status"
    DELIVERY_STATUS = "delivery_status"
    LATE_DELIVERY = "late_delivery"
    PRIME_MEMBER = "prime_member"
    REVENUE = "revenue"
    PROFIT = "profit"
    UNITS_SOLD = "units_sold"
    UNIT_PRICE = "unit_price"
    DISCOUNT_RATE = "discount_rate"
    DISCOUNT_AMOUNT = "discount_amount"
    SHIPPING_COST = "shipping_cost"
    PAYMENT_FEES = "payment_fees"
    PAYMENT_FEE_RATE = "payment_fee_rate"
    ORDER_TOTAL = "order_total"
    ORDER_DATE = "order_date"
    DELIVERY_DAYS = "delivery_days"


C = OrderColumns

ORDER_SCHEMA: Dict[str, pl.DataType] = {
    C.ORDER_ID: pl.Utf8,
    C.BUYER_EMAIL: pl.Utf8,
    C.BUYER_NAME: pl.Utf8,
    C.REGION: pl.Utf8,
    C.CATEGORY: pl.Utf8,
    C.BRAND: pl.Utf8,
    C.FULFILLMENT: pl.Utf8,
    C.SHIPPING_METHOD: pl.Utf8,
    C.COURIER: pl.Utf8,
    C.PAYMENT_METHOD: pl.Utf8,
    C.ORDER_STATUS: pl.Utf8,
    C.DELIVERY_STATUS: pl.Utf8,
    C.LATE_DELIVERY: pl.Utf8,
    C.PRIME_MEMBER: pl.Int64,
    C.REVENUE: pl.Float64,
    C.PROFIT: pl.Float64,
    C.UNITS_SOLD: pl.Int64,
    C.UNIT_PRICE: pl.Float64,
    C.DISCOUNT_RATE: pl.Float64,
    C.DISCOUNT_AMOUNT: pl.Float64,
    C.SHIPPING_COST: pl.Float64,
    C.PAYMENT_FEES: pl.Float64,
    C.PAYMENT_FEE_RATE: pl.Float64,
    C.ORDER_TOTAL: pl.Float64,
    C.ORDER_DATE: pl.Date,
    C.DELIVERY_DAYS: pl.Int64,
}

# Headers used by the original sales spreadsheet export
SOURCE_COLUMN_MAP: Dict[str, str] = {
    "Order Id": C.ORDER_ID,
    "Buyer_Email": C.BUYER_EMAIL,
    "Buyer_Name": C.BUYER_NAME,
    "Region": C.REGION,
    "Category": C.CATEGORY,
    "Brand": C.BRAND,
    "Fulfillment": C.FULFILLMENT,
    "Shipping_Method": C.SHIPPING_METHOD,
    "Courier": C.COURIER,
    "Payment_Method": C.PAYMENT_METHOD,
    "Order_Status": C.ORDER_STATUS,
    "Delivery_Status": C.DELIVERY_STATUS,
    "Late Deliveries?": C.LATE_DELIVERY,
    "Prime_Member": C.PRIME_MEMBER,
    "Revenue_USD": C.REVENUE,
    "Profit": C.PROFIT,
    "UnitsSold": C.UNITS_SOLD,
    "UnitPrice": C.UNIT_PRICE,
    "DiscountRate": C.DISCOUNT_RATE,
    "DiscountAmount": C.DISCOUNT_AMOUNT,
    "Shipping_Cost": C.SHIPPING_COST,
    "Payment_Fees": C.PAYMENT_FEES,
    "Payment_Fee_Rate": C.PAYMENT_FEE_RATE,
    "OrderTotal_USD": C.ORDER_TOTAL,
    "OrderDate": C.ORDER_DATE,
    "Days": C.DELIVERY_DAYS,
}

STRING_COLUMNS: List[str] = [name for name, dtype in ORDER_SCHEMA.items() if dtype == pl.Utf8]
FLOAT_COLUMNS: List[str] = [name for name, dtype in ORDER_SCHEMA.items() if dtype == pl.Float64]
INTEGER_COLUMNS: List[str] = [name for name, dtype in ORDER_SCHEMA.items() if dtype == pl.Int64]


def empty_orders() -> pl.DataFrame:
    """Empty order table with the canonical schema"""
    return pl.DataFrame(schema=ORDER_SCHEMA)


def conform_orders(df: pl.DataFrame) -> pl.DataFrame:
    """
    Cast a frame onto the canonical order schema.

    Original spreadsheet headers are renamed, missing columns are added as
    nulls and extra columns are kept untouched after the canonical ones.
    Values that cannot be cast become null.
    """
    if df.width == 0:
        return empty_orders()

    renames = {src: dst for src, dst in SOURCE_COLUMN_MAP.items() if src in df.columns and dst not in df.columns}
    if renames:
        df = df.rename(renames)

    missing = [name for name in ORDER_SCHEMA if name not in df.columns]
    if missing:
        df = df.with_columns([pl.lit(None, dtype=ORDER_SCHEMA[name]).alias(name) for name in missing])

    columns = []
    for name, dtype in ORDER_SCHEMA.items():
        if dtype == pl.Date and df.schema[name] == pl.Utf8:
            columns.append(pl.col(name).str.to_date(strict=False).alias(name))
        else:
            columns.append(pl.col(name).cast(dtype, strict=False).alias(name))

    extras = [name for name in df.columns if name not in ORDER_SCHEMA]
    return df.select(columns + extras)
