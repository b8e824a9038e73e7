"""
Order Data Module
"""
from .schema import ORDER_SCHEMA, OrderColumns, conform_orders, empty_orders
from .generators import OrderRecordGenerator

__all__ = [
    "ORDER_SCHEMA",
    "OrderColumns",
    "conform_orders",
    "empty_orders",
    "OrderRecordGenerator",
]
