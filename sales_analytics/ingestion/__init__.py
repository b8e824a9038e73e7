"""
Order Ingestion Module
"""
from .loader import FileFormat, LoadConfig, LoadResult, LoadStatus, OrderLoader, load_orders

__all__ = [
    "FileFormat",
    "LoadConfig",
    "LoadResult",
    "LoadStatus",
    "OrderLoader",
    "load_orders",
]
