"""
Data Quality Module
"""
from .validators import (
    OrderValidator,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    count_excluded,
    create_order_validator,
)

__all__ = [
    "OrderValidator",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationStatus",
    "count_excluded",
    "create_order_validator",
]
