"""
Aggregation Reports Module
"""
from .growth import regional_growth_report
from .fulfillment import fulfillment_comparison_report
from .ranking import category_ranking_report
from .seasonality import seasonal_pattern_report
from .customers import customer_segments, customer_segmentation_report
from .logistics import logistics_report
from .payments import payment_method_report
from .discounts import discount_band, discount_impact_report
from .engine import REPORTS, ReportEngine, ReportResult, run_reports, write_reports

__all__ = [
    "regional_growth_report",
    "fulfillment_comparison_report",
    "category_ranking_report",
    "seasonal_pattern_report",
    "customer_segments",
    "customer_segmentation_report",
    "logistics_report",
    "payment_method_report",
    "discount_band",
    "discount_impact_report",
    "REPORTS",
    "ReportEngine",
    "ReportResult",
    "run_reports",
    "write_reports",
]
