"""
Prefect Workflow Orchestration - Sales Reports

Batch workflow that turns an order export into the eight report tables:
- Load and conform the order table
- Data quality checks
- Concurrent report computation
- Report output to the reports directory
"""

from typing import Dict, List, Optional

import polars as pl
import structlog
from prefect import flow, task

from sales_analytics.config import get_settings
from sales_analytics.ingestion.loader import OrderLoader
from sales_analytics.quality.validators import create_order_validator
from sales_analytics.reports.engine import ReportEngine, ReportResult, write_reports

logger = structlog.get_logger(__name__)
settings = get_settings()


# =============================================================================
# TASKS
# =============================================================================

@task(
    name="load_orders",
    description="Load and conform the order export",
    retries=2,
    retry_delay_seconds=30,
)
def load_orders_task(source_path: str) -> pl.DataFrame:
    """Load the order table"""
    df, result = OrderLoader().load(source_path)
    if result.error_message:
        raise RuntimeError(f"Order load failed: {result.error_message}")

    logger.info(
        "Orders loaded",
        rows=result.rows_loaded,
        unparseable_dates=result.unparseable_dates,
    )
    return df


@task(
    name="validate_orders",
    description="Run data quality validations",
)
def validate_orders_task(df: pl.DataFrame) -> dict:
    """Validate order data quality"""
    result = create_order_validator().validate(df)

    logger.info(
        f"Validation {result.status.value}: "
        f"{result.passed_checks}/{result.total_checks} checks passed"
    )

    return {
        "status": result.status.value,
        "total_checks": result.total_checks,
        "passed_checks": result.passed_checks,
        "failed_checks": result.failed_checks,
        "warning_count": result.warning_count,
        "success_rate": result.success_rate,
    }


@task(
    name="compute_reports",
    description="Compute the aggregation reports",
)
def compute_reports_task(
    df: pl.DataFrame,
    reports: Optional[List[str]] = None,
) -> Dict[str, ReportResult]:
    """Compute reports concurrently over the loaded snapshot"""
    return ReportEngine().run(df, reports)


@task(
    name="write_reports",
    description="Persist report tables",
)
def write_reports_task(
    results: Dict[str, ReportResult],
    output_dir: Optional[str] = None,
    file_format: Optional[str] = None,
) -> Dict[str, str]:
    """Write report tables to the output directory"""
    written = write_reports(results, output_dir, file_format)
    return {name: str(path) for name, path in written.items()}


# =============================================================================
# FLOWS
# =============================================================================

@flow(
    name="sales_reports",
    description="Compute sales analytics reports from an order export",
)
def sales_report_flow(
    source_path: Optional[str] = None,
    output_dir: Optional[str] = None,
    reports: Optional[List[str]] = None,
    file_format: Optional[str] = None,
) -> dict:
    """
    Sales report pipeline.

    Steps:
    1. Load order export
    2. Validate data quality
    3. Compute reports
    4. Write report tables
    """
    source_path = source_path or settings.data.source_path
    logger.info("Starting sales report flow", source=source_path)

    orders = load_orders_task(source_path)
    validation = validate_orders_task(orders)
    results = compute_reports_task(orders, reports)
    written = write_reports_task(results, output_dir, file_format)

    summary = {
        "source_path": source_path,
        "input_rows": orders.height,
        "validation": validation,
        "reports": {
            name: {
                "rows": result.row_count,
                "excluded_rows": result.excluded_rows,
                "errors": result.errors,
                "output_path": written.get(name),
            }
            for name, result in results.items()
        },
    }
    summary["status"] = "success" if all(r.succeeded for r in results.values()) else "partial"

    logger.info("Sales report flow complete", status=summary["status"])
    return summary


if __name__ == "__main__":
    from sales_analytics.config.logging import configure_logging

    configure_logging()
    sales_report_flow()
