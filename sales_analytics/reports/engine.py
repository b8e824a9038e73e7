"""
Report Engine

Runs the eight aggregation reports over one immutable order snapshot and
collects their outputs with data-quality counts and timings.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import polars as pl

from sales_analytics.config import get_settings
from sales_analytics.config.logging import get_logger
from sales_analytics.config.settings import ReportSettings
from sales_analytics.data.schema import OrderColumns as C, conform_orders
from sales_analytics.quality.validators import count_excluded
from . import customers, discounts, fulfillment, growth, logistics, payments, ranking, seasonality

logger = get_logger(__name__)
settings = get_settings()


@dataclass(frozen=True)
class ReportDefinition:
    """A named report function and the columns its grouping requires"""
    name: str
    func: Callable[..., pl.DataFrame]
    required_columns: Tuple[str, ...]
    description: str = ""


REPORTS: Dict[str, ReportDefinition] = {
    definition.name: definition
    for definition in [
        ReportDefinition(
            "regional_growth",
            growth.regional_growth_report,
            growth.REQUIRED_COLUMNS,
            "Month-over-month revenue growth by region",
        ),
        ReportDefinition(
            "fulfillment_comparison",
            fulfillment.fulfillment_comparison_report,
            fulfillment.REQUIRED_COLUMNS,
            "Delivery reliability and margin by fulfillment type",
        ),
        ReportDefinition(
            "category_ranking",
            ranking.category_ranking_report,
            ranking.REQUIRED_COLUMNS,
            "Top brands per region and category",
        ),
        ReportDefinition(
            "seasonal_pattern",
            seasonality.seasonal_pattern_report,
            seasonality.REQUIRED_COLUMNS,
            "Sales by year, quarter, month and weekday",
        ),
        ReportDefinition(
            "customer_segmentation",
            customers.customer_segmentation_report,
            customers.REQUIRED_COLUMNS,
            "Customer value segments",
        ),
        ReportDefinition(
            "logistics",
            logistics.logistics_report,
            logistics.REQUIRED_COLUMNS,
            "Courier service levels",
        ),
        ReportDefinition(
            "payment_method",
            payments.payment_method_report,
            payments.REQUIRED_COLUMNS,
            "Payment method economics",
        ),
        ReportDefinition(
            "discount_impact",
            discounts.discount_impact_report,
            discounts.REQUIRED_COLUMNS,
            "Discount band performance by category",
        ),
    ]
}


@dataclass
class ReportResult:
    """Output of one report run"""
    report_name: str
    rows: pl.DataFrame
    input_rows: int
    completed_rows: int
    excluded_rows: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: float
    errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.errors

    @property
    def row_count(self) -> int:
        return self.rows.height


class ReportEngine:
    """
    Computes reports over a shared order snapshot.

    The snapshot is conformed once and handed by reference to every report;
    reports never mutate it, so they run concurrently without locking.

    Example:
        engine = ReportEngine()
        results = engine.run(orders, ["regional_growth", "logistics"])
        results["logistics"].rows
    """

    def __init__(
        self,
        config: Optional[ReportSettings] = None,
        max_workers: Optional[int] = None,
    ):
        self.config = config or settings.reports
        self.max_workers = max_workers or self.config.max_workers

    @staticmethod
    def available_reports() -> List[str]:
        return list(REPORTS)

    def _resolve(self, names: Optional[Iterable[str]]) -> List[ReportDefinition]:
        if names is None:
            return list(REPORTS.values())

        definitions = []
        for name in names:
            if name not in REPORTS:
                raise KeyError(
                    f"Report '{name}' not found. Available: {list(REPORTS.keys())}"
                )
            definitions.append(REPORTS[name])
        return definitions

    def _run_definition(self, snapshot: pl.DataFrame, definition: ReportDefinition) -> ReportResult:
        log = get_logger(__name__, report=definition.name)
        started_at = datetime.utcnow()
        errors = []

        completed_rows = snapshot.filter(pl.col(C.ORDER_STATUS) == self.config.completed_status).height
        excluded_rows = count_excluded(snapshot, definition.required_columns, self.config.completed_status)
        if excluded_rows:
            log.warning(
                "Records excluded from report",
                excluded_rows=excluded_rows,
                required_columns=list(definition.required_columns),
            )

        try:
            rows = definition.func(snapshot, self.config)
        except Exception as e:
            log.error("Report failed", error=str(e))
            errors.append(str(e))
            rows = pl.DataFrame()

        completed_at = datetime.utcnow()
        result = ReportResult(
            report_name=definition.name,
            rows=rows,
            input_rows=snapshot.height,
            completed_rows=completed_rows,
            excluded_rows=excluded_rows,
            started_at=started_at,
            completed_at=completed_at,
            duration_seconds=(completed_at - started_at).total_seconds(),
            errors=errors,
        )

        log.info(
            "Report complete",
            rows=result.row_count,
            duration_seconds=result.duration_seconds,
        )
        return result

    def run_report(self, df: pl.DataFrame, name: str) -> ReportResult:
        """Run a single report by name"""
        definition = self._resolve([name])[0]
        return self._run_definition(conform_orders(df), definition)

    def run(
        self,
        df: pl.DataFrame,
        names: Optional[Iterable[str]] = None,
    ) -> Dict[str, ReportResult]:
        """
        Run the selected reports (all by default) concurrently.

        Args:
            df: Order table
            names: Report names to run; unknown names raise KeyError

        Returns:
            Results keyed by report name, in registry order
        """
        definitions = self._resolve(names)
        snapshot = conform_orders(df)

        logger.info("Running reports", reports=[d.name for d in definitions], rows=snapshot.height)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [pool.submit(self._run_definition, snapshot, d) for d in definitions]
            results = [future.result() for future in futures]

        return {result.report_name: result for result in results}

    async def run_async(
        self,
        df: pl.DataFrame,
        names: Optional[Iterable[str]] = None,
    ) -> Dict[str, ReportResult]:
        """Async variant of run(); each report runs in a worker thread"""
        definitions = self._resolve(names)
        snapshot = conform_orders(df)

        results = await asyncio.gather(*[
            asyncio.to_thread(self._run_definition, snapshot, d) for d in definitions
        ])
        return {result.report_name: result for result in results}


def run_reports(
    df: pl.DataFrame,
    names: Optional[Iterable[str]] = None,
    config: Optional[ReportSettings] = None,
) -> Dict[str, ReportResult]:
    """Convenience function to run reports with default settings"""
    return ReportEngine(config=config).run(df, names)


def write_reports(
    results: Dict[str, ReportResult],
    output_dir: Union[str, Path, None] = None,
    file_format: Optional[str] = None,
) -> Dict[str, Path]:
    """
    Write each successful report to `<output_dir>/<report_name>.<format>`.

    Returns:
        Written file paths keyed by report name
    """
    output_path = Path(output_dir or settings.reports.output_path)
    file_format = (file_format or settings.reports.output_format).lower()
    if file_format not in ("parquet", "csv"):
        raise ValueError(f"Unsupported output format: {file_format}")

    output_path.mkdir(parents=True, exist_ok=True)
    written = {}

    for name, result in results.items():
        if not result.succeeded:
            logger.warning("Skipping failed report", report=name, errors=result.errors)
            continue

        target = output_path / f"{name}.{file_format}"
        if file_format == "parquet":
            result.rows.write_parquet(target)
        else:
            result.rows.write_csv(target)
        written[name] = target
        logger.info(f"Written {result.row_count} rows to {target}")

    return written
