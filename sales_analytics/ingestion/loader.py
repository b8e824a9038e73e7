"""
Order Record Loader

Reads an order table export into the canonical order schema.
Supports:
- CSV, JSON, NDJSON and Parquet sources
- Original spreadsheet header mapping
- Currency symbol stripping and numeric coercion
- Multi-format date parsing (unparseable dates become null)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union
import hashlib

import polars as pl
import structlog
from pydantic import BaseModel

from sales_analytics.config import get_settings
from sales_analytics.data.schema import (
    FLOAT_COLUMNS,
    INTEGER_COLUMNS,
    SOURCE_COLUMN_MAP,
    STRING_COLUMNS,
    OrderColumns as C,
    conform_orders,
    empty_orders,
)

logger = structlog.get_logger(__name__)
settings = get_settings()

TRUE_TOKENS = ["1", "1.0", "yes", "y", "true", "t"]
FALSE_TOKENS = ["0", "0.0", "no", "n", "false", "f"]


class FileFormat(str, Enum):
    """Supported file formats"""
    CSV = "csv"
    JSON = "json"
    JSONL = "jsonl"
    PARQUET = "parquet"


class LoadStatus(str, Enum):
    """Load status"""
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class LoadConfig:
    """Configuration for reading an order table file"""
    file_path: Union[str, Path]
    file_format: Optional[FileFormat] = None
    delimiter: str = ","
    encoding: str = "utf-8"
    date_formats: List[str] = field(default_factory=lambda: list(settings.data.date_formats))
    null_values: List[str] = field(default_factory=lambda: list(settings.data.null_values))


class LoadResult(BaseModel):
    """Result of a load operation"""
    file_path: str
    status: LoadStatus
    rows_loaded: int = 0
    unparseable_dates: int = 0
    error_message: Optional[str] = None
    load_duration_seconds: float = 0
    started_at: datetime
    completed_at: Optional[datetime] = None
    file_hash: Optional[str] = None


class OrderLoader:
    """
    Loads order exports into an immutable, schema-conformed DataFrame.

    Example:
        loader = OrderLoader()
        orders, result = loader.load("data/raw/amazon_sales.csv")
    """

    def __init__(self, date_formats: Optional[List[str]] = None):
        self.date_formats = date_formats or list(settings.data.date_formats)

    def _compute_file_hash(self, file_path: Path) -> str:
        """Compute MD5 hash of file for run auditing"""
        hash_md5 = hashlib.md5()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(4096), b""):
                hash_md5.update(chunk)
        return hash_md5.hexdigest()

    def _detect_format(self, file_path: Path) -> FileFormat:
        """Infer file format from suffix"""
        suffix = file_path.suffix.lower().lstrip(".")
        if suffix == "ndjson":
            return FileFormat.JSONL
        try:
            return FileFormat(suffix)
        except ValueError:
            raise ValueError(f"Unsupported file format: {file_path.suffix}")

    def _read_csv(self, config: LoadConfig) -> pl.DataFrame:
        """Read CSV with every column as text; typing happens in _coerce_types"""
        return pl.read_csv(
            config.file_path,
            separator=config.delimiter,
            encoding=config.encoding,
            null_values=config.null_values,
            infer_schema_length=0,
        )

    def _read_json(self, config: LoadConfig) -> pl.DataFrame:
        return pl.read_json(config.file_path)

    def _read_jsonl(self, config: LoadConfig) -> pl.DataFrame:
        return pl.read_ndjson(config.file_path)

    def _read_parquet(self, config: LoadConfig) -> pl.DataFrame:
        return pl.read_parquet(config.file_path)

    def _read_file(self, config: LoadConfig) -> pl.DataFrame:
        """Read file based on format"""
        file_format = config.file_format or self._detect_format(Path(config.file_path))
        readers = {
            FileFormat.CSV: self._read_csv,
            FileFormat.JSON: self._read_json,
            FileFormat.JSONL: self._read_jsonl,
            FileFormat.PARQUET: self._read_parquet,
        }
        return readers[file_format](config)

    def _rename_source_headers(self, df: pl.DataFrame) -> pl.DataFrame:
        """Map original spreadsheet headers onto canonical names"""
        stripped = {c: c.strip() for c in df.columns if c != c.strip()}
        if stripped:
            df = df.rename(stripped)
        renames = {
            src: dst for src, dst in SOURCE_COLUMN_MAP.items()
            if src in df.columns and dst not in df.columns
        }
        return df.rename(renames)

    def _parse_dates(self, column: str, date_formats: List[str]) -> pl.Expr:
        """Try each format in order, keeping the first that parses"""
        value = pl.col(column).str.strip_chars()
        candidates = []
        for fmt in date_formats:
            if "%H" in fmt:
                candidates.append(value.str.strptime(pl.Datetime, fmt, strict=False).dt.date())
            else:
                candidates.append(value.str.strptime(pl.Date, fmt, strict=False))
        return pl.coalesce(candidates).alias(column)

    def _parse_flag(self, column: str) -> pl.Expr:
        """Normalise 1/0, yes/no, true/false flags to 1/0"""
        value = pl.col(column).str.strip_chars().str.to_lowercase()
        return (
            pl.when(value.is_in(TRUE_TOKENS)).then(1)
            .when(value.is_in(FALSE_TOKENS)).then(0)
            .otherwise(None)
            .cast(pl.Int64)
            .alias(column)
        )

    def _coerce_types(self, df: pl.DataFrame, date_formats: Optional[List[str]] = None) -> pl.DataFrame:
        """Coerce text columns onto the canonical types"""
        expressions: List[pl.Expr] = []
        text_columns = {c for c, dtype in df.schema.items() if dtype == pl.Utf8}

        for column in STRING_COLUMNS:
            if column in text_columns:
                value = pl.col(column).str.strip_chars()
                expressions.append(
                    pl.when(value == "").then(None).otherwise(value).alias(column)
                )

        for column in FLOAT_COLUMNS + INTEGER_COLUMNS:
            if column in text_columns and column != C.PRIME_MEMBER:
                # Remove currency symbols and thousands separators
                number = (
                    pl.col(column)
                    .str.replace_all(r"[$€£¥,\s]", "")
                    .cast(pl.Float64, strict=False)
                )
                if column in INTEGER_COLUMNS:
                    number = number.round(0).cast(pl.Int64, strict=False)
                expressions.append(number.alias(column))

        if C.PRIME_MEMBER in text_columns:
            expressions.append(self._parse_flag(C.PRIME_MEMBER))

        if C.ORDER_DATE in text_columns:
            expressions.append(self._parse_dates(C.ORDER_DATE, date_formats or self.date_formats))

        if expressions:
            df = df.with_columns(expressions)
        return conform_orders(df)

    def load(self, path_or_config: Union[str, Path, LoadConfig]) -> Tuple[pl.DataFrame, LoadResult]:
        """
        Load an order table file.

        A file that exists but cannot be read yields an empty order table and
        a FAILED LoadResult carrying the error message.

        Args:
            path_or_config: Source file path or a full LoadConfig

        Returns:
            Conformed order DataFrame and the LoadResult

        Raises:
            FileNotFoundError: Source file does not exist
            ValueError: Unsupported file format
        """
        if isinstance(path_or_config, LoadConfig):
            config = path_or_config
        else:
            config = LoadConfig(file_path=path_or_config, date_formats=list(self.date_formats))
        file_path = Path(config.file_path)
        started_at = datetime.utcnow()

        result = LoadResult(
            file_path=str(file_path),
            status=LoadStatus.FAILED,
            started_at=started_at,
        )

        logger.info("Starting order load", file=str(file_path))

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if config.file_format is None:
            config.file_format = self._detect_format(file_path)

        result.file_hash = self._compute_file_hash(file_path)

        try:
            raw = self._rename_source_headers(self._read_file(config))
            raw_dates = raw[C.ORDER_DATE] if C.ORDER_DATE in raw.columns else None
            df = self._coerce_types(raw, config.date_formats)

            if raw_dates is not None:
                result.unparseable_dates = int(
                    (raw_dates.is_not_null() & df[C.ORDER_DATE].is_null()).sum()
                )
            if result.unparseable_dates:
                logger.warning("Unparseable order dates set to null", rows=result.unparseable_dates)

            result.status = LoadStatus.COMPLETED
            result.rows_loaded = len(df)

        except (pl.exceptions.PolarsError, OSError, UnicodeDecodeError) as e:
            df = empty_orders()
            result.error_message = str(e)
            logger.error("Order load failed", error=str(e), file=str(file_path))

        result.completed_at = datetime.utcnow()
        result.load_duration_seconds = (result.completed_at - started_at).total_seconds()

        if result.status == LoadStatus.COMPLETED:
            logger.info(
                "Order load completed",
                rows_loaded=result.rows_loaded,
                duration_seconds=result.load_duration_seconds,
            )

        return df, result


def load_orders(path: Union[str, Path, None] = None) -> pl.DataFrame:
    """Load the configured order source and return the conformed table"""
    df, _ = OrderLoader().load(path or settings.data.source_path)
    return df
