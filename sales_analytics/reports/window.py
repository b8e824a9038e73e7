"""
Window Helpers

Partitioned lag, rank, dense rank, percent rank and ntile as polars
expressions, plus continuous percentiles and null-safe division.

Tie rules:
- rank: ties share the lowest position, the next rank skips
- dense rank: ties share a value, no gaps
- percent rank: (rank - 1) / (n - 1), 0 for single-row partitions
- ntile: equal-frequency buckets, remainder rows go to the earlier buckets
"""

from typing import List, Optional, Sequence, Union

import polars as pl

Partition = Union[str, Sequence[str]]


def _over(expr: pl.Expr, partition_by: Optional[Partition]) -> pl.Expr:
    if partition_by is None:
        return expr
    return expr.over(partition_by)


def safe_divide(numerator: pl.Expr, denominator: pl.Expr) -> pl.Expr:
    """numerator / denominator, null when the denominator is null or zero"""
    return (
        pl.when(denominator.is_null() | (denominator == 0))
        .then(None)
        .otherwise(numerator.cast(pl.Float64) / denominator.cast(pl.Float64))
    )


def lag(column: str, partition_by: Optional[Partition] = None, offset: int = 1) -> pl.Expr:
    """Value `offset` rows earlier in the partition. Frame must be sorted."""
    return _over(pl.col(column).shift(offset), partition_by)


def running_sum(column: str, partition_by: Optional[Partition] = None) -> pl.Expr:
    """Cumulative sum in frame order. Frame must be sorted."""
    return _over(pl.col(column).cum_sum(), partition_by)


def standard_rank(
    column: str,
    partition_by: Optional[Partition] = None,
    descending: bool = True,
) -> pl.Expr:
    """RANK(): ties share a value and the following rank skips"""
    return _over(pl.col(column).rank(method="min", descending=descending), partition_by).cast(pl.Int64)


def dense_rank(
    column: str,
    partition_by: Optional[Partition] = None,
    descending: bool = True,
) -> pl.Expr:
    """DENSE_RANK(): ties share a value, no gaps"""
    return _over(pl.col(column).rank(method="dense", descending=descending), partition_by).cast(pl.Int64)


def percent_rank(column: str, partition_by: Optional[Partition] = None) -> pl.Expr:
    """PERCENT_RANK() ascending: (rank - 1) / (n - 1), 0 when n = 1"""
    rank = _over(pl.col(column).rank(method="min"), partition_by).cast(pl.Float64)
    n = _over(pl.len(), partition_by).cast(pl.Float64)
    return (
        pl.when(n > 1)
        .then((rank - 1) / (n - 1))
        .otherwise(0.0)
    )


def ntile(n_rows: int, buckets: int) -> List[int]:
    """
    NTILE(buckets) bucket numbers for n_rows already-ordered rows.

    The first n_rows % buckets buckets each take one extra row.

    Example:
        ntile(10, 4) == [1, 1, 1, 2, 2, 2, 3, 3, 4, 4]
    """
    if buckets < 1:
        raise ValueError(f"buckets must be positive, got {buckets}")

    base, remainder = divmod(n_rows, buckets)
    result: List[int] = []
    for bucket in range(1, buckets + 1):
        size = base + (1 if bucket <= remainder else 0)
        result.extend([bucket] * size)
    return result


def continuous_percentile(series: pl.Series, quantile: float) -> Optional[float]:
    """PERCENTILE_CONT: linear interpolation between the closest ranks"""
    values = series.drop_nulls()
    if values.is_empty():
        return None
    return float(values.quantile(quantile, interpolation="linear"))
