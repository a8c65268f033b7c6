"""
CSV Loaders
===========

Reads the three source CSVs (local path or URL) into frames with the engine
schemas from scorecard.models.

Every cell is read as text and coerced per column, never rejected:
    numbers     - commas/spaces stripped, unparseable or non-finite -> 0
    timestamps  - matched against DATE_FORMATS as UTC, unparseable -> epoch
    truck type  - trimmed and upper-cased, anything but "TL" -> "LTL"

An unparseable delivery date therefore becomes 1970-01-01 rather than
failing the row. Only a failed read or a missing required column raises.
"""

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

import polars as pl

from scorecard.data.reference import (
    CARRIER_COLUMNS,
    QUOTE_COLUMNS,
    DELIVERY_COLUMNS,
    DATE_FORMATS,
    EPOCH,
    default_sources,
)
from scorecard.models import (
    CARRIER_SCHEMA,
    QUOTE_SCHEMA,
    DELIVERY_SCHEMA,
    UTC_DATETIME,
)

Source = str | Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    carriers: pl.DataFrame
    quotes: pl.DataFrame
    deliveries: pl.DataFrame


# =============================================================================
# READERS
# =============================================================================

def read_carriers(source: Source) -> pl.DataFrame:
    """Read the carrier master list."""
    df = _read_source("carriers", source, CARRIER_COLUMNS)
    df = df.with_columns(
        _number("carrier_id").cast(pl.Int64),
        pl.col("carrier_name").fill_null("").str.strip_chars(),
        pl.when(pl.col("truck_type").str.strip_chars().str.to_uppercase() == "TL")
        .then(pl.lit("TL"))
        .otherwise(pl.lit("LTL"))
        .alias("truck_type"),
    )
    return _conform(df, CARRIER_SCHEMA)


def read_quotes(source: Source) -> pl.DataFrame:
    """Read quote vs actual charge rows."""
    df = _read_source("quotes", source, QUOTE_COLUMNS)
    df = _parse_timestamps(df, "quotes", ["quote_date"])
    df = df.with_columns(
        _number("carrier_id").cast(pl.Int64),
        _number("weight"),
        _number("quote"),
        _number("amount"),
    )
    return _conform(df, QUOTE_SCHEMA)


def read_deliveries(source: Source) -> pl.DataFrame:
    """Read delivery event rows."""
    df = _read_source("deliveries", source, DELIVERY_COLUMNS)
    df = _parse_timestamps(df, "deliveries", ["pickup", "delivery", "expected_delivery"])
    df = df.with_columns(_number("carrier_id").cast(pl.Int64))
    return _conform(df, DELIVERY_SCHEMA)


# =============================================================================
# PARALLEL LOAD
# =============================================================================

async def load_all(
    data_dir: Source | None = None,
    *,
    carriers: Source | None = None,
    quotes: Source | None = None,
    deliveries: Source | None = None,
) -> LoadResult:
    """
    Read all three sources concurrently.

    Each read runs in a worker thread. The join completes when all three
    finish and raises as soon as any one fails, so a partial result is
    never returned.

    Args:
        data_dir: Directory holding the default file names
        carriers, quotes, deliveries: Explicit per-source overrides

    Returns:
        LoadResult with the three normalized frames

    Raises:
        RuntimeError: If any source cannot be read
    """
    default_carriers, default_quotes, default_deliveries = default_sources(data_dir)
    carriers_df, quotes_df, deliveries_df = await asyncio.gather(
        asyncio.to_thread(read_carriers, carriers or default_carriers),
        asyncio.to_thread(read_quotes, quotes or default_quotes),
        asyncio.to_thread(read_deliveries, deliveries or default_deliveries),
    )
    logger.info(
        "Loaded %d carriers, %d quotes, %d deliveries",
        len(carriers_df), len(quotes_df), len(deliveries_df),
    )
    return LoadResult(carriers=carriers_df, quotes=quotes_df, deliveries=deliveries_df)


# =============================================================================
# HELPERS
# =============================================================================

def _read_source(name: str, source: Source, columns: dict[str, str]) -> pl.DataFrame:
    """Read a CSV as text, check required headers, rename to engine columns."""
    try:
        df = pl.read_csv(source, infer_schema_length=0)
    except Exception as e:
        raise RuntimeError(f"Failed to read {name} from {source}: {e}") from e

    df = df.rename({c: c.strip() for c in df.columns})
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise RuntimeError(f"{name}: missing required columns {missing} in {source}")

    df = df.select(list(columns)).rename(columns)
    # Blank lines
    df = df.filter(~pl.all_horizontal(pl.all().is_null()))
    logger.info("Read %d %s rows from %s", len(df), name, source)
    return df


def _number(col: str) -> pl.Expr:
    value = pl.col(col).str.replace_all(r"[, ]", "").cast(pl.Float64, strict=False)
    return pl.when(value.is_finite()).then(value).otherwise(0.0).alias(col)


def _timestamp(col: str) -> pl.Expr:
    raw = pl.col(col).str.strip_chars().str.replace(r"Z$", "")
    return pl.coalesce([
        raw.str.strptime(pl.Datetime("us"), fmt, strict=False)
        if "%H" in fmt
        else raw.str.strptime(pl.Date, fmt, strict=False).cast(pl.Datetime("us"))
        for fmt in DATE_FORMATS
    ])


def _parse_timestamps(df: pl.DataFrame, name: str, cols: list[str]) -> pl.DataFrame:
    df = df.with_columns([_timestamp(c).alias(c) for c in cols])

    unparsed = df.select([pl.col(c).is_null().sum() for c in cols]).row(0, named=True)
    for col, count in unparsed.items():
        if count:
            logger.warning("%s: %d unparseable %s values defaulted to %s", name, count, col, EPOCH.date())

    return df.with_columns([
        pl.col(c).fill_null(EPOCH).dt.replace_time_zone("UTC").cast(UTC_DATETIME)
        for c in cols
    ])


def _conform(df: pl.DataFrame, schema: dict[str, pl.DataType]) -> pl.DataFrame:
    return df.select([pl.col(name).cast(dtype) for name, dtype in schema.items()])
