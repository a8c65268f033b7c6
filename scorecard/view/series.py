"""
Chart Series
============

Day / week bucketing and the chart-ready series read by the dashboard.

Keys are UTC-normalized "YYYY-MM-DD" strings, so they sort chronologically:
    day_key     - calendar day of the timestamp
    week_key    - Monday starting the ISO week of that day

Empty buckets are never emitted (no zero-fill).

SERIES
------
    cost_delta_daily_series     quotes by quote_date day
        BREAKDOWN: sum_quote, sum_amount, delta (totals), avg_delta, quotes
        MEANS:     avg_delta, avg_delta_pct, quotes

    service_delta_daily_series  deliveries by delivery day, rows with
                                non-finite transit durations skipped
        BREAKDOWN: avg_expected_days, avg_actual_days, delta_days, shipments
        MEANS:     avg_delta_days, shipments

    shipments_series / weight_series
        no carrier selected: one row per carrier (carrier_id, carrier_name)
        carrier selected:    one row per week_key of that carrier, rows with
                             a null delivery / quote_date left out
"""

from enum import StrEnum

import polars as pl

from scorecard.calculate_scorecard import add_transit_days

KEY_FORMAT = "%Y-%m-%d"


class SeriesMode(StrEnum):
    BREAKDOWN = "breakdown"
    MEANS = "means"


# =============================================================================
# BUCKET KEYS
# =============================================================================

def _utc_day(col: str) -> pl.Expr:
    return pl.col(col).dt.convert_time_zone("UTC").dt.date()


def with_day_key(df: pl.DataFrame, col: str) -> pl.DataFrame:
    """Add day_key: UTC calendar day of col."""
    return df.with_columns(_utc_day(col).dt.strftime(KEY_FORMAT).alias("day_key"))


def with_week_key(df: pl.DataFrame, col: str) -> pl.DataFrame:
    """
    Add week_key: Monday of the UTC week containing col.

    Equivalent to stepping back (weekday - 1) days with Monday=1 ... Sunday=7,
    which is what a 1-week truncation of a Date does.
    """
    return df.with_columns(
        _utc_day(col).dt.truncate("1w").cast(pl.Date).dt.strftime(KEY_FORMAT).alias("week_key")
    )


# =============================================================================
# DAILY DELTA SERIES
# =============================================================================

def cost_delta_daily_series(
    quotes: pl.DataFrame,
    mode: SeriesMode = SeriesMode.BREAKDOWN,
) -> pl.DataFrame:
    """Quote vs charged amount per UTC day of quote_date."""
    delta = pl.col("amount") - pl.col("quote")
    daily = (
        with_day_key(quotes, "quote_date")
        .with_columns(
            delta.alias("delta"),
            pl.when(pl.col("quote") > 0)
            .then(delta / pl.col("quote"))
            .otherwise(0.0)
            .alias("delta_pct"),
        )
        .group_by("day_key")
        .agg(
            pl.col("quote").sum().alias("sum_quote"),
            pl.col("amount").sum().alias("sum_amount"),
            pl.col("delta").mean().alias("avg_delta"),
            pl.col("delta_pct").mean().alias("avg_delta_pct"),
            pl.len().alias("quotes"),
        )
        .sort("day_key")
    )

    match SeriesMode(mode):
        case SeriesMode.BREAKDOWN:
            return daily.select(
                "day_key",
                "sum_quote",
                "sum_amount",
                (pl.col("sum_amount") - pl.col("sum_quote")).alias("delta"),
                "avg_delta",
                "quotes",
            )
        case SeriesMode.MEANS:
            return daily.select("day_key", "avg_delta", "avg_delta_pct", "quotes")


def service_delta_daily_series(
    deliveries: pl.DataFrame,
    mode: SeriesMode = SeriesMode.BREAKDOWN,
) -> pl.DataFrame:
    """Expected vs actual transit days per UTC day of delivery."""
    timed = add_transit_days(deliveries).filter(
        pl.col("actual_days").is_finite() & pl.col("expected_days").is_finite()
    )
    daily = (
        with_day_key(timed, "delivery")
        .group_by("day_key")
        .agg(
            pl.col("expected_days").mean().alias("avg_expected_days"),
            pl.col("actual_days").mean().alias("avg_actual_days"),
            pl.col("delta_days").mean().alias("avg_delta_days"),
            pl.len().alias("shipments"),
        )
        .sort("day_key")
    )

    match SeriesMode(mode):
        case SeriesMode.BREAKDOWN:
            return daily.select(
                "day_key",
                "avg_expected_days",
                "avg_actual_days",
                (pl.col("avg_actual_days") - pl.col("avg_expected_days")).alias("delta_days"),
                "shipments",
            )
        case SeriesMode.MEANS:
            return daily.select("day_key", "avg_delta_days", "shipments")


# =============================================================================
# VOLUME SERIES
# =============================================================================

def shipments_series(
    carriers: pl.DataFrame,
    deliveries: pl.DataFrame,
    carrier_id: int | None,
) -> pl.DataFrame:
    """
    Delivery counts.

    Returns:
        carrier_id None: carrier_id, carrier_name, shipments (by carrier_id)
        otherwise:       week_key, shipments for that carrier (by week)
    """
    count = pl.len().cast(pl.Int64).alias("shipments")
    if carrier_id is None:
        return _per_carrier(carriers, deliveries.group_by("carrier_id").agg(count))

    own = deliveries.filter(
        (pl.col("carrier_id") == carrier_id) & pl.col("delivery").is_not_null()
    )
    return with_week_key(own, "delivery").group_by("week_key").agg(count).sort("week_key")


def weight_series(
    carriers: pl.DataFrame,
    quotes: pl.DataFrame,
    carrier_id: int | None,
) -> pl.DataFrame:
    """
    Total quoted weight.

    Returns:
        carrier_id None: carrier_id, carrier_name, weight (by carrier_id)
        otherwise:       week_key, weight for that carrier (by week)
    """
    total = pl.col("weight").sum().alias("weight")
    if carrier_id is None:
        return _per_carrier(carriers, quotes.group_by("carrier_id").agg(total))

    own = quotes.filter(
        (pl.col("carrier_id") == carrier_id) & pl.col("quote_date").is_not_null()
    )
    return with_week_key(own, "quote_date").group_by("week_key").agg(total).sort("week_key")


def _per_carrier(carriers: pl.DataFrame, totals: pl.DataFrame) -> pl.DataFrame:
    """Attach carrier names to per-carrier totals; unknown ids get 'Carrier {id}'."""
    names = (
        carriers.unique("carrier_id", keep="last", maintain_order=True)
        .select("carrier_id", "carrier_name")
    )
    value_cols = [c for c in totals.columns if c != "carrier_id"]
    return (
        totals.join(names, on="carrier_id", how="left")
        .with_columns(
            pl.coalesce(
                pl.col("carrier_name"),
                pl.format("Carrier {}", pl.col("carrier_id")),
            ).alias("carrier_name")
        )
        .select("carrier_id", "carrier_name", *value_cols)
        .sort("carrier_id")
    )
