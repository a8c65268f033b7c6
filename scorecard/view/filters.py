"""
Filter State
============

Value types for the dashboard filters and the pure functions that apply
them to collection frames.

    DateRange       - inclusive calendar-day bounds, None = unbounded side
    TruckTypeFilter - ALL / LTL / TL
    DatePreset      - TODAY / LAST_7_DAYS / LAST_30_DAYS / ALL
    FilterState     - date range + selected carrier (None = all) + truck type

Date membership compares the UTC calendar day of a timestamp column against
the bounds, so a quote at 23:59 UTC on the end date is still inside.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import StrEnum

import polars as pl

from scorecard.models import CarrierScoreMetrics


class TruckTypeFilter(StrEnum):
    ALL = "ALL"
    LTL = "LTL"
    TL = "TL"


class DatePreset(StrEnum):
    TODAY = "today"
    LAST_7_DAYS = "last-7-days"
    LAST_30_DAYS = "last-30-days"
    ALL = "all"


@dataclass(frozen=True)
class DateRange:
    start: date | None = None
    end: date | None = None

    @property
    def unbounded(self) -> bool:
        return self.start is None and self.end is None


@dataclass(frozen=True)
class FilterState:
    date_range: DateRange = field(default_factory=DateRange)
    carrier_id: int | None = None
    truck_type: TruckTypeFilter = TruckTypeFilter.ALL


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def preset_range(preset: DatePreset | str, today: date | None = None) -> DateRange:
    """
    Resolve a named preset to a DateRange.

    "Last N days" includes today: LAST_7_DAYS is [today - 6, today].

    Raises:
        ValueError: If preset is not a DatePreset value
    """
    preset = DatePreset(preset)
    today = today or utc_today()

    match preset:
        case DatePreset.TODAY:
            return DateRange(today, today)
        case DatePreset.LAST_7_DAYS:
            return DateRange(today - timedelta(days=6), today)
        case DatePreset.LAST_30_DAYS:
            return DateRange(today - timedelta(days=29), today)
        case DatePreset.ALL:
            return DateRange()


# =============================================================================
# FRAME FILTERS
# =============================================================================

def filter_by_date(df: pl.DataFrame, date_col: str, date_range: DateRange) -> pl.DataFrame:
    """Keep rows whose UTC calendar day of date_col lies in date_range."""
    if date_range.unbounded:
        return df

    day = pl.col(date_col).dt.convert_time_zone("UTC").dt.date()
    if date_range.start is not None:
        df = df.filter(day >= pl.lit(date_range.start))
    if date_range.end is not None:
        df = df.filter(day <= pl.lit(date_range.end))
    return df


def filter_by_carrier(df: pl.DataFrame, carrier_id: int | None) -> pl.DataFrame:
    """Keep rows of one carrier; None keeps all."""
    if carrier_id is None:
        return df
    return df.filter(pl.col("carrier_id") == carrier_id)


def filter_by_truck_type(
    metrics: list[CarrierScoreMetrics],
    truck_type: TruckTypeFilter,
) -> list[CarrierScoreMetrics]:
    if truck_type == TruckTypeFilter.ALL:
        return metrics
    return [m for m in metrics if m.truck_type == truck_type]
