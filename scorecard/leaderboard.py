"""
Carrier Leaderboard
===================

Search, rank and page the per-carrier metrics shown in the overview table.

RANKING
-------
    rank_score = avg_delta_pct + avg_delta_days     (lower is better)

    A carrier charging 5% over quote and delivering half a day late scores
    0.05 + 0.5 = 0.55. The two terms are in different units, so the score is
    only meaningful as an ordering.

DEFAULT DIRECTION
-----------------
    rank score, carrier, type   - ascending (best / alphabetical first)
    every other numeric KPI     - descending (largest first)
"""

from dataclasses import dataclass
from enum import StrEnum

import polars as pl

from scorecard.models import CarrierScoreMetrics


class SortField(StrEnum):
    RANK_SCORE = "rank_score"
    CARRIER = "carrier"
    TYPE = "type"
    QUOTES = "quotes"
    OVER_RATE = "over_rate"
    AVG_DELTA = "avg_delta"
    AVG_DELTA_PCT = "avg_delta_pct"
    SHIPMENTS = "shipments"
    AVG_DELTA_DAYS = "avg_delta_days"


# Order used when cycling through sort fields
SORT_CYCLE = [
    SortField.RANK_SCORE,
    SortField.QUOTES,
    SortField.OVER_RATE,
    SortField.AVG_DELTA,
    SortField.AVG_DELTA_PCT,
    SortField.SHIPMENTS,
    SortField.AVG_DELTA_DAYS,
    SortField.CARRIER,
    SortField.TYPE,
]

PAGE_SIZES = [5, 10]


def rank_score(m: CarrierScoreMetrics) -> float:
    return m.cost.avg_delta_pct + m.service.avg_delta_days


def default_descending(field: SortField | str) -> bool:
    return SortField(field) not in (SortField.RANK_SCORE, SortField.CARRIER, SortField.TYPE)


def next_sort_field(field: SortField | str) -> SortField:
    idx = SORT_CYCLE.index(SortField(field))
    return SORT_CYCLE[(idx + 1) % len(SORT_CYCLE)]


def _sort_value(m: CarrierScoreMetrics, field: SortField) -> float | str:
    match field:
        case SortField.RANK_SCORE:
            return rank_score(m)
        case SortField.CARRIER:
            return m.carrier_name.casefold()
        case SortField.TYPE:
            return m.truck_type.value
        case SortField.QUOTES:
            return m.cost.quote_count
        case SortField.OVER_RATE:
            return m.cost.over_rate
        case SortField.AVG_DELTA:
            return m.cost.avg_delta
        case SortField.AVG_DELTA_PCT:
            return m.cost.avg_delta_pct
        case SortField.SHIPMENTS:
            return m.service.shipments
        case SortField.AVG_DELTA_DAYS:
            return m.service.avg_delta_days


def rank_scorecard(
    metrics: list[CarrierScoreMetrics],
    search: str = "",
    sort_field: SortField | str = SortField.RANK_SCORE,
    descending: bool | None = None,
) -> list[CarrierScoreMetrics]:
    """
    Filter metrics by search text and sort them.

    Args:
        metrics: Scorecard rows (not modified)
        search: Case-insensitive substring matched against carrier name or
            truck type; blank keeps everything
        sort_field: Column to sort by
        descending: Sort direction; None uses default_descending(sort_field)

    Returns:
        New list. Ties keep their input (carrier_id) order.

    Raises:
        ValueError: If sort_field is not a SortField value
    """
    sort_field = SortField(sort_field)
    if descending is None:
        descending = default_descending(sort_field)

    needle = search.strip().casefold()
    if needle:
        metrics = [
            m for m in metrics
            if needle in m.carrier_name.casefold() or needle in m.truck_type.value.casefold()
        ]

    return sorted(metrics, key=lambda m: _sort_value(m, sort_field), reverse=descending)


# =============================================================================
# PAGINATION
# =============================================================================

@dataclass(frozen=True)
class Page:
    rows: list[CarrierScoreMetrics]
    page_index: int
    total_pages: int
    # 1-based, inclusive; both 0 when there are no rows
    display_start: int
    display_end: int
    total_rows: int

    def rank(self, offset: int) -> int:
        """Overall 1-based rank of the row at offset within this page."""
        return self.display_start + offset


def paginate(rows: list[CarrierScoreMetrics], page_index: int = 0, page_size: int = 5) -> Page:
    """
    Slice one page out of ranked rows.

    page_index is clamped to [0, total_pages - 1]; total_pages is at least 1.

    Raises:
        ValueError: If page_size is not positive
    """
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")

    total = len(rows)
    total_pages = max(1, -(-total // page_size))
    page_index = min(max(page_index, 0), total_pages - 1)

    start = page_index * page_size
    end = min(start + page_size, total)
    return Page(
        rows=rows[start:end],
        page_index=page_index,
        total_pages=total_pages,
        display_start=start + 1 if total else 0,
        display_end=end,
        total_rows=total,
    )


def leaderboard_frame(page: Page) -> pl.DataFrame:
    """One display row per carrier on the page, numbered by overall rank."""
    schema = {
        "rank": pl.Int64,
        "carrier": pl.String,
        "type": pl.String,
        "quotes": pl.Int64,
        "over_rate": pl.Float64,
        "avg_delta": pl.Float64,
        "avg_delta_pct": pl.Float64,
        "shipments": pl.Int64,
        "avg_delta_days": pl.Float64,
        "rank_score": pl.Float64,
    }
    rows = [
        {
            "rank": page.rank(i),
            "carrier": m.carrier_name,
            "type": m.truck_type.value,
            "quotes": m.cost.quote_count,
            "over_rate": m.cost.over_rate,
            "avg_delta": m.cost.avg_delta,
            "avg_delta_pct": m.cost.avg_delta_pct,
            "shipments": m.service.shipments,
            "avg_delta_days": m.service.avg_delta_days,
            "rank_score": rank_score(m),
        }
        for i, m in enumerate(page.rows)
    ]
    if not rows:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame(rows, schema=schema)
