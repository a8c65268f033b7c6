"""
Tests for filter state and frame filters

Run with: pytest scorecard/tests/test_filters.py -v
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from scorecard.calculate_scorecard import compute_scorecard
from scorecard.models import (
    CARRIER_SCHEMA,
    DELIVERY_SCHEMA,
    QUOTE_SCHEMA,
    CarrierRecord,
    QuoteActualRecord,
    TruckType,
    empty_frame,
    frame_from_records,
)
from scorecard.view.filters import (
    DatePreset,
    DateRange,
    TruckTypeFilter,
    filter_by_carrier,
    filter_by_date,
    filter_by_truck_type,
    preset_range,
)

TODAY = date(2025, 3, 15)


@pytest.fixture
def quotes():
    """One quote per timestamp, carrier alternating 1 / 2."""
    stamps = [
        datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc),
        datetime(2025, 1, 1, 23, 59, 59, tzinfo=timezone.utc),
        datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc),
        datetime(2025, 1, 3, 0, 0, tzinfo=timezone.utc),
    ]
    return frame_from_records(
        [QuoteActualRecord(ts, 1 + i % 2, 10.0, 100.0, 100.0) for i, ts in enumerate(stamps)],
        QUOTE_SCHEMA,
    )


# =============================================================================
# TESTS: PRESETS
# =============================================================================

class TestPresetRange:
    """Tests for preset_range."""

    def test_today(self):
        assert preset_range(DatePreset.TODAY, TODAY) == DateRange(TODAY, TODAY)

    def test_last_7_days_includes_today(self):
        r = preset_range(DatePreset.LAST_7_DAYS, TODAY)
        assert r == DateRange(date(2025, 3, 9), TODAY)
        assert (r.end - r.start).days + 1 == 7

    def test_last_30_days(self):
        r = preset_range(DatePreset.LAST_30_DAYS, TODAY)
        assert r.start == TODAY - timedelta(days=29)
        assert r.end == TODAY

    def test_all_is_unbounded(self):
        assert preset_range(DatePreset.ALL, TODAY).unbounded

    def test_accepts_string_value(self):
        assert preset_range("last-7-days", TODAY) == preset_range(DatePreset.LAST_7_DAYS, TODAY)

    def test_unknown_preset_raises(self):
        with pytest.raises(ValueError):
            preset_range("last-year", TODAY)


# =============================================================================
# TESTS: FRAME FILTERS
# =============================================================================

class TestFilterByDate:
    """Tests for filter_by_date (UTC calendar day, inclusive)."""

    def test_unbounded_returns_input(self, quotes):
        assert filter_by_date(quotes, "quote_date", DateRange()) is quotes

    def test_single_day_inclusive(self, quotes):
        """Both 00:00 and 23:59:59 of the day are inside."""
        df = filter_by_date(quotes, "quote_date", DateRange(date(2025, 1, 1), date(2025, 1, 1)))
        assert len(df) == 2

    def test_open_start(self, quotes):
        df = filter_by_date(quotes, "quote_date", DateRange(None, date(2025, 1, 2)))
        assert len(df) == 3

    def test_open_end(self, quotes):
        df = filter_by_date(quotes, "quote_date", DateRange(date(2025, 1, 2), None))
        assert len(df) == 2

    def test_non_utc_column_uses_utc_day(self, quotes):
        """A New York evening timestamp belongs to the next UTC day."""
        ny = quotes.with_columns(quotes["quote_date"].dt.convert_time_zone("America/New_York"))
        df = filter_by_date(ny, "quote_date", DateRange(date(2025, 1, 3), date(2025, 1, 3)))
        assert len(df) == 1

    def test_empty_frame(self):
        df = filter_by_date(empty_frame(QUOTE_SCHEMA), "quote_date", DateRange(TODAY, TODAY))
        assert df.is_empty()


class TestFilterByCarrier:
    """Tests for filter_by_carrier."""

    def test_none_keeps_all(self, quotes):
        assert filter_by_carrier(quotes, None) is quotes

    def test_single_carrier(self, quotes):
        df = filter_by_carrier(quotes, 2)
        assert df["carrier_id"].unique().to_list() == [2]
        assert len(df) == 2


class TestFilterByTruckType:
    """Tests for filter_by_truck_type."""

    @pytest.fixture
    def metrics(self, quotes):
        carriers = frame_from_records(
            [CarrierRecord(1, "Acme", TruckType.LTL), CarrierRecord(2, "Big Rig", TruckType.TL)],
            CARRIER_SCHEMA,
        )
        return compute_scorecard(carriers, quotes, empty_frame(DELIVERY_SCHEMA))

    def test_all(self, metrics):
        assert filter_by_truck_type(metrics, TruckTypeFilter.ALL) == metrics

    @pytest.mark.parametrize("truck_type,expected_ids", [
        (TruckTypeFilter.LTL, [1]),
        (TruckTypeFilter.TL, [2]),
    ])
    def test_single_type(self, metrics, truck_type, expected_ids):
        assert [m.carrier_id for m in filter_by_truck_type(metrics, truck_type)] == expected_ids
