"""
Tests for dashboard chart builders

Run with: pytest scorecard/tests/test_charts.py -v
"""

import polars as pl
import pytest

from scorecard.dashboard.charts import (
    RIGHT_AXIS_MARGIN,
    cost_delta_figure,
    format_currency,
    format_days,
    format_pct,
    service_delta_figure,
    shipments_figure,
    weight_figure,
)
from scorecard.view.series import SeriesMode


@pytest.fixture
def cost_breakdown() -> pl.DataFrame:
    return pl.DataFrame({
        "day_key": ["2025-01-01", "2025-01-02"],
        "sum_quote": [300.0, 100.0],
        "sum_amount": [310.0, 90.0],
        "delta": [10.0, -10.0],
        "avg_delta": [5.0, -10.0],
        "quotes": [2, 1],
    })


class TestFigures:
    """Tests for figure structure (traces and axes)."""

    def test_cost_breakdown_traces(self, cost_breakdown):
        fig = cost_delta_figure(cost_breakdown, SeriesMode.BREAKDOWN)

        assert [t.name for t in fig.data] == ["Quote", "Actual", "Delta"]
        assert list(fig.data[2].y) == [10.0, -10.0]

    def test_cost_means_second_axis(self):
        series = pl.DataFrame({
            "day_key": ["2025-01-01"],
            "avg_delta": [5.0],
            "avg_delta_pct": [0.075],
        })
        fig = cost_delta_figure(series, SeriesMode.MEANS)

        assert fig.data[1].yaxis == "y2"
        assert list(fig.data[1].y) == pytest.approx([7.5])

    def test_service_means(self):
        series = pl.DataFrame({"day_key": ["2025-01-01"], "avg_delta_days": [0.5]})
        fig = service_delta_figure(series, SeriesMode.MEANS)
        assert len(fig.data) == 1

    def test_volume_per_carrier_vs_weekly(self):
        per_carrier = pl.DataFrame({
            "carrier_id": [1, 2], "carrier_name": ["Acme", "Big Rig"], "shipments": [4, 1],
        })
        weekly = pl.DataFrame({"week_key": ["2025-01-06"], "weight": [300.0]})

        fig = shipments_figure(per_carrier)
        assert list(fig.data[0].x) == ["Acme", "Big Rig"]
        assert fig.layout.title.text == "Shipments by Carrier"

        fig = weight_figure(weekly)
        assert list(fig.data[0].x) == ["2025-01-06"]
        assert fig.layout.xaxis.title.text == "Week of"


class TestMargins:
    """Tests for fit_chart_margins."""

    def test_second_axis_widens_right_margin(self, cost_breakdown):
        means = pl.DataFrame({
            "day_key": ["2025-01-01"], "avg_delta": [5.0], "avg_delta_pct": [0.075],
        })
        breakdown_fig = cost_delta_figure(cost_breakdown, SeriesMode.BREAKDOWN)
        means_fig = cost_delta_figure(means, SeriesMode.MEANS)

        assert means_fig.layout.margin.r == RIGHT_AXIS_MARGIN
        assert breakdown_fig.layout.margin.r < means_fig.layout.margin.r

    def test_legend_row_only_when_legend_shows(self, cost_breakdown):
        single = pl.DataFrame({"day_key": ["2025-01-01"], "avg_delta_days": [0.5]})

        with_legend = cost_delta_figure(cost_breakdown, SeriesMode.BREAKDOWN)
        without_legend = service_delta_figure(single, SeriesMode.MEANS)

        assert with_legend.layout.margin.t > without_legend.layout.margin.t

    def test_bar_labels_get_headroom(self):
        series = pl.DataFrame({"week_key": ["2025-01-06"], "shipments": [3]})
        single_line = pl.DataFrame({"day_key": ["2025-01-01"], "avg_delta_days": [0.5]})

        bars = shipments_figure(series)
        line = service_delta_figure(single_line, SeriesMode.MEANS)

        assert bars.layout.showlegend is False
        assert bars.layout.margin.t > line.layout.margin.t
        assert bars.layout.margin.r == line.layout.margin.r


class TestFormatters:
    """Tests for display formatters."""

    def test_format_currency(self):
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(None) == "-"

    def test_format_pct_takes_ratio(self):
        assert format_pct(0.05) == "+5.00%"
        assert format_pct(-0.125) == "-12.50%"

    def test_format_days(self):
        assert format_days(0.5) == "+0.50 d"
