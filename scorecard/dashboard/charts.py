"""
Dashboard Charts
================

Plotly figure builders over the store's series frames. Kept free of
Streamlit calls so pages just do st.plotly_chart(build_x(...)).

Convention (as in the page code): Polars in, pandas only at plot time via
to_pandas().
"""

import plotly.graph_objects as go
import polars as pl

from scorecard.view.series import SeriesMode

QUOTE_COLOR = "#2563eb"
ACTUAL_COLOR = "#16a34a"
DELTA_COLOR = "#f97316"
BAR_COLOR = "#3498db"

LEGEND_ABOVE = dict(orientation="h", yanchor="bottom", y=1.02, xanchor="left", x=0)
RIGHT_AXIS_MARGIN = 64


# =============================================================================
# LAYOUT + FORMAT HELPERS
# =============================================================================

def fit_chart_margins(fig: go.Figure) -> go.Figure:
    """
    Size margins to what the figure actually draws.

    The right margin grows when a trace sits on the y2 axis. The top margin
    leaves a row for a visible legend (placed with LEGEND_ABOVE) and another
    for bar labels drawn outside the bars.
    """
    traces = list(fig.data)
    right_axis = any(getattr(t, "yaxis", None) == "y2" for t in traces)
    outside_labels = any(t.type == "bar" and t.textposition == "outside" for t in traces)

    # Plotly hides the legend of single-trace figures unless told otherwise
    show_legend = fig.layout.showlegend
    legend_row = show_legend if show_legend is not None else len(traces) > 1

    top = 44 + (32 if legend_row else 0) + (20 if outside_labels else 0)
    fig.update_xaxes(automargin=True)
    fig.update_yaxes(automargin=True)
    fig.update_layout(
        margin=dict(l=10, r=RIGHT_AXIS_MARGIN if right_axis else 16, t=top, b=10),
        autosize=True,
    )
    return fig


def format_currency(value) -> str:
    if value is None:
        return "-"
    return f"${value:,.2f}"


def format_pct(value) -> str:
    """Format a ratio (0.05) as a signed percentage (+5.00%)."""
    if value is None:
        return "-"
    return f"{value * 100:+.2f}%"


def format_days(value) -> str:
    if value is None:
        return "-"
    return f"{value:+.2f} d"


# =============================================================================
# DAILY DELTA CHARTS
# =============================================================================

def cost_delta_figure(series: pl.DataFrame, mode: SeriesMode = SeriesMode.BREAKDOWN) -> go.Figure:
    """
    Daily quote vs actual.

    BREAKDOWN plots total quote, total actual and their difference;
    MEANS plots the average delta ($) and average delta (%) on a second axis.
    """
    pdf = series.to_pandas()
    fig = go.Figure()

    if SeriesMode(mode) == SeriesMode.BREAKDOWN:
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["sum_quote"],
            name="Quote", line=dict(color=QUOTE_COLOR, width=2),
        ))
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["sum_amount"],
            name="Actual", line=dict(color=ACTUAL_COLOR, width=2),
        ))
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["delta"],
            name="Delta", line=dict(color=DELTA_COLOR, width=2),
            customdata=pdf["avg_delta"],
            hovertemplate="Delta: $%{y:,.2f}<br>Avg per quote: $%{customdata:,.2f}<extra></extra>",
        ))
        fig.update_layout(
            title="Daily Quote vs Actual",
            yaxis_title="Amount ($)",
            yaxis_tickprefix="$", yaxis_tickformat=",.0f",
        )
    else:
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["avg_delta"],
            name="Avg Delta ($)", line=dict(color=DELTA_COLOR, width=2),
        ))
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["avg_delta_pct"] * 100,
            name="Avg Delta (%)", line=dict(color=QUOTE_COLOR, width=2, dash="dot"),
            yaxis="y2",
        ))
        fig.update_layout(
            title="Daily Average Cost Delta",
            yaxis=dict(title="Avg Delta ($)", tickprefix="$", tickformat=",.2f"),
            yaxis2=dict(title="Avg Delta (%)", ticksuffix="%", overlaying="y", side="right"),
        )

    fig.update_layout(xaxis_title="Date", hovermode="x unified", legend=LEGEND_ABOVE)
    return fit_chart_margins(fig)


def service_delta_figure(series: pl.DataFrame, mode: SeriesMode = SeriesMode.BREAKDOWN) -> go.Figure:
    """Daily expected vs actual transit days (BREAKDOWN) or average delta days (MEANS)."""
    pdf = series.to_pandas()
    fig = go.Figure()

    if SeriesMode(mode) == SeriesMode.BREAKDOWN:
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["avg_expected_days"],
            name="Expected", line=dict(color=QUOTE_COLOR, width=2),
        ))
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["avg_actual_days"],
            name="Actual", line=dict(color=ACTUAL_COLOR, width=2),
        ))
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["delta_days"],
            name="Delta", line=dict(color=DELTA_COLOR, width=2),
        ))
        title = "Daily Transit Days: Expected vs Actual"
    else:
        fig.add_trace(go.Scatter(
            x=pdf["day_key"], y=pdf["avg_delta_days"],
            name="Avg Delta", line=dict(color=DELTA_COLOR, width=2),
        ))
        title = "Daily Average Transit Delta"

    fig.update_layout(
        title=title,
        xaxis_title="Date",
        yaxis_title="Days",
        hovermode="x unified",
        legend=LEGEND_ABOVE,
    )
    return fit_chart_margins(fig)


# =============================================================================
# VOLUME CHARTS
# =============================================================================

def volume_figure(series: pl.DataFrame, value_col: str, title: str, y_title: str) -> go.Figure:
    """
    Bar chart of a shipments / weight series.

    Per-carrier series (carrier_name column) plot one bar per carrier;
    single-carrier series plot one bar per week_key.
    """
    pdf = series.to_pandas()
    per_carrier = "carrier_name" in series.columns
    x = pdf["carrier_name"] if per_carrier else pdf["week_key"]

    fig = go.Figure(go.Bar(
        x=x,
        y=pdf[value_col],
        marker_color=BAR_COLOR,
        text=[f"{v:,.0f}" for v in pdf[value_col]],
        textposition="outside",
        cliponaxis=False,
    ))
    fig.update_layout(
        title=title,
        xaxis_title="Carrier" if per_carrier else "Week of",
        yaxis_title=y_title,
        showlegend=False,
    )
    return fit_chart_margins(fig)


def shipments_figure(series: pl.DataFrame) -> go.Figure:
    per_carrier = "carrier_name" in series.columns
    title = "Shipments by Carrier" if per_carrier else "Weekly Shipments"
    return volume_figure(series, "shipments", title, "Shipments")


def weight_figure(series: pl.DataFrame) -> go.Figure:
    per_carrier = "carrier_name" in series.columns
    title = "Quoted Weight by Carrier" if per_carrier else "Weekly Quoted Weight"
    return volume_figure(series, "weight", title, "Weight (lbs)")
