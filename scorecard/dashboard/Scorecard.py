"""
Carrier Scorecard Dashboard
===========================

Single-page Streamlit app: carrier leaderboard, daily cost / service deltas
and shipment volumes, all driven by the sidebar filters.

Data:
    CSV files in data/raw (Carriers.csv, QUOTESvsACTUAL.csv,
    deliveries.csv)

Run with:
    streamlit run scorecard/dashboard/Scorecard.py
"""

import streamlit as st

from scorecard.dashboard.charts import (
    cost_delta_figure,
    format_currency,
    format_days,
    format_pct,
    service_delta_figure,
    shipments_figure,
    weight_figure,
)
from scorecard.dashboard.data import init_page
from scorecard.leaderboard import (
    PAGE_SIZES,
    SortField,
    default_descending,
    leaderboard_frame,
    paginate,
    rank_scorecard,
)

SORT_LABELS = {
    "Rank score": SortField.RANK_SCORE,
    "Carrier": SortField.CARRIER,
    "Type": SortField.TYPE,
    "Quotes": SortField.QUOTES,
    "Over rate": SortField.OVER_RATE,
    "Avg delta ($)": SortField.AVG_DELTA,
    "Avg delta (%)": SortField.AVG_DELTA_PCT,
    "Shipments": SortField.SHIPMENTS,
    "Avg delta (days)": SortField.AVG_DELTA_DAYS,
}

# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Carrier Scorecard",
    page_icon="🚚",
    layout="wide",
    initial_sidebar_state="expanded",
)

store = init_page()
mode = store.series_mode

st.title("Carrier Scorecard")
st.markdown(
    "Quoted vs charged cost and expected vs actual transit time per carrier. "
    "Use the **sidebar** to narrow the period, truck type or carrier."
)

# =============================================================================
# ROW 1 - KPIs
# =============================================================================

metrics = store.filtered_scorecard

total_quotes = sum(m.cost.quote_count for m in metrics)
total_shipments = sum(m.service.shipments for m in metrics)
extra_charges = sum(m.cost.extra_charges_total for m in metrics)

col1, col2, col3, col4 = st.columns(4)
col1.metric("Carriers", f"{len(metrics):,}")
col2.metric("Quotes", f"{total_quotes:,}")
col3.metric("Shipments", f"{total_shipments:,}")
col4.metric("Extra charges", format_currency(extra_charges))

if store.filters.carrier_id is not None:
    selected = next((m for m in metrics if m.carrier_id == store.filters.carrier_id), None)
    if selected is not None:
        st.info(
            f"**{selected.carrier_name}** ({selected.truck_type.value}): "
            f"avg delta {format_currency(selected.cost.avg_delta)} "
            f"({format_pct(selected.cost.avg_delta_pct)}), "
            f"over-charged on {selected.cost.over_rate:.0%} of quotes, "
            f"transit {format_days(selected.service.avg_delta_days)} vs expected"
        )
    else:
        st.warning("The selected carrier has no activity for the current filters.")

st.markdown("---")

# =============================================================================
# ROW 2 - Leaderboard
# =============================================================================

st.subheader("Leaderboard")
st.caption("Rank score = avg delta % + avg delta days. Lower is better.")

c_search, c_sort, c_dir, c_size = st.columns([3, 2, 1, 1])
search = c_search.text_input("Search carrier or type", key="lb_search")
sort_label = c_sort.selectbox("Sort by", list(SORT_LABELS), key="lb_sort")
sort_field = SORT_LABELS[sort_label]
descending = c_dir.toggle(
    "Descending",
    value=default_descending(sort_field),
    key=f"lb_desc_{sort_field}",
)
page_size = c_size.selectbox("Rows", PAGE_SIZES, key="lb_page_size")

ranked = rank_scorecard(metrics, search=search, sort_field=sort_field, descending=descending)
total_pages = max(1, -(-len(ranked) // page_size))
# One widget per page count: a stored value above max_value is an error
page_number = st.number_input(
    "Page", min_value=1, max_value=total_pages, value=1, step=1, key=f"lb_page_{total_pages}"
)
page = paginate(ranked, page_index=int(page_number) - 1, page_size=page_size)

if page.total_rows:
    st.dataframe(
        leaderboard_frame(page).to_pandas().style.format({
            "over_rate": "{:.1%}",
            "avg_delta": "${:,.2f}",
            "avg_delta_pct": "{:+.2%}",
            "avg_delta_days": "{:+.2f}",
            "rank_score": "{:.3f}",
        }),
        use_container_width=True,
        hide_index=True,
    )
    st.caption(f"Showing {page.display_start}-{page.display_end} of {page.total_rows}")
else:
    st.info("No carriers match the current filters.")

st.markdown("---")

# =============================================================================
# ROW 3 - Daily deltas
# =============================================================================

left, right = st.columns(2)

with left:
    st.markdown("**Cost: Quote vs Actual**")
    cost_series = store.cost_delta_daily_series
    if len(cost_series) > 0:
        st.plotly_chart(cost_delta_figure(cost_series, mode), use_container_width=True)
    else:
        st.info("No quotes in range.")

with right:
    st.markdown("**Service: Expected vs Actual Transit**")
    service_series = store.service_delta_daily_series
    if len(service_series) > 0:
        st.plotly_chart(service_delta_figure(service_series, mode), use_container_width=True)
    else:
        st.info("No deliveries with valid transit times in range.")

st.markdown("---")

# =============================================================================
# ROW 4 - Volumes
# =============================================================================

left2, right2 = st.columns(2)

with left2:
    shipments = store.shipments_series
    if len(shipments) > 0:
        st.plotly_chart(shipments_figure(shipments), use_container_width=True)
    else:
        st.info("No shipments in range.")

with right2:
    weight = store.weight_series
    if len(weight) > 0:
        st.plotly_chart(weight_figure(weight), use_container_width=True)
    else:
        st.info("No quoted weight in range.")
