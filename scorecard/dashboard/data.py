"""
Dashboard Data Layer
====================

Caching architecture:
  1. load_sources()   - reads the three CSVs once per file change (cache_resource,
                        so every rerun gets the same frame objects back)
  2. get_store()      - one ScorecardStore per browser session, fed from (1)
  3. init_page()      - renders the sidebar and pushes it into the store

Because (1) hands back identical frames, a rerun that changes nothing
invalidates nothing in the store, and a filter change only recomputes the
views that depend on it.
"""

import asyncio

import streamlit as st

from scorecard.data import DATA_DIR, LoadResult, default_sources, load_all
from scorecard.view import (
    DatePreset,
    DateRange,
    FilterState,
    ScorecardStore,
    SeriesMode,
    TruckTypeFilter,
    preset_range,
)

STORE_KEY = "scorecard_store"

PRESET_LABELS = {
    "All time": DatePreset.ALL,
    "Today": DatePreset.TODAY,
    "Last 7 days": DatePreset.LAST_7_DAYS,
    "Last 30 days": DatePreset.LAST_30_DAYS,
    "Custom": None,
}

TRUCK_TYPE_LABELS = {
    "All": TruckTypeFilter.ALL,
    "LTL": TruckTypeFilter.LTL,
    "TL": TruckTypeFilter.TL,
}

SERIES_MODE_LABELS = {
    "Breakdown": SeriesMode.BREAKDOWN,
    "Means": SeriesMode.MEANS,
}


# =============================================================================
# LAYER 1 - Source files (cached until a file changes)
# =============================================================================

def _sources_mtime(data_dir: str) -> float:
    paths = [p for p in default_sources(data_dir) if p.exists()]
    return max((p.stat().st_mtime for p in paths), default=0)


@st.cache_resource(show_spinner=False)
def load_sources(data_dir: str, file_mtime: float = 0) -> LoadResult:
    """Read all three CSVs concurrently. Failures are not cached."""
    return asyncio.run(load_all(data_dir))


async def _cached_loader(data_dir: str) -> LoadResult:
    # load_sources starts its own event loop
    return await asyncio.to_thread(load_sources, data_dir, _sources_mtime(data_dir))


# =============================================================================
# LAYER 2 - Per-session store
# =============================================================================

def get_store(data_dir: str = str(DATA_DIR)) -> ScorecardStore:
    """Return this session's store, (re)loaded from the cached sources."""
    if STORE_KEY not in st.session_state:
        st.session_state[STORE_KEY] = ScorecardStore()
    store: ScorecardStore = st.session_state[STORE_KEY]

    with st.spinner("Loading carrier data..."):
        asyncio.run(store.load(_cached_loader, data_dir))
    if store.error:
        st.error(
            f"Could not load carrier data: {store.error}\n\n"
            f"Expected Carriers.csv, QUOTESvsACTUAL.csv and deliveries.csv in `{data_dir}`."
        )
        if store.carriers.is_empty() and store.quotes.is_empty():
            st.stop()
    return store


# =============================================================================
# PAGE INIT - shared sidebar + data loading
# =============================================================================

def init_page() -> ScorecardStore:
    """
    Load data, render sidebar filters, apply them to the store.

    Call at the top of the page so the sidebar is always rendered.
    """
    store = get_store()
    state, mode = _render_sidebar(store)
    store.apply_filters(state)
    store.set_series_mode(mode)
    return store


def _render_sidebar(store: ScorecardStore) -> tuple[FilterState, SeriesMode]:
    st.sidebar.subheader("Filters")

    # Date range
    preset_label = st.sidebar.selectbox(
        "Period",
        list(PRESET_LABELS),
        index=0,
        key="filter_preset",
    )
    preset = PRESET_LABELS[preset_label]
    if preset is not None:
        date_range = preset_range(preset)
    else:
        date_range = _custom_date_range(store)

    # Truck type
    truck_label = st.sidebar.radio(
        "Truck type",
        list(TRUCK_TYPE_LABELS),
        horizontal=True,
        key="filter_truck_type",
    )

    # Carrier
    names = {m.carrier_id: m.carrier_name for m in store.scorecard}
    carrier_options = [None] + sorted(names, key=lambda cid: names[cid].casefold())
    carrier_id = st.sidebar.selectbox(
        "Carrier",
        carrier_options,
        format_func=lambda cid: "All carriers" if cid is None else names[cid],
        key="filter_carrier",
    )

    st.sidebar.markdown("---")
    mode_label = st.sidebar.radio(
        "Daily charts",
        list(SERIES_MODE_LABELS),
        horizontal=True,
        key="filter_series_mode",
        help="Breakdown shows daily totals; Means shows daily averages.",
    )

    state = FilterState(
        date_range=date_range,
        carrier_id=carrier_id,
        truck_type=TRUCK_TYPE_LABELS[truck_label],
    )
    return state, SERIES_MODE_LABELS[mode_label]


def _custom_date_range(store: ScorecardStore) -> DateRange:
    quotes = store.quotes
    if quotes.is_empty():
        st.sidebar.warning("No quote data loaded.")
        return DateRange()

    days = quotes["quote_date"].dt.convert_time_zone("UTC").dt.date()
    min_date, max_date = days.min(), days.max()

    picked = st.sidebar.date_input(
        "Quote date range",
        value=(min_date, max_date),
        min_value=min_date,
        max_value=max_date,
        key="filter_date_range",
    )
    if isinstance(picked, tuple) and len(picked) == 2:
        return DateRange(picked[0], picked[1])
    if isinstance(picked, tuple) and len(picked) == 1:
        return DateRange(picked[0], picked[0])
    return DateRange()
