"""
Scorecard Store
===============

Holds the raw collections and the filter state, and exposes every derived
view as a memoized node of the reactive graph in scorecard.view.reactive.

GRAPH
-----
    carriers, quotes, deliveries                      (sources, replaced per load)
    date_range, carrier_id, truck_type, series_mode   (sources, filter actions)

    scorecard           <- carriers, quotes, deliveries
    ltl / tl            <- scorecard
    date_quotes         <- quotes, date_range
    date_deliveries     <- deliveries, date_range
    filtered_quotes     <- date_quotes, carrier_id
    filtered_deliveries <- date_deliveries, carrier_id
    date_scorecard      <- carriers, date_quotes, date_deliveries
    filtered_scorecard  <- date_scorecard, truck_type
    cost series         <- filtered_quotes, series_mode
    service series      <- filtered_deliveries, series_mode
    shipments series    <- carriers, filtered_deliveries, carrier_id
    weight series       <- carriers, filtered_quotes, carrier_id

filtered_scorecard is date filtered but never carrier filtered, so the
leaderboard keeps every carrier while one is selected. Changing the truck
type recomputes only filtered_scorecard.

USAGE
-----
    store = ScorecardStore()
    asyncio.run(store.load())
    store.set_date_preset(DatePreset.LAST_30_DAYS)
    store.select_carrier(7)
    store.cost_delta_daily_series
"""

import logging
import operator
from datetime import date
from typing import Any, Awaitable, Callable

import polars as pl

from scorecard.calculate_scorecard import compute_scorecard, split_by_truck_type
from scorecard.data.loaders import LoadResult, load_all
from scorecard.models import (
    CARRIER_SCHEMA,
    QUOTE_SCHEMA,
    DELIVERY_SCHEMA,
    CarrierScoreMetrics,
    empty_frame,
)
from scorecard.view.filters import (
    DatePreset,
    DateRange,
    FilterState,
    TruckTypeFilter,
    filter_by_carrier,
    filter_by_date,
    filter_by_truck_type,
    preset_range,
)
from scorecard.view.reactive import Computed, Source
from scorecard.view.series import (
    SeriesMode,
    cost_delta_daily_series,
    service_delta_daily_series,
    shipments_series,
    weight_series,
)

logger = logging.getLogger(__name__)

Loader = Callable[..., Awaitable[LoadResult]]


class ScorecardStore:
    """
    Reactive scorecard state.

    Derived properties are lazy: filter actions only mark dependents dirty,
    and each value is recomputed once on its next read.
    """

    def __init__(
        self,
        carriers: pl.DataFrame | None = None,
        quotes: pl.DataFrame | None = None,
        deliveries: pl.DataFrame | None = None,
        filters: FilterState | None = None,
    ):
        filters = filters or FilterState()

        # Frames compare by identity; a reload always replaces them
        self._carriers = Source(
            carriers if carriers is not None else empty_frame(CARRIER_SCHEMA),
            name="carriers", equals=operator.is_,
        )
        self._quotes = Source(
            quotes if quotes is not None else empty_frame(QUOTE_SCHEMA),
            name="quotes", equals=operator.is_,
        )
        self._deliveries = Source(
            deliveries if deliveries is not None else empty_frame(DELIVERY_SCHEMA),
            name="deliveries", equals=operator.is_,
        )
        self._date_range = Source(filters.date_range, name="date_range")
        self._carrier_id = Source(filters.carrier_id, name="carrier_id")
        self._truck_type = Source(TruckTypeFilter(filters.truck_type), name="truck_type")
        self._series_mode = Source(SeriesMode.BREAKDOWN, name="series_mode")

        self._scorecard = Computed(
            compute_scorecard, self._carriers, self._quotes, self._deliveries,
            name="scorecard",
        )
        self._split = Computed(split_by_truck_type, self._scorecard, name="split")

        self._date_quotes = Computed(
            lambda df, date_range: filter_by_date(df, "quote_date", date_range),
            self._quotes, self._date_range,
            name="date_quotes",
        )
        self._date_deliveries = Computed(
            lambda df, date_range: filter_by_date(df, "delivery", date_range),
            self._deliveries, self._date_range,
            name="date_deliveries",
        )
        self._filtered_quotes = Computed(
            filter_by_carrier, self._date_quotes, self._carrier_id,
            name="filtered_quotes",
        )
        self._filtered_deliveries = Computed(
            filter_by_carrier, self._date_deliveries, self._carrier_id,
            name="filtered_deliveries",
        )

        self._date_scorecard = Computed(
            compute_scorecard, self._carriers, self._date_quotes, self._date_deliveries,
            name="date_scorecard",
        )
        self._filtered_scorecard = Computed(
            filter_by_truck_type, self._date_scorecard, self._truck_type,
            name="filtered_scorecard",
        )

        self._cost_series = Computed(
            cost_delta_daily_series, self._filtered_quotes, self._series_mode,
            name="cost_delta_daily_series",
        )
        self._service_series = Computed(
            service_delta_daily_series, self._filtered_deliveries, self._series_mode,
            name="service_delta_daily_series",
        )
        self._shipments_series = Computed(
            shipments_series, self._carriers, self._filtered_deliveries, self._carrier_id,
            name="shipments_series",
        )
        self._weight_series = Computed(
            weight_series, self._carriers, self._filtered_quotes, self._carrier_id,
            name="weight_series",
        )

        self.nodes: dict[str, Computed] = {
            node.name: node
            for node in (
                self._scorecard,
                self._split,
                self._date_quotes,
                self._date_deliveries,
                self._filtered_quotes,
                self._filtered_deliveries,
                self._date_scorecard,
                self._filtered_scorecard,
                self._cost_series,
                self._service_series,
                self._shipments_series,
                self._weight_series,
            )
        }

        self.loading = False
        self.error: str | None = None
        self._load_seq = 0

    # =========================================================================
    # LOADING
    # =========================================================================

    def set_data(
        self,
        carriers: pl.DataFrame,
        quotes: pl.DataFrame,
        deliveries: pl.DataFrame,
    ) -> None:
        """Replace all three raw collections."""
        self._carriers.set(carriers)
        self._quotes.set(quotes)
        self._deliveries.set(deliveries)

    async def load(self, loader: Loader = load_all, *args: Any, **kwargs: Any) -> bool:
        """
        Fetch the raw collections and install them.

        loader is awaited with args/kwargs and must return a LoadResult
        (load_all by default). The three collections are installed together
        or not at all.

        A RuntimeError from the loader is stored in `error` and the current
        collections are kept. A result (or failure) arriving after a newer
        load() started is discarded.

        Returns:
            True if this call's result was installed
        """
        self._load_seq += 1
        seq = self._load_seq
        self.loading = True
        self.error = None
        logger.debug("Load #%d started", seq)

        try:
            result = await loader(*args, **kwargs)
        except RuntimeError as e:
            if seq != self._load_seq:
                logger.debug("Load #%d failed after newer load #%d started: %s", seq, self._load_seq, e)
                return False
            self.error = str(e)
            self.loading = False
            logger.warning("Load #%d failed: %s", seq, e)
            return False

        if seq != self._load_seq:
            logger.debug("Discarding stale load #%d (latest is #%d)", seq, self._load_seq)
            return False

        self.set_data(result.carriers, result.quotes, result.deliveries)
        self.loading = False
        logger.debug(
            "Load #%d installed: %d carriers, %d quotes, %d deliveries",
            seq, len(result.carriers), len(result.quotes), len(result.deliveries),
        )
        return True

    # =========================================================================
    # FILTER ACTIONS
    # =========================================================================

    def select_carrier(self, carrier_id: int) -> None:
        self._carrier_id.set(carrier_id)

    def clear_carrier(self) -> None:
        self._carrier_id.set(None)

    def set_truck_type(self, truck_type: TruckTypeFilter | str) -> None:
        self._truck_type.set(TruckTypeFilter(truck_type))

    def set_date_range(self, start: date | None, end: date | None) -> None:
        """Inclusive calendar-day bounds; None leaves that side open."""
        self._date_range.set(DateRange(start, end))

    def set_date_preset(self, preset: DatePreset | str, today: date | None = None) -> None:
        self._date_range.set(preset_range(preset, today))

    def set_series_mode(self, mode: SeriesMode | str) -> None:
        self._series_mode.set(SeriesMode(mode))

    def apply_filters(self, state: FilterState) -> None:
        """Set date range, carrier and truck type in one call."""
        truck_type = TruckTypeFilter(state.truck_type)
        self._date_range.set(state.date_range)
        self._carrier_id.set(state.carrier_id)
        self._truck_type.set(truck_type)

    # =========================================================================
    # READ SURFACE
    # =========================================================================

    @property
    def filters(self) -> FilterState:
        return FilterState(
            date_range=self._date_range.get(),
            carrier_id=self._carrier_id.get(),
            truck_type=self._truck_type.get(),
        )

    @property
    def series_mode(self) -> SeriesMode:
        return self._series_mode.get()

    @property
    def carriers(self) -> pl.DataFrame:
        return self._carriers.get()

    @property
    def quotes(self) -> pl.DataFrame:
        return self._quotes.get()

    @property
    def deliveries(self) -> pl.DataFrame:
        return self._deliveries.get()

    @property
    def filtered_quotes(self) -> pl.DataFrame:
        return self._filtered_quotes.get()

    @property
    def filtered_deliveries(self) -> pl.DataFrame:
        return self._filtered_deliveries.get()

    @property
    def scorecard(self) -> list[CarrierScoreMetrics]:
        """All-time metrics over the unfiltered collections."""
        return self._scorecard.get()

    @property
    def ltl(self) -> list[CarrierScoreMetrics]:
        return self._split.get()[0]

    @property
    def tl(self) -> list[CarrierScoreMetrics]:
        return self._split.get()[1]

    @property
    def filtered_scorecard(self) -> list[CarrierScoreMetrics]:
        """Metrics over the date range, narrowed to the truck type."""
        return self._filtered_scorecard.get()

    @property
    def cost_delta_daily_series(self) -> pl.DataFrame:
        return self._cost_series.get()

    @property
    def service_delta_daily_series(self) -> pl.DataFrame:
        return self._service_series.get()

    @property
    def shipments_series(self) -> pl.DataFrame:
        return self._shipments_series.get()

    @property
    def weight_series(self) -> pl.DataFrame:
        return self._weight_series.get()
