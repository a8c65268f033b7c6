"""
Scorecard View

Filter state, reactive derivation and chart series for the dashboard.

Structure:
    - filters: FilterState, DateRange, presets, frame filters
    - reactive: Source / Computed memoized nodes
    - series: day / week bucketed chart series
    - store: ScorecardStore wiring it all together
"""

from .filters import (
    DatePreset,
    DateRange,
    FilterState,
    TruckTypeFilter,
    preset_range,
)
from .series import SeriesMode
from .store import ScorecardStore

__all__ = [
    "DatePreset",
    "DateRange",
    "FilterState",
    "TruckTypeFilter",
    "preset_range",
    "SeriesMode",
    "ScorecardStore",
]
