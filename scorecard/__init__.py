"""
Carrier Scorecard

Per-carrier cost (quote vs charged) and service (expected vs actual transit)
metrics, with a reactive filter layer for the dashboard.
"""

from .calculate_scorecard import compute_scorecard, split_by_truck_type
from .version import VERSION

__all__ = ["compute_scorecard", "split_by_truck_type", "VERSION"]
