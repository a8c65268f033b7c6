"""
Scorecard Data

Source CSV loaders and the reference data they rely on.

Structure:
    - reference/: Source file names, column maps, parsing rules
    - loaders/: CSV readers and the parallel load_all join
"""

from .loaders import (
    LoadResult,
    load_all,
    read_carriers,
    read_quotes,
    read_deliveries,
)
from .reference import (
    DATA_DIR,
    default_sources,
)

__all__ = [
    # Loaders
    "LoadResult",
    "load_all",
    "read_carriers",
    "read_quotes",
    "read_deliveries",
    # Locations
    "DATA_DIR",
    "default_sources",
]
