"""Static reference data: source file names, column maps, parsing rules."""

from .columns import (
    CARRIER_COLUMNS,
    QUOTE_COLUMNS,
    DELIVERY_COLUMNS,
    DATE_FORMATS,
    EPOCH,
)
from .sources import (
    DATA_DIR,
    CARRIERS_FILE,
    QUOTES_FILE,
    DELIVERIES_FILE,
    default_sources,
)

__all__ = [
    # Column maps
    "CARRIER_COLUMNS",
    "QUOTE_COLUMNS",
    "DELIVERY_COLUMNS",
    # Parsing
    "DATE_FORMATS",
    "EPOCH",
    # Source locations
    "DATA_DIR",
    "CARRIERS_FILE",
    "QUOTES_FILE",
    "DELIVERIES_FILE",
    "default_sources",
]
