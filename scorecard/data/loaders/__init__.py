"""Source CSV loaders."""

from scorecard.data.loaders.csv_files import (
    LoadResult,
    load_all,
    read_carriers,
    read_quotes,
    read_deliveries,
)

__all__ = ["LoadResult", "load_all", "read_carriers", "read_quotes", "read_deliveries"]
