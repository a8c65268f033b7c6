"""Default locations of the three source CSVs."""

from pathlib import Path

DATA_DIR = Path(__file__).parent.parent.parent.parent / "data" / "raw"

CARRIERS_FILE = "Carriers.csv"
QUOTES_FILE = "QUOTESvsACTUAL.csv"
DELIVERIES_FILE = "deliveries.csv"


def default_sources(data_dir: Path | str | None = None) -> tuple[Path, Path, Path]:
    """Return (carriers, quotes, deliveries) paths inside data_dir."""
    base = Path(data_dir) if data_dir is not None else DATA_DIR
    return base / CARRIERS_FILE, base / QUOTES_FILE, base / DELIVERIES_FILE
