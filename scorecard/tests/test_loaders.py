"""
Tests for the CSV loaders

Run with: pytest scorecard/tests/test_loaders.py -v
"""

import asyncio
from datetime import datetime, timezone

import polars as pl
import pytest

from scorecard.data import load_all, read_carriers, read_deliveries, read_quotes
from scorecard.models import CARRIER_SCHEMA, DELIVERY_SCHEMA, QUOTE_SCHEMA

CARRIERS_CSV = """TrnspCode,CarrierName,TruckType
1,Acme Freight,LTL
2, Big Rig Co ,tl
3,Coastal Lines,
"""

QUOTES_CSV = """Quote Date,Carrier,Weight,Quote,Amount
2025-01-01,1,"1,200",100,120
2025-01-01T15:30:00Z,1,800,200,190
01/02/2025,2,500, 1 000 ,abc
not a date,3,,50,55
"""

DELIVERIES_CSV = """carrier,pickup,delivery,expected_delivery
1,2025-01-06T08:00:00Z,2025-01-08T20:00:00Z,2025-01-08T08:00:00Z
2,2025-01-06 08:00,garbage,2025-01-07 08:00
"""


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "Carriers.csv").write_text(CARRIERS_CSV)
    (tmp_path / "QUOTESvsACTUAL.csv").write_text(QUOTES_CSV)
    (tmp_path / "deliveries.csv").write_text(DELIVERIES_CSV)
    return tmp_path


# =============================================================================
# TESTS: READERS
# =============================================================================

class TestReadCarriers:
    """Tests for read_carriers."""

    def test_schema_and_values(self, data_dir):
        df = read_carriers(data_dir / "Carriers.csv")

        assert df.schema == pl.Schema(CARRIER_SCHEMA)
        assert df["carrier_id"].to_list() == [1, 2, 3]
        assert df["carrier_name"].to_list() == ["Acme Freight", "Big Rig Co", "Coastal Lines"]

    def test_truck_type_normalized(self, data_dir):
        """Trimmed, upper-cased; anything but TL becomes LTL."""
        df = read_carriers(data_dir / "Carriers.csv")
        assert df["truck_type"].to_list() == ["LTL", "TL", "LTL"]

    def test_header_whitespace_ignored(self, tmp_path):
        path = tmp_path / "c.csv"
        path.write_text(" TrnspCode , CarrierName ,TruckType\n4,Delta,TL\n")
        df = read_carriers(path)
        assert df.row(0, named=True) == {"carrier_id": 4, "carrier_name": "Delta", "truck_type": "TL"}

    def test_missing_column_raises(self, tmp_path):
        path = tmp_path / "c.csv"
        path.write_text("TrnspCode,CarrierName\n1,Acme\n")
        with pytest.raises(RuntimeError, match="TruckType"):
            read_carriers(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(RuntimeError, match="carriers"):
            read_carriers(tmp_path / "nope.csv")


class TestReadQuotes:
    """Tests for read_quotes coercion rules."""

    def test_schema(self, data_dir):
        df = read_quotes(data_dir / "QUOTESvsACTUAL.csv")
        assert df.schema == pl.Schema(QUOTE_SCHEMA)
        assert len(df) == 4

    def test_numbers(self, data_dir):
        """Commas and spaces stripped; unparseable or blank -> 0."""
        df = read_quotes(data_dir / "QUOTESvsACTUAL.csv")

        assert df["weight"].to_list() == [1200.0, 800.0, 500.0, 0.0]
        assert df["quote"].to_list() == [100.0, 200.0, 1000.0, 50.0]
        assert df["amount"].to_list() == [120.0, 190.0, 0.0, 55.0]

    def test_dates(self, data_dir):
        """ISO, ISO with Z and US formats parse as UTC; garbage -> epoch."""
        df = read_quotes(data_dir / "QUOTESvsACTUAL.csv")

        assert df["quote_date"].to_list() == [
            utc(2025, 1, 1),
            utc(2025, 1, 1, 15, 30),
            utc(2025, 1, 2),
            utc(1970, 1, 1),
        ]


class TestReadDeliveries:
    """Tests for read_deliveries."""

    def test_schema_and_timestamps(self, data_dir):
        df = read_deliveries(data_dir / "deliveries.csv")

        assert df.schema == pl.Schema(DELIVERY_SCHEMA)
        row = df.row(0, named=True)
        assert row["pickup"] == utc(2025, 1, 6, 8)
        assert row["delivery"] == utc(2025, 1, 8, 20)
        assert row["expected_delivery"] == utc(2025, 1, 8, 8)

    def test_unparseable_timestamp_defaults_to_epoch(self, data_dir):
        df = read_deliveries(data_dir / "deliveries.csv")
        assert df.row(1, named=True)["delivery"] == utc(1970, 1, 1)


# =============================================================================
# TESTS: LOAD ALL
# =============================================================================

class TestLoadAll:
    """Tests for the concurrent load_all join."""

    def test_loads_default_file_names(self, data_dir):
        result = asyncio.run(load_all(data_dir))

        assert len(result.carriers) == 3
        assert len(result.quotes) == 4
        assert len(result.deliveries) == 2

    def test_explicit_source_overrides(self, data_dir, tmp_path_factory):
        other = tmp_path_factory.mktemp("other") / "carriers.csv"
        other.write_text("TrnspCode,CarrierName,TruckType\n9,Solo,TL\n")

        result = asyncio.run(load_all(data_dir, carriers=other))

        assert result.carriers["carrier_id"].to_list() == [9]
        assert len(result.quotes) == 4

    def test_any_failure_fails_the_join(self, data_dir):
        (data_dir / "deliveries.csv").unlink()

        with pytest.raises(RuntimeError, match="deliveries"):
            asyncio.run(load_all(data_dir))
