"""
Row Model
=========

Typed records for the three input collections and the per-carrier metric
types produced by the scorecard aggregator.

Collections travel through the engine as polars DataFrames with the fixed
schemas below. Records are the row-level view of the same data, used to
build frames by hand (tests, notebooks) via frame_from_records().

SCHEMAS
-------
    CARRIER_SCHEMA      - carrier_id, carrier_name, truck_type
    QUOTE_SCHEMA        - quote_date, carrier_id, weight, quote, amount
    DELIVERY_SCHEMA     - carrier_id, pickup, delivery, expected_delivery

All timestamps are UTC microsecond datetimes.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import StrEnum

import polars as pl


UTC_DATETIME = pl.Datetime("us", "UTC")


class TruckType(StrEnum):
    LTL = "LTL"
    TL = "TL"


# =============================================================================
# FRAME SCHEMAS
# =============================================================================

CARRIER_SCHEMA: dict[str, pl.DataType] = {
    "carrier_id": pl.Int64,
    "carrier_name": pl.String,
    "truck_type": pl.String,
}

QUOTE_SCHEMA: dict[str, pl.DataType] = {
    "quote_date": UTC_DATETIME,
    "carrier_id": pl.Int64,
    "weight": pl.Float64,
    "quote": pl.Float64,
    "amount": pl.Float64,
}

DELIVERY_SCHEMA: dict[str, pl.DataType] = {
    "carrier_id": pl.Int64,
    "pickup": UTC_DATETIME,
    "delivery": UTC_DATETIME,
    "expected_delivery": UTC_DATETIME,
}


# =============================================================================
# INPUT RECORDS
# =============================================================================

@dataclass(frozen=True)
class CarrierRecord:
    carrier_id: int
    carrier_name: str
    truck_type: TruckType = TruckType.LTL


@dataclass(frozen=True)
class QuoteActualRecord:
    quote_date: datetime
    carrier_id: int
    weight: float
    quote: float
    amount: float


@dataclass(frozen=True)
class DeliveryRecord:
    carrier_id: int
    pickup: datetime | None
    delivery: datetime | None
    expected_delivery: datetime | None


def frame_from_records(records: list, schema: dict[str, pl.DataType]) -> pl.DataFrame:
    """
    Build a collection frame from records.

    Args:
        records: CarrierRecord / QuoteActualRecord / DeliveryRecord instances
        schema: Matching *_SCHEMA dict

    Returns:
        DataFrame with exactly the schema's columns, in schema order
    """
    if not records:
        return empty_frame(schema)
    rows = [
        {k: (v.value if isinstance(v, StrEnum) else v) for k, v in asdict(r).items()}
        for r in records
    ]
    return pl.DataFrame(rows, schema=schema)


def empty_frame(schema: dict[str, pl.DataType]) -> pl.DataFrame:
    return pl.DataFrame(schema=schema)


# =============================================================================
# OUTPUT METRICS
# =============================================================================

@dataclass
class CostMetrics:
    """Quote vs charged amount statistics for one carrier."""

    # counts
    quote_count: int = 0
    over_count: int = 0
    under_count: int = 0
    # sums
    extra_charges_total: float = 0.0
    under_quoted_total: float = 0.0
    # running means over all rows
    avg_delta: float = 0.0
    avg_delta_pct: float = 0.0
    avg_quote: float = 0.0
    avg_amount: float = 0.0
    avg_weight: float = 0.0
    # running means over the over / under subsets
    avg_over_charge: float = 0.0
    avg_under_credit: float = 0.0
    # rates
    over_rate: float = 0.0
    under_rate: float = 0.0


@dataclass
class ServiceMetrics:
    """Actual vs expected transit statistics for one carrier."""

    shipments: int = 0
    avg_delta_days: float = 0.0
    late_count: int = 0
    early_count: int = 0
    avg_actual_days: float = 0.0
    avg_expected_days: float = 0.0
    late_rate: float = 0.0
    early_rate: float = 0.0


@dataclass
class CarrierScoreMetrics:
    carrier_id: int
    carrier_name: str
    truck_type: TruckType
    cost: CostMetrics = field(default_factory=CostMetrics)
    service: ServiceMetrics = field(default_factory=ServiceMetrics)
