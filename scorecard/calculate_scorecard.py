"""
Carrier Scorecard Calculator
============================

Frames in, metrics out. Folds the three collections into one
CarrierScoreMetrics per carrier id seen in quotes or deliveries.

REQUIRED INPUT COLUMNS
----------------------
    carriers    - carrier_id, carrier_name, truck_type
    quotes      - carrier_id, weight, quote, amount
    deliveries  - carrier_id, pickup, delivery, expected_delivery

ALGORITHM
---------
    One forward pass per collection over a shared accumulator map keyed by
    carrier id. Entries are created on first reference with zero defaults,
    so a carrier with deliveries but no quotes keeps zeroed cost metrics.

    All means are running means: mean += (x - mean) / n, n being the count
    after the increment. Conditional means (avg_over_charge,
    avg_under_credit) count only the rows of their own subset.

    Delivery rows whose transit durations cannot be computed (missing or
    non-finite timestamps) are skipped by the service pass, though their
    carrier still gets an entry with zeroed service metrics. Nothing else is
    filtered: malformed values have already been coerced by the loaders.

    Zero-quote rows contribute 0 to avg_delta_pct instead of being left out
    of its count.

USAGE
-----
    from scorecard.calculate_scorecard import compute_scorecard
    metrics = compute_scorecard(carriers, quotes, deliveries)
"""

import math
from dataclasses import asdict
from operator import attrgetter

import polars as pl

from .models import (
    CarrierScoreMetrics,
    CostMetrics,
    ServiceMetrics,
    TruckType,
)

MS_PER_DAY = 86_400_000


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def compute_scorecard(
    carriers: pl.DataFrame,
    quotes: pl.DataFrame,
    deliveries: pl.DataFrame,
) -> list[CarrierScoreMetrics]:
    """
    Compute per-carrier cost and service metrics.

    Pure and deterministic: identical inputs give identical output, and no
    state survives between calls.

    Args:
        carriers: Carrier master (duplicate ids resolve last-write-wins)
        quotes: Quote vs actual rows
        deliveries: Delivery rows

    Returns:
        Metrics sorted ascending by carrier_id
    """
    by_id = {
        row["carrier_id"]: row
        for row in carriers.select("carrier_id", "carrier_name", "truck_type").iter_rows(named=True)
    }
    agg: dict[int, CarrierScoreMetrics] = {}

    def get(carrier_id: int) -> CarrierScoreMetrics:
        if carrier_id not in agg:
            carrier = by_id.get(carrier_id)
            agg[carrier_id] = CarrierScoreMetrics(
                carrier_id=carrier_id,
                carrier_name=carrier["carrier_name"] if carrier else f"Carrier {carrier_id}",
                truck_type=_truck_type(carrier["truck_type"]) if carrier else TruckType.LTL,
            )
        return agg[carrier_id]

    for row in quotes.select("carrier_id", "weight", "quote", "amount").iter_rows(named=True):
        _fold_quote(get(row["carrier_id"]).cost, row["quote"], row["amount"], row["weight"])

    timed = add_transit_days(deliveries).select("carrier_id", "actual_days", "expected_days")
    for row in timed.iter_rows(named=True):
        service = get(row["carrier_id"]).service
        actual_days = row["actual_days"]
        expected_days = row["expected_days"]
        if not (_is_finite(actual_days) and _is_finite(expected_days)):
            continue
        _fold_delivery(service, actual_days, expected_days)

    return sorted(agg.values(), key=attrgetter("carrier_id"))


# =============================================================================
# COST PASS
# =============================================================================

def _fold_quote(m: CostMetrics, quote: float, amount: float, weight: float) -> None:
    """Fold one quote/actual row into a carrier's cost accumulator."""
    # Positive = charged more than quoted
    delta = amount - quote
    pct = delta / quote if quote > 0 else 0.0

    m.quote_count += 1
    n = m.quote_count

    m.avg_quote += (quote - m.avg_quote) / n
    m.avg_amount += (amount - m.avg_amount) / n
    m.avg_weight += (weight - m.avg_weight) / n

    if delta > 0:
        m.over_count += 1
        m.extra_charges_total += delta
        m.avg_over_charge += (delta - m.avg_over_charge) / m.over_count
    elif delta < 0:
        m.under_count += 1
        m.under_quoted_total += -delta
        m.avg_under_credit += (-delta - m.avg_under_credit) / m.under_count

    m.avg_delta += (delta - m.avg_delta) / n
    m.avg_delta_pct += (pct - m.avg_delta_pct) / n

    m.over_rate = m.over_count / n
    m.under_rate = m.under_count / n


# =============================================================================
# SERVICE PASS
# =============================================================================

def add_transit_days(deliveries: pl.DataFrame) -> pl.DataFrame:
    """
    Add transit duration columns to a deliveries frame.

    Adds:
        - actual_days   (delivery - pickup, fractional days)
        - expected_days (expected_delivery - pickup, fractional days)
        - delta_days    (actual_days - expected_days, positive = late)

    Durations are measured in whole milliseconds. A null timestamp gives a
    null duration.
    """
    return deliveries.with_columns(
        ((pl.col("delivery") - pl.col("pickup")).dt.total_milliseconds() / MS_PER_DAY)
        .alias("actual_days"),
        ((pl.col("expected_delivery") - pl.col("pickup")).dt.total_milliseconds() / MS_PER_DAY)
        .alias("expected_days"),
    ).with_columns(
        (pl.col("actual_days") - pl.col("expected_days")).alias("delta_days"),
    )


def _fold_delivery(m: ServiceMetrics, actual_days: float, expected_days: float) -> None:
    """Fold one delivery row into a carrier's service accumulator."""
    delta_days = actual_days - expected_days

    m.shipments += 1
    n = m.shipments

    m.avg_actual_days += (actual_days - m.avg_actual_days) / n
    m.avg_expected_days += (expected_days - m.avg_expected_days) / n

    if delta_days > 0:
        m.late_count += 1
    elif delta_days < 0:
        m.early_count += 1

    m.avg_delta_days += (delta_days - m.avg_delta_days) / n

    m.late_rate = m.late_count / n
    m.early_rate = m.early_count / n


def _is_finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _truck_type(value: str | None) -> TruckType:
    return TruckType.TL if value == TruckType.TL else TruckType.LTL


# =============================================================================
# VIEWS
# =============================================================================

def split_by_truck_type(
    metrics: list[CarrierScoreMetrics],
) -> tuple[list[CarrierScoreMetrics], list[CarrierScoreMetrics]]:
    """Split metrics into (LTL, TL) lists, keeping carrier_id order."""
    ltl = [m for m in metrics if m.truck_type == TruckType.LTL]
    tl = [m for m in metrics if m.truck_type == TruckType.TL]
    return ltl, tl


def scorecard_to_frame(metrics: list[CarrierScoreMetrics]) -> pl.DataFrame:
    """
    Flatten metrics to one row per carrier.

    Columns: carrier_id, carrier_name, truck_type, then cost_* and
    service_* for every field of CostMetrics / ServiceMetrics.
    """
    cost_fields = list(asdict(CostMetrics()))
    service_fields = list(asdict(ServiceMetrics()))
    schema: dict[str, pl.DataType] = {
        "carrier_id": pl.Int64,
        "carrier_name": pl.String,
        "truck_type": pl.String,
    }
    for name in cost_fields:
        schema[f"cost_{name}"] = pl.Int64 if name.endswith("_count") else pl.Float64
    for name in service_fields:
        schema[f"service_{name}"] = (
            pl.Int64 if name.endswith("_count") or name == "shipments" else pl.Float64
        )

    rows = []
    for m in metrics:
        row = {
            "carrier_id": m.carrier_id,
            "carrier_name": m.carrier_name,
            "truck_type": m.truck_type.value,
        }
        row.update({f"cost_{k}": v for k, v in asdict(m.cost).items()})
        row.update({f"service_{k}": v for k, v in asdict(m.service).items()})
        rows.append(row)

    if not rows:
        return pl.DataFrame(schema=schema)
    return pl.DataFrame(rows, schema=schema)
