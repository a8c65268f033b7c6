"""
Carrier Scorecard Report
========================

Loads the carrier CSVs, applies the same filters as the dashboard sidebar
and prints the leaderboard (plus daily series for a single carrier).

Usage:
    python -m scorecard.scripts.report
    python -m scorecard.scripts.report --preset last-30-days --truck-type LTL
    python -m scorecard.scripts.report --date-from 2025-01-01 --date-to 2025-01-31 --sort over_rate
    python -m scorecard.scripts.report --carrier 7
    python -m scorecard.scripts.report --output scorecard.csv
"""

import argparse
import asyncio
import logging
import sys
from datetime import date

from scorecard.calculate_scorecard import scorecard_to_frame
from scorecard.dashboard.charts import format_currency, format_days, format_pct
from scorecard.data import DATA_DIR, load_all
from scorecard.leaderboard import SortField, rank_score, rank_scorecard
from scorecard.view import (
    DatePreset,
    DateRange,
    FilterState,
    ScorecardStore,
    TruckTypeFilter,
    preset_range,
)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def _date_range(args: argparse.Namespace) -> DateRange:
    if args.preset:
        return preset_range(args.preset)
    return DateRange(args.date_from, args.date_to)


def print_leaderboard(store: ScorecardStore, sort: SortField, top: int) -> None:
    ranked = rank_scorecard(store.filtered_scorecard, sort_field=sort)[:top]

    print(f"\n{'#':>3}  {'Carrier':<28} {'Type':<4} {'Quotes':>7} {'Over':>6} "
          f"{'Avg Delta':>11} {'Delta %':>8} {'Ships':>6} {'Days':>8} {'Score':>7}")
    print("-" * 100)
    for i, m in enumerate(ranked, start=1):
        print(
            f"{i:>3}  {m.carrier_name[:28]:<28} {m.truck_type.value:<4} "
            f"{m.cost.quote_count:>7,} {m.cost.over_rate:>6.0%} "
            f"{format_currency(m.cost.avg_delta):>11} {format_pct(m.cost.avg_delta_pct):>8} "
            f"{m.service.shipments:>6,} {format_days(m.service.avg_delta_days):>8} "
            f"{rank_score(m):>7.3f}"
        )
    if not ranked:
        print("  (no carriers match the filters)")


def print_carrier_series(store: ScorecardStore) -> None:
    cost = store.cost_delta_daily_series
    service = store.service_delta_daily_series
    shipments = store.shipments_series

    print("\nDaily cost (quote vs actual):")
    for row in cost.iter_rows(named=True):
        print(
            f"  {row['day_key']}  quote {format_currency(row['sum_quote']):>12}  "
            f"actual {format_currency(row['sum_amount']):>12}  "
            f"delta {format_currency(row['delta']):>10}  ({row['quotes']} quotes)"
        )

    print("\nDaily transit (expected vs actual days):")
    for row in service.iter_rows(named=True):
        print(
            f"  {row['day_key']}  expected {row['avg_expected_days']:6.2f}  "
            f"actual {row['avg_actual_days']:6.2f}  delta {format_days(row['delta_days'])}  "
            f"({row['shipments']} shipments)"
        )

    print("\nWeekly shipments:")
    for row in shipments.iter_rows(named=True):
        print(f"  week of {row['week_key']}  {row['shipments']:>6,}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Print the carrier scorecard leaderboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m scorecard.scripts.report
  python -m scorecard.scripts.report --preset last-7-days --sort avg_delta_days
  python -m scorecard.scripts.report --carrier 7 --date-from 2025-01-01
        """
    )
    parser.add_argument("--data-dir", type=str, default=str(DATA_DIR),
                        help=f"Directory with the source CSVs (default: {DATA_DIR})")
    parser.add_argument("--carriers", type=str, default=None,
                        help="Carriers CSV path or URL (overrides --data-dir)")
    parser.add_argument("--quotes", type=str, default=None,
                        help="Quotes vs actual CSV path or URL (overrides --data-dir)")
    parser.add_argument("--deliveries", type=str, default=None,
                        help="Deliveries CSV path or URL (overrides --data-dir)")
    parser.add_argument("--date-from", type=_parse_date, default=None,
                        help="First UTC day to include (YYYY-MM-DD)")
    parser.add_argument("--date-to", type=_parse_date, default=None,
                        help="Last UTC day to include (YYYY-MM-DD)")
    parser.add_argument("--preset", choices=[p.value for p in DatePreset], default=None,
                        help="Named date range; overrides --date-from/--date-to")
    parser.add_argument("--carrier", type=int, default=None,
                        help="Carrier id to drill into")
    parser.add_argument("--truck-type", choices=[t.value for t in TruckTypeFilter],
                        default=TruckTypeFilter.ALL.value, help="Truck type filter")
    parser.add_argument("--sort", choices=[f.value for f in SortField],
                        default=SortField.RANK_SCORE.value, help="Leaderboard sort field")
    parser.add_argument("--top", type=int, default=20,
                        help="Number of leaderboard rows to print (default: 20)")
    parser.add_argument("--output", type=str, default=None,
                        help="Also write the filtered scorecard to this CSV file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log loader details")

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("=" * 60)
    print("CARRIER SCORECARD")
    print("=" * 60)

    print(f"\nLoading data from {args.data_dir}...")
    store = ScorecardStore()
    asyncio.run(store.load(
        load_all,
        args.data_dir,
        carriers=args.carriers,
        quotes=args.quotes,
        deliveries=args.deliveries,
    ))
    if store.error:
        print(f"\nLoad failed: {store.error}")
        return 1
    print(f"  {len(store.carriers):,} carriers, {len(store.quotes):,} quotes, "
          f"{len(store.deliveries):,} deliveries")

    store.apply_filters(FilterState(
        date_range=_date_range(args),
        carrier_id=args.carrier,
        truck_type=TruckTypeFilter(args.truck_type),
    ))
    filters = store.filters
    print(f"  Period: {filters.date_range.start or 'start'} .. {filters.date_range.end or 'end'}"
          f"  |  Truck type: {filters.truck_type}")

    print_leaderboard(store, SortField(args.sort), args.top)

    if args.carrier is not None:
        print(f"\nCarrier {args.carrier}: {len(store.filtered_quotes):,} quotes, "
              f"{len(store.filtered_deliveries):,} deliveries in range")
        print_carrier_series(store)

    if args.output:
        scorecard_to_frame(store.filtered_scorecard).write_csv(args.output)
        print(f"\nScorecard saved to: {args.output}")

    print("\n" + "=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
