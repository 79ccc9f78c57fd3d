"""Command-line access to the estimator, athlete reports and finances.

Usage:
    python -m reports.cli estimate --distance 3200 --minutes 15 --seconds 47
    python -m reports.cli estimate ... --save ATHLETE_ID --start-date 2026-03-02
    python -m reports.cli report ATHLETE_ID --out reports_out
    python -m reports.cli finance
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from athlete_store import AthleteStore, AthleteStoreError
from performance_engine.exceptions import PerformanceEngineError
from performance_engine.math.finance import summarize_transactions
from performance_engine.math.units import format_pace
from performance_engine.serialization import estimate_from_form

from reports.athlete_report import build_athlete_report, write_report_csv
from reports.config import DATA_DIR, DEFAULT_POPULATION_PROFILE, LOG_LEVEL, REPORT_DIR

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 2
EXIT_STORE = 3

# (label, estimate attribute, unit)
_ESTIMATE_LINES = (
    ("Average speed", "average_speed_kmh", "km/h"),
    ("IAT", "iat_kmh", "km/h"),
    ("VO2max", "vo2max", "ml/min/kg"),
    ("VO2 @ 4.0 mM", "vo2_4mm", "ml/min/kg"),
    ("VO2 @ 2.5 mM", "vo2_2_5mm", "ml/min/kg"),
    ("VO2 @ 2.0 mM", "vo2_2mm", "ml/min/kg"),
    ("VO2 @ LT", "vo2_lt", "ml/min/kg"),
    ("Peak speed", "peak_speed_kmh", "km/h"),
    ("LT speed", "lt_speed_kmh", "km/h"),
)

_PACE_LINES = (
    ("IAT pace", "iat_pace_min_per_km"),
    ("Peak pace", "peak_pace_min_per_km"),
    ("LT pace", "lt_pace_min_per_km"),
)


def _cmd_estimate(args: argparse.Namespace) -> int:
    estimate = estimate_from_form(args.distance, args.minutes, args.seconds, args.profile)

    print(f"Profile: {estimate.profile.name.lower()}")
    for label, attr, unit in _ESTIMATE_LINES:
        value = getattr(estimate, attr)
        if value is not None:
            print(f"  {label:<14} {value:8.2f} {unit}")
    for label, attr in _PACE_LINES:
        value = getattr(estimate, attr)
        if value is not None:
            print(f"  {label:<14} {format_pace(value):>8}")

    if args.save:
        store = AthleteStore(args.data_dir)
        start = date.fromisoformat(args.start_date) if args.start_date else None
        plan = store.save_running_plan(args.save, estimate, start)
        print(f"Saved running plan {plan.id} for athlete {args.save}")
    return EXIT_OK


def _cmd_report(args: argparse.Namespace) -> int:
    store = AthleteStore(args.data_dir)
    report = build_athlete_report(store, args.athlete_id)
    for path in write_report_csv(report, args.out):
        print(path)
    return EXIT_OK


def _cmd_finance(args: argparse.Namespace) -> int:
    store = AthleteStore(args.data_dir)
    summary = summarize_transactions(store.list_transactions())
    print(f"Income:      {summary.income:>12.2f}")
    print(f"Expenses:    {summary.expenses:>12.2f}")
    print(f"Balance:     {summary.balance:>12.2f}")
    print(f"Outstanding: {summary.outstanding:>12.2f}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Athlete performance tools")
    parser.add_argument(
        "--data-dir", default=DATA_DIR, help="Directory holding the athlete store"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    est = sub.add_parser("estimate", help="Estimate thresholds from a run test")
    est.add_argument("--distance", required=True, help="Test distance in metres")
    est.add_argument("--minutes", default=None, help="Elapsed minutes")
    est.add_argument("--seconds", default=None, help="Elapsed seconds (0-59)")
    est.add_argument(
        "--profile",
        default=DEFAULT_POPULATION_PROFILE,
        help="trained_men, untrained_women or iat_only",
    )
    est.add_argument("--save", metavar="ATHLETE_ID", help="Save as a running plan")
    est.add_argument("--start-date", help="Plan start date (YYYY-MM-DD)")
    est.set_defaults(func=_cmd_estimate)

    rep = sub.add_parser("report", help="Export an athlete report as CSV files")
    rep.add_argument("athlete_id")
    rep.add_argument("--out", default=REPORT_DIR, help="Output directory")
    rep.set_defaults(func=_cmd_report)

    fin = sub.add_parser("finance", help="Summarize financial transactions")
    fin.set_defaults(func=_cmd_finance)
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except AthleteStoreError as exc:
        logger.error("Store error: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_STORE
    except (PerformanceEngineError, ValueError) as exc:
        logger.error("Invalid input: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
