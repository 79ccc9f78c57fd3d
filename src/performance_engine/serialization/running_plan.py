"""Running-plan serialization for PerformanceEstimate objects.

A running plan stores the four headline values of an estimate as text
columns, formatted to two decimals exactly as shown to the coach.

All functions are pure (no I/O).
"""

from __future__ import annotations

import json
from datetime import date

from performance_engine.exceptions import InvalidInputError
from performance_engine.models.enums import DISPLAY_DECIMALS
from performance_engine.models.records import RunningPlan
from performance_engine.models.run_test import PerformanceEstimate

# Estimate attribute → RunningPlan column
_HEADLINE_FIELDS = (
    "iat_kmh",
    "peak_speed_kmh",
    "lt_speed_kmh",
    "vo2max",
)


def format_metric(value: float) -> str:
    """Format a metric to a fixed two-decimal string. e.g. 8.28699 -> '8.29'."""
    return f"{value:.{DISPLAY_DECIMALS}f}"


def to_running_plan_fields(estimate: PerformanceEstimate) -> dict[str, str]:
    """Extract the headline values of an estimate as display strings.

    Raises:
        InvalidInputError: If the estimate was computed under a profile that
            does not produce VO2max, peak and LT speeds.
    """
    if not estimate.has_vo2:
        raise InvalidInputError(
            f"{estimate.profile.name} estimate has no VO2max/peak/LT values "
            f"to save",
            field="profile",
        )
    return {name: format_metric(getattr(estimate, name)) for name in _HEADLINE_FIELDS}


def to_running_plan(
    athlete_id: str,
    estimate: PerformanceEstimate,
    start_date: date | None = None,
) -> RunningPlan:
    """Build a new (unsaved) RunningPlan entry from an estimate."""
    return RunningPlan(
        athlete_id=athlete_id,
        start_date=start_date,
        **to_running_plan_fields(estimate),
    )


def estimate_to_json_string(estimate: PerformanceEstimate, indent: int = 2) -> str:
    """Dump the rounded, present fields of an estimate as JSON."""
    return json.dumps(estimate.as_dict(rounded=True), indent=indent)
