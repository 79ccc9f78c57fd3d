"""Parsing of raw form / CLI values into engine inputs.

Form fields arrive as strings that may be blank or use a comma as decimal
separator ("15,5"). Blank or unparseable values are treated as missing.
"""

from __future__ import annotations

import math

from performance_engine.exceptions import InvalidInputError, MissingInputError
from performance_engine.math.estimator import estimate_performance
from performance_engine.models.enums import PopulationProfile
from performance_engine.models.run_test import PerformanceEstimate, RunTestInput


def parse_number(raw: str | float | int | None) -> float | None:
    """Parse a form value to float, or None if blank / unparseable."""
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if math.isnan(value):
        return None
    return value


def parse_run_test(
    distance: str | float | None,
    minutes: str | float | None,
    seconds: str | float | None,
) -> RunTestInput:
    """Build a RunTestInput from raw form values.

    A single blank time field counts as zero when the other one is present.

    Raises:
        MissingInputError: If the distance is missing, or minutes and
            seconds are both missing.
    """
    distance_m = parse_number(distance)
    if distance_m is None:
        raise MissingInputError("Distance is required", field="distance_m")

    mins = parse_number(minutes)
    secs = parse_number(seconds)
    if mins is None and secs is None:
        raise MissingInputError("Minutes or seconds are required", field="minutes")

    return RunTestInput(
        distance_m=distance_m,
        minutes=mins or 0.0,
        seconds=secs or 0.0,
    )


def parse_profile(raw: str | PopulationProfile) -> PopulationProfile:
    """Resolve a profile name such as 'trained_men' or 'IAT-only'.

    Raises:
        InvalidInputError: If the name matches no profile.
    """
    if isinstance(raw, PopulationProfile):
        return raw
    key = str(raw).strip().upper().replace("-", "_").replace(" ", "_")
    try:
        return PopulationProfile[key]
    except KeyError as exc:
        valid = ", ".join(p.name.lower() for p in PopulationProfile)
        raise InvalidInputError(
            f"Unknown profile {raw!r} (expected one of: {valid})", field="profile"
        ) from exc


def estimate_from_form(
    distance: str | float | None,
    minutes: str | float | None,
    seconds: str | float | None,
    profile: str | PopulationProfile = PopulationProfile.TRAINED_MEN,
) -> PerformanceEstimate:
    """Parse raw form values and run the estimator in one step."""
    run_test = parse_run_test(distance, minutes, seconds)
    return estimate_performance(run_test, parse_profile(profile))
