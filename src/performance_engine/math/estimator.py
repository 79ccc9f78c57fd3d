"""Run-test performance estimator: IAT, VO2max, peak and LT speed.

A timed-distance field test (typically 3000-3200 m) gives an average speed in
m/min. Every other metric is a fixed multiplicative factor of that speed or of
a previous metric, using one of three population coefficient sets:

    IAT      = f_iat  * avg
    VO2max   = 0.0193 * avg + 4.374
    VO2@4mM  = f_4    * VO2max
    VO2@2.5  = f_2.5  * VO2@4mM
    VO2@2mM  = f_2    * VO2@2.5
    peak     = f_peak * avg
    LT       = f_lt   * IAT
    VO2@LT   = f_vlt  * VO2@2mM

The IAT-only profile stops after IAT. Intermediate values keep full
precision; rounding is a display concern (see PerformanceEstimate.as_dict).
"""

from __future__ import annotations

import math

from performance_engine.exceptions import InvalidInputError, MissingInputError
from performance_engine.math.units import kmh_to_pace_min_per_km, m_per_min_to_kmh
from performance_engine.models.enums import (
    PROFILE_FACTORS,
    VO2MAX_INTERCEPT,
    VO2MAX_SLOPE,
    PopulationProfile,
)
from performance_engine.models.run_test import PerformanceEstimate, RunTestInput


def validate_run_test(run_test: RunTestInput) -> None:
    """Check a run test before any arithmetic is done.

    Raises:
        MissingInputError: If the distance is missing or the total time is
            zero (average speed would be undefined).
        InvalidInputError: If a value is negative, not finite, or seconds
            fall outside 0-59.
    """
    distance = run_test.distance_m
    if distance is None or (isinstance(distance, float) and math.isnan(distance)):
        raise MissingInputError("Distance is required", field="distance_m")
    if not math.isfinite(distance) or distance <= 0:
        raise InvalidInputError(
            f"Distance must be positive, got {distance}", field="distance_m"
        )
    if not math.isfinite(run_test.minutes) or run_test.minutes < 0:
        raise InvalidInputError(
            f"Minutes must be non-negative, got {run_test.minutes}", field="minutes"
        )
    if not math.isfinite(run_test.seconds) or not 0 <= run_test.seconds < 60:
        raise InvalidInputError(
            f"Seconds must be in 0-59, got {run_test.seconds}", field="seconds"
        )
    if run_test.total_minutes <= 0:
        raise MissingInputError("Elapsed time is required", field="minutes")


def average_speed_m_per_min(run_test: RunTestInput) -> float:
    """Average test speed in m/min (distance / total minutes)."""
    validate_run_test(run_test)
    return run_test.distance_m / run_test.total_minutes


def vo2max_from_speed(avg_speed_m_per_min: float) -> float:
    """VO2max (ml/min/kg) from average test speed in m/min."""
    return VO2MAX_SLOPE * avg_speed_m_per_min + VO2MAX_INTERCEPT


def estimate_performance(
    run_test: RunTestInput,
    profile: PopulationProfile = PopulationProfile.TRAINED_MEN,
) -> PerformanceEstimate:
    """Convert a timed-distance run test into physiological estimates.

    Args:
        run_test: Distance and elapsed time of the test.
        profile: Coefficient set to apply.

    Returns:
        PerformanceEstimate at full precision. Under ``IAT_ONLY`` the VO2,
        peak and LT fields are None.

    Raises:
        MissingInputError: If required inputs are missing (no partial result).
        InvalidInputError: If inputs are out of range.
    """
    avg = average_speed_m_per_min(run_test)
    factors = PROFILE_FACTORS[profile]

    iat = factors["iat"] * avg
    iat_kmh = m_per_min_to_kmh(iat)

    common = dict(
        profile=profile,
        distance_m=float(run_test.distance_m),
        total_minutes=run_test.total_minutes,
        average_speed_m_per_min=avg,
        average_speed_kmh=m_per_min_to_kmh(avg),
        iat_m_per_min=iat,
        iat_kmh=iat_kmh,
        iat_pace_min_per_km=kmh_to_pace_min_per_km(iat_kmh),
    )
    if profile == PopulationProfile.IAT_ONLY:
        return PerformanceEstimate(**common)

    vo2max = vo2max_from_speed(avg)
    vo2_4mm = factors["vo2_4mm"] * vo2max
    vo2_2_5mm = factors["vo2_2_5mm"] * vo2_4mm
    vo2_2mm = factors["vo2_2mm"] * vo2_2_5mm

    peak = factors["peak"] * avg
    peak_kmh = m_per_min_to_kmh(peak)

    lt = factors["lt"] * iat
    lt_kmh = m_per_min_to_kmh(lt)

    vo2_lt = factors["vo2_lt"] * vo2_2mm

    return PerformanceEstimate(
        **common,
        vo2max=vo2max,
        vo2_4mm=vo2_4mm,
        vo2_2_5mm=vo2_2_5mm,
        vo2_2mm=vo2_2mm,
        vo2_lt=vo2_lt,
        peak_speed_m_per_min=peak,
        peak_speed_kmh=peak_kmh,
        peak_pace_min_per_km=kmh_to_pace_min_per_km(peak_kmh),
        lt_speed_m_per_min=lt,
        lt_speed_kmh=lt_kmh,
        lt_pace_min_per_km=kmh_to_pace_min_per_km(lt_kmh),
    )
