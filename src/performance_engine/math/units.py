"""Speed and pace conversions used throughout the estimator."""

from __future__ import annotations

from performance_engine.models.enums import MINUTES_PER_HOUR, M_PER_MIN_TO_KMH


def m_per_min_to_kmh(speed_m_per_min: float) -> float:
    """Convert metres per minute to km/h (× 0.06)."""
    return speed_m_per_min * M_PER_MIN_TO_KMH


def kmh_to_pace_min_per_km(speed_kmh: float) -> float:
    """Convert km/h to pace in decimal minutes per km (60 / km/h).

    Raises:
        ValueError: If speed_kmh is non-positive.
    """
    if speed_kmh <= 0:
        raise ValueError(f"Speed must be positive, got {speed_kmh}")
    return MINUTES_PER_HOUR / speed_kmh


def split_pace(pace_min_per_km: float) -> tuple[int, int]:
    """Split decimal min/km into whole (minutes, seconds), rounding seconds.

    e.g. 4.5 -> (4, 30); 4.999 -> (5, 0)
    """
    total_s = round(pace_min_per_km * 60)
    return total_s // 60, total_s % 60


def format_pace(pace_min_per_km: float) -> str:
    """Format decimal min/km as 'M:SS/km'. e.g. 4.5 -> '4:30/km'."""
    if pace_min_per_km <= 0:
        return "--"
    mins, secs = split_pace(pace_min_per_km)
    return f"{mins}:{secs:02d}/km"
