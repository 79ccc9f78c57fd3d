"""Run-test input and the derived performance estimate."""

from __future__ import annotations

from dataclasses import dataclass, fields

from performance_engine.models.enums import (
    DISPLAY_DECIMALS,
    SECONDS_PER_MINUTE,
    PopulationProfile,
)


@dataclass(frozen=True)
class RunTestInput:
    """A single timed-distance field test (e.g. 3200 m in 15:47).

    Ephemeral: only the derived headline values are ever persisted.
    """

    distance_m: float
    minutes: float = 0.0
    seconds: float = 0.0

    @property
    def total_minutes(self) -> float:
        return self.minutes + self.seconds / SECONDS_PER_MINUTE


@dataclass(frozen=True)
class PerformanceEstimate:
    """Physiological estimates derived from one run test.

    All speeds are kept at full precision; use ``as_dict(rounded=True)`` for
    display. Fields that the selected profile does not compute are None and
    are left out of ``as_dict()``.
    """

    profile: PopulationProfile
    distance_m: float
    total_minutes: float

    average_speed_m_per_min: float
    average_speed_kmh: float

    iat_m_per_min: float
    iat_kmh: float
    iat_pace_min_per_km: float

    # VO2 family (ml/min/kg)
    vo2max: float | None = None
    vo2_4mm: float | None = None
    vo2_2_5mm: float | None = None
    vo2_2mm: float | None = None
    vo2_lt: float | None = None

    # Peak speed
    peak_speed_m_per_min: float | None = None
    peak_speed_kmh: float | None = None
    peak_pace_min_per_km: float | None = None

    # Lactate threshold speed
    lt_speed_m_per_min: float | None = None
    lt_speed_kmh: float | None = None
    lt_pace_min_per_km: float | None = None

    @property
    def has_vo2(self) -> bool:
        return self.vo2max is not None

    def as_dict(self, rounded: bool = False) -> dict[str, object]:
        """Flatten to a dict of present metrics.

        Args:
            rounded: Round floats to two decimals for display.
        """
        out: dict[str, object] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.name == "profile":
                out[f.name] = value.name
            elif rounded and isinstance(value, float):
                out[f.name] = round(value, DISPLAY_DECIMALS)
            else:
                out[f.name] = value
        return out
