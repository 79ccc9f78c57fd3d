"""Enumerations and empirical constants for the performance engine.

The run-test coefficients are fixed regression constants used by coaches in
the field. They are reproduced exactly and must not be re-derived.
"""

from enum import Enum, IntEnum, auto


class PopulationProfile(IntEnum):
    """Coefficient set applied to a timed-distance run test."""

    TRAINED_MEN = auto()
    UNTRAINED_WOMEN = auto()
    IAT_ONLY = auto()


class RecordKind(str, Enum):
    """Collections persisted per athlete.

    The value doubles as the JSON file stem in the athlete store.
    """

    JUMP_TEST = "jump_tests"
    RUNNING_PLAN = "running_plans"
    RUNNING_WORKOUT = "running_workouts"
    PERIODIZATION_PLAN = "periodization_plans"
    STRENGTH_EXERCISE = "strength_exercises"
    FUNCTIONAL_ASSESSMENT = "functional_assessments"
    ANAMNESIS = "anamneses"
    FINANCIAL_TRANSACTION = "financial_transactions"


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


# ---------------------------------------------------------------------------
# Unit conversions
# ---------------------------------------------------------------------------
M_PER_MIN_TO_KMH = 0.06  # 60 min/h / 1000 m/km
MINUTES_PER_HOUR = 60.0
SECONDS_PER_MINUTE = 60.0

# Display precision for derived metrics
DISPLAY_DECIMALS = 2

# ---------------------------------------------------------------------------
# VO2max regression, shared by both full profiles
# VO2max = VO2MAX_SLOPE * avg_speed_m_per_min + VO2MAX_INTERCEPT
# ---------------------------------------------------------------------------
VO2MAX_SLOPE = 0.0193
VO2MAX_INTERCEPT = 4.374

# ---------------------------------------------------------------------------
# Per-profile multiplicative factors
#   iat:        IAT speed as a fraction of average test speed
#   vo2_4mm:    VO2 at 4.0 mM lactate, fraction of VO2max
#   vo2_2_5mm:  VO2 at 2.5 mM, fraction of VO2 at 4.0 mM
#   vo2_2mm:    VO2 at 2.0 mM, fraction of VO2 at 2.5 mM
#   peak:       peak speed as a fraction of average test speed
#   lt:         LT speed as a fraction of IAT speed
#   vo2_lt:     VO2 at LT, fraction of VO2 at 2.0 mM
# ---------------------------------------------------------------------------
PROFILE_FACTORS: dict[PopulationProfile, dict[str, float]] = {
    PopulationProfile.TRAINED_MEN: {
        "iat": 0.892,
        "vo2_4mm": 0.886,
        "vo2_2_5mm": 1.009,
        "vo2_2mm": 0.908,
        "peak": 0.99,
        "lt": 0.658,
        "vo2_lt": 0.844,
    },
    PopulationProfile.UNTRAINED_WOMEN: {
        "iat": 0.862,
        "vo2_4mm": 0.899,
        "vo2_2_5mm": 0.883,
        "vo2_2mm": 0.939,
        "peak": 1.152,
        "lt": 0.748,
        "vo2_lt": 0.776,
    },
    PopulationProfile.IAT_ONLY: {
        "iat": 0.879,
    },
}

# ---------------------------------------------------------------------------
# Jump tests
# ---------------------------------------------------------------------------
JUMP_TREND_MIN_TESTS = 2

# ---------------------------------------------------------------------------
# Weekly running sheet
# ---------------------------------------------------------------------------
# RunningWorkout.day_of_week index -> short name (0 = Monday)
DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
