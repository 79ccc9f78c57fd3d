"""Data models for the performance engine."""

from performance_engine.models.enums import (
    PopulationProfile,
    RecordKind,
    TransactionKind,
    TransactionStatus,
)
from performance_engine.models.records import (
    RECORD_TYPES,
    Anamnesis,
    Athlete,
    FinancialTransaction,
    FunctionalAssessment,
    JumpTest,
    PeriodizationPlan,
    RunningPlan,
    RunningWorkout,
    StrengthExercise,
)
from performance_engine.models.run_test import PerformanceEstimate, RunTestInput

__all__ = [
    "RECORD_TYPES",
    "Athlete",
    "Anamnesis",
    "FinancialTransaction",
    "FunctionalAssessment",
    "JumpTest",
    "PerformanceEstimate",
    "PeriodizationPlan",
    "PopulationProfile",
    "RecordKind",
    "RunTestInput",
    "RunningPlan",
    "RunningWorkout",
    "StrengthExercise",
    "TransactionKind",
    "TransactionStatus",
]
