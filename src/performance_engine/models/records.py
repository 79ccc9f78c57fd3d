"""Athlete roster and the per-athlete records a coach keeps.

Records are frozen; the store replaces them wholesale on update. Every record
type declares the collection it belongs to via ``KIND``.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from performance_engine.models.enums import (
    RecordKind,
    TransactionKind,
    TransactionStatus,
)


def new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


@dataclass(frozen=True)
class Athlete:
    name: str
    age: int
    sport: str
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class JumpTest:
    """Countermovement (CMJ) and squat jump (SJ) heights in cm."""

    KIND: ClassVar[RecordKind] = RecordKind.JUMP_TEST

    athlete_id: str
    test_date: date
    cmj_cm: float
    sj_cm: float
    observations: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.test_date, self.created_at)


@dataclass(frozen=True)
class RunningPlan:
    """Headline values of a run-test estimate, kept as display strings.

    One entry per save; history is append-only.
    """

    KIND: ClassVar[RecordKind] = RecordKind.RUNNING_PLAN

    athlete_id: str
    iat_kmh: str
    peak_speed_kmh: str
    lt_speed_kmh: str
    vo2max: str
    start_date: date | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.created_at,)


@dataclass(frozen=True)
class RunningWorkout:
    """One day of a weekly running sheet. ``day_of_week``: 0=Monday."""

    KIND: ClassVar[RecordKind] = RecordKind.RUNNING_WORKOUT

    athlete_id: str
    week_number: int
    day_of_week: int
    training: str
    distance: str | None = None
    observations: str | None = None
    start_date: date | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.week_number, self.day_of_week)


@dataclass(frozen=True)
class PeriodizationPlan:
    KIND: ClassVar[RecordKind] = RecordKind.PERIODIZATION_PLAN

    athlete_id: str
    period: str
    main_focus: str
    weekly_structure: str | None = None
    volume_intensity: str | None = None
    observations: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.created_at,)


@dataclass(frozen=True)
class StrengthExercise:
    KIND: ClassVar[RecordKind] = RecordKind.STRENGTH_EXERCISE

    athlete_id: str
    block: str
    exercise: str
    sets: str
    reps: str
    observations: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.block, self.created_at)


@dataclass(frozen=True)
class FunctionalAssessment:
    """Free-text mobility, stability and movement-pattern screening."""

    KIND: ClassVar[RecordKind] = RecordKind.FUNCTIONAL_ASSESSMENT

    athlete_id: str
    assessment_date: date
    ankle_mobility: str | None = None
    hip_mobility: str | None = None
    thoracic_mobility: str | None = None
    core_stability: str | None = None
    squat_pattern: str | None = None
    lunge_pattern: str | None = None
    jump_pattern: str | None = None
    run_pattern: str | None = None
    unilateral_balance: str | None = None
    general_observations: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.assessment_date, self.created_at)


@dataclass(frozen=True)
class Anamnesis:
    """Intake questionnaire. All answers are free text."""

    KIND: ClassVar[RecordKind] = RecordKind.ANAMNESIS

    athlete_id: str
    anamnesis_date: date
    main_goal: str | None = None
    current_activity_level: str | None = None
    medical_history: str | None = None
    injuries: str | None = None
    surgeries: str | None = None
    medications: str | None = None
    allergies: str | None = None
    family_history: str | None = None
    lifestyle: str | None = None
    sleep_quality: str | None = None
    nutrition: str | None = None
    previous_sports: str | None = None
    additional_notes: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.anamnesis_date, self.created_at)


@dataclass(frozen=True)
class FinancialTransaction:
    """Income or expense entry; ``athlete_id`` is optional."""

    KIND: ClassVar[RecordKind] = RecordKind.FINANCIAL_TRANSACTION

    kind: TransactionKind
    description: str
    total_amount: Decimal
    due_date: date
    paid_amount: Decimal = Decimal("0")
    status: TransactionStatus = TransactionStatus.PENDING
    athlete_id: str | None = None
    payment_date: date | None = None
    observations: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=_now)

    @property
    def sort_key(self) -> tuple:
        return (self.due_date, self.created_at)


RECORD_TYPES: dict[RecordKind, type] = {
    RecordKind.JUMP_TEST: JumpTest,
    RecordKind.RUNNING_PLAN: RunningPlan,
    RecordKind.RUNNING_WORKOUT: RunningWorkout,
    RecordKind.PERIODIZATION_PLAN: PeriodizationPlan,
    RecordKind.STRENGTH_EXERCISE: StrengthExercise,
    RecordKind.FUNCTIONAL_ASSESSMENT: FunctionalAssessment,
    RecordKind.ANAMNESIS: Anamnesis,
    RecordKind.FINANCIAL_TRANSACTION: FinancialTransaction,
}
