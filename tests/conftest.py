"""Shared test fixtures: run tests, a temporary athlete store, jump tests."""

from __future__ import annotations

from datetime import date

import pytest

from athlete_store import AthleteStore
from performance_engine.models.records import Athlete, JumpTest
from performance_engine.models.run_test import RunTestInput


@pytest.fixture
def run_test_3200() -> RunTestInput:
    """3200 m in 15:47, avg ≈ 202.75 m/min."""
    return RunTestInput(distance_m=3200, minutes=15, seconds=47)


@pytest.fixture
def run_test_3000() -> RunTestInput:
    """3000 m in 17:19, avg ≈ 173.24 m/min."""
    return RunTestInput(distance_m=3000, minutes=17, seconds=19)


@pytest.fixture
def store(tmp_path) -> AthleteStore:
    """Empty store in a temporary directory."""
    return AthleteStore(tmp_path / "data")


@pytest.fixture
def athlete(store: AthleteStore) -> Athlete:
    return store.create_athlete("Ana Souza", 24, "Triathlon")


@pytest.fixture
def other_athlete(store: AthleteStore) -> Athlete:
    return store.create_athlete("Bruno Lima", 31, "Soccer")


@pytest.fixture
def jump_tests(athlete: Athlete) -> list[JumpTest]:
    """Four tests, CMJ improving by ~1 cm per session."""
    return [
        JumpTest(athlete_id=athlete.id, test_date=date(2026, 1, 5), cmj_cm=38.0, sj_cm=34.0),
        JumpTest(athlete_id=athlete.id, test_date=date(2026, 2, 2), cmj_cm=39.0, sj_cm=34.5),
        JumpTest(athlete_id=athlete.id, test_date=date(2026, 3, 2), cmj_cm=40.0, sj_cm=35.0),
        JumpTest(athlete_id=athlete.id, test_date=date(2026, 4, 6), cmj_cm=41.0, sj_cm=35.5),
    ]
