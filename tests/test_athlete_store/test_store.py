"""Tests for the file-backed AthleteStore."""

from __future__ import annotations

import json
import threading
from datetime import date
from decimal import Decimal

import pytest

from athlete_store import (
    AthleteStore,
    AthleteStoreError,
    InvalidRecordError,
    RecordNotFoundError,
    StoreCorruptedError,
)
from performance_engine.exceptions import InvalidInputError
from performance_engine.math.estimator import estimate_performance
from performance_engine.models.enums import (
    PopulationProfile,
    RecordKind,
    TransactionKind,
    TransactionStatus,
)
from performance_engine.models.records import (
    Anamnesis,
    FinancialTransaction,
    JumpTest,
    RunningWorkout,
)


def _income(athlete_id=None, amount="250.00") -> FinancialTransaction:
    return FinancialTransaction(
        kind=TransactionKind.INCOME,
        description="Monthly fee",
        total_amount=Decimal(amount),
        due_date=date(2026, 5, 10),
        athlete_id=athlete_id,
    )


class TestAthletes:
    def test_create_and_get(self, store, athlete) -> None:
        assert store.get_athlete(athlete.id) == athlete

    def test_list_sorted_by_name(self, store, other_athlete, athlete) -> None:
        assert [a.name for a in store.list_athletes()] == ["Ana Souza", "Bruno Lima"]

    def test_persists_across_instances(self, store, athlete) -> None:
        reopened = AthleteStore(store.data_dir)
        assert reopened.get_athlete(athlete.id) == athlete

    def test_strips_whitespace(self, store) -> None:
        a = store.create_athlete("  Carla  ", 19, " Swimming ")
        assert (a.name, a.sport) == ("Carla", "Swimming")

    @pytest.mark.parametrize(
        "name,age,sport",
        [("", 20, "Soccer"), ("Dani", 20, "  "), ("Dani", 0, "Soccer")],
    )
    def test_validation(self, store, name, age, sport) -> None:
        with pytest.raises(InvalidRecordError):
            store.create_athlete(name, age, sport)
        assert store.list_athletes() == []

    def test_get_unknown(self, store) -> None:
        with pytest.raises(RecordNotFoundError) as exc_info:
            store.get_athlete("nope")
        assert exc_info.value.kind == "athlete"
        assert "nope" in str(exc_info.value)

    def test_not_found_is_key_error(self, store) -> None:
        with pytest.raises(KeyError):
            store.get_athlete("nope")


class TestRecords:
    def test_add_and_list_in_date_order(self, store, jump_tests) -> None:
        for test in reversed(jump_tests):
            store.add_record(test)
        stored = store.records_for(RecordKind.JUMP_TEST, jump_tests[0].athlete_id)
        assert [t.test_date for t in stored] == [t.test_date for t in jump_tests]

    def test_filter_by_athlete(self, store, athlete, other_athlete) -> None:
        store.add_record(JumpTest(athlete_id=athlete.id, test_date=date(2026, 1, 5), cmj_cm=38, sj_cm=34))
        store.add_record(JumpTest(athlete_id=other_athlete.id, test_date=date(2026, 1, 5), cmj_cm=45, sj_cm=40))
        assert len(store.records_for(RecordKind.JUMP_TEST)) == 2
        assert [t.cmj_cm for t in store.records_for(RecordKind.JUMP_TEST, other_athlete.id)] == [45.0]

    def test_unknown_athlete_rejected(self, store) -> None:
        with pytest.raises(RecordNotFoundError):
            store.add_record(JumpTest(athlete_id="ghost", test_date=date(2026, 1, 5), cmj_cm=38, sj_cm=34))
        assert store.records_for(RecordKind.JUMP_TEST) == []

    def test_unsupported_type_rejected(self, store) -> None:
        with pytest.raises(InvalidRecordError, match="Unsupported"):
            store.add_record(object())

    def test_workouts_sorted_by_week_and_day(self, store, athlete) -> None:
        for week, day in [(2, 0), (1, 4), (1, 0)]:
            store.add_record(RunningWorkout(athlete_id=athlete.id, week_number=week, day_of_week=day, training="Easy run"))
        stored = store.records_for(RecordKind.RUNNING_WORKOUT, athlete.id)
        assert [(w.week_number, w.day_of_week) for w in stored] == [(1, 0), (1, 4), (2, 0)]

    def test_update(self, store, jump_tests) -> None:
        original = store.add_record(jump_tests[0])
        updated = store.update_record(RecordKind.JUMP_TEST, original.id, cmj_cm=42.5, observations="retest")
        assert updated.id == original.id
        assert store.get_record(RecordKind.JUMP_TEST, original.id).cmj_cm == 42.5

    def test_update_immutable_field(self, store, jump_tests) -> None:
        original = store.add_record(jump_tests[0])
        with pytest.raises(InvalidRecordError, match="id"):
            store.update_record(RecordKind.JUMP_TEST, original.id, id="other")

    def test_update_unknown_field(self, store, jump_tests) -> None:
        original = store.add_record(jump_tests[0])
        with pytest.raises(InvalidRecordError):
            store.update_record(RecordKind.JUMP_TEST, original.id, height=3)

    def test_delete(self, store, jump_tests) -> None:
        original = store.add_record(jump_tests[0])
        store.delete_record(RecordKind.JUMP_TEST, original.id)
        assert store.records_for(RecordKind.JUMP_TEST) == []
        with pytest.raises(RecordNotFoundError):
            store.delete_record(RecordKind.JUMP_TEST, original.id)


class TestRunningPlans:
    def test_each_save_appends(self, store, athlete, run_test_3200) -> None:
        est = estimate_performance(run_test_3200)
        store.save_running_plan(athlete.id, est)
        store.save_running_plan(athlete.id, est, date(2026, 6, 1))
        plans = store.records_for(RecordKind.RUNNING_PLAN, athlete.id)
        assert len(plans) == 2
        assert all(p.vo2max == "8.29" for p in plans)

    def test_iat_only_not_saved(self, store, athlete, run_test_3200) -> None:
        est = estimate_performance(run_test_3200, PopulationProfile.IAT_ONLY)
        with pytest.raises(InvalidInputError):
            store.save_running_plan(athlete.id, est)
        assert store.records_for(RecordKind.RUNNING_PLAN) == []


class TestDeleteAthlete:
    def test_cascades_records(self, store, athlete, other_athlete, jump_tests, run_test_3200) -> None:
        for test in jump_tests:
            store.add_record(test)
        store.add_record(JumpTest(athlete_id=other_athlete.id, test_date=date(2026, 1, 5), cmj_cm=45, sj_cm=40))
        store.save_running_plan(athlete.id, estimate_performance(run_test_3200))

        store.delete_athlete(athlete.id)

        assert [a.id for a in store.list_athletes()] == [other_athlete.id]
        assert len(store.records_for(RecordKind.JUMP_TEST)) == 1
        assert store.records_for(RecordKind.RUNNING_PLAN) == []

    def test_transactions_detached(self, store, athlete) -> None:
        tx = store.add_record(_income(athlete.id))
        store.delete_athlete(athlete.id)
        kept = store.get_record(RecordKind.FINANCIAL_TRANSACTION, tx.id)
        assert kept.athlete_id is None
        assert kept.total_amount == Decimal("250.00")

    def test_unknown(self, store) -> None:
        with pytest.raises(RecordNotFoundError):
            store.delete_athlete("nope")


class TestTransactions:
    def test_without_athlete(self, store) -> None:
        tx = store.add_record(_income())
        assert store.list_transactions() == [tx]


class TestCorruption:
    def test_invalid_json(self, store) -> None:
        (store.data_dir / "athletes.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreCorruptedError) as exc_info:
            store.list_athletes()
        assert exc_info.value.path.endswith("athletes.json")

    def test_not_a_list(self, store) -> None:
        (store.data_dir / "jump_tests.json").write_text('{"a": 1}', encoding="utf-8")
        with pytest.raises(StoreCorruptedError, match="Expected a list"):
            store.records_for(RecordKind.JUMP_TEST)

    def test_no_temp_files_left(self, store, athlete) -> None:
        assert not list(store.data_dir.glob("*.tmp"))

    def test_malformed_row(self, store) -> None:
        (store.data_dir / "athletes.json").write_text(
            json.dumps([{"id": "x", "name": "No age"}]), encoding="utf-8"
        )
        with pytest.raises(StoreCorruptedError, match="Malformed row 0"):
            store.list_athletes()

    def test_bad_date_in_row(self, store, athlete) -> None:
        row = {"id": "j1", "athlete_id": athlete.id, "test_date": "yesterday", "cmj_cm": 40, "sj_cm": 35}
        (store.data_dir / "jump_tests.json").write_text(json.dumps([row]), encoding="utf-8")
        with pytest.raises(StoreCorruptedError):
            store.records_for(RecordKind.JUMP_TEST)

    def test_row_without_id(self, store, athlete) -> None:
        (store.data_dir / "jump_tests.json").write_text(json.dumps([{"cmj_cm": 40}]), encoding="utf-8")
        with pytest.raises(StoreCorruptedError, match="id"):
            store.delete_record(RecordKind.JUMP_TEST, "j1")

    def test_write_on_corrupted_collection(self, store, jump_tests) -> None:
        (store.data_dir / "jump_tests.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(AthleteStoreError):
            store.add_record(jump_tests[0])


class TestConcurrentSaves:
    def test_parallel_running_plan_saves_all_persist(self, store, athlete, run_test_3200) -> None:
        est = estimate_performance(run_test_3200)
        n_threads = 40
        barrier = threading.Barrier(n_threads)
        errors: list[BaseException] = []

        def save() -> None:
            barrier.wait()
            try:
                store.save_running_plan(athlete.id, est, date(2026, 1, 1))
            except BaseException as exc:  # surfaced through the assertion below
                errors.append(exc)

        threads = [threading.Thread(target=save) for _ in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store.records_for(RecordKind.RUNNING_PLAN, athlete.id)) == n_threads

    def test_parallel_saves_across_athletes(self, store, athlete, other_athlete, jump_tests) -> None:
        barrier = threading.Barrier(2)

        def add_many(athlete_id: str) -> None:
            barrier.wait()
            for test in jump_tests:
                store.add_record(
                    JumpTest(athlete_id=athlete_id, test_date=test.test_date, cmj_cm=test.cmj_cm, sj_cm=test.sj_cm)
                )

        threads = [threading.Thread(target=add_many, args=(a.id,)) for a in (athlete, other_athlete)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store.records_for(RecordKind.JUMP_TEST, athlete.id)) == 4
        assert len(store.records_for(RecordKind.JUMP_TEST, other_athlete.id)) == 4


class TestUpdateValidation:
    def test_wrong_value_type_rejected(self, store, jump_tests) -> None:
        original = store.add_record(jump_tests[0])
        with pytest.raises(InvalidRecordError):
            store.update_record(RecordKind.JUMP_TEST, original.id, cmj_cm="abc")
        assert store.get_record(RecordKind.JUMP_TEST, original.id).cmj_cm == 38.0

    def test_bad_enum_rejected(self, store) -> None:
        tx = store.add_record(_income())
        with pytest.raises(InvalidRecordError):
            store.update_record(RecordKind.FINANCIAL_TRANSACTION, tx.id, status="settled")
        assert store.list_transactions()[0].status == TransactionStatus.PENDING

    def test_record_payment(self, store) -> None:
        tx = store.add_record(_income(amount="250.00"))
        updated = store.update_record(
            RecordKind.FINANCIAL_TRANSACTION,
            tx.id,
            paid_amount=Decimal("250.00"),
            payment_date=date(2026, 5, 9),
            status=TransactionStatus.PAID,
        )
        assert updated.status == TransactionStatus.PAID
        stored = store.get_record(RecordKind.FINANCIAL_TRANSACTION, tx.id)
        assert stored == updated
        assert stored.payment_date == date(2026, 5, 9)


class TestAnamnesis:
    def test_add_and_list_in_date_order(self, store, athlete) -> None:
        store.add_record(Anamnesis(athlete_id=athlete.id, anamnesis_date=date(2026, 3, 1), main_goal="Sub-40 10k"))
        store.add_record(Anamnesis(athlete_id=athlete.id, anamnesis_date=date(2026, 1, 10), injuries="Left ankle sprain 2024"))
        stored = store.records_for(RecordKind.ANAMNESIS, athlete.id)
        assert [a.anamnesis_date for a in stored] == [date(2026, 1, 10), date(2026, 3, 1)]
        assert stored[1].main_goal == "Sub-40 10k"
        assert stored[1].medications is None

    def test_removed_with_athlete(self, store, athlete) -> None:
        store.add_record(Anamnesis(athlete_id=athlete.id, anamnesis_date=date(2026, 3, 1)))
        store.delete_athlete(athlete.id)
        assert store.records_for(RecordKind.ANAMNESIS) == []


class TestStoreErrorsForUi:
    """Every failing call the dashboard makes surfaces as an AthleteStoreError."""

    def test_save_for_deleted_athlete(self, store, athlete, run_test_3200) -> None:
        store.delete_athlete(athlete.id)
        with pytest.raises(AthleteStoreError):
            store.save_running_plan(athlete.id, estimate_performance(run_test_3200))

    def test_delete_athlete_twice(self, store, athlete) -> None:
        store.delete_athlete(athlete.id)
        with pytest.raises(AthleteStoreError):
            store.delete_athlete(athlete.id)

    def test_add_for_deleted_athlete(self, store, athlete, jump_tests) -> None:
        store.delete_athlete(athlete.id)
        with pytest.raises(AthleteStoreError):
            store.add_record(jump_tests[0])


class TestDataDir:
    def test_expands_user(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        store = AthleteStore("~/athletes")
        assert store.data_dir == tmp_path / "athletes"
        assert store.data_dir.is_dir()
