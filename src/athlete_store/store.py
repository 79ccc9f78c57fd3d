"""File-backed store for the athlete roster and per-athlete records.

Each collection lives in its own JSON file under the data directory
(``athletes.json``, ``jump_tests.json``, ...). Every write rewrites the whole
file through a temporary file and ``os.replace`` so a crash never leaves a
half-written collection behind.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import tempfile
import threading
from datetime import date
from decimal import InvalidOperation
from pathlib import Path
from typing import Any

from performance_engine.models.enums import RecordKind
from performance_engine.models.records import RECORD_TYPES, Athlete, RunningPlan
from performance_engine.models.run_test import PerformanceEstimate
from performance_engine.serialization import (
    record_from_dict,
    record_to_dict,
    to_running_plan,
)

from athlete_store.exceptions import (
    InvalidRecordError,
    RecordNotFoundError,
    StoreCorruptedError,
)

logger = logging.getLogger(__name__)

_ATHLETES_FILE = "athletes.json"

# Fields a caller may never change through update_record()
_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})

# Raised by record_from_dict on a row that does not match its dataclass
_DECODE_ERRORS = (TypeError, ValueError, KeyError, InvalidOperation)


class AthleteStore:
    """Facade over the JSON collections of a single coach.

    One instance may be shared between threads (the dashboard caches a single
    store for all sessions). Every public method runs under one re-entrant
    lock, so a read-modify-write of a collection is never interleaved with
    another save.

    Args:
        data_dir: Directory holding the collection files. Created if missing.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self._data_dir = Path(data_dir).expanduser()
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    # ------------------------------------------------------------------
    # Athletes
    # ------------------------------------------------------------------

    def list_athletes(self) -> list[Athlete]:
        """All athletes, sorted by name."""
        with self._lock:
            athletes = self._decode(Athlete, _ATHLETES_FILE)
        return sorted(athletes, key=lambda a: a.name.lower())

    def get_athlete(self, athlete_id: str) -> Athlete:
        for athlete in self.list_athletes():
            if athlete.id == athlete_id:
                return athlete
        raise RecordNotFoundError("athlete", athlete_id)

    def create_athlete(self, name: str, age: int, sport: str) -> Athlete:
        """Register a new athlete. Name and sport must be non-blank, age positive."""
        name = (name or "").strip()
        sport = (sport or "").strip()
        if not name:
            raise InvalidRecordError("Athlete name is required")
        if not sport:
            raise InvalidRecordError("Athlete sport is required")
        if int(age) <= 0:
            raise InvalidRecordError(f"Athlete age must be positive, got {age}")

        athlete = Athlete(name=name, age=int(age), sport=sport)
        with self._lock:
            rows = self._load(_ATHLETES_FILE)
            rows.append(record_to_dict(athlete))
            self._dump(_ATHLETES_FILE, rows)
        logger.info("Created athlete id=%s name=%s", athlete.id, athlete.name)
        return athlete

    def delete_athlete(self, athlete_id: str) -> None:
        """Delete an athlete and every record that belongs to them.

        Financial transactions are kept for bookkeeping but detached from the
        athlete.
        """
        with self._lock:
            rows = self._load(_ATHLETES_FILE)
            remaining = [r for r in rows if r["id"] != athlete_id]
            if len(remaining) == len(rows):
                raise RecordNotFoundError("athlete", athlete_id)

            for kind in RecordKind:
                kind_rows = self._load(self._filename(kind))
                if kind == RecordKind.FINANCIAL_TRANSACTION:
                    detached = 0
                    for row in kind_rows:
                        if row.get("athlete_id") == athlete_id:
                            row["athlete_id"] = None
                            detached += 1
                    if detached:
                        self._dump(self._filename(kind), kind_rows)
                    continue
                kept = [r for r in kind_rows if r.get("athlete_id") != athlete_id]
                if len(kept) != len(kind_rows):
                    self._dump(self._filename(kind), kept)
                    logger.debug(
                        "Removed %d %s for athlete %s",
                        len(kind_rows) - len(kept),
                        kind.value,
                        athlete_id,
                    )

            self._dump(_ATHLETES_FILE, remaining)
        logger.info("Deleted athlete %s", athlete_id)

    # ------------------------------------------------------------------
    # Generic records
    # ------------------------------------------------------------------

    def add_record(self, record: Any) -> Any:
        """Append a record to its collection. Returns the record unchanged."""
        kind = self._kind_of(record)
        athlete_id = getattr(record, "athlete_id", None)
        with self._lock:
            if athlete_id is not None:
                self.get_athlete(athlete_id)
            rows = self._load(self._filename(kind))
            rows.append(record_to_dict(record))
            self._dump(self._filename(kind), rows)
        logger.info("Added %s id=%s athlete=%s", kind.value, record.id, athlete_id)
        return record

    def records_for(
        self, kind: RecordKind, athlete_id: str | None = None
    ) -> list[Any]:
        """Records of one kind, optionally filtered by athlete, in natural order."""
        with self._lock:
            records = self._decode(RECORD_TYPES[kind], self._filename(kind))
        if athlete_id is not None:
            records = [r for r in records if r.athlete_id == athlete_id]
        return sorted(records, key=lambda r: r.sort_key)

    def get_record(self, kind: RecordKind, record_id: str) -> Any:
        for record in self.records_for(kind):
            if record.id == record_id:
                return record
        raise RecordNotFoundError(kind.value, record_id)

    def update_record(self, kind: RecordKind, record_id: str, **changes: Any) -> Any:
        """Replace selected fields of a stored record. Returns the new record.

        The updated record goes through the same encode/decode cycle as a
        load, so a value that could not be read back is rejected up front.

        Raises:
            InvalidRecordError: On an immutable or unknown field, or a value
                of the wrong type.
            RecordNotFoundError: If the record (or a new athlete_id) is unknown.
        """
        blocked = _IMMUTABLE_FIELDS.intersection(changes)
        if blocked:
            raise InvalidRecordError(f"Cannot change {', '.join(sorted(blocked))}")

        with self._lock:
            current = self.get_record(kind, record_id)
            try:
                updated = dataclasses.replace(current, **changes)
                row = record_to_dict(updated)
                updated = record_from_dict(type(current), row)
            except _DECODE_ERRORS as exc:
                raise InvalidRecordError(
                    f"Invalid value for {kind.value}: {exc}"
                ) from exc
            if "athlete_id" in changes and updated.athlete_id is not None:
                self.get_athlete(updated.athlete_id)

            rows = self._load(self._filename(kind))
            rows = [row if r["id"] == record_id else r for r in rows]
            self._dump(self._filename(kind), rows)
        logger.info("Updated %s id=%s fields=%s", kind.value, record_id, sorted(changes))
        return updated

    def delete_record(self, kind: RecordKind, record_id: str) -> None:
        with self._lock:
            rows = self._load(self._filename(kind))
            remaining = [r for r in rows if r["id"] != record_id]
            if len(remaining) == len(rows):
                raise RecordNotFoundError(kind.value, record_id)
            self._dump(self._filename(kind), remaining)
        logger.info("Deleted %s id=%s", kind.value, record_id)

    # ------------------------------------------------------------------
    # Convenience
    # ------------------------------------------------------------------

    def save_running_plan(
        self,
        athlete_id: str,
        estimate: PerformanceEstimate,
        start_date: date | None = None,
    ) -> RunningPlan:
        """Persist the headline values of an estimate as a new history entry."""
        plan = to_running_plan(athlete_id, estimate, start_date)
        return self.add_record(plan)

    def list_transactions(self) -> list[Any]:
        return self.records_for(RecordKind.FINANCIAL_TRANSACTION)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _filename(kind: RecordKind) -> str:
        return f"{kind.value}.json"

    @staticmethod
    def _kind_of(record: Any) -> RecordKind:
        kind = getattr(type(record), "KIND", None)
        if kind not in RECORD_TYPES or not isinstance(record, RECORD_TYPES[kind]):
            raise InvalidRecordError(
                f"Unsupported record type: {type(record).__name__}"
            )
        return kind

    def _decode(self, cls: type, filename: str) -> list[Any]:
        records = []
        for index, row in enumerate(self._load(filename)):
            try:
                records.append(record_from_dict(cls, row))
            except _DECODE_ERRORS as exc:
                path = self._data_dir / filename
                raise StoreCorruptedError(
                    f"Malformed row {index} in {path}: {exc}", path=str(path)
                ) from exc
        return records

    def _load(self, filename: str) -> list[dict[str, Any]]:
        path = self._data_dir / filename
        if not path.exists():
            return []
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise StoreCorruptedError(
                f"Cannot parse {path}: {exc}", path=str(path)
            ) from exc
        if not isinstance(data, list):
            raise StoreCorruptedError(
                f"Expected a list in {path}, got {type(data).__name__}",
                path=str(path),
            )
        for index, row in enumerate(data):
            if not isinstance(row, dict) or "id" not in row:
                raise StoreCorruptedError(
                    f"Row {index} in {path} is not a record with an id",
                    path=str(path),
                )
        logger.debug("Loaded %d rows from %s", len(data), path)
        return data

    def _dump(self, filename: str, rows: list[dict[str, Any]]) -> None:
        path = self._data_dir / filename
        fd, tmp = tempfile.mkstemp(dir=self._data_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(rows, f, indent=2)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
