"""Custom exception hierarchy for the athlete store."""

from __future__ import annotations


class AthleteStoreError(Exception):
    """Base exception for all athlete_store errors."""


class RecordNotFoundError(AthleteStoreError, KeyError):
    """No athlete or record exists with the requested id."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} {record_id!r} not found")
        self.kind = kind
        self.record_id = record_id

    def __str__(self) -> str:
        return self.args[0]


class InvalidRecordError(AthleteStoreError, ValueError):
    """A record failed validation before being written."""


class StoreCorruptedError(AthleteStoreError):
    """A collection file on disk could not be parsed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
