"""Athlete store. All on-disk persistence of coach data lives here."""

from athlete_store.exceptions import (
    AthleteStoreError,
    InvalidRecordError,
    RecordNotFoundError,
    StoreCorruptedError,
)
from athlete_store.store import AthleteStore

__all__ = [
    "AthleteStore",
    "AthleteStoreError",
    "InvalidRecordError",
    "RecordNotFoundError",
    "StoreCorruptedError",
]
