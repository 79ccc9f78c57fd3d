"""Environment-variable-based configuration for the report CLI."""

from __future__ import annotations

import os
from pathlib import Path

DATA_DIR: Path = Path(
    os.environ.get("ATHLETE_DATA_DIR", "~/.athlete_performance")
).expanduser()
REPORT_DIR: Path = Path(os.environ.get("REPORT_DIR", "reports_out"))
DEFAULT_POPULATION_PROFILE: str = os.environ.get(
    "DEFAULT_POPULATION_PROFILE", "TRAINED_MEN"
)
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO").upper()
