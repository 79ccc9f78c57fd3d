"""Athlete report: tabular export of everything recorded for one athlete.

Each section is a pandas DataFrame so the same report can be written as CSV
files, zipped for a browser download, or shown directly in the dashboard.
"""

from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from athlete_store import AthleteStore
from performance_engine.math.jump import cmj_sj_difference_pct, jump_trend
from performance_engine.models.enums import (
    DAY_NAMES,
    JUMP_TREND_MIN_TESTS,
    RecordKind,
)
from performance_engine.models.records import Athlete
from performance_engine.serialization import record_to_dict

logger = logging.getLogger(__name__)

# Bookkeeping columns that never appear in a report
_HIDDEN_COLUMNS = ("id", "athlete_id", "created_at")

_SECTION_KINDS = (
    RecordKind.RUNNING_PLAN,
    RecordKind.RUNNING_WORKOUT,
    RecordKind.PERIODIZATION_PLAN,
    RecordKind.STRENGTH_EXERCISE,
    RecordKind.FUNCTIONAL_ASSESSMENT,
    RecordKind.ANAMNESIS,
)


@dataclass(frozen=True)
class AthleteReport:
    athlete: Athlete
    summary: pd.DataFrame
    sections: dict[str, pd.DataFrame] = field(default_factory=dict)

    def non_empty_sections(self) -> dict[str, pd.DataFrame]:
        return {k: v for k, v in self.sections.items() if not v.empty}


def build_athlete_report(store: AthleteStore, athlete_id: str) -> AthleteReport:
    """Collect every record of an athlete into report tables.

    Raises:
        RecordNotFoundError: If the athlete does not exist.
    """
    athlete = store.get_athlete(athlete_id)

    tests = store.records_for(RecordKind.JUMP_TEST, athlete_id)
    sections: dict[str, pd.DataFrame] = {
        RecordKind.JUMP_TEST.value: _jump_table(tests),
    }
    for kind in _SECTION_KINDS:
        rows = [record_to_dict(r) for r in store.records_for(kind, athlete_id)]
        sections[kind.value] = _table(rows, kind)

    plans = store.records_for(RecordKind.RUNNING_PLAN, athlete_id)
    summary = _summary_table(athlete, tests, plans)

    logger.info(
        "Built report for athlete %s (%d sections with data)",
        athlete_id,
        sum(1 for df in sections.values() if not df.empty),
    )
    return AthleteReport(athlete=athlete, summary=summary, sections=sections)


def write_report_csv(report: AthleteReport, out_dir: Path | str) -> list[Path]:
    """Write summary.csv plus one CSV per non-empty section.

    Files go to ``out_dir/<athlete name>/``. Returns the written paths.
    """
    target = Path(out_dir) / _safe_name(report.athlete.name)
    target.mkdir(parents=True, exist_ok=True)

    written = [target / "summary.csv"]
    report.summary.to_csv(written[0], index=False)
    for name, df in report.non_empty_sections().items():
        path = target / f"{name}.csv"
        df.to_csv(path, index=False)
        written.append(path)

    logger.info("Wrote %d report files to %s", len(written), target)
    return written


def report_to_zip(report: AthleteReport) -> bytes:
    """Pack the same CSV files into an in-memory zip archive."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("summary.csv", report.summary.to_csv(index=False))
        for name, df in report.non_empty_sections().items():
            zf.writestr(f"{name}.csv", df.to_csv(index=False))
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _jump_table(tests: list) -> pd.DataFrame:
    columns = ["test_date", "cmj_cm", "sj_cm", "difference_pct", "observations"]
    rows = [
        {
            "test_date": t.test_date.isoformat(),
            "cmj_cm": t.cmj_cm,
            "sj_cm": t.sj_cm,
            "difference_pct": round(cmj_sj_difference_pct(t.cmj_cm, t.sj_cm), 1),
            "observations": t.observations,
        }
        for t in tests
    ]
    return pd.DataFrame(rows, columns=columns)


def _table(rows: list[dict], kind: RecordKind) -> pd.DataFrame:
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    df = df.drop(columns=[c for c in _HIDDEN_COLUMNS if c in df.columns])
    if kind == RecordKind.RUNNING_WORKOUT:
        df["day_of_week"] = df["day_of_week"].map(lambda d: DAY_NAMES[int(d) % 7])
    return df


def _summary_table(athlete: Athlete, tests: list, plans: list) -> pd.DataFrame:
    items: list[tuple[str, object]] = [
        ("name", athlete.name),
        ("age", athlete.age),
        ("sport", athlete.sport),
        ("jump_tests", len(tests)),
        ("running_plans", len(plans)),
    ]
    if tests:
        latest = tests[-1]
        items.append(("latest_cmj_cm", latest.cmj_cm))
        items.append(("latest_sj_cm", latest.sj_cm))
    if len(tests) >= JUMP_TREND_MIN_TESTS:
        trend = jump_trend(tests)
        items.append(("best_cmj_cm", trend.best_cmj_cm))
        items.append(("cmj_trend_cm_per_test", round(trend.cmj_slope_cm, 2)))
    if plans:
        items.append(("latest_vo2max", plans[-1].vo2max))
        items.append(("latest_iat_kmh", plans[-1].iat_kmh))
    return pd.DataFrame(items, columns=["metric", "value"])


def _safe_name(name: str) -> str:
    safe = "".join(c if c.isalnum() or c in "-_ " else "" for c in name).strip()
    return safe.replace(" ", "_") or "athlete"
