"""Utility helpers bridging the Streamlit UI and the performance engine.

Pure functions for labels, table construction and form value conversion.
No Streamlit imports here so everything stays unit-testable.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

import pandas as pd

from performance_engine.math.finance import infer_status
from performance_engine.math.jump import cmj_sj_difference_pct
from performance_engine.math.units import format_pace
from performance_engine.models.enums import (
    PopulationProfile,
    TransactionKind,
    TransactionStatus,
)
from performance_engine.models.records import FinancialTransaction, JumpTest
from performance_engine.models.run_test import PerformanceEstimate

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

PROFILE_LABELS: dict[PopulationProfile, str] = {
    PopulationProfile.TRAINED_MEN: "Trained men",
    PopulationProfile.UNTRAINED_WOMEN: "Untrained / women",
    PopulationProfile.IAT_ONLY: "IAT only",
}

STATUS_LABELS: dict[TransactionStatus, str] = {
    TransactionStatus.PENDING: "Pending",
    TransactionStatus.PARTIALLY_PAID: "Partially paid",
    TransactionStatus.PAID: "Paid",
}

# (record field, label) pairs of the free-text questionnaires
ANAMNESIS_FIELDS: tuple[tuple[str, str], ...] = (
    ("main_goal", "Main goal"),
    ("current_activity_level", "Current activity level"),
    ("medical_history", "Medical history"),
    ("injuries", "Injuries"),
    ("surgeries", "Surgeries"),
    ("medications", "Medications"),
    ("allergies", "Allergies"),
    ("family_history", "Family history"),
    ("lifestyle", "Lifestyle"),
    ("sleep_quality", "Sleep quality"),
    ("nutrition", "Nutrition"),
    ("previous_sports", "Previous sports"),
    ("additional_notes", "Additional notes"),
)

ASSESSMENT_FIELDS: tuple[tuple[str, str], ...] = (
    ("ankle_mobility", "Ankle mobility"),
    ("hip_mobility", "Hip mobility"),
    ("thoracic_mobility", "Thoracic mobility"),
    ("core_stability", "Core stability"),
    ("squat_pattern", "Squat pattern"),
    ("lunge_pattern", "Lunge pattern"),
    ("jump_pattern", "Jump pattern"),
    ("run_pattern", "Run pattern"),
    ("unilateral_balance", "Unilateral balance"),
    ("general_observations", "General observations"),
)

# (label, attribute, unit) rows of the estimate table, in display order
ESTIMATE_ROWS: tuple[tuple[str, str, str], ...] = (
    ("Average speed", "average_speed_m_per_min", "m/min"),
    ("Average speed", "average_speed_kmh", "km/h"),
    ("IAT", "iat_m_per_min", "m/min"),
    ("IAT", "iat_kmh", "km/h"),
    ("IAT pace", "iat_pace_min_per_km", "min/km"),
    ("VO2max", "vo2max", "ml/min/kg"),
    ("VO2 @ 4.0 mM", "vo2_4mm", "ml/min/kg"),
    ("VO2 @ 2.5 mM", "vo2_2_5mm", "ml/min/kg"),
    ("VO2 @ 2.0 mM", "vo2_2mm", "ml/min/kg"),
    ("VO2 @ LT", "vo2_lt", "ml/min/kg"),
    ("Peak speed", "peak_speed_m_per_min", "m/min"),
    ("Peak speed", "peak_speed_kmh", "km/h"),
    ("Peak pace", "peak_pace_min_per_km", "min/km"),
    ("LT speed", "lt_speed_m_per_min", "m/min"),
    ("LT speed", "lt_speed_kmh", "km/h"),
    ("LT pace", "lt_pace_min_per_km", "min/km"),
)


# ---------------------------------------------------------------------------
# Table builders
# ---------------------------------------------------------------------------


def estimate_table(estimate: PerformanceEstimate) -> pd.DataFrame:
    """Rows of present metrics, rounded to 2 decimals, paces also as M:SS."""
    rows = []
    for label, attr, unit in ESTIMATE_ROWS:
        value = getattr(estimate, attr)
        if value is None:
            continue
        display = format_pace(value) if unit == "min/km" else ""
        rows.append(
            {"metric": label, "value": round(value, 2), "unit": unit, "display": display}
        )
    return pd.DataFrame(rows, columns=["metric", "value", "unit", "display"])


def jump_chart_frame(tests: list[JumpTest]) -> pd.DataFrame:
    """CMJ / SJ heights indexed by test date, for st.line_chart."""
    if not tests:
        return pd.DataFrame(columns=["CMJ (cm)", "SJ (cm)"])
    df = pd.DataFrame(
        {
            "date": [t.test_date for t in tests],
            "CMJ (cm)": [t.cmj_cm for t in tests],
            "SJ (cm)": [t.sj_cm for t in tests],
        }
    )
    return df.set_index("date")


def jump_table(tests: list[JumpTest]) -> pd.DataFrame:
    rows = [
        {
            "date": t.test_date.strftime("%d/%m/%Y"),
            "CMJ (cm)": round(t.cmj_cm, 1),
            "SJ (cm)": round(t.sj_cm, 1),
            "Difference (%)": round(cmj_sj_difference_pct(t.cmj_cm, t.sj_cm), 1),
            "Observations": t.observations or "",
        }
        for t in tests
    ]
    return pd.DataFrame(
        rows, columns=["date", "CMJ (cm)", "SJ (cm)", "Difference (%)", "Observations"]
    )


def transactions_table(
    transactions: list[FinancialTransaction], athlete_names: dict[str, str]
) -> pd.DataFrame:
    rows = [
        {
            "Type": "Income" if tx.kind == TransactionKind.INCOME else "Expense",
            "Athlete": athlete_names.get(tx.athlete_id or "", ""),
            "Description": tx.description,
            "Total": f"{tx.total_amount:.2f}",
            "Paid": f"{tx.paid_amount:.2f}",
            "Due": tx.due_date.isoformat(),
            "Status": STATUS_LABELS[tx.status],
        }
        for tx in transactions
    ]
    return pd.DataFrame(
        rows, columns=["Type", "Athlete", "Description", "Total", "Paid", "Due", "Status"]
    )


# ---------------------------------------------------------------------------
# Form conversion
# ---------------------------------------------------------------------------


def parse_amount(raw: str | None) -> Decimal | None:
    """Parse a money field ('1.234,50' or '1234.50'). None if blank/invalid."""
    if raw is None:
        return None
    text = raw.strip().replace(" ", "")
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        value = Decimal(text)
        if not value.is_finite():
            return None
        return value.quantize(Decimal("0.01"))
    except InvalidOperation:
        return None


def blank_to_none(value: str | None) -> str | None:
    """Convert blank text inputs to None so optional fields stay absent."""
    if value is None:
        return None
    value = value.strip()
    return value or None


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------


def payment_label(tx: FinancialTransaction, athlete_names: dict[str, str]) -> str:
    """Selectbox label for an open transaction, e.g. 'Monthly fee (Ana): 150.00 due'."""
    who = athlete_names.get(tx.athlete_id or "")
    name = f"{tx.description} ({who})" if who else tx.description
    return f"{name}: {tx.total_amount - tx.paid_amount:.2f} due"


def apply_payment(
    tx: FinancialTransaction, amount: Decimal | None, payment_date: date
) -> dict:
    """Field changes that record a payment of ``amount`` on ``tx``.

    The result is meant for ``AthleteStore.update_record``; the status is
    re-derived from the new paid total.

    Raises:
        ValueError: If the amount is missing, non-positive, or more than what
            is still due.
    """
    if amount is None or amount <= 0:
        raise ValueError("Enter a positive payment amount")
    remaining = tx.total_amount - tx.paid_amount
    if amount > remaining:
        raise ValueError(f"Payment exceeds the {remaining:.2f} still due")
    paid = tx.paid_amount + amount
    return {
        "paid_amount": paid,
        "payment_date": payment_date,
        "status": infer_status(tx.total_amount, paid),
    }
