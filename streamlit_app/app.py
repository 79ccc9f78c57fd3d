"""Athlete Performance Manager: Streamlit dashboard.

Run with:
    streamlit run streamlit_app/app.py

The data directory defaults to ~/.athlete_performance and can be changed
with the ATHLETE_DATA_DIR environment variable.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import streamlit as st

from athlete_store import AthleteStore, AthleteStoreError
from performance_engine.exceptions import MissingInputError, PerformanceEngineError
from performance_engine.math.finance import infer_status, summarize_transactions
from performance_engine.math.jump import jump_trend
from performance_engine.models.enums import (
    DAY_NAMES,
    JUMP_TREND_MIN_TESTS,
    PopulationProfile,
    RecordKind,
    TransactionKind,
    TransactionStatus,
)
from performance_engine.models.records import (
    Anamnesis,
    FinancialTransaction,
    FunctionalAssessment,
    JumpTest,
    PeriodizationPlan,
    RunningWorkout,
    StrengthExercise,
)
from performance_engine.serialization import estimate_from_form, to_running_plan_fields
from reports.athlete_report import build_athlete_report, report_to_zip
from reports.config import DATA_DIR

from helpers import (
    ANAMNESIS_FIELDS,
    ASSESSMENT_FIELDS,
    PROFILE_LABELS,
    apply_payment,
    blank_to_none,
    estimate_table,
    jump_chart_frame,
    jump_table,
    parse_amount,
    payment_label,
    transactions_table,
)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Athlete Performance Manager",
    page_icon="🏃",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Cached store
# ---------------------------------------------------------------------------


@st.cache_resource
def get_store() -> AthleteStore:
    return AthleteStore(DATA_DIR)


store = get_store()


def _save(record) -> bool:
    """Add a record, reporting store errors on the page. True on success."""
    try:
        store.add_record(record)
    except AthleteStoreError as e:
        st.error(f"Save failed: {e}")
        return False
    return True


def _records(kind: RecordKind, athlete_id: str) -> list:
    try:
        return store.records_for(kind, athlete_id)
    except AthleteStoreError as e:
        st.error(f"Could not load {kind.value}: {e}")
        return []


def _delete_button(kind: RecordKind, record_id: str, key: str) -> None:
    if st.button("Delete", key=key):
        try:
            store.delete_record(kind, record_id)
            st.rerun()
        except AthleteStoreError as e:
            st.error(f"Delete failed: {e}")


# ---------------------------------------------------------------------------
# Sidebar: athlete roster
# ---------------------------------------------------------------------------

st.sidebar.title("Athletes")

try:
    athletes = store.list_athletes()
except AthleteStoreError as e:
    st.sidebar.error(f"Could not load athletes: {e}")
    athletes = []

athlete_names = {a.id: a.name for a in athletes}

with st.sidebar.expander("New athlete", expanded=not athletes):
    new_name = st.text_input("Name", key="new_athlete_name")
    new_age = st.number_input("Age", 5, 99, 25, key="new_athlete_age")
    new_sport = st.text_input("Sport", key="new_athlete_sport")
    if st.button("Add athlete"):
        try:
            created = store.create_athlete(new_name, int(new_age), new_sport)
            st.session_state["athlete_id"] = created.id
            st.rerun()
        except AthleteStoreError as e:
            st.error(str(e))

if athletes:
    ids = [a.id for a in athletes]
    current = st.session_state.get("athlete_id")
    index = ids.index(current) if current in ids else 0
    athlete_id = st.sidebar.selectbox(
        "Selected athlete",
        ids,
        index=index,
        format_func=lambda i: athlete_names[i],
    )
    st.session_state["athlete_id"] = athlete_id
    athlete = next(a for a in athletes if a.id == athlete_id)
    st.sidebar.caption(f"{athlete.sport} · {athlete.age} years")

    with st.sidebar.expander("Delete athlete"):
        st.warning("Deletes all of this athlete's tests and plans.")
        if st.button("Delete permanently"):
            try:
                store.delete_athlete(athlete_id)
            except AthleteStoreError as e:
                st.sidebar.error(f"Delete failed: {e}")
            else:
                st.session_state.pop("athlete_id", None)
                st.rerun()
else:
    athlete_id = None
    athlete = None


# ---------------------------------------------------------------------------
# Main content
# ---------------------------------------------------------------------------

st.title("Athlete Performance Manager")

if athlete is None:
    st.info("Add an athlete in the sidebar to get started.")
    st.stop()

(
    tab_jump,
    tab_run,
    tab_plans,
    tab_anamnesis,
    tab_assess,
    tab_finance,
    tab_report,
    tab_view,
) = st.tabs(
    [
        "Jump Tests",
        "Run Test Calculator",
        "Plans",
        "Anamnesis",
        "Assessments",
        "Finance",
        "Report",
        "Athlete View",
    ]
)

# ---------------------------------------------------------------------------
# Tab: Jump tests
# ---------------------------------------------------------------------------

with tab_jump:
    with st.form("jump_form", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        test_date = c1.date_input("Date", value=date.today())
        cmj = c2.number_input("CMJ (cm)", 0.0, 120.0, 0.0, step=0.1)
        sj = c3.number_input("SJ (cm)", 0.0, 120.0, 0.0, step=0.1)
        observations = st.text_area("Observations")
        if st.form_submit_button("Save test"):
            if cmj <= 0 or sj <= 0:
                st.warning("Enter both CMJ and SJ heights")
            else:
                if _save(
                    JumpTest(
                        athlete_id=athlete_id,
                        test_date=test_date,
                        cmj_cm=cmj,
                        sj_cm=sj,
                        observations=blank_to_none(observations),
                    )
                ):
                    st.rerun()

    tests = _records(RecordKind.JUMP_TEST, athlete_id)
    if tests:
        st.subheader("Progression")
        st.line_chart(jump_chart_frame(tests))
        if len(tests) >= JUMP_TREND_MIN_TESTS:
            trend = jump_trend(tests)
            m1, m2, m3 = st.columns(3)
            m1.metric("Best CMJ", f"{trend.best_cmj_cm:.1f} cm")
            m2.metric("CMJ trend", f"{trend.cmj_slope_cm:+.2f} cm/test")
            m3.metric("SJ trend", f"{trend.sj_slope_cm:+.2f} cm/test")
        st.dataframe(jump_table(tests), hide_index=True, use_container_width=True)
        for t in tests:
            with st.expander(f"{t.test_date.isoformat()}: CMJ {t.cmj_cm:.1f} / SJ {t.sj_cm:.1f}"):
                _delete_button(RecordKind.JUMP_TEST, t.id, key=f"del_jump_{t.id}")
    else:
        st.info("No jump tests recorded yet.")

# ---------------------------------------------------------------------------
# Tab: Run test calculator
# ---------------------------------------------------------------------------

with tab_run:
    profile = st.radio(
        "Population profile",
        list(PopulationProfile),
        format_func=lambda p: PROFILE_LABELS[p],
        horizontal=True,
    )
    c1, c2, c3 = st.columns(3)
    distance_raw = c1.text_input("Distance (m)", value="3200")
    minutes_raw = c2.text_input("Minutes")
    seconds_raw = c3.text_input("Seconds")

    if st.button("Calculate", type="primary"):
        try:
            st.session_state["last_estimate"] = estimate_from_form(
                distance_raw, minutes_raw, seconds_raw, profile
            )
        except MissingInputError as e:
            st.session_state.pop("last_estimate", None)
            st.warning(f"Missing input: {e}")
        except PerformanceEngineError as e:
            st.session_state.pop("last_estimate", None)
            st.error(str(e))

    estimate = st.session_state.get("last_estimate")
    if estimate is not None:
        st.dataframe(estimate_table(estimate), hide_index=True, use_container_width=True)

        if estimate.has_vo2:
            headline = to_running_plan_fields(estimate)
            h1, h2, h3, h4 = st.columns(4)
            h1.metric("IAT", f"{headline['iat_kmh']} km/h")
            h2.metric("Peak", f"{headline['peak_speed_kmh']} km/h")
            h3.metric("LT", f"{headline['lt_speed_kmh']} km/h")
            h4.metric("VO2max", headline["vo2max"])

            plan_start = st.date_input("Plan start date (optional)", value=None)
            if st.button("Save to running plan"):
                try:
                    plan = store.save_running_plan(athlete_id, estimate, plan_start)
                except (AthleteStoreError, PerformanceEngineError) as e:
                    st.error(f"Save failed: {e}")
                else:
                    st.success(f"Saved running plan ({plan.created_at:%d/%m/%Y %H:%M})")

    st.subheader("Running plan history")
    plans = _records(RecordKind.RUNNING_PLAN, athlete_id)
    if plans:
        for p in reversed(plans):
            label = p.start_date.isoformat() if p.start_date else "no start date"
            with st.expander(f"{p.created_at:%d/%m/%Y %H:%M} · {label}"):
                st.write(
                    f"IAT {p.iat_kmh} km/h · Peak {p.peak_speed_kmh} km/h · "
                    f"LT {p.lt_speed_kmh} km/h · VO2max {p.vo2max}"
                )
                _delete_button(RecordKind.RUNNING_PLAN, p.id, key=f"del_plan_{p.id}")
    else:
        st.caption("No saved running plans.")

# ---------------------------------------------------------------------------
# Tab: Plans (periodization, strength, weekly running sheet)
# ---------------------------------------------------------------------------

with tab_plans:
    st.subheader("Periodization")
    with st.form("period_form", clear_on_submit=True):
        period = st.text_input("Period")
        main_focus = st.text_input("Main focus")
        weekly_structure = st.text_area("Weekly structure")
        volume_intensity = st.text_input("Volume / intensity")
        period_obs = st.text_area("Observations", key="period_obs")
        if st.form_submit_button("Add period"):
            if not period.strip() or not main_focus.strip():
                st.warning("Period and main focus are required")
            else:
                if _save(
                    PeriodizationPlan(
                        athlete_id=athlete_id,
                        period=period.strip(),
                        main_focus=main_focus.strip(),
                        weekly_structure=blank_to_none(weekly_structure),
                        volume_intensity=blank_to_none(volume_intensity),
                        observations=blank_to_none(period_obs),
                    )
                ):
                    st.rerun()
    for p in _records(RecordKind.PERIODIZATION_PLAN, athlete_id):
        with st.expander(f"{p.period}: {p.main_focus}"):
            for label, value in (
                ("Weekly structure", p.weekly_structure),
                ("Volume / intensity", p.volume_intensity),
                ("Observations", p.observations),
            ):
                if value:
                    st.markdown(f"**{label}:** {value}")
            _delete_button(RecordKind.PERIODIZATION_PLAN, p.id, key=f"del_period_{p.id}")

    st.subheader("Strength")
    with st.form("strength_form", clear_on_submit=True):
        s1, s2, s3, s4 = st.columns(4)
        block = s1.text_input("Block")
        exercise = s2.text_input("Exercise")
        sets = s3.text_input("Sets")
        reps = s4.text_input("Reps")
        strength_obs = st.text_input("Observations", key="strength_obs")
        if st.form_submit_button("Add exercise"):
            if not all(v.strip() for v in (block, exercise, sets, reps)):
                st.warning("Block, exercise, sets and reps are required")
            else:
                if _save(
                    StrengthExercise(
                        athlete_id=athlete_id,
                        block=block.strip(),
                        exercise=exercise.strip(),
                        sets=sets.strip(),
                        reps=reps.strip(),
                        observations=blank_to_none(strength_obs),
                    )
                ):
                    st.rerun()
    for ex in _records(RecordKind.STRENGTH_EXERCISE, athlete_id):
        col_a, col_b = st.columns([5, 1])
        col_a.write(f"**{ex.block}** · {ex.exercise} · {ex.sets} x {ex.reps}")
        with col_b:
            _delete_button(RecordKind.STRENGTH_EXERCISE, ex.id, key=f"del_str_{ex.id}")

    st.subheader("Weekly running sheet")
    with st.form("workout_form", clear_on_submit=True):
        w1, w2, w3 = st.columns(3)
        week_number = w1.number_input("Week", 1, 52, 1)
        day = w2.selectbox("Day", range(7), format_func=lambda d: DAY_NAMES[d])
        distance = w3.text_input("Distance")
        training = st.text_area("Training")
        if st.form_submit_button("Add workout"):
            if not training.strip():
                st.warning("Describe the training")
            else:
                if _save(
                    RunningWorkout(
                        athlete_id=athlete_id,
                        week_number=int(week_number),
                        day_of_week=int(day),
                        training=training.strip(),
                        distance=blank_to_none(distance),
                    )
                ):
                    st.rerun()
    for wo in _records(RecordKind.RUNNING_WORKOUT, athlete_id):
        col_a, col_b = st.columns([5, 1])
        col_a.write(
            f"W{wo.week_number} {DAY_NAMES[wo.day_of_week]}: {wo.training}"
            + (f" ({wo.distance})" if wo.distance else "")
        )
        with col_b:
            _delete_button(RecordKind.RUNNING_WORKOUT, wo.id, key=f"del_wo_{wo.id}")

# ---------------------------------------------------------------------------
# Tab: Anamnesis (intake)
# ---------------------------------------------------------------------------

with tab_anamnesis:
    with st.form("anamnesis_form", clear_on_submit=True):
        anamnesis_date = st.date_input("Date", value=date.today(), key="anamnesis_date")
        answers = {
            name: st.text_area(label, key=f"anamnesis_{name}")
            for name, label in ANAMNESIS_FIELDS
        }
        if st.form_submit_button("Save anamnesis"):
            if _save(
                Anamnesis(
                    athlete_id=athlete_id,
                    anamnesis_date=anamnesis_date,
                    **{k: blank_to_none(v) for k, v in answers.items()},
                )
            ):
                st.rerun()
    for an in reversed(_records(RecordKind.ANAMNESIS, athlete_id)):
        with st.expander(an.anamnesis_date.strftime("%d/%m/%Y")):
            for name, label in ANAMNESIS_FIELDS:
                value = getattr(an, name)
                if value:
                    st.markdown(f"**{label}:** {value}")
            _delete_button(RecordKind.ANAMNESIS, an.id, key=f"del_an_{an.id}")

# ---------------------------------------------------------------------------
# Tab: Functional assessments
# ---------------------------------------------------------------------------

with tab_assess:
    with st.form("assessment_form", clear_on_submit=True):
        assessment_date = st.date_input("Assessment date", value=date.today())
        values = {name: st.text_input(label) for name, label in ASSESSMENT_FIELDS}
        if st.form_submit_button("Save assessment"):
            if _save(
                FunctionalAssessment(
                    athlete_id=athlete_id,
                    assessment_date=assessment_date,
                    **{k: blank_to_none(v) for k, v in values.items()},
                )
            ):
                st.rerun()
    for a in reversed(_records(RecordKind.FUNCTIONAL_ASSESSMENT, athlete_id)):
        with st.expander(a.assessment_date.strftime("%d/%m/%Y")):
            for name, label in ASSESSMENT_FIELDS:
                value = getattr(a, name)
                if value:
                    st.markdown(f"**{label}:** {value}")
            _delete_button(RecordKind.FUNCTIONAL_ASSESSMENT, a.id, key=f"del_fa_{a.id}")

# ---------------------------------------------------------------------------
# Tab: Finance (all athletes)
# ---------------------------------------------------------------------------

with tab_finance:
    try:
        transactions = store.list_transactions()
    except AthleteStoreError as e:
        st.error(f"Could not load transactions: {e}")
        transactions = []
    summary = summarize_transactions(transactions)
    f1, f2, f3, f4 = st.columns(4)
    f1.metric("Income", f"{summary.income:.2f}")
    f2.metric("Expenses", f"{summary.expenses:.2f}")
    f3.metric("Balance", f"{summary.balance:.2f}")
    f4.metric("Outstanding", f"{summary.outstanding:.2f}")

    with st.form("tx_form", clear_on_submit=True):
        t1, t2 = st.columns(2)
        kind = t1.selectbox(
            "Type", list(TransactionKind), format_func=lambda k: k.value.title()
        )
        tx_athlete = t2.selectbox(
            "Athlete (optional)",
            [""] + list(athlete_names),
            format_func=lambda i: athlete_names.get(i, "-"),
        )
        description = st.text_input("Description")
        a1, a2 = st.columns(2)
        total_raw = a1.text_input("Total amount")
        paid_raw = a2.text_input("Paid amount", value="0")
        d1, d2 = st.columns(2)
        due_date = d1.date_input("Due date", value=date.today())
        payment_date = d2.date_input("Payment date", value=None)
        if st.form_submit_button("Add transaction"):
            total = parse_amount(total_raw)
            paid = parse_amount(paid_raw) or Decimal("0")
            if not description.strip() or total is None:
                st.warning("Description and total amount are required")
            elif _save(
                FinancialTransaction(
                    kind=kind,
                    description=description.strip(),
                    total_amount=total,
                    paid_amount=paid,
                    due_date=due_date,
                    payment_date=payment_date,
                    status=infer_status(total, paid),
                    athlete_id=tx_athlete or None,
                )
            ):
                st.rerun()

    open_txs = [tx for tx in transactions if tx.status != TransactionStatus.PAID]
    if open_txs:
        st.subheader("Record payment")
        with st.form("payment_form", clear_on_submit=True):
            tx_id = st.selectbox(
                "Transaction",
                [tx.id for tx in open_txs],
                format_func=lambda i: payment_label(
                    next(tx for tx in open_txs if tx.id == i), athlete_names
                ),
            )
            p1, p2 = st.columns(2)
            amount_raw = p1.text_input("Amount received")
            received_on = p2.date_input("Payment date", value=date.today(), key="received_on")
            if st.form_submit_button("Record payment"):
                tx = next(t for t in open_txs if t.id == tx_id)
                try:
                    changes = apply_payment(tx, parse_amount(amount_raw), received_on)
                    store.update_record(
                        RecordKind.FINANCIAL_TRANSACTION, tx.id, **changes
                    )
                except ValueError as e:
                    st.warning(str(e))
                except AthleteStoreError as e:
                    st.error(f"Update failed: {e}")
                else:
                    st.rerun()

    if transactions:
        st.dataframe(
            transactions_table(transactions, athlete_names),
            hide_index=True,
            use_container_width=True,
        )

# ---------------------------------------------------------------------------
# Tab: Report
# ---------------------------------------------------------------------------

with tab_report:
    try:
        report = build_athlete_report(store, athlete_id)
    except AthleteStoreError as e:
        st.error(f"Could not build report: {e}")
    else:
        st.dataframe(report.summary, hide_index=True)
        for name, df in report.non_empty_sections().items():
            st.markdown(f"**{name.replace('_', ' ').title()}**")
            st.dataframe(df, hide_index=True, use_container_width=True)
        st.download_button(
            "Download report (.zip)",
            data=report_to_zip(report),
            file_name=f"{athlete.name.replace(' ', '_')}_report.zip",
            mime="application/zip",
        )

# ---------------------------------------------------------------------------
# Tab: Athlete view (read-only)
# ---------------------------------------------------------------------------

with tab_view:
    st.header(athlete.name)
    st.caption(f"{athlete.sport} · {athlete.age} years")
    shown = False

    view_tests = _records(RecordKind.JUMP_TEST, athlete_id)
    if view_tests:
        shown = True
        st.subheader("My jump tests")
        st.line_chart(jump_chart_frame(view_tests))

    view_plans = _records(RecordKind.RUNNING_PLAN, athlete_id)
    if view_plans:
        shown = True
        st.subheader("My running plans")
        for p in reversed(view_plans):
            st.markdown(
                f"- **{p.start_date.strftime('%d/%m/%Y') if p.start_date else 'Plan'}**: "
                f"IAT {p.iat_kmh} km/h, LT {p.lt_speed_kmh} km/h, "
                f"peak {p.peak_speed_kmh} km/h, VO2max {p.vo2max}"
            )

    view_workouts = _records(RecordKind.RUNNING_WORKOUT, athlete_id)
    if view_workouts:
        shown = True
        st.subheader("My running week")
        for wo in view_workouts:
            st.markdown(
                f"- W{wo.week_number} {DAY_NAMES[wo.day_of_week]}: {wo.training}"
                + (f" ({wo.distance})" if wo.distance else "")
            )

    view_strength = _records(RecordKind.STRENGTH_EXERCISE, athlete_id)
    if view_strength:
        shown = True
        st.subheader("My strength training")
        for ex in view_strength:
            st.markdown(f"- **{ex.block}** {ex.exercise}: {ex.sets} x {ex.reps}")

    view_periods = _records(RecordKind.PERIODIZATION_PLAN, athlete_id)
    if view_periods:
        shown = True
        st.subheader("My periodization")
        for p in view_periods:
            st.markdown(f"- **{p.period}**: {p.main_focus}")

    view_anamneses = _records(RecordKind.ANAMNESIS, athlete_id)
    if view_anamneses:
        shown = True
        st.subheader("My anamnesis")
        latest = view_anamneses[-1]
        for name, label in ANAMNESIS_FIELDS:
            value = getattr(latest, name)
            if value:
                st.markdown(f"**{label}:** {value}")

    view_assessments = _records(RecordKind.FUNCTIONAL_ASSESSMENT, athlete_id)
    if view_assessments:
        shown = True
        st.subheader("My functional assessments")
        for a in reversed(view_assessments):
            with st.expander(a.assessment_date.strftime("%d/%m/%Y")):
                for name, label in ASSESSMENT_FIELDS:
                    value = getattr(a, name)
                    if value:
                        st.markdown(f"**{label}:** {value}")

    if not shown:
        st.info("Nothing recorded yet.")
