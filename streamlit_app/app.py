"""Tempo Trainer — Streamlit workout timer.

Run with:
    streamlit run streamlit_app/app.py

The engine ticks on a shared APScheduler background thread; the workout
panel re-renders once per second and plays whatever cues were queued since
the previous refresh.
"""

from __future__ import annotations

import logging

import streamlit as st
import streamlit.components.v1 as components
from apscheduler.schedulers.background import BackgroundScheduler

from cue_output import QueuedCueEmitter
from tempo_engine.config import (
    COUNTDOWN_SECONDS,
    LOG_FORMAT,
    LOG_LEVEL,
    REST_EXTENSION_S,
    TICK_INTERVAL_S,
)
from tempo_engine.engine import WorkoutEngine
from tempo_engine.exceptions import PlanLoadError, PlanValidationError
from tempo_engine.models.enums import ConcentricKeyword, PhaseOrder, WorkoutState
from tempo_engine.models.plan import WorkoutBlock
from tempo_engine.presets import DEFAULT_BLOCK, PRESETS, format_tempo, parse_tempo, single_block_plan
from tempo_engine.serialization import loads_plan
from tempo_engine.session import WorkoutSession
from tempo_engine.ticking import SchedulerTickSource

from helpers import (
    KEYWORD_LABELS,
    ORDER_LABELS,
    block_summary,
    browser_cue_script,
    format_clock,
    list_plans,
    load_plan,
    plan_to_frame,
    ring_svg,
    ring_view,
    save_plan,
    tones_to_wav,
)

logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Tempo Trainer",
    page_icon="🏋️",
    layout="centered",
)


# ---------------------------------------------------------------------------
# Cached scheduler & per-browser-session engine
# ---------------------------------------------------------------------------


@st.cache_resource
def get_scheduler() -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.start()
    return scheduler


def _get_session() -> WorkoutSession:
    """One engine + session per browser session, created on first use."""
    if "workout_session" not in st.session_state:
        emitter = QueuedCueEmitter()
        engine = WorkoutEngine(
            emitter=emitter,
            tick_source=SchedulerTickSource(get_scheduler()),
            countdown_seconds=COUNTDOWN_SECONDS,
            tick_interval_s=TICK_INTERVAL_S,
        )
        st.session_state["cue_emitter"] = emitter
        st.session_state["workout_session"] = WorkoutSession(engine, emitter)
    return st.session_state["workout_session"]


session = _get_session()
engine = session.engine
emitter: QueuedCueEmitter = st.session_state["cue_emitter"]


# ---------------------------------------------------------------------------
# Block form state
# ---------------------------------------------------------------------------


def _init_form_defaults() -> None:
    defaults = {
        "f_exercise": DEFAULT_BLOCK.exercise,
        "f_sets": DEFAULT_BLOCK.sets,
        "f_reps": DEFAULT_BLOCK.reps,
        "f_tempo": format_tempo(DEFAULT_BLOCK.tempo),
        "f_rest": DEFAULT_BLOCK.rest,
        "f_order": DEFAULT_BLOCK.order,
        "f_keyword": DEFAULT_BLOCK.concentric_keyword,
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)


def _apply_preset(name: str) -> None:
    """Button callback — runs before widgets are re-created."""
    preset = PRESETS[name]
    st.session_state["f_sets"] = preset["sets"]
    st.session_state["f_reps"] = preset["reps"]
    st.session_state["f_tempo"] = format_tempo(preset["tempo"])
    st.session_state["f_rest"] = preset["rest"]


def _block_from_form() -> WorkoutBlock:
    return WorkoutBlock(
        exercise=st.session_state["f_exercise"].strip() or DEFAULT_BLOCK.exercise,
        sets=int(st.session_state["f_sets"]),
        reps=int(st.session_state["f_reps"]),
        tempo=parse_tempo(st.session_state["f_tempo"]),
        rest=int(st.session_state["f_rest"]),
        order=st.session_state["f_order"],
        concentric_keyword=st.session_state["f_keyword"],
    )


_init_form_defaults()


# ---------------------------------------------------------------------------
# Sidebar — configuration
# ---------------------------------------------------------------------------

st.sidebar.title("Workout Setup")

with st.sidebar.expander("Presets", expanded=True):
    cols = st.columns(len(PRESETS))
    for col, name in zip(cols, PRESETS):
        col.button(name, on_click=_apply_preset, args=(name,), use_container_width=True)

with st.sidebar.expander("Single block", expanded=True):
    st.text_input("Exercise", key="f_exercise")
    col_s, col_r = st.columns(2)
    with col_s:
        st.number_input("Sets", 1, 50, key="f_sets")
    with col_r:
        st.number_input("Reps", 1, 100, key="f_reps")
    st.text_input("Tempo (ecc-pause-con)", key="f_tempo", help="Seconds per phase, e.g. 4-1-1")
    st.number_input("Rest (s)", 0, 900, step=15, key="f_rest")
    st.selectbox("Phase order", list(PhaseOrder), format_func=ORDER_LABELS.get, key="f_order")
    st.selectbox(
        "Concentric cue", list(ConcentricKeyword), format_func=KEYWORD_LABELS.get, key="f_keyword",
    )
    if st.button("Start block", type="primary", use_container_width=True):
        try:
            session.start_plan(single_block_plan(_block_from_form()))
            st.rerun()
        except PlanValidationError as e:
            st.error(str(e))

with st.sidebar.expander("Plan file"):
    uploaded = st.file_uploader("Upload plan (.json)", type=["json"])
    if uploaded is not None:
        try:
            uploaded_plan = loads_plan(uploaded.getvalue())
        except (PlanLoadError, PlanValidationError) as e:
            st.error(f"Invalid plan: {e}")
        else:
            st.caption(f"**{uploaded_plan.session}** — {len(uploaded_plan)} block(s)")
            col_a, col_b = st.columns(2)
            if col_a.button("Start plan", use_container_width=True):
                session.start_plan(uploaded_plan)
                st.rerun()
            if col_b.button("Save plan", use_container_width=True):
                path = save_plan(uploaded_plan)
                st.success(f"Saved to {path.name}")

    saved = list_plans()
    if saved:
        choice = st.selectbox("Saved plans", saved)
        if st.button("Load & start", use_container_width=True):
            try:
                session.start_plan(load_plan(choice))
                st.rerun()
            except (PlanLoadError, PlanValidationError) as e:
                st.error(f"Could not load {choice}: {e}")


# ---------------------------------------------------------------------------
# Main — workout view
# ---------------------------------------------------------------------------

st.title("Tempo Trainer")
st.caption("Gym workout timer")


def _stop() -> None:
    session.stop()
    emitter.drain()


def _play_cues() -> None:
    events = emitter.drain()
    if not events:
        return
    wav = tones_to_wav(events)
    if wav is not None:
        st.audio(wav, format="audio/wav", autoplay=True)
    script = browser_cue_script(events)
    if script is not None:
        components.html(script, height=0)


@st.fragment(run_every=TICK_INTERVAL_S)
def workout_panel() -> None:
    snap = engine.snapshot()
    block = snap.block

    if session.is_complete and not session.is_active:
        _play_cues()
        st.success("Workout complete. Good job!")
        st.button("New workout", on_click=_stop)
        return
    if block is None:
        st.info("Pick a preset or upload a plan, then press Start.")
        return

    st.subheader(block.exercise)
    if session.plan is not None:
        st.caption(f"{session.plan.session} · {session.progress_label}")

    label, value, fraction, color = ring_view(snap, engine.countdown_seconds)
    st.markdown(
        f'<div style="text-align:center">{ring_svg(fraction, label, value, color)}</div>',
        unsafe_allow_html=True,
    )

    col_set, col_rep = st.columns(2)
    col_set.metric("Set", f"{snap.current_set} / {block.sets}")
    col_rep.metric("Rep", f"{snap.current_rep} / {block.reps}")
    st.caption(block_summary(block))

    state = snap.workout_state
    if state == WorkoutState.RUNNING:
        col_a, col_b = st.columns(2)
        col_a.button("Pause", on_click=engine.pause, use_container_width=True)
        col_b.button("Stop", on_click=_stop, use_container_width=True)
    elif state == WorkoutState.PAUSED:
        col_a, col_b = st.columns(2)
        col_a.button("Resume", on_click=engine.resume, type="primary", use_container_width=True)
        col_b.button("Stop", on_click=_stop, use_container_width=True)
    elif state == WorkoutState.RESTING:
        st.caption(f"Rest remaining {format_clock(snap.time_left_in_rest)}")
        col_a, col_b, col_c = st.columns(3)
        col_a.button(
            f"+{REST_EXTENSION_S}s", on_click=engine.add_rest_time, args=(REST_EXTENSION_S,),
            use_container_width=True,
        )
        col_b.button("Skip", on_click=engine.skip_rest, use_container_width=True)
        col_c.button("Stop", on_click=_stop, use_container_width=True)
    elif snap.is_active:
        st.button("Stop", on_click=_stop, use_container_width=True)

    if session.plan is not None:
        st.dataframe(
            plan_to_frame(session.plan, session.block_index),
            hide_index=True,
            use_container_width=True,
        )

    _play_cues()


workout_panel()
