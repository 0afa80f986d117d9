"""Tests for the Streamlit UI helpers (no Streamlit runtime needed)."""

from __future__ import annotations

from cue_output import CueChannel, CueEvent
from helpers import (
    COUNTDOWN_COLOR,
    PHASE_COLORS,
    REST_COLOR,
    block_summary,
    browser_cue_script,
    format_clock,
    list_plans,
    load_plan,
    plan_to_frame,
    progress_fraction,
    ring_svg,
    ring_view,
    save_plan,
    tones_to_wav,
)
from tempo_engine.models.enums import CueKind, Phase, WorkoutState
from tempo_engine.models.plan import WorkoutPlan
from tempo_engine.models.run_state import EngineSnapshot


def _snapshot(state: WorkoutState, **overrides) -> EngineSnapshot:
    fields = dict(
        workout_state=state,
        countdown=5,
        current_set=1,
        current_rep=1,
        phase_index=0,
        time_left_in_phase=0,
        time_left_in_rest=0,
    )
    fields.update(overrides)
    return EngineSnapshot(**fields)


class TestFormatting:
    def test_format_clock(self) -> None:
        assert format_clock(95) == "1:35"
        assert format_clock(5) == "0:05"
        assert format_clock(-3) == "0:00"

    def test_progress_fraction(self) -> None:
        assert progress_fraction(3, 4) == 0.75
        assert progress_fraction(0, 0) == 1.0
        assert progress_fraction(50, 30) == 1.0


class TestRingView:
    def test_countdown(self) -> None:
        label, value, fraction, color = ring_view(_snapshot(WorkoutState.COUNTDOWN, countdown=4), 5)
        assert (label, value, color) == ("Get ready", 4, COUNTDOWN_COLOR)
        assert fraction == 0.8

    def test_running_phase(self, block_factory) -> None:
        snap = _snapshot(
            WorkoutState.RUNNING,
            time_left_in_phase=1,
            current_phase=Phase.ECCENTRIC,
            total_time_in_phase=4,
            block=block_factory(),
        )
        label, value, fraction, color = ring_view(snap, 5)
        assert (label, value, color) == ("Lowering", 1, PHASE_COLORS[Phase.ECCENTRIC])
        assert fraction == 0.25

    def test_resting(self, block_factory) -> None:
        snap = _snapshot(WorkoutState.RESTING, time_left_in_rest=30, block=block_factory(rest=60))
        label, value, fraction, color = ring_view(snap, 5)
        assert (label, value, fraction, color) == ("Rest", 30, 0.5, REST_COLOR)

    def test_ring_svg_contains_value(self) -> None:
        svg = ring_svg(0.5, "Rest", 42, REST_COLOR)
        assert svg.startswith("<svg")
        assert ">42<" in svg
        assert REST_COLOR in svg


class TestPlanTable:
    def test_plan_to_frame_marks_current_block(self, block_factory) -> None:
        plan = WorkoutPlan(
            session="Legs",
            blocks=(block_factory(exercise="Squat"), block_factory(exercise="Lunge", tempo=(3, 0, 1))),
        )
        df = plan_to_frame(plan, current_index=1)
        assert list(df["Exercise"]) == ["Squat", "Lunge"]
        assert list(df["Tempo"]) == ["2-1-1", "3-0-1"]
        assert list(df[""]) == ["", "▶"]

    def test_block_summary_shows_time_under_tension(self, block_factory) -> None:
        block = block_factory(sets=4, reps=10, tempo=(4, 1, 1))
        assert block_summary(block) == "4 x 10 @ 4-1-1, 4:00 under tension"


class TestCuePlayback:
    def test_tones_to_wav(self) -> None:
        events = [CueEvent(CueChannel.TONE, kind=CueKind.TICK), CueEvent(CueChannel.SPEECH, text="push")]
        wav = tones_to_wav(events)
        assert wav is not None
        assert wav[:4] == b"RIFF"

    def test_no_tones_no_wav(self) -> None:
        assert tones_to_wav([CueEvent(CueChannel.SPEECH, text="push")]) is None

    def test_browser_script_speaks_and_vibrates(self) -> None:
        script = browser_cue_script([
            CueEvent(CueChannel.SPEECH, text="pause"),
            CueEvent(CueChannel.HAPTIC, pattern=(100, 50, 100)),
            CueEvent(CueChannel.HAPTIC, pattern=(300,)),
        ])
        assert '["pause"]' in script
        assert "[100, 50, 100, 50, 300]" in script
        assert "speechSynthesis" in script

    def test_browser_script_none_for_tones_only(self) -> None:
        assert browser_cue_script([CueEvent(CueChannel.TONE, kind=CueKind.TICK)]) is None


class TestPlanLibrary:
    def test_save_list_load(self, tmp_path, block_factory) -> None:
        plan = WorkoutPlan(session="Push / Day #1", blocks=(block_factory(),))
        path = save_plan(plan, tmp_path)
        assert path.name == "Push  Day 1.json"
        assert list_plans(tmp_path) == ["Push  Day 1"]
        assert load_plan("Push  Day 1", tmp_path) == plan

    def test_list_creates_directory(self, tmp_path) -> None:
        plans_dir = tmp_path / "plans"
        assert list_plans(plans_dir) == []
        assert plans_dir.is_dir()
