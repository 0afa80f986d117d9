"""Utility helpers bridging the Streamlit UI and the tempo engine.

Pure functions for formatting, progress-ring rendering, cue playback markup
and plan persistence.
"""

from __future__ import annotations

import json
import math
from pathlib import Path

import pandas as pd

from cue_output import CueChannel, CueEvent, render_sequence, to_wav_bytes
from tempo_engine.config import PLANS_DIR
from tempo_engine.models.enums import ConcentricKeyword, Phase, PhaseOrder, WorkoutState
from tempo_engine.models.plan import WorkoutBlock, WorkoutPlan
from tempo_engine.models.run_state import EngineSnapshot
from tempo_engine.presets import format_tempo
from tempo_engine.serialization import load_plan_file, save_plan_file

# ---------------------------------------------------------------------------
# Labels & colors
# ---------------------------------------------------------------------------

PHASE_LABELS: dict[Phase, str] = {
    Phase.ECCENTRIC: "Lowering",
    Phase.PAUSE: "Pause",
    Phase.CONCENTRIC: "Lifting",
}

PHASE_COLORS: dict[Phase, str] = {
    Phase.ECCENTRIC: "#4A90D9",   # blue
    Phase.PAUSE: "#F5B041",       # amber
    Phase.CONCENTRIC: "#2ECC71",  # green
}

STATE_LABELS: dict[WorkoutState, str] = {
    WorkoutState.IDLE: "Ready",
    WorkoutState.COUNTDOWN: "Get ready",
    WorkoutState.RUNNING: "Working",
    WorkoutState.PAUSED: "Paused",
    WorkoutState.RESTING: "Rest",
    WorkoutState.FINISHED: "Done",
}

ORDER_LABELS: dict[PhaseOrder, str] = {
    PhaseOrder.ECC_PAUSE_CON: "Ecc-Pause-Con",
    PhaseOrder.CON_PAUSE_ECC: "Con-Pause-Ecc",
}

KEYWORD_LABELS: dict[ConcentricKeyword, str] = {
    ConcentricKeyword.PUSH: "Push",
    ConcentricKeyword.PULL: "Pull",
}

REST_COLOR = "#AED6F1"
COUNTDOWN_COLOR = "#D7BDE2"

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_clock(seconds: int) -> str:
    """Seconds to 'M:SS'. e.g. 95 -> '1:35'."""
    seconds = max(int(seconds), 0)
    return f"{seconds // 60}:{seconds % 60:02d}"


def progress_fraction(time_left: int, total: int) -> float:
    """Share of the ring still filled; a zero-length segment shows full."""
    if total <= 0:
        return 1.0
    return min(max(time_left / total, 0.0), 1.0)


def ring_view(snap: EngineSnapshot, countdown_total: int) -> tuple[str, int, float, str]:
    """Return (label, value, fraction, color) for the current engine state."""
    state = snap.workout_state
    if state == WorkoutState.COUNTDOWN:
        return (
            STATE_LABELS[state],
            snap.countdown,
            progress_fraction(snap.countdown, countdown_total),
            COUNTDOWN_COLOR,
        )
    if state == WorkoutState.RESTING:
        rest_total = snap.block.rest if snap.block is not None else 0
        return (
            STATE_LABELS[state],
            snap.time_left_in_rest,
            progress_fraction(snap.time_left_in_rest, rest_total),
            REST_COLOR,
        )
    if state in (WorkoutState.RUNNING, WorkoutState.PAUSED) and snap.current_phase is not None:
        return (
            PHASE_LABELS[snap.current_phase],
            snap.time_left_in_phase,
            progress_fraction(snap.time_left_in_phase, snap.total_time_in_phase),
            PHASE_COLORS[snap.current_phase],
        )
    return STATE_LABELS[state], 0, 1.0, COUNTDOWN_COLOR


def ring_svg(fraction: float, label: str, value: int, color: str, size: int = 240) -> str:
    """Circular progress ring with a big number in the middle."""
    stroke = 14
    radius = (size - stroke) / 2
    circumference = 2 * math.pi * radius
    offset = circumference * (1 - fraction)
    centre = size / 2
    return (
        f'<svg width="{size}" height="{size}" viewBox="0 0 {size} {size}">'
        f'<circle cx="{centre}" cy="{centre}" r="{radius:.1f}" fill="none" '
        f'stroke="#2C3E50" stroke-width="{stroke}"/>'
        f'<circle cx="{centre}" cy="{centre}" r="{radius:.1f}" fill="none" '
        f'stroke="{color}" stroke-width="{stroke}" stroke-linecap="round" '
        f'stroke-dasharray="{circumference:.2f}" stroke-dashoffset="{offset:.2f}" '
        f'transform="rotate(-90 {centre} {centre})"/>'
        f'<text x="50%" y="42%" text-anchor="middle" font-size="22" fill="#BDC3C7">{label}</text>'
        f'<text x="50%" y="64%" text-anchor="middle" font-size="64" font-family="monospace" '
        f'fill="#FFFFFF">{value}</text>'
        "</svg>"
    )


def block_summary(block: WorkoutBlock) -> str:
    """e.g. '4 x 10 @ 4-1-1, 6:40 under tension'."""
    return (
        f"{block.sets} x {block.reps} @ {format_tempo(block.tempo)}, "
        f"{format_clock(block.working_seconds)} under tension"
    )


def plan_to_frame(plan: WorkoutPlan, current_index: int | None = None) -> pd.DataFrame:
    """Tabulate a plan's blocks for display."""
    rows = []
    for i, block in enumerate(plan.blocks):
        rows.append({
            "": "▶" if i == current_index else "",
            "Exercise": block.exercise,
            "Sets": block.sets,
            "Reps": block.reps,
            "Tempo": format_tempo(block.tempo),
            "Rest (s)": block.rest,
            "Order": ORDER_LABELS[block.order],
            "Keyword": KEYWORD_LABELS[block.concentric_keyword],
        })
    return pd.DataFrame(rows)


# ---------------------------------------------------------------------------
# Cue playback
# ---------------------------------------------------------------------------


def tones_to_wav(events: list[CueEvent]) -> bytes | None:
    """Mix all tone events of one refresh into a single WAV clip."""
    kinds = [e.kind for e in events if e.channel == CueChannel.TONE and e.kind is not None]
    if not kinds:
        return None
    return to_wav_bytes(render_sequence(kinds))


def browser_cue_script(events: list[CueEvent]) -> str | None:
    """JavaScript that speaks and vibrates via browser APIs when available.

    Both APIs are feature-checked so unsupported browsers stay silent.
    """
    phrases = [e.text for e in events if e.channel == CueChannel.SPEECH]
    patterns = [list(e.pattern) for e in events if e.channel == CueChannel.HAPTIC]
    if not phrases and not patterns:
        return None
    vibration: list[int] = []
    for pattern in patterns:
        if vibration:
            vibration.append(50)
        vibration.extend(pattern)
    return (
        "<script>"
        "const w = window.parent || window;"
        f"const phrases = {json.dumps(phrases)};"
        f"const vibration = {json.dumps(vibration)};"
        "if ('speechSynthesis' in w) {"
        "  for (const p of phrases) {"
        "    const u = new w.SpeechSynthesisUtterance(p); u.rate = 1.2; w.speechSynthesis.speak(u);"
        "  }"
        "}"
        "if (vibration.length && w.navigator && w.navigator.vibrate) { w.navigator.vibrate(vibration); }"
        "</script>"
    )


# ---------------------------------------------------------------------------
# Plan persistence
# ---------------------------------------------------------------------------


def _ensure_plans_dir(plans_dir: Path = PLANS_DIR) -> Path:
    plans_dir.mkdir(parents=True, exist_ok=True)
    return plans_dir


def save_plan(plan: WorkoutPlan, plans_dir: Path = PLANS_DIR) -> Path:
    """Save a plan as JSON named after its session. Returns the file path."""
    d = _ensure_plans_dir(plans_dir)
    # Sanitise filename
    safe = "".join(c if c.isalnum() or c in "-_ " else "" for c in plan.session).strip()
    if not safe:
        safe = "plan"
    return save_plan_file(plan, d / f"{safe}.json")


def load_plan(name: str, plans_dir: Path = PLANS_DIR) -> WorkoutPlan:
    """Load a saved plan by name (without extension)."""
    return load_plan_file(plans_dir / f"{name}.json")


def list_plans(plans_dir: Path = PLANS_DIR) -> list[str]:
    """List saved plan names (without .json extension)."""
    d = _ensure_plans_dir(plans_dir)
    return sorted(p.stem for p in d.glob("*.json"))
