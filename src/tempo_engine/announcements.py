"""Spoken announcements — the phrases the engine hands to the cue emitter.

Tonal cues are categorised by ``CueKind``; everything verbal is built here so
the engine never formats user-facing text itself.
"""

from __future__ import annotations

from tempo_engine.models.enums import ConcentricKeyword, Phase

START_PHRASE = "Start!"
PAUSE_PHRASE = "pause"
SESSION_COMPLETE_PHRASE = "Workout complete. Good job!"


def set_announcement(set_number: int, reps: int, countdown: int) -> str:
    """e.g. ``"Set 2, 10 reps. Starting in 5 seconds"``."""
    rep_word = "rep" if reps == 1 else "reps"
    sec_word = "second" if countdown == 1 else "seconds"
    return f"Set {set_number}, {reps} {rep_word}. Starting in {countdown} {sec_word}"


def phase_announcement(phase: Phase, keyword: ConcentricKeyword) -> str | None:
    """Word spoken when a timed phase begins, or None for silent phases.

    The eccentric phase is silent; it follows the previous tone directly.
    """
    if phase == Phase.PAUSE:
        return PAUSE_PHRASE
    if phase == Phase.CONCENTRIC:
        return keyword.spoken
    return None


def number_announcement(value: int) -> str:
    return str(value)


def block_announcement(exercise: str, index: int, total: int) -> str:
    """e.g. ``"Next: Bench Press, block 2 of 3"``."""
    return f"Next: {exercise}, block {index} of {total}"
