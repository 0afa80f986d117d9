"""Run-time state of the workout engine.

``EngineRunState`` is the mutable record owned by the engine. Observers only
ever receive an ``EngineSnapshot``, a frozen copy taken under the engine lock.
"""

from __future__ import annotations

from dataclasses import dataclass

from tempo_engine.models.enums import DEFAULT_COUNTDOWN_SECONDS, Phase, WorkoutState
from tempo_engine.models.plan import WorkoutBlock


@dataclass
class EngineRunState:
    workout_state: WorkoutState = WorkoutState.IDLE
    countdown: int = DEFAULT_COUNTDOWN_SECONDS
    current_set: int = 1
    current_rep: int = 1
    phase_index: int = 0
    time_left_in_phase: int = 0
    time_left_in_rest: int = 0

    def reset(self, countdown: int) -> None:
        """Return every field to its IDLE default."""
        self.workout_state = WorkoutState.IDLE
        self.countdown = countdown
        self.current_set = 1
        self.current_rep = 1
        self.phase_index = 0
        self.time_left_in_phase = 0
        self.time_left_in_rest = 0


@dataclass(frozen=True)
class EngineSnapshot:
    """Read-only view of the engine handed to the presentation layer."""

    workout_state: WorkoutState
    countdown: int
    current_set: int
    current_rep: int
    phase_index: int
    time_left_in_phase: int
    time_left_in_rest: int
    current_phase: Phase | None = None
    total_time_in_phase: int = 0
    block: WorkoutBlock | None = None

    @property
    def is_active(self) -> bool:
        """True while a run is in progress (including paused)."""
        return self.workout_state not in (WorkoutState.IDLE, WorkoutState.FINISHED)
