"""Workout plan models — tempo, blocks and sessions."""

from __future__ import annotations

from dataclasses import dataclass

from tempo_engine.exceptions import PlanValidationError
from tempo_engine.models.enums import ConcentricKeyword, Phase, PhaseOrder


def _require_int(value: object, name: str, minimum: int) -> None:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int):
        raise PlanValidationError(f"{name} must be an integer, got {value!r}", field=name)
    if value < minimum:
        bound = "positive" if minimum > 0 else "non-negative"
        raise PlanValidationError(f"{name} must be {bound}, got {value}", field=name)


@dataclass(frozen=True)
class Tempo:
    """Seconds dedicated to each phase of one repetition."""

    eccentric: int
    pause: int
    concentric: int

    def __post_init__(self) -> None:
        _require_int(self.eccentric, "tempo.eccentric", 0)
        _require_int(self.pause, "tempo.pause", 0)
        _require_int(self.concentric, "tempo.concentric", 0)

    def duration_of(self, phase: Phase) -> int:
        if phase == Phase.ECCENTRIC:
            return self.eccentric
        if phase == Phase.PAUSE:
            return self.pause
        return self.concentric

    @property
    def rep_duration(self) -> int:
        """Total seconds of one repetition."""
        return self.eccentric + self.pause + self.concentric


@dataclass(frozen=True)
class WorkoutBlock:
    """One exercise's full prescription.

    Immutable once a run starts; the engine only ever reads it.
    """

    exercise: str
    sets: int
    reps: int
    tempo: Tempo
    rest: int                      # seconds between sets
    order: PhaseOrder = PhaseOrder.ECC_PAUSE_CON
    concentric_keyword: ConcentricKeyword = ConcentricKeyword.PUSH

    def __post_init__(self) -> None:
        if not isinstance(self.exercise, str):
            raise PlanValidationError("exercise must be a string", field="exercise")
        _require_int(self.sets, "sets", 1)
        _require_int(self.reps, "reps", 1)
        _require_int(self.rest, "rest", 0)
        if not isinstance(self.tempo, Tempo):
            raise PlanValidationError("tempo must be a Tempo", field="tempo")

    @property
    def phase_sequence(self) -> tuple[Phase, Phase, Phase]:
        return self.order.phases

    @property
    def working_seconds(self) -> int:
        """Seconds under tension across all sets, excluding rest and countdowns."""
        return self.sets * self.reps * self.tempo.rep_duration


@dataclass(frozen=True)
class WorkoutPlan:
    """An ordered sequence of blocks forming one session."""

    session: str
    blocks: tuple[WorkoutBlock, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", tuple(self.blocks))
        if not self.blocks:
            raise PlanValidationError("plan must contain at least one block", field="blocks")

    def __len__(self) -> int:
        return len(self.blocks)
