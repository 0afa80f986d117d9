"""Enumerations and timing constants for the tempo engine.

Phase orders, cue kinds and haptic patterns are closed sets; everything the
engine emits or schedules is expressed in terms of these values.
"""

from enum import IntEnum, auto


class Phase(IntEnum):
    """The three timed segments of a single repetition."""

    ECCENTRIC = auto()   # lowering
    PAUSE = auto()
    CONCENTRIC = auto()  # lifting


class PhaseOrder(IntEnum):
    """Order in which a repetition's phases are executed."""

    ECC_PAUSE_CON = auto()
    CON_PAUSE_ECC = auto()

    @property
    def phases(self) -> tuple[Phase, Phase, Phase]:
        """Resolve to the ordered 3-phase sequence."""
        return PHASE_ORDER_TABLE[self]


class ConcentricKeyword(IntEnum):
    """Word spoken at the start of the concentric phase."""

    PUSH = auto()
    PULL = auto()

    @property
    def spoken(self) -> str:
        return self.name.lower()


class WorkoutState(IntEnum):
    """Top-level states of the workout engine."""

    IDLE = auto()
    COUNTDOWN = auto()
    RUNNING = auto()
    PAUSED = auto()
    RESTING = auto()
    FINISHED = auto()


class CueKind(IntEnum):
    """Tonal cue categories requested from the cue emitter."""

    TICK = auto()
    PHASE_END = auto()
    REP_END = auto()
    SET_END = auto()   # also rung as the set-start bell


PHASE_ORDER_TABLE: dict[PhaseOrder, tuple[Phase, Phase, Phase]] = {
    PhaseOrder.ECC_PAUSE_CON: (Phase.ECCENTRIC, Phase.PAUSE, Phase.CONCENTRIC),
    PhaseOrder.CON_PAUSE_ECC: (Phase.CONCENTRIC, Phase.PAUSE, Phase.ECCENTRIC),
}

# States in which the periodic tick source must be alive
TICKING_STATES = frozenset({
    WorkoutState.COUNTDOWN,
    WorkoutState.RUNNING,
    WorkoutState.RESTING,
})

# ---------------------------------------------------------------------------
# Timing constants
# ---------------------------------------------------------------------------
DEFAULT_COUNTDOWN_SECONDS = 5

# Rest seconds at or below this value are announced verbally
REST_FINAL_COUNTDOWN_S = 3

# ---------------------------------------------------------------------------
# Haptic patterns: alternating vibrate/pause durations in milliseconds
# ---------------------------------------------------------------------------
HAPTIC_PHASE_END: tuple[int, ...] = (50,)
HAPTIC_REP_END: tuple[int, ...] = (100, 50, 100)
HAPTIC_SET_END: tuple[int, ...] = (300,)
