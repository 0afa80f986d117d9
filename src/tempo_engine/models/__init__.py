"""Data models for the tempo engine."""

from tempo_engine.models.enums import (
    ConcentricKeyword,
    CueKind,
    Phase,
    PhaseOrder,
    WorkoutState,
)
from tempo_engine.models.plan import Tempo, WorkoutBlock, WorkoutPlan
from tempo_engine.models.run_state import EngineRunState, EngineSnapshot

__all__ = [
    "ConcentricKeyword",
    "CueKind",
    "EngineRunState",
    "EngineSnapshot",
    "Phase",
    "PhaseOrder",
    "Tempo",
    "WorkoutBlock",
    "WorkoutPlan",
    "WorkoutState",
]
