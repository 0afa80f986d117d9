"""Training presets and tempo-string helpers used when building a block by hand."""

from __future__ import annotations

import dataclasses

from tempo_engine.exceptions import PlanValidationError
from tempo_engine.models.enums import ConcentricKeyword, PhaseOrder
from tempo_engine.models.plan import Tempo, WorkoutBlock, WorkoutPlan

DEFAULT_BLOCK = WorkoutBlock(
    exercise="Custom Workout",
    sets=4,
    reps=10,
    tempo=Tempo(eccentric=4, pause=1, concentric=1),
    rest=90,
    order=PhaseOrder.ECC_PAUSE_CON,
    concentric_keyword=ConcentricKeyword.PUSH,
)

# Preset name -> fields replaced on the current block
PRESETS: dict[str, dict] = {
    "Strength": {
        "sets": 5,
        "reps": 5,
        "tempo": Tempo(eccentric=3, pause=1, concentric=1),
        "rest": 180,
    },
    "Hypertrophy": {
        "sets": 4,
        "reps": 10,
        "tempo": Tempo(eccentric=4, pause=1, concentric=1),
        "rest": 90,
    },
    "Endurance": {
        "sets": 3,
        "reps": 15,
        "tempo": Tempo(eccentric=2, pause=0, concentric=2),
        "rest": 45,
    },
}


def apply_preset(block: WorkoutBlock, name: str) -> WorkoutBlock:
    """Return *block* with the named preset's sets/reps/tempo/rest applied.

    Exercise name, phase order and keyword are kept.

    Raises:
        KeyError: if *name* is not a known preset.
    """
    return dataclasses.replace(block, **PRESETS[name])


def parse_tempo(text: str) -> Tempo:
    """Parse ``"ecc-pause-con"`` notation, e.g. ``"4-1-1"``."""
    parts = [p.strip() for p in text.strip().split("-")]
    if len(parts) != 3 or not all(p.isascii() and p.isdigit() for p in parts):
        raise PlanValidationError(
            f"tempo must look like '4-1-1' (three non-negative integers), got {text!r}",
            field="tempo",
        )
    ecc, pause, con = (int(p) for p in parts)
    return Tempo(eccentric=ecc, pause=pause, concentric=con)


def format_tempo(tempo: Tempo) -> str:
    return f"{tempo.eccentric}-{tempo.pause}-{tempo.concentric}"


def single_block_plan(block: WorkoutBlock) -> WorkoutPlan:
    """Wrap one hand-built block in a plan named after its exercise."""
    return WorkoutPlan(session=block.exercise, blocks=(block,))
