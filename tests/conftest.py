"""Shared test fixtures: sample blocks, a recording cue emitter, deterministic ticks."""

from __future__ import annotations

from typing import Callable

import pytest

from cue_output.base import CueEmitter
from tempo_engine.engine import WorkoutEngine
from tempo_engine.models.enums import ConcentricKeyword, CueKind, PhaseOrder, WorkoutState
from tempo_engine.models.plan import Tempo, WorkoutBlock
from tempo_engine.ticking import ManualTickSource


class RecordingCueEmitter(CueEmitter):
    """Captures every cue, plus the engine state at the moment it was emitted."""

    supports_speech = True
    supports_haptics = True

    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []
        self.states: list[WorkoutState | None] = []
        self.engine: WorkoutEngine | None = None

    def _record(self, channel: str, payload: object) -> None:
        self.events.append((channel, payload))
        self.states.append(self.engine.state if self.engine is not None else None)

    def emit_tone(self, kind: CueKind) -> None:
        self._record("tone", kind)

    def emit_speech(self, text: str) -> None:
        self._record("speech", text)

    def emit_haptic(self, pattern: tuple[int, ...]) -> None:
        self._record("haptic", pattern)

    def tones(self, kind: CueKind | None = None) -> list[CueKind]:
        return [p for c, p in self.events if c == "tone" and (kind is None or p == kind)]

    def speeches(self) -> list[str]:
        return [p for c, p in self.events if c == "speech"]

    def haptics(self) -> list[tuple[int, ...]]:
        return [p for c, p in self.events if c == "haptic"]

    def clear(self) -> None:
        self.events.clear()
        self.states.clear()


@pytest.fixture
def recorder() -> RecordingCueEmitter:
    return RecordingCueEmitter()


@pytest.fixture
def ticker() -> ManualTickSource:
    return ManualTickSource()


@pytest.fixture
def block_factory() -> Callable[..., WorkoutBlock]:
    """Factory fixture for WorkoutBlock instances.

    Usage:
        block = block_factory(sets=2, reps=3, tempo=(2, 0, 1), rest=10)
    """

    def _make(
        exercise: str = "Bench Press",
        sets: int = 2,
        reps: int = 2,
        tempo: tuple[int, int, int] = (2, 1, 1),
        rest: int = 5,
        order: PhaseOrder = PhaseOrder.ECC_PAUSE_CON,
        keyword: ConcentricKeyword = ConcentricKeyword.PUSH,
    ) -> WorkoutBlock:
        return WorkoutBlock(
            exercise=exercise,
            sets=sets,
            reps=reps,
            tempo=Tempo(*tempo),
            rest=rest,
            order=order,
            concentric_keyword=keyword,
        )

    return _make


@pytest.fixture
def completions() -> list[int]:
    """Counter list appended to by the engine's block-complete callback."""
    return []


@pytest.fixture
def engine_factory(
    recorder: RecordingCueEmitter,
    ticker: ManualTickSource,
    completions: list[int],
) -> Callable[..., WorkoutEngine]:
    """Build an engine wired to the recorder and manual ticker, block assigned."""

    def _make(block: WorkoutBlock | None, countdown: int = 5) -> WorkoutEngine:
        engine = WorkoutEngine(
            emitter=recorder,
            tick_source=ticker,
            on_block_complete=lambda: completions.append(1),
            countdown_seconds=countdown,
        )
        recorder.engine = engine
        engine.assign_block(block)
        return engine

    return _make


@pytest.fixture
def run_until(ticker: ManualTickSource) -> Callable[..., int]:
    """Tick until the engine reaches a state. Returns the number of ticks used.

    Usage:
        used = run_until(engine, WorkoutState.RESTING)
    """

    def _run(engine: WorkoutEngine, state: WorkoutState, limit: int = 10_000) -> int:
        for used in range(limit + 1):
            if engine.state == state:
                return used
            ticker.advance()
        raise AssertionError(f"engine never reached {state.name}; stuck in {engine.state.name}")

    return _run
