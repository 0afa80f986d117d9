"""WorkoutEngine — the timing state machine that runs one block at a time."""

from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable

from cue_output.base import CueEmitter
from cue_output.emitters import NullCueEmitter
from tempo_engine import announcements
from tempo_engine.config import COUNTDOWN_SECONDS, TICK_INTERVAL_S
from tempo_engine.models.enums import (
    HAPTIC_PHASE_END,
    HAPTIC_REP_END,
    HAPTIC_SET_END,
    REST_FINAL_COUNTDOWN_S,
    TICKING_STATES,
    CueKind,
    Phase,
    WorkoutState,
)
from tempo_engine.models.plan import WorkoutBlock
from tempo_engine.models.run_state import EngineRunState, EngineSnapshot
from tempo_engine.ticking import ManualTickSource, TickHandle, TickSource

logger = logging.getLogger(__name__)


class WorkoutEngine:
    """Drives a single WorkoutBlock through countdown, reps, phases and rest.

    All run-time counters live in one ``EngineRunState`` owned by the engine.
    A single periodic task from ``tick_source`` calls ``tick()`` once per
    second; its handle is replaced on every entry into a ticking state and
    cancelled on every exit, so stale timers can never double-decrement.

    Control actions that do not apply to the current state are no-ops; the
    engine never raises from a control call or from inside the tick loop.

    Usage:
        engine = WorkoutEngine(emitter=LoggingCueEmitter(),
                               tick_source=SchedulerTickSource(),
                               on_block_complete=host.next_block)
        engine.assign_block(block)
        engine.start()
    """

    def __init__(
        self,
        emitter: CueEmitter | None = None,
        tick_source: TickSource | None = None,
        on_block_complete: Callable[[], None] | None = None,
        countdown_seconds: int = COUNTDOWN_SECONDS,
        tick_interval_s: float = TICK_INTERVAL_S,
    ) -> None:
        if countdown_seconds < 1:
            raise ValueError(f"countdown_seconds must be at least 1, got {countdown_seconds}")
        self.emitter = emitter or NullCueEmitter()
        self.tick_source = tick_source or ManualTickSource()
        self.on_block_complete = on_block_complete
        self.countdown_seconds = countdown_seconds
        self.tick_interval_s = tick_interval_s

        # Guards run state; hosts coordinating with the engine may hold it too
        self.lock = threading.RLock()
        self._run = EngineRunState(countdown=countdown_seconds)
        self._block: WorkoutBlock | None = None
        self._phases: tuple[Phase, ...] = ()

        self._tick_handle: TickHandle | None = None
        self._tick_tokens = itertools.count(1)
        self._active_token = 0

    # ------------------------------------------------------------------
    # Block assignment & observation
    # ------------------------------------------------------------------

    @property
    def block(self) -> WorkoutBlock | None:
        return self._block

    def assign_block(self, block: WorkoutBlock | None) -> None:
        """Hand the engine a new block. A different block resets the run."""
        with self.lock:
            if block is self._block:
                return
            self._block = block
            self._phases = block.phase_sequence if block is not None else ()
            self._reset_locked()
            if block is not None:
                logger.debug("Assigned block %r", block.exercise)

    @property
    def state(self) -> WorkoutState:
        return self._run.workout_state

    def snapshot(self) -> EngineSnapshot:
        """Consistent copy of the run state for rendering."""
        with self.lock:
            run = self._run
            phase = self._current_phase()
            return EngineSnapshot(
                workout_state=run.workout_state,
                countdown=run.countdown,
                current_set=run.current_set,
                current_rep=run.current_rep,
                phase_index=run.phase_index,
                time_left_in_phase=run.time_left_in_phase,
                time_left_in_rest=run.time_left_in_rest,
                current_phase=phase,
                total_time_in_phase=self._phase_duration(),
                block=self._block,
            )

    # ------------------------------------------------------------------
    # Control actions
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Reset counters and begin the pre-set countdown."""
        with self.lock:
            if self._block is None:
                logger.debug("start() ignored: no block assigned")
                return
            self._reset_locked()
            self._announce_set()
            self._set_state(WorkoutState.COUNTDOWN)

    def pause(self) -> None:
        with self.lock:
            if self._run.workout_state != WorkoutState.RUNNING:
                logger.debug("pause() ignored in %s", self._run.workout_state.name)
                return
            self._set_state(WorkoutState.PAUSED)

    def resume(self) -> None:
        with self.lock:
            if self._run.workout_state != WorkoutState.PAUSED:
                logger.debug("resume() ignored in %s", self._run.workout_state.name)
                return
            self._set_state(WorkoutState.RUNNING)

    def skip_rest(self) -> None:
        """End the current rest immediately."""
        with self.lock:
            if self._run.workout_state != WorkoutState.RESTING:
                logger.debug("skip_rest() ignored in %s", self._run.workout_state.name)
                return
            self._advance_set()

    def add_rest_time(self, seconds: int) -> None:
        """Extend the current rest by *seconds* (must be positive)."""
        with self.lock:
            if self._run.workout_state != WorkoutState.RESTING:
                logger.debug("add_rest_time() ignored in %s", self._run.workout_state.name)
                return
            if seconds <= 0:
                logger.debug("add_rest_time() ignored for non-positive %r", seconds)
                return
            self._run.time_left_in_rest += seconds

    def reset(self) -> None:
        """Stop ticking and return to IDLE from any state."""
        with self.lock:
            self._reset_locked()

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Advance the run by one second. Called by the tick source."""
        with self.lock:
            state = self._run.workout_state
            if state == WorkoutState.COUNTDOWN:
                self._tick_countdown()
            elif state == WorkoutState.RUNNING:
                self._tick_running()
            elif state == WorkoutState.RESTING:
                self._tick_resting()

    def _on_tick(self, token: int) -> None:
        with self.lock:
            if token != self._active_token:
                # fired after its handle was replaced or cancelled
                return
            try:
                self.tick()
            except Exception:
                logger.exception("Tick processing failed in %s", self._run.workout_state.name)

    def _tick_countdown(self) -> None:
        run = self._run
        remaining = run.countdown - 1
        if remaining > 0:
            self._speak(announcements.number_announcement(remaining))
            run.countdown = remaining
            return
        self._speak(announcements.START_PHRASE)
        self._tone(CueKind.SET_END)
        run.countdown = 0
        run.phase_index = 0
        self._set_state(WorkoutState.RUNNING)
        self._enter_phase()

    def _tick_running(self) -> None:
        run = self._run
        remaining = run.time_left_in_phase - 1
        if remaining > 0:
            self._tone(CueKind.TICK)
            run.time_left_in_phase = remaining
            return
        run.time_left_in_phase = 0
        self._complete_phase()
        self._enter_phase()

    def _tick_resting(self) -> None:
        run = self._run
        remaining = run.time_left_in_rest - 1
        if remaining > 0:
            if remaining <= REST_FINAL_COUNTDOWN_S:
                self._speak(announcements.number_announcement(remaining))
            run.time_left_in_rest = remaining
            return
        run.time_left_in_rest = 0
        self._advance_set()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _enter_phase(self) -> None:
        """Load the current phase's duration, cascading through zero-length phases.

        Iterative so that a long block of zero tempos cannot exhaust the stack.
        """
        while self._run.workout_state == WorkoutState.RUNNING:
            duration = self._phase_duration()
            self._run.time_left_in_phase = duration
            if duration > 0:
                phrase = announcements.phase_announcement(
                    self._current_phase(), self._block.concentric_keyword
                )
                if phrase:
                    self._speak(phrase)
                return
            self._complete_phase()

    def _complete_phase(self) -> None:
        """Close the current phase and step the rep/set counters."""
        run = self._run
        block = self._block
        self._tone(CueKind.PHASE_END)
        self._haptic(HAPTIC_PHASE_END)

        if run.phase_index < len(self._phases) - 1:
            run.phase_index += 1
            return

        self._tone(CueKind.REP_END)
        self._haptic(HAPTIC_REP_END)
        if run.current_rep < block.reps:
            run.current_rep += 1
            run.phase_index = 0
            return

        self._tone(CueKind.SET_END)
        self._haptic(HAPTIC_SET_END)
        if run.current_set < block.sets:
            self._begin_rest()
        else:
            self._finish()

    def _begin_rest(self) -> None:
        run = self._run
        run.time_left_in_phase = 0
        run.time_left_in_rest = self._block.rest
        if self._block.rest == 0:
            self._advance_set()
            return
        self._set_state(WorkoutState.RESTING)

    def _advance_set(self) -> None:
        """Shared by rest expiry and skip_rest: next set's countdown, or finish."""
        run = self._run
        run.time_left_in_rest = 0
        if run.current_set >= self._block.sets:
            self._finish()
            return
        run.current_set += 1
        run.current_rep = 1
        run.phase_index = 0
        run.time_left_in_phase = 0
        run.countdown = self.countdown_seconds
        self._announce_set()
        self._set_state(WorkoutState.COUNTDOWN)

    def _finish(self) -> None:
        run = self._run
        run.time_left_in_phase = 0
        run.time_left_in_rest = 0
        self._set_state(WorkoutState.FINISHED)
        logger.info("Block %r complete", self._block.exercise)
        if self.on_block_complete is not None:
            try:
                self.on_block_complete()
            except Exception:
                logger.exception("on_block_complete callback failed")

    def _reset_locked(self) -> None:
        self._cancel_ticks()
        self._run.reset(self.countdown_seconds)

    def _set_state(self, new_state: WorkoutState) -> None:
        old_state = self._run.workout_state
        self._run.workout_state = new_state
        if new_state in TICKING_STATES:
            self._restart_ticks()
        else:
            self._cancel_ticks()
        logger.debug("%s -> %s", old_state.name, new_state.name)

    # ------------------------------------------------------------------
    # Tick source management
    # ------------------------------------------------------------------

    def _restart_ticks(self) -> None:
        self._cancel_ticks()
        token = next(self._tick_tokens)
        self._active_token = token
        self._tick_handle = self.tick_source.schedule(
            lambda: self._on_tick(token), self.tick_interval_s
        )

    def _cancel_ticks(self) -> None:
        self._active_token = 0
        if self._tick_handle is not None:
            handle, self._tick_handle = self._tick_handle, None
            handle.cancel()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _current_phase(self) -> Phase | None:
        if not self._phases:
            return None
        return self._phases[self._run.phase_index]

    def _phase_duration(self) -> int:
        phase = self._current_phase()
        if phase is None:
            return 0
        return self._block.tempo.duration_of(phase)

    def _announce_set(self) -> None:
        self._speak(
            announcements.set_announcement(
                self._run.current_set, self._block.reps, self._run.countdown
            )
        )

    # Emitter calls are best-effort: a failing collaborator must not stop the run.

    def _tone(self, kind: CueKind) -> None:
        try:
            self.emitter.emit_tone(kind)
        except Exception:
            logger.warning("Tone cue %s failed", kind.name, exc_info=True)

    def _speak(self, text: str) -> None:
        try:
            self.emitter.emit_speech(text)
        except Exception:
            logger.warning("Speech cue %r failed", text, exc_info=True)

    def _haptic(self, pattern: tuple[int, ...]) -> None:
        try:
            self.emitter.emit_haptic(pattern)
        except Exception:
            logger.warning("Haptic cue %s failed", pattern, exc_info=True)
