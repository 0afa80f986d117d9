"""WorkoutSession — the host that walks a plan block by block."""

from __future__ import annotations

import logging
from typing import Callable

from cue_output.base import CueEmitter
from tempo_engine import announcements
from tempo_engine.engine import WorkoutEngine
from tempo_engine.models.enums import CueKind
from tempo_engine.models.plan import WorkoutBlock, WorkoutPlan

logger = logging.getLogger(__name__)


class WorkoutSession:
    """Owns the plan and the block index; the engine only ever sees one block.

    The session shares the engine lock, so block advancement triggered from
    the tick thread cannot interleave with start/stop calls from the host.

    The session registers itself as the engine's block-completion callback.
    When a block finishes, the next one is assigned and started automatically;
    after the last block the session rings the bell, congratulates the user
    and clears itself.

    Usage:
        session = WorkoutSession(engine, emitter)
        session.start_plan(plan)
        ...
        session.stop()
    """

    def __init__(
        self,
        engine: WorkoutEngine,
        emitter: CueEmitter | None = None,
        on_session_complete: Callable[[WorkoutPlan], None] | None = None,
    ) -> None:
        self.engine = engine
        self.emitter = emitter or engine.emitter
        self.on_session_complete = on_session_complete
        self._plan: WorkoutPlan | None = None
        self._block_index = 0
        self._completed = False
        engine.on_block_complete = self._handle_block_complete

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def plan(self) -> WorkoutPlan | None:
        return self._plan

    @property
    def block_index(self) -> int:
        return self._block_index

    @property
    def current_block(self) -> WorkoutBlock | None:
        if self._plan is None:
            return None
        return self._plan.blocks[self._block_index]

    @property
    def is_active(self) -> bool:
        return self._plan is not None

    @property
    def is_complete(self) -> bool:
        """True once the last block has finished, until the next start or stop."""
        return self._completed

    @property
    def progress_label(self) -> str:
        if self._plan is None:
            return ""
        return f"Block {self._block_index + 1} of {len(self._plan)}"

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start_plan(self, plan: WorkoutPlan) -> None:
        """Begin *plan* from its first block."""
        with self.engine.lock:
            self._plan = plan
            self._block_index = 0
            self._completed = False
            logger.info("Starting session %r with %d block(s)", plan.session, len(plan))
            self.engine.assign_block(plan.blocks[0])
            self.engine.start()

    def stop(self) -> None:
        """Abort the session: reset the engine and forget the plan."""
        with self.engine.lock:
            self.engine.reset()
            self.engine.assign_block(None)
            if self._plan is not None:
                logger.info("Session %r stopped at %s", self._plan.session, self.progress_label)
            self._plan = None
            self._block_index = 0
            self._completed = False

    # ------------------------------------------------------------------
    # Engine callback
    # ------------------------------------------------------------------

    def _handle_block_complete(self) -> None:
        with self.engine.lock:
            plan = self._plan
            if plan is None:
                return
            if self._block_index < len(plan) - 1:
                self._block_index += 1
                block = plan.blocks[self._block_index]
                logger.info("Advancing to %s: %r", self.progress_label, block.exercise)
                self._tone(CueKind.SET_END)
                self._speak(
                    announcements.block_announcement(
                        block.exercise, self._block_index + 1, len(plan)
                    )
                )
                self.engine.assign_block(block)
                self.engine.start()
                return

            logger.info("Session %r complete", plan.session)
            self._tone(CueKind.SET_END)
            self._speak(announcements.SESSION_COMPLETE_PHRASE)
            self._plan = None
            self._block_index = 0
            self._completed = True

        if self.on_session_complete is not None:
            self.on_session_complete(plan)

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
