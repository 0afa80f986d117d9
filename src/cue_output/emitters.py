"""Concrete cue emitters: null fallback, logging and a drainable queue."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import IntEnum, auto

from cue_output.base import CueEmitter
from tempo_engine.models.enums import CueKind

logger = logging.getLogger(__name__)


class CueChannel(IntEnum):
    TONE = auto()
    SPEECH = auto()
    HAPTIC = auto()


@dataclass(frozen=True)
class CueEvent:
    """One buffered cue. Exactly one payload field is set, matching ``channel``."""

    channel: CueChannel
    kind: CueKind | None = None
    text: str = ""
    pattern: tuple[int, ...] = ()


class NullCueEmitter(CueEmitter):
    """Silently drops every cue. Used when the host has no output at all."""

    def emit_tone(self, kind: CueKind) -> None:
        pass

    def emit_speech(self, text: str) -> None:
        pass

    def emit_haptic(self, pattern: tuple[int, ...]) -> None:
        pass


class LoggingCueEmitter(CueEmitter):
    """Writes every cue to the log. Handy for headless runs."""

    supports_speech = True

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    def emit_tone(self, kind: CueKind) -> None:
        logger.log(self._level, "tone: %s", kind.name)

    def emit_speech(self, text: str) -> None:
        logger.log(self._level, "speech: %s", text)

    def emit_haptic(self, pattern: tuple[int, ...]) -> None:
        logger.log(self._level, "haptic: %s", pattern)


class QueuedCueEmitter(CueEmitter):
    """Buffers cues until the host drains them.

    The engine may emit from a scheduler thread while the host drains from
    its UI thread, so the buffer is guarded by a lock. When ``max_pending``
    is reached the oldest events are dropped; stale cues are worthless.
    """

    def __init__(
        self,
        supports_speech: bool = True,
        supports_haptics: bool = True,
        max_pending: int = 64,
    ) -> None:
        self.supports_speech = supports_speech
        self.supports_haptics = supports_haptics
        self._max_pending = max_pending
        self._events: list[CueEvent] = []
        self._lock = threading.Lock()

    def emit_tone(self, kind: CueKind) -> None:
        self._push(CueEvent(channel=CueChannel.TONE, kind=kind))

    def emit_speech(self, text: str) -> None:
        if not self.supports_speech:
            logger.debug("Speech unsupported, dropping %r", text)
            return
        self._push(CueEvent(channel=CueChannel.SPEECH, text=text))

    def emit_haptic(self, pattern: tuple[int, ...]) -> None:
        if not self.supports_haptics:
            return
        self._push(CueEvent(channel=CueChannel.HAPTIC, pattern=tuple(pattern)))

    def drain(self) -> list[CueEvent]:
        """Return and clear all pending events, oldest first."""
        with self._lock:
            events, self._events = self._events, []
        return events

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._events)

    def _push(self, event: CueEvent) -> None:
        with self._lock:
            self._events.append(event)
            overflow = len(self._events) - self._max_pending
            if overflow > 0:
                del self._events[:overflow]
                logger.warning("Cue queue full, dropped %d stale cue(s)", overflow)
