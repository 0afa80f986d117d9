"""Abstract cue emitter consumed by the workout engine."""

from __future__ import annotations

from abc import ABC, abstractmethod

from tempo_engine.models.enums import CueKind


class CueEmitter(ABC):
    """Plays the cues the engine requests.

    All three methods are best-effort. Implementations on hosts without a
    capability should report it through ``supports_speech`` /
    ``supports_haptics`` and treat the call as a no-op rather than raising.
    """

    supports_speech: bool = False
    supports_haptics: bool = False

    @abstractmethod
    def emit_tone(self, kind: CueKind) -> None:
        """Play the tone mapped to *kind*."""
        ...

    @abstractmethod
    def emit_speech(self, text: str) -> None:
        """Speak *text*. Must not block the caller."""
        ...

    @abstractmethod
    def emit_haptic(self, pattern: tuple[int, ...]) -> None:
        """Vibrate with alternating on/off durations in milliseconds."""
        ...
