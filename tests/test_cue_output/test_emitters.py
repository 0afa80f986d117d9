"""Tests for the null, logging and queued cue emitters."""

from __future__ import annotations

import logging

from cue_output import CueChannel, CueEvent, LoggingCueEmitter, NullCueEmitter, QueuedCueEmitter
from tempo_engine.models.enums import CueKind


class TestNullCueEmitter:
    def test_accepts_everything(self) -> None:
        emitter = NullCueEmitter()
        emitter.emit_tone(CueKind.TICK)
        emitter.emit_speech("push")
        emitter.emit_haptic((50,))
        assert not emitter.supports_speech
        assert not emitter.supports_haptics


class TestLoggingCueEmitter:
    def test_logs_each_cue(self, caplog) -> None:
        emitter = LoggingCueEmitter()
        with caplog.at_level(logging.INFO, logger="cue_output.emitters"):
            emitter.emit_tone(CueKind.REP_END)
            emitter.emit_speech("pause")
            emitter.emit_haptic((100, 50, 100))
        assert "tone: REP_END" in caplog.text
        assert "speech: pause" in caplog.text
        assert "haptic: (100, 50, 100)" in caplog.text


class TestQueuedCueEmitter:
    def test_drain_returns_in_order_and_clears(self) -> None:
        emitter = QueuedCueEmitter()
        emitter.emit_speech("Start!")
        emitter.emit_tone(CueKind.SET_END)
        emitter.emit_haptic([300])
        assert emitter.pending == 3
        assert emitter.drain() == [
            CueEvent(channel=CueChannel.SPEECH, text="Start!"),
            CueEvent(channel=CueChannel.TONE, kind=CueKind.SET_END),
            CueEvent(channel=CueChannel.HAPTIC, pattern=(300,)),
        ]
        assert emitter.pending == 0
        assert emitter.drain() == []

    def test_unsupported_channels_are_dropped(self) -> None:
        emitter = QueuedCueEmitter(supports_speech=False, supports_haptics=False)
        emitter.emit_speech("push")
        emitter.emit_haptic((50,))
        emitter.emit_tone(CueKind.TICK)
        assert [e.channel for e in emitter.drain()] == [CueChannel.TONE]

    def test_overflow_drops_oldest(self, caplog) -> None:
        emitter = QueuedCueEmitter(max_pending=3)
        with caplog.at_level(logging.WARNING, logger="cue_output.emitters"):
            for n in range(5):
                emitter.emit_speech(str(n))
        assert [e.text for e in emitter.drain()] == ["2", "3", "4"]
        assert "Cue queue full" in caplog.text
