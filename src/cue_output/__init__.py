"""Cue output collaborators — every tone, phrase and vibration leaves through here."""

from cue_output.base import CueEmitter
from cue_output.emitters import (
    CueChannel,
    CueEvent,
    LoggingCueEmitter,
    NullCueEmitter,
    QueuedCueEmitter,
)
from cue_output.tones import TONE_SPECS, render_sequence, render_tone, to_wav_bytes

__all__ = [
    "CueChannel",
    "CueEmitter",
    "CueEvent",
    "LoggingCueEmitter",
    "NullCueEmitter",
    "QueuedCueEmitter",
    "TONE_SPECS",
    "render_sequence",
    "render_tone",
    "to_wav_bytes",
]
