"""Tone synthesis for the four cue kinds.

Each kind has a distinct pitch, length and envelope. SET_END is a bell built
from inharmonic partials so it stands out from the single-sine beeps.
All functions are pure (no audio device access).
"""

from __future__ import annotations

import io
import wave
from dataclasses import dataclass
from typing import Iterable

import numpy as np

from tempo_engine.config import SAMPLE_RATE
from tempo_engine.models.enums import CueKind

_PEAK_GAIN = 0.5


@dataclass(frozen=True)
class ToneSpec:
    """Synthesis parameters for one cue kind.

    ``partials`` are frequency multipliers of ``base_hz``; a single 1.0
    partial is a plain sine.
    """

    base_hz: float
    duration_s: float
    attack_s: float
    floor_gain: float                   # gain reached at the end of the decay
    partials: tuple[float, ...] = (1.0,)


TONE_SPECS: dict[CueKind, ToneSpec] = {
    CueKind.TICK: ToneSpec(440.0, 0.08, 0.01, 1e-5),        # A4
    CueKind.PHASE_END: ToneSpec(660.0, 0.15, 0.01, 1e-5),   # E5
    CueKind.REP_END: ToneSpec(880.0, 0.20, 0.01, 1e-5),     # A5
    CueKind.SET_END: ToneSpec(
        440.0, 1.5, 0.02, 1e-4,
        partials=(0.56, 0.92, 1.19, 1.71, 2.0, 2.74, 3.0, 3.76),
    ),
}


def envelope(spec: ToneSpec, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Linear attack to the peak gain followed by an exponential decay."""
    n = max(int(round(spec.duration_s * sample_rate)), 1)
    t = np.arange(n, dtype=np.float64) / sample_rate
    env = np.empty(n, dtype=np.float64)

    attack = t < spec.attack_s
    env[attack] = _PEAK_GAIN * t[attack] / spec.attack_s

    decay_len = spec.duration_s - spec.attack_s
    progress = (t[~attack] - spec.attack_s) / decay_len
    env[~attack] = _PEAK_GAIN * (spec.floor_gain / _PEAK_GAIN) ** progress
    return env


def render_tone(kind: CueKind, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Render *kind* as float samples in [-1, 1]."""
    spec = TONE_SPECS[kind]
    env = envelope(spec, sample_rate)
    t = np.arange(env.size, dtype=np.float64) / sample_rate
    freqs = spec.base_hz * np.asarray(spec.partials, dtype=np.float64)
    wave_sum = np.sin(2.0 * np.pi * np.outer(freqs, t)).sum(axis=0)
    return wave_sum / len(spec.partials) * env


def render_sequence(
    kinds: Iterable[CueKind],
    gap_s: float = 0.05,
    sample_rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Concatenate several cues with a short silence between them."""
    gap = np.zeros(int(round(gap_s * sample_rate)), dtype=np.float64)
    parts: list[np.ndarray] = []
    for kind in kinds:
        if parts:
            parts.append(gap)
        parts.append(render_tone(kind, sample_rate))
    if not parts:
        return np.zeros(0, dtype=np.float64)
    return np.concatenate(parts)


def to_wav_bytes(samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    """Encode float samples as 16-bit mono PCM WAV."""
    pcm = (np.clip(samples, -1.0, 1.0) * 32767).astype(np.int16)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()
