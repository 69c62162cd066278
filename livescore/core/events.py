"""Event types flowing through the quantization engine."""

import math
from dataclasses import dataclass
from enum import Enum
from numbers import Integral, Real
from typing import Tuple

import numpy as np

from .constants import MIDI_MAX, MIDI_MIN, PITCH_NAMES


def is_valid_timestamp(value) -> bool:
    """True for a finite real number (bools excluded)."""
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def is_valid_pitch(value) -> bool:
    """True for an integral MIDI pitch in 0..127 (bools excluded)."""
    return (
        isinstance(value, Integral)
        and not isinstance(value, bool)
        and MIDI_MIN <= value <= MIDI_MAX
    )


class Stave(str, Enum):
    """Staff a note is rendered on."""

    UPPER = "treble"
    LOWER = "bass"


class ColorHint(str, Enum):
    """Rendering hint: whether a note landed on the beat."""

    ON_BEAT = "blue"
    OFF_BEAT = "black"


@dataclass(frozen=True)
class NoteEvent:
    """A performed note onset waiting to be quantized."""

    pitch: int  # MIDI pitch (0-127)
    stave: Stave
    timestamp: float  # ms

    @property
    def pitch_name(self) -> str:
        """Get note name (e.g., 'C4', 'A#3')."""
        octave = (self.pitch // 12) - 1
        return f"{PITCH_NAMES[self.pitch % 12]}{octave}"


@dataclass(frozen=True)
class BeatDetection:
    """A positive beat classification."""

    timestamp: float  # ms
    is_downbeat: bool = False


@dataclass(frozen=True)
class BeatGroup:
    """Near-simultaneous detections judged to be one perceptual beat."""

    detections: Tuple[BeatDetection, ...]

    def __post_init__(self) -> None:
        if not self.detections:
            raise ValueError("BeatGroup needs at least one detection")

    def __len__(self) -> int:
        return len(self.detections)

    @property
    def first(self) -> BeatDetection:
        return self.detections[0]

    @property
    def last(self) -> BeatDetection:
        return self.detections[-1]

    @property
    def representative_time(self) -> float:
        """Recency-weighted onset time; member i weighs (i + 1) ** 2."""
        if len(self.detections) == 1:
            return self.detections[0].timestamp
        times = np.array([d.timestamp for d in self.detections], dtype=np.float64)
        weights = np.arange(1, len(times) + 1, dtype=np.float64) ** 2
        return float(np.average(times, weights=weights))

    def extended(self, detection: BeatDetection) -> "BeatGroup":
        """Return a copy of this group with one more member."""
        return BeatGroup(self.detections + (detection,))


@dataclass(frozen=True)
class NotationEvent:
    """A finalized, quantized note ready for rendering."""

    pitch: int
    stave: Stave
    starts_new_bar: bool
    position_in_measure: int  # tatum units from measure start
    duration_unit: int  # note type: 2, 4, 8, 16, 32
    color_hint: ColorHint
    timestamp: float = 0.0  # performed onset, ms

    @property
    def on_beat(self) -> bool:
        return self.color_hint is ColorHint.ON_BEAT
