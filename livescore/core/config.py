"""Tunable settings for the quantization engine and hand separator."""

from dataclasses import dataclass, fields
from numbers import Integral
from typing import Any, Dict, Mapping

from .constants import (
    DEBOUNCE_FLOOR_MS,
    DEFAULT_DURATION_UNIT,
    DEFAULT_INTERVAL_MS,
    DEFAULT_TATUM,
    GROUP_WINDOW_MS,
    HAND_LEARNING_RATE,
    HARD_LOWER_CEILING,
    HARD_UPPER_FLOOR,
    LEFT_HAND_INITIAL,
    MAX_TEMPO_JUMP,
    MIN_BEAT_DURATION_MS,
    NOTE_TYPES,
    ON_BEAT_TOLERANCE_MS,
    RIGHT_HAND_INITIAL,
    TEMPO_SMOOTHING,
)


def _from_mapping(cls, data: Mapping[str, Any]):
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} option(s): {sorted(unknown)}")
    return cls(**dict(data))


@dataclass
class ScorifyConfig:
    """Configuration for the onset quantizer.

    Attributes:
        grouping_window_ms: Max gap between chained detections of one beat group
        max_tempo_jump: Interval ratio above which a gap is treated as missed beats
        on_beat_tolerance_ms: Distance from the beat that snaps a note onto it
        tempo_smoothing: Weight of a new interval in the moving average
        debounce_floor_ms: Intervals shorter than this never update the tempo
        default_interval_ms: Starting beat interval (500 ms = 120 BPM)
        min_beat_duration_ms: Floor for the interpolation denominator
        tatum_units_per_beat: Grid subdivisions per beat
        duration_unit: Note type reported with every emission
    """

    grouping_window_ms: float = GROUP_WINDOW_MS
    max_tempo_jump: float = MAX_TEMPO_JUMP
    on_beat_tolerance_ms: float = ON_BEAT_TOLERANCE_MS
    tempo_smoothing: float = TEMPO_SMOOTHING
    debounce_floor_ms: float = DEBOUNCE_FLOOR_MS
    default_interval_ms: float = DEFAULT_INTERVAL_MS
    min_beat_duration_ms: float = MIN_BEAT_DURATION_MS
    tatum_units_per_beat: int = DEFAULT_TATUM
    duration_unit: int = DEFAULT_DURATION_UNIT

    def __post_init__(self) -> None:
        if self.grouping_window_ms <= 0:
            raise ValueError(f"grouping_window_ms must be > 0, got {self.grouping_window_ms}")
        if self.max_tempo_jump <= 1.0:
            raise ValueError(f"max_tempo_jump must be > 1, got {self.max_tempo_jump}")
        if self.on_beat_tolerance_ms < 0:
            raise ValueError(f"on_beat_tolerance_ms must be >= 0, got {self.on_beat_tolerance_ms}")
        if not (0.0 < self.tempo_smoothing <= 1.0):
            raise ValueError(f"tempo_smoothing must be in (0, 1], got {self.tempo_smoothing}")
        if self.debounce_floor_ms < 0:
            raise ValueError(f"debounce_floor_ms must be >= 0, got {self.debounce_floor_ms}")
        if self.default_interval_ms <= 0:
            raise ValueError(f"default_interval_ms must be > 0, got {self.default_interval_ms}")
        if self.min_beat_duration_ms <= 0:
            raise ValueError(f"min_beat_duration_ms must be > 0, got {self.min_beat_duration_ms}")
        tatum = self.tatum_units_per_beat
        if isinstance(tatum, bool) or not isinstance(tatum, Integral) or tatum < 1:
            raise ValueError(f"tatum_units_per_beat must be >= 1, got {self.tatum_units_per_beat}")
        if self.duration_unit not in NOTE_TYPES:
            raise ValueError(f"duration_unit should be one of {NOTE_TYPES}, got {self.duration_unit}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScorifyConfig":
        """Build a config from a plain mapping, rejecting unknown keys."""
        return _from_mapping(cls, data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class HandConfig:
    """Configuration for online hand separation.

    Attributes:
        left_initial: Starting left-hand centroid (MIDI pitch)
        right_initial: Starting right-hand centroid (MIDI pitch)
        upper_floor: Pitches above this are always upper stave
        lower_ceiling: Pitches below this are always lower stave
        alpha: Centroid learning rate
    """

    left_initial: float = LEFT_HAND_INITIAL
    right_initial: float = RIGHT_HAND_INITIAL
    upper_floor: int = HARD_UPPER_FLOOR
    lower_ceiling: int = HARD_LOWER_CEILING
    alpha: float = HAND_LEARNING_RATE

    def __post_init__(self) -> None:
        if self.left_initial > self.right_initial - 1:
            raise ValueError(
                f"left_initial must be at least 1 below right_initial, "
                f"got {self.left_initial} / {self.right_initial}"
            )
        if self.lower_ceiling > self.upper_floor:
            raise ValueError(
                f"lower_ceiling must be <= upper_floor, got {self.lower_ceiling} / {self.upper_floor}"
            )
        if not (0.0 < self.alpha <= 1.0):
            raise ValueError(f"alpha must be in (0, 1], got {self.alpha}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HandConfig":
        return _from_mapping(cls, data)


def compute_tatum(min_beat_level: int) -> int:
    """
    Grid units per beat for a minimum beat level, assuming quarter-note beats.

    Args:
        min_beat_level: Finest note type drawn (4 = quarter, 8 = eighth, 16 = sixteenth)

    Returns:
        Tatum units per beat (16 -> 4, 8 -> 2, 4 -> 1)
    """
    if min_beat_level not in NOTE_TYPES:
        raise ValueError(f"min_beat_level should be one of {NOTE_TYPES}, got {min_beat_level}")
    return max(1, int(round(min_beat_level / 4)))
