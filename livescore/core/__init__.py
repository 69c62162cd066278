"""Core types, constants and configuration for livescore."""

from .events import (
    Stave,
    ColorHint,
    NoteEvent,
    BeatDetection,
    BeatGroup,
    NotationEvent,
    is_valid_pitch,
    is_valid_timestamp,
)
from .config import ScorifyConfig, HandConfig, compute_tatum
from .constants import (
    PITCH_NAMES,
    DEFAULT_TEMPO,
    DEFAULT_TATUM,
    DEFAULT_BEATS_PER_MEASURE,
)

__all__ = [
    "Stave",
    "ColorHint",
    "NoteEvent",
    "BeatDetection",
    "BeatGroup",
    "NotationEvent",
    "is_valid_pitch",
    "is_valid_timestamp",
    "ScorifyConfig",
    "HandConfig",
    "compute_tatum",
    "PITCH_NAMES",
    "DEFAULT_TEMPO",
    "DEFAULT_TATUM",
    "DEFAULT_BEATS_PER_MEASURE",
]
