"""Input layer - Live and recorded event sources.

- Beat tracker interface and thresholds
- Recorded performances (JSON, MIDI, built-in preset)
"""

from .tracker import BeatTracker, BeatPrediction, BeatThresholds, ScriptedBeatTracker
from .performance import Performance, PerformedNote

__all__ = [
    "BeatTracker",
    "BeatPrediction",
    "BeatThresholds",
    "ScriptedBeatTracker",
    "Performance",
    "PerformedNote",
]
