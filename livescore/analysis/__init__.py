"""Analysis layer - Beat stream analysis.

This layer turns raw beat detections into timing structure:
- Beat grouping (one perceptual beat per cluster of detections)
- Tempo smoothing
- Missed-beat inference
"""

from .beats import BeatGrouper
from .tempo import TempoEstimator, round_half_up

__all__ = [
    "BeatGrouper",
    "TempoEstimator",
    "round_half_up",
]
