"""Tempo tracking and missed-beat inference for live beat streams."""

import logging
from typing import Optional

import numpy as np

from ..core.constants import (
    DEBOUNCE_FLOOR_MS,
    DEFAULT_INTERVAL_MS,
    MAX_TEMPO_JUMP,
    MIN_BEAT_DURATION_MS,
    TEMPO_SMOOTHING,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -0.5 -> 0)."""
    return int(np.floor(value + 0.5))


class TempoEstimator:
    """Smoothed inter-beat interval from successive beat-group times.

    Intervals are folded into an exponential moving average. Jumps larger
    than ``max_tempo_jump`` times the current interval are left out of the
    average; :meth:`estimate_virtual_beats` accounts for them instead, as
    beats the classifier missed. Intervals under the debounce floor are
    jitter and ignored as well.
    """

    def __init__(
        self,
        default_interval_ms: float = DEFAULT_INTERVAL_MS,
        max_tempo_jump: float = MAX_TEMPO_JUMP,
        smoothing: float = TEMPO_SMOOTHING,
        debounce_floor_ms: float = DEBOUNCE_FLOOR_MS,
    ):
        """
        Initialize TempoEstimator.

        Args:
            default_interval_ms: Starting beat interval in ms (500 = 120 BPM)
            max_tempo_jump: Interval ratio treated as a gap with missed beats
            smoothing: Weight of each accepted interval in the average
            debounce_floor_ms: Shortest interval accepted as a real beat
        """
        self.default_interval_ms = default_interval_ms
        self.max_tempo_jump = max_tempo_jump
        self.smoothing = smoothing
        self.debounce_floor_ms = debounce_floor_ms

        self.smoothed_interval = default_interval_ms
        self.last_beat_time: Optional[float] = None

    @property
    def bpm(self) -> float:
        """Current tempo in beats per minute."""
        return 60000.0 / max(self.smoothed_interval, MIN_BEAT_DURATION_MS)

    def update(self, beat_time: float) -> bool:
        """
        Fold the interval ending at ``beat_time`` into the tempo.

        The very first call only records the time.

        Returns:
            True if the smoothed interval changed
        """
        if self.last_beat_time is None:
            self.last_beat_time = beat_time
            return False

        observed = beat_time - self.last_beat_time

        if observed > self.smoothed_interval * self.max_tempo_jump:
            logger.debug("Interval %.1f ms treated as a gap (smoothed %.1f ms)", observed, self.smoothed_interval)
            return False
        if observed < self.debounce_floor_ms:
            return False

        self.smoothed_interval = (
            self.smoothed_interval * (1.0 - self.smoothing) + observed * self.smoothing
        )
        return True

    def estimate_virtual_beats(self, beat_time: float) -> int:
        """
        Count beats that went undetected between the last beat and ``beat_time``.

        Assumes the tempo held steady across the gap.
        """
        if self.last_beat_time is None:
            return 0

        observed = beat_time - self.last_beat_time
        expected = max(self.smoothed_interval, MIN_BEAT_DURATION_MS)

        if observed < expected * self.max_tempo_jump:
            return 0

        return max(0, round_half_up(observed / expected) - 1)

    def commit(self, beat_time: float) -> None:
        """Record ``beat_time`` as the most recently processed beat."""
        self.last_beat_time = beat_time

    def reset(self) -> None:
        self.smoothed_interval = self.default_interval_ms
        self.last_beat_time = None
