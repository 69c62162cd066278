"""Hand separation - Online two-cluster pitch classifier.

Each incoming pitch is assigned to the nearer of two running centroids
(left and right hand), and that centroid drifts toward the pitch. The
two centroids never cross. Extreme pitches bypass the clustering.
"""

import logging
from typing import Optional

from ..core import HandConfig, Stave

logger = logging.getLogger(__name__)


class HandSeparator:
    """Assign note pitches to the upper or lower stave as they arrive."""

    def __init__(self, config: Optional[HandConfig] = None):
        self.config = config if config is not None else HandConfig()
        self._left = float(self.config.left_initial)
        self._right = float(self.config.right_initial)

    @property
    def left_centroid(self) -> float:
        return self._left

    @property
    def right_centroid(self) -> float:
        return self._right

    def classify(self, pitch: int) -> Stave:
        """
        Classify a pitch and update the chosen hand's centroid.

        Args:
            pitch: MIDI pitch

        Returns:
            Stave.UPPER for the right hand, Stave.LOWER for the left hand
        """
        cfg = self.config

        if pitch > cfg.upper_floor:
            return Stave.UPPER
        if pitch < cfg.lower_ceiling:
            return Stave.LOWER

        dist_left = abs(pitch - self._left)
        dist_right = abs(pitch - self._right)

        if dist_left <= dist_right:
            self._left = self._left * (1.0 - cfg.alpha) + pitch * cfg.alpha
            # Left stays at least one semitone under right
            if self._left > self._right - 1.0:
                self._left = self._right - 1.0
            logger.debug("Left hand centroid %.2f", self._left)
            return Stave.LOWER

        self._right = self._right * (1.0 - cfg.alpha) + pitch * cfg.alpha
        if self._right < self._left + 1.0:
            self._right = self._left + 1.0
        logger.debug("Right hand centroid %.2f", self._right)
        return Stave.UPPER

    def reset(self) -> None:
        self._left = float(self.config.left_initial)
        self._right = float(self.config.right_initial)
